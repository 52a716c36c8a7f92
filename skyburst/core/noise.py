"""
Perlin Noise

Smooth pseudo-random fields for wind turbulence and fluid swirl.

Both samplers accept scalars or numpy arrays of equal shape, so the frame
loop can sample the wind for every particle in a single call.
"""

import numpy as np
from typing import Optional, Union

ArrayLike = Union[float, np.ndarray]


# Ken Perlin's reference permutation table
_PERM = np.array([
    151,160,137,91,90,15,131,13,201,95,96,53,194,233,7,225,140,36,103,30,69,142,
    8,99,37,240,21,10,23,190,6,148,247,120,234,75,0,26,197,62,94,252,219,203,117,
    35,11,32,57,177,33,88,237,149,56,87,174,20,125,136,171,168,68,175,74,165,71,
    134,139,48,27,166,77,146,158,231,83,111,229,122,60,211,133,230,220,105,92,41,
    55,46,245,40,244,102,143,54,65,25,63,161,1,216,80,73,209,76,132,187,208,89,
    18,169,200,196,135,130,116,188,159,86,164,100,109,198,173,186,3,64,52,217,226,
    250,124,123,5,202,38,147,118,126,255,82,85,212,207,206,59,227,47,16,58,17,182,
    189,28,42,223,183,170,213,119,248,152,2,44,154,163,70,221,153,101,155,167,43,
    172,9,129,22,39,253,19,98,108,110,79,113,224,232,178,185,112,104,218,246,97,
    228,251,34,242,193,238,210,144,12,191,179,162,241,81,51,145,235,249,14,239,
    107,49,192,214,31,181,199,106,157,184,84,204,176,115,121,50,45,127,4,150,254,
    138,236,205,93,222,114,67,29,24,72,243,141,128,195,78,66,215,61,156,180
], dtype=np.int32)


def _fade(t: np.ndarray) -> np.ndarray:
    """Perlin fade function: 6t^5 - 15t^4 + 10t^3"""
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def _grad2d(hash_val: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """2D gradient: one of the four diagonals"""
    h = hash_val & 3
    gx = np.where((h & 1) == 0, x, -x)
    gy = np.where((h & 2) == 0, y, -y)
    return gx + gy


def _grad3d(hash_val: np.ndarray, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
    """3D gradient: one of the twelve cube edge directions"""
    h = hash_val & 15
    u = np.where(h < 8, x, y)
    v = np.where(h < 4, y, np.where((h == 12) | (h == 14), x, z))
    return np.where((h & 1) == 0, u, -u) + np.where((h & 2) == 0, v, -v)


class NoiseField:
    """
    Seeded Perlin noise sampler.

    Without a seed the classic permutation is used; with a seed the table is
    shuffled, giving a different but repeatable field.

    Example:
        field = NoiseField(seed=7)
        field.noise2(0.5, 1.25)            # float in about [-1, 1]
        field.noise3(xs, ys, 0.3)          # array, same shape as xs
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        if seed is None:
            perm = _PERM.copy()
        else:
            perm = np.arange(256, dtype=np.int32)
            np.random.default_rng(seed).shuffle(perm)
        self._perm = np.concatenate([perm, perm])

    def noise2(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        """2D Perlin noise, roughly in [-1, 1]"""
        scalar = np.isscalar(x) and np.isscalar(y)
        x, y = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))
        p = self._perm

        x0 = np.floor(x)
        y0 = np.floor(y)
        xi = x0.astype(np.int64) & 255
        yi = y0.astype(np.int64) & 255
        xf = x - x0
        yf = y - y0
        u = _fade(xf)
        v = _fade(yf)

        aa = p[p[xi] + yi]
        ab = p[p[xi] + yi + 1]
        ba = p[p[xi + 1] + yi]
        bb = p[p[xi + 1] + yi + 1]

        x1 = _lerp(_grad2d(aa, xf, yf), _grad2d(ba, xf - 1, yf), u)
        x2 = _lerp(_grad2d(ab, xf, yf - 1), _grad2d(bb, xf - 1, yf - 1), u)
        result = _lerp(x1, x2, v)
        return float(result) if scalar else result

    def noise3(self, x: ArrayLike, y: ArrayLike, z: ArrayLike) -> ArrayLike:
        """3D Perlin noise, roughly in [-1, 1]"""
        scalar = np.isscalar(x) and np.isscalar(y) and np.isscalar(z)
        x, y, z = np.broadcast_arrays(
            np.asarray(x, dtype=np.float64),
            np.asarray(y, dtype=np.float64),
            np.asarray(z, dtype=np.float64),
        )
        p = self._perm

        x0, y0, z0 = np.floor(x), np.floor(y), np.floor(z)
        xi = x0.astype(np.int64) & 255
        yi = y0.astype(np.int64) & 255
        zi = z0.astype(np.int64) & 255
        xf, yf, zf = x - x0, y - y0, z - z0
        u, v, w = _fade(xf), _fade(yf), _fade(zf)

        a = p[xi] + yi
        aa = p[a] + zi
        ab = p[a + 1] + zi
        b = p[xi + 1] + yi
        ba = p[b] + zi
        bb = p[b + 1] + zi

        near = _lerp(
            _lerp(_grad3d(p[aa], xf, yf, zf), _grad3d(p[ba], xf - 1, yf, zf), u),
            _lerp(_grad3d(p[ab], xf, yf - 1, zf), _grad3d(p[bb], xf - 1, yf - 1, zf), u),
            v,
        )
        far = _lerp(
            _lerp(_grad3d(p[aa + 1], xf, yf, zf - 1), _grad3d(p[ba + 1], xf - 1, yf, zf - 1), u),
            _lerp(_grad3d(p[ab + 1], xf, yf - 1, zf - 1), _grad3d(p[bb + 1], xf - 1, yf - 1, zf - 1), u),
            v,
        )
        result = _lerp(near, far, w)
        return float(result) if scalar else result
