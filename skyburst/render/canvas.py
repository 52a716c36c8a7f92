"""
Canvas Renderer

Headless numpy renderer. Keeps a float RGB buffer between frames and
darkens it a little each frame instead of clearing it, so moving particles
leave glowing streaks. Particles are splatted additively.

Per style:
- CLASSIC: soft disc; shells, mini-shells and crackles get a white-hot core
- FLUID: larger, dimmer soft disc
- QUANTUM: hard square

Bloom is applied to the output only; the persistent buffer never sees it.
"""

import logging
import numpy as np
from PIL import Image, ImageFilter
from typing import Dict, List, Tuple

from ..core.config import FireworkConfig, ParticleStyle
from ..core.particle import Particle, ParticleRole
from ..core.state import SimulationState

logger = logging.getLogger(__name__)


TRAIL_ALPHA = 0.6
FLUID_ALPHA = 0.8
FLUID_RADIUS_SCALE = 0.75
CORE_ALPHA = 0.8
BLOOM_RADIUS = 6

_CORE_ROLES = (ParticleRole.SHELL, ParticleRole.MINI_SHELL, ParticleRole.CRACKLE)

# Kernel shapes
SOFT = 'soft'
SQUARE = 'square'


def make_kernel(radius: int, shape: str = SOFT) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Pixel offsets and weights for a splat of the given radius.

    Returns:
        (dy, dx, weight) flat arrays; soft kernels fall off linearly with
        distance, square kernels are flat.
    """
    span = np.arange(-radius, radius + 1)
    dy, dx = np.meshgrid(span, span, indexing='ij')
    dy, dx = dy.ravel(), dx.ravel()
    if shape == SQUARE:
        weight = np.ones(dy.shape, dtype=np.float32)
    else:
        dist = np.sqrt(dx * dx + dy * dy)
        weight = np.maximum(0.0, 1.0 - dist / (radius + 0.5)).astype(np.float32)
    keep = weight > 0
    return dy[keep], dx[keep], weight[keep]


class _SplatBatch:
    """Accumulates splats, then draws them bucketed by kernel"""

    def __init__(self):
        self.xs: List[float] = []
        self.ys: List[float] = []
        self.colors: List[Tuple[int, int, int]] = []
        self.alphas: List[float] = []
        self.radii: List[int] = []

    def add(self, x: float, y: float, color, alpha: float, radius: int):
        self.xs.append(x)
        self.ys.append(y)
        self.colors.append(color)
        self.alphas.append(alpha)
        self.radii.append(radius)

    def __len__(self) -> int:
        return len(self.xs)


class CanvasRenderer:
    """
    Example:
        renderer = CanvasRenderer(1280, 720)
        frame = renderer.render(state, config)   # uint8 (720, 1280, 3)
    """

    def __init__(self, width: int, height: int):
        self.buffer = np.zeros((0, 0, 3), dtype=np.float32)
        self._kernels: Dict[Tuple[int, str], Tuple[np.ndarray, np.ndarray, np.ndarray]] = {}
        self.resize(width, height)

    @property
    def size(self) -> Tuple[int, int]:
        return self.buffer.shape[1], self.buffer.shape[0]

    def resize(self, width: int, height: int):
        """Reallocate the buffer (no-op when the size is unchanged)"""
        width, height = max(1, int(width)), max(1, int(height))
        if (width, height) == self.size:
            return
        self.buffer = np.zeros((height, width, 3), dtype=np.float32)

    def clear(self):
        self.buffer.fill(0.0)

    def _kernel(self, radius: int, shape: str):
        key = (radius, shape)
        if key not in self._kernels:
            self._kernels[key] = make_kernel(radius, shape)
        return self._kernels[key]

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def render(self, state: SimulationState, config: FireworkConfig) -> np.ndarray:
        """Draw one frame and return it as uint8 RGB"""
        self.resize(state.width, state.height)
        self.buffer *= 1.0 - config.background_opacity / 255.0

        trails = _SplatBatch()
        soft = _SplatBatch()
        square = _SplatBatch()
        for particle in state.particles:
            if not particle.visible:
                continue
            self._collect(particle, trails, soft, square)

        self._splat(trails, SOFT)
        self._splat(soft, SOFT)
        self._splat(square, SQUARE)

        out = self.buffer
        if config.bloom_effect and config.bloom_intensity > 0:
            out = out + self._bloom(out) * (config.bloom_intensity / 100.0)
        return np.clip(out, 0, 255).astype(np.uint8)

    def _collect(self, p: Particle, trails: _SplatBatch, soft: _SplatBatch, square: _SplatBatch):
        if not p.position.is_finite():
            logger.debug("Skipping particle with non-finite position")
            return

        count = len(p.trail)
        for i, point in enumerate(p.trail):
            trails.add(point.x, point.y, p.color, p.alpha * TRAIL_ALPHA * (i + 1) / count, 0)

        x, y = p.position.x, p.position.y
        if p.style is ParticleStyle.QUANTUM:
            square.add(x, y, p.color, p.alpha, max(0, int(round(p.size / 2))))
        elif p.style is ParticleStyle.FLUID:
            soft.add(x, y, p.color, p.alpha * FLUID_ALPHA, max(1, int(round(p.size * FLUID_RADIUS_SCALE))))
        else:
            radius = max(1, int(round(p.size / 2)))
            soft.add(x, y, p.color, p.alpha, radius)
            if p.role in _CORE_ROLES:
                soft.add(x, y, (255, 255, 255), p.alpha * CORE_ALPHA, radius // 2)

    def _splat(self, batch: _SplatBatch, shape: str):
        if not len(batch):
            return
        height, width = self.buffer.shape[:2]
        xs = np.rint(np.asarray(batch.xs)).astype(np.int64)
        ys = np.rint(np.asarray(batch.ys)).astype(np.int64)
        radii = np.asarray(batch.radii, dtype=np.int64)
        # Pre-multiplied colour contribution per splat
        contrib = np.asarray(batch.colors, dtype=np.float32) * (np.asarray(batch.alphas, dtype=np.float32) / 255.0)[:, None]

        for radius in np.unique(radii):
            sel = radii == radius
            dy, dx, weight = self._kernel(int(radius), shape)
            px = xs[sel, None] + dx[None, :]
            py = ys[sel, None] + dy[None, :]
            inside = (px >= 0) & (px < width) & (py >= 0) & (py < height)
            if not inside.any():
                continue
            values = contrib[sel][:, None, :] * weight[None, :, None]
            np.add.at(self.buffer, (py[inside], px[inside]), values[inside])

    def _bloom(self, image: np.ndarray) -> np.ndarray:
        source = Image.fromarray(np.clip(image, 0, 255).astype(np.uint8), 'RGB')
        blurred = source.filter(ImageFilter.GaussianBlur(BLOOM_RADIUS))
        return np.asarray(blurred, dtype=np.float32)
