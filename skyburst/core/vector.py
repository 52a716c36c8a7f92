"""
2D Vector Math

Immutable-style 2D vector used for particle position, velocity and
acceleration. Every operation returns a new vector, so a particle can hand
its position to a trail without copying.
"""

import numpy as np
from dataclasses import dataclass


@dataclass
class Vec2:
    """2D vector with physics operations"""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> 'Vec2':
        return Vec2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> 'Vec2':
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> 'Vec2':
        return Vec2(self.x / scalar, self.y / scalar) if scalar != 0 else Vec2()

    def __neg__(self) -> 'Vec2':
        return Vec2(-self.x, -self.y)

    @property
    def length(self) -> float:
        return float(np.sqrt(self.x * self.x + self.y * self.y))

    @property
    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def normalized(self) -> 'Vec2':
        l = self.length
        return Vec2(self.x / l, self.y / l) if l > 1e-10 else Vec2()

    def with_length(self, length: float) -> 'Vec2':
        """Same direction, new magnitude (negative flips direction)"""
        return self.normalized() * length

    def dot(self, other: 'Vec2') -> float:
        return self.x * other.x + self.y * other.y

    def rotate(self, angle: float) -> 'Vec2':
        """Rotate by angle (radians)"""
        c, s = np.cos(angle), np.sin(angle)
        return Vec2(self.x * c - self.y * s, self.x * s + self.y * c)

    def lerp(self, other: 'Vec2', t: float) -> 'Vec2':
        return Vec2(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t
        )

    def copy(self) -> 'Vec2':
        return Vec2(self.x, self.y)

    def is_finite(self) -> bool:
        """True when both components are real, finite numbers"""
        try:
            return bool(np.isfinite(self.x) and np.isfinite(self.y))
        except TypeError:
            return False

    @staticmethod
    def from_angle(angle: float, length: float = 1.0) -> 'Vec2':
        return Vec2(float(np.cos(angle) * length), float(np.sin(angle) * length))

    @staticmethod
    def random_unit(rng: np.random.Generator) -> 'Vec2':
        """Unit vector pointing in a uniformly random direction"""
        return Vec2.from_angle(rng.random() * 2 * np.pi)

    @staticmethod
    def random_on_sphere(rng: np.random.Generator) -> 'Vec2':
        """
        Uniform point on the unit sphere, projected onto the screen plane.

        The depth component is dropped, so the length lies in [0, 1].
        """
        z = rng.uniform(-1.0, 1.0)
        angle = rng.random() * 2 * np.pi
        r = np.sqrt(1.0 - z * z)
        return Vec2(float(r * np.cos(angle)), float(r * np.sin(angle)))
