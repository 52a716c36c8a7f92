"""
Base types for explosion patterns.

A pattern is a pure function

    (origin, inherited_velocity, BurstParams, rng) -> List[ParticleSpec]

It never touches the simulation state; `detonate` turns the specs into
live particles and enforces the particle cap.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from ..core.config import FireworkConfig, MAX_PARTICLES_PER_FIREWORK
from ..core.palette import Color, WHITE, drift_color, pick_color
from ..core.particle import ParticleRole, RolePayload
from ..core.vector import Vec2


# Primary bursts: speed scale = explosion_size / 10
PRIMARY_FORCE_DIVISOR = 10.0

# Secondary (mini-shell) bursts are smaller and weaker
SECONDARY_COUNT_SCALE = 0.4
SECONDARY_FORCE_DIVISOR = 18.0
SECONDARY_LIFESPAN_SCALE = 0.8


@dataclass
class ParticleSpec:
    """Everything needed to create one particle, minus the birth time"""
    position: Vec2
    velocity: Vec2
    color: Color = WHITE
    size: float = 3.0
    lifespan: float = 1.5
    role: ParticleRole = ParticleRole.EXPLOSION
    fade_rate: float = 1.0
    alpha: float = 255.0
    payload: Optional[RolePayload] = None


@dataclass
class BurstParams:
    """
    Per-burst inputs derived from the live config.

    Attributes:
        count: Target number of particles (patterns may emit a fraction)
        base_force: Reference speed in px/s
        palette: Colours particles sample from
        color_drift: Chance a particle drifts toward a random vivid hue
        lifespan_scale: Multiplier applied to every sampled lifespan
    """
    count: int
    base_force: float
    palette: List[Color] = field(default_factory=list)
    color_drift: float = 0.0
    lifespan_scale: float = 1.0

    @classmethod
    def primary(cls, config: FireworkConfig, palette: Sequence[Color]) -> 'BurstParams':
        return cls(
            count=min(int(config.particle_count), MAX_PARTICLES_PER_FIREWORK),
            base_force=config.explosion_size / PRIMARY_FORCE_DIVISOR,
            palette=list(palette),
            color_drift=config.color_drift,
        )

    @classmethod
    def secondary(cls, config: FireworkConfig, palette: Sequence[Color]) -> 'BurstParams':
        count = int(config.particle_count * SECONDARY_COUNT_SCALE)
        return cls(
            count=min(max(1, count), MAX_PARTICLES_PER_FIREWORK),
            base_force=config.explosion_size / SECONDARY_FORCE_DIVISOR,
            palette=list(palette),
            color_drift=config.color_drift,
            lifespan_scale=SECONDARY_LIFESPAN_SCALE,
        )

    def pick_color(self, rng: np.random.Generator) -> Color:
        return drift_color(pick_color(self.palette, rng), rng, self.color_drift)

    def lifespan(self, rng: np.random.Generator, lo: float, hi: float) -> float:
        return rng.uniform(lo, hi) * self.lifespan_scale

    def speed(self, rng: np.random.Generator, lo: float, hi: float) -> float:
        return rng.uniform(lo, hi) * self.base_force

    def scaled_count(self, fraction: float) -> int:
        return int(self.count * fraction)


Pattern = Callable[[Vec2, Vec2, BurstParams, np.random.Generator], List[ParticleSpec]]


def speed_bounds(params: BurstParams, lo: float, hi: float) -> Tuple[float, float]:
    """Absolute speed range (relative to the inherited velocity)"""
    return lo * params.base_force, hi * params.base_force
