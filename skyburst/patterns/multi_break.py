"""
Multi-break burst - a handful of mini-shells, each of which detonates a
second, smaller burst of its own after a short delay.
"""

import numpy as np
from typing import List

from ..core.config import SECONDARY_TYPES
from ..core.palette import random_palette
from ..core.particle import MiniShellState, ParticleRole
from ..core.vector import Vec2
from .base import BurstParams, ParticleSpec


SHELLS = (2, 4)                 # inclusive
SPEED = (0.6, 1.0)
INHERIT_BOOST = 1.5
DELAY = (0.4, 0.9)
COLOR = (255, 220, 150)
ALPHA = 200


def multi_break(origin: Vec2, inherited: Vec2, params: BurstParams, rng: np.random.Generator) -> List[ParticleSpec]:
    specs = []
    for _ in range(int(rng.integers(SHELLS[0], SHELLS[1] + 1))):
        delay = rng.uniform(*DELAY)
        sub_type = SECONDARY_TYPES[int(rng.integers(len(SECONDARY_TYPES)))]
        specs.append(ParticleSpec(
            position=origin.copy(),
            velocity=Vec2.random_unit(rng) * params.speed(rng, *SPEED) + inherited * INHERIT_BOOST,
            color=COLOR,
            alpha=ALPHA,
            size=3.0,
            lifespan=delay,
            role=ParticleRole.MINI_SHELL,
            payload=MiniShellState(delay=delay, sub_type=sub_type.value, palette=random_palette(rng)),
        ))
    return specs
