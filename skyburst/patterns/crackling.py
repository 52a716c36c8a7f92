"""
Crackling burst - short-lived stars that keep popping tiny sparks.
"""

import numpy as np
from typing import List

from ..core.particle import CrackleState, ParticleRole
from ..core.vector import Vec2
from .base import BurstParams, ParticleSpec


COUNT_FRACTION = 0.8
SPEED = (0.6, 1.0)
RATE = (3.0, 8.0)               # crackles per second
LIFESPAN = (0.8, 1.5)


def crackling(origin: Vec2, inherited: Vec2, params: BurstParams, rng: np.random.Generator) -> List[ParticleSpec]:
    specs = []
    for _ in range(params.scaled_count(COUNT_FRACTION)):
        specs.append(ParticleSpec(
            position=origin.copy(),
            velocity=Vec2.random_unit(rng) * params.speed(rng, *SPEED) + inherited,
            color=params.pick_color(rng),
            size=2.5,
            lifespan=params.lifespan(rng, *LIFESPAN),
            role=ParticleRole.CRACKLE_SOURCE,
            payload=CrackleState(rate=rng.uniform(*RATE)),
        ))
    return specs
