"""
Strobe burst - white-ish stars that blink on and off as they fall.
"""

import numpy as np
from typing import List

from ..core.palette import grey
from ..core.particle import ParticleRole, StrobeState
from ..core.vector import Vec2
from .base import BurstParams, ParticleSpec


COUNT_FRACTION = 0.7
SPEED = (0.7, 1.1)
GREY_LEVEL = (200, 255)
RATE = (5.0, 15.0)              # toggles per second
LIFESPAN = (1.5, 3.0)


def strobe(origin: Vec2, inherited: Vec2, params: BurstParams, rng: np.random.Generator) -> List[ParticleSpec]:
    specs = []
    for _ in range(params.scaled_count(COUNT_FRACTION)):
        specs.append(ParticleSpec(
            position=origin.copy(),
            velocity=Vec2.random_unit(rng) * params.speed(rng, *SPEED) + inherited,
            color=grey(rng.uniform(*GREY_LEVEL)),
            size=2.0,
            lifespan=params.lifespan(rng, *LIFESPAN),
            role=ParticleRole.STROBE,
            payload=StrobeState(rate=rng.uniform(*RATE)),
        ))
    return specs
