"""
Horsetail burst - every particle confined to a narrow upward cone that
gravity then bends over into a falling plume.
"""

import numpy as np
from typing import List

from ..core.vector import Vec2
from .base import BurstParams, ParticleSpec


AXIS_TILT = np.pi / 4           # cone axis leans up to this far off vertical
CONE_HALF_ANGLE = 0.3
SPEED = (0.5, 1.0)
LIFESPAN = (2.0, 3.0)
FADE_RATE = 0.6


def horsetail(origin: Vec2, inherited: Vec2, params: BurstParams, rng: np.random.Generator) -> List[ParticleSpec]:
    # Screen y grows downward, so -pi/2 points up
    axis = -np.pi / 2 + rng.uniform(-AXIS_TILT, AXIS_TILT)

    specs = []
    for _ in range(max(0, params.count)):
        angle = axis + rng.uniform(-CONE_HALF_ANGLE, CONE_HALF_ANGLE)
        specs.append(ParticleSpec(
            position=origin.copy(),
            velocity=Vec2.from_angle(angle, params.speed(rng, *SPEED)) + inherited,
            color=params.pick_color(rng),
            size=3.0,
            lifespan=params.lifespan(rng, *LIFESPAN),
            fade_rate=FADE_RATE,
        ))
    return specs
