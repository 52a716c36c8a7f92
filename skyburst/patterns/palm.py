"""
Palm burst - a few thick branches fanning out from the break point.
"""

import numpy as np
from typing import List

from ..core.vector import Vec2
from .base import BurstParams, ParticleSpec


BRANCHES = (4, 6)               # inclusive
BRANCH_JITTER = 0.15            # radians either side of the even spacing
BRANCH_SPEED = (1.2, 1.6)
SPREAD = 0.35                   # perturbation magnitude, x base
LIFESPAN = (1.5, 2.5)
SIZE = (3.0, 4.5)


def palm(origin: Vec2, inherited: Vec2, params: BurstParams, rng: np.random.Generator) -> List[ParticleSpec]:
    branches = int(rng.integers(BRANCHES[0], BRANCHES[1] + 1))
    per_branch = params.count // branches
    spread = params.base_force * SPREAD

    specs = []
    for i in range(branches):
        angle = i / branches * 2 * np.pi + rng.uniform(-BRANCH_JITTER, BRANCH_JITTER)
        branch = Vec2.from_angle(angle, params.speed(rng, *BRANCH_SPEED))
        for _ in range(per_branch):
            velocity = branch + Vec2.random_unit(rng) * spread + inherited
            specs.append(ParticleSpec(
                position=origin.copy(),
                velocity=velocity,
                color=params.pick_color(rng),
                size=rng.uniform(*SIZE),
                lifespan=params.lifespan(rng, *LIFESPAN),
            ))
    return specs
