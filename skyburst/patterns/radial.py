"""
Radial bursts - particles thrown evenly in every direction.

peony          classic round break
chrysanthemum  a peony with slightly more push and longer tails
willow         slow and long-lived; gravity pulls it into a droop
sphere         random 3D directions flattened onto the screen
"""

import numpy as np
from typing import List, Tuple

from ..core.vector import Vec2
from .base import BurstParams, ParticleSpec


PEONY_SPEED = (0.8, 1.2)
PEONY_LIFESPAN = (1.0, 1.8)

CHRYSANTHEMUM_SPEED = (0.8 * 1.05, 1.2 * 1.05)
CHRYSANTHEMUM_LIFESPAN = (1.0 * 1.1, 1.8 * 1.1)

WILLOW_SPEED = (0.4, 0.8)
WILLOW_LIFESPAN = (3.0, 5.0)
WILLOW_FADE_RATE = 0.4

SPHERE_SPEED = (0.7, 1.3)
SPHERE_LIFESPAN = (1.2, 2.2)


def radial_burst(
    origin: Vec2,
    inherited: Vec2,
    params: BurstParams,
    rng: np.random.Generator,
    speed: Tuple[float, float],
    lifespan: Tuple[float, float],
    size: float = 3.0,
    fade_rate: float = 1.0,
) -> List[ParticleSpec]:
    """Uniform angle over the full circle, speed drawn from `speed` x base"""
    specs = []
    for _ in range(max(0, params.count)):
        direction = Vec2.random_unit(rng)
        specs.append(ParticleSpec(
            position=origin.copy(),
            velocity=direction * params.speed(rng, *speed) + inherited,
            color=params.pick_color(rng),
            size=size,
            lifespan=params.lifespan(rng, *lifespan),
            fade_rate=fade_rate,
        ))
    return specs


def peony(origin: Vec2, inherited: Vec2, params: BurstParams, rng: np.random.Generator) -> List[ParticleSpec]:
    return radial_burst(origin, inherited, params, rng, PEONY_SPEED, PEONY_LIFESPAN)


def chrysanthemum(origin: Vec2, inherited: Vec2, params: BurstParams, rng: np.random.Generator) -> List[ParticleSpec]:
    return radial_burst(origin, inherited, params, rng, CHRYSANTHEMUM_SPEED, CHRYSANTHEMUM_LIFESPAN)


def willow(origin: Vec2, inherited: Vec2, params: BurstParams, rng: np.random.Generator) -> List[ParticleSpec]:
    return radial_burst(
        origin, inherited, params, rng,
        WILLOW_SPEED, WILLOW_LIFESPAN,
        size=2.5,
        fade_rate=WILLOW_FADE_RATE,
    )


def sphere(origin: Vec2, inherited: Vec2, params: BurstParams, rng: np.random.Generator) -> List[ParticleSpec]:
    """
    Generic fallback burst.

    Directions are uniform on the unit sphere with depth dropped, so
    particles thrown toward or away from the viewer cluster near the centre.
    """
    specs = []
    for _ in range(max(0, params.count)):
        direction = Vec2.random_on_sphere(rng)
        specs.append(ParticleSpec(
            position=origin.copy(),
            velocity=direction * params.speed(rng, *SPHERE_SPEED) + inherited,
            color=params.pick_color(rng),
            size=3.0,
            lifespan=params.lifespan(rng, *SPHERE_LIFESPAN),
        ))
    return specs
