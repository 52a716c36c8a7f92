"""
Explosion Patterns - rules that turn one detonation into a burst of particles
"""

import logging
from typing import Dict, List, Union

from ..core.config import FireworkConfig, FireworkType
from ..core.particle import Particle
from ..core.state import SimulationState
from ..core.vector import Vec2
from .base import BurstParams, ParticleSpec, Pattern
from .radial import peony, chrysanthemum, willow, sphere
from .palm import palm
from .horsetail import horsetail
from .strobe import strobe
from .crackling import crackling
from .multi_break import multi_break

logger = logging.getLogger(__name__)


# Pattern registry, one generator per concrete type
PATTERNS: Dict[FireworkType, Pattern] = {
    FireworkType.PEONY: peony,
    FireworkType.CHRYSANTHEMUM: chrysanthemum,
    FireworkType.PALM: palm,
    FireworkType.HORSETAIL: horsetail,
    FireworkType.WILLOW: willow,
    FireworkType.STROBE: strobe,
    FireworkType.CRACKLING: crackling,
    FireworkType.MULTI_BREAK: multi_break,
}

# Used for unknown tags and for RANDOM if it ever reaches a detonation
FALLBACK_PATTERN: Pattern = sphere


def get_pattern(firework_type: Union[FireworkType, str]) -> Pattern:
    """Generator for a type tag. Unknown tags get the spherical fallback."""
    resolved = FireworkType.parse(firework_type)
    if resolved is None:
        logger.warning("Unknown firework type %r, using spherical burst", firework_type)
        return FALLBACK_PATTERN
    if resolved not in PATTERNS:
        logger.debug("Unresolved %s burst, using spherical burst", resolved.value)
        return FALLBACK_PATTERN
    return PATTERNS[resolved]


def detonate(
    state: SimulationState,
    config: FireworkConfig,
    firework_type: Union[FireworkType, str],
    origin: Vec2,
    inherited: Vec2,
    params: BurstParams,
) -> List[Particle]:
    """
    Run a pattern at `origin` and add the resulting particles to `state`.

    Specs beyond the global particle cap are dropped. Returns the particles
    actually spawned.
    """
    specs = get_pattern(firework_type)(origin, inherited, params, state.rng)

    room = state.room(config.max_total_particles)
    if len(specs) > room:
        logger.debug("Particle cap reached: keeping %d of %d burst particles", room, len(specs))
        specs = specs[:room]

    style = config.style
    spawned = []
    for spec in specs:
        particle = Particle.from_spec(spec, state.time, style, state.rng)
        if not state.spawn(particle, config.max_total_particles):
            break
        spawned.append(particle)
    return spawned


__all__ = [
    'BurstParams',
    'ParticleSpec',
    'Pattern',
    'PATTERNS',
    'FALLBACK_PATTERN',
    'get_pattern',
    'detonate',
    'peony',
    'chrysanthemum',
    'palm',
    'horsetail',
    'willow',
    'strobe',
    'crackling',
    'multi_break',
    'sphere',
]
