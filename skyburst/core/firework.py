"""
Firework Shell

An ascending shell particle that detonates once at its apex. After the
burst the firework is done; the spawned particles live on in the shared
simulation state.
"""

import logging
from enum import Enum, auto
from typing import List, Optional, Sequence, Tuple, Union

from .config import FireworkConfig, FireworkType
from .palette import Color
from .particle import Particle, ParticleRole
from .state import SimulationState
from .vector import Vec2

logger = logging.getLogger(__name__)


SHELL_COLOR = (255, 255, 0)
SHELL_ALPHA = 200
SHELL_SIZE = 4.0
SHELL_LIFESPAN = 10.0           # upper bound; shells normally burst well before
SHELL_FADE = 0.1                # seconds the spent shell lingers after bursting

# Detonate once the shell is this close to stalling (px/s, negative is up)
APEX_VELOCITY = -5.0

# Fraction of the shell's velocity every burst particle inherits
BURST_INHERIT = 0.1


class FireworkState(Enum):
    ASCENDING = auto()
    EXPLODED = auto()


class Firework:
    """
    One shell on its way up.

    The shell is an ordinary particle: the frame loop applies gravity,
    wind and drag to it along with everything else. The firework only
    watches for the apex and runs the explosion.

    Example:
        fw = Firework(Vec2(500, 800), Vec2(0, -420), FireworkType.PEONY,
                      config, explosion_altitude=300, palette=get_palette('fire'))
        state.spawn(fw.shell, config.max_total_particles)
        state.fireworks.append(fw)
    """

    def __init__(
        self,
        origin: Vec2,
        velocity: Vec2,
        firework_type: Union[FireworkType, str],
        config: FireworkConfig,
        explosion_altitude: float,
        palette: Sequence[Color],
        born: float = 0.0,
    ):
        self.firework_type = firework_type
        self.config = config
        self.explosion_altitude = explosion_altitude
        self.palette = list(palette)
        self.state = FireworkState.ASCENDING
        self.detonation: Optional[Tuple[Vec2, Vec2]] = None

        self.shell = Particle(
            position=origin.copy(),
            velocity=velocity.copy(),
            color=SHELL_COLOR,
            alpha=SHELL_ALPHA,
            size=SHELL_SIZE,
            role=ParticleRole.SHELL,
            lifespan=SHELL_LIFESPAN,
            born=born,
        )

    @property
    def done(self) -> bool:
        return self.state is FireworkState.EXPLODED

    @property
    def type_name(self) -> str:
        if isinstance(self.firework_type, FireworkType):
            return self.firework_type.value
        return str(self.firework_type)

    def at_apex(self) -> bool:
        """Either trigger is enough: the shell has stalled or reached its altitude"""
        return (
            self.shell.velocity.y >= APEX_VELOCITY
            or self.shell.position.y <= self.explosion_altitude
        )

    def update(self, state: SimulationState) -> List[Particle]:
        """Check the shell and detonate at the apex. Returns spawned particles."""
        if self.done:
            return []

        if self.shell.is_done or not self.shell.has_valid_state():
            logger.warning("%s shell retired before detonating", self.type_name)
            self.state = FireworkState.EXPLODED
            return []

        if self.at_apex():
            return self.explode(state)
        return []

    def explode(self, state: SimulationState) -> List[Particle]:
        """Detonate the shell. Only the first call has any effect."""
        if self.done:
            logger.warning("%s firework already exploded", self.type_name)
            return []
        self.state = FireworkState.EXPLODED

        # Deferred import: patterns depend on the core package
        from ..patterns import BurstParams, detonate

        position = self.shell.position.copy()
        inherited = self.shell.velocity * BURST_INHERIT
        self.detonation = (position, self.shell.velocity.copy())

        params = BurstParams.primary(self.config, self.palette)
        spawned = detonate(state, self.config, self.firework_type, position, inherited, params)
        self.shell.set_fading(state.time, SHELL_FADE)

        logger.debug(
            "%s burst at (%.0f, %.0f): %d particles",
            self.type_name, position.x, position.y, len(spawned),
        )
        return spawned
