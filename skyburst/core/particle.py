"""
Firework Particle

A single glowing point: physical state, appearance, a role and the role's
timers. Roles form a closed set; the three roles that need extra state carry
a payload dataclass.

Lifecycle:
- lives until `age >= lifespan`, then fades linearly to alpha 0
- alpha <= 0 is the removal signal
- a mini-shell never fades; it detonates once at `age >= delay`
"""

import logging
import numpy as np
from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import TYPE_CHECKING, Deque, List, Optional, Union

from .config import FireworkConfig, ParticleStyle
from .palette import Color, parse_color
from .utils import MathUtils
from .vector import Vec2

if TYPE_CHECKING:
    from .state import SimulationState

logger = logging.getLogger(__name__)


TRAIL_LENGTH = 15
BASE_FADE_DURATION = 0.5        # seconds at fade_rate 1.0
MIN_TRAIL_SPEED_SQ = 0.01

# Fluid style
FLUID_VISCOSITY = 0.97          # velocity kept per 1/60 s
FLUID_SWIRL_FORCE = 5.0         # px/s^2
FLUID_NOISE_SCALE = 0.03

# Crackle sparks
CRACKLE_SPEED = (60.0, 120.0)
CRACKLE_INHERIT = 0.2
CRACKLE_LIFESPAN = (0.05, 0.15)
CRACKLE_FADE_RATE = 8.0
CRACKLE_CAP_MARGIN = 5

# Mini-shell secondary burst keeps this share of its own velocity
SECONDARY_INHERIT = 0.3


class ParticleRole(Enum):
    """What a particle does besides flying and fading"""
    SHELL = auto()
    EXPLOSION = auto()
    STROBE = auto()
    CRACKLE_SOURCE = auto()
    CRACKLE = auto()
    MINI_SHELL = auto()


# =============================================================================
# Role Payloads
# =============================================================================

@dataclass
class StrobeState:
    rate: float                         # toggles per second
    last_toggle: Optional[float] = None
    on: bool = True


@dataclass
class CrackleState:
    rate: float                         # crackles per second (mean)
    last_crackle: Optional[float] = None


@dataclass
class MiniShellState:
    delay: float                        # seconds until the secondary burst
    sub_type: str
    palette: List[Color] = field(default_factory=list)
    exploded: bool = False


RolePayload = Union[StrobeState, CrackleState, MiniShellState]

_ROLE_PAYLOADS = {
    ParticleRole.STROBE: StrobeState,
    ParticleRole.CRACKLE_SOURCE: CrackleState,
    ParticleRole.MINI_SHELL: MiniShellState,
}


def sample_swirl(state: 'SimulationState', xs, ys):
    """Fluid swirl noise at one point or at arrays of points"""
    return state.noise.noise2(np.multiply(xs, FLUID_NOISE_SCALE), np.multiply(ys, FLUID_NOISE_SCALE))


# =============================================================================
# Particle
# =============================================================================

@dataclass(eq=False)
class Particle:
    """
    Individual firework particle.

    Example:
        p = Particle(position=Vec2(100, 100), velocity=Vec2(0, -40), color=(255, 200, 80))
        p.apply_force(Vec2(0, 25))
        p.update(state, 1 / 60, config)
    """
    position: Vec2
    velocity: Vec2
    color: Color = (255, 255, 255)
    size: float = 3.0
    role: ParticleRole = ParticleRole.EXPLOSION
    lifespan: float = 2.0
    fade_rate: float = 1.0              # higher = faster fade
    alpha: float = 255.0
    payload: Optional[RolePayload] = None
    style: ParticleStyle = ParticleStyle.CLASSIC
    born: float = 0.0

    acceleration: Vec2 = field(default_factory=Vec2)
    is_fading: bool = field(default=False, init=False)
    fade_start_alpha: float = field(default=0.0, init=False)
    fade_start_time: float = field(default=0.0, init=False)
    fade_duration: float = field(default=0.0, init=False)
    viscosity: float = field(default=FLUID_VISCOSITY, init=False)
    trail: Deque[Vec2] = field(default_factory=lambda: deque(maxlen=TRAIL_LENGTH), init=False, repr=False)

    def __post_init__(self):
        expected = _ROLE_PAYLOADS.get(self.role)
        if expected is None and self.payload is not None:
            raise ValueError(f"{self.role.name} particles take no payload")
        if expected is not None and not isinstance(self.payload, expected):
            raise ValueError(f"{self.role.name} particles need a {expected.__name__} payload")

        self.color = parse_color(self.color)
        self.alpha = max(0.0, float(self.alpha))
        self.fade_start_alpha = self.alpha
        self.fade_duration = self._default_fade_duration()

        if isinstance(self.payload, StrobeState) and self.payload.last_toggle is None:
            self.payload.last_toggle = self.born
        if isinstance(self.payload, CrackleState) and self.payload.last_crackle is None:
            self.payload.last_crackle = self.born

    # -------------------------------------------------------------------------
    # Forces
    # -------------------------------------------------------------------------

    def apply_force(self, force: Vec2):
        """Accumulate a force (unit mass) into this frame's acceleration"""
        if isinstance(force, Vec2) and force.is_finite():
            self.acceleration = self.acceleration + force

    def apply_drag(self, coefficient: float):
        """Quadratic air drag: |F| = c * |v|^2, opposing velocity"""
        if coefficient <= 0 or not isinstance(self.velocity, Vec2):
            return
        speed_sq = self.velocity.length_squared
        if speed_sq > 1e-4:
            self.apply_force(self.velocity.with_length(-speed_sq * coefficient))

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def age(self, now: float) -> float:
        return now - self.born

    @property
    def is_done(self) -> bool:
        return self.alpha <= 0

    @property
    def visible(self) -> bool:
        if self.alpha <= 0:
            return False
        if isinstance(self.payload, StrobeState):
            return self.payload.on
        return True

    def has_valid_state(self) -> bool:
        return (
            isinstance(self.position, Vec2) and self.position.is_finite()
            and isinstance(self.velocity, Vec2) and self.velocity.is_finite()
            and isinstance(self.acceleration, Vec2)
        )

    def retire(self):
        self.alpha = 0.0

    def set_fading(self, now: float, duration: Optional[float] = None):
        """Begin a linear fade to zero; later calls are ignored"""
        if self.is_fading:
            return
        self.is_fading = True
        self.fade_start_time = now
        self.fade_start_alpha = self.alpha
        if duration is not None and duration > 0:
            self.fade_duration = duration
        else:
            self.fade_duration = max(0.01, self._default_fade_duration())

    def _default_fade_duration(self) -> float:
        return BASE_FADE_DURATION / max(0.1, self.fade_rate)

    def _advance_fade(self, now: float):
        progress = MathUtils.clamp((now - self.fade_start_time) / self.fade_duration, 0.0, 1.0)
        faded = MathUtils.lerp(self.fade_start_alpha, 0.0, progress)
        # Never brighten once fading
        self.alpha = max(0.0, min(self.alpha, faded))

    def update(self, state: 'SimulationState', dt: float, config: FireworkConfig, swirl: Optional[float] = None):
        """
        Advance one time step; may spawn crackles or a secondary burst.

        `swirl` is this particle's fluid noise sample, taken in bulk by the
        frame tick. Sampled here when not given.
        """
        if not self.has_valid_state():
            logger.error("Retiring particle with invalid position/velocity: %r", self)
            self.retire()
            return

        now = state.time
        age = self.age(now)

        if self.role is ParticleRole.MINI_SHELL:
            if self.payload.exploded:
                self.retire()
                return
            if age >= self.payload.delay:
                self._explode_secondary(state, config)
                return

        # Semi-implicit Euler
        self.velocity = self.velocity + self.acceleration * dt
        self.position = self.position + self.velocity * dt
        self.acceleration = Vec2()

        if self.velocity.length_squared > MIN_TRAIL_SPEED_SQ:
            self.trail.append(self.position)
        elif self.trail:
            self.trail.popleft()

        if self.is_fading:
            self._advance_fade(now)
        elif self.role is not ParticleRole.MINI_SHELL and age >= self.lifespan:
            self.set_fading(now)

        if self.role is ParticleRole.STROBE:
            self._update_strobe(now)
        elif self.role is ParticleRole.CRACKLE_SOURCE:
            self._update_crackle(state, config)

        if self.style is ParticleStyle.FLUID:
            if swirl is None:
                swirl = sample_swirl(state, self.position.x, self.position.y)
            self.apply_fluid(swirl, dt)

    # -------------------------------------------------------------------------
    # Role behaviour
    # -------------------------------------------------------------------------

    def _update_strobe(self, now: float):
        strobe = self.payload
        if self.is_fading or strobe.rate <= 0:
            return
        interval = 1.0 / strobe.rate
        if now - strobe.last_toggle >= interval:
            strobe.on = not strobe.on
            strobe.last_toggle += interval
            # Resync after a long stall instead of flickering to catch up
            if strobe.last_toggle < now - interval * 2:
                strobe.last_toggle = now

    def _update_crackle(self, state: 'SimulationState', config: FireworkConfig):
        crackle = self.payload
        if self.is_fading or crackle.rate <= 0:
            return
        interval = state.rng.uniform(0.7, 1.3) / crackle.rate
        if state.time - crackle.last_crackle < interval:
            return
        if len(state.particles) < config.max_total_particles - CRACKLE_CAP_MARGIN:
            self.spawn_crackles(state, config)
            crackle.last_crackle = state.time

    def spawn_crackles(self, state: 'SimulationState', config: FireworkConfig) -> List['Particle']:
        """Pop 1-3 tiny, very short-lived sparks off this particle"""
        rng = state.rng
        spawned = []
        for _ in range(int(rng.integers(1, 4))):
            offset = Vec2.random_unit(rng) * rng.uniform(*CRACKLE_SPEED)
            spark = Particle(
                position=self.position.copy(),
                velocity=self.velocity * CRACKLE_INHERIT + offset,
                color=(int(rng.uniform(200, 255)), int(rng.uniform(180, 255)), int(rng.uniform(150, 220))),
                size=rng.uniform(1.0, 2.5),
                role=ParticleRole.CRACKLE,
                lifespan=rng.uniform(*CRACKLE_LIFESPAN),
                fade_rate=CRACKLE_FADE_RATE,
                style=self.style,
                born=state.time,
            )
            if spark.style is ParticleStyle.FLUID:
                spark.enable_fluid(rng)
            if not state.spawn(spark, config.max_total_particles):
                break
            spawned.append(spark)
        return spawned

    def _explode_secondary(self, state: 'SimulationState', config: FireworkConfig):
        # Deferred import: patterns build Particles
        from ..patterns import BurstParams, detonate

        shell = self.payload
        shell.exploded = True
        params = BurstParams.secondary(config, shell.palette)
        detonate(
            state,
            config,
            shell.sub_type,
            self.position,
            self.velocity * SECONDARY_INHERIT,
            params,
        )
        self.retire()

    # -------------------------------------------------------------------------
    # Fluid style
    # -------------------------------------------------------------------------

    def enable_fluid(self, rng: np.random.Generator):
        self.style = ParticleStyle.FLUID
        self.viscosity = FLUID_VISCOSITY + rng.uniform(-0.02, 0.02)
        self.size *= rng.uniform(1.3, 1.8)
        self.trail = deque(self.trail, maxlen=TRAIL_LENGTH // 2)

    def apply_fluid(self, swirl: float, dt: float):
        """Viscous damping now, plus a swirl force for the next step"""
        self.velocity = self.velocity * (self.viscosity ** (dt * 60.0))
        self.apply_force(Vec2.from_angle(float(swirl) * 4 * np.pi, FLUID_SWIRL_FORCE))

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_spec(cls, spec, born: float, style: ParticleStyle, rng: np.random.Generator) -> 'Particle':
        """Materialise a pattern's ParticleSpec at simulation time `born`"""
        particle = cls(
            position=spec.position.copy(),
            velocity=spec.velocity.copy(),
            color=spec.color,
            size=spec.size,
            role=spec.role,
            lifespan=spec.lifespan,
            fade_rate=spec.fade_rate,
            alpha=spec.alpha,
            payload=replace(spec.payload) if spec.payload is not None else None,
            born=born,
        )
        if style is ParticleStyle.FLUID:
            particle.enable_fluid(rng)
        else:
            particle.style = style
        return particle
