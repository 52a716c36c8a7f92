"""
Firework System

Owns the live configuration, schedules launches and runs the per-frame
tick: environmental forces, particle updates, removal of finished particles
and apex checks for every shell in flight.

Frame order:
1. advance the clock
2. auto-launch if due
3. gravity + wind + drag, then update, for every live particle
4. drop particles with alpha <= 0
5. update fireworks (may detonate)
6. drop exploded fireworks
"""

import logging
import numpy as np
from typing import List, Optional, Union

from .config import FireworkConfig, FireworkType, LAUNCHABLE_TYPES, ParticleStyle
from .firework import Firework
from .palette import random_palette
from .particle import Particle, sample_swirl
from .state import SimulationState
from .vector import Vec2

logger = logging.getLogger(__name__)


TARGET_FPS = 60
DEFAULT_DT = 1.0 / TARGET_FPS
MAX_DT = 0.25

LAUNCH_VX = (-15.0, 15.0)       # px/s
LAUNCH_VY = (-480.0, -360.0)    # px/s, upward
LAUNCH_X_RANGE = (0.15, 0.85)   # fraction of viewport width
ALTITUDE_RANGE = (0.1, 0.5)     # fraction of viewport height, from the top

WIND_TIME_SCALE = 0.1
WIND_GUST = 0.5


class FireworkSystem:
    """
    Launch scheduler and frame tick.

    Example:
        system = FireworkSystem(FireworkConfig(auto_launch=False))
        state = SimulationState.create(1280, 720, seed=1)
        system.manual_launch(state, 640)
        for _ in range(180):
            system.step(state, 1 / 60)
    """

    def __init__(self, config: Optional[FireworkConfig] = None):
        self.config = config if config is not None else FireworkConfig()
        self.last_launch = 0.0

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    def update(self, state: SimulationState) -> Optional[Firework]:
        """Auto-launch when the interval has elapsed and there is room"""
        config = self.config
        if not config.auto_launch:
            return None
        if state.time - self.last_launch <= 1.0 / config.launch_frequency:
            return None
        if len(state.particles) >= config.max_total_particles:
            logger.debug("Particle cap (%d) reached, auto-launch deferred", config.max_total_particles)
            return None

        self.last_launch = state.time
        return self.launch_random(state)

    def reset_launch_timer(self, now: float):
        self.last_launch = now

    def toggle_auto_launch(self, state: SimulationState) -> bool:
        enabled = self.config.toggle('auto_launch')
        self.reset_launch_timer(state.time)
        return enabled

    # -------------------------------------------------------------------------
    # Launching
    # -------------------------------------------------------------------------

    def resolve_type(self, tag: Union[FireworkType, str], rng: np.random.Generator) -> Union[FireworkType, str]:
        """RANDOM becomes a concrete type; unknown tags pass through to the fallback burst"""
        firework_type = FireworkType.parse(tag)
        if firework_type is None:
            logger.warning("Unknown firework type %r; it will burst as a sphere", tag)
            return tag
        if firework_type is FireworkType.RANDOM:
            return LAUNCHABLE_TYPES[int(rng.integers(len(LAUNCHABLE_TYPES)))]
        return firework_type

    def launch(
        self,
        state: SimulationState,
        position: Vec2,
        type_override: Optional[Union[FireworkType, str]] = None,
    ) -> Optional[Firework]:
        """Launch one shell from `position`. Returns None when rejected."""
        config = self.config
        if len(state.particles) >= config.max_total_particles:
            logger.warning("Particle cap (%d) reached, launch skipped", config.max_total_particles)
            return None
        if not isinstance(position, Vec2) or not position.is_finite():
            logger.error("Invalid launch position: %r", position)
            return None

        rng = state.rng
        tag = type_override if type_override is not None else config.firework_type
        firework = Firework(
            origin=position,
            velocity=Vec2(rng.uniform(*LAUNCH_VX), rng.uniform(*LAUNCH_VY)),
            firework_type=self.resolve_type(tag, rng),
            config=config,
            explosion_altitude=state.height * rng.uniform(*ALTITUDE_RANGE),
            palette=random_palette(rng),
            born=state.time,
        )
        if not state.spawn(firework.shell, config.max_total_particles):
            logger.warning("No room for shell, launch skipped")
            return None

        state.fireworks.append(firework)
        logger.debug("Launched %s from (%.0f, %.0f)", firework.type_name, position.x, position.y)
        return firework

    def launch_random(self, state: SimulationState) -> Optional[Firework]:
        x = state.width * state.rng.uniform(*LAUNCH_X_RANGE)
        return self.launch(state, Vec2(x, state.height))

    def manual_launch(self, state: SimulationState, x: float, y: Optional[float] = None) -> Optional[Firework]:
        """Launch from the bottom edge (or `y`) at horizontal position `x`"""
        return self.launch(state, Vec2(x, state.height if y is None else y))

    def handle_pointer(self, state: SimulationState, x: float, y: float, over_panel: bool) -> Optional[Firework]:
        """Click handler: launches only in manual mode and off the panel"""
        if self.config.auto_launch or over_panel:
            return None
        return self.manual_launch(state, x)

    # -------------------------------------------------------------------------
    # Environment
    # -------------------------------------------------------------------------

    def get_wind(self, state: SimulationState, position: Vec2) -> Vec2:
        """Horizontal wind force at one point"""
        if not isinstance(position, Vec2) or not position.is_finite():
            return Vec2()
        gust = self.get_wind_field(state, np.array([position.x]), np.array([position.y]))
        return Vec2(float(gust[0]), 0.0)

    def get_wind_field(self, state: SimulationState, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Horizontal wind force for many points at once"""
        wind = self.config.wind
        turbulence = self.config.turbulence
        noise = state.noise.noise3(xs * turbulence, ys * turbulence, state.time * WIND_TIME_SCALE)
        return wind + np.asarray(noise) * wind * WIND_GUST

    # -------------------------------------------------------------------------
    # Frame tick
    # -------------------------------------------------------------------------

    def step(self, state: SimulationState, dt: float) -> List[Particle]:
        """Advance the whole show by one frame. Returns particles spawned by bursts."""
        if not (0.0 < dt < MAX_DT):
            dt = DEFAULT_DT
        config = self.config
        state.time += dt

        self.update(state)

        live = []
        for particle in list(state.particles):
            if particle.has_valid_state():
                live.append(particle)
            else:
                logger.error("Retiring malformed particle: %r", particle)
                particle.retire()

        if live:
            xs = np.fromiter((p.position.x for p in live), dtype=np.float64, count=len(live))
            ys = np.fromiter((p.position.y for p in live), dtype=np.float64, count=len(live))
            wind = self.get_wind_field(state, xs, ys)
            swirl = np.zeros(len(live))
            fluid = np.fromiter((p.style is ParticleStyle.FLUID for p in live), dtype=bool, count=len(live))
            if fluid.any():
                swirl[fluid] = sample_swirl(state, xs[fluid], ys[fluid])

            gravity = Vec2(0.0, config.gravity)
            for particle, gust, twist in zip(live, wind, swirl):
                particle.apply_force(gravity)
                particle.apply_force(Vec2(float(gust), 0.0))
                particle.apply_drag(config.air_drag)
                particle.update(state, dt, config, swirl=float(twist))

        state.reap()

        spawned = []
        for firework in list(state.fireworks):
            spawned.extend(firework.update(state))
        state.fireworks = [f for f in state.fireworks if not f.done]
        return spawned
