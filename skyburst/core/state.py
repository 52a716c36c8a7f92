"""
Simulation State

The explicit owner of everything that changes frame to frame: live
particles, live fireworks, the simulation clock, the viewport and the random
sources. Passed to every update and render call.
"""

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from .noise import NoiseField

if TYPE_CHECKING:
    from .firework import Firework
    from .particle import Particle

logger = logging.getLogger(__name__)


@dataclass
class SimulationState:
    """
    Live collections plus clock and viewport.

    Example:
        state = SimulationState.create(1280, 720, seed=42)
        state.spawn(particle, cap=30000)
        state.reap()
    """
    width: int = 1280
    height: int = 720
    time: float = 0.0
    particles: List['Particle'] = field(default_factory=list)
    fireworks: List['Firework'] = field(default_factory=list)
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    noise: NoiseField = field(default_factory=NoiseField)

    @classmethod
    def create(cls, width: int, height: int, seed: Optional[int] = None) -> 'SimulationState':
        """State with both random sources derived from one seed"""
        return cls(
            width=int(width),
            height=int(height),
            rng=np.random.default_rng(seed),
            noise=NoiseField(seed),
        )

    def spawn(self, particle: 'Particle', cap: int) -> bool:
        """Add a particle unless the live count has reached `cap`"""
        if len(self.particles) >= cap:
            return False
        self.particles.append(particle)
        return True

    def room(self, cap: int) -> int:
        """How many more particles fit under `cap`"""
        return max(0, cap - len(self.particles))

    def resize(self, width: int, height: int):
        """Change the viewport. Live particles keep their positions."""
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            logger.warning("Ignoring invalid viewport size %dx%d", width, height)
            return
        if (width, height) != (self.width, self.height):
            logger.debug("Viewport resized to %dx%d", width, height)
        self.width = width
        self.height = height

    def reap(self):
        """Drop finished particles and exploded fireworks"""
        self.particles = [p for p in self.particles if not p.is_done]
        self.fireworks = [f for f in self.fireworks if not f.done]

    def clear(self):
        self.particles.clear()
        self.fireworks.clear()
