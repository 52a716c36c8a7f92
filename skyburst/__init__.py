"""
Skyburst - Particle fireworks display
"""

from .core import (
    FireworkConfig,
    FireworkSystem,
    FireworkType,
    ParticleStyle,
    SimulationState,
    PresetManager,
)
from .patterns import PATTERNS, get_pattern

__version__ = "0.1.0"
__all__ = [
    'FireworkConfig',
    'FireworkSystem',
    'FireworkType',
    'ParticleStyle',
    'SimulationState',
    'PresetManager',
    'PATTERNS',
    'get_pattern',
    'render_frames',
]


def render_frames(
    config: FireworkConfig = None,
    width: int = 640,
    height: int = 360,
    frames: int = 120,
    fps: int = 30,
    seed: int = None,
) -> list:
    """
    Run a show headless and return the rendered frames.

    Args:
        config: Show settings (defaults if omitted)
        width, height: Viewport size in pixels
        frames: Number of frames to render
        fps: Simulation steps per second of footage
        seed: Random seed for a repeatable show

    Returns:
        List of uint8 (height, width, 3) arrays
    """
    from .render.canvas import CanvasRenderer

    system = FireworkSystem(config)
    state = SimulationState.create(width, height, seed=seed)
    renderer = CanvasRenderer(width, height)
    dt = 1.0 / fps

    # Open with a shell in the air rather than an empty sky
    system.launch_random(state)
    system.reset_launch_timer(state.time)

    images = []
    for _ in range(frames):
        system.step(state, dt)
        images.append(renderer.render(state, system.config))
    return images
