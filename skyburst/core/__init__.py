"""
Skyburst - Core Simulation
"""

from .vector import Vec2
from .utils import MathUtils
from .noise import NoiseField
from .palette import PALETTES, get_palette, random_palette, parse_color
from .config import (
    ConfigError,
    FireworkConfig,
    FireworkType,
    ParticleStyle,
    FIELDS,
    FieldSpec,
    LAUNCHABLE_TYPES,
    SECONDARY_TYPES,
    MAX_PARTICLES_PER_FIREWORK,
    MAX_TOTAL_PARTICLES,
)
from .particle import (
    Particle,
    ParticleRole,
    StrobeState,
    CrackleState,
    MiniShellState,
    TRAIL_LENGTH,
)
from .state import SimulationState
from .firework import Firework, FireworkState
from .system import FireworkSystem
from .presets import ShowPreset, PresetManager, BUILTIN_PRESETS, load_config_file

__all__ = [
    'Vec2',
    'MathUtils',
    'NoiseField',
    'PALETTES',
    'get_palette',
    'random_palette',
    'parse_color',
    'ConfigError',
    'FireworkConfig',
    'FireworkType',
    'ParticleStyle',
    'FIELDS',
    'FieldSpec',
    'LAUNCHABLE_TYPES',
    'SECONDARY_TYPES',
    'MAX_PARTICLES_PER_FIREWORK',
    'MAX_TOTAL_PARTICLES',
    'Particle',
    'ParticleRole',
    'StrobeState',
    'CrackleState',
    'MiniShellState',
    'TRAIL_LENGTH',
    'SimulationState',
    'Firework',
    'FireworkState',
    'FireworkSystem',
    'ShowPreset',
    'PresetManager',
    'BUILTIN_PRESETS',
    'load_config_file',
]
