"""
Firework Show Configuration

One mutable record of tunables shared by the system, every firework and
every particle. All writes go through `FireworkConfig.set`, which coerces
and clamps the value to the control-panel range and bumps `version` so
views can tell the record changed.
"""

import logging
from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .utils import MathUtils

logger = logging.getLogger(__name__)


MAX_PARTICLES_PER_FIREWORK = 5000
MAX_TOTAL_PARTICLES = 30000


class ConfigError(ValueError):
    """Unknown configuration field or a value of the wrong kind"""


class FireworkType(Enum):
    """Explosion patterns a shell can carry"""
    PEONY = 'PEONY'
    CHRYSANTHEMUM = 'CHRYSANTHEMUM'
    PALM = 'PALM'
    HORSETAIL = 'HORSETAIL'
    WILLOW = 'WILLOW'
    STROBE = 'STROBE'
    CRACKLING = 'CRACKLING'
    MULTI_BREAK = 'MULTI_BREAK'
    RANDOM = 'RANDOM'

    @classmethod
    def parse(cls, value: Any) -> Optional['FireworkType']:
        """Enum member for a tag, or None when the tag is not recognised"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                return None
        return None


# Types a shell can actually detonate as (RANDOM is resolved at launch)
LAUNCHABLE_TYPES: List[FireworkType] = [t for t in FireworkType if t is not FireworkType.RANDOM]

# Mini-shells never re-break and never stay random
SECONDARY_TYPES: List[FireworkType] = [
    t for t in LAUNCHABLE_TYPES if t is not FireworkType.MULTI_BREAK
]


class ParticleStyle(Enum):
    """How particles move and draw"""
    CLASSIC = 'CLASSIC'
    FLUID = 'FLUID'
    QUANTUM = 'QUANTUM'


# =============================================================================
# Field Specifications
# =============================================================================

@dataclass(frozen=True)
class FieldSpec:
    """Control-panel description of one config field"""
    label: str
    kind: str                           # 'bool', 'float', 'int' or 'choice'
    folder: str = 'General'
    min: float = 0.0
    max: float = 1.0
    step: float = 0.0
    choices: Tuple[str, ...] = ()


FIELDS: Dict[str, FieldSpec] = {
    'auto_launch': FieldSpec('Auto Launch', 'bool'),
    'launch_frequency': FieldSpec('Launch Rate (/sec)', 'float', min=0.1, max=5.0, step=0.1),
    'firework_type': FieldSpec('Launch Type', 'choice', choices=tuple(t.value for t in FireworkType)),
    'explosion_size': FieldSpec('Explosion Size', 'float', 'Visuals', 50, 1500, 10),
    'particle_count': FieldSpec('Particles/Burst', 'int', 'Visuals', 100, MAX_PARTICLES_PER_FIREWORK, 100),
    'particle_style': FieldSpec('Particle Style', 'choice', 'Visuals', choices=tuple(s.value for s in ParticleStyle)),
    'color_drift': FieldSpec('Color Drift', 'float', 'Visuals', 0.0, 1.0, 0.05),
    'bloom_effect': FieldSpec('Bloom Effect', 'bool', 'Visuals'),
    'bloom_intensity': FieldSpec('Bloom Intensity', 'float', 'Visuals', 0, 100, 1),
    'background_opacity': FieldSpec('Trail Persistence', 'float', 'Visuals', 5, 100, 1),
    'gravity': FieldSpec('Gravity', 'float', 'Physics & Environment', 0.0, 200.0, 1.0),
    'wind': FieldSpec('Wind Strength', 'float', 'Physics & Environment', 0.0, 50.0, 0.5),
    'turbulence': FieldSpec('Wind Turbulence', 'float', 'Physics & Environment', 0.001, 0.05, 0.001),
    'air_drag': FieldSpec('Air Drag', 'float', 'Physics & Environment', 0.0, 0.002, 0.0001),
    'max_total_particles': FieldSpec('Max Particles (Global)', 'int', 'Performance', 5000, 50000, 1000),
}


# =============================================================================
# Configuration Record
# =============================================================================

@dataclass
class FireworkConfig:
    """
    Live-tunable settings for the whole show.

    Example:
        config = FireworkConfig()
        config.set('particle_count', 2500)
        config.set('firework_type', 'willow')
        config.version   # 2
    """
    auto_launch: bool = True
    launch_frequency: float = 0.5       # launches per second
    firework_type: str = FireworkType.RANDOM.value
    explosion_size: float = 800.0       # burst speed is explosion_size / 10 px/s
    particle_count: int = 1500          # target particles per burst
    particle_style: str = ParticleStyle.CLASSIC.value
    color_drift: float = 0.2            # chance a particle drifts off-palette
    bloom_effect: bool = True
    bloom_intensity: float = 35.0
    background_opacity: float = 25.0    # lower = longer trails
    gravity: float = 25.0               # px/s^2, downward
    wind: float = 6.0                   # px/s^2, base horizontal push
    turbulence: float = 0.01            # spatial frequency of wind noise
    air_drag: float = 0.0002            # quadratic drag coefficient
    max_total_particles: int = MAX_TOTAL_PARTICLES

    version: int = field(default=0, compare=False, repr=False)

    def set(self, name: str, value: Any) -> Any:
        """Validate, clamp and store one field. Returns the stored value."""
        spec = FIELDS.get(name)
        if spec is None:
            raise ConfigError(f"Unknown config field: {name}. Available: {sorted(FIELDS)}")

        coerced = _coerce(name, spec, value)
        setattr(self, name, coerced)
        self.version += 1
        return coerced

    def update(self, **values: Any) -> None:
        for name, value in values.items():
            self.set(name, value)

    def toggle(self, name: str) -> bool:
        """Flip a boolean field"""
        if FIELDS.get(name) is None or FIELDS[name].kind != 'bool':
            raise ConfigError(f"Not a boolean field: {name}")
        return self.set(name, not getattr(self, name))

    @property
    def style(self) -> ParticleStyle:
        return ParticleStyle(self.particle_style)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop('version')
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FireworkConfig':
        """Build a config, validating every known key and skipping the rest"""
        config = cls()
        for name, value in data.items():
            if name not in FIELDS:
                logger.warning("Ignoring unknown config key: %s", name)
                continue
            config.set(name, value)
        return config

    def copy(self) -> 'FireworkConfig':
        return FireworkConfig.from_dict(self.to_dict())


def _coerce(name: str, spec: FieldSpec, value: Any) -> Any:
    if spec.kind == 'bool':
        if not isinstance(value, bool):
            raise ConfigError(f"{name} expects a boolean, got {value!r}")
        return value

    if spec.kind in ('float', 'int'):
        if not MathUtils.is_number(value):
            raise ConfigError(f"{name} expects a number, got {value!r}")
        clamped = MathUtils.clamp(float(value), spec.min, spec.max)
        return int(round(clamped)) if spec.kind == 'int' else clamped

    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str) or value.strip().upper() not in spec.choices:
        raise ConfigError(f"{name} expects one of {list(spec.choices)}, got {value!r}")
    return value.strip().upper()


def config_field_names() -> List[str]:
    return [f.name for f in fields(FireworkConfig) if f.name != 'version']
