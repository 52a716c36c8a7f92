"""
Show Presets - named bundles of config settings
Built-in looks plus user presets stored as YAML
"""

import logging
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from dataclasses import dataclass, field

from .config import ConfigError, FireworkConfig, FIELDS

logger = logging.getLogger(__name__)


DEFAULT_USER_PRESETS_DIR = Path.home() / '.skyburst' / 'presets'


# ============================================================================
# Preset Data Structures
# ============================================================================

@dataclass
class ShowPreset:
    """A named set of config overrides"""

    name: str
    description: str = ""
    settings: Dict[str, Any] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for YAML serialization"""
        data = {'name': self.name, 'description': self.description, 'settings': dict(self.settings)}
        if self.tags:
            data['tags'] = list(self.tags)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ShowPreset':
        """
        Create from dictionary.

        Settings may sit under a `settings:` key or directly at the top level
        next to `name` and `description`.
        """
        data = dict(data)
        settings = dict(data.pop('settings', None) or {})
        for key in list(data):
            if key in FIELDS:
                settings[key] = data.pop(key)
        return cls(
            name=str(data.get('name', '')),
            description=str(data.get('description', '') or ''),
            settings=settings,
            tags=list(data.get('tags') or []),
        )

    def apply(self, config: FireworkConfig) -> FireworkConfig:
        """Write this preset's settings into `config` (unknown keys are skipped)"""
        for key, value in self.settings.items():
            if key not in FIELDS:
                logger.warning("Preset %s: ignoring unknown setting %s", self.name, key)
                continue
            config.set(key, value)
        return config

    def to_config(self) -> FireworkConfig:
        return self.apply(FireworkConfig())


# ============================================================================
# Built-in Presets
# ============================================================================

BUILTIN_PRESETS: Dict[str, Dict[str, Any]] = {
    'classic': {
        'description': 'Default mixed show',
        'settings': {},
        'tags': ['default'],
    },
    'grand_finale': {
        'description': 'Rapid launches, big bursts',
        'settings': {
            'launch_frequency': 3.0,
            'explosion_size': 1100,
            'particle_count': 2500,
            'max_total_particles': 50000,
            'bloom_intensity': 50,
        },
        'tags': ['busy', 'bright'],
    },
    'weeping_willow': {
        'description': 'Slow golden willows with long trails',
        'settings': {
            'firework_type': 'WILLOW',
            'launch_frequency': 0.4,
            'background_opacity': 10,
            'gravity': 35,
            'color_drift': 0.05,
        },
        'tags': ['calm'],
    },
    'strobe_party': {
        'description': 'Flashing strobes and crackles',
        'settings': {
            'firework_type': 'STROBE',
            'launch_frequency': 1.5,
            'particle_count': 1200,
            'bloom_intensity': 60,
        },
        'tags': ['busy'],
    },
    'windy_night': {
        'description': 'Strong gusty wind with heavy drag',
        'settings': {
            'wind': 30,
            'turbulence': 0.03,
            'air_drag': 0.0008,
        },
        'tags': ['weather'],
    },
    'fluid_dream': {
        'description': 'Swirling fluid particles in soft colours',
        'settings': {
            'particle_style': 'FLUID',
            'firework_type': 'PEONY',
            'particle_count': 1000,
            'background_opacity': 12,
            'color_drift': 0.6,
        },
        'tags': ['calm'],
    },
}


# ============================================================================
# Preset Manager
# ============================================================================

class PresetManager:
    """
    Loads built-in and user presets, and saves user presets.
    """

    def __init__(self, user_presets_dir: Optional[Path] = None):
        """
        Initialize preset manager.

        Args:
            user_presets_dir: Directory for user presets (default: ~/.skyburst/presets).
                Created on first save, not on load.
        """
        self.user_presets_dir = Path(user_presets_dir) if user_presets_dir else DEFAULT_USER_PRESETS_DIR

        self._builtin: Dict[str, ShowPreset] = {}
        self._user: Dict[str, ShowPreset] = {}

        self._load_builtin_presets()
        self._load_user_presets()

    def _load_builtin_presets(self) -> None:
        for name, data in BUILTIN_PRESETS.items():
            self._builtin[name] = ShowPreset.from_dict({**data, 'name': name})

    def _load_user_presets(self) -> None:
        """Load user-defined presets from YAML files"""
        if not self.user_presets_dir.is_dir():
            return
        for yaml_file in sorted(self.user_presets_dir.glob('*.yaml')):
            try:
                with open(yaml_file, 'r') as f:
                    data = yaml.safe_load(f)

                if not isinstance(data, dict):
                    raise ValueError("top level must be a mapping")
                if 'presets' in data:
                    # Multiple presets in one file
                    for name, preset_data in data['presets'].items():
                        self._user[name] = ShowPreset.from_dict({**(preset_data or {}), 'name': name})
                else:
                    name = yaml_file.stem
                    self._user[name] = ShowPreset.from_dict({**data, 'name': name})
            except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
                logger.warning("Could not load preset file %s: %s", yaml_file, e)

    def get(self, name: str) -> Optional[ShowPreset]:
        """
        Get a preset by name.
        User presets override built-in presets with same name.
        """
        return self._user.get(name) or self._builtin.get(name)

    def exists(self, name: str) -> bool:
        return name in self._user or name in self._builtin

    def list_all(self) -> List[str]:
        return sorted(set(self._builtin) | set(self._user))

    def list_by_tag(self, tag: str) -> List[str]:
        matches = []
        for name, preset in {**self._builtin, **self._user}.items():
            if tag.lower() in [t.lower() for t in preset.tags]:
                matches.append(name)
        return sorted(matches)

    def save_preset(self, preset: ShowPreset, filename: Optional[str] = None) -> Path:
        """
        Save a user preset to YAML file.

        Returns:
            Path to saved file
        """
        filename = filename or f"{preset.name}.yaml"
        if not filename.endswith('.yaml'):
            filename += '.yaml'

        self.user_presets_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.user_presets_dir / filename
        with open(filepath, 'w') as f:
            yaml.safe_dump(preset.to_dict(), f, default_flow_style=False, sort_keys=False)

        self._user[preset.name] = preset
        return filepath

    def save_config(self, name: str, config: FireworkConfig, description: str = "") -> Path:
        """Snapshot a live config as a user preset"""
        return self.save_preset(ShowPreset(name=name, description=description, settings=config.to_dict()))


# ============================================================================
# Config Files
# ============================================================================

def load_config_file(path: Union[str, Path]) -> FireworkConfig:
    """
    Read a standalone YAML config.

    The mapping may be the settings themselves or nest them under `config:`.

    Raises:
        ConfigError: unreadable file, bad YAML or invalid values
    """
    path = Path(path)
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        data = {}
    if isinstance(data, dict) and isinstance(data.get('config'), dict):
        data = data['config']
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return FireworkConfig.from_dict(data)
