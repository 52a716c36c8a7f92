"""
Firework Palettes & Color Helpers

Each firework picks one named palette; its particles sample colours from
it, and a configurable fraction drift slightly toward a random vivid hue so
a burst never looks flat.
"""

import colorsys
import logging
import numpy as np
from typing import Dict, List, Sequence, Tuple, Union

logger = logging.getLogger(__name__)


# =============================================================================
# Color Types & Constants
# =============================================================================

Color = Tuple[int, int, int]          # RGB 0-255

WHITE: Color = (255, 255, 255)

# Fraction of the way a drifting particle may move toward its random hue
MAX_COLOR_DRIFT = 0.2

PALETTES: Dict[str, List[str]] = {
    'sunset': ['#FF4E50', '#FC913A', '#F9D423', '#EDE574', '#E1F5C4'],
    'ocean': ['#1E90FF', '#00BFFF', '#87CEFA', '#ADD8E6', '#E0FFFF'],
    'forest': ['#228B22', '#556B2F', '#8FBC8F', '#90EE90', '#3CB371'],
    'fire': ['#FF0000', '#FF4500', '#FFA500', '#FFD700', '#FFFF00'],
    'neon': ['#FF00FF', '#00FFFF', '#00FF00', '#FFFF00', '#FF69B4'],
    'gold': ['#FFFFFF', '#D3D3D3', '#A9A9A9', '#FFD700', '#F0E68C'],
}


# =============================================================================
# Conversions
# =============================================================================

def hex_to_rgb(value: str) -> Color:
    """Parse '#RRGGBB' or '#RGB' into an RGB tuple"""
    text = value.strip().lstrip('#')
    if len(text) == 3:
        text = ''.join(c * 2 for c in text)
    if len(text) != 6:
        raise ValueError(f"Not a hex colour: {value!r}")
    return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))


def parse_color(value: Union[str, int, Sequence[int]]) -> Color:
    """
    Coerce a colour description into RGB.

    Accepts hex strings, a single grey level, or an RGB(A) sequence.
    Anything else is logged and replaced with white.
    """
    try:
        if isinstance(value, str):
            return hex_to_rgb(value)
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            level = int(np.clip(value, 0, 255))
            return (level, level, level)
        channels = [int(np.clip(c, 0, 255)) for c in value]
        if len(channels) not in (3, 4):
            raise ValueError(f"Expected 3 or 4 channels, got {len(channels)}")
        return (channels[0], channels[1], channels[2])
    except (TypeError, ValueError) as e:
        logger.warning("Invalid colour %r, using white: %s", value, e)
        return WHITE


def lerp_color(c1: Color, c2: Color, t: float) -> Color:
    """Linear blend between two colours"""
    t = float(np.clip(t, 0.0, 1.0))
    return (
        int(c1[0] + (c2[0] - c1[0]) * t),
        int(c1[1] + (c2[1] - c1[1]) * t),
        int(c1[2] + (c2[2] - c1[2]) * t),
    )


# =============================================================================
# Sampling
# =============================================================================

def get_palette(name: str) -> List[Color]:
    """RGB colours of a named palette"""
    if name not in PALETTES:
        raise ValueError(f"Unknown palette: {name}. Available: {sorted(PALETTES)}")
    return [hex_to_rgb(c) for c in PALETTES[name]]


def random_palette(rng: np.random.Generator) -> List[Color]:
    """Pick one of the named palettes at random"""
    names = sorted(PALETTES)
    return get_palette(names[rng.integers(len(names))])


def pick_color(palette: Sequence[Color], rng: np.random.Generator) -> Color:
    if not palette:
        return WHITE
    return tuple(palette[rng.integers(len(palette))])


def vivid_color(rng: np.random.Generator) -> Color:
    """Fully saturated colour with a random hue"""
    r, g, b = colorsys.hsv_to_rgb(rng.random(), 1.0, 1.0)
    return (int(r * 255), int(g * 255), int(b * 255))


def drift_color(color: Color, rng: np.random.Generator, chance: float) -> Color:
    """With probability `chance`, nudge colour toward a random vivid hue"""
    if chance <= 0 or rng.random() >= chance:
        return color
    return lerp_color(color, vivid_color(rng), rng.random() * MAX_COLOR_DRIFT)


def grey(level: float) -> Color:
    level = int(np.clip(level, 0, 255))
    return (level, level, level)
