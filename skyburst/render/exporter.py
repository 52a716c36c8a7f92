"""
Frame Exporter - writes rendered frames to disk
"""

import logging
from PIL import Image
import numpy as np
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)


def _to_image(frame: np.ndarray) -> Image.Image:
    if frame.ndim != 3 or frame.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) frame, got shape {frame.shape}")
    return Image.fromarray(frame.astype(np.uint8), 'RGB')


def export_png(frame: np.ndarray, path: Union[str, Path]) -> Path:
    """Export a single frame to PNG"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    _to_image(frame).save(path, 'PNG')
    return path


def export_gif(frames: List[np.ndarray], path: Union[str, Path], fps: int = 30, loop: int = 0) -> Path:
    """
    Export frames as an animated GIF.

    Args:
        frames: uint8 RGB arrays, all the same size
        path: Output file
        fps: Playback rate (GIF delays are whole milliseconds)
        loop: 0 loops forever

    Returns:
        Path to the written file
    """
    path = Path(path)
    if not frames:
        raise ValueError("No frames to export")
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")
    path.parent.mkdir(parents=True, exist_ok=True)

    images = [
        _to_image(frame).convert('P', palette=Image.Palette.ADAPTIVE, colors=255)
        for frame in frames
    ]
    images[0].save(
        path,
        save_all=True,
        append_images=images[1:],
        duration=max(1, int(round(1000 / fps))),
        loop=loop,
        optimize=False,
    )
    logger.info("Wrote %d frames to %s", len(images), path)
    return path
