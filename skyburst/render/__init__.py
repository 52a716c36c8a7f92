"""
Skyburst - Rendering, export and interactive display
"""

from .canvas import CanvasRenderer
from .exporter import export_gif, export_png
from .panel import ControlPanel, PanelRow

__all__ = [
    'CanvasRenderer',
    'export_gif',
    'export_png',
    'ControlPanel',
    'PanelRow',
]
