"""
Control Panel Model

Pure-Python layout and input mapping for the on-screen settings panel.
Every edit goes through `FireworkConfig.set`; the pygame window only draws
what this model lays out and forwards pointer events to it.

Row kinds:
- folder  section header, not interactive
- bool    click toggles
- choice  left click steps forward, right click steps back
- float / int  slider; click or drag sets the value
- action  button ("Launch Now!")
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from ..core.config import FIELDS, FireworkConfig
from ..core.utils import MathUtils

logger = logging.getLogger(__name__)


PANEL_WIDTH = 280
ROW_HEIGHT = 22
MARGIN = 10
LABEL_WIDTH = 130               # slider starts after the label column

LAUNCH_ACTION = 'launch'

Rect = Tuple[int, int, int, int]    # x, y, w, h


@dataclass
class PanelRow:
    name: str
    label: str
    kind: str
    rect: Rect

    def contains(self, x: float, y: float) -> bool:
        rx, ry, rw, rh = self.rect
        return rx <= x < rx + rw and ry <= y < ry + rh

    @property
    def slider_rect(self) -> Rect:
        rx, ry, rw, rh = self.rect
        return (rx + LABEL_WIDTH, ry + 4, rw - LABEL_WIDTH - 50, rh - 8)


class ControlPanel:
    """
    Settings panel anchored to the top-right corner of the viewport.

    Example:
        panel = ControlPanel(config, on_launch=lambda: system.launch_random(state))
        panel.layout(1280)
        if panel.contains(mx, my):
            panel.press(mx, my)
    """

    def __init__(
        self,
        config: FireworkConfig,
        on_launch: Optional[Callable[[], Any]] = None,
        on_change: Optional[Callable[[str, Any], None]] = None,
        width: int = PANEL_WIDTH,
    ):
        self.config = config
        self.on_launch = on_launch
        self.on_change = on_change
        self.width = width
        self.visible = True
        self.rows: List[PanelRow] = []
        self._dragging: Optional[PanelRow] = None
        self.layout(width + MARGIN * 2)

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def layout(self, viewport_width: int):
        """Position rows for the given viewport width"""
        x = max(0, viewport_width - self.width - MARGIN)
        y = MARGIN
        rows = []
        folder = None
        for name, spec in FIELDS.items():
            if spec.folder != folder:
                folder = spec.folder
                rows.append(PanelRow(f"folder:{folder}", folder, 'folder', (x, y, self.width, ROW_HEIGHT)))
                y += ROW_HEIGHT
            rows.append(PanelRow(name, spec.label, spec.kind, (x, y, self.width, ROW_HEIGHT)))
            y += ROW_HEIGHT
        rows.append(PanelRow(LAUNCH_ACTION, 'Launch Now!', 'action', (x, y + 4, self.width, ROW_HEIGHT)))
        self.rows = rows

    @property
    def bounds(self) -> Rect:
        if not self.rows:
            return (0, 0, 0, 0)
        x, y = self.rows[0].rect[:2]
        last = self.rows[-1].rect
        return (x, y, self.width, last[1] + last[3] - y)

    def contains(self, x: float, y: float) -> bool:
        """Hit test used to keep panel clicks from launching fireworks"""
        if not self.visible:
            return False
        bx, by, bw, bh = self.bounds
        return bx <= x < bx + bw and by <= y < by + bh

    def row_at(self, x: float, y: float) -> Optional[PanelRow]:
        if not self.visible:
            return None
        for row in self.rows:
            if row.contains(x, y):
                return row
        return None

    def toggle_visible(self) -> bool:
        self.visible = not self.visible
        self._dragging = None
        return self.visible

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def press(self, x: float, y: float, button: int = 1) -> bool:
        """Handle a pointer press. Returns True if the panel consumed it."""
        row = self.row_at(x, y)
        if row is None:
            return self.contains(x, y)

        if row.kind == 'action':
            if self.on_launch is not None:
                self.on_launch()
        elif row.kind == 'bool':
            self._set(row.name, not getattr(self.config, row.name))
        elif row.kind == 'choice':
            self._step_choice(row.name, -1 if button == 3 else 1)
        elif row.kind in ('float', 'int'):
            self._dragging = row
            self._set_from_slider(row, x)
        return True

    def drag(self, x: float, y: float) -> bool:
        if self._dragging is None:
            return False
        self._set_from_slider(self._dragging, x)
        return True

    def release(self):
        self._dragging = None

    @property
    def dragging(self) -> bool:
        return self._dragging is not None

    def _set(self, name: str, value: Any):
        stored = self.config.set(name, value)
        logger.debug("Panel set %s = %r", name, stored)
        if self.on_change is not None:
            self.on_change(name, stored)

    def _step_choice(self, name: str, direction: int):
        choices = FIELDS[name].choices
        current = getattr(self.config, name)
        index = choices.index(current) if current in choices else 0
        self._set(name, choices[(index + direction) % len(choices)])

    def _set_from_slider(self, row: PanelRow, x: float):
        spec = FIELDS[row.name]
        sx, _, sw, _ = row.slider_rect
        fraction = MathUtils.clamp((x - sx) / sw, 0.0, 1.0) if sw > 0 else 0.0
        value = MathUtils.lerp(spec.min, spec.max, fraction)
        if spec.step > 0:
            value = spec.min + round((value - spec.min) / spec.step) * spec.step
        self._set(row.name, value)

    # -------------------------------------------------------------------------
    # Display helpers
    # -------------------------------------------------------------------------

    def fraction(self, name: str) -> float:
        """Slider fill level for a numeric field"""
        spec = FIELDS[name]
        return MathUtils.clamp(
            MathUtils.map_range(getattr(self.config, name), spec.min, spec.max, 0.0, 1.0), 0.0, 1.0
        )

    def format_value(self, name: str) -> str:
        spec = FIELDS[name]
        value = getattr(self.config, name)
        if spec.kind == 'bool':
            return 'on' if value else 'off'
        if spec.kind == 'int':
            return str(value)
        if spec.kind == 'float':
            if spec.step and spec.step < 0.01:
                return f"{value:.4f}"
            return f"{value:.2f}" if spec.step and spec.step < 1 else f"{value:.0f}"
        return str(value).title().replace('_', ' ')
