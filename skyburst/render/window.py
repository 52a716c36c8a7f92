"""
Fireworks Window

Live pygame host for the simulation. One simulation tick and one canvas
render per displayed frame.

Controls:
    SPACE       - Launch a firework now
    A           - Toggle auto-launch
    P           - Show/hide the control panel
    C           - Clear the sky
    H           - Show/hide help
    CLICK       - Launch at pointer (manual mode, outside the panel)
    ESC/Q       - Quit

Requires: pygame (pip install pygame)
"""

import logging
from typing import Any, Optional, Tuple

from ..core.config import FireworkConfig
from ..core.state import SimulationState
from ..core.system import FireworkSystem, TARGET_FPS
from .canvas import CanvasRenderer
from .panel import ControlPanel

# Try to import pygame
try:
    import pygame
    from pygame import Surface
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False
    pygame = None
    # Dummy type for annotations when pygame not installed
    Surface = Any

logger = logging.getLogger(__name__)


PANEL_BG = (20, 20, 28, 200)
PANEL_TEXT = (210, 210, 220)
PANEL_ACCENT = (255, 170, 60)
ERROR_TEXT = (255, 110, 110)
FONT_SIZE = 18

HELP_TEXT = [
    "CONTROLS:",
    "",
    "SPACE      Launch now",
    "A          Toggle auto-launch",
    "CLICK      Launch (manual mode)",
    "P          Toggle panel",
    "C          Clear the sky",
    "",
    "H          Hide this help",
    "ESC/Q      Quit",
]


class FireworksWindow:
    """
    Interactive fireworks display.

    Example:
        window = FireworksWindow(FireworkSystem(config), SimulationState.create(1280, 720))
        window.run()
    """

    def __init__(
        self,
        system: FireworkSystem,
        state: SimulationState,
        fps: int = TARGET_FPS,
        title: str = "Skyburst",
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError(
                "pygame is required for the live window. Install with: pip install pygame"
            )

        self.system = system
        self.state = state
        self.fps = fps
        self.title = title
        self.show_help = False
        self.error: Optional[str] = None

        self.renderer = CanvasRenderer(state.width, state.height)
        self.panel = ControlPanel(
            system.config,
            on_launch=lambda: system.launch_random(self.state),
            on_change=self._on_config_change,
        )
        self.panel.layout(state.width)

        self.screen: Optional[Surface] = None
        self.clock = None
        self.font = None

    @property
    def config(self) -> FireworkConfig:
        return self.system.config

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def _init_pygame(self):
        """Initialize pygame and create window"""
        pygame.init()
        pygame.display.set_caption(self.title)
        self.screen = pygame.display.set_mode((self.state.width, self.state.height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, FONT_SIZE)

    def _fallback_font(self):
        """System font for when the default font cannot be loaded"""
        try:
            if not pygame.font.get_init():
                pygame.font.init()
            return pygame.font.SysFont('monospace', FONT_SIZE)
        except (pygame.error, OSError) as e:
            logger.warning("No fallback font: %s", e)
            return None

    def _on_config_change(self, name: str, value: Any):
        if name == 'auto_launch':
            self.system.reset_launch_timer(self.state.time)

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    def run(self):
        """Run until the window is closed. Setup failure shows a static error."""
        try:
            self._init_pygame()
        except pygame.error as e:
            logger.error("Window setup failed: %s", e)
            self.error = str(e)
            # Console copy for when nothing can be drawn
            print(f"Error initializing fireworks: {e}")
            if self.screen is None:
                pygame.quit()
                return
            if self.font is None:
                self.font = self._fallback_font()
            self._error_loop()
            return

        running = True
        while running:
            dt = self.clock.tick(self.fps) / 1000.0

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = self._handle_key(event.key)
                elif event.type == pygame.MOUSEBUTTONDOWN:
                    self._handle_mouse_down(event)
                elif event.type == pygame.MOUSEBUTTONUP:
                    self.panel.release()
                elif event.type == pygame.MOUSEMOTION:
                    if self.panel.dragging:
                        self.panel.drag(*event.pos)
                elif event.type == pygame.VIDEORESIZE:
                    self._resize(event.w, event.h)

            self.system.step(self.state, dt)
            self._render()
            pygame.display.flip()

        pygame.quit()

    def _error_loop(self):
        """Static error screen; no retry"""
        while True:
            self.screen.fill((0, 0, 0))
            self._render_text(f"Error initializing fireworks: {self.error}", (20, 20), ERROR_TEXT)
            pygame.display.flip()
            for event in pygame.event.get():
                if event.type == pygame.QUIT or (event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE):
                    pygame.quit()
                    return
            pygame.time.wait(100)

    def _resize(self, width: int, height: int):
        self.state.resize(width, height)
        self.renderer.resize(self.state.width, self.state.height)
        self.panel.layout(self.state.width)
        self.screen = pygame.display.set_mode((self.state.width, self.state.height), pygame.RESIZABLE)

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def _handle_key(self, key: int) -> bool:
        """Handle keyboard input. Returns False to quit."""
        if key in (pygame.K_ESCAPE, pygame.K_q):
            return False
        elif key == pygame.K_SPACE:
            self.system.launch_random(self.state)
        elif key == pygame.K_a:
            enabled = self.system.toggle_auto_launch(self.state)
            logger.info("Auto-launch %s", 'on' if enabled else 'off')
        elif key == pygame.K_p:
            self.panel.toggle_visible()
        elif key == pygame.K_c:
            self.state.clear()
        elif key == pygame.K_h:
            self.show_help = not self.show_help
        return True

    def _handle_mouse_down(self, event):
        if event.button not in (1, 3):
            return
        x, y = event.pos
        over_panel = self.panel.contains(x, y)
        if over_panel:
            self.panel.press(x, y, event.button)
        elif event.button == 1:
            self.system.handle_pointer(self.state, x, y, over_panel)

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def _render(self):
        frame = self.renderer.render(self.state, self.config)
        pygame.surfarray.blit_array(self.screen, frame.swapaxes(0, 1))

        if self.panel.visible:
            self._render_panel()
        self._render_text(
            f"{len(self.state.particles)} particles  {self.clock.get_fps():.0f} fps",
            (10, self.state.height - 22),
        )
        if self.show_help:
            self._render_help()

    def _render_panel(self):
        bx, by, bw, bh = self.panel.bounds
        overlay = pygame.Surface((bw, bh), pygame.SRCALPHA)
        overlay.fill(PANEL_BG)
        self.screen.blit(overlay, (bx, by))

        for row in self.panel.rows:
            x, y, w, h = row.rect
            if row.kind == 'folder':
                self._render_text(row.label, (x + 6, y + 4), PANEL_ACCENT)
                continue
            if row.kind == 'action':
                pygame.draw.rect(self.screen, PANEL_ACCENT, (x + 6, y, w - 12, h), 1)
                self._render_text(row.label, (x + w // 2 - 35, y + 4), PANEL_ACCENT)
                continue

            self._render_text(row.label, (x + 12, y + 4))
            value = self.panel.format_value(row.name)
            if row.kind in ('float', 'int'):
                sx, sy, sw, sh = row.slider_rect
                pygame.draw.rect(self.screen, (60, 60, 70), (sx, sy, sw, sh))
                fill = int(sw * self.panel.fraction(row.name))
                pygame.draw.rect(self.screen, PANEL_ACCENT, (sx, sy, fill, sh))
                self._render_text(value, (sx + sw + 6, y + 4))
            else:
                self._render_text(value, (x + 136, y + 4))

    def _render_help(self):
        overlay = pygame.Surface((280, len(HELP_TEXT) * 20 + 20), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 180))

        x = (self.state.width - 280) // 2
        y = (self.state.height - len(HELP_TEXT) * 20) // 2
        self.screen.blit(overlay, (x, y))

        for i, line in enumerate(HELP_TEXT):
            self._render_text(line, (x + 20, y + 10 + i * 20), color=(255, 255, 255))

    def _render_text(self, text: str, pos: Tuple[int, int], color: Tuple[int, int, int] = PANEL_TEXT):
        """Render text with shadow"""
        if self.font is None:
            return
        shadow = self.font.render(text, True, (0, 0, 0))
        self.screen.blit(shadow, (pos[0] + 1, pos[1] + 1))
        surface = self.font.render(text, True, color)
        self.screen.blit(surface, pos)
