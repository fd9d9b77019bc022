# visualization.py
"""
Handles the window, input events and frame composition using Pygame.

The earth sphere is drawn first, centred in the window, and the credit
particles are drawn on a transparent full-window layer on top of it.
Mouse and touch input are translated into pointer moves and activations
for the credit field and pointer updates for the sphere.
"""
import logging
import pygame
from typing import Optional, Tuple
from constants import BACKGROUND_COLOR, DEFAULT_WINDOW_SIZE, FPS, WINDOW_TITLE

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from credit_link import CreditLink
    from earth import EarthSphere


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, window_size, fullscreen: bool = False, fps: int = FPS)
#     - Side Effects: Initializes Pygame and opens a resizable window.
#
#   - handle_event(self, event: pygame.event.Event) -> bool
#     - Outputs: False if the event asks the application to quit.
#     - Side Effects: Forwards pointer moves, activations and resizes to the
#       attached credit field and earth sphere.
#
#   - draw(self, now: float) -> bool
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Processes pending events, renders one frame and waits
#       for the next frame slot. A component that raises while drawing is
#       logged and detached; the other keeps rendering.

class Visualizer:
    """
    Owns the Pygame window and drives the attached visualizations.
    """
    def __init__(
        self,
        window_size: Tuple[int, int] = DEFAULT_WINDOW_SIZE,
        fullscreen: bool = False,
        fps: int = FPS,
    ):
        pygame.init()
        pygame.font.init()

        if fullscreen:
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width, height = int(window_size[0]), int(window_size[1])
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()
        self.fps = fps
        self.credit_layer = pygame.Surface((width, height), pygame.SRCALPHA)
        self.pointer: Optional[Tuple[float, float]] = None

        self.credit: Optional["CreditLink"] = None
        self.earth: Optional["EarthSphere"] = None

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    @property
    def size(self) -> Tuple[int, int]:
        return self.screen.get_size()

    @property
    def display_rect(self) -> Tuple[int, int, int, int]:
        width, height = self.size
        return (0, 0, width, height)

    def attach(self, credit: Optional["CreditLink"], earth: Optional["EarthSphere"]) -> None:
        self.credit = credit
        self.earth = earth
        if self.credit is not None:
            self.credit.set_display_rect(self.display_rect)

    def _finger_pos(self, event: pygame.event.Event) -> Tuple[float, float]:
        # Finger coordinates are normalized to the window.
        width, height = self.size
        return (event.x * width, event.y * height)

    def _on_resize(self, size: Tuple[int, int]) -> None:
        width, height = max(1, int(size[0])), max(1, int(size[1]))
        try:
            self.credit_layer = pygame.Surface((width, height), pygame.SRCALPHA)
            if self.credit is not None:
                self.credit.set_display_rect((0, 0, width, height))
                self.credit.on_viewport_resize((width, height))
            if self.earth is not None:
                self.earth.resize((width, height))
        except Exception as e:
            logging.error(f"Error handling resize: {e}")

    def _on_pointer(self, pos: Tuple[float, float]) -> None:
        self.pointer = (float(pos[0]), float(pos[1]))
        if self.credit is not None:
            self.credit.on_pointer_move(pos)

    def _on_activate(self, pos: Tuple[float, float]) -> None:
        if self.credit is not None and self.credit.on_activate(pos):
            logging.info(f"Credit activated at {pos}.")

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.QUIT:
            logging.info("Quit event received. Shutting down visualizer.")
            return False

        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            logging.info("ESC key pressed. Shutting down visualizer.")
            return False

        if event.type == pygame.VIDEORESIZE:
            self._on_resize(event.size)

        # Mouse events synthesized from touches are handled as finger events.
        elif event.type == pygame.MOUSEMOTION and not getattr(event, 'touch', False):
            self._on_pointer(event.pos)

        elif event.type == pygame.MOUSEBUTTONDOWN and not getattr(event, 'touch', False):
            if event.button == 1:  # Left mouse click
                self._on_activate(event.pos)

        elif event.type == pygame.FINGERMOTION:
            self._on_pointer(self._finger_pos(event))

        elif event.type == pygame.FINGERUP:
            self._on_activate(self._finger_pos(event))

        return True

    def draw(self, now: float) -> bool:
        """
        Handles events and draws one frame.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        for event in pygame.event.get():
            if not self.handle_event(event):
                return False

        self.screen.fill(BACKGROUND_COLOR)

        if self.earth is not None:
            try:
                self.earth.step(self.pointer)
                self.earth.draw(self.screen)
            except Exception as e:
                logging.error(f"Error drawing earth sphere, disabling it: {e}")
                self.earth = None

        if self.credit is not None:
            try:
                self.credit.tick(self.credit_layer, now)
                self.screen.blit(self.credit_layer, (0, 0))
            except Exception as e:
                logging.error(f"Error drawing credit link, disabling it: {e}")
                self.credit = None

        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
