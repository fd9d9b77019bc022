# credit_link.py
"""
Controls the interactive credit text.

The CreditLink owns one field of particles sampled from the credit text,
the latest pointer position and the explosion lifecycle. A click inside
the text's bounds explodes the field and schedules a redirect once the
explosion has run its course. Resizing the canvas throws the field away
and samples a fresh one.
"""
import logging
import webbrowser
import numpy as np
import pygame
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple
from particle import ParticleSystem
from text_sampler import TextSampler, compute_font_size
from timers import TimerHandle, TimerQueue
from utils import to_canvas_coords
from constants import (
    CREDIT_TEXT, EXPLOSION_DURATION, FADE_OUT_DURATION, REDIRECT_URL,
    TEXT_HEIGHT_FACTOR, TEXT_MARGIN
)

# --- Data Contracts ---
#
# class CreditLink:
#   - initialize(self, canvas_size: Tuple[int, int]) -> CreditLink
#     - Side Effects: Samples the text and builds a new ParticleSystem in
#       the IDLE state.
#
#   - on_viewport_resize(self, new_size: Tuple[int, int]) -> None
#     - Side Effects: Replaces the ParticleSystem object. The old one is not
#       touched again. A redirect already scheduled is left to fire.
#
#   - on_pointer_move(self, position, display_rect=None) -> None
#   - on_activate(self, position, display_rect=None) -> bool
#     - Inputs: position in device coordinates; display_rect as
#       (left, top, width, height) of the canvas on screen.
#     - Outputs (on_activate): True when this call started the explosion.
#     - Invariants: At most one explosion and one redirect per field.
#
#   - tick(self, surface: Optional[pygame.Surface], now: Optional[float] = None) -> None
#     - Side Effects: Clears the surface, updates then draws every particle.


class FieldState(Enum):
    IDLE = "idle"
    EXPLODING = "exploding"
    REDIRECTING = "redirecting"


@dataclass(frozen=True)
class TextBounds:
    """Hit box of the credit text. `y` is the bottom edge (the baseline)."""
    x: float
    y: float
    width: float
    height: float

    def contains(self, px: float, py: float) -> bool:
        return (self.x <= px <= self.x + self.width and
                self.y - self.height <= py <= self.y)


class CreditLink:
    """
    Particle-based credit text that explodes into a redirect when clicked.
    """
    def __init__(
        self,
        sampler: TextSampler,
        timers: TimerQueue,
        text: str = CREDIT_TEXT,
        redirect_url: str = REDIRECT_URL,
        navigate: Optional[Callable[[str], object]] = None,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[np.random.Generator] = None,
        font_size: Optional[float] = None,
        explosion_duration: float = EXPLOSION_DURATION,
        fade_duration: float = FADE_OUT_DURATION,
    ):
        """
        Args:
            sampler (TextSampler): Turns the text into particle rest positions.
            timers (TimerQueue): Queue the redirect is scheduled on.
            text (str): The credit text.
            redirect_url (str): Where to go after the explosion.
            navigate: Called with the URL when the redirect fires.
                Defaults to opening it in the web browser.
            clock: Returns the current time in milliseconds. Defaults to
                pygame's tick counter.
            rng (np.random.Generator): Random source shared by every field.
            font_size (float): Fixed font size. Derived from the canvas
                width when None.
            explosion_duration (float): Explosion length in ms.
            fade_duration (float): Length of the fade at the end of the
                explosion in ms.
        """
        if explosion_duration <= 0 or fade_duration <= 0 or fade_duration > explosion_duration:
            msg = (
                f"Configuration error: explosion duration ({explosion_duration}ms) and "
                f"fade duration ({fade_duration}ms) must be positive, and the fade "
                f"cannot be longer than the explosion."
            )
            logging.critical(msg)
            raise ValueError(msg)

        self.sampler = sampler
        self.timers = timers
        self.text = text
        self.redirect_url = redirect_url
        self.navigate = navigate if navigate is not None else webbrowser.open
        self.clock = clock if clock is not None else pygame.time.get_ticks
        self.rng = rng if rng is not None else np.random.default_rng()
        self.font_size_override = font_size
        self.explosion_duration = explosion_duration
        self.fade_duration = fade_duration

        self.canvas_size: Tuple[int, int] = (0, 0)
        self.display_rect: Optional[Tuple[float, float, float, float]] = None
        self.pointer: Optional[Tuple[float, float]] = None
        self.particles = ParticleSystem([], rng=self.rng)
        self.state = FieldState.IDLE
        self.explosion_start_time = 0.0
        self.generation = 0
        self.redirect_handle: Optional[TimerHandle] = None

    @property
    def exploding(self) -> bool:
        return self.state is not FieldState.IDLE

    @property
    def font_size(self) -> float:
        if self.font_size_override is not None:
            return self.font_size_override
        return compute_font_size(self.canvas_size[0])

    def initialize(self, canvas_size: Sequence[int]) -> "CreditLink":
        self._build_field(canvas_size)
        logging.info(
            f"CreditLink initialized on a {self.canvas_size[0]}x{self.canvas_size[1]} "
            f"canvas with {len(self.particles)} particles."
        )
        return self

    def on_viewport_resize(self, new_size: Sequence[int]) -> None:
        was_exploding = self.exploding
        self._build_field(new_size)
        logging.info(
            f"Canvas resized to {self.canvas_size[0]}x{self.canvas_size[1]}; "
            f"rebuilt field with {len(self.particles)} particles."
        )
        if was_exploding:
            logging.debug("Previous field was mid-explosion and has been abandoned.")

    def _build_field(self, canvas_size: Sequence[int]) -> None:
        width, height = max(0, int(canvas_size[0])), max(0, int(canvas_size[1]))
        self.canvas_size = (width, height)
        points = self.sampler.sample(self.text, self.font_size, self.canvas_size)
        self.particles = ParticleSystem(points, rng=self.rng)
        self.state = FieldState.IDLE
        self.explosion_start_time = 0.0
        self.generation += 1

    def set_display_rect(self, display_rect: Optional[Sequence[float]]) -> None:
        """Where the canvas is shown on screen, as (left, top, width, height)."""
        self.display_rect = tuple(display_rect) if display_rect is not None else None

    def _to_canvas(self, position: Sequence[float], display_rect) -> Optional[Tuple[float, float]]:
        if display_rect is None:
            display_rect = self.display_rect
        if display_rect is None:
            display_rect = (0, 0, self.canvas_size[0], self.canvas_size[1])
        return to_canvas_coords(position, display_rect, self.canvas_size)

    def on_pointer_move(self, position: Sequence[float], display_rect=None) -> None:
        canvas_pos = self._to_canvas(position, display_rect)
        if canvas_pos is not None:
            self.pointer = canvas_pos

    def on_activate(self, position: Sequence[float], display_rect=None) -> bool:
        canvas_pos = self._to_canvas(position, display_rect)
        if canvas_pos is None:
            return False
        if not self.text_bounds().contains(*canvas_pos):
            return False
        return self.start_explosion()

    def text_bounds(self) -> TextBounds:
        font_size = self.font_size
        width = self.sampler.text_width(self.text, font_size)
        return TextBounds(
            x=self.canvas_size[0] - width - TEXT_MARGIN,
            y=self.canvas_size[1] - TEXT_MARGIN,
            width=width,
            height=font_size * TEXT_HEIGHT_FACTOR,
        )

    def start_explosion(self, now: Optional[float] = None) -> bool:
        if self.exploding:
            logging.debug("Activation ignored: field is already exploding.")
            return False

        now = self.clock() if now is None else now
        self.state = FieldState.EXPLODING
        self.explosion_start_time = now
        self.particles.explode()
        self.redirect_handle = self.timers.call_later(
            self.explosion_duration, self._redirect_callback(self.generation), now
        )
        logging.info(
            f"Credit exploded ({len(self.particles)} particles); "
            f"redirecting in {self.explosion_duration}ms."
        )
        return True

    def _redirect_callback(self, generation: int) -> Callable[[], None]:
        def fire() -> None:
            if generation == self.generation:
                self.state = FieldState.REDIRECTING
            else:
                logging.info("Redirect scheduled by a replaced field is firing.")
            logging.info(f"Redirecting to {self.redirect_url}")
            self.navigate(self.redirect_url)
        return fire

    def tick(self, surface: Optional[pygame.Surface], now: Optional[float] = None) -> None:
        """Advances and renders one frame."""
        now = self.clock() if now is None else now
        if surface is not None:
            surface.fill((0, 0, 0, 0))
        self.particles.update(
            self.pointer, now, self.exploding, self.explosion_start_time,
            self.explosion_duration, self.fade_duration
        )
        if surface is not None:
            self.particles.draw(surface)

    def close(self) -> None:
        if self.redirect_handle is not None and self.redirect_handle.active:
            self.redirect_handle.cancel()
            logging.info("Pending redirect cancelled on shutdown.")
