# text_sampler.py
"""
Turns a line of text into the sample points that seed the credit particles.

The text is rasterized into an offscreen alpha buffer the size of the
canvas, anchored to the bottom-right corner, and the buffer is walked on a
stride grid. Every grid cell whose alpha clears the coverage threshold
becomes a SamplePoint.
"""
import logging
import math
import numpy as np
import pygame
from typing import Dict, List, NamedTuple, Sequence, Tuple
from constants import (
    COVERAGE_THRESHOLD, FONT_BOLD, FONT_FAMILY, FONT_SIZE_DIVISOR, MAX_FONT_SIZE,
    PARTICLE_COLOR, SAMPLE_STRIDE_MULTIPLIER, TEXT_MARGIN
)

# --- Data Contracts ---
#
# class TextRasterizer (duck-typed):
#   - measure(self, text: str, font_size: float) -> float
#     - Outputs: rendered width of `text` in pixels.
#   - render_alpha(self, text, font_size, canvas_size, origin) -> np.ndarray
#     - Inputs:
#       - canvas_size: (width, height) of the buffer in pixels.
#       - origin: (x, baseline_y) where the text's left edge and baseline go.
#     - Outputs: uint8 array of shape (height, width) holding the alpha
#       channel of the rendered text.
#
# class TextSampler:
#   - sample(self, text: str, font_size: float, canvas_size) -> List[SamplePoint]
#     - Outputs: points in row-major order over the stride grid.
#     - Invariants: Identical inputs give identical ordered outputs. A
#       degenerate canvas or empty text gives an empty list.


class SamplePoint(NamedTuple):
    """A canvas pixel where the rasterized text is opaque enough."""
    x: float
    y: float


def compute_font_size(canvas_width: float) -> float:
    """Font size scales with the canvas width, capped at MAX_FONT_SIZE."""
    return min(canvas_width / FONT_SIZE_DIVISOR, MAX_FONT_SIZE)


def sample_stride(pixel_ratio: float, multiplier: int = SAMPLE_STRIDE_MULTIPLIER) -> int:
    return max(1, int(math.floor(multiplier * pixel_ratio)))


class PygameTextRasterizer:
    """
    Renders text with pygame.font into a transparent, canvas-sized surface.
    """
    def __init__(self, family: str = FONT_FAMILY, bold: bool = FONT_BOLD):
        if not pygame.font.get_init():
            pygame.font.init()
        self.family = family
        self.bold = bold
        self._fonts: Dict[int, pygame.font.Font] = {}

    def _font(self, font_size: float) -> pygame.font.Font:
        size = max(1, int(round(font_size)))
        font = self._fonts.get(size)
        if font is None:
            font = pygame.font.SysFont(self.family, size, bold=self.bold)
            self._fonts[size] = font
            logging.debug(f"Loaded font '{self.family}' at size {size}.")
        return font

    def measure(self, text: str, font_size: float) -> float:
        return float(self._font(font_size).size(text)[0])

    def render_alpha(
        self,
        text: str,
        font_size: float,
        canvas_size: Tuple[int, int],
        origin: Tuple[float, float],
    ) -> np.ndarray:
        width, height = int(canvas_size[0]), int(canvas_size[1])
        font = self._font(font_size)
        buffer = pygame.Surface((width, height), pygame.SRCALPHA)
        buffer.fill((0, 0, 0, 0))

        glyphs = font.render(text, True, PARTICLE_COLOR)
        # Blit positions are top-left; the origin names the baseline.
        top = origin[1] - font.get_ascent()
        buffer.blit(glyphs, (int(round(origin[0])), int(round(top))))

        # surfarray is indexed [x, y]; callers expect rows first.
        alpha = pygame.surfarray.array_alpha(buffer).T.copy()
        buffer.fill((0, 0, 0, 0))
        return alpha


class TextSampler:
    """
    Samples the opaque pixels of rasterized text on a stride grid.
    """
    def __init__(
        self,
        rasterizer=None,
        pixel_ratio: float = 1.0,
        threshold: int = COVERAGE_THRESHOLD,
        margin: float = TEXT_MARGIN,
    ):
        """
        Args:
            rasterizer: Object providing `measure` and `render_alpha`.
                Defaults to a PygameTextRasterizer.
            pixel_ratio (float): Display pixel density; sets the stride.
            threshold (int): Minimum alpha (0-255) for a sampled pixel.
            margin (float): Distance of the text from the right and bottom edges.
        """
        self.rasterizer = rasterizer if rasterizer is not None else PygameTextRasterizer()
        self.stride = sample_stride(pixel_ratio)
        self.threshold = threshold
        self.margin = margin

    def text_width(self, text: str, font_size: float) -> float:
        return self.rasterizer.measure(text, font_size)

    def text_origin(self, text: str, font_size: float, canvas_size: Sequence[float]) -> Tuple[float, float]:
        """Left edge and baseline of the text, anchored bottom-right."""
        width = self.text_width(text, font_size)
        return (canvas_size[0] - width - self.margin, canvas_size[1] - self.margin)

    def sample(self, text: str, font_size: float, canvas_size: Sequence[float]) -> List[SamplePoint]:
        width, height = int(canvas_size[0]), int(canvas_size[1])
        if width <= 0 or height <= 0 or not text or font_size <= 0:
            logging.debug(
                f"Nothing to sample (canvas {width}x{height}, font size {font_size})."
            )
            return []

        origin = self.text_origin(text, font_size, (width, height))
        alpha = self.rasterizer.render_alpha(text, font_size, (width, height), origin)

        grid = alpha[::self.stride, ::self.stride]
        # argwhere walks row-major, which keeps the output order stable.
        hits = np.argwhere(grid > self.threshold) * self.stride
        points = [SamplePoint(float(x), float(y)) for y, x in hits]

        logging.debug(
            f"Sampled {len(points)} points from '{text}' at size {font_size:.1f} "
            f"on a {width}x{height} canvas (stride {self.stride})."
        )
        return points
