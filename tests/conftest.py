# conftest.py
"""Shared fixtures. Pygame runs headless for the whole test session."""
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest


class FakeRasterizer:
    """
    Stands in for pygame.font: text is a solid block `char_width` pixels per
    character wide and `font_size` pixels tall, sitting on the baseline.
    """
    def __init__(self, width=None, char_width=10, alpha=255):
        self.width = width
        self.char_width = char_width
        self.alpha = alpha
        self.origins = []

    def measure(self, text, font_size):
        if self.width is not None:
            return float(self.width)
        return float(len(text) * self.char_width)

    def render_alpha(self, text, font_size, canvas_size, origin):
        self.origins.append(origin)
        width, height = canvas_size
        buffer = np.zeros((height, width), dtype=np.uint8)
        left = int(origin[0])
        right = int(origin[0] + self.measure(text, font_size))
        top = int(origin[1] - font_size)
        bottom = int(origin[1])
        buffer[max(0, top):max(0, bottom), max(0, left):max(0, right)] = self.alpha
        return buffer


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def fake_rasterizer():
    return FakeRasterizer(width=200)
