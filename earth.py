# earth.py
"""
Renders the noise-shaded "Earth" sphere.

A square grid of discs is projected onto a sphere. Each visible cell
samples three scales of value noise at its sphere point, thresholds them
into land/water, and averages the result into a grey level. Horizontal
pointer position spins the sphere; vertical position sets the contrast.
"""
import logging
import math
import numpy as np
import pygame
from typing import Optional, Sequence, Tuple
from numba import jit
from utils import map_range
from constants import (
    BACKGROUND_COLOR, EARTH_CANVAS_RATIO, EARTH_CONTRAST_RANGE, EARTH_GRID_N,
    EARTH_NOISE_FALLOFF, EARTH_NOISE_OCTAVES, EARTH_NOISE_OFFSET,
    EARTH_NOISE_RADIUS, EARTH_NOISE_TABLE_SIZE, EARTH_ROTATION_SPEED
)

# --- Data Contracts ---
#
# class EarthSphere:
#   - resize(self, window_size: Tuple[int, int]) -> None
#     - Side Effects: Sizes the square sphere canvas to 95% of the smaller
#       window dimension and centres it in the window.
#
#   - step(self, pointer: Optional[Tuple[float, float]]) -> None
#     - Inputs: pointer in window coordinates, or None.
#     - Side Effects: Advances the rotation and sets the contrast exponent.
#
#   - shade(self) -> np.ndarray
#     - Outputs: float64 array of shape (n, n) indexed [column, row] holding
#       brightness in [0, 1] for cells on the disc and NaN elsewhere.
#     - Invariants: Deterministic for a given seed, offset and exponent.


@jit(nopython=True)
def _value_noise3_numba(table, x, y, z):
    """Trilinear value noise over a hashed lattice table, in [0, 1]."""
    xi = int(math.floor(x))
    yi = int(math.floor(y))
    zi = int(math.floor(z))
    xf = x - xi
    yf = y - yi
    zf = z - zi
    mask = table.shape[0] - 1

    u = xf * xf * (3.0 - 2.0 * xf)
    v = yf * yf * (3.0 - 2.0 * yf)
    w = zf * zf * (3.0 - 2.0 * zf)

    total = 0.0
    for dz in range(2):
        for dy in range(2):
            for dx in range(2):
                h = ((xi + dx) * 73856093) ^ ((yi + dy) * 19349663) ^ ((zi + dz) * 83492791)
                corner = table[h & mask]
                wx = u if dx == 1 else 1.0 - u
                wy = v if dy == 1 else 1.0 - v
                wz = w if dz == 1 else 1.0 - w
                total += corner * wx * wy * wz
    return total


@jit(nopython=True)
def _fractal_noise3_numba(table, x, y, z, octaves, falloff):
    total = 0.0
    amplitude = 0.5
    frequency = 1.0
    for _ in range(octaves):
        total += amplitude * _value_noise3_numba(table, x * frequency, y * frequency, z * frequency)
        amplitude *= falloff
        frequency *= 2.0
    return total


@jit(nopython=True)
def _shade_grid_numba(
    table, n, side, azimuth_offset, noise_radius, exponent,
    noise_offset, octaves, falloff, out
):
    """
    Numba-jitted shading pass. Writes brightness per cell into `out`,
    NaN for cells outside the disc.
    """
    diameter = side / n
    r = diameter / 2.0
    centre = side / 2.0
    limit = (side / 2.0) * (side / 2.0)

    for i in range(n):
        x = i * diameter + r - centre
        azimuth = (i / (n - 1)) * math.pi + azimuth_offset
        for j in range(n):
            y = j * diameter + r - centre
            if x * x + y * y > limit:
                out[i, j] = np.nan
                continue
            inclination = (j / (n - 1)) * math.pi

            nx = noise_radius * math.sin(inclination) * math.cos(azimuth)
            ny = noise_radius * math.sin(inclination) * math.sin(azimuth)
            nz = noise_radius * math.cos(inclination)

            ns1 = _fractal_noise3_numba(
                table, nx + noise_offset, ny + noise_offset, nz + noise_offset, octaves, falloff)
            ns2 = _fractal_noise3_numba(
                table, nx / 2.0 + noise_offset, ny / 2.0 + noise_offset, nz / 2.0 + noise_offset,
                octaves, falloff)
            ns3 = _fractal_noise3_numba(
                table, nx * 2.0 + noise_offset, ny * 2.0 + noise_offset, nz * 2.0 + noise_offset,
                octaves, falloff)

            land = 0.0
            if ns1 > 0.5:
                land += 1.0
            if ns2 > 0.5:
                land += 1.0
            if ns3 > 0.5:
                land += 1.0

            level = land / 3.0
            if level == 0.0 and exponent < 0.0:
                # 0 ** -k is unbounded; p5 paints it black.
                out[i, j] = 0.0
            else:
                out[i, j] = 1.0 - level ** exponent


class EarthSphere:
    """
    Pointer-reactive noise sphere drawn as a grid of grey discs.
    """
    def __init__(
        self,
        grid_n: int = EARTH_GRID_N,
        noise_radius: float = EARTH_NOISE_RADIUS,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Args:
            grid_n (int): Number of cells along each side of the grid.
            noise_radius (float): Radius of the sphere in noise space.
            rng (np.random.Generator): Seeds the noise lattice.
        """
        if grid_n < 2:
            msg = f"Configuration error: earth grid_n must be at least 2, got {grid_n}."
            logging.critical(msg)
            raise ValueError(msg)

        self.grid_n = grid_n
        self.noise_radius = noise_radius
        rng = rng if rng is not None else np.random.default_rng()
        self.noise_table = rng.random(EARTH_NOISE_TABLE_SIZE)

        self.azimuth_offset = 0.0
        self.exponent = EARTH_CONTRAST_RANGE[0]
        self.side = 0.0
        self.rect = pygame.Rect(0, 0, 0, 0)
        self.surface: Optional[pygame.Surface] = None
        self._brightness = np.full((grid_n, grid_n), np.nan, dtype=np.float64)

        logging.info(f"EarthSphere initialized with a {grid_n}x{grid_n} grid.")

    @property
    def cell_diameter(self) -> float:
        return self.side / self.grid_n

    def resize(self, window_size: Sequence[int]) -> None:
        width, height = int(window_size[0]), int(window_size[1])
        self.side = max(0.0, min(width, height) * EARTH_CANVAS_RATIO)
        side_px = int(self.side)
        self.rect = pygame.Rect(0, 0, side_px, side_px)
        self.rect.center = (width // 2, height // 2)
        self.surface = pygame.Surface((side_px, side_px)) if side_px > 0 else None
        logging.debug(f"Earth canvas resized to {side_px}x{side_px} at {self.rect.topleft}.")

    def step(self, pointer: Optional[Tuple[float, float]]) -> None:
        # An absent pointer reads as the canvas origin.
        if pointer is None:
            px, py = 0.0, 0.0
        else:
            px, py = pointer[0] - self.rect.left, pointer[1] - self.rect.top
        if self.side <= 0:
            return
        self.azimuth_offset += map_range(px, 0, self.side, -1, 1) * EARTH_ROTATION_SPEED
        self.exponent = map_range(py, 0, self.side, *EARTH_CONTRAST_RANGE)

    def shade(self) -> np.ndarray:
        if self.side <= 0:
            self._brightness.fill(np.nan)
            return self._brightness
        _shade_grid_numba(
            self.noise_table, self.grid_n, float(self.side), float(self.azimuth_offset),
            float(self.noise_radius), float(self.exponent), float(EARTH_NOISE_OFFSET),
            EARTH_NOISE_OCTAVES, float(EARTH_NOISE_FALLOFF), self._brightness
        )
        # Pointer below the canvas gives a negative exponent; keep levels in
        # [0, 1]. Off-disc NaN survives the clip.
        np.clip(self._brightness, 0.0, 1.0, out=self._brightness)
        return self._brightness

    def draw(self, target: pygame.Surface) -> None:
        """Shades the grid and blits the sphere canvas centred on `target`."""
        if self.surface is None:
            return
        brightness = self.shade()
        self.surface.fill(BACKGROUND_COLOR)

        diameter = self.cell_diameter
        r = diameter / 2.0
        for i, j in np.argwhere(~np.isnan(brightness)):
            level = int(round(brightness[i, j] * 255))
            level = min(255, max(0, level))
            pygame.draw.circle(
                self.surface,
                (level, level, level),
                (i * diameter + r, j * diameter + r),
                r
            )
        target.blit(self.surface, self.rect.topleft)
