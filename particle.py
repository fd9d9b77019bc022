# particle.py
"""
Manages the state of the credit text particles.

This module defines the ParticleSystem class, which stores the state of
every particle of one field (position, rest position, velocity, opacity
and noise phase) in NumPy arrays, and applies the per-particle update,
explode and draw operations to all of them in a stable order.
"""
import logging
import math
import numpy as np
import pygame
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
from numba import jit
from constants import (
    ATTRACTION_SCALE, DENSITY_RANGE, EXPLOSION_SPEED_RANGE, INTERACTION_RADIUS,
    NOISE_AMPLITUDE, NOISE_FREQUENCY, NOISE_OFFSET_RANGE, PARTICLE_COLOR,
    PARTICLE_SIZE, RETURN_SPRING, VELOCITY_DAMPING
)

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, points: Sequence[Tuple[float, float]], rng: np.random.Generator):
#     - Inputs:
#       - points: rest positions, one per particle, in canvas pixels.
#       - rng: source of the per-particle noise phase and explosion draws.
#     - Invariants:
#       - self.positions, self.base_positions, self.velocities are float64
#         arrays of shape (N, 2).
#       - self.alphas is a float64 array of shape (N,), starting at 1.0.
#       - self.base_positions is never written after construction.
#
#   - update(self, pointer, now, exploding, explosion_start,
#            explosion_duration, fade_duration) -> None:
#     - Inputs:
#       - pointer: (x, y) in canvas pixels, or None when absent.
#       - now, explosion_start, explosion_duration, fade_duration: ms.
#     - Side Effects: Advances positions and velocities by one frame. While
#       exploding, alphas fall linearly to 0 over the last fade_duration ms.
#
#   - explode(self) -> None:
#     - Side Effects: Gives every particle a random direction in [0, 2pi)
#       and a random speed in [2, 7).
#
#   - draw(self, surface: pygame.Surface) -> int:
#     - Outputs: number of particles painted (alpha > 0).


@jit(nopython=True)
def _update_interactive_numba(
    positions, base_positions, velocities, noise_amplitudes, noise_offsets,
    pointer_x, pointer_y, has_pointer, now,
    radius, attraction, spring, damping, noise_frequency
):
    """
    Numba-jitted idle step: pointer pull with jitter near the pointer,
    spring back to rest everywhere else, then integrate and damp.
    """
    for i in range(positions.shape[0]):
        near = False
        if has_pointer:
            dx = pointer_x - positions[i, 0]
            dy = pointer_y - positions[i, 1]
            distance = math.sqrt(dx * dx + dy * dy)
            if distance < radius:
                near = True
                force = (radius - distance) / radius
                # Force follows the particle->pointer angle, so near
                # particles are drawn in towards the pointer.
                angle = math.atan2(dy, dx)
                phase = now * noise_frequency + noise_offsets[i]
                noise_x = math.sin(phase) * noise_amplitudes[i, 0]
                noise_y = math.cos(phase) * noise_amplitudes[i, 1]
                velocities[i, 0] += math.cos(angle) * force * attraction + noise_x
                velocities[i, 1] += math.sin(angle) * force * attraction + noise_y

        if not near:
            velocities[i, 0] += (base_positions[i, 0] - positions[i, 0]) * spring
            velocities[i, 1] += (base_positions[i, 1] - positions[i, 1]) * spring

        positions[i, 0] += velocities[i, 0]
        positions[i, 1] += velocities[i, 1]
        velocities[i, 0] *= damping
        velocities[i, 1] *= damping


@dataclass(frozen=True)
class Particle:
    """Read-only snapshot of one particle."""
    position: Tuple[float, float]
    base_position: Tuple[float, float]
    velocity: Tuple[float, float]
    alpha: float
    noise_amplitude: Tuple[float, float]
    noise_offset: float
    density: float
    size: float


class ParticleSystem:
    """
    A container for the particles of one credit field, with state held in
    NumPy arrays.
    """
    def __init__(
        self,
        points: Sequence[Tuple[float, float]],
        rng: Optional[np.random.Generator] = None,
        size: float = PARTICLE_SIZE,
        interaction_radius: float = INTERACTION_RADIUS,
        return_spring: float = RETURN_SPRING,
        damping: float = VELOCITY_DAMPING,
    ):
        """
        Initializes the particle system.

        Args:
            points: Rest positions, one per particle.
            rng (np.random.Generator): Random source. A fresh unseeded
                generator is used when None.
            size (float): Rendering radius of every particle.
            interaction_radius (float): Pointer distance below which a
                particle reacts to the pointer.
            return_spring (float): Spring constant pulling towards rest.
            damping (float): Per-frame velocity multiplier while idle.
        """
        self.rng = rng if rng is not None else np.random.default_rng()
        self.size = size
        self.interaction_radius = interaction_radius
        self.return_spring = return_spring
        self.damping = damping

        count = len(points)
        self.base_positions = np.array(points, dtype=np.float64).reshape(count, 2)
        self.base_positions.setflags(write=False)
        self.positions = self.base_positions.copy()
        self.velocities = np.zeros((count, 2), dtype=np.float64)
        self.alphas = np.ones(count, dtype=np.float64)

        self.noise_amplitudes = self.rng.uniform(
            low=-NOISE_AMPLITUDE, high=NOISE_AMPLITUDE, size=(count, 2)
        )
        self.noise_offsets = self.rng.uniform(low=0.0, high=NOISE_OFFSET_RANGE, size=count)
        self.densities = self.rng.uniform(
            low=DENSITY_RANGE[0], high=DENSITY_RANGE[1], size=count
        )

        logging.debug(f"ParticleSystem created with {count} particles.")

    def __len__(self) -> int:
        return self.positions.shape[0]

    @property
    def particle_count(self) -> int:
        return len(self)

    def particle(self, index: int) -> Particle:
        return Particle(
            position=(float(self.positions[index, 0]), float(self.positions[index, 1])),
            base_position=(float(self.base_positions[index, 0]), float(self.base_positions[index, 1])),
            velocity=(float(self.velocities[index, 0]), float(self.velocities[index, 1])),
            alpha=float(self.alphas[index]),
            noise_amplitude=(
                float(self.noise_amplitudes[index, 0]), float(self.noise_amplitudes[index, 1])
            ),
            noise_offset=float(self.noise_offsets[index]),
            density=float(self.densities[index]),
            size=self.size,
        )

    def update(
        self,
        pointer: Optional[Tuple[float, float]],
        now: float,
        exploding: bool,
        explosion_start: float,
        explosion_duration: float,
        fade_duration: float,
    ) -> None:
        if len(self) == 0:
            return

        if exploding:
            # Free flight: no damping, no pointer.
            self.positions += self.velocities
            elapsed = now - explosion_start
            fade_start = explosion_duration - fade_duration
            if elapsed > fade_start:
                alpha = 1.0 - (elapsed - fade_start) / fade_duration
                np.minimum(self.alphas, alpha, out=self.alphas)
            return

        has_pointer = pointer is not None
        pointer_x, pointer_y = pointer if has_pointer else (0.0, 0.0)
        _update_interactive_numba(
            self.positions, self.base_positions, self.velocities,
            self.noise_amplitudes, self.noise_offsets,
            float(pointer_x), float(pointer_y), has_pointer, float(now),
            float(self.interaction_radius), float(ATTRACTION_SCALE),
            float(self.return_spring), float(self.damping), float(NOISE_FREQUENCY)
        )

    def explode(self) -> None:
        count = len(self)
        angles = self.rng.uniform(0.0, 2.0 * np.pi, size=count)
        speeds = self.rng.uniform(EXPLOSION_SPEED_RANGE[0], EXPLOSION_SPEED_RANGE[1], size=count)
        self.velocities[:, 0] = np.cos(angles) * speeds
        self.velocities[:, 1] = np.sin(angles) * speeds

    def draw(self, surface: pygame.Surface) -> int:
        """
        Draws every visible particle as a filled disc.

        The surface should carry per-pixel alpha for the opacity to show.
        Returns the number of particles painted.
        """
        painted = 0
        r, g, b = PARTICLE_COLOR
        for i in range(len(self)):
            alpha = self.alphas[i]
            if alpha <= 0.0:
                continue
            a = int(round(min(alpha, 1.0) * 255))
            pygame.draw.circle(
                surface,
                (r, g, b, a),
                (float(self.positions[i, 0]), float(self.positions[i, 1])),
                self.size
            )
            painted += 1
        return painted
