# simulation.py
"""
Handles the per-tick motion of the particle network.

This module defines the Simulation class, which advances the particle
system by one frame (Euler step, edge bounce, mouse repulsion) and owns
the mouse and viewport state. It also provides the pairwise connection
search used by the renderer.
"""
import logging
import numpy as np
from typing import Optional, Tuple
from numba import jit

from constants import REPEL_DISPLACEMENT
from particle import ParticleSystem
from settings import NetworkSettings

# --- Data Contracts ---
#
# find_connections(positions, max_distance, line_opacity)
#     -> Tuple[np.ndarray, np.ndarray]:
#   - Inputs:
#     - positions: (N, 2) float array.
#     - max_distance: pairs closer than this are connected.
#     - line_opacity: opacity scale of a zero-length connection.
#   - Outputs:
#     - pairs: (M, 2) int64 array of particle indices with i < j.
#     - opacities: (M,) float64 array, (1 - d / max_distance) * line_opacity.
#       Not clamped.
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, settings: NetworkSettings,
#              width: int, height: int):
#     - Side Effects: Stores references to particles and settings.
#       Mouse state starts unset (None).
#
#   - step(self) -> None:
#     - Side Effects: Moves every particle by its velocity, flips velocity
#       components of particles past an edge and nudges particles near the
#       mouse away from it.
#     - Invariants: Particle count is constant. Velocity magnitudes are
#       never changed.
#
#   - resize(self, width: int, height: int) -> None:
#     - Side Effects: Updates the viewport and applies the resize policy.


@jit(nopython=True)
def _find_connections_numba(positions, max_distance):
    """
    Numba-jitted brute-force search over every unordered particle pair.
    """
    particle_count = positions.shape[0]
    capacity = particle_count * (particle_count - 1) // 2
    pairs = np.empty((capacity, 2), dtype=np.int64)
    distances = np.empty(capacity, dtype=np.float64)
    count = 0

    for i in range(particle_count):
        for j in range(i + 1, particle_count):
            dx = positions[i, 0] - positions[j, 0]
            dy = positions[i, 1] - positions[j, 1]
            distance = np.sqrt(dx * dx + dy * dy)
            if distance < max_distance:
                pairs[count, 0] = i
                pairs[count, 1] = j
                distances[count] = distance
                count += 1

    return pairs[:count], distances[:count]


def find_connections(positions: np.ndarray, max_distance: float,
                     line_opacity: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Lists the particle pairs that get a connection line and their opacity.
    """
    positions = np.ascontiguousarray(positions, dtype=np.float64)
    if max_distance <= 0 or positions.shape[0] < 2:
        return np.empty((0, 2), dtype=np.int64), np.empty(0, dtype=np.float64)

    pairs, distances = _find_connections_numba(positions, np.float64(max_distance))
    opacities = (1.0 - distances / max_distance) * line_opacity
    return pairs, opacities


class Simulation:
    """
    Integrates particle motion and holds the shared mouse/viewport state.
    """
    def __init__(self, particles: ParticleSystem, settings: NetworkSettings,
                 width: int, height: int):
        self.particles = particles
        self.repel_distance = settings.mouse_repel_distance
        self.resize_policy = settings.resize_policy
        self.width = width
        self.height = height

        # None until the first pointer move; touch-only hosts never set it.
        self.mouse: Optional[Tuple[float, float]] = None

        logging.info(
            f"Simulation initialized for a {width}x{height} viewport "
            f"(repel distance {self.repel_distance}, resize policy '{self.resize_policy}')."
        )

    def set_mouse(self, x: float, y: float) -> None:
        self.mouse = (float(x), float(y))

    def resize(self, width: int, height: int) -> None:
        """
        Resyncs the viewport. Particles outside the new bounds are handled
        according to the resize policy:

        - "keep": left where they are until they drift back in.
        - "clamp": moved onto the nearest point of the new viewport.
        - "regenerate": the whole set is re-seeded.
        """
        self.width = width
        self.height = height

        if self.resize_policy == "clamp":
            np.clip(self.particles.positions[:, 0], 0, width, out=self.particles.positions[:, 0])
            np.clip(self.particles.positions[:, 1], 0, height, out=self.particles.positions[:, 1])
        elif self.resize_policy == "regenerate":
            self.particles.regenerate(width, height)

        logging.info(f"Viewport resized to {width}x{height}.")

    def step(self):
        """
        Executes one frame of particle motion.
        """
        pos = self.particles.positions
        vel = self.particles.velocities

        # 1. Euler step with an implicit unit time step per frame
        pos += vel

        # 2. Bounce off edges using the post-move position. Positions are
        #    not clamped, so correction lags one frame.
        out_x = (pos[:, 0] < 0) | (pos[:, 0] > self.width)
        out_y = (pos[:, 1] < 0) | (pos[:, 1] > self.height)
        vel[out_x, 0] *= -1
        vel[out_y, 1] *= -1

        # 3. Mouse repulsion
        if self.mouse is not None:
            self._apply_mouse_repulsion(pos)

    def _apply_mouse_repulsion(self, pos: np.ndarray) -> None:
        """
        Pushes particles within the repel distance straight away from the
        mouse, with a force falling linearly from 1 at the mouse to 0 at
        the edge of the radius.
        """
        delta = np.asarray(self.mouse) - pos
        distance = np.hypot(delta[:, 0], delta[:, 1])

        # A particle sitting exactly on the mouse has no direction to go.
        near = (distance < self.repel_distance) & (distance > 0)
        if not near.any():
            return

        force = (self.repel_distance - distance[near]) / self.repel_distance
        direction = delta[near] / distance[near, np.newaxis]
        pos[near] -= direction * force[:, np.newaxis] * REPEL_DISPLACEMENT
