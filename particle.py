# particle.py
"""
Manages the state of all particles in the network.

This module defines the ParticleSystem class, which is responsible for
seeding and storing particle data (position, velocity, radius, color) in
NumPy arrays.
"""
import logging
import numpy as np
from typing import Optional

from constants import PARTICLE_RADIUS_MIN, PARTICLE_RADIUS_SPREAD
from settings import NetworkSettings

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, settings: NetworkSettings, width: int, height: int,
#              rng: Optional[np.random.Generator] = None):
#     - Inputs:
#       - settings: Validated NetworkSettings.
#         - "particle_count", "particle_speed", "node_colors", "seed"
#       - width, height: size of the viewport particles are seeded in.
#       - rng: Optional generator; defaults to one built from settings.seed.
#     - Side Effects: Initializes internal NumPy arrays for particle state.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 2) of dtype float64.
#       - self.radii is a NumPy array of shape (N,) of dtype float64.
#       - self.color_indices is a NumPy array of shape (N,) of dtype int32,
#         each entry a valid index into self.palette.
#
#   - regenerate(self, width: int, height: int) -> None:
#     - Side Effects: Discards every particle and seeds a new set.


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.

    Colors are not stored per particle: each particle holds an index into
    the shared, read-only palette.
    """
    def __init__(self, settings: NetworkSettings, width: int, height: int,
                 rng: Optional[np.random.Generator] = None):
        self.particle_count = settings.particle_count
        self.particle_speed = settings.particle_speed
        self.palette = settings.node_colors
        self.seed = settings.seed

        # All randomness of the effect comes from this generator.
        self.rng = rng if rng is not None else np.random.default_rng(self.seed)

        self.regenerate(width, height)

        logging.info(
            f"ParticleSystem initialized with {self.particle_count} "
            f"particles and {len(self.palette)} colors."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}, "
            f"Radii shape: {self.radii.shape}"
        )

    def regenerate(self, width: int, height: int) -> None:
        """Seeds a fresh particle set inside a width x height viewport."""
        n = self.particle_count
        self.positions = self.rng.uniform(
            low=[0.0, 0.0],
            high=[max(width, 0), max(height, 0)],
            size=(n, 2)
        )
        self.velocities = (self.rng.random((n, 2)) - 0.5) * self.particle_speed
        self.radii = self.rng.random(n) * PARTICLE_RADIUS_SPREAD + PARTICLE_RADIUS_MIN
        self.color_indices = self.rng.integers(
            low=0,
            high=len(self.palette),
            size=n,
            dtype=np.int32
        )

    def color_of(self, index: int):
        """Returns the palette entry shared by particle `index`."""
        return self.palette[self.color_indices[index]]

    def speeds(self) -> np.ndarray:
        """Speed magnitude of every particle."""
        return np.linalg.norm(self.velocities, axis=1)
