import logging

import numpy as np
import warp as wp

from dem_contact.data.particles import ParticleSet
from dem_contact.operator.operator import Operator

logger = logging.getLogger(__name__)


class ParticleAllocator(Operator):

    def _positions(self, name, values, nr_particles, device):

        # Zero positions when none given
        if values is None:
            return wp.zeros(nr_particles, dtype=wp.float32, device=device)

        values = np.asarray(values, dtype=np.float32)
        if values.shape != (nr_particles,):
            raise ValueError(
                f"Initial {name} positions must have shape ({nr_particles},), got {values.shape}"
            )
        return wp.array(values, dtype=wp.float32, device=device)

    def __call__(
        self,
        nr_particles: int,
        x=None,
        y=None,
        device=None,
    ):

        if nr_particles < 0:
            raise ValueError(f"nr_particles must be non-negative, got {nr_particles}")

        # Allocate the particle data
        particles = ParticleSet()

        # Positions
        particles.x = self._positions("x", x, nr_particles, device)
        particles.y = self._positions("y", y, nr_particles, device)

        # Force accumulators start at zero
        particles.fx = wp.zeros(nr_particles, dtype=wp.float32, device=device)
        particles.fy = wp.zeros(nr_particles, dtype=wp.float32, device=device)

        logger.info(f"Allocated {nr_particles} particles on {particles.fx.device}")

        return particles
