# Fixed step driver for the contact force kernel

import logging
from dataclasses import dataclass
import math

from tqdm import tqdm

from dem_contact.data.particles import ParticleSet
from dem_contact.operator.allocator import ParticleAllocator
from dem_contact.operator.contact import ContactForce, STIFFNESS
from dem_contact.operator.reset import ForceReset

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    nr_particles: int = 4000
    stiffness: float = STIFFNESS
    tf: float = 1.0
    dt: float = 1.0e-3
    reset_forces: bool = True
    nr_workers: int = None
    partition: str = "contiguous"
    device: str = None


class ContactSolver:
    """
    Steps a particle set forward by applying the contact force of the set on
    itself once per time step.

    With ``reset_forces`` the accumulators are zeroed at the start of every
    step, so after a step they hold that step's forces only. Without it the
    forces keep accumulating from step to step.
    """

    def __init__(
        self,
        particles: ParticleSet,
        contact_force: ContactForce = None,
        reset_forces: bool = True,
    ):
        if contact_force is None:
            contact_force = ContactForce()
        self.particles = particles
        self.contact_force = contact_force
        self.force_reset = ForceReset()
        self.reset_forces = reset_forces

    @classmethod
    def from_config(cls, config: SimulationConfig, x=None, y=None):
        particles = ParticleAllocator()(
            nr_particles=config.nr_particles,
            x=x,
            y=y,
            device=config.device,
        )
        contact_force = ContactForce(
            stiffness=config.stiffness,
            nr_workers=config.nr_workers,
            partition=config.partition,
        )
        return cls(particles, contact_force=contact_force, reset_forces=config.reset_forces)

    def step(self):
        if self.reset_forces:
            self.particles = self.force_reset(self.particles)
        self.contact_force(
            self.particles.x,
            self.particles.y,
            self.particles.fx,
            self.particles.fy,
            self.particles.x,
            self.particles.y,
        )
        return self.particles

    def run(self, tf: float = 1.0, dt: float = 1.0e-3, progress: bool = False):
        """
        Step until the countdown ``tf`` is no longer positive, reducing it by
        ``dt`` after every step. Returns the number of steps taken.
        """
        if dt <= 0.0:
            raise ValueError(f"dt must be positive, got {dt}")

        logger.info(
            f"Running {self.particles.x.shape[0]} particles, tf={tf}, dt={dt}, reset_forces={self.reset_forces}"
        )

        nr_steps = 0
        with tqdm(total=max(math.ceil(tf / dt), 0), disable=not progress) as pbar:
            while tf > 0.0:
                self.step()
                tf = tf - dt
                nr_steps += 1
                pbar.update(1)

        logger.debug(f"Finished after {nr_steps} steps")
        return nr_steps
