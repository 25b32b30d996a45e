from dem_contact.data.particles import ParticleSet
from dem_contact.operator.operator import Operator


class ForceReset(Operator):
    """
    Zero the force accumulators of a particle set in place.
    """

    def __call__(
        self,
        particles: ParticleSet,
    ):
        particles.fx.zero_()
        particles.fy.zero_()
        return particles
