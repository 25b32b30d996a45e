import warp as wp

wp.init()

@wp.struct
class ParticleSet:
    # Particle positions
    x: wp.array(dtype=wp.float32)
    y: wp.array(dtype=wp.float32)

    # Force accumulators
    fx: wp.array(dtype=wp.float32)
    fy: wp.array(dtype=wp.float32)
