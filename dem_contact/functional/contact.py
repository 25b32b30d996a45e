import warp as wp

@wp.func
def sum_contact_force(
    x_i: wp.float32,
    y_i: wp.float32,
    src_x: wp.array(dtype=wp.float32),
    src_y: wp.array(dtype=wp.float32),
    stiffness: wp.float32,
):
    """
    Linear repulsion felt at (x_i, y_i) summed over every source particle.
    """
    fx = wp.float32(0.0)
    fy = wp.float32(0.0)
    for j in range(src_x.shape[0]):
        dx = x_i - src_x[j]
        dy = y_i - src_y[j]
        fx += stiffness * dx
        fy += stiffness * dy
    return wp.vec2(fx, fy)
