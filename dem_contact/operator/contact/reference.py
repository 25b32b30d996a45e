# Sequential numpy versions of the contact force, used to check the warp kernel

import numpy as np

from dem_contact.operator.contact.contact_force import STIFFNESS, check_particle_lengths


def contact_force_loop(dest_x, dest_y, dest_fx, dest_fy, src_x, src_y, stiffness=STIFFNESS):
    """
    Plain double loop over destination and source indices.
    """
    check_particle_lengths(dest_x, dest_y, dest_fx, dest_fy, src_x, src_y)
    stiffness = np.float32(stiffness)
    for i in range(dest_x.shape[0]):
        for j in range(src_x.shape[0]):
            dx = dest_x[i] - src_x[j]
            dy = dest_y[i] - src_y[j]
            dest_fx[i] += stiffness * dx
            dest_fy[i] += stiffness * dy
    return dest_fx, dest_fy


def contact_force_iter(dest_x, dest_y, dest_fx, dest_fy, src_x, src_y, stiffness=STIFFNESS):
    """
    Same as ``contact_force_loop`` but walks the arrays in lock step instead
    of indexing them.
    """
    check_particle_lengths(dest_x, dest_y, dest_fx, dest_fy, src_x, src_y)
    stiffness = np.float32(stiffness)
    with np.nditer(
        [dest_fx, dest_fy, dest_x, dest_y],
        flags=["zerosize_ok"],
        op_flags=[["readwrite"], ["readwrite"], ["readonly"], ["readonly"]],
    ) as it:
        for fx_i, fy_i, x_i, y_i in it:
            for s_xj, s_yj in zip(src_x, src_y):
                fx_i[...] += stiffness * (x_i - s_xj)
                fy_i[...] += stiffness * (y_i - s_yj)
    return dest_fx, dest_fy


def contact_force_for_each(dest_x, dest_y, dest_fx, dest_fy, src_x, src_y, stiffness=STIFFNESS):
    """
    Lock step traversal where the work for one destination particle is a
    function applied to each element, the shape the parallel kernel takes.
    """
    check_particle_lengths(dest_x, dest_y, dest_fx, dest_fy, src_x, src_y)
    stiffness = np.float32(stiffness)

    def accumulate(fx_i, fy_i, x_i, y_i):
        for s_xj, s_yj in zip(src_x, src_y):
            fx_i[...] += stiffness * (x_i - s_xj)
            fy_i[...] += stiffness * (y_i - s_yj)

    with np.nditer(
        [dest_fx, dest_fy, dest_x, dest_y],
        flags=["zerosize_ok"],
        op_flags=[["readwrite"], ["readwrite"], ["readonly"], ["readonly"]],
    ) as it:
        for operands in it:
            accumulate(*operands)
    return dest_fx, dest_fy


def contact_force_numpy(
    dest_x,
    dest_y,
    dest_fx,
    dest_fy,
    src_x,
    src_y,
    stiffness=STIFFNESS,
    chunk_size=256,
):
    """
    Vectorised version, broadcasting ``chunk_size`` destinations against all
    sources at a time. Fast enough to check thousands of particles.
    """
    check_particle_lengths(dest_x, dest_y, dest_fx, dest_fy, src_x, src_y)
    stiffness = np.float32(stiffness)
    for start in range(0, dest_x.shape[0], chunk_size):
        stop = min(start + chunk_size, dest_x.shape[0])
        dx = dest_x[start:stop, None] - src_x[None, :]
        dy = dest_y[start:stop, None] - src_y[None, :]
        dest_fx[start:stop] += np.sum(stiffness * dx, axis=1, dtype=np.float32)
        dest_fy[start:stop] += np.sum(stiffness * dy, axis=1, dtype=np.float32)
    return dest_fx, dest_fy
