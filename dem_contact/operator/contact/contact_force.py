# Brute force pairwise contact forces between two particle sets

import numpy as np
import warp as wp

from dem_contact.functional.contact import sum_contact_force
from dem_contact.operator.operator import Operator

STIFFNESS = 1.0e5

PARTITIONS = ("contiguous", "interleaved")


def check_particle_lengths(dest_x, dest_y, dest_fx, dest_fy, src_x, src_y):
    """
    Raise ValueError unless the destination arrays share one length and the
    source arrays share another. Works on anything with a ``shape``.
    """
    dest = {
        "dest_x": dest_x.shape[0],
        "dest_y": dest_y.shape[0],
        "dest_fx": dest_fx.shape[0],
        "dest_fy": dest_fy.shape[0],
    }
    if len(set(dest.values())) != 1:
        lengths = ", ".join(f"{name}={n}" for name, n in dest.items())
        raise ValueError(f"Destination arrays must have equal lengths, got {lengths}")
    if src_x.shape[0] != src_y.shape[0]:
        raise ValueError(
            f"Source arrays must have equal lengths, got src_x={src_x.shape[0]}, src_y={src_y.shape[0]}"
        )


def _byte_span(array: wp.array):
    if array.shape[0] == 0 or array.ptr is None:
        return None
    start = array.ptr
    end = start + (array.shape[0] - 1) * array.strides[0] + wp.types.type_size_in_bytes(array.dtype)
    return start, end


def _element_addresses(array: wp.array):
    return array.ptr + np.arange(array.shape[0], dtype=np.int64) * array.strides[0]


def _overlaps(a: wp.array, b: wp.array):
    span_a = _byte_span(a)
    span_b = _byte_span(b)
    if span_a is None or span_b is None:
        return False
    if not (span_a[0] < span_b[1] and span_b[0] < span_a[1]):
        return False

    # Strided views can interleave inside one byte range without sharing an element
    if a.is_contiguous and b.is_contiguous:
        return True
    return np.intersect1d(_element_addresses(a), _element_addresses(b)).size > 0


class ContactForce(Operator):
    """
    Accumulate linear repulsive contact forces into destination particles.

    For every destination i and source j this adds ``K * (dest_x[i] - src_x[j])``
    to ``dest_fx[i]`` and ``K * (dest_y[i] - src_y[j])`` to ``dest_fy[i]``.
    There is no cutoff or distance normalisation, and identical particles
    contribute zero.

    The destination index range is split into ``nr_workers`` disjoint slices,
    one per warp thread. Every worker runs the full loop over the sources for
    its own slice, so each accumulator has exactly one writer and no atomics
    are needed. On CUDA devices the workers run concurrently. On the warp
    ``"cpu"`` device a launch executes its threads one after another, so
    there ``nr_workers`` only changes how the work is divided, not how many
    cores run it.

    Parameters
    ----------
    stiffness : float
        Constant converting a positional offset into a force.
    nr_workers : int, optional
        Number of workers to split the destinations over. Defaults to one
        worker per destination particle.
    partition : str
        ``"contiguous"`` hands each worker a block of consecutive indices,
        ``"interleaved"`` hands worker w the indices w, w + nr_workers, ...
    """

    def __init__(
        self,
        stiffness: float = STIFFNESS,
        nr_workers: int = None,
        partition: str = "contiguous",
    ):

        if nr_workers is not None and nr_workers < 1:
            raise ValueError(f"nr_workers must be at least 1, got {nr_workers}")

        # Set partition kernel
        if partition == "contiguous":
            self._kernel = ContactForce._contact_force_contiguous
        elif partition == "interleaved":
            self._kernel = ContactForce._contact_force_interleaved
        else:
            raise ValueError(
                f"Partition {partition} not supported, expected one of {PARTITIONS}"
            )

        self.stiffness = stiffness
        self.nr_workers = nr_workers
        self.partition = partition

    @wp.kernel
    def _contact_force_contiguous(
        dest_x: wp.array(dtype=wp.float32),
        dest_y: wp.array(dtype=wp.float32),
        dest_fx: wp.array(dtype=wp.float32),
        dest_fy: wp.array(dtype=wp.float32),
        src_x: wp.array(dtype=wp.float32),
        src_y: wp.array(dtype=wp.float32),
        stiffness: wp.float32,
        nr_workers: wp.int32,
    ):
        # Get worker index
        worker = wp.tid()

        # Block of destination indices owned by this worker
        chunk_size = (dest_x.shape[0] + nr_workers - 1) // nr_workers
        start = worker * chunk_size
        end = wp.min(start + chunk_size, dest_x.shape[0])

        for i in range(start, end):
            f = sum_contact_force(dest_x[i], dest_y[i], src_x, src_y, stiffness)
            dest_fx[i] = dest_fx[i] + f[0]
            dest_fy[i] = dest_fy[i] + f[1]

    @wp.kernel
    def _contact_force_interleaved(
        dest_x: wp.array(dtype=wp.float32),
        dest_y: wp.array(dtype=wp.float32),
        dest_fx: wp.array(dtype=wp.float32),
        dest_fy: wp.array(dtype=wp.float32),
        src_x: wp.array(dtype=wp.float32),
        src_y: wp.array(dtype=wp.float32),
        stiffness: wp.float32,
        nr_workers: wp.int32,
    ):
        # Get worker index
        worker = wp.tid()

        # Every nr_workers-th destination index starting at the worker index
        for i in range(worker, dest_x.shape[0], nr_workers):
            f = sum_contact_force(dest_x[i], dest_y[i], src_x, src_y, stiffness)
            dest_fx[i] = dest_fx[i] + f[0]
            dest_fy[i] = dest_fy[i] + f[1]

    def _check_inputs(self, dest_x, dest_y, dest_fx, dest_fy, src_x, src_y):

        arrays = {
            "dest_x": dest_x,
            "dest_y": dest_y,
            "dest_fx": dest_fx,
            "dest_fy": dest_fy,
            "src_x": src_x,
            "src_y": src_y,
        }

        # Array types
        for name, array in arrays.items():
            if not isinstance(array, wp.array):
                raise ValueError(f"{name} must be a warp array, got {type(array).__name__}")
            if array.ndim != 1:
                raise ValueError(f"{name} must be 1-d, got {array.ndim} dimensions")
            if array.dtype != wp.float32:
                raise ValueError(f"{name} must have dtype float32, got {array.dtype}")

        check_particle_lengths(dest_x, dest_y, dest_fx, dest_fy, src_x, src_y)

        # All arrays on the same device
        device = dest_fx.device
        for name, array in arrays.items():
            if array.device != device:
                raise ValueError(
                    f"{name} is on device {array.device}, expected {device}"
                )

        # Force accumulators must not share memory with anything else
        for force_name in ("dest_fx", "dest_fy"):
            for name, array in arrays.items():
                if name == force_name:
                    continue
                if _overlaps(arrays[force_name], array):
                    raise ValueError(f"{force_name} aliases {name}")

    def __call__(
        self,
        dest_x: wp.array,
        dest_y: wp.array,
        dest_fx: wp.array,
        dest_fy: wp.array,
        src_x: wp.array,
        src_y: wp.array,
    ):

        # Reject bad inputs before any accumulator is touched
        self._check_inputs(dest_x, dest_y, dest_fx, dest_fy, src_x, src_y)

        # Nothing to add
        nr_dest = dest_x.shape[0]
        if nr_dest == 0 or src_x.shape[0] == 0:
            return dest_fx, dest_fy

        # Get number of workers
        if self.nr_workers is None:
            nr_workers = nr_dest
        else:
            nr_workers = min(self.nr_workers, nr_dest)

        # Accumulate forces
        wp.launch(
            self._kernel,
            inputs=[
                dest_x,
                dest_y,
                dest_fx,
                dest_fy,
                src_x,
                src_y,
                self.stiffness,
                nr_workers,
            ],
            dim=nr_workers,
            device=dest_fx.device,
        )

        # Forces are complete once every worker has finished
        wp.synchronize_device(dest_fx.device)

        return dest_fx, dest_fy


def accumulate_contact_forces(
    dest_x: wp.array,
    dest_y: wp.array,
    dest_fx: wp.array,
    dest_fy: wp.array,
    src_x: wp.array,
    src_y: wp.array,
    stiffness: float = STIFFNESS,
    nr_workers: int = None,
    partition: str = "contiguous",
):
    """
    Functional form of ``ContactForce``.
    """
    contact_force = ContactForce(
        stiffness=stiffness,
        nr_workers=nr_workers,
        partition=partition,
    )
    return contact_force(dest_x, dest_y, dest_fx, dest_fy, src_x, src_y)
