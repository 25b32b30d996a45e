import pytest

import numpy as np

from dem_contact.operator.allocator import ParticleAllocator
from dem_contact.operator.contact import ContactForce
from dem_contact.solver import ContactSolver, SimulationConfig

X = [0.0, 1.0, 3.0, -2.0]
Y = [1.0, 0.5, -1.0, 2.0]


def _single_step_forces():
    particles = ParticleAllocator()(nr_particles=4, x=X, y=Y)
    ContactForce()(particles.x, particles.y, particles.fx, particles.fy, particles.x, particles.y)
    return particles.fx.numpy(), particles.fy.numpy()


def test_run_counts_steps():
    solver = ContactSolver(ParticleAllocator()(nr_particles=4, x=X, y=Y))
    assert solver.run(tf=1.0, dt=0.25) == 4


def test_run_with_non_positive_countdown():
    solver = ContactSolver(ParticleAllocator()(nr_particles=4, x=X, y=Y))
    assert solver.run(tf=0.0, dt=0.25) == 0
    np.testing.assert_array_equal(solver.particles.fx.numpy(), np.zeros(4))


def test_run_rejects_bad_time_step():
    solver = ContactSolver(ParticleAllocator()(nr_particles=4, x=X, y=Y))
    with pytest.raises(ValueError):
        solver.run(tf=1.0, dt=0.0)


def test_reset_keeps_single_step_forces():
    fx, fy = _single_step_forces()
    solver = ContactSolver(ParticleAllocator()(nr_particles=4, x=X, y=Y), reset_forces=True)
    solver.run(tf=1.0, dt=0.25)

    np.testing.assert_allclose(solver.particles.fx.numpy(), fx, rtol=1.0e-6)
    np.testing.assert_allclose(solver.particles.fy.numpy(), fy, rtol=1.0e-6)


def test_no_reset_accumulates_forces():
    fx, fy = _single_step_forces()
    solver = ContactSolver(ParticleAllocator()(nr_particles=4, x=X, y=Y), reset_forces=False)
    solver.run(tf=1.0, dt=0.25)

    np.testing.assert_allclose(solver.particles.fx.numpy(), 4.0 * fx, rtol=1.0e-6)
    np.testing.assert_allclose(solver.particles.fy.numpy(), 4.0 * fy, rtol=1.0e-6)


def test_from_config():
    config = SimulationConfig(nr_particles=16, nr_workers=3, partition="interleaved", reset_forces=False)
    solver = ContactSolver.from_config(config)

    assert solver.particles.x.shape == (16,)
    assert solver.contact_force.nr_workers == 3
    assert solver.contact_force.partition == "interleaved"
    assert not solver.reset_forces

    # Zero positions give zero forces
    solver.step()
    np.testing.assert_array_equal(solver.particles.fx.numpy(), np.zeros(16))


def test_step_with_progress_bar():
    solver = ContactSolver(ParticleAllocator()(nr_particles=4, x=X, y=Y))
    assert solver.run(tf=0.5, dt=0.25, progress=True) == 2
