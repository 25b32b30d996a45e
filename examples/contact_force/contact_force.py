# Self interacting particle set stepped with the brute force contact kernel

import argparse
import logging
import time

import numpy as np
import warp as wp

from dem_contact.solver import ContactSolver, SimulationConfig

# Make command line parser
parser = argparse.ArgumentParser(description="Brute force contact force benchmark")
parser.add_argument("--nr_particles", type=int, default=4000, help="Nr particles")
parser.add_argument("--stiffness", type=float, default=1.0e5, help="Stiffness")
parser.add_argument("--tf", type=float, default=1.0, help="Final time")
parser.add_argument("--dt", type=float, default=1.0e-3, help="Time step")
parser.add_argument("--no_reset", action="store_true", help="Keep accumulating forces across steps")
parser.add_argument("--nr_workers", type=int, default=None, help="Nr workers, defaults to one per particle")
parser.add_argument("--partition", type=str, default="contiguous", help="contiguous or interleaved")
parser.add_argument("--random_positions", action="store_true", help="Start from uniform random positions instead of zeros")
parser.add_argument("--device", type=str, default=None, help="Warp device")
args = parser.parse_args()

if __name__ == "__main__":

    # Make logging
    logging.basicConfig(level=logging.INFO)

    config = SimulationConfig(
        nr_particles=args.nr_particles,
        stiffness=args.stiffness,
        tf=args.tf,
        dt=args.dt,
        reset_forces=not args.no_reset,
        nr_workers=args.nr_workers,
        partition=args.partition,
        device=args.device,
    )

    # Log the parameters
    logging.info(f"Nr particles: {config.nr_particles}")
    logging.info(f"Stiffness: {config.stiffness}")
    logging.info(f"Final time: {config.tf}")
    logging.info(f"Time step: {config.dt}")
    logging.info(f"Reset forces: {config.reset_forces}")
    logging.info(f"Nr workers: {config.nr_workers}")
    logging.info(f"Partition: {config.partition}")

    # Initial positions
    if args.random_positions:
        rng = np.random.default_rng(0)
        x = rng.random(config.nr_particles, dtype=np.float32)
        y = rng.random(config.nr_particles, dtype=np.float32)
    else:
        x = None
        y = None

    # Make solver
    solver = ContactSolver.from_config(config, x=x, y=y)

    # Run
    tic = time.time()
    nr_steps = solver.run(tf=config.tf, dt=config.dt, progress=True)
    wp.synchronize()
    toc = time.time()

    # Report throughput
    nr_pairs = config.nr_particles**2 * nr_steps
    logging.info(f"Steps: {nr_steps}")
    logging.info(f"Time: {toc - tic}")
    logging.info(f"Million pair interactions per second: {nr_pairs / (toc - tic) / 1.0e6}")
    logging.info(f"Max |fx|: {np.abs(solver.particles.fx.numpy()).max(initial=0.0)}")
