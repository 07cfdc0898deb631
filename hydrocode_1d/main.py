#!/usr/bin/env python3
"""
Sod Shock Tube Demo - Main Program

Solves the 1D Sod shock tube problem with the Godunov/GRP hydrocode.
Compares numerical solution with exact solution and generates visualizations.

Usage:
    python -m hydrocode_1d.main [options]

Options:
    --nx           Number of grid cells (default: 400)
    --cfl          CFL number (default: 0.45)
    --t_end        Final time (default: 0.2)
    --order        1 (Godunov) or 2 (GRP) (default: 2)
    --coordinate   'EUL' or 'LAG' (default: 'EUL')
    --boundary     Boundary condition (default: 'free')
    --alpha        Limiter parameter (default: 1.0)
    --solver       Riemann solver: 'exact' or 'toro' (default: 'exact')
    --output_dir   Output directory (default: 'output/results')
    --no_animation Skip animation generation
    --verbose      Print detailed progress
"""

import argparse
import logging
import os
import sys
import time

import numpy as np

from . import make_solver
from .config import HydroConfig
from .exact_solution import ExactRiemannSolution
from .visualization import Visualizer


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Sod Shock Tube with the Godunov/GRP hydrocode',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument('--nx', type=int, default=400,
                        help='Number of grid cells')
    parser.add_argument('--cfl', type=float, default=0.45,
                        help='CFL number for stability')
    parser.add_argument('--t_end', type=float, default=0.2,
                        help='Final simulation time')
    parser.add_argument('--gamma', type=float, default=1.4,
                        help='Ratio of specific heats')
    parser.add_argument('--order', type=int, default=2, choices=[1, 2],
                        help='Order of the scheme (1 Godunov, 2 GRP)')
    parser.add_argument('--coordinate', type=str, default='EUL',
                        choices=['EUL', 'LAG'],
                        help='Eulerian or Lagrangian coordinate')
    parser.add_argument('--boundary', type=str, default='free',
                        help='Boundary condition name or code')
    parser.add_argument('--alpha', type=float, default=1.0,
                        help='Limiter parameter')
    parser.add_argument('--solver', type=str, default='exact',
                        choices=['exact', 'toro'],
                        help='Riemann solver variant')
    parser.add_argument('--output_dir', type=str, default='output/results',
                        help='Output directory')
    parser.add_argument('--no_animation', action='store_true',
                        help='Skip animation generation')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print detailed progress')

    return parser.parse_args(argv)


def sod_initial_condition(nx, x_discontinuity=0.5):
    """Sod data on [0, 1] with nx cells."""
    h = 1.0 / nx
    x = (np.arange(nx) + 0.5) * h
    left = x < x_discontinuity
    rho = np.where(left, 1.0, 0.125)
    u = np.zeros(nx)
    p = np.where(left, 1.0, 0.1)
    return h, rho, u, p


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s %(name)s: %(message)s')

    scheme = 'GRP' if args.order == 2 else 'Godunov'
    print("=" * 60)
    print("Sod Shock Tube Solver")
    print("1D Compressible Euler Equations")
    print("=" * 60)

    print(f"\nConfiguration:")
    print(f"  Grid cells:    {args.nx}")
    print(f"  CFL number:    {args.cfl}")
    print(f"  Final time:    {args.t_end}")
    print(f"  Gamma:         {args.gamma}")
    print(f"  Scheme:        {scheme} ({args.coordinate})")
    print(f"  Boundary:      {args.boundary}")
    print(f"  Output dir:    {args.output_dir}")

    os.makedirs(args.output_dir, exist_ok=True)

    print("\n" + "-" * 60)
    print("Initializing solver...")
    h, rho0, u0, p0 = sod_initial_condition(args.nx)
    config = HydroConfig(gamma=args.gamma, total_time=args.t_end, cfl=args.cfl,
                         h=h, boundary=args.boundary, alpha=args.alpha,
                         order=args.order, coordinate=args.coordinate,
                         riemann_solver=args.solver)
    solver = make_solver(config, rho0, u0, p0)

    exact = ExactRiemannSolution(gamma=args.gamma, solver=args.solver)
    if args.verbose:
        exact.print_solution_info(t=args.t_end)

    print("\n" + "-" * 60)
    print("Running simulation...")
    start_time = time.time()
    result = solver.solve(save_interval=args.t_end / 100)
    elapsed = time.time() - start_time
    print(f"Simulation completed in {elapsed:.2f} seconds "
          f"({result.steps} steps, status: {result.status})")
    if result.failed:
        print(f"  {result.failure}")

    x = solver.cell_centers()
    rho, u, p = solver.get_solution()
    rho_exact, u_exact, p_exact = exact.sample(x, result.time, x_0=0.5)
    errors = solver.compute_errors(rho_exact, u_exact, p_exact)

    viz = Visualizer(output_dir=args.output_dir)
    viz.print_error_summary(errors)

    print("\n" + "-" * 60)
    print("Generating visualizations...")
    viz.plot_comparison(
        x, rho, u, p,
        rho_exact, u_exact, p_exact,
        title=f'Sod: {args.coordinate} {scheme}, m={args.nx}, t={result.time:.4f}',
        x_faces=result.final.x,
    )
    viz.plot_errors(x, rho, u, p, rho_exact, u_exact, p_exact)
    extra = {} if result.final.x is None else {'x_faces': result.final.x}
    viz.save_data(x, rho, u, p, result.time, steps=result.steps, **extra)

    if not args.no_animation:
        print("Generating animation (this may take a moment)...")
        frames = [(solver.cell_centers(s), s.rho, s.u, s.p) for s in result.history]
        viz.create_animation(frames, result.time_history, exact_solver=exact, fps=15)

    print("\n" + "-" * 60)
    print(f"Wave positions at t = {result.time:.4f}:")
    for name, pos in exact.get_wave_positions(result.time).items():
        print(f"  {name}: x = {pos:.4f}")

    print("\n" + "=" * 60)
    print("All outputs saved to:", args.output_dir)
    print("=" * 60)

    return 0 if not result.failed else 3


if __name__ == '__main__':
    sys.exit(main())
