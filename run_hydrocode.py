#!/usr/bin/env python3
"""
Godunov/GRP hydrocode - file driven runner

Reads initial fields and configuration from an input directory, runs
the 1D (Eulerian or Lagrangian) or 2D (Eulerian, dimensionally split)
hydrocode and writes the results to an output directory.

Usage:
    python run_hydrocode.py INPUT OUTPUT DIM ORDER[_SCHEME] COORD [n=C ...]

    e.g. python run_hydrocode.py data_in/sod data_out/sod 1 2_GRP EUL 5=100

    - DIM:    1 or 2
    - ORDER:  1 (Godunov) or 2 (GRP)
    - SCHEME: Riemann_exact, Godunov, GRP or Toro (exact solver with
              adaptive initial guess)
    - COORD:  EUL or LAG
    - n=C:    set configuration slot n to C (overrides config.txt)

Exit status:
    0  success
    1  file directory error
    2  data reading error
    3  calculation error
    4  arguments error
    5  memory error
"""

import argparse
import logging
import sys

from hydrocode_1d import make_solver
from hydrocode_1d.config import HydroConfig, apply_overrides
from hydrocode_1d.exceptions import (
    ConfigurationError,
    DataReadError,
    DirectoryError,
    PhysicalValidityError,
    RiemannSolverError,
)
from hydrocode_1d.file_io import read_config, read_initial_fields, write_results
from hydrocode_2d import EulerianSolver2D

log = logging.getLogger('hydrocode')

EXIT_SUCCESS = 0
EXIT_DIRECTORY = 1
EXIT_DATA = 2
EXIT_CALCULATION = 3
EXIT_ARGUMENT = 4
EXIT_MEMORY = 5

SCHEMES = {
    '': 'exact',
    'riemann_exact': 'exact',
    'godunov': 'exact',
    'grp': 'exact',
    'toro': 'toro',
    'riemann_exact_toro': 'toro',
}


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors with the argument exit status."""

    def error(self, message):
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        raise SystemExit(EXIT_ARGUMENT)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = ArgumentParser(
        description='Godunov/GRP hydrocode for the compressible Euler equations')
    parser.add_argument('input', help='Directory with RHO/U/P[/V].txt and config.txt')
    parser.add_argument('output', help='Directory for the numerical results')
    parser.add_argument('dim', type=int, choices=[1, 2], help='Dimension')
    parser.add_argument('order_scheme', metavar='ORDER[_SCHEME]',
                        help='Order of the scheme, e.g. 1, 2, 1_Godunov or 2_GRP')
    parser.add_argument('coordinate', choices=['EUL', 'LAG'],
                        help='Coordinate framework')
    parser.add_argument('overrides', nargs='*', metavar='n=C',
                        help='Configuration supplements')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print detailed progress')
    return parser.parse_args(argv)


def parse_order(order_scheme):
    """Split 'ORDER[_SCHEME]' into the order and the Riemann solver name."""
    order, _, scheme = order_scheme.partition('_')
    try:
        order = int(order)
    except ValueError:
        raise ConfigurationError(f"No order or wrong scheme: '{order_scheme}'") from None
    if scheme.lower() not in SCHEMES:
        raise ConfigurationError(f"No order or wrong scheme: '{order_scheme}'")
    return order, SCHEMES[scheme.lower()]


def build_config(args, vector):
    """Combine config.txt slots with the command line."""
    order, solver = parse_order(args.order_scheme)
    vector = vector.copy()
    vector[0] = args.dim
    vector[8] = 0 if args.coordinate == 'EUL' else 1
    vector[9] = order
    vector = apply_overrides(vector, args.overrides)
    return HydroConfig.from_vector(vector, riemann_solver=solver)


def run(args):
    """Run one case; returns the exit status."""
    vector = read_config(args.input)
    config = build_config(args, vector)
    fields = read_initial_fields(args.input, dim=config.dim)

    if config.dim == 2:
        solver = EulerianSolver2D(config, fields['rho'], fields['u'], fields['v'], fields['p'])
    else:
        solver = make_solver(config, fields['rho'], fields['u'], fields['p'])

    result = solver.solve()
    write_results(args.output, result, config)

    print(f"{result.steps} time steps, t = {result.time:.6g}, "
          f"CPU time {result.cpu_time.sum():.4g} s ({result.status})")
    if result.failed:
        print(f"Calculation stopped early: {result.failure}")
        return EXIT_CALCULATION
    return EXIT_SUCCESS


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s %(name)s: %(message)s')

    print(' '.join(sys.argv if argv is None else ['run_hydrocode.py', *argv]))
    print(f"TEST:\n  {args.input}")

    try:
        return run(args)
    except DirectoryError as err:
        log.error("%s", err)
        return EXIT_DIRECTORY
    except DataReadError as err:
        log.error("%s", err)
        return EXIT_DATA
    except ConfigurationError as err:
        log.error("%s", err)
        return EXIT_ARGUMENT
    except (RiemannSolverError, PhysicalValidityError) as err:
        log.error("%s", err)
        return EXIT_CALCULATION
    except MemoryError:
        log.error("NOT enough memory!")
        return EXIT_MEMORY


if __name__ == '__main__':
    sys.exit(main())
