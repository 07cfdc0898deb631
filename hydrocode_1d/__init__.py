"""
Hydrocode - 1D Godunov/GRP Solver for the Compressible Euler Equations

Finite volume schemes on Eulerian (fixed) or Lagrangian (moving) grids,
first order (exact Riemann solver) or second order (linear GRP solver
with minmod-limited slopes).
"""

from .config import HydroConfig
from .eulerian import EulerianSolver
from .exact_solution import ExactRiemannSolution
from .exceptions import (
    ConfigurationError,
    DataReadError,
    DirectoryError,
    HydroError,
    PhysicalValidityError,
    RiemannSolverError,
    VacuumError,
)
from .grp import linear_grp_solver_eulerian, linear_grp_solver_lagrangian
from .lagrangian import LagrangianSolver
from .riemann import riemann_solver_exact, riemann_solver_exact_toro
from .solver import SolverResult

__version__ = "0.2.0"
__all__ = [
    "HydroConfig",
    "EulerianSolver",
    "LagrangianSolver",
    "SolverResult",
    "make_solver",
    "ExactRiemannSolution",
    "riemann_solver_exact",
    "riemann_solver_exact_toro",
    "linear_grp_solver_eulerian",
    "linear_grp_solver_lagrangian",
    "HydroError",
    "ConfigurationError",
    "RiemannSolverError",
    "VacuumError",
    "PhysicalValidityError",
    "DirectoryError",
    "DataReadError",
]


def make_solver(config, rho, u, p):
    """Eulerian or Lagrangian 1D solver, as configured."""
    if config.coordinate == 'LAG':
        return LagrangianSolver(config, rho, u, p)
    return EulerianSolver(config, rho, u, p)
