"""
Exact Riemann solvers for the 1D Euler equations of a perfect gas.

Given left/right states, the star-region pressure p* solves

    f(p) = f_L(p) + f_R(p) + (u_R - u_L) = 0

where f_K is the shock (p > p_K) or rarefaction (p <= p_K) branch of the
pressure function. Both solvers use Newton iteration; they differ in the
initial guess and in the convergence test:

- ``riemann_solver_exact``: two-rarefaction guess, stops when the
  relative change of p drops below ``tol`` or |f| < eps.
- ``riemann_solver_exact_toro``: Toro's adaptive guess (PVRS, TRRS or
  TSRS depending on the pressure ratio), stops on the relative pressure
  change 2|p - p_old|/(p + p_old) < tol.

The solvers have no vacuum branch: a vacuum-generating problem raises
``VacuumError``.
"""

import enum
import math
from dataclasses import dataclass

from .exceptions import ConfigurationError, RiemannSolverError, VacuumError
from .state import Primitive


class WaveType(enum.Enum):
    """Classification of an acoustic wave in the Riemann solution."""

    NONE = 0
    RAREFACTION = 1
    SHOCK = 2


@dataclass(frozen=True)
class RiemannSolution:
    """Star-region solution of a Riemann problem."""

    u_star: float
    p_star: float
    rho_star_left: float
    rho_star_right: float
    left_wave: WaveType
    right_wave: WaveType
    iterations: int = 0

    @property
    def is_rarefaction(self):
        """Per-family rarefaction flags (zero-strength waves count as rarefactions)."""
        return (self.left_wave is not WaveType.SHOCK,
                self.right_wave is not WaveType.SHOCK)


class _GasConstants:
    """Frequently used combinations of gamma."""

    def __init__(self, gamma):
        self.gamma = gamma
        self.g1 = (gamma - 1) / (2 * gamma)
        self.g2 = (gamma + 1) / (2 * gamma)
        self.g3 = 2 * gamma / (gamma - 1)
        self.g4 = 2 / (gamma - 1)
        self.g5 = 2 / (gamma + 1)
        self.g6 = (gamma - 1) / (gamma + 1)
        self.g7 = (gamma - 1) / 2


def _pressure_function(p, rho_K, p_K, c_K, g):
    """Pressure function f_K(p) and its derivative."""
    if p > p_K:
        # Shock wave
        A = g.g5 / rho_K
        B = g.g6 * p_K
        root = math.sqrt(A / (p + B))
        f = (p - p_K) * root
        df = root * (1 - (p - p_K) / (2 * (p + B)))
    else:
        # Rarefaction wave
        ratio = p / p_K
        f = g.g4 * c_K * (ratio**g.g1 - 1)
        df = 1 / (rho_K * c_K) * ratio**(-g.g2)
    return f, df


def _check_vacuum(u_L, u_R, c_L, c_R, g):
    if g.g4 * (c_L + c_R) <= u_R - u_L:
        raise VacuumError(
            f"Vacuum is generated: u_R - u_L = {u_R - u_L:g} >= {g.g4 * (c_L + c_R):g}")


def _two_rarefaction_guess(u_L, u_R, p_L, p_R, c_L, c_R, g):
    num = c_L + c_R - g.g7 * (u_R - u_L)
    den = c_L / p_L**g.g1 + c_R / p_R**g.g1
    return (num / den)**(1 / g.g1)


def _star_solution(p_star, rho_L, u_L, p_L, c_L, rho_R, u_R, p_R, c_R, g, tol, iterations):
    f_L, _ = _pressure_function(p_star, rho_L, p_L, c_L, g)
    f_R, _ = _pressure_function(p_star, rho_R, p_R, c_R, g)
    u_star = 0.5 * (u_L + u_R) + 0.5 * (f_R - f_L)

    waves = []
    densities = []
    for rho_K, p_K in ((rho_L, p_L), (rho_R, p_R)):
        if abs(p_star - p_K) <= tol * p_K:
            waves.append(WaveType.NONE)
            densities.append(rho_K * (p_star / p_K)**(1 / g.gamma))
        elif p_star > p_K:
            waves.append(WaveType.SHOCK)
            densities.append(rho_K * (p_star / p_K + g.g6) / (g.g6 * p_star / p_K + 1))
        else:
            waves.append(WaveType.RAREFACTION)
            densities.append(rho_K * (p_star / p_K)**(1 / g.gamma))

    return RiemannSolution(u_star=u_star, p_star=p_star,
                           rho_star_left=densities[0], rho_star_right=densities[1],
                           left_wave=waves[0], right_wave=waves[1],
                           iterations=iterations)


def riemann_solver_exact(rho_L, u_L, p_L, rho_R, u_R, p_R, gamma,
                         c_L=None, c_R=None, eps=1e-9, tol=1e-12, max_iter=500):
    """
    Exact Riemann solver, Newton iteration from the two-rarefaction guess.

    Parameters
    ----------
    rho_L, u_L, p_L : float
        Left state
    rho_R, u_R, p_R : float
        Right state
    gamma : float
        Ratio of specific heats
    c_L, c_R : float, optional
        Sound speeds (computed when omitted)
    eps : float
        Residual |f(p)| below which p is accepted
    tol : float
        Relative pressure change tolerance
    max_iter : int
        Iteration cap

    Returns
    -------
    RiemannSolution

    Raises
    ------
    VacuumError
        If the data generate a vacuum
    RiemannSolverError
        If the iteration does not converge within max_iter
    """
    g = _GasConstants(gamma)
    if c_L is None:
        c_L = math.sqrt(gamma * p_L / rho_L)
    if c_R is None:
        c_R = math.sqrt(gamma * p_R / rho_R)
    _check_vacuum(u_L, u_R, c_L, c_R, g)

    p_old = _two_rarefaction_guess(u_L, u_R, p_L, p_R, c_L, c_R, g)
    du = u_R - u_L

    for k in range(1, max_iter + 1):
        f_L, df_L = _pressure_function(p_old, rho_L, p_L, c_L, g)
        f_R, df_R = _pressure_function(p_old, rho_R, p_R, c_R, g)
        f = f_L + f_R + du
        if abs(f) < eps:
            return _star_solution(p_old, rho_L, u_L, p_L, c_L, rho_R, u_R, p_R, c_R,
                                  g, tol, k)

        p_new = p_old - f / (df_L + df_R)
        if p_new <= 0.0:
            # Keep the iterate positive
            p_new = 0.5 * p_old

        if abs(p_new - p_old) <= tol * 0.5 * (p_new + p_old):
            return _star_solution(p_new, rho_L, u_L, p_L, c_L, rho_R, u_R, p_R, c_R,
                                  g, tol, k)
        p_old = p_new

    raise RiemannSolverError(
        f"Riemann iteration failed to converge in {max_iter} steps (p = {p_old:g})")


def _toro_guess(rho_L, u_L, p_L, c_L, rho_R, u_R, p_R, c_R, g):
    """Adaptive initial guess (PVRS / TRRS / TSRS)."""
    q_user = 2.0
    cup = 0.25 * (rho_L + rho_R) * (c_L + c_R)
    ppv = max(0.0, 0.5 * (p_L + p_R) + 0.5 * (u_L - u_R) * cup)
    p_min = min(p_L, p_R)
    p_max = max(p_L, p_R)

    if p_max / p_min <= q_user and p_min <= ppv <= p_max:
        # Primitive variable Riemann solver
        return ppv
    if ppv < p_min:
        # Two-rarefaction Riemann solver
        return _two_rarefaction_guess(u_L, u_R, p_L, p_R, c_L, c_R, g)

    # Two-shock Riemann solver with PVRS as estimate
    ge_L = math.sqrt((g.g5 / rho_L) / (g.g6 * p_L + ppv))
    ge_R = math.sqrt((g.g5 / rho_R) / (g.g6 * p_R + ppv))
    return (ge_L * p_L + ge_R * p_R - (u_R - u_L)) / (ge_L + ge_R)


def riemann_solver_exact_toro(rho_L, u_L, p_L, rho_R, u_R, p_R, gamma,
                              c_L=None, c_R=None, eps=1e-9, tol=1e-12, max_iter=500):
    """
    Exact Riemann solver following Toro's algorithm.

    Same contract as ``riemann_solver_exact``.
    """
    g = _GasConstants(gamma)
    if c_L is None:
        c_L = math.sqrt(gamma * p_L / rho_L)
    if c_R is None:
        c_R = math.sqrt(gamma * p_R / rho_R)
    _check_vacuum(u_L, u_R, c_L, c_R, g)

    p_old = max(_toro_guess(rho_L, u_L, p_L, c_L, rho_R, u_R, p_R, c_R, g), eps)
    du = u_R - u_L

    for k in range(1, max_iter + 1):
        f_L, df_L = _pressure_function(p_old, rho_L, p_L, c_L, g)
        f_R, df_R = _pressure_function(p_old, rho_R, p_R, c_R, g)
        p_new = p_old - (f_L + f_R + du) / (df_L + df_R)
        if p_new < 0.0:
            p_new = eps

        change = 2.0 * abs(p_new - p_old) / (p_new + p_old)
        if change <= tol:
            return _star_solution(p_new, rho_L, u_L, p_L, c_L, rho_R, u_R, p_R, c_R,
                                  g, tol, k)
        p_old = p_new

    raise RiemannSolverError(
        f"Riemann iteration (Toro) failed to converge in {max_iter} steps (p = {p_old:g})")


RIEMANN_SOLVERS = {
    'exact': riemann_solver_exact,
    'toro': riemann_solver_exact_toro,
}


def get_riemann_solver(name):
    """Look up a Riemann solver by configuration name."""
    try:
        return RIEMANN_SOLVERS[name]
    except KeyError:
        raise ConfigurationError(f"Unknown Riemann solver: {name}") from None


def wave_speeds(solution, left, right, gamma):
    """
    Speeds bounding the two acoustic waves.

    Parameters
    ----------
    solution : RiemannSolution
    left, right : Primitive
    gamma : float

    Returns
    -------
    left_head, left_tail, right_tail, right_head : floats
        For a shock head and tail coincide with the shock speed.
    """
    g = _GasConstants(gamma)
    c_L = math.sqrt(gamma * left.p / left.rho)
    c_R = math.sqrt(gamma * right.p / right.rho)
    p_star, u_star = solution.p_star, solution.u_star

    if solution.left_wave is WaveType.SHOCK:
        S_L = left.u - c_L * math.sqrt(g.g2 * p_star / left.p + g.g1)
        left_head = left_tail = S_L
    else:
        c_star_L = c_L * (p_star / left.p)**g.g1
        left_head = left.u - c_L
        left_tail = u_star - c_star_L

    if solution.right_wave is WaveType.SHOCK:
        S_R = right.u + c_R * math.sqrt(g.g2 * p_star / right.p + g.g1)
        right_head = right_tail = S_R
    else:
        c_star_R = c_R * (p_star / right.p)**g.g1
        right_head = right.u + c_R
        right_tail = u_star + c_star_R

    return left_head, left_tail, right_tail, right_head


def sample(solution, left, right, gamma, s=0.0):
    """
    Self-similar Riemann solution at x/t = s.

    Parameters
    ----------
    solution : RiemannSolution
    left, right : Primitive
        Left and right initial states (v is carried as a passive scalar)
    gamma : float
    s : float
        Similarity variable (0 gives the Godunov interface state)

    Returns
    -------
    state : Primitive
    region : str
        'left', 'left_fan', 'star_left', 'star_right', 'right_fan' or 'right'
    """
    g = _GasConstants(gamma)
    left_head, left_tail, right_tail, right_head = wave_speeds(solution, left, right, gamma)
    u_star, p_star = solution.u_star, solution.p_star

    if s <= u_star:
        # Left of the contact
        if s < left_head:
            return left, 'left'
        if s >= left_tail:
            return Primitive(solution.rho_star_left, u_star, p_star, left.v), 'star_left'
        # Inside the left rarefaction fan
        c_L = math.sqrt(gamma * left.p / left.rho)
        u = g.g5 * (c_L + g.g7 * left.u + s)
        c = g.g5 * (c_L + g.g7 * (left.u - s))
        rho = left.rho * (c / c_L)**g.g4
        p = left.p * (c / c_L)**g.g3
        return Primitive(rho, u, p, left.v), 'left_fan'

    # Right of the contact
    if s > right_head:
        return right, 'right'
    if s <= right_tail:
        return Primitive(solution.rho_star_right, u_star, p_star, right.v), 'star_right'
    # Inside the right rarefaction fan
    c_R = math.sqrt(gamma * right.p / right.rho)
    u = g.g5 * (-c_R + g.g7 * right.u + s)
    c = g.g5 * (c_R - g.g7 * (right.u - s))
    rho = right.rho * (c / c_R)**g.g4
    p = right.p * (c / c_R)**g.g3
    return Primitive(rho, u, p, right.v), 'right_fan'
