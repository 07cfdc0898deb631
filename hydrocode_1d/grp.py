"""
Linear GRP (Generalized Riemann Problem) solvers.

Initial data are piecewise linear: left/right states W_L, W_R with
slopes W'_L, W'_R. The zeroth-order interface state W* comes from the
exact Riemann solver; its time derivative is obtained from the
characteristic relations linearised about W*.

In the star region the material derivatives of u and p are continuous
across the contact and satisfy

    (Du/Dt) + (Dp/Dt) / (rho*_L c*_L) = -c*_L (u'_L + p'_L / (rho_L c_L))
    (Du/Dt) - (Dp/Dt) / (rho*_R c*_R) =  c*_R (u'_R - p'_R / (rho_R c_R))

(C+ arrives from the left data, C- from the right data). The density
follows from Drho/Dt = (Dp/Dt)/c^2 along particle paths. The Eulerian
solver converts material derivatives to derivatives at fixed x = 0;
when x = 0 lies outside the star region (supersonic data or a transonic
rarefaction) the derivative is the quasi-linear one, -A(W) W', taken at
the sampled state.
"""

import math
from dataclasses import dataclass

from .riemann import RiemannSolution, riemann_solver_exact, sample
from .state import Primitive


@dataclass(frozen=True)
class LagrangianGRP:
    """Interface solution of the Lagrangian GRP."""

    u_star: float
    p_star: float
    rho_star_left: float
    rho_star_right: float
    du_dt: float
    dp_dt: float
    drho_dt_left: float
    drho_dt_right: float
    solution: RiemannSolution


def quasi_linear_derivative(state, slope, gamma):
    """
    Time derivative -A(W) W_x of the primitive Euler system.

        rho_t = -(u rho_x + rho u_x)
        u_t   = -(u u_x + p_x / rho)
        p_t   = -(u p_x + rho c^2 u_x)
        v_t   = -u v_x
    """
    c2 = gamma * state.p / state.rho
    return Primitive(
        rho=-(state.u * slope.rho + state.rho * slope.u),
        u=-(state.u * slope.u + slope.p / state.rho),
        p=-(state.u * slope.p + state.rho * c2 * slope.u),
        v=-state.u * slope.v,
    )


def _material_derivatives(solution, left, right, s_left, s_right, gamma):
    """Solve the 2x2 characteristic system for (Du/Dt, Dp/Dt) at the contact."""
    c_L = math.sqrt(gamma * left.p / left.rho)
    c_R = math.sqrt(gamma * right.p / right.rho)
    c_star_L = math.sqrt(gamma * solution.p_star / solution.rho_star_left)
    c_star_R = math.sqrt(gamma * solution.p_star / solution.rho_star_right)

    b_L = 1.0 / (solution.rho_star_left * c_star_L)
    b_R = 1.0 / (solution.rho_star_right * c_star_R)
    d_L = -c_star_L * (s_left.u + s_left.p / (left.rho * c_L))
    d_R = c_star_R * (s_right.u - s_right.p / (right.rho * c_R))

    det = b_L + b_R
    du_dt = (b_R * d_L + b_L * d_R) / det
    dp_dt = (d_L - d_R) / det
    return du_dt, dp_dt, c_star_L, c_star_R


def linear_grp_solver_eulerian(left, right, s_left, s_right, gamma, eps=1e-9,
                               riemann_solver=riemann_solver_exact, max_iter=500):
    """
    Eulerian linear GRP solver at a fixed interface x = 0.

    Parameters
    ----------
    left, right : Primitive
        Extrapolated states on both sides of the interface
    s_left, s_right : Primitive
        Spatial slopes of the left and right data
    gamma : float
        Ratio of specific heats
    eps : float
        Zero tolerance, passed to the Riemann solver
    riemann_solver : callable
        ``riemann_solver_exact`` or ``riemann_solver_exact_toro``
    max_iter : int
        Riemann iteration cap

    Returns
    -------
    mid : Primitive
        Riemann solution at x = 0
    dire : Primitive
        Time derivative of the primitive variables at x = 0
    solution : RiemannSolution
    """
    solution = riemann_solver(left.rho, left.u, left.p, right.rho, right.u, right.p,
                              gamma, eps=eps, tol=eps, max_iter=max_iter)
    mid, region = sample(solution, left, right, gamma)

    if region == 'left':
        return mid, quasi_linear_derivative(left, s_left, gamma), solution
    if region == 'right':
        return mid, quasi_linear_derivative(right, s_right, gamma), solution
    if region == 'left_fan':
        # Transonic rarefaction: x = 0 sits on the sonic characteristic
        return mid, quasi_linear_derivative(mid, s_left, gamma), solution
    if region == 'right_fan':
        return mid, quasi_linear_derivative(mid, s_right, gamma), solution

    du_dt, dp_dt, c_star_L, c_star_R = _material_derivatives(
        solution, left, right, s_left, s_right, gamma)

    if region == 'star_left':
        side, slope, c_star = left, s_left, c_star_L
    else:
        side, slope, c_star = right, s_right, c_star_R
    rho_star = mid.rho
    u_star = solution.u_star
    c_side2 = gamma * side.p / side.rho

    # Material -> Eulerian: f_t = Df/Dt - u f_x
    u_t = du_dt + u_star / (rho_star * c_star**2) * dp_dt
    p_t = dp_dt + u_star * rho_star * du_dt

    # Entropy slope p' - c^2 rho' is carried by the particle paths
    p_x = -rho_star * du_dt
    rho_x = (p_x - (slope.p - c_side2 * slope.rho)) / c_star**2
    rho_t = dp_dt / c_star**2 - u_star * rho_x
    v_t = -u_star * slope.v

    return mid, Primitive(rho_t, u_t, p_t, v_t), solution


def linear_grp_solver_lagrangian(left, right, s_left, s_right, gamma, eps=1e-9,
                                 riemann_solver=riemann_solver_exact, max_iter=500):
    """
    Lagrangian linear GRP solver along the interface trajectory.

    Same inputs as ``linear_grp_solver_eulerian``; slopes are taken with
    respect to the physical coordinate x.

    Returns
    -------
    LagrangianGRP
    """
    solution = riemann_solver(left.rho, left.u, left.p, right.rho, right.u, right.p,
                              gamma, eps=eps, tol=eps, max_iter=max_iter)
    du_dt, dp_dt, c_star_L, c_star_R = _material_derivatives(
        solution, left, right, s_left, s_right, gamma)

    return LagrangianGRP(
        u_star=solution.u_star,
        p_star=solution.p_star,
        rho_star_left=solution.rho_star_left,
        rho_star_right=solution.rho_star_right,
        du_dt=du_dt,
        dp_dt=dp_dt,
        drho_dt_left=dp_dt / c_star_L**2,
        drho_dt_right=dp_dt / c_star_R**2,
        solution=solution,
    )
