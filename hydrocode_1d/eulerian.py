"""
Godunov / GRP scheme on a fixed (Eulerian) grid.

Conservative update of cell j over one step:

    U_j^{n+1} = U_j^n - (tau/h) * (F_{j+1/2} - F_{j-1/2})

The interface flux is evaluated at the Riemann solution (first order)
or at the GRP half-step prediction W* + (tau/2) * (dW/dt)* (second order).
"""

import numpy as np

from .grp import linear_grp_solver_eulerian
from .riemann import sample
from .solver import HydroSolver, StepResult
from .state import FIELDS, CellState, PrimitiveArrays, Slopes


def euler_flux(mid, gamma):
    """
    Physical flux of mass, momentum, transverse momentum and energy.

    Parameters
    ----------
    mid : PrimitiveArrays
        Interface states
    gamma : float

    Returns
    -------
    F1, F2, F4, F3 : ndarrays
        rho*u, rho*u^2 + p, rho*u*v, (rho*E + p)*u
    """
    F1 = mid.rho * mid.u
    F2 = F1 * mid.u + mid.p
    F4 = F1 * mid.v
    F3 = gamma / (gamma - 1.0) * mid.p * mid.u + 0.5 * F1 * (mid.u**2 + mid.v**2)
    return F1, F2, F4, F3


class EulerianSolver(HydroSolver):
    """
    1D Euler equations on an Eulerian grid of constant spacing h.

    Parameters
    ----------
    config : HydroConfig
        Run configuration (coordinate 'EUL')
    rho, u, p : array_like
        Initial primitive variables
    v : array_like, optional
        Transverse velocity, passively advected

    Examples
    --------
    >>> config = HydroConfig(gamma=1.4, total_time=0.2, cfl=0.5, h=0.01,
    ...                      boundary='free')
    >>> solver = EulerianSolver(config, rho, u, p)
    >>> result = solver.solve()
    """

    coordinate = 'EUL'

    def solve_interfaces(self, left, right, s_left, s_right):
        """
        Riemann (order 1) or GRP (order 2) solution at every interface.

        Returns
        -------
        mid, dire : PrimitiveArrays
            Interface states and their time derivatives
        """
        cfg = self.config
        n = len(left.rho)
        mid = PrimitiveArrays.zeros(n)
        dire = PrimitiveArrays.zeros(n)

        for j in range(n):
            W_L, W_R = left.at(j), right.at(j)
            if cfg.order == 1:
                solution = self.riemann_solver(
                    W_L.rho, W_L.u, W_L.p, W_R.rho, W_R.u, W_R.p, self.gamma,
                    eps=cfg.eps, tol=cfg.eps, max_iter=cfg.max_iter)
                star, _ = sample(solution, W_L, W_R, self.gamma)
                rate = None
            else:
                star, rate, _ = linear_grp_solver_eulerian(
                    W_L, W_R, s_left.at(j), s_right.at(j), self.gamma,
                    eps=cfg.eps, riemann_solver=self.riemann_solver,
                    max_iter=cfg.max_iter)
            for name in FIELDS:
                getattr(mid, name)[j] = getattr(star, name)
                if rate is not None:
                    getattr(dire, name)[j] = getattr(rate, name)
        return mid, dire

    def step(self, state, slopes, k, t=0.0, tau=None):
        cfg = self.config
        gamma = self.gamma
        h = cfg.h

        slopes, faces, w_left, w_right = self.reconstruct(state, slopes, k)
        left, right, s_left, s_right = faces
        failure = (self.check(left, k, 'Reconstruction')
                   or self.check(right, k, 'Reconstruction'))
        if failure is not None:
            return StepResult(state, slopes, 0.0, np.nan, failure)

        h_s_min = self.min_h_over_speed(left, right, w_left, w_right)

        mid, dire = self.solve_interfaces(left, right, s_left, s_right)
        failure = self.check(mid, k, 'STAR')
        if failure is not None:
            return StepResult(state, slopes, 0.0, h_s_min, failure)

        if tau is None:
            tau = self.compute_time_step(h_s_min, t)

        # Half step for the flux, then on to t_{n+1} for the slope history
        half = PrimitiveArrays(**{name: getattr(mid, name) + 0.5 * tau * getattr(dire, name)
                                  for name in FIELDS})
        ahead = PrimitiveArrays(**{name: getattr(half, name) + 0.5 * tau * getattr(dire, name)
                                   for name in FIELDS})

        F1, F2, F4, F3 = euler_flux(half, gamma)
        nu = tau / h

        rho = state.rho - nu * np.diff(F1)
        mom = state.rho * state.u - nu * np.diff(F2)
        mom_v = state.rho * state.v - nu * np.diff(F4)
        ene = state.rho * state.E - nu * np.diff(F3)

        with np.errstate(divide='ignore', invalid='ignore'):
            u = mom / rho
            v = mom_v / rho
            E = ene / rho
        p = (ene - 0.5 * (mom * u + mom_v * v)) * (gamma - 1.0)

        new = CellState(rho=rho, u=u, p=p, E=E, v=v)
        failure = self.check(new, k, 'Update')
        if failure is not None:
            return StepResult(state, slopes, 0.0, h_s_min, failure)

        if cfg.order == 1:
            history = Slopes.zeros(self.m)
        else:
            history = Slopes(**{name: np.diff(getattr(ahead, name)) / h for name in FIELDS})

        return StepResult(new, history, tau, h_s_min)
