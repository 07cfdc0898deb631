"""
Godunov / GRP scheme on a moving (Lagrangian) grid.

Every cell keeps its mass m_j; interfaces move with the fluid:

    x_{j+1/2}^{n+1} = x_{j+1/2}^n + tau * u_{j+1/2}
    u_j^{n+1} = u_j^n - (tau/m_j) * (p_{j+1/2} - p_{j-1/2})
    E_j^{n+1} = E_j^n - (tau/m_j) * ((pu)_{j+1/2} - (pu)_{j-1/2})
    rho_j^{n+1} = m_j / (x_{j+1/2}^{n+1} - x_{j-1/2}^{n+1})
"""

import numpy as np

from .grp import linear_grp_solver_lagrangian
from .solver import HydroSolver, StepResult
from .state import CellState, PrimitiveArrays, Slopes


class LagrangianSolver(HydroSolver):
    """
    1D Euler equations in Lagrangian coordinates.

    The initial grid is uniform with spacing h starting at x = 0; cell
    masses are h * rho and stay fixed.

    Parameters
    ----------
    config : HydroConfig
        Run configuration (coordinate 'LAG')
    rho, u, p : array_like
        Initial primitive variables
    """

    coordinate = 'LAG'

    def solve_interfaces(self, left, right, s_left, s_right):
        """
        Interface velocity, pressure and star densities with their rates.

        Returns
        -------
        star : dict of ndarray
            'u', 'p', 'rho_left', 'rho_right'
        rate : dict of ndarray
            Time derivatives along the interface paths (zero at first order)
        """
        cfg = self.config
        n = len(left.rho)
        keys = ('u', 'p', 'rho_left', 'rho_right')
        star = {key: np.zeros(n) for key in keys}
        rate = {key: np.zeros(n) for key in keys}

        for j in range(n):
            W_L, W_R = left.at(j), right.at(j)
            if cfg.order == 1:
                solution = self.riemann_solver(
                    W_L.rho, W_L.u, W_L.p, W_R.rho, W_R.u, W_R.p, self.gamma,
                    eps=cfg.eps, tol=cfg.eps, max_iter=cfg.max_iter)
            else:
                grp = linear_grp_solver_lagrangian(
                    W_L, W_R, s_left.at(j), s_right.at(j), self.gamma,
                    eps=cfg.eps, riemann_solver=self.riemann_solver,
                    max_iter=cfg.max_iter)
                solution = grp.solution
                rate['u'][j] = grp.du_dt
                rate['p'][j] = grp.dp_dt
                rate['rho_left'][j] = grp.drho_dt_left
                rate['rho_right'][j] = grp.drho_dt_right
            star['u'][j] = solution.u_star
            star['p'][j] = solution.p_star
            star['rho_left'][j] = solution.rho_star_left
            star['rho_right'][j] = solution.rho_star_right
        return star, rate

    def step(self, state, slopes, k, t=0.0, tau=None):
        cfg = self.config
        gamma = self.gamma

        slopes, faces, w_left, w_right = self.reconstruct(state, slopes, k)
        left, right, s_left, s_right = faces
        failure = (self.check(left, k, 'Reconstruction')
                   or self.check(right, k, 'Reconstruction'))
        if failure is not None:
            return StepResult(state, slopes, 0.0, np.nan, failure)

        h_s_min = self.min_h_over_speed(left, right, w_left, w_right)

        star, rate = self.solve_interfaces(left, right, s_left, s_right)
        for side in ('rho_left', 'rho_right'):
            failure = self.check(PrimitiveArrays(star[side], star['u'], star['p']), k, 'STAR')
            if failure is not None:
                return StepResult(state, slopes, 0.0, h_s_min, failure)

        if tau is None:
            tau = self.compute_time_step(h_s_min, t)

        # Half step for the flux, then on to t_{n+1} for the slope history
        half = {key: star[key] + 0.5 * tau * rate[key] for key in star}
        ahead = {key: half[key] + 0.5 * tau * rate[key] for key in star}

        mass = state.mass
        x = state.x + tau * half['u']
        u = state.u - tau / mass * np.diff(half['p'])
        E = state.E - tau / mass * np.diff(half['p'] * half['u'])
        width = np.diff(x)
        with np.errstate(divide='ignore', invalid='ignore'):
            rho = mass / width
        p = (gamma - 1.0) * rho * (E - 0.5 * u**2)

        new = CellState(rho=rho, u=u, p=p, E=E, v=state.v.copy(), x=x, mass=mass)
        failure = self.check(new, k, 'Update')
        if failure is not None:
            return StepResult(state, slopes, 0.0, h_s_min, failure)

        if cfg.order == 1:
            history = Slopes.zeros(self.m)
        else:
            # Each cell sees the star density on its own side of both contacts
            history = Slopes(
                rho=(ahead['rho_left'][1:] - ahead['rho_right'][:-1]) / width,
                u=np.diff(ahead['u']) / width,
                p=np.diff(ahead['p']) / width,
            )

        return StepResult(new, history, tau, h_s_min)
