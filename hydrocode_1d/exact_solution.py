"""
Exact solution of a 1D Riemann problem, used as the reference for
shock tube runs.

A Riemann problem generates up to three waves:
1. Left-moving rarefaction or shock
2. Contact discontinuity
3. Right-moving rarefaction or shock
"""

import numpy as np

from .riemann import WaveType, get_riemann_solver, sample, wave_speeds
from .state import Primitive

SOD_LEFT = Primitive(1.0, 0.0, 1.0)
SOD_RIGHT = Primitive(0.125, 0.0, 0.1)


class ExactRiemannSolution:
    """
    Exact solution of the Riemann problem with data left | right.

    Parameters
    ----------
    gamma : float
        Ratio of specific heats (default 1.4)
    left, right : Primitive or tuple
        (rho, u, p) on each side (default: Sod shock tube)
    solver : str
        'exact' or 'toro'
    """

    def __init__(self, gamma=1.4, left=SOD_LEFT, right=SOD_RIGHT, solver='exact'):
        self.gamma = gamma
        self.left = Primitive(*left)
        self.right = Primitive(*right)

        riemann_solver = get_riemann_solver(solver)
        self.solution = riemann_solver(
            self.left.rho, self.left.u, self.left.p,
            self.right.rho, self.right.u, self.right.p, gamma, tol=1e-12)

        self.p_star = self.solution.p_star
        self.u_star = self.solution.u_star
        self.rho_star_L = self.solution.rho_star_left
        self.rho_star_R = self.solution.rho_star_right

        (self.S_HL, self.S_TL,
         self.S_TR, self.S_HR) = wave_speeds(self.solution, self.left, self.right, gamma)
        self.S_contact = self.u_star

    @property
    def left_shock(self):
        return self.solution.left_wave is WaveType.SHOCK

    @property
    def right_shock(self):
        return self.solution.right_wave is WaveType.SHOCK

    def sample(self, x, t, x_0=0.5):
        """
        Sample the exact solution at position x and time t.

        Parameters
        ----------
        x : float or ndarray
            Position(s) to evaluate
        t : float
            Time
        x_0 : float
            Initial discontinuity position

        Returns
        -------
        rho, u, p : ndarrays
        """
        x = np.atleast_1d(np.asarray(x, dtype=float))
        if t <= 0:
            # Return initial condition
            on_left = x < x_0
            rho = np.where(on_left, self.left.rho, self.right.rho)
            u = np.where(on_left, self.left.u, self.right.u)
            p = np.where(on_left, self.left.p, self.right.p)
            return rho, u, p

        S = (x - x_0) / t
        rho = np.zeros_like(S)
        u = np.zeros_like(S)
        p = np.zeros_like(S)

        for i, s in enumerate(S):
            state, _ = sample(self.solution, self.left, self.right, self.gamma, s)
            rho[i], u[i], p[i] = state.rho, state.u, state.p

        return rho, u, p

    def get_wave_positions(self, t, x_0=0.5):
        """
        Get the positions of all waves at time t.

        Returns
        -------
        dict
            Shock positions, rarefaction heads/tails and the contact
        """
        positions = {}

        if self.left_shock:
            positions['left_shock'] = x_0 + self.S_HL * t
        else:
            positions['rarefaction_head'] = x_0 + self.S_HL * t
            positions['rarefaction_tail'] = x_0 + self.S_TL * t

        positions['contact'] = x_0 + self.S_contact * t

        if self.right_shock:
            positions['shock'] = x_0 + self.S_HR * t
        else:
            positions['right_rarefaction_tail'] = x_0 + self.S_TR * t
            positions['right_rarefaction_head'] = x_0 + self.S_HR * t

        return positions

    def print_solution_info(self, t=0.2, x_0=0.5):
        """Print star state, wave speeds and wave positions at time t."""
        print("=" * 50)
        print("Riemann Problem - Exact Solution")
        print("=" * 50)
        print(f"\nInitial conditions:")
        print(f"  Left:  ρ={self.left.rho}, u={self.left.u}, p={self.left.p}")
        print(f"  Right: ρ={self.right.rho}, u={self.right.u}, p={self.right.p}")
        print(f"\nStar region ({self.solution.iterations} iterations):")
        print(f"  p* = {self.p_star:.6f}")
        print(f"  u* = {self.u_star:.6f}")
        print(f"  ρ*_L = {self.rho_star_L:.6f}")
        print(f"  ρ*_R = {self.rho_star_R:.6f}")
        print(f"\nWave structure:")
        if self.left_shock:
            print(f"  Left shock: S = {self.S_HL:.6f}")
        else:
            print(f"  Left rarefaction: head = {self.S_HL:.6f}, tail = {self.S_TL:.6f}")
        print(f"  Contact: S = {self.S_contact:.6f}")
        if self.right_shock:
            print(f"  Right shock: S = {self.S_HR:.6f}")
        else:
            print(f"  Right rarefaction: tail = {self.S_TR:.6f}, head = {self.S_HR:.6f}")

        pos = self.get_wave_positions(t, x_0)
        print(f"\nWave positions at t={t}:")
        for name, x in pos.items():
            print(f"  {name}: x = {x:.4f}")
        print("=" * 50)
