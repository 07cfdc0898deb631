"""
2D Euler solver by dimensional splitting.

The 2D Euler equations in conservation form:
    ∂U/∂t + ∂F/∂x + ∂G/∂y = 0

where:
    U = [ρ, ρu, ρv, ρE]^T
    F = [ρu, ρu² + p, ρuv, u(ρE + p)]^T
    G = [ρv, ρuv, ρv² + p, v(ρE + p)]^T

Each time step applies the 1D Eulerian Godunov/GRP kernel to every row
(x-sweep, normal velocity u) and then to every column (y-sweep, normal
velocity v) with a common step length. Fields are stored as (n_y, n_x)
arrays: row i is the line y = (i + 1/2) h_y.
"""

import logging
import math
import time
from dataclasses import dataclass, replace

import numpy as np

from hydrocode_1d.eos import total_energy
from hydrocode_1d.eulerian import EulerianSolver
from hydrocode_1d.exceptions import ConfigurationError
from hydrocode_1d.solver import SolverResult
from hydrocode_1d.state import CellState

log = logging.getLogger(__name__)

# Repeated steps allowed per time step when the y-sweep CFL bound fails
MAX_TAU_REDUCTIONS = 5
TAU_SHRINK = 0.98


@dataclass
class FlowField2D:
    """Cell-averaged 2D flow variables, each of shape (n_y, n_x)."""

    rho: np.ndarray
    u: np.ndarray
    v: np.ndarray
    p: np.ndarray
    E: np.ndarray
    x = None

    @classmethod
    def from_primitive(cls, rho, u, v, p, gamma):
        rho = np.array(rho, dtype=float)
        u = np.array(u, dtype=float)
        v = np.array(v, dtype=float)
        p = np.array(p, dtype=float)
        return cls(rho, u, v, p, total_energy(rho, u, p, gamma, v))

    @property
    def shape(self):
        return self.rho.shape

    def copy(self):
        return FlowField2D(self.rho.copy(), self.u.copy(), self.v.copy(),
                           self.p.copy(), self.E.copy())

    def totals(self, h_x, h_y):
        """Total mass, x-momentum, y-momentum and energy."""
        weight = self.rho * h_x * h_y
        return (np.sum(weight), np.sum(weight * self.u),
                np.sum(weight * self.v), np.sum(weight * self.E))


class EulerianSolver2D:
    """
    Dimensionally split 2D Eulerian Godunov/GRP solver.

    Every row and every column gets its own 1D kernel, so the boundary
    ghost cells and the limiter slope history are kept per line and per
    direction.

    Parameters
    ----------
    config : HydroConfig
        Run configuration with dim = 2 (h is the x spacing, h_y the
        y spacing)
    rho, u, v, p : array_like of shape (n_y, n_x)
        Initial density, velocities and pressure
    """

    def __init__(self, config, rho, u, v, p):
        if config.dim != 2:
            raise ConfigurationError(f"EulerianSolver2D needs dim = 2, got {config.dim}")
        rho = np.asarray(rho, dtype=float)
        if rho.ndim != 2:
            raise ConfigurationError("Initial data must be 2D arrays of shape (n_y, n_x)")
        for name, data in (('u', u), ('v', v), ('p', p)):
            if np.shape(data) != rho.shape:
                raise ConfigurationError(f"Initial {name} has shape {np.shape(data)}, "
                                         f"expected {rho.shape}")

        self.config = config
        self.gamma = config.gamma
        self.n_y, self.n_x = rho.shape
        self.field = FlowField2D.from_primitive(rho, u, v, p, config.gamma)
        self.initial = self.field.copy()

        config_x = config.replace(dim=1)
        config_y = config.replace(dim=1, h=config.h_y)
        f = self.field
        # The y-sweep sees v as the normal and u as the transverse velocity
        self.rows = [EulerianSolver(config_x, f.rho[i], f.u[i], f.p[i], f.v[i])
                     for i in range(self.n_y)]
        self.columns = [EulerianSolver(config_y, f.rho[:, j], f.v[:, j], f.p[:, j], f.u[:, j])
                        for j in range(self.n_x)]

        self.history = []
        self.time_history = []

    @staticmethod
    def _line(n, axis):
        """Index of line n and its (normal, transverse) velocity names."""
        if axis == 1:
            return (n, slice(None)), 'u', 'v'
        return (slice(None), n), 'v', 'u'

    def _line_state(self, field, n, axis):
        line, normal, transverse = self._line(n, axis)
        return CellState(rho=field.rho[line].copy(),
                         u=getattr(field, normal)[line].copy(),
                         p=field.p[line].copy(),
                         E=field.E[line].copy(),
                         v=getattr(field, transverse)[line].copy())

    def _clip(self, tau, t):
        cfg = self.config
        if t + tau > cfg.total_time - cfg.eps:
            tau = cfg.total_time - t
        return tau

    def compute_time_step(self, field, k, t):
        """
        Common step length of both sweeps.

        tau = CFL * min(h / (|u| + c)) over the reconstructed interface
        states of every row (h_x, u) and every column (h_y, v).

        Returns
        -------
        tau, h_s_min : float
        """
        cfg = self.config
        if cfg.fixed_step:
            return cfg.tau, math.nan
        bounds = []
        for kernels, axis in ((self.rows, 1), (self.columns, 0)):
            for n, kernel in enumerate(kernels):
                state = self._line_state(field, n, axis)
                _, faces, w_left, w_right = kernel.reconstruct(state, kernel.slopes, k)
                bounds.append(kernel.min_h_over_speed(faces[0], faces[1], w_left, w_right))
        # Non-physical lines give nan here and are reported by their sweep
        h_s_min = np.nanmin(bounds)
        return self._clip(cfg.cfl * h_s_min, t), h_s_min

    def sweep(self, field, kernels, slopes, k, t, tau, axis):
        """
        Run the 1D kernel over every row (axis 1) or column (axis 0).

        Parameters
        ----------
        field : FlowField2D
        kernels : list of EulerianSolver
        slopes : list of Slopes
            Slope history of each line
        k : int
            Step index
        t, tau : float
        axis : int

        Returns
        -------
        field : FlowField2D or None
            Swept field (None on failure)
        slopes : list of Slopes or None
            New slope history of each line
        h_s_min : float
            min h/(|u|+c) over the interfaces of the sweep
        failure : NumericalFailure or None
        """
        out = field.copy()
        new_slopes = []
        h_s_min = math.inf
        for n, (kernel, line_slopes) in enumerate(zip(kernels, slopes)):
            line, normal, transverse = self._line(n, axis)
            state = self._line_state(field, n, axis)
            result = kernel.step(state, line_slopes, k, t, tau=tau)
            if result.failure is not None:
                index = (n, result.failure.index) if axis == 1 else (result.failure.index, n)
                stage = f"{result.failure.stage} ({'x' if axis == 1 else 'y'}-sweep)"
                return None, None, h_s_min, replace(result.failure, index=index, stage=stage)

            new_slopes.append(result.slopes)
            h_s_min = min(h_s_min, result.h_s_min)
            new = result.state
            out.rho[line] = new.rho
            getattr(out, normal)[line] = new.u
            getattr(out, transverse)[line] = new.v
            out.p[line] = new.p
            out.E[line] = new.E
        return out, new_slopes, h_s_min, None

    def step(self, field, k, t=0.0):
        """
        Advance one split time step.

        The y-sweep sees the x-swept field, so its CFL bound is checked
        after the fact; when tau exceeds it the step is repeated from
        the same level with tau reduced to TAU_SHRINK times that bound.
        Slope histories are only committed once both sweeps succeed.

        Returns
        -------
        field : FlowField2D
            New time level (the input on failure)
        tau : float
        failure : NumericalFailure or None
        """
        cfg = self.config
        tau, _ = self.compute_time_step(field, k, t)
        row_slopes = [kernel.slopes for kernel in self.rows]
        column_slopes = [kernel.slopes for kernel in self.columns]

        for attempt in range(MAX_TAU_REDUCTIONS + 1):
            swept, new_rows, _, failure = self.sweep(
                field, self.rows, row_slopes, k, t, tau, axis=1)
            if failure is None:
                swept, new_columns, h_s_min, failure = self.sweep(
                    swept, self.columns, column_slopes, k, t, tau, axis=0)
            if failure is not None:
                return field, 0.0, failure

            bound = cfg.cfl * h_s_min
            if cfg.fixed_step or tau <= bound * (1.0 + 1e-12):
                break
            if attempt == MAX_TAU_REDUCTIONS:
                log.warning("Step %d: tau = %.6e still above the y-sweep bound %.6e",
                            k, tau, bound)
                break
            log.debug("Step %d: tau = %.6e above the y-sweep bound %.6e, repeating",
                      k, tau, bound)
            tau = TAU_SHRINK * bound

        for kernel, slopes in zip(self.rows, new_rows):
            kernel.slopes = slopes
        for kernel, slopes in zip(self.columns, new_columns):
            kernel.slopes = slopes
        return swept, tau, None

    def solve(self, save_interval=None, raise_on_failure=False):
        """
        Run until the total time or the step limit is reached.

        Parameters
        ----------
        save_interval : float, optional
            Simulated time between stored snapshots
        raise_on_failure : bool
            Raise PhysicalValidityError instead of stopping early

        Returns
        -------
        SolverResult
            With FlowField2D initial and final levels
        """
        cfg = self.config
        field = self.field
        t = 0.0
        k = 0
        tau = cfg.tau if cfg.fixed_step else math.nan
        cpu_time = []
        failure = None

        self.history = [field.copy()]
        self.time_history = [t]
        next_save = save_interval

        log.info("Starting 2D EUL %s scheme: %d x %d cells, t_all=%g, CFL=%g",
                 'GRP' if cfg.order == 2 else 'Godunov', self.n_x, self.n_y,
                 cfg.total_time, cfg.cfl)

        limit = cfg.step_limit
        while limit is None or k < limit:
            tic = time.process_time()
            new, step_tau, failure = self.step(field, k + 1, t)
            cpu_time.append(time.process_time() - tic)
            if failure is not None:
                log.error("%s", failure)
                break

            k += 1
            field, tau = new, step_tau
            t += tau

            if next_save is not None and t >= next_save:
                self.history.append(field.copy())
                self.time_history.append(t)
                next_save += save_interval

            if k % 100 == 0:
                log.debug("Step %d: t = %.6f, tau = %.6e", k, t, tau)

            if t > cfg.total_time - cfg.eps or math.isinf(t):
                break

        self.field = field
        cpu_time = np.array(cpu_time)
        log.info("Time is up at time step %d.", k)
        log.info("The cost of CPU time for 2D-EUL scheme is %g seconds.", cpu_time.sum())

        if failure is not None and raise_on_failure:
            raise failure.to_exception()

        return SolverResult(
            initial=self.initial, final=field, steps=k, time=t, tau=tau,
            cpu_time=cpu_time,
            status='completed' if failure is None else 'failed',
            failure=failure,
            history=list(self.history), time_history=list(self.time_history),
        )

    def get_solution(self):
        """Return current solution in primitive variables."""
        f = self.field
        return f.rho, f.u, f.v, f.p
