"""
Explicit finite volume time stepping shared by the Eulerian and
Lagrangian hydrocodes.

One pass of the main loop:

    reconstruct -> solve interfaces -> compute step size
    -> predict half step / assemble flux -> conservative update
    -> converge check

Only two time levels are ever held: the current state (with its limited
slopes) and the one produced by ``step``. A non-physical state stops the
run early, keeping the last valid time level.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .boundary import make_boundary
from .eos import sound_speed
from .exceptions import ConfigurationError, PhysicalValidityError
from .reconstruction import center_distances, find_invalid, interface_values, limited_slopes
from .riemann import get_riemann_solver
from .state import CellState, Slopes

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NumericalFailure:
    """Location of a non-physical value detected during a step."""

    step: int
    index: int
    stage: str
    reason: str = '<0.0 error'

    def __str__(self):
        return f"{self.reason} on [{self.step}, {self.index}] (t_n, x) - {self.stage}"

    def to_exception(self):
        return PhysicalValidityError(self.step, self.index, self.stage, self.reason)


@dataclass
class StepResult:
    """
    Outcome of a single time step.

    Attributes
    ----------
    state : CellState
        New time level (the unchanged input state on failure)
    slopes : Slopes
        Slope history for the next step
    tau : float
        Time step actually taken
    h_s_min : float
        min h/(|u|+c) over both sides of every interface
    failure : NumericalFailure, optional
    """

    state: CellState
    slopes: Slopes
    tau: float
    h_s_min: float
    failure: Optional[NumericalFailure] = None


@dataclass
class SolverResult:
    """
    Outcome of a full run.

    Attributes
    ----------
    initial, final : CellState
        First and last valid time levels
    steps : int
        Number of completed time steps
    time : float
        Simulated time reached
    tau : float
        Length of the last time step
    cpu_time : ndarray
        CPU seconds spent in each step
    status : str
        'completed' or 'failed'
    failure : NumericalFailure, optional
    """

    initial: CellState
    final: CellState
    steps: int
    time: float
    tau: float
    cpu_time: np.ndarray
    status: str = 'completed'
    failure: Optional[NumericalFailure] = None
    history: List[CellState] = field(default_factory=list)
    time_history: List[float] = field(default_factory=list)

    @property
    def failed(self):
        return self.status == 'failed'


class HydroSolver:
    """
    Base class of the 1D finite volume solvers.

    Parameters
    ----------
    config : HydroConfig
        Run configuration
    rho, u, p : array_like
        Initial density, velocity and pressure, one value per cell
    v : array_like, optional
        Initial transverse velocity (Eulerian only)
    """

    coordinate = None
    scheme_names = {1: 'Godunov', 2: 'GRP'}

    def __init__(self, config, rho, u, p, v=None):
        if config.coordinate != self.coordinate:
            raise ConfigurationError(
                f"{type(self).__name__} needs coordinate {self.coordinate}, "
                f"got {config.coordinate}")
        rho = np.asarray(rho, dtype=float)
        if rho.ndim != 1 or rho.size < 1:
            raise ConfigurationError("Initial data must be non-empty 1D arrays")
        if np.shape(u) != rho.shape or np.shape(p) != rho.shape:
            raise ConfigurationError("Initial rho, u and p differ in length")

        self.config = config
        self.gamma = config.gamma
        self.m = rho.size
        self.state = CellState.from_primitive(
            rho, u, p, config.gamma, v=v, h=config.h,
            lagrangian=self.coordinate == 'LAG')
        self.initial = self.state.copy()
        self.boundary = make_boundary(config.boundary, self.initial)
        self.slopes = Slopes.zeros(self.m)
        self.riemann_solver = get_riemann_solver(config.riemann_solver)

        # Solution history for plotting
        self.history = []
        self.time_history = []

    @property
    def scheme_name(self):
        return self.scheme_names[self.config.order]

    def cell_centers(self, state=None):
        """Cell centre coordinates of a state (default: current)."""
        state = self.state if state is None else state
        if state.x is not None:
            return 0.5 * (state.x[:-1] + state.x[1:])
        return (np.arange(self.m) + 0.5) * self.config.h

    def get_solution(self):
        """Return current solution in primitive variables."""
        return self.state.rho, self.state.u, self.state.p

    def reconstruct(self, state, slopes, k):
        """
        Limited slopes and interface values for step k.

        Returns
        -------
        slopes : Slopes
        faces : tuple
            (left, right, s_left, s_right) PrimitiveArrays over the m+1
            interfaces
        w_left, w_right : ndarray
            Widths of the cells on either side of each interface
        """
        cfg = self.config
        ghosts = self.boundary.ghost_states(state)
        widths = state.widths(cfg.h)
        ghost_widths = self.boundary.ghost_widths(widths)

        if cfg.order == 1:
            slopes = Slopes.zeros(self.m)
        else:
            distances = center_distances(widths, ghost_widths)
            slopes = limited_slopes(state, ghosts, distances, cfg.effective_alpha,
                                    first_step=k == 1, previous=slopes)
        ghost_slopes = self.boundary.ghost_slopes(slopes)

        faces = interface_values(state, slopes, ghosts, ghost_slopes, widths, ghost_widths)
        w_left = np.concatenate(([ghost_widths[0]], widths))
        w_right = np.concatenate((widths, [ghost_widths[1]]))
        return slopes, faces, w_left, w_right

    def check(self, fields, k, stage):
        """NumericalFailure for the first non-physical entry, or None."""
        found = find_invalid(fields, self.config.eps)
        if found is None:
            return None
        index, reason = found
        return NumericalFailure(k, index, stage, reason)

    def min_h_over_speed(self, left, right, w_left, w_right):
        """min over interfaces of h/(|u|+c) for both extrapolated sides."""
        c_left = sound_speed(left.rho, left.p, self.gamma)
        c_right = sound_speed(right.rho, right.p, self.gamma)
        return min(np.min(w_left / (np.abs(left.u) + c_left)),
                   np.min(w_right / (np.abs(right.u) + c_right)))

    def compute_time_step(self, h_s_min, t):
        """
        Time step from the CFL condition, clipped to the total time.

        tau = CFL * min(h / (|u| + c))

        A fixed step is used when no total time is configured.
        """
        cfg = self.config
        if cfg.fixed_step:
            return cfg.tau
        tau = cfg.cfl * h_s_min
        if t + tau > cfg.total_time - cfg.eps:
            tau = cfg.total_time - t
        return tau

    def step(self, state, slopes, k, t=0.0, tau=None):
        """
        Advance one time step.

        Parameters
        ----------
        state : CellState
            Current time level
        slopes : Slopes
            Slope history from the previous step
        k : int
            Step index, starting at 1
        t : float
            Current simulated time (for clipping tau)
        tau : float, optional
            Prescribed time step, bypassing the CFL computation

        Returns
        -------
        StepResult
        """
        raise NotImplementedError

    def solve(self, save_interval=None, raise_on_failure=False):
        """
        Run the main loop until the total time or the step limit is reached.

        Parameters
        ----------
        save_interval : float, optional
            Simulated time between stored snapshots
        raise_on_failure : bool
            Raise PhysicalValidityError instead of stopping early

        Returns
        -------
        SolverResult
        """
        cfg = self.config
        state, slopes = self.state, self.slopes
        t = 0.0
        k = 0
        tau = cfg.tau if cfg.fixed_step else math.nan
        cpu_time = []
        failure = None

        self.history = [state.copy()]
        self.time_history = [t]
        next_save = save_interval

        log.info("Starting %s %s scheme: m=%d, t_all=%g, CFL=%g, alpha=%g",
                 self.coordinate, self.scheme_name, self.m, cfg.total_time,
                 cfg.cfl, cfg.effective_alpha)

        limit = cfg.step_limit
        while limit is None or k < limit:
            tic = time.process_time()
            result = self.step(state, slopes, k + 1, t)
            cpu_time.append(time.process_time() - tic)

            if result.failure is not None:
                failure = result.failure
                log.error("%s", failure)
                break

            k += 1
            state, slopes, tau = result.state, result.slopes, result.tau
            t += tau

            if next_save is not None and t >= next_save:
                self.history.append(state.copy())
                self.time_history.append(t)
                next_save += save_interval

            if k % 100 == 0:
                log.debug("Step %d: t = %.6f, tau = %.6e", k, t, tau)

            if t > cfg.total_time - cfg.eps or math.isinf(t):
                break

        if self.time_history[-1] < t:
            self.history.append(state.copy())
            self.time_history.append(t)

        self.state, self.slopes = state, slopes
        cpu_time = np.array(cpu_time)
        log.info("Time is up at time step %d.", k)
        log.info("The cost of CPU time for 1D-%s %s scheme is %g seconds.",
                 self.scheme_name, self.coordinate, cpu_time.sum())

        if failure is not None and raise_on_failure:
            raise failure.to_exception()

        return SolverResult(
            initial=self.initial, final=state, steps=k, time=t, tau=tau,
            cpu_time=cpu_time,
            status='completed' if failure is None else 'failed',
            failure=failure,
            history=list(self.history), time_history=list(self.time_history),
        )

    def compute_errors(self, exact_rho, exact_u, exact_p):
        """
        Compute L1, L2, and L∞ errors against exact solution.

        Parameters
        ----------
        exact_rho, exact_u, exact_p : ndarrays
            Exact solution values at cell centers

        Returns
        -------
        errors : dict
            Dictionary with L1, L2, Linf errors for each variable
        """
        rho, u, p = self.get_solution()

        errors = {}
        for name, num, exact in [('rho', rho, exact_rho),
                                 ('u', u, exact_u),
                                 ('p', p, exact_p)]:
            diff = np.abs(num - exact)
            errors[f'{name}_L1'] = np.mean(diff)
            errors[f'{name}_L2'] = np.sqrt(np.mean(diff**2))
            errors[f'{name}_Linf'] = np.max(diff)

        return errors
