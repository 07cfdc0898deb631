"""
Exceptions raised by the hydrocode.

Configuration problems are reported before the time loop starts.
Solver failures (non-convergence, vacuum) abort the run. Physical
validity failures are normally handled by stopping the run early and
are only raised when the caller asks for it.
"""


class HydroError(Exception):
    """Base class for all hydrocode errors."""


class ConfigurationError(HydroError, ValueError):
    """Missing, unknown or malformed configuration entry."""


class RiemannSolverError(HydroError, RuntimeError):
    """Iterative Riemann solve did not converge."""


class VacuumError(RiemannSolverError):
    """The Riemann problem generates a vacuum region."""


class PhysicalValidityError(HydroError, RuntimeError):
    """
    Non-positive or non-finite density/pressure in a computed state.

    Attributes
    ----------
    step : int
        Time step index (1-based) at which the failure was detected
    index : int
        Interface or cell index
    stage : str
        'Reconstruction', 'STAR' or 'Update'
    """

    def __init__(self, step, index, stage, reason='<0.0 error'):
        self.step = step
        self.index = index
        self.stage = stage
        self.reason = reason
        super().__init__(f"{reason} on [{step}, {index}] (t_n, x) - {stage}")


class DirectoryError(HydroError, OSError):
    """Input or output directory cannot be used."""


class DataReadError(HydroError, ValueError):
    """Initial data or configuration file is missing or malformed."""
