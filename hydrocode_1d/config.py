"""
Run configuration for the hydrocode.

config.txt and the command line address settings as a flat array of
numbered slots, with unset slots holding infinity. ``HydroConfig`` is the immutable
record built from it; ``from_vector`` / ``to_vector`` translate between
the two.

Slot layout
-----------
 0  dimension               9  order of the scheme
 1  total simulated time   10  spatial grid size h (x)
 4  zero tolerance eps     11  spatial grid size h (y)
 5  maximum step count     16  fixed time step tau
 6  adiabatic index gamma  17  boundary condition code
 7  CFL number             41  limiter parameter alpha
 8  coordinate (0 EUL, 1 LAG)
"""

import math
from dataclasses import dataclass, replace

import numpy as np

from .boundary import boundary_code
from .exceptions import ConfigurationError


N_CONF = 50

SLOTS = {
    'dim': 0,
    'total_time': 1,
    'eps': 4,
    'max_steps': 5,
    'gamma': 6,
    'cfl': 7,
    'coordinate': 8,
    'order': 9,
    'h': 10,
    'h_y': 11,
    'tau': 16,
    'boundary': 17,
    'alpha': 41,
}

COORDINATES = {0: 'EUL', 1: 'LAG'}
RIEMANN_SOLVERS = ('exact', 'toro')


@dataclass(frozen=True)
class HydroConfig:
    """
    Immutable run configuration.

    Attributes
    ----------
    gamma : float
        Ratio of specific heats
    total_time : float
        Total simulated time (inf when the run is driven by max_steps)
    eps : float
        Largest value that is treated as zero
    max_steps : float
        Maximum number of time steps (inf for unlimited)
    cfl : float
        CFL number
    h, h_y : float
        Grid spacing in x (and y for 2D runs)
    tau : float
        Fixed time step, used only when total_time is inf
    boundary : int or str
        Boundary condition code (-1, -2, -4, -5, -24) or name
    alpha : float
        Limiter parameter (0 = no reconstruction, 1 = standard minmod)
    order : int
        1 (Godunov) or 2 (GRP)
    coordinate : str
        'EUL' or 'LAG'
    dim : int
        1 or 2
    riemann_solver : str
        'exact' or 'toro'
    max_iter : int
        Iteration cap for the Riemann solver
    """

    gamma: float = math.inf
    total_time: float = math.inf
    eps: float = 1e-9
    max_steps: float = math.inf
    cfl: float = math.inf
    h: float = math.inf
    h_y: float = math.inf
    tau: float = math.inf
    boundary: object = None
    alpha: float = 1.0
    order: int = 2
    coordinate: str = 'EUL'
    dim: int = 1
    riemann_solver: str = 'exact'
    max_iter: int = 500

    def __post_init__(self):
        if not math.isfinite(self.gamma) or self.gamma <= 1.0:
            raise ConfigurationError(f"gamma must be a finite value > 1, got {self.gamma}")
        if not math.isfinite(self.h) or self.h <= 0.0:
            raise ConfigurationError(f"Grid spacing h must be positive, got {self.h}")
        if self.dim == 2 and (not math.isfinite(self.h_y) or self.h_y <= 0.0):
            raise ConfigurationError(f"Grid spacing h_y must be positive, got {self.h_y}")
        if self.dim not in (1, 2):
            raise ConfigurationError(f"No appropriate dimension: {self.dim}")
        if self.order not in (1, 2):
            raise ConfigurationError(f"NOT appropriate order of the scheme! The order is {self.order}")
        if self.coordinate not in ('EUL', 'LAG'):
            raise ConfigurationError(f"NOT appropriate coordinate framework: {self.coordinate}")
        if self.dim == 2 and self.coordinate != 'EUL':
            raise ConfigurationError("2D runs are only available on Eulerian coordinate")
        if self.riemann_solver not in RIEMANN_SOLVERS:
            raise ConfigurationError(f"Unknown Riemann solver: {self.riemann_solver}")
        if self.boundary is None:
            raise ConfigurationError("No boundary condition was configured")
        boundary_code(self.boundary)
        if not (self.eps > 0.0 and math.isfinite(self.eps)):
            raise ConfigurationError(f"eps must be a small positive value, got {self.eps}")
        if not math.isfinite(self.alpha) or self.alpha < 0.0:
            raise ConfigurationError(f"Limiter parameter alpha must be >= 0, got {self.alpha}")

        if math.isinf(self.total_time):
            if math.isinf(self.max_steps):
                raise ConfigurationError("Either total time or maximum step count is required")
            if not self.fixed_step:
                raise ConfigurationError("A fixed time step is required without total time")
        elif self.total_time <= 0.0:
            raise ConfigurationError(f"Total time must be positive, got {self.total_time}")
        if self.max_steps < 1:
            raise ConfigurationError(f"Maximum step count must be >= 1, got {self.max_steps}")
        if not self.fixed_step and not (0.0 < self.cfl < math.inf):
            raise ConfigurationError("CFL number is required for adaptive time steps")

    @property
    def fixed_step(self):
        """True when the step length is prescribed rather than CFL-adaptive."""
        return (math.isinf(self.total_time)
                and math.isfinite(self.tau) and self.tau > 0.0)

    @property
    def effective_alpha(self):
        """First-order runs switch reconstruction off."""
        return 0.0 if self.order == 1 else self.alpha

    @property
    def step_limit(self):
        return int(self.max_steps) if math.isfinite(self.max_steps) else None

    @classmethod
    def from_vector(cls, config, **kwargs):
        """
        Build a configuration from a flat slot vector.

        Parameters
        ----------
        config : sequence of float
            Slot vector, unset slots holding inf
        **kwargs
            Fields that have no slot (riemann_solver, max_iter) or that
            override a slot

        Returns
        -------
        HydroConfig
        """
        config = np.asarray(config, dtype=float)
        values = {}
        for name, slot in SLOTS.items():
            if slot >= len(config):
                continue
            value = float(config[slot])
            if math.isinf(value):
                continue
            values[name] = value

        for name in ('dim', 'order', 'boundary'):
            if name in values:
                values[name] = int(values[name])
        if 'coordinate' in values:
            code = int(values['coordinate'])
            if code not in COORDINATES:
                raise ConfigurationError(f"Unknown coordinate code: {code}")
            values['coordinate'] = COORDINATES[code]
        values.update(kwargs)
        return cls(**values)

    def to_vector(self):
        """Flat slot vector with inf in every unused slot."""
        config = np.full(N_CONF, np.inf)
        for name, slot in SLOTS.items():
            value = getattr(self, name)
            if name == 'coordinate':
                value = 0 if value == 'EUL' else 1
            elif name == 'boundary':
                value = boundary_code(value)
            config[slot] = float(value)
        return config

    def with_overrides(self, overrides):
        """
        Apply ``n=C`` configuration supplements.

        Parameters
        ----------
        overrides : iterable of str
            Entries like '5=100' (slot 5 set to 100)

        Returns
        -------
        HydroConfig
        """
        config = apply_overrides(self.to_vector(), overrides)
        return HydroConfig.from_vector(
            config, riemann_solver=self.riemann_solver, max_iter=self.max_iter)

    def replace(self, **changes):
        return replace(self, **changes)


def apply_overrides(config, overrides):
    """
    Copy of a slot vector with ``n=C`` entries applied.

    Raises
    ------
    ConfigurationError
        For an entry that does not parse or names a slot out of range
    """
    config = np.array(config, dtype=float)
    for entry in overrides:
        index, sep, value = entry.partition('=')
        if not sep:
            raise ConfigurationError(f"Configuration error in '{entry}'! ERROR before '='!")
        try:
            index = int(index)
        except ValueError:
            raise ConfigurationError(f"Configuration error in '{entry}'! ERROR before '='!") from None
        try:
            value = float(value)
        except ValueError:
            raise ConfigurationError(f"Configuration error in '{entry}'! ERROR after '='!") from None
        if not 0 <= index < N_CONF:
            raise ConfigurationError(f"Configuration slot {index} out of range")
        config[index] = value
    return config
