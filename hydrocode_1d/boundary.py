"""
Boundary conditions for the 1D hydrocode.

Each boundary condition produces one ghost (virtual) cell on either side
of the domain, both its primitive state and its slope:

| code | name            | ghost velocity                | ghost rho, p        |
|------|-----------------|-------------------------------|---------------------|
|  -1  | initial         | initial edge cell (frozen)    | initial edge cell   |
|  -2  | reflective      | negated edge value            | edge value          |
|  -4  | free            | edge value                    | edge value          |
|  -5  | periodic        | opposite edge value           | opposite edge value |
| -24  | reflective-free | negated (left), copied (right)| edge value          |

Slopes follow the same rules: reflective negates the velocity slope,
periodic wraps, free and initial copy the adjacent interior slope. The
transverse velocity is always copied (or wrapped).
"""

import logging

from .exceptions import ConfigurationError
from .state import Primitive

log = logging.getLogger(__name__)

INITIAL = -1
REFLECTIVE = -2
FREE = -4
PERIODIC = -5
REFLECTIVE_FREE = -24

BOUNDARY_NAMES = {
    'initial': INITIAL,
    'reflective': REFLECTIVE,
    'free': FREE,
    'periodic': PERIODIC,
    'reflective-free': REFLECTIVE_FREE,
}


def boundary_code(policy):
    """Normalise a boundary name or code to its integer code."""
    if isinstance(policy, str):
        key = policy.strip().lower().replace('_', '-').replace('+', '-')
        if key not in BOUNDARY_NAMES:
            raise ConfigurationError(f"No suitable boundary conditions: '{policy}'")
        return BOUNDARY_NAMES[key]
    try:
        code = int(policy)
    except (TypeError, ValueError):
        raise ConfigurationError(f"No suitable boundary conditions: {policy!r}") from None
    if code not in BOUNDARY_NAMES.values():
        raise ConfigurationError(f"No suitable boundary conditions: {code}")
    return code


def _edge(fields, index):
    """Primitive at cell ``index`` of an object with rho/u/p/v arrays."""
    return Primitive(float(fields.rho[index]), float(fields.u[index]),
                     float(fields.p[index]), float(fields.v[index]))


def _reflect(value):
    return value._replace(u=-value.u)


class BoundaryCondition:
    """Base class for boundary conditions."""

    code = None
    name = None
    # False when the ghost states do not depend on the current solution
    recompute = True

    def ghost_states(self, state):
        """
        Ghost cell states at both ends.

        Parameters
        ----------
        state : CellState
            Current time level

        Returns
        -------
        left, right : Primitive
        """
        raise NotImplementedError

    def ghost_slopes(self, slopes):
        """
        Ghost cell slopes at both ends.

        Parameters
        ----------
        slopes : Slopes
            Limited interior slopes

        Returns
        -------
        left, right : Primitive
        """
        return _edge(slopes, 0), _edge(slopes, -1)

    def ghost_widths(self, widths):
        """Widths of the ghost cells (they mirror the adjacent cells)."""
        return float(widths[0]), float(widths[-1])

    def __repr__(self):
        return f"{type(self).__name__}(code={self.code})"


class InitialBoundary(BoundaryCondition):
    """Ghost cells keep the initial edge values for the whole run."""

    code = INITIAL
    name = 'initial'
    recompute = False

    def __init__(self, initial=None):
        self.initial = initial
        self._ghosts = None

    def ghost_states(self, state):
        if self._ghosts is None:
            source = self.initial if self.initial is not None else state
            self._ghosts = (_edge(source, 0), _edge(source, -1))
        return self._ghosts


class ReflectiveBoundary(BoundaryCondition):
    """Solid walls at both ends."""

    code = REFLECTIVE
    name = 'reflective'

    def ghost_states(self, state):
        return _reflect(_edge(state, 0)), _reflect(_edge(state, -1))

    def ghost_slopes(self, slopes):
        return _reflect(_edge(slopes, 0)), _reflect(_edge(slopes, -1))


class FreeBoundary(BoundaryCondition):
    """Transmissive (outflow) ends."""

    code = FREE
    name = 'free'

    def ghost_states(self, state):
        return _edge(state, 0), _edge(state, -1)


class PeriodicBoundary(BoundaryCondition):
    """The domain wraps around."""

    code = PERIODIC
    name = 'periodic'

    def ghost_states(self, state):
        return _edge(state, -1), _edge(state, 0)

    def ghost_slopes(self, slopes):
        return _edge(slopes, -1), _edge(slopes, 0)

    def ghost_widths(self, widths):
        return float(widths[-1]), float(widths[0])


class ReflectiveFreeBoundary(BoundaryCondition):
    """Solid wall on the left, outflow on the right."""

    code = REFLECTIVE_FREE
    name = 'reflective-free'

    def ghost_states(self, state):
        return _reflect(_edge(state, 0)), _edge(state, -1)

    def ghost_slopes(self, slopes):
        return _reflect(_edge(slopes, 0)), _edge(slopes, -1)


_BOUNDARY_CLASSES = {
    INITIAL: InitialBoundary,
    REFLECTIVE: ReflectiveBoundary,
    FREE: FreeBoundary,
    PERIODIC: PeriodicBoundary,
    REFLECTIVE_FREE: ReflectiveFreeBoundary,
}


def make_boundary(policy, initial=None):
    """
    Create the boundary condition for a configured policy.

    Parameters
    ----------
    policy : int or str
        Boundary code or name
    initial : CellState, optional
        Initial condition, used by the 'initial' policy

    Returns
    -------
    BoundaryCondition

    Raises
    ------
    ConfigurationError
        For an unrecognised policy
    """
    code = boundary_code(policy)
    if code == INITIAL:
        boundary = InitialBoundary(initial)
    else:
        boundary = _BOUNDARY_CLASSES[code]()
    log.info("%s boundary conditions.", boundary.name.capitalize())
    return boundary
