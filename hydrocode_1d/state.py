"""
Data model for the 1D hydrocode.

Primitive variables are density, velocity and pressure. The transverse
velocity ``v`` is only carried by the Eulerian kernel so that the 2D
split driver can reuse it; it stays zero for 1D runs.
"""

from dataclasses import dataclass, field, replace
from typing import NamedTuple, Optional

import numpy as np

from .eos import total_energy


class Primitive(NamedTuple):
    """Single primitive state (or its slope / time derivative)."""

    rho: float
    u: float
    p: float
    v: float = 0.0


@dataclass
class CellState:
    """
    Cell-averaged fluid variables at one time level.

    Attributes
    ----------
    rho, u, p : ndarray
        Density, velocity and pressure, length m
    E : ndarray
        Specific total energy 0.5*(u^2 + v^2) + p/((gamma-1)*rho)
    v : ndarray
        Transverse velocity (Eulerian only)
    x : ndarray, optional
        Interface positions, length m+1 (Lagrangian only)
    mass : ndarray, optional
        Fixed cell masses, length m (Lagrangian only)
    """

    rho: np.ndarray
    u: np.ndarray
    p: np.ndarray
    E: np.ndarray
    v: np.ndarray = None
    x: Optional[np.ndarray] = None
    mass: Optional[np.ndarray] = None

    def __post_init__(self):
        if self.v is None:
            self.v = np.zeros_like(self.rho)

    @classmethod
    def from_primitive(cls, rho, u, p, gamma, v=None, h=None, lagrangian=False):
        """
        Build a cell state from primitive arrays.

        For Lagrangian states the interfaces start at x_k = h*k and the
        cell masses are h*rho.
        """
        rho = np.asarray(rho, dtype=float).copy()
        u = np.asarray(u, dtype=float).copy()
        p = np.asarray(p, dtype=float).copy()
        v = np.zeros_like(rho) if v is None else np.asarray(v, dtype=float).copy()
        E = total_energy(rho, u, p, gamma, v)

        if not lagrangian:
            return cls(rho=rho, u=u, p=p, E=E, v=v)

        m = len(rho)
        x = h * np.arange(m + 1, dtype=float)
        return cls(rho=rho, u=u, p=p, E=E, v=v, x=x, mass=h * rho)

    @property
    def size(self):
        return len(self.rho)

    def copy(self):
        return replace(
            self,
            rho=self.rho.copy(), u=self.u.copy(), p=self.p.copy(),
            E=self.E.copy(), v=self.v.copy(),
            x=None if self.x is None else self.x.copy(),
            mass=None if self.mass is None else self.mass.copy(),
        )

    def widths(self, h):
        """Cell widths: interface spacing (Lagrangian) or constant h."""
        if self.x is None:
            return np.full(self.size, h)
        return np.diff(self.x)

    def totals(self, h=None):
        """
        Total mass, momentum and energy.

        Parameters
        ----------
        h : float, optional
            Cell width for Eulerian states. Lagrangian states use their
            fixed cell masses.

        Returns
        -------
        mass, momentum, energy : floats
        """
        if self.mass is not None:
            weight = self.mass
        else:
            weight = self.rho * h
        return (np.sum(weight),
                np.sum(weight * self.u),
                np.sum(weight * self.E))


FIELDS = ('rho', 'u', 'p', 'v')


@dataclass
class PrimitiveArrays:
    """Arrays of density, velocity, pressure and transverse velocity."""

    rho: np.ndarray
    u: np.ndarray
    p: np.ndarray
    v: np.ndarray = field(default=None)

    def __post_init__(self):
        if self.v is None:
            self.v = np.zeros_like(self.rho)

    @classmethod
    def zeros(cls, m):
        return cls(np.zeros(m), np.zeros(m), np.zeros(m), np.zeros(m))

    def at(self, j):
        return Primitive(float(self.rho[j]), float(self.u[j]),
                         float(self.p[j]), float(self.v[j]))

    def copy(self):
        return type(self)(self.rho.copy(), self.u.copy(), self.p.copy(), self.v.copy())


class Slopes(PrimitiveArrays):
    """Limited spatial slopes, one set per cell."""
