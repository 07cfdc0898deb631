"""
Perfect-gas equation of state.

    p = (gamma - 1) * rho * e
    c = sqrt(gamma * p / rho)
"""

import numpy as np


def sound_speed(rho, p, gamma):
    """
    Compute sound speed c = sqrt(gamma * p / rho).

    Returns NaN where rho <= 0 (or where the ratio is negative); callers
    are expected to validate positivity beforehand.
    """
    rho = np.asarray(rho, dtype=float)
    p = np.asarray(p, dtype=float)
    with np.errstate(divide='ignore', invalid='ignore'):
        c = np.sqrt(gamma * p / rho)
    c = np.where(rho > 0, c, np.nan)
    return c if c.ndim else float(c)


def total_energy(rho, u, p, gamma, v=0.0):
    """Specific total energy E = 0.5*(u^2 + v^2) + p/((gamma-1)*rho)."""
    return 0.5 * (u**2 + v**2) + p / (gamma - 1.0) / rho


def pressure_from_energy(rho, u, E, gamma, v=0.0):
    """Pressure from specific total energy."""
    return (gamma - 1.0) * rho * (E - 0.5 * (u**2 + v**2))


def primitive_to_conservative(rho, u, p, gamma, v=None):
    """
    Convert primitive variables to conservative variables.

    Returns
    -------
    U : ndarray of shape (3, n), or (4, n) when v is given
        [rho, rho*u, rho*E] or [rho, rho*u, rho*v, rho*E]
    """
    rho = np.asarray(rho, dtype=float)
    if v is None:
        E = total_energy(rho, u, p, gamma)
        return np.array([rho, rho * u, rho * E])
    E = total_energy(rho, u, p, gamma, v)
    return np.array([rho, rho * u, rho * v, rho * E])


def conservative_to_primitive(U, gamma):
    """
    Convert conservative variables back to primitive variables.

    Returns
    -------
    rho, u, p : tuple of ndarrays (rho, u, v, p for 4-component input)
    """
    rho = U[0]
    u = U[1] / rho
    if len(U) == 3:
        p = (gamma - 1.0) * (U[2] - 0.5 * rho * u**2)
        return rho, u, p
    v = U[2] / rho
    p = (gamma - 1.0) * (U[3] - 0.5 * rho * (u**2 + v**2))
    return rho, u, v, p
