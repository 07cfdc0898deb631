"""
Piecewise-linear reconstruction.

Cells and interfaces are numbered as

     j-1          j          j+1
    j-1/2  j-1  j+1/2   j   j+3/2  j+1
      o-----X-----o-----X-----o-----X--...

Interface j (0 <= j <= m) separates cell j-1 and cell j; the ghost cells
stand in for cell -1 and cell m.
"""

import numpy as np

from .limiters import minmod2, minmod3
from .state import FIELDS, PrimitiveArrays, Slopes


def center_distances(widths, ghost_widths):
    """
    Distances between neighbouring cell centres, one per interface.

    Parameters
    ----------
    widths : ndarray
        Cell widths, length m
    ghost_widths : tuple of float
        Widths of the left and right ghost cells

    Returns
    -------
    ndarray of length m+1
    """
    ext = np.concatenate(([ghost_widths[0]], widths, [ghost_widths[1]]))
    return 0.5 * (ext[:-1] + ext[1:])


def limited_slopes(state, ghosts, distances, alpha, first_step, previous=None):
    """
    Raw neighbour-difference slopes limited by minmod.

    On the first step the two-argument minmod of the alpha-scaled one-sided
    differences is used. Afterwards the three-argument minmod compares
    them with the previous step's slope.

    Parameters
    ----------
    state : CellState
        Current time level
    ghosts : tuple of Primitive
        Left and right ghost states
    distances : ndarray
        Centre-to-centre distances, length m+1
    alpha : float
        Limiter parameter
    first_step : bool
        Use the two-argument limiter
    previous : Slopes, optional
        Slope history (required unless first_step)

    Returns
    -------
    Slopes
    """
    left_ghost, right_ghost = ghosts
    limited = {}
    for name in FIELDS:
        values = getattr(state, name)
        ext = np.concatenate(([getattr(left_ghost, name)], values,
                              [getattr(right_ghost, name)]))
        diff = np.diff(ext) / distances
        s_left = alpha * diff[:-1]
        s_right = alpha * diff[1:]
        if first_step:
            limited[name] = minmod2(s_left, s_right)
        else:
            limited[name] = minmod3(s_left, s_right, getattr(previous, name))
    return Slopes(**limited)


def interface_values(state, slopes, ghosts, ghost_slopes, widths, ghost_widths):
    """
    Extrapolate cell data to both sides of every interface.

    Returns
    -------
    left, right : PrimitiveArrays
        Values at the left and right side of the m+1 interfaces
    s_left, s_right : PrimitiveArrays
        Slopes of the cells on either side of each interface
    """
    left_ghost, right_ghost = ghosts
    left_gslope, right_gslope = ghost_slopes
    w_left = np.concatenate(([ghost_widths[0]], widths))
    w_right = np.concatenate((widths, [ghost_widths[1]]))

    left, right, s_left, s_right = {}, {}, {}, {}
    for name in FIELDS:
        values = getattr(state, name)
        slope = getattr(slopes, name)
        values_l = np.concatenate(([getattr(left_ghost, name)], values))
        values_r = np.concatenate((values, [getattr(right_ghost, name)]))
        s_left[name] = np.concatenate(([getattr(left_gslope, name)], slope))
        s_right[name] = np.concatenate((slope, [getattr(right_gslope, name)]))
        left[name] = values_l + 0.5 * w_left * s_left[name]
        right[name] = values_r - 0.5 * w_right * s_right[name]

    return (PrimitiveArrays(**left), PrimitiveArrays(**right),
            PrimitiveArrays(**s_left), PrimitiveArrays(**s_right))


def find_invalid(fields, eps):
    """
    Locate the first non-physical entry.

    Parameters
    ----------
    fields : object with rho, u, p (and v) arrays
    eps : float
        Density and pressure below eps count as non-positive

    Returns
    -------
    (index, reason) or None
        reason is '<0.0 error' or 'NAN or INFinite error'
    """
    finite = np.isfinite(fields.rho) & np.isfinite(fields.u) & np.isfinite(fields.p)
    if getattr(fields, 'v', None) is not None:
        finite &= np.isfinite(fields.v)
    negative = (fields.rho < eps) | (fields.p < eps)

    bad = np.flatnonzero(negative | ~finite)
    if bad.size == 0:
        return None
    j = int(bad[0])
    reason = '<0.0 error' if negative[j] else 'NAN or INFinite error'
    return j, reason
