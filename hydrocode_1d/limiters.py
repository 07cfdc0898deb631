"""
Minmod-family slope limiters.

Both functions accept scalars or ndarrays and broadcast.
"""

import numpy as np


def minmod2(a, b):
    """
    Two-argument minmod.

    Zero if a and b disagree in sign (or either is zero), otherwise the
    argument of smaller magnitude.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    same_sign = a * b > 0
    result = np.where(same_sign, np.sign(a) * np.minimum(np.abs(a), np.abs(b)), 0.0)
    return result if result.ndim else float(result)


def minmod3(a, b, c):
    """
    Three-argument minmod.

    If a, b and c share a strict sign, the value of smallest magnitude
    with that sign; otherwise zero.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    c = np.asarray(c, dtype=float)
    positive = (a > 0) & (b > 0) & (c > 0)
    negative = (a < 0) & (b < 0) & (c < 0)
    smallest = np.minimum(np.minimum(np.abs(a), np.abs(b)), np.abs(c))
    result = np.where(positive, smallest, np.where(negative, -smallest, 0.0))
    return result if result.ndim else float(result)
