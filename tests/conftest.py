"""Pytest configuration and fixtures for hydrocode tests."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from hydrocode_1d.config import HydroConfig


def sod_data(m):
    """Sod shock tube data on [0, 1] with m cells."""
    x = (np.arange(m) + 0.5) / m
    left = x < 0.5
    rho = np.where(left, 1.0, 0.125)
    u = np.zeros(m)
    p = np.where(left, 1.0, 0.1)
    return rho, u, p


def smooth_bump(m, amplitude=0.2):
    """Density wave 1 + a sin(2 pi x) advected with u = 1 at p = 1."""
    x = (np.arange(m) + 0.5) / m
    rho = 1.0 + amplitude * np.sin(2 * np.pi * x)
    return rho, np.ones(m), np.ones(m)


@pytest.fixture
def sod_config():
    """Sod shock tube on 100 cells up to t = 0.2."""
    return HydroConfig(gamma=1.4, total_time=0.2, cfl=0.45, h=0.01, boundary="free")


@pytest.fixture
def periodic_config():
    """Periodic unit interval on 50 cells, stepped 20 times."""
    return HydroConfig(gamma=1.4, total_time=10.0, max_steps=20, cfl=0.45,
                       h=0.02, boundary="periodic")


@pytest.fixture
def sod_states():
    """Left and right Sod states with the exact star region values."""
    return {
        "left": (1.0, 0.0, 1.0),
        "right": (0.125, 0.0, 0.1),
        "p_star": 0.30313,
        "u_star": 0.92745,
        "rho_star_left": 0.42632,
        "rho_star_right": 0.26557,
    }
