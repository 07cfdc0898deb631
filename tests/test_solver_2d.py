"""Tests for the dimensionally split 2D Eulerian solver."""

import numpy as np
import pytest

from conftest import sod_data
from hydrocode_1d import EulerianSolver
from hydrocode_1d.config import HydroConfig
from hydrocode_1d.exceptions import ConfigurationError
from hydrocode_2d import EulerianSolver2D


@pytest.fixture
def config_2d():
    return HydroConfig(gamma=1.4, total_time=0.05, cfl=0.4, h=0.05, h_y=0.05,
                       boundary="periodic", dim=2)


@pytest.mark.parametrize("order", [1, 2])
def test_uniform_flow_is_steady(config_2d, order):
    shape = (6, 8)
    solver = EulerianSolver2D(config_2d.replace(order=order), np.full(shape, 1.2),
                              np.full(shape, 0.3), np.full(shape, -0.2), np.full(shape, 0.9))
    result = solver.solve()
    assert result.status == "completed"
    np.testing.assert_allclose(result.final.rho, 1.2, rtol=1e-13)
    np.testing.assert_allclose(result.final.u, 0.3, rtol=1e-12)
    np.testing.assert_allclose(result.final.v, -0.2, rtol=1e-12)
    np.testing.assert_allclose(result.final.p, 0.9, rtol=1e-13)


def test_periodic_conservation(config_2d):
    n = 12
    x = (np.arange(n) + 0.5) / n
    X, Y = np.meshgrid(x, x)
    rho = 1.0 + 0.2 * np.sin(2 * np.pi * X) * np.cos(2 * np.pi * Y)
    u = np.full((n, n), 0.5)
    v = 0.1 * np.sin(2 * np.pi * X)
    p = np.ones((n, n))
    config = config_2d.replace(h=1 / n, h_y=1 / n)
    result = EulerianSolver2D(config, rho, u, v, p).solve()
    assert result.steps > 1
    h = 1 / n
    np.testing.assert_allclose(result.final.totals(h, h), result.initial.totals(h, h),
                               rtol=1e-12, atol=1e-13)


def test_rows_match_1d_solver():
    m, n_y = 50, 3
    config_2d = HydroConfig(gamma=1.4, total_time=0.1, cfl=0.45, h=0.02, h_y=0.02,
                            boundary="free", order=1, dim=2)
    rho, u, p = sod_data(m)
    grid = [np.tile(field, (n_y, 1)) for field in (rho, u, np.zeros(m), p)]
    result_2d = EulerianSolver2D(config_2d, *grid).solve()

    config_1d = config_2d.replace(dim=1)
    result_1d = EulerianSolver(config_1d, rho, u, p).solve()

    assert result_2d.steps == result_1d.steps
    for i in range(n_y):
        np.testing.assert_allclose(result_2d.final.rho[i], result_1d.final.rho, rtol=1e-12)
        np.testing.assert_allclose(result_2d.final.p[i], result_1d.final.p, rtol=1e-12)
    np.testing.assert_allclose(result_2d.final.v, 0.0, atol=1e-14)


def test_columns_see_normal_velocity():
    """Sod problem along y with reflective walls drives v, not u."""
    m = 40
    config = HydroConfig(gamma=1.4, total_time=0.1, cfl=0.45, h=0.025, h_y=0.025,
                         boundary="reflective", dim=2)
    rho, _, p = sod_data(m)
    grid_rho = np.tile(rho[:, None], (1, 4))
    grid_p = np.tile(p[:, None], (1, 4))
    zeros = np.zeros((m, 4))
    result = EulerianSolver2D(config, grid_rho, zeros, zeros, grid_p).solve()
    assert np.max(result.final.v) > 0.5
    np.testing.assert_allclose(result.final.u, 0.0, atol=1e-14)


def test_requires_dim_two(config_2d):
    with pytest.raises(ConfigurationError):
        EulerianSolver2D(config_2d.replace(dim=1), *(np.ones((3, 3)),) * 4)


def test_shape_mismatch(config_2d):
    with pytest.raises(ConfigurationError):
        EulerianSolver2D(config_2d, np.ones((3, 3)), np.ones((3, 3)),
                         np.ones((3, 4)), np.ones((3, 3)))


@pytest.mark.parametrize("order", [1, 2])
def test_time_step_respects_cfl_in_both_sweeps(order):
    n = 24
    rho_1d, _, p_1d = sod_data(n)
    zeros = np.zeros((n, n))
    config = HydroConfig(gamma=1.4, total_time=0.2, cfl=0.9, h=1 / n, h_y=1 / n,
                         boundary="free", order=order, dim=2)
    solver = EulerianSolver2D(config, np.outer(rho_1d, rho_1d), zeros, zeros,
                              np.outer(p_1d, p_1d))
    field, t = solver.field, 0.0
    for k in range(1, 6):
        row_slopes = [kernel.slopes for kernel in solver.rows]
        column_slopes = [kernel.slopes for kernel in solver.columns]
        new, tau, failure = solver.step(field, k, t)
        assert failure is None

        # Replay the sweeps from the same level to measure both bounds
        swept, _, h_x, _ = solver.sweep(field, solver.rows, row_slopes, k, t, tau, axis=1)
        _, _, h_y, _ = solver.sweep(swept, solver.columns, column_slopes, k, t, tau, axis=0)
        assert tau <= config.cfl * min(h_x, h_y) * (1 + 1e-12)
        field, t = new, t + tau


def test_failed_y_sweep_keeps_row_slopes():
    n_y, n_x = 40, 8
    rho_y, _, p_y = sod_data(n_y)
    x = (np.arange(n_x) + 0.5) / n_x
    rho = np.outer(rho_y, 1.0 + 0.1 * np.sin(2 * np.pi * x))
    p = np.tile(p_y[:, None], (1, n_x))
    zeros = np.zeros((n_y, n_x))
    # Wide cells in x, narrow in y: tau is stable for rows only
    config = HydroConfig(gamma=1.4, max_steps=1, tau=0.05, h=1.0, h_y=0.01,
                         boundary="free", order=2, dim=2)
    solver = EulerianSolver2D(config, rho, zeros, zeros, p)

    field, tau, failure = solver.step(solver.field, 1)
    assert failure is not None
    assert "y-sweep" in failure.stage
    assert field is solver.field and tau == 0.0
    for kernel in solver.rows + solver.columns:
        np.testing.assert_array_equal(kernel.slopes.rho, 0.0)
