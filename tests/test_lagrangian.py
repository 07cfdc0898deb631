"""Tests for the Lagrangian Godunov/GRP solver."""

import numpy as np
import pytest

from conftest import sod_data
from hydrocode_1d import ExactRiemannSolution, LagrangianSolver, make_solver
from hydrocode_1d.config import HydroConfig
from hydrocode_1d.eos import sound_speed
from hydrocode_1d.state import Slopes


@pytest.fixture
def lag_config():
    """Sod shock tube on 200 Lagrangian cells up to t = 0.2."""
    return HydroConfig(gamma=1.4, total_time=0.2, cfl=0.45, h=1 / 200,
                       boundary="free", order=1, coordinate="LAG")


def test_initial_grid(lag_config):
    solver = LagrangianSolver(lag_config, *sod_data(200))
    np.testing.assert_allclose(solver.state.x, np.arange(201) / 200)
    np.testing.assert_allclose(solver.state.mass, solver.state.rho / 200)
    assert make_solver(lag_config, *sod_data(10)).coordinate == "LAG"


@pytest.mark.parametrize("order", [1, 2])
def test_uniform_flow_moves_the_grid(lag_config, order):
    config = lag_config.replace(order=order, total_time=0.1)
    m = 40
    solver = LagrangianSolver(config, np.full(m, 0.5), np.full(m, 0.3), np.full(m, 2.0))
    result = solver.solve()
    np.testing.assert_allclose(result.final.rho, 0.5, rtol=1e-12)
    np.testing.assert_allclose(result.final.p, 2.0, rtol=1e-12)
    np.testing.assert_allclose(result.final.u, 0.3, rtol=1e-12)
    np.testing.assert_allclose(result.final.x, result.initial.x + 0.3 * result.time,
                               atol=1e-12)


def test_sod_shock_tube_first_order(lag_config):
    solver = LagrangianSolver(lag_config, *sod_data(200))
    result = solver.solve()
    assert result.status == "completed"

    x = solver.cell_centers()
    exact = ExactRiemannSolution(gamma=1.4)
    errors = solver.compute_errors(*exact.sample(x, result.time))
    assert errors["rho_L1"] < 0.03
    assert errors["p_L1"] < 0.03

    # Pressure falls through the rarefaction and the shock
    p = result.final.p
    assert p[0] == pytest.approx(1.0, rel=1e-6)
    assert p[-1] == pytest.approx(0.1, rel=1e-6)
    assert np.max(np.diff(p)) < 0.02
    # Contact has moved right with u* ~ 0.927
    contact = result.final.x[100]
    assert contact == pytest.approx(0.5 + 0.92745 * result.time, abs=0.01)


def test_sod_second_order_wall(lag_config):
    config = lag_config.replace(order=2, boundary="reflective-free")
    result = LagrangianSolver(config, *sod_data(200)).solve()
    assert result.status == "completed"
    assert np.all(result.final.rho > 0) and np.all(result.final.p > 0)
    assert np.all(np.diff(result.final.x) > 0)


def test_reflective_wall_stays_put(lag_config):
    config = lag_config.replace(boundary="reflective", h=0.01, total_time=0.4)
    result = LagrangianSolver(config, *sod_data(100)).solve()
    assert result.final.x[0] == 0.0
    assert result.final.x[-1] == result.initial.x[-1]
    np.testing.assert_allclose(result.final.mass, result.initial.mass)


@pytest.mark.parametrize("order", [1, 2])
def test_periodic_conservation(lag_config, order):
    m = 50
    config = lag_config.replace(order=order, boundary="periodic", h=1 / m,
                                total_time=np.inf, max_steps=20, tau=2e-3)
    x = (np.arange(m) + 0.5) / m
    rho = 1.0 + 0.2 * np.sin(2 * np.pi * x)
    u = 1.0 + 0.1 * np.cos(2 * np.pi * x)
    p = np.ones(m)
    result = LagrangianSolver(config, rho, u, p).solve()
    assert result.steps == 20
    np.testing.assert_allclose(result.final.totals(), result.initial.totals(), rtol=1e-12)
    # The periodic box moves as a whole
    np.testing.assert_allclose(result.final.x[-1] - result.final.x[0], 1.0, rtol=1e-12)


def test_zero_alpha_reproduces_first_order(lag_config):
    rho, u, p = sod_data(100)
    config = lag_config.replace(h=0.01, total_time=0.1)
    first = LagrangianSolver(config.replace(order=1), rho, u, p).solve()
    second = LagrangianSolver(config.replace(order=2, alpha=0.0), rho, u, p).solve()
    assert first.steps == second.steps
    np.testing.assert_array_equal(first.final.rho, second.final.rho)
    np.testing.assert_array_equal(first.final.p, second.final.p)
    np.testing.assert_array_equal(first.final.x, second.final.x)


@pytest.mark.parametrize("order", [1, 2])
def test_time_step_respects_cfl(lag_config, order):
    config = lag_config.replace(order=order)
    solver = LagrangianSolver(config, *sod_data(200))
    state, slopes = solver.state, Slopes.zeros(solver.m)
    t = 0.0
    for k in range(1, 6):
        _, faces, w_left, w_right = solver.reconstruct(state, slopes, k)
        left, right = faces[0], faces[1]
        result = solver.step(state, slopes, k, t)
        assert result.failure is None
        speed = np.maximum((np.abs(left.u) + sound_speed(left.rho, left.p, config.gamma)) / w_left,
                           (np.abs(right.u) + sound_speed(right.rho, right.p, config.gamma)) / w_right)
        assert result.tau * np.max(speed) <= config.cfl * (1 + 1e-12)
        state, slopes, t = result.state, result.slopes, t + result.tau
