"""Tests for the Eulerian Godunov/GRP solver."""

import numpy as np
import pytest

from conftest import smooth_bump, sod_data
from hydrocode_1d import EulerianSolver, ExactRiemannSolution
from hydrocode_1d.eos import sound_speed
from hydrocode_1d.exceptions import ConfigurationError, PhysicalValidityError
from hydrocode_1d.state import Slopes


def run(config, rho, u, p, **kwargs):
    solver = EulerianSolver(config, rho, u, p)
    return solver, solver.solve(**kwargs)


@pytest.mark.parametrize("order", [1, 2])
@pytest.mark.parametrize("boundary", ["free", "periodic", "initial"])
def test_uniform_flow_is_steady(sod_config, order, boundary):
    config = sod_config.replace(order=order, boundary=boundary, total_time=0.05)
    m = 20
    _, result = run(config, np.full(m, 0.8), np.full(m, 0.4), np.full(m, 1.2))
    assert result.status == "completed"
    np.testing.assert_allclose(result.final.rho, 0.8, rtol=1e-13)
    np.testing.assert_allclose(result.final.u, 0.4, rtol=1e-13)
    np.testing.assert_allclose(result.final.p, 1.2, rtol=1e-13)


@pytest.mark.parametrize("order", [1, 2])
def test_periodic_conservation(periodic_config, order):
    config = periodic_config.replace(order=order)
    rho, u, p = smooth_bump(50)
    p = p + 0.1 * np.cos(2 * np.pi * (np.arange(50) + 0.5) / 50)
    solver, result = run(config, rho, u, p)
    assert result.steps == 20
    before = result.initial.totals(config.h)
    after = result.final.totals(config.h)
    np.testing.assert_allclose(after, before, rtol=1e-12)


def test_zero_alpha_reproduces_first_order(sod_config):
    rho, u, p = sod_data(50)
    config = sod_config.replace(h=0.02, total_time=0.1)
    _, first = run(config.replace(order=1), rho, u, p)
    _, second = run(config.replace(order=2, alpha=0.0), rho, u, p)
    assert first.steps == second.steps
    np.testing.assert_array_equal(first.final.rho, second.final.rho)
    np.testing.assert_array_equal(first.final.u, second.final.u)
    np.testing.assert_array_equal(first.final.p, second.final.p)


@pytest.mark.parametrize("order", [1, 2])
def test_time_step_respects_cfl(sod_config, order):
    config = sod_config.replace(order=order)
    solver = EulerianSolver(config, *sod_data(100))
    state, slopes = solver.state, Slopes.zeros(solver.m)
    t = 0.0
    for k in range(1, 6):
        _, faces, w_left, w_right = solver.reconstruct(state, slopes, k)
        left, right = faces[0], faces[1]
        result = solver.step(state, slopes, k, t)
        speed = np.maximum((np.abs(left.u) + sound_speed(left.rho, left.p, config.gamma)) / w_left,
                           (np.abs(right.u) + sound_speed(right.rho, right.p, config.gamma)) / w_right)
        assert result.tau * np.max(speed) <= config.cfl * (1 + 1e-12)
        state, slopes, t = result.state, result.slopes, t + result.tau


def test_final_time_is_reached_exactly(sod_config):
    _, result = run(sod_config, *sod_data(100))
    assert result.time == pytest.approx(0.2, abs=1e-12)
    assert result.tau <= 0.45 * 0.01
    assert len(result.cpu_time) == result.steps


@pytest.mark.parametrize("order,limit", [(1, 0.04), (2, 0.025)])
def test_sod_shock_tube(sod_config, order, limit):
    solver, result = run(sod_config.replace(order=order), *sod_data(100))
    exact = ExactRiemannSolution(gamma=1.4)
    x = solver.cell_centers()
    errors = solver.compute_errors(*exact.sample(x, result.time))
    assert errors["rho_L1"] < limit
    assert errors["p_L1"] < limit
    assert np.all(result.final.rho > 0) and np.all(result.final.p > 0)


def test_second_order_is_more_accurate_on_sod(sod_config):
    exact = ExactRiemannSolution(gamma=1.4)
    errors = {}
    for order in (1, 2):
        solver, result = run(sod_config.replace(order=order), *sod_data(100))
        errors[order] = solver.compute_errors(*exact.sample(solver.cell_centers(), result.time))
    assert errors[2]["rho_L1"] < errors[1]["rho_L1"]


def test_smooth_bump_keeps_its_peak(periodic_config):
    config = periodic_config.replace(total_time=1.0, max_steps=np.inf)
    peaks = {}
    for order in (1, 2):
        _, result = run(config.replace(order=order), *smooth_bump(50))
        peaks[order] = result.final.rho.max()
    assert peaks[2] > peaks[1] + 0.01


def test_reflective_walls_keep_mass(sod_config):
    config = sod_config.replace(order=1, boundary="reflective", total_time=0.5)
    _, result = run(config, *sod_data(100))
    np.testing.assert_allclose(result.final.totals(config.h)[0],
                               result.initial.totals(config.h)[0], rtol=1e-12)


def test_fixed_time_step(sod_config):
    config = sod_config.replace(total_time=np.inf, max_steps=5, tau=1e-3)
    _, result = run(config, *sod_data(100))
    assert result.steps == 5
    assert result.time == pytest.approx(5e-3)
    assert result.tau == 1e-3


def test_save_interval_history(sod_config):
    solver, result = run(sod_config, *sod_data(100), save_interval=0.05)
    assert result.time_history[0] == 0.0
    assert result.time_history[-1] == pytest.approx(0.2)
    assert len(result.history) == len(result.time_history) >= 4


class TestFailure:
    @pytest.fixture
    def unstable(self, sod_config):
        # CFL far beyond the stability limit empties the cell left of the jump
        return sod_config.replace(order=1, cfl=5.0)

    def test_stops_gracefully(self, unstable):
        rho, u, p = sod_data(100)
        solver, result = run(unstable, rho, u, p)
        assert result.status == "failed"
        assert result.failed
        assert result.steps == 0
        assert result.failure.stage == "Update"
        assert result.failure.index == 49
        np.testing.assert_array_equal(result.final.rho, rho)

    def test_raise_on_failure(self, unstable):
        solver = EulerianSolver(unstable, *sod_data(100))
        with pytest.raises(PhysicalValidityError, match="Update"):
            solver.solve(raise_on_failure=True)


def test_lagrangian_config_rejected(sod_config):
    with pytest.raises(ConfigurationError):
        EulerianSolver(sod_config.replace(coordinate="LAG"), *sod_data(10))


def test_mismatched_initial_data(sod_config):
    with pytest.raises(ConfigurationError):
        EulerianSolver(sod_config, np.ones(10), np.zeros(9), np.ones(10))
