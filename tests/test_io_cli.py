"""Tests for file input/output, the command line runners and plotting."""

import os

import numpy as np
import pytest

from conftest import sod_data
from hydrocode_1d import EulerianSolver
from hydrocode_1d.exceptions import DataReadError, DirectoryError
from hydrocode_1d.file_io import read_config, read_initial_fields, write_results
from hydrocode_1d.visualization import Visualizer

import run_hydrocode

CONFIG_TXT = """\
# Sod shock tube
6 1.4   # gamma
1 0.1   # total time
7 0.45  # CFL
10 0.02 # h
17 -4   # free boundary
"""

CONFIG_2D_TXT = """\
6 1.4
1 1.0
7 0.45
10 0.1
11 0.1
17 -4
"""


@pytest.fixture
def case_1d(tmp_path):
    """Input directory with a 50-cell Sod problem."""
    directory = tmp_path / "sod"
    directory.mkdir()
    rho, u, p = sod_data(50)
    np.savetxt(directory / "RHO.txt", rho)
    np.savetxt(directory / "U.txt", u)
    np.savetxt(directory / "P.txt", p)
    (directory / "config.txt").write_text(CONFIG_TXT)
    return directory


@pytest.fixture
def case_2d(tmp_path):
    directory = tmp_path / "sod2d"
    directory.mkdir()
    rho, u, p = sod_data(10)
    np.savetxt(directory / "RHO.txt", np.tile(rho, (4, 1)))
    np.savetxt(directory / "U.txt", np.zeros((4, 10)))
    np.savetxt(directory / "V.txt", np.zeros((4, 10)))
    np.savetxt(directory / "P.txt", np.tile(p, (4, 1)))
    (directory / "config.txt").write_text(CONFIG_2D_TXT)
    return directory


class TestFileIO:
    def test_read_initial_fields(self, case_1d):
        fields = read_initial_fields(str(case_1d))
        assert set(fields) == {"rho", "u", "p"}
        assert fields["rho"].shape == (50,)
        assert fields["rho"][0] == 1.0 and fields["p"][-1] == 0.1

    def test_read_2d_fields(self, case_2d):
        fields = read_initial_fields(str(case_2d), dim=2)
        assert fields["v"].shape == (4, 10)

    def test_read_config(self, case_1d):
        config = read_config(str(case_1d))
        assert config[6] == 1.4 and config[17] == -4
        assert np.isinf(config[5])

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DirectoryError):
            read_initial_fields(str(tmp_path / "nowhere"))

    def test_missing_field(self, case_1d):
        os.remove(case_1d / "U.txt")
        with pytest.raises(DataReadError):
            read_initial_fields(str(case_1d))

    def test_inconsistent_lengths(self, case_1d):
        np.savetxt(case_1d / "P.txt", np.ones(49))
        with pytest.raises(DataReadError):
            read_initial_fields(str(case_1d))

    def test_malformed_config(self, case_1d):
        (case_1d / "config.txt").write_text("6 gamma\n")
        with pytest.raises(DataReadError):
            read_config(str(case_1d))

    def test_write_results(self, tmp_path, sod_config):
        solver = EulerianSolver(sod_config.replace(total_time=0.01), *sod_data(100))
        result = solver.solve()
        written = write_results(str(tmp_path / "out"), result, sod_config)
        names = sorted(os.path.basename(path) for path in written)
        assert names == ["E.txt", "P.txt", "RHO.txt", "U.txt", "log.txt"]
        rho = np.loadtxt(tmp_path / "out" / "RHO.txt")
        assert rho.shape == (2, 100)
        np.testing.assert_allclose(rho[1], result.final.rho, rtol=1e-9)
        log = (tmp_path / "out" / "log.txt").read_text()
        assert f"steps {result.steps}" in log


class TestRunner:
    @pytest.mark.parametrize("order_scheme,coordinate", [
        ("1", "EUL"), ("2_GRP", "EUL"), ("1_Godunov", "LAG"), ("2_Toro", "LAG"),
    ])
    def test_1d_runs(self, case_1d, tmp_path, order_scheme, coordinate):
        out = tmp_path / "out"
        status = run_hydrocode.main([str(case_1d), str(out), "1", order_scheme, coordinate])
        assert status == run_hydrocode.EXIT_SUCCESS
        assert (out / "RHO.txt").exists()
        assert (out / "X.txt").exists() == (coordinate == "LAG")

    def test_2d_run(self, case_2d, tmp_path):
        out = tmp_path / "out2d"
        status = run_hydrocode.main([str(case_2d), str(out), "2", "2_GRP", "EUL", "5=3"])
        assert status == run_hydrocode.EXIT_SUCCESS
        assert np.loadtxt(out / "V.txt").shape == (4, 10)
        assert "steps 3" in (out / "log.txt").read_text()

    def test_missing_input_directory(self, tmp_path):
        status = run_hydrocode.main([str(tmp_path / "none"), str(tmp_path / "out"),
                                     "1", "1", "EUL"])
        assert status == run_hydrocode.EXIT_DIRECTORY

    def test_missing_data(self, case_1d, tmp_path):
        os.remove(case_1d / "RHO.txt")
        status = run_hydrocode.main([str(case_1d), str(tmp_path / "out"), "1", "1", "EUL"])
        assert status == run_hydrocode.EXIT_DATA

    @pytest.mark.parametrize("args", [
        ["1", "3", "EUL"],
        ["1", "2_HLLC", "EUL"],
        ["1", "2", "EUL", "5100"],
        ["2", "2", "LAG"],
    ])
    def test_argument_errors(self, case_1d, tmp_path, args):
        status = run_hydrocode.main([str(case_1d), str(tmp_path / "out"), *args])
        assert status == run_hydrocode.EXIT_ARGUMENT

    def test_bad_dimension_exits_with_argument_error(self, case_1d, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            run_hydrocode.main([str(case_1d), str(tmp_path / "out"), "3", "1", "EUL"])
        assert excinfo.value.code == run_hydrocode.EXIT_ARGUMENT

    def test_calculation_failure(self, case_1d, tmp_path):
        status = run_hydrocode.main([str(case_1d), str(tmp_path / "out"), "1", "1", "EUL", "7=5"])
        assert status == run_hydrocode.EXIT_CALCULATION
        assert "failure" in (tmp_path / "out" / "log.txt").read_text()


class TestVisualization:
    def test_plots_and_data(self, tmp_path, sod_config):
        solver = EulerianSolver(sod_config.replace(total_time=0.02), *sod_data(50))
        result = solver.solve()
        viz = Visualizer(output_dir=str(tmp_path))
        x = solver.cell_centers()
        rho, u, p = solver.get_solution()
        assert os.path.exists(viz.plot_comparison(x, rho, u, p, rho, u, p, t=result.time))
        assert os.path.exists(viz.plot_errors(x, rho, u, p, rho, u, p))
        path = viz.save_data(x, rho, u, p, result.time)
        assert np.load(path)["rho"].shape == (50,)

    def test_sod_demo(self, tmp_path):
        from hydrocode_1d.main import main

        status = main(["--nx", "40", "--t_end", "0.05", "--no_animation",
                       "--output_dir", str(tmp_path)])
        assert status == 0
        assert (tmp_path / "final_solution.png").exists()

    def test_field_2d_and_error_table(self, tmp_path, capsys):
        viz = Visualizer(output_dir=str(tmp_path))
        field = np.outer(np.linspace(1.0, 2.0, 4), np.ones(6))
        assert os.path.exists(viz.plot_field_2d(field, 0.1, 0.1, t=0.05))

        errors = {f"{key}_{norm}": 1e-3 for key in ("rho", "u", "p")
                  for norm in ("L1", "L2", "Linf")}
        viz.print_error_summary(errors)
        out = capsys.readouterr().out
        assert "Linf" in out
        assert out.count("1.000000e-03") == 9

    def test_lagrangian_grid_rug(self, tmp_path):
        x_faces = np.linspace(0.0, 1.0, 11)
        x = 0.5 * (x_faces[:-1] + x_faces[1:])
        viz = Visualizer(output_dir=str(tmp_path))
        path = viz.plot_comparison(x, np.ones(10), np.zeros(10), np.ones(10),
                                   t=0.1, x_faces=x_faces, filename="lag.png")
        assert os.path.exists(path)
