"""
Plain-text input and output of hydrocode runs.

An input directory holds one whitespace-separated text file per initial
field (RHO.txt, U.txt, P.txt and, for 2D runs, V.txt) and a config.txt
with one ``index value`` pair per line:

    # gamma
    6 1.4
    # total time
    1 0.2

Results are written in the same layout (RHO.txt, U.txt, P.txt, E.txt,
plus X.txt for moving grids and V.txt for 2D runs) together with a
log.txt recording the step count and the CPU time.
"""

import logging
import os

import numpy as np

from .config import N_CONF
from .exceptions import DataReadError, DirectoryError

log = logging.getLogger(__name__)

FIELD_FILES = {'rho': 'RHO.txt', 'u': 'U.txt', 'p': 'P.txt', 'v': 'V.txt'}


def _check_directory(directory):
    if not os.path.isdir(directory):
        raise DirectoryError(f"Input directory '{directory}' does not exist")


def _load(path, ndmin):
    if not os.path.isfile(path):
        raise DataReadError(f"Cannot open input file '{path}'")
    try:
        data = np.loadtxt(path, dtype=float, ndmin=ndmin)
    except ValueError as err:
        raise DataReadError(f"Malformed data in '{path}': {err}") from err
    if data.size == 0:
        raise DataReadError(f"No data in '{path}'")
    return data


def read_initial_fields(directory, dim=1):
    """
    Read initial fields from a directory.

    Parameters
    ----------
    directory : str
        Input directory
    dim : int
        1 (RHO, U, P as flat lists) or 2 (RHO, U, V, P as n_y x n_x grids)

    Returns
    -------
    dict of ndarray
        Keys 'rho', 'u', 'p' (and 'v' for 2D)

    Raises
    ------
    DirectoryError
        Missing input directory
    DataReadError
        Missing, malformed or inconsistent files
    """
    _check_directory(directory)
    names = ('rho', 'u', 'p') if dim == 1 else ('rho', 'u', 'v', 'p')

    fields = {}
    for name in names:
        path = os.path.join(directory, FIELD_FILES[name])
        data = _load(path, ndmin=2 if dim == 2 else 1)
        fields[name] = data.ravel() if dim == 1 else data

    shape = fields['rho'].shape
    for name, data in fields.items():
        if data.shape != shape:
            raise DataReadError(
                f"Field {FIELD_FILES[name]} has shape {data.shape}, expected {shape}")

    log.info("Read %s initial fields of shape %s from '%s'.",
             ', '.join(FIELD_FILES[n][:-4] for n in names), shape, directory)
    return fields


def read_config(directory):
    """
    Read the configuration slot vector from ``config.txt``.

    Returns
    -------
    ndarray of length N_CONF
        Unset slots hold inf
    """
    _check_directory(directory)
    path = os.path.join(directory, 'config.txt')
    if not os.path.isfile(path):
        raise DataReadError(f"Cannot open configuration file '{path}'")

    config = np.full(N_CONF, np.inf)
    with open(path) as f:
        for lineno, line in enumerate(f, 1):
            line = line.split('#', 1)[0].strip()
            if not line:
                continue
            parts = line.split()
            try:
                index, value = int(parts[0]), float(parts[1])
            except (IndexError, ValueError):
                raise DataReadError(f"{path}:{lineno}: expected 'index value', got '{line}'") from None
            if not 0 <= index < N_CONF:
                raise DataReadError(f"{path}:{lineno}: configuration slot {index} out of range")
            config[index] = value
            log.debug("%3d-th configuration: %g", index, value)
    return config


def write_results(directory, result, config):
    """
    Write a run's time levels and CPU time log.

    1D runs write the initial and the final level as two rows per file;
    2D runs write the final level as an n_y x n_x grid.

    Parameters
    ----------
    directory : str
        Output directory (created if needed)
    result : SolverResult
    config : HydroConfig

    Returns
    -------
    list of str
        Paths written
    """
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as err:
        raise DirectoryError(f"Cannot create output directory '{directory}': {err}") from err

    names = ['rho', 'u', 'p', 'E']
    if config.dim == 2:
        names.insert(2, 'v')
    if result.final.x is not None:
        names.append('x')

    written = []
    for name in names:
        path = os.path.join(directory, name.upper() + '.txt')
        final = getattr(result.final, name)
        if config.dim == 2:
            data = final
        else:
            data = np.vstack([getattr(result.initial, name), final])
        np.savetxt(path, data, fmt='%.10g')
        written.append(path)

    path = os.path.join(directory, 'log.txt')
    with open(path, 'w') as f:
        f.write(f"status {result.status}\n")
        f.write(f"steps {result.steps}\n")
        f.write(f"time {result.time:.10g}\n")
        f.write(f"cpu_time {np.sum(result.cpu_time):.6g}\n")
        if result.failure is not None:
            f.write(f"failure {result.failure}\n")
    written.append(path)

    log.info("Wrote %d result files to '%s'.", len(written), directory)
    return written
