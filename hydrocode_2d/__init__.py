"""
2D Eulerian hydrocode by dimensional splitting.

Rows and columns are advanced with the 1D Godunov/GRP kernel of
``hydrocode_1d``.

Example Usage
-------------
>>> from hydrocode_1d import HydroConfig
>>> from hydrocode_2d import EulerianSolver2D
>>> config = HydroConfig(gamma=1.4, total_time=0.1, cfl=0.45, h=0.01,
...                      h_y=0.01, boundary='reflective', dim=2)
>>> solver = EulerianSolver2D(config, rho, u, v, p)
>>> result = solver.solve()
"""

from .solver_2d import EulerianSolver2D, FlowField2D

__all__ = ['EulerianSolver2D', 'FlowField2D']

__version__ = '0.2.0'
