"""Least squares solvers.

Available solvers:
- 'scipy': SciPy ``least_squares`` (trust region reflective or
  Levenberg-Marquardt)
"""

from skmpc.optimizer.solvers.base import BaseSolver
from skmpc.optimizer.solvers.base import SolverSummary


def create_solver(solver_type='scipy', **kwargs):
    """Create a least squares solver.

    Parameters
    ----------
    solver_type : str
        Solver type: 'scipy'.
    **kwargs
        Solver-specific options.

    Returns
    -------
    BaseSolver
        Solver instance.
    """
    if solver_type == 'scipy':
        from skmpc.optimizer.solvers.scipy_solver import ScipyLeastSquaresSolver
        return ScipyLeastSquaresSolver(**kwargs)
    else:
        raise ValueError(f"Unknown solver type: {solver_type}")


__all__ = [
    'BaseSolver',
    'SolverSummary',
    'create_solver',
]


# Lazy import for direct access
def __getattr__(name):
    if name == 'ScipyLeastSquaresSolver':
        from skmpc.optimizer.solvers.scipy_solver import ScipyLeastSquaresSolver
        return ScipyLeastSquaresSolver
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
