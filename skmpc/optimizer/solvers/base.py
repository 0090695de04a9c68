"""Base solver interface for least squares problems."""

from abc import ABC
from abc import abstractmethod


class SolverSummary:
    """Summary of one solver call.

    Attributes
    ----------
    success : bool
        Whether the solver reported convergence.
    initial_cost : float
        Cost before optimization.
    final_cost : float
        Cost after optimization.
    iterations : int
        Number of iterations, one Jacobian evaluation each.
    num_residual_evaluations : int
        Number of residual function evaluations.
    num_jacobian_evaluations : int
        Number of Jacobian evaluations.
    termination : str
        Short termination reason.
    message : str
        Status message of the backend.
    info : dict
        Additional solver-specific information.
    """

    def __init__(
        self,
        success=True,
        initial_cost=0.0,
        final_cost=0.0,
        iterations=0,
        num_residual_evaluations=0,
        num_jacobian_evaluations=0,
        termination='',
        message='',
        info=None,
    ):
        self.success = success
        self.initial_cost = initial_cost
        self.final_cost = final_cost
        self.iterations = iterations
        self.num_residual_evaluations = num_residual_evaluations
        self.num_jacobian_evaluations = num_jacobian_evaluations
        self.termination = termination
        self.message = message
        self.info = info or {}

    def brief_report(self):
        """One line report of the solver call."""
        return ('Iterations: {}, Evaluations: {}, Initial cost: {:e}, '
                'Final cost: {:e}, Termination: {}'.format(
                    self.iterations, self.num_residual_evaluations,
                    self.initial_cost, self.final_cost, self.termination))

    def full_report(self):
        lines = [
            'Solver Summary',
            '  success: {}'.format(self.success),
            '  initial cost: {:e}'.format(self.initial_cost),
            '  final cost: {:e}'.format(self.final_cost),
            '  iterations: {}'.format(self.iterations),
            '  residual evaluations: {}'.format(
                self.num_residual_evaluations),
            '  jacobian evaluations: {}'.format(
                self.num_jacobian_evaluations),
            '  termination: {}'.format(self.termination),
            '  message: {}'.format(self.message),
        ]
        return '\n'.join(lines)

    def __repr__(self):
        return '<SolverSummary {}>'.format(self.brief_report())


class BaseSolver(ABC):
    """Abstract base class for least squares solvers.

    Subclasses must implement the `solve` method.
    """

    def __init__(self, verbose=False):
        """Initialize solver.

        Parameters
        ----------
        verbose : bool
            Print optimization progress.
        """
        self.verbose = verbose

    @abstractmethod
    def solve(self, problem, **kwargs):
        """Optimize the free parameter blocks of problem in place.

        Parameters
        ----------
        problem : skmpc.optimizer.problem.Problem
            Problem definition.
        **kwargs
            Solver-specific options.

        Returns
        -------
        SolverSummary
            Optimization summary.
        """
        pass
