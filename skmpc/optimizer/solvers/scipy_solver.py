"""SciPy least squares solver."""

from logging import getLogger

import numpy as np
from scipy.optimize import least_squares

from skmpc.optimizer.solvers.base import BaseSolver
from skmpc.optimizer.solvers.base import SolverSummary


logger = getLogger(__name__)


_TERMINATIONS = {
    -1: 'FAILURE',
    0: 'NO_CONVERGENCE',
    1: 'GRADIENT_TOLERANCE',
    2: 'FUNCTION_TOLERANCE',
    3: 'PARAMETER_TOLERANCE',
    4: 'FUNCTION_AND_PARAMETER_TOLERANCE',
}


class ScipyLeastSquaresSolver(BaseSolver):
    """Nonlinear least squares solver using ``scipy.optimize.least_squares``.

    The optimization variables are the tangent coordinates of all free
    parameter blocks around the values they have when :meth:`solve` is
    called. Every evaluation retracts the tangent vector through the
    block's manifold and writes the result into the block array, so the
    problem always holds the latest iterate.

    Parameters
    ----------
    method : str
        'trf' (trust region reflective) or 'lm' (Levenberg-Marquardt).
    max_num_evaluations : int
        Maximum number of residual evaluations per call.
    function_tolerance : float
        Tolerance for termination by the change of the cost.
    gradient_tolerance : float
        Tolerance for termination by the norm of the gradient.
    parameter_tolerance : float
        Tolerance for termination by the change of the variables.
    verbose : bool
        Print optimization progress.
    """

    def __init__(
        self,
        method='trf',
        max_num_evaluations=100,
        function_tolerance=1e-6,
        gradient_tolerance=1e-10,
        parameter_tolerance=1e-8,
        verbose=False,
    ):
        super().__init__(verbose=verbose)
        if method not in ('trf', 'lm'):
            raise ValueError(
                "Unknown least squares method: {}".format(method))
        if max_num_evaluations < 1:
            raise ValueError('max_num_evaluations must be positive')
        self.method = method
        self.max_num_evaluations = max_num_evaluations
        self.function_tolerance = function_tolerance
        self.gradient_tolerance = gradient_tolerance
        self.parameter_tolerance = parameter_tolerance

    def solve(self, problem, **kwargs):
        """Optimize problem in place.

        Parameters
        ----------
        problem : skmpc.optimizer.problem.Problem
            Problem definition.
        **kwargs
            Additional options:
            - max_num_evaluations: Override default evaluation budget.

        Returns
        -------
        SolverSummary
            Optimization summary.
        """
        max_num_evaluations = kwargs.get(
            'max_num_evaluations', self.max_num_evaluations)

        free_blocks = problem.free_parameter_blocks()
        n_params = sum(block.tangent_size for block in free_blocks)
        n_residuals = problem.num_residuals
        initial_cost = problem.cost()

        if n_params == 0 or n_residuals == 0:
            logger.debug('Nothing to optimize: %d parameters, %d residuals',
                         n_params, n_residuals)
            return SolverSummary(
                success=True,
                initial_cost=initial_cost,
                final_cost=initial_cost,
                termination='NO_FREE_PARAMETERS',
                message='Problem has no free parameters or no residuals.',
            )

        method = self.method
        if method == 'lm' and n_residuals < n_params:
            logger.debug('Falling back to trf: %d residuals < %d parameters',
                         n_residuals, n_params)
            method = 'trf'

        base_values = [block.values.copy() for block in free_blocks]

        def retract(delta):
            offset = 0
            for block, base in zip(free_blocks, base_values):
                k = block.tangent_size
                block.values[:] = block.manifold.plus(
                    base, delta[offset:offset + k])
                offset += k

        def fun(delta):
            retract(delta)
            return problem.evaluate()

        def jac(delta):
            retract(delta)
            return problem.evaluate(jacobian=True)[1]

        result = least_squares(
            fun, np.zeros(n_params),
            jac=jac,
            method=method,
            ftol=self.function_tolerance,
            xtol=self.parameter_tolerance,
            gtol=self.gradient_tolerance,
            max_nfev=max_num_evaluations,
            verbose=2 if self.verbose else 0,
        )
        retract(result.x)
        final_cost = problem.cost()

        njev = result.njev if result.njev is not None else 0
        return SolverSummary(
            success=bool(result.success),
            initial_cost=initial_cost,
            final_cost=final_cost,
            iterations=int(njev),
            num_residual_evaluations=int(result.nfev),
            num_jacobian_evaluations=int(njev),
            termination=_TERMINATIONS.get(result.status, str(result.status)),
            message=result.message,
            info={'scipy_result': result},
        )
