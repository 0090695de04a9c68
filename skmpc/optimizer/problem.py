"""Nonlinear least squares problem description.

This module provides a Problem class that describes parameter blocks and
residual blocks without coupling to any specific solver. Parameter blocks
are numpy arrays owned by the caller; solvers write the optimized values
back into those arrays in place.
"""

import numpy as np

from skmpc.optimizer.manifolds import EuclideanManifold


class ParameterBlock(object):
    """A numpy array optimized as one unit.

    Attributes
    ----------
    values : numpy.ndarray
        Caller owned 1-D float array, updated in place.
    manifold : Manifold
        Local parameterization of the block.
    constant : bool
        Constant blocks are never changed by the solver.
    """

    def __init__(self, values, manifold=None):
        self.values = values
        self.manifold = manifold or EuclideanManifold(values.size)
        self.constant = False

    @property
    def size(self):
        return self.values.size

    @property
    def tangent_size(self):
        if self.constant:
            return 0
        return self.manifold.tangent_size


class ResidualBlock(object):
    """Cost function attached to parameter blocks with a loss handle.

    Instances returned by :meth:`Problem.add_residual_block` identify the
    block, e.g. for :meth:`Problem.evaluate_residual_block`.
    """

    def __init__(self, cost_function, loss_function, parameter_blocks):
        self.cost_function = cost_function
        self.loss_function = loss_function
        self.parameter_blocks = parameter_blocks

    @property
    def num_residuals(self):
        return self.cost_function.num_residuals

    def evaluate(self, apply_loss_function=True):
        """Returns residuals and Jacobians w.r.t. ambient values.

        If ``apply_loss_function`` is True both are multiplied by the
        square root of the loss weight.
        """
        residuals, jacobians = self.cost_function.evaluate(
            *[block.values for block in self.parameter_blocks])
        residuals = np.asarray(residuals, dtype=np.float64)
        if not np.all(np.isfinite(residuals)):
            raise RuntimeError(
                'Residual block {} evaluated to non-finite values {}'
                .format(self.cost_function.name, residuals))
        if apply_loss_function and self.loss_function is not None:
            scale = self.loss_function.residual_scale
            residuals = scale * residuals
            jacobians = [scale * J for J in jacobians]
        return residuals, jacobians


class Problem(object):
    """Least squares problem made of parameter and residual blocks.

    Examples
    --------
    >>> import numpy as np
    >>> from skmpc.optimizer.problem import Problem
    >>> from skmpc.optimizer.residuals import VelocityChangeResidual
    >>> twist0, twist1 = np.zeros(3), np.ones(3)
    >>> problem = Problem()
    >>> _ = problem.add_parameter_block(twist0)
    >>> problem.set_parameter_block_constant(twist0)
    >>> block = problem.add_residual_block(
    ...     VelocityChangeResidual(), None, twist1, twist0)
    >>> problem.evaluate_residual_block(block)[0]
    1.5
    """

    def __init__(self):
        self._parameter_blocks = {}
        self._residual_blocks = []

    @property
    def parameter_blocks(self):
        """Parameter blocks in insertion order."""
        return list(self._parameter_blocks.values())

    @property
    def residual_blocks(self):
        return list(self._residual_blocks)

    @property
    def num_parameter_blocks(self):
        return len(self._parameter_blocks)

    @property
    def num_residual_blocks(self):
        return len(self._residual_blocks)

    @property
    def num_residuals(self):
        return sum(block.num_residuals for block in self._residual_blocks)

    @property
    def num_effective_parameters(self):
        return sum(block.tangent_size
                   for block in self._parameter_blocks.values())

    def _check_values(self, values):
        if not isinstance(values, np.ndarray) or values.ndim != 1 \
           or not np.issubdtype(values.dtype, np.floating):
            raise ValueError(
                'Parameter block must be a 1-D float numpy.ndarray')

    def add_parameter_block(self, values, manifold=None):
        """Declare ``values`` as a parameter block.

        Adding the same array again is allowed; a given manifold replaces
        the previous one.

        Parameters
        ----------
        values : numpy.ndarray
            1-D float array. The problem keeps a reference to it.
        manifold : Manifold, optional
            Local parameterization. Euclidean if None.

        Returns
        -------
        ParameterBlock
        """
        self._check_values(values)
        if manifold is not None and manifold.ambient_size != values.size:
            raise ValueError(
                'Manifold ambient size {} does not match block size {}'
                .format(manifold.ambient_size, values.size))
        key = id(values)
        block = self._parameter_blocks.get(key)
        if block is None:
            block = ParameterBlock(values, manifold)
            self._parameter_blocks[key] = block
        elif manifold is not None:
            block.manifold = manifold
        return block

    def _get_block(self, values):
        try:
            return self._parameter_blocks[id(values)]
        except KeyError:
            raise ValueError('Unknown parameter block')

    def has_parameter_block(self, values):
        return id(values) in self._parameter_blocks

    def set_parameter_block_constant(self, values):
        self._get_block(values).constant = True

    def set_parameter_block_variable(self, values):
        self._get_block(values).constant = False

    def is_parameter_block_constant(self, values):
        return self._get_block(values).constant

    def set_manifold(self, values, manifold):
        self.add_parameter_block(values, manifold)

    def add_residual_block(self, cost_function, loss_function, *parameters):
        """Attach a residual to parameter blocks.

        Parameters
        ----------
        cost_function : CostFunction
            Residual function.
        loss_function : ScaledLoss or None
            Loss handle shared with other residual blocks.
        *parameters : numpy.ndarray
            Parameter arrays in the order expected by the cost function.
            Arrays not yet added become Euclidean parameter blocks.

        Returns
        -------
        ResidualBlock
            Handle of the residual block.
        """
        sizes = tuple(cost_function.parameter_block_sizes)
        if len(parameters) != len(sizes):
            raise ValueError(
                '{} expects {} parameter blocks, get {}'.format(
                    cost_function.name, len(sizes), len(parameters)))
        blocks = []
        for values, size in zip(parameters, sizes):
            if not self.has_parameter_block(values):
                self.add_parameter_block(values)
            block = self._get_block(values)
            if block.size != size:
                raise ValueError(
                    '{} expects parameter block of size {}, get {}'.format(
                        cost_function.name, size, block.size))
            blocks.append(block)
        residual_block = ResidualBlock(cost_function, loss_function, blocks)
        self._residual_blocks.append(residual_block)
        return residual_block

    def evaluate_residual_block(self, residual_block,
                                apply_loss_function=False):
        """Evaluate one residual block at the current parameter values.

        Returns
        -------
        cost : float
            0.5 * squared norm of the (optionally scaled) residuals.
        residuals : numpy.ndarray
            Residual vector.
        """
        residuals, _ = residual_block.evaluate(
            apply_loss_function=apply_loss_function)
        return 0.5 * float(residuals.dot(residuals)), residuals

    def free_parameter_blocks(self):
        return [block for block in self._parameter_blocks.values()
                if block.tangent_size > 0]

    def evaluate(self, jacobian=False):
        """Evaluate all residual blocks with loss functions applied.

        Parameters
        ----------
        jacobian : bool
            If True also return the Jacobian w.r.t. the tangent
            coordinates of the free parameter blocks, stacked in insertion
            order.

        Returns
        -------
        residuals : numpy.ndarray
            (num_residuals,) stacked residual vector.
        J : numpy.ndarray
            (num_residuals, num_effective_parameters). Only when
            ``jacobian`` is True.
        """
        offsets = {}
        n_cols = 0
        for block in self.free_parameter_blocks():
            offsets[id(block)] = n_cols
            n_cols += block.tangent_size

        residuals = np.zeros(self.num_residuals)
        J = np.zeros((self.num_residuals, n_cols)) if jacobian else None
        row = 0
        for residual_block in self._residual_blocks:
            r, jacobians = residual_block.evaluate(apply_loss_function=True)
            n = residual_block.num_residuals
            residuals[row:row + n] = r
            if jacobian:
                for block, J_block in zip(residual_block.parameter_blocks,
                                          jacobians):
                    if block.tangent_size == 0:
                        continue
                    col = offsets[id(block)]
                    J[row:row + n, col:col + block.tangent_size] += \
                        np.dot(J_block,
                               block.manifold.plus_jacobian(block.values))
            row += n
        if jacobian:
            return residuals, J
        return residuals

    def cost(self):
        """Total cost 0.5 * sum of scaled squared residuals."""
        residuals = self.evaluate()
        return 0.5 * float(residuals.dot(residuals))
