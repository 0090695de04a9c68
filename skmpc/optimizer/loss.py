"""Loss scaling handles attached to residual blocks."""

import numpy as np


class ScaledLoss(object):
    """Scales the squared norm of a residual block by ``weight``.

    The cost of a residual ``r`` becomes ``0.5 * weight * ||r||^2``. The
    same handle may be shared by many residual blocks; changing its weight
    with :meth:`set_weight` rescales all of them without rebuilding the
    problem.

    Parameters
    ----------
    weight : float
        Non-negative scale factor.
    """

    def __init__(self, weight=1.0):
        self._weight = None
        self.set_weight(weight)

    @property
    def weight(self):
        return self._weight

    def set_weight(self, weight):
        weight = float(weight)
        if not np.isfinite(weight) or weight < 0.0:
            raise ValueError(
                'Loss weight must be finite and non-negative, '
                'get {}'.format(weight))
        self._weight = weight

    @property
    def residual_scale(self):
        """Factor applied to residuals and Jacobians."""
        return np.sqrt(self._weight)

    def __repr__(self):
        return '<ScaledLoss weight={}>'.format(self._weight)
