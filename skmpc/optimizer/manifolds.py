"""Local parameterizations of parameter blocks.

A manifold maps a small tangent vector onto the stored (ambient)
representation of a parameter block. The solver optimizes tangent
coordinates and chains residual Jacobians, which are given w.r.t. the
ambient values, through :meth:`Manifold.plus_jacobian`.
"""

from abc import ABC
from abc import abstractmethod

import numpy as np

from skmpc.coordinates.math import so2_minus
from skmpc.coordinates.math import so2_plus


class Manifold(ABC):

    @property
    @abstractmethod
    def ambient_size(self):
        pass

    @property
    @abstractmethod
    def tangent_size(self):
        pass

    @abstractmethod
    def plus(self, x, delta):
        """Returns x moved by tangent vector delta."""

    @abstractmethod
    def minus(self, y, x):
        """Returns tangent vector delta with plus(x, delta) == y."""

    @abstractmethod
    def plus_jacobian(self, x):
        """Returns (ambient_size, tangent_size) derivative of plus at 0."""


class EuclideanManifold(Manifold):

    def __init__(self, size):
        self._size = int(size)

    @property
    def ambient_size(self):
        return self._size

    @property
    def tangent_size(self):
        return self._size

    def plus(self, x, delta):
        return np.asarray(x, dtype=np.float64) + delta

    def minus(self, y, x):
        return np.asarray(y, dtype=np.float64) - x

    def plus_jacobian(self, x):
        return np.eye(self._size)


class Rotation2DManifold(Manifold):
    """Planar rotation [cos(theta), sin(theta)] with one tangent angle."""

    @property
    def ambient_size(self):
        return 2

    @property
    def tangent_size(self):
        return 1

    def plus(self, x, delta):
        return so2_plus(x, float(np.asarray(delta).reshape(-1)[0]))

    def minus(self, y, x):
        return np.array([so2_minus(y, x)])

    def plus_jacobian(self, x):
        return np.array([[-x[1]], [x[0]]])


class SubsetManifold(Manifold):
    """Euclidean block with some components held fixed.

    Parameters
    ----------
    size : int
        Ambient size of the block.
    constant_indices : list[int]
        Components that are never changed by the solver.
    """

    def __init__(self, size, constant_indices):
        self._size = int(size)
        constant_indices = sorted(set(int(i) for i in constant_indices))
        for i in constant_indices:
            if i < 0 or i >= self._size:
                raise ValueError(
                    'constant index {} out of range for block of size {}'
                    .format(i, self._size))
        self.constant_indices = constant_indices
        self.free_indices = [i for i in range(self._size)
                             if i not in constant_indices]

    @property
    def ambient_size(self):
        return self._size

    @property
    def tangent_size(self):
        return len(self.free_indices)

    def plus(self, x, delta):
        y = np.array(x, dtype=np.float64)
        y[self.free_indices] += delta
        return y

    def minus(self, y, x):
        return (np.asarray(y, dtype=np.float64) - x)[self.free_indices]

    def plus_jacobian(self, x):
        return np.eye(self._size)[:, self.free_indices]
