import unittest

import numpy as np
from numpy import testing

from skmpc.coordinates.math import so2_from_angle
from skmpc.optimizer.loss import ScaledLoss
from skmpc.optimizer.manifolds import EuclideanManifold
from skmpc.optimizer.manifolds import Rotation2DManifold
from skmpc.optimizer.manifolds import SubsetManifold


class TestManifolds(unittest.TestCase):

    def test_euclidean(self):
        manifold = EuclideanManifold(3)
        self.assertEqual(manifold.ambient_size, 3)
        self.assertEqual(manifold.tangent_size, 3)
        x = np.array([1.0, 2.0, 3.0])
        testing.assert_equal(manifold.plus(x, [1.0, 0.0, -1.0]),
                             [2.0, 2.0, 2.0])
        testing.assert_equal(manifold.minus([2.0, 2.0, 2.0], x),
                             [1.0, 0.0, -1.0])
        testing.assert_equal(manifold.plus_jacobian(x), np.eye(3))

    def test_rotation(self):
        manifold = Rotation2DManifold()
        self.assertEqual(manifold.ambient_size, 2)
        self.assertEqual(manifold.tangent_size, 1)
        x = so2_from_angle(2.9)
        testing.assert_almost_equal(
            manifold.minus(manifold.plus(x, [0.5]), x), [0.5])
        testing.assert_almost_equal(
            manifold.plus(x, [0.5]), so2_from_angle(3.4))

        eps = 1e-6
        numerical = (manifold.plus(x, [eps]) - manifold.plus(x, [-eps])) / (
            2 * eps)
        testing.assert_almost_equal(
            manifold.plus_jacobian(x), numerical.reshape(2, 1))

    def test_subset(self):
        manifold = SubsetManifold(3, [2])
        self.assertEqual(manifold.ambient_size, 3)
        self.assertEqual(manifold.tangent_size, 2)
        self.assertEqual(manifold.free_indices, [0, 1])
        x = np.array([1.0, 2.0, 0.0])
        y = manifold.plus(x, [0.5, -0.5])
        testing.assert_equal(y, [1.5, 1.5, 0.0])
        # input is not modified
        testing.assert_equal(x, [1.0, 2.0, 0.0])
        testing.assert_equal(manifold.minus(y, x), [0.5, -0.5])
        testing.assert_equal(
            manifold.plus_jacobian(x),
            [[1.0, 0.0], [0.0, 1.0], [0.0, 0.0]])

        with self.assertRaises(ValueError):
            SubsetManifold(3, [3])
        with self.assertRaises(ValueError):
            SubsetManifold(3, [-1])


class TestScaledLoss(unittest.TestCase):

    def test_weight(self):
        loss = ScaledLoss(4.0)
        self.assertEqual(loss.weight, 4.0)
        self.assertAlmostEqual(loss.residual_scale, 2.0)
        loss.set_weight(25.0)
        self.assertAlmostEqual(loss.residual_scale, 5.0)
        loss.set_weight(0.0)
        self.assertEqual(loss.residual_scale, 0.0)

    def test_invalid_weight(self):
        loss = ScaledLoss()
        with self.assertRaises(ValueError):
            loss.set_weight(-1.0)
        with self.assertRaises(ValueError):
            loss.set_weight(np.inf)
        with self.assertRaises(ValueError):
            ScaledLoss(np.nan)
        self.assertEqual(loss.weight, 1.0)
