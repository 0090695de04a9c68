import unittest

import numpy as np
from numpy import pi
from numpy import testing

from skmpc.coordinates.math import normalize_angle
from skmpc.coordinates.math import quaternion_from_yaw
from skmpc.coordinates.math import so2_compose
from skmpc.coordinates.math import so2_from_angle
from skmpc.coordinates.math import so2_inverse
from skmpc.coordinates.math import so2_minus
from skmpc.coordinates.math import so2_minus_jacobians
from skmpc.coordinates.math import so2_normalize
from skmpc.coordinates.math import so2_plus
from skmpc.coordinates.math import so2_to_angle
from skmpc.coordinates.math import yaw_from_quaternion


class TestMath(unittest.TestCase):

    def test_normalize_angle(self):
        testing.assert_almost_equal(normalize_angle(3 * pi / 2), -pi / 2)
        testing.assert_almost_equal(normalize_angle(-3 * pi / 2), pi / 2)
        testing.assert_almost_equal(normalize_angle(0.3), 0.3)
        testing.assert_almost_equal(normalize_angle(pi), -pi)

    def test_yaw_from_quaternion(self):
        for yaw in [0.0, 0.3, -1.2, 3.0]:
            testing.assert_almost_equal(
                yaw_from_quaternion(quaternion_from_yaw(yaw)), yaw)
        # not normalized quaternion
        testing.assert_almost_equal(
            yaw_from_quaternion(2.0 * quaternion_from_yaw(0.7)), 0.7)
        # rotation around x axis has no yaw
        testing.assert_almost_equal(
            yaw_from_quaternion([np.cos(0.2), np.sin(0.2), 0, 0]), 0.0)
        with self.assertRaises(ValueError):
            yaw_from_quaternion([0, 0, 0, 0])

    def test_quaternion_from_yaw(self):
        testing.assert_almost_equal(
            quaternion_from_yaw(pi / 2),
            [np.sqrt(0.5), 0, 0, np.sqrt(0.5)])

    def test_so2_compose(self):
        a = so2_from_angle(0.4)
        b = so2_from_angle(-1.1)
        testing.assert_almost_equal(so2_to_angle(so2_compose(a, b)), -0.7)
        testing.assert_almost_equal(
            so2_compose(a, so2_inverse(a)), [1.0, 0.0])

    def test_so2_normalize(self):
        testing.assert_almost_equal(so2_normalize([3.0, 4.0]), [0.6, 0.8])
        with self.assertRaises(ValueError):
            so2_normalize([0.0, 0.0])

    def test_so2_plus_minus(self):
        for theta in [0.0, 1.0, -2.5, 3.1]:
            r = so2_from_angle(theta)
            testing.assert_equal(so2_plus(r, 0.0), r)
            for delta in [0.0, 0.2, -0.9, 3.0]:
                testing.assert_almost_equal(
                    so2_minus(so2_plus(r, delta), r), delta)

    def test_so2_minus_wraps(self):
        a = so2_from_angle(3.0)
        b = so2_from_angle(-3.0)
        testing.assert_almost_equal(so2_minus(a, b), 6.0 - 2 * pi)

    def test_so2_minus_jacobians(self):
        a = so2_from_angle(0.8)
        b = so2_from_angle(-0.3)
        error, J_a, J_b = so2_minus_jacobians(a, b)
        testing.assert_almost_equal(error, 1.1)
        self.assertEqual(J_a.shape, (1, 2))
        self.assertEqual(J_b.shape, (1, 2))

        eps = 1e-6
        for k in range(2):
            d = np.zeros(2)
            d[k] = eps
            numerical_a = (so2_minus(a + d, b) - so2_minus(a - d, b)) / (
                2 * eps)
            numerical_b = (so2_minus(a, b + d) - so2_minus(a, b - d)) / (
                2 * eps)
            testing.assert_almost_equal(J_a[0, k], numerical_a, decimal=6)
            testing.assert_almost_equal(J_b[0, k], numerical_b, decimal=6)
