import unittest

import numpy as np
from numpy import testing

from skmpc.coordinates import Pose2D
from skmpc.coordinates import Twist2D
from skmpc.optimizer.residuals import KinematicConstraintPenaltyResidual
from skmpc.optimizer.trajectory import generate_initial_values
from skmpc.optimizer.trajectory import Horizon
from skmpc.optimizer.trajectory import ReferenceTrajectory


class TestTrajectory(unittest.TestCase):

    def test_reference_trajectory(self):
        reference = ReferenceTrajectory()
        reference.append(Pose2D(0.3, [1.0, 2.0]))
        reference.append(Pose2D(-0.3, [2.0, 2.0]))
        self.assertEqual(len(reference), 2)
        poses = reference.poses()
        testing.assert_almost_equal(poses[1].yaw, -0.3)
        testing.assert_almost_equal(poses[1].position, [2.0, 2.0])
        reference.clear()
        self.assertEqual(len(reference), 0)

    def test_horizon(self):
        horizon = Horizon()
        self.assertEqual(horizon.pose_array().shape, (0, 3))
        self.assertEqual(horizon.twist_array().shape, (0, 3))
        horizon.append(Pose2D(0.5, [1.0, 0.0]), Twist2D(0.1, [1.0, 0.0]))
        horizon.append_array([1.0, 0.0], [2.0, 0.0], [0.0, 1.0, 0.0])
        testing.assert_almost_equal(
            horizon.pose_array(), [[1.0, 0.0, 0.5], [2.0, 0.0, 0.0]])
        testing.assert_almost_equal(
            horizon.twist_array(), [[0.1, 1.0, 0.0], [0.0, 1.0, 0.0]])

    def test_generate_initial_values(self):
        dt = 0.1
        twist = Twist2D(0.5, [1.0, 0.0])
        horizon = generate_initial_values(Pose2D(0.2, [1.0, 1.0]), twist,
                                          10, dt)
        self.assertEqual(len(horizon), 10)
        testing.assert_almost_equal(horizon.pose_array()[0], [1.0, 1.0, 0.2])
        for t in horizon.twists:
            testing.assert_equal(t, twist.vector)
        # every element is a separate array
        self.assertEqual(len(set(id(r) for r in horizon.rotations)), 10)
        self.assertEqual(len(set(id(t) for t in horizon.twists)), 10)

        residual = KinematicConstraintPenaltyResidual(dt)
        for i in range(1, 10):
            r = residual(horizon.rotations[i], horizon.positions[i],
                         horizon.rotations[i - 1], horizon.positions[i - 1],
                         horizon.twists[i - 1])
            testing.assert_almost_equal(r, np.zeros(3))

        # constant turn rate
        testing.assert_almost_equal(horizon.pose_array()[-1, 2], 0.2 + 0.45)

    def test_generate_initial_values_single(self):
        horizon = generate_initial_values(Pose2D(), np.zeros(3), 1, 0.1)
        self.assertEqual(len(horizon), 1)
        with self.assertRaises(ValueError):
            generate_initial_values(Pose2D(), np.zeros(3), 0, 0.1)

    def test_generate_initial_values_fresh_horizon(self):
        first = generate_initial_values(Pose2D(), np.zeros(3), 5, 0.1)
        second = generate_initial_values(Pose2D(), np.zeros(3), 3, 0.1)
        self.assertEqual(len(first), 5)
        self.assertEqual(len(second), 3)
