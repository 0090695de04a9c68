import unittest

import numpy as np
from numpy import testing

from skmpc.coordinates import Pose2D
from skmpc.coordinates.math import quaternion_from_yaw
from skmpc.msgs import Header
from skmpc.msgs import Path
from skmpc.msgs import pose2d_to_pose_stamped
from skmpc.msgs import pose_stamped_to_pose2d
from skmpc.msgs import PoseStamped
from skmpc.msgs import twist_stamped_to_twist2d
from skmpc.msgs import TwistStamped


class TestMsgs(unittest.TestCase):

    def test_pose_stamped(self):
        pose = PoseStamped()
        testing.assert_equal(pose.position, [0.0, 0.0, 0.0])
        testing.assert_equal(pose.orientation, [1.0, 0.0, 0.0, 0.0])
        self.assertEqual(pose.header.frame_id, '')
        with self.assertRaises(ValueError):
            PoseStamped(position=[0.0, 0.0])
        with self.assertRaises(ValueError):
            PoseStamped(orientation=[0.0, 0.0, 1.0])

    def test_twist_stamped(self):
        with self.assertRaises(ValueError):
            TwistStamped(linear=[1.0, 0.0])

    def test_path(self):
        poses = [PoseStamped([i, 0.0, 0.0]) for i in range(3)]
        path = Path(poses, Header('map', 1.0))
        self.assertEqual(len(path), 3)
        testing.assert_equal(path[2].position, [2.0, 0.0, 0.0])
        self.assertEqual([p.position[0] for p in path], [0.0, 1.0, 2.0])
        self.assertEqual(len(Path()), 0)

    def test_pose_conversion(self):
        pose_stamped = PoseStamped([1.0, 2.0, 3.0], quaternion_from_yaw(0.4),
                                   Header('map', 2.0))
        pose = pose_stamped_to_pose2d(pose_stamped)
        testing.assert_almost_equal(pose.position, [1.0, 2.0])
        testing.assert_almost_equal(pose.yaw, 0.4)

        converted = pose2d_to_pose_stamped(pose, 'odom', 3.0)
        testing.assert_almost_equal(converted.position, [1.0, 2.0, 0.0])
        testing.assert_almost_equal(converted.orientation,
                                    quaternion_from_yaw(0.4))
        self.assertEqual(converted.header.frame_id, 'odom')
        self.assertEqual(converted.header.stamp, 3.0)

        testing.assert_almost_equal(
            pose2d_to_pose_stamped(Pose2D(np.pi / 2, [0.0, 0.0])).orientation,
            [np.sqrt(0.5), 0.0, 0.0, np.sqrt(0.5)])

    def test_zero_quaternion(self):
        pose = pose_stamped_to_pose2d(
            PoseStamped([1.0, 0.0, 0.0], [0.0, 0.0, 0.0, 0.0]))
        testing.assert_equal(pose.rotation.array, [1.0, 0.0])

    def test_twist_conversion(self):
        twist = twist_stamped_to_twist2d(
            TwistStamped(linear=[1.0, 0.5, 0.2], angular=[0.1, 0.2, 0.3]))
        testing.assert_equal(twist.vector, [0.3, 1.0, 0.0])
