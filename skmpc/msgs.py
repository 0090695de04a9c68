"""Stamped messages exchanged with the surrounding system.

The field layout follows geometry_msgs / nav_msgs so that adapters to a
middleware only need to copy attributes. Quaternions are stored in
[w, x, y, z] order.
"""

import numpy as np

from skmpc.coordinates.pose import Pose2D
from skmpc.coordinates.pose import Twist2D
from skmpc.coordinates.so2 import SO2


class Header(object):

    def __init__(self, frame_id='', stamp=0.0):
        self.frame_id = frame_id
        self.stamp = float(stamp)

    def __repr__(self):
        return '<Header frame_id={!r} stamp={}>'.format(
            self.frame_id, self.stamp)


class PoseStamped(object):
    """Pose with header.

    Parameters
    ----------
    position : list or numpy.ndarray, optional
        [x, y, z] position.
    orientation : list or numpy.ndarray, optional
        quaternion [w, x, y, z].
    header : Header, optional
    """

    def __init__(self, position=None, orientation=None, header=None):
        if position is None:
            position = np.zeros(3)
        if orientation is None:
            orientation = np.array([1.0, 0.0, 0.0, 0.0])
        self.header = header or Header()
        self.position = np.array(position, dtype=np.float64)
        self.orientation = np.array(orientation, dtype=np.float64)
        if self.position.shape != (3,):
            raise ValueError(
                'Position must be specified as a 3-vector, '
                'get shape {}'.format(self.position.shape))
        if self.orientation.shape != (4,):
            raise ValueError(
                'Orientation must be specified as quaternion [w, x, y, z], '
                'get shape {}'.format(self.orientation.shape))

    def __repr__(self):
        return '<PoseStamped frame_id={!r} position={} orientation={}>'.format(
            self.header.frame_id, self.position, self.orientation)


class TwistStamped(object):
    """Twist with header.

    Parameters
    ----------
    linear : list or numpy.ndarray, optional
        [x, y, z] linear velocity.
    angular : list or numpy.ndarray, optional
        [x, y, z] angular velocity.
    header : Header, optional
    """

    def __init__(self, linear=None, angular=None, header=None):
        if linear is None:
            linear = np.zeros(3)
        if angular is None:
            angular = np.zeros(3)
        self.header = header or Header()
        self.linear = np.array(linear, dtype=np.float64)
        self.angular = np.array(angular, dtype=np.float64)
        if self.linear.shape != (3,) or self.angular.shape != (3,):
            raise ValueError('Linear and angular must be 3-vectors')

    def __repr__(self):
        return '<TwistStamped frame_id={!r} linear={} angular={}>'.format(
            self.header.frame_id, self.linear, self.angular)


class Path(object):

    def __init__(self, poses=None, header=None):
        self.header = header or Header()
        self.poses = list(poses) if poses is not None else []

    def __len__(self):
        return len(self.poses)

    def __iter__(self):
        return iter(self.poses)

    def __getitem__(self, index):
        return self.poses[index]

    def __repr__(self):
        return '<Path frame_id={!r} len={}>'.format(
            self.header.frame_id, len(self.poses))


def pose_stamped_to_pose2d(pose_stamped):
    """Convert PoseStamped to Pose2D

    Height, roll and pitch are dropped. A zero quaternion is treated as
    identity.

    Parameters
    ----------
    pose_stamped : skmpc.msgs.PoseStamped
        stamped pose.

    Returns
    -------
    pose : skmpc.coordinates.Pose2D
        converted planar pose.
    """
    orientation = pose_stamped.orientation
    if np.all(orientation == 0.0):
        rotation = SO2()
    else:
        rotation = SO2.from_quaternion(orientation)
    return Pose2D(rotation, pose_stamped.position[:2])


def pose2d_to_pose_stamped(pose, frame_id='', stamp=0.0):
    """Convert Pose2D to PoseStamped

    Parameters
    ----------
    pose : skmpc.coordinates.Pose2D
        planar pose.
    frame_id : str
        frame of the pose.
    stamp : float
        time stamp [sec].

    Returns
    -------
    pose_stamped : skmpc.msgs.PoseStamped
        converted stamped pose.
    """
    return PoseStamped(
        position=[pose.x, pose.y, 0.0],
        orientation=pose.rotation.to_quaternion(),
        header=Header(frame_id, stamp))


def twist_stamped_to_twist2d(twist_stamped):
    """Convert TwistStamped to Twist2D

    Only the yaw rate and the forward velocity are kept; the lateral
    velocity of a differential drive vehicle is zero.
    """
    return Twist2D(twist_stamped.angular[2],
                   [twist_stamped.linear[0], 0.0])
