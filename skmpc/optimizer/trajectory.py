"""Horizon buffers and initial guess generation."""

import numpy as np

from skmpc.coordinates.pose import Pose2D
from skmpc.coordinates.pose import Twist2D
from skmpc.coordinates.so2 import SO2
from skmpc.kinematics.model import KinematicModel


class ReferenceTrajectory(object):
    """Time aligned reference poses, stored as parameter arrays."""

    def __init__(self):
        self.rotations = []
        self.positions = []

    def __len__(self):
        return len(self.positions)

    def clear(self):
        self.rotations = []
        self.positions = []

    def append(self, pose):
        self.rotations.append(pose.rotation.array)
        self.positions.append(np.array(pose.position, dtype=np.float64))

    def poses(self):
        return [Pose2D(SO2(r), p.copy())
                for r, p in zip(self.rotations, self.positions)]


class Horizon(ReferenceTrajectory):
    """Poses and twists over the receding horizon.

    Each rotation, position and twist is a separate numpy array so that
    the optimizer can declare it as its own parameter block and update
    it in place. Index 0 is the current state.
    """

    def __init__(self):
        super(Horizon, self).__init__()
        self.twists = []

    def clear(self):
        super(Horizon, self).clear()
        self.twists = []

    def append(self, pose, twist):
        super(Horizon, self).append(pose)
        if isinstance(twist, Twist2D):
            twist = twist.vector
        self.twists.append(np.array(twist, dtype=np.float64))

    def append_array(self, rotation, position, twist):
        self.rotations.append(np.array(rotation, dtype=np.float64))
        self.positions.append(np.array(position, dtype=np.float64))
        self.twists.append(np.array(twist, dtype=np.float64))

    def twist_array(self):
        """Returns (N, 3) array of [omega, v_x, v_y]."""
        return np.array(self.twists).reshape(-1, 3)

    def pose_array(self):
        """Returns (N, 3) array of [x, y, yaw]."""
        if len(self) == 0:
            return np.zeros((0, 3))
        positions = np.array(self.positions)
        rotations = np.array(self.rotations)
        yaws = np.arctan2(rotations[:, 1], rotations[:, 0])
        return np.column_stack([positions, yaws])


def generate_initial_values(initial_pose, initial_twist, n_poses, dt,
                            kinematic_model=None):
    """Generate initial values assuming no change in twist over time.

    The initial pose is propagated ``n_poses - 1`` times with the
    initial twist, so the kinematic constraint holds exactly at every
    step of the returned horizon.

    Parameters
    ----------
    initial_pose : skmpc.coordinates.Pose2D
        Pose at index 0.
    initial_twist : skmpc.coordinates.Twist2D or numpy.ndarray
        Twist at index 0, [omega, v_x, v_y] if given as array.
    n_poses : int
        Horizon length including index 0.
    dt : float
        Time step [sec].
    kinematic_model : KinematicModel, optional
        Model used for propagation.

    Returns
    -------
    Horizon
        Horizon of length ``n_poses``.
    """
    if n_poses < 1:
        raise ValueError('n_poses must be positive, get {}'.format(n_poses))
    if kinematic_model is None:
        kinematic_model = KinematicModel()
    if isinstance(initial_twist, Twist2D):
        initial_twist = initial_twist.vector
    twist = np.array(initial_twist, dtype=np.float64)

    horizon = Horizon()
    horizon.append(initial_pose, twist)
    rotation = horizon.rotations[0]
    position = horizon.positions[0]
    for _ in range(1, n_poses):
        rotation, position = kinematic_model.propagate_array(
            rotation, position, twist, dt)
        horizon.append_array(rotation, position, twist)
    return horizon
