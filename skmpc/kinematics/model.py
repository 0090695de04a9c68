"""Planar rigid body kinematics of a wheeled vehicle.

The vehicle moves with a body frame twist [omega, v_x, v_y] that is held
constant over one time step. Integration uses the closed form of the SE(2)
exponential map, so repeated propagation is exact and a trajectory built
with :meth:`KinematicModel.propagate` has zero kinematic constraint error.
"""

from math import cos
from math import sin

import numpy as np

from skmpc.coordinates.math import so2_matrix
from skmpc.coordinates.pose import Pose2D
from skmpc.coordinates.pose import Twist2D
from skmpc.coordinates.so2 import SO2


_SMALL_ANGLE = 1e-4


def _translation_coefficients(angle):
    """Returns a, b of V(angle) = [[a, -b], [b, a]] and their derivatives.

    a = sin(angle) / angle, b = (1 - cos(angle)) / angle.
    """
    if abs(angle) < _SMALL_ANGLE:
        angle2 = angle * angle
        a = 1.0 - angle2 / 6.0
        b = angle / 2.0 - angle * angle2 / 24.0
        da = -angle / 3.0 + angle * angle2 / 30.0
        db = 0.5 - angle2 / 8.0
    else:
        s = sin(angle)
        c = cos(angle)
        a = s / angle
        b = (1.0 - c) / angle
        da = (angle * c - s) / (angle * angle)
        db = (angle * s - (1.0 - c)) / (angle * angle)
    return a, b, da, db


def propagate_array(rotation, position, twist, dt, with_jacobian=False):
    """Propagate pose arrays under constant body twist.

    Parameters
    ----------
    rotation : numpy.ndarray
        [cos(theta), sin(theta)] of the current orientation.
    position : numpy.ndarray
        [x, y] current position.
    twist : numpy.ndarray
        [omega, v_x, v_y] body frame twist.
    dt : float
        Time step [sec].
    with_jacobian : bool
        If True, derivatives w.r.t. rotation, position and twist are
        returned too.

    Returns
    -------
    next_rotation : numpy.ndarray
        (2,) propagated rotation.
    next_position : numpy.ndarray
        (2,) propagated position.
    jacobians : dict
        Only when ``with_jacobian`` is True. Keys are
        ``rotation_rotation`` (2, 2), ``rotation_twist`` (2, 3),
        ``position_rotation`` (2, 2), ``position_position`` (2, 2) and
        ``position_twist`` (2, 3); the first word names the output.
    """
    c, s = rotation[0], rotation[1]
    omega, vx, vy = twist[0], twist[1], twist[2]
    angle = omega * dt
    cd = cos(angle)
    sd = sin(angle)

    next_rotation = np.array([c * cd - s * sd, s * cd + c * sd])

    a, b, da, db = _translation_coefficients(angle)
    V = np.array([[a, -b], [b, a]])
    v = np.array([vx, vy])
    t = dt * V.dot(v)
    R = so2_matrix(rotation)
    next_position = np.asarray(position, dtype=np.float64) + R.dot(t)

    if not with_jacobian:
        return next_rotation, next_position

    rotation_rotation = np.array([[cd, -sd], [sd, cd]])
    rotation_twist = np.zeros((2, 3))
    rotation_twist[0, 0] = -dt * next_rotation[1]
    rotation_twist[1, 0] = dt * next_rotation[0]

    # d(R t) / d[c, s]
    position_rotation = np.array([[t[0], -t[1]], [t[1], t[0]]])
    dV = np.array([[da, -db], [db, da]])
    position_twist = np.zeros((2, 3))
    position_twist[:, 0] = R.dot(dt * dt * dV.dot(v))
    position_twist[:, 1:] = dt * R.dot(V)

    jacobians = {
        'rotation_rotation': rotation_rotation,
        'rotation_twist': rotation_twist,
        'position_rotation': position_rotation,
        'position_position': np.eye(2),
        'position_twist': position_twist,
    }
    return next_rotation, next_position, jacobians


class KinematicModel(object):
    """Unicycle style kinematic model of a differential drive vehicle.

    The model itself has no state; it is passed to the optimizer so that
    the initial guess and the kinematic constraint use the same motion.
    """

    @staticmethod
    def propagate(pose, twist, dt):
        """Returns the pose reached after moving with twist for dt.

        Parameters
        ----------
        pose : skmpc.coordinates.Pose2D
            Current pose.
        twist : skmpc.coordinates.Twist2D or numpy.ndarray
            Body frame twist, [omega, v_x, v_y] if given as array.
        dt : float
            Time step [sec].

        Returns
        -------
        pose : skmpc.coordinates.Pose2D
            Propagated pose.

        Examples
        --------
        >>> from skmpc.coordinates import Pose2D, Twist2D
        >>> from skmpc.kinematics import KinematicModel
        >>> KinematicModel.propagate(Pose2D(), Twist2D(0.0, [1.0, 0.0]), 0.5)
        <Pose2D x=0.500000 y=0.000000 yaw=0.000000>
        """
        if isinstance(twist, Twist2D):
            twist = twist.vector
        rotation, position = propagate_array(
            pose.rotation.array, pose.position,
            np.asarray(twist, dtype=np.float64), dt)
        return Pose2D(SO2(rotation), position)

    @staticmethod
    def propagate_array(rotation, position, twist, dt, with_jacobian=False):
        return propagate_array(rotation, position, twist, dt,
                               with_jacobian=with_jacobian)
