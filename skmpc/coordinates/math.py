from math import atan2
from math import cos
from math import pi
from math import sin

import numpy as np


def normalize_angle(angle):
    """Wrap angle to [-pi, pi).

    >>> round(normalize_angle(3 * np.pi / 2), 6)
    -1.570796
    """
    return (angle + pi) % (2 * pi) - pi


def quaternion_norm(q):
    q = np.array(q, dtype=np.float64)
    return np.sqrt(np.sum(q ** 2, axis=q.ndim - 1))


def yaw_from_quaternion(q):
    """Returns rotation angle around z axis of given quaternion.

    Roll and pitch are discarded, so the result is the heading of
    the projection of the frame onto the xy plane.

    Parameters
    ----------
    q : list or numpy.ndarray
        quaternion [w, x, y, z] order

    Returns
    -------
    yaw : float
        yaw angle in radian.

    Examples
    --------
    >>> from skmpc.coordinates.math import yaw_from_quaternion
    >>> yaw_from_quaternion([1, 0, 0, 0])
    0.0
    """
    q = np.array(q, dtype=np.float64)
    norm = quaternion_norm(q)
    if norm == 0.0:
        raise ValueError("quaternion q's norm is zero")
    w, x, y, z = q / norm
    return atan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z))


def quaternion_from_yaw(yaw):
    """Returns quaternion [w, x, y, z] of a rotation around z axis.

    >>> from skmpc.coordinates.math import quaternion_from_yaw
    >>> quaternion_from_yaw(0.0)
    array([1., 0., 0., 0.])
    """
    return np.array([cos(yaw / 2.0), 0.0, 0.0, sin(yaw / 2.0)])


def so2_from_angle(theta):
    """Unit complex number [cos(theta), sin(theta)]."""
    return np.array([cos(theta), sin(theta)])


def so2_to_angle(rotation):
    return atan2(rotation[1], rotation[0])


def so2_normalize(rotation):
    rotation = np.array(rotation, dtype=np.float64)
    norm = np.linalg.norm(rotation)
    if norm == 0.0:
        raise ValueError('Rotation [0, 0] has no direction')
    return rotation / norm


def so2_matrix(rotation):
    """Returns 2x2 rotation matrix of unit complex number.

    >>> so2_matrix([1.0, 0.0])
    array([[ 1., -0.],
           [ 0.,  1.]])
    """
    c, s = rotation
    return np.array([[c, -s], [s, c]])


def so2_compose(a, b):
    """Product a * b of two planar rotations."""
    return np.array([a[0] * b[0] - a[1] * b[1],
                     a[1] * b[0] + a[0] * b[1]])


def so2_inverse(rotation):
    return np.array([rotation[0], -rotation[1]])


def so2_plus(rotation, delta):
    """Apply rotation by angle delta to rotation.

    ``so2_plus(r, 0.0)`` returns r itself.
    """
    return so2_compose(rotation, so2_from_angle(delta))


def so2_minus(a, b):
    """Angle of b^-1 * a in [-pi, pi]."""
    y = a[1] * b[0] - a[0] * b[1]
    x = a[0] * b[0] + a[1] * b[1]
    return atan2(y, x)


def so2_minus_jacobians(a, b):
    """Returns so2_minus(a, b) with its derivatives.

    Derivatives are taken w.r.t. the two stored components of ``a`` and
    ``b`` and are exact on the unit circle.

    Returns
    -------
    error : float
        angle of b^-1 * a.
    jacobian_a : numpy.ndarray
        (1, 2) derivative w.r.t. a.
    jacobian_b : numpy.ndarray
        (1, 2) derivative w.r.t. b.
    """
    ca, sa = a
    cb, sb = b
    y = sa * cb - ca * sb
    x = ca * cb + sa * sb
    n = x * x + y * y
    jacobian_a = np.array([[-x * sb - y * cb, x * cb - y * sb]]) / n
    jacobian_b = np.array([[x * sa - y * ca, -x * ca - y * sa]]) / n
    return atan2(y, x), jacobian_a, jacobian_b
