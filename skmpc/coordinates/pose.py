import numpy as np

from skmpc.coordinates.so2 import SO2


class Pose2D(object):
    """Planar pose of the vehicle.

    Parameters
    ----------
    rotation : SO2 or float, optional
        Orientation. A float is interpreted as yaw angle in radian.
    position : list or numpy.ndarray, optional
        [x, y] position.
    """

    def __init__(self, rotation=None, position=None):
        if rotation is None:
            rotation = SO2()
        elif not isinstance(rotation, SO2):
            rotation = SO2.from_angle(rotation)
        if position is None:
            position = np.zeros(2)
        position = np.array(position, dtype=np.float64)
        if position.shape != (2,):
            raise ValueError(
                'Position must be specified as a 2-vector, '
                'get shape {}'.format(position.shape))
        self.rotation = rotation
        self.position = position

    @property
    def x(self):
        return self.position[0]

    @property
    def y(self):
        return self.position[1]

    @property
    def yaw(self):
        return self.rotation.angle

    def copy(self):
        return Pose2D(SO2(self.rotation.array), self.position.copy())

    def __repr__(self):
        return '<Pose2D x={:.6f} y={:.6f} yaw={:.6f}>'.format(
            self.x, self.y, self.yaw)


class Twist2D(object):
    """Body frame twist [angular, forward, lateral].

    Parameters
    ----------
    angular : float
        Angular rate around z axis [rad/s].
    linear : list or numpy.ndarray
        [forward, lateral] velocity [m/s].
    """

    def __init__(self, angular=0.0, linear=None):
        if linear is None:
            linear = np.zeros(2)
        linear = np.array(linear, dtype=np.float64)
        if linear.shape != (2,):
            raise ValueError(
                'Linear velocity must be specified as a 2-vector, '
                'get shape {}'.format(linear.shape))
        self.vector = np.array([angular, linear[0], linear[1]],
                               dtype=np.float64)

    @classmethod
    def from_vector(cls, vector):
        vector = np.asarray(vector, dtype=np.float64)
        if vector.shape != (3,):
            raise ValueError(
                'Twist must be specified as a 3-vector, '
                'get shape {}'.format(vector.shape))
        return cls(vector[0], vector[1:])

    @property
    def angular(self):
        return self.vector[0]

    @property
    def linear(self):
        return self.vector[1:].copy()

    def __repr__(self):
        return '<Twist2D angular={:.6f} linear=[{:.6f}, {:.6f}]>'.format(
            *self.vector)
