import numpy as np

from skmpc.coordinates.math import quaternion_from_yaw
from skmpc.coordinates.math import so2_compose
from skmpc.coordinates.math import so2_from_angle
from skmpc.coordinates.math import so2_inverse
from skmpc.coordinates.math import so2_matrix
from skmpc.coordinates.math import so2_minus
from skmpc.coordinates.math import so2_normalize
from skmpc.coordinates.math import so2_plus
from skmpc.coordinates.math import so2_to_angle
from skmpc.coordinates.math import yaw_from_quaternion


class SO2(object):
    """Planar rotation stored as a unit complex number.

    The tangent space is one dimensional: :meth:`plus` applies a small
    rotation and :meth:`minus` recovers it.

    Parameters
    ----------
    rotation : list or numpy.ndarray, optional
        [cos(theta), sin(theta)]. Normalized on construction.

    Examples
    --------
    >>> from skmpc.coordinates import SO2
    >>> r = SO2.from_angle(0.5)
    >>> round(r.plus(0.25).minus(r), 6)
    0.25
    """

    def __init__(self, rotation=None):
        if rotation is None:
            rotation = [1.0, 0.0]
        self._rotation = so2_normalize(rotation)

    @classmethod
    def from_angle(cls, theta):
        return cls(so2_from_angle(theta))

    @classmethod
    def from_matrix(cls, matrix):
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.shape != (2, 2):
            raise ValueError(
                'Rotation must be specified as a 2x2 ndarray, '
                'get {}'.format(matrix.shape))
        return cls(matrix[:, 0])

    @classmethod
    def from_quaternion(cls, q):
        """Create planar rotation from quaternion [w, x, y, z]."""
        return cls.from_angle(yaw_from_quaternion(q))

    def to_quaternion(self):
        """Returns quaternion [w, x, y, z] of this rotation."""
        return quaternion_from_yaw(self.angle)

    @property
    def array(self):
        """Copy of the stored [cos(theta), sin(theta)]."""
        return self._rotation.copy()

    @property
    def angle(self):
        return so2_to_angle(self._rotation)

    @property
    def matrix(self):
        return so2_matrix(self._rotation)

    def compose(self, other):
        return SO2(so2_compose(self._rotation, other._rotation))

    def inverse(self):
        return SO2(so2_inverse(self._rotation))

    def plus(self, delta):
        return SO2(so2_plus(self._rotation, delta))

    def minus(self, other):
        return so2_minus(self._rotation, other._rotation)

    def rotate_vector(self, v):
        return self.matrix.dot(np.asarray(v, dtype=np.float64))

    def __mul__(self, other):
        return self.compose(other)

    def __repr__(self):
        return '<SO2 angle={:.6f}>'.format(self.angle)
