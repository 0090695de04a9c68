"""Residual functions of the trajectory optimization problem.

Each cost function is a pure function of a small set of parameter blocks.
Jacobians are analytic and given w.r.t. the stored (ambient) values of
each block; the solver maps them to tangent coordinates.
"""

import numpy as np

from skmpc.coordinates.math import so2_minus_jacobians
from skmpc.kinematics.model import KinematicModel


class CostFunction(object):
    """Residual function over a fixed list of parameter blocks.

    Subclasses set ``num_residuals`` and ``parameter_block_sizes`` and
    implement :meth:`evaluate`.

    Attributes
    ----------
    name : str
        Residual name for debugging.
    num_residuals : int
        Length of the residual vector.
    parameter_block_sizes : tuple[int]
        Ambient size of each parameter block.
    """

    name = 'cost'
    num_residuals = 0
    parameter_block_sizes = ()

    def evaluate(self, *parameters):
        """Returns residual vector and per block Jacobians.

        Returns
        -------
        residuals : numpy.ndarray
            (num_residuals,) residual vector.
        jacobians : list[numpy.ndarray]
            (num_residuals, size) derivative for each parameter block.
        """
        raise NotImplementedError

    def __call__(self, *parameters):
        return self.evaluate(*parameters)[0]

    def __repr__(self):
        return '<{} num_residuals={}>'.format(
            self.__class__.__name__, self.num_residuals)


class ReferencePathResidual(CostFunction):
    """Deviation of a horizon pose from its reference pose.

    Parameter blocks are ``(reference_rotation, reference_position,
    rotation, position)``. The residual is
    ``[minus(rotation, reference_rotation); position - reference_position]``.
    """

    name = 'reference_path'
    num_residuals = 3
    parameter_block_sizes = (2, 2, 2, 2)

    def evaluate(self, reference_rotation, reference_position,
                 rotation, position):
        angle_error, J_rotation, J_reference_rotation = so2_minus_jacobians(
            rotation, reference_rotation)
        residuals = np.empty(3)
        residuals[0] = angle_error
        residuals[1:] = position - reference_position

        J_ref_rot = np.zeros((3, 2))
        J_ref_rot[0] = J_reference_rotation[0]
        J_ref_pos = np.zeros((3, 2))
        J_ref_pos[1:] = -np.eye(2)
        J_rot = np.zeros((3, 2))
        J_rot[0] = J_rotation[0]
        J_pos = np.zeros((3, 2))
        J_pos[1:] = np.eye(2)
        return residuals, [J_ref_rot, J_ref_pos, J_rot, J_pos]


class VelocityChangeResidual(CostFunction):
    """Change of twist between two consecutive horizon steps.

    Parameter blocks are ``(twist, previous_twist)``.
    """

    name = 'velocity_change'
    num_residuals = 3
    parameter_block_sizes = (3, 3)

    def evaluate(self, twist, previous_twist):
        residuals = np.asarray(twist, dtype=np.float64) - previous_twist
        return residuals, [np.eye(3), -np.eye(3)]


class KinematicConstraintPenaltyResidual(CostFunction):
    """Error between a pose and the propagation of its predecessor.

    Parameter blocks are ``(rotation, position, previous_rotation,
    previous_position, previous_twist)``. The residual is zero iff the
    pose is exactly reached from the previous pose by moving with the
    previous twist for ``time_step``.

    Parameters
    ----------
    time_step : float
        Time between two horizon steps [sec].
    kinematic_model : KinematicModel, optional
        Model used to predict the pose.
    """

    name = 'kinematic_constraint'
    num_residuals = 3
    parameter_block_sizes = (2, 2, 2, 2, 3)

    def __init__(self, time_step, kinematic_model=None):
        self.time_step = time_step
        self.kinematic_model = kinematic_model or KinematicModel()

    def evaluate(self, rotation, position, previous_rotation,
                 previous_position, previous_twist):
        predicted_rotation, predicted_position, J = \
            self.kinematic_model.propagate_array(
                previous_rotation, previous_position, previous_twist,
                self.time_step, with_jacobian=True)
        angle_error, J_rotation, J_predicted = so2_minus_jacobians(
            rotation, predicted_rotation)

        residuals = np.empty(3)
        residuals[0] = angle_error
        residuals[1:] = position - predicted_position

        J_rot = np.zeros((3, 2))
        J_rot[0] = J_rotation[0]
        J_pos = np.zeros((3, 2))
        J_pos[1:] = np.eye(2)
        J_prev_rot = np.zeros((3, 2))
        J_prev_rot[0] = J_predicted.dot(J['rotation_rotation'])[0]
        J_prev_rot[1:] = -J['position_rotation']
        J_prev_pos = np.zeros((3, 2))
        J_prev_pos[1:] = -J['position_position']
        J_prev_twist = np.zeros((3, 3))
        J_prev_twist[0] = J_predicted.dot(J['rotation_twist'])[0]
        J_prev_twist[1:] = -J['position_twist']
        return residuals, [J_rot, J_pos, J_prev_rot, J_prev_pos,
                           J_prev_twist]
