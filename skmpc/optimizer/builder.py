"""Construction of the horizon optimization problem."""

from logging import getLogger

from skmpc.optimizer.manifolds import Rotation2DManifold
from skmpc.optimizer.manifolds import SubsetManifold
from skmpc.optimizer.problem import Problem
from skmpc.optimizer.residuals import KinematicConstraintPenaltyResidual
from skmpc.optimizer.residuals import ReferencePathResidual
from skmpc.optimizer.residuals import VelocityChangeResidual


logger = getLogger(__name__)


# Lateral velocity of a differential drive vehicle is always zero.
LATERAL_VELOCITY_INDEX = 2


def build_optimization_problem(
    horizon,
    reference,
    time_step,
    reference_loss,
    velocity_loss,
    constraint_loss,
    kinematic_model=None,
):
    """Build the least squares problem over a horizon.

    Index 0 of the horizon is declared constant. For every later step the
    pose and twist are free, the reference pose is constant, and one
    reference path, one velocity change and one kinematic constraint
    residual are attached.

    Parameters
    ----------
    horizon : skmpc.optimizer.trajectory.Horizon
        Initial values. Its arrays become the parameter blocks.
    reference : skmpc.optimizer.trajectory.ReferenceTrajectory
        Reference poses aligned with the horizon.
    time_step : float
        Time between two horizon steps [sec].
    reference_loss : ScaledLoss
        Loss of the reference path residuals.
    velocity_loss : ScaledLoss
        Loss of the velocity change residuals.
    constraint_loss : ScaledLoss
        Loss of the kinematic constraint residuals. Its weight is the
        penalty coefficient.
    kinematic_model : KinematicModel, optional
        Model of the kinematic constraint.

    Returns
    -------
    problem : Problem
        Problem description.
    kinematic_constraint_residuals : list[ResidualBlock]
        Kinematic constraint residual of step 1..N-1, in order.
    """
    if len(horizon) != len(reference):
        raise ValueError(
            'Horizon length {} does not match reference length {}'
            .format(len(horizon), len(reference)))
    if len(horizon) == 0:
        raise ValueError('Horizon must contain the initial state')

    rotation_manifold = Rotation2DManifold()
    twist_manifold = SubsetManifold(3, [LATERAL_VELOCITY_INDEX])

    problem = Problem()

    # Initial pose and twist are constant parameters.
    problem.add_parameter_block(horizon.rotations[0], rotation_manifold)
    problem.add_parameter_block(horizon.positions[0])
    problem.add_parameter_block(horizon.twists[0], twist_manifold)
    problem.set_parameter_block_constant(horizon.rotations[0])
    problem.set_parameter_block_constant(horizon.positions[0])
    problem.set_parameter_block_constant(horizon.twists[0])

    kinematic_constraint = KinematicConstraintPenaltyResidual(
        time_step, kinematic_model)
    reference_residual = ReferencePathResidual()
    velocity_residual = VelocityChangeResidual()

    kinematic_constraint_residuals = []

    # Start with the second element. For the first element the reference
    # path residual is constant and the velocity residual is undefined.
    for i in range(1, len(horizon)):
        problem.add_parameter_block(horizon.rotations[i], rotation_manifold)
        problem.add_parameter_block(horizon.positions[i])
        problem.add_parameter_block(reference.rotations[i],
                                    rotation_manifold)
        problem.add_parameter_block(reference.positions[i])
        problem.add_parameter_block(horizon.twists[i], twist_manifold)

        problem.set_parameter_block_constant(reference.rotations[i])
        problem.set_parameter_block_constant(reference.positions[i])

        problem.add_residual_block(
            reference_residual,
            reference_loss,
            reference.rotations[i],
            reference.positions[i],
            horizon.rotations[i],
            horizon.positions[i],
        )
        problem.add_residual_block(
            velocity_residual,
            velocity_loss,
            horizon.twists[i],
            horizon.twists[i - 1],
        )
        residual_block = problem.add_residual_block(
            kinematic_constraint,
            constraint_loss,
            horizon.rotations[i],
            horizon.positions[i],
            horizon.rotations[i - 1],
            horizon.positions[i - 1],
            horizon.twists[i - 1],
        )
        kinematic_constraint_residuals.append(residual_block)

    logger.debug('Built problem: %d parameter blocks, %d residual blocks, '
                 '%d effective parameters',
                 problem.num_parameter_blocks,
                 problem.num_residual_blocks,
                 problem.num_effective_parameters)
    return problem, kinematic_constraint_residuals
