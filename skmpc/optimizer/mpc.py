"""Optimization based trajectory generation over a receding horizon.

The :class:`Mpc` tracks a reference path with a kinematically feasible
pose trajectory. The kinematic constraint is handled with a penalty
method: the problem is solved repeatedly while the weight of the
kinematic constraint residuals grows until all of them are below
``Options.max_constraint_cost``.

All inputs must already be expressed in one common frame; the optimizer
does not transform between frames.
"""

import copy
from logging import getLogger

import numpy as np

from skmpc.coordinates.pose import Pose2D
from skmpc.coordinates.pose import Twist2D
from skmpc.coordinates.so2 import SO2
from skmpc.kinematics.model import KinematicModel
from skmpc.msgs import Header
from skmpc.msgs import Path
from skmpc.msgs import pose2d_to_pose_stamped
from skmpc.msgs import pose_stamped_to_pose2d
from skmpc.msgs import twist_stamped_to_twist2d
from skmpc.optimizer.builder import build_optimization_problem
from skmpc.optimizer.loss import ScaledLoss
from skmpc.optimizer.solvers import create_solver
from skmpc.optimizer.trajectory import generate_initial_values
from skmpc.optimizer.trajectory import ReferenceTrajectory


logger = getLogger(__name__)


IDLE = 'idle'
REFERENCE_READY = 'reference_ready'
SOLVING = 'solving'
CONVERGED = 'converged'
ITERATION_LIMIT_REACHED = 'iteration_limit_reached'


class Options(object):
    """Options of the trajectory optimizer.

    Parameters
    ----------
    max_num_poses : int
        Maximum horizon length.
    time_step : float
        Time between two horizon steps [sec].
    max_penalty_iterations : int
        Maximum number of solves with increasing penalty.
    penalty_increase_factor : float
        Factor applied to the penalty coefficient after each infeasible
        solve.
    max_constraint_cost : float
        A solution is feasible when every kinematic constraint cost is
        at most this value.
    reference_loss_factor : float
        Weight of the reference path residuals.
    velocity_loss_factor : float
        Weight of the velocity change residuals.
    frame_id : str
        Frame of the optimized path.
    """

    def __init__(
        self,
        max_num_poses=100,
        time_step=0.01,
        max_penalty_iterations=8,
        penalty_increase_factor=5.0,
        max_constraint_cost=10e-3,
        reference_loss_factor=20.0,
        velocity_loss_factor=1.0,
        frame_id='map',
    ):
        if int(max_num_poses) < 1:
            raise ValueError('max_num_poses must be positive')
        if not time_step > 0.0:
            raise ValueError('time_step must be positive')
        if int(max_penalty_iterations) < 0:
            raise ValueError('max_penalty_iterations must not be negative')
        if not penalty_increase_factor > 1.0:
            raise ValueError('penalty_increase_factor must be greater than 1')
        if reference_loss_factor < 0.0 or velocity_loss_factor < 0.0:
            raise ValueError('loss factors must not be negative')
        self.max_num_poses = int(max_num_poses)
        self.time_step = float(time_step)
        self.max_penalty_iterations = int(max_penalty_iterations)
        self.penalty_increase_factor = float(penalty_increase_factor)
        self.max_constraint_cost = float(max_constraint_cost)
        self.reference_loss_factor = float(reference_loss_factor)
        self.velocity_loss_factor = float(velocity_loss_factor)
        self.frame_id = frame_id

    def to_dict(self):
        return {
            'max_num_poses': self.max_num_poses,
            'time_step': self.time_step,
            'max_penalty_iterations': self.max_penalty_iterations,
            'penalty_increase_factor': self.penalty_increase_factor,
            'max_constraint_cost': self.max_constraint_cost,
            'reference_loss_factor': self.reference_loss_factor,
            'velocity_loss_factor': self.velocity_loss_factor,
            'frame_id': self.frame_id,
        }

    @classmethod
    def from_dict(cls, d):
        return cls(**d)

    def __repr__(self):
        return 'Options({})'.format(', '.join(
            '{}={!r}'.format(k, v) for k, v in self.to_dict().items()))


class Mpc(object):
    """Trajectory optimizer tracking a reference path.

    Parameters
    ----------
    kinematic_model : KinematicModel
        Motion model of the vehicle.
    options : Options, optional
        Optimizer options. Copied on construction.
    solver : BaseSolver, optional
        Least squares solver. ``create_solver('scipy')`` if None.

    Examples
    --------
    >>> from skmpc.kinematics import KinematicModel
    >>> from skmpc.msgs import Path, PoseStamped
    >>> from skmpc.optimizer import Mpc, Options
    >>> mpc = Mpc(KinematicModel(), Options(time_step=0.1))
    >>> mpc.set_reference_path(Path([PoseStamped([0.1 * i, 0.0, 0.0])
    ...                              for i in range(10)]))
    >>> mpc.solve()
    'converged'
    >>> len(mpc.get_optimal_path())
    10
    """

    def __init__(self, kinematic_model=None, options=None, solver=None):
        if kinematic_model is None:
            kinematic_model = KinematicModel()
        if options is None:
            options = Options()
        self.kinematic_model = kinematic_model
        self._options = copy.copy(options)
        self.solver = solver or create_solver('scipy')

        self._initial_pose = Pose2D()
        self._initial_twist = Twist2D()
        self._reference = ReferenceTrajectory()
        self._reference_header = Header()
        self._initial_pose_header = Header()
        self._reset_horizon()

        self._reference_path_set = False
        self._problem_size = 0
        self._solved = False

        self._reference_loss = ScaledLoss(self._options.reference_loss_factor)
        self._velocity_loss = ScaledLoss(self._options.velocity_loss_factor)
        self._constraint_penalty_coefficient_handle = ScaledLoss(1.0)

        self._problem = None
        self._kinematic_constraint_residuals = []

        self.status = IDLE
        self.iterations = 0
        self.penalty_history = []
        self.summaries = []

    @property
    def options(self):
        return self._options

    @property
    def problem_size(self):
        return self._problem_size

    @property
    def horizon(self):
        return self._horizon

    @property
    def problem(self):
        """Problem of the last solve, None before the first solve."""
        return self._problem

    @property
    def penalty_coefficient(self):
        return self._constraint_penalty_coefficient_handle.weight

    def set_reference_path(self, reference_path):
        """Set the path to track.

        Parameters
        ----------
        reference_path : skmpc.msgs.Path or list[skmpc.msgs.PoseStamped]
            Reference poses, one per horizon step. Only the first
            ``max_num_poses`` poses are used.
        """
        poses = getattr(reference_path, 'poses', reference_path)
        poses = list(poses)
        if len(poses) == 0:
            raise ValueError('Reference path must contain at least one pose')
        self._problem_size = min(len(poses), self._options.max_num_poses)

        self._reference.clear()
        for pose_stamped in poses[:self._problem_size]:
            self._reference.append(pose_stamped_to_pose2d(pose_stamped))
        header = getattr(reference_path, 'header', None)
        if header is None:
            header = poses[0].header
        self._reference_header = Header(header.frame_id, header.stamp)
        self._reference_path_set = True
        self.status = REFERENCE_READY
        logger.debug('Reference path set with %d poses (%d used)',
                     len(poses), self._problem_size)

    def set_initial_pose(self, initial_pose):
        """Set the constant pose of horizon step 0.

        Parameters
        ----------
        initial_pose : skmpc.msgs.PoseStamped
        """
        self._initial_pose = pose_stamped_to_pose2d(initial_pose)
        self._initial_pose_header = Header(initial_pose.header.frame_id,
                                           initial_pose.header.stamp)
        if not self._solved:
            self._reset_horizon()

    def set_initial_twist(self, initial_twist):
        """Set the constant twist of horizon step 0.

        Parameters
        ----------
        initial_twist : skmpc.msgs.TwistStamped
            Only yaw rate and forward velocity are used.
        """
        self._initial_twist = twist_stamped_to_twist2d(initial_twist)
        if not self._solved:
            self._reset_horizon()

    def solve(self):
        """Optimize the horizon.

        Returns
        -------
        status : str
            'converged' if all kinematic constraints are feasible,
            'iteration_limit_reached' otherwise. In both cases the
            optimized horizon is available via :meth:`get_optimal_path`.
        """
        if not self._reference_path_set:
            error_text = ('Reference path must be set before calling '
                          'Mpc.solve()!')
            logger.error(error_text)
            raise RuntimeError(error_text)
        reference_frame = self._reference_header.frame_id
        pose_frame = self._initial_pose_header.frame_id
        if reference_frame and pose_frame and reference_frame != pose_frame:
            raise ValueError(
                'Initial pose frame {!r} differs from reference path frame '
                '{!r}'.format(pose_frame, reference_frame))

        self.status = SOLVING
        self.iterations = 0
        self.penalty_history = []
        self.summaries = []

        self._solved = False
        try:
            converged = self._optimize()
        except Exception:
            logger.error('Optimization failed; horizon reset to the '
                         'initial state.')
            self._problem = None
            self._kinematic_constraint_residuals = []
            self._reset_horizon()
            self.status = REFERENCE_READY
            raise
        self._solved = True

        if converged:
            self.status = CONVERGED
        else:
            logger.warning('Max constraint penalty iterations reached.')
            self.status = ITERATION_LIMIT_REACHED
        return self.status

    def _optimize(self):
        self._generate_initial_values()
        self._problem, self._kinematic_constraint_residuals = \
            build_optimization_problem(
                self._horizon,
                self._reference,
                self._options.time_step,
                self._reference_loss,
                self._velocity_loss,
                self._constraint_penalty_coefficient_handle,
                self.kinematic_model)

        penalty_coefficient = 1.0
        while self.iterations < self._options.max_penalty_iterations:
            self.iterations += 1
            self._constraint_penalty_coefficient_handle.set_weight(
                penalty_coefficient)
            self.penalty_history.append(penalty_coefficient)
            summary = self.solver.solve(self._problem)
            self.summaries.append(summary)
            logger.info('%s', summary.brief_report())

            if self.is_feasible():
                logger.info('Feasible solution found on iteration %i.',
                            self.iterations)
                return True

            penalty_coefficient *= self._options.penalty_increase_factor
        return False

    def constraint_costs(self):
        """Cost of every kinematic constraint residual, loss not applied.

        Returns
        -------
        numpy.ndarray
            (problem_size - 1,) costs of steps 1..N-1. Empty before the
            first solve.
        """
        if self._problem is None:
            return np.zeros(0)
        return np.array([
            self._problem.evaluate_residual_block(
                residual_block, apply_loss_function=False)[0]
            for residual_block in self._kinematic_constraint_residuals])

    def is_feasible(self):
        for residual_block in self._kinematic_constraint_residuals:
            cost, _ = self._problem.evaluate_residual_block(
                residual_block, apply_loss_function=False)
            if cost > self._options.max_constraint_cost:
                return False
        return True

    def get_optimal_path(self):
        """Returns the optimized horizon as path.

        Poses are stamped with ``time_step`` spacing from the stamp of
        the reference path and expressed in ``Options.frame_id``.

        Returns
        -------
        skmpc.msgs.Path
        """
        if not self._solved:
            logger.warning('get_optimal_path called before solve; '
                           'returning the initial state only.')
        frame_id = self._options.frame_id
        stamp = self._reference_header.stamp
        poses = [
            pose2d_to_pose_stamped(
                Pose2D(SO2(rotation), position), frame_id,
                stamp + i * self._options.time_step)
            for i, (rotation, position) in enumerate(
                zip(self._horizon.rotations, self._horizon.positions))]
        return Path(poses, Header(frame_id, stamp))

    def get_optimal_twists(self):
        """Returns (N, 3) array of optimized [omega, v_x, v_y]."""
        return self._horizon.twist_array()

    def _generate_initial_values(self):
        self._horizon = generate_initial_values(
            self._initial_pose,
            self._initial_twist,
            self._problem_size,
            self._options.time_step,
            self.kinematic_model)

    def _reset_horizon(self):
        self._horizon = generate_initial_values(
            self._initial_pose,
            self._initial_twist,
            1,
            self._options.time_step,
            self.kinematic_model)
