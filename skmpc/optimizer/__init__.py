"""Receding horizon trajectory optimization.

Architecture:
- Residuals: Pure functions computing residuals and analytic Jacobians
- Problem: Parameter blocks, manifolds and residual blocks
- Solver: Backend-specific least squares solver
- Mpc: Initial guess, problem construction and penalty iterations

Usage:
    from skmpc.kinematics import KinematicModel
    from skmpc.optimizer import Mpc, Options

    mpc = Mpc(KinematicModel(), Options(time_step=0.1))
    mpc.set_reference_path(path)
    mpc.set_initial_pose(pose)
    mpc.set_initial_twist(twist)
    mpc.solve()
    optimal_path = mpc.get_optimal_path()
"""

from skmpc.optimizer.loss import ScaledLoss
from skmpc.optimizer.mpc import Mpc
from skmpc.optimizer.mpc import Options
from skmpc.optimizer.problem import Problem
from skmpc.optimizer.solvers import create_solver


__all__ = [
    'Mpc',
    'Options',
    'Problem',
    'ScaledLoss',
    'create_solver',
]
