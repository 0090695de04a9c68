#!/usr/bin/env python
"""Example: Track a curved reference path over a receding horizon.

The vehicle starts at rest. In every control cycle the reference path is
cut to the horizon, the optimizer is solved, and the vehicle moves to the
second pose of the optimized path with the optimized twist.
"""

import argparse

import numpy as np

from skmpc.coordinates.math import quaternion_from_yaw
from skmpc.kinematics import KinematicModel
from skmpc.msgs import Header
from skmpc.msgs import Path
from skmpc.msgs import PoseStamped
from skmpc.msgs import TwistStamped
from skmpc.optimizer import Mpc
from skmpc.optimizer import Options


def s_curve(n, step=0.05):
    x = np.arange(n) * step
    y = 0.5 * np.sin(x)
    yaw = np.arctan2(np.gradient(y), np.gradient(x))
    return [PoseStamped([px, py, 0.0], quaternion_from_yaw(pyaw),
                        Header('map'))
            for px, py, pyaw in zip(x, y, yaw)]


def main():
    parser = argparse.ArgumentParser(
        description='Receding horizon tracking of an S-shaped path')
    parser.add_argument(
        '--no-interactive',
        action='store_true',
        help="Run in non-interactive mode (do not wait for user input)"
    )
    parser.add_argument(
        '--cycles',
        type=int,
        default=20,
        help='Number of control cycles')
    parser.add_argument(
        '--horizon',
        type=int,
        default=20,
        help='Number of poses in the horizon')
    args = parser.parse_args()

    dt = 0.1
    reference = s_curve(args.cycles + args.horizon)
    mpc = Mpc(KinematicModel(),
              Options(max_num_poses=args.horizon, time_step=dt))

    pose = reference[0]
    twist = TwistStamped()
    for cycle in range(args.cycles):
        mpc.set_reference_path(
            Path(reference[cycle:cycle + args.horizon], Header('map')))
        mpc.set_initial_pose(pose)
        mpc.set_initial_twist(twist)
        status = mpc.solve()

        path = mpc.get_optimal_path()
        omega, v_x, _ = mpc.get_optimal_twists()[1]
        pose = path[1]
        twist = TwistStamped(linear=[v_x, 0.0, 0.0],
                             angular=[0.0, 0.0, omega])
        target = reference[cycle + 1].position
        print(f"cycle {cycle:2d}: {status:24s} "
              f"penalty iterations={mpc.iterations} "
              f"pos=({pose.position[0]:.3f}, {pose.position[1]:.3f}) "
              f"error={np.linalg.norm(pose.position - target):.4f} "
              f"v={v_x:.3f} omega={omega:.3f}")

    if not args.no_interactive:
        input("Press Enter to exit...")


if __name__ == '__main__':
    main()
