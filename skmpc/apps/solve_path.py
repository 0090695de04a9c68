#!/usr/bin/env python

import argparse
import logging
import sys

import numpy as np

from skmpc.coordinates.math import quaternion_from_yaw
from skmpc.kinematics import KinematicModel
from skmpc.msgs import Header
from skmpc.msgs import Path
from skmpc.msgs import PoseStamped
from skmpc.msgs import TwistStamped
from skmpc.optimizer import Mpc
from skmpc.optimizer import Options


def load_reference_path(filename, frame_id='map'):
    """Load reference path from csv rows of x, y, yaw."""
    data = np.loadtxt(filename, delimiter=',', ndmin=2)
    if data.shape[1] != 3:
        raise ValueError(
            'Expected 3 columns (x, y, yaw), get {}'.format(data.shape[1]))
    header = Header(frame_id)
    poses = [PoseStamped([x, y, 0.0], quaternion_from_yaw(yaw),
                         Header(frame_id))
             for x, y, yaw in data]
    return Path(poses, header)


def main():
    """Optimize a trajectory tracking a reference path."""
    parser = argparse.ArgumentParser(
        description='Optimize a kinematically feasible trajectory tracking '
                    'a reference path.\n'
                    'The first row of the reference is used as initial '
                    'pose.',
        formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument(
        'reference',
        type=str,
        help='Path to csv file with rows of x, y, yaw')
    parser.add_argument(
        '--initial-twist',
        type=float,
        nargs=2,
        default=[0.0, 0.0],
        metavar=('ANGULAR', 'FORWARD'),
        help='Initial yaw rate [rad/s] and forward velocity [m/s]')
    parser.add_argument(
        '--time-step',
        type=float,
        default=0.1,
        help='Time between two horizon steps [sec]')
    parser.add_argument(
        '--max-num-poses',
        type=int,
        default=100,
        help='Maximum horizon length')
    parser.add_argument(
        '--max-penalty-iterations',
        type=int,
        default=8,
        help='Maximum number of penalty iterations')
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Print solver reports')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s')

    try:
        path = load_reference_path(args.reference)
        options = Options(
            max_num_poses=args.max_num_poses,
            time_step=args.time_step,
            max_penalty_iterations=args.max_penalty_iterations)
        mpc = Mpc(KinematicModel(), options)
        mpc.set_reference_path(path)
        mpc.set_initial_pose(path.poses[0])
        angular, forward = args.initial_twist
        mpc.set_initial_twist(TwistStamped(
            linear=[forward, 0.0, 0.0], angular=[0.0, 0.0, angular]))
        status = mpc.solve()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.verbose:
        print(f"# status: {status}, penalty iterations: {mpc.iterations}")
    for x, y, yaw in mpc.horizon.pose_array():
        print(f"{x:.6f},{y:.6f},{yaw:.6f}")


if __name__ == '__main__':
    main()
