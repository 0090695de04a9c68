import unittest

import numpy as np
from numpy import testing

from skmpc.coordinates.math import so2_from_angle
from skmpc.coordinates.math import so2_to_angle
from skmpc.optimizer.manifolds import Rotation2DManifold
from skmpc.optimizer.manifolds import SubsetManifold
from skmpc.optimizer.problem import Problem
from skmpc.optimizer.residuals import ReferencePathResidual
from skmpc.optimizer.residuals import VelocityChangeResidual
from skmpc.optimizer.solvers import create_solver
from skmpc.optimizer.solvers import SolverSummary


class TestCreateSolver(unittest.TestCase):

    def test_create_solver(self):
        solver = create_solver('scipy', method='lm', max_num_evaluations=10)
        self.assertEqual(solver.method, 'lm')
        self.assertEqual(solver.max_num_evaluations, 10)
        with self.assertRaises(ValueError):
            create_solver('unknown')
        with self.assertRaises(ValueError):
            create_solver('scipy', method='dogbox')
        with self.assertRaises(ValueError):
            create_solver('scipy', max_num_evaluations=0)


class TestScipyLeastSquaresSolver(unittest.TestCase):

    def _pose_problem(self, reference_angle, reference_position):
        problem = Problem()
        self.reference_rotation = so2_from_angle(reference_angle)
        self.reference_position = np.array(reference_position)
        self.rotation = so2_from_angle(0.0)
        self.position = np.zeros(2)
        problem.add_parameter_block(self.reference_rotation,
                                    Rotation2DManifold())
        problem.add_parameter_block(self.rotation, Rotation2DManifold())
        problem.add_parameter_block(self.reference_position)
        problem.set_parameter_block_constant(self.reference_rotation)
        problem.set_parameter_block_constant(self.reference_position)
        problem.add_residual_block(
            ReferencePathResidual(), None,
            self.reference_rotation, self.reference_position,
            self.rotation, self.position)
        return problem

    def test_solve_rotation(self):
        for method in ['trf', 'lm']:
            problem = self._pose_problem(2.5, [1.0, -3.0])
            summary = create_solver('scipy', method=method).solve(problem)
            self.assertIsInstance(summary, SolverSummary)
            self.assertTrue(summary.success)
            self.assertLess(summary.final_cost, summary.initial_cost)
            self.assertLess(summary.final_cost, 1e-8)
            # solution is written back in place and stays on the circle
            testing.assert_almost_equal(so2_to_angle(self.rotation), 2.5,
                                        decimal=5)
            self.assertAlmostEqual(np.linalg.norm(self.rotation), 1.0)
            testing.assert_almost_equal(self.position, [1.0, -3.0],
                                        decimal=5)
            # constant blocks are not changed
            testing.assert_almost_equal(
                self.reference_rotation, so2_from_angle(2.5))

    def test_subset_manifold(self):
        problem = Problem()
        target = np.array([1.0, 2.0, 3.0])
        twist = np.zeros(3)
        problem.add_parameter_block(target)
        problem.set_parameter_block_constant(target)
        problem.add_parameter_block(twist, SubsetManifold(3, [2]))
        problem.add_residual_block(
            VelocityChangeResidual(), None, twist, target)
        summary = create_solver('scipy').solve(problem)
        testing.assert_almost_equal(twist, [1.0, 2.0, 0.0], decimal=5)
        self.assertAlmostEqual(summary.final_cost, 4.5, places=6)

    def test_lm_fallback(self):
        # 3 residuals, 6 parameters
        problem = Problem()
        twist0 = np.zeros(3)
        twist1 = np.ones(3)
        problem.add_residual_block(
            VelocityChangeResidual(), None, twist1, twist0)
        summary = create_solver('scipy', method='lm').solve(problem)
        self.assertLess(summary.final_cost, 1e-8)
        testing.assert_almost_equal(twist0, twist1, decimal=4)

    def test_nothing_to_optimize(self):
        problem = Problem()
        twist0 = np.zeros(3)
        twist1 = np.ones(3)
        problem.add_residual_block(
            VelocityChangeResidual(), None, twist1, twist0)
        problem.set_parameter_block_constant(twist0)
        problem.set_parameter_block_constant(twist1)
        summary = create_solver('scipy').solve(problem)
        self.assertEqual(summary.termination, 'NO_FREE_PARAMETERS')
        self.assertAlmostEqual(summary.final_cost, 1.5)
        testing.assert_equal(twist1, [1.0, 1.0, 1.0])

        summary = create_solver('scipy').solve(Problem())
        self.assertEqual(summary.termination, 'NO_FREE_PARAMETERS')

    def test_report(self):
        problem = self._pose_problem(0.5, [1.0, 0.0])
        summary = create_solver('scipy').solve(problem)
        self.assertIn('Iterations:', summary.brief_report())
        self.assertIn('Termination:', summary.brief_report())
        self.assertIn('Evaluations:', summary.brief_report())
        self.assertEqual(summary.iterations,
                         summary.num_jacobian_evaluations)
        self.assertGreaterEqual(summary.num_residual_evaluations,
                                summary.iterations)
        self.assertGreaterEqual(summary.iterations, 1)
        self.assertIn('Solver Summary', summary.full_report())
