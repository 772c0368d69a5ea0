"""
Tests for forward kinematics.
"""

import math

import numpy as np
import pytest

from robokin.core.exceptions import KinematicsError
from robokin.kinematics.configuration import Configuration
from robokin.kinematics.forward import (
    ALPHA,
    arm_sides,
    configuration_of,
    forearm_geometry,
    forward_chain,
    link_transform,
)
from robokin.kinematics.solution import SolutionStatus


class TestLinkTransform:
    """Tests for a single DH link."""

    def test_pure_translation(self):
        matrix = link_transform(a=10.0, d=20.0, alpha=0.0, theta=0.0)
        assert np.allclose(matrix[:3, :3], np.eye(3))
        assert np.allclose(matrix[:3, 3], [10, 0, 20])

    def test_rotation_moves_link_offset(self):
        """theta turns the a offset about z."""
        matrix = link_transform(a=10.0, d=0.0, alpha=0.0, theta=math.pi / 2)
        assert np.allclose(matrix[:3, 3], [0, 10, 0])

    def test_twists(self):
        assert ALPHA == pytest.approx((math.pi / 2, 0, math.pi / 2, -math.pi / 2, math.pi / 2, 0))


class TestForwardChain:
    """Tests for the matrix-level chain."""

    def test_seven_matrices(self, abb_robot):
        matrices = forward_chain(abb_robot.joints, abb_robot.reference)
        assert len(matrices) == 7
        assert np.allclose(matrices[0], np.eye(4))

    def test_base_matrix_prepended(self, abb_robot):
        base = np.eye(4)
        base[:3, 3] = [0, 0, 100]
        matrices = forward_chain(abb_robot.joints, abb_robot.reference, base)
        assert np.allclose(matrices[-1][:3, 3], [374, 0, 730])

    def test_forearm_geometry(self, abb_robot):
        length, angle = forearm_geometry(abb_robot.joints)
        assert length == pytest.approx(math.hypot(70, 302))
        assert angle == pytest.approx(math.atan2(302, 70))


class TestConfigurationOf:
    """Tests for branch flags of joint vectors."""

    def test_reference_is_canonical(self, abb_robot):
        assert configuration_of(abb_robot.joints, abb_robot.reference) is Configuration.NONE

    def test_negative_joint5_is_wrist_flip(self, abb_robot):
        joints = list(abb_robot.reference)
        joints[4] = -0.5
        assert configuration_of(abb_robot.joints, joints) is Configuration.WRIST

    def test_back_reach_is_shoulder(self, abb_robot):
        """Turning the arm over the top puts the wrist behind joint 1."""
        joints = list(abb_robot.reference)
        joints[1] = math.radians(150)
        assert configuration_of(abb_robot.joints, joints).shoulder


class TestArmSides:
    """Tests for the wrist centre position relative to the arm."""

    def test_reference_in_front(self, abb_robot):
        assert arm_sides(abb_robot.joints, abb_robot.reference) == (False, False)

    def test_folded_forearm_is_behind_lower_arm(self, abb_robot):
        """Joint 3 past atan2(302, 70), about 77 degrees, folds the forearm back."""
        joints = list(abb_robot.reference)
        joints[2] = math.radians(100)
        assert arm_sides(abb_robot.joints, joints) == (False, True)

    def test_elbow_flag_is_relative_to_reach(self, abb_robot):
        """Over the back, a folded forearm is the elbow-up branch."""
        joints = list(abb_robot.reference)
        joints[1] = math.radians(150)
        joints[2] = math.radians(100)
        assert arm_sides(abb_robot.joints, joints) == (True, True)
        assert configuration_of(abb_robot.joints, joints) is Configuration.SHOULDER


class TestEngineForward:
    """Tests for KinematicsEngine.forward through the robot model."""

    def test_reference_flange(self, abb_robot):
        solution = abb_robot.forward(abb_robot.reference)
        assert solution.status is SolutionStatus.SOLVED
        assert len(solution.planes) == 7
        assert list(solution.flange.point) == pytest.approx([374, 0, 630], abs=1e-9)
        assert solution.configuration is Configuration.NONE

    def test_kuka_axis_direction(self, kuka_robot):
        """A positive KUKA A1 turns the arm towards negative y."""
        solution = kuka_robot.forward(kuka_robot.from_native([30, -90, 90, 0, 0, 0]))
        assert solution.tcp.point[1] < 0
        assert math.hypot(solution.tcp.point[0], solution.tcp.point[1]) == pytest.approx(525)

    def test_out_of_range_reported(self, abb_robot):
        """Joint 1 at 170 degrees exceeds the 165 degree limit."""
        solution = abb_robot.forward(abb_robot.from_native([170, 0, 0, 0, 0, 0]))
        assert solution.status is SolutionStatus.OUT_OF_RANGE
        assert solution.out_of_range == (0,)
        assert not solution.is_valid
        assert solution.errors == ["Joint 1 is outside its range"]

    def test_values_taken_literally(self, abb_robot):
        """Joint 6 allows 400 degrees; 390 is in range without wrapping."""
        solution = abb_robot.forward(abb_robot.from_native([0, 0, 0, 0, 0, 390]))
        assert solution.is_valid
        assert solution.joints[5] == pytest.approx(math.radians(390))

    def test_wrong_length(self, abb_robot):
        with pytest.raises(KinematicsError):
            abb_robot.forward([0, 0, 0])
