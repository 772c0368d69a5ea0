"""
Tests for robot targets.
"""

import math

import pytest
from compas.geometry import Frame

from robokin.codegen.base import CodeEmitter
from robokin.core.exceptions import TargetError
from robokin.core.geometry import frames_close
from robokin.kinematics.configuration import Configuration
from robokin.targets.commands import Message, SetDigitalOutput
from robokin.targets.target import CartesianPose, JointPose, Motion, Target
from robokin.targets.tool import Speed, Tool


@pytest.fixture
def frame():
    return Frame([400, 0, 500], [0, 0, -1], [0, 1, 0])


class TestConstruction:
    """Tests for building targets."""

    def test_cartesian(self, frame):
        target = Target.cartesian(frame)
        assert target.is_cartesian
        assert target.joints is None
        assert isinstance(target.pose, CartesianPose)
        assert target.motion is Motion.JOINT_CARTESIAN

    def test_joint(self):
        target = Target.joint([0, 1.57, 0, 0, 0, 0])
        assert not target.is_cartesian
        assert target.plane is None
        assert isinstance(target.pose, JointPose)
        assert target.joints == (0.0, 1.57, 0.0, 0.0, 0.0, 0.0)
        assert target.motion is Motion.JOINT

    def test_needs_exactly_one_pose(self, frame):
        with pytest.raises(TargetError):
            Target()
        with pytest.raises(TargetError):
            Target(plane=frame, joints=[0] * 6)

    @pytest.mark.parametrize("joints", [[0, 0, 0], [0, 0, 0, 0, 0, math.nan], ["a", 0, 0, 0, 0, 0]])
    def test_bad_joint_vector(self, joints):
        with pytest.raises(TargetError):
            Target.joint(joints)

    def test_attributes(self, frame):
        tool = Tool("Gripper")
        target = Target.cartesian(
            frame,
            tool=tool,
            motion=Motion.LINEAR,
            speed=Speed(250),
            commands=[SetDigitalOutput(0, True)],
            configuration=Configuration.ELBOW,
        )
        assert target.tool is tool
        assert target.speed.translation == 250
        assert target.configuration is Configuration.ELBOW
        assert target.commands == [SetDigitalOutput(0, True)]

    def test_without_tool_solves_for_flange(self, abb_robot, frame):
        """No tool means the flange is the TCP; emitters write it as DefaultTool."""
        target = Target.cartesian(frame)
        solution = abb_robot.inverse(target)

        assert target.tool is None
        assert solution.is_reachable
        assert frames_close(solution.tcp, solution.flange, tol=1e-9)
        assert frames_close(solution.tcp, frame, tol=1e-6)
        assert CodeEmitter.tool_of(target).name == "DefaultTool"


class TestExclusivePose:
    """Assigning one pose representation clears the other."""

    def test_joints_replace_plane(self, frame):
        target = Target.cartesian(frame)
        target.joints = [0.1] * 6
        assert target.plane is None
        assert not target.is_cartesian

    def test_plane_replaces_joints(self, frame):
        target = Target.joint([0.1] * 6)
        target.plane = frame
        assert target.joints is None
        assert target.is_cartesian

    def test_cannot_clear(self, frame):
        target = Target.cartesian(frame)
        with pytest.raises(TargetError):
            target.plane = None
        with pytest.raises(TargetError):
            target.joints = None


class TestDuplicate:
    def test_independent_copy(self, frame):
        target = Target.cartesian(frame, commands=[Message("hello")])
        copy = target.duplicate()
        copy.commands.append(Message("again"))

        assert len(target.commands) == 1
        assert copy.plane is not target.plane
        assert frames_close(copy.plane, target.plane)
        assert copy.motion is target.motion


class TestStr:
    def test_cartesian(self, frame):
        assert str(Target.cartesian(frame)) == "Target: Cartesian (400.00, 0.00, 500.00)"

    def test_joint(self):
        assert str(Target.joint([0, 1, 0, 0, 0, 0])) == "Target: Joint (0.00,1.00,0.00,0.00,0.00,0.00)"

    def test_repr_names_motion(self, frame):
        assert "motion=joint_cartesian" in repr(Target.cartesian(frame))
