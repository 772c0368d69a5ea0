"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from robokin.core.geometry import Interval
from robokin.robot.joint import Joint, RobotIO
from robokin.robot.model import RobotModel
from robokin.targets.target import Motion, Target


IRB120_JOINTS = [
    # (a, d, min, max, max_speed)
    (0.0, 290.0, -165.0, 165.0, 250.0),
    (270.0, 0.0, -110.0, 110.0, 250.0),
    (70.0, 0.0, -110.0, 70.0, 250.0),
    (0.0, 302.0, -160.0, 160.0, 320.0),
    (0.0, 0.0, -120.0, 120.0, 320.0),
    (0.0, 72.0, -400.0, 400.0, 420.0),
]

KR6_JOINTS = [
    (25.0, 400.0, -170.0, 170.0, 360.0),
    (455.0, 0.0, -190.0, 45.0, 300.0),
    (35.0, 0.0, -120.0, 156.0, 360.0),
    (0.0, 420.0, -185.0, 185.0, 381.0),
    (0.0, 0.0, -120.0, 120.0, 388.0),
    (0.0, 80.0, -350.0, 350.0, 615.0),
]


def make_joints(rows):
    return [Joint(a=a, d=d, range=Interval(lo, hi), max_speed=speed) for a, d, lo, hi, speed in rows]


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_dir(temp_dir):
    """Create a configuration directory holding one robot definition."""
    config_dir = temp_dir / "config"
    (config_dir / "robots").mkdir(parents=True)

    robot_config = """
robot:
  model: IRB120
  manufacturer: ABB

joints:
  - {a: 0, d: 290, min: -165, max: 165, max_speed: 250}
  - {a: 270, d: 0, min: -110, max: 110, max_speed: 250}
  - {a: 70, d: 0, min: -110, max: 70, max_speed: 250}
  - {a: 0, d: 302, min: -160, max: 160, max_speed: 320}
  - {a: 0, d: 0, min: -120, max: 120, max_speed: 320}
  - {a: 0, d: 72, min: -400, max: 400, max_speed: 420}

io:
  do: [DO10_1, DO10_2]
  ao: [AO10_1]
"""
    (config_dir / "robots" / "test_robot.yaml").write_text(robot_config)
    return config_dir


@pytest.fixture
def abb_robot():
    """ABB IRB 120 built in code."""
    return RobotModel(
        model="IRB120",
        vendor="ABB",
        joints=make_joints(IRB120_JOINTS),
        io=RobotIO(do=("DO10_1", "DO10_2"), ao=("AO10_1",)),
    )


@pytest.fixture
def kuka_robot():
    """KUKA KR 6 R900 built in code."""
    return RobotModel(
        model="KR6R900",
        vendor="KUKA",
        joints=make_joints(KR6_JOINTS),
        io=RobotIO(do=("GRIPPER_CLOSE", "GRIPPER_OPEN")),
    )


@pytest.fixture
def solved_step():
    """
    Build a solved ``(target, solution)`` step from vendor degrees.

    Joint motion yields a joint-space target; any other motion yields a
    Cartesian target at the forward pose, solved in the same configuration.
    """

    def _build(robot, native, motion=Motion.JOINT, **kwargs):
        joints = robot.from_native(native)
        if motion is Motion.JOINT:
            target = Target.joint(joints, **kwargs)
        else:
            reached = robot.forward(joints, kwargs.get("tool"))
            target = Target.cartesian(
                reached.tcp,
                motion=motion,
                configuration=reached.configuration,
                **kwargs,
            )
        return target, robot.inverse(target)

    return _build


@pytest.fixture
def irb120_joints():
    """Fresh IRB 120 joint list in vendor degrees, for building variants."""
    return make_joints(IRB120_JOINTS)
