"""
Robot targets.

A target holds exactly one pose representation: a Cartesian frame in world
space or a vector of six joint angles. Assigning one replaces the other, so
the two can never disagree.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Union

from compas.geometry import Frame

from robokin.core.exceptions import TargetError
from robokin.kinematics.configuration import Configuration
from robokin.targets.commands import Command
from robokin.targets.tool import Speed, Tool, Zone


class Motion(Enum):
    """Interpolation used to reach a target."""

    JOINT = "joint"  # joint interpolation to joint angles
    JOINT_CARTESIAN = "joint_cartesian"  # joint interpolation to a Cartesian pose
    LINEAR = "linear"
    CIRCULAR = "circular"
    SPLINE = "spline"


@dataclass(frozen=True)
class CartesianPose:
    frame: Frame


@dataclass(frozen=True)
class JointPose:
    joints: tuple[float, ...]


Pose = Union[CartesianPose, JointPose]


def _joint_vector(joints: Sequence[float]) -> tuple[float, ...]:
    try:
        values = tuple(float(j) for j in joints)
    except (TypeError, ValueError) as e:
        raise TargetError(f"Joint angles must be numbers: {e}") from e
    if len(values) != 6:
        raise TargetError(f"Expected 6 joint angles, got {len(values)}", details={"joints": list(values)})
    if not all(math.isfinite(v) for v in values):
        raise TargetError("Joint angles must be finite", details={"joints": list(values)})
    return values


class Target:
    """
    A pose to reach plus the motion attributes to reach it with.

    Joint angles are engine radians. Build targets with ``Target.cartesian``
    or ``Target.joint``; the plain constructor accepts exactly one of
    ``plane`` and ``joints``.

    Example:
        >>> target = Target.cartesian(Frame([400, 0, 500], [0, 0, -1], [0, 1, 0]))
        >>> target.is_cartesian
        True
        >>> target.joints = [0, 1.57, 0, 0, 0, 0]
        >>> target.plane is None
        True
    """

    def __init__(
        self,
        plane: Optional[Frame] = None,
        joints: Optional[Sequence[float]] = None,
        tool: Optional[Tool] = None,
        motion: Optional[Motion] = None,
        speed: Optional[Speed] = None,
        zone: Optional[Zone] = None,
        commands: Optional[Iterable[Command]] = None,
        configuration: Optional[Configuration] = None,
    ) -> None:
        """
        Raises:
            TargetError: If both or neither of ``plane`` and ``joints`` are given.
        """
        if (plane is None) == (joints is None):
            raise TargetError("A target needs exactly one of a plane or joint angles")

        self._pose: Pose
        if plane is not None:
            self.plane = plane
        else:
            self.joints = joints
        if motion is None:
            motion = Motion.JOINT_CARTESIAN if plane is not None else Motion.JOINT
        self.motion = motion
        self.tool = tool
        self.speed = speed
        self.zone = zone
        self.commands: list[Command] = list(commands) if commands is not None else []
        self.configuration = configuration

    @classmethod
    def cartesian(
        cls,
        plane: Frame,
        tool: Optional[Tool] = None,
        motion: Motion = Motion.JOINT_CARTESIAN,
        speed: Optional[Speed] = None,
        zone: Optional[Zone] = None,
        commands: Optional[Iterable[Command]] = None,
        configuration: Optional[Configuration] = None,
    ) -> "Target":
        return cls(
            plane=plane,
            tool=tool,
            motion=motion,
            speed=speed,
            zone=zone,
            commands=commands,
            configuration=configuration,
        )

    @classmethod
    def joint(
        cls,
        joints: Sequence[float],
        tool: Optional[Tool] = None,
        speed: Optional[Speed] = None,
        zone: Optional[Zone] = None,
        commands: Optional[Iterable[Command]] = None,
    ) -> "Target":
        return cls(joints=joints, tool=tool, motion=Motion.JOINT, speed=speed, zone=zone, commands=commands)

    @property
    def pose(self) -> Pose:
        return self._pose

    @property
    def plane(self) -> Optional[Frame]:
        """Cartesian pose, or None for a joint-space target."""
        return self._pose.frame if isinstance(self._pose, CartesianPose) else None

    @plane.setter
    def plane(self, value: Frame) -> None:
        if value is None:
            raise TargetError("Cannot clear the plane; assign joint angles instead")
        self._pose = CartesianPose(value)

    @property
    def joints(self) -> Optional[tuple[float, ...]]:
        """Joint angles in radians, or None for a Cartesian target."""
        return self._pose.joints if isinstance(self._pose, JointPose) else None

    @joints.setter
    def joints(self, value: Sequence[float]) -> None:
        if value is None:
            raise TargetError("Cannot clear the joint angles; assign a plane instead")
        self._pose = JointPose(_joint_vector(value))

    @property
    def is_cartesian(self) -> bool:
        return isinstance(self._pose, CartesianPose)

    def duplicate(self) -> "Target":
        """Independent copy, including its own command list."""
        return Target(
            plane=self.plane.copy() if self.is_cartesian else None,
            joints=self.joints,
            tool=self.tool,
            motion=self.motion,
            speed=self.speed,
            zone=self.zone,
            commands=list(self.commands),
            configuration=self.configuration,
        )

    def __str__(self) -> str:
        if self.is_cartesian:
            x, y, z = self.plane.point
            return f"Target: Cartesian ({x:.2f}, {y:.2f}, {z:.2f})"
        return "Target: Joint ({})".format(",".join(f"{j:.2f}" for j in self.joints))

    def __repr__(self) -> str:
        return f"<{self} motion={self.motion.value}>"
