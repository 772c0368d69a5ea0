"""
Arm configurations.

A spherical-wrist arm reaches most poses in up to eight ways: the shoulder
can reach forward or over the back, the elbow can sit above or below the
shoulder-wrist line, and the wrist can be flipped. The members below are the
complete set of branches; their values keep the shoulder/elbow/wrist bit
layout (1, 2, 4) used by controller configuration flags.
"""

from enum import Enum


class Configuration(Enum):
    """One of the eight inverse kinematics branches."""

    NONE = 0
    SHOULDER = 1
    ELBOW = 2
    SHOULDER_ELBOW = 3
    WRIST = 4
    SHOULDER_WRIST = 5
    ELBOW_WRIST = 6
    SHOULDER_ELBOW_WRIST = 7

    @classmethod
    def from_flags(cls, shoulder: bool = False, elbow: bool = False, wrist: bool = False) -> "Configuration":
        return cls(int(shoulder) | int(elbow) << 1 | int(wrist) << 2)

    @property
    def shoulder(self) -> bool:
        """Wrist centre reached over the back of joint 1."""
        return bool(self.value & 1)

    @property
    def elbow(self) -> bool:
        """Elbow below the shoulder-wrist line."""
        return bool(self.value & 2)

    @property
    def wrist(self) -> bool:
        """Joint 5 negative."""
        return bool(self.value & 4)

    def __str__(self) -> str:
        return self.name
