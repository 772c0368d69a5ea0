"""Result type of the kinematics engine."""

from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Any, Optional

from compas.geometry import Frame

from robokin.kinematics.configuration import Configuration


class SolutionStatus(Enum):
    """Outcome of a kinematics request."""

    SOLVED = "solved"
    OUT_OF_RANGE = "out_of_range"
    UNREACHABLE = "unreachable"


class SolutionIssue(Flag):
    """Non-fatal conditions met while solving."""

    NONE = 0
    SINGULAR_WRIST = auto()
    SINGULAR_SHOULDER = auto()


@dataclass
class KinematicSolution:
    """
    Joint angles and joint frames reached for one target.

    Attributes:
        joints: Six engine angles in radians. Present even when a joint is
            out of range; all zeros when the pose is unreachable.
        planes: World frames of the base and the six joints (seven in all,
            the last one is the flange). Empty when unreachable.
        tcp: World frame of the tool centre point.
        status: Solved, out of range or unreachable.
        out_of_range: 0-based indices of joints outside their range.
        issues: Singularities resolved by tie-break.
        configuration: Branch of the returned joints.
        meshes: Display meshes moved to the solved pose, when requested.
    """

    joints: tuple[float, ...]
    planes: list[Frame] = field(default_factory=list)
    tcp: Optional[Frame] = None
    status: SolutionStatus = SolutionStatus.SOLVED
    out_of_range: tuple[int, ...] = ()
    issues: SolutionIssue = SolutionIssue.NONE
    configuration: Optional[Configuration] = None
    meshes: list[Any] = field(default_factory=list, repr=False)

    @classmethod
    def unreachable(cls, configuration: Optional[Configuration] = None) -> "KinematicSolution":
        return cls(
            joints=(0.0,) * 6,
            status=SolutionStatus.UNREACHABLE,
            configuration=configuration,
        )

    @property
    def is_valid(self) -> bool:
        return self.status is SolutionStatus.SOLVED

    @property
    def is_reachable(self) -> bool:
        return self.status is not SolutionStatus.UNREACHABLE

    @property
    def flange(self) -> Optional[Frame]:
        return self.planes[-1] if self.planes else None

    @property
    def errors(self) -> list[str]:
        """Readable description of everything that keeps the solution from being valid."""
        messages = []
        if self.status is SolutionStatus.UNREACHABLE:
            messages.append("Target is unreachable")
        for index in self.out_of_range:
            messages.append(f"Joint {index + 1} is outside its range")
        return messages
