"""
CodeEmitter - Abstract base class for controller code emitters.

An emitter turns an ordered list of solved steps, ``(Target,
KinematicSolution)`` pairs, into a program for one vendor's controller.
The base class owns program assembly: validation of the steps, the
header/footer frame, motion dispatch and auxiliary commands. Subclasses
only format single instructions.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from compas.geometry import Frame

from robokin.core.exceptions import CodeGenerationError
from robokin.core.geometry import frame_to_matrix, invert_transform, matrix_to_frame
from robokin.core.logging import get_logger
from robokin.kinematics.solution import KinematicSolution
from robokin.targets.commands import Command, Message, SetAnalogOutput, SetDigitalOutput, WaitTime
from robokin.targets.target import Motion, Target
from robokin.targets.tool import Speed, Tool, Zone

if TYPE_CHECKING:
    from robokin.robot.model import RobotModel

logger = get_logger(__name__)

Step = Tuple[Target, KinematicSolution]


@dataclass
class EmitterConfig:
    """Configuration for an emitter instance."""
    program_name: str = "RobokinProgram"
    work_object: str = "wobj0"
    line_ending: str = "\n"
    header_comments: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'EmitterConfig':
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in d.items() if k in valid_fields})


class CodeEmitter(ABC):
    """
    Abstract base class for code emitters.

    Subclasses implement format-specific methods:
    - header() / footer()
    - joint_move() / cartesian_move()
    - digital_output() / analog_output() / wait() / message()
    - comment()
    """

    #: Motions the controller format can express.
    supported_motions: Tuple[Motion, ...] = (Motion.JOINT, Motion.JOINT_CARTESIAN, Motion.LINEAR)

    def __init__(self, robot: "RobotModel", config: Optional[EmitterConfig] = None):
        self.robot = robot
        self.config = config or EmitterConfig()

    @property
    def vendor_name(self) -> str:
        return self.robot.vendor.value

    @property
    def file_extension(self) -> str:
        return self.robot.extension

    # ── Abstract methods (must be implemented by subclasses) ───────────

    @abstractmethod
    def header(self, tools: List[Tool]) -> List[str]:
        """Program header lines, including tool declarations."""
        ...

    @abstractmethod
    def footer(self) -> List[str]:
        """Program footer lines."""
        ...

    @abstractmethod
    def joint_move(self, target: Target, native: Tuple[float, ...]) -> List[str]:
        """Joint-interpolated move to absolute axis values (vendor degrees)."""
        ...

    @abstractmethod
    def cartesian_move(self, target: Target, solution: KinematicSolution) -> List[str]:
        """Move to a Cartesian pose with joint or linear interpolation."""
        ...

    @abstractmethod
    def digital_output(self, index: int, name: str, value: bool) -> List[str]:
        ...

    @abstractmethod
    def analog_output(self, index: int, name: str, value: float) -> List[str]:
        ...

    @abstractmethod
    def wait(self, seconds: float) -> List[str]:
        ...

    @abstractmethod
    def message(self, text: str) -> List[str]:
        ...

    @abstractmethod
    def comment(self, text: str) -> str:
        """Format a comment line."""
        ...

    # ── Optional overrides ────────────────────────────────────────────

    def motion_change(self, previous: Optional[Motion], current: Optional[Motion]) -> List[str]:
        """Code injected between consecutive steps with different motions."""
        return []

    def tool_change(self, previous: Optional[Tool], current: Tool) -> List[str]:
        """Code injected before the first step and whenever the tool changes."""
        return []

    # ── Helpers for subclasses ────────────────────────────────────────

    def tcp_in_base(self, solution: KinematicSolution) -> Frame:
        """TCP frame of a solution, relative to the robot base."""
        base = frame_to_matrix(self.robot.base_frame)
        tcp: np.ndarray = invert_transform(base) @ frame_to_matrix(solution.tcp)
        return matrix_to_frame(tcp)

    @staticmethod
    def speed_of(target: Target) -> Speed:
        return target.speed or Speed()

    @staticmethod
    def zone_of(target: Target) -> Zone:
        return target.zone or Zone()

    @staticmethod
    def tool_of(target: Target) -> Tool:
        return target.tool or Tool()

    def io_name(self, kind: str, index: int) -> str:
        """Controller name of I/O channel ``index`` of ``kind`` ('do' or 'ao')."""
        channels = getattr(self.robot.io, kind)
        if not 0 <= index < len(channels):
            raise CodeGenerationError(
                f"No {kind.upper()} channel with index {index}",
                vendor=self.vendor_name,
                details={"available": list(channels)},
            )
        return channels[index]

    # ── Main generation pipeline ──────────────────────────────────────

    def emit(self, steps: Sequence[Step]) -> List[str]:
        """
        Generate the program.

        Parameters:
            steps: Ordered ``(target, solution)`` pairs. Every solution must
                be valid (solved and in range).

        Returns:
            Program lines.

        Raises:
            CodeGenerationError: If a step is unsolved, uses a motion the
                controller cannot express, or refers to a missing I/O channel.
        """
        self._check(steps)

        tools: List[Tool] = []
        for target, _ in steps:
            candidate = self.tool_of(target)
            if candidate.name not in {t.name for t in tools}:
                tools.append(candidate)

        lines = self.header(tools)
        previous: Optional[Motion] = None
        tool: Optional[Tool] = None
        for target, solution in steps:
            current = self.tool_of(target)
            if tool is None or current.name != tool.name:
                # Tool data is set outside any open motion block
                lines.extend(self.motion_change(previous, None))
                lines.extend(self.tool_change(tool, current))
                previous, tool = None, current
            if target.motion is not previous:
                lines.extend(self.motion_change(previous, target.motion))
                previous = target.motion
            if target.motion is Motion.JOINT:
                lines.extend(self.joint_move(target, self.robot.to_native(solution.joints)))
            else:
                lines.extend(self.cartesian_move(target, solution))
            for command in target.commands:
                lines.extend(self._command(command))
        lines.extend(self.motion_change(previous, None))
        lines.extend(self.footer())

        logger.debug(
            "program_emitted",
            robot=self.robot.name,
            program=self.config.program_name,
            steps=len(steps),
            lines=len(lines),
        )
        return lines

    def generate(self, steps: Sequence[Step]) -> str:
        """Complete program as a string."""
        return self.config.line_ending.join(self.emit(steps)) + self.config.line_ending

    def _check(self, steps: Sequence[Step]) -> None:
        if not steps:
            raise CodeGenerationError("A program needs at least one step", vendor=self.vendor_name)
        for i, (target, solution) in enumerate(steps):
            if not solution.is_valid:
                raise CodeGenerationError(
                    f"Step {i} has no valid solution",
                    vendor=self.vendor_name,
                    details={"target": str(target), "errors": solution.errors},
                )
            if target.motion not in self.supported_motions:
                raise CodeGenerationError(
                    f"Step {i}: {target.motion.value} motion is not supported",
                    vendor=self.vendor_name,
                    details={"supported": [m.value for m in self.supported_motions]},
                )

    def _command(self, command: Command) -> List[str]:
        if isinstance(command, SetDigitalOutput):
            return self.digital_output(command.index, self.io_name("do", command.index), command.value)
        if isinstance(command, SetAnalogOutput):
            return self.analog_output(command.index, self.io_name("ao", command.index), command.value)
        if isinstance(command, WaitTime):
            return self.wait(command.seconds)
        if isinstance(command, Message):
            return self.message(command.text)
        raise CodeGenerationError(
            f"Unknown command type: {type(command).__name__}",
            vendor=self.vendor_name,
        )
