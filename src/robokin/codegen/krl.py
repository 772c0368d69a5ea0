"""
KUKA KRL emitter - generates .src files for KRC4 controllers.

Joint targets become PTP with axis values, Cartesian targets PTP or LIN with
E6POS frames (A, B, C are ZYX Euler angles). Consecutive spline targets are
grouped in a SPLINE block.
"""

from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from robokin.codegen.base import CodeEmitter
from robokin.core.geometry import frame_to_euler
from robokin.kinematics.forward import arm_sides
from robokin.kinematics.solution import KinematicSolution
from robokin.targets.target import Motion, Target
from robokin.targets.tool import Tool

if TYPE_CHECKING:
    from robokin.robot.model import RobotModel


def status_bits(robot: "RobotModel", joints: Sequence[float]) -> int:
    """
    KRL status S of an engine joint vector.

    Bit 0: the wrist centre is in the overhead area (behind A1). Bit 1: A3
    is at or past the stretched arm, so the wrist centre is not behind the
    lower arm. Bit 2: A5 is zero or negative.
    """
    overhead, behind_lower_arm = arm_sides(robot.joints, joints)
    a5 = round(robot.radian_to_degree(joints[4], 4), 9)
    return int(overhead) | int(not behind_lower_arm) << 1 | int(a5 <= 0.0) << 2


def turn_bits(native: Tuple[float, ...]) -> int:
    """KRL turn T: bit i set when axis i + 1 is negative."""
    return sum(1 << i for i, angle in enumerate(native) if angle < 0.0)


def format_frame(values: Tuple[float, ...]) -> str:
    x, y, z, a, b, c = values
    return f"X {x:.3f}, Y {y:.3f}, Z {z:.3f}, A {a:.4f}, B {b:.4f}, C {c:.4f}"


class KRLEmitter(CodeEmitter):
    """KUKA KRL emitter generating .src files."""

    supported_motions = (Motion.JOINT, Motion.JOINT_CARTESIAN, Motion.LINEAR, Motion.SPLINE)

    def comment(self, text: str) -> str:
        return f"  ; {text}"

    def header(self, tools: List[Tool]) -> List[str]:
        lines = [
            "&ACCESS RVP",
            f"DEF {self.config.program_name}()",
        ]
        if self.config.header_comments:
            lines += [
                self.comment(f"Generated by robokin for {self.robot.name}"),
                self.comment(f"Tools: {', '.join(t.name for t in tools)}"),
            ]
        lines += [
            "  BAS(#INITMOV, 0)",
            "  $BASE = {X 0, Y 0, Z 0, A 0, B 0, C 0}",
            "",
        ]
        return lines

    def footer(self) -> List[str]:
        return ["END"]

    def tool_change(self, previous: Optional[Tool], current: Tool) -> List[str]:
        return [
            self.comment(f"Tool {current.name}"),
            f"  $TOOL = {{{format_frame(frame_to_euler(current.tcp))}}}",
            f"  $LOAD.M = {current.weight:.3f}",
        ]

    def motion_change(self, previous: Optional[Motion], current: Optional[Motion]) -> List[str]:
        lines = []
        if previous is Motion.SPLINE:
            lines.append("  ENDSPLINE")
        if current is Motion.SPLINE:
            lines.append("  SPLINE")
        return lines

    def joint_move(self, target: Target, native: Tuple[float, ...]) -> List[str]:
        lines = []
        axes = ", ".join(f"A{i + 1} {angle:.4f}" for i, angle in enumerate(native))
        zone = self.zone_of(target)
        if zone.is_flyby:
            lines.append(f"  $APO.CPTP = {zone.distance:.3f}")
            lines.append(f"  PTP {{{axes}}} C_PTP")
        else:
            lines.append(f"  PTP {{{axes}}}")
        return lines

    def cartesian_move(self, target: Target, solution: KinematicSolution) -> List[str]:
        lines = []
        native = self.robot.to_native(solution.joints)
        status = status_bits(self.robot, solution.joints)
        pose = (
            f"{{E6POS: {format_frame(frame_to_euler(self.tcp_in_base(solution)))}, "
            f"S 'B{status:03b}', T 'B{turn_bits(native):06b}'}}"
        )
        zone = self.zone_of(target)

        if target.motion is Motion.JOINT_CARTESIAN:
            if zone.is_flyby:
                lines.append(f"  $APO.CPTP = {zone.distance:.3f}")
                lines.append(f"  PTP {pose} C_PTP")
            else:
                lines.append(f"  PTP {pose}")
            return lines

        velocity = self.speed_of(target).translation / 1000.0
        if target.motion is Motion.SPLINE:
            # No assignments inside a SPLINE block
            lines.append(f"  SPL {pose} WITH $VEL.CP = {velocity:.4f}")
            return lines

        lines.append(f"  $VEL.CP = {velocity:.4f}")
        if zone.is_flyby:
            lines.append(f"  $APO.CDIS = {zone.distance:.3f}")
            lines.append(f"  LIN {pose} C_DIS")
        else:
            lines.append(f"  LIN {pose}")
        return lines

    def digital_output(self, index: int, name: str, value: bool) -> List[str]:
        return [f"  $OUT[{index + 1}] = {'TRUE' if value else 'FALSE'} ; {name}"]

    def analog_output(self, index: int, name: str, value: float) -> List[str]:
        return [f"  $ANOUT[{index + 1}] = {value:.3f} ; {name}"]

    def wait(self, seconds: float) -> List[str]:
        return [f"  WAIT SEC {seconds:.3f}"]

    def message(self, text: str) -> List[str]:
        return [self.comment(text)]
