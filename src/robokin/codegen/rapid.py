"""
ABB RAPID emitter - generates .mod files for ABB IRC5 and OmniCore controllers.

Joint targets become MoveAbsJ with jointtargets, Cartesian targets MoveJ or
MoveL with robtargets. Orientation is written as the scalar-first quaternion
RAPID expects, and the robtarget configuration data holds the axis quadrants
plus the cfx branch bits computed from the axis values.
"""

import math
from typing import TYPE_CHECKING, List, Sequence, Tuple

from robokin.codegen.base import CodeEmitter
from robokin.core.geometry import frame_to_quaternion
from robokin.kinematics.forward import arm_sides
from robokin.kinematics.solution import KinematicSolution
from robokin.targets.target import Motion, Target
from robokin.targets.tool import Speed, Tool, Zone

if TYPE_CHECKING:
    from robokin.robot.model import RobotModel

# Unused external axes.
EXTERNAL_AXES = "[9E+09,9E+09,9E+09,9E+09,9E+09,9E+09]"


def quadrant(angle_deg: float) -> int:
    """RAPID configuration quadrant of an axis angle."""
    return math.floor(angle_deg / 90.0)


def cfx(robot: "RobotModel", joints: Sequence[float]) -> int:
    """
    RAPID cfx of an engine joint vector.

    Bit 0: axis 5 is negative. Bit 1: the wrist centre is behind the lower
    arm. Bit 2: the wrist centre is behind axis 1.
    """
    behind_axis1, behind_lower_arm = arm_sides(robot.joints, joints)
    axis5 = round(robot.radian_to_degree(joints[4], 4), 9)
    return int(axis5 < 0.0) | int(behind_lower_arm) << 1 | int(behind_axis1) << 2


class RAPIDEmitter(CodeEmitter):
    """ABB RAPID emitter generating .mod files."""

    def comment(self, text: str) -> str:
        return f"  ! {text}"

    @staticmethod
    def _speed(speed: Speed) -> str:
        if speed.name is not None:
            return speed.name
        return f"[{speed.translation:.1f},{speed.rotation:.1f},5000,1000]"

    @staticmethod
    def _zone(zone: Zone) -> str:
        if zone.name is not None:
            return zone.name
        if not zone.is_flyby:
            return "fine"
        d, r = zone.distance, zone.rotation
        return f"[FALSE,{d:.1f},{d:.1f},{d:.1f},{r:.1f},{d:.1f},{r:.1f}]"

    @staticmethod
    def _tooldata(tool: Tool) -> str:
        x, y, z = tool.tcp.point
        qw, qx, qy, qz = frame_to_quaternion(tool.tcp)
        return (
            f"  PERS tooldata {tool.name}:=[TRUE,"
            f"[[{x:.3f},{y:.3f},{z:.3f}],[{qw:.6f},{qx:.6f},{qy:.6f},{qz:.6f}]],"
            f"[{tool.weight:.3f},[0,0,{max(z / 2, 0.001):.1f}],[1,0,0,0],0,0,0]];"
        )

    def _tail(self, target: Target) -> str:
        tool = self.tool_of(target)
        return (
            f"{self._speed(self.speed_of(target))},{self._zone(self.zone_of(target))},"
            f"{tool.name}\\WObj:={self.config.work_object};"
        )

    def header(self, tools: List[Tool]) -> List[str]:
        lines = [f"MODULE {self.config.program_name}"]
        if self.config.header_comments:
            lines += [
                self.comment(f"Generated by robokin for {self.robot.name}"),
                "",
            ]
        lines += [self._tooldata(tool) for tool in tools]
        lines += [
            "",
            "  PROC main()",
            "    ConfJ\\On;",
            "    ConfL\\On;",
        ]
        return lines

    def footer(self) -> List[str]:
        return [
            "  ENDPROC",
            "ENDMODULE",
        ]

    def joint_move(self, target: Target, native: Tuple[float, ...]) -> List[str]:
        axes = ",".join(f"{j:.4f}" for j in native)
        return [f"    MoveAbsJ [[{axes}],{EXTERNAL_AXES}],{self._tail(target)}"]

    def cartesian_move(self, target: Target, solution: KinematicSolution) -> List[str]:
        frame = self.tcp_in_base(solution)
        x, y, z = frame.point
        qw, qx, qy, qz = frame_to_quaternion(frame)
        native = self.robot.to_native(solution.joints)
        branch = cfx(self.robot, solution.joints)
        cf = f"[{quadrant(native[0])},{quadrant(native[3])},{quadrant(native[5])},{branch}]"
        instruction = "MoveL" if target.motion is Motion.LINEAR else "MoveJ"
        return [
            f"    {instruction} [[{x:.3f},{y:.3f},{z:.3f}],"
            f"[{qw:.6f},{qx:.6f},{qy:.6f},{qz:.6f}],{cf},{EXTERNAL_AXES}],"
            f"{self._tail(target)}"
        ]

    def digital_output(self, index: int, name: str, value: bool) -> List[str]:
        return [f"    SetDO {name},{int(value)};"]

    def analog_output(self, index: int, name: str, value: float) -> List[str]:
        return [f"    SetAO {name},{value:.3f};"]

    def wait(self, seconds: float) -> List[str]:
        return [f"    WaitTime {seconds:.3f};"]

    def message(self, text: str) -> List[str]:
        escaped = text.replace('"', "'")
        return [f'    TPWrite "{escaped}";']
