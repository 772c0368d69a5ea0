"""
Tests for the ABB RAPID emitter and the shared emitter pipeline.
"""

import pytest
from compas.geometry import Frame

from robokin.codegen import EMITTERS, EmitterConfig, KRLEmitter, RAPIDEmitter, get_emitter
from robokin.codegen.rapid import cfx, quadrant
from robokin.core.exceptions import CodeGenerationError
from robokin.targets.commands import Message, SetAnalogOutput, SetDigitalOutput, WaitTime
from robokin.targets.target import Motion, Target
from robokin.targets.tool import Speed, Tool, Zone

NATIVE = (10, 20, -30, 40, 50, 60)


class TestEmitterConfig:
    def test_defaults(self):
        config = EmitterConfig()
        assert config.program_name == "RobokinProgram"
        assert config.work_object == "wobj0"

    def test_from_dict_ignores_unknown_keys(self):
        config = EmitterConfig.from_dict({"program_name": "Weld", "colour": "blue"})
        assert config.program_name == "Weld"
        assert config.to_dict()["program_name"] == "Weld"


class TestGetEmitter:
    def test_dispatch_by_vendor(self, abb_robot, kuka_robot):
        assert isinstance(get_emitter(abb_robot), RAPIDEmitter)
        assert isinstance(get_emitter(kuka_robot), KRLEmitter)
        assert len(EMITTERS) == 2

    def test_file_extension(self, abb_robot):
        assert get_emitter(abb_robot).file_extension == ".mod"


class TestProgramShape:
    """Tests for the module frame around the moves."""

    def test_header_and_footer(self, abb_robot, solved_step):
        lines = abb_robot.emit_code([solved_step(abb_robot, NATIVE)], EmitterConfig(program_name="Weld"))

        assert lines[0] == "MODULE Weld"
        assert "  ! Generated by robokin for ABB.IRB120" in lines
        assert "  PROC main()" in lines
        assert lines[-2:] == ["  ENDPROC", "ENDMODULE"]

    def test_one_tooldata_per_tool(self, abb_robot, solved_step):
        gripper = Tool("Gripper", Frame([0, 0, 120], [1, 0, 0], [0, 1, 0]), weight=1.5)
        steps = [
            solved_step(abb_robot, NATIVE, tool=gripper),
            solved_step(abb_robot, NATIVE, motion=Motion.LINEAR, tool=gripper),
        ]
        lines = abb_robot.emit_code(steps)
        tooldata = [line for line in lines if "PERS tooldata" in line]

        assert tooldata == [
            "  PERS tooldata Gripper:=[TRUE,[[0.000,0.000,120.000],"
            "[1.000000,0.000000,0.000000,0.000000]],[1.500,[0,0,60.0],[1,0,0,0],0,0,0]];"
        ]

    def test_without_header_comments(self, abb_robot, solved_step):
        config = EmitterConfig(header_comments=False)
        lines = abb_robot.emit_code([solved_step(abb_robot, NATIVE)], config)
        assert not any(line.lstrip().startswith("!") for line in lines)

    def test_generate_joins_lines(self, abb_robot, solved_step):
        text = get_emitter(abb_robot).generate([solved_step(abb_robot, NATIVE)])
        assert text.startswith("MODULE RobokinProgram\n")
        assert text.endswith("ENDMODULE\n")


class TestMoves:
    """Tests for motion instructions."""

    def test_move_abs_j(self, abb_robot, solved_step):
        step = solved_step(abb_robot, NATIVE, speed=Speed(250, 90), zone=Zone(0))
        lines = abb_robot.emit_code([step])

        assert (
            "    MoveAbsJ [[10.0000,20.0000,-30.0000,40.0000,50.0000,60.0000],"
            "[9E+09,9E+09,9E+09,9E+09,9E+09,9E+09]],"
            "[250.0,90.0,5000,1000],fine,DefaultTool\\WObj:=wobj0;"
        ) in lines

    def test_move_l(self, abb_robot, solved_step):
        """Quadrants of axes 1, 4, 6 and the branch fill the configuration data."""
        target, solution = solved_step(abb_robot, NATIVE, motion=Motion.LINEAR, zone=Zone(5))
        lines = abb_robot.emit_code([(target, solution)])
        move = next(line for line in lines if "MoveL" in line)

        x, y, z = solution.tcp.point
        assert move.startswith(f"    MoveL [[{x:.3f},{y:.3f},{z:.3f}],")
        assert ",[0,0,0,0],[9E+09," in move
        assert "[FALSE,5.0,5.0,5.0,5.0,5.0,5.0]" in move
        assert move.endswith("DefaultTool\\WObj:=wobj0;")

    def test_move_l_axis5_negative(self, abb_robot, solved_step):
        """A front reach with a negative axis 5 sets only cfx bit 0."""
        target, solution = solved_step(abb_robot, (10, 20, -30, 40, -50, 60), motion=Motion.LINEAR)
        move = next(line for line in abb_robot.emit_code([(target, solution)]) if "MoveL" in line)

        assert solution.is_valid
        assert ",[0,0,0,1],[9E+09," in move

    def test_move_j(self, abb_robot, solved_step):
        lines = abb_robot.emit_code([solved_step(abb_robot, NATIVE, motion=Motion.JOINT_CARTESIAN)])
        assert any(line.startswith("    MoveJ [[") for line in lines)

    def test_named_speed_and_zone(self, abb_robot, solved_step):
        step = solved_step(abb_robot, NATIVE, speed=Speed(name="v200"), zone=Zone(name="z10"))
        assert any(",v200,z10," in line for line in abb_robot.emit_code([step]))

    def test_poses_relative_to_base(self, abb_robot, solved_step):
        """Robtargets are written in base coordinates, not world coordinates."""
        at_origin = solved_step(abb_robot, NATIVE, motion=Motion.LINEAR)
        reference = next(line for line in abb_robot.emit_code([at_origin]) if "MoveL" in line)

        abb_robot.base_frame = Frame([1000, 0, 0], [1, 0, 0], [0, 1, 0])
        moved = solved_step(abb_robot, NATIVE, motion=Motion.LINEAR)
        assert next(line for line in abb_robot.emit_code([moved]) if "MoveL" in line) == reference

    def test_quadrant(self):
        assert quadrant(10) == 0
        assert quadrant(95) == 1
        assert quadrant(-10) == -1


class TestCfx:
    """Branch bits of the RAPID configuration data, from axis values."""

    @pytest.mark.parametrize(
        "native, expected",
        [
            ((10, 20, -30, 40, 50, 60), 0),
            ((10, 20, -30, 40, -50, 60), 1),
            ((5, 30, -100, 10, 40, 20), 2),
            ((0, -100, 30, 10, 40, 20), 4),
            ((0, -100, 30, 10, -40, 20), 5),
        ],
    )
    def test_bits(self, abb_robot, native, expected):
        assert cfx(abb_robot, abb_robot.from_native(native)) == expected

    def test_axis5_zero_is_positive(self, abb_robot):
        assert cfx(abb_robot, abb_robot.from_native((10, 20, -30, 40, 0, 60))) == 0


class TestCommands:
    def test_io_and_wait(self, abb_robot, solved_step):
        commands = [SetDigitalOutput(1, True), SetAnalogOutput(0, 2.5), WaitTime(0.5), Message('say "hi"')]
        lines = abb_robot.emit_code([solved_step(abb_robot, NATIVE, commands=commands)])
        move = next(i for i, line in enumerate(lines) if "MoveAbsJ" in line)

        assert lines[move + 1:move + 5] == [
            "    SetDO DO10_2,1;",
            "    SetAO AO10_1,2.500;",
            "    WaitTime 0.500;",
            "    TPWrite \"say 'hi'\";",
        ]

    def test_unknown_channel(self, abb_robot, solved_step):
        step = solved_step(abb_robot, NATIVE, commands=[SetDigitalOutput(5, True)])
        with pytest.raises(CodeGenerationError) as exc_info:
            abb_robot.emit_code([step])
        assert exc_info.value.details["available"] == ["DO10_1", "DO10_2"]
        assert exc_info.value.vendor == "ABB"


class TestValidation:
    """The program is refused as a whole when any step is unusable."""

    def test_empty(self, abb_robot):
        with pytest.raises(CodeGenerationError):
            abb_robot.emit_code([])

    def test_unsolved_step(self, abb_robot, solved_step):
        target = Target.cartesian(Frame([2000, 0, 500], [1, 0, 0], [0, 1, 0]), motion=Motion.LINEAR)
        steps = [solved_step(abb_robot, NATIVE), (target, abb_robot.inverse(target))]
        with pytest.raises(CodeGenerationError) as exc_info:
            abb_robot.emit_code(steps)
        assert "Step 1" in str(exc_info.value)

    @pytest.mark.parametrize("motion", [Motion.CIRCULAR, Motion.SPLINE])
    def test_unsupported_motion(self, abb_robot, solved_step, motion):
        with pytest.raises(CodeGenerationError):
            abb_robot.emit_code([solved_step(abb_robot, NATIVE, motion=motion)])
