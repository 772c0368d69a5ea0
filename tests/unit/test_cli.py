"""
Tests for the command-line interface.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from robokin.cli import main

SHIPPED_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

PROGRAM_YAML = """
name: Demo
targets:
  - joints: [10, 20, -30, 40, 50, 60]
  - pose: [300, 0, 400, 0, 180, 0]
    motion: linear
    commands:
      - {type: set_do, index: 0, value: true}
"""


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, *args):
    return runner.invoke(main, ["--config-dir", str(SHIPPED_CONFIG_DIR), *args])


class TestRobotCommands:
    def test_list(self, runner):
        result = invoke(runner, "robots", "list")
        assert result.exit_code == 0
        assert "abb_irb120" in result.output
        assert "kuka_kr6_r900" in result.output

    def test_show(self, runner):
        result = invoke(runner, "robots", "show", "abb_irb120")
        assert result.exit_code == 0
        assert "ABB.IRB120" in result.output
        assert ".mod" in result.output

    def test_show_unknown(self, runner):
        result = invoke(runner, "robots", "show", "robby")
        assert result.exit_code == 1
        assert "Failed to show robot" in result.output

    def test_missing_config_dir(self, runner, temp_dir):
        result = runner.invoke(main, ["--config-dir", str(temp_dir / "nowhere"), "robots", "list"])
        assert result.exit_code == 1


class TestKinematicsCommands:
    def test_fk(self, runner):
        result = invoke(runner, "fk", "abb_irb120", "0", "0", "0", "0", "0", "0")
        assert result.exit_code == 0
        assert "374.000" in result.output
        assert "630.000" in result.output
        assert "solved" in result.output

    def test_fk_negative_values(self, runner):
        result = invoke(runner, "fk", "kuka_kr6_r900", "0", "-90", "90", "0", "0", "0")
        assert result.exit_code == 0
        assert "525.000" in result.output

    def test_ik(self, runner):
        result = invoke(runner, "ik", "abb_irb120", "300", "0", "400", "0", "180", "0")
        assert result.exit_code == 0
        assert "Angle (deg)" in result.output

    def test_ik_all(self, runner):
        result = invoke(runner, "ik", "abb_irb120", "300", "0", "400", "0", "180", "0", "--all")
        assert result.exit_code == 0
        assert "ELBOW" in result.output

    def test_ik_unreachable(self, runner):
        result = invoke(runner, "ik", "abb_irb120", "5000", "0", "0", "0", "180", "0")
        assert result.exit_code == 1
        assert "unreachable" in result.output

    def test_ik_bad_configuration(self, runner):
        result = invoke(runner, "ik", "abb_irb120", "300", "0", "400", "0", "180", "0", "--config", "9")
        assert result.exit_code != 0


class TestProgramCommand:
    def test_prints_program(self, runner, temp_dir):
        path = temp_dir / "demo.yaml"
        path.write_text(PROGRAM_YAML)

        result = invoke(runner, "program", "abb_irb120", str(path))
        assert result.exit_code == 0
        assert result.output.startswith("MODULE Demo")
        assert "MoveAbsJ" in result.output
        assert "MoveL" in result.output
        assert "SetDO DO10_1,1;" in result.output

    def test_writes_file_with_extension(self, runner, temp_dir):
        path = temp_dir / "demo.yaml"
        path.write_text(PROGRAM_YAML)

        result = invoke(runner, "program", "abb_irb120", str(path), "-o", str(temp_dir / "demo"))
        assert result.exit_code == 0
        written = temp_dir / "demo.mod"
        assert written.exists()
        assert written.read_text().endswith("ENDMODULE\n")

    def test_unreachable_target(self, runner, temp_dir):
        path = temp_dir / "far.yaml"
        path.write_text("targets:\n  - pose: [5000, 0, 0, 0, 180, 0]\n")

        result = invoke(runner, "program", "abb_irb120", str(path))
        assert result.exit_code == 1
        assert "unreachable" in result.output
