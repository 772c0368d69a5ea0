"""
Command-line interface for robokin.

Provides commands to inspect the model library, run forward and inverse
kinematics, and emit controller programs from YAML target lists.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from robokin import __version__
from robokin.core.config import ModelLibrary, load_program
from robokin.core.exceptions import RobokinError
from robokin.core.geometry import frame_from_euler, frame_to_euler
from robokin.core.logging import configure_logging
from robokin.codegen import EmitterConfig
from robokin.kinematics.configuration import Configuration
from robokin.kinematics.solution import KinematicSolution
from robokin.robot.model import RobotModel
from robokin.targets.target import Target

console = Console()

# Lets negative numbers through as positional values.
NUMERIC_ARGS = {"ignore_unknown_options": True}


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default="config",
    help="Configuration directory",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level",
)
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def main(ctx: click.Context, config_dir: Path, log_level: str, json_logs: bool) -> None:
    """robokin - Kinematics of six-axis industrial robots."""
    configure_logging(level=log_level.upper(), json_output=json_logs)
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


def _load(ctx: click.Context, name: str) -> RobotModel:
    return ModelLibrary(ctx.obj["config_dir"]).load(name)


def _joint_table(robot: RobotModel, solution: KinematicSolution, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Joint", style="cyan")
    table.add_column("Angle (deg)", justify="right")
    table.add_column("In range")
    for i, value in enumerate(robot.to_native(solution.joints)):
        ok = i not in solution.out_of_range
        table.add_row(
            str(i + 1),
            f"{value:.4f}",
            "[green]✓[/green]" if ok else "[red]✗[/red]",
        )
    return table


# =============================================================================
# Robot Library Commands
# =============================================================================


@main.group()
def robots() -> None:
    """Robot model library commands."""
    pass


@robots.command("list")
@click.pass_context
def robots_list(ctx: click.Context) -> None:
    """List available robot models."""
    try:
        library = ModelLibrary(ctx.obj["config_dir"])
        names = library.list_models()

        if not names:
            console.print("[yellow]No robot models found.[/yellow]")
            return

        table = Table(title="Available Robots")
        table.add_column("Name", style="cyan")
        table.add_column("Model")
        table.add_column("Vendor")
        table.add_column("Reach (mm)", justify="right")

        for name in names:
            robot = library.load(name)
            table.add_row(name, robot.model, robot.vendor.value, f"{robot.max_reach:.1f}")

        console.print(table)

    except RobokinError as e:
        console.print(f"[red]✗[/red] Failed to list robots: {e}")
        raise SystemExit(1)


@robots.command("show")
@click.argument("name")
@click.pass_context
def robots_show(ctx: click.Context, name: str) -> None:
    """Show the joints of a robot model."""
    try:
        robot = _load(ctx, name)

        table = Table(title=f"Robot: {robot.name}")
        table.add_column("Joint", style="cyan")
        table.add_column("a (mm)", justify="right")
        table.add_column("d (mm)", justify="right")
        table.add_column("Range (deg)", justify="right")
        table.add_column("Speed (deg/s)", justify="right")

        for i, joint in enumerate(robot.joints):
            low, high = sorted(
                (robot.radian_to_degree(joint.range.min, i), robot.radian_to_degree(joint.range.max, i))
            )
            table.add_row(
                str(i + 1),
                f"{joint.a:.1f}",
                f"{joint.d:.1f}",
                f"{low:.1f} .. {high:.1f}",
                f"{joint.max_speed:.0f}",
            )

        console.print(table)
        console.print(f"  Program extension: {robot.extension}")
        if robot.io.do or robot.io.ao:
            console.print(f"  Digital outputs: {', '.join(robot.io.do) or '(none)'}")
            console.print(f"  Analog outputs: {', '.join(robot.io.ao) or '(none)'}")

    except RobokinError as e:
        console.print(f"[red]✗[/red] Failed to show robot: {e}")
        raise SystemExit(1)


# =============================================================================
# Kinematics Commands
# =============================================================================


@main.command("fk", context_settings=NUMERIC_ARGS)
@click.argument("name")
@click.argument("joints", nargs=6, type=float)
@click.pass_context
def forward_kinematics(ctx: click.Context, name: str, joints: tuple[float, ...]) -> None:
    """Flange pose of joint angles given in vendor degrees."""
    try:
        robot = _load(ctx, name)
        solution = robot.forward(robot.from_native(joints))
        x, y, z, a, b, c = frame_to_euler(solution.tcp)

        table = Table(title=f"Forward kinematics: {robot.name}")
        table.add_column("Property", style="cyan")
        table.add_column("Value")
        table.add_row("Position (mm)", f"{x:.3f}, {y:.3f}, {z:.3f}")
        table.add_row("Orientation ZYX (deg)", f"{a:.3f}, {b:.3f}, {c:.3f}")
        table.add_row("Configuration", str(solution.configuration))
        table.add_row("Status", solution.status.value)
        console.print(table)

        for message in solution.errors:
            console.print(f"[yellow]![/yellow] {message}")

    except RobokinError as e:
        console.print(f"[red]✗[/red] Forward kinematics failed: {e}")
        raise SystemExit(1)


@main.command("ik", context_settings=NUMERIC_ARGS)
@click.argument("name")
@click.argument("pose", nargs=6, type=float)
@click.option(
    "--config",
    "configuration",
    type=click.IntRange(0, 7),
    default=None,
    help="Configuration branch (0-7: shoulder=1, elbow=2, wrist=4)",
)
@click.option("--all", "solve_all", is_flag=True, help="Solve every configuration branch")
@click.pass_context
def inverse_kinematics(
    ctx: click.Context,
    name: str,
    pose: tuple[float, ...],
    configuration: Optional[int],
    solve_all: bool,
) -> None:
    """Joint angles reaching X Y Z A B C (mm, ZYX degrees, world frame)."""
    try:
        robot = _load(ctx, name)
        target = Target.cartesian(frame_from_euler(*pose))

        if solve_all:
            table = Table(title=f"Inverse kinematics: {robot.name}")
            table.add_column("Configuration", style="cyan")
            table.add_column("Status")
            table.add_column("Joints (deg)")
            for branch, solution in robot.solve_all(target).items():
                joints = (
                    ", ".join(f"{v:.2f}" for v in robot.to_native(solution.joints))
                    if solution.is_reachable
                    else "-"
                )
                table.add_row(f"{branch.value} {branch}", solution.status.value, joints)
            console.print(table)
            return

        branch = Configuration(configuration) if configuration is not None else None
        solution = robot.inverse(target, configuration=branch)
        if not solution.is_reachable:
            console.print(f"[red]✗[/red] Target is unreachable for {robot.name}")
            raise SystemExit(1)

        console.print(_joint_table(robot, solution, f"Inverse kinematics: {robot.name} ({solution.configuration})"))
        for message in solution.errors:
            console.print(f"[yellow]![/yellow] {message}")

    except RobokinError as e:
        console.print(f"[red]✗[/red] Inverse kinematics failed: {e}")
        raise SystemExit(1)


# =============================================================================
# Program Commands
# =============================================================================


@main.command("program")
@click.argument("name")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Output file")
@click.pass_context
def program(ctx: click.Context, name: str, file: Path, output: Optional[Path]) -> None:
    """Solve a YAML target list and emit the controller program."""
    try:
        robot = _load(ctx, name)
        definition = load_program(file)
        targets = definition.build_targets(robot)

        steps = []
        prior = None
        for i, target in enumerate(targets):
            solution = robot.inverse(target, prior=prior)
            if not solution.is_valid:
                console.print(f"[red]✗[/red] Target {i} ({target}): {'; '.join(solution.errors)}")
                raise SystemExit(1)
            steps.append((target, solution))
            prior = solution.joints

        lines = robot.emit_code(steps, EmitterConfig(program_name=definition.name))
        text = "\n".join(lines) + "\n"

        if output is None:
            click.echo(text, nl=False)
            return

        if not output.suffix:
            output = output.with_suffix(robot.extension)
        output.write_text(text)
        console.print(f"[green]✓[/green] Wrote {len(steps)} targets to {output}")

    except RobokinError as e:
        console.print(f"[red]✗[/red] Failed to generate program: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
