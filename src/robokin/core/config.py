"""
Configuration management for robokin.

Handles loading and validation of robot model definitions and of program
files (ordered target lists) from YAML.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

import yaml
from compas.geometry import Frame
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from robokin.core.exceptions import ConfigurationError
from robokin.core.geometry import frame_from_euler
from robokin.kinematics.configuration import Configuration
from robokin.robot.model import RobotModel
from robokin.robot.vendor import Vendor
from robokin.targets.commands import Command, Message, SetAnalogOutput, SetDigitalOutput, WaitTime
from robokin.targets.target import Motion, Target
from robokin.targets.tool import Speed, Tool, Zone

# ── Robot model definitions ──────────────────────────────────────────────


class JointDefinition(BaseModel):
    """One joint: DH offsets in mm, range in vendor degrees."""

    a: float = 0.0
    d: float = 0.0
    min: float
    max: float
    max_speed: float = Field(gt=0)
    mesh: str | None = None

    @model_validator(mode="after")
    def _check_range(self) -> "JointDefinition":
        if self.min > self.max:
            raise ValueError(f"Joint range min {self.min} is greater than max {self.max}")
        return self


class IODefinition(BaseModel):
    """Controller I/O channel names."""

    do: list[str] = Field(default_factory=list)
    di: list[str] = Field(default_factory=list)
    ao: list[str] = Field(default_factory=list)
    ai: list[str] = Field(default_factory=list)


class RobotDefinition(BaseModel):
    """Robot model definition, as stored in ``<config_dir>/robots/*.yaml``."""

    model: str
    manufacturer: Vendor
    base_mesh: str | None = None
    joints: list[JointDefinition] = Field(min_length=6, max_length=6)
    io: IODefinition = Field(default_factory=IODefinition)

    @field_validator("manufacturer", mode="before")
    @classmethod
    def _upper_manufacturer(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @property
    def name(self) -> str:
        return f"{self.manufacturer.value}.{self.model}"


@dataclass
class ModelLibrary:
    """
    Library of robot model definitions.

    Loads every ``robots/*.yaml`` file under the configuration directory on
    first access. Models are keyed by file stem.

    Example:
        >>> library = ModelLibrary(config_dir=Path("config"))
        >>> library.list_models()
        ['abb_irb120', 'abb_irb6700', 'kuka_kr210_r2700', 'kuka_kr6_r900']
        >>> robot = library.load("abb_irb120")
    """

    config_dir: Path
    _robots: dict[str, RobotDefinition] = field(default_factory=dict, init=False)
    _loaded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        """Initialize the library."""
        self.config_dir = Path(self.config_dir)
        if not self.config_dir.exists():
            raise ConfigurationError(
                f"Configuration directory not found: {self.config_dir}"
            )

    def load_all(self) -> None:
        """Load all model definitions from disk."""
        robots_dir = self.config_dir / "robots"
        if robots_dir.exists():
            for config_file in sorted(robots_dir.glob("*.yaml")):
                self._robots[config_file.stem] = self._read_definition(config_file)
        self._loaded = True

    @staticmethod
    def _read_definition(config_file: Path) -> RobotDefinition:
        try:
            with open(config_file) as f:
                data = yaml.safe_load(f)

            if not data or "robot" not in data:
                raise ConfigurationError(
                    f"Robot definition has no 'robot' section: {config_file}"
                )
            robot_data = dict(data["robot"])
            # Merge the other sections
            robot_data["joints"] = data.get("joints", [])
            if "io" in data:
                robot_data["io"] = data["io"] or {}
            return RobotDefinition(**robot_data)
        except (yaml.YAMLError, ValidationError) as e:
            raise ConfigurationError(
                f"Failed to load robot definition: {config_file}",
                details={"error": str(e)},
            )

    def list_models(self) -> list[str]:
        """Names of all available model definitions."""
        if not self._loaded:
            self.load_all()
        return sorted(self._robots)

    def get_definition(self, name: str) -> RobotDefinition:
        """
        Get a model definition by name.

        Args:
            name: Definition name (file stem, without .yaml extension)

        Returns:
            RobotDefinition instance

        Raises:
            ConfigurationError: If the model is not found
        """
        if not self._loaded:
            self.load_all()

        if name not in self._robots:
            raise ConfigurationError(
                f"Robot model not found: {name}",
                details={"available": self.list_models()},
            )
        return self._robots[name]

    def load(self, name: str, base_frame: Optional[Frame] = None) -> RobotModel:
        """
        Build a robot model from its definition.

        Args:
            name: Definition name.
            base_frame: Placement of the robot; world XY when omitted.

        Returns:
            The robot model.

        Raises:
            ConfigurationError: If the model is not found.
            MalformedModelError: If the definition is geometrically invalid.
        """
        definition = self.get_definition(name)
        return RobotModel.from_definition(definition, base_frame=base_frame, root=self.config_dir)


# ── Program files ────────────────────────────────────────────────────────


class ToolDefinition(BaseModel):
    """Tool with TCP as ``[x, y, z, a, b, c]`` (mm, ZYX degrees) in flange coordinates."""

    name: str = "DefaultTool"
    tcp: list[float] = Field(default_factory=lambda: [0.0] * 6, min_length=6, max_length=6)
    weight: float = Field(default=0.01, gt=0)

    def build(self) -> Tool:
        return Tool(name=self.name, tcp=frame_from_euler(*self.tcp), weight=self.weight)


class SetDigitalOutputDefinition(BaseModel):
    type: Literal["set_do"]
    index: int = Field(ge=0)
    value: bool

    def build(self) -> Command:
        return SetDigitalOutput(self.index, self.value)


class SetAnalogOutputDefinition(BaseModel):
    type: Literal["set_ao"]
    index: int = Field(ge=0)
    value: float

    def build(self) -> Command:
        return SetAnalogOutput(self.index, self.value)


class WaitTimeDefinition(BaseModel):
    type: Literal["wait"]
    seconds: float = Field(ge=0)

    def build(self) -> Command:
        return WaitTime(self.seconds)


class MessageDefinition(BaseModel):
    type: Literal["message"]
    text: str

    def build(self) -> Command:
        return Message(self.text)


CommandDefinition = Annotated[
    Union[
        SetDigitalOutputDefinition,
        SetAnalogOutputDefinition,
        WaitTimeDefinition,
        MessageDefinition,
    ],
    Field(discriminator="type"),
]


class TargetDefinition(BaseModel):
    """
    One program step.

    Exactly one of ``pose`` (``[x, y, z, a, b, c]``, mm and ZYX degrees in
    world coordinates) and ``joints`` (vendor degrees) must be given.
    """

    pose: list[float] | None = Field(default=None, min_length=6, max_length=6)
    joints: list[float] | None = Field(default=None, min_length=6, max_length=6)
    motion: Motion | None = None
    speed: float | None = Field(default=None, gt=0)
    zone: float | None = Field(default=None, ge=0)
    configuration: int | None = Field(default=None, ge=0, le=7)
    commands: list[CommandDefinition] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_pose(self) -> "TargetDefinition":
        if (self.pose is None) == (self.joints is None):
            raise ValueError("A target needs exactly one of 'pose' or 'joints'")
        if self.joints is not None and self.motion not in (None, Motion.JOINT):
            raise ValueError("Joint targets can only use joint motion")
        return self

    def build(self, robot: RobotModel, tool: Optional[Tool] = None) -> Target:
        """Target in engine units for ``robot``."""
        commands = [c.build() for c in self.commands]
        speed = Speed(translation=self.speed) if self.speed is not None else None
        zone = Zone(distance=self.zone) if self.zone is not None else None
        if self.joints is not None:
            return Target.joint(
                robot.from_native(self.joints),
                tool=tool,
                speed=speed,
                zone=zone,
                commands=commands,
            )
        configuration = Configuration(self.configuration) if self.configuration is not None else None
        return Target.cartesian(
            frame_from_euler(*self.pose),
            tool=tool,
            motion=self.motion or Motion.JOINT_CARTESIAN,
            speed=speed,
            zone=zone,
            commands=commands,
            configuration=configuration,
        )


class ProgramDefinition(BaseModel):
    """Program file: a tool and an ordered list of targets."""

    name: str = "Program"
    tool: ToolDefinition = Field(default_factory=ToolDefinition)
    targets: list[TargetDefinition] = Field(min_length=1)

    def build_targets(self, robot: RobotModel) -> list[Target]:
        tool = self.tool.build()
        return [t.build(robot, tool) for t in self.targets]


def load_program(path: str | Path) -> ProgramDefinition:
    """
    Load a program file.

    Args:
        path: YAML file with ``name``, ``tool`` and ``targets`` keys.

    Returns:
        The validated program definition.

    Raises:
        ConfigurationError: If the file is missing or invalid.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Program file not found: {path}")
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        return ProgramDefinition(**(data or {}))
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        raise ConfigurationError(
            f"Failed to load program: {path}",
            details={"error": str(e)},
        )
