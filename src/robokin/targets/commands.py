"""
Auxiliary controller commands run at a target.

Channel indices point into the robot's RobotIO lists; the code emitters
resolve them to controller names.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Command:
    """Base class of all commands."""


@dataclass(frozen=True)
class SetDigitalOutput(Command):
    index: int
    value: bool

    def __str__(self) -> str:
        return f"Set DO {self.index} to {self.value}"


@dataclass(frozen=True)
class SetAnalogOutput(Command):
    index: int
    value: float

    def __str__(self) -> str:
        return f"Set AO {self.index} to {self.value:.3f}"


@dataclass(frozen=True)
class WaitTime(Command):
    seconds: float

    def __post_init__(self) -> None:
        if self.seconds < 0:
            raise ValueError(f"Wait time must not be negative, got {self.seconds}")

    def __str__(self) -> str:
        return f"Wait {self.seconds:.2f} s"


@dataclass(frozen=True)
class Message(Command):
    text: str

    def __str__(self) -> str:
        return f"Message: {self.text}"
