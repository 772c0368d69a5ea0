"""Tool, speed and zone value objects attached to targets."""

from dataclasses import dataclass, field
from typing import Optional

import trimesh
from compas.geometry import Frame

# Below this blend distance (mm) a zone is an exact stop point.
ZONE_TOLERANCE = 1e-3


@dataclass(frozen=True)
class Tool:
    """
    End effector mounted on the flange.

    Attributes:
        name: Controller name of the tool data.
        tcp: Tool centre point in flange coordinates.
        weight: Mass in kg.
        mesh: Display geometry in flange coordinates.
    """

    name: str = "DefaultTool"
    tcp: Frame = field(default_factory=Frame.worldXY, compare=False)
    weight: float = 0.01
    mesh: Optional[trimesh.Trimesh] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"Tool: {self.name}"


@dataclass(frozen=True)
class Speed:
    """TCP speed: translation in mm/s, rotation in deg/s."""

    translation: float = 100.0
    rotation: float = 90.0
    name: Optional[str] = None

    def __str__(self) -> str:
        if self.name is not None:
            return f"Speed: {self.name}"
        return f"Speed: {self.translation:.2f} mm/s"


@dataclass(frozen=True)
class Zone:
    """
    Blend zone around a target.

    Attributes:
        distance: TCP blend radius in mm.
        rotation: Orientation blend in degrees; same value as ``distance``
            when omitted.
        name: Controller name of the zone data.
    """

    distance: float = 0.3
    rotation: Optional[float] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.rotation is None:
            object.__setattr__(self, "rotation", self.distance)

    @property
    def is_flyby(self) -> bool:
        return self.distance > ZONE_TOLERANCE

    def __str__(self) -> str:
        if self.name is not None:
            return f"Zone: {self.name}"
        if self.is_flyby:
            return f"Zone: {self.distance:.2f} mm"
        return "Zone: Stop point"
