"""
Joint chain building blocks.

A robot is six revolute joints described by two Denavit-Hartenberg link
parameters each. The twist of every link is fixed by the arm architecture
(see robokin.kinematics.forward), so only the radial offset ``a`` and the
axial offset ``d`` vary between models.
"""

from dataclasses import dataclass, field
from typing import Optional

import trimesh
from compas.geometry import Frame

from robokin.core.geometry import Interval


@dataclass(frozen=True)
class Joint:
    """
    One revolute joint of a six-axis arm.

    Attributes:
        a: Radial offset (DH link length), mm.
        d: Axial offset (DH link offset), mm.
        range: Allowed rotation. Vendor degrees in a model definition,
            engine radians once owned by a RobotModel.
        max_speed: Angular speed limit in vendor units (deg/s).
        plane: Joint frame at the reference configuration, relative to the
            robot base. Set by RobotModel, never by the user.
        mesh: Display geometry in the reference pose, robot base coordinates.
    """

    a: float
    d: float
    range: Interval
    max_speed: float
    plane: Optional[Frame] = field(default=None, compare=False)
    mesh: Optional[trimesh.Trimesh] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class RobotIO:
    """Names of the controller I/O channels. Metadata only."""

    do: tuple[str, ...] = ()
    di: tuple[str, ...] = ()
    ao: tuple[str, ...] = ()
    ai: tuple[str, ...] = ()
