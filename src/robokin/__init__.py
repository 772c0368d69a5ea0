"""
robokin - Kinematics of six-axis industrial robots.

Closed-form forward and inverse kinematics for spherical-wrist arms, vendor
joint conventions (ABB, KUKA), and controller program emission for offline
robot programming.
"""

__version__ = "0.1.0"
__author__ = "robokin Contributors"

from robokin.core.config import ModelLibrary
from robokin.kinematics.configuration import Configuration
from robokin.robot.model import RobotModel
from robokin.targets.target import Motion, Target
from robokin.targets.tool import Speed, Tool, Zone

__all__ = [
    "__version__",
    "Configuration",
    "ModelLibrary",
    "Motion",
    "RobotModel",
    "Speed",
    "Target",
    "Tool",
    "Zone",
]
