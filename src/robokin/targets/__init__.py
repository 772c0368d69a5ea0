"""
Targets module - Poses to reach and the motion attributes to reach them with.
"""

from robokin.targets.commands import Command, Message, SetAnalogOutput, SetDigitalOutput, WaitTime
from robokin.targets.target import CartesianPose, JointPose, Motion, Target
from robokin.targets.tool import Speed, Tool, Zone

__all__ = [
    "CartesianPose",
    "Command",
    "JointPose",
    "Message",
    "Motion",
    "SetAnalogOutput",
    "SetDigitalOutput",
    "Speed",
    "Target",
    "Tool",
    "WaitTime",
    "Zone",
]
