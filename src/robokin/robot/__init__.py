"""
Robot module - Joint chains, vendor conventions and robot models.
"""

from robokin.robot.joint import Joint, RobotIO
from robokin.robot.vendor import VENDOR_POLICIES, Vendor, VendorPolicy, get_policy
from robokin.robot.model import RobotCapabilities, RobotModel

__all__ = [
    "Joint",
    "RobotIO",
    "Vendor",
    "VendorPolicy",
    "VENDOR_POLICIES",
    "get_policy",
    "RobotCapabilities",
    "RobotModel",
]
