"""
Controller code emitters.

Each supported vendor has one emitter; ``get_emitter`` picks it from the
robot's vendor tag.
"""

from typing import TYPE_CHECKING, Optional

from robokin.codegen.base import CodeEmitter, EmitterConfig
from robokin.codegen.krl import KRLEmitter
from robokin.codegen.rapid import RAPIDEmitter
from robokin.robot.vendor import Vendor

if TYPE_CHECKING:
    from robokin.robot.model import RobotModel

EMITTERS: dict[Vendor, type[CodeEmitter]] = {
    Vendor.ABB: RAPIDEmitter,
    Vendor.KUKA: KRLEmitter,
}


def get_emitter(robot: "RobotModel", config: Optional[EmitterConfig] = None) -> CodeEmitter:
    """Emitter for the robot's controller."""
    return EMITTERS[robot.vendor](robot, config)


__all__ = [
    "CodeEmitter",
    "EmitterConfig",
    "EMITTERS",
    "KRLEmitter",
    "RAPIDEmitter",
    "get_emitter",
]
