"""
Core module - Shared utilities, error taxonomy, and geometry helpers.

The model library lives in robokin.core.config; it is not re-exported here
because it depends on the robot and target packages.
"""

from robokin.core.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    GeometryError,
    KinematicsError,
    MalformedModelError,
    RobokinError,
    TargetError,
)
from robokin.core.geometry import Interval, normalize_angle
from robokin.core.logging import configure_logging, get_logger

__all__ = [
    # Exceptions
    "RobokinError",
    "ConfigurationError",
    "GeometryError",
    "MalformedModelError",
    "TargetError",
    "KinematicsError",
    "CodeGenerationError",
    # Geometry
    "Interval",
    "normalize_angle",
    # Logging
    "configure_logging",
    "get_logger",
]
