"""
Custom exceptions for robokin.

All robokin exceptions inherit from RobokinError for easy catching.

Reachability problems (unreachable poses, joints out of range, singular
wrists) are not exceptions: they are reported in KinematicSolution.
These classes are reserved for bad data and programming errors.
"""

from typing import Any


class RobokinError(Exception):
    """Base exception for all robokin errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(RobokinError):
    """Raised when a model library or program file is invalid or missing."""

    pass


class GeometryError(RobokinError):
    """Raised when a display mesh cannot be loaded."""

    pass


class MalformedModelError(RobokinError):
    """Raised when robot model data is internally inconsistent."""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.model = model


class TargetError(RobokinError):
    """Raised when a target is built with conflicting or invalid poses."""

    pass


class KinematicsError(RobokinError):
    """Raised when the kinematics engine is called with malformed input."""

    pass


class CodeGenerationError(RobokinError):
    """Raised when a program cannot be emitted for a controller."""

    def __init__(
        self,
        message: str,
        vendor: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.vendor = vendor
