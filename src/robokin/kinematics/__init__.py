"""
Kinematics module - Forward and inverse kinematics of spherical-wrist arms.

KinematicsEngine is reached through RobotModel.kinematics or imported from
robokin.kinematics.engine.
"""

from robokin.kinematics.configuration import Configuration
from robokin.kinematics.forward import configuration_of, forward_chain
from robokin.kinematics.inverse import SphericalWristSolver, two_link_angles
from robokin.kinematics.solution import KinematicSolution, SolutionIssue, SolutionStatus

__all__ = [
    "Configuration",
    "KinematicSolution",
    "SolutionIssue",
    "SolutionStatus",
    "SphericalWristSolver",
    "configuration_of",
    "forward_chain",
    "two_link_angles",
]
