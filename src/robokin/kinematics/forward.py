"""
Forward kinematics of a six-axis spherical-wrist arm.

Standard Denavit-Hartenberg convention, one transform per joint::

    T_i = Rz(theta_i) * Tz(d_i) * Tx(a_i) * Rx(alpha_i)

The link twists are fixed by the architecture. Joint 1 is vertical, joints
2 and 3 are parallel, and the axes of joints 4 to 6 meet in the wrist centre
when ``a4 = a5 = d5 = 0``.
"""

import math
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from robokin.core.geometry import normalize_angle
from robokin.kinematics.configuration import Configuration

if TYPE_CHECKING:
    from robokin.robot.joint import Joint

ALPHA: tuple[float, ...] = (
    math.pi / 2.0,
    0.0,
    math.pi / 2.0,
    -math.pi / 2.0,
    math.pi / 2.0,
    0.0,
)


def link_transform(a: float, d: float, alpha: float, theta: float) -> np.ndarray:
    """Homogeneous transform of one DH link."""
    ct, st = math.cos(theta), math.sin(theta)
    ca, sa = math.cos(alpha), math.sin(alpha)
    return np.array(
        [
            [ct, -st * ca, st * sa, a * ct],
            [st, ct * ca, -ct * sa, a * st],
            [0.0, sa, ca, d],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def forward_chain(
    chain: Sequence["Joint"],
    angles: Sequence[float],
    base: Optional[np.ndarray] = None,
) -> list[np.ndarray]:
    """
    Compose the joint transforms of a chain.

    Args:
        chain: Six joints (only ``a`` and ``d`` are read).
        angles: Six engine angles in radians.
        base: World transform of the robot base; identity when omitted.

    Returns:
        Seven 4x4 matrices: base, then joints 1 to 6 (the flange).
    """
    current = np.eye(4) if base is None else np.array(base, dtype=float)
    matrices = [current]
    for joint, alpha, theta in zip(chain, ALPHA, angles):
        current = current @ link_transform(joint.a, joint.d, alpha, float(theta))
        matrices.append(current)
    return matrices


def forearm_geometry(chain: Sequence["Joint"]) -> tuple[float, float]:
    """
    Effective forearm of the planar shoulder/elbow problem.

    The wrist centre sits ``a3`` along the x axis and ``d4`` along the z axis
    of frame 3, so the forearm is one straight link of length
    ``hypot(a3, d4)`` rotated by ``atan2(d4, a3)`` from the joint 3 zero.

    Returns:
        ``(length, angle)``.
    """
    a3, d4 = chain[2].a, chain[3].d
    return math.hypot(a3, d4), math.atan2(d4, a3)


def arm_sides(chain: Sequence["Joint"], angles: Sequence[float]) -> tuple[bool, bool]:
    """
    Where the wrist centre lies relative to the arm.

    Returns:
        ``(behind_axis1, behind_lower_arm)``. The first is true when the
        wrist centre is on the far side of joint 1 from where the arm points
        (a negative reach along frame 1). The second is true when the
        forearm folds back across the line of the lower arm (joint 2 to
        joint 3), i.e. ``sin(psi) > 0`` with ``psi = t3 - atan2(d4, a3)``.
    """
    t2, t3 = float(angles[1]), float(angles[2])
    _, phi = forearm_geometry(chain)
    a1, a2 = chain[0].a, chain[1].a
    a3, d4 = chain[2].a, chain[3].d

    reach = a1 + a2 * math.cos(t2) + a3 * math.cos(t2 + t3) + d4 * math.sin(t2 + t3)
    psi = normalize_angle(t3 - phi)
    return reach < 0.0, psi > 0.0


def configuration_of(chain: Sequence["Joint"], angles: Sequence[float]) -> Configuration:
    """
    Branch flags of a joint vector.

    Shoulder: the wrist centre lies behind joint 1 along the arm plane.
    Elbow: the elbow lies below the shoulder-wrist line. Wrist: joint 5 is
    negative.
    """
    shoulder, behind_lower_arm = arm_sides(chain, angles)
    elbow = behind_lower_arm != shoulder
    wrist = normalize_angle(float(angles[4])) < 0.0
    return Configuration.from_flags(shoulder, elbow, wrist)
