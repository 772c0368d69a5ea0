"""
Closed-form inverse kinematics for spherical-wrist arms.

The wrist centre only depends on joints 1 to 3, so position and orientation
are solved one after the other:

1. wrist centre = flange origin minus the flange offset (a6, d6);
2. joint 1 from the projection of the wrist centre on the base plane;
3. joints 2 and 3 from a planar two-link triangle (law of cosines);
4. joints 4 to 6 from the residual rotation ``R36 = Rz(t4) Ry(t5) Rz(t6)``.

Each of steps 2, 3 and 4 has two roots, picked by the shoulder, elbow and
wrist flags of a Configuration.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from robokin.core.geometry import angle_difference
from robokin.kinematics.configuration import Configuration
from robokin.kinematics.forward import forward_chain, forearm_geometry
from robokin.kinematics.solution import SolutionIssue

if TYPE_CHECKING:
    from robokin.robot.joint import Joint

# Below this, the direction of the wrist centre or of the joint 6 axis is noise.
SINGULARITY_TOLERANCE = 1e-7
# Slack on |cos| before a triangle is declared impossible.
TRIANGLE_TOLERANCE = 1e-10


@dataclass(frozen=True)
class BranchSolution:
    """Raw angles of one branch, before range fitting."""

    angles: tuple[float, ...]
    configuration: Configuration
    issues: SolutionIssue = SolutionIssue.NONE


def two_link_angles(
    l1: float, l2: float, u: float, v: float
) -> Optional[tuple[tuple[float, float], tuple[float, float]]]:
    """
    Planar two-link inverse kinematics.

    The first link starts at the origin with angle ``q1`` from the u axis,
    the second is rotated ``q2`` relative to the first, and the tip must
    reach ``(u, v)``.

    Args:
        l1: Length of the first link.
        l2: Length of the second link.
        u, v: Tip position.

    Returns:
        ``((q1, q2), (q1, q2))`` with ``q2 <= 0`` first and ``q2 >= 0``
        second, or None when the tip lies outside the annulus
        ``|l1 - l2| <= distance <= l1 + l2``.
    """
    cos_q2 = (u * u + v * v - l1 * l1 - l2 * l2) / (2.0 * l1 * l2)
    if abs(cos_q2) > 1.0 + TRIANGLE_TOLERANCE:
        return None
    q2 = math.acos(max(-1.0, min(1.0, cos_q2)))
    heading = math.atan2(v, u)

    def _branch(elbow: float) -> tuple[float, float]:
        return heading - math.atan2(l2 * math.sin(elbow), l1 + l2 * math.cos(elbow)), elbow

    return _branch(-q2), _branch(q2)


class SphericalWristSolver:
    """
    Inverse kinematics of one joint chain.

    Works in robot base coordinates on flange poses; tool and base frames are
    handled by the caller.
    """

    def __init__(self, chain: Sequence["Joint"]) -> None:
        """
        Args:
            chain: Six joints with a spherical wrist.
        """
        self.chain = tuple(chain)
        self._a1, self._d1 = chain[0].a, chain[0].d
        self._a2 = chain[1].a
        self._lateral = chain[1].d + chain[2].d
        self._forearm, self._forearm_angle = forearm_geometry(chain)
        self._flange_offset = np.array([chain[5].a, 0.0, chain[5].d])

    @property
    def max_reach(self) -> float:
        """Largest wrist-centre distance from the shoulder."""
        return self._a2 + self._forearm

    @property
    def min_reach(self) -> float:
        """Smallest wrist-centre distance from the shoulder."""
        return abs(self._a2 - self._forearm)

    def wrist_centre(self, flange: np.ndarray) -> np.ndarray:
        """Wrist centre of a flange pose (base coordinates)."""
        return flange[:3, 3] - flange[:3, :3] @ self._flange_offset

    def solve(
        self,
        flange: np.ndarray,
        configuration: Configuration,
        prior: Optional[Sequence[float]] = None,
    ) -> Optional[BranchSolution]:
        """
        Solve one branch.

        Args:
            flange: Flange pose in base coordinates (4x4).
            configuration: Branch to solve.
            prior: Joint vector used to break ties at singularities.

        Returns:
            The branch angles (not normalised), or None if unreachable.
        """
        issues = SolutionIssue.NONE
        wx, wy, wz = self.wrist_centre(flange)

        # Joint 1
        radial_sq = wx * wx + wy * wy - self._lateral * self._lateral
        if radial_sq < -TRIANGLE_TOLERANCE:
            return None
        radial = math.sqrt(max(radial_sq, 0.0))
        if configuration.shoulder:
            radial = -radial

        if math.hypot(wx, wy) < SINGULARITY_TOLERANCE:
            # Wrist centre on the joint 1 axis: any joint 1 angle works.
            t1 = float(prior[0]) if prior is not None else 0.0
            issues |= SolutionIssue.SINGULAR_SHOULDER
        else:
            t1 = math.atan2(wy, wx) - math.atan2(-self._lateral, radial)

        # Joints 2 and 3
        u = radial - self._a1
        v = wz - self._d1
        roots = two_link_angles(self._a2, self._forearm, u, v)
        if roots is None:
            return None
        elbow_up, elbow_down = roots
        if configuration.shoulder:
            elbow_up, elbow_down = elbow_down, elbow_up
        t2, psi = elbow_down if configuration.elbow else elbow_up
        t3 = psi + self._forearm_angle

        # Joints 4 to 6
        arm = forward_chain(self.chain, (t1, t2, t3, 0.0, 0.0, 0.0))[3]
        r36 = arm[:3, :3].T @ flange[:3, :3]
        t4, t5, t6, singular = self._wrist_angles(r36, configuration.wrist, prior)
        if singular:
            # Joint 5 sits at 0 or pi, neither of which is a flipped wrist
            issues |= SolutionIssue.SINGULAR_WRIST
            configuration = Configuration.from_flags(configuration.shoulder, configuration.elbow, False)

        return BranchSolution(
            angles=(t1, t2, t3, t4, t5, t6),
            configuration=configuration,
            issues=issues,
        )

    @staticmethod
    def _wrist_angles(
        r36: np.ndarray,
        flip: bool,
        prior: Optional[Sequence[float]],
    ) -> tuple[float, float, float, bool]:
        """ZYZ decomposition of the wrist rotation."""
        sin_t5 = math.hypot(r36[0, 2], r36[1, 2])
        if sin_t5 < SINGULARITY_TOLERANCE:
            # Joints 4 and 6 are coaxial; keep joint 4, joint 6 takes the twist.
            t4 = float(prior[3]) if prior is not None else 0.0
            if r36[2, 2] > 0.0:
                t5 = 0.0
                t6 = math.atan2(r36[1, 0], r36[0, 0]) - t4
            else:
                t5 = math.pi
                t6 = t4 - math.atan2(-r36[1, 0], -r36[0, 0])
            return t4, t5, t6, True

        if not flip:
            t5 = math.atan2(sin_t5, r36[2, 2])
            t4 = math.atan2(r36[1, 2], r36[0, 2])
            t6 = math.atan2(r36[2, 1], -r36[2, 0])
        else:
            t5 = math.atan2(-sin_t5, r36[2, 2])
            t4 = math.atan2(-r36[1, 2], -r36[0, 2])
            t6 = math.atan2(-r36[2, 1], r36[2, 0])
        return t4, t5, t6, False


def wrapped_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Sum of squared shortest angular differences."""
    return sum(angle_difference(float(x), float(y)) ** 2 for x, y in zip(a, b))
