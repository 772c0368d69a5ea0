"""
Kinematics engine bound to one robot model.

Joins the pure chain math (forward.py, inverse.py) with what a robot model
adds on top: base frame, tool offsets, joint ranges and display meshes.
Nothing here raises for unreachable poses or joints out of range; those end
up in the returned KinematicSolution.
"""

from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from robokin.core.exceptions import KinematicsError
from robokin.core.geometry import (
    TAU,
    frame_to_matrix,
    invert_transform,
    matrix_to_frame,
    normalize_angle,
    transform_mesh,
)
from robokin.core.logging import get_logger
from robokin.kinematics.configuration import Configuration
from robokin.kinematics.forward import configuration_of, forward_chain
from robokin.kinematics.inverse import BranchSolution, SphericalWristSolver, wrapped_distance
from robokin.kinematics.solution import KinematicSolution, SolutionIssue, SolutionStatus

if TYPE_CHECKING:
    from robokin.robot.model import RobotModel
    from robokin.targets.target import Target
    from robokin.targets.tool import Tool

logger = get_logger(__name__)


class KinematicsEngine:
    """
    Forward and inverse kinematics of a robot model.

    Example:
        >>> engine = robot.kinematics
        >>> solution = engine.inverse(Target.cartesian(frame))
        >>> solution.status
        <SolutionStatus.SOLVED: 'solved'>
    """

    def __init__(self, robot: "RobotModel") -> None:
        """
        Args:
            robot: Model whose geometry, ranges and base frame are used.
        """
        self.robot = robot
        self.solver = SphericalWristSolver(robot.joints)

    # ── Forward ───────────────────────────────────────────────────────

    def forward(
        self,
        joints: Sequence[float],
        tool: Optional["Tool"] = None,
        with_meshes: bool = False,
    ) -> KinematicSolution:
        """
        Joint frames reached by a joint vector.

        The supplied angles are taken literally (no wrapping) and checked
        against the joint ranges.

        Args:
            joints: Six engine angles in radians.
            tool: Tool whose TCP is reported; flange when omitted.
            with_meshes: Also move the display meshes to the pose.

        Returns:
            Solution with status SOLVED or OUT_OF_RANGE.

        Raises:
            KinematicsError: If ``joints`` does not hold six values.
        """
        angles = self._as_angles(joints)
        out_of_range = tuple(
            i for i, (angle, joint) in enumerate(zip(angles, self.robot.joints))
            if not joint.range.contains(angle)
        )
        return self._build(
            angles,
            tool,
            out_of_range=out_of_range,
            configuration=configuration_of(self.robot.joints, angles),
            with_meshes=with_meshes,
        )

    def forward_matrices(self, joints: Sequence[float]) -> list[np.ndarray]:
        """World matrices of the base and the six joints."""
        base = frame_to_matrix(self.robot.base_frame)
        return forward_chain(self.robot.joints, self._as_angles(joints), base)

    # ── Inverse ───────────────────────────────────────────────────────

    def inverse(
        self,
        target: "Target",
        tool: Optional["Tool"] = None,
        configuration: Optional[Configuration] = None,
        prior: Optional[Sequence[float]] = None,
        with_meshes: bool = False,
    ) -> KinematicSolution:
        """
        Joint angles that reach a target.

        Joint-space targets are verified with forward kinematics. For
        Cartesian targets the branch is, in order of precedence: the
        ``configuration`` argument, the target's configuration, the branch
        closest to ``prior``, and finally Configuration.NONE.

        Args:
            target: Cartesian or joint-space target.
            tool: Overrides the target's tool.
            configuration: Overrides the target's configuration.
            prior: Joint vector (radians) to stay close to, and to break ties
                at singularities.
            with_meshes: Also move the display meshes to the pose.

        Returns:
            The solution; unreachable poses yield status UNREACHABLE.
        """
        tool = tool or target.tool
        if not target.is_cartesian:
            return self.forward(target.joints, tool, with_meshes=with_meshes)

        prior_angles = self._as_angles(prior) if prior is not None else None
        flange = self._flange_pose(target, tool)
        if configuration is None:
            configuration = target.configuration

        if configuration is not None:
            branch = self.solver.solve(flange, configuration, prior_angles)
        elif prior_angles is not None:
            branch = self._closest_branch(flange, prior_angles)
        else:
            configuration = Configuration.NONE
            branch = self.solver.solve(flange, configuration, prior_angles)

        if branch is None:
            logger.debug("ik_unreachable", robot=self.robot.name, target=str(target))
            return KinematicSolution.unreachable(configuration)
        return self._finish(branch, tool, with_meshes)

    def solve_all(self, target: "Target", tool: Optional["Tool"] = None) -> dict[Configuration, KinematicSolution]:
        """
        Solve every branch of a Cartesian target.

        Args:
            target: Cartesian target.
            tool: Overrides the target's tool.

        Returns:
            One solution per configuration, unreachable branches included.

        Raises:
            KinematicsError: If the target is joint-space.
        """
        if not target.is_cartesian:
            raise KinematicsError("Only Cartesian targets have configuration branches")
        tool = tool or target.tool
        flange = self._flange_pose(target, tool)
        solutions = {}
        for configuration in Configuration:
            branch = self.solver.solve(flange, configuration)
            if branch is None:
                solutions[configuration] = KinematicSolution.unreachable(configuration)
            else:
                solutions[configuration] = self._finish(branch, tool, False)
        return solutions

    def fit_to_ranges(self, angles: Sequence[float]) -> tuple[tuple[float, ...], tuple[int, ...]]:
        """
        Wrap angles to (-pi, pi] and into the joint ranges where possible.

        A wrapped angle outside its range is replaced by the ``±2pi``
        alternative when that one is inside.

        Returns:
            ``(angles, indices of joints still out of range)``.
        """
        fitted = []
        out_of_range = []
        for index, (angle, joint) in enumerate(zip(angles, self.robot.joints)):
            wrapped = normalize_angle(angle)
            for candidate in (wrapped, wrapped + TAU, wrapped - TAU):
                if joint.range.contains(candidate):
                    fitted.append(candidate)
                    break
            else:
                fitted.append(wrapped)
                out_of_range.append(index)
        return tuple(fitted), tuple(out_of_range)

    # ── Internals ─────────────────────────────────────────────────────

    def _closest_branch(self, flange: np.ndarray, prior: tuple[float, ...]) -> Optional[BranchSolution]:
        best: Optional[tuple[bool, float, BranchSolution]] = None
        for configuration in Configuration:
            branch = self.solver.solve(flange, configuration, prior)
            if branch is None:
                continue
            fitted, out_of_range = self.fit_to_ranges(branch.angles)
            key = (bool(out_of_range), wrapped_distance(fitted, prior), branch)
            if best is None or key[:2] < best[:2]:
                best = key
        return best[2] if best is not None else None

    def _finish(self, branch: BranchSolution, tool: Optional["Tool"], with_meshes: bool) -> KinematicSolution:
        angles, out_of_range = self.fit_to_ranges(branch.angles)
        if out_of_range:
            logger.debug(
                "ik_joint_out_of_range",
                robot=self.robot.name,
                joints=[i + 1 for i in out_of_range],
                configuration=str(branch.configuration),
            )
        if branch.issues & SolutionIssue.SINGULAR_WRIST:
            logger.debug("ik_singular_wrist", robot=self.robot.name)
        return self._build(
            angles,
            tool,
            out_of_range=out_of_range,
            configuration=branch.configuration,
            issues=branch.issues,
            with_meshes=with_meshes,
        )

    def _build(
        self,
        angles: tuple[float, ...],
        tool: Optional["Tool"],
        out_of_range: tuple[int, ...] = (),
        configuration: Optional[Configuration] = None,
        issues: SolutionIssue = SolutionIssue.NONE,
        with_meshes: bool = False,
    ) -> KinematicSolution:
        matrices = self.forward_matrices(angles)
        tcp = matrices[-1] if tool is None else matrices[-1] @ frame_to_matrix(tool.tcp)
        return KinematicSolution(
            joints=angles,
            planes=[matrix_to_frame(m) for m in matrices],
            tcp=matrix_to_frame(tcp),
            status=SolutionStatus.OUT_OF_RANGE if out_of_range else SolutionStatus.SOLVED,
            out_of_range=out_of_range,
            issues=issues,
            configuration=configuration,
            meshes=self._meshes(matrices, tool) if with_meshes else [],
        )

    def _meshes(self, matrices: list[np.ndarray], tool: Optional["Tool"]) -> list:
        """Display meshes at the pose: base, six joints, then the tool."""
        base = matrices[0]
        meshes = []
        if self.robot.base_mesh is not None:
            meshes.append(transform_mesh(self.robot.base_mesh, base))
        for joint, matrix in zip(self.robot.joints, matrices[1:]):
            if joint.mesh is None:
                continue
            # Meshes are stored at the reference pose: undo it, then apply the new one.
            move = matrix @ invert_transform(frame_to_matrix(joint.plane))
            meshes.append(transform_mesh(joint.mesh, move))
        if tool is not None and tool.mesh is not None:
            meshes.append(transform_mesh(tool.mesh, matrices[-1]))
        return meshes

    def _flange_pose(self, target: "Target", tool: Optional["Tool"]) -> np.ndarray:
        """Flange pose in base coordinates for a Cartesian target."""
        world = frame_to_matrix(target.plane)
        base = frame_to_matrix(self.robot.base_frame)
        flange = invert_transform(base) @ world
        if tool is not None:
            flange = flange @ invert_transform(frame_to_matrix(tool.tcp))
        return flange

    @staticmethod
    def _as_angles(joints: Sequence[float]) -> tuple[float, ...]:
        values = tuple(float(j) for j in joints)
        if len(values) != 6:
            raise KinematicsError(
                f"Expected 6 joint angles, got {len(values)}",
                details={"joints": list(values)},
            )
        return values
