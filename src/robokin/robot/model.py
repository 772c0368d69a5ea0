"""
Robot models.

A RobotModel composes an immutable six-joint chain, a movable base frame and
a vendor policy, and exposes the kinematics engine bound to that geometry.
"""

import math
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

import trimesh
from compas.geometry import Frame

from robokin.core.exceptions import MalformedModelError
from robokin.core.geometry import Interval, load_mesh, matrix_to_frame
from robokin.core.logging import get_logger
from robokin.kinematics.configuration import Configuration
from robokin.kinematics.engine import KinematicsEngine
from robokin.kinematics.forward import forward_chain
from robokin.kinematics.solution import KinematicSolution
from robokin.robot.joint import Joint, RobotIO
from robokin.robot.vendor import Vendor, VendorPolicy, get_policy

if TYPE_CHECKING:
    from robokin.codegen.base import EmitterConfig
    from robokin.core.config import RobotDefinition
    from robokin.targets.target import Target
    from robokin.targets.tool import Tool

logger = get_logger(__name__)

# Offsets that must vanish for the axes of joints 4 to 6 to meet in one point.
WRIST_TOLERANCE = 1e-9


class RobotCapabilities(Protocol):
    """What the rest of the system needs from a robot, whatever its vendor."""

    def forward(self, joints: Sequence[float], tool: Optional["Tool"] = None) -> KinematicSolution:
        ...

    def inverse(
        self,
        target: "Target",
        tool: Optional["Tool"] = None,
        configuration: Optional[Configuration] = None,
    ) -> KinematicSolution:
        ...

    def degree_to_radian(self, value: float, index: int) -> float:
        ...

    def radian_to_degree(self, value: float, index: int) -> float:
        ...

    def emit_code(self, steps: Sequence[tuple["Target", KinematicSolution]]) -> list[str]:
        ...


class RobotModel:
    """
    A six-axis spherical-wrist robot.

    Joint ranges are given in vendor degrees and stored in engine radians.
    The reference configuration of the vendor is solved once at construction
    to record every joint's frame; only the base frame can change afterwards.

    Example:
        >>> robot = library.load("abb_irb120")
        >>> solution = robot.inverse(Target.cartesian(frame))
        >>> [robot.radian_to_degree(j, i) for i, j in enumerate(solution.joints)]
    """

    def __init__(
        self,
        model: str,
        vendor: Vendor | str,
        joints: Sequence[Joint],
        base_frame: Optional[Frame] = None,
        io: Optional[RobotIO] = None,
        base_mesh: Optional[trimesh.Trimesh] = None,
    ) -> None:
        """
        Args:
            model: Model name without the vendor prefix, e.g. ``IRB120``.
            vendor: Vendor tag or name.
            joints: Six joints with ranges in vendor degrees.
            base_frame: Where the robot stands in world space.
            io: Controller I/O channel names.
            base_mesh: Display mesh of the fixed base.

        Raises:
            MalformedModelError: If the chain is not a six-axis spherical
                wrist, or the vendor reference pose is outside a joint range.
        """
        self.model = model
        self.policy: VendorPolicy = get_policy(vendor)
        self.io = io or RobotIO()
        self.base_mesh = base_mesh
        self._base_frame = base_frame if base_frame is not None else Frame.worldXY()
        self.joints: tuple[Joint, ...] = self._solve_reference(joints)
        self.kinematics = KinematicsEngine(self)
        logger.debug("robot_model_built", robot=self.name, reach=round(self.max_reach, 3))

    @classmethod
    def from_definition(
        cls,
        definition: "RobotDefinition",
        base_frame: Optional[Frame] = None,
        root: Optional[Path] = None,
    ) -> "RobotModel":
        """
        Build a model from a validated definition.

        Args:
            definition: Parsed model definition.
            base_frame: Placement of the robot.
            root: Directory that relative mesh paths are resolved against.

        Returns:
            The robot model.
        """
        root = Path(root) if root is not None else Path.cwd()

        def _mesh(path: Optional[str]) -> Optional[trimesh.Trimesh]:
            if path is None:
                return None
            mesh_path = Path(path)
            return load_mesh(mesh_path if mesh_path.is_absolute() else root / mesh_path)

        joints = [
            Joint(
                a=j.a,
                d=j.d,
                range=Interval(j.min, j.max),
                max_speed=j.max_speed,
                mesh=_mesh(j.mesh),
            )
            for j in definition.joints
        ]
        io = RobotIO(
            do=tuple(definition.io.do),
            di=tuple(definition.io.di),
            ao=tuple(definition.io.ao),
            ai=tuple(definition.io.ai),
        )
        return cls(
            model=definition.model,
            vendor=definition.manufacturer,
            joints=joints,
            base_frame=base_frame,
            io=io,
            base_mesh=_mesh(definition.base_mesh),
        )

    # ── Identity ──────────────────────────────────────────────────────

    @property
    def vendor(self) -> Vendor:
        return self.policy.vendor

    @property
    def name(self) -> str:
        """Full model name, e.g. ``ABB.IRB120``."""
        return f"{self.vendor.value}.{self.model}"

    @property
    def extension(self) -> str:
        """Controller program file extension."""
        return self.policy.extension

    @property
    def reference(self) -> tuple[float, ...]:
        """Engine joint vector the joint frames were recorded at."""
        return self.policy.reference

    @property
    def base_frame(self) -> Frame:
        return self._base_frame

    @base_frame.setter
    def base_frame(self, frame: Frame) -> None:
        if frame is None:
            raise ValueError("Base frame cannot be None")
        self._base_frame = frame

    @property
    def max_reach(self) -> float:
        """Largest wrist-centre distance from the shoulder, mm."""
        return self.kinematics.solver.max_reach

    # ── Capabilities ──────────────────────────────────────────────────

    def forward(
        self,
        joints: Sequence[float],
        tool: Optional["Tool"] = None,
        with_meshes: bool = False,
    ) -> KinematicSolution:
        """Forward kinematics of engine angles; see KinematicsEngine.forward."""
        return self.kinematics.forward(joints, tool, with_meshes=with_meshes)

    def inverse(
        self,
        target: "Target",
        tool: Optional["Tool"] = None,
        configuration: Optional[Configuration] = None,
        prior: Optional[Sequence[float]] = None,
        with_meshes: bool = False,
    ) -> KinematicSolution:
        """Inverse kinematics of a target; see KinematicsEngine.inverse."""
        return self.kinematics.inverse(
            target,
            tool=tool,
            configuration=configuration,
            prior=prior,
            with_meshes=with_meshes,
        )

    def solve_all(self, target: "Target", tool: Optional["Tool"] = None) -> dict[Configuration, KinematicSolution]:
        return self.kinematics.solve_all(target, tool)

    def degree_to_radian(self, value: float, index: int) -> float:
        return self.policy.degree_to_radian(value, index)

    def radian_to_degree(self, value: float, index: int) -> float:
        return self.policy.radian_to_degree(value, index)

    def to_native(self, joints: Sequence[float]) -> tuple[float, ...]:
        """Engine radians to vendor degrees, joint by joint."""
        return tuple(self.radian_to_degree(float(v), i) for i, v in enumerate(joints))

    def from_native(self, joints: Sequence[float]) -> tuple[float, ...]:
        """Vendor degrees to engine radians, joint by joint."""
        return tuple(self.degree_to_radian(float(v), i) for i, v in enumerate(joints))

    def emit_code(
        self,
        steps: Sequence[tuple["Target", KinematicSolution]],
        config: Optional["EmitterConfig"] = None,
    ) -> list[str]:
        """
        Controller program for solved targets.

        Args:
            steps: Ordered ``(target, solution)`` pairs.
            config: Program name and data names.

        Returns:
            Program text, one line per item.
        """
        from robokin.codegen import get_emitter

        return get_emitter(self, config).emit(steps)

    # ── Geometry ──────────────────────────────────────────────────────

    def get_planes(self) -> list[Frame]:
        """Joint frames at the reference configuration, relative to the base."""
        return [joint.plane for joint in self.joints]

    def get_meshes(self) -> list[Optional[trimesh.Trimesh]]:
        return [joint.mesh for joint in self.joints]

    def _solve_reference(self, joints: Sequence[Joint]) -> tuple[Joint, ...]:
        if len(joints) != 6:
            raise MalformedModelError(
                f"Robot {self.name} needs 6 joints, got {len(joints)}", model=self.name
            )

        wrist_offsets = {"a4": joints[3].a, "a5": joints[4].a, "d5": joints[4].d}
        if any(abs(v) > WRIST_TOLERANCE for v in wrist_offsets.values()):
            raise MalformedModelError(
                f"Robot {self.name} does not have a spherical wrist",
                model=self.name,
                details=wrist_offsets,
            )
        if joints[1].a <= 0.0 or math.hypot(joints[2].a, joints[3].d) <= 0.0:
            raise MalformedModelError(
                f"Robot {self.name} has a zero-length upper arm or forearm", model=self.name
            )

        reference = self.policy.reference
        ranges = []
        for i, joint in enumerate(joints):
            converted = Interval.from_unordered(
                self.degree_to_radian(joint.range.min, i),
                self.degree_to_radian(joint.range.max, i),
            )
            if not converted.contains(reference[i]):
                raise MalformedModelError(
                    f"Reference pose of joint {i + 1} lies outside its range",
                    model=self.name,
                    details={
                        "joint": i + 1,
                        "reference": round(self.radian_to_degree(reference[i], i), 6),
                        "range": [joint.range.min, joint.range.max],
                    },
                )
            ranges.append(converted)

        matrices = forward_chain(joints, reference)
        return tuple(
            replace(joint, range=converted, plane=matrix_to_frame(matrix))
            for joint, converted, matrix in zip(joints, ranges, matrices[1:])
        )

    def __str__(self) -> str:
        return f"Robot: {self.name}"

    def __repr__(self) -> str:
        return f"RobotModel(name='{self.name}', reach={self.max_reach:.1f})"
