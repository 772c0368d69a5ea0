"""
Geometry helpers for robokin.

Poses are exchanged as COMPAS frames and computed with 4x4 numpy matrices.
Angles are radians unless a name says otherwise. Display meshes are trimesh
objects and never take part in the kinematics math.
"""

import math
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import trimesh
from compas.geometry import Frame
from scipy.spatial.transform import Rotation

from robokin.core.exceptions import GeometryError

TAU = 2.0 * math.pi


def normalize_angle(angle: float) -> float:
    """Wrap an angle to the half-open interval (-pi, pi]."""
    wrapped = math.remainder(angle, TAU)
    if wrapped <= -math.pi:
        wrapped += TAU
    return wrapped


def angle_difference(a: float, b: float) -> float:
    """Shortest signed rotation from ``b`` to ``a``."""
    return normalize_angle(a - b)


@dataclass(frozen=True)
class Interval:
    """Closed interval ``[min, max]``."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError(f"Interval lower bound {self.min} exceeds upper bound {self.max}")

    @classmethod
    def from_unordered(cls, a: float, b: float) -> "Interval":
        """Build an interval from two ends given in any order."""
        return cls(min(a, b), max(a, b))

    @property
    def length(self) -> float:
        return self.max - self.min

    def contains(self, value: float, tol: float = 1e-9) -> bool:
        return self.min - tol <= value <= self.max + tol

    def __iter__(self):
        yield self.min
        yield self.max


# ── Frames and matrices ───────────────────────────────────────────────────


def frame_to_matrix(frame: Frame) -> np.ndarray:
    """Homogeneous 4x4 matrix of a frame (columns: x, y, z axes, origin)."""
    matrix = np.eye(4)
    matrix[:3, 0] = list(frame.xaxis)
    matrix[:3, 1] = list(frame.yaxis)
    matrix[:3, 2] = list(frame.zaxis)
    matrix[:3, 3] = list(frame.point)
    return matrix


def matrix_to_frame(matrix: np.ndarray) -> Frame:
    """Frame of a homogeneous 4x4 matrix."""
    return Frame(
        matrix[:3, 3].tolist(),
        matrix[:3, 0].tolist(),
        matrix[:3, 1].tolist(),
    )


def invert_transform(matrix: np.ndarray) -> np.ndarray:
    """Inverse of a rigid transform."""
    rotation = matrix[:3, :3]
    inverse = np.eye(4)
    inverse[:3, :3] = rotation.T
    inverse[:3, 3] = -rotation.T @ matrix[:3, 3]
    return inverse


def frame_from_euler(
    x: float,
    y: float,
    z: float,
    a: float,
    b: float,
    c: float,
    degrees: bool = True,
) -> Frame:
    """
    Frame from a position and intrinsic ZYX Euler angles.

    Args:
        x, y, z: Origin.
        a: Rotation about Z.
        b: Rotation about the new Y.
        c: Rotation about the new X.
        degrees: Angles are given in degrees.

    Returns:
        The frame.
    """
    matrix = np.eye(4)
    matrix[:3, :3] = Rotation.from_euler("ZYX", [a, b, c], degrees=degrees).as_matrix()
    matrix[:3, 3] = [x, y, z]
    return matrix_to_frame(matrix)


def frame_to_euler(frame: Frame, degrees: bool = True) -> tuple[float, ...]:
    """Position and intrinsic ZYX Euler angles ``(x, y, z, a, b, c)`` of a frame."""
    matrix = frame_to_matrix(frame)
    a, b, c = Rotation.from_matrix(matrix[:3, :3]).as_euler("ZYX", degrees=degrees)
    x, y, z = matrix[:3, 3]
    return (float(x), float(y), float(z), float(a), float(b), float(c))


def frame_to_quaternion(frame: Frame) -> tuple[float, float, float, float]:
    """Orientation of a frame as a scalar-first quaternion ``(w, x, y, z)``."""
    qx, qy, qz, qw = Rotation.from_matrix(frame_to_matrix(frame)[:3, :3]).as_quat()
    return (float(qw), float(qx), float(qy), float(qz))


def frames_close(a: Frame, b: Frame, tol: float = 1e-6) -> bool:
    """Whether two frames coincide within ``tol`` (same units as the frame origin)."""
    return bool(np.allclose(frame_to_matrix(a), frame_to_matrix(b), atol=tol))


# ── Display meshes ────────────────────────────────────────────────────────


def load_mesh(file_path: str | Path) -> trimesh.Trimesh:
    """
    Load a triangulated display mesh.

    Args:
        file_path: Path to an STL/OBJ/PLY/OFF file.

    Returns:
        Trimesh mesh; scenes are flattened into one mesh.

    Raises:
        GeometryError: If the file is missing or holds no triangles.
    """
    path = Path(file_path)
    if not path.exists():
        raise GeometryError(f"Mesh file not found: {path}")

    try:
        loaded = trimesh.load(str(path))
    except Exception as e:
        raise GeometryError(f"Failed to load mesh {path}: {e}") from e

    if isinstance(loaded, trimesh.Scene):
        parts = [g for g in loaded.geometry.values() if isinstance(g, trimesh.Trimesh)]
        if not parts:
            raise GeometryError(f"Mesh file holds no triangle meshes: {path}")
        return trimesh.util.concatenate(parts)
    if isinstance(loaded, trimesh.Trimesh):
        return loaded
    raise GeometryError(f"Unexpected geometry type in {path}: {type(loaded).__name__}")


def transform_mesh(mesh: trimesh.Trimesh, matrix: np.ndarray) -> trimesh.Trimesh:
    """Transformed copy of a mesh."""
    moved = mesh.copy()
    moved.apply_transform(matrix)
    return moved

