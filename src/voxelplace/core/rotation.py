"""
The 24 proper rotations of the cubic lattice and conversions between them and
continuous orientations (matrices, quaternions, Euler angles).

A rotation is an integer index into ``ROTATION_MATRICES``; index 0 is identity.
Continuous orientations are snapped into the group once, at the boundary.
"""

from enum import Enum
from typing import Dict, List, Sequence, Tuple, Union

import numpy as np

from voxelplace.core.types import Vec3


NUM_ROTATIONS = 24
IDENTITY = 0


def generate_24_rotations() -> List[np.ndarray]:
    """
    Generate the 24 proper rotation matrices (discrete subgroup of SO(3)).

    Method: enumerate 6 face orientations, then 4 quarter turns per face.
    """
    Rx90 = np.array([
        [1, 0, 0],
        [0, 0, -1],
        [0, 1, 0]
    ], dtype=int)

    Ry90 = np.array([
        [0, 0, 1],
        [0, 1, 0],
        [-1, 0, 0]
    ], dtype=int)

    Rz90 = np.array([
        [0, -1, 0],
        [1, 0, 0],
        [0, 0, 1]
    ], dtype=int)

    I = np.eye(3, dtype=int)

    face_rotations = [
        I,
        Rx90,
        Rx90 @ Rx90,
        Rx90 @ Rx90 @ Rx90,
        Ry90,
        Ry90 @ Ry90 @ Ry90,
    ]

    rotations = []
    for face_rot in face_rotations:
        for i in range(4):
            z_rot = np.linalg.matrix_power(Rz90, i)
            rotations.append(face_rot @ z_rot)

    return rotations


ROTATION_MATRICES = generate_24_rotations()

_INDEX_BY_MATRIX: Dict[Tuple[int, ...], int] = {
    tuple(R.flatten().tolist()): i for i, R in enumerate(ROTATION_MATRICES)
}


def get_rotation_matrix(rot_index: int) -> np.ndarray:
    """
    Get a rotation matrix.
    rot_index: 0-23
    """
    if not 0 <= rot_index < NUM_ROTATIONS:
        raise ValueError(f"Rotation index must be 0-23, got {rot_index}")
    return ROTATION_MATRICES[rot_index]


def rotation_index(matrix) -> int:
    """Exact group index of an (almost) integer rotation matrix."""
    key = tuple(np.rint(np.asarray(matrix, dtype=float)).astype(int).flatten().tolist())
    if key not in _INDEX_BY_MATRIX:
        raise ValueError(f"Matrix is not a right-angle rotation: {np.asarray(matrix).tolist()}")
    return _INDEX_BY_MATRIX[key]


def rotate_offset(offset: Vec3, rot_index: int) -> Vec3:
    """Rotate an integer offset, rounding the continuous result to the nearest cell."""
    v = get_rotation_matrix(rot_index) @ offset.to_array()
    r = np.rint(v).astype(int)
    return Vec3(int(r[0]), int(r[1]), int(r[2]))


def compose_rotations(outer: int, inner: int) -> int:
    """Index of ``outer`` applied after ``inner``."""
    return _INDEX_BY_MATRIX[tuple((get_rotation_matrix(outer) @ get_rotation_matrix(inner)).flatten().tolist())]


def inverse_rotation(rot_index: int) -> int:
    return rotation_index(get_rotation_matrix(rot_index).T)


class Axis(Enum):
    """World axes a held shape can be turned about."""
    X = "x"
    Y = "y"
    Z = "z"

    @property
    def vector(self) -> np.ndarray:
        return {
            Axis.X: np.array([1.0, 0.0, 0.0]),
            Axis.Y: np.array([0.0, 1.0, 0.0]),
            Axis.Z: np.array([0.0, 0.0, 1.0]),
        }[self]


def axis_angle_matrix(axis: Union[Axis, Sequence[float]], degrees: float) -> np.ndarray:
    """Right-handed rotation about an arbitrary axis (Rodrigues' formula)."""
    a = axis.vector if isinstance(axis, Axis) else np.asarray(axis, dtype=float)
    norm = np.linalg.norm(a)
    if norm == 0:
        raise ValueError("Rotation axis must be non-zero")
    a = a / norm
    theta = np.radians(degrees)
    K = np.array([
        [0.0, -a[2], a[1]],
        [a[2], 0.0, -a[0]],
        [-a[1], a[0], 0.0]
    ])
    return np.eye(3) + np.sin(theta) * K + (1.0 - np.cos(theta)) * (K @ K)


def nearest_rotation(matrix) -> int:
    """
    Group element closest to an arbitrary 3x3 matrix.

    Maximises trace(R_g^T M), which for orthonormal input picks the rotation
    with the smallest geodesic distance. Ties resolve to the lowest index.
    """
    m = np.asarray(matrix, dtype=float)
    scores = [float(np.trace(R.T @ m)) for R in ROTATION_MATRICES]
    return int(np.argmax(scores))


# --- Quaternions (w, x, y, z) ---

def matrix_to_quaternion(matrix) -> np.ndarray:
    m = np.asarray(matrix, dtype=float)
    tr = m[0, 0] + m[1, 1] + m[2, 2]
    if tr > 0:
        s = np.sqrt(tr + 1.0) * 2.0
        q = [0.25 * s, (m[2, 1] - m[1, 2]) / s, (m[0, 2] - m[2, 0]) / s, (m[1, 0] - m[0, 1]) / s]
    elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = np.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2]) * 2.0
        q = [(m[2, 1] - m[1, 2]) / s, 0.25 * s, (m[0, 1] + m[1, 0]) / s, (m[0, 2] + m[2, 0]) / s]
    elif m[1, 1] > m[2, 2]:
        s = np.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2]) * 2.0
        q = [(m[0, 2] - m[2, 0]) / s, (m[0, 1] + m[1, 0]) / s, 0.25 * s, (m[1, 2] + m[2, 1]) / s]
    else:
        s = np.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1]) * 2.0
        q = [(m[1, 0] - m[0, 1]) / s, (m[0, 2] + m[2, 0]) / s, (m[1, 2] + m[2, 1]) / s, 0.25 * s]
    q = np.array(q, dtype=float)
    return q / np.linalg.norm(q)


ROTATION_QUATERNIONS = [matrix_to_quaternion(R) for R in ROTATION_MATRICES]


def rotation_to_quaternion(rot_index: int) -> np.ndarray:
    return ROTATION_QUATERNIONS[rot_index].copy()


def nearest_rotation_from_quaternion(q) -> int:
    q = np.asarray(q, dtype=float)
    norm = np.linalg.norm(q)
    if not np.isfinite(norm) or norm == 0.0:
        raise ValueError(f"Quaternion must be finite and non-zero, got {q.tolist()}")
    q = q / norm
    scores = [abs(float(np.dot(q, g))) for g in ROTATION_QUATERNIONS]
    return int(np.argmax(scores))


def slerp(q0, q1, t: float) -> np.ndarray:
    """Spherical interpolation along the shorter arc."""
    q0 = np.asarray(q0, dtype=float)
    q1 = np.asarray(q1, dtype=float)
    dot = float(np.dot(q0, q1))
    if dot < 0.0:
        q1 = -q1
        dot = -dot
    if dot > 0.9995:
        result = q0 + t * (q1 - q0)
        return result / np.linalg.norm(result)
    theta_0 = np.arccos(dot)
    theta = theta_0 * t
    s0 = np.sin(theta_0 - theta) / np.sin(theta_0)
    s1 = np.sin(theta) / np.sin(theta_0)
    return s0 * q0 + s1 * q1


def smoothstep(t: float) -> float:
    """Ease-in/ease-out curve t^2 (3 - 2t), with t clamped to [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    return t * t * (3.0 - 2.0 * t)


# --- Euler angles (degrees) ---
# Composition order: z about Z first, then x about X, then y about Y,
# i.e. R = Ry(y) @ Rx(x) @ Rz(z).

def euler_to_matrix(euler: Sequence[float]) -> np.ndarray:
    ex, ey, ez = (float(a) for a in euler)
    return (axis_angle_matrix(Axis.Y, ey)
            @ axis_angle_matrix(Axis.X, ex)
            @ axis_angle_matrix(Axis.Z, ez))


def _build_euler_table() -> List[Tuple[float, float, float]]:
    table: Dict[int, Tuple[float, float, float]] = {}
    right_angles = (0.0, 90.0, 180.0, 270.0)
    for ex in right_angles:
        for ey in right_angles:
            for ez in right_angles:
                idx = rotation_index(euler_to_matrix((ex, ey, ez)))
                table.setdefault(idx, (ex, ey, ez))
    return [table[i] for i in range(NUM_ROTATIONS)]


_EULER_BY_INDEX = _build_euler_table()


def rotation_to_euler(rot_index: int) -> Tuple[float, float, float]:
    """Euler angles of a group element; each component is 0, 90, 180 or 270."""
    get_rotation_matrix(rot_index)
    return _EULER_BY_INDEX[rot_index]


def snap_euler_angles(euler: Sequence[float]) -> int:
    """
    Nearest group element to an Euler orientation in degrees.

    The angles are composed into a matrix first, so the result does not
    depend on rounding each axis on its own.
    """
    return nearest_rotation(euler_to_matrix(euler))


Orientation = Union[int, Sequence[float], np.ndarray]


def snap_to_right_angles(orientation: Orientation) -> int:
    """
    Convert any orientation into the nearest right-angle rotation index.

    Accepts a rotation index, a quaternion (w, x, y, z), a 3x3 matrix, or Euler
    angles in degrees. Every form snaps to the nearest group element.
    """
    if isinstance(orientation, (int, np.integer)):
        get_rotation_matrix(int(orientation))
        return int(orientation)

    arr = np.asarray(orientation, dtype=float)
    if arr.shape == (3, 3):
        return nearest_rotation(arr)
    if arr.shape == (4,):
        return nearest_rotation_from_quaternion(arr)
    if arr.shape == (3,):
        return snap_euler_angles(arr)
    raise ValueError(f"Unsupported orientation shape: {arr.shape}")


def rotate_about_axis(rot_index: int, axis: Axis, degrees: float = 90.0) -> int:
    """Turn a rotation about a world axis and snap the result back into the group."""
    turned = axis_angle_matrix(axis, degrees) @ get_rotation_matrix(rot_index)
    return nearest_rotation(turned)
