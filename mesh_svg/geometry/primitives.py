"""
Points, vectors and triangular faces.

A face is stored by value as a (3, 3) float64 array of its corner points in
authored winding order; a mesh's faces form an (M, 3, 3) array. There is no
shared-vertex topology at render time.
"""

from typing import Sequence, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

Point3 = NDArray[np.float64]
Vector3 = NDArray[np.float64]
Face = NDArray[np.float64]
FaceArray = NDArray[np.float64]


class MeshFormatError(ValueError):
    """Faces or indexed triangles that do not describe triangles."""


def point3(x: float, y: float, z: float) -> Point3:
    """Build a position."""
    return np.array([x, y, z], dtype=np.float64)


def vector3(x: float, y: float, z: float) -> Vector3:
    """Build a direction/offset."""
    return np.array([x, y, z], dtype=np.float64)


def as_faces(faces: Union[ArrayLike, Sequence[Sequence[Sequence[float]]]]) -> FaceArray:
    """Convert input to an (M, 3, 3) float64 array.

    An empty input gives an array of shape (0, 3, 3).

    Raises:
        MeshFormatError: if any face does not consist of exactly 3 points
            with 3 coordinates each.
    """
    try:
        arr = np.asarray(faces, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise MeshFormatError(f"Faces are not a regular array of points: {exc}") from exc

    if arr.size == 0:
        return np.zeros((0, 3, 3), dtype=np.float64)
    if arr.ndim == 2 and arr.shape == (3, 3):
        arr = arr[np.newaxis]
    if arr.ndim != 3 or arr.shape[1:] != (3, 3):
        raise MeshFormatError(
            f"Expected faces of shape (M, 3, 3), got {arr.shape}"
        )
    return arr


def faces_from_indexed(vertices: ArrayLike, triangles: ArrayLike) -> FaceArray:
    """Expand an indexed (vertices, triangles) mesh into faces by value.

    Args:
        vertices: array of shape (N, 3).
        triangles: array of shape (M, 3) of vertex indices.

    Returns:
        Faces of shape (M, 3, 3).

    Raises:
        MeshFormatError: on wrong shapes or indices outside ``[0, N)``.
    """
    verts = np.asarray(vertices, dtype=np.float64)
    tris = np.asarray(triangles)

    if tris.size == 0:
        return np.zeros((0, 3, 3), dtype=np.float64)
    if verts.ndim != 2 or verts.shape[1] != 3:
        raise MeshFormatError(f"Expected vertices of shape (N, 3), got {verts.shape}")
    if tris.ndim != 2 or tris.shape[1] != 3:
        raise MeshFormatError(f"Expected triangles of shape (M, 3), got {tris.shape}")
    if not np.issubdtype(tris.dtype, np.integer):
        raise MeshFormatError(f"Triangle indices must be integers, got {tris.dtype}")
    if tris.min() < 0 or tris.max() >= len(verts):
        raise MeshFormatError(
            f"Triangle index out of range [0, {len(verts)}): "
            f"min={int(tris.min())}, max={int(tris.max())}"
        )

    return verts[tris]


def winding(face: ArrayLike) -> float:
    """Signed area (times two) of a face in the XY plane.

    The z-component of ``(p2 - p1) x (p3 - p1)``; positive for
    counter-clockwise corners in the coordinate frame of the points.
    """
    p1, p2, p3 = np.asarray(face, dtype=np.float64)[:, :2]
    e1 = p2 - p1
    e2 = p3 - p1
    return float(e1[0] * e2[1] - e1[1] * e2[0])


def windings(faces: FaceArray) -> NDArray[np.float64]:
    """Vectorized :func:`winding` for an (M, 3, >=2) array."""
    e1 = faces[:, 1, :2] - faces[:, 0, :2]
    e2 = faces[:, 2, :2] - faces[:, 0, :2]
    with np.errstate(invalid='ignore', over='ignore'):
        return e1[:, 0] * e2[:, 1] - e1[:, 1] * e2[:, 0]


def centroid_depths(faces: FaceArray) -> NDArray[np.float64]:
    """Mean z of the three corners of every face."""
    with np.errstate(invalid='ignore', over='ignore'):
        return faces[:, :, 2].sum(axis=1) / 3.0
