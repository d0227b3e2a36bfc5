"""
Standard solids as face arrays.

Each generator returns faces of shape (M, 3, 3) expanded from a fixed
vertex/index table. Solids are centered at the origin with unit extent.
"""

import math
from typing import Callable, Dict

import numpy as np
from numpy.typing import ArrayLike

from mesh_svg.geometry.primitives import FaceArray, as_faces, faces_from_indexed


def cube() -> FaceArray:
    """Axis-aligned cube, edge 1, 12 faces."""
    vertices = np.array([
        [-0.5, -0.5, -0.5],
        [-0.5,  0.5, -0.5],
        [ 0.5,  0.5, -0.5],
        [ 0.5, -0.5, -0.5],
        [-0.5, -0.5,  0.5],
        [-0.5,  0.5,  0.5],
        [ 0.5,  0.5,  0.5],
        [ 0.5, -0.5,  0.5],
    ])
    triangles = np.array([
        [0, 3, 1], [1, 3, 2],
        [0, 1, 5], [0, 5, 4],
        [1, 2, 5], [6, 5, 2],
        [7, 6, 2], [7, 2, 3],
        [7, 3, 0], [4, 7, 0],
        [5, 6, 4], [4, 6, 7],
    ])
    return faces_from_indexed(vertices, triangles)


def octahedron() -> FaceArray:
    """Regular octahedron with apexes on ±Y, 8 faces."""
    f = math.sqrt(2.0) / 2.0
    vertices = np.array([
        [0.0, -1.0, 0.0],
        [-f, 0.0, f],
        [f, 0.0, f],
        [f, 0.0, -f],
        [-f, 0.0, -f],
        [0.0, 1.0, 0.0],
    ])
    triangles = np.array([
        [0, 2, 1], [0, 3, 2], [0, 4, 3], [0, 1, 4],
        [5, 1, 2], [5, 2, 3], [5, 3, 4], [5, 4, 1],
    ])
    return faces_from_indexed(vertices, triangles)


def icosahedron() -> FaceArray:
    """Regular icosahedron with apexes on ±Z, 20 faces."""
    vertices = np.array([
        [0.000, 0.000, 1.000],
        [0.894, 0.000, 0.447],
        [0.276, 0.851, 0.447],
        [-0.724, 0.526, 0.447],
        [-0.724, -0.526, 0.447],
        [0.276, -0.851, 0.447],
        [0.724, 0.526, -0.447],
        [-0.276, 0.851, -0.447],
        [-0.894, 0.000, -0.447],
        [-0.276, -0.851, -0.447],
        [0.724, -0.526, -0.447],
        [0.000, 0.000, -1.000],
    ])
    triangles = np.array([
        [0, 1, 2], [0, 2, 3], [0, 3, 4], [0, 4, 5], [0, 5, 1],
        [11, 7, 6], [11, 8, 7], [11, 9, 8], [11, 10, 9], [11, 6, 10],
        [1, 6, 2], [2, 7, 3], [3, 8, 4], [4, 9, 5], [5, 10, 1],
        [6, 7, 2], [7, 8, 3], [8, 9, 4], [9, 10, 5], [10, 6, 1],
    ])
    return faces_from_indexed(vertices, triangles)


def scale_faces(faces: ArrayLike, factor: float) -> FaceArray:
    """Uniformly scale faces about the origin."""
    return as_faces(faces) * float(factor)


def translate_faces(faces: ArrayLike, offset: ArrayLike) -> FaceArray:
    """Shift every corner by ``offset`` (3,)."""
    return as_faces(faces) + np.asarray(offset, dtype=np.float64)


def reverse_winding(faces: ArrayLike) -> FaceArray:
    """Swap the 2nd and 3rd corner of every face, flipping its orientation."""
    return as_faces(faces)[:, [0, 2, 1], :]


SHAPES: Dict[str, Callable[[], FaceArray]] = {
    "cube": cube,
    "octahedron": octahedron,
    "icosahedron": icosahedron,
}


def get_shape(name: str) -> FaceArray:
    """Faces of a named standard solid.

    Raises:
        KeyError: for an unknown name (message lists the known ones).
    """
    try:
        return SHAPES[name.lower()]()
    except KeyError:
        raise KeyError(
            f"Unknown shape {name!r}; expected one of: {', '.join(sorted(SHAPES))}"
        ) from None
