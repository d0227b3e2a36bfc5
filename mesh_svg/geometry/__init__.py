"""Geometry: faces, winding, camera matrices and viewport mapping."""

from mesh_svg.geometry.camera import Camera, look_at_rh, perspective
from mesh_svg.geometry.primitives import (
    MeshFormatError,
    as_faces,
    centroid_depths,
    faces_from_indexed,
    point3,
    vector3,
    winding,
    windings,
)
from mesh_svg.geometry.viewport import Viewport

__all__ = [
    "Camera",
    "MeshFormatError",
    "Viewport",
    "as_faces",
    "centroid_depths",
    "faces_from_indexed",
    "look_at_rh",
    "perspective",
    "point3",
    "vector3",
    "winding",
    "windings",
]
