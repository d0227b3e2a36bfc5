"""Standard solids (cube, octahedron, icosahedron) and face transforms."""

from mesh_svg.shapes.polyhedra import (
    SHAPES,
    cube,
    get_shape,
    icosahedron,
    octahedron,
    reverse_winding,
    scale_faces,
    translate_faces,
)

__all__ = [
    "SHAPES",
    "cube",
    "get_shape",
    "icosahedron",
    "octahedron",
    "reverse_winding",
    "scale_faces",
    "translate_faces",
]
