"""Render pipeline, SVG emission and the orchestrating Engine."""

from mesh_svg.render.engine import DocumentSettings, Engine
from mesh_svg.render.pipeline import (
    ProjectedFace,
    depth_order,
    map_to_viewport,
    perspective_divide,
    process_faces,
    project_faces,
    transform_faces,
)

__all__ = [
    "DocumentSettings",
    "Engine",
    "ProjectedFace",
    "depth_order",
    "map_to_viewport",
    "perspective_divide",
    "process_faces",
    "project_faces",
    "transform_faces",
]
