"""Scene description: meshes, scenes, views and face stylers."""

from mesh_svg.scene.model import Mesh, Scene, View
from mesh_svg.scene.styling import (
    ConstantStyler,
    FaceStyler,
    PaletteStyler,
    StyleAttributes,
    WindingStyler,
)

__all__ = [
    "ConstantStyler",
    "FaceStyler",
    "Mesh",
    "PaletteStyler",
    "Scene",
    "StyleAttributes",
    "View",
    "WindingStyler",
]
