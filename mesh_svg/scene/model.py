"""
Scene graph: Mesh -> Scene -> View.

Ownership is plain: a View owns its Scene, a Scene owns its Meshes, a Mesh
owns its faces by value. Nothing is mutated during rendering.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from mesh_svg.config import StyleValue
from mesh_svg.geometry.camera import Camera
from mesh_svg.geometry.primitives import FaceArray, as_faces
from mesh_svg.geometry.viewport import Viewport
from mesh_svg.scene.styling import FaceStyler


@dataclass(eq=False)
class Mesh:
    """Ordered triangular faces plus group style and an optional face styler.

    Attributes:
        faces: (M, 3, 3) corner points in authored winding order.
        style: SVG attributes overriding the default group style.
        styler: per-polygon style capability, None for plain output.
        name: label used in logs.
    """
    faces: FaceArray
    style: Dict[str, StyleValue] = field(default_factory=dict)
    styler: Optional[FaceStyler] = None
    name: str = ""

    def __post_init__(self):
        self.faces = as_faces(self.faces).copy()
        self.faces.setflags(write=False)

    def __len__(self) -> int:
        return len(self.faces)


@dataclass
class Scene:
    """Meshes sharing one coordinate space."""
    meshes: List[Mesh] = field(default_factory=list)

    def add(self, mesh: Mesh) -> 'Scene':
        self.meshes.append(mesh)
        return self

    def __iter__(self) -> Iterator[Mesh]:
        return iter(self.meshes)

    def __len__(self) -> int:
        return len(self.meshes)


@dataclass
class View:
    """One shot: camera, scene and the viewport it is drawn into."""
    camera: Camera
    scene: Scene
    viewport: Viewport = field(default_factory=Viewport)
