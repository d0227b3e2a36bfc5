"""
Rendering engine: Views -> one SVG document.

For every view the combined camera matrix is computed once; every mesh of
the view's scene then goes through the pipeline (pipeline.py) and becomes
one <g> in the document. Groups are appended in (view, mesh) input order,
which is also their stacking order in the output: later groups paint over
earlier ones regardless of depth.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import svgwrite

from mesh_svg import config as cfg
from mesh_svg.config import StyleValue
from mesh_svg.geometry.camera import Matrix4
from mesh_svg.geometry.viewport import Viewport
from mesh_svg.logging_config import log_timing
from mesh_svg.render.pipeline import ProjectedFace, process_faces
from mesh_svg.render.svg_writer import create_document, group_style, render_mesh_group
from mesh_svg.scene.model import Mesh, View

logger = logging.getLogger(__name__)


@dataclass
class DocumentSettings:
    """Fixed properties of the output document."""
    view_box: Tuple[float, float, float, float] = cfg.DOCUMENT_VIEW_BOX
    width: int = cfg.DOCUMENT_WIDTH_PX
    height: int = cfg.DOCUMENT_HEIGHT_PX
    base_style: Dict[str, StyleValue] = field(
        default_factory=lambda: dict(cfg.DEFAULT_GROUP_STYLE)
    )


class Engine:
    """Renders a sequence of views into a single SVG document.

    Args:
        views: shots to render, in output order.
        settings: document view-box, pixel size and base group style.
    """

    def __init__(
        self,
        views: Sequence[View],
        settings: Optional[DocumentSettings] = None,
    ) -> None:
        self.views: List[View] = list(views)
        self.settings = settings or DocumentSettings()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def render(self, filename: str = "noname.svg") -> svgwrite.Drawing:
        """Build the document in memory.

        Args:
            filename: path stored in the Drawing, used by ``Drawing.save()``.

        Returns:
            svgwrite.Drawing with one group per (view, mesh).
        """
        s = self.settings
        dwg = create_document(filename, s.view_box, s.width, s.height)

        with log_timing(logger, "Rendering document", views=len(self.views)):
            for view_idx, view in enumerate(self.views):
                projection = view.camera.combined_projection()
                logger.debug("View %d: %d meshes", view_idx, len(view.scene))
                for mesh_idx, mesh in enumerate(view.scene):
                    group = self.create_group(dwg, projection, view.viewport, mesh)
                    dwg.add(group)
                    logger.debug(
                        "View %d, mesh %d (%s): %d faces -> %d polygons",
                        view_idx, mesh_idx, mesh.name or "unnamed",
                        len(mesh), len(group.elements),
                    )

        return dwg

    def create_group(
        self,
        dwg: svgwrite.Drawing,
        projection: Matrix4,
        viewport: Viewport,
        mesh: Mesh,
    ) -> svgwrite.container.Group:
        """Pipeline + emission for one mesh."""
        faces = self.project_mesh(projection, viewport, mesh)
        style = group_style(mesh.style, self.settings.base_style)
        return render_mesh_group(dwg, faces, style, mesh.styler)

    @staticmethod
    def project_mesh(
        projection: Matrix4,
        viewport: Viewport,
        mesh: Mesh,
    ) -> List[ProjectedFace]:
        """Front-facing faces of ``mesh`` in far-to-near order."""
        return process_faces(mesh.faces, projection, viewport)

    def to_string(self) -> str:
        """Serialized SVG text of a fresh render."""
        return self.render().tostring()

    def save(self, filename: Union[str, Path], pretty: bool = False) -> str:
        """Render and write the document in one go.

        Raises:
            OSError: if the file cannot be written; nothing is retried.
        """
        filename = str(filename)
        dwg = self.render(filename)
        dwg.save(pretty=pretty)
        logger.info("SVG saved: %s", filename)
        return filename
