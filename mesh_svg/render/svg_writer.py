"""
SVG output for rendered meshes.

Contains:
- create_document   — svgwrite.Drawing with the fixed view-box and pixel size
- group_style       — default group attributes merged with a mesh's style
- polygon_coords    — corner pairs for a <polygon>
- render_mesh_group — one <g> of <polygon> elements per (view, mesh)
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import svgwrite

from mesh_svg import config as cfg
from mesh_svg.config import StyleValue
from mesh_svg.render.pipeline import ProjectedFace
from mesh_svg.scene.styling import FaceStyler

logger = logging.getLogger(__name__)


def _filter_svg_attrs(style: Mapping[str, StyleValue]) -> Dict[str, StyleValue]:
    """Drop internal keys (leading underscore) before handing attrs to svgwrite.

    svgwrite rewrites underscores to hyphens, so '_source' would become the
    invalid attribute name '-source'.
    """
    return {k: v for k, v in style.items() if not k.startswith('_')}


def _format_number(value: float) -> str:
    # Shortest round-trip repr; non-finite values come out as inf/-inf/nan.
    return repr(float(value))


def polygon_coords(xy: np.ndarray) -> List[Tuple[float, float]]:
    """Plain-float (x, y) pairs for svgwrite, which formats them with %s."""
    return [(float(x), float(y)) for x, y in xy]


def group_style(mesh_style: Optional[Mapping[str, StyleValue]] = None,
                base: Optional[Mapping[str, StyleValue]] = None) -> Dict[str, StyleValue]:
    """Group attributes: ``base`` (defaults) overridden key-by-key by the mesh."""
    style: Dict[str, StyleValue] = dict(cfg.DEFAULT_GROUP_STYLE if base is None else base)
    if mesh_style:
        style.update(mesh_style)
    return _filter_svg_attrs(style)


def create_document(
    filename: str = "noname.svg",
    view_box: Sequence[float] = cfg.DOCUMENT_VIEW_BOX,
    width: int = cfg.DOCUMENT_WIDTH_PX,
    height: int = cfg.DOCUMENT_HEIGHT_PX,
) -> svgwrite.Drawing:
    """Empty SVG document with the given view-box and pixel size."""
    return svgwrite.Drawing(
        filename,
        size=(width, height),
        viewBox=" ".join(_format_number(v) for v in view_box),
        debug=False,
    )


def render_mesh_group(
    dwg: svgwrite.Drawing,
    faces: Iterable[ProjectedFace],
    style: Mapping[str, StyleValue],
    styler: Optional[FaceStyler] = None,
) -> svgwrite.container.Group:
    """Build the SVG group for one mesh.

    Args:
        dwg: SVG document (element factory).
        faces: front-facing faces, already in drawing order.
        style: group-level presentation attributes.
        styler: optional per-face style; without it polygons carry only points.

    Returns:
        The group; the caller adds it to the document.
    """
    group = dwg.g(**_filter_svg_attrs(style))
    count = 0
    for face in faces:
        polygon = dwg.polygon(points=polygon_coords(face.xy))
        if styler is not None:
            for key, value in _filter_svg_attrs(styler.style(face.index, face.winding)).items():
                polygon[key] = value
        group.add(polygon)
        count += 1

    logger.debug("Group built: %d polygons", count)
    return group
