"""
Per-mesh render pipeline.

Stages, applied to all faces of a mesh at once:
  1. to_homogeneous     — append w=1 to every corner
  2. project_faces      — multiply by the combined camera matrix (clip space)
  3. perspective_divide — (x/w, y/w, z/w), no clipping
  4. map_to_viewport    — NDC -> document units, z kept for ordering
  5. depth_order        — ascending centroid depth, then reversed
  6. cull               — keep faces with strictly positive winding

Known limitations, kept on purpose:
  - no frustum clipping: points at or behind the eye plane (w <= 0) divide
    into inf/NaN and travel through the rest of the pipeline;
  - ordering is per mesh, interpenetrating meshes are not resolved.
"""

import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import List

import numpy as np
from numpy.typing import NDArray

from mesh_svg.geometry.camera import Matrix4
from mesh_svg.geometry.primitives import FaceArray, centroid_depths, windings
from mesh_svg.geometry.viewport import Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ProjectedFace:
    """A face after viewport mapping, ready for emission.

    Attributes:
        index: position of the face in its mesh's input order.
        points: (3, 3) mapped corners; columns x, y in document units, z depth.
        winding: signed doubled area of the mapped (x, y) triangle.
        depth: centroid depth (mean mapped z).
    """
    index: int
    points: NDArray[np.float64]
    winding: float
    depth: float

    @property
    def xy(self) -> NDArray[np.float64]:
        """(3, 2) corner coordinates for drawing."""
        return self.points[:, :2]


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def to_homogeneous(faces: FaceArray) -> NDArray[np.float64]:
    """(M, 3, 3) -> (M, 3, 4) with w = 1."""
    ones = np.ones(faces.shape[:-1] + (1,), dtype=np.float64)
    return np.concatenate([faces, ones], axis=-1)


def project_faces(faces: FaceArray, projection: Matrix4) -> NDArray[np.float64]:
    """World-space faces -> clip-space (x, y, z, w) per corner."""
    with np.errstate(invalid='ignore', over='ignore'):
        return to_homogeneous(faces) @ projection.T


def perspective_divide(clip: NDArray[np.float64]) -> NDArray[np.float64]:
    """Clip space -> NDC.

    w == 0 gives ±inf (or NaN for 0/0), negative w flips the point; neither
    is reported. Callers that need finite output must keep geometry in
    front of the camera.
    """
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        return clip[..., :3] / clip[..., 3:4]


def map_to_viewport(ndc: NDArray[np.float64], viewport: Viewport) -> NDArray[np.float64]:
    """NDC -> document units; z is passed through."""
    return viewport.map_points(ndc)


def _compare_depth(a: float, b: float) -> int:
    # NaN compares neither less nor greater: treated as equal.
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def depth_order(depths: NDArray[np.float64]) -> List[int]:
    """Face indices in drawing order: farthest centroid first.

    Sorted ascending by depth with a stable sort, then reversed, so ties
    come out in reverse input order.
    """
    values = [float(d) for d in depths]
    ascending = sorted(
        range(len(values)),
        key=cmp_to_key(lambda i, j: _compare_depth(values[i], values[j])),
    )
    ascending.reverse()
    return ascending


def is_front_facing(winding: float) -> bool:
    """Counter-clockwise in output coordinates; zero and NaN are dropped."""
    return winding > 0.0


# ---------------------------------------------------------------------------
# Whole mesh
# ---------------------------------------------------------------------------

def transform_faces(
    faces: FaceArray,
    projection: Matrix4,
    viewport: Viewport,
) -> NDArray[np.float64]:
    """Stages 1–4: world-space faces to mapped (x, y, depth) corners."""
    clip = project_faces(faces, projection)
    ndc = perspective_divide(clip)
    return map_to_viewport(ndc, viewport)


def process_faces(
    faces: FaceArray,
    projection: Matrix4,
    viewport: Viewport,
) -> List[ProjectedFace]:
    """Run the full pipeline over a mesh's faces.

    Args:
        faces: (M, 3, 3) world-space faces.
        projection: combined camera matrix (projection @ view).
        viewport: output rectangle.

    Returns:
        Front-facing faces in far-to-near order.
    """
    if len(faces) == 0:
        return []

    mapped = transform_faces(faces, projection, viewport)
    depths = centroid_depths(mapped)
    face_windings = windings(mapped)

    result: List[ProjectedFace] = []
    culled = 0
    for i in depth_order(depths):
        w = float(face_windings[i])
        if not is_front_facing(w):
            culled += 1
            continue
        result.append(ProjectedFace(
            index=i,
            points=mapped[i],
            winding=w,
            depth=float(depths[i]),
        ))

    n_nonfinite = int(np.count_nonzero(~np.isfinite(mapped).all(axis=(1, 2))))
    if n_nonfinite:
        logger.debug("%d faces have non-finite projected coordinates", n_nonfinite)
    logger.debug("Pipeline: %d faces in, %d emitted, %d culled",
                 len(faces), len(result), culled)
    return result
