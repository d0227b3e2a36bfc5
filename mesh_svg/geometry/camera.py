"""
Pinhole camera: right-handed look-at view transform plus perspective projection.

Matrices act on column vectors: ``clip = P @ V @ [x, y, z, 1]``.
The projection follows the OpenGL convention, mapping the view frustum to
the [-1, 1] cube with the camera looking down its -Z axis.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from mesh_svg import config as cfg

logger = logging.getLogger(__name__)

Matrix4 = NDArray[np.float64]


def _normalize(v: NDArray[np.float64]) -> NDArray[np.float64]:
    # Zero-length input yields NaN components; degenerate cameras are a caller error.
    with np.errstate(invalid='ignore', divide='ignore'):
        return v / np.linalg.norm(v)


def look_at_rh(
    eye: Sequence[float],
    target: Sequence[float],
    up: Sequence[float],
) -> Matrix4:
    """World -> camera isometry for an observer at ``eye`` looking at ``target``.

    The camera's +Z axis points from target to eye, +X is ``up x z`` and
    +Y completes the right-handed frame.

    Returns:
        4x4 homogeneous view matrix.
    """
    eye = np.asarray(eye, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)
    up = np.asarray(up, dtype=np.float64)

    z_axis = _normalize(eye - target)
    x_axis = _normalize(np.cross(up, z_axis))
    y_axis = np.cross(z_axis, x_axis)

    rotation = np.vstack([x_axis, y_axis, z_axis])

    view = np.eye(4)
    view[:3, :3] = rotation
    view[:3, 3] = -rotation @ eye
    return view


def perspective(fovy_deg: float, aspect: float, near: float, far: float) -> Matrix4:
    """Camera -> clip space perspective matrix.

    Args:
        fovy_deg: vertical field of view, degrees, in (0, 180).
        aspect: width / height, > 0.
        near, far: clip distances, ``0 < near < far``.

    Returns:
        4x4 projection matrix; clip w equals the point's distance in front
        of the camera.
    """
    near = np.float64(near)
    far = np.float64(far)

    # Out-of-range parameters give inf/NaN entries rather than an exception.
    with np.errstate(divide='ignore', invalid='ignore'):
        f = 1.0 / np.tan(math.radians(fovy_deg) / 2.0)

        proj = np.zeros((4, 4))
        proj[0, 0] = f / np.float64(aspect)
        proj[1, 1] = f
        proj[2, 2] = (far + near) / (near - far)
        proj[2, 3] = 2.0 * far * near / (near - far)
        proj[3, 2] = -1.0
    return proj


@dataclass(frozen=True, eq=False)
class Camera:
    """View transform and perspective projection of one shot.

    Preconditions (not checked): ``0 < near < far``, ``aspect > 0``,
    ``0 < fovy < 180`` degrees. Violations yield meaningless geometry,
    not an exception.
    """
    fovy: float
    aspect: float
    near: float
    far: float
    eye: NDArray[np.float64]
    target: NDArray[np.float64]
    up: NDArray[np.float64]
    view_matrix: Matrix4 = field(init=False, repr=False)
    projection_matrix: Matrix4 = field(init=False, repr=False)

    def __post_init__(self):
        eye = np.asarray(self.eye, dtype=np.float64)
        target = np.asarray(self.target, dtype=np.float64)
        up = np.asarray(self.up, dtype=np.float64)
        # frozen dataclass: bypass __setattr__ for derived fields
        object.__setattr__(self, 'eye', eye)
        object.__setattr__(self, 'target', target)
        object.__setattr__(self, 'up', up)
        object.__setattr__(self, 'view_matrix', look_at_rh(eye, target, up))
        object.__setattr__(
            self, 'projection_matrix',
            perspective(self.fovy, self.aspect, self.near, self.far),
        )

    @classmethod
    def create(
        cls,
        fovy: float = cfg.CAMERA_FOVY_DEG,
        aspect: float = cfg.CAMERA_ASPECT,
        near: float = cfg.CAMERA_NEAR,
        far: float = cfg.CAMERA_FAR,
        eye: Sequence[float] = cfg.CAMERA_EYE,
        target: Sequence[float] = cfg.CAMERA_TARGET,
        up: Sequence[float] = cfg.CAMERA_UP,
    ) -> 'Camera':
        """Build a camera, falling back to the configured defaults."""
        camera = cls(
            fovy=float(fovy),
            aspect=float(aspect),
            near=float(near),
            far=float(far),
            eye=np.asarray(eye, dtype=np.float64),
            target=np.asarray(target, dtype=np.float64),
            up=np.asarray(up, dtype=np.float64),
        )
        logger.debug(
            "Camera: eye=%s target=%s fovy=%.1f near=%.3g far=%.3g",
            camera.eye.tolist(), camera.target.tolist(), fovy, near, far,
        )
        return camera

    def combined_projection(self) -> Matrix4:
        """World -> clip space in one multiplication (projection @ view)."""
        return self.projection_matrix @ self.view_matrix
