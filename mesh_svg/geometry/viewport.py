"""Mapping from normalized device coordinates to document units."""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from mesh_svg import config as cfg


@dataclass(frozen=True)
class Viewport:
    """Axis-aligned output rectangle (document units), independent of the camera."""
    minx: float = cfg.VIEWPORT_MIN_X
    miny: float = cfg.VIEWPORT_MIN_Y
    width: float = cfg.VIEWPORT_WIDTH
    height: float = cfg.VIEWPORT_HEIGHT

    def map_points(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        """Map NDC points (..., 3) to output space, keeping z.

        Y is flipped: NDC grows upward, SVG grows downward.
        """
        out = np.array(points, dtype=np.float64, copy=True)
        with np.errstate(invalid='ignore', over='ignore'):
            out[..., 0] = (1.0 + out[..., 0]) * self.width / 2.0 + self.minx
            out[..., 1] = (1.0 - out[..., 1]) * self.height / 2.0 + self.miny
        return out

    def map_xy(self, x: float, y: float) -> Tuple[float, float]:
        """Map a single NDC (x, y) pair; convenience for callers and tests."""
        mapped = self.map_points(np.array([x, y, 0.0]))
        return float(mapped[0]), float(mapped[1])
