"""
Per-face styling.

A FaceStyler returns SVG presentation attributes for one emitted polygon,
given the face's index in its mesh and its winding (signed doubled area in
output coordinates, always > 0 for emitted faces).

Variants:
- ConstantStyler — same attributes for every face
- WindingStyler  — fill interpolated between two colors by winding magnitude
- PaletteStyler  — colors cycled by face index
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Tuple

from mesh_svg.config import StyleValue

StyleAttributes = Dict[str, StyleValue]


def _parse_hex(color: str) -> Tuple[int, int, int]:
    """'#rrggbb' or '#rgb' -> (r, g, b)."""
    value = color.lstrip('#')
    if len(value) == 3:
        value = ''.join(c * 2 for c in value)
    if len(value) != 6:
        raise ValueError(f"Invalid hex color: {color!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def _to_hex(rgb: Tuple[float, float, float]) -> str:
    r, g, b = (max(0, min(255, int(round(c)))) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


class FaceStyler(ABC):
    """Style capability attached to a mesh."""

    @abstractmethod
    def style(self, face_index: int, winding: float) -> StyleAttributes:
        """Attributes for the polygon of face ``face_index``."""


class ConstantStyler(FaceStyler):
    """Every face gets the same attributes."""

    def __init__(self, **attributes: StyleValue):
        # kwargs use underscores; SVG attribute names use hyphens
        self.attributes: StyleAttributes = {
            key.replace('_', '-'): value for key, value in attributes.items()
        }

    def style(self, face_index: int, winding: float) -> StyleAttributes:
        return dict(self.attributes)


class WindingStyler(FaceStyler):
    """Shade faces by how much screen area they cover.

    The fill is interpolated from ``low_color`` (winding 0) to
    ``high_color`` (winding >= ``max_winding``). Faces seen edge-on
    have small windings and come out close to ``low_color``.
    """

    def __init__(
        self,
        low_color: str = "#404040",
        high_color: str = "#ffffff",
        max_winding: float = 0.1,
    ):
        if max_winding <= 0:
            raise ValueError(f"max_winding must be positive, got {max_winding}")
        self.low = _parse_hex(low_color)
        self.high = _parse_hex(high_color)
        self.max_winding = max_winding

    def style(self, face_index: int, winding: float) -> StyleAttributes:
        t = winding / self.max_winding
        if not t > 0.0:  # also catches NaN
            t = 0.0
        t = min(t, 1.0)
        rgb = tuple(lo + (hi - lo) * t for lo, hi in zip(self.low, self.high))
        return {'fill': _to_hex(rgb)}


class PaletteStyler(FaceStyler):
    """Fill faces with colors taken in turn from a palette."""

    def __init__(self, colors: Sequence[str], stroke: Optional[str] = None):
        if not colors:
            raise ValueError("Palette must contain at least one color")
        self.colors = list(colors)
        self.stroke = stroke

    def style(self, face_index: int, winding: float) -> StyleAttributes:
        attrs: StyleAttributes = {'fill': self.colors[face_index % len(self.colors)]}
        if self.stroke is not None:
            attrs['stroke'] = self.stroke
        return attrs
