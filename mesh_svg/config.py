"""
Built-in defaults for mesh_svg.

Values here are the fallbacks used when neither a project config file
(see project_config.py) nor CLI arguments override them.
"""

from typing import Dict, Tuple, Union

StyleValue = Union[str, float, int]

# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

# (min-x, min-y, width, height) of the SVG viewBox
DOCUMENT_VIEW_BOX: Tuple[float, float, float, float] = (-0.5, -0.5, 1.0, 1.0)

# Pixel size written to the width/height attributes
DOCUMENT_WIDTH_PX = 512
DOCUMENT_HEIGHT_PX = 512

# ---------------------------------------------------------------------------
# Viewport (NDC -> document units)
# ---------------------------------------------------------------------------

VIEWPORT_MIN_X = -0.5
VIEWPORT_MIN_Y = -0.5
VIEWPORT_WIDTH = 1.0
VIEWPORT_HEIGHT = 1.0

# ---------------------------------------------------------------------------
# Group style applied to every mesh group
# ---------------------------------------------------------------------------

DEFAULT_GROUP_STYLE: Dict[str, StyleValue] = {
    'fill': 'white',
    'fill-opacity': 1.0,
    'stroke': 'black',
    'stroke-linejoin': 'round',
    'stroke-width': 0.005,
}

# ---------------------------------------------------------------------------
# Camera
# ---------------------------------------------------------------------------

CAMERA_FOVY_DEG = 15.0
CAMERA_ASPECT = 1.0
CAMERA_NEAR = 10.0
CAMERA_FAR = 100.0
CAMERA_EYE: Tuple[float, float, float] = (13.0, 2.0, 20.0)
CAMERA_TARGET: Tuple[float, float, float] = (0.0, 0.0, 0.0)
CAMERA_UP: Tuple[float, float, float] = (0.0, 1.0, 0.0)

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

DEFAULT_SHAPE = "octahedron"
DEFAULT_MODEL_SCALE = 15.0

# Faces with |cross product| below this are reported as degenerate
DEGENERATE_AREA_EPS = 1e-12

# Project config file searched for next to the model, in cwd and in $HOME
CONFIG_FILENAME = ".meshsvg.json"
