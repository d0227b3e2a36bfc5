"""
Pytest configuration and fixtures for mesh_svg.

Provides:
- STL file fixtures (binary cube, ASCII cube, empty file) built with numpy-stl
- Camera/viewport/face fixtures for pipeline tests
- Temporary output paths
- Assertion helpers for SVG output
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Tuple

import numpy as np
import pytest
from stl import mesh as stl_mesh

from mesh_svg.geometry.camera import Camera
from mesh_svg.geometry.viewport import Viewport

PROJECT_ROOT = Path(__file__).parent.parent

SVG_NS = "{http://www.w3.org/2000/svg}"


# ============================================================================
# Logging isolation
# ============================================================================

@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() between tests so caplog sees package records."""
    yield
    pkg_logger = logging.getLogger("mesh_svg")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()
    for log_filter in list(pkg_logger.filters):
        pkg_logger.removeFilter(log_filter)
    pkg_logger.setLevel(logging.NOTSET)
    pkg_logger.propagate = True


# ============================================================================
# Camera / geometry fixtures
# ============================================================================

@pytest.fixture
def front_camera() -> Camera:
    """Camera on +Z looking at the origin, Y up, fovy 90."""
    return Camera.create(fovy=90.0, aspect=1.0, near=1.0, far=100.0,
                         eye=(0.0, 0.0, 10.0), target=(0.0, 0.0, 0.0), up=(0.0, 1.0, 0.0))


@pytest.fixture
def default_camera() -> Camera:
    """Camera with the built-in defaults."""
    return Camera.create()


@pytest.fixture
def unit_viewport() -> Viewport:
    return Viewport()


@pytest.fixture
def facing_triangle() -> np.ndarray:
    """Triangle in the z=0 plane that faces the front camera after the y flip."""
    return np.array([[[0.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1.0, 0.0, 0.0]]])


@pytest.fixture
def averted_triangle() -> np.ndarray:
    """Same triangle with the opposite corner order; culled by the front camera."""
    return np.array([[[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]])


# ============================================================================
# Temporary File Fixtures
# ============================================================================

@pytest.fixture
def tmp_stl_dir(tmp_path: Path) -> Path:
    """Temporary directory for STL files created during tests."""
    return tmp_path


@pytest.fixture
def tmp_svg_path(tmp_path: Path) -> Path:
    """Temporary path for SVG output."""
    return tmp_path / "output.svg"


# ============================================================================
# STL Fixtures
# ============================================================================

@pytest.fixture
def cube_stl_path(tmp_stl_dir: Path) -> Path:
    """Binary cube STL, edge 10."""
    path = tmp_stl_dir / "cube.stl"
    create_cube_stl(path, size=10.0)
    return path


@pytest.fixture
def ascii_stl_path(tmp_stl_dir: Path) -> Path:
    """ASCII cube STL, edge 10."""
    path = tmp_stl_dir / "ascii_cube.stl"
    create_cube_stl(path, size=10.0, binary=False)
    return path


@pytest.fixture
def empty_stl_path(tmp_stl_dir: Path) -> Path:
    """Binary STL with 0 triangles."""
    path = tmp_stl_dir / "empty.stl"
    m = stl_mesh.Mesh(np.zeros(0, dtype=stl_mesh.Mesh.dtype))
    m.save(str(path))
    return path


# ============================================================================
# Helpers
# ============================================================================

CUBE_TRIANGLES = [
    [0, 1, 2], [0, 2, 3],  # bottom
    [4, 6, 5], [4, 7, 6],  # top
    [0, 5, 1], [0, 4, 5],  # front
    [2, 7, 3], [2, 6, 7],  # back
    [0, 3, 7], [0, 7, 4],  # left
    [1, 5, 6], [1, 6, 2],  # right
]


def cube_triangles(size: float = 10.0) -> np.ndarray:
    """(12, 3, 3) faces of an axis-aligned cube centered at the origin."""
    hs = size / 2
    vertices = np.array([
        [-hs, -hs, -hs], [+hs, -hs, -hs], [+hs, +hs, -hs], [-hs, +hs, -hs],
        [-hs, -hs, +hs], [+hs, -hs, +hs], [+hs, +hs, +hs], [-hs, +hs, +hs],
    ])
    return vertices[np.array(CUBE_TRIANGLES)]


def create_cube_stl(path: Path, size: float = 10.0, binary: bool = True) -> None:
    """Write a cube STL file."""
    triangles = cube_triangles(size)
    if binary:
        m = stl_mesh.Mesh(np.zeros(len(triangles), dtype=stl_mesh.Mesh.dtype))
        m.vectors[:] = triangles
        m.save(str(path))
        return

    with open(str(path), 'w') as f:
        f.write("solid cube\n")
        for tri in triangles:
            normal = np.cross(tri[1] - tri[0], tri[2] - tri[0])
            normal = normal / np.linalg.norm(normal)
            f.write(f"  facet normal {normal[0]} {normal[1]} {normal[2]}\n")
            f.write("    outer loop\n")
            for v in tri:
                f.write(f"      vertex {v[0]} {v[1]} {v[2]}\n")
            f.write("    endloop\n")
            f.write("  endfacet\n")
        f.write("endsolid cube\n")


def parse_svg(text: str) -> ET.Element:
    return ET.fromstring(text)


def svg_groups(root: ET.Element) -> List[ET.Element]:
    """Top-level <g> elements in document order."""
    return [child for child in root if child.tag == SVG_NS + "g"]


def polygon_points(polygon: ET.Element) -> List[Tuple[float, float]]:
    """Parse the ``points`` attribute of a <polygon>."""
    pairs = polygon.get("points").split()
    return [tuple(float(v) for v in pair.split(",")) for pair in pairs]


def assert_finite_polygon(polygon: ET.Element) -> None:
    """Three finite coordinate pairs."""
    points = polygon_points(polygon)
    assert len(points) == 3
    assert np.all(np.isfinite(points))
