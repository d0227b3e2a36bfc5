"""
STL loading.

Supports binary and ASCII STL (autodetected). Two views of the same file:
- load_stl        — deduplicated vertices + triangle indices
- load_stl_faces  — faces by value, (M, 3, 3), as the renderer consumes them

Any failure to read or parse the file is fatal for the run (STLLoadError).
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np
from stl import mesh

from mesh_svg.geometry.primitives import FaceArray

logger = logging.getLogger(__name__)


class STLFormat(Enum):
    """STL file encoding."""
    BINARY = "binary"
    ASCII = "ascii"
    UNKNOWN = "unknown"


@dataclass
class STLInfo:
    """Metadata of a loaded STL file."""
    filepath: str
    format: STLFormat
    file_size_bytes: int
    n_triangles: int
    n_unique_vertices: int
    solid_name: Optional[str] = None

    @property
    def file_size_kb(self) -> float:
        return self.file_size_bytes / 1024


class STLLoadError(Exception):
    """STL file missing, unreadable, corrupt or empty."""


def detect_stl_format(filepath: str) -> Tuple[STLFormat, Optional[str]]:
    """Guess whether an STL file is ASCII or binary.

    ASCII files start with ``solid <name>`` and contain ``facet`` or
    ``endsolid`` early on; anything else is treated as binary.

    Returns:
        (format, solid name or None)

    Raises:
        STLLoadError: if the file cannot be opened.
    """
    try:
        with open(filepath, 'rb') as f:
            head = f.read(1024)
    except FileNotFoundError:
        raise STLLoadError(f"File not found: {filepath!r}") from None
    except OSError as exc:
        raise STLLoadError(f"Cannot read file {filepath!r}: {exc}") from exc

    try:
        text = head.decode('ascii')
    except UnicodeDecodeError:
        text = None

    if text is not None:
        stripped = text.strip()
        lowered = stripped.lower()
        if lowered.startswith('solid') and ('facet' in lowered or 'endsolid' in lowered
                                            or len(head) < 84):
            name = stripped[5:].split('\n')[0].strip() or None
            return STLFormat.ASCII, name

    if len(head) < 84:
        return STLFormat.UNKNOWN, None

    header_name = head[:80].split(b'\x00')[0].decode('ascii', errors='ignore').strip()
    solid_name = None
    if header_name.lower().startswith('solid'):
        solid_name = header_name[5:].strip() or None
    return STLFormat.BINARY, solid_name


def _read_triangles(filepath: str) -> np.ndarray:
    """Raw triangle corners (M, 3, 3) as float64 via numpy-stl."""
    try:
        stl_mesh = mesh.Mesh.from_file(filepath)
    except FileNotFoundError:
        raise STLLoadError(f"File not found: {filepath!r}") from None
    except Exception as exc:
        raise STLLoadError(f"Cannot parse STL file {filepath!r}: {exc}") from exc

    if len(stl_mesh.vectors) == 0:
        raise STLLoadError(f"STL file {filepath!r} contains no triangles.")

    return np.asarray(stl_mesh.vectors, dtype=np.float64)


def load_stl_faces(filepath: str) -> FaceArray:
    """Load an STL file as a triangle soup.

    Corner order of every facet is preserved, so the authored winding
    reaches the renderer unchanged.

    Returns:
        Faces of shape (M, 3, 3), float64.

    Raises:
        STLLoadError: if the file is missing, corrupt or has 0 triangles.
    """
    stl_format, _ = detect_stl_format(filepath)
    logger.info("Loading STL: %s (format: %s, size: %.1f KB)",
                filepath, stl_format.value, os.path.getsize(filepath) / 1024)

    faces = _read_triangles(filepath)
    logger.info("Loaded %d faces.", len(faces))
    return faces


def load_stl(filepath: str) -> Tuple[np.ndarray, np.ndarray]:
    """Load an STL file as an indexed mesh.

    Vertices are merged when their coordinates agree to 6 decimals.

    Returns:
        vertices: (N, 3) float64 unique vertices.
        faces:    (M, 3) int32 vertex indices per triangle.

    Raises:
        STLLoadError: if the file is missing, corrupt or has 0 triangles.
    """
    triangles = load_stl_faces(filepath)

    vertices: List[Tuple[float, float, float]] = []
    index: Dict[Tuple[float, float, float], int] = {}
    faces = np.empty((len(triangles), 3), dtype=np.int32)

    for fi, triangle in enumerate(triangles):
        for ci, corner in enumerate(triangle):
            # Round to absorb float32 noise from the file.
            key = tuple(round(float(c), 6) for c in corner)
            if key not in index:
                index[key] = len(vertices)
                vertices.append(key)
            faces[fi, ci] = index[key]

    vertices_arr = np.array(vertices, dtype=np.float64)
    logger.info("Indexed: %d unique vertices, %d faces.", len(vertices_arr), len(faces))
    return vertices_arr, faces


def load_stl_with_info(filepath: str) -> Tuple[FaceArray, STLInfo]:
    """Faces by value plus file metadata."""
    stl_format, solid_name = detect_stl_format(filepath)
    vertices, triangles = load_stl(filepath)

    info = STLInfo(
        filepath=filepath,
        format=stl_format,
        file_size_bytes=os.path.getsize(filepath),
        n_triangles=len(triangles),
        n_unique_vertices=len(vertices),
        solid_name=solid_name,
    )
    return vertices[triangles], info
