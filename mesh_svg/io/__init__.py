"""Geometry input: STL loading and face validation."""

from mesh_svg.io.stl_loader import (
    STLFormat,
    STLInfo,
    STLLoadError,
    detect_stl_format,
    load_stl,
    load_stl_faces,
    load_stl_with_info,
)
from mesh_svg.io.validator import ValidationReport, ValidationSeverity, validate_faces

__all__ = [
    "STLFormat",
    "STLInfo",
    "STLLoadError",
    "ValidationReport",
    "ValidationSeverity",
    "detect_stl_format",
    "load_stl",
    "load_stl_faces",
    "load_stl_with_info",
    "validate_faces",
]
