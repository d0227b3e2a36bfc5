"""
Input checks for face arrays before rendering.

Malformed input (wrong shape) is fatal and raises MeshFormatError.
Everything else found here is informational: degenerate or non-finite
faces and open edges are reported as warnings, the renderer absorbs them.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

import numpy as np
from numpy.typing import ArrayLike

from mesh_svg.config import DEGENERATE_AREA_EPS
from mesh_svg.geometry.primitives import FaceArray, as_faces

logger = logging.getLogger(__name__)

_Corner = Tuple[float, float, float]


class ValidationSeverity(Enum):
    """Severity level of validation issues."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """A single finding about the faces."""
    code: str
    severity: ValidationSeverity
    message: str
    count: int = 1
    details: List[int] = field(default_factory=list)  # first few face indices

    def __str__(self) -> str:
        text = f"[{self.severity.value.upper()}] {self.code}: {self.message}"
        if self.count > 1:
            text += f" ({self.count} occurrences)"
        return text


@dataclass
class ValidationReport:
    """Result of :func:`validate_faces`."""
    n_faces: int
    n_degenerate_faces: int
    n_nonfinite_faces: int
    n_boundary_edges: int
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_closed(self) -> bool:
        return self.n_boundary_edges == 0

    @property
    def is_valid(self) -> bool:
        """No error-level issues (warnings are allowed)."""
        return not any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            "Face Validation Report",
            "=" * 40,
            f"Faces: {self.n_faces}",
            f"Degenerate faces: {self.n_degenerate_faces}",
            f"Non-finite faces: {self.n_nonfinite_faces}",
            f"Boundary edges: {self.n_boundary_edges}",
            f"Closed: {'Yes' if self.is_closed else 'No'}",
        ]
        if self.issues:
            lines.append("")
            lines.append("Issues:")
            lines.extend(f"  - {issue}" for issue in self.issues)
        lines.append("")
        lines.append(f"Overall: {'VALID' if self.is_valid else 'INVALID'}")
        return "\n".join(lines)


def _corner_key(corner: np.ndarray) -> _Corner:
    return tuple(round(float(c), 6) for c in corner)


def _count_boundary_edges(faces: FaceArray) -> int:
    """Edges used by exactly one face, matching corners to 6 decimals."""
    edge_uses: Dict[Tuple[_Corner, _Corner], int] = defaultdict(int)
    for face in faces:
        keys = [_corner_key(c) for c in face]
        for i in range(3):
            a, b = keys[i], keys[(i + 1) % 3]
            if a == b:
                continue
            edge_uses[(min(a, b), max(a, b))] += 1
    return sum(1 for uses in edge_uses.values() if uses == 1)


def _face_areas(faces: FaceArray) -> np.ndarray:
    cross = np.cross(faces[:, 1] - faces[:, 0], faces[:, 2] - faces[:, 0])
    return 0.5 * np.linalg.norm(cross, axis=1)


def validate_faces(faces: ArrayLike,
                   degenerate_area_threshold: float = DEGENERATE_AREA_EPS) -> ValidationReport:
    """Check faces before rendering.

    Args:
        faces: anything convertible to an (M, 3, 3) array.
        degenerate_area_threshold: faces with smaller area count as degenerate.

    Returns:
        ValidationReport (warnings only).

    Raises:
        MeshFormatError: if the input is not a set of 3-point faces.
    """
    arr = as_faces(faces)
    n_faces = len(arr)
    issues: List[ValidationIssue] = []

    if n_faces == 0:
        issues.append(ValidationIssue(
            code="EMPTY",
            severity=ValidationSeverity.INFO,
            message="Mesh has no faces",
            count=0,
        ))
        return ValidationReport(0, 0, 0, 0, issues)

    finite_mask = np.isfinite(arr).all(axis=(1, 2))
    n_nonfinite = int((~finite_mask).sum())
    if n_nonfinite:
        issues.append(ValidationIssue(
            code="NON_FINITE_FACES",
            severity=ValidationSeverity.WARNING,
            message=f"{n_nonfinite} faces have non-finite coordinates",
            count=n_nonfinite,
            details=np.flatnonzero(~finite_mask)[:10].tolist(),
        ))
        logger.warning("%d faces have non-finite coordinates", n_nonfinite)

    with np.errstate(invalid='ignore', over='ignore'):
        areas = _face_areas(arr)
    degenerate_mask = finite_mask & (areas < degenerate_area_threshold)
    n_degenerate = int(degenerate_mask.sum())
    if n_degenerate:
        issues.append(ValidationIssue(
            code="DEGENERATE_FACES",
            severity=ValidationSeverity.WARNING,
            message=f"{n_degenerate} faces have zero area",
            count=n_degenerate,
            details=np.flatnonzero(degenerate_mask)[:10].tolist(),
        ))
        logger.warning("%d degenerate faces", n_degenerate)

    n_boundary = _count_boundary_edges(arr[finite_mask])
    if n_boundary:
        issues.append(ValidationIssue(
            code="BOUNDARY_EDGES",
            severity=ValidationSeverity.INFO,
            message=f"Mesh has {n_boundary} boundary edges (not closed)",
            count=n_boundary,
        ))
        logger.debug("Mesh has %d boundary edges", n_boundary)

    report = ValidationReport(
        n_faces=n_faces,
        n_degenerate_faces=n_degenerate,
        n_nonfinite_faces=n_nonfinite,
        n_boundary_edges=n_boundary,
        issues=issues,
    )
    logger.debug("Validation complete: %d faces, %d issues", n_faces, len(issues))
    return report
