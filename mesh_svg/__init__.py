"""
mesh_svg — renders triangle meshes to SVG with a pinhole camera.

Pipeline: project -> perspective divide -> viewport map -> depth sort ->
back-face cull -> polygon emission. Command line entry point: main.py.
"""

from mesh_svg.logging_config import (
    setup_logging,
    get_logger,
    configure_default_logging,
    log_timing,
    timed,
    LogContext,
)

__version__ = "0.1.0"

__all__ = [
    "setup_logging",
    "get_logger",
    "configure_default_logging",
    "log_timing",
    "timed",
    "LogContext",
]
