"""
Entry point: render a 3D model to an SVG image.

Usage:
    python main.py [MODEL] [--output OUTPUT] [--config CONFIG] [camera options]

MODEL is a standard solid (cube, octahedron, icosahedron) or a path to an
STL file; without it the model from the configuration is used.

Examples:
    python main.py octahedron --scale 15 --output octahedron.svg
    python main.py part.stl --eye 40 30 60 --fovy 30 --near 1 --far 500
    python main.py cube --styler palette --palette "#e41a1c" "#377eb8"
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mesh_svg.geometry.primitives import FaceArray, MeshFormatError
from mesh_svg.io.stl_loader import STLLoadError, load_stl_faces
from mesh_svg.io.validator import validate_faces
from mesh_svg.logging_config import LogContext, setup_logging
from mesh_svg.project_config import ProjectConfig, load_config
from mesh_svg.render.engine import Engine
from mesh_svg.scene.model import Mesh, Scene, View
from mesh_svg.shapes.polyhedra import SHAPES, get_shape, scale_faces

logger = logging.getLogger("mesh_svg.main")


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def load_model(model: str, scale: float = 1.0) -> FaceArray:
    """Faces of a named solid or of an STL file, scaled about the origin.

    Raises:
        STLLoadError: if ``model`` is not a known solid and the file cannot be loaded.
    """
    if model.lower() in SHAPES:
        faces = get_shape(model)
        logger.info("Model: %s (%d faces)", model.lower(), len(faces))
    else:
        faces = load_stl_faces(model)
    if scale != 1.0:
        faces = scale_faces(faces, scale)
    return faces


def build_view(faces: FaceArray, config: ProjectConfig, name: str = "") -> View:
    """Single-mesh view from a configuration."""
    mesh = Mesh(
        faces=faces,
        styler=config.build_styler(),
        name=name,
    )
    return View(
        camera=config.build_camera(),
        scene=Scene([mesh]),
        viewport=config.build_viewport(),
    )


def run_pipeline(
    model: Optional[str],
    output_svg: str,
    config: Optional[ProjectConfig] = None,
    scale: Optional[float] = None,
) -> str:
    """Full pipeline: model -> faces -> view -> SVG file.

    Steps:
      1. Load faces (standard solid or STL).
      2. Validate faces (malformed input aborts; degeneracy is only reported).
      3. Build camera, viewport and scene from the configuration.
      4. Render and save.

    Args:
        model: solid name or STL path; None uses ``config.model.shape``.
        output_svg: path of the SVG to write.
        config: project configuration (defaults if None).
        scale: model scale; None uses ``config.model.scale`` for a named
            solid and 1.0 for an STL file.

    Returns:
        Path of the written SVG.

    Raises:
        STLLoadError: if the STL file cannot be read.
        MeshFormatError: if the faces are malformed.
        OSError: if the SVG cannot be written.
    """
    config = config or ProjectConfig()
    model = model or config.model.shape
    if scale is None:
        scale = config.model.scale if model.lower() in SHAPES else 1.0

    with LogContext(model=Path(model).name):
        logger.info("Step 1: loading model %s", model)
        faces = load_model(model, scale)

        logger.info("Step 2: validating %d faces", len(faces))
        validate_faces(faces)

        logger.info("Step 3: building view")
        view = build_view(faces, config, name=Path(model).stem)

        logger.info("Step 4: rendering")
        engine = Engine([view], settings=config.document_settings())
        result = engine.save(output_svg)

    logger.info("Done. SVG: %s", result)
    return result


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render a triangle mesh to SVG with a pinhole camera.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "model", nargs="?", default=None,
        help=f"Standard solid ({', '.join(sorted(SHAPES))}) or STL file path.",
    )
    parser.add_argument(
        "--output", "-o", default=None,
        help="Output SVG path (default: <model>.svg).",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to a .meshsvg.json file.")
    parser.add_argument("--scale", type=float, default=None,
                        help="Uniform model scale (default: configured scale for solids, 1 for STL).")
    parser.add_argument("--fovy", type=float, default=None, help="Vertical field of view, degrees.")
    parser.add_argument("--aspect", type=float, default=None, help="Aspect ratio (width / height).")
    parser.add_argument("--near", type=float, default=None, help="Near clip distance.")
    parser.add_argument("--far", type=float, default=None, help="Far clip distance.")
    parser.add_argument("--eye", type=float, nargs=3, default=None, metavar=("X", "Y", "Z"))
    parser.add_argument("--target", type=float, nargs=3, default=None, metavar=("X", "Y", "Z"))
    parser.add_argument("--up", type=float, nargs=3, default=None, metavar=("X", "Y", "Z"))
    parser.add_argument("--viewport", type=float, nargs=4, default=None,
                        metavar=("MINX", "MINY", "W", "H"),
                        help="Output rectangle in document units.")
    parser.add_argument(
        "--styler", choices=["winding", "palette"], default=None,
        help="Per-face styling (default: none, plain group style).",
    )
    parser.add_argument("--palette", nargs="+", default=None, help="Colors for --styler palette.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging.")
    parser.add_argument("--log-json", default=None, dest="log_json",
                        help="Also write JSON-lines logs to this file.")
    return parser.parse_args(argv)


def apply_cli_overrides(config: ProjectConfig, args: argparse.Namespace) -> ProjectConfig:
    """Copy explicitly given CLI options over the loaded configuration."""
    for name in ("fovy", "aspect", "near", "far", "eye", "target", "up"):
        value = getattr(args, name)
        if value is not None:
            setattr(config.camera, name, value)
    if args.viewport is not None:
        vp = config.viewport
        vp.minx, vp.miny, vp.width, vp.height = args.viewport
    if args.styler is not None:
        config.style.styler = args.styler
    if args.palette is not None:
        config.style.palette = list(args.palette)
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        json_file=args.log_json,
    )

    config = load_config(model_path=args.model, explicit_config=args.config)
    config = apply_cli_overrides(config, args)

    model = args.model or config.model.shape
    output = args.output or f"{Path(model).stem}.svg"

    try:
        run_pipeline(model, output, config=config, scale=args.scale)
    except (STLLoadError, MeshFormatError) as exc:
        logger.critical("Cannot load model: %s", exc)
        return 1
    except ValueError as exc:
        logger.critical("Configuration error: %s", exc)
        return 1
    except OSError as exc:
        logger.critical("Cannot write %s: %s", output, exc)
        return 2
    except Exception as exc:
        logger.critical("Unexpected error: %s", exc, exc_info=True)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
