"""
JSON-based project configuration for mesh_svg.

Configuration hierarchy (later overrides earlier):
1. Built-in defaults (config.py)
2. User config (~/.meshsvg.json)
3. Project config (./.meshsvg.json, or next to the model file)
4. CLI arguments

Example .meshsvg.json:
{
    "camera": {
        "fovy": 15.0,
        "eye": [13.0, 2.0, 20.0],
        "near": 10.0,
        "far": 100.0
    },
    "viewport": {"minx": -0.5, "miny": -0.5, "width": 1.0, "height": 1.0},
    "document": {"width": 512, "height": 512},
    "style": {
        "fill": "white",
        "stroke_width": 0.005,
        "styler": "palette",
        "palette": ["#e41a1c", "#377eb8", "#4daf4a"]
    },
    "model": {"shape": "octahedron", "scale": 15.0},
    "output": {"prefix": "", "suffix": "", "output_dir": ""}
}
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from mesh_svg import config as cfg
from mesh_svg.config import StyleValue
from mesh_svg.geometry.camera import Camera
from mesh_svg.geometry.viewport import Viewport
from mesh_svg.render.engine import DocumentSettings
from mesh_svg.scene.styling import FaceStyler, PaletteStyler, WindingStyler

logger = logging.getLogger(__name__)

CONFIG_FILENAME = cfg.CONFIG_FILENAME


@dataclass
class CameraConfig:
    """Pinhole camera parameters (fovy in degrees)."""
    fovy: float = cfg.CAMERA_FOVY_DEG
    aspect: float = cfg.CAMERA_ASPECT
    near: float = cfg.CAMERA_NEAR
    far: float = cfg.CAMERA_FAR
    eye: List[float] = field(default_factory=lambda: list(cfg.CAMERA_EYE))
    target: List[float] = field(default_factory=lambda: list(cfg.CAMERA_TARGET))
    up: List[float] = field(default_factory=lambda: list(cfg.CAMERA_UP))


@dataclass
class ViewportConfig:
    """Output rectangle in document units."""
    minx: float = cfg.VIEWPORT_MIN_X
    miny: float = cfg.VIEWPORT_MIN_Y
    width: float = cfg.VIEWPORT_WIDTH
    height: float = cfg.VIEWPORT_HEIGHT


@dataclass
class DocumentConfig:
    """SVG root element."""
    view_box: List[float] = field(default_factory=lambda: list(cfg.DOCUMENT_VIEW_BOX))
    width: int = cfg.DOCUMENT_WIDTH_PX
    height: int = cfg.DOCUMENT_HEIGHT_PX


@dataclass
class StyleConfig:
    """Group style and optional per-face styler.

    ``styler`` is "" (none), "winding" or "palette".
    """
    fill: str = str(cfg.DEFAULT_GROUP_STYLE['fill'])
    fill_opacity: float = float(cfg.DEFAULT_GROUP_STYLE['fill-opacity'])
    stroke: str = str(cfg.DEFAULT_GROUP_STYLE['stroke'])
    stroke_linejoin: str = str(cfg.DEFAULT_GROUP_STYLE['stroke-linejoin'])
    stroke_width: float = float(cfg.DEFAULT_GROUP_STYLE['stroke-width'])
    styler: str = ""
    palette: List[str] = field(default_factory=list)
    low_color: str = "#404040"
    high_color: str = "#ffffff"
    max_winding: float = 0.1


@dataclass
class ModelConfig:
    """Default model when none is given on the command line."""
    shape: str = cfg.DEFAULT_SHAPE
    scale: float = cfg.DEFAULT_MODEL_SCALE


@dataclass
class OutputConfig:
    """Output file naming (batch mode)."""
    prefix: str = ""
    suffix: str = ""
    output_dir: str = ""


_SECTIONS = ('camera', 'viewport', 'document', 'style', 'model', 'output')


@dataclass
class ProjectConfig:
    """Complete project configuration."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    document: DocumentConfig = field(default_factory=DocumentConfig)
    style: StyleConfig = field(default_factory=StyleConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        """Write the configuration as JSON."""
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Build a configuration, ignoring unknown sections and keys."""
        config = cls()
        for section_name in _SECTIONS:
            values = data.get(section_name)
            if not isinstance(values, dict):
                continue
            section = getattr(config, section_name)
            for key, value in values.items():
                if key.startswith('_'):
                    continue
                if hasattr(section, key):
                    setattr(section, key, value)
                else:
                    logger.warning("Unknown config key %s.%s ignored", section_name, key)
        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'ProjectConfig':
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ProjectConfig':
        """Read a configuration file.

        Raises:
            FileNotFoundError: if the file doesn't exist.
            json.JSONDecodeError: if it is not valid JSON.
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)

    # ------------------------------------------------------------------
    # Builders for render objects
    # ------------------------------------------------------------------

    def build_camera(self) -> Camera:
        c = self.camera
        return Camera.create(c.fovy, c.aspect, c.near, c.far, c.eye, c.target, c.up)

    def build_viewport(self) -> Viewport:
        v = self.viewport
        return Viewport(float(v.minx), float(v.miny), float(v.width), float(v.height))

    def group_style(self) -> Dict[str, StyleValue]:
        s = self.style
        return {
            'fill': s.fill,
            'fill-opacity': s.fill_opacity,
            'stroke': s.stroke,
            'stroke-linejoin': s.stroke_linejoin,
            'stroke-width': s.stroke_width,
        }

    def build_styler(self) -> Optional[FaceStyler]:
        """Face styler named by ``style.styler``; None when unset.

        Raises:
            ValueError: for an unknown styler name or an empty palette.
        """
        s = self.style
        name = (s.styler or "").lower()
        if not name:
            return None
        if name == "palette":
            return PaletteStyler(s.palette)
        if name == "winding":
            return WindingStyler(s.low_color, s.high_color, s.max_winding)
        raise ValueError(f"Unknown styler {s.styler!r}; expected 'palette' or 'winding'")

    def document_settings(self) -> DocumentSettings:
        d = self.document
        return DocumentSettings(
            view_box=tuple(float(v) for v in d.view_box),
            width=int(d.width),
            height=int(d.height),
            base_style=self.group_style(),
        )


def find_config_file(
    model_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Locate a configuration file.

    Search order:
    1. Explicit config path (if provided)
    2. .meshsvg.json in the model file's directory
    3. .meshsvg.json in the current working directory
    4. ~/.meshsvg.json

    Returns:
        Path of the first file found, or None.
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    candidates = []
    if model_path:
        candidates.append(Path(model_path).parent / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)
    candidates.append(Path.home() / CONFIG_FILENAME)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(
    model_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> ProjectConfig:
    """Load the configuration, falling back to defaults.

    An unreadable or invalid file is logged and the defaults are used.
    """
    config_path = find_config_file(model_path, explicit_config)

    if config_path:
        try:
            return ProjectConfig.load(config_path)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)

    return ProjectConfig()


def merge_configs(base: ProjectConfig, override: ProjectConfig) -> ProjectConfig:
    """Merge two configurations; override values that differ from defaults win."""
    merged = ProjectConfig.from_dict(base.to_dict())
    defaults = ProjectConfig()

    for section_name in _SECTIONS:
        override_section = getattr(override, section_name)
        default_section = getattr(defaults, section_name)
        merged_section = getattr(merged, section_name)
        for f in fields(override_section):
            value = getattr(override_section, f.name)
            if value != getattr(default_section, f.name):
                setattr(merged_section, f.name, value)

    return merged


def create_sample_config(path: Union[str, Path] = CONFIG_FILENAME) -> None:
    """Write a documented sample configuration file."""
    sample: Dict[str, Any] = {
        "_comment": "mesh_svg configuration",
        "_version": "1.0",
    }
    sample.update(ProjectConfig().to_dict())
    sample["camera"]["_comment"] = "Pinhole camera; fovy in degrees, 0 < near < far"
    sample["viewport"]["_comment"] = "NDC [-1, 1] is mapped onto this rectangle"
    sample["style"]["_comment"] = "styler: '' (none), 'winding' or 'palette'"

    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample, f, indent=2, ensure_ascii=False)

    logger.info("Sample configuration created: %s", path)
