"""
config.py - Configuration Resolver for the grid composer.

Turns raw label/path lists and optional numeric overrides into an immutable
GridSpec. Precedence is: explicit override > YAML config file > defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml
from PIL import ImageColor

from grid_composer.utils import load_grid_config


# ---------------------------
# Defaults
# ---------------------------

DEFAULT_CANVAS_SIZE_PX = 4096
DEFAULT_HEADER_SIZE_PX = 80
DEFAULT_FONT_SIZE_PX = 32
DEFAULT_QUALITY = 90

# Per-side inset between a cell boundary and its image or placeholder.
CELL_PADDING_PX = 2


def get_default_workers() -> int:
    """Calculate default decode worker count based on CPU cores."""
    cpu_count = os.cpu_count() or 4
    return max(1, min(8, cpu_count))


class ConfigurationError(ValueError):
    """Invalid or missing arguments; no raster is produced."""


@dataclass(frozen=True)
class GridStyle:
    background: str = "#1a1a2e"
    label_color: str = "#ffffff"
    gridline_color: str = "#333355"
    gridline_width: int = 2
    separator_color: str = "#555577"
    separator_width: int = 3
    placeholder_fill: str = "#442222"
    placeholder_text_color: str = "#ff6666"
    placeholder_text: str = "Error"
    placeholder_font_scale: float = 0.6
    padding: int = CELL_PADDING_PX


@dataclass(frozen=True)
class GridSpec:
    output_path: Path
    row_labels: tuple[str, ...]
    col_labels: tuple[str, ...]
    image_paths: tuple[str, ...]
    canvas_size: int = DEFAULT_CANVAS_SIZE_PX
    header_size: int = DEFAULT_HEADER_SIZE_PX
    font_size: int = DEFAULT_FONT_SIZE_PX
    quality: int = DEFAULT_QUALITY
    workers: int = field(default_factory=get_default_workers)
    style: GridStyle = field(default_factory=GridStyle)

    @property
    def num_rows(self) -> int:
        return len(self.row_labels)

    @property
    def num_cols(self) -> int:
        return len(self.col_labels)


def split_list(raw: Optional[str]) -> list[str]:
    """Split a comma-separated argument into trimmed items ("" -> [])."""
    if raw is None or raw.strip() == "":
        return []
    return [item.strip() for item in raw.split(",")]


COLOR_FIELDS = (
    "background",
    "label_color",
    "gridline_color",
    "separator_color",
    "placeholder_fill",
    "placeholder_text_color",
)


def _pick(name: str, override: Optional[Any], file_config: dict, default: Any) -> Any:
    if override is not None:
        return override
    return file_config.get(name, default)


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def _resolve_style(raw_style: Any) -> GridStyle:
    if raw_style is None:
        return GridStyle()
    if not isinstance(raw_style, dict):
        raise ConfigurationError("style must be a mapping of style fields")

    known = {f.name for f in fields(GridStyle)}
    unknown = sorted(set(raw_style) - known)
    if unknown:
        raise ConfigurationError(f"Unknown style keys: {', '.join(unknown)}")

    style = GridStyle(**raw_style)
    for name in ("gridline_width", "separator_width"):
        _positive_int(f"style.{name}", getattr(style, name))
    if isinstance(style.padding, bool) or not isinstance(style.padding, int) or style.padding < 0:
        raise ConfigurationError(f"style.padding must be a non-negative integer, got {style.padding!r}")

    for name in COLOR_FIELDS:
        value = getattr(style, name)
        try:
            if not isinstance(value, str):
                raise ValueError(f"expected a colour string, got {value!r}")
            ImageColor.getrgb(value)
        except ValueError as e:
            raise ConfigurationError(f"style.{name} is not a valid colour: {e}") from e

    scale = style.placeholder_font_scale
    if isinstance(scale, bool) or not isinstance(scale, (int, float)) or scale <= 0:
        raise ConfigurationError(f"style.placeholder_font_scale must be a positive number, got {scale!r}")
    if not isinstance(style.placeholder_text, str):
        raise ConfigurationError(f"style.placeholder_text must be a string, got {style.placeholder_text!r}")
    return style


def read_config_file(config_path: Optional[Path]) -> dict:
    """Load a YAML config file, mapping every failure to ConfigurationError."""
    if config_path is None:
        return {}
    try:
        return load_grid_config(config_path)
    except (OSError, yaml.YAMLError, TypeError) as e:
        raise ConfigurationError(f"Cannot load config file {config_path}: {e}") from e


def resolve_grid_spec(
    output_path: Optional[str],
    row_labels: Sequence[str],
    col_labels: Sequence[str],
    image_paths: Sequence[str],
    size: Optional[int] = None,
    header: Optional[int] = None,
    font_size: Optional[int] = None,
    quality: Optional[int] = None,
    workers: Optional[int] = None,
    config_path: Optional[Path] = None,
) -> GridSpec:
    """
    Validate raw inputs and produce a GridSpec with all defaults applied.

    Args:
        output_path: Destination file for the encoded grid
        row_labels: One label per row (R >= 1)
        col_labels: One label per column (C >= 1)
        image_paths: R*C source image paths in row-major order
        size, header, font_size, quality, workers: Optional overrides
        config_path: Optional YAML file with defaults for the overrides

    Returns:
        Immutable GridSpec

    Raises:
        ConfigurationError: On any missing or inconsistent input
    """
    if not output_path:
        raise ConfigurationError("Output file path required")

    if len(row_labels) == 0 or len(col_labels) == 0:
        raise ConfigurationError("Both --rows and --cols are required")

    expected_images = len(row_labels) * len(col_labels)
    if len(image_paths) != expected_images:
        raise ConfigurationError(
            f"Expected {expected_images} images ({len(row_labels)} rows x {len(col_labels)} cols), "
            f"got {len(image_paths)}"
        )

    file_config = read_config_file(config_path)
    known_keys = {"size", "header", "font_size", "quality", "workers", "style"}
    unknown = sorted(set(file_config) - known_keys)
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")

    canvas_size = _positive_int("size", _pick("size", size, file_config, DEFAULT_CANVAS_SIZE_PX))
    header_size = _positive_int("header", _pick("header", header, file_config, DEFAULT_HEADER_SIZE_PX))
    font_px = _positive_int("font_size", _pick("font_size", font_size, file_config, DEFAULT_FONT_SIZE_PX))
    quality_value = _positive_int("quality", _pick("quality", quality, file_config, DEFAULT_QUALITY))
    worker_count = _positive_int("workers", _pick("workers", workers, file_config, get_default_workers()))
    style = _resolve_style(file_config.get("style"))

    if quality_value > 100:
        raise ConfigurationError(f"quality must be in [1, 100], got {quality_value}")
    if header_size >= canvas_size:
        raise ConfigurationError(f"header ({header_size}) must be smaller than size ({canvas_size})")

    content = canvas_size - header_size
    cell_width = content // len(col_labels)
    cell_height = content // len(row_labels)
    min_cell = 2 * style.padding
    if cell_width <= min_cell or cell_height <= min_cell:
        raise ConfigurationError(
            f"Canvas too small: cells would be {cell_width}x{cell_height} px, "
            f"need more than {min_cell} px on each axis"
        )

    return GridSpec(
        output_path=Path(output_path),
        row_labels=tuple(row_labels),
        col_labels=tuple(col_labels),
        image_paths=tuple(image_paths),
        canvas_size=canvas_size,
        header_size=header_size,
        font_size=font_px,
        quality=quality_value,
        workers=worker_count,
        style=style,
    )
