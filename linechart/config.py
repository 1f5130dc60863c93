from __future__ import annotations

import colorsys
from dataclasses import dataclass, field, fields, is_dataclass, replace
from pathlib import Path
import tomllib
from typing import Any


RGBA = tuple[int, int, int, int]

BLACK: RGBA = (0, 0, 0, 255)
WHITE: RGBA = (255, 255, 255, 255)
GRAY: RGBA = (128, 128, 128, 255)

# d3 category10
CATEGORY10: tuple[RGBA, ...] = (
    (31, 119, 180, 255),
    (255, 127, 14, 255),
    (44, 160, 44, 255),
    (214, 39, 40, 255),
    (148, 103, 189, 255),
    (140, 86, 75, 255),
    (227, 119, 194, 255),
    (127, 127, 127, 255),
    (188, 189, 34, 255),
    (23, 190, 207, 255),
)


def color_from_hex(value: int | str, alpha: int = 255) -> RGBA:
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) not in (6, 8):
            raise ValueError(f"hex color must have 6 or 8 digits: {value!r}")
        try:
            raw = int(text, 16)
        except ValueError as exc:
            raise ValueError(f"invalid hex color: {value!r}") from exc
        if len(text) == 8:
            return ((raw >> 24) & 0xFF, (raw >> 16) & 0xFF, (raw >> 8) & 0xFF, raw & 0xFF)
        value = raw
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFFFFFF:
        raise ValueError(f"hex color out of range: {value!r}")
    return ((value & 0xFF0000) >> 16, (value & 0xFF00) >> 8, value & 0xFF, alpha)


def lighten(color: RGBA, factor: float = 1.5) -> RGBA:
    """Scale HSB brightness by ``factor``, saturating at full brightness."""
    r, g, b, a = color
    h, s, v = colorsys.rgb_to_hsv(r / 255.0, g / 255.0, b / 255.0)
    r2, g2, b2 = colorsys.hsv_to_rgb(h, s, min(1.0, v * factor))
    return (int(round(r2 * 255)), int(round(g2 * 255)), int(round(b2 * 255)), a)


def with_alpha(color: RGBA, alpha: float) -> RGBA:
    r, g, b, a = color
    return (r, g, b, int(round(max(0.0, min(1.0, alpha)) * a)))


@dataclass(frozen=True)
class LabelsConfig:
    visible: bool = True
    values: tuple[str, ...] = ()
    text_color: RGBA = BLACK


@dataclass(frozen=True)
class GridConfig:
    visible: bool = True
    count: int = 10
    color: RGBA = (238, 238, 238, 255)


@dataclass(frozen=True)
class AxisConfig:
    visible: bool = True
    color: RGBA = (96, 125, 139, 255)
    inset: float = 15.0


@dataclass(frozen=True)
class CoordinateConfig:
    labels: LabelsConfig = field(default_factory=LabelsConfig)
    grid: GridConfig = field(default_factory=GridConfig)
    axis: AxisConfig = field(default_factory=AxisConfig)


@dataclass(frozen=True)
class AnimationConfig:
    enabled: bool = True
    duration: float = 1.0


@dataclass(frozen=True)
class DotsConfig:
    visible: bool = True
    color: RGBA = WHITE
    inner_radius: float = 8.0
    outer_radius: float = 12.0
    inner_radius_highlighted: float = 8.0
    outer_radius_highlighted: float = 12.0


@dataclass(frozen=True)
class HighlightLineConfig:
    visible: bool = True
    line_width: float = 0.5
    color: RGBA = GRAY


@dataclass(frozen=True)
class ChartConfig:
    area: bool = True
    area_alpha: float = 0.2
    line_width: float = 2.0
    font_family: str = "Helvetica"
    font_size_px: float = 11.0
    background: RGBA = WHITE
    colors: tuple[RGBA, ...] = CATEGORY10
    animation: AnimationConfig = field(default_factory=AnimationConfig)
    dots: DotsConfig = field(default_factory=DotsConfig)
    highlight_line: HighlightLineConfig = field(default_factory=HighlightLineConfig)
    x: CoordinateConfig = field(default_factory=CoordinateConfig)
    y: CoordinateConfig = field(default_factory=CoordinateConfig)

    def line_color(self, line_index: int) -> RGBA:
        if not self.colors:
            raise ValueError("colors must not be empty")
        return self.colors[line_index % len(self.colors)]


def load_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    return config_from_mapping(raw)


def config_from_mapping(raw: dict[str, Any]) -> ChartConfig:
    config = _merge(ChartConfig(), raw, path="")
    if not config.colors:
        raise ValueError("colors must not be empty")
    if config.x.grid.count < 1 or config.y.grid.count < 1:
        raise ValueError("grid count must be >= 1")
    return config


def _merge(base: Any, raw: Any, *, path: str) -> Any:
    if not isinstance(raw, dict):
        raise ValueError(f"config section `{path or '<root>'}` must be a table")
    names = {f.name for f in fields(base)}
    updates: dict[str, Any] = {}
    for key, value in raw.items():
        key_path = f"{path}.{key}" if path else key
        if key not in names:
            raise ValueError(f"unknown config key: {key_path}")
        current = getattr(base, key)
        if is_dataclass(current):
            updates[key] = _merge(current, value, path=key_path)
        elif key == "colors":
            if not isinstance(value, list):
                raise ValueError(f"{key_path} must be a list of colors")
            updates[key] = tuple(color_from_hex(v) for v in value)
        elif key == "values":
            if not isinstance(value, list):
                raise ValueError(f"{key_path} must be a list of strings")
            updates[key] = tuple(str(v) for v in value)
        elif key.endswith("color") or key == "background":
            updates[key] = color_from_hex(value)
        elif isinstance(current, bool):
            if not isinstance(value, bool):
                raise ValueError(f"{key_path} must be a boolean")
            updates[key] = value
        elif isinstance(current, (int, float)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{key_path} must be a number")
            if isinstance(current, int) and value != int(value):
                raise ValueError(f"{key_path} must be an integer")
            updates[key] = type(current)(value)
        elif isinstance(current, str):
            if not isinstance(value, str):
                raise ValueError(f"{key_path} must be a string")
            updates[key] = value
        else:  # pragma: no cover - every field type is handled above
            raise ValueError(f"unsupported config key: {key_path}")
    return replace(base, **updates)
