from __future__ import annotations

from typing import Sequence

import numpy as np
from PIL import Image, ImageDraw

from linechart.config import RGBA
from linechart.raster.canvas import blend_mask


def draw_polyline(dst: np.ndarray, xs: Sequence[float], ys: Sequence[float], color: RGBA, width: float = 1.0) -> None:
    points = _points(xs, ys)
    if len(points) < 2:
        return
    stroke = max(1, int(round(width)))
    mask, draw = _new_mask(dst)
    draw.line(points, fill=255, width=stroke, joint="curve")
    blend_mask(dst, 0, 0, _as_array(mask), color)


def draw_discs(dst: np.ndarray, xs: Sequence[float], ys: Sequence[float], color: RGBA, diameter: float) -> None:
    points = _points(xs, ys)
    if not points or diameter <= 0:
        return
    radius = diameter / 2.0
    mask, draw = _new_mask(dst)
    for x, y in points:
        draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=255)
    blend_mask(dst, 0, 0, _as_array(mask), color)


def fill_polygon(dst: np.ndarray, xs: Sequence[float], ys: Sequence[float], color: RGBA) -> None:
    points = _points(xs, ys)
    if len(points) < 3:
        return
    mask, draw = _new_mask(dst)
    draw.polygon(points, fill=255)
    blend_mask(dst, 0, 0, _as_array(mask), color)


def _points(xs: Sequence[float], ys: Sequence[float]) -> list[tuple[float, float]]:
    if len(xs) != len(ys):
        raise ValueError(f"xs and ys length mismatch: {len(xs)} != {len(ys)}")
    return [(float(x), float(y)) for x, y in zip(xs, ys, strict=True)]


def _new_mask(dst: np.ndarray) -> tuple[Image.Image, ImageDraw.ImageDraw]:
    # Masks cover the whole canvas so PIL handles clipping.
    image = Image.new("L", (dst.shape[1], dst.shape[0]), 0)
    return image, ImageDraw.Draw(image)


def _as_array(mask: Image.Image) -> np.ndarray:
    return np.asarray(mask, dtype=np.uint8)


def polyline_prefix(xs: Sequence[float], ys: Sequence[float], fraction: float) -> tuple[np.ndarray, np.ndarray]:
    """Leading part of a polyline covering ``fraction`` of its total length."""
    x = np.asarray(xs, dtype=np.float64)
    y = np.asarray(ys, dtype=np.float64)
    if x.size < 2 or fraction >= 1.0:
        return x, y
    if fraction <= 0.0:
        return x[:1], y[:1]
    seg = np.hypot(np.diff(x), np.diff(y))
    total = float(seg.sum())
    if total == 0.0:
        return x, y
    target = total * fraction
    cum = np.concatenate(([0.0], np.cumsum(seg)))
    # Index of the first vertex at or past the target length.
    end = int(np.searchsorted(cum, target, side="left"))
    if cum[end] == target:
        return x[: end + 1], y[: end + 1]
    t = (target - cum[end - 1]) / seg[end - 1]
    px = x[end - 1] + t * (x[end] - x[end - 1])
    py = y[end - 1] + t * (y[end] - y[end - 1])
    return np.append(x[:end], px), np.append(y[:end], py)
