from __future__ import annotations

import numpy as np

from linechart.config import RGBA


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def draw_hline(dst: np.ndarray, x0: float, x1: float, y: float, color: RGBA) -> None:
    row = int(round(y))
    if row < 0 or row >= dst.shape[0]:
        return
    xa = max(0, int(round(min(x0, x1))))
    xb = min(dst.shape[1] - 1, int(round(max(x0, x1))))
    if xa > xb:
        return
    _blend_segment(dst[row, xa : xb + 1], color)


def draw_vline(dst: np.ndarray, x: float, y0: float, y1: float, color: RGBA) -> None:
    col = int(round(x))
    if col < 0 or col >= dst.shape[1]:
        return
    ya = max(0, int(round(min(y0, y1))))
    yb = min(dst.shape[0] - 1, int(round(max(y0, y1))))
    if ya > yb:
        return
    _blend_segment(dst[ya : yb + 1, col], color)


def blend_mask(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    """Source-over blend ``color`` onto ``dst`` weighted by an 8-bit coverage mask."""
    h, w = mask.shape
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    cov = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    src_alpha = (color[3] / 255.0) * cov
    if not np.any(src_alpha > 0):
        return

    patch = dst[y0:y1, x0:x1]
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)

    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    patch[:, :, :3] = np.clip(np.rint(out_rgb_num / safe_alpha[:, :, None]), 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)


def _blend_segment(segment: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    inv = 1.0 - a
    rgb = np.asarray(color[0:3], dtype=np.float32) * a + segment[:, :3].astype(np.float32) * inv
    segment[:, :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    segment[:, 3] = 255
