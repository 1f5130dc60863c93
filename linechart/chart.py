from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image

from linechart.config import ChartConfig, RGBA, lighten, with_alpha
from linechart.interaction import Selection, SelectionDelegate, resolve_touch
from linechart.layout import ChartLayout, Segment, TextMeasure, compute_layout, default_text_measure
from linechart.raster import (
    draw_discs,
    draw_hline,
    draw_polyline,
    draw_text,
    draw_vline,
    fill_polygon,
    new_canvas,
    polyline_prefix,
)
from linechart.series import ChartData

LOGGER = logging.getLogger(__name__)


class LineChart:
    """Headless line chart: one or more lines of values plotted against their index."""

    def __init__(
        self,
        width: int,
        height: int,
        *,
        config: ChartConfig | None = None,
        delegate: SelectionDelegate | None = None,
    ) -> None:
        self._validate_size(width, height)
        self._width = width
        self._height = height
        self.config = config or ChartConfig()
        self.delegate = delegate
        self._data = ChartData()
        self._blank = False
        self._highlight_index: int | None = None
        self._highlight_x: float | None = None
        self._last_layout: ChartLayout | None = None

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def data(self) -> ChartData:
        return self._data

    @property
    def highlighted_index(self) -> int | None:
        return self._highlight_index

    @property
    def highlight_x(self) -> float | None:
        return self._highlight_x

    def resize(self, width: int, height: int) -> None:
        self._validate_size(width, height)
        self._width = width
        self._height = height

    def add_line(self, values: Any) -> None:
        self._data.add_line(values)
        self._blank = False
        self.clear_selection()

    def clear(self) -> None:
        """Remove lines, areas and labels but keep axes and grid."""
        self._data.clear()
        self.clear_selection()

    def clear_all(self) -> None:
        """Blank the whole chart until a line is added again."""
        self.clear()
        self._blank = True

    def clear_selection(self) -> None:
        self._highlight_index = None
        self._highlight_x = None

    def layout(self, measure: TextMeasure | None = None) -> ChartLayout:
        return compute_layout(self._data, self.config, self._width, self._height, measure=measure)

    def last_layout(self) -> ChartLayout | None:
        return self._last_layout

    def touch_moved(self, x: float) -> Selection | None:
        return self._handle_touch(x)

    def touch_ended(self, x: float) -> Selection | None:
        selection = self._handle_touch(x)
        self._highlight_x = None
        return selection

    def progress_at(self, elapsed_s: float) -> float:
        """Animation progress after `elapsed_s` seconds of the configured duration."""
        if not np.isfinite(elapsed_s):
            raise ValueError("elapsed time must be finite")
        animation = self.config.animation
        if not animation.enabled or animation.duration <= 0.0:
            return 1.0
        return min(1.0, max(0.0, elapsed_s / animation.duration))

    def render(self, progress: float = 1.0) -> np.ndarray:
        if not 0.0 <= progress <= 1.0:
            raise ValueError("progress must be within [0, 1]")
        if not self.config.animation.enabled:
            progress = 1.0

        canvas = new_canvas(self._width, self._height, self.config.background)
        if self._blank:
            self._last_layout = None
            return canvas

        measure = default_text_measure(self.config)
        layout = self.layout(measure)
        self._last_layout = layout
        LOGGER.debug(
            "render %dx%d lines=%d progress=%.3f", self._width, self._height, len(self._data), progress
        )

        cfg = self.config
        if cfg.x.grid.visible and cfg.y.grid.visible:
            for seg in layout.x_grid_lines():
                _draw_segment(canvas, seg, cfg.x.grid.color)
            for seg in layout.y_grid_lines():
                _draw_segment(canvas, seg, cfg.y.grid.color)
        if cfg.x.axis.visible and cfg.y.axis.visible:
            _draw_segment(canvas, layout.x_axis(), cfg.x.axis.color)
            _draw_segment(canvas, layout.y_axis(), cfg.y.axis.color)
        if cfg.x.labels.visible:
            self._draw_x_labels(canvas, layout, measure)
        if cfg.y.labels.visible:
            for label in layout.y_labels(measure):
                draw_text(
                    canvas,
                    label.x,
                    label.y,
                    label.text,
                    cfg.y.labels.text_color,
                    font_family=cfg.font_family,
                    font_size_px=cfg.font_size_px,
                )

        for line_index, line in enumerate(self._data.lines):
            color = cfg.line_color(line_index)
            xs, ys = layout.line_points(line)
            px, py = polyline_prefix(xs, ys, progress)
            draw_polyline(canvas, px, py, color, width=cfg.line_width)
            if cfg.dots.visible:
                self._draw_dots(canvas, xs, ys, color, progress)
            if cfg.area:
                ax, ay = layout.area_polygon(line)
                fill_polygon(canvas, ax, ay, with_alpha(color, cfg.area_alpha))

        if cfg.highlight_line.visible and self._highlight_x is not None:
            seg = layout.highlight_line(self._highlight_x)
            if cfg.highlight_line.line_width <= 1.0:
                _draw_segment(canvas, seg, cfg.highlight_line.color)
            else:
                draw_polyline(
                    canvas,
                    [seg.x0, seg.x1],
                    [seg.y0, seg.y1],
                    cfg.highlight_line.color,
                    width=cfg.highlight_line.line_width,
                )
        return canvas

    def save_png(self, path: str | Path, progress: float = 1.0) -> Path:
        out = Path(path)
        Image.fromarray(self.render(progress=progress)).save(out, format="PNG")
        return out

    def _handle_touch(self, x: float) -> Selection | None:
        if self._data.is_empty:
            return None
        selection = resolve_touch(self.layout(), self._data, x)
        if selection is None:
            return None
        self._highlight_index = selection.index
        self._highlight_x = selection.highlight_x
        LOGGER.debug("touch x=%.2f -> index=%d (raw %d)", x, selection.index, selection.raw_index)
        if self.delegate is not None:
            self.delegate.did_select_data_point(selection.index, list(selection.y_values))
        return selection

    def _x_label_texts(self) -> list[str]:
        count = self._data.point_count
        custom = self.config.x.labels.values
        if not custom:
            return [str(i) for i in range(count)]
        if len(custom) < count:
            LOGGER.warning(
                "x label values cover %d of %d points; using indices for the rest", len(custom), count
            )
        return [custom[i] if i < len(custom) else str(i) for i in range(count)]

    def _draw_x_labels(self, canvas: np.ndarray, layout: ChartLayout, measure: TextMeasure) -> None:
        cfg = self.config
        for label in layout.x_labels(self._x_label_texts(), measure, label_height=cfg.x.axis.inset):
            text_w, text_h = measure(label.text)
            draw_text(
                canvas,
                label.x + (label.width - text_w) / 2.0,
                label.y + (label.height - text_h) / 2.0,
                label.text,
                cfg.x.labels.text_color,
                font_family=cfg.font_family,
                font_size_px=cfg.font_size_px,
            )

    def _draw_dots(self, canvas: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, progress: float) -> None:
        dots = self.config.dots
        if progress <= 0.0:
            return
        highlight = None
        if self._highlight_index is not None:
            highlight = max(0, min(self._highlight_index, xs.size - 1))
        keep = np.ones(xs.size, dtype=bool)
        if highlight is not None:
            keep[highlight] = False
        draw_discs(canvas, xs[keep], ys[keep], with_alpha(dots.color, progress), dots.outer_radius)
        draw_discs(canvas, xs[keep], ys[keep], with_alpha(color, progress), dots.inner_radius)
        if highlight is not None:
            hx = xs[highlight : highlight + 1]
            hy = ys[highlight : highlight + 1]
            draw_discs(canvas, hx, hy, with_alpha(lighten(color), progress), dots.outer_radius_highlighted)
            draw_discs(canvas, hx, hy, with_alpha(color, progress), dots.inner_radius_highlighted)

    @staticmethod
    def _validate_size(width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("chart width/height must be > 0")


def _draw_segment(canvas: np.ndarray, seg: Segment, color: RGBA) -> None:
    if seg.x0 == seg.x1:
        draw_vline(canvas, seg.x0, seg.y0, seg.y1, color)
    elif seg.y0 == seg.y1:
        draw_hline(canvas, seg.x0, seg.x1, seg.y0, color)
    else:
        draw_polyline(canvas, [seg.x0, seg.x1], [seg.y0, seg.y1], color, width=1)
