from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Callable

import numpy as np

from linechart.config import ChartConfig
from linechart.raster.draw_text import text_size
from linechart.scales import LinearScale, TickRange, round_half_away_from_zero
from linechart.series import ChartData


TextMeasure = Callable[[str], tuple[int, int]]

# Gap between the widest y label and the plot area.
Y_LABEL_GAP = 8.0


@dataclass(frozen=True)
class Margins:
    top: float
    left: float
    bottom: float
    right: float


@dataclass(frozen=True)
class Segment:
    x0: float
    y0: float
    x1: float
    y1: float


@dataclass(frozen=True)
class LabelPlacement:
    text: str
    x: float
    y: float
    width: float
    height: float
    align: str = "center"
    value: float = 0.0


@dataclass(frozen=True)
class ChartLayout:
    """Scales and canvas geometry for one draw pass.

    Canvas y grows downward; data y grows upward from the bottom margin.
    """

    width: int
    height: int
    margins: Margins
    drawing_width: float
    drawing_height: float
    x_scale: LinearScale
    y_scale: LinearScale
    x_ticks: TickRange | None
    y_ticks: TickRange
    y_label_size: tuple[int, int]

    @property
    def plot_left(self) -> float:
        return self.margins.left

    @property
    def plot_right(self) -> float:
        return self.width - self.margins.right

    @property
    def plot_top(self) -> float:
        return self.margins.top

    @property
    def plot_bottom(self) -> float:
        return self.height - self.margins.bottom

    def to_canvas_x(self, index: float) -> float:
        return self.x_scale.scale(index) + self.margins.left

    def to_canvas_y(self, value: float) -> float:
        return self.height - self.y_scale.scale(value) - self.margins.bottom

    def from_canvas_x(self, x: float) -> float:
        return self.x_scale.invert(x - self.margins.left)

    def line_points(self, line: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        xs = self.x_scale.scale_many(np.arange(line.size, dtype=np.float64)) + self.margins.left
        ys = self.height - self.y_scale.scale_many(line) - self.margins.bottom
        return xs, ys

    def area_polygon(self, line: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        xs, ys = self.line_points(line)
        base = self.to_canvas_y(0.0)
        poly_x = np.concatenate(([self.margins.left], xs, [xs[-1], self.margins.left]))
        poly_y = np.concatenate(([base], ys, [base, base]))
        return poly_x, poly_y

    def x_grid_lines(self) -> list[Segment]:
        if self.x_ticks is None:
            return []
        return [
            Segment(self.to_canvas_x(v), self.plot_bottom, self.to_canvas_x(v), self.plot_top)
            for v in self.x_ticks
        ]

    def y_grid_lines(self) -> list[Segment]:
        return [
            Segment(self.plot_left, self.to_canvas_y(v), self.plot_right, self.to_canvas_y(v))
            for v in self.y_ticks
        ]

    def x_axis(self) -> Segment:
        y0 = self.to_canvas_y(0.0)
        return Segment(self.plot_left, y0, self.plot_right, y0)

    def y_axis(self) -> Segment:
        return Segment(self.plot_left, self.plot_bottom, self.plot_left, self.plot_top)

    def clamp_highlight_x(self, x: float) -> float:
        if x > self.plot_right:
            return self.plot_right
        if x < self.plot_left:
            return self.plot_left
        return x

    def highlight_line(self, x: float) -> Segment:
        xp = self.clamp_highlight_x(x)
        return Segment(xp, self.plot_top, xp, self.plot_bottom)

    def y_labels(self, measure: TextMeasure) -> list[LabelPlacement]:
        label_w, label_h = self.y_label_size
        out: list[LabelPlacement] = []
        for value in self.y_ticks:
            text = format_tick_label(value)
            text_w, _ = measure(text)
            out.append(
                LabelPlacement(
                    text=text,
                    x=(self.margins.left - label_w) / 2.0 + (label_w - text_w),
                    y=self.to_canvas_y(value) - label_h / 2.0,
                    width=float(label_w),
                    height=float(label_h),
                    align="right",
                    value=value,
                )
            )
        return out

    def x_labels(self, labels: list[str], measure: TextMeasure, label_height: float) -> list[LabelPlacement]:
        """Centered labels under each index; a label overlapping its predecessor is skipped."""
        if not labels:
            return []
        label_w = max(measure(text)[0] for text in labels)
        top = self.plot_bottom
        out: list[LabelPlacement] = []
        prev_max_x: float | None = None
        for index, text in enumerate(labels):
            x = math.floor(self.to_canvas_x(float(index)) - label_w / 2.0)
            if prev_max_x is not None and prev_max_x > x:
                continue
            out.append(
                LabelPlacement(
                    text=text,
                    x=float(x),
                    y=top,
                    width=float(label_w),
                    height=label_height,
                    value=float(index),
                )
            )
            prev_max_x = x + label_w
        return out


def format_tick_label(value: float) -> str:
    return str(round_half_away_from_zero(value))


def default_text_measure(config: ChartConfig) -> TextMeasure:
    def measure(text: str) -> tuple[int, int]:
        return text_size(text, font_family=config.font_family, font_size_px=config.font_size_px)

    return measure


def max_label_size(ticks: TickRange, measure: TextMeasure) -> tuple[int, int]:
    best = (0, 0)
    for value in ticks:
        size = measure(format_tick_label(value))
        if size[0] > best[0]:
            best = size
    return best


def compute_layout(
    data: ChartData,
    config: ChartConfig,
    width: int,
    height: int,
    *,
    measure: TextMeasure | None = None,
) -> ChartLayout:
    if width <= 0 or height <= 0:
        raise ValueError("chart width/height must be > 0")
    measure = measure or default_text_measure(config)

    drawing_height = max(0.0, height - 2.0 * config.y.axis.inset)
    y_scale = LinearScale(domain=data.y_extent(), range=(0.0, drawing_height))
    y_ticks = y_scale.ticks(int(config.y.grid.count))

    label_w, label_h = max_label_size(y_ticks, measure)
    label_w = int(max(label_w, config.x.axis.inset))
    margins = Margins(
        top=config.y.axis.inset,
        left=label_w + Y_LABEL_GAP,
        bottom=config.y.axis.inset,
        right=config.x.axis.inset,
    )

    drawing_width = max(0.0, width - margins.left - margins.right)
    x_scale = LinearScale(domain=data.x_extent(), range=(0.0, drawing_width))
    x_lo, x_hi = x_scale.domain
    # A single point (or no data) has no x span to subdivide.
    x_ticks = x_scale.ticks(int(config.x.grid.count)) if x_hi > x_lo else None

    return ChartLayout(
        width=width,
        height=height,
        margins=margins,
        drawing_width=drawing_width,
        drawing_height=drawing_height,
        x_scale=x_scale,
        y_scale=y_scale,
        x_ticks=x_ticks,
        y_ticks=y_ticks,
        y_label_size=(label_w, label_h),
    )
