from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Protocol

from linechart.layout import ChartLayout
from linechart.scales import round_half_away_from_zero
from linechart.series import ChartData


@dataclass(frozen=True)
class Selection:
    index: int
    raw_index: int
    y_values: tuple[float, ...]
    highlight_x: float


class SelectionDelegate(Protocol):
    def did_select_data_point(self, x: int, y_values: list[float]) -> None:
        ...


def resolve_touch(layout: ChartLayout, data: ChartData, touch_x: float) -> Selection | None:
    """Map a horizontal touch coordinate to the nearest data index.

    Exact halves round away from zero; the index is then clamped to the first line.
    A non-finite coordinate selects nothing.
    """
    if data.is_empty or not math.isfinite(touch_x):
        return None
    inverted = layout.from_canvas_x(float(touch_x))
    raw_index = round_half_away_from_zero(inverted)
    return Selection(
        index=data.clamp_index(raw_index),
        raw_index=raw_index,
        y_values=tuple(data.values_at(raw_index)),
        highlight_x=layout.clamp_highlight_x(float(touch_x)),
    )
