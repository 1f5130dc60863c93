from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from linechart.adapters import normalize_line


@dataclass
class ChartData:
    """Lines of y values plotted against their index; the first line defines the x axis."""

    lines: list[np.ndarray] = field(default_factory=list)

    def add_line(self, values: Any) -> np.ndarray:
        line = normalize_line(values, label=f"line {len(self.lines)}")
        self.lines.append(line)
        return line

    def clear(self) -> None:
        self.lines.clear()

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def point_count(self) -> int:
        return int(self.lines[0].size) if self.lines else 0

    def maximum(self) -> float:
        # Starts at 1 so the y extent always spans at least [0, 1].
        out = 1.0
        for line in self.lines:
            out = max(out, float(np.max(line)))
        return out

    def minimum(self) -> float:
        out = 0.0
        for line in self.lines:
            out = min(out, float(np.min(line)))
        return out

    def y_extent(self) -> tuple[float, float]:
        return (self.minimum(), self.maximum())

    def x_extent(self) -> tuple[float, float]:
        return (0.0, float(max(0, self.point_count - 1)))

    def values_at(self, index: int) -> list[float]:
        out: list[float] = []
        for line in self.lines:
            if index < 0:
                out.append(float(line[0]))
            elif index > line.size - 1:
                out.append(float(line[-1]))
            else:
                out.append(float(line[index]))
        return out

    def clamp_index(self, index: int) -> int:
        if not self.lines:
            raise ValueError("no lines to index")
        return max(0, min(int(index), self.point_count - 1))
