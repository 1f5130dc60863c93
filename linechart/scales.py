from __future__ import annotations

from dataclasses import dataclass, replace
import math
from typing import Iterator, Sequence

import numpy as np


# Multipliers applied to the power-of-ten step, checked in order.
_ERROR_BANDS: tuple[tuple[float, float], ...] = (
    (0.15, 10.0),
    (0.35, 5.0),
    (0.75, 2.0),
)


@dataclass(frozen=True)
class TickRange:
    """Arithmetic tick sequence ``start, start + step, ...`` up to ``stop`` inclusive.

    ``stop`` sits half a step past the last exact multiple, so iterating while
    ``value <= stop`` keeps the final tick despite floating-point rounding.
    """

    start: float
    stop: float
    step: float

    @property
    def is_finite(self) -> bool:
        return bool(np.isfinite(self.start) and np.isfinite(self.stop) and np.isfinite(self.step) and self.step > 0)

    def __len__(self) -> int:
        if not self.is_finite or self.stop < self.start:
            return 0
        return int(math.floor((self.stop - self.start) / self.step)) + 1

    def __iter__(self) -> Iterator[float]:
        for i in range(len(self)):
            yield self.start + i * self.step

    def values(self) -> np.ndarray:
        return np.asarray(list(self), dtype=np.float64)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.start, self.stop, self.step)


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float] = (0.0, 1.0)
    range: tuple[float, float] = (0.0, 1.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "domain", _coerce_pair(self.domain, "domain"))
        object.__setattr__(self, "range", _coerce_pair(self.range, "range"))

    def with_domain(self, domain: Sequence[float]) -> "LinearScale":
        return replace(self, domain=tuple(domain))

    def with_range(self, range: Sequence[float]) -> "LinearScale":
        return replace(self, range=tuple(range))

    def scale(self, x: float) -> float:
        return bilinear(self.domain, self.range, x)

    def invert(self, y: float) -> float:
        return bilinear(self.range, self.domain, y)

    def scale_many(self, values: np.ndarray | Sequence[float]) -> np.ndarray:
        return _bilinear_array(self.domain, self.range, values)

    def invert_many(self, values: np.ndarray | Sequence[float]) -> np.ndarray:
        return _bilinear_array(self.range, self.domain, values)

    def ticks(self, count: int) -> TickRange:
        return linear_tick_range(self.domain, count)


def uninterpolate(a: float, b: float, value: float) -> float:
    """Position of ``value`` within ``[a, b]`` as a factor; 0 when ``a == b``."""
    diff = b - a
    if diff == 0:
        return 0.0
    return (value - a) / diff


def interpolate(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


def bilinear(source: tuple[float, float], target: tuple[float, float], value: float) -> float:
    t = uninterpolate(source[0], source[1], float(value))
    return interpolate(target[0], target[1], t)


def scale_extent(domain: tuple[float, float]) -> tuple[float, float]:
    start, stop = domain
    return (start, stop) if start < stop else (stop, start)


def linear_tick_range(domain: tuple[float, float], count: int) -> TickRange:
    lo, hi = scale_extent(domain)
    span = np.float64(hi - lo)
    # Zero span or a non-positive count produce a non-finite range instead of raising.
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        step = np.float64(10.0) ** np.floor(np.log10(span / np.float64(count)))
        err = np.float64(count) / span * step
        for threshold, factor in _ERROR_BANDS:
            if err <= threshold:
                step *= factor
                break
        start = np.ceil(np.float64(lo) / step) * step
        stop = np.floor(np.float64(hi) / step) * step + step * 0.5
    return TickRange(start=float(start), stop=float(stop), step=float(step))


def round_half_away_from_zero(value: float) -> int:
    magnitude = math.floor(abs(value) + 0.5)
    return int(math.copysign(magnitude, value)) if magnitude else 0


def _bilinear_array(
    source: tuple[float, float],
    target: tuple[float, float],
    values: np.ndarray | Sequence[float],
) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    diff = source[1] - source[0]
    if diff == 0:
        t = np.zeros_like(arr)
    else:
        t = (arr - source[0]) / diff
    return target[0] + t * (target[1] - target[0])


def _coerce_pair(value: Sequence[float], label: str) -> tuple[float, float]:
    items = tuple(value)
    if len(items) != 2:
        raise ValueError(f"{label} must contain exactly two values, got {len(items)}")
    return (float(items[0]), float(items[1]))
