from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from linechart.errors import ChartDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_line(values: Any, *, label: str = "line") -> np.ndarray:
    """Coerce one line of y values to a finite 1-D float64 array.

    Points are placed at their index, so every value must be finite.
    """
    arr = _coerce_1d_numeric(_resolve_frame(values, label=label), label=label)
    if arr.size == 0:
        raise ChartDataError(f"{label} is empty")
    bad = np.flatnonzero(~np.isfinite(arr))
    if bad.size:
        raise ChartDataError(f"{label} contains a non-finite value at index {int(bad[0])}")
    return arr


def _resolve_frame(values: Any, *, label: str) -> Any:
    if pd is not None and isinstance(values, pd.DataFrame):
        numeric_cols = [c for c in values.columns if pd.api.types.is_numeric_dtype(values[c])]
        if len(numeric_cols) != 1:
            raise ChartDataError(f"{label}: DataFrame input must contain exactly one numeric column")
        return values[numeric_cols[0]]
    return values


def _coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    arr = _as_array(value, label=label)
    if arr.ndim != 1:
        raise ChartDataError(f"{label} must be 1-D, got shape {arr.shape}")
    return _coerce_ndarray(arr, label=label)


def _as_array(value: Any, *, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        return value.detach().cpu().to(torch.float64).numpy()
    if pd is not None and isinstance(value, pd.Series):
        return value.to_numpy()
    if isinstance(value, np.ndarray):
        return value
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return np.asarray(value, dtype=object)
    raise ChartDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=True)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            raise ChartDataError(f"{label} is missing a value at index {i}")
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise ChartDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
