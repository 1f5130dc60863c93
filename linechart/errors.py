from __future__ import annotations


class ChartDataError(ValueError):
    """Raised when line data cannot be coerced into a plottable series."""
