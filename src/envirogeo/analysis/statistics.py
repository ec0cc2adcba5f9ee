"""Summary statistics over a time series.

Pure computation module: points in, ``Stats`` out.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
import numpy.typing as npt

from envirogeo.results import Stats, TimeSeriesPoint, TrendLabel

# |trend_percent| below this is "stable".
STABLE_TREND_THRESHOLD: float = 2.0


def classify_trend(trend_percent: float) -> TrendLabel:
    """Map a signed trend percentage to a qualitative label.

    Example:
        >>> classify_trend(1.9), classify_trend(-2.0), classify_trend(3.5)
        ('stable', 'decreasing', 'increasing')
    """
    if abs(trend_percent) < STABLE_TREND_THRESHOLD:
        return "stable"
    if trend_percent > 0:
        return "increasing"
    return "decreasing"


def _trend_percent(values: npt.NDArray[np.floating[Any]], mean: float) -> float:
    """OLS slope against the centred sample index, relative to the mean.

    ``trend_percent = slope * N / |mean| * 100``, so the sign follows the
    slope for negative means too. Undefined for a single sample or a
    zero mean; both return 0.
    """
    n = values.size
    if n < 2 or mean == 0:
        return 0.0
    x = np.arange(n, dtype=np.float64) - (n - 1) / 2
    slope = float(np.sum(x * (values - mean)) / np.sum(x**2))
    return slope * n / abs(mean) * 100


def compute_stats(series: Sequence[TimeSeriesPoint]) -> Stats:
    """Compute summary statistics for a non-empty series.

    Standard deviation uses the population formula (divide by N).
    Mean, min, max and standard deviation are rounded to 4 decimals,
    the trend percentage to 1 decimal. The trend label is decided on
    the rounded percentage so the reported pair always agrees.

    Args:
        series: Ordered observations.

    Returns:
        ``Stats`` with ``min <= mean <= max``.

    Raises:
        ValueError: If *series* is empty.

    Example:
        >>> pts = [TimeSeriesPoint(date=f"2020-01-0{i}", value=v)
        ...        for i, v in enumerate([1.0, 2.0, 3.0], start=1)]
        >>> compute_stats(pts).trend
        'increasing'
    """
    if not series:
        msg = "compute_stats requires at least one point"
        raise ValueError(msg)

    values = np.array([p.value for p in series], dtype=np.float64)
    lo = float(values.min())
    hi = float(values.max())
    mean = min(max(float(values.mean()), lo), hi)
    std_dev = float(np.sqrt(np.mean((values - mean) ** 2)))
    trend_percent = round(_trend_percent(values, mean), 1)

    return Stats(
        mean=round(mean, 4),
        min=round(lo, 4),
        max=round(hi, 4),
        std_dev=round(std_dev, 4),
        trend=classify_trend(trend_percent),
        trend_percent=trend_percent,
    )
