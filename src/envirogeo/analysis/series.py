"""Synthetic time series generation.

Stand-in for satellite retrieval on parameters without a real-data
path. The shape is reproducible (bounded range, optional yearly cycle,
linear drift) while the values are random on every call.
"""

from __future__ import annotations

import logging
import math
from datetime import date, timedelta

import numpy as np

from envirogeo.parameters import SEASONAL_PARAMETERS, get_parameter
from envirogeo.results import TimeSeriesPoint

logger = logging.getLogger(__name__)

# At most this many strides fit in the span, so at most _MAX_STRIDES + 1 points.
_MAX_STRIDES: int = 90

# Fractions of the parameter range.
_BASE_LOW: float = 0.4
_BASE_WIDTH: float = 0.3
_SEASONAL_AMPLITUDE: float = 0.15
_WALK_STEP: float = 0.03
_NOISE: float = 0.1
_UNCERTAINTY: float = 0.05

# Upper bound of the per-sample drift, as a fraction of the range.
_MAX_TREND_MAGNITUDE: float = 0.0005

_DAYS_PER_YEAR: float = 365.0
_DECIMALS: int = 4


def sampling_stride(total_days: int) -> int:
    """Return the sampling stride in days for a span of *total_days*.

    Example:
        >>> sampling_stride(30), sampling_stride(179), sampling_stride(2191)
        (1, 2, 25)
    """
    return max(1, math.ceil(total_days / _MAX_STRIDES))


def generate_time_series(
    parameter: str,
    start_date: date,
    end_date: date,
    rng: np.random.Generator | None = None,
) -> list[TimeSeriesPoint]:
    """Generate a randomized series for *parameter* between two dates.

    The walk starts at a base value between the 40th and 70th percentile
    of the parameter range. Each sample adds a small persistent random
    step to the base, a linear drift whose direction is drawn once per
    call, a yearly sine term for seasonal parameters, and independent
    noise. Values are clamped into the range and carry uncertainty
    bounds of 5% of the range, also clamped.

    Args:
        parameter: Parameter identifier (e.g. ``"LST"``).
        start_date: First day of the series.
        end_date: Last possible day of the series (inclusive).
        rng: Random generator. A fresh unseeded generator is used when
            omitted, so repeated calls differ.

    Returns:
        Points with strictly increasing dates, at most 91 of them.

    Raises:
        InputError: If *parameter* is unknown.
        ValueError: If *start_date* is after *end_date*.

    Example:
        >>> from datetime import date
        >>> series = generate_time_series("EVI", date(2020, 1, 1), date(2020, 12, 31))
        >>> len(series) <= 91
        True
    """
    definition = get_parameter(parameter)
    if start_date > end_date:
        msg = f"start_date {start_date} is after end_date {end_date}"
        raise ValueError(msg)

    if rng is None:
        rng = np.random.default_rng()

    span = definition.span
    total_days = (end_date - start_date).days
    stride = sampling_stride(total_days)
    seasonal = parameter in SEASONAL_PARAMETERS

    base = definition.min + span * (_BASE_LOW + rng.random() * _BASE_WIDTH)
    direction = 1 if rng.random() > 0.5 else -1
    trend_magnitude = rng.random() * _MAX_TREND_MAGNITUDE * direction
    uncertainty = span * _UNCERTAINTY

    points: list[TimeSeriesPoint] = []
    for index, offset in enumerate(range(0, total_days + 1, stride)):
        day = start_date + timedelta(days=offset)

        seasonal_term = 0.0
        if seasonal:
            day_of_year = day.timetuple().tm_yday
            seasonal_term = (
                math.sin(day_of_year / _DAYS_PER_YEAR * 2 * math.pi)
                * span
                * _SEASONAL_AMPLITUDE
            )

        base += (rng.random() - 0.5) * span * _WALK_STEP
        drift = index * trend_magnitude * span
        noise = (rng.random() - 0.5) * span * _NOISE

        value = base + seasonal_term + drift + noise
        value = min(max(value, definition.min), definition.max)

        points.append(
            TimeSeriesPoint(
                date=day.isoformat(),
                value=round(value, _DECIMALS),
                min=round(max(value - uncertainty, definition.min), _DECIMALS),
                max=round(min(value + uncertainty, definition.max), _DECIMALS),
            )
        )

    logger.debug(
        "Generated %d %s points (%s → %s, stride %d days, trend %+.6f)",
        len(points),
        parameter,
        start_date,
        end_date,
        stride,
        trend_magnitude,
    )
    return points
