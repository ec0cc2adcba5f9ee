"""Series generation, statistics and insights for area analyses."""

from envirogeo.analysis.insights import compute_insights
from envirogeo.analysis.series import generate_time_series
from envirogeo.analysis.statistics import classify_trend, compute_stats

__all__ = [
    "classify_trend",
    "compute_insights",
    "compute_stats",
    "generate_time_series",
]
