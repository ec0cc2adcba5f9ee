"""Natural-language insights derived from statistics.

Insights are ordered: the trend sentence always comes first, followed
by an optional variability sentence and at most one parameter-specific
sentence chosen from a per-parameter rule table.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import NamedTuple

from envirogeo.parameters import get_parameter
from envirogeo.results import Stats, compact_number

# Normalised range ((max - min) / span) thresholds.
_HIGH_VARIABILITY: float = 0.5
_LOW_VARIABILITY: float = 0.2


class InsightRule(NamedTuple):
    """A threshold predicate and the sentence emitted when it holds."""

    applies: Callable[[Stats], bool]
    sentence: str


def _always(_stats: Stats) -> bool:
    return True


_COMBUSTION_GAS_RULES: tuple[InsightRule, ...] = (
    InsightRule(
        _always,
        "Consider correlating with industrial activity and traffic patterns.",
    ),
)

# Evaluated in order; the first matching rule wins.
PARAMETER_RULES: dict[str, tuple[InsightRule, ...]] = {
    "NDVI": (
        InsightRule(
            lambda s: s.mean > 0.5,
            "Healthy vegetation cover detected in the selected area.",
        ),
        InsightRule(
            lambda s: s.mean < 0.2,
            "Sparse vegetation or bare soil detected. "
            "Consider monitoring for land degradation.",
        ),
    ),
    "LST": (
        InsightRule(
            lambda s: s.max > 40,
            "Extreme surface temperatures detected. "
            "Urban heat island effect may be present.",
        ),
    ),
    "AQI": (
        InsightRule(
            lambda s: s.mean > 100,
            "Air quality is unhealthy for sensitive groups. "
            "Monitor pollution sources.",
        ),
    ),
    "Soil Moisture": (
        InsightRule(
            lambda s: s.mean < 20,
            "Low soil moisture levels detected. "
            "Drought conditions may be developing.",
        ),
    ),
    "NO2": _COMBUSTION_GAS_RULES,
    "SO2": _COMBUSTION_GAS_RULES,
    "CO": _COMBUSTION_GAS_RULES,
}


def _trend_sentence(name: str, stats: Stats) -> str:
    magnitude = compact_number(abs(stats.trend_percent))
    if stats.trend == "increasing":
        return (
            f"{name} shows an upward trend of {magnitude}% "
            "over the analysis period."
        )
    if stats.trend == "decreasing":
        return (
            f"{name} shows a downward trend of {magnitude}% "
            "over the analysis period."
        )
    return f"{name} remains relatively stable throughout the analysis period."


def compute_insights(parameter: str, stats: Stats) -> list[str]:
    """Derive insight sentences for *parameter* from its statistics.

    Args:
        parameter: Parameter identifier.
        stats: Statistics of the analysed series.

    Returns:
        Non-empty list; the trend sentence is always first.

    Raises:
        InputError: If *parameter* is unknown.

    Example:
        >>> stats = Stats(mean=0.6, min=0.5, max=0.7, std_dev=0.05,
        ...               trend="stable", trend_percent=0.4)
        >>> compute_insights("NDVI", stats)[-1]
        'Healthy vegetation cover detected in the selected area.'
    """
    definition = get_parameter(parameter)
    insights = [_trend_sentence(definition.name, stats)]

    normalized_range = (stats.max - stats.min) / definition.span
    if normalized_range > _HIGH_VARIABILITY:
        insights.append(
            "High variability detected with values ranging from "
            f"{compact_number(stats.min)} to {compact_number(stats.max)} "
            f"{definition.unit}."
        )
    elif normalized_range < _LOW_VARIABILITY:
        insights.append(
            "Low variability indicates consistent conditions "
            "across the analysis period."
        )

    for rule in PARAMETER_RULES.get(parameter, ()):
        if rule.applies(stats):
            insights.append(rule.sentence)
            break

    return insights
