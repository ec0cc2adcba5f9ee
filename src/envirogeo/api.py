"""Top-level analysis functions for EnviroGeo.

Example:
    >>> import envirogeo as eg
    >>> area = eg.area_from_coordinates("31.5204", "74.3587")
    >>> result = eg.analyze("NDVI", area, "2023-01-01", "2023-12-31")
    >>> print(result.to_csv())  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import numpy as np

from envirogeo.analysis import (
    compute_insights,
    compute_stats,
    generate_time_series,
)
from envirogeo.config import Config, get_default_config
from envirogeo.exceptions import ConfigurationError, InputError
from envirogeo.geometry import AreaSelection, area_from_geojson, check_within_region
from envirogeo.parameters import get_parameter
from envirogeo.providers import get_provider, get_registered_parameters
from envirogeo.providers.ndvi import NDVIFunctionProvider
from envirogeo.results import AnalysisResult, NationalSummary

logger = logging.getLogger(__name__)


def _parse_date(value: date | str, label: str) -> date:
    """Convert an ISO string or ``date`` to ``date``.

    Raises:
        InputError: If *value* is not a valid ISO calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise InputError(
            what=f"Invalid {label} date: {value!r}",
            cause="Dates must be ISO formatted (YYYY-MM-DD)",
            fix="Pick the date from the calendar or type it as YYYY-MM-DD",
        ) from exc


def _validate_period(start: date, end: date, config: Config) -> None:
    if start > end:
        raise InputError(
            what="Start date is after end date",
            cause=f"{start.isoformat()} > {end.isoformat()}",
            fix="Choose a start date on or before the end date",
        )
    if start < config.min_date or end > config.max_date:
        raise InputError(
            what="Date range outside supported window",
            cause=(
                f"{start.isoformat()} to {end.isoformat()} is not within "
                f"{config.min_date.isoformat()} to {config.max_date.isoformat()}"
            ),
            fix=(
                f"Choose dates between {config.min_date.isoformat()} "
                f"and {config.max_date.isoformat()}"
            ),
        )


def _resolve_area(area: AreaSelection | dict[str, Any] | None) -> AreaSelection:
    """Accept an ``AreaSelection`` or a raw GeoJSON geometry.

    Raises:
        InputError: If no area is given or the geometry is unusable.
    """
    if isinstance(area, AreaSelection):
        return area
    return area_from_geojson(area)


def analyze(
    parameter: str,
    area: AreaSelection | dict[str, Any] | None,
    start_date: date | str,
    end_date: date | str,
    *,
    config: Config | None = None,
    rng: np.random.Generator | None = None,
) -> AnalysisResult:
    """Analyse one environmental parameter over an area and period.

    Parameters with a real-data provider (NDVI) are fetched from the
    hosted data functions when ``functions_url`` is configured. All
    other parameters, and NDVI without a configured provider, use the
    synthetic series pipeline.

    Args:
        parameter: Parameter identifier (e.g. ``"NDVI"``, ``"AQI"``).
        area: Selected area, or a GeoJSON Point/Polygon geometry.
        start_date: First day of the period (ISO string or ``date``).
        end_date: Last day of the period (ISO string or ``date``).
        config: Optional config override.
        rng: Optional random generator for the synthetic pipeline.

    Returns:
        AnalysisResult with series, statistics and insights.

    Raises:
        InputError: For an unknown parameter, a missing area or one
            outside the supported region, or invalid dates.
        ProviderError: If the real-data provider fails. No retry.

    Example:
        >>> result = analyze("AQI", area, date(2022, 1, 1), date(2022, 6, 30))  # doctest: +SKIP
    """
    cfg = config or get_default_config()
    get_parameter(parameter)
    selection = _resolve_area(area)
    check_within_region(selection, cfg.region)
    start = _parse_date(start_date, "start")
    end = _parse_date(end_date, "end")
    _validate_period(start, end, cfg)

    result_kwargs: dict[str, Any] = {
        "parameter": parameter,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "geometry": selection.geometry,
        "geometry_type": selection.geometry_type,
    }

    provider = get_provider(parameter, cfg)
    if provider is not None:
        remote = provider.fetch_series(selection.lat, selection.lon, start.year, end.year)
        logger.info(
            "Analysed %s from %s: %d observations",
            parameter,
            provider.name,
            len(remote.time_series),
        )
        return AnalysisResult(
            time_series=remote.time_series,
            stats=remote.stats,
            insights=remote.insights,
            source=remote.source or provider.name,
            **result_kwargs,
        )

    warnings: list[str] = []
    if parameter in get_registered_parameters():
        logger.warning(
            "No data functions configured; using synthetic %s data", parameter
        )
        warnings.append(
            f"Real {parameter} data unavailable (functions_url not set); "
            "showing synthetic values"
        )

    series = generate_time_series(parameter, start, end, rng=rng)
    stats = compute_stats(series)
    insights = compute_insights(parameter, stats)
    logger.info(
        "Analysed %s (synthetic): %d points, trend %s", parameter, len(series), stats.trend
    )
    return AnalysisResult(
        time_series=series,
        stats=stats,
        insights=insights,
        warnings=warnings,
        **result_kwargs,
    )


def national_ndvi_summary(config: Config | None = None) -> NationalSummary:
    """Fetch yearly NDVI averages for the supported region.

    Raises:
        ConfigurationError: If ``functions_url`` is not configured.
        ProviderError: If the data function fails.

    Example:
        >>> summary = national_ndvi_summary()  # doctest: +SKIP
        >>> summary.trend  # doctest: +SKIP
        'increasing'
    """
    cfg = config or get_default_config()
    if cfg.functions_url is None:
        raise ConfigurationError(
            what="National NDVI summary unavailable",
            cause="functions_url is not set",
            fix="configure(functions_url='https://<project>.supabase.co/functions/v1')",
        )
    summary = NDVIFunctionProvider(config=cfg).fetch_national_summary()
    logger.info("Fetched national NDVI summary for %d years", len(summary.yearly_averages))
    return summary
