"""Real NDVI data from the hosted satellite-data functions.

The functions run server-side (Earth Engine backed) and answer JSON
over HTTPS. Two are used: ``get-ndvi`` for a point and year range, and
``get-ndvi-pakistan-range`` for the national yearly summary.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from envirogeo.analysis.statistics import classify_trend
from envirogeo.config import Config, resolve_api_key
from envirogeo.exceptions import ConfigurationError, ProviderError
from envirogeo.providers.base import DataProvider, ProviderStatus, RemoteSeries
from envirogeo.results import NationalSummary, Stats, TimeSeriesPoint

logger = logging.getLogger(__name__)

_POINT_FUNCTION = "get-ndvi"
_NATIONAL_FUNCTION = "get-ndvi-pakistan-range"

_STATUS_TIMEOUT = 10  # seconds
_SUCCESS_STATUS_CODES = frozenset({200})

_FIX_RETRY = "Check your internet connection and run the analysis again"


class NDVIFunctionProvider(DataProvider):
    """NDVI provider backed by the hosted ``get-ndvi`` functions.

    Args:
        config: Configuration with ``functions_url`` set.

    Raises:
        ConfigurationError: If ``config.functions_url`` is not set.

    Example:
        >>> cfg = Config(functions_url="https://example.supabase.co/functions/v1")
        >>> provider = NDVIFunctionProvider(config=cfg)
        >>> provider.name
        'ndvi-function'
    """

    _name: str = "ndvi-function"
    parameters: frozenset[str] = frozenset({"NDVI"})

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        if config.functions_url is None:
            raise ConfigurationError(
                what="NDVI provider is not configured",
                cause="functions_url is not set",
                fix="Set functions_url to the data functions base URL",
            )
        self._base_url: str = config.functions_url
        self._api_key: str = resolve_api_key(config)

    def _function_url(self, function: str) -> str:
        return f"{self._base_url}/{function}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _invoke(self, function: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST *body* to a data function and return its JSON object.

        Raises:
            ProviderError: On network failure, non-200 status, invalid
                JSON, a non-object payload, or an embedded ``error`` field.
        """
        url = self._function_url(function)
        logger.debug("Invoking %s with %s", url, body)
        try:
            resp = self._session.post(
                url,
                json=body,
                headers=self._headers(),
                timeout=self._config.request_timeout,
            )
        except requests.RequestException as exc:
            raise ProviderError(
                what=f"Request to {function} failed",
                cause=str(exc),
                fix=_FIX_RETRY,
            ) from exc

        if resp.status_code not in _SUCCESS_STATUS_CODES:
            cause = f"HTTP {resp.status_code}"
            try:
                detail = resp.json()
            except ValueError:
                detail = None
            if isinstance(detail, dict) and detail.get("error"):
                cause = f"{cause}: {detail['error']}"
            raise ProviderError(
                what=f"Request to {function} failed",
                cause=cause,
                fix=_FIX_RETRY,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise ProviderError(
                what=f"Request to {function} failed",
                cause="Invalid JSON response",
                fix=_FIX_RETRY,
            ) from exc

        if not isinstance(payload, dict):
            raise ProviderError(
                what=f"Request to {function} failed",
                cause=f"Expected a JSON object, got {type(payload).__name__}",
            )

        if payload.get("error"):
            raise ProviderError(
                what=f"{function} reported an error",
                cause=str(payload["error"]),
                fix=_FIX_RETRY,
            )

        return payload

    def fetch_series(
        self,
        lat: float,
        lon: float,
        start_year: int,
        end_year: int,
    ) -> RemoteSeries:
        """Fetch the NDVI series around a point.

        Maps the function's ``{timeSeries, stats, insights, source}``
        response onto ``RemoteSeries``. The provider's ``trendPercent``
        is kept as reported; only the label is derived locally.

        Raises:
            ProviderError: On any request failure or when the payload is
                malformed or has no observations.
        """
        body = {"lat": lat, "lon": lon, "startYear": start_year, "endYear": end_year}
        logger.info(
            "Fetching NDVI for (%.4f, %.4f), %d-%d", lat, lon, start_year, end_year
        )
        payload = self._invoke(_POINT_FUNCTION, body)

        try:
            series = [
                TimeSeriesPoint.model_validate(p) for p in payload["timeSeries"]
            ]
            raw_stats = payload["stats"]
            trend_percent = float(raw_stats["trendPercent"])
            stats = Stats(
                mean=raw_stats["mean"],
                min=raw_stats["min"],
                max=raw_stats["max"],
                std_dev=raw_stats["stdDev"],
                trend=classify_trend(trend_percent),
                trend_percent=trend_percent,
            )
            insights = [str(s) for s in payload.get("insights") or []]
        except (KeyError, TypeError, ValueError, ValidationError) as exc:
            raise ProviderError(
                what="Unexpected NDVI response",
                cause=f"Malformed payload: {exc}",
                fix="Report this issue if it persists",
            ) from exc

        if not series:
            raise ProviderError(
                what="No NDVI observations returned",
                cause=f"Empty time series for ({lat:.4f}, {lon:.4f})",
                fix="Try a wider date range or a different area",
            )

        return RemoteSeries(
            time_series=series,
            stats=stats,
            insights=insights,
            source=str(payload.get("source", "")),
        )

    def fetch_national_summary(self) -> NationalSummary:
        """Fetch yearly national NDVI averages.

        Raises:
            ProviderError: On any request failure or a malformed payload.
        """
        payload = self._invoke(_NATIONAL_FUNCTION, {})
        try:
            raw_stats = payload["stats"]
            return NationalSummary(
                yearly_averages=payload["yearlyAverages"],
                mean=raw_stats["mean"],
                min=raw_stats["min"],
                max=raw_stats["max"],
                insights=payload.get("insights") or [],
                source=str(payload.get("source", "")),
            )
        except (KeyError, TypeError, ValidationError) as exc:
            raise ProviderError(
                what="Unexpected national NDVI response",
                cause=f"Malformed payload: {exc}",
                fix="Report this issue if it persists",
            ) from exc

    def check_status(self) -> ProviderStatus:
        """Check that the point function answers a CORS preflight.

        Never raises.
        """
        try:
            resp = self._session.options(
                self._function_url(_POINT_FUNCTION), timeout=_STATUS_TIMEOUT
            )
            if resp.status_code in _SUCCESS_STATUS_CODES:
                return ProviderStatus(available=True)
            return ProviderStatus(
                available=False,
                message=f"{_POINT_FUNCTION} returned HTTP {resp.status_code}",
            )
        except requests.RequestException as exc:
            return ProviderStatus(
                available=False,
                message=f"{_POINT_FUNCTION} unreachable: {exc}",
            )
