"""Provider interface contract and shared types.

A provider supplies real observations for parameters that have a
satellite-data path, replacing the synthetic pipeline for them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import requests

from envirogeo.config import Config
from envirogeo.results import Stats, TimeSeriesPoint


@dataclass
class RemoteSeries:
    """A series with statistics and insights computed by a provider.

    Args:
        time_series: Ordered observations (never empty).
        stats: Provider statistics mapped onto ``Stats``; the trend
            label is derived locally from the provider's percentage.
        insights: Provider insight sentences.
        source: Upstream dataset name.
    """

    time_series: list[TimeSeriesPoint]
    stats: Stats
    insights: list[str] = field(default_factory=list)
    source: str = ""


@dataclass
class ProviderStatus:
    """Operational status of a data provider.

    Args:
        available: ``True`` if the provider is reachable.
        message: Human-readable status message (empty when healthy).

    Example:
        >>> ProviderStatus(available=True).message
        ''
    """

    available: bool = False
    message: str = ""


class DataProvider(ABC):
    """Abstract base class for real-data providers.

    Subclasses set ``_name`` and ``parameters`` (the parameter ids they
    serve) and implement ``fetch_series`` and ``check_status``.

    Args:
        config: Configuration snapshot for this provider instance.
    """

    _name: str = ""
    parameters: frozenset[str] = frozenset()

    def __init__(self, config: Config) -> None:
        """Initialize with a configuration snapshot.

        Args:
            config: Configuration captured by the caller.
        """
        self._config = config
        self._session: requests.Session = requests.Session()

    @property
    def name(self) -> str:
        """Provider identifier."""
        return self._name

    @abstractmethod
    def fetch_series(
        self,
        lat: float,
        lon: float,
        start_year: int,
        end_year: int,
    ) -> RemoteSeries:
        """Fetch observations around a point for a range of years.

        Performs a single attempt; the caller surfaces failures.

        Raises:
            ProviderError: On network errors, non-success responses,
                an embedded error field, or an unusable payload.
        """
        ...

    @abstractmethod
    def check_status(self) -> ProviderStatus:
        """Check provider reachability.

        Never raises; returns ``available=False`` with a message instead.
        """
        ...
