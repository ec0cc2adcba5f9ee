"""EnviroGeo: environmental parameter analysis for a selected area.

Example:
    >>> import envirogeo as eg
    >>>
    >>> # Analyse air quality around Lahore in 2023
    >>> area = eg.area_from_coordinates(31.5204, 74.3587)
    >>> result = eg.analyze("AQI", area, "2023-01-01", "2023-12-31")
    >>> print(result.insights[0])  # doctest: +SKIP
    >>>
    >>> # Save it to the user's history
    >>> client = eg.StoreClient.for_store(eg.open_store())
    >>> history = eg.AnalysisHistory(client, user_id="u1")
    >>> history.save(result)  # doctest: +SKIP
"""

from envirogeo.__about__ import __version__
from envirogeo.accounts import UserProfile, fetch_profile, sync_profile
from envirogeo.api import analyze, national_ndvi_summary
from envirogeo.client import HTTPTransport, LocalTransport, StoreClient
from envirogeo.config import Config, RegionBounds, configure, get_default_config
from envirogeo.exceptions import (
    ConfigurationError,
    EnviroGeoError,
    InputError,
    ProviderError,
    StoreError,
)
from envirogeo.geometry import (
    AreaSelection,
    area_from_bbox,
    area_from_coordinates,
    area_from_geojson,
)
from envirogeo.history import AnalysisHistory, Notification
from envirogeo.parameters import PARAMETERS, ParameterDefinition, get_parameter
from envirogeo.results import (
    AnalysisRecord,
    AnalysisResult,
    NationalSummary,
    Stats,
    TimeSeriesPoint,
)
from envirogeo.store import MemoryStore, SQLiteStore, StoreProxy, open_store

__all__ = [
    # Version
    "__version__",
    # Analysis API
    "analyze",
    "national_ndvi_summary",
    # Areas
    "AreaSelection",
    "area_from_bbox",
    "area_from_coordinates",
    "area_from_geojson",
    # Parameters
    "PARAMETERS",
    "ParameterDefinition",
    "get_parameter",
    # Configuration
    "Config",
    "RegionBounds",
    "configure",
    "get_default_config",
    # Results
    "AnalysisRecord",
    "AnalysisResult",
    "NationalSummary",
    "Stats",
    "TimeSeriesPoint",
    # Store and history
    "AnalysisHistory",
    "HTTPTransport",
    "LocalTransport",
    "MemoryStore",
    "Notification",
    "SQLiteStore",
    "StoreClient",
    "StoreProxy",
    "UserProfile",
    "fetch_profile",
    "open_store",
    "sync_profile",
    # Exceptions
    "ConfigurationError",
    "EnviroGeoError",
    "InputError",
    "ProviderError",
    "StoreError",
]
