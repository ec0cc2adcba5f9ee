"""Configuration for EnviroGeo.

A frozen pydantic ``Config`` carries every setting the analysis API,
the real-data provider and the document store need. A module-level
default can be replaced with ``configure()``; callers that need
isolation pass an explicit ``Config`` instead.
"""

from __future__ import annotations

import logging
import os
from datetime import date
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

logger = logging.getLogger(__name__)

_API_KEY_ENV_VAR = "ENVIROGEO_API_KEY"

StoreBackend = Literal["memory", "sqlite"]


class RegionBounds(BaseModel):
    """Geographic box inside which analyses are accepted.

    Args:
        name: Human-readable region name used in error messages.
        min_lat: Southern latitude limit in WGS84 degrees.
        max_lat: Northern latitude limit in WGS84 degrees.
        min_lon: Western longitude limit in WGS84 degrees.
        max_lon: Eastern longitude limit in WGS84 degrees.

    Example:
        >>> RegionBounds().contains(31.52, 74.35)
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = "Pakistan"
    min_lat: float = 23.5
    max_lat: float = 37.1
    min_lon: float = 60.9
    max_lon: float = 77.5

    @model_validator(mode="after")
    def _validate_limits(self) -> RegionBounds:
        """Ensure limits are inside WGS84 and correctly ordered."""
        if not (-90.0 <= self.min_lat < self.max_lat <= 90.0):
            msg = "latitude limits must satisfy -90 <= min_lat < max_lat <= 90"
            raise ValueError(msg)
        if not (-180.0 <= self.min_lon < self.max_lon <= 180.0):
            msg = "longitude limits must satisfy -180 <= min_lon < max_lon <= 180"
            raise ValueError(msg)
        return self

    def contains(self, lat: float, lon: float) -> bool:
        """Return ``True`` if the point lies inside the box (edges included)."""
        return (
            self.min_lat <= lat <= self.max_lat
            and self.min_lon <= lon <= self.max_lon
        )

    def describe(self) -> str:
        """Return the limits as ``Lat: a-b, Lon: c-d``."""
        return (
            f"Lat: {self.min_lat}-{self.max_lat}, "
            f"Lon: {self.min_lon}-{self.max_lon}"
        )


class Config(BaseModel):
    """Application configuration.

    Args:
        store_backend: Document store implementation, ``"memory"`` or
            ``"sqlite"``.
        store_path: SQLite database file used by the ``sqlite`` backend.
        functions_url: Base URL of the hosted satellite-data functions
            (e.g. ``https://<project>.supabase.co/functions/v1``). When
            unset, every parameter uses synthetic series.
        api_key: Bearer token sent to the data functions. Falls back to
            the ``ENVIROGEO_API_KEY`` environment variable.
        request_timeout: HTTP timeout in seconds.
        region: Region inside which analyses are accepted.
        min_date: First day of the supported analysis window.
        max_date: Last day of the supported analysis window.

    Example:
        >>> cfg = Config(store_backend="sqlite", store_path="~/eg.db")
        >>> cfg.region.name
        'Pakistan'
    """

    model_config = ConfigDict(frozen=True, validate_default=True, extra="forbid")

    store_backend: StoreBackend = "memory"
    store_path: Path = Path("~/.envirogeo/store.db")
    functions_url: str | None = None
    api_key: str = ""
    request_timeout: float = 30.0
    region: RegionBounds = RegionBounds()
    min_date: date = date(2019, 1, 1)
    max_date: date = date(2024, 12, 31)

    @field_validator("store_path", mode="before")
    @classmethod
    def _expand_store_path(cls, v: str | Path) -> Path:
        """Expand ``~`` in the store path."""
        return Path(v).expanduser()

    @field_validator("functions_url")
    @classmethod
    def _validate_functions_url(cls, v: str | None) -> str | None:
        """Require an http(s) URL and strip the trailing slash."""
        if v is None or v == "":
            return None
        if not v.startswith(("http://", "https://")):
            msg = "functions_url must start with 'http://' or 'https://'"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("request_timeout")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        """Ensure the timeout is positive."""
        if v <= 0:
            msg = "request_timeout must be greater than 0"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def _validate_window(self) -> Config:
        """Ensure the analysis window is not inverted."""
        if self.min_date > self.max_date:
            msg = "min_date must not be after max_date"
            raise ValueError(msg)
        return self


_default_config = Config()


def configure(**kwargs: Any) -> None:
    """Set module-level default configuration.

    Creates a new ``Config`` from the current defaults merged with
    the provided keyword arguments.

    Args:
        **kwargs: Any ``Config`` field.

    Raises:
        ValidationError: If a provided value fails pydantic validation.

    Example:
        >>> configure(store_backend="sqlite", request_timeout=10)
    """
    global _default_config  # noqa: PLW0603
    current = _default_config.model_dump()
    current.update(kwargs)
    _default_config = Config(**current)


def get_default_config() -> Config:
    """Return the current module-level default configuration."""
    return _default_config


def resolve_api_key(config: Config) -> str:
    """Return the API key for the data functions.

    Resolution order: ``config.api_key``, then the
    ``ENVIROGEO_API_KEY`` environment variable, then an empty string.
    """
    if config.api_key:
        return config.api_key
    key = os.environ.get(_API_KEY_ENV_VAR, "")
    if not key:
        logger.debug("No API key configured; requests are sent unauthenticated")
    return key
