"""Document store backends and the action proxy.

``open_store(config)`` returns the backend selected by
``Config.store_backend``.
"""

from __future__ import annotations

import logging

from envirogeo.config import Config, get_default_config
from envirogeo.exceptions import ConfigurationError
from envirogeo.store.base import (
    ANALYSIS_HISTORY,
    PROFILES,
    DocumentStore,
    UpsertResult,
    matches_filter,
)
from envirogeo.store.memory import MemoryStore
from envirogeo.store.proxy import ACTIONS, StoreProxy, StoreRequest
from envirogeo.store.sqlite import SQLiteStore

logger = logging.getLogger(__name__)

__all__ = [
    "ACTIONS",
    "ANALYSIS_HISTORY",
    "PROFILES",
    "DocumentStore",
    "MemoryStore",
    "SQLiteStore",
    "StoreProxy",
    "StoreRequest",
    "UpsertResult",
    "matches_filter",
    "open_store",
]


def open_store(config: Config | None = None) -> DocumentStore:
    """Open the document store selected by *config*.

    Args:
        config: Configuration; the module default when omitted.

    Returns:
        A new ``MemoryStore`` or ``SQLiteStore``.

    Raises:
        ConfigurationError: If the backend name is not recognised.
        StoreError: If the SQLite database cannot be opened.

    Example:
        >>> store = open_store(Config(store_backend="memory"))
        >>> type(store).__name__
        'MemoryStore'
    """
    cfg = config or get_default_config()
    logger.debug("Opening %s document store", cfg.store_backend)
    if cfg.store_backend == "memory":
        return MemoryStore()
    if cfg.store_backend == "sqlite":
        return SQLiteStore(cfg.store_path)
    raise ConfigurationError(
        what=f"Unknown store backend: {cfg.store_backend!r}",
        cause="Valid backends are: memory, sqlite",
        fix="Set store_backend to one of: memory, sqlite",
    )
