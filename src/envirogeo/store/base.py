"""Document store interface shared by all backends.

Documents are JSON-compatible dicts grouped into named collections.
Backends implement the five generic verbs; the profile and analysis
history operations are built once on top of them here.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from types import TracebackType
from typing import Any

from envirogeo.exceptions import StoreError

logger = logging.getLogger(__name__)

PROFILES = "profiles"
ANALYSIS_HISTORY = "analysis_history"

Document = dict[str, Any]
Clock = Callable[[], datetime]

# Maintained by the store; caller-supplied values are ignored.
_SYSTEM_FIELDS = frozenset({"_id", "createdAt", "updatedAt"})


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def matches_filter(doc: Mapping[str, Any], filter_: Mapping[str, Any] | None) -> bool:
    """Return ``True`` if every filter key equals the document's value.

    An empty or missing filter matches every document.

    Example:
        >>> matches_filter({"userId": "u1", "a": 1}, {"userId": "u1"})
        True
    """
    if not filter_:
        return True
    return all(key in doc and doc[key] == value for key, value in filter_.items())


def encode_document(doc: Mapping[str, Any]) -> str:
    """Serialise *doc* to JSON text.

    Raises:
        StoreError: If a value is not JSON-serialisable.
    """
    try:
        return json.dumps(doc)
    except (TypeError, ValueError) as exc:
        raise StoreError(
            what="Document is not JSON-serialisable",
            cause=str(exc),
            fix="Convert dates and other objects to strings or numbers before storing",
        ) from exc


@dataclass(frozen=True)
class UpsertResult:
    """Outcome of ``upsert_profile``.

    Args:
        modified_count: 1 when an existing profile was merged, else 0.
        upserted_id: ``_id`` of the inserted profile, or ``None`` when
            an existing profile was updated.
    """

    modified_count: int
    upserted_id: str | None


class DocumentStore(ABC):
    """Abstract base class for document stores.

    Writes are serialised through a re-entrant lock held by each store
    instance. Concurrent writers to the same document resolve as last
    writer wins.

    Args:
        clock: Callable returning the current time; timestamps are
            stored as ISO-8601 strings of its (UTC) result.

    Example:
        >>> with MemoryStore() as store:  # doctest: +SKIP
        ...     store.insert_one("notes", {"text": "hello"})
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or _utc_now
        self._lock = threading.RLock()
        self._closed = False

    # ── Lifecycle ─────────────────────────────────────────────────────

    def __enter__(self) -> DocumentStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        """``True`` once ``close()`` has been called."""
        return self._closed

    def close(self) -> None:
        """Release backend resources. Further calls raise ``StoreError``."""
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreError(
                what="Document store is closed",
                fix="Open a new store with open_store()",
            )

    def _timestamp(self) -> str:
        return self._clock().isoformat()

    @staticmethod
    def _user_fields(data: Mapping[str, Any]) -> Document:
        return {k: v for k, v in data.items() if k not in _SYSTEM_FIELDS}

    def _new_document(self, data: Mapping[str, Any]) -> Document:
        """Build an insertable document with a fresh ``_id`` and timestamps.

        ``_id``, ``createdAt`` and ``updatedAt`` in *data* are ignored.
        """
        now = self._timestamp()
        return {
            "_id": str(uuid.uuid4()),
            **self._user_fields(data),
            "createdAt": now,
            "updatedAt": now,
        }

    def _merged(self, doc: Mapping[str, Any], data: Mapping[str, Any]) -> Document:
        """Return *doc* updated with *data* and a fresh ``updatedAt``."""
        return {**doc, **self._user_fields(data), "updatedAt": self._timestamp()}

    # ── Generic verbs ─────────────────────────────────────────────────

    @abstractmethod
    def insert_one(self, collection: str, data: Mapping[str, Any]) -> str:
        """Insert a document and return its generated ``_id``."""
        ...

    @abstractmethod
    def find_one(
        self, collection: str, filter_: Mapping[str, Any] | None = None
    ) -> Document | None:
        """Return the first matching document in insertion order, or ``None``."""
        ...

    @abstractmethod
    def find(
        self, collection: str, filter_: Mapping[str, Any] | None = None
    ) -> list[Document]:
        """Return all matching documents in insertion order."""
        ...

    @abstractmethod
    def update_one(
        self,
        collection: str,
        filter_: Mapping[str, Any] | None,
        data: Mapping[str, Any],
    ) -> int:
        """Merge *data* into the first match and refresh ``updatedAt``.

        ``_id``, ``createdAt`` and ``updatedAt`` in *data* are ignored.

        Returns:
            Number of modified documents (0 or 1).
        """
        ...

    @abstractmethod
    def delete_one(
        self, collection: str, filter_: Mapping[str, Any] | None = None
    ) -> int:
        """Delete the first match.

        Returns:
            Number of deleted documents (0 or 1).
        """
        ...

    # ── Profiles ──────────────────────────────────────────────────────

    def upsert_profile(self, user_id: str, data: Mapping[str, Any]) -> UpsertResult:
        """Insert the user's profile or merge *data* into the existing one.

        Repeating the call with the same arguments leaves a single
        profile with the same fields.
        """
        with self._lock:
            existing = self.find_one(PROFILES, {"userId": user_id})
            if existing is not None:
                self.update_one(
                    PROFILES, {"_id": existing["_id"]}, {**data, "userId": user_id}
                )
                return UpsertResult(modified_count=1, upserted_id=None)
            inserted_id = self.insert_one(PROFILES, {"userId": user_id, **data})
            logger.info("Created profile for user %s", user_id)
            return UpsertResult(modified_count=0, upserted_id=inserted_id)

    def get_profile(self, user_id: str) -> Document | None:
        """Return the user's profile document, or ``None``."""
        return self.find_one(PROFILES, {"userId": user_id})

    # ── Analysis history ──────────────────────────────────────────────

    def save_analysis(self, user_id: str, record: Mapping[str, Any]) -> str:
        """Persist an analysis record owned by *user_id*.

        Returns:
            The record's ``_id``.
        """
        inserted_id = self.insert_one(ANALYSIS_HISTORY, {**record, "userId": user_id})
        logger.debug("Saved analysis %s for user %s", inserted_id, user_id)
        return inserted_id

    def get_analysis_history(self, user_id: str) -> list[Document]:
        """Return the user's records, newest ``createdAt`` first.

        Records created at the same instant are ordered latest insertion
        first.
        """
        docs = self.find(ANALYSIS_HISTORY, {"userId": user_id})
        docs.reverse()
        return sorted(docs, key=lambda d: str(d.get("createdAt", "")), reverse=True)

    def delete_analysis(self, user_id: str, analysis_id: str) -> int:
        """Delete a record only if both ``_id`` and ``userId`` match.

        Returns:
            Number of deleted records (0 or 1).
        """
        return self.delete_one(
            ANALYSIS_HISTORY, {"_id": analysis_id, "userId": user_id}
        )
