"""SQLite-backed document store.

Documents are stored as JSON text in a single table keyed by
collection and ``_id``. Insertion order is the table's row order.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from envirogeo.exceptions import StoreError
from envirogeo.store.base import (
    Clock,
    Document,
    DocumentStore,
    encode_document,
    matches_filter,
)

logger = logging.getLogger(__name__)

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS documents (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    collection TEXT NOT NULL,
    doc_id TEXT NOT NULL,
    body TEXT NOT NULL,
    UNIQUE (collection, doc_id)
);
CREATE INDEX IF NOT EXISTS idx_collection ON documents(collection);
"""

_IN_MEMORY = ":memory:"


class SQLiteStore(DocumentStore):
    """Document store persisted to a SQLite database file.

    Holds one connection for its lifetime. The connection is shared
    across threads and every statement runs under the store lock.

    Args:
        path: Database file path, or ``":memory:"``.
        clock: Optional time source for document timestamps.

    Raises:
        StoreError: If the database cannot be opened or initialised.

    Example:
        >>> with SQLiteStore(tmp_path / "store.db") as store:  # doctest: +SKIP
        ...     store.insert_one("notes", {"text": "hi"})
    """

    def __init__(self, path: str | Path, clock: Clock | None = None) -> None:
        super().__init__(clock=clock)
        self._path = str(path)
        try:
            if self._path != _IN_MEMORY:
                Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self._path, check_same_thread=False)
            self._conn.executescript(_CREATE_TABLE_SQL)
        except (sqlite3.Error, OSError) as exc:
            raise StoreError(
                what="Could not open document store",
                cause=f"{self._path}: {exc}",
                fix="Check that store_path points to a writable location",
            ) from exc
        logger.info("Opened SQLite document store at %s", self._path)

    @property
    def path(self) -> str:
        """Database location."""
        return self._path

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Run statements atomically under the store lock.

        Raises:
            StoreError: Wrapping any ``sqlite3.Error``.
        """
        with self._lock:
            self._ensure_open()
            try:
                with self._conn:
                    yield self._conn
            except sqlite3.Error as exc:
                raise StoreError(
                    what="Document store operation failed",
                    cause=str(exc),
                ) from exc

    @staticmethod
    def _rows(
        conn: sqlite3.Connection, collection: str
    ) -> Iterator[tuple[str, Document]]:
        cursor = conn.execute(
            "SELECT doc_id, body FROM documents WHERE collection = ? ORDER BY seq",
            (collection,),
        )
        for doc_id, body in cursor:
            yield doc_id, json.loads(body)

    def _first_match(
        self,
        conn: sqlite3.Connection,
        collection: str,
        filter_: Mapping[str, Any] | None,
    ) -> tuple[str, Document] | None:
        for doc_id, doc in self._rows(conn, collection):
            if matches_filter(doc, filter_):
                return doc_id, doc
        return None

    def insert_one(self, collection: str, data: Mapping[str, Any]) -> str:
        doc = self._new_document(data)
        body = encode_document(doc)
        with self._transaction() as conn:
            conn.execute(
                "INSERT INTO documents (collection, doc_id, body) VALUES (?, ?, ?)",
                (collection, str(doc["_id"]), body),
            )
        return str(doc["_id"])

    def find_one(
        self, collection: str, filter_: Mapping[str, Any] | None = None
    ) -> Document | None:
        with self._transaction() as conn:
            match = self._first_match(conn, collection, filter_)
        return match[1] if match is not None else None

    def find(
        self, collection: str, filter_: Mapping[str, Any] | None = None
    ) -> list[Document]:
        with self._transaction() as conn:
            return [
                doc
                for _, doc in self._rows(conn, collection)
                if matches_filter(doc, filter_)
            ]

    def update_one(
        self,
        collection: str,
        filter_: Mapping[str, Any] | None,
        data: Mapping[str, Any],
    ) -> int:
        with self._transaction() as conn:
            match = self._first_match(conn, collection, filter_)
            if match is None:
                return 0
            doc_id, doc = match
            body = encode_document(self._merged(doc, data))
            conn.execute(
                "UPDATE documents SET body = ? WHERE collection = ? AND doc_id = ?",
                (body, collection, doc_id),
            )
            return 1

    def delete_one(
        self, collection: str, filter_: Mapping[str, Any] | None = None
    ) -> int:
        with self._transaction() as conn:
            match = self._first_match(conn, collection, filter_)
            if match is None:
                return 0
            conn.execute(
                "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
                (collection, match[0]),
            )
            return 1

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._conn.close()
            super().close()
        logger.debug("Closed SQLite document store at %s", self._path)
