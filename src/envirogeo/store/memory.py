"""In-process document store."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from envirogeo.store.base import (
    Clock,
    Document,
    DocumentStore,
    encode_document,
    matches_filter,
)


class MemoryStore(DocumentStore):
    """Document store held in a dict of lists.

    Each instance owns its data; nothing is shared between instances.
    Returned documents are copies, so callers cannot mutate stored state.
    Documents must be JSON-serialisable, as in ``SQLiteStore``.

    Example:
        >>> store = MemoryStore()
        >>> doc_id = store.insert_one("notes", {"text": "hi"})
        >>> store.find_one("notes", {"_id": doc_id})["text"]
        'hi'
    """

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock=clock)
        self._collections: dict[str, list[Document]] = {}

    def _collection(self, name: str) -> list[Document]:
        return self._collections.setdefault(name, [])

    def _first_index(
        self, collection: str, filter_: Mapping[str, Any] | None
    ) -> int | None:
        for index, doc in enumerate(self._collection(collection)):
            if matches_filter(doc, filter_):
                return index
        return None

    def insert_one(self, collection: str, data: Mapping[str, Any]) -> str:
        with self._lock:
            self._ensure_open()
            doc = self._new_document(copy.deepcopy(dict(data)))
            encode_document(doc)
            self._collection(collection).append(doc)
            return str(doc["_id"])

    def find_one(
        self, collection: str, filter_: Mapping[str, Any] | None = None
    ) -> Document | None:
        with self._lock:
            self._ensure_open()
            index = self._first_index(collection, filter_)
            if index is None:
                return None
            return copy.deepcopy(self._collection(collection)[index])

    def find(
        self, collection: str, filter_: Mapping[str, Any] | None = None
    ) -> list[Document]:
        with self._lock:
            self._ensure_open()
            return [
                copy.deepcopy(doc)
                for doc in self._collection(collection)
                if matches_filter(doc, filter_)
            ]

    def update_one(
        self,
        collection: str,
        filter_: Mapping[str, Any] | None,
        data: Mapping[str, Any],
    ) -> int:
        with self._lock:
            self._ensure_open()
            index = self._first_index(collection, filter_)
            if index is None:
                return 0
            docs = self._collection(collection)
            merged = self._merged(docs[index], copy.deepcopy(dict(data)))
            encode_document(merged)
            docs[index] = merged
            return 1

    def delete_one(
        self, collection: str, filter_: Mapping[str, Any] | None = None
    ) -> int:
        with self._lock:
            self._ensure_open()
            index = self._first_index(collection, filter_)
            if index is None:
                return 0
            del self._collection(collection)[index]
            return 1

    def close(self) -> None:
        with self._lock:
            self._collections.clear()
            super().close()
