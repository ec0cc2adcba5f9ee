"""Typed client for the document store proxy.

``StoreClient`` builds action bodies and unwraps proxy responses. The
transport decides where the bodies go: ``LocalTransport`` hands them
to an in-process ``StoreProxy``; ``HTTPTransport`` POSTs them to a
deployed proxy endpoint.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import requests
from pydantic import ValidationError

from envirogeo.exceptions import StoreError
from envirogeo.results import AnalysisRecord
from envirogeo.store import ANALYSIS_HISTORY, PROFILES, DocumentStore, StoreProxy

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30  # seconds


class Transport(Protocol):
    """Delivers an action body and returns the proxy's response body."""

    def send(self, body: dict[str, Any]) -> dict[str, Any]: ...


class LocalTransport:
    """Transport that calls a ``StoreProxy`` in the same process."""

    def __init__(self, proxy: StoreProxy) -> None:
        self._proxy = proxy

    def send(self, body: dict[str, Any]) -> dict[str, Any]:
        return self._proxy.handle(body)


class HTTPTransport:
    """Transport that POSTs action bodies as JSON.

    Args:
        url: Proxy endpoint URL.
        token: Bearer token sent in ``Authorization`` (omitted if empty).
        timeout: Request timeout in seconds.
        session: Optional pre-configured ``requests.Session``.
    """

    def __init__(
        self,
        url: str,
        token: str = "",
        timeout: float = _DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._url = url
        self._token = token
        self._timeout = timeout
        self._session = session or requests.Session()

    def send(self, body: dict[str, Any]) -> dict[str, Any]:
        """POST *body* and return the decoded response.

        Raises:
            StoreError: On network failure, a non-200 status, or a
                response that is not a JSON object.
        """
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        action = body.get("action", "")
        try:
            resp = self._session.post(
                self._url, json=body, headers=headers, timeout=self._timeout
            )
        except requests.RequestException as exc:
            raise StoreError(
                what=f"Store request {action!r} failed",
                cause=str(exc),
                fix="Check your internet connection and try again",
            ) from exc

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if resp.status_code != 200:
            error = "Store operation failed"
            if isinstance(payload, dict) and payload.get("error"):
                error = str(payload["error"])
            raise StoreError(
                what=f"Store request {action!r} failed",
                cause=f"HTTP {resp.status_code}: {error}",
            )
        if not isinstance(payload, dict):
            raise StoreError(
                what=f"Store request {action!r} failed",
                cause="Response is not a JSON object",
            )
        return payload


class StoreClient:
    """Typed wrapper over the proxy actions.

    Every method raises ``StoreError`` when the proxy reports failure.

    Args:
        transport: Where action bodies are sent.

    Example:
        >>> client = StoreClient.for_store(MemoryStore())
        >>> client.upsert_profile("u1", {"email": "a@example.com"})["upsertedId"] is not None
        True
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    @classmethod
    def for_store(cls, store: DocumentStore) -> StoreClient:
        """Return a client talking to *store* through an in-process proxy."""
        return cls(LocalTransport(StoreProxy(store)))

    def _call(
        self,
        action: str,
        *,
        collection: str,
        data: Mapping[str, Any] | None = None,
        filter_: Mapping[str, Any] | None = None,
        user_id: str | None = None,
    ) -> Any:
        body: dict[str, Any] = {"action": action, "collection": collection}
        if data is not None:
            body["data"] = dict(data)
        if filter_ is not None:
            body["filter"] = dict(filter_)
        if user_id is not None:
            body["userId"] = user_id

        logger.debug("Store action %s on %s", action, collection)
        response = self._transport.send(body)
        if not response.get("success"):
            raise StoreError(
                what=f"Store action {action!r} failed",
                cause=str(response.get("error") or "Unknown error"),
            )
        return response.get("data")

    # ── Generic documents ─────────────────────────────────────────────

    def insert_document(self, collection: str, data: Mapping[str, Any]) -> str:
        return str(self._call("insertOne", collection=collection, data=data)["insertedId"])

    def find_document(
        self, collection: str, filter_: Mapping[str, Any]
    ) -> dict[str, Any] | None:
        return self._call("findOne", collection=collection, filter_=filter_)

    def find_documents(
        self, collection: str, filter_: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        return list(self._call("find", collection=collection, filter_=filter_ or {}))

    def update_document(
        self,
        collection: str,
        filter_: Mapping[str, Any],
        data: Mapping[str, Any],
    ) -> int:
        result = self._call("updateOne", collection=collection, filter_=filter_, data=data)
        return int(result["modifiedCount"])

    def delete_document(self, collection: str, filter_: Mapping[str, Any]) -> int:
        result = self._call("deleteOne", collection=collection, filter_=filter_)
        return int(result["deletedCount"])

    # ── Profiles ──────────────────────────────────────────────────────

    def upsert_profile(self, user_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Insert or merge a profile; returns ``{modifiedCount, upsertedId}``."""
        return dict(
            self._call("upsertProfile", collection=PROFILES, data=data, user_id=user_id)
        )

    def get_profile(self, user_id: str) -> dict[str, Any] | None:
        return self._call("getProfile", collection=PROFILES, user_id=user_id)

    # ── Analysis history ──────────────────────────────────────────────

    def save_analysis(self, user_id: str, record: Mapping[str, Any]) -> str:
        """Persist an analysis record; returns its ``_id``."""
        result = self._call(
            "saveAnalysis", collection=ANALYSIS_HISTORY, data=record, user_id=user_id
        )
        return str(result["insertedId"])

    def get_analysis_history(self, user_id: str) -> list[AnalysisRecord]:
        """Return the user's saved analyses, newest first.

        Raises:
            StoreError: If the proxy fails or a stored record is malformed.
        """
        docs = self._call(
            "getAnalysisHistory", collection=ANALYSIS_HISTORY, user_id=user_id
        )
        try:
            return [AnalysisRecord.model_validate(doc) for doc in docs or []]
        except ValidationError as exc:
            raise StoreError(
                what="Malformed analysis record in history",
                cause=str(exc),
            ) from exc

    def delete_analysis(self, user_id: str, analysis_id: str) -> int:
        result = self._call(
            "deleteAnalysis",
            collection=ANALYSIS_HISTORY,
            filter_={"_id": analysis_id},
            user_id=user_id,
        )
        return int(result["deletedCount"])
