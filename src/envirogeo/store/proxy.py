"""Action-based request handler in front of a document store.

Request bodies name an action and its arguments::

    {"action": "saveAnalysis", "collection": "analysis_history",
     "userId": "u1", "data": {...}}

Responses are ``{"success": true, "data": ...}`` or
``{"success": false, "error": "..."}``; the handler never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from envirogeo.exceptions import EnviroGeoError, StoreError
from envirogeo.store.base import DocumentStore

logger = logging.getLogger(__name__)


class StoreRequest(BaseModel):
    """Validated proxy request body."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    action: str
    collection: str = ""
    data: dict[str, Any] | None = None
    filter: dict[str, Any] | None = None
    user_id: str | None = Field(default=None, alias="userId")

    def require_collection(self) -> str:
        if not self.collection:
            raise StoreError(
                what=f"{self.action} requires a collection",
                fix="Include 'collection' in the request body",
            )
        return self.collection

    def require_user(self) -> str:
        if not self.user_id:
            raise StoreError(
                what=f"{self.action} requires a userId",
                fix="Include 'userId' in the request body",
            )
        return self.user_id


Handler = Callable[[DocumentStore, StoreRequest], Any]


def _insert_one(store: DocumentStore, req: StoreRequest) -> Any:
    return {"insertedId": store.insert_one(req.require_collection(), req.data or {})}


def _find_one(store: DocumentStore, req: StoreRequest) -> Any:
    return store.find_one(req.require_collection(), req.filter)


def _find(store: DocumentStore, req: StoreRequest) -> Any:
    return store.find(req.require_collection(), req.filter)


def _update_one(store: DocumentStore, req: StoreRequest) -> Any:
    count = store.update_one(req.require_collection(), req.filter, req.data or {})
    return {"modifiedCount": count}


def _delete_one(store: DocumentStore, req: StoreRequest) -> Any:
    return {"deletedCount": store.delete_one(req.require_collection(), req.filter)}


def _upsert_profile(store: DocumentStore, req: StoreRequest) -> Any:
    outcome = store.upsert_profile(req.require_user(), req.data or {})
    return {"modifiedCount": outcome.modified_count, "upsertedId": outcome.upserted_id}


def _get_profile(store: DocumentStore, req: StoreRequest) -> Any:
    return store.get_profile(req.require_user())


def _save_analysis(store: DocumentStore, req: StoreRequest) -> Any:
    return {"insertedId": store.save_analysis(req.require_user(), req.data or {})}


def _get_analysis_history(store: DocumentStore, req: StoreRequest) -> Any:
    return store.get_analysis_history(req.require_user())


def _delete_analysis(store: DocumentStore, req: StoreRequest) -> Any:
    analysis_id = (req.filter or {}).get("_id")
    if not analysis_id:
        raise StoreError(
            what="deleteAnalysis requires filter._id",
            fix="Pass the record id as {'filter': {'_id': ...}}",
        )
    return {"deletedCount": store.delete_analysis(req.require_user(), str(analysis_id))}


_ACTIONS: dict[str, Handler] = {
    "insertOne": _insert_one,
    "findOne": _find_one,
    "find": _find,
    "updateOne": _update_one,
    "deleteOne": _delete_one,
    "upsertProfile": _upsert_profile,
    "getProfile": _get_profile,
    "saveAnalysis": _save_analysis,
    "getAnalysisHistory": _get_analysis_history,
    "deleteAnalysis": _delete_analysis,
}

ACTIONS: frozenset[str] = frozenset(_ACTIONS)


class StoreProxy:
    """Dispatches action bodies to a ``DocumentStore``.

    Args:
        store: Backend that executes the actions.

    Example:
        >>> proxy = StoreProxy(MemoryStore())
        >>> proxy.handle({"action": "find", "collection": "notes"})
        {'success': True, 'data': []}
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @property
    def store(self) -> DocumentStore:
        return self._store

    def handle(self, body: Mapping[str, Any]) -> dict[str, Any]:
        """Execute one action body and wrap the outcome.

        Profile and history actions always operate on their own
        collections; ``collection`` is only read by the generic verbs.
        """
        try:
            request = StoreRequest.model_validate(body)
            handler = _ACTIONS.get(request.action)
            if handler is None:
                raise StoreError(what=f"Unknown action: {request.action}")
            data = handler(self._store, request)
        except EnviroGeoError as exc:
            logger.warning("Store action %r failed: %s", body.get("action"), exc.what)
            return {"success": False, "error": str(exc)}
        except ValidationError as exc:
            logger.warning("Rejected malformed store request: %s", exc)
            return {"success": False, "error": f"Invalid request: {exc}"}
        return {"success": True, "data": data}
