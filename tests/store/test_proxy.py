"""Tests for the action-based store proxy."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import pytest

from envirogeo.store import ACTIONS, MemoryStore, SQLiteStore, StoreProxy


@pytest.fixture
def proxy(memory_store: MemoryStore) -> StoreProxy:
    """Proxy over a fresh memory store."""
    return StoreProxy(memory_store)


def _ok(response: dict[str, Any]) -> Any:
    assert response["success"] is True, response
    return response["data"]


@pytest.mark.unit
class TestGenericActions:
    """Verify generic verb result shapes."""

    def test_insert_and_find(self, proxy: StoreProxy) -> None:
        inserted = _ok(
            proxy.handle({"action": "insertOne", "collection": "notes", "data": {"a": 1}})
        )
        assert set(inserted) == {"insertedId"}

        found = _ok(
            proxy.handle(
                {
                    "action": "findOne",
                    "collection": "notes",
                    "filter": {"_id": inserted["insertedId"]},
                }
            )
        )
        assert found["a"] == 1

        listed = _ok(proxy.handle({"action": "find", "collection": "notes"}))
        assert len(listed) == 1

    def test_find_one_missing_is_null(self, proxy: StoreProxy) -> None:
        response = proxy.handle(
            {"action": "findOne", "collection": "notes", "filter": {"a": 2}}
        )
        assert response == {"success": True, "data": None}

    def test_update_and_delete_counts(self, proxy: StoreProxy) -> None:
        proxy.handle({"action": "insertOne", "collection": "notes", "data": {"a": 1}})
        updated = _ok(
            proxy.handle(
                {
                    "action": "updateOne",
                    "collection": "notes",
                    "filter": {"a": 1},
                    "data": {"b": 2},
                }
            )
        )
        assert updated == {"modifiedCount": 1}
        deleted = _ok(
            proxy.handle({"action": "deleteOne", "collection": "notes", "filter": {"a": 1}})
        )
        assert deleted == {"deletedCount": 1}
        again = _ok(
            proxy.handle({"action": "deleteOne", "collection": "notes", "filter": {"a": 1}})
        )
        assert again == {"deletedCount": 0}

    def test_generic_action_requires_collection(self, proxy: StoreProxy) -> None:
        response = proxy.handle({"action": "find"})
        assert response["success"] is False
        assert "requires a collection" in response["error"]


@pytest.mark.unit
class TestNamedActions:
    """Verify profile and history action shapes."""

    def test_upsert_profile_shapes(self, proxy: StoreProxy) -> None:
        body = {
            "action": "upsertProfile",
            "collection": "profiles",
            "userId": "u1",
            "data": {"email": "a@example.com"},
        }
        first = _ok(proxy.handle(body))
        assert first["modifiedCount"] == 0
        assert isinstance(first["upsertedId"], str)
        second = _ok(proxy.handle(body))
        assert second == {"modifiedCount": 1, "upsertedId": None}

        profile = _ok(
            proxy.handle({"action": "getProfile", "collection": "profiles", "userId": "u1"})
        )
        assert profile["email"] == "a@example.com"

    def test_history_actions(self, proxy: StoreProxy) -> None:
        saved = _ok(
            proxy.handle(
                {
                    "action": "saveAnalysis",
                    "collection": "analysis_history",
                    "userId": "u1",
                    "data": {"parameter": "NDVI"},
                }
            )
        )
        history = _ok(
            proxy.handle(
                {
                    "action": "getAnalysisHistory",
                    "collection": "analysis_history",
                    "userId": "u1",
                }
            )
        )
        assert [d["_id"] for d in history] == [saved["insertedId"]]

        wrong_user = _ok(
            proxy.handle(
                {
                    "action": "deleteAnalysis",
                    "collection": "analysis_history",
                    "userId": "u2",
                    "filter": {"_id": saved["insertedId"]},
                }
            )
        )
        assert wrong_user == {"deletedCount": 0}

        deleted = _ok(
            proxy.handle(
                {
                    "action": "deleteAnalysis",
                    "collection": "analysis_history",
                    "userId": "u1",
                    "filter": {"_id": saved["insertedId"]},
                }
            )
        )
        assert deleted == {"deletedCount": 1}

    def test_named_action_requires_user(self, proxy: StoreProxy) -> None:
        response = proxy.handle({"action": "getAnalysisHistory", "collection": "x"})
        assert response["success"] is False
        assert "requires a userId" in response["error"]

    def test_delete_analysis_requires_id(self, proxy: StoreProxy) -> None:
        response = proxy.handle({"action": "deleteAnalysis", "userId": "u1"})
        assert response["success"] is False
        assert "filter._id" in response["error"]


@pytest.mark.unit
class TestErrors:
    """Verify failure bodies."""

    def test_unknown_action(
        self, proxy: StoreProxy, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="envirogeo.store.proxy"):
            response = proxy.handle({"action": "dropDatabase", "collection": "x"})
        assert response == {"success": False, "error": "Unknown action: dropDatabase"}
        assert "dropDatabase" in caplog.text

    def test_missing_action(self, proxy: StoreProxy) -> None:
        response = proxy.handle({"collection": "x"})
        assert response["success"] is False
        assert response["error"].startswith("Invalid request")

    def test_malformed_data(self, proxy: StoreProxy) -> None:
        response = proxy.handle(
            {"action": "insertOne", "collection": "x", "data": "not an object"}
        )
        assert response["success"] is False

    def test_closed_store(self, memory_store: MemoryStore) -> None:
        proxy = StoreProxy(memory_store)
        memory_store.close()
        response = proxy.handle({"action": "find", "collection": "x"})
        assert response["success"] is False
        assert "closed" in response["error"]

    def test_action_names(self) -> None:
        assert ACTIONS == {
            "insertOne",
            "findOne",
            "find",
            "updateOne",
            "deleteOne",
            "upsertProfile",
            "getProfile",
            "saveAnalysis",
            "getAnalysisHistory",
            "deleteAnalysis",
        }

    def test_unserialisable_data_on_sqlite(self, sqlite_store: SQLiteStore) -> None:
        response = StoreProxy(sqlite_store).handle(
            {"action": "insertOne", "collection": "x", "data": {"d": date(2020, 1, 1)}}
        )
        assert response["success"] is False
        assert "not JSON-serialisable" in response["error"]
