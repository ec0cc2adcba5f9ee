"""Tests for the store client and its transports."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from envirogeo.client import HTTPTransport, LocalTransport, StoreClient
from envirogeo.exceptions import StoreError
from envirogeo.results import AnalysisRecord, AnalysisResult
from envirogeo.store import MemoryStore, StoreProxy

_URL = "https://example.supabase.co/functions/v1/mongodb"


def _response(status: int = 200, payload: Any = None) -> MagicMock:
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


@pytest.mark.unit
class TestStoreClientLocal:
    """Verify typed operations through an in-process proxy."""

    def test_generic_documents(self, client: StoreClient) -> None:
        doc_id = client.insert_document("notes", {"text": "hi"})
        assert client.find_document("notes", {"_id": doc_id})["text"] == "hi"  # type: ignore[index]
        assert len(client.find_documents("notes")) == 1
        assert client.update_document("notes", {"_id": doc_id}, {"text": "yo"}) == 1
        assert client.delete_document("notes", {"_id": doc_id}) == 1
        assert client.find_document("notes", {"_id": doc_id}) is None

    def test_profiles(self, client: StoreClient) -> None:
        first = client.upsert_profile("u1", {"email": "a@example.com"})
        assert first["modifiedCount"] == 0
        profile = client.get_profile("u1")
        assert profile is not None
        assert profile["_id"] == first["upsertedId"]

    def test_history_is_typed(
        self, client: StoreClient, sample_result: AnalysisResult
    ) -> None:
        record_id = client.save_analysis("u1", sample_result.to_record())
        history = client.get_analysis_history("u1")
        assert len(history) == 1
        assert isinstance(history[0], AnalysisRecord)
        assert history[0].id == record_id
        assert history[0].user_id == "u1"
        assert history[0].results.stats == sample_result.stats

    def test_delete_analysis(self, client: StoreClient, sample_result: AnalysisResult) -> None:
        record_id = client.save_analysis("u1", sample_result.to_record())
        assert client.delete_analysis("u2", record_id) == 0
        assert client.delete_analysis("u1", record_id) == 1

    def test_malformed_history_record(self, memory_store: MemoryStore) -> None:
        memory_store.save_analysis("u1", {"parameter": "NDVI"})
        client = StoreClient.for_store(memory_store)
        with pytest.raises(StoreError, match="Malformed analysis record"):
            client.get_analysis_history("u1")

    def test_proxy_failure_raises(self) -> None:
        transport = MagicMock(spec=LocalTransport)
        transport.send.return_value = {"success": False, "error": "Unknown action: x"}
        client = StoreClient(transport)
        with pytest.raises(StoreError, match="Unknown action: x"):
            client.get_profile("u1")

    def test_body_shape(self) -> None:
        transport = MagicMock(spec=LocalTransport)
        transport.send.return_value = {"success": True, "data": {"deletedCount": 1}}
        StoreClient(transport).delete_analysis("u1", "rec-1")
        transport.send.assert_called_once_with(
            {
                "action": "deleteAnalysis",
                "collection": "analysis_history",
                "filter": {"_id": "rec-1"},
                "userId": "u1",
            }
        )

    def test_local_transport_delegates(self) -> None:
        proxy = MagicMock(spec=StoreProxy)
        proxy.handle.return_value = {"success": True, "data": []}
        assert LocalTransport(proxy).send({"action": "find"}) == {"success": True, "data": []}
        proxy.handle.assert_called_once_with({"action": "find"})


@pytest.mark.unit
class TestHTTPTransport:
    """Verify HTTP delivery and error mapping."""

    def test_posts_json_with_bearer(self) -> None:
        session = MagicMock(spec=requests.Session)
        session.post.return_value = _response(payload={"success": True, "data": None})
        transport = HTTPTransport(_URL, token="tok", timeout=5, session=session)

        body = {"action": "getProfile", "collection": "profiles", "userId": "u1"}
        assert transport.send(body) == {"success": True, "data": None}

        args, kwargs = session.post.call_args
        assert args[0] == _URL
        assert kwargs["json"] == body
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert kwargs["timeout"] == 5

    def test_no_token_no_auth_header(self) -> None:
        session = MagicMock(spec=requests.Session)
        session.post.return_value = _response(payload={"success": True, "data": []})
        HTTPTransport(_URL, session=session).send({"action": "find"})
        assert "Authorization" not in session.post.call_args.kwargs["headers"]

    def test_network_error(self) -> None:
        session = MagicMock(spec=requests.Session)
        session.post.side_effect = requests.ConnectionError("offline")
        with pytest.raises(StoreError, match="offline"):
            HTTPTransport(_URL, session=session).send({"action": "find"})

    def test_server_error_uses_error_field(self) -> None:
        session = MagicMock(spec=requests.Session)
        session.post.return_value = _response(
            500, {"success": False, "error": "MongoDB URI not configured"}
        )
        with pytest.raises(StoreError, match="HTTP 500: MongoDB URI not configured"):
            HTTPTransport(_URL, session=session).send({"action": "find"})

    def test_server_error_without_body(self) -> None:
        session = MagicMock(spec=requests.Session)
        session.post.return_value = _response(502, ValueError("no json"))
        with pytest.raises(StoreError, match="Store operation failed"):
            HTTPTransport(_URL, session=session).send({"action": "find"})

    def test_non_object_response(self) -> None:
        session = MagicMock(spec=requests.Session)
        session.post.return_value = _response(payload=["x"])
        with pytest.raises(StoreError, match="not a JSON object"):
            HTTPTransport(_URL, session=session).send({"action": "find"})

    def test_client_over_http(self) -> None:
        session = MagicMock(spec=requests.Session)
        session.post.return_value = _response(
            payload={"success": True, "data": {"insertedId": "abc"}}
        )
        client = StoreClient(HTTPTransport(_URL, session=session))
        assert client.save_analysis("u1", {"parameter": "NDVI"}) == "abc"
