"""Tests for user profile synchronisation."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from envirogeo.accounts import UserProfile, fetch_profile, sync_profile
from envirogeo.client import StoreClient
from envirogeo.exceptions import StoreError


@pytest.mark.unit
class TestSyncProfile:
    """Verify upsert-then-fetch behaviour."""

    def test_creates_profile(self, client: StoreClient) -> None:
        profile = sync_profile(
            client,
            "u1",
            email="a@example.com",
            full_name="A. User",
            avatar_url="https://example.com/a.png",
        )
        assert isinstance(profile, UserProfile)
        assert profile.user_id == "u1"
        assert profile.email == "a@example.com"
        assert profile.full_name == "A. User"
        assert profile.avatar_url == "https://example.com/a.png"
        assert profile.id is not None
        assert profile.created_at is not None

    def test_none_fields_do_not_overwrite(self, client: StoreClient) -> None:
        sync_profile(client, "u1", email="a@example.com", full_name="A. User")
        profile = sync_profile(client, "u1", email="new@example.com")
        assert profile is not None
        assert profile.email == "new@example.com"
        assert profile.full_name == "A. User"

    def test_repeated_sync_keeps_one_profile(self, client: StoreClient) -> None:
        first = sync_profile(client, "u1", email="a@example.com")
        second = sync_profile(client, "u1", email="a@example.com")
        assert first is not None and second is not None
        assert first.id == second.id
        assert len(client.find_documents("profiles", {"userId": "u1"})) == 1

    def test_store_failure_propagates(self) -> None:
        failing = MagicMock(spec=StoreClient)
        failing.upsert_profile.side_effect = StoreError(what="Store action failed")
        with pytest.raises(StoreError):
            sync_profile(failing, "u1", email="a@example.com")


@pytest.mark.unit
class TestFetchProfile:
    """Verify profile lookup."""

    def test_missing(self, client: StoreClient) -> None:
        assert fetch_profile(client, "nobody") is None

    def test_malformed(self) -> None:
        broken = MagicMock(spec=StoreClient)
        broken.get_profile.return_value = {"email": "no-user-id@example.com"}
        with pytest.raises(StoreError, match="Malformed profile"):
            fetch_profile(broken, "u1")
