"""User profile synchronisation."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from envirogeo.client import StoreClient
from envirogeo.exceptions import StoreError

logger = logging.getLogger(__name__)


class UserProfile(BaseModel):
    """A stored user profile.

    Example:
        >>> UserProfile.model_validate({"userId": "u1", "fullName": "A. User"}).full_name
        'A. User'
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    user_id: str = Field(alias="userId")
    email: str | None = None
    full_name: str | None = Field(default=None, alias="fullName")
    avatar_url: str | None = Field(default=None, alias="avatarUrl")
    id: str | None = Field(default=None, alias="_id")
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")


def fetch_profile(client: StoreClient, user_id: str) -> UserProfile | None:
    """Return the stored profile of *user_id*, or ``None`` if absent.

    Raises:
        StoreError: If the store fails or the profile is malformed.
    """
    doc = client.get_profile(user_id)
    if doc is None:
        return None
    try:
        return UserProfile.model_validate(doc)
    except ValidationError as exc:
        raise StoreError(what=f"Malformed profile for user {user_id}", cause=str(exc)) from exc


def sync_profile(
    client: StoreClient,
    user_id: str,
    *,
    email: str | None = None,
    full_name: str | None = None,
    avatar_url: str | None = None,
) -> UserProfile | None:
    """Upsert the user's profile and return the stored version.

    Fields passed as ``None`` are left untouched on an existing profile.

    Raises:
        StoreError: If the store fails.
    """
    data = {
        key: value
        for key, value in (
            ("email", email),
            ("fullName", full_name),
            ("avatarUrl", avatar_url),
        )
        if value is not None
    }
    client.upsert_profile(user_id, data)
    logger.debug("Synced profile for user %s", user_id)
    return fetch_profile(client, user_id)
