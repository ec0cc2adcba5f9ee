"""Per-user analysis history with user-facing notifications.

``AnalysisHistory`` wraps the store client for one signed-in user.
Store failures never propagate: they are logged and turned into
``Notification`` objects the caller can display and discard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from envirogeo.client import StoreClient
from envirogeo.exceptions import StoreError
from envirogeo.results import AnalysisRecord, AnalysisResult

logger = logging.getLogger(__name__)

NotificationLevel = Literal["success", "error", "info"]


@dataclass(frozen=True)
class Notification:
    """A transient message for the user.

    Example:
        >>> Notification("error", "Failed to save analysis").level
        'error'
    """

    level: NotificationLevel
    message: str


class AnalysisHistory:
    """Saved analyses of one user.

    Args:
        client: Store client used for all operations.
        user_id: Signed-in user id, or ``None`` when signed out.

    Example:
        >>> history = AnalysisHistory(StoreClient.for_store(MemoryStore()), "u1")
        >>> history.save(result)  # doctest: +SKIP
        >>> [n.message for n in history.drain_notifications()]  # doctest: +SKIP
        ['Analysis saved to history']
    """

    def __init__(self, client: StoreClient, user_id: str | None) -> None:
        self._client = client
        self._user_id = user_id
        self._records: list[AnalysisRecord] = []
        self._notifications: list[Notification] = []

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def records(self) -> list[AnalysisRecord]:
        """Records from the last successful ``fetch()``, newest first."""
        return list(self._records)

    def _notify(self, level: NotificationLevel, message: str) -> None:
        self._notifications.append(Notification(level, message))

    def drain_notifications(self) -> list[Notification]:
        """Return pending notifications and clear them."""
        pending, self._notifications = self._notifications, []
        return pending

    def fetch(self) -> list[AnalysisRecord]:
        """Reload the user's history.

        Returns the previous records unchanged if the store fails, and
        an empty list when no user is signed in.
        """
        if not self._user_id:
            return []
        try:
            self._records = self._client.get_analysis_history(self._user_id)
        except StoreError as exc:
            logger.warning("Error fetching history: %s", exc.what)
            self._notify("error", "Failed to load analysis history")
        return self.records

    def save(self, result: AnalysisResult) -> str | None:
        """Save *result* to the user's history and refresh it.

        The result object is not modified.

        Returns:
            The new record id, or ``None`` on failure or when signed out.
        """
        if not self._user_id:
            self._notify("error", "Please sign in to save analysis")
            return None
        try:
            record_id = self._client.save_analysis(self._user_id, result.to_record())
        except StoreError as exc:
            logger.warning("Error saving analysis: %s", exc.what)
            self._notify("error", "Failed to save analysis")
            return None
        logger.info("Saved %s analysis %s", result.parameter, record_id)
        self._notify("success", "Analysis saved to history")
        self.fetch()
        return record_id

    def remove(self, analysis_id: str) -> bool:
        """Delete one of the user's records and refresh the history.

        Returns:
            ``True`` if a record was deleted.
        """
        if not self._user_id:
            return False
        try:
            deleted = self._client.delete_analysis(self._user_id, analysis_id)
        except StoreError as exc:
            logger.warning("Error deleting analysis: %s", exc.what)
            self._notify("error", "Failed to delete analysis")
            return False
        self._notify("success", "Analysis deleted")
        self.fetch()
        return deleted > 0

    def open(self, analysis_id: str) -> AnalysisResult | None:
        """Rebuild the result of a fetched record, or ``None`` if unknown."""
        for record in self._records:
            if record.id == analysis_id:
                return record.to_result()
        return None
