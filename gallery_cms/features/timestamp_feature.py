"""Timestamp feature for automatic timestamp management"""

import threading
from datetime import UTC, datetime, timedelta
from typing import Any

from gallery_cms.features.base_feature import RepositoryFeature

_RESOLUTION = timedelta(microseconds=1)


class TimestampFeature(RepositoryFeature):
    """
    Populates ``created_at``/``updated_at`` on insert and refreshes
    ``updated_at`` on every update.

    Timestamps handed out by one feature instance are strictly increasing,
    even when the wall clock has not ticked between two calls. Across
    instances (another service, process or host) the store keeps
    ``updated_at`` ahead of the value it already holds.
    """

    advancing_columns = ("updated_at",)

    def __init__(self) -> None:
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def _get_current_timestamp(self) -> datetime:
        """Current UTC time, bumped past the previous value if needed"""
        with self._lock:
            now = datetime.now(UTC)
            if self._last is not None and now <= self._last:
                now = self._last + _RESOLUTION
            self._last = now
            return now

    def before_create(self, data: dict[str, Any]) -> dict[str, Any]:
        timestamp = self._get_current_timestamp()
        data["created_at"] = timestamp
        data["updated_at"] = timestamp
        return data

    def before_update(self, data: dict[str, Any]) -> dict[str, Any]:
        data.pop("created_at", None)
        data["updated_at"] = self._get_current_timestamp()
        return data
