"""Abstract store boundary used by every collection service"""

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from gallery_cms.query_builder import QueryBuilder
from gallery_cms.store.tracking import QueryTracker

logger = logging.getLogger(__name__)


class Store(ABC):
    """Query/insert/update/delete verbs over named tables.

    Implementations raise ``StoreUnavailable`` for transport and configuration
    failures and ``ValidationRejected`` (or ``DuplicateKey``) for constraint
    violations. Each call is a single atomic statement.
    """

    def __init__(self) -> None:
        self._trackers: list[QueryTracker] = []

    @abstractmethod
    async def fetch(self, query: QueryBuilder) -> list[dict[str, Any]]:
        """Return the rows selected by ``query``, honouring its ordering and limit"""

    @abstractmethod
    async def count(self, query: QueryBuilder) -> int:
        """Count rows matching the conditions of ``query``"""

    @abstractmethod
    async def insert(self, table: str, values: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored, defaults included"""

    @abstractmethod
    async def update(
        self, query: QueryBuilder, values: dict[str, Any], advancing: tuple[str, ...] = ()
    ) -> list[dict[str, Any]]:
        """Apply ``values`` to the matching rows and return their new state.

        Each column in ``advancing`` ends strictly after its stored value.
        """

    @abstractmethod
    async def delete(self, query: QueryBuilder) -> int:
        """Delete the matching rows and return how many were removed"""

    async def close(self) -> None:
        """Release any resources held by the store"""

    @asynccontextmanager
    async def track_queries(self, capture_stack: bool = False) -> AsyncIterator[QueryTracker]:
        """Record every statement issued inside the block.

            async with store.track_queries() as tracker:
                await paintings.get_all()
            assert tracker.count() == 1
        """
        tracker = QueryTracker(capture_stack=capture_stack)
        tracker.enable()
        self._trackers.append(tracker)
        try:
            yield tracker
        finally:
            tracker.disable()
            self._trackers.remove(tracker)

    def _log_query(self, query: str, params: list[Any]) -> None:
        logger.debug("%s %r", query, params)
        for tracker in self._trackers:
            tracker.log_query(query, params)
