"""Liveness check gating the admin surface"""

import logging

from gallery_cms.config import GallerySettings
from gallery_cms.query_builder import QueryBuilder
from gallery_cms.store.base import Store
from gallery_cms.store.schema import PAINTINGS_TABLE

logger = logging.getLogger(__name__)


class ConnectivityProbe:
    """Decides whether the store is configured and answering.

    ``is_available`` never raises: a misconfigured or unreachable store is
    reported as ``False`` so callers can route to a setup flow instead.
    """

    def __init__(self, settings: GallerySettings, store: Store | None):
        self.settings = settings
        self.store = store

    async def is_available(self) -> bool:
        if not self.settings.has_coordinates:
            logger.warning("Store endpoint or credential is not set")
            return False
        if self.settings.uses_placeholders:
            logger.warning("Store settings still hold placeholder values")
            return False
        if self.store is None:
            logger.warning("No store client was provided")
            return False

        try:
            await self.store.count(QueryBuilder(PAINTINGS_TABLE))
        except Exception as exc:  # any failure means "not available"
            logger.warning("Store connection check failed: %s", exc)
            return False
        return True
