"""Store boundary: abstract verbs plus the PostgreSQL implementation"""

from gallery_cms.store.base import Store
from gallery_cms.store.postgres import PostgresStore
from gallery_cms.store.schema import (
    PAGES_TABLE,
    PAINTINGS_TABLE,
    SCHEMA_DDL,
    SETTINGS_TABLE,
    create_schema,
)
from gallery_cms.store.tracking import QueryLog, QueryTracker

__all__ = [
    "Store",
    "PostgresStore",
    "QueryLog",
    "QueryTracker",
    "PAINTINGS_TABLE",
    "PAGES_TABLE",
    "SETTINGS_TABLE",
    "SCHEMA_DDL",
    "create_schema",
]
