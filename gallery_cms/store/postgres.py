"""PostgreSQL store backed by an asyncpg pool"""

import asyncio
import json
import logging
import re
from typing import Any

import asyncpg

from gallery_cms.config import GallerySettings
from gallery_cms.exceptions import DuplicateKey, StoreUnavailable, ValidationRejected
from gallery_cms.query_builder import QueryBuilder
from gallery_cms.store.base import Store

logger = logging.getLogger(__name__)

# e.g. "Key (slug)=(about) already exists."
_KEY_DETAIL = re.compile(r"Key \((\w+)\)=")

_TRANSPORT_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Decode json/jsonb columns to Python objects on every pooled connection"""
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(
            type_name, encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
        )


def _duplicate_column(detail: str | None) -> str | None:
    match = _KEY_DETAIL.search(detail or "")
    return match.group(1) if match else None


class PostgresStore(Store):
    """Store implementation issuing one parameterized statement per call.

    The pool is created lazily on first use so that constructing a store
    never touches the network.
    """

    def __init__(
        self,
        dsn: str | None = None,
        password: str | None = None,
        *,
        pool: asyncpg.Pool | None = None,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float | None = None,
    ):
        super().__init__()
        if pool is None and not dsn:
            raise ValueError("Either dsn or pool is required")
        self._dsn = dsn
        self._password = password
        self._pool = pool
        self._owns_pool = pool is None
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: GallerySettings) -> "PostgresStore":
        return cls(
            settings.store_url,
            settings.store_key or None,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            command_timeout=settings.command_timeout,
        )

    @staticmethod
    async def create_pool(dsn: str, password: str | None = None, **kwargs: Any) -> asyncpg.Pool:
        """Create a pool with the json codecs this store relies on"""
        return await asyncpg.create_pool(dsn, password=password, init=_init_connection, **kwargs)

    async def _get_pool(self) -> asyncpg.Pool:
        if self._pool is not None:
            return self._pool
        async with self._pool_lock:
            if self._pool is None:
                try:
                    self._pool = await self.create_pool(
                        self._dsn,
                        self._password,
                        min_size=self._min_size,
                        max_size=self._max_size,
                        command_timeout=self._command_timeout,
                    )
                except (*_TRANSPORT_ERRORS, ValueError) as exc:
                    raise StoreUnavailable(f"Could not connect to the store: {exc}") from exc
                logger.info(
                    "Store pool ready (min_size=%s, max_size=%s)", self._min_size, self._max_size
                )
        return self._pool

    async def close(self) -> None:
        if self._pool is not None and self._owns_pool:
            await self._pool.close()
            self._pool = None

    async def _run(self, method: str, query: str, params: list[Any]) -> Any:
        """Execute ``query`` with the named connection method, translating errors"""
        self._log_query(query, params)
        pool = await self._get_pool()
        try:
            async with pool.acquire() as conn:
                return await getattr(conn, method)(query, *params)
        except asyncpg.UniqueViolationError as exc:
            raise DuplicateKey(
                f"Duplicate value violates {exc.constraint_name or 'a unique constraint'}",
                field=exc.column_name or _duplicate_column(exc.detail),
            ) from exc
        except asyncpg.IntegrityConstraintViolationError as exc:
            raise ValidationRejected(str(exc)) from exc
        except asyncpg.DataError as exc:
            raise ValidationRejected(str(exc)) from exc
        except _TRANSPORT_ERRORS as exc:
            raise StoreUnavailable(str(exc)) from exc

    async def fetch(self, query: QueryBuilder) -> list[dict[str, Any]]:
        sql, params = query.build()
        rows = await self._run("fetch", sql, params)
        return [dict(row) for row in rows]

    async def count(self, query: QueryBuilder) -> int:
        sql, params = query.build_count()
        result = await self._run("fetchval", sql, params)
        return result or 0

    async def insert(self, table: str, values: dict[str, Any]) -> dict[str, Any]:
        sql, params = QueryBuilder(table).build_insert(values)
        row = await self._run("fetchrow", sql, params)
        return dict(row)

    async def update(
        self, query: QueryBuilder, values: dict[str, Any], advancing: tuple[str, ...] = ()
    ) -> list[dict[str, Any]]:
        sql, params = query.build_update(values, advancing)
        rows = await self._run("fetch", sql, params)
        return [dict(row) for row in rows]

    async def delete(self, query: QueryBuilder) -> int:
        sql, params = query.build_delete()
        result = await self._run("execute", sql, params)
        # asyncpg returns the command tag, e.g. "DELETE 1"
        return int(result.split()[-1])

    async def execute_script(self, script: str) -> None:
        """Run a multi-statement script such as the schema DDL"""
        await self._run("execute", script, [])
