"""Generic collection service shared by paintings, pages and settings"""

import copy
import logging
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, ValidationError

from gallery_cms.entities import BaseEntity, is_nullable
from gallery_cms.exceptions import GalleryError, NotFound, StoreUnavailable, ValidationRejected
from gallery_cms.features import RepositoryFeature, TimestampFeature
from gallery_cms.query_builder import QueryBuilder
from gallery_cms.store.base import Store

logger = logging.getLogger(__name__)


class RepositoryConfig(BaseModel):
    """Configuration options for Repository"""

    model_config = {"arbitrary_types_allowed": True}

    features: list[RepositoryFeature] = Field(
        default_factory=lambda: [TimestampFeature()],
        description="Lifecycle hooks applied to every insert and update",
    )


def _coerce_id(entity_id: UUID | str) -> UUID | None:
    """Parse an identifier; malformed ones can never match a record"""
    if isinstance(entity_id, UUID):
        return entity_id
    try:
        return UUID(str(entity_id))
    except ValueError:
        return None


class Repository[T: BaseEntity, C: BaseModel, U: BaseModel]:
    """CRUD and query operations over one table.

    Type Parameters:
        T: Stored record, including id and timestamps
        C: Insert shape (no id, no timestamps)
        U: Partial update shape, every field optional

    The store is injected; repositories never reach for a global client.
    Reads are ordered by ``default_order`` unless the query says otherwise.
    """

    def __init__(
        self,
        store: Store,
        entity_class: type[T],
        create_class: type[C],
        update_class: type[U],
        table_name: str,
        default_order: tuple[str, ...] = (),
        unique_key: str | None = None,
        config: RepositoryConfig | None = None,
    ):
        if store is None:
            raise ValueError("store is required")
        if not table_name:
            raise ValueError("table_name is required")

        self.store = store
        self.entity_class = entity_class
        self.create_class = create_class
        self.update_class = update_class
        self.table_name = table_name
        self.default_order = default_order
        self.unique_key = unique_key
        self.config = config or RepositoryConfig()
        self._query_builder: QueryBuilder | None = None

        self._entity_name = entity_class.__name__.lower()
        self._columns = set(entity_class.model_fields)
        # Columns that the store declares NOT NULL
        self._required_columns = {
            name
            for name, field in create_class.model_fields.items()
            if not is_nullable(field.annotation)
        }

    # Mapping

    def to_entity(self, row: Mapping[str, Any]) -> T:
        """Convert a stored row into the entity model"""
        try:
            return self.entity_class.model_validate(dict(row))
        except ValidationError as exc:
            raise StoreUnavailable(
                f"Row in {self.table_name} does not match {self.entity_class.__name__}: {exc}"
            ) from exc

    @staticmethod
    def _validate[M: BaseModel](model_class: type[M], data: M | Mapping[str, Any]) -> M:
        # Exact type only: a stored record subclasses its insert shape but carries an id
        if type(data) is model_class:
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        try:
            return model_class.model_validate(data)
        except ValidationError as exc:
            raise ValidationRejected(str(exc)) from exc

    # Fluent query methods that return a new repository instance

    def _get_or_create_query_builder(self) -> QueryBuilder:
        if self._query_builder is None:
            return QueryBuilder(self.table_name)
        return self._query_builder

    def _clone_with_query_builder(self, query_builder: QueryBuilder) -> "Repository[T, C, U]":
        new_repo = copy.copy(self)
        new_repo._query_builder = query_builder
        return new_repo

    def _fresh(self) -> "Repository[T, C, U]":
        """A clone without any of the current query state"""
        return self._clone_with_query_builder(QueryBuilder(self.table_name))

    def _check_column(self, field: str) -> str:
        field = str(field)
        if field not in self._columns:
            raise ValueError(f"Unknown {self._entity_name} field: {field!r}")
        return field

    def where(self, field: str, *args: Any) -> "Repository[T, C, U]":
        """Add a WHERE condition: where(field, value) or where(field, operator, value)"""
        builder = self._get_or_create_query_builder().where(self._check_column(field), *args)
        return self._clone_with_query_builder(builder)

    def where_in(self, field: str, values: list[Any]) -> "Repository[T, C, U]":
        builder = self._get_or_create_query_builder().where_in(self._check_column(field), values)
        return self._clone_with_query_builder(builder)

    def order_by(self, field: str) -> "Repository[T, C, U]":
        builder = self._get_or_create_query_builder().order_by(self._check_column(field))
        return self._clone_with_query_builder(builder)

    def order_by_desc(self, field: str) -> "Repository[T, C, U]":
        builder = self._get_or_create_query_builder().order_by_desc(self._check_column(field))
        return self._clone_with_query_builder(builder)

    def limit(self, count: int) -> "Repository[T, C, U]":
        return self._clone_with_query_builder(self._get_or_create_query_builder().limit(count))

    def _ordered_builder(self) -> QueryBuilder:
        builder = self._get_or_create_query_builder()
        if not builder.order_by_parts:
            for field in self.default_order:
                builder = builder.order_by(field)
        return builder

    async def get(self) -> list[T]:
        """Execute the query and return all matching entities"""
        try:
            rows = await self.store.fetch(self._ordered_builder())
        except GalleryError as exc:
            logger.error("Error fetching %s records: %s", self._entity_name, exc)
            raise
        return [self.to_entity(row) for row in rows]

    async def first(self) -> T | None:
        """Execute the query and return the first matching entity"""
        try:
            rows = await self.store.fetch(self._ordered_builder().limit(1))
        except GalleryError as exc:
            logger.error("Error fetching %s record: %s", self._entity_name, exc)
            raise
        return self.to_entity(rows[0]) if rows else None

    async def count(self) -> int:
        return await self.store.count(self._get_or_create_query_builder())

    async def exists(self) -> bool:
        return await self.count() > 0

    # Collection operations

    async def get_all(self) -> list[T]:
        """Every record in default order; an empty table yields []"""
        return await self._fresh().get()

    async def get_filtered(
        self, search: BaseModel | None = None, **criteria: Any
    ) -> list[T]:
        """Records equal to every given criterion, in default order.

        ``search`` is a search model whose non-None fields are used as
        criteria; keyword criteria are merged on top.
        """
        conditions: dict[str, Any] = {}
        if search is not None:
            conditions.update(
                {k: v for k, v in search.model_dump().items() if v is not None}
            )
        conditions.update(criteria)

        repo = self._fresh()
        for field, value in conditions.items():
            repo = repo.where(field, value)
        return await repo.get()

    async def get_one(self, entity_id: UUID | str) -> T | None:
        """The record with ``entity_id``, or None when there is none"""
        uid = _coerce_id(entity_id)
        if uid is None:
            return None
        return await self._fresh().where("id", uid).first()

    async def get_by_key(self, value: Any) -> T | None:
        """Look a record up by the table's unique key"""
        if self.unique_key is None:
            raise ValueError(f"{self.table_name} has no unique key")
        return await self._fresh().where(self.unique_key, value).first()

    async def create(self, data: C | Mapping[str, Any]) -> T:
        """Insert a record and return it with its assigned id and timestamps"""
        try:
            payload = self._validate(self.create_class, data)
            fields = payload.model_dump()
            for feature in self.config.features:
                fields = feature.before_create(fields)
            row = await self.store.insert(self.table_name, fields)
        except GalleryError as exc:
            logger.error("Error creating %s: %s", self._entity_name, exc)
            raise
        created = self.to_entity(row)
        logger.info("Created %s %s", self._entity_name, created.id)
        return created

    def _advancing_columns(self, values: Mapping[str, Any]) -> tuple[str, ...]:
        return tuple(
            column
            for feature in self.config.features
            for column in feature.advancing_columns
            if column in values
        )

    async def update(self, entity_id: UUID | str, data: U | Mapping[str, Any]) -> T:
        """Change only the supplied fields; ``updated_at`` always advances"""
        try:
            payload = self._validate(self.update_class, data)
            update_dict = payload.model_dump(exclude_unset=True)
            cleared = sorted(
                name for name in self._required_columns
                if name in update_dict and update_dict[name] is None
            )
            if cleared:
                raise ValidationRejected(
                    f"Required {self._entity_name} fields cannot be cleared: {', '.join(cleared)}"
                )
            for feature in self.config.features:
                update_dict = feature.before_update(update_dict)

            uid = _coerce_id(entity_id)
            if uid is None:
                raise NotFound(self.table_name, entity_id)

            rows: list[dict[str, Any]] = []
            if update_dict:
                rows = await self.store.update(
                    QueryBuilder(self.table_name).where("id", uid),
                    update_dict,
                    advancing=self._advancing_columns(update_dict),
                )
            else:
                rows = await self.store.fetch(QueryBuilder(self.table_name).where("id", uid))
            if not rows:
                raise NotFound(self.table_name, entity_id)
        except GalleryError as exc:
            logger.error("Error updating %s %s: %s", self._entity_name, entity_id, exc)
            raise
        logger.info("Updated %s %s", self._entity_name, entity_id)
        return self.to_entity(rows[0])

    async def delete(self, entity_id: UUID | str) -> None:
        """Hard delete; deleting an unknown id raises NotFound"""
        try:
            uid = _coerce_id(entity_id)
            if uid is None:
                raise NotFound(self.table_name, entity_id)
            deleted = await self.store.delete(QueryBuilder(self.table_name).where("id", uid))
            if deleted == 0:
                raise NotFound(self.table_name, entity_id)
        except GalleryError as exc:
            logger.error("Error deleting %s %s: %s", self._entity_name, entity_id, exc)
            raise
        logger.info("Deleted %s %s", self._entity_name, entity_id)
