"""
Integration tests against a real PostgreSQL container.
"""

from datetime import UTC, datetime
from unittest.mock import patch
from uuid import uuid4

import pytest

from gallery_cms.exceptions import DuplicateKey, NotFound, StoreUnavailable, ValidationRejected
from gallery_cms.features import timestamp_feature
from gallery_cms.locale import Locale
from gallery_cms.query_builder import QueryBuilder
from gallery_cms.services import GalleryServices
from gallery_cms.store import PostgresStore
from tests.factories import make_page, make_painting, make_setting

pytestmark = pytest.mark.postgres


class TestPostgresStore:
    @pytest.mark.asyncio
    async def test_painting_crud(self, pg_services):
        paintings = pg_services.paintings
        created = await paintings.create(make_painting(title="Harbour", display_order=3))

        assert await paintings.get_one(created.id) == created

        updated = await paintings.update(created.id, {"is_featured": True})
        assert updated.is_featured is True
        assert updated.title == "Harbour"
        assert updated.updated_at > created.updated_at

        await paintings.delete(created.id)
        assert await paintings.get_one(created.id) is None
        with pytest.raises(NotFound):
            await paintings.delete(created.id)

    @pytest.mark.asyncio
    async def test_ordering_and_filters(self, pg_services):
        paintings = pg_services.paintings
        await paintings.create(make_painting(title="Shadow Study", year="2021", display_order=5))
        await paintings.create(make_painting(title="Light Study", display_order=2, is_featured=True))

        assert [p.title for p in await paintings.get_all()] == ["Light Study", "Shadow Study"]
        assert [p.title for p in await paintings.get_featured()] == ["Light Study"]

    @pytest.mark.asyncio
    async def test_duplicate_slug(self, pg_services):
        pages = pg_services.pages
        first = await pages.create(make_page(slug="about"))

        with pytest.raises(DuplicateKey) as exc_info:
            await pages.create(make_page(slug="about", title_en="Other"))

        assert exc_info.value.field == "slug"
        assert await pages.get_all() == [first]

    @pytest.mark.asyncio
    async def test_jsonb_round_trip(self, pg_services):
        content = {"sections": [{"heading": "السيرة", "order": 1}], "draft": False}
        page = await pg_services.pages.create(make_page(slug="biography", content_ar=content))

        stored = await pg_services.pages.get_by_slug("biography")

        assert stored.content_ar == content
        assert stored.content_en == page.content_en

    @pytest.mark.asyncio
    async def test_setting_value(self, pg_services):
        await pg_services.settings.create(make_setting(name="tagline", value_en="Hi", value_ar="أهلا"))

        assert await pg_services.settings.get_value("tagline", Locale.AR) == "أهلا"

    @pytest.mark.asyncio
    async def test_not_null_violation_is_validation_error(self, pg_store):
        with pytest.raises(ValidationRejected):
            await pg_store.insert("gallery_settings", {"name": "x"})

    @pytest.mark.asyncio
    async def test_delete_reports_row_count(self, pg_store):
        await pg_store.insert("gallery_settings", {"name": "a", "value_en": "1"})
        await pg_store.insert("gallery_settings", {"name": "b", "value_en": "2"})

        deleted = await pg_store.delete(QueryBuilder("gallery_settings").where_in("name", ["a", "b"]))

        assert deleted == 2
        assert await pg_store.count(QueryBuilder("gallery_settings")) == 0

    @pytest.mark.asyncio
    async def test_updated_at_advances_across_services(self, pg_store):
        writer = GalleryServices.from_store(pg_store).paintings
        editor = GalleryServices.from_store(pg_store).paintings

        with patch.object(timestamp_feature, "datetime") as fake:
            fake.now.return_value = datetime(2024, 1, 1, tzinfo=UTC)
            created = await writer.create(make_painting())
            updated = await editor.update(created.id, {"title": "Edited"})

        assert updated.updated_at > created.updated_at

    @pytest.mark.asyncio
    async def test_create_from_stored_record(self, pg_services):
        original = await pg_services.paintings.create(make_painting())

        duplicate = await pg_services.paintings.create(original)

        assert duplicate.id != original.id

    @pytest.mark.asyncio
    async def test_missing_id_lookup(self, pg_services):
        assert await pg_services.paintings.get_one(uuid4()) is None


class TestConnectionFailures:
    def test_requires_dsn_or_pool(self):
        with pytest.raises(ValueError):
            PostgresStore()

    @pytest.mark.asyncio
    async def test_unreachable_store(self):
        store = PostgresStore("postgresql://gallery@127.0.0.1:1/gallery", command_timeout=1)

        with pytest.raises(StoreUnavailable):
            await store.count(QueryBuilder("paintings"))
