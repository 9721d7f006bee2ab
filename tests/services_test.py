import pytest

from gallery_cms.entities import PaintingSearch
from gallery_cms.exceptions import DuplicateKey, ValidationRejected
from gallery_cms.locale import Locale
from tests.factories import make_page, make_painting, make_setting


class TestPaintingService:
    @pytest.mark.asyncio
    async def test_display_order_and_featured(self, paintings):
        await paintings.create(
            make_painting(title="Shadow Study", year="2021", display_order=5, is_featured=False)
        )
        await paintings.create(make_painting(title="Light Study", display_order=2, is_featured=True))

        assert [p.title for p in await paintings.get_all()] == ["Light Study", "Shadow Study"]
        assert [p.title for p in await paintings.get_filtered(is_featured=True)] == ["Light Study"]
        assert [p.title for p in await paintings.get_featured()] == ["Light Study"]

    @pytest.mark.asyncio
    async def test_equal_display_order_falls_back_to_creation_time(self, paintings):
        for title in ("First", "Second", "Third"):
            await paintings.create(make_painting(title=title, display_order=1))

        assert [p.title for p in await paintings.get_all()] == ["First", "Second", "Third"]

    @pytest.mark.asyncio
    async def test_get_by_collection(self, paintings):
        await paintings.create(make_painting(title="A", collection="Al-Faw'aliya"))
        await paintings.create(make_painting(title="B", collection="Phenomenology"))

        result = await paintings.get_by_collection("Al-Faw'aliya")

        assert [p.title for p in result] == ["A"]

    @pytest.mark.asyncio
    async def test_search_model(self, paintings):
        await paintings.create(make_painting(title="A", theme="Urban", year="2019"))
        await paintings.create(make_painting(title="B", theme="Urban", year="2020"))

        result = await paintings.get_filtered(PaintingSearch(theme="Urban"), year="2020")

        assert [p.title for p in result] == ["B"]


class TestPageService:
    @pytest.mark.asyncio
    async def test_duplicate_slug_is_rejected(self, pages):
        first = await pages.create(make_page(slug="about", title_en="About"))

        with pytest.raises(ValidationRejected) as exc_info:
            await pages.create(make_page(slug="about", title_en="Another"))

        assert isinstance(exc_info.value, DuplicateKey)
        assert exc_info.value.field == "slug"
        assert await pages.get_all() == [first]

    @pytest.mark.asyncio
    async def test_update_to_taken_slug_is_rejected(self, pages):
        await pages.create(make_page(slug="about"))
        contact = await pages.create(make_page(slug="contact", title_en="Contact"))

        with pytest.raises(DuplicateKey):
            await pages.update(contact.id, {"slug": "about"})

        assert (await pages.get_one(contact.id)).slug == "contact"

    @pytest.mark.asyncio
    async def test_invalid_slug_is_rejected(self, pages):
        with pytest.raises(ValidationRejected):
            await pages.create({"slug": "About Us", "title_en": "About"})

    @pytest.mark.asyncio
    async def test_get_by_slug_returns_published_only(self, pages):
        published = await pages.create(make_page(slug="about"))
        await pages.create(make_page(slug="drafts", is_published=False))

        assert await pages.get_by_slug("about") == published
        assert await pages.get_by_slug("drafts") is None
        assert await pages.get_by_slug("missing") is None

    @pytest.mark.asyncio
    async def test_pages_listed_by_slug(self, pages):
        for slug in ("contact", "about", "biography"):
            await pages.create(make_page(slug=slug))

        assert [p.slug for p in await pages.get_all()] == ["about", "biography", "contact"]

    @pytest.mark.asyncio
    async def test_content_defaults_and_round_trip(self, pages):
        content = {"sections": [{"heading": "Early years", "body": "..."}]}
        page = await pages.create(
            {"slug": "biography", "title_en": "Biography", "content_ar": content}
        )

        assert page.content_en == {}
        assert page.content_ar == content
        assert page.is_published is True


class TestSettingService:
    @pytest.mark.asyncio
    async def test_get_value_with_locale_fallback(self, settings_service):
        await settings_service.create(make_setting(name="tagline", value_en="Hello", value_ar="مرحبا"))
        await settings_service.create(make_setting(name="footer", value_en="All rights reserved"))

        assert await settings_service.get_value("tagline") == "Hello"
        assert await settings_service.get_value("tagline", Locale.AR) == "مرحبا"
        assert await settings_service.get_value("footer", "ar") == "All rights reserved"
        assert await settings_service.get_value("missing", default="n/a") == "n/a"

    @pytest.mark.asyncio
    async def test_duplicate_name_is_rejected(self, settings_service):
        await settings_service.create(make_setting(name="tagline"))

        with pytest.raises(DuplicateKey):
            await settings_service.create(make_setting(name="tagline"))

    @pytest.mark.asyncio
    async def test_settings_listed_by_name(self, settings_service):
        for name in ("b", "c", "a"):
            await settings_service.create(make_setting(name=name))

        assert [s.name for s in await settings_service.get_all()] == ["a", "b", "c"]
