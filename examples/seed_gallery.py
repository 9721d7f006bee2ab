"""
Create the gallery tables and load a few sample records.

Reads GALLERY_STORE_URL / GALLERY_STORE_KEY from the environment or .env:

    GALLERY_STORE_URL=postgresql://gallery@localhost:5432/gallery \
    GALLERY_STORE_KEY=secret python examples/seed_gallery.py
"""

import asyncio
import logging

from gallery_cms import ConnectivityProbe, GalleryServices, get_settings
from gallery_cms.entities import PageCreate, PaintingCreate, SettingCreate
from gallery_cms.exceptions import DuplicateKey
from gallery_cms.locale import Locale
from gallery_cms.log_config import configure_logging
from gallery_cms.store import PostgresStore, create_schema

logger = logging.getLogger("gallery_cms.examples.seed")

PAINTINGS = [
    PaintingCreate(
        title="Light Study",
        title_ar="دراسة الضوء",
        year="2021",
        medium="Oil on canvas",
        dimensions="120 x 90 cm",
        collection="Phenomenology",
        collection_ar="الظاهرة",
        theme="Abstract",
        image_url="https://images.example.com/light-study.jpg",
        description="Morning light across a studio wall.",
        is_featured=True,
        display_order=1,
    ),
    PaintingCreate(
        title="Shadow Study",
        year="2021",
        medium="Acrylic on board",
        dimensions="60 x 60 cm",
        collection="Phenomenology",
        theme="Urban",
        image_url="https://images.example.com/shadow-study.jpg",
        description="The same wall at dusk.",
        display_order=2,
    ),
]

PAGES = [
    PageCreate(
        slug="about",
        title_en="About",
        title_ar="عن الفنان",
        content_en={"intro": "Painter working between Baghdad and Amman."},
        content_ar={"intro": "رسام يعمل بين بغداد وعمّان."},
    ),
]

SETTINGS = [
    SettingCreate(name="site_title", value_en="The Gallery", value_ar="المعرض"),
    SettingCreate(name="contact_email", value_en="studio@example.com"),
]


async def main():
    settings = get_settings()
    configure_logging(settings.log_level)

    store = PostgresStore.from_settings(settings)
    try:
        if not await ConnectivityProbe(settings, store).is_available():
            # The paintings table may simply not exist yet
            logger.info("Probe failed, creating schema")
        await create_schema(store)

        services = GalleryServices.from_store(store)
        if await services.paintings.count() == 0:
            for painting in PAINTINGS:
                await services.paintings.create(painting)
        for page in PAGES:
            try:
                await services.pages.create(page)
            except DuplicateKey:
                logger.info("Page %s already exists", page.slug)
        for setting in SETTINGS:
            if await services.settings.get_by_name(setting.name) is None:
                await services.settings.create(setting)

        for painting in await services.paintings.get_all():
            print(f"{painting.display_order:>3}  {painting.title}")
        print(await services.settings.get_value("site_title", Locale.AR))
    finally:
        await store.close()


if __name__ == "__main__":
    asyncio.run(main())
