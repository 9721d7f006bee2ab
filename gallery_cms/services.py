"""Per-entity collection services built on the generic Repository"""

from dataclasses import dataclass

from gallery_cms.entities import (
    Page,
    PageCreate,
    PageUpdate,
    Painting,
    PaintingCreate,
    PaintingUpdate,
    Setting,
    SettingCreate,
    SettingUpdate,
)
from gallery_cms.locale import Locale, localized, resolve
from gallery_cms.repository import Repository, RepositoryConfig
from gallery_cms.store.base import Store
from gallery_cms.store.schema import PAGES_TABLE, PAINTINGS_TABLE, SETTINGS_TABLE


class PaintingService(Repository[Painting, PaintingCreate, PaintingUpdate]):
    """Paintings, listed by display_order with creation time as tie-break"""

    def __init__(self, store: Store, config: RepositoryConfig | None = None):
        super().__init__(
            store,
            entity_class=Painting,
            create_class=PaintingCreate,
            update_class=PaintingUpdate,
            table_name=PAINTINGS_TABLE,
            default_order=("display_order", "created_at"),
            config=config,
        )

    async def get_by_collection(self, collection: str) -> list[Painting]:
        return await self.get_filtered(collection=collection)

    async def get_featured(self) -> list[Painting]:
        return await self.get_filtered(is_featured=True)


class PageService(Repository[Page, PageCreate, PageUpdate]):
    def __init__(self, store: Store, config: RepositoryConfig | None = None):
        super().__init__(
            store,
            entity_class=Page,
            create_class=PageCreate,
            update_class=PageUpdate,
            table_name=PAGES_TABLE,
            default_order=("slug",),
            unique_key="slug",
            config=config,
        )

    async def get_by_slug(self, slug: str) -> Page | None:
        """Public read path: the published page for ``slug``, or None."""
        return await self.where("slug", slug).where("is_published", True).first()


class SettingService(Repository[Setting, SettingCreate, SettingUpdate]):
    def __init__(self, store: Store, config: RepositoryConfig | None = None):
        super().__init__(
            store,
            entity_class=Setting,
            create_class=SettingCreate,
            update_class=SettingUpdate,
            table_name=SETTINGS_TABLE,
            default_order=("name",),
            unique_key="name",
            config=config,
        )

    async def get_by_name(self, name: str) -> Setting | None:
        return await self.get_by_key(name)

    async def get_value(
        self, name: str, locale: Locale | str = Locale.EN, default: str | None = None
    ) -> str | None:
        """The setting's value rendered for ``locale``, or ``default`` when unset"""
        setting = await self.get_by_name(name)
        if setting is None:
            return default
        return resolve(localized(setting, "value"), locale)


@dataclass
class GalleryServices:
    paintings: PaintingService
    pages: PageService
    settings: SettingService

    @classmethod
    def from_store(cls, store: Store) -> "GalleryServices":
        return cls(
            paintings=PaintingService(store),
            pages=PageService(store),
            settings=SettingService(store),
        )
