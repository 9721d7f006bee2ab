import types
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Union, get_args, get_origin
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from gallery_cms.locale import LocalizedPair


def is_nullable(annotation: Any) -> bool:
    """True when a field annotation admits None"""
    if annotation is None or annotation is type(None):
        return True
    if get_origin(annotation) in (Union, types.UnionType):
        return type(None) in get_args(annotation)
    return False


def base_type(annotation: Any) -> Any:
    """The concrete type behind an annotation such as ``dict[str, Any] | None``"""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if args:
            annotation = args[0]
    return get_origin(annotation) or annotation


class BaseEntity(BaseModel):
    """Base class for every persisted record.

    ``id`` and the timestamps are assigned on insert, never by the caller.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(use_enum_values=True, extra="allow")

    id: UUID
    created_at: datetime
    updated_at: datetime


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


# Known series and themes offered by the admin form; the store accepts any string.
COLLECTIONS: tuple[LocalizedPair, ...] = (
    LocalizedPair("Al-Faw'aliya", "الفواليا"),
    LocalizedPair("Phenomenology", "الظاهرة"),
    LocalizedPair("Philological Layers", "الطبقات الفيلولوجية"),
)
THEMES: tuple[str, ...] = ("Urban", "Landscape", "Portrait", "Abstract")


# Paintings


class PaintingCreate(BaseModel):
    title: str
    title_ar: str | None = None
    year: str
    medium: str
    medium_ar: str | None = None
    dimensions: str
    collection: str
    collection_ar: str | None = None
    theme: str
    image_url: str
    description: str
    description_ar: str | None = None
    is_featured: bool = False
    display_order: int = 0


class Painting(BaseEntity, PaintingCreate):
    pass


class PaintingUpdate(BaseModel):
    """Partial update; only explicitly set fields are written"""

    title: str | None = None
    title_ar: str | None = None
    year: str | None = None
    medium: str | None = None
    medium_ar: str | None = None
    dimensions: str | None = None
    collection: str | None = None
    collection_ar: str | None = None
    theme: str | None = None
    image_url: str | None = None
    description: str | None = None
    description_ar: str | None = None
    is_featured: bool | None = None
    display_order: int | None = None


class PaintingSearch(BaseModel):
    collection: str | None = None
    theme: str | None = None
    year: str | None = None
    is_featured: bool | None = None


# Pages


class PageCreate(BaseModel):
    slug: str = Field(min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    title_en: str
    title_ar: str | None = None
    content_en: dict[str, Any] = Field(default_factory=dict)
    content_ar: dict[str, Any] | None = None
    meta_description_en: str | None = None
    meta_description_ar: str | None = None
    is_published: bool = True


class Page(BaseEntity, PageCreate):
    # Slugs already stored are returned as-is, even ones written before the pattern applied.
    slug: str


class PageUpdate(BaseModel):
    slug: str | None = Field(default=None, min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    title_en: str | None = None
    title_ar: str | None = None
    content_en: dict[str, Any] | None = None
    content_ar: dict[str, Any] | None = None
    meta_description_en: str | None = None
    meta_description_ar: str | None = None
    is_published: bool | None = None


class PageSearch(BaseModel):
    slug: str | None = None
    is_published: bool | None = None


# Settings


class SettingCreate(BaseModel):
    name: str = Field(min_length=1)
    value_en: str
    value_ar: str | None = None
    description: str | None = None


class Setting(BaseEntity, SettingCreate):
    name: str


class SettingUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    value_en: str | None = None
    value_ar: str | None = None
    description: str | None = None


class SettingSearch(BaseModel):
    name: str | None = None
