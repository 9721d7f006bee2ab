"""Content repository for a bilingual artist-portfolio site"""

from gallery_cms.config import GallerySettings, get_settings
from gallery_cms.exceptions import (
    DuplicateKey,
    GalleryError,
    NotFound,
    StoreUnavailable,
    ValidationRejected,
)
from gallery_cms.locale import Locale, LocalizedPair, localized, resolve
from gallery_cms.probe import ConnectivityProbe
from gallery_cms.repository import Repository, RepositoryConfig
from gallery_cms.services import GalleryServices, PageService, PaintingService, SettingService

__all__ = [
    "GallerySettings",
    "get_settings",
    "GalleryError",
    "StoreUnavailable",
    "ValidationRejected",
    "DuplicateKey",
    "NotFound",
    "Locale",
    "LocalizedPair",
    "localized",
    "resolve",
    "ConnectivityProbe",
    "Repository",
    "RepositoryConfig",
    "GalleryServices",
    "PaintingService",
    "PageService",
    "SettingService",
]
