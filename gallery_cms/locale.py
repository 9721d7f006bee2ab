"""Locale pairs and the presentation-side fallback from Arabic to English."""

from enum import Enum
from typing import Any, NamedTuple


class Locale(str, Enum):
    EN = "en"
    AR = "ar"


class LocalizedPair(NamedTuple):
    """Required English value with its optional Arabic counterpart"""

    en: str
    ar: str | None = None


def resolve(pair: LocalizedPair, locale: Locale | str) -> str:
    """Pick the value to render for ``locale``.

    Arabic is used only when requested and non-empty; everything else falls
    back to English.
    """
    if Locale(locale) is Locale.AR and pair.ar:
        return pair.ar
    return pair.en


def localized(record: Any, field: str) -> LocalizedPair:
    """Build the pair for ``field`` from a record.

    Accepts both naming conventions found in the tables: ``title``/``title_ar``
    and ``title_en``/``title_ar``.
    """
    en = _read(record, field)
    if en is None:
        en = _read(record, f"{field}_en")
    if en is None:
        raise AttributeError(f"{type(record).__name__} has no localized field {field!r}")
    return LocalizedPair(en=en, ar=_read(record, f"{field}_ar"))


def _read(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)
