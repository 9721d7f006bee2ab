"""Image intake for the painting editor"""

import base64
import mimetypes
from typing import Protocol, runtime_checkable

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@runtime_checkable
class ImageUploader(Protocol):
    """Durable image storage; returns a stable URL for the stored bytes.

    Implementations signal failure with ``ImageUploadFailed``.
    """

    async def upload_image(self, data: bytes, content_type: str) -> str: ...


class DataUriUploader:
    """Fallback used when no storage is wired up: embeds the bytes in the URL"""

    async def upload_image(self, data: bytes, content_type: str) -> str:
        return to_data_uri(data, content_type)


def to_data_uri(data: bytes, content_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def guess_content_type(filename: str | None) -> str:
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    return DEFAULT_CONTENT_TYPE
