"""Environment-driven settings for the store connection and logging."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Values shipped in the example .env file; a deployment still holding them
# has not been configured yet.
PLACEHOLDER_MARKERS: tuple[str, ...] = ("your-project-id", "your-anon-key")

ENV_FILE = Path(".env")


def load_env_file(path: Path | str = ENV_FILE) -> bool:
    """Export the variables in ``path``; variables already set take precedence."""
    path = Path(path)
    if not path.exists():
        return False
    return load_dotenv(path, override=False, encoding="utf-8")


class GallerySettings(BaseSettings):
    """Store coordinates and tuning knobs, each overridable by environment variable."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    store_url: str = Field(default="", alias="GALLERY_STORE_URL")
    store_key: str = Field(default="", alias="GALLERY_STORE_KEY")

    pool_min_size: int = Field(default=1, alias="GALLERY_POOL_MIN_SIZE")
    pool_max_size: int = Field(default=10, alias="GALLERY_POOL_MAX_SIZE")
    command_timeout: float | None = Field(default=None, alias="GALLERY_COMMAND_TIMEOUT")

    log_level: str = Field(default="INFO", alias="GALLERY_LOG_LEVEL")

    @property
    def has_coordinates(self) -> bool:
        """Both the endpoint and the credential are set."""
        return bool(self.store_url.strip()) and bool(self.store_key.strip())

    @property
    def uses_placeholders(self) -> bool:
        """Either coordinate still holds an example value."""
        return any(
            marker in value
            for marker in PLACEHOLDER_MARKERS
            for value in (self.store_url, self.store_key)
        )

    @property
    def is_configured(self) -> bool:
        return self.has_coordinates and not self.uses_placeholders


@lru_cache
def get_settings() -> GallerySettings:
    """Return the process-wide settings, parsed once after loading ``.env``."""
    load_env_file()
    return GallerySettings()
