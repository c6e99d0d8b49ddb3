"""Application configuration with Pydantic Settings.

Settings are loaded from BLOBFS_-prefixed environment variables and a .env
file.

Examples:
    >>> from blobfs.config import get_settings
    >>> settings = get_settings()
    >>> settings.STORAGE_KIND
    'local'
    >>> settings.location_config()
    LocationConfig(path='/srv/blobs')

Tests:
    - tests/unit/test_config.py::TestSettings
"""

import logging
import os
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blobfs.storage.config import LocationConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """Application settings.

    Attributes:
        STORAGE_KIND: Registered backend kind to dial
        STORAGE_PATH: Location root directory (resolved to an absolute path)
        DEFAULT_PAGE_SIZE: Page size used when a listing does not give one
        LOG_LEVEL: Logging level name
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BLOBFS_",
        case_sensitive=True,
        extra="ignore",
    )

    STORAGE_KIND: str = Field(
        default="local",
        description="Storage backend kind",
    )
    STORAGE_PATH: str = Field(
        default="./data",
        description="Location root directory",
    )
    DEFAULT_PAGE_SIZE: int = Field(
        default=100,
        description="Default listing page size",
        ge=1,
        le=10000,
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("STORAGE_PATH")
    @classmethod
    def resolve_storage_path(cls, v: str) -> str:
        """Make the storage path absolute."""
        return os.path.abspath(os.path.expanduser(v))

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level against the logging module's names."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {v!r}")
        return level

    def location_config(self) -> LocationConfig:
        """Build the location config for dialing.

        Raises:
            pydantic.ValidationError: If STORAGE_PATH is not an existing
                directory.
        """
        return LocationConfig(path=self.STORAGE_PATH)


def configure_logging(level: str) -> None:
    """Configure root logging once for a process entry point."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.
    """
    return Settings()
