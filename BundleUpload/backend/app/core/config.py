"""Application configuration and settings management."""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

from BundleUpload.backend.app.core.exporter import DEFAULT_FILENAME


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables and ``.env``."""

    app_name: str = Field(default="Bundle Upload Builder")
    api_prefix: str = Field(default="/api")
    export_filename: str = Field(default=DEFAULT_FILENAME)
    log_level: str = Field(default="INFO")
    cors_origins: List[str] = Field(default_factory=list)
    max_upload_bytes: int = Field(default=5 * 1024 * 1024)

    model_config = {
        "env_file": ".env",
        "env_prefix": "BUNDLE_",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[arg-type]
