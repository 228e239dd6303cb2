from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class NamingScheme(str, Enum):
    """Which naming fields build the destination directory."""

    FOLDER = "folder"
    HIERARCHY = "hierarchy"


class Settings(BaseSettings):
    """Configuration settings for the application."""

    host: str = "0.0.0.0"
    port: int = 9000
    reload: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None
    upload_root: str = "uploads"
    naming_scheme: NamingScheme = NamingScheme.FOLDER
    cors_origins: str = "*"
    max_files: int = 100
    max_file_size: Optional[int] = None
    serve_uploads: bool = True
    public_url_prefix: str = "/uploads"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def allowed_origins(self) -> list[str]:
        """``CORS_ORIGINS`` split on commas."""
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return origins or ["*"]

    @property
    def url_prefix(self) -> str:
        return "/" + self.public_url_prefix.strip("/")


config = Settings()

__all__ = ["NamingScheme", "Settings", "config"]
