from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Waka Catalog API"
    debug: bool = False
    api_prefix: str = "/api"

    # Database (single-file SQLite serializes writers on its own lock)
    database_url: str = "sqlite+aiosqlite:///./waka.db"
    database_busy_timeout: int = 30

    # Blob storage
    upload_dir: str = "uploads"
    covers_dir: str = "covers"
    assets_dir: str = "image"
    default_cover: str = "default.jpg"

    # File uploads
    max_audio_size_mb: int = 50
    max_cover_size_mb: int = 5
    allowed_image_types: list[str] = ["image/jpeg", "image/png", "image/webp", "image/gif"]

    # Local spotlight chart
    spotlight_limit: int = 20

    # Last.fm (external chart feed)
    lastfm_api_key: Optional[str] = None
    lastfm_api_url: str = "https://ws.audioscrobbler.com/2.0/"
    chart_region: str = "Malawi"
    chart_albums_tag: str = "pop"
    chart_limit: int = 50
    chart_timeout_seconds: float = 10.0
    default_chart_cover: str = "/assets/default.jpg"

    @property
    def max_audio_size_bytes(self) -> int:
        return self.max_audio_size_mb * 1024 * 1024

    @property
    def max_cover_size_bytes(self) -> int:
        return self.max_cover_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
