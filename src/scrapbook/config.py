"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: str = "file"
    memories_path: str = "memories.json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    storage_key: str = "memories"
    display_timezone: str = "UTC"
    watermark_text: str = "Scrapebook of Memories"
    decorative_font_path: str | None = None
    plain_font_path: str | None = None
    decode_timeout_seconds: float = 10.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str | None) -> str:
    """Normalize the configured storage backend name."""
    if raw is None:
        return "file"
    cleaned = raw.strip().lower()
    if cleaned in {"", "file", "json"}:
        return "file"
    if cleaned == "supabase":
        return "supabase"
    raise ValueError(f"Unsupported storage backend: {raw}")
