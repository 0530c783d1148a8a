"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo

from supabase import create_client

from scrapbook.adapters.json_file_storage import JsonFileMemoryStorage
from scrapbook.adapters.pillow_imaging import PillowImageDecoder, PillowImageRenderer
from scrapbook.adapters.supabase_memory_storage import SupabaseMemoryStorage
from scrapbook.config import Settings, parse_storage_backend
from scrapbook.services.composition import CompositionService
from scrapbook.services.memories import MemoryService, MemoryStorage


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    memory_service: MemoryService
    composition_service: CompositionService
    close_resources: Callable[[], Awaitable[None]]


def build_storage(settings: Settings) -> MemoryStorage:
    """Create the configured memory storage backend."""
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "Supabase storage requires SUPABASE_URL and SUPABASE_SERVICE_KEY"
            )
        supabase_client = create_client(
            settings.supabase_url, settings.supabase_service_key
        )
        return SupabaseMemoryStorage(supabase_client, key=settings.storage_key)
    return JsonFileMemoryStorage(Path(settings.memories_path))


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone = ZoneInfo(resolved_settings.display_timezone)
    memory_service = MemoryService(
        storage=build_storage(resolved_settings),
        timezone=timezone,
    )
    composition_service = CompositionService(
        decoder=PillowImageDecoder(),
        renderer=PillowImageRenderer(
            font_paths={
                "decorative": resolved_settings.decorative_font_path,
                "plain": resolved_settings.plain_font_path,
            }
        ),
        timezone=timezone,
        watermark_text=resolved_settings.watermark_text,
        decode_timeout_seconds=resolved_settings.decode_timeout_seconds,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        memory_service=memory_service,
        composition_service=composition_service,
        close_resources=close_resources,
    )
