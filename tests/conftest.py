"""Shared test fixtures."""

import base64
import io
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest
from PIL import Image

from scrapbook.adapters.pillow_imaging import PillowImageDecoder, PillowImageRenderer
from scrapbook.config import Settings
from scrapbook.containers import AppContainer
from scrapbook.domain.composition import DecodedPhoto
from scrapbook.domain.errors import DecodeError, StorageUnavailableError
from scrapbook.domain.memories import Memory
from scrapbook.services.composition import CompositionService, ImageDecoder
from scrapbook.services.memories import MemoryService, MemoryStorage


@dataclass
class InMemoryMemoryStorage(MemoryStorage):
    """In-memory memory storage for tests."""

    memories: list[Memory] = field(default_factory=list)
    saves: int = 0

    def load_all(self) -> list[Memory]:
        return list(self.memories)

    def save_all(self, memories: list[Memory]) -> None:
        self.memories = list(memories)
        self.saves += 1


@dataclass
class FailingMemoryStorage(InMemoryMemoryStorage):
    """Storage that reads fine but refuses every write."""

    def save_all(self, memories: list[Memory]) -> None:
        raise StorageUnavailableError("disk full")


@dataclass
class StepClock:
    """Clock returning a fixed start time advanced by a step on each call."""

    start: datetime = datetime(2024, 3, 5, 15, 7, tzinfo=UTC)
    step: timedelta = timedelta(minutes=1)
    calls: int = 0

    def __call__(self) -> datetime:
        moment = self.start + self.step * self.calls
        self.calls += 1
        return moment


@dataclass
class FakeImageDecoder(ImageDecoder):
    """Decoder returning a fixed size without touching the payload."""

    width: int = 1000
    height: int = 500
    fail: bool = False

    async def decode(self, photo_data: str) -> DecodedPhoto:
        if self.fail:
            raise DecodeError("corrupt")
        return DecodedPhoto(width=self.width, height=self.height, raster=None)


@dataclass
class RecordingRenderer:
    """Renderer that records composed images instead of rasterizing them."""

    rendered: list[object] = field(default_factory=list)

    def render(self, composed) -> bytes:  # type: ignore[no-untyped-def]
        self.rendered.append(composed)
        return b"png-bytes"


def make_photo_bytes(
    width: int, height: int, color: tuple[int, int, int] = (200, 30, 30)
) -> bytes:
    image = Image.new("RGB", (width, height), color)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def make_data_url(width: int, height: int) -> str:
    encoded = base64.b64encode(make_photo_bytes(width, height)).decode("utf-8")
    return f"data:image/png;base64,{encoded}"


def make_memory(
    memory_id: str = "1",
    notes: str = "",
    captured_at: datetime | None = None,
    photo_data: str = "data:image/png;base64,AAAA",
) -> Memory:
    return Memory(
        id=memory_id,
        photo_data=photo_data,
        captured_at=captured_at or datetime(2024, 3, 5, 15, 7, tzinfo=UTC),
        filter_id="none",
        notes=notes,
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(memories_path=str(tmp_path / "memories.json"))


@pytest.fixture
def storage() -> InMemoryMemoryStorage:
    return InMemoryMemoryStorage()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def memory_service(storage: InMemoryMemoryStorage, clock: StepClock) -> MemoryService:
    return MemoryService(storage=storage, clock=clock)


@pytest.fixture
def composition_service(clock: StepClock) -> CompositionService:
    return CompositionService(
        decoder=PillowImageDecoder(),
        renderer=PillowImageRenderer(),
        clock=clock,
    )


@pytest.fixture
def container(
    settings: Settings,
    memory_service: MemoryService,
    composition_service: CompositionService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        memory_service=memory_service,
        composition_service=composition_service,
        close_resources=close_resources,
    )
