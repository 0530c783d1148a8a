"""Domain models for captured memories and their persisted schema."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field, ValidationError

from scrapbook.domain.errors import StorageUnavailableError

SCHEMA_VERSION = 1


@dataclass(frozen=True)
class Memory:
    """Represents one captured photo and its notes."""

    id: str
    photo_data: str
    captured_at: datetime
    filter_id: str
    notes: str = ""


@dataclass(frozen=True)
class DayGroup:
    """Memories captured on the same calendar day."""

    day_key: str
    heading: str
    memories: list[Memory]


class StoredMemory(BaseModel):
    """Serialized form of a memory inside the persisted collection."""

    id: str
    photo_data: str
    captured_at: datetime
    filter_id: str = "none"
    notes: str = ""

    @classmethod
    def from_memory(cls, memory: Memory) -> "StoredMemory":
        return cls(
            id=memory.id,
            photo_data=memory.photo_data,
            captured_at=memory.captured_at,
            filter_id=memory.filter_id,
            notes=memory.notes,
        )

    def to_memory(self) -> Memory:
        return Memory(
            id=self.id,
            photo_data=self.photo_data,
            captured_at=self.captured_at,
            filter_id=self.filter_id,
            notes=self.notes,
        )


class MemoryCollection(BaseModel):
    """Versioned blob holding the whole memory collection."""

    version: int = SCHEMA_VERSION
    memories: list[StoredMemory] = Field(default_factory=list)

    @classmethod
    def from_memories(cls, memories: list[Memory]) -> "MemoryCollection":
        return cls(memories=[StoredMemory.from_memory(memory) for memory in memories])

    @classmethod
    def from_payload(cls, raw: object) -> "MemoryCollection":
        """Validate a decoded JSON payload, upgrading the legacy array form."""
        try:
            if isinstance(raw, list):
                return cls(memories=[_upgrade_legacy(item) for item in raw])
            collection = cls.model_validate(raw)
        except (ValidationError, TypeError, KeyError) as exc:
            raise StorageUnavailableError("Stored memories are malformed") from exc
        if collection.version > SCHEMA_VERSION:
            raise StorageUnavailableError(
                f"Unsupported memory schema version: {collection.version}"
            )
        return collection

    def to_memories(self) -> list[Memory]:
        return [stored.to_memory() for stored in self.memories]


def _upgrade_legacy(item: dict[str, object]) -> StoredMemory:
    """Map a version 0 record (id/photo/date/filter/notes) to the current schema."""
    return StoredMemory.model_validate(
        {
            "id": str(item["id"]),
            "photo_data": item["photo"],
            "captured_at": item["date"],
            "filter_id": item.get("filter") or "none",
            "notes": item.get("notes") or "",
        }
    )
