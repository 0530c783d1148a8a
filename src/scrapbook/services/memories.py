"""Memory store service: ordered CRUD, search and day grouping."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from scrapbook.domain.dates import (
    day_key,
    format_day_heading,
    format_display_date,
    utc_now,
)
from scrapbook.domain.errors import MemoryNotFoundError
from scrapbook.domain.memories import DayGroup, Memory

logger = logging.getLogger(__name__)


class MemoryStorage(Protocol):
    """Persistence interface holding the whole collection as one blob."""

    def load_all(self) -> list[Memory]:
        """Return all stored memories in store order."""

    def save_all(self, memories: list[Memory]) -> None:
        """Replace the stored collection, raising StorageUnavailableError."""


@dataclass
class MemoryService:
    """Application service for the memory collection."""

    storage: MemoryStorage
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    clock: Callable[[], datetime] = utc_now
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def list(self) -> list[Memory]:
        """Return all memories, most recently created first."""
        return list(self.storage.load_all())

    def count(self) -> int:
        """Return the number of stored memories."""
        return len(self.storage.load_all())

    def get(self, memory_id: str) -> Memory:
        """Return a memory by id."""
        for memory in self.storage.load_all():
            if memory.id == memory_id:
                return memory
        raise MemoryNotFoundError(memory_id)

    def create(self, photo_data: str, filter_id: str, notes: str = "") -> Memory:
        """Store a newly captured photo at the head of the collection."""
        with self._lock:
            existing = self.storage.load_all()
            captured_at = self.clock()
            memory = Memory(
                id=_next_id(captured_at, existing),
                photo_data=photo_data,
                captured_at=captured_at,
                filter_id=filter_id,
                notes=notes,
            )
            self.storage.save_all([memory, *existing])
        logger.info("Created memory %s (filter=%s)", memory.id, filter_id)
        return memory

    def update(self, memory_id: str, notes: str) -> Memory:
        """Replace the notes of a memory, leaving every other field untouched."""
        with self._lock:
            existing = self.storage.load_all()
            updated: Memory | None = None
            memories: list[Memory] = []
            for memory in existing:
                if memory.id == memory_id:
                    updated = replace(memory, notes=notes)
                    memories.append(updated)
                else:
                    memories.append(memory)
            if updated is None:
                raise MemoryNotFoundError(memory_id)
            self.storage.save_all(memories)
        logger.info("Updated notes for memory %s", memory_id)
        return updated

    def delete(self, memory_id: str) -> None:
        """Remove a memory; unknown ids are ignored."""
        with self._lock:
            existing = self.storage.load_all()
            remaining = [memory for memory in existing if memory.id != memory_id]
            if len(remaining) == len(existing):
                logger.info("Delete ignored for unknown memory %s", memory_id)
                return
            self.storage.save_all(remaining)
        logger.info("Deleted memory %s", memory_id)

    def search(self, query: str | None) -> list[Memory]:
        """Return memories whose display date or notes contain the query."""
        memories = self.list()
        if not query:
            return memories
        needle = query.lower()
        return [
            memory
            for memory in memories
            if needle in format_display_date(memory.captured_at, self.timezone).lower()
            or needle in memory.notes.lower()
        ]

    def group_by_day(self, memories: list[Memory]) -> dict[str, list[Memory]]:
        """Group memories by calendar day, keeping store order within a day."""
        groups: dict[str, list[Memory]] = {}
        for memory in memories:
            key = day_key(memory.captured_at, self.timezone)
            groups.setdefault(key, []).append(memory)
        return groups

    def browse(self, query: str | None = None) -> list[DayGroup]:
        """Search and group memories, most recent day first."""
        groups = self.group_by_day(self.search(query))
        return [
            DayGroup(day_key=key, heading=format_day_heading(key), memories=groups[key])
            for key in sorted(groups, reverse=True)
        ]


def _next_id(captured_at: datetime, existing: list[Memory]) -> str:
    """Return a millisecond-timestamp id that is unique in the collection."""
    candidate = int(captured_at.timestamp() * 1000)
    taken = {memory.id for memory in existing}
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)

