"""JSON file storage for the memory collection."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from scrapbook.domain.errors import StorageUnavailableError
from scrapbook.domain.memories import Memory, MemoryCollection
from scrapbook.services.memories import MemoryStorage

logger = logging.getLogger(__name__)


@dataclass
class JsonFileMemoryStorage(MemoryStorage):
    """Stores the whole collection as one versioned JSON document."""

    path: Path

    def load_all(self) -> list[Memory]:
        """Read the collection, treating a missing file as empty."""
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.exception("Failed to read memories from %s", self.path)
            raise StorageUnavailableError(f"Cannot read {self.path}") from exc
        return MemoryCollection.from_payload(raw).to_memories()

    def save_all(self, memories: list[Memory]) -> None:
        """Write the collection atomically via a temporary file."""
        document = MemoryCollection.from_memories(memories).model_dump_json()
        tmp = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(document, encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            logger.exception("Failed to write memories to %s", self.path)
            if tmp.exists():
                tmp.unlink()
            raise StorageUnavailableError(f"Cannot write {self.path}") from exc
