"""Supabase key-value storage for the memory collection."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from scrapbook.domain.errors import StorageUnavailableError
from scrapbook.domain.memories import Memory, MemoryCollection
from scrapbook.services.memories import MemoryStorage

logger = logging.getLogger(__name__)


@dataclass
class SupabaseMemoryStorage(MemoryStorage):
    """Stores the collection as one JSON value under a fixed key."""

    client: Client
    key: str = "memories"
    table: str = "kv_store"

    def load_all(self) -> list[Memory]:
        """Return the stored collection, or an empty one when the key is unset."""
        try:
            response = (
                self.client.table(self.table)
                .select("value")
                .eq("key", self.key)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            logger.exception("Failed to load memories from Supabase")
            raise StorageUnavailableError("Supabase read failed") from exc
        if not response.data:
            return []
        return MemoryCollection.from_payload(response.data[0]["value"]).to_memories()

    def save_all(self, memories: list[Memory]) -> None:
        """Upsert the whole collection under the storage key."""
        collection = MemoryCollection.from_memories(memories)
        try:
            self.client.table(self.table).upsert(
                {
                    "key": self.key,
                    "value": collection.model_dump(mode="json"),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            ).execute()
        except (APIError, httpx.HTTPError) as exc:
            logger.exception("Failed to save memories to Supabase")
            raise StorageUnavailableError("Supabase write failed") from exc
