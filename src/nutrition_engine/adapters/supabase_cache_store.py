"""Supabase persistence for the nutrition cache."""

from dataclasses import asdict, dataclass
from datetime import datetime

from supabase import Client

from nutrition_engine.domain.nutrition import (
    CacheEntry,
    NutritionMetadata,
    NutritionRecord,
    NutritionSource,
)
from nutrition_engine.services.cache import CacheStore


@dataclass
class SupabaseCacheStore(CacheStore):
    """Supabase-backed store for cached nutrition records."""

    client: Client
    table: str = "nutrition_cache"

    def load_all(self) -> dict[str, CacheEntry]:
        """Return all persisted cache rows."""
        response = self.client.table(self.table).select("*").execute()
        return {row["key"]: _parse_entry(row) for row in response.data or []}

    def save(self, key: str, entry: CacheEntry) -> None:
        """Insert or replace the row for a cache key."""
        self.client.table(self.table).upsert(
            {
                "key": key,
                "payload": _record_payload(entry.record),
                "cached_at": entry.cached_at.isoformat(),
                "ttl_seconds": entry.ttl_seconds,
            }
        ).execute()

    def remove(self, key: str) -> None:
        """Delete the row for a cache key."""
        self.client.table(self.table).delete().eq("key", key).execute()

    def clear(self) -> None:
        """Delete every cache row."""
        self.client.table(self.table).delete().neq("key", "").execute()


def _record_payload(record: NutritionRecord) -> dict[str, object]:
    payload = asdict(record)
    payload["source"] = record.source.value
    payload["fetched_at"] = record.fetched_at.isoformat()
    return payload


def _parse_entry(row: dict[str, object]) -> CacheEntry:
    payload = dict(row["payload"])
    metadata = NutritionMetadata(**payload.pop("metadata", {}))
    record = NutritionRecord(
        **{
            **payload,
            "source": NutritionSource(payload["source"]),
            "fetched_at": datetime.fromisoformat(payload["fetched_at"]),
            "metadata": metadata,
        }
    )
    return CacheEntry(
        record=record,
        cached_at=datetime.fromisoformat(str(row["cached_at"])),
        ttl_seconds=float(row["ttl_seconds"]),
    )
