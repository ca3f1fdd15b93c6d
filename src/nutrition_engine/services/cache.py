"""TTL cache for nutrition records with optional durable backing."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from nutrition_engine.domain.nutrition import CacheEntry, CacheStats, NutritionRecord

_logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


class CacheStore(Protocol):
    """Durable key-value store mirrored by the in-memory cache."""

    def load_all(self) -> dict[str, CacheEntry]:
        """Return every persisted entry keyed by cache key."""

    def save(self, key: str, entry: CacheEntry) -> None:
        """Persist or replace an entry."""

    def remove(self, key: str) -> None:
        """Remove a persisted entry."""

    def clear(self) -> None:
        """Remove every persisted entry."""


def normalize_cache_key(term: str) -> str:
    """Build the cache key for a search term.

    Case and whitespace are ignored, so "Blue Berry " and "blueberry" share a key.
    """
    return "search:" + "".join(term.lower().split())


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class NutritionCache:
    """In-memory TTL cache, optionally mirrored to a durable store."""

    ttl_seconds: float = DEFAULT_TTL_SECONDS
    store: CacheStore | None = None
    max_entries: int | None = None
    clock: Callable[[], datetime] = _utcnow
    _entries: dict[str, CacheEntry] = field(default_factory=dict, init=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False)

    def __post_init__(self) -> None:
        if self.store is not None:
            self._load_from_store()

    def get(self, term: str) -> NutritionRecord | None:
        """Return a live record, evicting it if it has expired."""
        key = normalize_cache_key(term)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self.clock()):
                self._evict(key)
                return None
            return entry.record

    def get_entry(self, term: str) -> CacheEntry | None:
        """Return the raw entry for a term, expired or not, without evicting."""
        with self._lock:
            return self._entries.get(normalize_cache_key(term))

    def set(
        self, term: str, record: NutritionRecord, ttl_seconds: float | None = None
    ) -> None:
        """Store a record, replacing any previous entry for the term."""
        key = normalize_cache_key(term)
        entry = CacheEntry(
            record=record,
            cached_at=self.clock(),
            ttl_seconds=self.ttl_seconds if ttl_seconds is None else ttl_seconds,
        )
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = entry
            self._enforce_limit()
        self._store_call("save", key, entry)

    def delete(self, term: str) -> bool:
        """Remove an entry; return True if one existed."""
        key = normalize_cache_key(term)
        with self._lock:
            existed = self._entries.pop(key, None) is not None
        if existed:
            self._store_call("remove", key)
        return existed

    def has(self, term: str) -> bool:
        return self.get(term) is not None

    def invalidate_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self.clock()
        with self._lock:
            expired = [
                key for key, entry in self._entries.items() if entry.is_expired(now)
            ]
            for key in expired:
                self._entries.pop(key, None)
        for key in expired:
            self._store_call("remove", key)
        if expired:
            _logger.info("Cache purged %s expired entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        self._store_call("clear")

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def stats(self) -> CacheStats:
        now = self.clock()
        with self._lock:
            keys = list(self._entries)
            expired_count = sum(
                1 for entry in self._entries.values() if entry.is_expired(now)
            )
        return CacheStats(
            size=len(keys),
            keys=keys,
            expired_count=expired_count,
            valid_count=len(keys) - expired_count,
        )

    def _evict(self, key: str) -> None:
        self._entries.pop(key, None)
        self._store_call("remove", key)

    def _enforce_limit(self) -> None:
        if self.max_entries is None:
            return
        while len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            self._evict(oldest)

    def _load_from_store(self) -> None:
        try:
            persisted = self.store.load_all()
        except Exception:
            _logger.warning("Failed to load persisted nutrition cache", exc_info=True)
            return
        now = self.clock()
        for key, entry in persisted.items():
            if entry.is_expired(now):
                self._store_call("remove", key)
                continue
            self._entries[key] = entry
        self._enforce_limit()
        _logger.info("Loaded %s cached nutrition records", len(self._entries))

    def _store_call(self, action: str, *args: object) -> None:
        if self.store is None:
            return
        try:
            getattr(self.store, action)(*args)
        except Exception:
            _logger.warning("Nutrition cache store %s failed", action, exc_info=True)
