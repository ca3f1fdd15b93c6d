"""Tests for the nutrition cache."""

from datetime import timedelta

from nutrition_engine.domain.nutrition import CacheEntry
from nutrition_engine.services.cache import NutritionCache, normalize_cache_key
from tests.conftest import FIXED_NOW, FakeClock, InMemoryCacheStore, make_record


def test_cache_key_ignores_case_and_whitespace() -> None:
    assert normalize_cache_key(" Blue Berry ") == "search:blueberry"
    assert normalize_cache_key("BLUEBERRY") == normalize_cache_key("blueberry")


def test_get_returns_record_until_ttl_elapses() -> None:
    clock = FakeClock()
    cache = NutritionCache(ttl_seconds=60, clock=clock)
    record = make_record(name="Kiwi")

    cache.set("Kiwi", record)
    clock.advance(59)
    assert cache.get("kiwi") == record

    clock.advance(1)
    assert cache.get("kiwi") is None
    assert cache.size() == 0


def test_set_overwrites_existing_entry() -> None:
    cache = NutritionCache(clock=FakeClock())
    cache.set("kiwi", make_record(calories=61))
    cache.set("KIWI", make_record(calories=70))

    assert cache.size() == 1
    assert cache.get("kiwi").calories == 70


def test_per_entry_ttl_override() -> None:
    clock = FakeClock()
    cache = NutritionCache(ttl_seconds=3600, clock=clock)
    cache.set("kiwi", make_record(), ttl_seconds=10)

    clock.advance(10)

    assert not cache.has("kiwi")


def test_get_entry_keeps_expired_entries() -> None:
    clock = FakeClock()
    cache = NutritionCache(ttl_seconds=10, clock=clock)
    cache.set("kiwi", make_record())
    clock.advance(30)

    entry = cache.get_entry("kiwi")

    assert entry is not None
    assert entry.is_expired(clock())
    assert cache.size() == 1


def test_invalidate_expired_and_stats() -> None:
    clock = FakeClock()
    cache = NutritionCache(ttl_seconds=100, clock=clock)
    cache.set("kiwi", make_record(), ttl_seconds=10)
    cache.set("mango", make_record())
    clock.advance(50)

    stats = cache.stats()
    assert stats.size == 2
    assert stats.expired_count == 1
    assert stats.valid_count == 1

    assert cache.invalidate_expired() == 1
    assert cache.keys() == ["search:mango"]


def test_delete_and_clear() -> None:
    cache = NutritionCache(clock=FakeClock())
    cache.set("kiwi", make_record())
    cache.set("mango", make_record())

    assert cache.delete("kiwi") is True
    assert cache.delete("kiwi") is False

    cache.clear()
    assert cache.size() == 0


def test_max_entries_evicts_oldest() -> None:
    cache = NutritionCache(max_entries=2, clock=FakeClock())
    cache.set("kiwi", make_record())
    cache.set("mango", make_record())
    cache.set("kiwi", make_record())
    cache.set("papaya", make_record())

    assert cache.keys() == ["search:kiwi", "search:papaya"]


def test_store_is_loaded_and_mirrored() -> None:
    store = InMemoryCacheStore()
    store.entries["search:kiwi"] = CacheEntry(
        record=make_record(name="Kiwi"), cached_at=FIXED_NOW, ttl_seconds=3600
    )
    store.entries["search:old"] = CacheEntry(
        record=make_record(name="Old"),
        cached_at=FIXED_NOW - timedelta(days=2),
        ttl_seconds=3600,
    )

    cache = NutritionCache(store=store, clock=FakeClock())

    assert cache.get("kiwi").name == "Kiwi"
    assert "search:old" not in store.entries

    cache.set("mango", make_record(name="Mango"))
    assert store.entries["search:mango"].record.name == "Mango"

    cache.delete("kiwi")
    assert "search:kiwi" not in store.entries


def test_store_failures_do_not_break_cache() -> None:
    class BrokenStore(InMemoryCacheStore):
        def save(self, key, entry) -> None:  # type: ignore[no-untyped-def]
            raise RuntimeError("store down")

    cache = NutritionCache(store=BrokenStore(), clock=FakeClock())
    cache.set("kiwi", make_record(name="Kiwi"))

    assert cache.get("kiwi").name == "Kiwi"
