"""Tests for nutrition service."""

import asyncio
from dataclasses import dataclass, field

import httpx
import pytest

from nutrition_engine.domain.nutrition import NutritionSource
from nutrition_engine.errors import (
    AllSourcesFailedError,
    NutritionNotFoundError,
    ProviderError,
    ProviderTimeoutError,
)
from nutrition_engine.services.cache import NutritionCache
from nutrition_engine.services.nutrition import NutritionService
from tests.conftest import (
    FakeClock,
    FakeFdcClient,
    FakeOpenFoodFactsClient,
    InMemoryCacheStore,
    make_record,
    no_sleep,
)


@dataclass
class RecordingSleep:
    delays: list[float] = field(default_factory=list)

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _service(
    openfoodfacts: FakeOpenFoodFactsClient | None = None,
    fdc: FakeFdcClient | None = None,
    cache: NutritionCache | None = None,
    **kwargs: object,
) -> NutritionService:
    kwargs.setdefault("sleep", no_sleep)
    return NutritionService(
        openfoodfacts_client=openfoodfacts or FakeOpenFoodFactsClient(),
        fdc_client=fdc or FakeFdcClient(),
        cache=cache or NutritionCache(),
        **kwargs,
    )


def _status_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://example.test/search")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


def test_fetch_uses_openfoodfacts_then_cache() -> None:
    openfoodfacts = FakeOpenFoodFactsClient()
    service = _service(openfoodfacts)

    result = asyncio.run(service.fetch_nutrition("Kiwi"))
    assert result.source == NutritionSource.OPENFOODFACTS
    assert result.record.name == "Kiwi"
    assert result.total == 12
    assert result.from_cache is False

    cached = asyncio.run(service.fetch_nutrition(" kiwi "))
    assert cached.from_cache is True
    assert cached.record == result.record
    assert openfoodfacts.calls == ["Kiwi"]


def test_cache_disabled_always_calls_provider() -> None:
    openfoodfacts = FakeOpenFoodFactsClient()
    service = _service(openfoodfacts, use_cache=False)

    asyncio.run(service.fetch_nutrition("kiwi"))
    asyncio.run(service.fetch_nutrition("kiwi"))

    assert len(openfoodfacts.calls) == 2
    assert service.get_cache_stats().size == 0


def test_falls_back_to_usda_without_retrying_empty_results() -> None:
    openfoodfacts = FakeOpenFoodFactsClient(payload={"count": 0, "products": []})
    fdc = FakeFdcClient()
    service = _service(openfoodfacts, fdc)

    result = asyncio.run(service.fetch_nutrition("apple"))

    assert result.source == NutritionSource.USDA
    assert result.total == 3
    assert result.record.name == "Apples, raw, with skin"
    assert len(openfoodfacts.calls) == 1
    assert fdc.calls == ["apple"]


def test_retries_with_exponential_backoff() -> None:
    openfoodfacts = FakeOpenFoodFactsClient(
        errors=[httpx.ConnectError("down"), _status_error(502)]
    )
    sleep = RecordingSleep()
    service = _service(openfoodfacts, sleep=sleep, retry_delay_seconds=1.0)

    result = asyncio.run(service.fetch_nutrition("kiwi"))

    assert result.source == NutritionSource.OPENFOODFACTS
    assert len(openfoodfacts.calls) == 3
    assert sleep.delays == [1.0, 2.0]


def test_exhausted_retries_move_to_next_source() -> None:
    openfoodfacts = FakeOpenFoodFactsClient(
        errors=[httpx.ConnectError("down") for _ in range(3)]
    )
    fdc = FakeFdcClient()
    service = _service(openfoodfacts, fdc, max_retries=3)

    result = asyncio.run(service.fetch_nutrition("apple"))

    assert result.source == NutritionSource.USDA
    assert len(openfoodfacts.calls) == 3
    assert len(fdc.calls) == 1


def test_malformed_payload_is_retried() -> None:
    fdc = FakeFdcClient(payload=["not", "a", "dict"])  # type: ignore[arg-type]
    openfoodfacts = FakeOpenFoodFactsClient(payload={"products": []})
    service = _service(openfoodfacts, fdc, max_retries=2)

    with pytest.raises(AllSourcesFailedError):
        asyncio.run(service.fetch_nutrition("apple"))

    assert len(fdc.calls) == 2


def test_not_found_when_every_source_is_empty() -> None:
    service = _service(
        FakeOpenFoodFactsClient(payload={"products": []}),
        FakeFdcClient(payload={"foods": []}),
    )

    with pytest.raises(NutritionNotFoundError):
        asyncio.run(service.fetch_nutrition("unobtainium"))


def test_all_sources_failed_keeps_status_codes() -> None:
    service = _service(
        FakeOpenFoodFactsClient(errors=[_status_error(503)]),
        FakeFdcClient(errors=[_status_error(429)]),
        max_retries=1,
    )

    with pytest.raises(AllSourcesFailedError) as exc_info:
        asyncio.run(service.fetch_nutrition("kiwi"))

    error = exc_info.value
    assert error.source == NutritionSource.FALLBACK
    assert [item.status_code for item in error.errors] == [503, 429]
    assert all(isinstance(item, ProviderError) for item in error.errors)


def test_stale_entry_served_when_sources_fail() -> None:
    clock = FakeClock()
    cache = NutritionCache(ttl_seconds=60, clock=clock)
    cache.set("kiwi", make_record(name="Cached Kiwi"))
    clock.advance(120)
    service = _service(
        FakeOpenFoodFactsClient(errors=[httpx.ConnectError("down")]),
        FakeFdcClient(errors=[httpx.ConnectError("down")]),
        cache=cache,
        max_retries=1,
    )

    result = asyncio.run(service.fetch_nutrition("kiwi"))

    assert result.record.name == "Cached Kiwi"
    assert result.from_cache is True
    assert result.is_stale is True



def test_stale_entry_survives_repeated_failures() -> None:
    clock = FakeClock()
    store = InMemoryCacheStore()
    cache = NutritionCache(ttl_seconds=60, clock=clock, store=store)
    cache.set("kiwi", make_record(name="Cached Kiwi"))
    clock.advance(120)
    service = _service(
        FakeOpenFoodFactsClient(errors=[httpx.ConnectError("down") for _ in range(2)]),
        FakeFdcClient(errors=[httpx.ConnectError("down") for _ in range(2)]),
        cache=cache,
        max_retries=1,
    )

    first = asyncio.run(service.fetch_nutrition("kiwi"))
    second = asyncio.run(service.fetch_nutrition("kiwi"))

    assert first.is_stale is True
    assert second.is_stale is True
    assert second.record.name == "Cached Kiwi"
    assert list(store.entries) == ["search:kiwi"]


def test_fresh_record_replaces_stale_entry() -> None:
    clock = FakeClock()
    cache = NutritionCache(ttl_seconds=60, clock=clock)
    cache.set("kiwi", make_record(name="Cached Kiwi"))
    clock.advance(120)
    service = _service(cache=cache)

    result = asyncio.run(service.fetch_nutrition("kiwi"))

    assert result.from_cache is False
    assert cache.get("kiwi").name == "Kiwi"


def test_malformed_item_falls_back_to_usda() -> None:
    openfoodfacts = FakeOpenFoodFactsClient(
        payload={"products": [{"code": "1", "nutriments": "n/a"}]}
    )
    fdc = FakeFdcClient()
    service = _service(openfoodfacts, fdc)

    result = asyncio.run(service.fetch_nutrition("apple"))

    assert result.source == NutritionSource.USDA
    assert result.record.name == "Apples, raw, with skin"
    assert len(fdc.calls) == 1


def test_malformed_items_everywhere_raise_all_sources_failed() -> None:
    service = _service(
        FakeOpenFoodFactsClient(payload={"products": ["not a product"]}),
        FakeFdcClient(payload={"foods": [{"foodNutrients": "n/a"}], "totalHits": "x"}),
    )

    with pytest.raises(AllSourcesFailedError) as exc_info:
        asyncio.run(service.fetch_nutrition("apple"))

    assert all("malformed item" in str(item) for item in exc_info.value.errors)

def test_slow_provider_times_out() -> None:
    @dataclass
    class SlowOpenFoodFactsClient(FakeOpenFoodFactsClient):
        async def search_products(
            self, term: str, page_size: int = 5
        ) -> dict[str, object]:
            self.calls.append(term)
            await asyncio.sleep(10)
            return self.payload

    service = _service(
        SlowOpenFoodFactsClient(),
        FakeFdcClient(errors=[httpx.ConnectError("down")]),
        max_retries=1,
        timeout_seconds=0.01,
    )

    with pytest.raises(AllSourcesFailedError) as exc_info:
        asyncio.run(service.fetch_nutrition("kiwi"))

    assert isinstance(exc_info.value.errors[0], ProviderTimeoutError)


def test_concurrent_lookups_share_one_request() -> None:
    @dataclass
    class GatedOpenFoodFactsClient(FakeOpenFoodFactsClient):
        async def search_products(
            self, term: str, page_size: int = 5
        ) -> dict[str, object]:
            self.calls.append(term)
            await asyncio.sleep(0.01)
            return self.payload

    openfoodfacts = GatedOpenFoodFactsClient()
    service = _service(openfoodfacts)

    async def run() -> list[object]:
        return await asyncio.gather(
            service.fetch_nutrition("kiwi"), service.fetch_nutrition("Kiwi")
        )

    first, second = asyncio.run(run())

    assert first is second
    assert len(openfoodfacts.calls) == 1


def test_blank_term_is_rejected() -> None:
    with pytest.raises(ValueError):
        asyncio.run(_service().fetch_nutrition("   "))


def test_clear_cache() -> None:
    service = _service()
    asyncio.run(service.fetch_nutrition("kiwi"))
    assert service.get_cache_stats().keys == ["search:kiwi"]

    service.clear_cache()

    assert service.get_cache_stats().size == 0
