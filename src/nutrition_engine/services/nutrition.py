"""Nutrition lookups with caching, retries and provider fallback."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field

import httpx

from nutrition_engine.adapters.fdc_client import FdcClient
from nutrition_engine.adapters.openfoodfacts_client import OpenFoodFactsClient
from nutrition_engine.domain.nutrition import (
    CacheEntry,
    CacheStats,
    NutritionRecord,
    NutritionSearchResult,
    NutritionSource,
)
from nutrition_engine.errors import (
    AllSourcesFailedError,
    NoResultsError,
    NutritionNotFoundError,
    ProviderError,
    ProviderTimeoutError,
)
from nutrition_engine.services.cache import NutritionCache, normalize_cache_key
from nutrition_engine.services.normalization import (
    normalize_openfoodfacts,
    normalize_usda,
)

_logger = logging.getLogger(__name__)

_RETRYABLE = (TimeoutError, httpx.HTTPError, ValueError)


@dataclass
class NutritionService:
    """Fetch canonical nutrition records.

    OpenFoodFacts is tried first and USDA FoodData Central second, each with
    its own retry budget. When both fail an expired cache entry is served as
    a last resort. Concurrent lookups for the same term share one request.
    """

    openfoodfacts_client: OpenFoodFactsClient
    fdc_client: FdcClient
    cache: NutritionCache
    use_cache: bool = True
    max_retries: int = 3
    retry_delay_seconds: float = 1.0
    timeout_seconds: float = 10.0
    page_size: int = 5
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    _in_flight: dict[str, "asyncio.Task[NutritionSearchResult]"] = field(
        default_factory=dict, init=False
    )

    async def fetch_nutrition(self, term: str) -> NutritionSearchResult:
        """Return nutrition for a food term.

        Raises NutritionNotFoundError when every provider answered without a
        match and AllSourcesFailedError when providers failed and no cached
        copy exists.
        """
        cleaned = term.strip()
        if not cleaned:
            raise ValueError("Search term must not be empty")
        key = normalize_cache_key(cleaned)
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run_single_flight(key, cleaned))
            self._in_flight[key] = task
        return await asyncio.shield(task)

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_stats(self) -> CacheStats:
        return self.cache.stats()

    async def _run_single_flight(self, key: str, term: str) -> NutritionSearchResult:
        try:
            return await self._fetch(term)
        finally:
            self._in_flight.pop(key, None)

    async def _fetch(self, term: str) -> NutritionSearchResult:
        stale_entry: CacheEntry | None = None
        if self.use_cache:
            # Expired entries stay in place until a fresh record replaces them.
            entry = self.cache.get_entry(term)
            if entry is not None and not entry.is_expired(self.cache.clock()):
                cached = entry.record
                return NutritionSearchResult(
                    record=cached, source=cached.source, total=1, from_cache=True
                )
            stale_entry = entry

        errors: list[Exception] = []
        providers = (
            (NutritionSource.OPENFOODFACTS, self._search_openfoodfacts),
            (NutritionSource.USDA, self._search_usda),
        )
        for source, search in providers:
            try:
                record, total = await search(term)
            except NoResultsError as exc:
                _logger.info("Nutrition %s: no results for %s", source.value, term)
                errors.append(exc)
                continue
            except ProviderError as exc:
                _logger.warning(
                    "Nutrition %s exhausted retries for %s: %s", source.value, term, exc
                )
                errors.append(exc)
                continue
            if self.use_cache:
                self.cache.set(term, record)
            return NutritionSearchResult(record=record, source=source, total=total)

        if stale_entry is not None:
            _logger.warning(
                "Serving stale cached nutrition for %s (cached at %s)",
                term,
                stale_entry.cached_at.isoformat(),
            )
            return NutritionSearchResult(
                record=stale_entry.record,
                source=stale_entry.record.source,
                total=1,
                from_cache=True,
                is_stale=True,
            )
        if all(isinstance(error, NoResultsError) for error in errors):
            raise NutritionNotFoundError(term)
        raise AllSourcesFailedError(term, errors)

    async def _search_openfoodfacts(self, term: str) -> tuple[NutritionRecord, int]:
        source = NutritionSource.OPENFOODFACTS
        payload = await self._call_with_retry(
            lambda: self.openfoodfacts_client.search_products(
                term, page_size=self.page_size
            ),
            source=source,
        )
        products = payload.get("products") or []
        if not products:
            raise NoResultsError(source, term)
        return _normalize_first(
            source, normalize_openfoodfacts, products, payload.get("count")
        )

    async def _search_usda(self, term: str) -> tuple[NutritionRecord, int]:
        source = NutritionSource.USDA
        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(term, page_size=self.page_size),
            source=source,
        )
        foods = payload.get("foods") or []
        if not foods:
            raise NoResultsError(source, term)
        return _normalize_first(source, normalize_usda, foods, payload.get("totalHits"))

    async def _call_with_retry(
        self,
        func: Callable[[], Awaitable[dict[str, object]]],
        *,
        source: NutritionSource,
    ) -> dict[str, object]:
        """Call a provider with a per-attempt timeout and exponential backoff."""
        attempts = max(self.max_retries, 1)
        attempt = 0
        while True:
            attempt += 1
            try:
                payload = await asyncio.wait_for(func(), timeout=self.timeout_seconds)
                if not isinstance(payload, dict):
                    raise ValueError("Unexpected response payload")
                return payload
            except _RETRYABLE as exc:
                error = _to_provider_error(exc, source, self.timeout_seconds)
                _logger.warning(
                    "Nutrition %s failed (attempt %s/%s, status=%s): %s",
                    source.value,
                    attempt,
                    attempts,
                    _status_code_from_exception(exc),
                    error,
                )
                if attempt >= attempts:
                    raise error from exc
            await self.sleep(self.retry_delay_seconds * 2 ** (attempt - 1))


def _normalize_first(
    source: NutritionSource,
    normalize: Callable[[Mapping[str, object]], NutritionRecord],
    items: list[Mapping[str, object]],
    total: object,
) -> tuple[NutritionRecord, int]:
    """Normalize the top hit; a malformed item counts as a provider failure."""
    try:
        return normalize(items[0]), int(total or len(items))
    except (AttributeError, TypeError, ValueError, KeyError, IndexError) as exc:
        raise ProviderError(source, f"malformed item: {exc}") from exc


def _to_provider_error(
    exc: Exception, source: NutritionSource, timeout_seconds: float
) -> ProviderError:
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return ProviderTimeoutError(source, timeout_seconds)
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        return ProviderError(source, f"HTTP {status_code}", status_code=status_code)
    return ProviderError(source, str(exc) or type(exc).__name__)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
