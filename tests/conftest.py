"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from nutrition_engine.adapters.fdc_client import FdcClient
from nutrition_engine.adapters.openfoodfacts_client import OpenFoodFactsClient
from nutrition_engine.config import Settings
from nutrition_engine.containers import AppContainer
from nutrition_engine.domain.nutrition import (
    CacheEntry,
    NutritionRecord,
    NutritionSource,
)
from nutrition_engine.domain.profile import (
    DietaryRestriction,
    HealthSensitivity,
    UserProfile,
)
from nutrition_engine.services.analysis import NutritionAnalysisService
from nutrition_engine.services.cache import CacheStore, NutritionCache
from nutrition_engine.services.intelligence import NutritionIntelligenceEngine
from nutrition_engine.services.matcher import FruitMatcher
from nutrition_engine.services.nutrition import NutritionService
from nutrition_engine.services.recommendations import RecommendationService
from nutrition_engine.services.safety import SafetyValidator

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)

KIWI_PRODUCT = {
    "code": "3700000000001",
    "product_name": "Kiwi",
    "nutriments": {
        "energy-kcal_100g": 61,
        "proteins_100g": 1.1,
        "carbohydrates_100g": 14.7,
        "fiber_100g": 3,
        "fat_100g": 0.5,
        "sugars_100g": 9,
        "vitamin-c_100g": 0.0927,
        "potassium_100g": 0.312,
    },
    "categories_tags": ["en:fruits"],
    "brands": "Orchard",
}

APPLE_FOOD = {
    "fdcId": 171688,
    "description": "Apples, raw, with skin",
    "foodCategory": "Fruits and Fruit Juices",
    "foodNutrients": [
        {"nutrientId": 1008, "nutrientName": "Energy", "unitName": "KCAL", "value": 52},
        {"nutrientId": 1003, "nutrientName": "Protein", "unitName": "G", "value": 0.26},
        {"nutrientId": 1005, "value": 13.8},
        {"nutrientId": 1079, "value": 2.4},
        {"nutrientId": 1004, "value": 0.17},
        {"nutrientId": 2000, "value": 10.4},
        {"nutrientId": 1092, "value": 107},
    ],
}


def make_record(**overrides: object) -> NutritionRecord:
    values: dict[str, object] = {
        "id": "test-1",
        "name": "Test Food",
        "source": NutritionSource.LOCAL,
        "fetched_at": FIXED_NOW,
        "calories": 100.0,
        "protein": 1.0,
        "carbs": 20.0,
        "fiber": 2.0,
        "fat": 0.5,
        "sugar": 4.0,
    }
    values.update(overrides)
    return NutritionRecord(**values)


def make_profile(*restrictions: DietaryRestriction, **fields: object) -> UserProfile:
    return UserProfile(
        health_sensitivities=tuple(HealthSensitivity(item) for item in restrictions),
        **fields,
    )


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake OpenFoodFacts client; queued errors are raised before the payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {"count": 12, "products": [KIWI_PRODUCT]}
    )
    errors: list[Exception] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)

    async def search_products(self, term: str, page_size: int = 5) -> dict[str, object]:
        self.calls.append(term)
        if self.errors:
            raise self.errors.pop(0)
        return self.payload


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    payload: dict[str, object] = field(
        default_factory=lambda: {"totalHits": 3, "foods": [APPLE_FOOD]}
    )
    errors: list[Exception] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        self.calls.append(query)
        if self.errors:
            raise self.errors.pop(0)
        return self.payload


@dataclass
class InMemoryCacheStore(CacheStore):
    """Durable store double that keeps entries in a dict."""

    entries: dict[str, CacheEntry] = field(default_factory=dict)

    def load_all(self) -> dict[str, CacheEntry]:
        return dict(self.entries)

    def save(self, key: str, entry: CacheEntry) -> None:
        self.entries[key] = entry

    def remove(self, key: str) -> None:
        self.entries.pop(key, None)

    def clear(self) -> None:
        self.entries.clear()


@dataclass
class FakeClock:
    now: datetime = FIXED_NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


async def no_sleep(_delay: float) -> None:
    return None


@pytest.fixture
def settings() -> Settings:
    return Settings(
        fdc_api_key="fdc-key",
        retry_delay_seconds=0,
        timeout_seconds=1.0,
    )


@pytest.fixture
def openfoodfacts_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def container(
    settings: Settings,
    openfoodfacts_client: FakeOpenFoodFactsClient,
    fdc_client: FakeFdcClient,
) -> AppContainer:
    cache = NutritionCache(ttl_seconds=settings.cache_ttl_seconds)
    nutrition_service = NutritionService(
        openfoodfacts_client=openfoodfacts_client,
        fdc_client=fdc_client,
        cache=cache,
        max_retries=settings.max_retries,
        retry_delay_seconds=settings.retry_delay_seconds,
        timeout_seconds=settings.timeout_seconds,
        sleep=no_sleep,
    )
    engine = NutritionIntelligenceEngine()
    validator = SafetyValidator(engine)
    analysis_service = NutritionAnalysisService(engine=engine, validator=validator)
    matcher = FruitMatcher(options=settings.match_options(), validator=validator)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        cache=cache,
        nutrition_service=nutrition_service,
        engine=engine,
        validator=validator,
        analysis_service=analysis_service,
        matcher=matcher,
        recommendation_service=RecommendationService(
            nutrition_service=nutrition_service,
            analysis_service=analysis_service,
            matcher=matcher,
        ),
        close_resources=close_resources,
    )
