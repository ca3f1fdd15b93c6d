"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_engine.adapters.fdc_client import HttpxFdcClient
from nutrition_engine.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from nutrition_engine.adapters.supabase_cache_store import SupabaseCacheStore
from nutrition_engine.config import Settings
from nutrition_engine.services.analysis import NutritionAnalysisService
from nutrition_engine.services.cache import CacheStore, NutritionCache
from nutrition_engine.services.intelligence import NutritionIntelligenceEngine
from nutrition_engine.services.matcher import FruitMatcher
from nutrition_engine.services.nutrition import NutritionService
from nutrition_engine.services.recommendations import RecommendationService
from nutrition_engine.services.safety import SafetyValidator

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cache: NutritionCache
    nutrition_service: NutritionService
    engine: NutritionIntelligenceEngine
    validator: SafetyValidator
    analysis_service: NutritionAnalysisService
    matcher: FruitMatcher
    recommendation_service: RecommendationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store: CacheStore | None = None
    if resolved_settings.supabase_url and resolved_settings.supabase_service_key:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        store = SupabaseCacheStore(supabase_client, table=resolved_settings.cache_table)
    else:
        _logger.info("Supabase not configured; nutrition cache is in-memory only")
    cache = NutritionCache(
        ttl_seconds=resolved_settings.cache_ttl_seconds,
        store=store,
        max_entries=resolved_settings.cache_max_entries,
    )
    openfoodfacts_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        user_agent=resolved_settings.user_agent,
        timeout_seconds=resolved_settings.timeout_seconds,
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        user_agent=resolved_settings.user_agent,
        timeout_seconds=resolved_settings.timeout_seconds,
    )
    nutrition_service = NutritionService(
        openfoodfacts_client=openfoodfacts_client,
        fdc_client=fdc_client,
        cache=cache,
        use_cache=resolved_settings.use_cache,
        max_retries=resolved_settings.max_retries,
        retry_delay_seconds=resolved_settings.retry_delay_seconds,
        timeout_seconds=resolved_settings.timeout_seconds,
    )
    engine = NutritionIntelligenceEngine()
    validator = SafetyValidator(engine)
    analysis_service = NutritionAnalysisService(engine=engine, validator=validator)
    matcher = FruitMatcher(
        options=resolved_settings.match_options(), validator=validator
    )
    recommendation_service = RecommendationService(
        nutrition_service=nutrition_service,
        analysis_service=analysis_service,
        matcher=matcher,
    )

    async def close_resources() -> None:
        await openfoodfacts_client.close()
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        cache=cache,
        nutrition_service=nutrition_service,
        engine=engine,
        validator=validator,
        analysis_service=analysis_service,
        matcher=matcher,
        recommendation_service=recommendation_service,
        close_resources=close_resources,
    )
