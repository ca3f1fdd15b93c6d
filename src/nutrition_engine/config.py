"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrition_engine.domain.catalog import MatchOptions

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    max_retries: int = 3
    retry_delay_seconds: float = 1.0
    timeout_seconds: float = 10.0
    use_cache: bool = True
    cache_ttl_seconds: float = 86400
    cache_max_entries: int | None = None
    min_similarity_threshold: int = 50
    filter_unsafe: bool = True
    include_synonyms: bool = True
    max_alternatives: int = 3
    fdc_api_key: str = "DEMO_KEY"
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    openfoodfacts_base_url: str = "https://world.openfoodfacts.org"
    user_agent: str = "NutritionEngine/0.1 (nutrition-engine)"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    cache_table: str = "nutrition_cache"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def match_options(self) -> MatchOptions:
        return MatchOptions(
            min_similarity_threshold=self.min_similarity_threshold,
            include_synonyms=self.include_synonyms,
            filter_unsafe=self.filter_unsafe,
            max_alternatives=self.max_alternatives,
        )
