"""Canonical nutrition records shared by every component."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum


class NutritionSource(str, Enum):
    """Origin of a nutrition record."""

    OPENFOODFACTS = "openfoodfacts"
    USDA = "usda"
    FALLBACK = "fallback"
    LOCAL = "local"


@dataclass(frozen=True)
class NutritionMetadata:
    """Provider context kept alongside the per-100g values."""

    original_serving_size: float = 100.0
    original_serving_unit: str = "g"
    is_dried: bool = False
    category: str | None = None
    brand: str | None = None


@dataclass(frozen=True)
class NutritionRecord:
    """Nutrition values per 100g, independent of the provider they came from.

    Macronutrients are grams, micronutrients are milligrams and optional
    because providers frequently omit them.
    """

    id: str
    name: str
    source: NutritionSource
    fetched_at: datetime
    calories: float
    protein: float
    carbs: float
    fiber: float
    fat: float
    sugar: float
    vitamin_c: float | None = None
    vitamin_b6: float | None = None
    potassium: float | None = None
    magnesium: float | None = None
    metadata: NutritionMetadata = field(default_factory=NutritionMetadata)

    def __post_init__(self) -> None:
        for name in _NUMERIC_FIELDS:
            value = getattr(self, name)
            if value is not None and not (math.isfinite(value) and value >= 0):
                raise ValueError(f"{name} must be a non-negative number, got {value}")


_NUMERIC_FIELDS = (
    "calories",
    "protein",
    "carbs",
    "fiber",
    "fat",
    "sugar",
    "vitamin_c",
    "vitamin_b6",
    "potassium",
    "magnesium",
)


@dataclass(frozen=True)
class CacheEntry:
    """A cached record with its time-to-live."""

    record: NutritionRecord
    cached_at: datetime
    ttl_seconds: float

    @property
    def expires_at(self) -> datetime:
        return self.cached_at + timedelta(seconds=self.ttl_seconds)

    def is_expired(self, now: datetime) -> bool:
        """Return True once the entry has reached its expiry time."""
        return now >= self.expires_at


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache occupancy."""

    size: int
    keys: list[str]
    expired_count: int
    valid_count: int


@dataclass(frozen=True)
class NutritionSearchResult:
    """Outcome of a nutrition lookup."""

    record: NutritionRecord
    source: NutritionSource
    total: int
    from_cache: bool = False
    is_stale: bool = False
