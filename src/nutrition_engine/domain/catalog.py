"""Product catalog and fruit matching models."""

from dataclasses import dataclass
from enum import Enum


class MatchType(str, Enum):
    """Match tiers in priority order."""

    EXACT = "EXACT"
    SYNONYM = "SYNONYM"
    PARTIAL = "PARTIAL"
    SIMILAR = "SIMILAR"
    NONE = "NONE"


class AvailabilityStatus(str, Enum):
    IN_STOCK = "IN_STOCK"
    LIMITED = "LIMITED"
    OUT_OF_STOCK = "OUT_OF_STOCK"


@dataclass(frozen=True)
class GramPricing:
    grams: int
    price: float
    price_per_gram: float


@dataclass(frozen=True)
class Product:
    """A sellable catalog item."""

    id: int
    name: str
    badge: str
    price: float
    description: str = ""
    price_per_gram: float | None = None
    gram_pricing: tuple[GramPricing, ...] = ()


@dataclass(frozen=True)
class NutritionPer100g:
    """Local reference values; antioxidants are ORAC units."""

    calories: float
    protein: float
    carbs: float
    fiber: float
    fat: float
    vitamin_c: float
    potassium: float
    antioxidants: float
    magnesium: float
    vitamin_b6: float


@dataclass(frozen=True)
class FoodItem:
    """Row of the local nutrition lookup table."""

    id: str
    name: str
    form: str
    description: str
    nutrition: NutritionPer100g
    benefits: tuple[str, ...] = ()
    gym_focus: str = "general"


@dataclass(frozen=True)
class ProductWithNutrition:
    product: Product
    nutrition: NutritionPer100g
    availability_status: AvailabilityStatus


@dataclass(frozen=True)
class NutritionalSimilarity:
    """Weighted similarity breakdown, every score on a 0-100 scale."""

    overall_score: int
    calories_score: int
    carbs_score: int
    fiber_score: int
    vitamins_score: int


@dataclass(frozen=True)
class FruitMatchResult:
    """Outcome of matching a free-text query against the catalog."""

    match_type: MatchType
    similarity_score: int
    availability_status: AvailabilityStatus
    searched_fruit: str
    reason: str
    product: Product | None = None
    matched_fruit: str | None = None
    is_alternative: bool = False
    nutritional_similarity: NutritionalSimilarity | None = None

    @property
    def is_exact_match(self) -> bool:
        return self.match_type == MatchType.EXACT


@dataclass(frozen=True)
class AlternativeSuggestion:
    product: Product
    similarity_score: int
    nutritional_similarity: NutritionalSimilarity
    reason: str
    is_safe: bool
    safety_warnings: list[str]
    match_type: MatchType


@dataclass(frozen=True)
class HighlightPillResult:
    found: bool
    match_type: MatchType
    pill_id: int | None = None


@dataclass(frozen=True)
class MatchOptions:
    min_similarity_threshold: int = 50
    include_synonyms: bool = True
    filter_unsafe: bool = True
    max_alternatives: int = 3
