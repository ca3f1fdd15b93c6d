"""Match free-text fruit queries to catalog products."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

from nutrition_engine.domain.catalog import (
    AlternativeSuggestion,
    AvailabilityStatus,
    FoodItem,
    FruitMatchResult,
    HighlightPillResult,
    MatchOptions,
    MatchType,
    NutritionalSimilarity,
    NutritionPer100g,
    Product,
    ProductWithNutrition,
)
from nutrition_engine.domain.nutrition import (
    NutritionMetadata,
    NutritionRecord,
    NutritionSource,
)
from nutrition_engine.domain.profile import DietaryRestriction, UserProfile
from nutrition_engine.reference_data import (
    DEFAULT_PRODUCT_NUTRITION,
    FOOD_TABLE,
    FRUIT_SYNONYMS,
    PRODUCT_CATALOG,
)
from nutrition_engine.rounding import round_half_up
from nutrition_engine.services.normalization import is_dried
from nutrition_engine.services.safety import SafetyValidator

FORM_PREFIXES = ("freeze-dried", "sun-dried", "dehydrated", "dried")
LIMITED_BADGE = "Limited Seasonal"

TIER_SCORES = {
    MatchType.EXACT: 100,
    MatchType.SYNONYM: 95,
    MatchType.PARTIAL: 80,
    MatchType.NONE: 0,
}

# (lower, upper) bounds used to scale each nutrient difference
CALORIES_RANGE = (0, 500)
CARBS_RANGE = (0, 100)
FIBER_RANGE = (0, 20)
VITAMIN_C_RANGE = (0, 500)
POTASSIUM_RANGE = (0, 2000)
MAGNESIUM_RANGE = (0, 500)
VITAMIN_B6_RANGE = (0, 2)


def normalize_name(text: str) -> str:
    return " ".join(text.lower().split())


def strip_form_prefix(name: str) -> str:
    """Return the fruit part of a product name, e.g. "Dried Kiwi" -> "kiwi"."""
    normalized = normalize_name(name)
    for prefix in FORM_PREFIXES:
        if normalized.startswith(prefix + " "):
            return normalized[len(prefix) + 1 :]
    return normalized


def _contains_words(text: str, words: str) -> bool:
    return f" {words} " in f" {text} "


def _score(first: float, second: float, bounds: tuple[float, float]) -> int:
    span = bounds[1] - bounds[0]
    return round_half_up(max(0.0, 100 - abs(first - second) / span * 100))


def calculate_nutritional_similarity(
    first: NutritionPer100g, second: NutritionPer100g
) -> NutritionalSimilarity:
    """Equal-weight similarity of energy, carbs, fiber and micronutrients."""
    calories = _score(first.calories, second.calories, CALORIES_RANGE)
    carbs = _score(first.carbs, second.carbs, CARBS_RANGE)
    fiber = _score(first.fiber, second.fiber, FIBER_RANGE)
    vitamins = round_half_up(
        (
            _score(first.vitamin_c, second.vitamin_c, VITAMIN_C_RANGE)
            + _score(first.potassium, second.potassium, POTASSIUM_RANGE)
            + _score(first.magnesium, second.magnesium, MAGNESIUM_RANGE)
            + _score(first.vitamin_b6, second.vitamin_b6, VITAMIN_B6_RANGE)
        )
        / 4
    )
    overall = round_half_up(
        0.25 * calories + 0.25 * carbs + 0.25 * fiber + 0.25 * vitamins
    )
    return NutritionalSimilarity(
        overall_score=overall,
        calories_score=calories,
        carbs_score=carbs,
        fiber_score=fiber,
        vitamins_score=vitamins,
    )


@dataclass
class FruitMatcher:
    """Catalog matcher built once per catalog snapshot.

    Match tiers are tried in order: exact name, synonym, partial name. A
    separate nutritional similarity search suggests alternatives.
    """

    products: Sequence[Product] = PRODUCT_CATALOG
    food_table: Sequence[FoodItem] = FOOD_TABLE
    options: MatchOptions = field(default_factory=MatchOptions)
    validator: SafetyValidator = field(default_factory=SafetyValidator)
    synonyms: dict[str, tuple[str, ...]] = field(default_factory=lambda: FRUIT_SYNONYMS)
    _enriched: dict[int, ProductWithNutrition] = field(default_factory=dict, init=False)
    _records: dict[int, NutritionRecord] = field(default_factory=dict, init=False)

    def __post_init__(self) -> None:
        built_at = datetime.now(tz=UTC)
        for product in self.products:
            enriched = ProductWithNutrition(
                product=product,
                nutrition=self._lookup_product_nutrition(product),
                availability_status=_availability(product),
            )
            self._enriched[product.id] = enriched
            self._records[product.id] = _product_record(enriched, built_at)

    def match_fruit_to_product(
        self, term: str, products: Sequence[Product] | None = None
    ) -> FruitMatchResult:
        """Find the best catalog product for a query by tier."""
        candidates = self.products if products is None else products
        query = normalize_name(term)
        if query:
            tiers = [(MatchType.EXACT, self.find_exact_match)]
            if self.options.include_synonyms:
                tiers.append((MatchType.SYNONYM, self._find_synonym_match))
            tiers.append((MatchType.PARTIAL, self._find_partial_match))
            for match_type, finder in tiers:
                product = finder(query, candidates)
                if product is not None:
                    return FruitMatchResult(
                        match_type=match_type,
                        similarity_score=TIER_SCORES[match_type],
                        availability_status=self._availability_of(product),
                        searched_fruit=term,
                        reason=f"{match_type.value.capitalize()} name match found",
                        product=product,
                        matched_fruit=product.name,
                    )
        return FruitMatchResult(
            match_type=MatchType.NONE,
            similarity_score=TIER_SCORES[MatchType.NONE],
            availability_status=AvailabilityStatus.OUT_OF_STOCK,
            searched_fruit=term,
            reason="No match found",
        )

    def find_exact_match(
        self, term: str, products: Sequence[Product] | None = None
    ) -> Product | None:
        query = normalize_name(term)
        for product in self.products if products is None else products:
            name = normalize_name(product.name)
            if query in (name, strip_form_prefix(name)):
                return product
        return None

    def find_similar_fruits(
        self, term: str, products: Sequence[Product] | None = None
    ) -> list[FruitMatchResult]:
        """Products whose nutrition resembles the queried fruit, best first."""
        query_nutrition = self._lookup_query_nutrition(term)
        if query_nutrition is None:
            return []
        results: list[FruitMatchResult] = []
        for product in self.products if products is None else products:
            similarity = calculate_nutritional_similarity(
                query_nutrition, self._nutrition_of(product)
            )
            if similarity.overall_score < self.options.min_similarity_threshold:
                continue
            results.append(
                FruitMatchResult(
                    match_type=MatchType.SIMILAR,
                    similarity_score=similarity.overall_score,
                    availability_status=self._availability_of(product),
                    searched_fruit=term,
                    reason=f"Nutritionally similar ({similarity.overall_score}% match)",
                    product=product,
                    matched_fruit=product.name,
                    is_alternative=True,
                    nutritional_similarity=similarity,
                )
            )
        results.sort(key=lambda result: result.similarity_score, reverse=True)
        return results

    def get_best_alternative(
        self,
        term: str,
        products: Sequence[Product] | None = None,
        profile: UserProfile | None = None,
        exclude_product_ids: Iterable[int] = (),
    ) -> AlternativeSuggestion | None:
        """Top similar product, skipping ones unsafe for the profile."""
        excluded = set(exclude_product_ids)
        candidates = [
            result
            for result in self.find_similar_fruits(term, products)
            if result.product.id not in excluded
        ]
        if self.options.filter_unsafe and profile is not None:
            candidates = [
                result
                for result in candidates
                if self.validator.is_safe_for_profile(
                    self.product_record(result.product), profile
                )
            ]
        if not candidates:
            return None
        best = candidates[0]
        is_safe, warnings = self.product_safety(best.product, profile)
        return AlternativeSuggestion(
            product=best.product,
            similarity_score=best.similarity_score,
            nutritional_similarity=best.nutritional_similarity,
            reason=best.reason,
            is_safe=is_safe,
            safety_warnings=warnings,
            match_type=best.match_type,
        )

    def product_safety(
        self, product: Product, profile: UserProfile | None
    ) -> tuple[bool, list[str]]:
        """Blocking decision and warnings for a catalog product."""
        if profile is None:
            return True, []
        record = self.product_record(product)
        validation = self.validator.validate_safety(record, profile)
        warnings = list(validation.warnings)
        nutrition = self._nutrition_of(product)
        for warning in product_sensitivity_warnings(nutrition, profile):
            if warning not in warnings:
                warnings.append(warning)
        return validation.is_safe, warnings

    def product_record(self, product: Product) -> NutritionRecord:
        """Canonical record for a product, built from the local table."""
        record = self._records.get(product.id)
        if record is None or record.name != product.name:
            enriched = ProductWithNutrition(
                product=product,
                nutrition=self._lookup_product_nutrition(product),
                availability_status=_availability(product),
            )
            record = _product_record(enriched, datetime.now(tz=UTC))
        return record

    def highlight_matching_pill(self, term: str) -> HighlightPillResult:
        result = self.match_fruit_to_product(term)
        if result.product is not None and result.match_type != MatchType.NONE:
            return HighlightPillResult(
                found=True, match_type=result.match_type, pill_id=result.product.id
            )
        return HighlightPillResult(found=False, match_type=MatchType.NONE)

    def products_with_nutrition(self) -> list[ProductWithNutrition]:
        return list(self._enriched.values())

    def _find_synonym_match(
        self, query: str, products: Sequence[Product]
    ) -> Product | None:
        for base, synonyms in self.synonyms.items():
            if query in synonyms:
                product = _first_naming(products, (base,))
                if product is not None:
                    return product
            if query == base:
                product = _first_naming(products, synonyms)
                if product is not None:
                    return product
        return None

    def _find_partial_match(
        self, query: str, products: Sequence[Product]
    ) -> Product | None:
        for product in products:
            name = normalize_name(product.name)
            if query in name or name in query:
                return product
        return None

    def _resolve_synonym(self, fruit: str) -> str:
        for base, synonyms in self.synonyms.items():
            if fruit in synonyms:
                return base
        return fruit

    def _lookup_query_nutrition(self, term: str) -> NutritionPer100g | None:
        query = normalize_name(term)
        if not query:
            return None
        fruit = self._resolve_synonym(strip_form_prefix(query))
        form = "dehydrated" if fruit != query and is_dried(query) else None
        food = _find_food(self.food_table, fruit, form)
        return food.nutrition if food is not None else None

    def _lookup_product_nutrition(self, product: Product) -> NutritionPer100g:
        fruit = self._resolve_synonym(strip_form_prefix(product.name))
        food = _find_food(self.food_table, fruit, "dehydrated")
        return food.nutrition if food is not None else DEFAULT_PRODUCT_NUTRITION

    def _nutrition_of(self, product: Product) -> NutritionPer100g:
        enriched = self._enriched.get(product.id)
        if enriched is not None and enriched.product.name == product.name:
            return enriched.nutrition
        return self._lookup_product_nutrition(product)

    def _availability_of(self, product: Product) -> AvailabilityStatus:
        return _availability(product)


def product_sensitivity_warnings(
    nutrition: NutritionPer100g, profile: UserProfile
) -> list[str]:
    """Product-level warnings derived from the local nutrition table."""
    checks = {
        DietaryRestriction.DIABETES: (
            nutrition.carbs > 50,
            "High carbohydrate content - may affect blood sugar",
        ),
        DietaryRestriction.SUGAR_SENSITIVE: (
            nutrition.carbs > 40,
            "High sugar content",
        ),
        DietaryRestriction.POTASSIUM_SENSITIVE: (
            nutrition.potassium > 1000,
            "High potassium content",
        ),
        DietaryRestriction.LOW_FIBER: (nutrition.fiber > 5, "High fiber content"),
        DietaryRestriction.HIGH_FIBER: (nutrition.fiber < 5, "Low fiber content"),
        DietaryRestriction.LOW_PROTEIN: (nutrition.protein > 5, "High protein content"),
        DietaryRestriction.HIGH_PROTEIN: (nutrition.protein < 2, "Low protein content"),
    }
    warnings: list[str] = []
    for restriction in profile.restrictions:
        hit, message = checks.get(restriction, (False, ""))
        if hit and message not in warnings:
            warnings.append(message)
    return warnings


def _availability(product: Product) -> AvailabilityStatus:
    # No inventory feed yet; the seasonal badge stands in for stock levels.
    if product.badge == LIMITED_BADGE:
        return AvailabilityStatus.LIMITED
    return AvailabilityStatus.IN_STOCK


def _first_naming(products: Sequence[Product], fruits: Iterable[str]) -> Product | None:
    fruits = tuple(fruits)
    for product in products:
        name = normalize_name(product.name)
        if any(_contains_words(name, fruit) for fruit in fruits):
            return product
    return None


def _find_food(
    food_table: Sequence[FoodItem], fruit: str, form: str | None
) -> FoodItem | None:
    """Find a table row for a fruit, preferring whole-name matches."""
    rows = [food for food in food_table if form is None or food.form == form]
    for food in rows:
        if _food_base_name(food) == fruit:
            return food
    for food in rows:
        base = _food_base_name(food)
        if fruit in base or base in fruit:
            return food
    return None


def _food_base_name(food: FoodItem) -> str:
    return normalize_name(food.name.split("(")[0])


def _product_record(
    enriched: ProductWithNutrition, built_at: datetime
) -> NutritionRecord:
    nutrition = enriched.nutrition
    product = enriched.product
    return NutritionRecord(
        id=f"product-{product.id}",
        name=product.name,
        source=NutritionSource.LOCAL,
        fetched_at=built_at,
        calories=nutrition.calories,
        protein=nutrition.protein,
        carbs=nutrition.carbs,
        fiber=nutrition.fiber,
        fat=nutrition.fat,
        # The local table has no sugar column; non-fiber carbohydrate is an
        # upper bound for dried fruit.
        sugar=max(nutrition.carbs - nutrition.fiber, 0.0),
        vitamin_c=nutrition.vitamin_c,
        vitamin_b6=nutrition.vitamin_b6,
        potassium=nutrition.potassium,
        magnesium=nutrition.magnesium,
        metadata=NutritionMetadata(
            original_serving_size=100.0,
            original_serving_unit="g",
            is_dried=is_dried(product.name),
            category="dried-fruit",
        ),
    )
