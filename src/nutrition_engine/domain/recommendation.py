"""Aggregated answer for a free-text food query."""

from dataclasses import dataclass, field

from nutrition_engine.domain.catalog import AlternativeSuggestion, FruitMatchResult
from nutrition_engine.domain.intelligence import AnalysisResult
from nutrition_engine.domain.nutrition import NutritionRecord


@dataclass(frozen=True)
class Recommendation:
    """Match, analysis and alternatives for one query.

    ``record`` and ``analysis`` are None when neither the providers nor the
    catalog know the food. ``lookup_error`` carries the provider failure
    message when the record came from the local catalog instead.
    """

    term: str
    match: FruitMatchResult
    record: NutritionRecord | None
    analysis: AnalysisResult | None
    is_safe: bool
    warnings: list[str]
    alternative: AlternativeSuggestion | None = None
    suggestions: list[FruitMatchResult] = field(default_factory=list)
    from_cache: bool = False
    lookup_error: str | None = None
