"""Answer a food query with a catalog match, analysis and alternatives."""

import logging
from dataclasses import dataclass

from nutrition_engine.domain.catalog import (
    AvailabilityStatus,
    FruitMatchResult,
    MatchType,
)
from nutrition_engine.domain.intelligence import RecommendationOptions
from nutrition_engine.domain.nutrition import NutritionRecord
from nutrition_engine.domain.profile import UserProfile
from nutrition_engine.domain.recommendation import Recommendation
from nutrition_engine.errors import NutritionEngineError
from nutrition_engine.services.analysis import NutritionAnalysisService
from nutrition_engine.services.matcher import FruitMatcher
from nutrition_engine.services.nutrition import NutritionService

_logger = logging.getLogger(__name__)


@dataclass
class RecommendationService:
    nutrition_service: NutritionService
    analysis_service: NutritionAnalysisService
    matcher: FruitMatcher

    async def recommend(
        self,
        term: str,
        profile: UserProfile | None = None,
        options: RecommendationOptions | None = None,
    ) -> Recommendation:
        match = self.matcher.match_fruit_to_product(term)
        matched = match.product if match.match_type != MatchType.NONE else None

        record: NutritionRecord | None = None
        from_cache = False
        lookup_error: str | None = None
        try:
            result = await self.nutrition_service.fetch_nutrition(term)
        except NutritionEngineError as exc:
            _logger.info("Nutrition lookup failed for %s: %s", term, exc)
            lookup_error = str(exc)
            if matched is not None:
                record = self.matcher.product_record(matched)
        else:
            record = result.record
            from_cache = result.from_cache

        analysis = None
        warnings: list[str] = []
        is_safe = True
        if record is not None:
            analysis = self.analysis_service.analyze(record, profile, options)
            warnings = list(analysis.warnings)
            is_safe = analysis.is_safe

        product_safe = True
        if matched is not None:
            product_safe, product_warnings = self.matcher.product_safety(
                matched, profile
            )
            for warning in product_warnings:
                if warning not in warnings:
                    warnings.append(warning)

        excluded = [matched.id] if matched is not None else []
        alternative = None
        if (
            matched is None
            or not product_safe
            or match.availability_status != AvailabilityStatus.IN_STOCK
        ):
            alternative = self.matcher.get_best_alternative(
                term, profile=profile, exclude_product_ids=excluded
            )

        return Recommendation(
            term=term,
            match=match,
            record=record,
            analysis=analysis,
            is_safe=is_safe and product_safe,
            warnings=warnings,
            alternative=alternative,
            suggestions=self._suggestions(term, profile, excluded),
            from_cache=from_cache,
            lookup_error=lookup_error,
        )

    def _suggestions(
        self, term: str, profile: UserProfile | None, excluded: list[int]
    ) -> list[FruitMatchResult]:
        options = self.matcher.options
        suggestions: list[FruitMatchResult] = []
        for result in self.matcher.find_similar_fruits(term):
            if result.product.id in excluded:
                continue
            if (
                options.filter_unsafe
                and profile is not None
                and not self.matcher.product_safety(result.product, profile)[0]
            ):
                continue
            suggestions.append(result)
            if len(suggestions) >= options.max_alternatives:
                break
        return suggestions
