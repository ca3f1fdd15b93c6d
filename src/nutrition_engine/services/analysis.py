"""Full nutrition analysis for a record and profile."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from nutrition_engine.domain.intelligence import (
    AnalysisResult,
    RecommendationOptions,
    RiskLevel,
)
from nutrition_engine.domain.nutrition import NutritionRecord
from nutrition_engine.domain.profile import UserProfile
from nutrition_engine.services.intelligence import NutritionIntelligenceEngine
from nutrition_engine.services.safety import SafetyValidator


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class NutritionAnalysisService:
    """Combine summary, safe range, risks and the blocking decision."""

    engine: NutritionIntelligenceEngine
    validator: SafetyValidator
    clock: Callable[[], datetime] = field(default=_utcnow)

    def analyze(
        self,
        record: NutritionRecord,
        profile: UserProfile | None = None,
        options: RecommendationOptions | None = None,
    ) -> AnalysisResult:
        risks = self.engine.detect_risks(record, profile)
        validation = self.validator.validate_safety(record, profile)
        warnings = list(validation.warnings)
        for risk in risks:
            if (
                risk.applies_to_profile
                and risk.level.rank > RiskLevel.LOW.rank
                and risk.description not in warnings
            ):
                warnings.append(risk.description)
        return AnalysisResult(
            summary=self.engine.generate_summary(record),
            safe_range=self.engine.calculate_safe_range(record, profile),
            risks=risks,
            recommendation=self.engine.generate_recommendation(
                record, profile, options
            ),
            is_safe=validation.is_safe,
            warnings=warnings,
            analyzed_at=self.clock(),
        )
