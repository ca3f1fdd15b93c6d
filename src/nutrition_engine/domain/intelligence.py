"""Risk and safety analysis results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from nutrition_engine.domain.nutrition import NutritionRecord


class RiskLevel(str, Enum):
    """Severity buckets, ordered from least to most severe."""

    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    AVOID = "AVOID"

    @property
    def rank(self) -> int:
        return _RISK_ORDER.index(self)


_RISK_ORDER = [RiskLevel.LOW, RiskLevel.MODERATE, RiskLevel.HIGH, RiskLevel.AVOID]


@dataclass(frozen=True)
class DietaryRisk:
    """A single rule hit for one nutrient or allergen."""

    type: str
    level: RiskLevel
    description: str
    cause: str
    value: float
    threshold: float
    unit: str
    applies_to_profile: bool


@dataclass(frozen=True)
class SafeConsumptionRange:
    min_grams: int
    max_grams: int
    recommended_grams: int
    reason: str
    is_conservative: bool


@dataclass(frozen=True)
class NutritionSummary:
    description: str
    highlights: list[str]
    calorie_density: str
    primary_macronutrient: str


@dataclass(frozen=True)
class RecommendationOptions:
    include_details: bool = True
    max_risks: int = 3
    conservative_mode: bool = False


@dataclass(frozen=True)
class AnalysisResult:
    """Everything the UI needs to present a food to a user."""

    summary: NutritionSummary
    safe_range: SafeConsumptionRange
    risks: list[DietaryRisk]
    recommendation: str
    is_safe: bool
    warnings: list[str]
    analyzed_at: datetime


@dataclass(frozen=True)
class SafetyValidationResult:
    """Blocking decision for a food against a profile.

    ``is_safe`` is always the negation of ``should_block``.
    """

    warnings: list[str] = field(default_factory=list)
    should_block: bool = False
    block_reason: str | None = None

    @property
    def is_safe(self) -> bool:
        return not self.should_block


@dataclass(frozen=True)
class SafeAlternative:
    record: NutritionRecord
    reason: str
    comparison: str


@dataclass(frozen=True)
class SafetyReport:
    validation: SafetyValidationResult
    risks: list[DietaryRisk]
    recommendation: str
