"""Blocking decisions and safer alternatives for a user profile."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from nutrition_engine.domain.intelligence import (
    DietaryRisk,
    RecommendationOptions,
    RiskLevel,
    SafeAlternative,
    SafetyReport,
    SafetyValidationResult,
)
from nutrition_engine.domain.nutrition import NutritionRecord
from nutrition_engine.domain.profile import DietaryRestriction, UserProfile
from nutrition_engine.services.intelligence import (
    FRUIT_KEYWORDS,
    NUT_KEYWORDS,
    NutritionIntelligenceEngine,
    contains_keyword,
    primary_macronutrient,
)

MAX_ALTERNATIVES = 3

_REASON_PREFIXES = (
    (RiskLevel.AVOID, "Does not contain"),
    (RiskLevel.HIGH, "Lower in"),
)

# Acid reflux warnings use a narrower list than the pH estimate.
REFLUX_WARNING_KEYWORDS = (
    "citrus",
    "lemon",
    "orange",
    "grapefruit",
    "lime",
    "tomato",
    "pineapple",
    "strawberry",
    "cranberry",
)


@dataclass
class SafetyValidator:
    """Decide whether a food may be recommended to a user.

    Without a profile nothing is blocked. With one, an applicable AVOID or
    HIGH risk, an allergen or a custom sensitivity blocks the food.
    """

    engine: NutritionIntelligenceEngine = field(
        default_factory=NutritionIntelligenceEngine
    )

    def validate_safety(
        self, record: NutritionRecord, profile: UserProfile | None
    ) -> SafetyValidationResult:
        if profile is None:
            return SafetyValidationResult()

        warnings: list[str] = []
        block_reason: str | None = None
        risks = self.engine.detect_risks(record, profile)

        avoid = _applicable(risks, RiskLevel.AVOID)
        if avoid:
            block_reason = "Contains " + ", ".join(risk.type.lower() for risk in avoid)
            warnings.extend(risk.description for risk in avoid)

        high = _applicable(risks, RiskLevel.HIGH)
        if high:
            block_reason = block_reason or "High in " + ", ".join(
                risk.type.lower() for risk in high
            )
            warnings.extend(risk.description for risk in high)

        allergens = _allergen_warnings(record, profile)
        if allergens:
            block_reason = block_reason or ", ".join(allergens)
            warnings.extend(allergens)

        warnings.extend(_restriction_warnings(record, profile))

        custom = _custom_sensitivity_warnings(record, profile)
        if custom:
            block_reason = block_reason or "Matches custom sensitivities"
            warnings.extend(custom)

        return SafetyValidationResult(
            warnings=warnings,
            should_block=block_reason is not None,
            block_reason=block_reason,
        )

    def is_safe_for_profile(
        self, record: NutritionRecord, profile: UserProfile | None
    ) -> bool:
        return self.validate_safety(record, profile).is_safe

    def get_safety_warnings(
        self, record: NutritionRecord, profile: UserProfile | None
    ) -> list[str]:
        return self.validate_safety(record, profile).warnings

    def should_block_recommendation(
        self, record: NutritionRecord, profile: UserProfile | None
    ) -> bool:
        return self.validate_safety(record, profile).should_block

    def get_safe_alternatives(
        self,
        record: NutritionRecord,
        profile: UserProfile | None,
        candidates: Iterable[NutritionRecord],
    ) -> list[SafeAlternative]:
        """Up to three safe candidates ranked by nutritional closeness."""
        if profile is None:
            return []
        safe = [
            candidate
            for candidate in candidates
            if candidate.id != record.id
            and self.is_safe_for_profile(candidate, profile)
        ]
        safe.sort(key=lambda candidate: _closeness(record, candidate), reverse=True)
        return [
            SafeAlternative(
                record=candidate,
                reason=self._alternative_reason(record, candidate, profile),
                comparison=compare_records(record, candidate),
            )
            for candidate in safe[:MAX_ALTERNATIVES]
        ]

    def get_safety_report(
        self, record: NutritionRecord, profile: UserProfile | None
    ) -> SafetyReport:
        return SafetyReport(
            validation=self.validate_safety(record, profile),
            risks=self.engine.detect_risks(record, profile),
            recommendation=self.engine.generate_recommendation(
                record, profile, RecommendationOptions(conservative_mode=True)
            ),
        )

    def _alternative_reason(
        self,
        original: NutritionRecord,
        candidate: NutritionRecord,
        profile: UserProfile,
    ) -> str:
        original_risks = self.engine.detect_risks(original, profile)
        candidate_risks = self.engine.detect_risks(candidate, profile)
        for level, prefix in _REASON_PREFIXES:
            original_hits = [risk for risk in original_risks if risk.level == level]
            if original_hits and not any(
                risk.level == level for risk in candidate_risks
            ):
                kinds = ", ".join(risk.type.lower() for risk in original_hits)
                return f"{prefix} {kinds}"
        return "Safer alternative based on your profile"


def compare_records(original: NutritionRecord, alternative: NutritionRecord) -> str:
    """Describe how an alternative differs per 100g."""
    parts: list[str] = []
    calorie_diff = alternative.calories - original.calories
    if abs(calorie_diff) > 20:
        parts.append(
            f"{abs(calorie_diff):g} fewer calories per 100g"
            if calorie_diff < 0
            else f"{calorie_diff:g} more calories per 100g"
        )
    sugar_diff = alternative.sugar - original.sugar
    if abs(sugar_diff) > 2:
        parts.append(
            f"{abs(sugar_diff):.1f}g less sugar per 100g"
            if sugar_diff < 0
            else f"{sugar_diff:.1f}g more sugar per 100g"
        )
    fiber_diff = alternative.fiber - original.fiber
    if abs(fiber_diff) > 1:
        parts.append(
            f"{fiber_diff:.1f}g more fiber per 100g"
            if fiber_diff > 0
            else f"{abs(fiber_diff):.1f}g less fiber per 100g"
        )
    return ", ".join(parts) or "Similar nutritional profile"


def _closeness(original: NutritionRecord, candidate: NutritionRecord) -> float:
    score = max(0.0, 100 - abs(original.calories - candidate.calories))
    if primary_macronutrient(original) == primary_macronutrient(candidate):
        score += 50
    score += max(0.0, 50 - abs(original.fiber - candidate.fiber) * 5)
    return score


def _applicable(risks: list[DietaryRisk], level: RiskLevel) -> list[DietaryRisk]:
    return [risk for risk in risks if risk.level == level and risk.applies_to_profile]


def _allergen_warnings(record: NutritionRecord, profile: UserProfile) -> list[str]:
    warnings: list[str] = []
    if profile.has_restriction(DietaryRestriction.NUT_ALLERGY) and contains_keyword(
        record.name, NUT_KEYWORDS
    ):
        warnings.append("Contains nuts - you have a nut allergy")
    if profile.has_restriction(DietaryRestriction.FRUIT_ALLERGY) and contains_keyword(
        record.name, FRUIT_KEYWORDS
    ):
        warnings.append("This is a fruit - you have a fruit allergy")
    return warnings


def _restriction_warnings(record: NutritionRecord, profile: UserProfile) -> list[str]:
    """Non-blocking warnings for declared conditions."""
    warnings: list[str] = []
    if profile.has_restriction(DietaryRestriction.DIABETES) and record.sugar > 10:
        warnings.append(
            f"High sugar content ({record.sugar:.1f}g per 100g) - may not be "
            "suitable for diabetes"
        )
    elif (
        profile.has_restriction(DietaryRestriction.SUGAR_SENSITIVE)
        and record.sugar > 15
    ):
        warnings.append(
            f"Moderate to high sugar content ({record.sugar:.1f}g per 100g) - you "
            "are sugar sensitive"
        )

    potassium = record.potassium or 0
    if profile.has_restriction(DietaryRestriction.KIDNEY_DISEASE) and potassium > 200:
        warnings.append(
            f"High potassium content ({potassium:.0f}mg per 100g) - may not be "
            "suitable for kidney disease"
        )
    elif (
        profile.has_restriction(DietaryRestriction.POTASSIUM_SENSITIVE)
        and potassium > 300
    ):
        warnings.append(
            f"Moderate to high potassium content ({potassium:.0f}mg per 100g) - you "
            "are potassium sensitive"
        )

    if profile.has_restriction(DietaryRestriction.ACID_REFLUX) and contains_keyword(
        record.name, REFLUX_WARNING_KEYWORDS
    ):
        warnings.append("Acidic food - may trigger acid reflux symptoms")
    return warnings


def _custom_sensitivity_warnings(
    record: NutritionRecord, profile: UserProfile
) -> list[str]:
    name = record.name.lower()
    return [
        f"Matches custom sensitivity: {sensitivity}"
        for sensitivity in profile.custom_sensitivities
        if sensitivity.strip() and sensitivity.strip().lower() in name
    ]
