"""Rule-based nutrition insights: summaries, risks and safe amounts.

Every rule here is deterministic and local. Allergen and acidity detection
match keywords against the food name; they are heuristics, not an
ingredient analysis, and never a diagnosis.
"""

import dataclasses
import logging
import math
from dataclasses import dataclass

from nutrition_engine.domain.intelligence import (
    DietaryRisk,
    NutritionSummary,
    RecommendationOptions,
    RiskLevel,
    SafeConsumptionRange,
)
from nutrition_engine.domain.nutrition import NutritionRecord
from nutrition_engine.domain.profile import (
    ActivityLevel,
    DietaryRestriction,
    FitnessGoal,
    UserProfile,
)
from nutrition_engine.services.requirements import (
    estimate_daily_calories,
    validate_profile,
)

_logger = logging.getLogger(__name__)

DEFAULT_DAILY_CALORIES = 2000

SUGAR_THRESHOLD_G = 50
SUGAR_SENSITIVE_THRESHOLD_G = 25
DIABETES_SUGAR_THRESHOLD_G = 15

POTASSIUM_THRESHOLD_MG = 4700
POTASSIUM_SENSITIVE_THRESHOLD_MG = 2000
KIDNEY_POTASSIUM_THRESHOLD_MG = 1500

ACID_REFLUX_PH_THRESHOLD = 4.5

LOW_CALORIE_DENSITY = 100
MODERATE_CALORIE_DENSITY = 250
PRIMARY_MACRO_RATIO = 0.45

MIN_REPORTED_PERCENT = 10
MIN_SAFE_GRAMS = 10
MAX_GRAMS_FLOOR = 30
MAX_GRAMS_CEILING = 200
MAX_RECOMMENDED_GRAMS = 50
CALORIE_SHARE_PER_FOOD = 0.1

NUT_KEYWORDS = (
    "almond",
    "cashew",
    "walnut",
    "pecan",
    "pistachio",
    "hazelnut",
    "macadamia",
    "brazil nut",
)
FRUIT_KEYWORDS = (
    "fruit",
    "berry",
    "berries",
    "kiwi",
    "banana",
    "mango",
    "papaya",
    "pineapple",
    "apple",
    "cherry",
    "grape",
    "orange",
    "lemon",
    "lime",
    "peach",
    "plum",
    "apricot",
    "melon",
    "citrus",
    "raisin",
    "pomegranate",
    "guava",
    "lychee",
)
ACIDIC_KEYWORDS = (
    "citrus",
    "lemon",
    "orange",
    "grapefruit",
    "lime",
    "tomato",
    "pineapple",
    "strawberry",
    "cranberry",
    "apple",
    "peach",
    "plum",
    "cherry",
)


def bucket_risk_level(percentage: float) -> RiskLevel:
    """Map a value-to-threshold percentage onto a risk level."""
    if percentage >= 50:
        return RiskLevel.AVOID
    if percentage >= 30:
        return RiskLevel.HIGH
    if percentage >= 20:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def sugar_threshold(profile: UserProfile | None) -> float:
    if profile is None:
        return SUGAR_THRESHOLD_G
    if profile.has_restriction(DietaryRestriction.DIABETES):
        return DIABETES_SUGAR_THRESHOLD_G
    if profile.has_restriction(DietaryRestriction.SUGAR_SENSITIVE):
        return SUGAR_SENSITIVE_THRESHOLD_G
    return SUGAR_THRESHOLD_G


def potassium_threshold(profile: UserProfile | None) -> float:
    if profile is None:
        return POTASSIUM_THRESHOLD_MG
    if profile.has_restriction(DietaryRestriction.KIDNEY_DISEASE):
        return KIDNEY_POTASSIUM_THRESHOLD_MG
    if profile.has_restriction(DietaryRestriction.POTASSIUM_SENSITIVE):
        return POTASSIUM_SENSITIVE_THRESHOLD_MG
    return POTASSIUM_THRESHOLD_MG


def contains_keyword(name: str, keywords: tuple[str, ...]) -> bool:
    lowered = name.lower()
    return any(keyword in lowered for keyword in keywords)


def estimate_ph(name: str) -> float | None:
    """Rough pH guess for acidic foods, None when the name is not acidic."""
    lowered = name.lower()
    if not contains_keyword(lowered, ACIDIC_KEYWORDS):
        return None
    if "tomato" in lowered:
        return 4.2
    if "strawberry" in lowered or "apple" in lowered:
        return 3.8
    return 3.5


def primary_macronutrient(record: NutritionRecord) -> str:
    total = record.protein + record.carbs + record.fat
    if total == 0:
        return "balanced"
    ratios = {
        "protein": record.protein / total,
        "carbs": record.carbs / total,
        "fat": record.fat / total,
    }
    top = max(ratios.values())
    if top < PRIMARY_MACRO_RATIO:
        return "balanced"
    return next(name for name, ratio in ratios.items() if ratio == top)


def calorie_density(calories: float) -> str:
    if calories < LOW_CALORIE_DENSITY:
        return "low"
    if calories < MODERATE_CALORIE_DENSITY:
        return "moderate"
    return "high"


@dataclass
class NutritionIntelligenceEngine:
    """Summaries, risk detection and safe consumption ranges."""

    default_daily_calories: int = DEFAULT_DAILY_CALORIES

    def generate_summary(self, record: NutritionRecord) -> NutritionSummary:
        density = calorie_density(record.calories)
        macro = primary_macronutrient(record)
        return NutritionSummary(
            description=_describe(record, density, macro),
            highlights=_highlights(record),
            calorie_density=density,
            primary_macronutrient=macro,
        )

    def detect_risks(
        self, record: NutritionRecord, profile: UserProfile | None
    ) -> list[DietaryRisk]:
        """Return every rule hit for the record under the given profile."""
        risks = [
            risk
            for risk in (
                self._sugar_risk(record, profile),
                self._potassium_risk(record, profile),
                self._acidity_risk(record, profile),
            )
            if risk is not None
        ]
        risks.extend(self._allergen_risks(record, profile))
        return risks

    def daily_calories(self, profile: UserProfile | None) -> int:
        """Estimate daily energy needs, falling back to a population default."""
        if (
            profile is None
            or profile.age is None
            or profile.weight is None
            or profile.height is None
        ):
            return self.default_daily_calories
        completed = dataclasses.replace(
            profile,
            activity_level=profile.activity_level or ActivityLevel.SEDENTARY,
            fitness_goal=profile.fitness_goal or FitnessGoal.GENERAL_WELLNESS,
        )
        errors = validate_profile(completed)
        if errors:
            _logger.warning(
                "Using default daily calories, profile rejected: %s", "; ".join(errors)
            )
            return self.default_daily_calories
        return estimate_daily_calories(
            completed.weight,
            completed.height,
            completed.age,
            completed.sex,
            completed.activity_level,
            completed.fitness_goal,
        )

    def calculate_safe_range(
        self, record: NutritionRecord, profile: UserProfile | None
    ) -> SafeConsumptionRange:
        """Daily gram limits bounded by the most restrictive nutrient."""
        calorie_cap = _cap(
            self.daily_calories(profile) * CALORIE_SHARE_PER_FOOD, record.calories
        )
        sugar_cap = _cap(sugar_threshold(profile), record.sugar)
        potassium_cap = _cap(potassium_threshold(profile), record.potassium)

        reason = "Based on calorie limits"
        is_conservative = False
        if sugar_cap < calorie_cap and sugar_cap < potassium_cap:
            reason = "Limited by sugar content"
            is_conservative = True
        elif potassium_cap < calorie_cap and potassium_cap < sugar_cap:
            reason = "Limited by potassium content"
            is_conservative = True

        limit = min(calorie_cap, sugar_cap, potassium_cap)
        max_grams = int(min(max(limit, MAX_GRAMS_FLOOR), MAX_GRAMS_CEILING))
        return SafeConsumptionRange(
            min_grams=MIN_SAFE_GRAMS,
            max_grams=max_grams,
            recommended_grams=min(MAX_RECOMMENDED_GRAMS, math.floor(max_grams * 0.5)),
            reason=reason,
            is_conservative=is_conservative,
        )

    def generate_recommendation(
        self,
        record: NutritionRecord,
        profile: UserProfile | None,
        options: RecommendationOptions | None = None,
    ) -> str:
        """Plain-language guidance; never medical advice."""
        options = options or RecommendationOptions()
        risks = self.detect_risks(record, profile)
        safe_range = self.calculate_safe_range(record, profile)

        applicable = [risk for risk in risks if risk.applies_to_profile]
        avoid = [risk for risk in applicable if risk.level == RiskLevel.AVOID]
        if avoid:
            kinds = ", ".join(risk.type for risk in avoid).lower()
            return (
                f"Avoid {record.name}. This food contains {kinds}, which may not be "
                "suitable for your dietary needs. Please consult with a healthcare "
                "professional for personalized advice."
            )
        high = [risk for risk in applicable if risk.level == RiskLevel.HIGH]
        if high and options.conservative_mode:
            kinds = ", ".join(risk.type for risk in high).lower()
            return (
                f"Exercise caution with {record.name}. Due to {kinds}, limit "
                f"consumption to {safe_range.max_grams}g per day. {safe_range.reason}."
            )

        text = f"{record.name} can be enjoyed as part of a balanced diet."
        if options.include_details:
            text += (
                f" A serving of {safe_range.recommended_grams}g is recommended, "
                f"with a maximum of {safe_range.max_grams}g per day."
            )
            notes = " ".join(
                risk.description
                for risk in risks[: options.max_risks]
                if risk.applies_to_profile
            )
            if notes:
                text += f" Note: {notes}"
        return text

    def _sugar_risk(
        self, record: NutritionRecord, profile: UserProfile | None
    ) -> DietaryRisk | None:
        threshold = sugar_threshold(profile)
        percentage = record.sugar / threshold * 100
        if percentage < MIN_REPORTED_PERCENT:
            return None
        applies = profile is not None and (
            profile.has_restriction(DietaryRestriction.DIABETES)
            or profile.has_restriction(DietaryRestriction.SUGAR_SENSITIVE)
        )
        return DietaryRisk(
            type="High Sugar",
            level=bucket_risk_level(percentage),
            description=(
                f"This food contains {record.sugar:.1f}g of sugar per 100g, which is "
                f"{percentage:.0f}% of the daily limit."
            ),
            cause="Sugar",
            value=record.sugar,
            threshold=threshold,
            unit="g",
            applies_to_profile=applies,
        )

    def _potassium_risk(
        self, record: NutritionRecord, profile: UserProfile | None
    ) -> DietaryRisk | None:
        if not record.potassium:
            return None
        threshold = potassium_threshold(profile)
        percentage = record.potassium / threshold * 100
        if percentage < MIN_REPORTED_PERCENT:
            return None
        applies = profile is not None and (
            profile.has_restriction(DietaryRestriction.KIDNEY_DISEASE)
            or profile.has_restriction(DietaryRestriction.POTASSIUM_SENSITIVE)
        )
        return DietaryRisk(
            type="High Potassium",
            level=bucket_risk_level(percentage),
            description=(
                f"This food contains {record.potassium:.0f}mg of potassium per 100g, "
                f"which is {percentage:.0f}% of the daily limit."
            ),
            cause="Potassium",
            value=record.potassium,
            threshold=threshold,
            unit="mg",
            applies_to_profile=applies,
        )

    def _acidity_risk(
        self, record: NutritionRecord, profile: UserProfile | None
    ) -> DietaryRisk | None:
        if profile is None or not profile.has_restriction(
            DietaryRestriction.ACID_REFLUX
        ):
            return None
        ph = estimate_ph(record.name)
        if ph is None:
            return None
        if ph < 3.5:
            level = RiskLevel.HIGH
        elif ph < 4.0:
            level = RiskLevel.MODERATE
        else:
            level = RiskLevel.LOW
        return DietaryRisk(
            type="Acidic Food",
            level=level,
            description=(
                f"This food is estimated to be acidic (pH ~{ph:.1f}), which may "
                "trigger acid reflux symptoms."
            ),
            cause="Acidity",
            value=ph,
            threshold=ACID_REFLUX_PH_THRESHOLD,
            unit="pH",
            applies_to_profile=True,
        )

    def _allergen_risks(
        self, record: NutritionRecord, profile: UserProfile | None
    ) -> list[DietaryRisk]:
        if profile is None:
            return []
        risks: list[DietaryRisk] = []
        if profile.has_restriction(
            DietaryRestriction.NUT_ALLERGY
        ) and contains_keyword(record.name, NUT_KEYWORDS):
            risks.append(
                _allergen_risk(
                    "Nut Allergen",
                    "This food contains nuts, which you are allergic to.",
                    "Nuts",
                )
            )
        if profile.has_restriction(
            DietaryRestriction.FRUIT_ALLERGY
        ) and contains_keyword(record.name, FRUIT_KEYWORDS):
            risks.append(
                _allergen_risk(
                    "Fruit Allergen",
                    "This food is a fruit, which you are allergic to.",
                    "Fruit",
                )
            )
        return risks


def _allergen_risk(kind: str, description: str, cause: str) -> DietaryRisk:
    return DietaryRisk(
        type=kind,
        level=RiskLevel.AVOID,
        description=description,
        cause=cause,
        value=1,
        threshold=0,
        unit="presence",
        applies_to_profile=True,
    )


def _cap(limit: float, per_100g: float | None) -> float:
    """Grams of food that reach ``limit``; unbounded when the nutrient is absent."""
    if not per_100g:
        return math.inf
    return math.floor(limit / per_100g * 100)


def _highlights(record: NutritionRecord) -> list[str]:
    highlights: list[str] = []
    if record.fiber >= 5:
        highlights.append(f"High in fiber ({record.fiber:.1f}g per 100g)")
    elif record.fiber >= 2:
        highlights.append(f"Good source of fiber ({record.fiber:.1f}g per 100g)")
    if record.vitamin_c and record.vitamin_c >= 20:
        highlights.append(f"Rich in vitamin C ({record.vitamin_c:.1f}mg per 100g)")
    if record.potassium and record.potassium >= 300:
        highlights.append(f"Good potassium source ({record.potassium:.0f}mg per 100g)")
    if record.protein >= 10:
        highlights.append(f"High in protein ({record.protein:.1f}g per 100g)")
    if record.sugar <= 5:
        highlights.append(f"Low in sugar ({record.sugar:.1f}g per 100g)")
    if not highlights:
        highlights.append(f"Contains {record.calories:g} calories per 100g")
    return highlights


def _describe(record: NutritionRecord, density: str, macro: str) -> str:
    density_words = {
        "low": "low-calorie",
        "moderate": "moderate-calorie",
        "high": "calorie-dense",
    }
    macro_words = {
        "protein": " protein-rich",
        "carbs": " carbohydrate-rich",
        "fat": " fat-rich",
    }
    macro_word = macro_words.get(macro, "")
    text = f"{record.name} is a {density_words[density]}{macro_word} food"
    if record.sugar <= 5:
        text += " with low sugar content"
    elif record.sugar >= 15:
        text += " with high sugar content"
    if record.fiber >= 5:
        text += " and high fiber"
    return text + "."
