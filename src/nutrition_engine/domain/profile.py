"""User health profile consumed by the requirement and safety rules."""

from dataclasses import dataclass
from enum import Enum


class ActivityLevel(str, Enum):
    """Physical activity tiers."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very-active"

    @classmethod
    def _missing_(cls, value: object) -> "ActivityLevel | None":
        # Older clients send the three-tier scale where "high" was the top tier.
        if value == "high":
            return cls.VERY_ACTIVE
        return None


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


class FitnessGoal(str, Enum):
    MUSCLE_GAIN = "muscle-gain"
    WEIGHT_LOSS = "weight-loss"
    ENDURANCE = "endurance"
    GENERAL_WELLNESS = "general-wellness"


class DietaryRestriction(str, Enum):
    """Health conditions and sensitivities a user can declare."""

    DIABETES = "DIABETES"
    SUGAR_SENSITIVE = "SUGAR_SENSITIVE"
    POTASSIUM_SENSITIVE = "POTASSIUM_SENSITIVE"
    LOW_FIBER = "LOW_FIBER"
    HIGH_FIBER = "HIGH_FIBER"
    LOW_PROTEIN = "LOW_PROTEIN"
    HIGH_PROTEIN = "HIGH_PROTEIN"
    FRUIT_ALLERGY = "FRUIT_ALLERGY"
    KIDNEY_DISEASE = "KIDNEY_DISEASE"
    ACID_REFLUX = "ACID_REFLUX"
    NUT_ALLERGY = "NUT_ALLERGY"
    HYPERTENSION = "HYPERTENSION"
    SODIUM_SENSITIVE = "SODIUM_SENSITIVE"
    GLUTEN_INTOLERANCE = "GLUTEN_INTOLERANCE"
    LACTOSE_INTOLERANCE = "LACTOSE_INTOLERANCE"
    HEART_DISEASE = "HEART_DISEASE"


@dataclass(frozen=True)
class HealthSensitivity:
    restriction: DietaryRestriction
    severity: str | None = None


@dataclass(frozen=True)
class UserProfile:
    """Read-only snapshot of what a user told us about their health.

    Every field is optional; rules that need a missing value fall back to
    population defaults.
    """

    age: int | None = None
    weight: float | None = None
    height: float | None = None
    sex: Sex | None = None
    activity_level: ActivityLevel | None = None
    fitness_goal: FitnessGoal | None = None
    health_sensitivities: tuple[HealthSensitivity, ...] = ()
    custom_sensitivities: tuple[str, ...] = ()

    def has_restriction(self, restriction: DietaryRestriction) -> bool:
        return any(
            sensitivity.restriction == restriction
            for sensitivity in self.health_sensitivities
        )

    @property
    def restrictions(self) -> list[DietaryRestriction]:
        return [sensitivity.restriction for sensitivity in self.health_sensitivities]
