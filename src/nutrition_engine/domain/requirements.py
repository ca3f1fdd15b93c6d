"""Daily requirement models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DailyRequirements:
    """Daily targets; grams for macros, mg for minerals, ORAC for antioxidants."""

    calories: float
    protein: float
    carbs: float
    fiber: float
    fat: float
    vitamin_c: float
    potassium: float
    magnesium: float
    vitamin_b6: float
    antioxidants: float


@dataclass(frozen=True)
class NutrientStatus:
    nutrient: str
    current: float
    required: float
    percentage: int
    status: str


@dataclass(frozen=True)
class ProductIntake:
    grams: int
    servings: int
    reason: str
