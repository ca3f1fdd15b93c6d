"""Daily nutrient requirements from a user profile."""

from nutrition_engine.domain.profile import (
    ActivityLevel,
    DietaryRestriction,
    FitnessGoal,
    Sex,
    UserProfile,
)
from nutrition_engine.domain.requirements import (
    DailyRequirements,
    NutrientStatus,
    ProductIntake,
)
from nutrition_engine.errors import ProfileValidationError
from nutrition_engine.rounding import round_half_up

ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

GOAL_CALORIE_ADJUSTMENTS = {
    FitnessGoal.MUSCLE_GAIN: 300,
    FitnessGoal.WEIGHT_LOSS: -500,
    FitnessGoal.ENDURANCE: 200,
    FitnessGoal.GENERAL_WELLNESS: 0,
}

# protein, carbs, fat as fractions of total calories
MACRO_DISTRIBUTIONS = {
    FitnessGoal.MUSCLE_GAIN: (0.30, 0.45, 0.25),
    FitnessGoal.WEIGHT_LOSS: (0.35, 0.35, 0.30),
    FitnessGoal.ENDURANCE: (0.20, 0.60, 0.20),
    FitnessGoal.GENERAL_WELLNESS: (0.25, 0.50, 0.25),
}

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9

DEFICIENT_BELOW_PERCENT = 80
EXCESS_ABOVE_PERCENT = 120
PRODUCT_CALORIE_SHARE = 0.12
SERVING_GRAMS = 30

_NUTRIENT_LABELS = {
    "calories": "Calories",
    "protein": "Protein",
    "carbs": "Carbs",
    "fiber": "Fiber",
    "fat": "Fat",
    "vitamin_c": "VitaminC",
    "potassium": "Potassium",
    "magnesium": "Magnesium",
    "vitamin_b6": "VitaminB6",
    "antioxidants": "Antioxidants",
}

_DEFICIENCY_MESSAGES = {
    "Calories": "Increase your calorie intake with energy-dense dried fruits.",
    "Protein": "Boost protein intake with dried fruits that support muscle recovery.",
    "Carbs": "Add more fruit carbohydrates for sustained energy.",
    "Fiber": "Increase fiber intake with high-fiber dried fruits for digestive health.",
    "Fat": "Include a source of healthy fats in your day.",
    "VitaminC": "Support immunity with vitamin C-rich dried fruits.",
    "Potassium": "Support muscle function with potassium-rich fruits.",
    "Magnesium": "Optimize energy metabolism with magnesium-rich options.",
    "VitaminB6": "Support protein metabolism with B6-rich selections.",
    "Antioxidants": "Add antioxidant-rich berries to your day.",
}


def validate_profile(profile: UserProfile) -> list[str]:
    """Return field-level problems that prevent a requirement calculation."""
    errors: list[str] = []
    if profile.age is None or not 10 <= profile.age <= 100:
        errors.append("Age must be between 10 and 100")
    if profile.height is None or not 100 <= profile.height <= 250:
        errors.append("Height must be between 100 and 250 cm")
    if profile.weight is None or not 30 <= profile.weight <= 200:
        errors.append("Weight must be between 30 and 200 kg")
    if profile.fitness_goal is None:
        errors.append("Please select a fitness goal")
    if profile.activity_level is None:
        errors.append("Please select an activity level")
    return errors


def calculate_bmr(weight: float, height: float, age: float, sex: Sex | None) -> float:
    """Mifflin-St Jeor basal metabolic rate; male formula when sex is unknown."""
    base = 10 * weight + 6.25 * height - 5 * age
    if sex == Sex.FEMALE:
        return base - 161
    return base + 5


def estimate_daily_calories(
    weight: float,
    height: float,
    age: float,
    sex: Sex | None = None,
    activity_level: ActivityLevel | None = None,
    fitness_goal: FitnessGoal | None = None,
) -> int:
    """Total daily energy expenditure adjusted for the fitness goal."""
    bmr = calculate_bmr(weight, height, age, sex)
    tdee = bmr * ACTIVITY_MULTIPLIERS[activity_level or ActivityLevel.SEDENTARY]
    goal = fitness_goal or FitnessGoal.GENERAL_WELLNESS
    return round_half_up(tdee + GOAL_CALORIE_ADJUSTMENTS[goal])


def calculate_daily_requirements(profile: UserProfile) -> DailyRequirements:
    """Compute daily targets, raising ProfileValidationError for bad input."""
    errors = validate_profile(profile)
    if errors:
        raise ProfileValidationError(errors)

    calories = estimate_daily_calories(
        profile.weight,
        profile.height,
        profile.age,
        profile.sex,
        profile.activity_level,
        profile.fitness_goal,
    )
    protein_share, carbs_share, fat_share = MACRO_DISTRIBUTIONS[profile.fitness_goal]
    values: dict[str, float] = {
        "calories": calories,
        "protein": round_half_up(calories * protein_share / KCAL_PER_GRAM_PROTEIN),
        "carbs": round_half_up(calories * carbs_share / KCAL_PER_GRAM_CARBS),
        "fiber": 25 + profile.weight * 0.5,
        "fat": round_half_up(calories * fat_share / KCAL_PER_GRAM_FAT),
        **_micronutrients(profile.age, profile.sex),
    }
    for restriction in profile.restrictions:
        _apply_condition(values, restriction)
    return DailyRequirements(**values)


def _micronutrients(age: int, sex: Sex | None) -> dict[str, float]:
    female = sex == Sex.FEMALE
    vitamin_c = 75 if female else 90
    if age > 70:
        vitamin_c += 10
    magnesium = 310 if female else 400
    if age > 30:
        magnesium += 10
    if age > 50:
        magnesium += 10
    return {
        "vitamin_c": vitamin_c,
        "potassium": 3500,
        "magnesium": magnesium,
        "vitamin_b6": 1.7 if age > 50 else 1.3,
        "antioxidants": 5000,
    }


def _apply_condition(values: dict[str, float], restriction: DietaryRestriction) -> None:
    """Apply one health-condition adjustment in place."""
    if restriction == DietaryRestriction.DIABETES:
        values["carbs"] = round_half_up(values["carbs"] * 0.8)
        values["fiber"] = round_half_up(values["fiber"] * 1.2)
    elif restriction == DietaryRestriction.HYPERTENSION:
        values["potassium"] = round_half_up(values["potassium"] * 1.2)
    elif restriction == DietaryRestriction.HEART_DISEASE:
        values["fiber"] = round_half_up(values["fiber"] * 1.3)
        values["fat"] = round_half_up(values["fat"] * 0.85)
    elif restriction == DietaryRestriction.KIDNEY_DISEASE:
        values["protein"] = round_half_up(values["protein"] * 0.8)
        values["potassium"] = round_half_up(values["potassium"] * 0.7)


def calculate_nutrient_status(
    current: dict[str, float], required: DailyRequirements
) -> list[NutrientStatus]:
    """Compare an intake snapshot against the daily targets."""
    statuses: list[NutrientStatus] = []
    for field_name, label in _NUTRIENT_LABELS.items():
        current_value = current.get(field_name, 0) or 0
        required_value = getattr(required, field_name)
        percentage = (
            round_half_up(current_value / required_value * 100) if required_value else 0
        )
        if percentage < DEFICIENT_BELOW_PERCENT:
            status = "deficient"
        elif percentage > EXCESS_ABOVE_PERCENT:
            status = "excess"
        else:
            status = "adequate"
        statuses.append(
            NutrientStatus(
                nutrient=label,
                current=current_value,
                required=required_value,
                percentage=percentage,
                status=status,
            )
        )
    return statuses


def get_recommendation_message(statuses: list[NutrientStatus]) -> str:
    deficient = [status for status in statuses if status.status == "deficient"]
    if not deficient:
        return "Your nutrition is well-balanced! Keep up the great work."
    return _DEFICIENCY_MESSAGES.get(
        deficient[0].nutrient, "Focus on balanced nutrition across the day."
    )


def calculate_product_intake(
    requirements: DailyRequirements,
    product_calories: float,
    product_protein: float,
    product_fiber: float,
) -> ProductIntake:
    """Suggest a daily amount of a product covering ~12% of daily calories."""
    target_calories = requirements.calories * PRODUCT_CALORIE_SHARE
    grams = (
        round_half_up(target_calories / product_calories * 100)
        if product_calories > 0
        else SERVING_GRAMS
    )
    servings = round_half_up(grams / SERVING_GRAMS)
    if product_protein > 3:
        reason = "Great protein source for your goals"
    elif product_fiber > 10:
        reason = "High fiber for digestive health"
    elif product_calories > 300:
        reason = "Energy-dense for your active lifestyle"
    else:
        reason = "Perfect for your daily nutrition"
    return ProductIntake(
        grams=max(SERVING_GRAMS, grams), servings=max(1, servings), reason=reason
    )
