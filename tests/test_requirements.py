"""Tests for the daily requirement calculator."""

import pytest

from nutrition_engine.domain.profile import (
    ActivityLevel,
    DietaryRestriction,
    FitnessGoal,
    Sex,
)
from nutrition_engine.errors import ProfileValidationError
from nutrition_engine.services.requirements import (
    calculate_bmr,
    calculate_daily_requirements,
    calculate_nutrient_status,
    calculate_product_intake,
    estimate_daily_calories,
    get_recommendation_message,
    validate_profile,
)
from tests.conftest import make_profile


def _profile(*restrictions: DietaryRestriction, **overrides: object):
    fields: dict[str, object] = {
        "age": 30,
        "weight": 70,
        "height": 175,
        "sex": Sex.MALE,
        "activity_level": ActivityLevel.MODERATE,
        "fitness_goal": FitnessGoal.GENERAL_WELLNESS,
    }
    fields.update(overrides)
    return make_profile(*restrictions, **fields)


def test_bmr_uses_sex_specific_constant() -> None:
    assert calculate_bmr(70, 175, 30, Sex.MALE) == 1648.75
    assert calculate_bmr(70, 175, 30, Sex.FEMALE) == 1482.75
    assert calculate_bmr(70, 175, 30, None) == 1648.75


def test_estimate_daily_calories_defaults_to_sedentary() -> None:
    assert estimate_daily_calories(60, 165, 40, Sex.FEMALE) == 1524


def test_daily_requirements_for_reference_profile() -> None:
    requirements = calculate_daily_requirements(_profile())

    assert requirements.calories == 2556
    assert requirements.protein == 160
    assert requirements.carbs == 320
    assert requirements.fat == 71
    assert requirements.fiber == 60
    assert requirements.vitamin_c == 90
    assert requirements.magnesium == 400
    assert requirements.vitamin_b6 == 1.3
    assert requirements.potassium == 3500


def test_goal_adjusts_calories() -> None:
    gain = calculate_daily_requirements(
        _profile(fitness_goal=FitnessGoal.MUSCLE_GAIN)
    )
    loss = calculate_daily_requirements(
        _profile(fitness_goal=FitnessGoal.WEIGHT_LOSS)
    )

    assert gain.calories == 2856
    assert loss.calories == 2056


def test_diabetes_lowers_carbs_and_raises_fiber() -> None:
    requirements = calculate_daily_requirements(_profile(DietaryRestriction.DIABETES))

    assert requirements.carbs == 256
    assert requirements.fiber == 72


def test_kidney_disease_lowers_protein_and_potassium() -> None:
    requirements = calculate_daily_requirements(
        _profile(DietaryRestriction.KIDNEY_DISEASE)
    )

    assert requirements.protein == 128
    assert requirements.potassium == 2450


def test_older_female_micronutrients() -> None:
    requirements = calculate_daily_requirements(_profile(age=75, sex=Sex.FEMALE))

    assert requirements.vitamin_c == 85
    assert requirements.magnesium == 330
    assert requirements.vitamin_b6 == 1.7


def test_validation_errors_are_reported() -> None:
    profile = _profile(age=5, height=300, activity_level=None)

    assert validate_profile(profile) == [
        "Age must be between 10 and 100",
        "Height must be between 100 and 250 cm",
        "Please select an activity level",
    ]
    with pytest.raises(ProfileValidationError) as exc_info:
        calculate_daily_requirements(profile)
    assert len(exc_info.value.errors) == 3


def test_nutrient_status_and_message() -> None:
    requirements = calculate_daily_requirements(_profile())

    statuses = calculate_nutrient_status(
        {"calories": 1000, "protein": 160, "carbs": 500}, requirements
    )
    by_name = {status.nutrient: status for status in statuses}

    assert by_name["Calories"].status == "deficient"
    assert by_name["Calories"].percentage == 39
    assert by_name["Protein"].status == "adequate"
    assert by_name["Carbs"].status == "excess"
    assert get_recommendation_message(statuses).startswith("Increase your calorie")


def test_balanced_message_when_nothing_is_deficient() -> None:
    assert get_recommendation_message([]) == (
        "Your nutrition is well-balanced! Keep up the great work."
    )


def test_product_intake() -> None:
    requirements = calculate_daily_requirements(_profile())

    intake = calculate_product_intake(requirements, 300, 4, 10)
    assert intake.grams == 102
    assert intake.servings == 3
    assert intake.reason == "Great protein source for your goals"

    minimal = calculate_product_intake(requirements, 0, 0, 0)
    assert minimal.grams == 30
    assert minimal.servings == 1
