"""Tests for the safety validator."""

from nutrition_engine.domain.profile import DietaryRestriction, UserProfile
from nutrition_engine.services.safety import SafetyValidator, compare_records
from tests.conftest import make_profile, make_record


def test_no_profile_never_blocks() -> None:
    validator = SafetyValidator()

    result = validator.validate_safety(make_record(sugar=80), None)

    assert result.should_block is False
    assert result.is_safe is True
    assert result.warnings == []


def test_diabetic_profile_blocks_high_sugar() -> None:
    validator = SafetyValidator()
    profile = make_profile(DietaryRestriction.DIABETES)

    result = validator.validate_safety(make_record(sugar=30), profile)

    assert result.should_block is True
    assert result.is_safe is False
    assert result.block_reason == "Contains high sugar"
    assert (
        "High sugar content (30.0g per 100g) - may not be suitable for diabetes"
        in result.warnings
    )


def test_nut_allergy_blocks_nuts() -> None:
    validator = SafetyValidator()
    profile = make_profile(DietaryRestriction.NUT_ALLERGY)

    result = validator.validate_safety(make_record(name="Almond Butter"), profile)

    assert result.should_block is True
    assert result.block_reason == "Contains nut allergen"
    assert "Contains nuts - you have a nut allergy" in result.warnings


def test_fruit_allergy_blocks_fruit_only() -> None:
    validator = SafetyValidator()
    profile = make_profile(DietaryRestriction.FRUIT_ALLERGY)

    assert validator.should_block_recommendation(
        make_record(name="Dried Kiwi"), profile
    )
    assert not validator.should_block_recommendation(
        make_record(name="Oat Biscuit"), profile
    )


def test_custom_sensitivity_blocks() -> None:
    validator = SafetyValidator()
    profile = UserProfile(custom_sensitivities=("Kiwi", " "))

    result = validator.validate_safety(make_record(name="Dried Kiwi"), profile)

    assert result.should_block is True
    assert result.block_reason == "Matches custom sensitivities"
    assert result.warnings == ["Matches custom sensitivity: Kiwi"]


def test_acid_reflux_warns_without_blocking() -> None:
    validator = SafetyValidator()
    profile = make_profile(DietaryRestriction.ACID_REFLUX)

    result = validator.validate_safety(make_record(name="Dried Pineapple"), profile)

    assert result.should_block is False
    assert validator.is_safe_for_profile(make_record(name="Dried Pineapple"), profile)
    assert result.warnings == ["Acidic food - may trigger acid reflux symptoms"]


def test_safe_alternatives_ranked_by_closeness() -> None:
    validator = SafetyValidator()
    profile = make_profile(DietaryRestriction.DIABETES)
    original = make_record(id="raisins", name="Raisins", calories=300, sugar=30)
    close = make_record(id="close", name="Close", calories=290, sugar=2)
    unsafe = make_record(id="unsafe", name="Unsafe", calories=300, sugar=25)
    far = make_record(id="far", name="Far", calories=50, sugar=3)

    alternatives = validator.get_safe_alternatives(
        original, profile, [far, unsafe, original, close]
    )

    assert [item.record.id for item in alternatives] == ["close", "far"]
    assert alternatives[0].reason == "Does not contain high sugar"
    assert alternatives[0].comparison == "28.0g less sugar per 100g"
    assert validator.get_safe_alternatives(original, None, [close]) == []


def test_safety_report_uses_conservative_advice() -> None:
    validator = SafetyValidator()
    profile = make_profile(DietaryRestriction.SUGAR_SENSITIVE)

    report = validator.get_safety_report(make_record(name="Raisins", sugar=8), profile)

    assert report.validation.should_block is True
    assert report.validation.block_reason == "High in high sugar"
    assert report.recommendation.startswith("Exercise caution with Raisins")


def test_compare_records() -> None:
    original = make_record(calories=300, sugar=30, fiber=2)
    alternative = make_record(calories=200, sugar=30, fiber=5)

    assert compare_records(original, alternative) == (
        "100 fewer calories per 100g, 3.0g more fiber per 100g"
    )
    assert compare_records(original, original) == "Similar nutritional profile"
