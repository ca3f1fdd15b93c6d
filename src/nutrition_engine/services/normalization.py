"""Map provider payloads onto the canonical per-100g record."""

import math
from collections.abc import Mapping
from datetime import UTC, datetime

from nutrition_engine.domain.nutrition import (
    NutritionMetadata,
    NutritionRecord,
    NutritionSource,
)

DRIED_KEYWORDS = ("dried", "dehydrated", "freeze-dried", "sun-dried")

KJ_PER_KCAL = 4.184
MG_PER_G = 1000

# OpenFoodFacts reports every nutriment in grams per 100g, including minerals.
_OFF_MACROS = {
    "protein": "proteins_100g",
    "carbs": "carbohydrates_100g",
    "fiber": "fiber_100g",
    "fat": "fat_100g",
    "sugar": "sugars_100g",
}
_OFF_MICROS = {
    "vitamin_c": "vitamin-c_100g",
    "vitamin_b6": "vitamin-b6_100g",
    "potassium": "potassium_100g",
    "magnesium": "magnesium_100g",
}

_FDC_NUTRIENT_IDS = {
    "calories": 1008,
    "protein": 1003,
    "carbs": 1005,
    "fiber": 1079,
    "fat": 1004,
    "sugar": 2000,
    "vitamin_c": 1162,
    "vitamin_b6": 1175,
    "potassium": 1092,
    "magnesium": 1090,
}
_FDC_NUTRIENT_NAMES = {
    "calories": ("energy",),
    "protein": ("protein",),
    "carbs": ("carbohydrate, by difference", "carbohydrate"),
    "fiber": ("fiber, total dietary", "fiber"),
    "fat": ("total lipid (fat)", "total fat"),
    "sugar": ("sugars, total including nlea", "sugars, total", "total sugars"),
    "vitamin_c": ("vitamin c, total ascorbic acid", "vitamin c"),
    "vitamin_b6": ("vitamin b-6", "vitamin b6"),
    "potassium": ("potassium, k", "potassium"),
    "magnesium": ("magnesium, mg", "magnesium"),
}


def is_dried(name: str) -> bool:
    lowered = name.lower()
    return any(keyword in lowered for keyword in DRIED_KEYWORDS)


def normalize_openfoodfacts(
    product: Mapping[str, object], fetched_at: datetime | None = None
) -> NutritionRecord:
    """Build a record from one OpenFoodFacts search hit."""
    nutriments = product.get("nutriments") or {}
    name = product.get("product_name_en") or product.get("product_name") or "Unknown"

    calories = _number(nutriments.get("energy-kcal_100g"))
    if calories is None:
        energy_kj = _number(nutriments.get("energy_100g"))
        calories = energy_kj / KJ_PER_KCAL if energy_kj is not None else 0.0

    macros = {
        field_name: _non_negative(_number(nutriments.get(key)))
        for field_name, key in _OFF_MACROS.items()
    }
    micros = {
        field_name: _grams_to_mg(_number(nutriments.get(key)))
        for field_name, key in _OFF_MICROS.items()
    }
    categories = product.get("categories_tags") or []
    return NutritionRecord(
        id=str(product.get("code") or product.get("_id") or name),
        name=str(name),
        source=NutritionSource.OPENFOODFACTS,
        fetched_at=fetched_at or datetime.now(tz=UTC),
        calories=_non_negative(calories),
        **macros,
        **micros,
        metadata=NutritionMetadata(
            original_serving_size=100.0,
            original_serving_unit="g",
            is_dried=is_dried(str(name)),
            category=str(categories[0]) if categories else None,
            brand=_optional_str(product.get("brands")),
        ),
    )


def normalize_usda(
    food: Mapping[str, object], fetched_at: datetime | None = None
) -> NutritionRecord:
    """Build a record from one FoodData Central search hit.

    Values are taken as reported; a non-100g serving is recorded in the
    metadata but not converted.
    """
    name = str(food.get("description") or "Unknown")
    nutrients = _index_fdc_nutrients(food.get("foodNutrients") or [])
    values = {
        field_name: _lookup_fdc(nutrients, field_name)
        for field_name in _FDC_NUTRIENT_IDS
    }
    serving_size = _number(food.get("servingSize"))
    return NutritionRecord(
        id=str(food.get("fdcId") or name),
        name=name,
        source=NutritionSource.USDA,
        fetched_at=fetched_at or datetime.now(tz=UTC),
        calories=_non_negative(values["calories"]),
        protein=_non_negative(values["protein"]),
        carbs=_non_negative(values["carbs"]),
        fiber=_non_negative(values["fiber"]),
        fat=_non_negative(values["fat"]),
        sugar=_non_negative(values["sugar"]),
        vitamin_c=_clamp_optional(values["vitamin_c"]),
        vitamin_b6=_clamp_optional(values["vitamin_b6"]),
        potassium=_clamp_optional(values["potassium"]),
        magnesium=_clamp_optional(values["magnesium"]),
        metadata=NutritionMetadata(
            original_serving_size=serving_size if serving_size is not None else 100.0,
            original_serving_unit=str(food.get("servingSizeUnit") or "g"),
            is_dried=is_dried(name),
            category=_optional_str(food.get("foodCategory")),
            brand=_optional_str(food.get("brandOwner")),
        ),
    )


def _index_fdc_nutrients(
    food_nutrients: list[dict[str, object]],
) -> dict[object, float]:
    """Index nutrient amounts by both FDC id and lower-cased name."""
    index: dict[object, float] = {}
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        amount = _number(nutrient.get("value", nutrient.get("amount")))
        if amount is None:
            continue
        nutrient_id = nutrient.get("nutrientId") or nutrient_info.get("id")
        nutrient_name = nutrient.get("nutrientName") or nutrient_info.get("name")
        unit = str(nutrient.get("unitName") or nutrient_info.get("unitName") or "")
        parsed_id = _nutrient_id(nutrient_id)
        if parsed_id is not None:
            index.setdefault(parsed_id, amount)
        if nutrient_name and unit.lower() != "kj":
            index.setdefault(str(nutrient_name).lower(), amount)
    return index


def _nutrient_id(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _lookup_fdc(index: dict[object, float], field_name: str) -> float | None:
    value = index.get(_FDC_NUTRIENT_IDS[field_name])
    if value is not None:
        return value
    for name in _FDC_NUTRIENT_NAMES[field_name]:
        if name in index:
            return index[name]
    return None


def _number(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _non_negative(value: float | None) -> float:
    if value is None:
        return 0.0
    return max(value, 0.0)


def _clamp_optional(value: float | None) -> float | None:
    if value is None:
        return None
    return max(value, 0.0)


def _grams_to_mg(value: float | None) -> float | None:
    if value is None:
        return None
    return max(value, 0.0) * MG_PER_G


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
