"""Bundled catalog snapshot and local nutrition lookup table."""

from nutrition_engine.domain.catalog import (
    FoodItem,
    GramPricing,
    NutritionPer100g,
    Product,
)

FRUIT_SYNONYMS: dict[str, tuple[str, ...]] = {
    "kiwi": ("kiwifruit", "chinese gooseberry", "kiwi fruit"),
    "blueberry": ("blueberries", "wild blueberry", "highbush blueberry"),
    "pineapple": ("ananas", "pine apple"),
    "papaya": ("pawpaw", "papaw", "paw-paw"),
    "apple": ("apples", "malus", "fruit apple"),
    "banana": ("bananas", "plantain"),
    "mango": ("mangos", "mangoes", "king of fruits"),
    "strawberry": ("strawberries", "wild strawberry"),
}

DEFAULT_PRODUCT_NUTRITION = NutritionPer100g(
    calories=300,
    protein=3,
    carbs=70,
    fiber=10,
    fat=1,
    vitamin_c=50,
    potassium=500,
    antioxidants=2000,
    magnesium=50,
    vitamin_b6=0.3,
)


def _food(  # noqa: PLR0913
    food_id: str,
    name: str,
    form: str,
    description: str,
    values: tuple[float, ...],
    benefits: tuple[str, ...],
    gym_focus: str,
) -> FoodItem:
    calories, protein, carbs, fiber, fat, vit_c, potassium, antiox, mg, b6 = values
    return FoodItem(
        id=food_id,
        name=name,
        form=form,
        description=description,
        nutrition=NutritionPer100g(
            calories=calories,
            protein=protein,
            carbs=carbs,
            fiber=fiber,
            fat=fat,
            vitamin_c=vit_c,
            potassium=potassium,
            antioxidants=antiox,
            magnesium=mg,
            vitamin_b6=b6,
        ),
        benefits=benefits,
        gym_focus=gym_focus,
    )


# calories, protein, carbs, fiber, fat, vitamin C, potassium, antioxidants,
# magnesium, vitamin B6
FOOD_TABLE: tuple[FoodItem, ...] = (
    _food(
        "kiwi-fresh",
        "Kiwi (Fresh)",
        "fresh",
        "Immunity powerhouse with high vitamin C",
        (61, 1.1, 14.7, 3.0, 0.5, 92.7, 312, 1200, 17, 0.06),
        ("Immunity boost", "Digestive health", "Skin health"),
        "general",
    ),
    _food(
        "kiwi-dried",
        "Kiwi (Dehydrated)",
        "dehydrated",
        "Concentrated nutrition with 8x more vitamin C than fresh",
        (250, 4.5, 58.8, 12.0, 2.0, 370, 1248, 4800, 68, 0.24),
        ("Immunity powerhouse", "Energy boost", "Fiber rich"),
        "endurance",
    ),
    _food(
        "banana-fresh",
        "Banana (Fresh)",
        "fresh",
        "Natural energy booster",
        (89, 1.1, 22.8, 2.6, 0.3, 8.7, 358, 790, 27, 0.43),
        ("Quick energy", "Potassium rich", "Muscle recovery"),
        "muscle-gain",
    ),
    _food(
        "banana-dried",
        "Banana (Dehydrated)",
        "dehydrated",
        "Concentrated energy for workouts",
        (346, 4.3, 88.7, 10.2, 1.1, 34, 1390, 3070, 105, 1.68),
        ("High energy density", "Potassium powerhouse", "Muscle fuel"),
        "muscle-gain",
    ),
    _food(
        "mango-fresh",
        "Mango (Fresh)",
        "fresh",
        "Golden nutrition with beta-carotene",
        (60, 0.8, 15.0, 1.6, 0.4, 36.4, 168, 1100, 10, 0.12),
        ("Eye health", "Immunity", "Antioxidant rich"),
        "general",
    ),
    _food(
        "mango-dried",
        "Mango (Dehydrated)",
        "dehydrated",
        "Concentrated beta-carotene for eye health",
        (314, 4.2, 78.6, 8.4, 2.1, 190, 880, 5760, 52, 0.63),
        ("Eye health", "Energy boost", "Antioxidant rich"),
        "endurance",
    ),
    _food(
        "blueberry-fresh",
        "Blueberry (Fresh)",
        "fresh",
        "Brain-enhancing superfruit",
        (57, 0.7, 14.5, 2.4, 0.3, 9.7, 77, 9621, 6, 0.05),
        ("Brain health", "Antioxidant champion", "Anti-aging"),
        "general",
    ),
    _food(
        "blueberry-dried",
        "Blueberry (Dehydrated)",
        "dehydrated",
        "5x more antioxidants than fresh",
        (317, 3.9, 80.6, 13.4, 1.2, 54, 428, 48000, 33, 0.28),
        ("Brain enhancement", "Antioxidant powerhouse", "Cellular health"),
        "general",
    ),
    _food(
        "pineapple-fresh",
        "Pineapple (Fresh)",
        "fresh",
        "Digestive aid with bromelain",
        (50, 0.5, 13.1, 1.4, 0.1, 47.8, 109, 560, 12, 0.11),
        ("Digestive health", "Anti-inflammatory", "Immunity"),
        "fat-loss",
    ),
    _food(
        "pineapple-dried",
        "Pineapple (Dehydrated)",
        "dehydrated",
        "Rich in bromelain and vitamin C",
        (278, 2.8, 72.8, 7.8, 0.6, 266, 604, 3136, 67, 0.61),
        ("Digestive aid", "Anti-inflammatory", "Metabolism boost"),
        "fat-loss",
    ),
    _food(
        "papaya-fresh",
        "Papaya (Fresh)",
        "fresh",
        "Immunity booster with natural enzymes",
        (43, 0.5, 10.8, 1.7, 0.3, 60.9, 182, 300, 21, 0.04),
        ("Immunity support", "Digestive health", "Skin health"),
        "general",
    ),
    _food(
        "papaya-dried",
        "Papaya (Dehydrated)",
        "dehydrated",
        "Concentrated enzymes for digestion",
        (239, 2.8, 60.0, 9.5, 1.7, 338, 1012, 1680, 117, 0.22),
        ("Immunity booster", "Digestive superstar", "Enzyme rich"),
        "general",
    ),
    _food(
        "apple-fresh",
        "Apple (Fresh)",
        "fresh",
        "Heart-friendly energy snack",
        (52, 0.3, 13.8, 2.4, 0.2, 4.6, 107, 490, 5, 0.04),
        ("Heart health", "Energy boost", "Fiber rich"),
        "fat-loss",
    ),
    _food(
        "apple-dried",
        "Apple (Dehydrated)",
        "dehydrated",
        "Concentrated fiber for heart health",
        (243, 1.4, 64.9, 11.2, 0.9, 21, 500, 2290, 23, 0.19),
        ("Heart health", "Energy rich", "Fiber powerhouse"),
        "fat-loss",
    ),
    _food(
        "strawberry-fresh",
        "Strawberry (Fresh)",
        "fresh",
        "Antioxidant champion",
        (32, 0.7, 7.7, 2.0, 0.3, 58.8, 153, 5938, 13, 0.05),
        ("Antioxidant rich", "Immunity", "Skin health"),
        "general",
    ),
    _food(
        "strawberry-dried",
        "Strawberry (Dehydrated)",
        "dehydrated",
        "Cellular rejuvenation powerhouse",
        (328, 7.2, 79.0, 20.5, 3.1, 602, 1568, 60760, 133, 0.51),
        ("Antioxidant champion", "Cellular health", "Immunity boost"),
        "general",
    ),
)


def _pricing(*rows: tuple[int, float, float]) -> tuple[GramPricing, ...]:
    return tuple(
        GramPricing(grams=grams, price=price, price_per_gram=per_gram)
        for grams, price, per_gram in rows
    )


PRODUCT_CATALOG: tuple[Product, ...] = (
    Product(
        id=1,
        name="Dried Kiwi",
        badge="Limited Seasonal",
        price=2499,
        description=(
            "Hand-selected kiwi slices. Tart, vibrant, and naturally indulgent."
        ),
        price_per_gram=5.0,
        gram_pricing=_pricing(
            (100, 599, 5.99),
            (200, 1099, 5.5),
            (300, 1599, 5.33),
            (400, 2099, 5.25),
            (500, 2499, 5.0),
            (1000, 4499, 4.5),
        ),
    ),
    Product(
        id=2,
        name="Dried Blueberry",
        badge="Premium Quality",
        price=2899,
        description="Brain-enhancing superfruit with 5x more antioxidants than fresh",
        price_per_gram=5.8,
        gram_pricing=_pricing(
            (100, 699, 6.99),
            (200, 1299, 6.5),
            (300, 1899, 6.33),
            (400, 2399, 6.0),
            (500, 2899, 5.8),
            (1000, 5199, 5.2),
        ),
    ),
    Product(
        id=3,
        name="Dried Pineapple",
        badge="Seasonal Favorite",
        price=2399,
        description="Digestive aid rich in bromelain and vitamin C",
        price_per_gram=4.8,
        gram_pricing=_pricing(
            (100, 549, 5.49),
            (200, 999, 5.0),
            (300, 1449, 4.83),
            (400, 1899, 4.75),
            (500, 2399, 4.8),
            (1000, 4299, 4.3),
        ),
    ),
    Product(
        id=4,
        name="Dried Papaya",
        badge="Exotic Choice",
        price=2599,
        description="Immunity booster and digestive superstar with natural enzymes",
        price_per_gram=5.2,
        gram_pricing=_pricing(
            (100, 599, 5.99),
            (200, 1099, 5.5),
            (300, 1649, 5.5),
            (400, 2099, 5.25),
            (500, 2599, 5.2),
            (1000, 4699, 4.7),
        ),
    ),
    Product(
        id=5,
        name="Dried Apple",
        badge="Everyday Vitality",
        price=2199,
        description="Heart-friendly and energy-rich snack for everyday vitality",
        price_per_gram=4.4,
        gram_pricing=_pricing(
            (100, 499, 4.99),
            (200, 899, 4.5),
            (300, 1349, 4.5),
            (400, 1799, 4.5),
            (500, 2199, 4.4),
            (1000, 3999, 4.0),
        ),
    ),
    Product(
        id=6,
        name="Dried Banana",
        badge="Natural Energy",
        price=1999,
        description="Natural energy booster loaded with potassium and magnesium",
        price_per_gram=4.0,
        gram_pricing=_pricing(
            (100, 449, 4.49),
            (200, 799, 4.0),
            (300, 1199, 4.0),
            (400, 1599, 4.0),
            (500, 1999, 4.0),
            (1000, 3599, 3.6),
        ),
    ),
    Product(
        id=7,
        name="Dried Mango",
        badge="Tropical Delight",
        price=2699,
        description="Golden nutrition with beta-carotene for eye health",
        price_per_gram=5.4,
        gram_pricing=_pricing(
            (100, 649, 6.49),
            (200, 1199, 6.0),
            (300, 1749, 5.83),
            (400, 2199, 5.5),
            (500, 2699, 5.4),
            (1000, 4899, 4.9),
        ),
    ),
    Product(
        id=8,
        name="Dried Strawberry",
        badge="Superfood",
        price=3199,
        description="Antioxidant champion for cellular rejuvenation",
        price_per_gram=6.4,
        gram_pricing=_pricing(
            (100, 749, 7.49),
            (200, 1399, 7.0),
            (300, 2049, 6.83),
            (400, 2699, 6.75),
            (500, 3199, 6.4),
            (1000, 5799, 5.8),
        ),
    ),
)
