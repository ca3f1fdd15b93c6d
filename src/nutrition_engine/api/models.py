"""Pydantic request payloads for the HTTP API."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from nutrition_engine.domain.intelligence import RecommendationOptions
from nutrition_engine.domain.nutrition import (
    NutritionMetadata,
    NutritionRecord,
    NutritionSource,
)
from nutrition_engine.domain.profile import (
    ActivityLevel,
    DietaryRestriction,
    FitnessGoal,
    HealthSensitivity,
    Sex,
    UserProfile,
)


class HealthSensitivityPayload(BaseModel):
    """Declared health condition."""

    restriction: DietaryRestriction
    severity: str | None = None


class ProfilePayload(BaseModel):
    """User profile payload; every field is optional."""

    age: int | None = None
    weight: float | None = None
    height: float | None = None
    sex: Sex | None = None
    activity_level: ActivityLevel | None = None
    fitness_goal: FitnessGoal | None = None
    health_sensitivities: list[HealthSensitivityPayload] = Field(default_factory=list)
    custom_sensitivities: list[str] = Field(default_factory=list)

    def to_domain(self) -> UserProfile:
        return UserProfile(
            age=self.age,
            weight=self.weight,
            height=self.height,
            sex=self.sex,
            activity_level=self.activity_level,
            fitness_goal=self.fitness_goal,
            health_sensitivities=tuple(
                HealthSensitivity(item.restriction, item.severity)
                for item in self.health_sensitivities
            ),
            custom_sensitivities=tuple(self.custom_sensitivities),
        )


class MetadataPayload(BaseModel):
    original_serving_size: float = 100.0
    original_serving_unit: str = "g"
    is_dried: bool = False
    category: str | None = None
    brand: str | None = None


class RecordPayload(BaseModel):
    """Canonical per-100g nutrition record."""

    id: str
    name: str
    source: NutritionSource = NutritionSource.LOCAL
    fetched_at: datetime | None = None
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fiber: float = Field(ge=0)
    fat: float = Field(ge=0)
    sugar: float = Field(ge=0)
    vitamin_c: float | None = Field(default=None, ge=0)
    vitamin_b6: float | None = Field(default=None, ge=0)
    potassium: float | None = Field(default=None, ge=0)
    magnesium: float | None = Field(default=None, ge=0)
    metadata: MetadataPayload = Field(default_factory=MetadataPayload)

    def to_domain(self) -> NutritionRecord:
        return NutritionRecord(
            id=self.id,
            name=self.name,
            source=self.source,
            fetched_at=self.fetched_at or datetime.now(tz=UTC),
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fiber=self.fiber,
            fat=self.fat,
            sugar=self.sugar,
            vitamin_c=self.vitamin_c,
            vitamin_b6=self.vitamin_b6,
            potassium=self.potassium,
            magnesium=self.magnesium,
            metadata=NutritionMetadata(**self.metadata.model_dump()),
        )


class OptionsPayload(BaseModel):
    include_details: bool = True
    max_risks: int = Field(default=3, ge=0)
    conservative_mode: bool = False

    def to_domain(self) -> RecommendationOptions:
        return RecommendationOptions(
            include_details=self.include_details,
            max_risks=self.max_risks,
            conservative_mode=self.conservative_mode,
        )


class AnalyzeRequest(BaseModel):
    record: RecordPayload
    profile: ProfilePayload | None = None
    options: OptionsPayload | None = None


class SafetyRequest(BaseModel):
    record: RecordPayload
    profile: ProfilePayload | None = None


class RequirementsRequest(BaseModel):
    profile: ProfilePayload


class TermRequest(BaseModel):
    """Free-text food query with an optional profile."""

    term: str = Field(min_length=1)
    profile: ProfilePayload | None = None
