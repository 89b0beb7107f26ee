"""
Analysis Data Models - request envelope, per-modality payloads and the
structured health activity record produced by the model.

Fields are snake_case in Python and camelCase on the wire.
"""

import uuid
from enum import Enum
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _clamp_unit(value):
    """Clamp numeric confidences into [0, 1]; leave anything else for type validation."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return min(1.0, max(0.0, float(value)))
    return value


Confidence = Annotated[float, BeforeValidator(_clamp_unit)]


def _new_item_id() -> str:
    return uuid.uuid4().hex[:9]


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------

class MediaPayload(CamelModel):
    """Base64 encoded media attached to an analysis request."""
    base64: str = Field(description="Base64 encoded media data")
    mime_type: str = Field(description="MIME type of the media")
    size: Optional[int] = Field(default=None, description="File size in bytes")
    filename: Optional[str] = Field(default=None, description="Original filename")


class UserPreferences(CamelModel):
    fitness_level: Optional[Literal["beginner", "intermediate", "advanced"]] = None
    preferred_activities: Optional[List[str]] = None
    health_conditions: Optional[List[str]] = None


class AnalysisContext(CamelModel):
    """Who is asking and when; the timestamp is echoed into the result."""
    user_id: str
    timestamp: str
    user_goals: Optional[List[str]] = None
    user_preferences: Optional[UserPreferences] = None


class AnalysisInput(CamelModel):
    text_input: Optional[str] = None
    image_data: Optional[MediaPayload] = None
    audio_data: Optional[MediaPayload] = None
    video_data: Optional[MediaPayload] = None
    context: AnalysisContext

    def has_text(self) -> bool:
        return bool(self.text_input and self.text_input.strip())

    def present_modalities(self) -> List[str]:
        """Modalities actually supplied, in the fixed text/image/audio/video order."""
        present = []
        if self.has_text():
            present.append("text")
        if self.image_data is not None:
            present.append("image")
        if self.audio_data is not None:
            present.append("audio")
        if self.video_data is not None:
            present.append("video")
        return present


class AnalysisType(str, Enum):
    FULL = "full"
    QUICK = "quick"
    IMAGE = "image"
    AUDIO = "audio"


class AnalyzeRequest(CamelModel):
    """Envelope accepted by POST /analyze."""
    type: AnalysisType = AnalysisType.FULL
    input: AnalysisInput


# ---------------------------------------------------------------------------
# Structured output contract
# ---------------------------------------------------------------------------

class ActivityType(str, Enum):
    CARDIO = "cardio"
    STRENGTH_TRAINING = "strength_training"
    YOGA = "yoga"
    PILATES = "pilates"
    WALKING = "walking"
    RUNNING = "running"
    CYCLING = "cycling"
    SWIMMING = "swimming"
    SPORTS = "sports"
    STRETCHING = "stretching"
    MEDITATION = "meditation"
    NUTRITION = "nutrition"
    MEAL = "meal"
    SNACK = "snack"
    HYDRATION = "hydration"
    SLEEP = "sleep"
    REST = "rest"
    OTHER = "other"


class Duration(CamelModel):
    value: float
    unit: Literal["minutes", "hours", "seconds"]


class Amount(CamelModel):
    amount: float
    unit: str


class Distance(CamelModel):
    value: float
    unit: str


class CalorieEstimate(CamelModel):
    estimated: float
    confidence: Confidence


class Macros(CamelModel):
    """Macronutrients in grams."""
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    fiber: Optional[float] = None


class FoodItem(CamelModel):
    id: str = Field(default_factory=_new_item_id)
    name: str
    quantity: Amount
    calories: float
    macros: Optional[Macros] = None
    confidence: Confidence


class ExerciseSet(CamelModel):
    id: str = Field(default_factory=_new_item_id)
    name: str
    sets: Optional[int] = None
    reps: Optional[int] = None
    weight: Optional[Amount] = None
    duration: Optional[Duration] = None
    distance: Optional[Distance] = None
    calories: Optional[float] = None
    confidence: Confidence


class ActivityInsights(CamelModel):
    primary_muscle_groups: Optional[List[str]] = None
    equipment_used: Optional[List[str]] = None
    technique: Optional[str] = None
    improvements: Optional[List[str]] = None
    warnings: Optional[List[str]] = None


class NutritionalInfo(CamelModel):
    macros: Optional[Macros] = None
    micronutrients: Optional[List[str]] = None
    health_score: Optional[float] = Field(default=None, ge=0, le=10)


class HealthActivityResult(CamelModel):
    """Structured record of one health/fitness event."""
    activity_type: ActivityType
    sub_category: Optional[str] = None
    duration: Optional[Duration] = None
    intensity: Optional[Literal["low", "moderate", "high", "very_high"]] = None
    calories: Optional[CalorieEstimate] = None
    food_items: Optional[List[FoodItem]] = None
    exercises: Optional[List[ExerciseSet]] = None
    insights: ActivityInsights
    nutritional_info: Optional[NutritionalInfo] = None
    timestamp: str
    confidence: Confidence
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
