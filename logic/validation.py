"""Pydantic schemas for consumer inputs and persisted documents."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from models.taxonomy import DEFAULT_TEMPERATURE_C, DEFAULT_USER_CONTEXT_VALUE, validate_category


class _Flexible(BaseModel):
    """Accept both snake_case names and the camelCase aliases callers send."""

    model_config = ConfigDict(populate_by_name=True)


class UserContextInput(_Flexible):
    """Optional user context blended into the feature vector."""

    activity_level: float = Field(DEFAULT_USER_CONTEXT_VALUE, ge=0.0, le=1.0, alias="activityLevel")
    style_preference: float = Field(DEFAULT_USER_CONTEXT_VALUE, ge=0.0, le=1.0, alias="stylePreference")


class WeatherContextInput(_Flexible):
    """Weather conditions the user was in when giving feedback."""

    temperature: float = DEFAULT_TEMPERATURE_C
    condition: str = ""
    time_of_day: Optional[str] = Field(None, alias="timeOfDay")


class RecommendationInput(_Flexible):
    item: str = Field(min_length=1)
    category: str = Field(min_length=1)
    confidence: int = 0

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        return validate_category(value)


class WeightRecord(BaseModel):
    category: str
    temp_bucket: int
    is_rainy: bool
    weight: float


class ProfileFeedbackDocument(BaseModel):
    timestamp: float
    item: str
    feedback: str


class UserProfileDocument(BaseModel):
    category_preferences: Dict[str, float] = {}
    item_preferences: Dict[str, float] = {}
    feedback_history: List[ProfileFeedbackDocument] = []


class FeedbackEntryDocument(BaseModel):
    timestamp: float
    recommendation: RecommendationInput
    feedback: str
    weather_context: WeatherContextInput
    session_id: str = ""


class WeatherLogEntryDocument(BaseModel):
    """Historical log entries keep the full analysis payload alongside the timestamp."""

    model_config = ConfigDict(extra="allow")

    timestamp: float
    current_conditions: Dict[str, Any] = {}
    precipitation_risk: Dict[str, Any] = {}


class UserDataImport(BaseModel):
    """Any subset of an earlier export may be restored."""

    feedback_history: Optional[List[FeedbackEntryDocument]] = None
    user_profile: Optional[UserProfileDocument] = None
    model_weights: Optional[List[WeightRecord]] = None


def validation_errors(exc: ValidationError) -> List[Dict[str, Any]]:
    """Trim pydantic error payloads to loggable fields."""

    return [{"loc": list(error.get("loc", ())), "msg": error.get("msg")} for error in exc.errors()]


__all__ = [
    "UserContextInput",
    "WeatherContextInput",
    "RecommendationInput",
    "WeightRecord",
    "ProfileFeedbackDocument",
    "UserProfileDocument",
    "FeedbackEntryDocument",
    "WeatherLogEntryDocument",
    "UserDataImport",
    "validation_errors",
]
