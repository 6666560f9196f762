"""Feature extraction from a weather analysis into a flat numeric vector."""

from __future__ import annotations

import math
from typing import Any, Dict, Mapping

from models.taxonomy import (
    DEFAULT_HUMIDITY,
    DEFAULT_TEMPERATURE_C,
    DEFAULT_USER_CONTEXT_VALUE,
    DEFAULT_WIND_SPEED,
    TEMPERATURE_CATEGORIES,
    categorize_temperature,
)
from models.weather import WeatherAnalysis

FeatureVector = Dict[str, float]

TEMPERATURE_FLOOR_C = -10.0
TEMPERATURE_SPAN_C = 50.0
WIND_CAP = 50.0
TREND_CODES = {"warming": 1.0, "cooling": -1.0, "stable": 0.0}
LEVEL_CODES = {"high": 1.0, "medium": 0.5, "low": 0.0}
PERIOD_CODES = {"night": 0.0, "morning": 0.33, "afternoon": 0.66, "evening": 1.0}
UNKNOWN_PERIOD_CODE = 0.5


def as_float(value: Any, default: float) -> float:
    """Coerce loosely typed numbers, falling back on missing or non-finite input."""

    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def section(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = payload.get(key)
    return value if isinstance(value, Mapping) else {}


def normalize_temperature(temperature: float) -> float:
    """Scale -10..40C onto [0, 1]; readings outside that span are clamped."""

    return min(1.0, max(0.0, (temperature - TEMPERATURE_FLOOR_C) / TEMPERATURE_SPAN_C))


def denormalize_temperature(normalized: float) -> float:
    return normalized * TEMPERATURE_SPAN_C + TEMPERATURE_FLOOR_C


def temperature_bucket(normalized_temperature: float) -> int:
    return math.floor(normalized_temperature * 10)


def encode_temp_category(category: str) -> float:
    if category not in TEMPERATURE_CATEGORIES:
        return 0.0
    return TEMPERATURE_CATEGORIES.index(category) / len(TEMPERATURE_CATEGORIES)


def analysis_payload(analysis: WeatherAnalysis | Mapping[str, Any] | None) -> Mapping[str, Any]:
    if isinstance(analysis, WeatherAnalysis):
        return analysis.to_dict()
    if isinstance(analysis, Mapping):
        return analysis
    return {}


def extract_features(
    analysis: WeatherAnalysis | Mapping[str, Any] | None,
    user_context: Mapping[str, Any] | None = None,
) -> FeatureVector:
    """Normalise an analysis into values within [0, 1] (trend within [-1, 1]).

    Missing or malformed fields fall back to the documented defaults instead of
    raising, so partial analyses loaded from storage still score.
    """

    payload = analysis_payload(analysis)
    current = section(payload, "current_conditions")
    trend = section(payload, "temperature_trend")
    precipitation = section(payload, "precipitation_risk")
    comfort = section(payload, "comfort_index")
    time_of_day = section(payload, "time_of_day")
    context = user_context or {}

    temperature = as_float(current.get("temperature"), DEFAULT_TEMPERATURE_C)
    feels_like = as_float(current.get("feels_like"), temperature)
    temp_category = current.get("temp_category") or categorize_temperature(temperature)
    humidity = as_float(current.get("humidity"), DEFAULT_HUMIDITY)
    wind_speed = max(0.0, as_float(current.get("wind_speed"), DEFAULT_WIND_SPEED))
    precip_score = min(1.0, max(0.0, as_float(precipitation.get("score"), 0.0)))
    comfort_score = min(100.0, max(0.0, as_float(comfort.get("score"), 50.0)))

    return {
        "temperature": normalize_temperature(temperature),
        "feels_like": normalize_temperature(feels_like),
        "temp_category": encode_temp_category(str(temp_category)),
        "temp_trend": TREND_CODES.get(str(trend.get("trend")), 0.0),
        "temp_volatility": LEVEL_CODES.get(str(trend.get("volatility")), 0.0),
        "is_rainy": 1.0 if current.get("is_rainy") else 0.0,
        "is_snowy": 1.0 if current.get("is_snowy") else 0.0,
        "is_sunny": 1.0 if current.get("is_sunny") else 0.0,
        "is_cloudy": 1.0 if current.get("is_cloudy") else 0.0,
        "precip_risk": precip_score,
        "precip_level": LEVEL_CODES.get(str(precipitation.get("level")), 0.0),
        "comfort_score": comfort_score / 100,
        "humidity": min(1.0, max(0.0, humidity / 100)),
        "wind_speed": min(wind_speed, WIND_CAP) / WIND_CAP,
        "time_of_day": PERIOD_CODES.get(str(time_of_day.get("period")), UNKNOWN_PERIOD_CODE),
        "is_work_hours": 1.0 if time_of_day.get("is_work_hours") else 0.0,
        "needs_all_day_gear": 1.0 if time_of_day.get("needs_all_day_gear") else 0.0,
        "activity_level": as_float(context.get("activity_level"), DEFAULT_USER_CONTEXT_VALUE),
        "style_preference": as_float(context.get("style_preference"), DEFAULT_USER_CONTEXT_VALUE),
    }


__all__ = [
    "FeatureVector",
    "as_float",
    "normalize_temperature",
    "denormalize_temperature",
    "temperature_bucket",
    "encode_temp_category",
    "analysis_payload",
    "section",
    "extract_features",
]
