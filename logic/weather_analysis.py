"""Deterministic weather analysis: trend, precipitation, comfort and stability."""

from __future__ import annotations

import math
from datetime import datetime
from typing import List, Sequence, Tuple

from logic.features import as_float
from models.taxonomy import (
    DEFAULT_HUMIDITY,
    DEFAULT_TEMPERATURE_C,
    DEFAULT_WIND_SPEED,
    categorize_temperature,
    is_clear,
    is_cloudy,
    is_rainy,
    is_snowy,
    is_wet,
)
from models.weather import (
    ComfortIndex,
    CurrentConditions,
    CurrentWeather,
    ForecastDay,
    PrecipitationRisk,
    TemperatureTrend,
    TimeOfDay,
    WeatherAnalysis,
    WeatherSnapshot,
    WeatherStability,
    forecast_temperatures,
)

TREND_THRESHOLD = 2.0
VOLATILITY_THRESHOLDS = {"high": 5.0, "medium": 2.0}
PRECIPITATION_THRESHOLDS = {"high": 0.6, "medium": 0.3}
COMFORT_THRESHOLDS = {"comfortable": 70.0, "moderate": 40.0}
STABILITY_THRESHOLDS = {"very stable": 0.7, "moderately stable": 0.4}
STABLE_FLAG_THRESHOLD = 0.6


def calculate_feels_like(temperature: float, humidity: float, wind_speed: float) -> float:
    """Wind chill below 10C in wind, a humidity penalty above 27C."""

    if temperature < 10 and wind_speed > 5:
        return temperature - wind_speed * 0.5
    if temperature > 27 and humidity > 40:
        return temperature + (humidity - 40) * 0.1
    return temperature


def _readings(current: CurrentWeather) -> Tuple[float, float, float]:
    """Temperature, humidity and wind with documented defaults for gaps."""

    return (
        as_float(current.temperature, DEFAULT_TEMPERATURE_C),
        as_float(current.humidity, DEFAULT_HUMIDITY),
        as_float(current.wind_speed, DEFAULT_WIND_SPEED),
    )


def population_std(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    variance = sum((value - mean) ** 2 for value in values) / len(values)
    return math.sqrt(variance)


def analyze_current_conditions(current: CurrentWeather) -> CurrentConditions:
    temperature, humidity, wind_speed = _readings(current)
    condition = (current.condition or "").lower()
    return CurrentConditions(
        temperature=temperature,
        feels_like=calculate_feels_like(temperature, humidity, wind_speed),
        temp_category=categorize_temperature(temperature),
        condition=condition,
        is_rainy=is_rainy(condition),
        is_snowy=is_snowy(condition),
        is_cloudy=is_cloudy(condition),
        is_sunny=is_clear(condition),
        humidity=humidity,
        wind_speed=wind_speed,
    )


def analyze_temperature_trend(forecast: Sequence[ForecastDay], fallback_temperature: float) -> TemperatureTrend:
    temps = forecast_temperatures(forecast) or [fallback_temperature]
    max_temp = max(temps)
    min_temp = min(temps)
    if len(temps) < 2:
        return TemperatureTrend(
            trend="stable",
            change=0.0,
            volatility="low",
            max_temp=max_temp,
            min_temp=min_temp,
            range=max_temp - min_temp,
        )

    changes: List[float] = [temps[i] - temps[i - 1] for i in range(1, len(temps))]
    mean_change = sum(changes) / len(changes)
    spread = population_std(changes)

    if mean_change > TREND_THRESHOLD:
        trend = "warming"
    elif mean_change < -TREND_THRESHOLD:
        trend = "cooling"
    else:
        trend = "stable"

    if spread > VOLATILITY_THRESHOLDS["high"]:
        volatility = "high"
    elif spread > VOLATILITY_THRESHOLDS["medium"]:
        volatility = "medium"
    else:
        volatility = "low"

    return TemperatureTrend(
        trend=trend,
        change=mean_change,
        volatility=volatility,
        max_temp=max_temp,
        min_temp=min_temp,
        range=max_temp - min_temp,
    )


def analyze_precipitation_risk(current: CurrentWeather, forecast: Sequence[ForecastDay]) -> PrecipitationRisk:
    condition = (current.condition or "").lower()
    currently_wet = is_wet(condition)
    wet_days = sum(1 for entry in forecast if is_wet(entry.condition))
    forecast_probability = wet_days / len(forecast) if forecast else 0.0
    score = min(1.0, (0.5 if currently_wet else 0.0) + forecast_probability * 0.5)

    if score > PRECIPITATION_THRESHOLDS["high"]:
        level = "high"
    elif score > PRECIPITATION_THRESHOLDS["medium"]:
        level = "medium"
    else:
        level = "low"

    if is_snowy(condition):
        precip_type = "snow"
    elif "rain" in condition:
        precip_type = "rain"
    else:
        precip_type = "none"

    return PrecipitationRisk(
        level=level,
        score=score,
        is_currently_rainy=currently_wet,
        forecast_rain_probability=forecast_probability,
        type=precip_type,
    )


def calculate_comfort_index(current: CurrentWeather) -> ComfortIndex:
    temperature, humidity, wind_speed = _readings(current)

    score = 50.0
    if temperature < 10:
        score -= (10 - temperature) * 2
    elif temperature > 28:
        score -= (temperature - 28) * 2
    if humidity > 70:
        score -= (humidity - 70) * 0.5
    if wind_speed > 20:
        score -= (wind_speed - 20) * 0.3
    score = max(0.0, min(100.0, score))

    if score > COMFORT_THRESHOLDS["comfortable"]:
        level = "comfortable"
    elif score > COMFORT_THRESHOLDS["moderate"]:
        level = "moderate"
    else:
        level = "uncomfortable"

    return ComfortIndex(
        score=score,
        level=level,
        factors={
            "temperature": "ideal" if 18 < temperature < 26 else "suboptimal",
            "humidity": "ideal" if 30 < humidity < 60 else "suboptimal",
            "wind": "calm" if wind_speed < 15 else "breezy",
        },
    )


def calculate_weather_stability(forecast: Sequence[ForecastDay]) -> WeatherStability:
    if len(forecast) < 2:
        return WeatherStability(stable=True, score=1.0, level="very stable")

    distinct = len({entry.condition for entry in forecast})
    score = 1 - distinct / len(forecast)
    if score > STABILITY_THRESHOLDS["very stable"]:
        level = "very stable"
    elif score > STABILITY_THRESHOLDS["moderately stable"]:
        level = "moderately stable"
    else:
        level = "unstable"
    return WeatherStability(stable=score > STABLE_FLAG_THRESHOLD, score=score, level=level)


def time_of_day_context(now: datetime) -> TimeOfDay:
    hour = now.hour
    if hour < 6:
        period = "night"
    elif hour < 12:
        period = "morning"
    elif hour < 17:
        period = "afternoon"
    elif hour < 21:
        period = "evening"
    else:
        period = "night"
    return TimeOfDay(
        hour=hour,
        period=period,
        is_work_hours=9 <= hour < 17,
        needs_all_day_gear=hour < 10,
    )


def analyze_snapshot(snapshot: WeatherSnapshot, now: datetime) -> WeatherAnalysis:
    """Build the full analysis for one snapshot at a given wall-clock time."""

    forecast = list(snapshot.forecast)
    return WeatherAnalysis(
        current_conditions=analyze_current_conditions(snapshot.current),
        temperature_trend=analyze_temperature_trend(forecast, as_float(snapshot.current.temperature, DEFAULT_TEMPERATURE_C)),
        precipitation_risk=analyze_precipitation_risk(snapshot.current, forecast),
        comfort_index=calculate_comfort_index(snapshot.current),
        weather_stability=calculate_weather_stability(forecast),
        time_of_day=time_of_day_context(now),
    )


def season_for_month(month: int) -> str:
    """Map a 1-based calendar month to the season label used for log queries."""

    return ("winter", "spring", "summer", "fall")[(month - 1) // 3]


__all__ = [
    "calculate_feels_like",
    "population_std",
    "analyze_current_conditions",
    "analyze_temperature_trend",
    "analyze_precipitation_risk",
    "calculate_comfort_index",
    "calculate_weather_stability",
    "time_of_day_context",
    "analyze_snapshot",
    "season_for_month",
]
