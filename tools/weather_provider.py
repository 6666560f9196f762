"""Weather snapshot boundary: payload validation and offline providers."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from logic.features import as_float
from logic.validation import validation_errors
from models.taxonomy import DEFAULT_HUMIDITY, DEFAULT_TEMPERATURE_C, DEFAULT_WIND_SPEED
from models.weather import CurrentWeather, ForecastDay, WeatherSnapshot
from wear_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)


class _CurrentPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    temperature: float = DEFAULT_TEMPERATURE_C
    condition: str = ""
    high: Optional[float] = None
    low: Optional[float] = None
    humidity: Optional[float] = DEFAULT_HUMIDITY
    wind_speed: Optional[float] = Field(DEFAULT_WIND_SPEED, alias="windSpeed")

    @field_validator("temperature", mode="before")
    @classmethod
    def _default_missing_temperature(cls, value: Any) -> Any:
        return DEFAULT_TEMPERATURE_C if value is None else value

    @field_validator("condition", mode="before")
    @classmethod
    def _default_missing_condition(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("humidity", mode="before")
    @classmethod
    def _coerce_humidity(cls, value: Any) -> float:
        return as_float(value, DEFAULT_HUMIDITY)

    @field_validator("wind_speed", mode="before")
    @classmethod
    def _coerce_wind_speed(cls, value: Any) -> float:
        return as_float(value, DEFAULT_WIND_SPEED)


class _ForecastPayload(BaseModel):
    day: str = ""
    temperature: Optional[float] = None
    condition: str = ""

    @field_validator("temperature", mode="before")
    @classmethod
    def _drop_unreadable_temperature(cls, value: Any) -> Optional[float]:
        if value is None:
            return None
        number = as_float(value, math.nan)
        return None if math.isnan(number) else number

    @field_validator("day", "condition", mode="before")
    @classmethod
    def _default_missing_text(cls, value: Any) -> Any:
        return "" if value is None else value


class WeatherSnapshotPayload(BaseModel):
    """Raw snapshot as handed over by a weather fetch collaborator."""

    location: str = "unknown"
    current: _CurrentPayload = _CurrentPayload()
    forecast: List[_ForecastPayload] = []

    def to_snapshot(self) -> WeatherSnapshot:
        current = self.current
        return WeatherSnapshot(
            location=self.location,
            current=CurrentWeather(
                temperature=current.temperature,
                condition=current.condition,
                high=current.high,
                low=current.low,
                humidity=current.humidity,
                wind_speed=current.wind_speed,
            ),
            forecast=tuple(
                ForecastDay(day=entry.day, temperature=entry.temperature, condition=entry.condition)
                for entry in self.forecast
            ),
        )


def parse_snapshot(payload: WeatherSnapshot | Mapping[str, Any]) -> WeatherSnapshot:
    """Return a snapshot, filling absent optional fields with their defaults.

    Raises ``ValueError`` when the payload is present but malformed.
    """

    if isinstance(payload, WeatherSnapshot):
        return payload
    try:
        return WeatherSnapshotPayload.model_validate(payload).to_snapshot()
    except ValidationError as exc:
        raise ValueError(f"invalid weather snapshot: {validation_errors(exc)}") from exc


def fallback_snapshot(location: str = "unknown") -> WeatherSnapshot:
    """Mild, dry conditions used when no usable snapshot is available."""

    return WeatherSnapshot(location=location, current=CurrentWeather(temperature=DEFAULT_TEMPERATURE_C))


def snapshot_or_fallback(payload: WeatherSnapshot | Mapping[str, Any] | None) -> WeatherSnapshot:
    if payload is None:
        log_event(LOGGER, logging.WARNING, "weather_snapshot_fallback", reason="missing")
        return fallback_snapshot()
    try:
        return parse_snapshot(payload)
    except ValueError as exc:
        log_event(LOGGER, logging.WARNING, "weather_snapshot_fallback", reason="schema_validation", error=str(exc))
        return fallback_snapshot()


class SnapshotProvider(ABC):
    """Source of weather snapshots; network-backed providers live outside this package."""

    @abstractmethod
    def get_snapshot(self, location: str) -> WeatherSnapshot:
        """Return the current snapshot for a location."""


class StaticSnapshotProvider(SnapshotProvider):
    """Offline deterministic provider for local runs and tests."""

    def __init__(self, snapshot: WeatherSnapshot | Mapping[str, Any] | None = None) -> None:
        self.snapshot = snapshot_or_fallback(snapshot)

    def get_snapshot(self, location: str) -> WeatherSnapshot:
        log_event(LOGGER, logging.DEBUG, "static_snapshot_returned", location=location)
        return self.snapshot


__all__ = [
    "WeatherSnapshotPayload",
    "parse_snapshot",
    "fallback_snapshot",
    "snapshot_or_fallback",
    "SnapshotProvider",
    "StaticSnapshotProvider",
]
