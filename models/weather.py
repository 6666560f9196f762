"""Weather snapshot and derived analysis schemas."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from models.taxonomy import DEFAULT_HUMIDITY, DEFAULT_WIND_SPEED


@dataclass(frozen=True)
class CurrentWeather:
    temperature: float
    condition: str = ""
    high: Optional[float] = None
    low: Optional[float] = None
    humidity: Optional[float] = DEFAULT_HUMIDITY
    wind_speed: Optional[float] = DEFAULT_WIND_SPEED


@dataclass(frozen=True)
class ForecastDay:
    day: str
    temperature: Optional[float]
    condition: str = ""


@dataclass(frozen=True)
class WeatherSnapshot:
    """Observation handed over by the weather fetch collaborator."""

    location: str
    current: CurrentWeather
    forecast: Tuple[ForecastDay, ...] = field(default_factory=tuple)


@dataclass
class CurrentConditions:
    temperature: float
    feels_like: float
    temp_category: str
    condition: str
    is_rainy: bool
    is_snowy: bool
    is_cloudy: bool
    is_sunny: bool
    humidity: float
    wind_speed: float


@dataclass
class TemperatureTrend:
    trend: str
    change: float
    volatility: str
    max_temp: float
    min_temp: float
    range: float


@dataclass
class PrecipitationRisk:
    level: str
    score: float
    is_currently_rainy: bool
    forecast_rain_probability: float
    type: str


@dataclass
class ComfortIndex:
    score: float
    level: str
    factors: Dict[str, str] = field(default_factory=dict)


@dataclass
class WeatherStability:
    stable: bool
    score: float
    level: str


@dataclass
class TimeOfDay:
    hour: int
    period: str
    is_work_hours: bool
    needs_all_day_gear: bool


@dataclass
class WeatherAnalysis:
    """Structured view of one snapshot, recomputed on every call."""

    current_conditions: CurrentConditions
    temperature_trend: TemperatureTrend
    precipitation_risk: PrecipitationRisk
    comfort_index: ComfortIndex
    weather_stability: WeatherStability
    time_of_day: TimeOfDay

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HistoricalPattern:
    """One timestamped analysis kept in the bounded weather log."""

    timestamp: float
    analysis: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp, **self.analysis}


def forecast_temperatures(forecast: List[ForecastDay] | Tuple[ForecastDay, ...]) -> List[float]:
    return [float(entry.temperature) for entry in forecast if entry.temperature is not None]


__all__ = [
    "CurrentWeather",
    "ForecastDay",
    "WeatherSnapshot",
    "CurrentConditions",
    "TemperatureTrend",
    "PrecipitationRisk",
    "ComfortIndex",
    "WeatherStability",
    "TimeOfDay",
    "WeatherAnalysis",
    "HistoricalPattern",
    "forecast_temperatures",
]
