"""Evaluation scenarios covering the main temperature and condition regimes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Tuple

from models.weather import CurrentWeather, ForecastDay, WeatherSnapshot


@dataclass
class EvaluationScenario:
    name: str
    description: str
    snapshot: WeatherSnapshot
    now: datetime
    expectations: Dict[str, object] = field(default_factory=dict)


def _forecast(*days: Tuple[float, str]) -> Tuple[ForecastDay, ...]:
    labels = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
    return tuple(
        ForecastDay(day=labels[index % len(labels)], temperature=temperature, condition=condition)
        for index, (temperature, condition) in enumerate(days)
    )


SCENARIOS: List[EvaluationScenario] = [
    EvaluationScenario(
        name="snowy_commute",
        description="Light snow just above freezing on a winter morning commute.",
        snapshot=WeatherSnapshot(
            location="Chicago",
            current=CurrentWeather(temperature=2.0, condition="Snow", high=3.0, low=-2.0, humidity=80, wind_speed=10),
            forecast=_forecast((1.0, "Snow"), (0.0, "Snow"), (3.0, "Cloudy"), (2.0, "Snow")),
        ),
        now=datetime(2024, 1, 10, 8, 0),
        expectations={
            "required_items": ["Heavy winter coat", "Winter hat", "Insulated gloves", "Winter boots"],
            "outfit": {"clothing": "hoodie", "clothingColor": "gray01"},
            "reasoning_contains": "very cold protection needed",
        },
    ),
    EvaluationScenario(
        name="hot_clear_afternoon",
        description="Very hot, clear summer afternoon.",
        snapshot=WeatherSnapshot(
            location="Phoenix",
            current=CurrentWeather(temperature=32.0, condition="Clear", high=35.0, low=24.0, humidity=20, wind_speed=5),
            forecast=_forecast((33.0, "Clear"), (34.0, "Clear"), (33.0, "Clear"), (32.0, "Clear")),
        ),
        now=datetime(2024, 7, 15, 14, 0),
        expectations={
            "required_items": ["Tank top or light shirt", "Shorts", "Sunglasses", "Sun hat", "Sunscreen"],
            "outfit": {"clothing": "shirtVNeck", "clothingColor": "white", "accessories": "sunglasses"},
            "reasoning_contains": "light, breathable clothing recommended",
        },
    ),
    EvaluationScenario(
        name="rainy_office",
        description="Cool office day with steady rain.",
        snapshot=WeatherSnapshot(
            location="Seattle",
            current=CurrentWeather(temperature=11.0, condition="Rain", high=13.0, low=8.0, humidity=85, wind_speed=12),
            forecast=_forecast((12.0, "Rain"), (11.0, "Drizzle"), (13.0, "Cloudy"), (12.0, "Rain")),
        ),
        now=datetime(2024, 10, 2, 9, 0),
        expectations={
            "required_items": ["Waterproof jacket", "Umbrella", "Waterproof shoes", "Long sleeve shirt"],
            "outfit": {"clothing": "blazerAndSweater", "clothingColor": "blue01"},
            "reasoning_contains": "Rain expected - waterproof protection essential",
        },
    ),
    EvaluationScenario(
        name="mild_cloudy_weekend",
        description="Mild, overcast spring weekend with nothing notable.",
        snapshot=WeatherSnapshot(
            location="London",
            current=CurrentWeather(temperature=17.0, condition="Cloudy", high=19.0, low=12.0, humidity=55, wind_speed=8),
            forecast=_forecast((17.0, "Cloudy"), (18.0, "Cloudy"), (17.0, "Cloudy"), (16.0, "Cloudy")),
        ),
        now=datetime(2024, 4, 20, 11, 0),
        expectations={
            "required_items": ["T-shirt or blouse", "Light sweater or cardigan", "Comfortable pants"],
            "outfit": {"clothing": "shirtCrewNeck", "clothingColor": "pastelBlue", "accessories": "none"},
            "reasoning_contains": "Optimal for current weather conditions",
        },
    ),
]
