"""Candidate rules, personalization, ranking and the engine's safe defaults."""

import math
from datetime import datetime

import pytest

from logic.candidate_rules import base_candidates
from logic.features import extract_features, normalize_temperature
from logic.scoring import GENERIC_REASON, calculate_confidence, generate_reasoning, rank, sigmoid, weight_key
from logic.weather_analysis import analyze_snapshot
from memory.kv_store import InMemoryKeyValueStore
from memory.user_profile import MODEL_WEIGHTS_KEY, USER_PROFILE_KEY, LearningStateRepository
from models.recommendation import Recommendation
from models.weather import CurrentWeather, ForecastDay, WeatherSnapshot
from services.recommendation_engine import RecommendationEngine

NOW = datetime(2024, 3, 4, 13, 0)


def _analysis(temperature, condition, forecast_conditions=None, wind_speed=0, humidity=50):
    conditions = forecast_conditions or [condition] * 4
    snapshot = WeatherSnapshot(
        location="Lyon",
        current=CurrentWeather(temperature=temperature, condition=condition, humidity=humidity, wind_speed=wind_speed),
        forecast=tuple(
            ForecastDay(day=f"D{index}", temperature=temperature, condition=cond) for index, cond in enumerate(conditions)
        ),
    )
    return analyze_snapshot(snapshot, NOW)


def _engine(store=None):
    return RecommendationEngine(LearningStateRepository(store or InMemoryKeyValueStore()))


def _items(recommendations):
    return [recommendation.item for recommendation in recommendations]


def test_snow_near_freezing_yields_winter_gear() -> None:
    features = extract_features(_analysis(2, "Snow"))
    items = _items(base_candidates(features))

    for expected in ("Heavy winter coat", "Winter hat", "Insulated gloves", "Winter boots"):
        assert expected in items


def test_very_hot_clear_day_yields_summer_gear() -> None:
    features = extract_features(_analysis(32, "Clear"))
    items = _items(base_candidates(features))

    for expected in ("Tank top or light shirt", "Shorts", "Sunglasses", "Sun hat", "Sunscreen"):
        assert expected in items
    assert "Umbrella" not in items


@pytest.mark.parametrize(
    "temperature, expected_item",
    [
        (3, "Heavy coat"),
        (7, "Warm jacket"),
        (12, "Light jacket"),
        (17, "T-shirt or blouse"),
        (22, "Light pants or jeans"),
        (27, "Light breathable shirt"),
        (35, "Tank top or light shirt"),
    ],
)
def test_temperature_bands_pick_band_rows(temperature, expected_item) -> None:
    items = _items(base_candidates(extract_features(_analysis(temperature, "Cloudy"))))
    assert expected_item in items


def test_weather_flags_append_rain_and_wind_gear() -> None:
    rainy = _items(base_candidates(extract_features(_analysis(12, "Rain"))))
    assert rainy[-3:] == ["Waterproof jacket", "Umbrella", "Waterproof shoes"]

    windy = _items(base_candidates(extract_features(_analysis(12, "Cloudy", wind_speed=30))))
    assert windy[-1] == "Windbreaker"


def test_forecast_risk_alone_adds_rain_gear() -> None:
    analysis = _analysis(18, "Cloudy", forecast_conditions=["Rain", "Rain", "Drizzle", "Cloudy"])
    assert analysis.precipitation_risk.score == pytest.approx(0.375)
    assert "Umbrella" not in _items(base_candidates(extract_features(analysis)))

    wetter = _analysis(18, "Cloudy", forecast_conditions=["Rain", "Rain", "Drizzle", "Rain"])
    assert "Umbrella" in _items(base_candidates(extract_features(wetter)))


def test_default_personalization_squashes_weighted_sum() -> None:
    recommendations = _engine().generate_recommendations(_analysis(2, "Snow"))

    coat = next(rec for rec in recommendations if rec.item == "Heavy winter coat")
    assert coat.adjusted_priority == pytest.approx(sigmoid(1.0))
    assert coat.original_priority == 1.0
    assert coat.personalization_score == 1.0


def test_learned_weight_changes_adjusted_priority() -> None:
    engine = _engine()
    analysis = _analysis(2, "Snow")
    key = weight_key("outerwear", normalize_temperature(2), False)
    engine.weights.set(key, 2.0)

    coat = next(rec for rec in engine.generate_recommendations(analysis) if rec.item == "Heavy winter coat")
    assert coat.adjusted_priority == pytest.approx(sigmoid(1.1))


def test_recommendations_are_bounded_and_deterministic() -> None:
    engine = _engine()
    analysis = _analysis(11, "Rain", wind_speed=25)

    first = engine.generate_recommendations(analysis, {"activityLevel": 0.9})
    second = engine.generate_recommendations(analysis, {"activityLevel": 0.9})

    assert first == second
    for recommendation in first:
        assert 0 <= recommendation.confidence <= 100
        assert 0 < recommendation.adjusted_priority < 1


def test_selection_follows_category_order() -> None:
    recommendations = _engine().generate_recommendations(_analysis(2, "Snow"))
    categories = [rec.category for rec in recommendations]

    assert _items(recommendations)[0] == "Heavy winter coat"
    order = ["outerwear", "top", "bottom", "feet", "head", "hands", "accessories"]
    assert categories == sorted(categories, key=order.index)


def test_rank_takes_two_per_category_then_sweeps_strong_items() -> None:
    candidates = [
        Recommendation("top", "A", 1.0, 1, adjusted_priority=0.9),
        Recommendation("top", "B", 1.0, 1, adjusted_priority=0.5),
        Recommendation("top", "C", 1.0, 1, adjusted_priority=0.8),
        Recommendation("top", "D", 1.0, 1, adjusted_priority=0.75),
        Recommendation("accessories", "E", 1.0, 0, adjusted_priority=0.25),
        Recommendation("outerwear", "F", 1.0, 3, adjusted_priority=0.4),
    ]

    assert _items(rank(candidates)) == ["F", "A", "C", "D"]


def test_rank_keeps_insertion_order_on_ties() -> None:
    candidates = [
        Recommendation("feet", "first", 1.0, 1, adjusted_priority=0.6),
        Recommendation("feet", "second", 1.0, 1, adjusted_priority=0.6),
        Recommendation("feet", "third", 1.0, 1, adjusted_priority=0.6),
    ]
    assert _items(rank(candidates)) == ["first", "second"]


def test_confidence_boosts_hazard_match_and_discounts_volatility() -> None:
    waterproof = Recommendation("outerwear", "Waterproof jacket", 1.0, 3, adjusted_priority=sigmoid(1.0))
    rainy = {"is_rainy": 1.0, "is_snowy": 0.0, "temp_volatility": 0.0}
    assert calculate_confidence(waterproof, rainy) == 88

    plain = Recommendation("top", "T-shirt", 1.0, 1, adjusted_priority=0.5)
    volatile = {"is_rainy": 0.0, "is_snowy": 0.0, "temp_volatility": 1.0}
    assert calculate_confidence(plain, volatile) == 45

    capped = Recommendation("head", "Winter hat", 1.0, 3, adjusted_priority=0.95)
    snowy = {"is_rainy": 0.0, "is_snowy": 1.0, "temp_volatility": 0.0}
    assert calculate_confidence(capped, snowy) == 100


def test_reasoning_templates() -> None:
    assert generate_reasoning(None) == GENERIC_REASON

    cold_rain = generate_reasoning(_analysis(2, "Rain"))
    assert "Temperature is 2°C - very cold protection needed" in cold_rain
    assert "Rain expected - waterproof protection essential" in cold_rain
    assert " • " in cold_rain

    later = generate_reasoning(
        {"precipitation_risk": {"score": 0.5, "is_currently_rainy": False}, "temperature_trend": {"trend": "cooling"}}
    )
    assert later == "50% chance of precipitation later • Temperature dropping - bring warmer layers"

    sunny = generate_reasoning(_analysis(24, "Sunny"))
    assert sunny == "Sunny weather - sun protection recommended"


def test_missing_analysis_fields_use_defaults() -> None:
    engine = _engine()
    empty = engine.generate_recommendations({})
    malformed = engine.generate_recommendations(
        {"current_conditions": {"temperature": "n/a", "humidity": None}, "precipitation_risk": "oops"}
    )

    expected = ["Light sweater or cardigan", "T-shirt or blouse", "Comfortable pants"]
    assert sorted(_items(empty)) == sorted(expected)
    assert _items(malformed) == _items(empty)
    assert all(rec.reasoning == GENERIC_REASON for rec in empty)


def test_invalid_user_context_falls_back_to_defaults() -> None:
    engine = _engine()
    analysis = _analysis(17, "Cloudy")

    assert engine.generate_recommendations(analysis, {"activityLevel": 7}) == engine.generate_recommendations(analysis)


def test_engine_ignores_corrupt_persisted_state() -> None:
    store = InMemoryKeyValueStore()
    store.set(USER_PROFILE_KEY, "definitely not a profile")
    store.set(MODEL_WEIGHTS_KEY, [{"category": "top"}])

    engine = _engine(store)

    assert engine.profile.category_preferences == {}
    assert len(engine.weights) == 0
    assert engine.generate_recommendations(_analysis(17, "Cloudy"))


def test_sigmoid_is_logistic() -> None:
    assert sigmoid(0) == 0.5
    assert sigmoid(2) == pytest.approx(1 / (1 + math.exp(-2)))
