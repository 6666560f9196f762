"""Deterministic personalization, ranking, confidence and reasoning."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Sequence

from logic.features import FeatureVector, analysis_payload, as_float, section, temperature_bucket
from models.learning import ModelWeights, UserProfile, WeightKey
from models.recommendation import Recommendation
from models.taxonomy import CATEGORY_ORDER
from models.weather import WeatherAnalysis

WEIGHTS = {
    "base_priority": 0.4,
    "category_preference": 0.3,
    "item_preference": 0.2,
    "learned_weight": 0.1,
}

PER_CATEGORY_LIMIT = 2
CATEGORY_MIN_PRIORITY = 0.3
SWEEP_MIN_PRIORITY = 0.7
HAZARD_BOOST = 1.2
VOLATILITY_DISCOUNT = 0.9
HIGH_VOLATILITY_CODE = 0.7
REASON_SEPARATOR = " • "
GENERIC_REASON = "Optimal for current weather conditions"


def sigmoid(value: float) -> float:
    return 1 / (1 + math.exp(-value))


def weight_key(category: str, normalized_temperature: float, rainy: bool) -> WeightKey:
    """Same key for scoring and for learning: category, tenth of the temp span, rain."""

    return WeightKey(category=category, temp_bucket=temperature_bucket(normalized_temperature), is_rainy=bool(rainy))


def personalize(
    candidates: Sequence[Recommendation],
    features: FeatureVector,
    profile: UserProfile,
    weights: ModelWeights,
) -> List[Recommendation]:
    """Blend base priority with preferences and learned weights, squashed into (0, 1)."""

    personalized: List[Recommendation] = []
    for candidate in candidates:
        category_pref = profile.category_preference(candidate.category)
        item_pref = profile.item_preference(candidate.item)
        learned = weights.get(weight_key(candidate.category, features["temperature"], bool(features["is_rainy"])))
        blended = (
            candidate.priority * WEIGHTS["base_priority"]
            + category_pref * WEIGHTS["category_preference"]
            + item_pref * WEIGHTS["item_preference"]
            + learned * WEIGHTS["learned_weight"]
        )
        personalized.append(
            candidate.with_updates(adjusted_priority=sigmoid(blended), personalization_score=item_pref)
        )
    return personalized


def rank(candidates: Sequence[Recommendation]) -> List[Recommendation]:
    """Pick up to two per category in category order, then sweep remaining strong items.

    Sorting is stable, so ties keep their original candidate order.
    """

    grouped: Dict[str, List[int]] = {}
    for index, candidate in enumerate(candidates):
        grouped.setdefault(candidate.category, []).append(index)

    selected: List[int] = []
    for category in CATEGORY_ORDER:
        indexes = sorted(grouped.get(category, []), key=lambda i: -candidates[i].effective_priority)
        for index in indexes[:PER_CATEGORY_LIMIT]:
            if candidates[index].effective_priority > CATEGORY_MIN_PRIORITY:
                selected.append(index)

    chosen = set(selected)
    for index, candidate in enumerate(candidates):
        if index not in chosen and candidate.effective_priority > SWEEP_MIN_PRIORITY:
            selected.append(index)
            chosen.add(index)

    return [candidates[index] for index in selected]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_confidence(recommendation: Recommendation, features: FeatureVector) -> int:
    confidence = recommendation.effective_priority
    item = recommendation.item.lower()
    if (features["is_rainy"] and "waterproof" in item) or (features["is_snowy"] and "winter" in item):
        confidence = min(1.0, confidence * HAZARD_BOOST)
    if features["temp_volatility"] > HIGH_VOLATILITY_CODE:
        confidence *= VOLATILITY_DISCOUNT
    return max(0, min(100, round_half_up(confidence * 100)))


def _format_temperature(value: float) -> str:
    return f"{value:g}"


def generate_reasoning(analysis: WeatherAnalysis | Mapping[str, Any] | None) -> str:
    """Compose templated reasons from the weather analysis."""

    payload = analysis_payload(analysis)
    current = section(payload, "current_conditions")
    trend = section(payload, "temperature_trend")
    precipitation = section(payload, "precipitation_risk")
    comfort = section(payload, "comfort_index")

    reasons: List[str] = []
    temp_category = current.get("temp_category")
    temperature = as_float(current.get("temperature"), 0.0)
    if temp_category in {"freezing", "very_cold"}:
        reasons.append(f"Temperature is {_format_temperature(temperature)}°C - very cold protection needed")
    elif temp_category == "very_hot":
        reasons.append(
            f"Temperature is {_format_temperature(temperature)}°C - light, breathable clothing recommended"
        )

    precip_score = as_float(precipitation.get("score"), 0.0)
    if precipitation.get("is_currently_rainy"):
        reasons.append("Rain expected - waterproof protection essential")
    elif precip_score > 0.4:
        reasons.append(f"{round_half_up(precip_score * 100)}% chance of precipitation later")

    if current.get("is_sunny") and temperature > 20:
        reasons.append("Sunny weather - sun protection recommended")

    if trend.get("trend") == "warming":
        reasons.append("Temperature rising - consider layering options")
    elif trend.get("trend") == "cooling":
        reasons.append("Temperature dropping - bring warmer layers")

    if comfort.get("level") == "uncomfortable":
        reasons.append("Uncomfortable conditions - extra protection advisable")

    if not reasons:
        reasons.append(GENERIC_REASON)
    return REASON_SEPARATOR.join(reasons)


__all__ = [
    "WEIGHTS",
    "sigmoid",
    "weight_key",
    "personalize",
    "rank",
    "round_half_up",
    "calculate_confidence",
    "generate_reasoning",
]
