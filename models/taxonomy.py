"""Canonical clothing categories, temperature buckets and explicit defaults.

This module centralises the fixed labels used by the analyzer, the
recommendation engine and the learner. Helper functions keep condition
matching consistent across services.
"""

from typing import Dict, List, Tuple

CATEGORY_ORDER: Tuple[str, ...] = (
    "outerwear",
    "top",
    "bottom",
    "feet",
    "head",
    "hands",
    "accessories",
)

CLOTHING_CATALOG: Dict[str, List[str]] = {
    "outerwear": [
        "Heavy winter coat",
        "Heavy coat",
        "Warm jacket",
        "Light jacket",
        "Windbreaker",
        "Waterproof jacket",
    ],
    "top": ["Tank top", "T-shirt", "Long sleeve shirt", "Sweater", "Cardigan", "Thermal underwear"],
    "bottom": ["Shorts", "Light pants", "Jeans", "Warm pants", "Thermal underwear"],
    "feet": ["Sandals", "Sneakers", "Waterproof shoes", "Boots", "Winter boots"],
    "head": ["Sun hat", "Cap", "Beanie", "Winter hat"],
    "hands": ["Light gloves", "Insulated gloves"],
    "accessories": ["Sunglasses", "Umbrella", "Scarf", "Sunscreen"],
}

# (upper bound exclusive, label); anything at or above the last bound is very_hot.
TEMPERATURE_BUCKETS: Tuple[Tuple[float, str], ...] = (
    (0.0, "freezing"),
    (5.0, "very_cold"),
    (10.0, "cold"),
    (15.0, "cool"),
    (20.0, "mild"),
    (25.0, "warm"),
    (30.0, "hot"),
)
TEMPERATURE_CATEGORIES: Tuple[str, ...] = tuple(label for _, label in TEMPERATURE_BUCKETS) + ("very_hot",)

FEEDBACK_KINDS: Tuple[str, ...] = ("worn", "like", "ignored", "dislike", "inappropriate")
POSITIVE_FEEDBACK = {"worn", "like"}
NEGATIVE_FEEDBACK = {"dislike", "inappropriate"}

DEFAULT_TEMPERATURE_C = 15.0
DEFAULT_HUMIDITY = 50.0
DEFAULT_WIND_SPEED = 0.0
DEFAULT_USER_CONTEXT_VALUE = 0.5

MIN_WEIGHT = 0.0
MAX_WEIGHT = 2.0
DEFAULT_WEIGHT = 1.0


def validate_category(value: str) -> str:
    """Validate and normalise a clothing category.

    Raises a :class:`ValueError` if the category is not part of the fixed set.
    """

    key = str(value).strip().lower()
    if key not in CATEGORY_ORDER:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {list(CATEGORY_ORDER)}")
    return key


def categorize_temperature(temperature: float) -> str:
    for upper_bound, label in TEMPERATURE_BUCKETS:
        if temperature < upper_bound:
            return label
    return "very_hot"


def _lower(condition: str | None) -> str:
    return (condition or "").lower()


def is_rainy(condition: str | None) -> bool:
    lower = _lower(condition)
    return "rain" in lower or "drizzle" in lower


def is_snowy(condition: str | None) -> bool:
    return "snow" in _lower(condition)


def is_wet(condition: str | None) -> bool:
    """Rain, drizzle or snow: anything that counts toward precipitation risk."""

    return is_rainy(condition) or is_snowy(condition)


def is_clear(condition: str | None) -> bool:
    lower = _lower(condition)
    return "clear" in lower or "sun" in lower


def is_cloudy(condition: str | None) -> bool:
    return "cloud" in _lower(condition)


def clamp_weight(value: float) -> float:
    return max(MIN_WEIGHT, min(MAX_WEIGHT, float(value)))


__all__ = [
    "CATEGORY_ORDER",
    "CLOTHING_CATALOG",
    "TEMPERATURE_BUCKETS",
    "TEMPERATURE_CATEGORIES",
    "FEEDBACK_KINDS",
    "POSITIVE_FEEDBACK",
    "NEGATIVE_FEEDBACK",
    "DEFAULT_TEMPERATURE_C",
    "DEFAULT_HUMIDITY",
    "DEFAULT_WIND_SPEED",
    "DEFAULT_USER_CONTEXT_VALUE",
    "MIN_WEIGHT",
    "MAX_WEIGHT",
    "DEFAULT_WEIGHT",
    "validate_category",
    "categorize_temperature",
    "is_rainy",
    "is_snowy",
    "is_wet",
    "is_clear",
    "is_cloudy",
    "clamp_weight",
]
