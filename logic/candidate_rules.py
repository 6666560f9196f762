"""Rule table producing base clothing candidates for a feature vector."""

from __future__ import annotations

from typing import List, Tuple

from logic.features import FeatureVector, denormalize_temperature
from models.recommendation import Recommendation

# (category, item, base priority, layer index)
CandidateRow = Tuple[str, str, float, int]

FREEZING_OR_SNOW: List[CandidateRow] = [
    ("outerwear", "Heavy winter coat", 1.0, 3),
    ("head", "Winter hat", 1.0, 3),
    ("hands", "Insulated gloves", 1.0, 3),
    ("bottom", "Thermal underwear", 1.0, 1),
    ("bottom", "Warm pants", 1.0, 2),
    ("feet", "Winter boots", 1.0, 3),
]

# (upper bound exclusive in C, rows); the bands never overlap.
TEMPERATURE_BANDS: List[Tuple[float, List[CandidateRow]]] = [
    (
        5.0,
        [
            ("outerwear", "Heavy coat", 1.0, 3),
            ("top", "Warm sweater", 1.0, 2),
            ("bottom", "Long pants", 1.0, 2),
            ("head", "Beanie", 0.8, 3),
            ("accessories", "Scarf", 0.8, 3),
        ],
    ),
    (
        10.0,
        [
            ("outerwear", "Warm jacket", 1.0, 3),
            ("top", "Long sleeve shirt", 1.0, 1),
            ("top", "Sweater or cardigan", 0.8, 2),
            ("bottom", "Jeans or pants", 1.0, 2),
        ],
    ),
    (
        15.0,
        [
            ("outerwear", "Light jacket", 0.9, 2),
            ("top", "Long sleeve shirt", 1.0, 1),
            ("bottom", "Jeans", 1.0, 2),
        ],
    ),
    (
        20.0,
        [
            ("top", "Light sweater or cardigan", 0.7, 2),
            ("top", "T-shirt or blouse", 1.0, 1),
            ("bottom", "Comfortable pants", 1.0, 2),
        ],
    ),
    (
        25.0,
        [
            ("top", "T-shirt", 1.0, 1),
            ("bottom", "Light pants or jeans", 1.0, 2),
        ],
    ),
    (
        30.0,
        [
            ("top", "Light breathable shirt", 1.0, 1),
            ("bottom", "Shorts or light pants", 1.0, 1),
            ("accessories", "Sunglasses", 0.8, 1),
        ],
    ),
]

VERY_HOT: List[CandidateRow] = [
    ("top", "Tank top or light shirt", 1.0, 1),
    ("bottom", "Shorts", 1.0, 1),
    ("accessories", "Sunglasses", 1.0, 1),
    ("head", "Sun hat", 0.9, 1),
]

RAIN_GEAR: List[CandidateRow] = [
    ("outerwear", "Waterproof jacket", 1.0, 3),
    ("accessories", "Umbrella", 1.0, 0),
    ("feet", "Waterproof shoes", 0.9, 2),
]
SUN_PROTECTION: List[CandidateRow] = [("accessories", "Sunscreen", 0.7, 0)]
WIND_PROTECTION: List[CandidateRow] = [("outerwear", "Windbreaker", 0.8, 2)]

RAIN_RISK_THRESHOLD = 0.4
SUNSCREEN_MIN_TEMP_C = 20.0
WINDY_FEATURE_THRESHOLD = 0.4


def band_rows(temperature: float, snowy: bool) -> List[CandidateRow]:
    if temperature < 0 or snowy:
        return FREEZING_OR_SNOW
    for upper_bound, rows in TEMPERATURE_BANDS:
        if temperature < upper_bound:
            return rows
    return VERY_HOT


def base_candidates(features: FeatureVector) -> List[Recommendation]:
    """Temperature band rows followed by independent weather-flag additions."""

    temperature = round(denormalize_temperature(features["temperature"]), 6)
    rows: List[CandidateRow] = list(band_rows(temperature, bool(features["is_snowy"])))

    if features["is_rainy"] or features["precip_risk"] > RAIN_RISK_THRESHOLD:
        rows.extend(RAIN_GEAR)
    if features["is_sunny"] and temperature > SUNSCREEN_MIN_TEMP_C:
        rows.extend(SUN_PROTECTION)
    if features["wind_speed"] > WINDY_FEATURE_THRESHOLD:
        rows.extend(WIND_PROTECTION)

    return [
        Recommendation(category=category, item=item, priority=priority, layer_index=layer_index)
        for category, item, priority, layer_index in rows
    ]


__all__ = ["CandidateRow", "TEMPERATURE_BANDS", "band_rows", "base_candidates"]
