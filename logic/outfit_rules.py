"""Lookup tables mapping recommendation text onto avatar clothing codes."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from models.taxonomy import is_rainy, is_snowy

ClothingCode = Tuple[str, str]

# Ordered (substring, resolver) pairs; first match wins. Any "jacket" resolves by
# temperature, so only non-jacket rain and wind shells reach the later rows.
OUTERWEAR_TABLE: List[Tuple[str, Callable[[float], ClothingCode]]] = [
    ("winter coat", lambda temp: ("hoodie", "gray01")),
    ("heavy coat", lambda temp: ("hoodie", "gray01")),
    ("jacket", lambda temp: ("hoodie", "blue03") if temp < 10 else ("blazerAndSweater", "blue01")),
    ("rain", lambda temp: ("hoodie", "gray02")),
    ("windbreaker", lambda temp: ("hoodie", "blue02")),
]

TOP_TABLE: List[Tuple[str, Callable[[float], ClothingCode]]] = [
    ("warm sweater", lambda temp: ("blazerAndSweater", "gray02")),
    ("sweater", lambda temp: ("blazerAndSweater", "pastelBlue")),
    ("cardigan", lambda temp: ("blazerAndSweater", "pastelBlue")),
    ("long sleeve", lambda temp: ("shirtCrewNeck", "blue02")),
    ("tank top", lambda temp: ("shirtVNeck", "white")),
    ("t-shirt", lambda temp: ("shirtVNeck", "white") if temp > 25 else ("shirtCrewNeck", "pastelBlue")),
    ("tee", lambda temp: ("shirtVNeck", "white") if temp > 25 else ("shirtCrewNeck", "pastelBlue")),
    ("blouse", lambda temp: ("shirtCrewNeck", "pastelOrange")),
    ("shirt", lambda temp: ("shirtCrewNeck", "pastelOrange")),
]

HEADWEAR_TABLE: List[Tuple[str, ClothingCode]] = [
    ("winter hat", ("winterHat01", "blue02")),
    ("beanie", ("winterHat01", "blue02")),
    ("sun hat", ("hat", "pastelYellow")),
]

RAIN_OUTFIT: Dict[str, str] = {"clothing": "hoodie", "clothingColor": "gray02"}
FREEZING_OUTFIT: Dict[str, str] = {
    "clothing": "hoodie",
    "clothingColor": "gray01",
    "top": "winterHat01",
    "hatColor": "blue02",
}

# (upper bound exclusive in C, outfit); the last entry covers everything hotter.
FALLBACK_BANDS: List[Tuple[float, Dict[str, str]]] = [
    (0.0, FREEZING_OUTFIT),
    (5.0, {"clothing": "hoodie", "clothingColor": "gray01"}),
    (15.0, {"clothing": "blazerAndSweater", "clothingColor": "blue01"}),
    (22.0, {"clothing": "shirtCrewNeck", "clothingColor": "blue02"}),
    (28.0, {"clothing": "shirtVNeck", "clothingColor": "pastelBlue"}),
]
HOT_OUTFIT: Dict[str, str] = {"clothing": "shirtVNeck", "clothingColor": "white", "accessories": "sunglasses"}


def _match(table: List[Tuple[str, Callable[[float], ClothingCode]]], item: str, temperature: float) -> Optional[ClothingCode]:
    lowered = item.lower()
    for needle, resolver in table:
        if needle in lowered:
            return resolver(temperature)
    return None


def map_outerwear(item: str, temperature: float) -> Optional[ClothingCode]:
    return _match(OUTERWEAR_TABLE, item, temperature)


def map_top(item: str, temperature: float) -> Optional[ClothingCode]:
    return _match(TOP_TABLE, item, temperature)


def map_headwear(item: str) -> Optional[ClothingCode]:
    lowered = item.lower()
    for needle, code in HEADWEAR_TABLE:
        if needle in lowered:
            return code
    return None


def fallback_outfit(temperature: float, condition: str | None) -> Dict[str, str]:
    """Pure temperature/condition outfit used when no recommendation maps."""

    if is_rainy(condition):
        return dict(RAIN_OUTFIT)
    if is_snowy(condition):
        return dict(FREEZING_OUTFIT)
    for upper_bound, outfit in FALLBACK_BANDS:
        if temperature < upper_bound:
            return dict(outfit)
    return dict(HOT_OUTFIT)


__all__ = [
    "ClothingCode",
    "map_outerwear",
    "map_top",
    "map_headwear",
    "fallback_outfit",
]
