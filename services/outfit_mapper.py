"""Deterministic mapping from ranked recommendations to an avatar outfit."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from logic.outfit_rules import fallback_outfit, map_headwear, map_outerwear, map_top
from models.outfit import OutfitDescriptor
from models.recommendation import Recommendation
from wear_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)

HEADWEAR_MIN_PRIORITY = 0.8
HEADWEAR_MAX_TEMPERATURE_C = 5.0


def _best(recommendations: Sequence[Recommendation], category: str) -> Optional[Recommendation]:
    matches = [recommendation for recommendation in recommendations if recommendation.category == category]
    if not matches:
        return None
    # max() keeps the first of equal priorities, matching ranking order.
    return max(matches, key=lambda recommendation: recommendation.effective_priority)


class OutfitMapper:
    def map_to_outfit(
        self,
        recommendations: Sequence[Recommendation],
        temperature: float,
        condition: str | None = None,
    ) -> OutfitDescriptor:
        """Pick clothing from outerwear, else top; fall back to temperature rules.

        Headwear is only set for a strong head recommendation in the cold, so a
        caller's own head state is otherwise left alone.
        """

        outfit = OutfitDescriptor()

        outerwear = _best(recommendations, "outerwear")
        clothing = map_outerwear(outerwear.item, temperature) if outerwear else None
        if clothing is None:
            top = _best(recommendations, "top")
            clothing = map_top(top.item, temperature) if top else None
        if clothing:
            outfit.clothing, outfit.clothing_color = clothing

        accessory = _best(recommendations, "accessories")
        if accessory and "sunglasses" in accessory.item.lower():
            outfit.accessories = "sunglasses"

        head = _best(recommendations, "head")
        if head and head.effective_priority > HEADWEAR_MIN_PRIORITY and temperature < HEADWEAR_MAX_TEMPERATURE_C:
            headwear = map_headwear(head.item)
            if headwear:
                outfit.top, outfit.hat_color = headwear

        if outfit.clothing is None:
            fallback = fallback_outfit(temperature, condition)
            log_event(LOGGER, logging.DEBUG, "outfit_fallback_used", temperature=temperature, condition=condition)
            outfit.clothing = fallback["clothing"]
            outfit.clothing_color = fallback["clothingColor"]
            # Only keys the fallback row carries overwrite what was mapped above.
            if "accessories" in fallback:
                outfit.accessories = fallback["accessories"]
            if "top" in fallback:
                outfit.top = fallback["top"]
                outfit.hat_color = fallback.get("hatColor")
        return outfit


__all__ = ["OutfitMapper"]
