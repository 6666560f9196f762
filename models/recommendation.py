"""Recommendation schema produced by the engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

from models.taxonomy import validate_category


@dataclass
class Recommendation:
    """One clothing suggestion; created fresh per call and never persisted."""

    category: str
    item: str
    priority: float
    layer_index: int
    adjusted_priority: Optional[float] = None
    personalization_score: float = 1.0
    confidence: int = 0
    reasoning: str = ""

    def __post_init__(self) -> None:
        self.category = validate_category(self.category)

    @property
    def original_priority(self) -> float:
        return self.priority

    @property
    def effective_priority(self) -> float:
        return self.priority if self.adjusted_priority is None else self.adjusted_priority

    def with_updates(self, **changes: Any) -> "Recommendation":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["original_priority"] = self.original_priority
        return payload


__all__ = ["Recommendation"]
