"""Learned weights, user profile and feedback records."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple

from models.taxonomy import DEFAULT_WEIGHT, POSITIVE_FEEDBACK, clamp_weight

PROFILE_HISTORY_LIMIT = 200


class WeightKey(NamedTuple):
    """Composite lookup key for one learned weight."""

    category: str
    temp_bucket: int
    is_rainy: bool

    def neighbours(self, distance: int = 1) -> Tuple["WeightKey", "WeightKey"]:
        return (
            self._replace(temp_bucket=self.temp_bucket - distance),
            self._replace(temp_bucket=self.temp_bucket + distance),
        )


class ModelWeights:
    """Mapping of :class:`WeightKey` to a scalar kept inside [0, 2].

    Absent keys read as 1. Every write goes through :meth:`set`, which clamps.
    """

    def __init__(self, weights: Dict[WeightKey, float] | None = None) -> None:
        self._weights: Dict[WeightKey, float] = {}
        for key, value in (weights or {}).items():
            self.set(key, value)

    def get(self, key: WeightKey) -> float:
        return self._weights.get(key, DEFAULT_WEIGHT)

    def set(self, key: WeightKey, value: float) -> float:
        clamped = clamp_weight(value)
        self._weights[key] = clamped
        return clamped

    def adjust(self, key: WeightKey, delta: float) -> float:
        return self.set(key, self.get(key) + delta)

    def items(self) -> Iterator[Tuple[WeightKey, float]]:
        return iter(self._weights.items())

    def __contains__(self, key: object) -> bool:
        return key in self._weights

    def __len__(self) -> int:
        return len(self._weights)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModelWeights):
            return NotImplemented
        return self._weights == other._weights

    def to_records(self) -> List[Dict[str, Any]]:
        return [
            {
                "category": key.category,
                "temp_bucket": key.temp_bucket,
                "is_rainy": key.is_rainy,
                "weight": value,
            }
            for key, value in sorted(self._weights.items())
        ]

    @classmethod
    def from_records(cls, records: List[Dict[str, Any]]) -> "ModelWeights":
        weights = cls()
        for record in records:
            key = WeightKey(
                category=str(record["category"]),
                temp_bucket=int(record["temp_bucket"]),
                is_rainy=bool(record["is_rainy"]),
            )
            weights.set(key, float(record["weight"]))
        return weights


@dataclass
class ProfileFeedbackRecord:
    timestamp: float
    item: str
    feedback: str


@dataclass
class UserProfile:
    """Long-lived preference state; values stay within [0, 2], default 1."""

    category_preferences: Dict[str, float] = field(default_factory=dict)
    item_preferences: Dict[str, float] = field(default_factory=dict)
    feedback_history: List[ProfileFeedbackRecord] = field(default_factory=list)

    def category_preference(self, category: str) -> float:
        return self.category_preferences.get(category, DEFAULT_WEIGHT)

    def item_preference(self, item: str) -> float:
        return self.item_preferences.get(item, DEFAULT_WEIGHT)

    def adjust_category(self, category: str, delta: float) -> float:
        value = clamp_weight(self.category_preference(category) + delta)
        self.category_preferences[category] = value
        return value

    def adjust_item(self, item: str, delta: float) -> float:
        value = clamp_weight(self.item_preference(item) + delta)
        self.item_preferences[item] = value
        return value

    def append_feedback(self, record: ProfileFeedbackRecord) -> None:
        self.feedback_history.append(record)
        if len(self.feedback_history) > PROFILE_HISTORY_LIMIT:
            self.feedback_history = self.feedback_history[-PROFILE_HISTORY_LIMIT:]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "UserProfile":
        history = [
            ProfileFeedbackRecord(
                timestamp=float(record["timestamp"]),
                item=str(record["item"]),
                feedback=str(record["feedback"]),
            )
            for record in payload.get("feedback_history", [])
        ]
        return cls(
            category_preferences={
                str(key): clamp_weight(value) for key, value in payload.get("category_preferences", {}).items()
            },
            item_preferences={
                str(key): clamp_weight(value) for key, value in payload.get("item_preferences", {}).items()
            },
            feedback_history=history[-PROFILE_HISTORY_LIMIT:],
        )


@dataclass
class RecommendationSnapshot:
    item: str
    category: str
    confidence: int = 0


@dataclass
class WeatherContext:
    temperature: float
    condition: str = ""
    time_of_day: Optional[str] = None


@dataclass
class FeedbackEntry:
    """Full feedback event kept in the unbounded feedback log."""

    timestamp: float
    recommendation: RecommendationSnapshot
    feedback: str
    weather_context: WeatherContext
    session_id: str

    @property
    def is_positive(self) -> bool:
        return self.feedback in POSITIVE_FEEDBACK

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "FeedbackEntry":
        recommendation = payload.get("recommendation", {})
        context = payload.get("weather_context", {})
        return cls(
            timestamp=float(payload["timestamp"]),
            recommendation=RecommendationSnapshot(
                item=str(recommendation["item"]),
                category=str(recommendation["category"]),
                confidence=int(recommendation.get("confidence") or 0),
            ),
            feedback=str(payload["feedback"]),
            weather_context=WeatherContext(
                temperature=float(context["temperature"]),
                condition=str(context.get("condition") or ""),
                time_of_day=context.get("time_of_day"),
            ),
            session_id=str(payload.get("session_id", "")),
        )


__all__ = [
    "PROFILE_HISTORY_LIMIT",
    "WeightKey",
    "ModelWeights",
    "ProfileFeedbackRecord",
    "UserProfile",
    "RecommendationSnapshot",
    "WeatherContext",
    "FeedbackEntry",
]
