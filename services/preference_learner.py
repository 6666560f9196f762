"""Feedback recording, reward-driven learning and user data management."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError

from logic.learning_rules import (
    DEFAULT_LEARNING_RATE,
    build_insights,
    reward_for,
    session_summary,
    update_model_weights,
    update_user_profile,
)
from logic.validation import (
    RecommendationInput,
    UserDataImport,
    WeatherContextInput,
    validation_errors,
)
from memory.user_profile import LearningStateRepository
from models.learning import (
    FeedbackEntry,
    ModelWeights,
    RecommendationSnapshot,
    UserProfile,
    WeatherContext,
)
from models.recommendation import Recommendation
from models.taxonomy import FEEDBACK_KINDS
from services.recommendation_engine import RecommendationEngine
from wear_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)

IMPORTABLE_PARTS = ("feedback_history", "user_profile", "model_weights")


def new_session_id(now: float) -> str:
    return f"session_{int(now * 1000)}_{uuid.uuid4().hex[:9]}"


class PreferenceLearner:
    """Applies feedback to the engine's weights and profile and persists the result.

    The engine's ``profile`` and ``weights`` are the single source of truth;
    this class mutates them in place and writes each document back after every
    change. Write failures are logged by the repository and never raised.
    """

    def __init__(
        self,
        engine: RecommendationEngine,
        repository: LearningStateRepository,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.engine = engine
        self.repository = repository
        self.learning_rate = learning_rate
        self.clock = clock
        self.feedback_history: List[FeedbackEntry] = repository.load_feedback_history()
        self.session_feedback: List[FeedbackEntry] = []
        self.session_id = new_session_id(clock())

    def record_feedback(
        self,
        recommendation: Recommendation | Mapping[str, Any],
        feedback: str,
        weather_context: WeatherContext | Mapping[str, Any] | None = None,
    ) -> FeedbackEntry:
        """Record one feedback event and apply it to weights and preferences.

        Raises ``ValueError`` when the recommendation lacks an item or a known category.
        Unknown feedback kinds are recorded with a neutral reward.
        """

        entry = FeedbackEntry(
            timestamp=self.clock(),
            recommendation=self._snapshot(recommendation),
            feedback=feedback,
            weather_context=self._context(weather_context),
            session_id=self.session_id,
        )
        if feedback not in FEEDBACK_KINDS:
            log_event(LOGGER, logging.WARNING, "feedback_kind_unknown", feedback=feedback)

        self.feedback_history.append(entry)
        self.session_feedback.append(entry)

        touched = update_model_weights(self.engine.weights, entry, self.learning_rate)
        update_user_profile(self.engine.profile, entry, self.learning_rate)
        self._persist_all()

        log_event(
            LOGGER,
            logging.INFO,
            "feedback_recorded",
            item=entry.recommendation.item,
            category=entry.recommendation.category,
            feedback=feedback,
            reward=reward_for(feedback),
            weights_touched=len(touched),
            session_id=self.session_id,
        )
        return entry

    @staticmethod
    def _snapshot(recommendation: Recommendation | Mapping[str, Any]) -> RecommendationSnapshot:
        if isinstance(recommendation, Recommendation):
            return RecommendationSnapshot(
                item=recommendation.item,
                category=recommendation.category,
                confidence=recommendation.confidence,
            )
        try:
            parsed = RecommendationInput.model_validate(recommendation)
        except ValidationError as exc:
            raise ValueError(f"recommendation needs an item and a known category: {validation_errors(exc)}") from exc
        return RecommendationSnapshot(item=parsed.item, category=parsed.category, confidence=parsed.confidence)

    @staticmethod
    def _context(weather_context: WeatherContext | Mapping[str, Any] | None) -> WeatherContext:
        if isinstance(weather_context, WeatherContext):
            return weather_context
        try:
            parsed = WeatherContextInput.model_validate(weather_context or {})
        except ValidationError as exc:
            log_event(LOGGER, logging.WARNING, "weather_context_invalid", errors=validation_errors(exc))
            parsed = WeatherContextInput()
        return WeatherContext(
            temperature=parsed.temperature,
            condition=parsed.condition,
            time_of_day=parsed.time_of_day,
        )

    def _persist_all(self) -> None:
        self.repository.save_weights(self.engine.weights)
        self.repository.save_profile(self.engine.profile)
        self.repository.save_feedback_history(self.feedback_history)

    def get_personalized_insights(self) -> Dict[str, Any]:
        return build_insights(self.engine.profile, self.feedback_history)

    def get_session_analytics(self) -> Optional[Dict[str, Any]]:
        summary = session_summary(self.session_feedback)
        if summary is not None:
            summary["session_id"] = self.session_id
        return summary

    def reset_session(self) -> str:
        self.session_feedback = []
        self.session_id = new_session_id(self.clock())
        return self.session_id

    def export_user_data(self) -> Dict[str, Any]:
        return {
            "feedback_history": [entry.to_dict() for entry in self.feedback_history],
            "user_profile": self.engine.profile.to_dict(),
            "model_weights": self.engine.weights.to_records(),
            "timestamp": self.clock(),
            "data_points": len(self.feedback_history),
        }

    def import_user_data(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Replace any subset of exported state; invalid parts are skipped."""

        replaced: List[str] = []
        skipped: List[str] = []
        for part in IMPORTABLE_PARTS:
            if data.get(part) is None:
                continue
            try:
                document = UserDataImport.model_validate({part: data[part]})
            except ValidationError as exc:
                log_event(LOGGER, logging.WARNING, "user_data_part_invalid", part=part, errors=validation_errors(exc))
                skipped.append(part)
                continue
            self._replace(part, document)
            replaced.append(part)

        log_event(LOGGER, logging.INFO, "user_data_imported", replaced=replaced, skipped=skipped)
        return {
            "success": not skipped,
            "data_points": len(self.feedback_history),
            "replaced": replaced,
            "skipped": skipped,
        }

    def _replace(self, part: str, document: UserDataImport) -> None:
        if part == "feedback_history":
            self.feedback_history = [FeedbackEntry.from_dict(entry.model_dump()) for entry in document.feedback_history]
            self.repository.save_feedback_history(self.feedback_history)
        elif part == "user_profile":
            self.engine.profile = UserProfile.from_dict(document.user_profile.model_dump())
            self.repository.save_profile(self.engine.profile)
        elif part == "model_weights":
            self.engine.weights = ModelWeights.from_records([record.model_dump() for record in document.model_weights])
            self.repository.save_weights(self.engine.weights)

    def clear_all_data(self) -> None:
        self.feedback_history = []
        self.session_feedback = []
        self.engine.profile = UserProfile()
        self.engine.weights = ModelWeights()
        self._persist_all()
        log_event(LOGGER, logging.INFO, "user_data_cleared")


__all__ = ["PreferenceLearner", "new_session_id"]
