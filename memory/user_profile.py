"""Load and save the learned state documents through a key-value store."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from logic.validation import (
    FeedbackEntryDocument,
    UserProfileDocument,
    WeatherLogEntryDocument,
    WeightRecord,
    validation_errors,
)
from memory.kv_store import KeyValueStore, StoreResult
from models.learning import FeedbackEntry, ModelWeights, UserProfile
from wear_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)

MODEL_WEIGHTS_KEY = "ml_model_weights"
USER_PROFILE_KEY = "user_outfit_profile"
FEEDBACK_HISTORY_KEY = "user_feedback_history"
WEATHER_LOG_KEY = "weather_historical_data"

STORE_KEYS = (MODEL_WEIGHTS_KEY, USER_PROFILE_KEY, FEEDBACK_HISTORY_KEY, WEATHER_LOG_KEY)


class LearningStateRepository:
    """Typed access to the four persisted documents.

    Reads never raise: missing, corrupt or schema-invalid documents come back
    as empty defaults. Writes return the store's ``StoreResult`` and log on
    failure.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def _read(self, key: str, schema: Any) -> Optional[Any]:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return TypeAdapter(schema).validate_python(raw)
        except ValidationError as exc:
            log_event(
                LOGGER,
                logging.WARNING,
                "store_read_failed",
                key=key,
                error="schema validation failed",
                errors=validation_errors(exc)[:5],
            )
            return None

    def _write(self, key: str, value: Any) -> StoreResult:
        result = self.store.set(key, value)
        if not result.ok:
            log_event(LOGGER, logging.ERROR, "store_write_failed", key=key, error=result.error)
        return result

    def load_weights(self) -> ModelWeights:
        records = self._read(MODEL_WEIGHTS_KEY, List[WeightRecord])
        if not records:
            return ModelWeights()
        return ModelWeights.from_records([record.model_dump() for record in records])

    def save_weights(self, weights: ModelWeights) -> StoreResult:
        return self._write(MODEL_WEIGHTS_KEY, weights.to_records())

    def load_profile(self) -> UserProfile:
        document = self._read(USER_PROFILE_KEY, UserProfileDocument)
        if document is None:
            return UserProfile()
        return UserProfile.from_dict(document.model_dump())

    def save_profile(self, profile: UserProfile) -> StoreResult:
        return self._write(USER_PROFILE_KEY, profile.to_dict())

    def load_feedback_history(self) -> List[FeedbackEntry]:
        documents = self._read(FEEDBACK_HISTORY_KEY, List[FeedbackEntryDocument])
        return [FeedbackEntry.from_dict(document.model_dump()) for document in documents or []]

    def save_feedback_history(self, history: List[FeedbackEntry]) -> StoreResult:
        return self._write(FEEDBACK_HISTORY_KEY, [entry.to_dict() for entry in history])

    def load_weather_log(self) -> List[Dict[str, Any]]:
        documents = self._read(WEATHER_LOG_KEY, List[WeatherLogEntryDocument])
        return [document.model_dump() for document in documents or []]

    def save_weather_log(self, entries: List[Dict[str, Any]]) -> StoreResult:
        return self._write(WEATHER_LOG_KEY, entries)


__all__ = [
    "MODEL_WEIGHTS_KEY",
    "USER_PROFILE_KEY",
    "FEEDBACK_HISTORY_KEY",
    "WEATHER_LOG_KEY",
    "STORE_KEYS",
    "LearningStateRepository",
]
