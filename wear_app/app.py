"""WeatherWear app bootstrap."""

from datetime import datetime
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from memory.kv_store import (
    InMemoryKeyValueStore,
    JSONFileKeyValueStore,
    KeyValueStore,
    SQLiteKeyValueStore,
)
from memory.user_profile import LearningStateRepository
from models.learning import FeedbackEntry, WeatherContext
from models.outfit import OutfitDescriptor
from models.recommendation import Recommendation
from models.weather import WeatherAnalysis, WeatherSnapshot
from services.outfit_mapper import OutfitMapper
from services.preference_learner import PreferenceLearner
from services.recommendation_engine import RecommendationEngine
from services.weather_analyzer import WeatherAnalyzer
from tools.observability import instrument_operation
from tools.weather_provider import snapshot_or_fallback
from wear_app.config import WeatherWearConfig
from wear_app.logging_config import configure_logging, get_logger, log_event

LOGGER = get_logger(__name__)

STORE_BACKENDS = ("memory", "json", "sqlite")


def build_store(config: WeatherWearConfig) -> KeyValueStore:
    """Return the configured store; an unknown backend is a bootstrap error."""

    backend = config.store_backend.lower()
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "json":
        return JSONFileKeyValueStore(config.resolved_store_path)
    if backend == "sqlite":
        return SQLiteKeyValueStore(config.resolved_store_path)
    raise ValueError(f"Unknown store backend {config.store_backend!r}; expected one of {STORE_BACKENDS}")


class WeatherWearApp:
    """Wires together the store, analyzer, engine, learner and mapper."""

    def __init__(
        self,
        config: WeatherWearConfig | None = None,
        store: KeyValueStore | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config or WeatherWearConfig.from_env()
        configure_logging(self.config.log_level)

        self.store = store or build_store(self.config)
        self.repository = LearningStateRepository(self.store)
        self.analyzer = WeatherAnalyzer(self.repository, clock=clock)
        self.engine = RecommendationEngine(self.repository)
        self.learner = PreferenceLearner(
            self.engine,
            self.repository,
            learning_rate=self.config.learning_rate,
            clock=lambda: clock().timestamp(),
        )
        self.mapper = OutfitMapper()
        log_event(
            LOGGER,
            logging.INFO,
            "app_initialized",
            store_backend=self.config.store_backend,
            store_path=self.config.resolved_store_path,
            environment=self.config.environment,
        )

    @instrument_operation("app:analyze")
    def analyze(self, snapshot: WeatherSnapshot | Mapping[str, Any] | None) -> WeatherAnalysis:
        return self.analyzer.analyze(snapshot_or_fallback(snapshot))

    @instrument_operation("app:recommend")
    def recommend(
        self,
        snapshot: WeatherSnapshot | Mapping[str, Any] | None,
        user_context: Mapping[str, Any] | None = None,
    ) -> Dict[str, Any]:
        """Run analyze -> recommend -> map for one snapshot."""

        parsed = snapshot_or_fallback(snapshot)
        analysis = self.analyzer.analyze(parsed)
        recommendations = self.engine.generate_recommendations(analysis, user_context)
        outfit = self.mapper.map_to_outfit(
            recommendations, parsed.current.temperature, parsed.current.condition
        )
        return {
            "analysis": analysis,
            "recommendations": recommendations,
            "outfit": outfit,
        }

    @instrument_operation("app:generate_recommendations")
    def generate_recommendations(
        self,
        analysis: WeatherAnalysis | Mapping[str, Any] | None,
        user_context: Mapping[str, Any] | None = None,
    ) -> List[Recommendation]:
        return self.engine.generate_recommendations(analysis, user_context)

    @instrument_operation("app:record_feedback")
    def record_feedback(
        self,
        recommendation: Recommendation | Mapping[str, Any],
        feedback: str,
        weather_context: WeatherContext | Mapping[str, Any] | None = None,
    ) -> FeedbackEntry:
        return self.learner.record_feedback(recommendation, feedback, weather_context)

    @instrument_operation("app:map_to_outfit")
    def map_to_outfit(
        self,
        recommendations: Sequence[Recommendation],
        temperature: float,
        condition: str | None = None,
    ) -> OutfitDescriptor:
        return self.mapper.map_to_outfit(recommendations, temperature, condition)

    @instrument_operation("app:get_personalized_insights")
    def get_personalized_insights(self) -> Dict[str, Any]:
        return self.learner.get_personalized_insights()

    @instrument_operation("app:get_session_analytics")
    def get_session_analytics(self) -> Optional[Dict[str, Any]]:
        return self.learner.get_session_analytics()

    def reset_session(self) -> str:
        return self.learner.reset_session()

    @instrument_operation("app:export_user_data")
    def export_user_data(self) -> Dict[str, Any]:
        return self.learner.export_user_data()

    @instrument_operation("app:import_user_data")
    def import_user_data(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return self.learner.import_user_data(data)

    @instrument_operation("app:clear_all_data")
    def clear_all_data(self) -> None:
        self.learner.clear_all_data()

    @instrument_operation("app:get_seasonal_patterns")
    def get_seasonal_patterns(self, now: datetime | None = None) -> Optional[Dict[str, Any]]:
        return self.analyzer.get_seasonal_patterns(now)


__all__ = ["WeatherWearApp", "build_store"]
