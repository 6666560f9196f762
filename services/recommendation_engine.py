"""Recommendation engine: features, candidates, personalization and ranking."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from logic.candidate_rules import base_candidates
from logic.features import FeatureVector, extract_features
from logic.scoring import calculate_confidence, generate_reasoning, personalize, rank
from logic.validation import UserContextInput, validation_errors
from memory.user_profile import LearningStateRepository
from models.learning import ModelWeights, UserProfile
from models.recommendation import Recommendation
from models.taxonomy import CLOTHING_CATALOG
from models.weather import WeatherAnalysis
from wear_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)


def parse_user_context(user_context: Mapping[str, Any] | None) -> Dict[str, float]:
    """Validate optional user context, falling back to neutral defaults."""

    try:
        return UserContextInput.model_validate(user_context or {}).model_dump()
    except ValidationError as exc:
        log_event(LOGGER, logging.WARNING, "user_context_invalid", errors=validation_errors(exc))
        return UserContextInput().model_dump()


class RecommendationEngine:
    """Owns the learned state used for scoring.

    ``profile`` and ``weights`` are loaded once from the repository and are
    mutated in place by :class:`services.preference_learner.PreferenceLearner`.
    """

    def __init__(self, repository: LearningStateRepository) -> None:
        self.repository = repository
        self.catalog = CLOTHING_CATALOG
        self.profile: UserProfile = repository.load_profile()
        self.weights: ModelWeights = repository.load_weights()

    def generate_recommendations(
        self,
        analysis: WeatherAnalysis | Mapping[str, Any] | None,
        user_context: Mapping[str, Any] | None = None,
    ) -> List[Recommendation]:
        context = parse_user_context(user_context)
        try:
            features = extract_features(analysis, context)
            recommendations = self._score(features, analysis)
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            log_event(LOGGER, logging.ERROR, "recommendations_fallback", error=str(exc), exc_info=True)
            return self._score(extract_features(None, context), None)

        log_event(
            LOGGER,
            logging.INFO,
            "recommendations_generated",
            count=len(recommendations),
            items=[recommendation.item for recommendation in recommendations],
        )
        return recommendations

    def _score(
        self, features: FeatureVector, analysis: WeatherAnalysis | Mapping[str, Any] | None
    ) -> List[Recommendation]:
        candidates = base_candidates(features)
        selected = rank(personalize(candidates, features, self.profile, self.weights))
        reasoning = generate_reasoning(analysis)
        return [
            recommendation.with_updates(
                confidence=calculate_confidence(recommendation, features),
                reasoning=reasoning,
            )
            for recommendation in selected
        ]


__all__ = ["RecommendationEngine", "parse_user_context"]
