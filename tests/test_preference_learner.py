"""Reward updates, insights, session analytics and user data management."""

import random

import pytest

from logic.features import normalize_temperature
from logic.scoring import weight_key
from memory.kv_store import InMemoryKeyValueStore
from memory.user_profile import (
    FEEDBACK_HISTORY_KEY,
    MODEL_WEIGHTS_KEY,
    USER_PROFILE_KEY,
    LearningStateRepository,
)
from models.learning import PROFILE_HISTORY_LIMIT
from models.recommendation import Recommendation
from models.taxonomy import CATEGORY_ORDER, FEEDBACK_KINDS
from services.preference_learner import PreferenceLearner
from services.recommendation_engine import RecommendationEngine

WINTER_HAT = {"item": "Winter hat", "category": "head", "confidence": 73}
COLD_SNOW = {"temperature": -2, "condition": "Snow", "timeOfDay": "morning"}


class _Clock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        self.now += 1
        return self.now


def _learner(store=None):
    repository = LearningStateRepository(store or InMemoryKeyValueStore())
    engine = RecommendationEngine(repository)
    return PreferenceLearner(engine, repository, clock=_Clock())


def test_like_updates_weight_neighbours_and_profile() -> None:
    learner = _learner()
    entry = learner.record_feedback(WINTER_HAT, "like", COLD_SNOW)

    key = weight_key("head", normalize_temperature(-2), False)
    lower, upper = key.neighbours(1)
    weights = learner.engine.weights
    assert key.temp_bucket == 1
    assert weights.get(key) == pytest.approx(1.05)
    assert weights.get(lower) == pytest.approx(1.025)
    assert weights.get(upper) == pytest.approx(1.025)

    profile = learner.engine.profile
    assert profile.category_preference("head") == pytest.approx(1.025)
    assert profile.item_preference("Winter hat") == pytest.approx(1.05)
    assert profile.feedback_history[-1].item == "Winter hat"

    assert entry.feedback == "like"
    assert entry.weather_context.time_of_day == "morning"
    assert entry.session_id == learner.session_id
    assert entry.session_id.startswith("session_")


def test_rain_flag_separates_weight_keys() -> None:
    learner = _learner()
    learner.record_feedback({"item": "Umbrella", "category": "accessories"}, "worn", {"temperature": 12, "condition": "Drizzle"})

    rainy_key = weight_key("accessories", normalize_temperature(12), True)
    dry_key = weight_key("accessories", normalize_temperature(12), False)
    assert learner.engine.weights.get(rainy_key) == pytest.approx(1.1)
    assert dry_key not in learner.engine.weights


def test_repeated_likes_approach_but_never_exceed_cap() -> None:
    learner = _learner()
    for _ in range(15):
        learner.record_feedback(WINTER_HAT, "like", COLD_SNOW)
    assert learner.engine.profile.item_preference("Winter hat") == pytest.approx(1.75)

    for _ in range(30):
        learner.record_feedback(WINTER_HAT, "like", COLD_SNOW)
    assert learner.engine.profile.item_preference("Winter hat") == 2.0
    assert max(value for _, value in learner.engine.weights.items()) == 2.0


def test_reward_monotonicity() -> None:
    learner = _learner()
    profile = learner.engine.profile

    before = profile.item_preference("Winter hat")
    learner.record_feedback(WINTER_HAT, "worn", COLD_SNOW)
    assert profile.item_preference("Winter hat") > before

    before = profile.item_preference("Winter hat")
    learner.record_feedback(WINTER_HAT, "inappropriate", COLD_SNOW)
    assert profile.item_preference("Winter hat") < before

    for _ in range(20):
        learner.record_feedback(WINTER_HAT, "inappropriate", COLD_SNOW)
    assert profile.item_preference("Winter hat") == 0.0
    learner.record_feedback(WINTER_HAT, "inappropriate", COLD_SNOW)
    assert profile.item_preference("Winter hat") == 0.0


def test_weights_stay_bounded_over_random_feedback() -> None:
    rng = random.Random(1234)
    learner = _learner()
    items = ["Winter hat", "Shorts", "Umbrella", "Light jacket"]
    conditions = ["Rain", "Snow", "Clear", "Cloudy", ""]

    for _ in range(400):
        learner.record_feedback(
            {"item": rng.choice(items), "category": rng.choice(CATEGORY_ORDER)},
            rng.choice(FEEDBACK_KINDS),
            {"temperature": rng.uniform(-25, 50), "condition": rng.choice(conditions)},
        )

    assert all(0.0 <= value <= 2.0 for _, value in learner.engine.weights.items())
    profile = learner.engine.profile
    assert all(0.0 <= value <= 2.0 for value in profile.category_preferences.values())
    assert all(0.0 <= value <= 2.0 for value in profile.item_preferences.values())
    assert len(profile.feedback_history) == PROFILE_HISTORY_LIMIT
    assert len(learner.feedback_history) == 400


def test_unknown_feedback_kind_is_neutral() -> None:
    learner = _learner()
    entry = learner.record_feedback(WINTER_HAT, "meh", COLD_SNOW)

    assert entry.feedback == "meh"
    assert learner.engine.profile.item_preference("Winter hat") == 1.0
    assert all(value == 1.0 for _, value in learner.engine.weights.items())


def test_recommendation_objects_are_accepted() -> None:
    learner = _learner()
    recommendation = Recommendation("feet", "Winter boots", 1.0, 3, adjusted_priority=0.73, confidence=73)

    entry = learner.record_feedback(recommendation, "worn", {"temperature": 1, "condition": "Snow"})

    assert entry.recommendation.item == "Winter boots"
    assert entry.recommendation.confidence == 73


def test_recommendation_without_item_is_rejected() -> None:
    learner = _learner()
    with pytest.raises(ValueError):
        learner.record_feedback({"category": "head"}, "like", COLD_SNOW)
    assert learner.feedback_history == []


def test_recommendation_with_unknown_category_is_rejected() -> None:
    learner = _learner()
    with pytest.raises(ValueError, match="known category"):
        learner.record_feedback({"item": "Sandals", "category": "shoes"}, "like", COLD_SNOW)

    assert learner.feedback_history == []
    assert learner.engine.profile.category_preferences == {}
    assert len(learner.engine.weights) == 0


def test_category_names_are_normalised() -> None:
    learner = _learner()
    entry = learner.record_feedback({"item": "Winter hat", "category": " Head "}, "like", COLD_SNOW)
    assert entry.recommendation.category == "head"


def test_insights_placeholder_below_ten_entries() -> None:
    learner = _learner()
    for _ in range(3):
        learner.record_feedback(WINTER_HAT, "like", COLD_SNOW)

    insights = learner.get_personalized_insights()

    assert insights["data_points"] == 3
    assert insights["message"] == "Keep providing feedback to get personalized insights!"
    assert insights["insights"] == []
    assert "learning_progress" not in insights


def test_insights_report_favourites_loved_avoided_and_pattern() -> None:
    learner = _learner()
    cold = {"temperature": 2, "condition": "Cloudy"}
    for _ in range(12):
        learner.record_feedback({"item": "Winter boots", "category": "feet"}, "worn", cold)
    for _ in range(4):
        learner.record_feedback({"item": "Shorts", "category": "bottom"}, "inappropriate", cold)

    insights = learner.get_personalized_insights()
    by_type = {insight["type"]: insight for insight in insights["insights"]}

    assert insights["data_points"] == 16
    assert by_type["preference"]["description"].startswith("feet (80% preference)")
    assert by_type["loved"]["description"] == "Winter boots"
    assert by_type["disliked"]["description"] == "Shorts"
    assert by_type["weather_pattern"]["title"] == "Cold Weather Preference"
    assert insights["learning_progress"] == {"level": "learning", "percentage": 30}


def test_session_analytics_and_reset() -> None:
    learner = _learner()
    assert learner.get_session_analytics() is None

    learner.record_feedback(WINTER_HAT, "like", COLD_SNOW)
    learner.record_feedback(WINTER_HAT, "dislike", COLD_SNOW)
    learner.record_feedback(WINTER_HAT, "ignored", COLD_SNOW)

    analytics = learner.get_session_analytics()
    assert analytics["total_recommendations"] == 3
    assert (analytics["liked"], analytics["disliked"], analytics["ignored"]) == (1, 1, 1)
    assert analytics["satisfaction_rate"] == pytest.approx(1 / 3)

    old_session = learner.session_id
    new_session = learner.reset_session()
    assert new_session != old_session
    assert learner.get_session_analytics() is None
    assert len(learner.feedback_history) == 3


def test_state_is_persisted_and_restored() -> None:
    store = InMemoryKeyValueStore()
    learner = _learner(store)
    learner.record_feedback(WINTER_HAT, "worn", COLD_SNOW)

    assert store.get(MODEL_WEIGHTS_KEY)
    assert store.get(USER_PROFILE_KEY)["item_preferences"] == {"Winter hat": pytest.approx(1.1)}
    assert len(store.get(FEEDBACK_HISTORY_KEY)) == 1

    restored = _learner(store)
    assert restored.engine.weights == learner.engine.weights
    assert restored.engine.profile == learner.engine.profile
    assert restored.feedback_history == learner.feedback_history


def test_failing_store_keeps_in_memory_state(failing_store) -> None:
    learner = _learner(failing_store)
    learner.record_feedback(WINTER_HAT, "worn", COLD_SNOW)

    assert learner.engine.profile.item_preference("Winter hat") == pytest.approx(1.1)
    assert len(learner.feedback_history) == 1
    assert failing_store.write_attempts == 3


def test_export_import_roundtrip_into_fresh_learner() -> None:
    source = _learner()
    source.record_feedback(WINTER_HAT, "worn", COLD_SNOW)
    source.record_feedback({"item": "Shorts", "category": "bottom"}, "dislike", {"temperature": 25, "condition": "Clear"})
    exported = source.export_user_data()

    assert set(exported) == {"feedback_history", "user_profile", "model_weights", "timestamp", "data_points"}
    assert exported["data_points"] == 2

    target = _learner()
    result = target.import_user_data(exported)

    assert result == {
        "success": True,
        "data_points": 2,
        "replaced": ["feedback_history", "user_profile", "model_weights"],
        "skipped": [],
    }
    assert target.engine.weights == source.engine.weights
    assert target.engine.profile == source.engine.profile
    assert target.feedback_history == source.feedback_history


def test_import_accepts_subsets_and_skips_invalid_parts() -> None:
    learner = _learner()
    learner.record_feedback(WINTER_HAT, "worn", COLD_SNOW)

    result = learner.import_user_data(
        {"user_profile": {"item_preferences": {"Scarf": 5.0}}, "model_weights": "not a list"}
    )

    assert result["replaced"] == ["user_profile"]
    assert result["skipped"] == ["model_weights"]
    assert result["success"] is False
    assert learner.engine.profile.item_preference("Scarf") == 2.0
    assert learner.engine.profile.item_preference("Winter hat") == 1.0
    assert len(learner.feedback_history) == 1
    assert len(learner.engine.weights) == 3


def test_clear_all_data_resets_everything() -> None:
    store = InMemoryKeyValueStore()
    learner = _learner(store)
    learner.record_feedback(WINTER_HAT, "worn", COLD_SNOW)

    learner.clear_all_data()

    assert learner.feedback_history == []
    assert learner.get_session_analytics() is None
    assert len(learner.engine.weights) == 0
    assert learner.engine.profile.item_preferences == {}
    assert store.get(MODEL_WEIGHTS_KEY) == []
    assert store.get(FEEDBACK_HISTORY_KEY) == []
    assert store.get(USER_PROFILE_KEY)["feedback_history"] == []
