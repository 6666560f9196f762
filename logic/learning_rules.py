"""Reward-driven update rules and aggregate insights over feedback."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from logic.features import normalize_temperature
from logic.scoring import round_half_up, weight_key
from models.learning import FeedbackEntry, ModelWeights, ProfileFeedbackRecord, UserProfile, WeightKey
from models.taxonomy import NEGATIVE_FEEDBACK, POSITIVE_FEEDBACK, is_rainy

REWARDS: Dict[str, float] = {
    "worn": 1.0,
    "like": 0.5,
    "ignored": -0.2,
    "dislike": -0.5,
    "inappropriate": -1.0,
}
DEFAULT_LEARNING_RATE = 0.1
GENERALIZATION_DECAY = 0.5
CATEGORY_REWARD_SCALE = 0.5

INSIGHTS_MIN_FEEDBACK = 10
PATTERN_WINDOW = 50
PATTERN_MIN_ENTRIES = 5
PATTERN_POSITIVE_RATIO = 0.7
COLD_WEATHER_MAX_C = 10.0
WARM_WEATHER_MIN_C = 20.0
LOVED_THRESHOLD = 1.3
AVOIDED_THRESHOLD = 0.7
INSIGHT_ITEM_LIMIT = 5
TOP_CATEGORY_LIMIT = 3

LEARNING_PROGRESS = (
    (10, "beginner", 10),
    (30, "learning", 30),
    (50, "intermediate", 50),
    (100, "advanced", 70),
)


def reward_for(feedback: str) -> float:
    """Signed reward for a feedback kind; unknown kinds are neutral."""

    return REWARDS.get(feedback, 0.0)


def feedback_weight_key(entry: FeedbackEntry) -> WeightKey:
    context = entry.weather_context
    return weight_key(
        entry.recommendation.category,
        normalize_temperature(context.temperature),
        is_rainy(context.condition),
    )


def update_model_weights(
    weights: ModelWeights, entry: FeedbackEntry, learning_rate: float = DEFAULT_LEARNING_RATE
) -> Dict[WeightKey, float]:
    """Move the matching weight by the reward and its +-1 temperature neighbours by half.

    Returns the new values of every key touched.
    """

    reward = reward_for(entry.feedback)
    key = feedback_weight_key(entry)
    touched = {key: weights.adjust(key, learning_rate * reward)}
    for neighbour in key.neighbours(1):
        touched[neighbour] = weights.adjust(neighbour, learning_rate * reward * GENERALIZATION_DECAY)
    return touched


def update_user_profile(
    profile: UserProfile, entry: FeedbackEntry, learning_rate: float = DEFAULT_LEARNING_RATE
) -> None:
    reward = reward_for(entry.feedback)
    profile.adjust_category(entry.recommendation.category, learning_rate * reward * CATEGORY_REWARD_SCALE)
    profile.adjust_item(entry.recommendation.item, learning_rate * reward)
    profile.append_feedback(
        ProfileFeedbackRecord(
            timestamp=entry.timestamp,
            item=entry.recommendation.item,
            feedback=entry.feedback,
        )
    )


def learning_progress(total_feedback: int) -> Dict[str, object]:
    for upper_bound, level, percentage in LEARNING_PROGRESS:
        if total_feedback < upper_bound:
            return {"level": level, "percentage": percentage}
    return {"level": "expert", "percentage": 90}


def _positive_ratio(entries: Sequence[FeedbackEntry]) -> float:
    if not entries:
        return 0.0
    return sum(1 for entry in entries if entry.feedback in POSITIVE_FEEDBACK) / len(entries)


def weather_pattern_insight(history: Sequence[FeedbackEntry]) -> Optional[Dict[str, str]]:
    """Report a cold or warm weather affinity when recent feedback is mostly positive."""

    recent = list(history)[-PATTERN_WINDOW:]
    cold = [entry for entry in recent if entry.weather_context.temperature < COLD_WEATHER_MAX_C]
    warm = [entry for entry in recent if entry.weather_context.temperature > WARM_WEATHER_MIN_C]

    if len(cold) >= PATTERN_MIN_ENTRIES and _positive_ratio(cold) > PATTERN_POSITIVE_RATIO:
        return {
            "type": "weather_pattern",
            "title": "Cold Weather Preference",
            "description": "You seem to appreciate our cold weather recommendations!",
        }
    if len(warm) >= PATTERN_MIN_ENTRIES and _positive_ratio(warm) > PATTERN_POSITIVE_RATIO:
        return {
            "type": "weather_pattern",
            "title": "Warm Weather Preference",
            "description": "You love our warm weather recommendations!",
        }
    return None


def build_insights(profile: UserProfile, history: Sequence[FeedbackEntry]) -> Dict[str, object]:
    total = len(history)
    if total < INSIGHTS_MIN_FEEDBACK:
        return {
            "data_points": total,
            "message": "Keep providing feedback to get personalized insights!",
            "insights": [],
        }

    insights: List[Dict[str, str]] = []
    top_categories = sorted(profile.category_preferences.items(), key=lambda pair: -pair[1])[:TOP_CATEGORY_LIMIT]
    if top_categories:
        insights.append(
            {
                "type": "preference",
                "title": "Your Favorite Categories",
                "description": ", ".join(
                    f"{category} ({round_half_up(score * 50)}% preference)" for category, score in top_categories
                ),
            }
        )

    loved = [item for item, score in profile.item_preferences.items() if score > LOVED_THRESHOLD]
    if loved:
        insights.append(
            {"type": "loved", "title": "Items You Love", "description": ", ".join(loved[:INSIGHT_ITEM_LIMIT])}
        )

    avoided = [item for item, score in profile.item_preferences.items() if score < AVOIDED_THRESHOLD]
    if avoided:
        insights.append(
            {"type": "disliked", "title": "Items You Avoid", "description": ", ".join(avoided[:INSIGHT_ITEM_LIMIT])}
        )

    pattern = weather_pattern_insight(history)
    if pattern:
        insights.append(pattern)

    return {
        "data_points": total,
        "message": f"We've learned from {total} of your feedback entries!",
        "insights": insights,
        "learning_progress": learning_progress(total),
    }


def session_summary(session_entries: Sequence[FeedbackEntry]) -> Optional[Dict[str, object]]:
    total = len(session_entries)
    if total == 0:
        return None
    liked = sum(1 for entry in session_entries if entry.feedback in POSITIVE_FEEDBACK)
    disliked = sum(1 for entry in session_entries if entry.feedback in NEGATIVE_FEEDBACK)
    return {
        "total_recommendations": total,
        "liked": liked,
        "disliked": disliked,
        "ignored": total - liked - disliked,
        "satisfaction_rate": liked / total,
    }


__all__ = [
    "REWARDS",
    "DEFAULT_LEARNING_RATE",
    "GENERALIZATION_DECAY",
    "reward_for",
    "feedback_weight_key",
    "update_model_weights",
    "update_user_profile",
    "learning_progress",
    "weather_pattern_insight",
    "build_insights",
    "session_summary",
]
