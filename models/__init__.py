"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.learning import FeedbackEntry, ModelWeights, UserProfile, WeightKey
from models.outfit import OutfitDescriptor
from models.recommendation import Recommendation
from models.weather import WeatherAnalysis, WeatherSnapshot

__all__ = [
    "FeedbackEntry",
    "ModelWeights",
    "OutfitDescriptor",
    "Recommendation",
    "UserProfile",
    "WeatherAnalysis",
    "WeatherSnapshot",
    "WeightKey",
]
