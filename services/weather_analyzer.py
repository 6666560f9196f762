"""Weather analysis service with a bounded, persisted historical log."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from statistics import mean
from typing import Any, Callable, Dict, List, Optional

from logic.features import as_float, section
from logic.weather_analysis import analyze_snapshot, season_for_month
from memory.user_profile import LearningStateRepository
from models.weather import HistoricalPattern, WeatherAnalysis, WeatherSnapshot
from wear_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)

HISTORY_LIMIT = 100
SEASONAL_MIN_ENTRIES = 5


class WeatherAnalyzer:
    """Turns snapshots into analyses and keeps the last 100 for seasonal queries.

    The log never influences the returned analysis; it only feeds
    :meth:`get_seasonal_patterns`.
    """

    def __init__(
        self,
        repository: LearningStateRepository,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repository = repository
        self.clock = clock
        self.history: List[Dict[str, Any]] = repository.load_weather_log()[-HISTORY_LIMIT:]

    def analyze(self, snapshot: WeatherSnapshot) -> WeatherAnalysis:
        now = self.clock()
        analysis = analyze_snapshot(snapshot, now)
        self._record(analysis, now)
        log_event(
            LOGGER,
            logging.INFO,
            "weather_analyzed",
            location=snapshot.location,
            temp_category=analysis.current_conditions.temp_category,
            precipitation_level=analysis.precipitation_risk.level,
            history_size=len(self.history),
        )
        return analysis

    def _record(self, analysis: WeatherAnalysis, now: datetime) -> None:
        entry = HistoricalPattern(timestamp=now.timestamp(), analysis=analysis.to_dict())
        self.history.append(entry.to_dict())
        if len(self.history) > HISTORY_LIMIT:
            self.history = self.history[-HISTORY_LIMIT:]
        # A failed write is logged by the repository; the in-memory log stays current.
        self.repository.save_weather_log(self.history)

    def get_seasonal_patterns(self, now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
        """Aggregate logged entries from the same season as ``now``."""

        now = now or self.clock()
        season = season_for_month(now.month)
        seasonal = [
            entry
            for entry in self.history
            if season_for_month(datetime.fromtimestamp(as_float(entry.get("timestamp"), time.time())).month) == season
        ]
        if len(seasonal) < SEASONAL_MIN_ENTRIES:
            return None

        temperatures = [
            as_float(section(entry, "current_conditions").get("temperature"), 0.0) for entry in seasonal
        ]
        rainy = sum(1 for entry in seasonal if section(entry, "precipitation_risk").get("is_currently_rainy"))
        return {
            "season": season,
            "avg_temperature": mean(temperatures),
            "rain_frequency": rainy / len(seasonal),
            "data_points": len(seasonal),
        }


__all__ = ["WeatherAnalyzer", "HISTORY_LIMIT"]
