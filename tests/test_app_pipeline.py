"""End-to-end facade coverage: configuration, wiring and the feedback loop."""

import json
import logging
from datetime import datetime
from pathlib import Path

import pytest

from memory.kv_store import InMemoryKeyValueStore, JSONFileKeyValueStore, SQLiteKeyValueStore
from memory.user_profile import MODEL_WEIGHTS_KEY
from wear_app.app import WeatherWearApp, build_store
from wear_app.config import WeatherWearConfig
from wear_app.logging_config import JsonFormatter, redact_for_log

NOW = datetime(2024, 1, 20, 7, 45)

SNOW_PAYLOAD = {
    "location": "Montreal",
    "current": {"temperature": 2, "condition": "Snow", "humidity": 70, "windSpeed": 8},
    "forecast": [
        {"day": "Sun", "temperature": 1, "condition": "Snow"},
        {"day": "Mon", "temperature": -1, "condition": "Snow"},
        {"day": "Tue", "temperature": 0, "condition": "Cloudy"},
        {"day": "Wed", "temperature": 2, "condition": "Snow"},
    ],
}


def _app(store=None) -> WeatherWearApp:
    return WeatherWearApp(
        config=WeatherWearConfig(store_backend="memory"),
        store=store or InMemoryKeyValueStore(),
        clock=lambda: NOW,
    )


def test_recommend_runs_full_pipeline() -> None:
    result = _app().recommend(SNOW_PAYLOAD)

    analysis = result["analysis"]
    assert analysis.current_conditions.temp_category == "very_cold"
    assert analysis.time_of_day.period == "morning"
    items = [rec.item for rec in result["recommendations"]]
    assert "Heavy winter coat" in items
    assert result["outfit"].clothing == "hoodie"


def test_feedback_changes_following_recommendations() -> None:
    app = _app()
    before = app.recommend(SNOW_PAYLOAD)["recommendations"]
    gloves = next(rec for rec in before if rec.item == "Insulated gloves")

    for _ in range(5):
        app.record_feedback(gloves, "worn", {"temperature": 2, "condition": "Snow"})

    after = app.recommend(SNOW_PAYLOAD)["recommendations"]
    boosted = next(rec for rec in after if rec.item == "Insulated gloves")
    assert boosted.adjusted_priority > gloves.adjusted_priority
    assert boosted.personalization_score == pytest.approx(1.5)


def test_learning_survives_restart_with_json_store(tmp_path: Path) -> None:
    store_dir = tmp_path / "store"
    config = WeatherWearConfig(store_backend="json", store_path=str(store_dir))
    first = WeatherWearApp(config=config, clock=lambda: NOW)
    first.record_feedback({"item": "Winter hat", "category": "head"}, "like", {"temperature": -2, "condition": "Snow"})

    second = WeatherWearApp(config=config, clock=lambda: NOW)

    assert second.engine.profile.item_preference("Winter hat") == pytest.approx(1.05)
    assert len(second.learner.feedback_history) == 1
    assert json.loads((store_dir / f"{MODEL_WEIGHTS_KEY}.json").read_text())


def test_facade_exposes_insights_analytics_and_data_management() -> None:
    app = _app()
    app.record_feedback({"item": "Scarf", "category": "accessories"}, "like", {"temperature": 3})

    assert app.get_personalized_insights()["data_points"] == 1
    assert app.get_session_analytics()["liked"] == 1

    exported = app.export_user_data()
    app.clear_all_data()
    assert app.export_user_data()["data_points"] == 0

    assert app.import_user_data(exported)["success"] is True
    assert app.engine.profile.item_preference("Scarf") == pytest.approx(1.05)

    app.reset_session()
    assert app.get_session_analytics() is None


def test_map_to_outfit_and_generate_recommendations_via_facade() -> None:
    app = _app()
    analysis = app.analyze(SNOW_PAYLOAD)
    recommendations = app.generate_recommendations(analysis)

    assert app.map_to_outfit([], 2, "Snow").top == "winterHat01"
    assert app.map_to_outfit(recommendations, 2, "Snow").clothing == "hoodie"


def test_seasonal_patterns_through_facade() -> None:
    app = _app()
    for _ in range(5):
        app.analyze(SNOW_PAYLOAD)

    patterns = app.get_seasonal_patterns()
    assert patterns["season"] == "winter"
    assert patterns["rain_frequency"] == 1.0


def test_malformed_snapshot_falls_back_to_mild_weather() -> None:
    result = _app().recommend({"current": {"temperature": "hot"}})
    items = {rec.item for rec in result["recommendations"]}
    assert "T-shirt or blouse" in items


def test_null_humidity_and_wind_keep_the_real_weather() -> None:
    payload = {
        "location": "Oslo",
        "current": {"temperature": -8, "condition": "Snow", "humidity": None, "windSpeed": None},
        "forecast": [{"day": "Mon", "temperature": None, "condition": "Snow"}],
    }

    result = _app().recommend(payload)

    current = result["analysis"].current_conditions
    assert current.temperature == -8
    assert current.temp_category == "freezing"
    assert "Heavy winter coat" in {rec.item for rec in result["recommendations"]}
    assert (result["outfit"].clothing, result["outfit"].clothing_color) == ("hoodie", "gray01")


def test_build_store_backends(tmp_path: Path) -> None:
    assert isinstance(build_store(WeatherWearConfig(store_backend="memory")), InMemoryKeyValueStore)
    json_store = build_store(WeatherWearConfig(store_backend="json", store_path=str(tmp_path / "j")))
    assert isinstance(json_store, JSONFileKeyValueStore)
    sqlite_store = build_store(WeatherWearConfig(store_backend="sqlite", store_path=str(tmp_path / "w.db")))
    assert isinstance(sqlite_store, SQLiteKeyValueStore)

    with pytest.raises(ValueError):
        build_store(WeatherWearConfig(store_backend="redis"))


def test_config_from_env_merges_yaml_and_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_dir = tmp_path / "environments"
    config_dir.mkdir()
    (config_dir / "staging.yaml").write_text(
        "# staging\nstore_backend: sqlite\nstore_path: 'data/staging.db'\nlearning_rate: 0.2\n"
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("WEAR_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("APP_CONFIG_PATH", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.delenv("STORE_BACKEND", raising=False)
    monkeypatch.delenv("STORE_PATH", raising=False)
    monkeypatch.delenv("LEARNING_RATE", raising=False)

    config = WeatherWearConfig.from_env()

    assert config.store_backend == "sqlite"
    assert config.resolved_store_path == "data/staging.db"
    assert config.learning_rate == 0.2
    assert config.log_level == "DEBUG"
    assert config.environment == "staging"


def test_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("APP_ENV", "APP_CONFIG_PATH", "STORE_BACKEND", "STORE_PATH", "LEARNING_RATE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    config = WeatherWearConfig.from_env()

    assert config.store_backend == "json"
    assert config.resolved_store_path == "data/store"
    assert config.learning_rate == 0.1
    assert WeatherWearConfig(store_backend="sqlite").resolved_store_path == "data/weatherwear.db"


def test_log_records_are_json_and_redacted() -> None:
    record = logging.LogRecord("wear", logging.INFO, __file__, 1, "feedback_recorded", None, None)
    record.event = "feedback_recorded"
    record.session_id = "session_123"
    payload = json.loads(JsonFormatter().format(record))

    assert payload["event"] == "feedback_recorded"
    assert payload["session_id"] == "[redacted]"
    assert redact_for_log({"location": "Oslo", "nested": [{"store_path": "/tmp/x"}]}) == {
        "location": "[redacted]",
        "nested": [{"store_path": "[redacted]"}],
    }
