"""Configuration helpers for the WeatherWear app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_STORE_BACKEND = "json"
DEFAULT_JSON_STORE_PATH = "data/store"
DEFAULT_SQLITE_STORE_PATH = "data/weatherwear.db"
DEFAULT_LEARNING_RATE = 0.1


@dataclass
class WeatherWearConfig:
    """Configuration values for the recommendation pipeline.

    Only the persistence wiring and a handful of tuning knobs are configurable;
    the scoring tables themselves are fixed in code.
    """

    store_backend: str = DEFAULT_STORE_BACKEND
    store_path: Optional[str] = None
    learning_rate: float = DEFAULT_LEARNING_RATE
    log_level: str = "INFO"
    environment: str | None = None

    @property
    def resolved_store_path(self) -> str:
        if self.store_path:
            return self.store_path
        if self.store_backend == "sqlite":
            return DEFAULT_SQLITE_STORE_PATH
        return DEFAULT_JSON_STORE_PATH

    @classmethod
    def from_env(cls) -> "WeatherWearConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables, which win.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("WEAR_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        store_backend = get_value("store_backend", DEFAULT_STORE_BACKEND)
        store_path = get_value("store_path")
        raw_learning_rate = get_value("learning_rate")
        log_level = get_value("log_level", "INFO")

        try:
            learning_rate = float(raw_learning_rate) if raw_learning_rate else DEFAULT_LEARNING_RATE
        except ValueError:
            learning_rate = DEFAULT_LEARNING_RATE

        return cls(
            store_backend=str(store_backend or DEFAULT_STORE_BACKEND).lower(),
            store_path=store_path,
            learning_rate=learning_rate,
            log_level=str(log_level or "INFO").upper(),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
