"""Configuration helpers for the Virtual Closet app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_WEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
DEFAULT_CITY = "New York"


@dataclass
class ClosetConfig:
    """Configuration values for the Virtual Closet app.

    The weather credential is supplied at deploy time through the process
    environment (``OPENWEATHER_API_KEY``) and is never entered by the end user.
    ``default_latitude``/``default_longitude`` describe the device position; when
    either is missing the device reports no location.
    """

    weather_api_key: Optional[str] = None
    weather_base_url: str = DEFAULT_WEATHER_BASE_URL
    default_city: str = DEFAULT_CITY
    default_latitude: Optional[float] = None
    default_longitude: Optional[float] = None
    wardrobe_db_path: Optional[str] = None
    local_storage_path: Optional[str] = None
    request_timeout_seconds: float = 10.0
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "ClosetConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that the weather
        credential can be injected by the runtime environment.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("CLOSET_CONFIG_DIR", "config/environments"))
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

        weather_api_key = get_value("openweather_api_key")
        weather_base_url = get_value("weather_base_url", DEFAULT_WEATHER_BASE_URL)
        default_city = get_value("default_city", DEFAULT_CITY)
        wardrobe_db_path = get_value("wardrobe_db_path")
        local_storage_path = get_value("local_storage_path")
        timeout = get_value("request_timeout_seconds", "10")

        return cls(
            weather_api_key=weather_api_key or None,
            weather_base_url=str(weather_base_url or DEFAULT_WEATHER_BASE_URL).rstrip("/"),
            default_city=str(default_city or DEFAULT_CITY),
            default_latitude=cls._optional_float(get_value("default_latitude")),
            default_longitude=cls._optional_float(get_value("default_longitude")),
            wardrobe_db_path=wardrobe_db_path,
            local_storage_path=local_storage_path,
            request_timeout_seconds=float(timeout or 10),
            environment=env_name,
        )

    @staticmethod
    def _optional_float(value: Optional[str]) -> Optional[float]:
        if value is None or str(value).strip() == "":
            return None
        return float(value)

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
