"""
Bootstrap checks for the Virtual Closet: configuration loading and app wiring.
"""

from importlib import import_module
from typing import Tuple

import pytest

from closet_app.app import VirtualClosetApp
from closet_app.config import DEFAULT_CITY, ClosetConfig
from memory.local_storage import InMemoryLocalStorage
from tools.geolocation import StaticGeolocationProvider
from tools.wardrobe_store import SQLiteWardrobeStore
from tools.weather_provider import MockWeatherProvider, OpenWeatherProvider


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in (
        "APP_ENV",
        "APP_CONFIG_PATH",
        "CLOSET_CONFIG_DIR",
        "OPENWEATHER_API_KEY",
        "WEATHER_BASE_URL",
        "DEFAULT_CITY",
        "DEFAULT_LATITUDE",
        "DEFAULT_LONGITUDE",
        "WARDROBE_DB_PATH",
        "LOCAL_STORAGE_PATH",
        "REQUEST_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_config_defaults(clean_env: pytest.MonkeyPatch) -> None:
    config = ClosetConfig.from_env()

    assert config.weather_api_key is None
    assert config.default_city == DEFAULT_CITY
    assert config.default_latitude is None


def test_config_reads_yaml_then_environment(clean_env: pytest.MonkeyPatch, tmp_path) -> None:
    config_file = tmp_path / "dev.yaml"
    config_file.write_text(
        "openweather_api_key: from-yaml\n"
        "default_city: Lisbon\n"
        "default_latitude: 38.7\n"
        "default_longitude: -9.1\n"
    )
    clean_env.setenv("CLOSET_CONFIG_DIR", str(tmp_path))
    clean_env.setenv("APP_ENV", "dev")
    clean_env.setenv("OPENWEATHER_API_KEY", "from-env")

    config = ClosetConfig.from_env()

    assert config.weather_api_key == "from-env"
    assert config.default_city == "Lisbon"
    assert config.default_latitude == 38.7
    assert config.default_longitude == -9.1
    assert config.environment == "dev"


def test_app_wires_default_collaborators(tmp_path) -> None:
    config = ClosetConfig(
        weather_api_key="key",
        wardrobe_db_path=str(tmp_path / "closet.db"),
        local_storage_path=str(tmp_path / "local.json"),
        default_latitude=1.0,
        default_longitude=2.0,
    )

    app = VirtualClosetApp(config)

    assert isinstance(app.store, SQLiteWardrobeStore)
    assert isinstance(app.weather_provider, OpenWeatherProvider)
    assert app.weather_provider.api_key == "key"
    assert isinstance(app.geolocation, StaticGeolocationProvider)
    assert app.geolocation.current_position().latitude == 1.0
    assert app.current_user is None


def test_signup_loads_closet_and_weather(store) -> None:
    provider = MockWeatherProvider()
    app = VirtualClosetApp(
        ClosetConfig(weather_api_key="key"),
        store=store,
        local_storage=InMemoryLocalStorage(),
        weather_provider=provider,
    )

    user = app.signup({"name": "Ada", "email": "ada@example.com", "password": "secret1", "confirm_password": "secret1"})

    assert app.closet_agent.user_id == user.id
    assert app.weather_agent.current is not None
    assert provider.calls

    app.logout()
    assert app.closet_agent.user_id is None
    assert app.current_user is None


@pytest.mark.parametrize(
    "module_path, public_members",
    [
        ("agents.orchestrator", ("OrchestratorAgent",)),
        ("agents.closet_agent", ("ClosetAgent",)),
        ("agents.weather_agent", ("WeatherAgent",)),
        ("agents.auth_agent", ("AuthAgent",)),
    ],
)
def test_agent_modules_export_expected_members(module_path: str, public_members: Tuple[str, ...]) -> None:
    """Agent modules should import cleanly and expose expected classes."""

    module = import_module(module_path)
    for member in public_members:
        assert hasattr(module, member), f"{module_path} is missing {member}"


@pytest.mark.parametrize(
    "module_path, public_members",
    [
        ("tools.weather_provider", ("WeatherProvider", "OpenWeatherProvider", "MockWeatherProvider")),
        ("tools.wardrobe_store", ("WardrobeStore", "SQLiteWardrobeStore")),
        ("tools.geolocation", ("GeolocationProvider", "StaticGeolocationProvider")),
        ("memory.local_storage", ("LocalStorage", "SessionMarkerStore")),
    ],
)
def test_tool_modules_export_expected_members(module_path: str, public_members: Tuple[str, ...]) -> None:
    """Tool modules should import cleanly and expose expected members."""

    module = import_module(module_path)
    for member in public_members:
        assert hasattr(module, member), f"{module_path} is missing {member}"


def test_blank_location_keeps_weather_and_restore_working(store) -> None:
    storage = InMemoryLocalStorage()

    def build() -> VirtualClosetApp:
        return VirtualClosetApp(
            ClosetConfig(weather_api_key="key", default_city="Amsterdam"),
            store=store,
            local_storage=storage,
            weather_provider=MockWeatherProvider(),
        )

    app = build()
    app.signup({"name": "Ada", "email": "ada@example.com", "password": "secret1", "confirm_password": "secret1"})
    user = app.update_profile({"location": "   "})

    assert user.preferences.location is None
    assert app.retry_weather() is True

    restarted = build()
    assert restarted.restore_session() == user
    assert restarted.weather_agent.location.name == "Amsterdam"
