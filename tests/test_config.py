import pytest

from config import DEFAULT_ORS_BASE_URL, Settings, load_settings


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("TASKS_API_URL", " https://store.example/exec ")
    monkeypatch.setenv("ORS_BASE_URL", "https://ors.example/")
    monkeypatch.setenv("ORS_API_KEY", "secret")
    monkeypatch.setenv("HOME_BASE_LAT", "12.9")
    monkeypatch.setenv("HOME_BASE_LNG", "77.6")
    monkeypatch.setenv("RELAY_MAX_WORKERS", "3")

    settings = load_settings()

    assert settings.tasks_api_url == "https://store.example/exec"
    assert settings.ors_base_url == "https://ors.example"
    assert settings.ors_api_key == "secret"
    assert (settings.home_base_lat, settings.home_base_lng) == (12.9, 77.6)
    assert settings.relay_max_workers == 3


def test_blank_values_fall_back_to_defaults(monkeypatch):
    for name in ("TASKS_API_URL", "ORS_BASE_URL", "ORS_API_KEY", "HOME_BASE_LAT", "HOME_BASE_LNG", "ROUTING_TIMEOUT"):
        monkeypatch.setenv(name, "")

    settings = load_settings()

    assert settings.tasks_api_url is None
    assert settings.ors_base_url == DEFAULT_ORS_BASE_URL
    assert settings.home_base_lat is None
    assert settings.routing_timeout == 15.0


def test_validate_rejects_half_a_home_base():
    with pytest.raises(ValueError):
        Settings(home_base_lat=12.9).validate()

    with pytest.raises(ValueError):
        Settings(routing_timeout=0).validate()
