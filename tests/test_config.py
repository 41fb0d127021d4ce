import json
import logging

from career_coach.core.config import get_settings, load_settings, reset_settings_cache
from career_coach.core.logging import JSONFormatter


def test_defaults(monkeypatch):
    for name in ("DATA_PROVIDER", "APP_ENV", "LOG_FORMAT", "CORS_ORIGINS", "OPENAI_MODEL", "DB_PATH"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.data_provider == "sqlite"
    assert settings.environment == "development"
    assert settings.log_format == "text"
    assert settings.openai_model == "gpt-4o"
    assert settings.openai_api_key is None
    assert settings.roadmap_fallback_enabled is True
    assert settings.atomic_regeneration is False
    assert settings.db_path.endswith("career_coach.db")
    assert settings.cors_origins == ["http://localhost:3000"]


def test_invalid_enum_values_fall_back(monkeypatch):
    monkeypatch.setenv("DATA_PROVIDER", "postgres")
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("LOG_FORMAT", "xml")

    settings = load_settings()

    assert settings.data_provider == "sqlite"
    assert settings.environment == "development"
    assert settings.log_format == "text"


def test_flags_and_lists(monkeypatch):
    monkeypatch.setenv("ROADMAP_FALLBACK_ENABLED", "false")
    monkeypatch.setenv("ATOMIC_REGENERATION", "YES")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example ,")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("APP_ENV", "production")

    settings = load_settings()

    assert settings.roadmap_fallback_enabled is False
    assert settings.atomic_regeneration is True
    assert settings.cors_origins == ["http://a.example", "http://b.example"]
    assert settings.openai_api_key == "sk-test"
    assert settings.is_production is True


def test_settings_are_cached_until_reset(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("DATA_PROVIDER", "sqlite")
    assert get_settings() is first

    reset_settings_cache()
    assert get_settings().data_provider == "sqlite"


def test_json_formatter_includes_extras():
    record = logging.LogRecord("career_coach.test", logging.INFO, __file__, 1, "hello %s", ("there",), None)
    record.roadmap_id = "r1"

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "hello there"
    assert data["level"] == "INFO"
    assert data["logger"] == "career_coach.test"
    assert data["roadmap_id"] == "r1"
