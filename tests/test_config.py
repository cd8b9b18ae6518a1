import pytest
from pydantic import ValidationError as SettingsValidationError

from core.config import Settings


def test_defaults(monkeypatch):
    for name in ("PORT", "HOST", "GRAPHIQL", "CORS_ALLOWED_ORIGINS", "LOG_LEVEL", "LOG_JSON"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.port == 3500
    assert settings.graphiql is True
    assert settings.cors_origins_list == ["*"]
    assert settings.log_level == "INFO"
    assert settings.log_json is False


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://tracker@db/issues")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "http://a.example, http://b.example,")

    settings = Settings(_env_file=None)

    assert settings.database_url == "postgresql://tracker@db/issues"
    assert settings.port == 8080
    assert settings.cors_origins_list == ["http://a.example", "http://b.example"]


def test_empty_database_url_rejected(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "   ")

    with pytest.raises(SettingsValidationError):
        Settings(_env_file=None)
