import pytest
from pydantic import ValidationError

from app.config import Settings


def test_settings_read_env_file(tmp_path, monkeypatch):
    for name in ("TOKEN_TTL_MINUTES", "MIN_SLIP_TOTAL_ODDS", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "TOKEN_TTL_MINUTES=30\n"
        "MIN_SLIP_TOTAL_ODDS=2.0\n"
        "CORS_ORIGINS=https://tipstorm.app, http://localhost:5173\n"
    )

    settings = Settings(_env_file=str(env_file))

    assert settings.token_ttl_minutes == 30
    assert settings.min_slip_total_odds == 2.0
    assert settings.cors_origins == ["https://tipstorm.app", "http://localhost:5173"]


def test_database_url_validation(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db/tips")
    assert Settings(_env_file=None).database_url == "postgresql://u:p@db/tips"

    monkeypatch.setenv("DATABASE_URL", "mysql://u:p@db/tips")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_admin_email_is_normalized(monkeypatch):
    monkeypatch.setenv("ADMIN_EMAIL", " Boss@TipStorm.app ")
    assert Settings(_env_file=None).admin_email == "boss@tipstorm.app"
