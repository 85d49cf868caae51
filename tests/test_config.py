"""Settings tests."""

import pytest

from eduassist import config
from eduassist.config import Settings, sanitize_error


def test_database_urls_from_parts():
    settings = Settings(postgres_user="u", postgres_password="p", postgres_host="db", postgres_port=5433, postgres_db="edu")

    assert settings.database_url == "postgresql+asyncpg://u:p@db:5433/edu"
    assert settings.database_url_sync == "postgresql://u:p@db:5433/edu"
    assert settings.database_requires_ssl is False


@pytest.mark.parametrize("scheme", ["postgres", "postgresql", "postgresql+asyncpg"])
def test_database_url_override(scheme):
    settings = Settings(database_url_override=f"{scheme}://u:p@host.neon.tech/edu?sslmode=require")

    assert settings.database_url == "postgresql+asyncpg://u:p@host.neon.tech/edu"
    assert settings.database_url_sync == "postgresql://u:p@host.neon.tech/edu?sslmode=require"
    assert settings.database_requires_ssl is True


def test_sanitize_error_hides_detail_outside_development(monkeypatch):
    monkeypatch.setattr(config, "get_settings", lambda: Settings(environment="production"))

    assert sanitize_error(RuntimeError("password=hunter2"), generic_message="oops") == "oops"
