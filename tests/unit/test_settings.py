"""Tests for configuration settings."""
import pytest
from pydantic import ValidationError

from calendar_nodes.config.settings import Settings, get_settings, reset_settings


class TestSettings:
    """Test Settings configuration."""

    def test_settings_default_values(self, monkeypatch):
        """Test default values are set correctly."""
        monkeypatch.delenv("CALENDAR_NODES_ACCESS_TOKEN", raising=False)

        settings = Settings()

        # env is set to 'test' in conftest.py
        assert settings.env in ("development", "test")
        assert settings.log_level == "INFO"
        assert settings.calendar_id == "primary"
        assert settings.application_name == "calendar-nodes"
        assert settings.service_account_file is None
        assert settings.delegated_subject is None
        assert settings.access_token is None
        assert settings.api_base_url == "https://www.googleapis.com/calendar/v3"
        assert settings.http_timeout_s == 30
        assert settings.default_max_results == 10

    def test_settings_env_prefix(self, monkeypatch):
        """Test that CALENDAR_NODES_ prefix works for environment variables."""
        monkeypatch.setenv("CALENDAR_NODES_ENV", "production")
        monkeypatch.setenv("CALENDAR_NODES_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CALENDAR_NODES_CALENDAR_ID", "team@group.calendar.google.com")
        monkeypatch.setenv("CALENDAR_NODES_SERVICE_ACCOUNT_FILE", "/keys/sa.json")

        settings = Settings()

        assert settings.env == "production"
        assert settings.log_level == "DEBUG"
        assert settings.calendar_id == "team@group.calendar.google.com"
        assert settings.service_account_file == "/keys/sa.json"

    def test_access_token_is_secret(self, monkeypatch):
        monkeypatch.setenv("CALENDAR_NODES_ACCESS_TOKEN", "ya29.secret")

        settings = Settings()

        assert settings.access_token.get_secret_value() == "ya29.secret"
        assert "ya29.secret" not in repr(settings)

    @pytest.mark.parametrize("field", ["http_timeout_s", "default_max_results"])
    @pytest.mark.parametrize("value", [0, -1])
    def test_positive_validation(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})

    def test_get_settings_is_cached(self):
        first = get_settings()

        assert get_settings() is first

        reset_settings()
        assert get_settings() is not first
