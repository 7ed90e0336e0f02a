"""Tests for settings loading."""

from pathlib import Path

import pytest

from prd_concierge.core.config import Settings, load_settings_from_env


class TestSettings:

    def test_defaults(self):
        settings = Settings()
        assert settings.session_timeout_minutes == 30
        assert settings.max_conversation_turns == 50
        assert settings.network_transport_enabled is False

    def test_invalid_log_format(self):
        with pytest.raises(ValueError):
            Settings(log_format="xml")

    def test_non_positive_timeout(self):
        with pytest.raises(ValueError):
            Settings(session_timeout_minutes=0)


class TestLoadFromEnv:

    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SESSION_TIMEOUT_MINUTES", "5")
        monkeypatch.setenv("MIN_CONFIDENCE_FOR_PRD", "80")
        monkeypatch.setenv("LLM_TIMEOUT_SECONDS", "12.5")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("PERSONAS_DIR", str(tmp_path))

        settings = load_settings_from_env()

        assert settings.session_timeout_minutes == 5
        assert settings.min_confidence_for_prd == 80
        assert settings.llm_timeout_seconds == 12.5
        assert settings.network_transport_enabled is True
        assert settings.personas_dir == Path(tmp_path)

    def test_empty_api_key_disables_network(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "")
        assert load_settings_from_env().openai_api_key is None

    def test_invalid_integer(self, monkeypatch):
        monkeypatch.setenv("PORT", "eighty")
        with pytest.raises(ValueError):
            load_settings_from_env()
