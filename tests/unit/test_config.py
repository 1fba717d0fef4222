"""Unit tests for RelayConfig.

Tests configuration validation and environment loading.
"""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from chatrelay.relay.config import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    RelayConfig,
    get_relay_config,
)


class TestRelayConfig:
    """Tests for RelayConfig validation."""

    def test_valid_config_with_all_fields(self) -> None:
        """Config accepts valid values for all fields."""
        config = RelayConfig(
            api_key="sk-test-key-12345",
            base_url="https://api.example.com/v1",
            model_name="gpt-4o-mini",
            timeout=30.0,
        )

        assert config.api_key == "sk-test-key-12345"
        assert config.base_url == "https://api.example.com/v1"
        assert config.model_name == "gpt-4o-mini"
        assert config.timeout == 30.0

    def test_config_with_default_values(self) -> None:
        """Config targets OpenRouter when only the API key is provided."""
        config = RelayConfig(api_key="sk-test-key")

        assert config.base_url == DEFAULT_BASE_URL
        assert config.model_name == DEFAULT_MODEL
        assert config.timeout == 120.0
        assert config.completions_url == "https://openrouter.ai/api/v1/chat/completions"

    def test_config_fails_with_missing_api_key(self) -> None:
        """Config raises ValidationError when API key is missing."""
        with pytest.raises(ValidationError) as exc_info:
            RelayConfig(api_key="")

        assert "API key required" in str(exc_info.value)

    def test_config_fails_with_whitespace_api_key(self) -> None:
        """Config rejects whitespace-only API key."""
        with pytest.raises(ValidationError) as exc_info:
            RelayConfig(api_key="   ")

        assert "API key required" in str(exc_info.value)

    def test_config_strips_api_key_whitespace(self) -> None:
        """Config strips leading/trailing whitespace from API key."""
        config = RelayConfig(api_key="  sk-test-key  ")

        assert config.api_key == "sk-test-key"

    def test_base_url_trailing_slash_is_dropped(self) -> None:
        """Completions URL never contains a double slash."""
        config = RelayConfig(api_key="sk-test", base_url="https://api.example.com/v1/")

        assert config.completions_url == "https://api.example.com/v1/chat/completions"

    def test_config_fails_with_non_positive_timeout(self) -> None:
        """Config rejects a timeout of zero."""
        with pytest.raises(ValidationError) as exc_info:
            RelayConfig(api_key="sk-test", timeout=0)

        assert "timeout" in str(exc_info.value).lower()


class TestGetRelayConfig:
    """Tests for get_relay_config factory function."""

    def test_get_config_from_environment(self) -> None:
        """get_relay_config reads provider settings from environment."""
        env = {
            "OPENROUTER_API_KEY": "sk-env-key",
            "LLM_BASE_URL": "http://localhost:11434/v1",
            "LLM_MODEL": "llama3",
        }
        with patch.dict("os.environ", env):
            config = get_relay_config()

        assert config.api_key == "sk-env-key"
        assert config.base_url == "http://localhost:11434/v1"
        assert config.model_name == "llama3"

    def test_falls_back_to_generic_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LLM_API_KEY is used when OPENROUTER_API_KEY is absent."""
        monkeypatch.delenv("OPENROUTER_API_KEY")
        monkeypatch.setenv("LLM_API_KEY", "sk-generic")

        assert get_relay_config().api_key == "sk-generic"

    def test_empty_primary_key_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An OPENROUTER_API_KEY set to an empty string counts as unset."""
        monkeypatch.setenv("OPENROUTER_API_KEY", "")
        monkeypatch.setenv("LLM_API_KEY", "sk-generic")

        assert get_relay_config().api_key == "sk-generic"

    def test_key_is_read_at_call_time(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A changed environment is picked up by the next call."""
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-first")
        first = get_relay_config()
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-second")

        assert first.api_key == "sk-first"
        assert get_relay_config().api_key == "sk-second"

    def test_get_config_fails_without_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """get_relay_config raises when no key is configured."""
        monkeypatch.delenv("OPENROUTER_API_KEY")

        with pytest.raises(ValidationError):
            get_relay_config()
