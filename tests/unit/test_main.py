"""Unit tests for the process launcher settings."""

import sys

import pytest
import pytest_check as check
from pydantic import ValidationError

from chatrelay.main import ServerSettings, api_command, ui_command, ui_environment


@pytest.fixture(autouse=True)
def server_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("RUN_MODE", "HOST", "PORT", "UI_PORT", "LOG_LEVEL", "API_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


class TestServerSettings:
    """Tests for environment-driven launcher settings."""

    def test_defaults(self) -> None:
        settings = ServerSettings()

        check.equal(settings.run_mode, "integrated")
        check.equal(settings.host, "0.0.0.0")
        check.equal(settings.port, 8000)
        check.equal(settings.ui_port, 8080)
        check.equal(settings.log_level, "INFO")
        check.equal(settings.relay_url(), "http://localhost:8000")

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RUN_MODE", "Separate")
        monkeypatch.setenv("HOST", "127.0.0.1")
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("UI_PORT", "9001")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = ServerSettings()

        check.equal(settings.run_mode, "separate")
        check.equal(settings.host, "127.0.0.1")
        check.equal(settings.port, 9000)
        check.equal(settings.ui_port, 9001)
        check.equal(settings.log_level, "DEBUG")
        check.equal(settings.relay_url(), "http://localhost:9000")

    def test_explicit_api_base_url_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_BASE_URL", "http://relay.internal:8000")

        assert ServerSettings().relay_url() == "http://relay.internal:8000"

    def test_unknown_run_mode_is_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RUN_MODE", "cluster")

        with pytest.raises(ValidationError):
            ServerSettings()


class TestSeparateMode:
    """Tests for the child process commands."""

    def test_api_command_uses_configured_address(self) -> None:
        """API process binds HOST:PORT and does not auto-reload."""
        settings = ServerSettings(host="127.0.0.1", port=9000, log_level="warning")

        command = api_command(settings)

        check.equal(command[:4], [sys.executable, "-m", "uvicorn", "chatrelay.api.app:app"])
        check.equal(command[command.index("--host") + 1], "127.0.0.1")
        check.equal(command[command.index("--port") + 1], "9000")
        check.equal(command[command.index("--log-level") + 1], "warning")
        check.is_not_in("--reload", command)

    def test_ui_process_points_at_api(self) -> None:
        settings = ServerSettings(host="127.0.0.1", port=9000, ui_port=9001)

        env = ui_environment(settings)

        check.equal(ui_command(), [sys.executable, "-m", "chatrelay.ui.chat_page"])
        check.equal(env["HOST"], "127.0.0.1")
        check.equal(env["UI_PORT"], "9001")
        check.equal(env["API_BASE_URL"], "http://localhost:9000")
