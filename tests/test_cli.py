"""Tests for the Typer CLI."""

import httpx
import pytest
from typer.testing import CliRunner

from sonarrapi.cli.main import ExitCodes, app, get_exit_code_for_error
from sonarrapi.clients.sonarr import SonarrClient
from sonarrapi.utils.exceptions import (
    AuthenticationError,
    ConfigurationError,
    NetworkError,
    TimeoutError,
)

runner = CliRunner()


@pytest.fixture
def configured_env(monkeypatch, tmp_path, fake_sonarr):
    """Point the CLI at the fake Sonarr server via environment variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SONARR_URL", "http://sonarr.local:8989")
    monkeypatch.setenv("SONARR_API_KEY", "cli-key")
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.setattr(
        SonarrClient,
        "_new_client",
        lambda self: httpx.AsyncClient(transport=fake_sonarr.transport),
    )
    return fake_sonarr


@pytest.fixture
def unconfigured_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SONARR_URL", raising=False)
    monkeypatch.delenv("SONARR_API_KEY", raising=False)


class TestExitCodes:
    def test_error_mapping(self):
        assert get_exit_code_for_error(ConfigurationError("x")) == ExitCodes.CONFIGURATION_ERROR
        assert get_exit_code_for_error(NetworkError("x")) == ExitCodes.NETWORK_ERROR
        assert get_exit_code_for_error(TimeoutError("x")) == ExitCodes.NETWORK_ERROR
        assert get_exit_code_for_error(AuthenticationError("x")) == ExitCodes.API_ERROR
        assert get_exit_code_for_error(KeyboardInterrupt()) == ExitCodes.USER_INTERRUPTED
        assert get_exit_code_for_error(ValueError("x")) == ExitCodes.GENERAL_ERROR


class TestDataCommands:
    def test_tags(self, configured_env):
        configured_env.add("GET", "/api/v3/tag", body=[{"id": 1, "label": "anime"}])

        result = runner.invoke(app, ["tags"])

        assert result.exit_code == 0
        assert '"label": "anime"' in result.stdout
        assert configured_env.last_request.headers["X-Api-Key"] == "cli-key"

    def test_create_tag(self, configured_env):
        configured_env.add("POST", "/api/v3/tag", body={"id": 5, "label": "Pilot"})

        result = runner.invoke(app, ["create-tag", "Pilot"])

        assert result.exit_code == 0
        assert '"id": 5' in result.stdout
        assert configured_env.last_json() == {"label": "Pilot"}

    def test_series(self, configured_env):
        configured_env.add("GET", "/api/v3/series/133", body={"id": 133, "title": "The Expanse"})

        result = runner.invoke(app, ["series", "133"])

        assert result.exit_code == 0
        assert "The Expanse" in result.stdout

    def test_health_without_issues(self, configured_env):
        configured_env.add("GET", "/api/v3/health", body=[])

        result = runner.invoke(app, ["health"])

        assert result.exit_code == 0
        assert "no health issues" in result.stdout

    def test_failed_request_exits_with_api_error(self, configured_env):
        """Should report the typed error when Sonarr answers 404."""
        configured_env.add("GET", "/api/v3/series/9", status_code=404, body={"message": "NotFound"})

        result = runner.invoke(app, ["series", "9"])

        assert result.exit_code == ExitCodes.API_ERROR
        assert "Fetching series failed" in result.stdout
        assert "Verify the resource ID exists in Sonarr" in result.stdout

    def test_network_failure_exits_with_network_error(self, configured_env):
        """Should exit with the network code when Sonarr refuses the connection."""
        configured_env.fail("GET", "/api/v3/tag", httpx.ConnectError("refused"))

        result = runner.invoke(app, ["tags"])

        assert result.exit_code == ExitCodes.NETWORK_ERROR
        assert "Listing tags failed" in result.stdout
        assert "Verify SONARR_URL is correct" in result.stdout

    def test_rejected_api_key_shows_hints(self, configured_env):
        configured_env.add("GET", "/api/v3/health", status_code=401, body={"message": "Unauthorized"})

        result = runner.invoke(app, ["--correlation-id", "cli-req-1", "health"])

        assert result.exit_code == ExitCodes.API_ERROR
        assert "SONARR_API_KEY" in result.stdout
        assert "Severity: HIGH" in result.stdout
        assert "Correlation ID: cli-req-1" in result.stdout

    def test_verbose_traces_response(self, configured_env):
        configured_env.add("GET", "/api/v3/tag", body=[{"id": 1, "label": "anime"}])

        result = runner.invoke(app, ["--verbose", "tags"])

        assert result.exit_code == 0
        assert "Sonarr response" in result.output

    def test_missing_configuration(self, unconfigured_env):
        result = runner.invoke(app, ["tags"])

        assert result.exit_code == ExitCodes.CONFIGURATION_ERROR
        assert "SONARR_URL" in result.stdout


class TestStatusCommands:
    def test_status_ready(self, configured_env):
        configured_env.add("GET", "/api/v3/health", body=[])

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "Ready" in result.stdout

    def test_status_unreachable(self, configured_env):
        configured_env.fail("GET", "/api/v3/health", httpx.ConnectError("refused"))

        result = runner.invoke(app, ["status"])

        assert result.exit_code == ExitCodes.NETWORK_ERROR

    def test_status_unconfigured(self, unconfigured_env):
        result = runner.invoke(app, ["status"])

        assert result.exit_code == ExitCodes.CONFIGURATION_ERROR
        assert "Not Configured" in result.stdout

    def test_config_validate(self, configured_env):
        result = runner.invoke(app, ["config-validate"])

        assert result.exit_code == 0
        assert "http://sonarr.local:8989" in result.stdout

    def test_config_validate_warns_about_api_path(self, monkeypatch, configured_env):
        monkeypatch.setenv("SONARR_URL", "http://sonarr.local:8989/api/v3")

        result = runner.invoke(app, ["config-validate"])

        assert "should not include /api/v3" in result.stdout

    def test_config_validate_missing(self, unconfigured_env):
        result = runner.invoke(app, ["config-validate"])

        assert result.exit_code == ExitCodes.CONFIGURATION_ERROR
        assert "SONARR_API_KEY is not set" in result.stdout

    def test_config_file_option(self, unconfigured_env, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("SONARR_URL=http://from-file:8989\nSONARR_API_KEY=k\n")

        result = runner.invoke(app, ["--config", str(env_file), "config-validate"])

        assert result.exit_code == 0
        assert "http://from-file:8989" in result.stdout
