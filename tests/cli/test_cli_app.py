"""
Tests for the commuteopt CLI
"""

import importlib
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from commuteopt.cli.app import app, build_provider
from commuteopt.core.errors import GovernorDeniedError, ProviderError
from commuteopt.directions.client import GoogleDirectionsClient, ProxyDirectionsClient, TravelTimeProvider
from commuteopt.settings import AppSettings

runner = CliRunner()

# The package re-exports the Typer app under the module's name
cli_module = importlib.import_module("commuteopt.cli.app")


class StaticProvider(TravelTimeProvider):
    """Provider answering 20 minutes, 25 at 07:15"""

    def __init__(self, error=None, failing_origin=None):
        self.error = error
        self.failing_origin = failing_origin
        self.calls = 0

    async def get_duration(self, origin, destination, departure_time, traffic_model):
        self.calls += 1
        if self.error and self.failing_origin in (None, origin):
            raise self.error
        return 1500 if departure_time.minute == 15 else 1200


@pytest.fixture
def config_dir(tmp_path):
    result = runner.invoke(
        app,
        [
            "setup",
            "--home", "10 High St, Oxford",
            "--work", "1 Park Rd, Oxford",
            "--morning", "07:00-07:30",
            "--evening", "17:00-17:30",
            "--config-dir", str(tmp_path),
        ],
    )
    assert result.exit_code == 0
    return tmp_path


def _invoke_analyze(config_dir, provider, *args):
    with patch.object(cli_module, "build_provider", return_value=provider), \
         patch.object(cli_module, "get_settings", return_value=AppSettings(pacing_delay=0)):
        return runner.invoke(app, ["analyze", "--day", "1", "--config-dir", str(config_dir), *args])


class TestProfileCommands:
    """Test setup, show-config and clear"""

    def test_setup_and_show(self, config_dir):
        """Test saved profile is displayed"""
        result = runner.invoke(app, ["show-config", "--config-dir", str(config_dir)])

        assert result.exit_code == 0
        assert "10 High St, Oxford" in result.output
        assert "7:00 AM - 7:30 AM" in result.output
        assert "best_guess" in result.output

    def test_setup_keeps_existing_settings(self, config_dir):
        """Test re-running setup only changes what is given"""
        result = runner.invoke(
            app,
            ["setup", "--home", "New Home", "--work", "New Work", "--config-dir", str(config_dir)],
        )
        assert result.exit_code == 0

        result = runner.invoke(app, ["show-config", "--config-dir", str(config_dir)])
        assert "New Home" in result.output
        assert "7:00 AM - 7:30 AM" in result.output

    def test_setup_invalid_model(self, tmp_path):
        """Test unknown traffic model"""
        result = runner.invoke(
            app,
            ["setup", "--home", "Home", "--work", "Work", "--model", "fastest", "--config-dir", str(tmp_path)],
        )

        assert result.exit_code == 1
        assert "Invalid profile" in result.output

    def test_show_without_profile(self, tmp_path):
        """Test show-config before setup"""
        result = runner.invoke(app, ["show-config", "--config-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert "No commute profile found" in result.output

    def test_clear(self, config_dir):
        """Test profile deletion"""
        result = runner.invoke(app, ["clear", "--yes", "--config-dir", str(config_dir)])

        assert result.exit_code == 0
        assert "Profile deleted" in result.output
        assert not (config_dir / "profile.yaml").exists()


class TestDaysCommand:
    """Test days command"""

    def test_days(self):
        """Test the upcoming days table"""
        result = runner.invoke(app, ["days"])

        assert result.exit_code == 0
        assert "Upcoming Days" in result.output


class TestAnalyzeCommand:
    """Test analyze command"""

    def test_analyze_morning(self, config_dir):
        """Test recommendation for one direction"""
        provider = StaticProvider()

        result = _invoke_analyze(config_dir, provider, "--direction", "morning")

        assert result.exit_code == 0
        assert "Best time" in result.output
        assert "7:00 AM" in result.output
        assert "Save 5 min" in result.output
        assert provider.calls == 3

    def test_analyze_both_compare_all(self, config_dir):
        """Test both windows with every traffic model"""
        provider = StaticProvider()

        result = _invoke_analyze(config_dir, provider, "--compare-all")

        assert result.exit_code == 0
        assert "Morning" in result.output
        assert "Evening" in result.output
        assert provider.calls == 18

    def test_analyze_all_failed(self, config_dir):
        """Test provider failures end the command with an error"""
        provider = StaticProvider(error=ProviderError("Google API error: ZERO_RESULTS"))

        result = _invoke_analyze(config_dir, provider, "--direction", "evening")

        assert result.exit_code == 1
        assert "Google API error: ZERO_RESULTS" in result.output

    def test_analyze_renders_finished_direction_on_denial(self, config_dir):
        """Test the morning result is shown when the evening run is rate limited"""
        provider = StaticProvider(
            error=GovernorDeniedError("Rate limit exceeded.", retry_after=30),
            failing_origin="1 Park Rd, Oxford",
        )

        result = _invoke_analyze(config_dir, provider)

        assert result.exit_code == 1
        assert "Best time" in result.output
        assert "Morning" in result.output
        assert "Rate limit exceeded." in result.output
        assert "Analysis complete" not in result.output
        assert provider.calls == 4

    def test_analyze_invalid_direction(self, config_dir):
        """Test unknown direction"""
        result = _invoke_analyze(config_dir, StaticProvider(), "--direction", "sideways")

        assert result.exit_code == 1
        assert "Invalid direction" in result.output

    def test_analyze_without_profile(self, tmp_path):
        """Test analyze before setup"""
        result = _invoke_analyze(tmp_path, StaticProvider())

        assert result.exit_code == 1
        assert "No commute profile found" in result.output


class TestCallback:
    """Test global options"""

    def test_log_level_from_settings(self):
        """Test logging follows the configured level without --verbose"""
        with patch.object(cli_module, "configure_logging") as configure, \
             patch.object(cli_module, "get_settings", return_value=AppSettings(log_level="ERROR")):
            result = runner.invoke(app, ["days"])

        assert result.exit_code == 0
        configure.assert_called_once_with("ERROR")

    def test_verbose_overrides_settings(self):
        """Test --verbose forces debug logging"""
        with patch.object(cli_module, "configure_logging") as configure, \
             patch.object(cli_module, "get_settings", return_value=AppSettings(log_level="ERROR")):
            result = runner.invoke(app, ["-v", "days"])

        assert result.exit_code == 0
        configure.assert_called_once_with("DEBUG")


class TestServeCommand:
    """Test serve command"""

    def test_serve_trusts_configured_proxies(self):
        """Test uvicorn takes client addresses from forwarded headers only for trusted proxies"""
        settings = AppSettings(forwarded_allow_ips="10.0.0.1")

        with patch("uvicorn.run") as run, patch.object(cli_module, "get_settings", return_value=settings):
            result = runner.invoke(app, ["serve", "--port", "9000"])

        assert result.exit_code == 0
        run.assert_called_once()
        kwargs = run.call_args.kwargs
        assert run.call_args.args == ("commuteopt.server.app:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["port"] == 9000
        assert kwargs["proxy_headers"] is True
        assert kwargs["forwarded_allow_ips"] == "10.0.0.1"


class TestBuildProvider:
    """Test provider selection"""

    def test_proxy_by_default(self):
        """Test the proxy client is the default"""
        provider = build_provider(AppSettings(proxy_url="http://proxy.local"), direct=False, proxy_url=None)

        assert isinstance(provider, ProxyDirectionsClient)
        assert provider.base_url == "http://proxy.local"

    def test_direct(self):
        """Test --direct uses the API key"""
        provider = build_provider(AppSettings(google_api_key="test_key"), direct=True, proxy_url=None)

        assert isinstance(provider, GoogleDirectionsClient)
        assert provider.api_key == "test_key"
