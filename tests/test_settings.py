"""
Tests for process settings
"""

from commuteopt.settings import AppSettings


class TestAppSettings:
    """Test AppSettings"""

    def test_pacing_follows_rate_limit(self):
        """Test the default pacing keeps one client within the per-minute limit"""
        assert AppSettings().pacing_delay == 1.0
        assert AppSettings(rate_limit_per_minute=30).pacing_delay == 2.0

    def test_explicit_pacing_kept(self):
        """Test a configured pacing delay is not overridden"""
        assert AppSettings(pacing_delay=0).pacing_delay == 0
        assert AppSettings(pacing_delay=2.5, rate_limit_per_minute=120).pacing_delay == 2.5

    def test_from_env(self, monkeypatch):
        """Test COMMUTEOPT_* variables are read"""
        monkeypatch.setenv("COMMUTEOPT_FORWARDED_ALLOW_IPS", "10.0.0.1,10.0.0.2")
        monkeypatch.setenv("COMMUTEOPT_RATE_LIMIT_PER_MINUTE", "120")
        monkeypatch.setenv("COMMUTEOPT_LOG_LEVEL", "WARNING")
        monkeypatch.delenv("COMMUTEOPT_PACING_DELAY", raising=False)

        settings = AppSettings.from_env()

        assert settings.forwarded_allow_ips == "10.0.0.1,10.0.0.2"
        assert settings.rate_limit_per_minute == 120
        assert settings.pacing_delay == 0.5
        assert settings.log_level == "WARNING"

    def test_forwarded_allow_ips_default(self):
        """Test only a local proxy is trusted by default"""
        assert AppSettings().forwarded_allow_ips == "127.0.0.1"
