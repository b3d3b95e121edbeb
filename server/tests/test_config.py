"""
Unit tests for environment-driven configuration.
"""

from deepscan.config import AppConfig


class TestAppConfig:
    """Tests for AppConfig.from_env."""

    def test_defaults_without_overrides(self, monkeypatch):
        for name in ("DEEPSCAN_HEADLESS", "DEEPSCAN_SCAN_NAVIGATION_TIMEOUT_MS", "DEEPSCAN_CLICK_TIMEOUT_MS"):
            monkeypatch.delenv(name, raising=False)

        app_config = AppConfig.from_env()

        assert app_config.browser.HEADLESS is True
        assert app_config.browser.SCAN_NAVIGATION_TIMEOUT_MS == 30000
        assert app_config.interaction.CLICK_TIMEOUT_MS == 2000

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DEEPSCAN_HEADLESS", "false")
        monkeypatch.setenv("DEEPSCAN_SCAN_NAVIGATION_TIMEOUT_MS", "45000")
        monkeypatch.setenv("DEEPSCAN_CLICK_TIMEOUT_MS", "750")

        app_config = AppConfig.from_env()

        assert app_config.browser.HEADLESS is False
        assert app_config.browser.SCAN_NAVIGATION_TIMEOUT_MS == 45000
        assert app_config.interaction.CLICK_TIMEOUT_MS == 750

    def test_cors_origins_from_environment(self, monkeypatch):
        monkeypatch.setenv("DEEPSCAN_CORS_ORIGINS", "https://a.example, https://b.example,")

        assert AppConfig.from_env().cors.ALLOWED_ORIGINS == ("https://a.example", "https://b.example")
