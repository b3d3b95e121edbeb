"""
Centralized configuration for the Deep Scan engine.

This module consolidates the timeouts, crawl limits and feature flags used
throughout the scanner, making it easier to tune the system's behavior.
"""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class BrowserConfig:
    """Headless browser configuration."""

    HEADLESS: bool = True
    LAUNCH_ARGS: tuple[str, ...] = ("--no-sandbox", "--disable-setuid-sandbox")

    # Crawl navigation (milliseconds)
    CRAWL_NAVIGATION_TIMEOUT_MS: int = 20000
    NETWORK_IDLE_TIMEOUT_MS: int = 5000

    # Per-page scan navigation (milliseconds)
    SCAN_NAVIGATION_TIMEOUT_MS: int = 30000
    SCAN_SETTLE_MS: int = 2000


@dataclass(frozen=True)
class InteractionConfig:
    """Timeouts for UI state transitions."""

    VISIBILITY_TIMEOUT_MS: int = 1000
    CLICK_TIMEOUT_MS: int = 2000
    SETTLE_MS: int = 500


@dataclass(frozen=True)
class CrawlConfig:
    """Frontier limits for page discovery."""

    PER_PAGE_URL_CAP: int = 30
    FRONTIER_CAP_MULTIPLIER: int = 2

    # Legacy (unbudgeted) crawls
    LEGACY_FRONTIER_MULTIPLIER: int = 20
    LEGACY_FRONTIER_FLOOR: int = 50
    LEGACY_LINK_MULTIPLIER: int = 5
    LEGACY_LINK_FLOOR: int = 10

    IMPORTANT_PATHS: tuple[str, ...] = (
        "/about",
        "/pricing",
        "/features",
        "/products",
        "/services",
        "/contact",
        "/blog",
    )
    IMPORTANT_PATH_SCORE: int = 100


@dataclass(frozen=True)
class ScreenshotConfig:
    """Preview screenshot settings."""

    TYPE: str = "jpeg"
    QUALITY: int = 80
    FULL_PAGE: bool = False


@dataclass(frozen=True)
class AuditConfig:
    """axe-core injection settings."""

    AXE_SCRIPT_PATH: str = field(
        default_factory=lambda: os.getenv(
            "DEEPSCAN_AXE_SCRIPT_PATH",
            os.path.join(os.getcwd(), "node_modules", "axe-core", "axe.min.js"),
        )
    )


@dataclass(frozen=True)
class SitemapConfig:
    """Sitemap fetching configuration."""

    REQUEST_TIMEOUT: int = 10
    CONNECT_TIMEOUT: int = 5
    MAX_CHILD_SITEMAPS: int = 3
    USER_AGENT: str = "DeepScan/1.0 (+accessibility audit)"


@dataclass(frozen=True)
class FeatureFlags:
    """Rollout flags. All default to off."""

    scan_profiles: bool = field(
        default_factory=lambda: os.getenv("DEEPSCAN_FEATURE_SCAN_PROFILES", "false").lower() == "true"
    )
    enterprise_gating: bool = field(
        default_factory=lambda: os.getenv("DEEPSCAN_FEATURE_ENTERPRISE_GATING", "false").lower() == "true"
    )


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration for the dashboard frontend."""

    ALLOWED_ORIGINS: tuple[str, ...] = field(
        default_factory=lambda: tuple(
            origin.strip()
            for origin in os.getenv("DEEPSCAN_CORS_ORIGINS", "http://localhost:3000").split(",")
            if origin.strip()
        )
    )


@dataclass
class AppConfig:
    """
    Main application configuration.

    Aggregates all configuration sections and provides environment-based overrides.
    """

    browser: BrowserConfig = field(default_factory=BrowserConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    crawl: CrawlConfig = field(default_factory=CrawlConfig)
    screenshot: ScreenshotConfig = field(default_factory=ScreenshotConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    sitemap: SitemapConfig = field(default_factory=SitemapConfig)
    features: FeatureFlags = field(default_factory=FeatureFlags)
    cors: CORSConfig = field(default_factory=CORSConfig)

    # Application info
    APP_NAME: str = "DeepScan"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "Multi-page, multi-state accessibility scanner"

    # Environment
    DEBUG: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Create configuration from environment variables.

        Supports overrides via environment variables:
        - DEEPSCAN_HEADLESS
        - DEEPSCAN_SCAN_NAVIGATION_TIMEOUT_MS
        - DEEPSCAN_CLICK_TIMEOUT_MS
        """
        config = cls()

        if headless := os.getenv("DEEPSCAN_HEADLESS"):
            object.__setattr__(config.browser, "HEADLESS", headless.lower() != "false")

        if nav_timeout := os.getenv("DEEPSCAN_SCAN_NAVIGATION_TIMEOUT_MS"):
            object.__setattr__(config.browser, "SCAN_NAVIGATION_TIMEOUT_MS", int(nav_timeout))

        if click_timeout := os.getenv("DEEPSCAN_CLICK_TIMEOUT_MS"):
            object.__setattr__(config.interaction, "CLICK_TIMEOUT_MS", int(click_timeout))

        return config


# Global configuration instance
config = AppConfig.from_env()
