"""
Data models for the Deep Scan engine.

This package contains Pydantic models for:
- Scan profiles, budgets and crawl options
- Crawl discovery and coverage
- Page states, findings and scan results
"""

from .profiles import (
    ScanProfile,
    LegacyScanProfile,
    CrawlStrategy,
    PagePriority,
    UserTier,
    CrawlBudget,
    LegacyCrawlConfig,
    BudgetedCrawlConfig,
    CrawlOptions,
)

from .crawl import (
    CrawlStopReason,
    EnterpriseReason,
    PageToScan,
    EnterpriseDetection,
    CrawlSummary,
)

from .scan import (
    StateName,
    Tier,
    WcagLevel,
    ScanState,
    PageState,
    StateTestResult,
    IssueTier,
    TierSummary,
    RawFinding,
    DeepScanIssue,
    PageScanResult,
    PlatformInfo,
    ScanTiming,
    DeepScanResult,
    ScanRequest,
    ScanStatus,
)

__all__ = [
    # Profile models
    "ScanProfile",
    "LegacyScanProfile",
    "CrawlStrategy",
    "PagePriority",
    "UserTier",
    "CrawlBudget",
    "LegacyCrawlConfig",
    "BudgetedCrawlConfig",
    "CrawlOptions",
    # Crawl models
    "CrawlStopReason",
    "EnterpriseReason",
    "PageToScan",
    "EnterpriseDetection",
    "CrawlSummary",
    # Scan models
    "StateName",
    "Tier",
    "WcagLevel",
    "ScanState",
    "PageState",
    "StateTestResult",
    "IssueTier",
    "TierSummary",
    "RawFinding",
    "DeepScanIssue",
    "PageScanResult",
    "PlatformInfo",
    "ScanTiming",
    "DeepScanResult",
    "ScanRequest",
    "ScanStatus",
]
