"""
Services package for DeepScan.

This package contains the scan engine:
- Profile resolution and selection
- Frontier crawling and sitemap seeding
- UI state exploration and accessibility audits
- Rule classification and issue deduplication
- Scan orchestration and job management
"""

from .profiles import (
    resolve_budget,
    resolve_crawl_config,
    exploration_profile,
    select_scan_profile,
    can_use_profile,
)
from .navigator import BrowserSession, PlaywrightNavigator
from .auditor import AxeAuditor, findings_from_results
from .crawler import FrontierCrawler, prioritize_links
from .sitemap import SitemapLoader, parse_sitemap
from .states import StateExplorer, state_explorer
from .classifier import RuleClassifier, rule_classifier
from .dedup import IssueDeduplicator, issue_deduplicator
from .enterprise import detect_enterprise
from .platform import detect_platform
from .timer import ScanTimer
from .orchestrator import ScanOrchestrator, run_deep_scan
from .job_manager import ScanJobManager, scan_job_manager

__all__ = [
    # Profiles
    "resolve_budget",
    "resolve_crawl_config",
    "exploration_profile",
    "select_scan_profile",
    "can_use_profile",
    # Browser
    "BrowserSession",
    "PlaywrightNavigator",
    "AxeAuditor",
    "findings_from_results",
    # Crawl
    "FrontierCrawler",
    "prioritize_links",
    "SitemapLoader",
    "parse_sitemap",
    # States
    "StateExplorer",
    "state_explorer",
    # Issues
    "RuleClassifier",
    "rule_classifier",
    "IssueDeduplicator",
    "issue_deduplicator",
    # Detection
    "detect_enterprise",
    "detect_platform",
    # Orchestration
    "ScanTimer",
    "ScanOrchestrator",
    "run_deep_scan",
    "ScanJobManager",
    "scan_job_manager",
]
