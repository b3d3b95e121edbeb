from enum import Enum
from typing import Optional
from pydantic import BaseModel, HttpUrl, Field

from .crawl import CrawlSummary
from .profiles import UserTier


class StateName(str, Enum):
    """Named UI states a page can be audited in."""
    DEFAULT = "default"
    COOKIES_DISMISSED = "cookies-dismissed"
    MENU_OPEN = "menu-open"
    MODAL_OPEN = "modal-open"
    ACCORDION_OPEN = "accordion-open"
    TAB_SWITCHED = "tab-switched"


class Tier(str, Enum):
    """Finding tier."""
    VIOLATION = "violation"
    ADVISORY = "advisory"


class WcagLevel(str, Enum):
    A = "A"
    AA = "AA"
    AAA = "AAA"


class ScanState(str, Enum):
    """Job execution states."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class PageState(BaseModel):
    """Outcome of one UI state transition on a page."""
    name: str = Field(..., description="State name")
    description: str = Field(..., description="Human-readable description")
    success: bool = Field(..., description="Whether the transition succeeded")


class StateTestResult(BaseModel):
    """States reached on one page."""
    states: list[PageState] = Field(default_factory=list)
    total_states: int = Field(default=0)


class IssueTier(BaseModel):
    """Classification record for a rule id."""
    tier: Tier
    wcag_reference: Optional[str] = Field(default=None, description="WCAG success criterion, e.g. 1.1.1")
    wcag_level: Optional[WcagLevel] = Field(default=None)
    requires_manual_review: bool = Field(default=False)
    reason: str


class TierSummary(BaseModel):
    violations: int = 0
    advisories: int = 0
    total: int = 0


class RawFinding(BaseModel):
    """One node-level result from the accessibility checker for one page state."""
    rule: str
    impact: str = "minor"
    description: str = ""
    help_url: str = ""
    selector: str
    html: str = ""
    wcag_tags: list[str] = Field(default_factory=list)


class DeepScanIssue(RawFinding):
    """A finding tagged with page, state and classification."""
    page_url: str
    page_state: str
    tier: Tier
    wcag_reference: Optional[str] = None
    requires_manual_review: bool = False


class PageScanResult(BaseModel):
    """Result for a single scanned page."""
    url: str
    title: Optional[str] = None
    states: list[PageState] = Field(default_factory=list)
    issues: list[DeepScanIssue] = Field(default_factory=list, description="Deduplicated issues")
    violations: int = 0
    advisories: int = 0


class PlatformInfo(BaseModel):
    name: str
    confidence: float


class ScanTiming(BaseModel):
    """Timing breakdown in milliseconds."""
    crawl_ms: float = Field(default=0.0, description="Time spent discovering pages")
    scanning_ms: float = Field(default=0.0, description="Time spent exploring states and auditing")
    total_ms: float = Field(default=0.0, description="Total execution time")


class DeepScanResult(BaseModel):
    """Scan-level aggregate handed to persistence and reporting."""
    url: str
    scan_profile: str
    pages_scanned: int = 0
    states_audited: int = 0
    total_issues: int = 0
    violations_count: int = 0
    advisories_count: int = 0

    pages: list[PageScanResult] = Field(default_factory=list)

    timestamp: str
    time_to_scan: float = Field(default=0.0, description="Seconds")
    timing: ScanTiming = Field(default_factory=ScanTiming)
    platform: Optional[PlatformInfo] = None
    screenshot: Optional[str] = Field(default=None, description="data:image/jpeg;base64 preview")
    coverage: Optional[CrawlSummary] = None

    issues: list[DeepScanIssue] = Field(default_factory=list, description="Deduplicated across all pages")


class ScanRequest(BaseModel):
    """Request payload for starting a scan job."""
    url: HttpUrl = Field(..., description="Seed URL")
    profile: Optional[str] = Field(
        default=None,
        description="quick/standard/deep or QUICK/SMART/DEEP; selected from the user tier when omitted",
    )
    user_tier: UserTier = Field(default=UserTier.FREE)
    sitemap_url_count: Optional[int] = Field(default=None, ge=0, description="Known sitemap size, used for profile selection")


class ScanStatus(BaseModel):
    """Current status of a scan job."""
    job_id: str
    state: ScanState = ScanState.PENDING
    url: str
    profile: str
    user_tier: UserTier = UserTier.FREE
    pages_scanned: int = 0
    total_issues: int = 0
    show_enterprise_gate: bool = Field(default=False, description="Crawl flagged an enterprise-scale site and gating is enabled")
    error: Optional[str] = None
