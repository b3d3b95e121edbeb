from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class ScanProfile(str, Enum):
    """Budgeted scan profiles."""
    QUICK = "QUICK"
    SMART = "SMART"
    DEEP = "DEEP"


class LegacyScanProfile(str, Enum):
    """Legacy three-tier scan profiles. Also select the state-exploration depth."""
    QUICK = "quick"
    STANDARD = "standard"
    DEEP = "deep"


class CrawlStrategy(str, Enum):
    """Crawl strategy for a profile."""
    COMPLETE = "complete"
    PRIORITY_SAMPLING = "priority-sampling"
    COMPREHENSIVE = "comprehensive"


class PagePriority(str, Enum):
    """Page priority categories for the crawl queue."""
    HOMEPAGE = "homepage"
    PRODUCT = "product"
    NAVIGATION = "navigation"
    CONTENT = "content"
    UTILITY = "utility"


class UserTier(str, Enum):
    """Subscription tier of the user requesting a scan."""
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class CrawlBudget(BaseModel):
    """Budget limits for a scan profile."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_urls: int = Field(..., gt=0, alias="maxUrls", description="Maximum URLs to crawl before stopping")
    max_duration_ms: int = Field(..., gt=0, alias="maxDuration", description="Maximum crawl duration in milliseconds")
    strategy: CrawlStrategy = Field(..., description="Crawl strategy to use")
    sitemap_first: bool = Field(default=True, alias="sitemapFirst", description="Whether to load the sitemap first")
    priority_order: tuple[PagePriority, ...] = Field(..., alias="priorityOrder", description="Priority order for URL crawling")
    enterprise_detection_threshold: Optional[int] = Field(
        default=None, alias="enterpriseDetectionThreshold", description="URL threshold that triggers enterprise detection"
    )
    resumable: Optional[bool] = Field(default=None, description="Whether the scan is resumable")
    checkpoint_interval: Optional[int] = Field(
        default=None, alias="checkpointInterval", description="Checkpoint interval for resumable scans"
    )


class LegacyCrawlConfig(BaseModel):
    """Crawl options from the legacy three-tier table. Carries no budget."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_pages: int = Field(..., alias="maxPages")
    max_depth: int = Field(..., alias="maxDepth")
    timeout_ms: int = Field(..., alias="timeoutMs")
    same_origin_only: bool = Field(default=True, alias="sameOriginOnly")

    @property
    def budget(self) -> None:
        return None

    def to_dict(self) -> dict:
        """Wire shape consumed by existing callers."""
        return self.model_dump(mode="json", by_alias=True)


class BudgetedCrawlConfig(BaseModel):
    """Crawl options derived from a profile budget."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_pages: int = Field(..., alias="maxPages")
    # None means depth is bounded only by max_pages and the deadline
    max_depth: Optional[int] = Field(default=None, alias="maxDepth")
    timeout_ms: int = Field(..., alias="timeoutMs")
    same_origin_only: bool = Field(default=True, alias="sameOriginOnly")
    budget: CrawlBudget
    profile: ScanProfile

    def to_dict(self) -> dict:
        """Wire shape consumed by existing callers."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


CrawlOptions = Union[BudgetedCrawlConfig, LegacyCrawlConfig]
