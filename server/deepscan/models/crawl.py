from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class CrawlStopReason(str, Enum):
    """Why the frontier crawl stopped."""
    COMPLETE = "complete"
    URL_LIMIT = "url_limit"
    TIME_LIMIT = "time_limit"


class EnterpriseReason(str, Enum):
    """Rule that flagged a site as enterprise scale."""
    URL_THRESHOLD = "url_threshold"
    TIME_FRONTIER = "time_frontier"


class PageToScan(BaseModel):
    """A page discovered by the crawler."""
    url: str = Field(..., description="Page URL")
    depth: int = Field(..., ge=0, description="BFS distance from the seed URL")
    title: Optional[str] = Field(default=None, description="Page title, set after a successful load")


class EnterpriseDetection(BaseModel):
    """Enterprise-scale verdict for a crawl."""
    is_enterprise: bool = Field(default=False)
    reason: Optional[EnterpriseReason] = Field(default=None)


class CrawlSummary(BaseModel):
    """Coverage statistics for one crawl."""
    stop_reason: CrawlStopReason = Field(default=CrawlStopReason.COMPLETE, description="Reason the crawl stopped")
    pages_crawled: int = Field(default=0, description="Pages loaded successfully")
    failed_urls: int = Field(default=0, description="URLs that failed to load")
    urls_discovered: int = Field(default=0, description="Distinct URLs seen (visited or queued)")
    frontier_remaining: int = Field(default=0, description="URLs still queued when the crawl stopped")
    elapsed_ms: float = Field(default=0.0, description="Crawl wall-clock time")
    sitemap_urls: int = Field(default=0, description="URLs seeded from the sitemap")
    enterprise: Optional[EnterpriseDetection] = Field(default=None, description="Enterprise detection (budgeted crawls)")
