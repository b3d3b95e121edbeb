import time
from collections import deque
from typing import Callable, Optional
from urllib.parse import urljoin, urlparse

from ..config import BrowserConfig, CrawlConfig, config
from ..models.crawl import CrawlStopReason, CrawlSummary, PageToScan
from ..models.profiles import CrawlOptions
from ..utils.logger import get_crawler_logger, log_event
from .enterprise import URL_THRESHOLD, detect_enterprise
from .navigator import Navigator
from .sitemap import SitemapLoader

# Initialize logger
logger = get_crawler_logger()

# Runs in page context; anchors resolve their own absolute href
LINK_EXTRACTION_SCRIPT = "() => Array.from(document.querySelectorAll('a[href]')).map(a => a.href)"


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def canonical_url(url: str) -> str:
    """Drop the fragment and any trailing slash so each page has one key."""
    parsed = urlparse(url)
    return parsed._replace(path=parsed.path.rstrip("/"), fragment="").geturl()


def path_segment_count(url: str) -> int:
    return len([segment for segment in urlparse(url).path.split("/") if segment])


def priority_score(url: str, crawl_config: CrawlConfig = config.crawl) -> int:
    """
    Score a link for frontier ordering.

    Links whose path contains an important section (/about, /pricing, ...)
    score IMPORTANT_PATH_SCORE; every path segment costs one point.
    """
    path = urlparse(url).path.lower()
    score = 0
    for important in crawl_config.IMPORTANT_PATHS:
        if important in path:
            score = crawl_config.IMPORTANT_PATH_SCORE
            break
    return score - path_segment_count(url)


def prioritize_links(links: list[str], crawl_config: CrawlConfig = config.crawl) -> list[str]:
    """Order links by descending priority score. Ties keep page order."""
    return sorted(links, key=lambda link: priority_score(link, crawl_config), reverse=True)


class FrontierCrawler:
    """
    Breadth-first page discovery under a URL and time budget.

    The frontier is a FIFO queue seeded with the start URL at depth 0.
    Links found on each page are ranked by priority_score before they are
    appended, so each BFS level is visited most-important first.

    Stops when the frontier is empty, max_pages pages were loaded, or the
    deadline passed. The deadline is checked before each dequeue, so a page
    load already in flight is allowed to finish.
    """

    def __init__(
        self,
        navigator: Navigator,
        options: CrawlOptions,
        sitemap_loader: Optional[SitemapLoader] = None,
        crawl_config: Optional[CrawlConfig] = None,
        browser_config: Optional[BrowserConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the crawler.

        Args:
            navigator: Page used for every navigation
            options: Resolved crawl options (budgeted or legacy)
            sitemap_loader: Optional loader for sitemap-first budgets
            crawl_config: Frontier limits
            browser_config: Navigation timeouts
            clock: Monotonic clock in seconds
        """
        self.navigator = navigator
        self.options = options
        self.sitemap_loader = sitemap_loader
        self.crawl_config = crawl_config or config.crawl
        self.browser_config = browser_config or config.browser
        self._clock = clock

        # URL frontier (queue for BFS)
        self.frontier: deque[PageToScan] = deque()
        self.queued: set[str] = set()

        # Every URL we attempted, loaded or not
        self.visited: set[str] = set()

        self.discovered: list[PageToScan] = []
        self.summary = CrawlSummary()

        self.origin = ""
        self._frontier_growing = False

    @property
    def frontier_cap(self) -> int:
        """Maximum frontier size before low-priority entries are dropped."""
        if self.options.budget is not None:
            return self.options.budget.max_urls * self.crawl_config.FRONTIER_CAP_MULTIPLIER
        return max(
            self.options.max_pages * self.crawl_config.LEGACY_FRONTIER_MULTIPLIER,
            self.crawl_config.LEGACY_FRONTIER_FLOOR,
        )

    def link_limit(self, remaining_pages: int) -> int:
        """Maximum links taken from one page."""
        if self.options.budget is not None:
            return self.crawl_config.PER_PAGE_URL_CAP
        return min(
            max(remaining_pages * self.crawl_config.LEGACY_LINK_MULTIPLIER, self.crawl_config.LEGACY_LINK_FLOOR),
            self.crawl_config.PER_PAGE_URL_CAP,
        )

    def _depth_allowed(self, depth: int) -> bool:
        return self.options.max_depth is None or depth <= self.options.max_depth

    def _normalize_link(self, href: str, current_url: str) -> Optional[str]:
        """
        Resolve a link and keep it only if it is a new same-origin page.

        Returns:
            Canonical absolute URL, or None if the link is skipped
        """
        if not href:
            return None
        try:
            absolute_url = urljoin(current_url, href.strip())
            parsed = urlparse(absolute_url)
        except ValueError:
            return None

        # Only allow http/https
        if parsed.scheme not in ("http", "https"):
            return None

        if f"{parsed.scheme}://{parsed.netloc}" != self.origin:
            return None

        # Anchor into the page we are already on
        if parsed.fragment and parsed.path.rstrip("/") == urlparse(current_url).path.rstrip("/"):
            return None

        return canonical_url(absolute_url)

    def filter_links(self, hrefs: list, current_url: str) -> list[str]:
        """Normalize, filter and de-duplicate raw hrefs, keeping page order."""
        links = []
        for href in hrefs:
            if not isinstance(href, str):
                continue
            normalized = self._normalize_link(href, current_url)
            if normalized:
                links.append(normalized)
        return list(dict.fromkeys(links))

    async def _extract_links(self, current_url: str, limit: int) -> list[str]:
        """Extract, rank and cap same-origin links from the loaded page."""
        try:
            hrefs = await self.navigator.evaluate(LINK_EXTRACTION_SCRIPT)
        except Exception as e:
            logger.error(f"[CRAWL] Failed to extract links from {current_url}: {e}")
            return []

        links = prioritize_links(self.filter_links(hrefs or [], current_url), self.crawl_config)
        logger.debug(f"[CRAWL] Found {len(links)} same-origin links on {current_url}")
        return links[:limit]

    def _enqueue(self, url: str, depth: int) -> bool:
        """
        Add a URL to the frontier if it was never visited or queued.

        The URL is canonicalized first, so the seed and links that differ
        only by a trailing slash or fragment share one key.

        Returns:
            True if URL was added, False if skipped
        """
        url = canonical_url(url)
        if url in self.visited or url in self.queued:
            return False
        self.frontier.append(PageToScan(url=url, depth=depth))
        self.queued.add(url)
        return True

    def _trim_frontier(self) -> None:
        cap = self.frontier_cap
        if len(self.frontier) <= cap:
            return
        logger.warning(f"[CRAWL] Frontier cap ({cap}) reached, trimming queue")
        while len(self.frontier) > cap:
            dropped = self.frontier.pop()
            self.queued.discard(dropped.url)

    async def _seed_from_sitemap(self, seed_url: str) -> None:
        """Queue same-origin sitemap URLs at depth 1, behind the seed."""
        urls = await self.sitemap_loader.load(seed_url, limit=self.frontier_cap)
        added = 0
        for url in self.filter_links(urls, seed_url):
            if self._depth_allowed(1) and self._enqueue(url, 1):
                added += 1
        self._trim_frontier()
        self.summary.sitemap_urls = added
        logger.info(f"[CRAWL] Seeded {added} URLs from sitemap")

    async def _load(self, url: str) -> Optional[str]:
        """
        Navigate to a page and read its title.

        Raises:
            Exception: Whatever the navigator raises for a failed navigation
        """
        await self.navigator.goto(
            url,
            wait_until="domcontentloaded",
            timeout_ms=min(self.browser_config.CRAWL_NAVIGATION_TIMEOUT_MS, self.options.timeout_ms),
        )

        # Extra network settling is best effort
        try:
            await self.navigator.wait_for_load_state("networkidle", self.browser_config.NETWORK_IDLE_TIMEOUT_MS)
        except Exception as e:
            logger.debug(f"[CRAWL] Network did not settle on {url}: {e}")

        try:
            return await self.navigator.title()
        except Exception as e:
            logger.debug(f"[CRAWL] Title unavailable for {url}: {e}")
            return None

    async def _expand(self, current: PageToScan) -> None:
        """Queue the ranked links of the page just loaded."""
        remaining = self.options.max_pages - len(self.discovered)
        links = await self._extract_links(current.url, self.link_limit(remaining))

        before = len(self.frontier)
        for link in links:
            self._enqueue(link, current.depth + 1)
        self._trim_frontier()
        self._frontier_growing = len(self.frontier) > before

    async def crawl(self, seed_url: str) -> list[PageToScan]:
        """
        Discover pages starting from seed_url.

        Args:
            seed_url: Starting URL (depth 0)

        Returns:
            Loaded pages in visit order, at most options.max_pages long
        """
        start = self._clock()
        deadline = start + self.options.timeout_ms / 1000

        seed_url = canonical_url(seed_url)
        self.origin = origin_of(seed_url)
        self.frontier.clear()
        self.queued.clear()
        self.visited.clear()
        self.discovered = []
        self.summary = CrawlSummary()
        self._frontier_growing = False

        log_event(
            logger, "crawl-start",
            url=seed_url,
            max_pages=self.options.max_pages,
            max_depth=self.options.max_depth,
            timeout_ms=self.options.timeout_ms,
        )

        self._enqueue(seed_url, 0)

        budget = self.options.budget
        if budget is not None and budget.sitemap_first and self.sitemap_loader is not None:
            try:
                await self._seed_from_sitemap(seed_url)
            except Exception as e:
                # Fall back to link discovery
                logger.warning(f"[CRAWL] Sitemap seeding failed for {seed_url}: {e}")

        stop_reason = CrawlStopReason.COMPLETE
        while self.frontier:
            if len(self.discovered) >= self.options.max_pages:
                stop_reason = CrawlStopReason.URL_LIMIT
                break

            if self._clock() >= deadline:
                logger.warning("[CRAWL] Global crawl timeout reached, stopping early")
                stop_reason = CrawlStopReason.TIME_LIMIT
                break

            current = self.frontier.popleft()
            self.queued.discard(current.url)

            if current.url in self.visited:
                continue
            if not self._depth_allowed(current.depth):
                continue

            logger.debug(f"[CRAWL] Visiting: {current.url} (depth: {current.depth})")
            try:
                title = await self._load(current.url)
            except Exception as e:
                # No retry: a failed URL stays excluded for the rest of the crawl
                logger.error(f"[CRAWL] Failed to visit {current.url}: {e}")
                self.visited.add(current.url)
                self.summary.failed_urls += 1
                continue

            self.visited.add(current.url)
            self.discovered.append(current.model_copy(update={"title": title}))
            logger.info(f"[CRAWL] Discovered: {current.url} - \"{title}\"")

            if len(self.discovered) >= self.options.max_pages:
                stop_reason = CrawlStopReason.URL_LIMIT
                break

            if self.options.max_depth is None or current.depth < self.options.max_depth:
                await self._expand(current)

        elapsed_ms = (self._clock() - start) * 1000
        self.summary.stop_reason = stop_reason
        self.summary.pages_crawled = len(self.discovered)
        self.summary.urls_discovered = len(self.visited | self.queued)
        self.summary.frontier_remaining = len(self.frontier)
        self.summary.elapsed_ms = round(elapsed_ms, 2)

        if budget is not None:
            self.summary.enterprise = detect_enterprise(
                discovered_urls=self.summary.urls_discovered,
                elapsed_minutes=elapsed_ms / 60000,
                frontier_growing=self._frontier_growing,
                url_threshold=budget.enterprise_detection_threshold or URL_THRESHOLD,
            )

        log_event(
            logger, "crawl-complete",
            url=seed_url,
            pages=len(self.discovered),
            stop_reason=stop_reason.value,
            elapsed_ms=self.summary.elapsed_ms,
        )
        return self.discovered
