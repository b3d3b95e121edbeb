"""
Unit tests for the frontier crawler.

Tests BFS ordering, budgets, same-origin filtering, failure handling,
priority ranking and sitemap seeding.
"""

import pytest

from deepscan.config import CrawlConfig
from deepscan.models.crawl import CrawlStopReason, EnterpriseReason
from deepscan.models.profiles import LegacyCrawlConfig
from deepscan.services.crawler import FrontierCrawler, canonical_url, prioritize_links, priority_score
from deepscan.services.profiles import resolve_crawl_config


class FakeSitemapLoader:
    def __init__(self, urls):
        self.urls = urls
        self.calls = []

    async def load(self, seed_url, limit=None):
        self.calls.append((seed_url, limit))
        return self.urls[:limit] if limit is not None else list(self.urls)


class BrokenSitemapLoader:
    async def load(self, seed_url, limit=None):
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")


class TestPriority:
    """Tests for link ranking."""

    def test_important_path_scores_100_minus_segments(self):
        assert priority_score("https://example.com/about") == 99
        assert priority_score("https://example.com/blog/post-1") == 98
        assert priority_score("https://example.com/a/b/c") == -3
        assert priority_score("https://example.com") == 0

    def test_important_match_is_case_insensitive_substring(self):
        assert priority_score("https://example.com/en/About-us") == 98
        assert priority_score("https://example.com/products-and-more") == 99

    def test_prioritize_orders_by_score_descending(self):
        links = [
            "https://example.com/a/b/c",
            "https://example.com/x",
            "https://example.com/pricing",
            "https://example.com/blog/deep/post",
        ]
        assert prioritize_links(links) == [
            "https://example.com/pricing",
            "https://example.com/blog/deep/post",
            "https://example.com/x",
            "https://example.com/a/b/c",
        ]

    def test_canonical_url_drops_fragment_and_trailing_slash(self):
        assert canonical_url("https://example.com/") == "https://example.com"
        assert canonical_url("https://example.com/docs/#install") == "https://example.com/docs"
        assert canonical_url("https://example.com/search/?q=a") == "https://example.com/search?q=a"

    def test_ties_keep_page_order(self):
        links = ["https://example.com/b", "https://example.com/a", "https://example.com/c"]
        assert prioritize_links(links) == links


class TestFrontierCrawler:
    """Tests for FrontierCrawler.crawl."""

    @pytest.mark.asyncio
    async def test_quick_legacy_profile_returns_only_seed(self, fake_navigator, small_site):
        """QUICK without budgeted profiles crawls a single page."""
        navigator = fake_navigator(small_site)
        options = resolve_crawl_config("QUICK", scan_profiles_enabled=False)
        crawler = FrontierCrawler(navigator, options)

        pages = await crawler.crawl("https://example.com")

        assert [p.url for p in pages] == ["https://example.com"]
        assert pages[0].depth == 0
        assert pages[0].title == "Home"
        assert crawler.summary.stop_reason == CrawlStopReason.URL_LIMIT

    @pytest.mark.asyncio
    async def test_bfs_visits_ranked_links(self, fake_navigator, small_site):
        navigator = fake_navigator(small_site)
        crawler = FrontierCrawler(navigator, resolve_crawl_config("standard"))

        pages = await crawler.crawl("https://example.com")

        assert [p.url for p in pages] == [
            "https://example.com",
            "https://example.com/about",
            "https://example.com/blog/post-1",
        ]
        assert [p.depth for p in pages] == [0, 1, 1]

    @pytest.mark.asyncio
    async def test_depth_limit_and_complete_stop(self, fake_navigator, small_site):
        navigator = fake_navigator(small_site)
        crawler = FrontierCrawler(navigator, resolve_crawl_config("deep"))

        pages = await crawler.crawl("https://example.com")

        assert [p.url for p in pages] == [
            "https://example.com",
            "https://example.com/about",
            "https://example.com/blog/post-1",
            "https://example.com/team",
        ]
        assert pages[-1].depth == 2
        assert crawler.summary.stop_reason == CrawlStopReason.COMPLETE
        assert crawler.summary.frontier_remaining == 0

    @pytest.mark.asyncio
    async def test_never_leaves_seed_origin(self, fake_navigator, small_site):
        navigator = fake_navigator(small_site)
        crawler = FrontierCrawler(navigator, resolve_crawl_config("deep"))

        await crawler.crawl("https://example.com")

        assert all(url.startswith("https://example.com") for url in navigator.visits)
        assert "https://other.example.org/about" not in crawler.visited

    @pytest.mark.asyncio
    async def test_failed_page_is_skipped_and_not_retried(self, fake_navigator, small_site):
        """A page whose goto throws is marked visited and the crawl continues."""
        navigator = fake_navigator(small_site, failing={"https://example.com/about"})
        crawler = FrontierCrawler(navigator, resolve_crawl_config("deep"))

        pages = await crawler.crawl("https://example.com")

        urls = [p.url for p in pages]
        assert "https://example.com/about" not in urls
        assert "https://example.com/blog/post-1" in urls
        assert "https://example.com/about" in crawler.visited
        assert navigator.visits.count("https://example.com/about") == 1
        assert crawler.summary.failed_urls == 1

    @pytest.mark.asyncio
    async def test_failing_seed_returns_empty(self, fake_navigator, small_site):
        navigator = fake_navigator(small_site, failing={"https://example.com"})
        crawler = FrontierCrawler(navigator, resolve_crawl_config("deep"))

        pages = await crawler.crawl("https://example.com")

        assert pages == []
        assert crawler.summary.stop_reason == CrawlStopReason.COMPLETE

    @pytest.mark.asyncio
    async def test_title_failure_is_tolerated(self, fake_navigator, small_site):
        navigator = fake_navigator(small_site, title_errors={"https://example.com"})
        crawler = FrontierCrawler(navigator, resolve_crawl_config("quick"))

        pages = await crawler.crawl("https://example.com")

        assert len(pages) == 1
        assert pages[0].title is None

    @pytest.mark.asyncio
    async def test_no_duplicate_pages(self, fake_navigator):
        site = {
            "https://example.com": {
                "title": "Home",
                "links": [
                    "https://example.com/a",
                    "https://example.com/a",
                    "https://example.com/a#section",
                    "/a",
                ],
            },
            "https://example.com/a": {"title": "A", "links": ["https://example.com", "https://example.com/a"]},
        }
        navigator = fake_navigator(site)
        crawler = FrontierCrawler(navigator, resolve_crawl_config("deep"))

        pages = await crawler.crawl("https://example.com")

        urls = [p.url for p in pages]
        assert urls == ["https://example.com", "https://example.com/a"]
        assert len(navigator.visits) == len(set(navigator.visits))

    @pytest.mark.asyncio
    async def test_same_page_anchor_is_not_a_new_page(self, fake_navigator):
        site = {
            "https://example.com/docs": {
                "title": "Docs",
                "links": ["https://example.com/docs#install", "https://example.com/guide#top"],
            },
            "https://example.com/guide": {"title": "Guide", "links": []},
        }
        navigator = fake_navigator(site)
        crawler = FrontierCrawler(navigator, resolve_crawl_config("deep"))

        pages = await crawler.crawl("https://example.com/docs")

        assert [p.url for p in pages] == ["https://example.com/docs", "https://example.com/guide"]

    @pytest.mark.asyncio
    async def test_origin_check_is_exact(self, fake_navigator):
        site = {
            "https://example.com": {
                "title": "Home",
                "links": [
                    "http://example.com/insecure",
                    "https://www.example.com/www",
                    "https://example.com:8443/port",
                    "https://example.com/ok",
                ],
            },
            "https://example.com/ok": {"title": "OK", "links": []},
        }
        navigator = fake_navigator(site)
        crawler = FrontierCrawler(navigator, resolve_crawl_config("deep"))

        pages = await crawler.crawl("https://example.com")

        assert [p.url for p in pages] == ["https://example.com", "https://example.com/ok"]

    @pytest.mark.asyncio
    async def test_deadline_stops_before_next_dequeue(self, fake_navigator, small_site, step_clock):
        # 60 s timeout, clock advances 25 s per read
        options = LegacyCrawlConfig(max_pages=10, max_depth=3, timeout_ms=60000)
        navigator = fake_navigator(small_site)
        crawler = FrontierCrawler(navigator, options, clock=step_clock(25.0))

        pages = await crawler.crawl("https://example.com")

        assert 1 <= len(pages) < 4
        assert crawler.summary.stop_reason == CrawlStopReason.TIME_LIMIT
        assert crawler.summary.frontier_remaining > 0

    @pytest.mark.asyncio
    async def test_never_exceeds_max_pages(self, fake_navigator):
        links = [f"https://example.com/p{i}" for i in range(40)]
        site = {"https://example.com": {"title": "Home", "links": links}}
        site.update({link: {"title": link, "links": []} for link in links})
        navigator = fake_navigator(site)
        options = LegacyCrawlConfig(max_pages=7, max_depth=2, timeout_ms=60000)
        crawler = FrontierCrawler(navigator, options)

        pages = await crawler.crawl("https://example.com")

        assert len(pages) == 7
        assert crawler.summary.stop_reason == CrawlStopReason.URL_LIMIT


    @pytest.mark.parametrize("seed", ["https://example.com", "https://example.com/"])
    @pytest.mark.asyncio
    async def test_seed_and_home_link_are_one_page(self, fake_navigator, seed):
        site = {
            "https://example.com": {
                "title": "Home",
                "links": ["https://example.com/", "https://example.com/about/"],
            },
            "https://example.com/about": {"title": "About", "links": ["https://example.com/", "https://example.com/about"]},
        }
        navigator = fake_navigator(site)
        crawler = FrontierCrawler(navigator, resolve_crawl_config("deep"))

        pages = await crawler.crawl(seed)

        assert [p.url for p in pages] == ["https://example.com", "https://example.com/about"]
        assert navigator.visits == ["https://example.com", "https://example.com/about"]

class TestFrontierLimits:
    """Tests for per-page link caps and the frontier cap."""

    def test_legacy_link_limit(self, fake_navigator):
        crawler = FrontierCrawler(fake_navigator(), resolve_crawl_config("deep"))

        assert crawler.link_limit(1) == 10
        assert crawler.link_limit(4) == 20
        assert crawler.link_limit(100) == 30

    def test_legacy_frontier_cap(self, fake_navigator):
        assert FrontierCrawler(fake_navigator(), resolve_crawl_config("quick")).frontier_cap == 50
        options = LegacyCrawlConfig(max_pages=10, max_depth=1, timeout_ms=1000)
        assert FrontierCrawler(fake_navigator(), options).frontier_cap == 200

    def test_budgeted_limits(self, fake_navigator):
        options = resolve_crawl_config("QUICK", scan_profiles_enabled=True)
        crawler = FrontierCrawler(fake_navigator(), options)

        assert crawler.link_limit(49) == 30
        assert crawler.frontier_cap == 100

    @pytest.mark.asyncio
    async def test_per_page_extraction_is_capped(self, fake_navigator):
        links = [f"https://example.com/p{i}" for i in range(80)]
        site = {"https://example.com": {"title": "Home", "links": links}}
        navigator = fake_navigator(site)
        options = LegacyCrawlConfig(max_pages=100, max_depth=1, timeout_ms=60000)
        crawler = FrontierCrawler(navigator, options)

        await crawler.crawl("https://example.com")

        # Seed plus 30 extracted links, none of which load
        assert len(navigator.visits) == 31


    @pytest.mark.asyncio
    async def test_overflowing_frontier_drops_lowest_priority_links(self, fake_navigator):
        links = [
            "https://example.com/a/b/c",
            "https://example.com/about",
            "https://example.com/deep/er/path/z",
            "https://example.com/q",
            "https://example.com/pricing",
            "https://example.com/x/y",
        ]
        site = {"https://example.com": {"title": "Home", "links": links}}
        site.update({link: {"title": link, "links": []} for link in links})
        navigator = fake_navigator(site)
        options = LegacyCrawlConfig(max_pages=10, max_depth=1, timeout_ms=60000)
        crawl_config = CrawlConfig(LEGACY_FRONTIER_MULTIPLIER=0, LEGACY_FRONTIER_FLOOR=4)
        crawler = FrontierCrawler(navigator, options, crawl_config=crawl_config)

        pages = await crawler.crawl("https://example.com")

        assert crawler.frontier_cap == 4
        assert [p.url for p in pages] == [
            "https://example.com",
            "https://example.com/about",
            "https://example.com/pricing",
            "https://example.com/q",
            "https://example.com/x/y",
        ]
        assert "https://example.com/a/b/c" not in navigator.visits
        assert "https://example.com/deep/er/path/z" not in navigator.visits
        assert crawler.summary.frontier_remaining <= crawler.frontier_cap
        assert crawler.summary.stop_reason == CrawlStopReason.COMPLETE

class TestSitemapSeeding:
    """Tests for sitemap-first budgeted crawls."""

    @pytest.mark.asyncio
    async def test_sitemap_urls_follow_seed(self, fake_navigator):
        site = {
            "https://example.com": {"title": "Home", "links": []},
            "https://example.com/from-sitemap": {"title": "S", "links": []},
        }
        loader = FakeSitemapLoader([
            "https://example.com/from-sitemap",
            "https://elsewhere.com/page",
            "https://example.com",
        ])
        navigator = fake_navigator(site)
        options = resolve_crawl_config("QUICK", scan_profiles_enabled=True)
        crawler = FrontierCrawler(navigator, options, sitemap_loader=loader)

        pages = await crawler.crawl("https://example.com")

        assert [p.url for p in pages] == ["https://example.com", "https://example.com/from-sitemap"]
        assert pages[1].depth == 1
        assert crawler.summary.sitemap_urls == 1
        assert loader.calls == [("https://example.com", 100)]

    @pytest.mark.asyncio
    async def test_legacy_crawl_ignores_sitemap(self, fake_navigator, small_site):
        loader = FakeSitemapLoader(["https://example.com/team"])
        crawler = FrontierCrawler(fake_navigator(small_site), resolve_crawl_config("quick"), sitemap_loader=loader)

        await crawler.crawl("https://example.com")

        assert loader.calls == []

    @pytest.mark.asyncio
    async def test_budgeted_crawl_reports_enterprise(self, fake_navigator):
        links = [f"https://example.com/p{i}" for i in range(30)]
        site = {"https://example.com": {"title": "Home", "links": links}}
        site.update({link: {"title": link, "links": [f"{link}/{j}" for j in range(30)]} for link in links})
        navigator = fake_navigator(site)
        options = resolve_crawl_config("SMART", scan_profiles_enabled=True)
        crawler = FrontierCrawler(navigator, options)

        await crawler.crawl("https://example.com")

        assert crawler.summary.enterprise is not None
        assert crawler.summary.enterprise.is_enterprise is True
        assert crawler.summary.enterprise.reason == EnterpriseReason.URL_THRESHOLD

    @pytest.mark.asyncio
    async def test_legacy_crawl_has_no_enterprise_verdict(self, fake_navigator, small_site):
        crawler = FrontierCrawler(fake_navigator(small_site), resolve_crawl_config("standard"))

        await crawler.crawl("https://example.com")

        assert crawler.summary.enterprise is None

    @pytest.mark.asyncio
    async def test_sitemap_failure_falls_back_to_links(self, fake_navigator, small_site):
        options = resolve_crawl_config("QUICK", scan_profiles_enabled=True)
        crawler = FrontierCrawler(fake_navigator(small_site), options, sitemap_loader=BrokenSitemapLoader())

        pages = await crawler.crawl("https://example.com")

        assert len(pages) == 4
        assert crawler.summary.sitemap_urls == 0
