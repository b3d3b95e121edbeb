"""
Deep scan orchestration.

Runs one scan end to end: resolve the profile, crawl the site, explore and
audit each discovered page, then deduplicate and summarize the findings.
"""

import base64
import time
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from ..config import BrowserConfig, ScreenshotConfig, config
from ..exceptions import AuditError, AuditInjectionError, BrowserLaunchError, NavigationError
from ..models.profiles import LegacyScanProfile, ScanProfile
from ..models.scan import (
    DeepScanIssue,
    DeepScanResult,
    PageScanResult,
    PageState,
    PlatformInfo,
    RawFinding,
    StateName,
)
from ..models.crawl import PageToScan
from ..utils.logger import get_scanner_logger, log_event
from .auditor import AccessibilityAuditor, AxeAuditor, findings_from_results
from .classifier import RuleClassifier, rule_classifier
from .crawler import FrontierCrawler, canonical_url
from .dedup import IssueDeduplicator, issue_deduplicator
from .navigator import BrowserSession, Navigator
from .platform import DOCUMENT_HTML_SCRIPT, detect_platform
from .profiles import exploration_profile, resolve_crawl_config
from .sitemap import SitemapLoader
from .states import StateExplorer
from .timer import ScanTimer

# Initialize logger
logger = get_scanner_logger()


class ScanOrchestrator:
    """
    Runs deep accessibility scans.

    One browser session is opened per scan and closed on every exit path.
    Pages are processed one at a time in crawl order. Only a failure to
    open the browser session is raised to the caller; page and feature
    failures shrink the result instead.
    """

    def __init__(
        self,
        session_factory: Callable = BrowserSession,
        auditor: Optional[AccessibilityAuditor] = None,
        classifier: Optional[RuleClassifier] = None,
        deduplicator: Optional[IssueDeduplicator] = None,
        state_explorer: Optional[StateExplorer] = None,
        sitemap_loader: Optional[SitemapLoader] = None,
        scan_profiles_enabled: Optional[bool] = None,
        browser_config: Optional[BrowserConfig] = None,
        screenshot_config: Optional[ScreenshotConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the orchestrator.

        Args:
            session_factory: Callable returning an object with async open() -> Navigator and close()
            auditor: Accessibility auditor run once per eligible state
            classifier: Rule tier classifier
            deduplicator: Issue deduplicator
            state_explorer: UI state explorer
            sitemap_loader: Optional sitemap loader for sitemap-first budgets
            scan_profiles_enabled: Budgeted profiles flag; read from config when omitted
            browser_config: Page scan timeouts
            screenshot_config: Preview screenshot settings
            clock: Clock handed to the crawler for its deadline
        """
        self.session_factory = session_factory
        self.auditor = auditor or AxeAuditor()
        self.classifier = classifier or rule_classifier
        self.deduplicator = deduplicator or issue_deduplicator
        self.state_explorer = state_explorer or StateExplorer()
        self.sitemap_loader = sitemap_loader
        self.scan_profiles_enabled = (
            config.features.scan_profiles if scan_profiles_enabled is None else scan_profiles_enabled
        )
        self.browser_config = browser_config or config.browser
        self.screenshot_config = screenshot_config or config.screenshot
        self._clock = clock

    async def _open_session(self):
        session = self.session_factory()
        try:
            navigator = await session.open()
        except BrowserLaunchError:
            raise
        except Exception as e:
            await session.close()
            raise BrowserLaunchError(str(e)) from e
        return session, navigator

    async def scan(self, url: str, profile: Union[str, ScanProfile, LegacyScanProfile]) -> DeepScanResult:
        """
        Scan a site.

        Args:
            url: Seed URL
            profile: Budgeted (QUICK/SMART/DEEP) or legacy (quick/standard/deep) profile

        Returns:
            DeepScanResult for the pages that could be processed

        Raises:
            BrowserLaunchError: If the browser session cannot be opened
        """
        profile_name = profile.value if isinstance(profile, (ScanProfile, LegacyScanProfile)) else str(profile)
        timer = ScanTimer()
        timer.start_total()

        crawl_options = resolve_crawl_config(profile_name, self.scan_profiles_enabled)
        state_profile = exploration_profile(profile_name)

        logger.info(f"[SCAN] Starting deep scan: {url} (profile={profile_name})")
        logger.info(f"[SCAN] Crawl config: {crawl_options.to_dict()}")

        seed_url = canonical_url(url)
        session, navigator = await self._open_session()
        try:
            crawler = FrontierCrawler(
                navigator,
                crawl_options,
                sitemap_loader=self.sitemap_loader,
                browser_config=self.browser_config,
                clock=self._clock,
            )
            with timer.track('crawl'):
                pages_to_scan = await crawler.crawl(url)
            logger.info(f"[SCAN] Found {len(pages_to_scan)} pages to scan")

            page_results: list[PageScanResult] = []
            states_audited = 0
            screenshot: Optional[str] = None

            for page in pages_to_scan:
                log_event(logger, "page-start", url=page.url, depth=page.depth)
                with timer.track('scanning'):
                    try:
                        page_result, page_screenshot = await self._scan_page(
                            navigator,
                            page,
                            state_profile,
                            capture_screenshot=screenshot is None and page.url == seed_url,
                        )
                    except Exception as e:
                        log_event(logger, "page-failed", url=page.url, error=e)
                        continue

                if page_screenshot:
                    screenshot = page_screenshot
                page_results.append(page_result)
                states_audited += len(page_result.states)
                logger.info(
                    f"[SCAN] Page complete: {page.url} - "
                    f"{page_result.violations} violations, {page_result.advisories} advisories"
                )

            all_issues = self.deduplicator.dedupe(
                issue for page_result in page_results for issue in page_result.issues
            )
            summary = self.classifier.summarize_by_tier(all_issues)
            platform = await self._detect_platform(navigator)
        finally:
            await session.close()
            if self.sitemap_loader is not None:
                await self.sitemap_loader.close()

        timer.stop_total()
        result = DeepScanResult(
            url=url,
            scan_profile=profile_name,
            pages_scanned=len(page_results),
            states_audited=states_audited,
            total_issues=len(all_issues),
            violations_count=summary.violations,
            advisories_count=summary.advisories,
            pages=page_results,
            timestamp=datetime.now(timezone.utc).isoformat(),
            time_to_scan=round(timer.total_ms / 1000, 3),
            timing=timer.to_timing(),
            platform=platform,
            screenshot=screenshot,
            coverage=crawler.summary,
            issues=all_issues,
        )

        log_event(
            logger, "scan-complete",
            url=url,
            pages=result.pages_scanned,
            states=result.states_audited,
            issues=result.total_issues,
            violations=result.violations_count,
            advisories=result.advisories_count,
            seconds=result.time_to_scan,
        )
        return result

    async def _scan_page(
        self,
        navigator: Navigator,
        page: PageToScan,
        state_profile: LegacyScanProfile,
        capture_screenshot: bool = False,
    ) -> tuple[PageScanResult, Optional[str]]:
        """
        Load one page, explore its states and audit each eligible state.

        Raises:
            NavigationError: If the page cannot be loaded
            AuditInjectionError: If the auditor cannot be loaded into the page
        """
        try:
            await navigator.goto(
                page.url,
                wait_until="networkidle",
                timeout_ms=self.browser_config.SCAN_NAVIGATION_TIMEOUT_MS,
            )
        except Exception as e:
            raise NavigationError(page.url, str(e)) from e
        await navigator.wait(self.browser_config.SCAN_SETTLE_MS)

        screenshot = await self._capture_screenshot(navigator) if capture_screenshot else None

        state_result = await self.state_explorer.explore(navigator, state_profile)

        issues: list[DeepScanIssue] = []
        for state in state_result.states:
            eligible = state.success or state.name == StateName.DEFAULT.value
            log_event(logger, "state-result", url=page.url, state=state.name, success=state.success)
            if not eligible:
                logger.debug(f"[SCAN] Skipping state \"{state.name}\" (not successful)")
                continue
            issues.extend(await self._audit_state(navigator, page.url, state))

        issues = self.deduplicator.dedupe(issues)
        summary = self.classifier.summarize_by_tier(issues)

        return PageScanResult(
            url=page.url,
            title=page.title,
            states=state_result.states,
            issues=issues,
            violations=summary.violations,
            advisories=summary.advisories,
        ), screenshot

    async def _audit_state(self, navigator: Navigator, page_url: str, state: PageState) -> list[DeepScanIssue]:
        """Audit the current DOM and tag each finding with page, state and tier."""
        try:
            results = await self.auditor.run(navigator)
        except AuditInjectionError as e:
            raise AuditInjectionError(e.reason, url=page_url) from e
        except AuditError as e:
            logger.warning(f"[SCAN] Audit failed for {page_url} ({state.name}): {e.reason}")
            return []

        issues = [self.tag_finding(finding, page_url, state.name) for finding in findings_from_results(results)]
        logger.debug(f"[SCAN] {state.name}: {len(issues)} issues on {page_url}")
        return issues

    def tag_finding(self, finding: RawFinding, page_url: str, state_name: str) -> DeepScanIssue:
        """Attach page, state and classification to a raw finding."""
        classification = self.classifier.classify(finding.rule)
        return DeepScanIssue(
            **finding.model_dump(),
            page_url=page_url,
            page_state=state_name,
            tier=classification.tier,
            wcag_reference=classification.wcag_reference,
            requires_manual_review=classification.requires_manual_review,
        )

    async def _capture_screenshot(self, navigator: Navigator) -> Optional[str]:
        try:
            image = await navigator.screenshot(
                image_type=self.screenshot_config.TYPE,
                quality=self.screenshot_config.QUALITY,
                full_page=self.screenshot_config.FULL_PAGE,
            )
        except Exception as e:
            logger.warning(f"[SCAN] Failed to capture screenshot: {e}")
            return None
        logger.info("[SCAN] Captured screenshot for preview")
        return f"data:image/{self.screenshot_config.TYPE};base64,{base64.b64encode(image).decode('ascii')}"

    async def _detect_platform(self, navigator: Navigator) -> Optional[PlatformInfo]:
        try:
            html = await navigator.evaluate(DOCUMENT_HTML_SCRIPT)
        except Exception as e:
            logger.debug(f"[SCAN] Platform detection unavailable: {e}")
            return None
        return detect_platform(html if isinstance(html, str) else None)


async def run_deep_scan(url: str, profile: Union[str, ScanProfile, LegacyScanProfile]) -> DeepScanResult:
    """Run a deep scan with default collaborators."""
    return await ScanOrchestrator().scan(url, profile)
