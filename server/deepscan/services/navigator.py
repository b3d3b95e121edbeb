"""
Browser page automation.

Defines the Navigator and ElementLocator interfaces the crawler, state
explorer and orchestrator program against, a Playwright implementation of
them, and BrowserSession, which owns the browser for one scan.
"""

from typing import Any, Optional, Protocol

from playwright.async_api import Browser, Locator, Page, Playwright, async_playwright

from ..config import BrowserConfig, config
from ..exceptions import BrowserLaunchError
from ..utils.logger import get_scanner_logger

# Initialize logger
logger = get_scanner_logger()


class ElementLocator(Protocol):
    """First element matching a selector."""

    async def is_visible(self, timeout_ms: int) -> bool: ...

    async def click(self, timeout_ms: int) -> None: ...

    async def get_attribute(self, name: str) -> Optional[str]: ...


class Navigator(Protocol):
    """A single loaded browser page."""

    async def goto(self, url: str, wait_until: str, timeout_ms: int) -> None: ...

    async def wait_for_load_state(self, state: str, timeout_ms: int) -> None: ...

    async def title(self) -> Optional[str]: ...

    async def evaluate(self, script: str, arg: Any = None) -> Any: ...

    def locator(self, selector: str) -> ElementLocator: ...

    async def screenshot(self, image_type: str, quality: int, full_page: bool) -> bytes: ...

    async def add_script(self, path: str) -> None: ...

    async def wait(self, milliseconds: int) -> None: ...


class PlaywrightLocator:
    """ElementLocator backed by a Playwright locator's first match."""

    def __init__(self, locator: Locator):
        self._locator = locator.first

    async def is_visible(self, timeout_ms: int) -> bool:
        return await self._locator.is_visible(timeout=timeout_ms)

    async def click(self, timeout_ms: int) -> None:
        await self._locator.click(timeout=timeout_ms)

    async def get_attribute(self, name: str) -> Optional[str]:
        return await self._locator.get_attribute(name)


class PlaywrightNavigator:
    """Navigator backed by a Playwright page."""

    def __init__(self, page: Page):
        self.page = page

    async def goto(self, url: str, wait_until: str = "domcontentloaded", timeout_ms: int = 30000) -> None:
        await self.page.goto(url, wait_until=wait_until, timeout=timeout_ms)

    async def wait_for_load_state(self, state: str, timeout_ms: int) -> None:
        await self.page.wait_for_load_state(state, timeout=timeout_ms)

    async def title(self) -> Optional[str]:
        return await self.page.title()

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self.page.evaluate(script, arg)

    def locator(self, selector: str) -> PlaywrightLocator:
        return PlaywrightLocator(self.page.locator(selector))

    async def screenshot(self, image_type: str = "jpeg", quality: int = 80, full_page: bool = False) -> bytes:
        return await self.page.screenshot(type=image_type, quality=quality, full_page=full_page)

    async def add_script(self, path: str) -> None:
        await self.page.add_script_tag(path=path)

    async def wait(self, milliseconds: int) -> None:
        await self.page.wait_for_timeout(milliseconds)


class BrowserSession:
    """
    Owns one headless browser and page for the lifetime of a scan.

    Usage:
        async with BrowserSession() as navigator:
            await navigator.goto(url)

    Acquisition failures are raised as BrowserLaunchError after anything
    partially started has been shut down. Release runs on every exit path.
    """

    def __init__(self, browser_config: Optional[BrowserConfig] = None):
        self.browser_config = browser_config or config.browser
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None

    async def open(self) -> PlaywrightNavigator:
        """Launch the browser and create the scan page."""
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.browser_config.HEADLESS,
                args=list(self.browser_config.LAUNCH_ARGS),
            )
            logger.info("[BROWSER] Browser launched")
            self._page = await self._browser.new_page()
            logger.info("[BROWSER] Page created")
        except Exception as e:
            await self.close()
            raise BrowserLaunchError(str(e)) from e

        return PlaywrightNavigator(self._page)

    async def close(self) -> None:
        """Close page, browser and driver. Safe to call more than once."""
        if self._page is not None:
            try:
                await self._page.close()
            except Exception as e:
                logger.debug(f"[BROWSER] Page close failed: {e}")
            self._page = None

        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"[BROWSER] Browser close failed: {e}")
            self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"[BROWSER] Playwright stop failed: {e}")
            self._playwright = None

    async def __aenter__(self) -> PlaywrightNavigator:
        return await self.open()

    async def __aexit__(self, *args) -> None:
        await self.close()
