"""
Shared fixtures: in-memory browser, auditor and session doubles.
"""

import pytest

from deepscan.services.crawler import LINK_EXTRACTION_SCRIPT
from deepscan.services.platform import DOCUMENT_HTML_SCRIPT


class FakeElement:
    """A page element as seen through a locator."""

    def __init__(self, visible=True, attributes=None, click_error=None):
        self.visible = visible
        self.attributes = attributes or {}
        self.click_error = click_error
        self.clicks = 0


class FakeLocator:
    def __init__(self, element):
        self.element = element

    async def is_visible(self, timeout_ms):
        return self.element is not None and self.element.visible

    async def click(self, timeout_ms):
        if self.element is None:
            raise TimeoutError("no element")
        if self.element.click_error:
            raise self.element.click_error
        self.element.clicks += 1

    async def get_attribute(self, name):
        return self.element.attributes.get(name) if self.element else None


class FakeNavigator:
    """
    Navigator over an in-memory site.

    ``pages`` maps URL -> {"title": str, "links": [href, ...], "html": str}.
    URLs not in ``pages`` or listed in ``failing`` raise on goto.
    ``elements`` maps selector -> FakeElement for the state explorer.
    """

    def __init__(self, pages=None, failing=(), elements=None, title_errors=(), screenshot_error=None):
        self.pages = pages or {}
        self.failing = set(failing)
        self.elements = elements or {}
        self.title_errors = set(title_errors)
        self.screenshot_error = screenshot_error
        self.current_url = None
        self.visits = []
        self.waits = []
        self.screenshots = 0

    async def goto(self, url, wait_until="domcontentloaded", timeout_ms=30000):
        self.visits.append(url)
        if url in self.failing or url not in self.pages:
            raise TimeoutError(f"Navigation timeout for {url}")
        self.current_url = url

    async def wait_for_load_state(self, state, timeout_ms):
        return None

    async def title(self):
        if self.current_url in self.title_errors:
            raise RuntimeError("title unavailable")
        return self.pages[self.current_url].get("title")

    async def evaluate(self, script, arg=None):
        page = self.pages.get(self.current_url, {})
        if script == LINK_EXTRACTION_SCRIPT:
            return list(page.get("links", []))
        if script == DOCUMENT_HTML_SCRIPT:
            return page.get("html", "<html><body></body></html>")
        return None

    def locator(self, selector):
        return FakeLocator(self.elements.get(selector))

    async def screenshot(self, image_type="jpeg", quality=80, full_page=False):
        if self.screenshot_error:
            raise self.screenshot_error
        self.screenshots += 1
        return b"fake-jpeg"

    async def add_script(self, path):
        return None

    async def wait(self, milliseconds):
        self.waits.append(milliseconds)


class FakeAuditor:
    """
    Auditor returning canned axe results per page URL.

    ``errors`` maps URL -> exception raised on every run for that page.
    """

    def __init__(self, results=None, errors=None):
        self.results = results or {}
        self.errors = errors or {}
        self.runs = []

    async def run(self, navigator):
        self.runs.append(navigator.current_url)
        if navigator.current_url in self.errors:
            raise self.errors[navigator.current_url]
        return self.results.get(navigator.current_url, {"violations": []})


class FakeSession:
    """Browser session handing out one navigator."""

    def __init__(self, navigator, open_error=None):
        self.navigator = navigator
        self.open_error = open_error
        self.opened = 0
        self.closed = 0

    async def open(self):
        self.opened += 1
        if self.open_error:
            raise self.open_error
        return self.navigator

    async def close(self):
        self.closed += 1


class StepClock:
    """Clock that advances a fixed step every time it is read."""

    def __init__(self, step=1.0):
        self.now = 0.0
        self.step = step

    def __call__(self):
        current = self.now
        self.now += self.step
        return current


def axe_violation(rule, *targets, impact="serious", tags=("wcag2a", "wcag111", "cat.text-alternatives")):
    """Build one axe violation entry with a node per target selector."""
    return {
        "id": rule,
        "description": f"{rule} description",
        "helpUrl": f"https://dequeuniversity.com/rules/axe/4.8/{rule}",
        "tags": list(tags),
        "nodes": [
            {"target": [target], "html": f"<el data-target='{target}'>", "impact": impact}
            for target in targets
        ],
    }


@pytest.fixture
def fake_navigator():
    """Factory for FakeNavigator."""
    return FakeNavigator


@pytest.fixture
def fake_element():
    """Factory for FakeElement."""
    return FakeElement


@pytest.fixture
def fake_auditor():
    """Factory for FakeAuditor."""
    return FakeAuditor


@pytest.fixture
def fake_session():
    """Factory for FakeSession."""
    return FakeSession


@pytest.fixture
def step_clock():
    """Factory for StepClock."""
    return StepClock


@pytest.fixture
def violation():
    """Builder for axe violation entries."""
    return axe_violation


@pytest.fixture
def small_site():
    """Three linked pages plus an external link and a mailto link."""
    return {
        "https://example.com": {
            "title": "Home",
            "links": [
                "https://example.com/blog/post-1",
                "https://example.com/about",
                "https://other.example.org/about",
                "mailto:hello@example.com",
                "https://example.com#main",
            ],
            "html": "<html><body><div id='__next'></div></body></html>",
        },
        "https://example.com/about": {
            "title": "About",
            "links": ["https://example.com", "https://example.com/team"],
        },
        "https://example.com/blog/post-1": {
            "title": "Post",
            "links": ["https://example.com/about"],
        },
        "https://example.com/team": {"title": "Team", "links": []},
    }
