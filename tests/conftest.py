"""Pytest configuration and fixtures."""

import asyncio
import os
import sys
from pathlib import Path

import pytest

# Add source root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

# Set test environment
os.environ["APP_ENV"] = "development"
os.environ["DEBUG"] = "true"
os.environ["LOGS_PATH"] = str(project_root / "test_logs")

from scrapeflow.automation.session import PageSession, WaitUntil  # noqa: E402


class FakePageSession(PageSession):
    """Deterministic in-memory page session.

    Each page is a mapping of CSS selector -> text content. Clicking a
    selector present on the current page moves to the next page and fires the
    pending navigation, if one is being awaited.
    """

    def __init__(
        self,
        pages: list[dict[str, str]],
        fail_navigation: bool = False,
        fail_click: bool = False,
        click_navigates: bool = True,
        broken_selectors: set[str] | None = None,
    ) -> None:
        self.pages = pages
        self.fail_navigation = fail_navigation
        self.fail_click = fail_click
        self.click_navigates = click_navigates
        self.broken_selectors = broken_selectors or set()

        self.page_index = 0
        self.calls: list[tuple] = []
        self.configuration: dict | None = None
        self.close_count = 0
        self.missed_navigation = False
        self._closed = False
        self._waiter: asyncio.Future | None = None

    @property
    def current_page(self) -> dict[str, str]:
        if self.page_index < len(self.pages):
            return self.pages[self.page_index]
        return {}

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Page session is closed")

    async def configure(self, user_agent, navigation_timeout, default_timeout) -> None:
        self.configuration = {
            "user_agent": user_agent,
            "navigation_timeout": navigation_timeout,
            "default_timeout": default_timeout,
        }

    async def navigate(self, url, wait_until=WaitUntil.NETWORK_IDLE) -> None:
        self._check_open()
        self.calls.append(("navigate", url, wait_until))
        if self.fail_navigation:
            raise ConnectionError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        self.page_index = 0

    async def wait_for_selector(self, selector, timeout=None) -> bool:
        self._check_open()
        self.calls.append(("wait_for_selector", selector, timeout))
        return selector in self.current_page

    async def query_text(self, selector) -> str | None:
        self._check_open()
        self.calls.append(("query_text", selector))
        if selector in self.broken_selectors:
            raise RuntimeError(f"Element for '{selector}' detached from document")
        return self.current_page.get(selector)

    async def has_element(self, selector) -> bool:
        self._check_open()
        return selector in self.current_page

    async def click(self, selector) -> None:
        self._check_open()
        self.calls.append(("click", selector))
        if self.fail_click or selector not in self.current_page:
            raise RuntimeError(f"Node is either not clickable or not an element: {selector}")
        if not self.click_navigates:
            return
        self.page_index += 1
        if self._waiter is None:
            self.missed_navigation = True
        elif not self._waiter.done():
            self._waiter.set_result(None)

    async def await_navigation(self, wait_until=WaitUntil.NETWORK_IDLE, timeout=None) -> None:
        self._check_open()
        self.calls.append(("await_navigation", wait_until))
        self._waiter = asyncio.get_running_loop().create_future()
        try:
            await asyncio.wait_for(self._waiter, timeout)
        finally:
            self._waiter = None

    async def close(self) -> None:
        self.close_count += 1
        self._closed = True

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


def make_factory(session: PageSession):
    """Session factory handing out ``session``."""

    async def factory() -> PageSession:
        return session

    return factory


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Setup test environment."""
    yield

    # Cleanup
    import shutil

    logs_dir = project_root / "test_logs"
    if logs_dir.exists():
        shutil.rmtree(logs_dir)


@pytest.fixture
def listing_pages():
    """Three result pages, each linking to the next except the last."""
    return [
        {"h1": "Page One", "span.price": " $10 ", "a.next": "Next"},
        {"h1": "Page Two", "span.price": "$20", "a.next": "Next"},
        {"h1": "Page Three", "span.price": "$30"},
    ]


@pytest.fixture
def make_session():
    """Build a FakePageSession."""
    return FakePageSession


@pytest.fixture
def factory_for():
    """Build a session factory returning a given session."""
    return make_factory
