"""Tests for the Selenium page session."""

from unittest.mock import Mock

import pytest
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
)
from selenium.webdriver.common.by import By

from scrapeflow.automation.browser import SeleniumPageSession
from scrapeflow.automation.session import WaitUntil
from scrapeflow.core.config import BrowserType
from scrapeflow.scraping.job import ExtractionJob, FieldSpec, PaginationPolicy
from scrapeflow.scraping.pagination import PaginationWalker


@pytest.fixture
def driver():
    driver = Mock()
    driver.session_id = "abc123"
    driver.execute_script.return_value = "complete"
    return driver


@pytest.fixture
def session(driver):
    return SeleniumPageSession(driver, BrowserType.CHROME)


class TestSeleniumPageSession:
    """Tests for SeleniumPageSession."""

    @pytest.mark.asyncio
    async def test_configure_chrome(self, session, driver):
        """Test Chrome sessions override the user agent over CDP."""
        await session.configure("Mozilla/5.0 Test", navigation_timeout=60, default_timeout=30)

        driver.set_page_load_timeout.assert_called_once_with(60)
        driver.set_script_timeout.assert_called_once_with(30)
        driver.execute_cdp_cmd.assert_called_once_with(
            "Network.setUserAgentOverride", {"userAgent": "Mozilla/5.0 Test"}
        )

    @pytest.mark.asyncio
    async def test_configure_firefox(self, driver):
        """Test Firefox sessions keep the launch user agent."""
        session = SeleniumPageSession(driver, BrowserType.FIREFOX)

        await session.configure("Mozilla/5.0 Test", navigation_timeout=60, default_timeout=30)

        driver.execute_cdp_cmd.assert_not_called()

    @pytest.mark.asyncio
    async def test_navigate_waits_for_ready_state(self, session, driver):
        """Test navigation loads the URL and checks the ready state."""
        await session.navigate("https://example.com", WaitUntil.NETWORK_IDLE)

        driver.get.assert_called_once_with("https://example.com")
        driver.execute_script.assert_called_with("return document.readyState")

    @pytest.mark.asyncio
    async def test_wait_for_selector_found(self, session, driver):
        """Test a present element is reported as found."""
        assert await session.wait_for_selector("h1", timeout=1) is True
        driver.find_element.assert_called_with(By.CSS_SELECTOR, "h1")

    @pytest.mark.asyncio
    async def test_wait_for_selector_defaults_to_operation_timeout(self, session, driver):
        """Test a wait without a timeout is bounded by the configured operation timeout."""
        await session.configure("Mozilla/5.0 Test", navigation_timeout=60, default_timeout=0.05)
        driver.find_element.side_effect = NoSuchElementException("no such element")

        assert await session.wait_for_selector("#missing") is False

    @pytest.mark.asyncio
    async def test_wait_for_selector_timeout(self, session, driver):
        """Test a missing element is reported as not found."""
        driver.find_element.side_effect = NoSuchElementException("no such element")

        assert await session.wait_for_selector("#missing", timeout=0.01) is False

    @pytest.mark.asyncio
    async def test_query_text_first_match(self, session, driver):
        """Test text comes from the first matching element."""
        first, second = Mock(), Mock()
        first.get_attribute.return_value = "  Hello  "
        driver.find_elements.return_value = [first, second]

        assert await session.query_text("h1") == "  Hello  "
        first.get_attribute.assert_called_once_with("textContent")
        second.get_attribute.assert_not_called()

    @pytest.mark.asyncio
    async def test_query_text_no_match(self, session, driver):
        """Test no match returns None."""
        driver.find_elements.return_value = []

        assert await session.query_text("h1") is None
        assert await session.has_element("h1") is False

    @pytest.mark.asyncio
    async def test_click_falls_back_to_javascript(self, session, driver):
        """Test an intercepted click is retried through JavaScript."""
        element = Mock()
        element.click.side_effect = ElementClickInterceptedException("overlay")
        driver.find_element.return_value = element

        await session.click("a.next")

        driver.execute_script.assert_called_with("arguments[0].click();", element)

    @pytest.mark.asyncio
    async def test_await_navigation_detects_new_document(self, session, driver):
        """Test navigation completes once the old document goes stale."""
        marker = Mock()
        marker.is_enabled.side_effect = [True, StaleElementReferenceException("stale")]
        driver.find_element.return_value = marker

        await session.await_navigation(WaitUntil.NETWORK_IDLE, timeout=5)

        driver.find_element.assert_called_with(By.TAG_NAME, "html")
        assert marker.is_enabled.call_count == 2

    @pytest.mark.asyncio
    async def test_await_navigation_timeout(self, session, driver):
        """Test a page that never changes times out."""
        driver.find_element.return_value = Mock()

        with pytest.raises(TimeoutException):
            await session.await_navigation(WaitUntil.LOAD, timeout=0.05)

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, session, driver):
        """Test the browser is quit only once."""
        await session.close()
        await session.close()

        driver.quit.assert_called_once()
        assert session.is_closed

    @pytest.mark.asyncio
    async def test_closed_session_rejects_commands(self, session, driver):
        """Test commands fail after close."""
        await session.close()

        with pytest.raises(RuntimeError, match="closed"):
            await session.query_text("h1")
        driver.find_elements.assert_not_called()


class TestSeleniumPagination:
    """Tests for the pagination walker driving a Selenium session."""

    @pytest.mark.asyncio
    async def test_navigation_marker_captured_before_click(self, driver):
        """Test the current document is captured before the next link is clicked."""
        events = []
        marker = Mock()
        link = Mock()
        heading = Mock()
        heading.get_attribute.return_value = "Title"

        def find_element(by, value):
            events.append(("find", value))
            return marker if value == "html" else link

        def marker_is_enabled():
            if "click" in events:
                raise StaleElementReferenceException("stale")
            return True

        driver.find_element.side_effect = find_element
        driver.find_elements.return_value = [heading]
        marker.is_enabled.side_effect = marker_is_enabled
        link.click.side_effect = lambda: events.append("click")

        session = SeleniumPageSession(driver, BrowserType.CHROME)

        async def factory():
            return session

        walker = PaginationWalker(session_factory=factory, navigation_timeout=5)
        job = ExtractionJob(
            target_url="https://shop.example.com/list",
            fields=[FieldSpec("title", "h1")],
            pagination=PaginationPolicy(enabled=True, next_selector="a.next", max_pages=2),
        )

        records = await walker.run(job)

        assert records == [{"title": "Title"}, {"title": "Title"}]
        assert events.index(("find", "html")) < events.index("click")
        assert walker.pages_visited == 2
        driver.quit.assert_called_once()
