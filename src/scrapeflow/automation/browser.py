"""Selenium browser factory and page session."""

import asyncio
import time
from typing import Any, Callable

from selenium import webdriver
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.common.by import By
from selenium.webdriver.edge.options import Options as EdgeOptions
from selenium.webdriver.edge.service import Service as EdgeService
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager
from webdriver_manager.firefox import GeckoDriverManager
from webdriver_manager.microsoft import EdgeChromiumDriverManager

from scrapeflow.core.config import BrowserType, settings
from scrapeflow.monitoring.logger import get_logger

from .session import PageSession, WaitUntil

logger = get_logger(__name__)

# Interval between staleness checks while waiting for a navigation
NAVIGATION_POLL_INTERVAL = 0.1


class BrowserFactory:
    """Factory for creating Selenium WebDriver instances."""

    @staticmethod
    def _get_chrome_options(headless: bool = True, user_agent: str | None = None) -> ChromeOptions:
        """Configure Chrome options.

        Args:
            headless: Run in headless mode
            user_agent: Custom user agent

        Returns:
            Configured ChromeOptions
        """
        options = ChromeOptions()

        if headless:
            options.add_argument("--headless=new")

        # Performance and stability
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-setuid-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument("--disable-gpu")
        options.add_argument("--disable-accelerated-2d-canvas")
        options.add_argument("--no-first-run")
        options.add_argument("--disable-extensions")
        options.add_argument("--disable-notifications")
        options.add_argument("--window-size=1920,1080")

        # Anti-detection
        options.add_argument("--disable-blink-features=AutomationControlled")
        options.add_experimental_option("excludeSwitches", ["enable-automation"])
        options.add_experimental_option("useAutomationExtension", False)

        options.add_argument(f"--user-agent={user_agent or settings.user_agent}")
        options.add_argument("--log-level=3")

        return options

    @staticmethod
    def _get_firefox_options(headless: bool = True, user_agent: str | None = None) -> FirefoxOptions:
        """Configure Firefox options.

        Args:
            headless: Run in headless mode
            user_agent: Custom user agent

        Returns:
            Configured FirefoxOptions
        """
        options = FirefoxOptions()

        if headless:
            options.add_argument("--headless")

        options.add_argument("--width=1920")
        options.add_argument("--height=1080")
        options.set_preference("general.useragent.override", user_agent or settings.user_agent)
        options.set_preference("dom.webnotifications.enabled", False)
        options.set_preference("dom.push.enabled", False)

        return options

    @staticmethod
    def _get_edge_options(headless: bool = True, user_agent: str | None = None) -> EdgeOptions:
        """Configure Edge options.

        Args:
            headless: Run in headless mode
            user_agent: Custom user agent

        Returns:
            Configured EdgeOptions
        """
        options = EdgeOptions()

        if headless:
            options.add_argument("--headless=new")

        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument("--disable-gpu")
        options.add_argument("--window-size=1920,1080")
        options.add_argument(f"--user-agent={user_agent or settings.user_agent}")

        return options

    @classmethod
    def create(
        cls,
        browser_type: BrowserType | None = None,
        headless: bool | None = None,
        user_agent: str | None = None,
    ) -> WebDriver:
        """Create a new WebDriver instance.

        Args:
            browser_type: Type of browser to use
            headless: Run in headless mode (uses settings if None)
            user_agent: Custom user agent (uses settings if None)

        Returns:
            Configured WebDriver instance
        """
        browser_type = browser_type or settings.browser_type
        headless = headless if headless is not None else settings.selenium_headless

        logger.info(f"Creating browser | type={browser_type.value} | headless={headless}")

        if browser_type == BrowserType.CHROME:
            options = cls._get_chrome_options(headless, user_agent)
            service = ChromeService(ChromeDriverManager().install())
            driver = webdriver.Chrome(service=service, options=options)

        elif browser_type == BrowserType.FIREFOX:
            options = cls._get_firefox_options(headless, user_agent)
            service = FirefoxService(GeckoDriverManager().install())
            driver = webdriver.Firefox(service=service, options=options)

        elif browser_type == BrowserType.EDGE:
            options = cls._get_edge_options(headless, user_agent)
            service = EdgeService(EdgeChromiumDriverManager().install())
            driver = webdriver.Edge(service=service, options=options)

        else:
            raise ValueError(f"Unsupported browser type: {browser_type}")

        # Explicit waits only
        driver.set_page_load_timeout(settings.navigation_timeout)
        driver.set_script_timeout(settings.operation_timeout)
        driver.implicitly_wait(0)

        logger.info(f"Browser created successfully | session_id={driver.session_id}")
        return driver


class SeleniumPageSession(PageSession):
    """PageSession backed by a Selenium WebDriver.

    Driver commands block, so each one runs in a worker thread. Commands are
    serialised through an asyncio lock: WebDriver is not safe for concurrent
    use, and the lock's FIFO ordering keeps a navigation wait that was started
    first ahead of the click that triggers it.

    "Network idle" has no WebDriver equivalent and is approximated by
    ``document.readyState == "complete"``.
    """

    def __init__(self, driver: WebDriver, browser_type: BrowserType | None = None) -> None:
        """Initialize session.

        Args:
            driver: Started WebDriver, owned by the session from now on
            browser_type: Browser behind the driver
        """
        self._driver = driver
        self._browser_type = browser_type or settings.browser_type
        self._lock = asyncio.Lock()
        self._closed = False
        self._navigation_timeout = settings.navigation_timeout
        self._default_timeout = settings.operation_timeout

    @classmethod
    async def launch(
        cls,
        browser_type: BrowserType | None = None,
        headless: bool | None = None,
        user_agent: str | None = None,
    ) -> "SeleniumPageSession":
        """Start a browser and wrap it in a session.

        Args:
            browser_type: Type of browser to use
            headless: Run in headless mode
            user_agent: Custom user agent

        Returns:
            New session
        """
        browser_type = browser_type or settings.browser_type
        driver = await asyncio.to_thread(BrowserFactory.create, browser_type, headless, user_agent)
        return cls(driver, browser_type)

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def _call(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking driver command in a thread.

        Raises:
            RuntimeError: If the session has been closed
        """
        if self._closed:
            raise RuntimeError("Page session is closed")
        async with self._lock:
            if self._closed:
                raise RuntimeError("Page session is closed")
            return await asyncio.to_thread(func, *args)

    def _wait_ready(self, timeout: float) -> None:
        WebDriverWait(self._driver, timeout).until(
            lambda d: d.execute_script("return document.readyState") == "complete"
        )

    def _load(self, url: str, wait_until: WaitUntil) -> None:
        self._driver.get(url)
        if wait_until == WaitUntil.NETWORK_IDLE:
            self._wait_ready(self._navigation_timeout)

    def _apply_configuration(
        self, user_agent: str, navigation_timeout: float, default_timeout: float
    ) -> None:
        self._driver.set_page_load_timeout(navigation_timeout)
        self._driver.set_script_timeout(default_timeout)
        if self._browser_type in (BrowserType.CHROME, BrowserType.EDGE):
            self._driver.execute_cdp_cmd(
                "Network.setUserAgentOverride", {"userAgent": user_agent}
            )
        else:
            # Firefox takes the user agent from launch preferences only
            logger.debug(f"User agent fixed at launch for {self._browser_type.value}")

    def _wait_present(self, selector: str, timeout: float) -> bool:
        try:
            WebDriverWait(self._driver, timeout).until(
                EC.presence_of_element_located((By.CSS_SELECTOR, selector))
            )
            return True
        except TimeoutException:
            return False

    def _text(self, selector: str) -> str | None:
        elements = self._driver.find_elements(By.CSS_SELECTOR, selector)
        if not elements:
            return None
        return elements[0].get_attribute("textContent")

    def _click(self, selector: str) -> None:
        element = self._driver.find_element(By.CSS_SELECTOR, selector)
        try:
            element.click()
        except ElementClickInterceptedException:
            logger.debug(f"Click intercepted, using JavaScript click | selector={selector}")
            self._driver.execute_script("arguments[0].click();", element)

    def _is_stale(self, element: WebElement) -> bool:
        return EC.staleness_of(element)(self._driver)

    async def configure(
        self,
        user_agent: str,
        navigation_timeout: float,
        default_timeout: float,
    ) -> None:
        self._navigation_timeout = navigation_timeout
        self._default_timeout = default_timeout
        await self._call(
            self._apply_configuration, user_agent, navigation_timeout, default_timeout
        )

    async def navigate(self, url: str, wait_until: WaitUntil = WaitUntil.NETWORK_IDLE) -> None:
        logger.debug(f"Navigating to: {url}")
        await self._call(self._load, url, wait_until)

    async def wait_for_selector(self, selector: str, timeout: float | None = None) -> bool:
        if timeout is None:
            timeout = self._default_timeout
        return await self._call(self._wait_present, selector, timeout)

    async def query_text(self, selector: str) -> str | None:
        return await self._call(self._text, selector)

    async def has_element(self, selector: str) -> bool:
        elements = await self._call(self._driver.find_elements, By.CSS_SELECTOR, selector)
        return bool(elements)

    async def click(self, selector: str) -> None:
        await self._call(self._click, selector)

    async def await_navigation(
        self,
        wait_until: WaitUntil = WaitUntil.NETWORK_IDLE,
        timeout: float | None = None,
    ) -> None:
        """Wait for the current document to be replaced.

        The root element of the current document is captured first; the
        navigation is complete once it goes stale and, for NETWORK_IDLE, the
        new document reports ready.

        Raises:
            TimeoutException: If no navigation finishes within ``timeout``
        """
        if timeout is None:
            timeout = self._navigation_timeout
        deadline = time.monotonic() + timeout
        marker = await self._call(self._driver.find_element, By.TAG_NAME, "html")

        while not await self._call(self._is_stale, marker):
            if time.monotonic() >= deadline:
                raise TimeoutException(f"No navigation within {timeout}s")
            await asyncio.sleep(NAVIGATION_POLL_INTERVAL)

        if wait_until == WaitUntil.NETWORK_IDLE:
            remaining = max(deadline - time.monotonic(), 0.0)
            await self._call(self._wait_ready, remaining)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            session_id = self._driver.session_id
            await asyncio.to_thread(self._driver.quit)
            logger.info(f"Browser closed | session_id={session_id}")
        except WebDriverException as e:
            logger.error(f"Error closing browser: {e}")
