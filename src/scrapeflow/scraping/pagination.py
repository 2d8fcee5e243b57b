"""Pagination walker: drives page visits for one extraction run."""

import asyncio
from enum import Enum

from scrapeflow.automation.browser import SeleniumPageSession
from scrapeflow.automation.session import PageSession, SessionFactory, WaitUntil
from scrapeflow.core.config import settings
from scrapeflow.monitoring.logger import get_logger

from .extractor import FieldExtractor
from .job import ExtractionJob, Record, ScrapingError

logger = get_logger(__name__)


class WalkState(str, Enum):
    """States of a pagination walk."""

    INIT = "init"
    LOADED = "loaded"
    EXTRACTED = "extracted"
    ADVANCED = "advanced"
    DONE = "done"


class PaginationWalker:
    """Visits the target page and follows the "next" control.

    A walker owns one page session per ``run()``. Only session launch and the
    first navigation are fatal; any failure while advancing stops the walk and
    the records gathered so far are returned.
    """

    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        extractor: FieldExtractor | None = None,
        navigation_timeout: float | None = None,
        operation_timeout: float | None = None,
        next_selector_timeout: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        """Initialize walker.

        Args:
            session_factory: Coroutine function returning a new PageSession
            extractor: Field extractor (default uses settings)
            navigation_timeout: Seconds allowed for each navigation
            operation_timeout: Default seconds for other session operations
            next_selector_timeout: Seconds to wait for the next-page control
            user_agent: User agent for the session
        """
        self.session_factory = session_factory or SeleniumPageSession.launch
        self.extractor = extractor or FieldExtractor()
        self.navigation_timeout = (
            navigation_timeout if navigation_timeout is not None else settings.navigation_timeout
        )
        self.operation_timeout = (
            operation_timeout if operation_timeout is not None else settings.operation_timeout
        )
        self.next_selector_timeout = (
            next_selector_timeout
            if next_selector_timeout is not None
            else settings.next_selector_timeout
        )
        self.user_agent = user_agent or settings.user_agent
        self._state = WalkState.INIT
        self._pages_visited = 0

    @property
    def state(self) -> WalkState:
        """State reached by the last run."""
        return self._state

    @property
    def pages_visited(self) -> int:
        """Pages extracted by the last run."""
        return self._pages_visited

    async def run(self, job: ExtractionJob) -> list[Record]:
        """Run an extraction job.

        Args:
            job: Job to run

        Returns:
            Records in page-visit order

        Raises:
            ScrapingError: If the session cannot be launched or the target URL
                cannot be loaded
        """
        self._state = WalkState.INIT
        self._pages_visited = 0

        try:
            session = await self.session_factory()
        except Exception as e:
            logger.error(f"Could not launch page session for {job.target_url}: {e}")
            raise ScrapingError(job.target_url, ScrapingError.SESSION_LAUNCH, str(e)) from e

        try:
            await self._load(session, job)
            return await self._walk(session, job)
        finally:
            logger.debug(f"Closing page session for {job.target_url}")
            await session.close()
            self._state = WalkState.DONE

    async def _load(self, session: PageSession, job: ExtractionJob) -> None:
        """Configure the session and open the target URL."""
        try:
            await session.configure(
                user_agent=self.user_agent,
                navigation_timeout=self.navigation_timeout,
                default_timeout=self.operation_timeout,
            )
            logger.info(f"Navigating to {job.target_url}")
            await session.navigate(job.target_url, wait_until=WaitUntil.NETWORK_IDLE)
        except Exception as e:
            logger.error(f"Initial navigation to {job.target_url} failed: {e}")
            raise ScrapingError(
                job.target_url, ScrapingError.INITIAL_NAVIGATION, str(e)
            ) from e
        self._state = WalkState.LOADED

    async def _walk(self, session: PageSession, job: ExtractionJob) -> list[Record]:
        """Extract pages until the walk is done."""
        pagination = job.pagination
        max_pages = pagination.effective_max_pages
        records: list[Record] = []
        page_index = 1

        while True:
            logger.info(f"Scraping page {page_index} of {max_pages} for {job.target_url}")
            record = await self.extractor.extract(session, job.fields)
            self._pages_visited = page_index
            self._state = WalkState.EXTRACTED
            if record is not None:
                records.append(record)

            if not (pagination.enabled and pagination.next_selector and page_index < max_pages):
                if pagination.enabled and page_index < max_pages:
                    logger.info("Pagination conditions not met, no next-page selector")
                break

            if not await self._advance(session, pagination.next_selector):
                break

            page_index += 1
            self._state = WalkState.LOADED

        logger.info(f"Scraping finished for {job.target_url} | items={len(records)}")
        return records

    async def _advance(self, session: PageSession, next_selector: str) -> bool:
        """Click the next-page control and wait for the new page.

        Returns:
            True if the next page is loaded
        """
        logger.debug(f"Looking for next page selector: {next_selector}")
        try:
            found = await session.wait_for_selector(next_selector, self.next_selector_timeout)
            if not found or not await session.has_element(next_selector):
                logger.info(f"Next page selector '{next_selector}' not found, ending pagination")
                return False

            await self._click_and_wait(session, next_selector)
        except Exception as e:
            logger.warning(
                f"Could not follow next page selector '{next_selector}': {e}. Ending pagination."
            )
            return False

        self._state = WalkState.ADVANCED
        logger.debug("Navigated to next page")
        return True

    async def _click_and_wait(self, session: PageSession, selector: str) -> None:
        """Click ``selector`` while awaiting the navigation it triggers.

        Both run as tasks joined by a single wait. The navigation task is
        created first so it is listening before the click lands.
        """
        navigation = asyncio.ensure_future(
            session.await_navigation(WaitUntil.NETWORK_IDLE, self.navigation_timeout)
        )
        click = asyncio.ensure_future(session.click(selector))
        try:
            await asyncio.wait_for(
                asyncio.gather(navigation, click), timeout=self.navigation_timeout
            )
        finally:
            for task in (navigation, click):
                if not task.done():
                    task.cancel()
            # Retrieve outcomes so a failed half is not reported as unhandled
            await asyncio.gather(navigation, click, return_exceptions=True)
