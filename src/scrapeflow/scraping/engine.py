"""Main scraping engine."""

import time
from dataclasses import dataclass, field
from typing import Any

from scrapeflow.automation.session import SessionFactory
from scrapeflow.monitoring.logger import get_logger, log_scraping_event

from .extractor import FieldExtractor
from .job import ExtractionJob, Record, ScrapingError
from .pagination import PaginationWalker

logger = get_logger(__name__)


@dataclass
class ScrapingResult:
    """Result of a scraping run."""

    data: list[Record] = field(default_factory=list)
    pages_visited: int = 0
    duration: float = 0.0

    @property
    def items_count(self) -> int:
        """Number of records produced."""
        return len(self.data)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation
        """
        return {
            "pages_visited": self.pages_visited,
            "items_count": self.items_count,
            "duration": round(self.duration, 2),
        }


class ScrapingEngine:
    """Runs extraction jobs, one fresh page session per job.

    The engine keeps no state between runs, so concurrent ``scrape()`` calls
    are independent as long as the session factory hands out separate
    sessions.
    """

    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        field_timeout: float | None = None,
        **walker_options: Any,
    ) -> None:
        """Initialize scraping engine.

        Args:
            session_factory: Coroutine function returning a new PageSession
                (Selenium by default)
            field_timeout: Seconds to wait for each field selector
            **walker_options: Timeouts and user agent passed to PaginationWalker
        """
        self.session_factory = session_factory
        self.field_timeout = field_timeout
        self.walker_options = walker_options

    def _walker(self) -> PaginationWalker:
        return PaginationWalker(
            session_factory=self.session_factory,
            extractor=FieldExtractor(timeout=self.field_timeout),
            **self.walker_options,
        )

    async def run(self, job: ExtractionJob) -> list[Record]:
        """Run a job and return only its records.

        Raises:
            ScrapingError: On session launch or initial navigation failure
        """
        result = await self.scrape(job)
        return result.data

    async def scrape(self, job: ExtractionJob) -> ScrapingResult:
        """Execute an extraction job.

        Args:
            job: Extraction job

        Returns:
            ScrapingResult with records in page-visit order

        Raises:
            ScrapingError: On session launch or initial navigation failure
        """
        start_time = time.time()
        walker = self._walker()
        logger.info(f"Starting scrape: {job.target_url}")

        try:
            data = await walker.run(job)
        except ScrapingError as e:
            log_scraping_event(
                url=job.target_url,
                items_count=0,
                duration=time.time() - start_time,
                success=False,
                stage=e.stage,
            )
            raise

        result = ScrapingResult(
            data=data,
            pages_visited=walker.pages_visited,
            duration=time.time() - start_time,
        )
        log_scraping_event(
            url=job.target_url,
            items_count=result.items_count,
            duration=result.duration,
            success=True,
            pages=result.pages_visited,
        )
        return result
