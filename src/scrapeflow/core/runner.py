"""Run service: executes scraper configurations and summarizes the outcome."""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from scrapeflow.monitoring.logger import get_logger, log_run_complete, log_run_start
from scrapeflow.scraping.engine import ScrapingEngine
from scrapeflow.scraping.job import Record, ScrapingError

from .config import settings
from .models import PreviewPayload, ScraperConfig

logger = get_logger(__name__)


class RunStatus:
    """Outcome of a scraper run."""

    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class RunSummary:
    """Summary of one scraper run, as stored in run history."""

    scraper_name: str
    status: str
    run_at: datetime
    item_count: int = 0
    duration: float = 0.0
    data: list[Record] = field(default_factory=list)
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status != RunStatus.ERROR

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation
        """
        return {
            "scraper_name": self.scraper_name,
            "status": self.status,
            "run_at": self.run_at.isoformat(),
            "item_count": self.item_count,
            "duration": round(self.duration, 2),
            "data": self.data,
            "error_message": self.error_message,
        }


@dataclass
class PreviewResult:
    """Sampled output of a preview run."""

    item_count: int
    data: list[Record]
    message: str


async def run_scraper(config: ScraperConfig, engine: ScrapingEngine | None = None) -> RunSummary:
    """Run a saved scraper configuration.

    Fatal engine failures are reported as an ``error`` summary rather than
    raised, so callers can record them in run history.

    Args:
        config: Validated scraper configuration
        engine: Engine to use (default: Selenium-backed engine)

    Returns:
        RunSummary
    """
    engine = engine or ScrapingEngine()
    job = config.to_job()
    run_at = datetime.now(timezone.utc)
    start_time = time.time()

    log_run_start(
        url=job.target_url,
        fields=len(job.fields),
        max_pages=job.pagination.effective_max_pages,
        scraper=config.name,
    )

    try:
        result = await engine.scrape(job)
    except ScrapingError as e:
        summary = RunSummary(
            scraper_name=config.name,
            status=RunStatus.ERROR,
            run_at=run_at,
            duration=time.time() - start_time,
            error_message=str(e),
        )
    else:
        summary = RunSummary(
            scraper_name=config.name,
            status=RunStatus.SUCCESS if result.items_count > 0 else RunStatus.EMPTY,
            run_at=run_at,
            item_count=result.items_count,
            duration=result.duration,
            data=result.data,
        )

    log_run_complete(
        url=job.target_url,
        status=summary.status,
        items_count=summary.item_count,
        duration=summary.duration,
        scraper=config.name,
    )
    return summary


async def preview_run(
    payload: PreviewPayload,
    engine: ScrapingEngine | None = None,
    sample_size: int | None = None,
) -> PreviewResult:
    """Run an unsaved configuration and return a sample of its output.

    Args:
        payload: Validated preview configuration
        engine: Engine to use (default: Selenium-backed engine)
        sample_size: Max items returned (uses settings if None)

    Returns:
        PreviewResult

    Raises:
        ScrapingError: On session launch or initial navigation failure
    """
    engine = engine or ScrapingEngine()
    if sample_size is None:
        sample_size = settings.preview_sample_size

    logger.info(f"Starting preview run for URL: {payload.url}")
    result = await engine.scrape(payload.to_job())
    sample = result.data[:sample_size]

    logger.info(
        f"Preview run completed for URL: {payload.url} | items={result.items_count} | "
        f"sample={len(sample)}"
    )
    return PreviewResult(
        item_count=result.items_count,
        data=sample,
        message=(
            f"Preview run successful. Found {result.items_count} items. "
            f"Displaying up to {sample_size} items as a sample."
        ),
    )

