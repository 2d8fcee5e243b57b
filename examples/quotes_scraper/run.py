"""Quotes scraper example - Quotes to Scrape.

This example demonstrates:
- Validating a scraper configuration
- Following the "Next" link across result pages
- Preview runs versus full runs

Usage:
    python -m examples.quotes_scraper.run
"""

import asyncio
import json
import sys
from pathlib import Path

# Add source root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from scrapeflow.core.models import PreviewPayload, ScraperConfig
from scrapeflow.core.runner import RunStatus, preview_run, run_scraper
from scrapeflow.monitoring.logger import get_logger, setup_logging

logger = get_logger(__name__)

# Configuration
MAX_DEPTH = 5

SELECTORS = [
    {"fieldName": "quote", "cssSelector": "div.quote span.text"},
    {"fieldName": "author", "cssSelector": "div.quote small.author"},
    {"fieldName": "tags", "cssSelector": "div.quote div.tags"},
]


async def main() -> int:
    """Run the quotes scraper example."""
    setup_logging()

    # One record per page: the first quote block of each listing page
    preview = await preview_run(
        PreviewPayload(url="https://quotes.toscrape.com/", selectors=SELECTORS)
    )
    logger.info(preview.message)

    config = ScraperConfig.model_validate(
        {
            "name": "Quotes to Scrape - first quote per page",
            "url": "https://quotes.toscrape.com/",
            "selectors": SELECTORS,
            "paginationEnabled": True,
            "paginationNextSelector": "li.next a",
            "maxDepth": MAX_DEPTH,
        }
    )
    summary = await run_scraper(config)

    logger.info("=" * 60)
    logger.info(f"Run status: {summary.status} | items: {summary.item_count}")
    logger.info("=" * 60)
    for record in summary.data:
        logger.info(f"  {record['author']}: {(record['quote'] or '')[:60]}")

    print(json.dumps(summary.to_dict(), indent=2, ensure_ascii=False))
    return 0 if summary.status != RunStatus.ERROR else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
