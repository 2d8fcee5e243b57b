"""Per-page field extraction."""

from dataclasses import dataclass
from typing import Iterable

from scrapeflow.automation.session import PageSession
from scrapeflow.core.config import settings
from scrapeflow.monitoring.logger import get_logger

from .job import FieldSpec, Record

logger = get_logger(__name__)


@dataclass(frozen=True)
class FieldResult:
    """Outcome of extracting a single field."""

    field_name: str
    value: str | None = None
    warning: str | None = None


class FieldExtractor:
    """Builds one record per page from an ordered list of field specs.

    Every field is extracted independently: a missing element or a failed
    read leaves that field as None and is logged as a warning, it never
    affects the other fields of the record.
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize extractor.

        Args:
            timeout: Seconds to wait for each field selector (uses settings if None)
        """
        self.timeout = timeout if timeout is not None else settings.field_timeout

    async def extract_field(self, session: PageSession, spec: FieldSpec) -> FieldResult:
        """Extract one field from the current page.

        Args:
            session: Page session positioned on the page
            spec: Field to extract

        Returns:
            FieldResult with the trimmed text or a warning
        """
        selector = spec.css_selector.strip() if spec.css_selector else ""
        if not selector:
            return FieldResult(
                spec.field_name,
                warning=f"Empty CSS selector for field '{spec.field_name}', skipping",
            )

        try:
            if not await session.wait_for_selector(selector, self.timeout):
                return FieldResult(
                    spec.field_name,
                    warning=(
                        f"Selector '{selector}' for field '{spec.field_name}' "
                        f"not found within {self.timeout}s"
                    ),
                )
            text = await session.query_text(selector)
        except Exception as e:
            return FieldResult(
                spec.field_name,
                warning=(
                    f"Could not extract text from selector '{selector}' "
                    f"for field '{spec.field_name}': {e}"
                ),
            )

        value = text.strip() if text else ""
        return FieldResult(spec.field_name, value=value or None)

    async def extract(self, session: PageSession, fields: Iterable[FieldSpec]) -> Record | None:
        """Extract a record from the current page.

        Args:
            session: Page session positioned on the page
            fields: Ordered field specs

        Returns:
            Record, or None when every field is absent
        """
        record: Record = {}
        for spec in fields:
            result = await self.extract_field(session, spec)
            if result.warning:
                logger.warning(result.warning)
            # Duplicate field names: last write wins
            record[result.field_name] = result.value

        if not any(value is not None for value in record.values()):
            logger.debug("No data extracted from page")
            return None
        return record
