"""Extraction job definition and run result types."""

from dataclasses import dataclass, field

# Field name -> extracted text, None when the field could not be extracted
Record = dict[str, str | None]


@dataclass(frozen=True)
class FieldSpec:
    """A named CSS selector describing one datum per page."""

    field_name: str
    css_selector: str


@dataclass(frozen=True)
class PaginationPolicy:
    """How far to follow the "next" control."""

    enabled: bool = False
    next_selector: str | None = None
    max_pages: int | None = None

    @property
    def effective_max_pages(self) -> int:
        """Page bound for a run. Never below one visit."""
        if not self.enabled:
            return 1
        return max(self.max_pages or 1, 1)


@dataclass(frozen=True)
class ExtractionJob:
    """Everything the engine needs for one run."""

    target_url: str
    fields: tuple[FieldSpec, ...]
    pagination: PaginationPolicy = field(default_factory=PaginationPolicy)

    def __post_init__(self) -> None:
        # Lists passed by callers are frozen into tuples
        object.__setattr__(self, "fields", tuple(self.fields))


class ScrapingError(RuntimeError):
    """Fatal run failure: the session could not be launched or the first page not loaded."""

    SESSION_LAUNCH = "session-launch"
    INITIAL_NAVIGATION = "initial-navigation"

    def __init__(self, url: str, stage: str, reason: str) -> None:
        self.url = url
        self.stage = stage
        self.reason = reason
        super().__init__(f"Scraping failed for {url} at {stage}: {reason}")
