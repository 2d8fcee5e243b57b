"""Scraper configuration models."""

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    model_validator,
)

from scrapeflow.scraping.job import ExtractionJob, FieldSpec, PaginationPolicy

_http_url = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    """Validate as an http(s) URL but keep the text as entered."""
    _http_url.validate_python(value)
    return value


TargetUrl = Annotated[str, AfterValidator(_check_http_url)]


class ScraperStatus(str, Enum):
    """Lifecycle status of a stored scraper."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ERROR = "error"


class SelectorConfig(BaseModel):
    """One field of a scraper configuration."""

    model_config = ConfigDict(populate_by_name=True)

    field_name: str = Field(..., min_length=1, alias="fieldName")
    css_selector: str = Field(..., min_length=1, alias="cssSelector")

    def to_field_spec(self) -> FieldSpec:
        return FieldSpec(field_name=self.field_name, css_selector=self.css_selector)


class _PaginatedConfig(BaseModel):
    """Fields shared by stored configs and preview payloads."""

    model_config = ConfigDict(populate_by_name=True)

    url: TargetUrl
    selectors: list[SelectorConfig] = Field(..., min_length=1)
    pagination_enabled: bool = Field(default=False, alias="paginationEnabled")
    pagination_next_selector: str | None = Field(default=None, alias="paginationNextSelector")
    max_depth: int | None = Field(default=None, gt=0, alias="maxDepth")

    @model_validator(mode="after")
    def validate_pagination(self) -> "_PaginatedConfig":
        """Pagination needs both a next selector and a depth."""
        if self.pagination_enabled and not self.pagination_next_selector:
            raise ValueError("pagination_next_selector is required if pagination is enabled")
        if self.pagination_enabled and self.max_depth is None:
            raise ValueError("max_depth is required if pagination is enabled")
        return self

    def to_job(self) -> ExtractionJob:
        """Build the engine input for this configuration.

        Returns:
            ExtractionJob
        """
        return ExtractionJob(
            target_url=self.url,
            fields=tuple(selector.to_field_spec() for selector in self.selectors),
            pagination=PaginationPolicy(
                enabled=self.pagination_enabled,
                next_selector=self.pagination_next_selector,
                max_pages=self.max_depth,
            ),
        )


class ScraperConfig(_PaginatedConfig):
    """A saved scraper configuration."""

    name: str = Field(..., min_length=3)
    description: str | None = None
    status: ScraperStatus = ScraperStatus.ACTIVE
    schedule: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class PreviewPayload(_PaginatedConfig):
    """Ad-hoc configuration for a preview run."""
