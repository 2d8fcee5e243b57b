"""Scraping module - Engine, field extraction, pagination."""

from .engine import ScrapingEngine, ScrapingResult
from .extractor import FieldExtractor, FieldResult
from .job import ExtractionJob, FieldSpec, PaginationPolicy, Record, ScrapingError
from .pagination import PaginationWalker, WalkState

__all__ = [
    "ScrapingEngine",
    "ScrapingResult",
    "FieldExtractor",
    "FieldResult",
    "ExtractionJob",
    "FieldSpec",
    "PaginationPolicy",
    "Record",
    "ScrapingError",
    "PaginationWalker",
    "WalkState",
]
