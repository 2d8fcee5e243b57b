"""ScrapeFlow - selector-driven page extraction with pagination."""

__version__ = "0.1.0"
