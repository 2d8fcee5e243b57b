"""Centralized logging configuration using Loguru."""

import sys
from typing import Any

from loguru import logger

from scrapeflow.core.config import settings


def setup_logging() -> None:
    """Configure Loguru logging for the application."""
    # Remove default handler
    logger.remove()

    console_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    # File format (more detailed)
    file_format = (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
        "{level: <8} | "
        "{name}:{function}:{line} | "
        "{message} | "
        "{extra}"
    )

    logger.add(
        sys.stderr,
        format=console_format,
        level=settings.log_level,
        colorize=True,
        backtrace=True,
        diagnose=settings.debug,
    )

    logs_dir = settings.logs_dir
    logger.add(
        logs_dir / "scrapeflow_{time:YYYY-MM-DD}.log",
        format=file_format,
        level="DEBUG",
        rotation="00:00",  # Rotate at midnight
        retention="30 days",
        compression="gz",
        backtrace=True,
        diagnose=True,
    )

    logger.add(
        logs_dir / "errors_{time:YYYY-MM-DD}.log",
        format=file_format,
        level="ERROR",
        rotation="00:00",
        retention="90 days",
        compression="gz",
        backtrace=True,
        diagnose=True,
    )

    # One JSON object per line, for log aggregation
    logger.add(
        logs_dir / "scrapeflow_{time:YYYY-MM-DD}.json",
        format="{message}",
        level="INFO",
        rotation="00:00",
        retention="14 days",
        compression="gz",
        serialize=True,
    )

    logger.info(
        f"Logging initialized | level={settings.log_level} | env={settings.app_env.value}"
    )


def get_logger(name: str) -> Any:
    """Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    return logger.bind(name=name)


def log_run_start(url: str, fields: int, max_pages: int, **extra: Any) -> None:
    """Log the start of an extraction run.

    Args:
        url: Target URL
        fields: Number of field specs in the job
        max_pages: Effective page bound for the run
        **extra: Additional context
    """
    logger.bind(url=url, fields=fields, max_pages=max_pages, **extra).info(
        f"Run started | url={url} | fields={fields} | max_pages={max_pages}"
    )


def log_run_complete(
    url: str, status: str, items_count: int, duration: float, **extra: Any
) -> None:
    """Log the outcome of an extraction run.

    Args:
        url: Target URL
        status: Run status (success, empty, error)
        items_count: Number of records produced
        duration: Run duration in seconds
        **extra: Additional context
    """
    bound = logger.bind(
        url=url, status=status, items_count=items_count, duration=duration, **extra
    )
    log_func = bound.error if status == "error" else bound.info

    log_func(
        f"Run completed | url={url} | status={status} | "
        f"items={items_count} | duration={duration:.2f}s"
    )


def log_scraping_event(
    url: str, items_count: int, duration: float, success: bool = True, **extra: Any
) -> None:
    """Log scraping event.

    Args:
        url: Scraped URL
        items_count: Number of items scraped
        duration: Scraping duration in seconds
        success: Whether scraping was successful
        **extra: Additional context
    """
    status = "SUCCESS" if success else "FAILED"
    bound = logger.bind(
        url=url, items_count=items_count, duration=duration, success=success, **extra
    )
    log_func = bound.info if success else bound.warning

    log_func(
        f"Scraping | url={url} | items={items_count} | "
        f"status={status} | duration={duration:.2f}s"
    )
