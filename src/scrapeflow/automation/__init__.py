"""Automation module - Page session interface and Selenium implementation."""

from .browser import BrowserFactory, SeleniumPageSession
from .session import PageSession, SessionFactory, WaitUntil

__all__ = ["BrowserFactory", "SeleniumPageSession", "PageSession", "SessionFactory", "WaitUntil"]
