"""Page session interface consumed by the scraping engine."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Awaitable, Callable


class WaitUntil(str, Enum):
    """When a navigation counts as finished."""

    LOAD = "load"
    NETWORK_IDLE = "network_idle"


class PageSession(ABC):
    """One controllable, navigable rendered page.

    Implementations wrap a browser automation library. A session is used by a
    single run at a time and must tolerate ``close()`` being called more than
    once, including while another operation is in flight (that operation
    should then fail).
    """

    @abstractmethod
    async def configure(
        self,
        user_agent: str,
        navigation_timeout: float,
        default_timeout: float,
    ) -> None:
        """Apply user agent and timeouts (seconds) to the session."""

    @abstractmethod
    async def navigate(self, url: str, wait_until: WaitUntil = WaitUntil.NETWORK_IDLE) -> None:
        """Load ``url`` and wait until the page settles.

        Raises:
            Exception: If the page cannot be loaded
        """

    @abstractmethod
    async def wait_for_selector(self, selector: str, timeout: float | None = None) -> bool:
        """Wait until at least one element matches ``selector``.

        Args:
            selector: CSS selector
            timeout: Seconds to wait (the configured operation timeout if None)

        Returns:
            True if found, False on timeout
        """

    @abstractmethod
    async def query_text(self, selector: str) -> str | None:
        """Text content of the first element matching ``selector``.

        Returns:
            Raw text, or None if nothing matches
        """

    @abstractmethod
    async def has_element(self, selector: str) -> bool:
        """Check whether ``selector`` currently matches an element."""

    @abstractmethod
    async def click(self, selector: str) -> None:
        """Click the first element matching ``selector``."""

    @abstractmethod
    async def await_navigation(
        self,
        wait_until: WaitUntil = WaitUntil.NETWORK_IDLE,
        timeout: float | None = None,
    ) -> None:
        """Wait for the next navigation to finish.

        Must be started before the action that triggers the navigation.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release all underlying resources. Idempotent."""

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Whether ``close()`` has been called."""


SessionFactory = Callable[[], Awaitable[PageSession]]
