"""Abstract interface (port) for starting a headless browser session."""

from abc import ABC, abstractmethod
from typing import Any


class BrowserSession(ABC):
    """A running browser process plus the one page a render drives.

    A session belongs to exactly one request and must be closed once.
    """

    @property
    @abstractmethod
    def page(self) -> Any:
        """The page (tab) the poster is rendered in."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Tear down the page, the browser process and the driver. Idempotent."""
        ...


class BrowserLauncher(ABC):
    """Port for browser launch — implemented in the infrastructure layer."""

    @abstractmethod
    async def launch(self) -> BrowserSession:
        """Start a browser and open a page ready for navigation.

        Implementations release anything already started when launch fails
        or is cancelled, so callers only ever close sessions they received.

        Raises:
            LaunchError: if the browser could not be started.
        """
        ...
