"""Navigation & readiness — bring the poster page to a capturable state.

Stages run strictly in order:
    1. navigate: ``load`` and ``domcontentloaded`` must both fire
    2. wait_for_marker: the poster element exists and is visible
    3. wait_for_images: every image in the poster has loaded or errored
       (best-effort; the caller races it against a ceiling)
"""

import logging

from playwright.async_api import (
    Error as PlaywrightError,
    Page,
    TimeoutError as PlaywrightTimeout,
)

from app.domain.exceptions import MarkerNotFoundError, NavigationError

logger = logging.getLogger(__name__)

# Resolves once every pending <img> under the root has fired load or error.
_IMAGES_SETTLED_JS = """
    async ([selector, scoped]) => {
        const root = scoped ? document.querySelector(selector) : document;
        if (!root) return 0;
        const pending = Array.from(root.querySelectorAll('img')).filter((img) => !img.complete);
        await Promise.allSettled(pending.map((img) => new Promise((resolve) => {
            img.addEventListener('load', resolve, { once: true });
            img.addEventListener('error', resolve, { once: true });
        })));
        return pending.length;
    }
"""


class PosterReadinessWaiter:
    """Drives a page to the poster URL and waits until the poster is rendered."""

    def __init__(
        self,
        marker_selector: str = ".poster-content",
        navigation_timeout_ms: int = 20_000,
        marker_timeout_ms: int = 10_000,
        scope_images_to_marker: bool = True,
    ) -> None:
        self._marker_selector = marker_selector
        self._navigation_timeout_ms = navigation_timeout_ms
        self._marker_timeout_ms = marker_timeout_ms
        self._scope_images_to_marker = scope_images_to_marker

    @property
    def marker_selector(self) -> str:
        return self._marker_selector

    async def navigate(self, page: Page, url: str) -> None:
        """Open ``url`` and wait for the load and DOM-content signals."""
        try:
            response = await page.goto(url, wait_until="load", timeout=self._navigation_timeout_ms)
            await page.wait_for_load_state("domcontentloaded", timeout=self._navigation_timeout_ms)
        except PlaywrightTimeout as e:
            raise NavigationError(
                f"Poster page did not load within {self._navigation_timeout_ms}ms"
            ) from e
        except PlaywrightError as e:
            raise NavigationError(f"Could not open poster page: {e.message}") from e

        if response is not None and response.status >= 400:
            logger.warning("Poster page answered HTTP %d — waiting for marker anyway", response.status)

    async def wait_for_marker(self, page: Page) -> None:
        """Wait until the poster element is attached and visible."""
        try:
            await page.wait_for_selector(
                self._marker_selector,
                state="visible",
                timeout=self._marker_timeout_ms,
            )
        except PlaywrightTimeout as e:
            raise MarkerNotFoundError(
                f"Poster element {self._marker_selector!r} did not become visible "
                f"within {self._marker_timeout_ms}ms"
            ) from e

    async def wait_for_images(self, page: Page) -> bool:
        """Wait for images to load or fail.

        Returns False when the page context went away mid-wait (re-render or
        client-side navigation); the images are then treated as unsettled.
        """
        try:
            pending = await page.evaluate(
                _IMAGES_SETTLED_JS,
                [self._marker_selector, self._scope_images_to_marker],
            )
        except PlaywrightError as e:
            logger.warning("Image wait interrupted, capturing anyway: %s", e.message)
            return False
        logger.debug("Images settled (%d were pending)", pending)
        return True
