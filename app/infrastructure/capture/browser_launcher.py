"""Playwright browser launcher — one headless Chromium per render request."""

import logging

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
)

from app.application.interfaces import BrowserLauncher, BrowserSession
from app.domain.exceptions import LaunchError
from app.infrastructure.capture.launch_profile import LaunchProfile

logger = logging.getLogger(__name__)


class PlaywrightBrowserSession(BrowserSession):
    """Owns the Playwright driver, the browser process, its context and page."""

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
    ) -> None:
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._page = page
        self._closed = False

    @property
    def page(self) -> Page:
        return self._page

    async def close(self) -> None:
        """Close context, browser and driver; later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        await _shutdown(self._playwright, self._browser, self._context)
        logger.debug("Browser session closed")


class PlaywrightBrowserLauncher(BrowserLauncher):
    """Starts Chromium according to a LaunchProfile.

    Lifecycle:
        - ``launch()`` starts driver + browser and opens one page
        - the returned session's ``close()`` releases all of it
    """

    def __init__(
        self,
        profile: LaunchProfile,
        viewport_width: int = 1200,
        viewport_height: int = 1600,
    ) -> None:
        self._profile = profile
        self._viewport_width = viewport_width
        self._viewport_height = viewport_height

    async def launch(self) -> PlaywrightBrowserSession:
        playwright: Playwright | None = None
        browser: Browser | None = None
        context: BrowserContext | None = None
        try:
            playwright = await async_playwright().start()
            browser = await playwright.chromium.launch(
                executable_path=self._profile.executable_path,
                args=list(self._profile.args),
                headless=self._profile.headless,
            )
            context = await browser.new_context(
                viewport={"width": self._viewport_width, "height": self._viewport_height},
                ignore_https_errors=self._profile.ignore_https_errors,
                service_workers="block",
            )
            page = await context.new_page()
        except BaseException as exc:
            # Cancellation by the request budget lands here too.
            await _shutdown(playwright, browser, context)
            if isinstance(exc, Exception) and not isinstance(exc, LaunchError):
                raise LaunchError(f"Failed to launch browser: {exc}") from exc
            raise

        logger.info(
            "Browser launched (profile=%s, executable=%s, viewport=%dx%d)",
            self._profile.name,
            self._profile.executable_path or "<bundled>",
            self._viewport_width,
            self._viewport_height,
        )
        return PlaywrightBrowserSession(playwright, browser, context, page)


async def _shutdown(
    playwright: Playwright | None,
    browser: Browser | None,
    context: BrowserContext | None,
) -> None:
    """Release whatever part of a session was started, innermost first."""
    if context is not None:
        try:
            await context.close()
        except PlaywrightError as e:
            logger.debug("Context close failed: %s", e)
    if browser is not None:
        try:
            await browser.close()
        except PlaywrightError as e:
            logger.warning("Browser close failed: %s", e)
    if playwright is not None:
        try:
            await playwright.stop()
        except PlaywrightError as e:
            logger.warning("Playwright stop failed: %s", e)
