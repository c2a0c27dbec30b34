"""Poster Render Service — Markdown in, poster image out.

Pipeline per request (strictly sequential):
    0. Validate the payload (no browser for bad input)
    1. Launch a browser, raced against the request budget
    2. Attach the resource policy
    3. Navigate to the poster page
    4. Wait for the poster marker to be visible
    5. Wait for poster images (best-effort, short ceiling)
    6. Capture the poster region
    7. Encode the capture (file URL or data URI)
    8. Close the browser — on every exit path
"""

import logging

from app.application.interfaces import BrowserLauncher, BrowserSession, OutputEncoder
from app.application.services.timeout_governor import TimeoutGovernor
from app.domain.entities import RenderEnvironment, RenderRequest, RenderResult
from app.infrastructure.capture.readiness_waiter import PosterReadinessWaiter
from app.infrastructure.capture.region_capture import PosterRegionCapture
from app.infrastructure.capture.resource_policy import ResourcePolicyFilter
from app.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)

plog = PipelineLogger("PosterRenderService")


class PosterRenderService:
    """Application service orchestrating one render per call.

    Every call gets its own browser session; nothing is shared between
    concurrent requests.
    """

    def __init__(
        self,
        launcher: BrowserLauncher,
        waiter: PosterReadinessWaiter,
        capture: PosterRegionCapture,
        encoder: OutputEncoder,
        environment: RenderEnvironment,
        request_timeout_seconds: float = 30.0,
        image_timeout_seconds: float = 5.0,
    ) -> None:
        self._launcher = launcher
        self._waiter = waiter
        self._capture = capture
        self._encoder = encoder
        self._environment = environment
        self._request_timeout = request_timeout_seconds
        self._image_timeout = image_timeout_seconds

    async def generate(self, markdown: object) -> RenderResult:
        """Render ``markdown`` as a poster.

        Raises:
            ClientInputError: for a missing or empty payload (before any launch).
            PosterGenerationError: subclass describing the failed stage.
        """
        request = RenderRequest.create(markdown, self._environment)
        url = request.poster_url()

        governor = TimeoutGovernor(self._request_timeout)
        governor.start()

        with plog.timed_step(
            PipelineStage.LAUNCH,
            "Launching browser",
            production=self._environment.is_production,
            binary=self._environment.browser_executable_hint or "bundled",
        ):
            session = await governor.within_budget(
                self._launcher.launch(),
                stage="browser launch",
                on_late_result=_close_session,
            )

        try:
            result = await governor.within_budget(
                self._render(session, url),
                stage="poster rendering",
            )
        finally:
            with plog.timed_step(PipelineStage.TEARDOWN, "Closing browser"):
                await session.close()

        plog.step_complete(PipelineStage.COMPLETE, "Poster generated", kind=result.kind.value)
        return result

    async def _render(self, session: BrowserSession, url: str) -> RenderResult:
        page = session.page

        policy = ResourcePolicyFilter()
        await policy.attach(page)

        with plog.timed_step(PipelineStage.NAVIGATE, "Opening poster page", chars=len(url)):
            await self._waiter.navigate(page, url)

        with plog.timed_step(PipelineStage.MARKER, f"Waiting for {self._waiter.marker_selector}"):
            await self._waiter.wait_for_marker(page)

        settled = await TimeoutGovernor.best_effort(
            self._waiter.wait_for_images(page),
            self._image_timeout,
            stage="image settling",
            default=False,
        )
        if not settled:
            plog.step_warning(PipelineStage.IMAGES, "Images not settled — capturing anyway")

        with plog.timed_step(PipelineStage.CAPTURE, "Capturing poster region"):
            artifact = await self._capture.capture(page)

        with plog.timed_step(PipelineStage.ENCODE, "Encoding poster"):
            result = await self._encoder.encode(artifact)

        plog.stats(
            width=int(artifact.box.width),
            height=int(artifact.box.height),
            bytes=len(artifact.data),
            allowed_requests=policy.allowed,
            aborted_requests=policy.aborted,
        )
        return result


async def _close_session(session: BrowserSession) -> None:
    logger.warning("Browser launch finished after the deadline — closing it")
    await session.close()
