"""Unit tests for the PosterRenderService pipeline."""

import logging
import time

import pytest
from playwright.async_api import Error as PlaywrightError

from app.application.interfaces import OutputEncoder
from app.application.services import PosterRenderService
from app.domain.entities import CaptureArtifact, RenderEnvironment, RenderResult, RenderResultKind
from app.domain.exceptions import (
    BoundingBoxError,
    ClientInputError,
    ElementNotFoundError,
    LaunchError,
    MarkerNotFoundError,
    RenderTimeoutError,
)
from app.infrastructure.capture.readiness_waiter import PosterReadinessWaiter
from app.infrastructure.capture.region_capture import PosterRegionCapture
from tests.unit.fakes import FakeLauncher, FakePage, PNG_BYTES


class RecordingEncoder(OutputEncoder):
    def __init__(self):
        self.artifacts: list[CaptureArtifact] = []

    async def encode(self, artifact: CaptureArtifact) -> RenderResult:
        self.artifacts.append(artifact)
        return RenderResult(kind=RenderResultKind.URL, value="http://posters.test/api/v1/images/poster-1.png")


def _service(
    launcher: FakeLauncher,
    encoder: OutputEncoder | None = None,
    request_timeout: float = 5.0,
    image_timeout: float = 0.2,
) -> PosterRenderService:
    return PosterRenderService(
        launcher=launcher,
        waiter=PosterReadinessWaiter(marker_timeout_ms=100),
        capture=PosterRegionCapture(),
        encoder=encoder or RecordingEncoder(),
        environment=RenderEnvironment(is_production=False, base_url="http://poster.test/"),
        request_timeout_seconds=request_timeout,
        image_timeout_seconds=image_timeout,
    )


@pytest.mark.asyncio
async def test_generate_returns_result_and_closes_session():
    launcher = FakeLauncher()
    encoder = RecordingEncoder()

    result = await _service(launcher, encoder).generate("# Hello")

    assert result.kind == RenderResultKind.URL
    assert result.value
    assert launcher.launches == 1
    assert launcher.closes == 1
    assert encoder.artifacts[0].data == PNG_BYTES
    assert encoder.artifacts[0].box.has_area


@pytest.mark.asyncio
async def test_generate_navigates_to_encoded_poster_url():
    launcher = FakeLauncher()

    await _service(launcher).generate("# Hello & bye")

    assert launcher.page.goto_url == "http://poster.test/poster?content=%23%20Hello%20%26%20bye"


@pytest.mark.asyncio
async def test_stages_run_in_order_with_policy_attached_first():
    launcher = FakeLauncher()

    await _service(launcher).generate("# Order")

    assert launcher.page.calls == [
        "route",
        "goto:load",
        "load_state:domcontentloaded",
        "wait_for_selector:visible",
        "evaluate",
        "query_selector",
        "screenshot",
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("markdown", [None, "", "   \n"])
async def test_empty_markdown_is_rejected_before_launch(markdown):
    launcher = FakeLauncher()

    with pytest.raises(ClientInputError):
        await _service(launcher).generate(markdown)

    assert launcher.launches == 0
    assert launcher.closes == 0


@pytest.mark.asyncio
async def test_marker_never_visible_raises_and_closes_session():
    launcher = FakeLauncher(page=FakePage(marker_visible=False))

    with pytest.raises(MarkerNotFoundError):
        await _service(launcher).generate("# Hello")

    assert launcher.launches == 1
    assert launcher.closes == 1
    assert "screenshot" not in launcher.page.calls


@pytest.mark.asyncio
async def test_slow_images_degrade_instead_of_failing():
    launcher = FakeLauncher(page=FakePage(image_delay=10.0))

    started = time.perf_counter()
    result = await _service(launcher, image_timeout=0.1).generate("# Slow images")
    elapsed = time.perf_counter() - started

    assert result.value
    assert elapsed < 2.0
    assert "screenshot" in launcher.page.calls
    assert launcher.closes == 1


@pytest.mark.asyncio
async def test_lost_page_context_during_image_wait_still_captures():
    launcher = FakeLauncher(page=FakePage(evaluate_error=PlaywrightError("Execution context was destroyed")))
    encoder = RecordingEncoder()

    result = await _service(launcher, encoder).generate("# Re-rendered")

    assert result.value
    assert encoder.artifacts[0].data == PNG_BYTES
    assert launcher.page.calls[-2:] == ["query_selector", "screenshot"]
    assert launcher.closes == 1


@pytest.mark.asyncio
async def test_launch_log_names_environment_and_binary(caplog):
    caplog.set_level(logging.INFO, logger="PosterRenderService")
    launcher = FakeLauncher()
    service = PosterRenderService(
        launcher=launcher,
        waiter=PosterReadinessWaiter(marker_timeout_ms=100),
        capture=PosterRegionCapture(),
        encoder=RecordingEncoder(),
        environment=RenderEnvironment(
            is_production=True,
            base_url="http://poster.test",
            browser_executable_hint="/opt/chromium/chrome",
        ),
    )

    await service.generate("# Hello")

    launch_lines = [r.getMessage() for r in caplog.records if "Launching browser" in r.getMessage()]
    assert any("production=True" in line and "binary=/opt/chromium/chrome" in line for line in launch_lines)


@pytest.mark.asyncio
async def test_missing_element_at_capture_raises():
    launcher = FakeLauncher(page=FakePage(element_present=False))

    with pytest.raises(ElementNotFoundError):
        await _service(launcher).generate("# Hello")

    assert launcher.closes == 1


@pytest.mark.asyncio
async def test_zero_area_box_raises():
    launcher = FakeLauncher(page=FakePage(box={"x": 0, "y": 0, "width": 0, "height": 120}))

    with pytest.raises(BoundingBoxError):
        await _service(launcher).generate("# Hello")

    assert launcher.closes == 1


@pytest.mark.asyncio
async def test_launch_error_propagates_without_session():
    launcher = FakeLauncher(launch_error=LaunchError("no chromium"))

    with pytest.raises(LaunchError):
        await _service(launcher).generate("# Hello")

    assert launcher.launches == 0
    assert launcher.closes == 0


@pytest.mark.asyncio
async def test_slow_launch_times_out():
    launcher = FakeLauncher(launch_delay=5.0)

    with pytest.raises(RenderTimeoutError) as exc_info:
        await _service(launcher, request_timeout=0.1).generate("# Hello")

    assert exc_info.value.stage == "browser launch"
    assert launcher.launches == launcher.closes


@pytest.mark.asyncio
async def test_render_exceeding_budget_times_out_and_closes_session():
    launcher = FakeLauncher(page=FakePage(marker_delay=5.0))

    with pytest.raises(RenderTimeoutError) as exc_info:
        await _service(launcher, request_timeout=0.2).generate("# Hello")

    assert exc_info.value.stage == "poster rendering"
    assert exc_info.value.hint
    assert launcher.launches == 1
    assert launcher.closes == 1


@pytest.mark.asyncio
async def test_encoder_failure_still_closes_session():
    class FailingEncoder(OutputEncoder):
        async def encode(self, artifact: CaptureArtifact) -> RenderResult:
            raise OSError("disk full")

    launcher = FakeLauncher()

    with pytest.raises(OSError):
        await _service(launcher, encoder=FailingEncoder()).generate("# Hello")

    assert launcher.launches == 1
    assert launcher.closes == 1
