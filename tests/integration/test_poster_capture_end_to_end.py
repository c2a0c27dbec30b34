"""End-to-end poster rendering against a local fixture poster page with real Chromium."""

import base64
import io
import time
from pathlib import Path

import pytest
from PIL import Image

from app.application.services import PosterRenderService
from app.domain.entities import RenderEnvironment, RenderResultKind
from app.domain.exceptions import MarkerNotFoundError
from app.infrastructure.capture.browser_launcher import PlaywrightBrowserLauncher
from app.infrastructure.capture.launch_profile import DEVELOPMENT_ARGS, LaunchProfile
from app.infrastructure.capture.readiness_waiter import PosterReadinessWaiter
from app.infrastructure.capture.region_capture import PosterRegionCapture
from app.infrastructure.storage.local_file_storage import LocalFileStorage
from app.infrastructure.storage.output_encoders import InlineOutputEncoder, PersistOutputEncoder
from tests.integration.services.poster_test_service import run_poster_test_service


def _chromium_available() -> bool:
    try:
        from playwright.sync_api import sync_playwright

        with sync_playwright() as p:
            return Path(p.chromium.executable_path).exists()
    except Exception:
        return False


pytestmark = pytest.mark.skipif(not _chromium_available(), reason="Playwright Chromium is not installed")

_PROFILE = LaunchProfile(name="test", executable_path=None, args=DEVELOPMENT_ARGS)
_MARKER_TIMEOUT_MS = 3_000


def _service(base_url: str, encoder=None, image_timeout: float = 5.0) -> PosterRenderService:
    return PosterRenderService(
        launcher=PlaywrightBrowserLauncher(_PROFILE, viewport_width=1200, viewport_height=1600),
        waiter=PosterReadinessWaiter(
            navigation_timeout_ms=15_000,
            marker_timeout_ms=_MARKER_TIMEOUT_MS,
        ),
        capture=PosterRegionCapture(),
        encoder=encoder or InlineOutputEncoder(),
        environment=RenderEnvironment(is_production=False, base_url=base_url),
        request_timeout_seconds=30.0,
        image_timeout_seconds=image_timeout,
    )


def _decode_data_uri(value: str) -> Image.Image:
    prefix = "data:image/png;base64,"
    assert value.startswith(prefix)
    return Image.open(io.BytesIO(base64.b64decode(value[len(prefix):])))


@pytest.mark.asyncio
async def test_capture_is_clipped_to_the_poster_element():
    with run_poster_test_service("ok") as site:
        result = await _service(site.base_url).generate("# Hello")

    assert result.kind == RenderResultKind.INLINE_DATA
    image = _decode_data_uri(result.value)
    # .poster-content is 600px wide plus 2 * 24px padding
    assert image.size[0] == 648
    assert image.size[1] > 0
    assert image.convert("RGB").getpixel((5, 5)) == (255, 255, 255)


@pytest.mark.asyncio
async def test_media_requests_are_blocked_and_images_are_loaded():
    with run_poster_test_service("ok") as site:
        await _service(site.base_url).generate("# Media")

    assert "/poster" in site.requested_paths
    assert "/image.png" in site.requested_paths
    assert "/clip.mp4" not in site.requested_paths


@pytest.mark.asyncio
async def test_broken_image_still_produces_a_poster():
    with run_poster_test_service("broken-image") as site:
        result = await _service(site.base_url).generate("# Broken image")

    assert _decode_data_uri(result.value).size[0] > 0


@pytest.mark.asyncio
async def test_slow_image_is_abandoned_after_the_ceiling():
    with run_poster_test_service("slow-image") as site:
        started = time.perf_counter()
        result = await _service(site.base_url, image_timeout=1.0).generate("# Slow image")
        elapsed = time.perf_counter() - started

    assert result.value
    assert elapsed < 8.0


@pytest.mark.asyncio
async def test_missing_marker_fails_within_marker_timeout():
    with run_poster_test_service("no-marker") as site:
        started = time.perf_counter()
        with pytest.raises(MarkerNotFoundError):
            await _service(site.base_url).generate("# Never rendered")
        elapsed = time.perf_counter() - started

    assert elapsed < _MARKER_TIMEOUT_MS / 1000 + 10.0


@pytest.mark.asyncio
async def test_persisted_poster_is_written_to_output_dir(tmp_path):
    storage = LocalFileStorage(output_dir=str(tmp_path / "posters"))
    encoder = PersistOutputEncoder(storage=storage, public_base_url="http://posters.test")

    with run_poster_test_service("ok") as site:
        result = await _service(site.base_url, encoder=encoder).generate("# Persisted")

    assert result.kind == RenderResultKind.URL
    file_name = result.value.rsplit("/", 1)[-1]
    assert result.value == f"http://posters.test/api/v1/images/{file_name}"
    stored = storage.resolve_poster(file_name)
    assert stored is not None
    assert Image.open(stored).format == "PNG"
