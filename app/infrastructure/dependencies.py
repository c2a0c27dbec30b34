"""FastAPI dependency injection — wires infrastructure to application layer."""

from app.application.services import PosterRenderService
from app.config import get_settings
from app.domain.entities import RenderEnvironment
from app.infrastructure.capture.browser_launcher import PlaywrightBrowserLauncher
from app.infrastructure.capture.launch_profile import select_launch_profile
from app.infrastructure.capture.readiness_waiter import PosterReadinessWaiter
from app.infrastructure.capture.region_capture import PosterRegionCapture
from app.infrastructure.storage.local_file_storage import LocalFileStorage
from app.infrastructure.storage.output_encoders import build_output_encoder


def get_poster_render_service() -> PosterRenderService:
    """Provides a PosterRenderService with a fresh launcher for this request."""
    settings = get_settings()

    profile = select_launch_profile(settings)
    launcher = PlaywrightBrowserLauncher(
        profile=profile,
        viewport_width=settings.poster_viewport_width,
        viewport_height=settings.poster_viewport_height,
    )
    waiter = PosterReadinessWaiter(
        marker_selector=settings.poster_marker_selector,
        navigation_timeout_ms=int(settings.poster_navigation_timeout * 1000),
        marker_timeout_ms=int(settings.poster_marker_timeout * 1000),
        scope_images_to_marker=settings.poster_scope_images_to_marker,
    )
    environment = RenderEnvironment(
        is_production=settings.is_production,
        base_url=settings.poster_base_url,
        browser_executable_hint=profile.executable_path,
    )

    return PosterRenderService(
        launcher=launcher,
        waiter=waiter,
        capture=PosterRegionCapture(marker_selector=settings.poster_marker_selector),
        encoder=build_output_encoder(settings),
        environment=environment,
        request_timeout_seconds=settings.poster_request_timeout,
        image_timeout_seconds=settings.poster_image_timeout,
    )


def get_poster_storage() -> LocalFileStorage:
    """Provides read access to persisted posters for the images route."""
    return LocalFileStorage(output_dir=get_settings().resolved_output_dir)
