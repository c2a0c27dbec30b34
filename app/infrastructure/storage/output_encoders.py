"""Output encoders — persisted file URL or self-contained data URI."""

import base64
import logging

from app.application.interfaces import OutputEncoder
from app.config import Settings
from app.domain.entities import CaptureArtifact, RenderResult, RenderResultKind
from app.infrastructure.storage.local_file_storage import LocalFileStorage

logger = logging.getLogger(__name__)

IMAGE_ROUTE_PREFIX = "/api/v1/images"


class PersistOutputEncoder(OutputEncoder):
    """Writes the poster to disk and returns the URL the images route serves it at."""

    def __init__(
        self,
        storage: LocalFileStorage,
        public_base_url: str,
        route_prefix: str = IMAGE_ROUTE_PREFIX,
    ) -> None:
        self._storage = storage
        self._public_base_url = public_base_url.rstrip("/")
        self._route_prefix = route_prefix

    async def encode(self, artifact: CaptureArtifact) -> RenderResult:
        stored = await self._storage.store_poster(artifact.data)
        url = f"{self._public_base_url}{self._route_prefix}/{stored.filename}"
        return RenderResult(kind=RenderResultKind.URL, value=url)


class InlineOutputEncoder(OutputEncoder):
    """Returns the poster as a base64 data URI; needs no shared filesystem."""

    async def encode(self, artifact: CaptureArtifact) -> RenderResult:
        encoded = base64.b64encode(artifact.data).decode("ascii")
        logger.debug("Inlined poster (%d bytes → %d chars)", len(artifact.data), len(encoded))
        return RenderResult(
            kind=RenderResultKind.INLINE_DATA,
            value=f"data:{artifact.mime_type};base64,{encoded}",
        )


def build_output_encoder(settings: Settings) -> OutputEncoder:
    """Select the encoder strategy for ``poster_output_mode``."""
    mode = settings.poster_output_mode.strip().lower()
    if mode == "persist":
        return PersistOutputEncoder(
            storage=LocalFileStorage(output_dir=settings.resolved_output_dir),
            public_base_url=settings.public_base_url,
        )
    if mode == "inline":
        return InlineOutputEncoder()
    raise ValueError(f"Unknown poster_output_mode {settings.poster_output_mode!r} (expected 'persist' or 'inline')")
