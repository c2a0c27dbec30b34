"""Region capture — PNG screenshot clipped to the poster element."""

import logging

from playwright.async_api import Page

from app.domain.entities import BoundingBox, CaptureArtifact
from app.domain.exceptions import BoundingBoxError, ElementNotFoundError

logger = logging.getLogger(__name__)


class PosterRegionCapture:
    """Captures exactly the marker element's rectangle, nothing around it."""

    def __init__(self, marker_selector: str = ".poster-content") -> None:
        self._marker_selector = marker_selector

    async def capture(self, page: Page) -> CaptureArtifact:
        element = await page.query_selector(self._marker_selector)
        if element is None:
            raise ElementNotFoundError(f"Poster element {self._marker_selector!r} not found")

        raw_box = await element.bounding_box()
        if raw_box is None:
            raise BoundingBoxError("Could not get poster element bounds")

        box = BoundingBox(
            x=raw_box["x"],
            y=raw_box["y"],
            width=raw_box["width"],
            height=raw_box["height"],
        )
        if not box.has_area:
            raise BoundingBoxError(
                f"Poster element has an empty bounding box ({box.width}x{box.height})"
            )

        data = await page.screenshot(type="png", clip=box.as_clip())
        logger.info(
            "Captured poster region %.0fx%.0f at (%.0f, %.0f) — %d bytes",
            box.width, box.height, box.x, box.y, len(data),
        )
        return CaptureArtifact(data=data, box=box, mime_type="image/png")
