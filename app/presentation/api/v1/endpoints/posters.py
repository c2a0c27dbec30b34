"""Poster generation endpoint."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.application.schemas import ErrorResponse, GeneratePosterRequest, GeneratePosterResponse
from app.application.services import PosterRenderService
from app.domain.exceptions import ClientInputError, PosterGenerationError
from app.infrastructure.dependencies import get_poster_render_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Posters"])

_FAILURE_MESSAGE = "Failed to generate poster"


def _error(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post(
    "/generatePosterImage",
    response_model=GeneratePosterResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def generate_poster_image(
    payload: GeneratePosterRequest,
    service: PosterRenderService = Depends(get_poster_render_service),
):
    """Render Markdown as a poster and return the image URL (or data URI)."""
    try:
        result = await service.generate(payload.markdown)
    except ClientInputError as e:
        return _error(status.HTTP_400_BAD_REQUEST, ErrorResponse(error=e.message, details=e.details))
    except PosterGenerationError as e:
        logger.error("Poster generation failed: %s: %s", type(e).__name__, e.message)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse(error=_FAILURE_MESSAGE, details=e.message, hint=e.hint),
        )
    except Exception as e:
        logger.exception("Unexpected error while generating poster")
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse(error=_FAILURE_MESSAGE, details=str(e) or "Unknown error"),
        )

    return GeneratePosterResponse(url=result.value)
