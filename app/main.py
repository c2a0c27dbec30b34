"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.infrastructure.capture.launch_profile import select_launch_profile
from app.infrastructure.logging.log_config import setup_logging
from app.presentation.api.router import router as api_router
from app.presentation.middleware.body_size_limit import BodySizeLimitMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging, prepare output storage."""
    settings = get_settings()
    setup_logging()

    # 1. Ensure the poster directory exists when posters are persisted
    if settings.poster_output_mode.strip().lower() == "persist":
        Path(settings.resolved_output_dir).mkdir(parents=True, exist_ok=True)

    # 2. Report which browser requests will launch (one per request, none shared)
    profile = select_launch_profile(settings)
    logger.info(
        "Poster service ready (env=%s, browser=%s, output=%s, poster_page=%s)",
        settings.app_env,
        profile.executable_path or "<bundled chromium>",
        settings.poster_output_mode,
        settings.poster_base_url,
    )

    yield


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    details = str(exc.detail)
    allow = (exc.headers or {}).get("Allow")
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED and allow:
        details = f"Allowed methods: {allow}"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "details": details},
        headers=exc.headers,
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "details": messages},
    )


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_request_body_kb * 1024)

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
