from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)

_PRODUCTION_OUTPUT_DIR = "/tmp/uploads/posters"
_DEVELOPMENT_OUTPUT_DIR = "uploads/posters"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Markdown Poster Service"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Poster page (renders ?content= into .poster-content markup)
    poster_base_url: str = "http://localhost:3000"
    # Public URL of this service, used to build persisted image links
    public_base_url: str = "http://localhost:8020"
    poster_marker_selector: str = ".poster-content"

    # Browser executables
    chrome_path: str = ""                    # development: local Chrome/Chromium
    chromium_executable_path: str = ""       # production: minimal Chromium binary

    # Capture geometry
    poster_viewport_width: int = 1200
    poster_viewport_height: int = 1600

    # Time budgets (seconds)
    poster_request_timeout: float = 30.0     # whole request, launch included
    poster_navigation_timeout: float = 20.0
    poster_marker_timeout: float = 10.0
    poster_image_timeout: float = 5.0        # best-effort image settling
    poster_scope_images_to_marker: bool = True

    # Output: "persist" (file + URL) or "inline" (base64 data URI)
    poster_output_mode: str = "persist"
    poster_output_dir: str = ""

    max_request_body_kb: int = 1024

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_browser: str = "INFO"          # Playwright + capture adapters
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_pipeline: str = "INFO"         # PosterRenderService pipeline

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    @property
    def resolved_output_dir(self) -> str:
        """Directory for persisted posters; ephemeral /tmp storage in production."""
        if self.poster_output_dir:
            return self.poster_output_dir
        return _PRODUCTION_OUTPUT_DIR if self.is_production else _DEVELOPMENT_OUTPUT_DIR


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
