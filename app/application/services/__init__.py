from .poster_render_service import PosterRenderService
from .timeout_governor import TimeoutGovernor

__all__ = [
    "PosterRenderService",
    "TimeoutGovernor",
]
