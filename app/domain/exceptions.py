"""Domain-specific exceptions — framework-independent."""


class ClientInputError(Exception):
    """Raised when a request payload is unusable; no rendering is attempted."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class PosterGenerationError(Exception):
    """Base class for failures of the render pipeline.

    ``hint`` carries an optional remediation for the caller.
    """

    default_hint: str | None = None

    def __init__(self, message: str, hint: str | None = None):
        self.message = message
        self.hint = hint if hint is not None else self.default_hint
        super().__init__(message)


class LaunchError(PosterGenerationError):
    """Raised when the headless browser could not be started."""

    default_hint = "Check the browser executable path and launch flags for this environment"


class NavigationError(PosterGenerationError):
    """Raised when the poster page could not be loaded."""

    default_hint = "Make sure the poster page is reachable from the rendering service"


class MarkerNotFoundError(PosterGenerationError):
    """Raised when the poster region never became visible."""

    default_hint = "The poster template may have failed or the Markdown rendered no visible content"


class ElementNotFoundError(PosterGenerationError):
    """Raised when the poster element is missing at capture time."""


class BoundingBoxError(PosterGenerationError):
    """Raised when the poster element has no usable geometry."""

    default_hint = "The poster element exists but was not laid out"


class RenderTimeoutError(PosterGenerationError):
    """Raised when a pipeline stage exceeds the request budget."""

    default_hint = "The content may be too large or contain too many images"

    def __init__(self, stage: str, budget_seconds: float):
        self.stage = stage
        self.budget_seconds = budget_seconds
        super().__init__(f"Poster generation timed out during {stage} (budget {budget_seconds:g}s)")
