"""Poster rendering entities — requests, geometry and results of a render."""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote

from app.domain.exceptions import ClientInputError

# Characters left untouched by JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"


class ResourceClass(str, Enum):
    """Category of an in-page network request."""

    DOCUMENT = "document"
    SCRIPT = "script"
    STYLESHEET = "stylesheet"
    FONT = "font"
    IMAGE = "image"
    MEDIA = "media"
    OTHER = "other"


class ResourceDecision(str, Enum):
    """Outcome of the resource policy for a single request."""

    ALLOW = "allow"
    ABORT = "abort"


class RenderResultKind(str, Enum):
    URL = "url"
    INLINE_DATA = "inline_data"


@dataclass(frozen=True)
class RenderEnvironment:
    """Deployment facts a render depends on."""

    is_production: bool
    base_url: str
    browser_executable_hint: str | None = None


@dataclass(frozen=True)
class RenderRequest:
    """A single Markdown-to-poster render request."""

    markdown: str
    environment: RenderEnvironment

    @classmethod
    def create(cls, markdown: object, environment: RenderEnvironment) -> "RenderRequest":
        """Validate the payload and build a request.

        Raises:
            ClientInputError: if ``markdown`` is missing, not a string or blank.
        """
        if markdown is None:
            raise ClientInputError("Missing markdown content", details="The 'markdown' field is required")
        if not isinstance(markdown, str):
            raise ClientInputError("Invalid markdown content", details="The 'markdown' field must be a string")
        if not markdown.strip():
            raise ClientInputError("Missing markdown content", details="The 'markdown' field must not be empty")
        return cls(markdown=markdown, environment=environment)

    def poster_url(self) -> str:
        """URL of the poster page that renders this request's Markdown."""
        base = self.environment.base_url.rstrip("/")
        content = quote(self.markdown, safe=_URI_COMPONENT_SAFE)
        return f"{base}/poster?content={content}"


@dataclass(frozen=True)
class BoundingBox:
    """Element geometry in page coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0

    def as_clip(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class CaptureArtifact:
    """Raw image bytes clipped to the poster region."""

    data: bytes
    box: BoundingBox
    mime_type: str = "image/png"


@dataclass(frozen=True)
class RenderResult:
    """What a render hands back to the caller: a URL or an inline data string."""

    kind: RenderResultKind
    value: str
