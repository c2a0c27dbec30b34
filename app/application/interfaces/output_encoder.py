"""Abstract interface (port) for turning a capture into a caller-facing result."""

from abc import ABC, abstractmethod

from app.domain.entities import CaptureArtifact, RenderResult


class OutputEncoder(ABC):
    """Port for output encoding — persisted file URL or inline data string."""

    @abstractmethod
    async def encode(self, artifact: CaptureArtifact) -> RenderResult:
        """Encode captured poster bytes into a RenderResult."""
        ...
