from .poster import (
    BoundingBox,
    CaptureArtifact,
    RenderEnvironment,
    RenderRequest,
    RenderResult,
    RenderResultKind,
    ResourceClass,
    ResourceDecision,
)

__all__ = [
    "BoundingBox",
    "CaptureArtifact",
    "RenderEnvironment",
    "RenderRequest",
    "RenderResult",
    "RenderResultKind",
    "ResourceClass",
    "ResourceDecision",
]
