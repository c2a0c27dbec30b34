from .poster import ErrorResponse, GeneratePosterRequest, GeneratePosterResponse

__all__ = [
    "ErrorResponse",
    "GeneratePosterRequest",
    "GeneratePosterResponse",
]
