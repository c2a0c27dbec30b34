"""Pydantic DTOs (Data Transfer Objects) for the poster endpoint."""

from pydantic import BaseModel, Field


class GeneratePosterRequest(BaseModel):
    """Schema for a poster generation request.

    ``markdown`` is validated by the render service so that a missing or
    empty value is answered with 400 rather than a schema error.
    """

    markdown: str | None = Field(None, examples=["# Hello\n\nRendered as a poster."])


class GeneratePosterResponse(BaseModel):
    """Schema returned on success — an image URL or an inline data URI."""

    url: str


class ErrorResponse(BaseModel):
    """Uniform error body for every non-2xx response."""

    error: str
    details: str | None = None
    hint: str | None = None
