"""Request body ceiling — applied to the bytes actually received.

A declared ``Content-Length`` above the ceiling is answered straight away.
Bodies without one (chunked uploads) are counted while the endpoint reads
them, and reading stops with a 413 as soon as the ceiling is passed.
"""

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

_TOO_LARGE = "Request body too large"


class BodySizeLimitMiddleware:
    """Pure ASGI middleware rejecting request bodies over ``max_body_bytes``."""

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_bytes:
            response = JSONResponse(
                status_code=status.HTTP_413_CONTENT_TOO_LARGE,
                content={"error": _TOO_LARGE, "details": self._limit_details()},
            )
            await response(scope, receive, send)
            return

        received = 0

        async def counting_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    # Rendered by the app's HTTPException handler.
                    raise HTTPException(status_code=status.HTTP_413_CONTENT_TOO_LARGE, detail=_TOO_LARGE)
            return message

        await self.app(scope, counting_receive, send)

    def _limit_details(self) -> str:
        return f"Maximum size is {self.max_body_bytes // 1024} KB"
