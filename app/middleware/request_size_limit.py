"""Request body size limit middleware.

Rejects requests whose body exceeds max_bytes (e.g. MAX_UPLOAD_SIZE) with 413.
A declared Content-Length is checked up front; the streamed body is counted
as the app reads it, so chunked uploads are limited too.
"""

import logging
from typing import Callable

from starlette.exceptions import HTTPException

from app.middleware._asgi import get_header, send_json

logger = logging.getLogger(__name__)


def _too_large_message(max_bytes: int) -> str:
    return f"Request body must be at most {max_bytes} bytes"


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose body exceeds max_bytes. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = get_header(scope, "content-length")
        if declared and declared.isdigit() and int(declared) > max_bytes:
            logger.info("Rejected %s byte body on %s", declared, scope.get("path", ""))
            await send_json(send, 413, _too_large_message(max_bytes))
            return

        received = 0

        async def limited_receive() -> dict:
            # Raised inside the route's body parsing, so the HTTP exception handler answers 413
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > max_bytes:
                    raise HTTPException(status_code=413, detail=_too_large_message(max_bytes))
            return message

        await app(scope, limited_receive, send)

    return asgi_app
