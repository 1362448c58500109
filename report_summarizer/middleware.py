# report_summarizer/middleware.py
"""
Request body size limit.

Declared Content-Length is refused up front. Chunked bodies carry no length,
so the bytes are counted as the route reads them and the read is aborted once
the limit is crossed.
"""
import logging

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers

logger = logging.getLogger(__name__)

TOO_LARGE = "Request body too large."


class BodySizeLimitMiddleware:
    def __init__(self, app, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        if length and length.isdigit() and int(length) > self.max_bytes:
            logger.error("Rejected %s body of %s bytes", scope["path"], length)
            response = JSONResponse(status_code=413, content={"error": TOO_LARGE})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.error("Rejected %s body after %d bytes", scope["path"], received)
                    # FastAPI re-raises HTTPExceptions from the body read; the app renders it
                    raise HTTPException(413, TOO_LARGE)
            return message

        await self.app(scope, limited_receive, send)
