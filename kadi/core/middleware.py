"""
HTTP edge middleware: CORS allow-list, body size ceiling and access log
"""

import time
from typing import Callable, Sequence

import structlog
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette import status
from starlette.middleware.cors import CORSMiddleware

from kadi.core.config import normalize_origin

logger = structlog.get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]
REQUEST_TOO_LARGE_MESSAGE = "Requête trop volumineuse."


class AllowListCORSMiddleware(CORSMiddleware):
    """CORS middleware that accepts every origin when the allow-list is empty"""

    def __init__(self, app, allowed_origins: Sequence[str] = ()):
        origins = [normalize_origin(origin) for origin in allowed_origins if normalize_origin(origin)]
        super().__init__(
            app,
            allow_origins=origins or ["*"],
            allow_credentials=True,
            allow_methods=CORS_METHODS,
            allow_headers=CORS_HEADERS,
        )

    def is_allowed_origin(self, origin: str) -> bool:
        allowed = super().is_allowed_origin(normalize_origin(origin))
        if not allowed:
            logger.warning("cors_origin_rejected", origin=origin)
        return allowed


class RequestTooLarge(HTTPException):
    """Raised while reading a body that outgrows the ceiling"""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=REQUEST_TOO_LARGE_MESSAGE,
        )


class BodySizeLimitMiddleware:
    """Reject request bodies larger than the configured ceiling.

    A declared Content-Length is checked up front. Chunked bodies are counted
    as they are received and reading stops with a 413 once the limit is passed.
    """

    def __init__(self, app, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        raw_length = headers.get(b"content-length")
        if raw_length is not None:
            try:
                declared = int(raw_length)
            except ValueError:
                declared = 0
            if declared > self.max_body_bytes:
                self._log_refusal(scope, declared)
                await self._refuse(scope, receive, send)
                return

        received = 0
        response_started = False

        async def limited_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    self._log_refusal(scope, received)
                    raise RequestTooLarge()
            return message

        async def tracking_send(message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except RequestTooLarge:
            # Routes that read the body themselves let it escape
            if response_started:
                raise
            await self._refuse(scope, receive, send)

    def _log_refusal(self, scope, size: int) -> None:
        logger.warning(
            "request_body_too_large",
            path=scope.get("path"),
            content_length=size,
            limit=self.max_body_bytes,
        )

    async def _refuse(self, scope, receive, send) -> None:
        response = JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content={"message": REQUEST_TOO_LARGE_MESSAGE},
        )
        await response(scope, receive, send)


async def access_log(request: Request, call_next: Callable):
    """One log line per request, like a tiny morgan format"""
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "request_completed",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return response
