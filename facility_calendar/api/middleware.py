"""API middleware for authentication and request logging."""

import hmac
import logging
import time
import uuid
from typing import Callable, Iterable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PUBLIC_PATHS = ("/health", "/health/ready", "/health/live", "/api-info", "/docs", "/openapi.json")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with a correlation id and its processing time."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        client = request.client.host if request.client else "unknown"
        started = time.perf_counter()

        logger.info(f"[{request_id}] {request.method} {request.url.path} client={client}")

        response = await call_next(request)

        duration = time.perf_counter() - started
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
        )
        response.headers["X-Process-Time"] = f"{duration:.3f}"
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _provided_key(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):]
    return request.headers.get("X-API-Key")


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Require the configured API key on everything but the public paths."""

    def __init__(self, app, api_key: str, public_paths: Iterable[str] = PUBLIC_PATHS):
        super().__init__(app)
        self.api_key = api_key
        self.public_paths = frozenset(public_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.public_paths:
            return await call_next(request)

        provided = _provided_key(request)
        if not provided or not hmac.compare_digest(provided, self.api_key):
            logger.warning(
                f"Unauthorized request: {request.method} {request.url.path} "
                f"client={request.client.host if request.client else 'unknown'}"
            )
            return JSONResponse(
                status_code=401,
                content={"error": "Unauthorized", "detail": "Invalid or missing API key"},
            )

        return await call_next(request)
