# delivery_analytics/logging/middleware.py
"""Request/response logging middleware."""

import getpass
import json
import logging
import os
import platform
import socket
import time
from typing import Callable

from fastapi import Request, Response
from starlette.background import BackgroundTask
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from delivery_analytics.core.config import APPLICATION_ID
from delivery_analytics.logging.schemas import LogCreate
from delivery_analytics.logging.service import record_log

logger = logging.getLogger(__name__)

EXCLUDED_PATHS = ["/api/logs", "/api/docs", "/api/redoc", "/api/openapi.json"]


def is_excluded_path(path: str) -> bool:
    return any(path.startswith(prefix) for prefix in EXCLUDED_PATHS)


def current_username() -> str:
    try:
        return os.environ.get("USER") or os.environ.get("USERNAME") or getpass.getuser() or "unknown_user"
    except Exception:
        return "unknown_user"


def current_hostname() -> str:
    return socket.gethostname() or platform.node() or "unknown_host"


def request_log_fields(request: Request) -> dict:
    """Log fields that describe the incoming request and the serving process."""
    return {
        "method": request.method,
        "path": str(request.url.path),
        "client_ip": request.client.host if request.client else None,
        "request_headers": json.dumps(dict(request.headers)),
        "user_agent": request.headers.get("user-agent"),
        "username": current_username(),
        "hostname": current_hostname(),
        "application_id": APPLICATION_ID,
    }


class LoggingMiddleware(BaseHTTPMiddleware):
    """Persists every API request and its response to the log table.

    The write happens in a background task after the response is sent.
    Requests to the log endpoints themselves are not recorded.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.username = current_username()
        self.hostname = current_hostname()
        logger.info(
            f"Logging middleware initialized for {self.username} on {self.hostname}, App ID: {APPLICATION_ID}"
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if is_excluded_path(request.url.path):
            return await call_next(request)

        start_time = time.time()

        body_bytes = await request.body()
        request_body = body_bytes.decode("utf-8", errors="ignore")
        request.state.body = request_body

        # Downstream handlers read the body again
        async def receive() -> dict:
            return {"type": "http.request", "body": body_bytes}

        request = Request(request.scope, receive=receive)
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        # Already recorded with its error detail by an exception handler
        if getattr(request.state, "error_logged", False):
            return response

        # Responses from call_next are streamed; buffer the chunks so the body can be logged
        chunks = [chunk async for chunk in response.body_iterator]
        response_body = b"".join(chunks)

        entry = LogCreate(
            status_code=response.status_code,
            request_body=request_body,
            response_body=response_body.decode("utf-8", errors="ignore"),
            processing_time=duration_ms,
            **request_log_fields(request),
        )

        return Response(
            content=response_body,
            status_code=response.status_code,
            headers=dict(response.headers),
            media_type=response.media_type,
            background=BackgroundTask(record_log, entry),
        )
