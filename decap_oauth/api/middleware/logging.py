"""Access logging middleware for structured HTTP request/response logging."""

import time
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


logger = structlog.get_logger(__name__)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Middleware for structured access logging.

    Query strings are never logged: the callback carries the authorization
    code and state there.
    """

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        """Process the request and log access details.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/handler in the chain

        Returns:
            The HTTP response
        """
        start_time = time.perf_counter()

        client_ip = "unknown"
        if request.client:
            client_ip = request.client.host

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "access_log",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
            client_ip=client_ip,
            user_agent=request.headers.get("user-agent", "unknown"),
            request_id=getattr(request.state, "request_id", None),
        )

        return response  # type: ignore[no-any-return]
