"""Request ID middleware for generating and tracking request IDs."""

import re
import uuid
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


# Client supplied IDs outside this shape are replaced
REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._-]{1,128}")


def resolve_request_id(header_value: str | None) -> str:
    """Return the client's request ID if well formed, otherwise a new UUID."""
    if header_value and REQUEST_ID_RE.fullmatch(header_value):
        return header_value
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware binding a request ID to the structlog context."""

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        """Process the request and add the request ID.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/handler in the chain

        Returns:
            The HTTP response
        """
        request_id = resolve_request_id(request.headers.get("x-request-id"))
        request.state.request_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers["x-request-id"] = request_id
        return response  # type: ignore[no-any-return]
