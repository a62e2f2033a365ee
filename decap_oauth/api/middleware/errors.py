"""Error handling middleware for the OAuth relay."""

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from decap_oauth.core.errors import ExchangeError, InvalidStateError, RelayError
from decap_oauth.core.logging import get_logger


logger = get_logger(__name__)


def setup_error_handlers(app: FastAPI) -> None:
    """Setup error handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    logger.debug("error_handlers_setup", category="lifecycle")

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError) -> PlainTextResponse:
        """Turn relay errors into plain-text responses.

        Exchange failures are logged where they happen, with provider details.
        """
        if isinstance(exc, InvalidStateError):
            logger.warning(
                "oauth_state_rejected",
                path=request.url.path,
                reason=exc.reason,
                category="auth",
            )
        elif not isinstance(exc, ExchangeError):
            logger.info(
                "oauth_request_rejected",
                path=request.url.path,
                error_type=type(exc).__name__,
                error=str(exc),
                status_code=exc.status_code,
                category="auth",
            )
        return PlainTextResponse(str(exc), status_code=exc.status_code)
