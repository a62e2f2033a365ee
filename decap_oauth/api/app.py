"""FastAPI application factory for the OAuth relay."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from decap_oauth import __version__
from decap_oauth.api.middleware.errors import setup_error_handlers
from decap_oauth.api.middleware.logging import AccessLogMiddleware
from decap_oauth.api.middleware.request_id import RequestIDMiddleware
from decap_oauth.auth.oauth.routes import router as oauth_router
from decap_oauth.config.settings import Settings
from decap_oauth.core.logging import get_logger


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Owns the HTTP client used for token exchanges.
    """
    settings: Settings = app.state.settings
    logger.info(
        "server_starting",
        provider=settings.oauth.provider,
        token_url=settings.oauth.token_url,
        origins=settings.oauth.origins,
        signed_state=settings.oauth.state_secret is not None,
        category="lifecycle",
    )

    async with httpx.AsyncClient(
        timeout=settings.oauth.exchange_timeout
    ) as http_client:
        app.state.http_client = http_client
        try:
            yield
        finally:
            app.state.http_client = None
            logger.debug("http_client_closed", category="lifecycle")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Resolved settings; loaded from the environment when omitted

    Raises:
        ConfigurationError: If settings are loaded here and are invalid
    """
    if settings is None:
        settings = Settings.from_config()

    if not settings.oauth.origins:
        logger.warning(
            "oauth_origins_unrestricted",
            message=(
                "OAUTH_ORIGINS is empty; the token will be posted to any "
                "window that answers the handshake"
            ),
            category="config",
        )

    app = FastAPI(
        title="Decap OAuth",
        description="OAuth popup relay for Decap CMS",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.http_client = None

    setup_error_handlers(app)

    # Added last so it runs first and the access log sees the request ID
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(oauth_router)

    return app
