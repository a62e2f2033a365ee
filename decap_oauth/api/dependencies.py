"""Shared dependencies for the OAuth relay API."""

import httpx
from fastapi import Request

from decap_oauth.auth.oauth.protocol import OAuthProvider
from decap_oauth.auth.oauth.providers import create_provider
from decap_oauth.config.oauth import OAuthSettings
from decap_oauth.config.settings import Settings
from decap_oauth.core.logging import get_logger


logger = get_logger(__name__)


def get_cached_settings(request: Request) -> Settings:
    """Get the settings loaded once at application creation.

    Raises:
        RuntimeError: If settings are not available in app state
    """
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise RuntimeError("Settings not found in app state")
    return settings  # type: ignore[no-any-return]


def get_oauth_settings(request: Request) -> OAuthSettings:
    return get_cached_settings(request).oauth


def get_http_client(request: Request) -> httpx.AsyncClient | None:
    """Get the lifespan-managed HTTP client, if the lifespan has run."""
    return getattr(request.app.state, "http_client", None)


def get_oauth_provider(request: Request) -> OAuthProvider:
    """Create the configured provider for this request."""
    return create_provider(get_oauth_settings(request), get_http_client(request))
