"""OAuth Authorization Code flow: provider clients, state and popup messaging."""

from decap_oauth.auth.oauth.client import (
    build_authorization_url,
    build_client,
    build_redirect_uri,
)
from decap_oauth.auth.oauth.messaging import origin_allowed, render_login_page
from decap_oauth.auth.oauth.models import (
    AuthorizeRequest,
    CallbackRequest,
    ProviderClient,
    TokenResult,
    TokenStatus,
)
from decap_oauth.auth.oauth.protocol import OAuthProvider
from decap_oauth.auth.oauth.providers import (
    GitHubProvider,
    StandardOAuthProvider,
    create_provider,
)
from decap_oauth.auth.oauth.state import StateManager


__all__ = [
    "AuthorizeRequest",
    "CallbackRequest",
    "GitHubProvider",
    "OAuthProvider",
    "ProviderClient",
    "StandardOAuthProvider",
    "StateManager",
    "TokenResult",
    "TokenStatus",
    "build_authorization_url",
    "build_client",
    "build_redirect_uri",
    "create_provider",
    "origin_allowed",
    "render_login_page",
]
