"""Authorization and callback endpoints of the OAuth relay."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from decap_oauth.api.dependencies import get_oauth_provider, get_oauth_settings
from decap_oauth.auth.oauth.client import build_redirect_uri
from decap_oauth.auth.oauth.messaging import render_login_page
from decap_oauth.auth.oauth.models import AuthorizeRequest, CallbackRequest
from decap_oauth.auth.oauth.protocol import OAuthProvider
from decap_oauth.auth.oauth.state import StateManager
from decap_oauth.config.oauth import OAuthSettings
from decap_oauth.core.logging import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["oauth"])

OAuthConfigDep = Annotated[OAuthSettings, Depends(get_oauth_settings)]
OAuthProviderDep = Annotated[OAuthProvider, Depends(get_oauth_provider)]


@router.get("/auth", status_code=302, response_class=RedirectResponse)
async def auth(
    request: Request,
    config: OAuthConfigDep,
    oauth_provider: OAuthProviderDep,
    provider: str | None = None,
    scope: str | None = None,
) -> RedirectResponse:
    """Redirect the popup to the provider's consent screen."""
    auth_request = AuthorizeRequest(
        provider=provider,
        scope=scope,
        host_header=request.headers.get("host"),
    )

    effective_provider = auth_request.effective_provider(config)
    effective_scope = auth_request.effective_scope(config)
    host = auth_request.host()

    redirect_uri = build_redirect_uri(host, effective_provider)
    client = oauth_provider.build_client(redirect_uri)
    state = StateManager.from_settings(config).issue(effective_provider, redirect_uri)
    authorization_url = oauth_provider.get_authorization_url(
        client, effective_scope, state
    )

    logger.info(
        "oauth_authorize_redirect",
        provider=effective_provider,
        scope=effective_scope,
        redirect_uri=redirect_uri,
        category="auth",
    )

    return RedirectResponse(authorization_url, status_code=302)


@router.get("/callback", response_class=HTMLResponse)
async def callback(
    request: Request,
    config: OAuthConfigDep,
    oauth_provider: OAuthProviderDep,
    provider: str | None = None,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> HTMLResponse:
    """Exchange the authorization code and hand the token to the opener."""
    callback_request = CallbackRequest(
        provider=provider,
        code=code,
        state=state,
        error=error,
        host_header=request.headers.get("host"),
    )

    effective_provider = callback_request.effective_provider(config)
    if callback_request.error and not callback_request.code:
        logger.warning(
            "oauth_authorization_denied",
            provider=effective_provider,
            error=callback_request.error,
            category="auth",
        )
    authorization_code = callback_request.require_code()
    host = callback_request.host()

    redirect_uri = build_redirect_uri(host, effective_provider)
    StateManager.from_settings(config).verify(
        callback_request.state, effective_provider, redirect_uri
    )

    client = oauth_provider.build_client(redirect_uri)
    result = await oauth_provider.exchange_code(client, authorization_code)

    return HTMLResponse(
        render_login_page(
            effective_provider,
            result.status.value,
            result.access_token.get_secret_value(),
            config.origins,
        )
    )
