"""Provider client construction for the Authorization Code flow.

Everything here is pure: no network I/O and no state kept between calls.
"""

import urllib.parse

from decap_oauth.auth.oauth.models import ProviderClient
from decap_oauth.config.oauth import OAuthSettings, join_url
from decap_oauth.config.settings import ConfigurationError


def build_redirect_uri(host: str, provider: str) -> str:
    """Build the callback URL the provider redirects the browser to.

    Both legs of the flow must derive the same value; the provider rejects
    the exchange otherwise.
    """
    return f"https://{host}/callback?provider={urllib.parse.quote(provider, safe='')}"


def build_client(config: OAuthSettings, redirect_uri: str) -> ProviderClient:
    """Build a provider-bound client descriptor.

    Args:
        config: Validated OAuth settings
        redirect_uri: Callback URL for this request

    Returns:
        Descriptor carrying endpoints, credentials and redirect URI

    Raises:
        ConfigurationError: If hostname and paths do not form valid URLs.
            Settings validate this on load, so it only surfaces at startup.
    """
    try:
        authorize_url = join_url(config.hostname, config.authorize_path)
        token_url = join_url(config.hostname, config.token_path)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    return ProviderClient(
        authorize_url=authorize_url,
        token_url=token_url,
        client_id=config.client_id,
        client_secret=config.secret,
        redirect_uri=redirect_uri,
    )


def build_authorization_url(client: ProviderClient, scope: str, state: str) -> str:
    """Build authorization URL for OAuth flow.

    Args:
        client: Provider client descriptor
        scope: Scope string passed through as a single value
        state: State parameter for CSRF protection

    Returns:
        Authorization URL
    """
    params = {
        "response_type": "code",
        "client_id": client.client_id,
        "state": state,
        "redirect_uri": client.redirect_uri,
        "scope": scope,
    }

    query_string = urllib.parse.urlencode(params)
    separator = "&" if urllib.parse.urlsplit(client.authorize_url).query else "?"
    return f"{client.authorize_url}{separator}{query_string}"
