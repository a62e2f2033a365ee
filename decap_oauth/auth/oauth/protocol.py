"""Capability interface implemented by every OAuth provider."""

from typing import Protocol, runtime_checkable

from decap_oauth.auth.oauth.models import ProviderClient, TokenResult


@runtime_checkable
class OAuthProvider(Protocol):
    """What the route handlers need from a provider.

    New providers are added as implementations of this protocol and
    registered in ``decap_oauth.auth.oauth.providers``; the handlers do not
    change.
    """

    @property
    def name(self) -> str:
        """Provider name as used in the ``provider`` query parameter."""
        ...

    @property
    def authorize_url(self) -> str: ...

    @property
    def token_url(self) -> str: ...

    def build_client(self, redirect_uri: str) -> ProviderClient:
        """Bind credentials and endpoints to a redirect URI."""
        ...

    def get_authorization_url(
        self, client: ProviderClient, scope: str, state: str
    ) -> str:
        """Compose the consent-screen URL the browser is redirected to."""
        ...

    async def exchange_code(self, client: ProviderClient, code: str) -> TokenResult:
        """Exchange an authorization code for an access token.

        Raises:
            ExchangeError: On any transport, protocol or payload failure
        """
        ...
