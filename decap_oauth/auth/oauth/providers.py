"""OAuth provider implementations and registry."""

import urllib.parse
from typing import Any

import httpx
from pydantic import ValidationError

from decap_oauth.auth.oauth.client import build_authorization_url, build_client
from decap_oauth.auth.oauth.models import (
    OAuthTokenResponse,
    ProviderClient,
    TokenResult,
    TokenStatus,
)
from decap_oauth.auth.oauth.protocol import OAuthProvider
from decap_oauth.config.oauth import OAuthSettings
from decap_oauth.core.errors import ExchangeError
from decap_oauth.core.logging import get_logger


logger = get_logger(__name__)

# Provider error bodies are echoed to the browser; keep them short
MAX_ERROR_TEXT = 200


class StandardOAuthProvider:
    """RFC 6749 Authorization Code provider with JSON token responses."""

    def __init__(
        self,
        config: OAuthSettings,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize provider.

        Args:
            config: Validated OAuth settings
            http_client: Shared client; a short-lived one is created per
                exchange when omitted
        """
        self.config = config
        self._http_client = http_client

    @property
    def name(self) -> str:
        return self.config.provider

    @property
    def authorize_url(self) -> str:
        return self.config.authorize_url

    @property
    def token_url(self) -> str:
        return self.config.token_url

    def build_client(self, redirect_uri: str) -> ProviderClient:
        return build_client(self.config, redirect_uri)

    def get_authorization_url(
        self, client: ProviderClient, scope: str, state: str
    ) -> str:
        return build_authorization_url(client, scope, state)

    def token_request_headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    async def exchange_code(self, client: ProviderClient, code: str) -> TokenResult:
        """Exchange authorization code for an access token.

        Args:
            client: Descriptor bound to the same redirect URI used at authorize time
            code: Authorization code from the callback

        Returns:
            Token result with ``success`` status

        Raises:
            ExchangeError: If the request fails, times out, or the provider
                answers with an error or an unusable payload
        """
        token_request = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": client.redirect_uri,
            "client_id": client.client_id,
            "client_secret": client.client_secret.get_secret_value(),
        }

        try:
            if self._http_client is not None:
                response = await self._post(self._http_client, client, token_request)
            else:
                async with httpx.AsyncClient() as http_client:
                    response = await self._post(http_client, client, token_request)
        except httpx.TimeoutException as e:
            raise self._failure(
                f"Token exchange timed out after {self.config.exchange_timeout}s",
                cause=e,
            )
        except httpx.HTTPError as e:
            raise self._failure(f"Token exchange request failed: {e}", cause=e)

        result = self.parse_token_response(response)
        logger.info(
            "oauth_token_exchanged",
            provider=self.name,
            category="auth",
        )
        return result

    async def _post(
        self,
        http_client: httpx.AsyncClient,
        client: ProviderClient,
        token_request: dict[str, str],
    ) -> httpx.Response:
        return await http_client.post(
            client.token_url,
            data=token_request,
            headers=self.token_request_headers(),
            timeout=self.config.exchange_timeout,
        )

    def parse_token_response(self, response: httpx.Response) -> TokenResult:
        """Turn a token endpoint response into a ``TokenResult``.

        Raises:
            ExchangeError: Non-2xx status, undecodable body, error payload or
                missing ``access_token``
        """
        if not response.is_success:
            raise self._failure(
                f"Server returned error response: {self.describe_error(response)}",
                provider_status=response.status_code,
            )

        payload = self.decode_token_payload(response)
        if payload is None:
            raise self._failure(
                "Failed to parse server response",
                provider_status=response.status_code,
            )

        if payload.get("error"):
            raise self._failure(
                f"Server returned error response: {self._error_from_payload(payload)}",
                provider_status=response.status_code,
            )

        try:
            token = OAuthTokenResponse.model_validate(payload)
        except ValidationError as e:
            raise self._failure(
                "Failed to parse server response: missing access_token",
                provider_status=response.status_code,
                cause=e,
            )

        return TokenResult(access_token=token.access_token, status=TokenStatus.SUCCESS)

    def decode_token_payload(self, response: httpx.Response) -> dict[str, Any] | None:
        try:
            payload = response.json()
        except ValueError:
            return None
        return payload if isinstance(payload, dict) else None

    def describe_error(self, response: httpx.Response) -> str:
        payload = self.decode_token_payload(response)
        if payload and payload.get("error"):
            return self._error_from_payload(payload)
        text = response.text.strip()
        if text:
            return text[:MAX_ERROR_TEXT]
        return f"HTTP {response.status_code}"

    @staticmethod
    def _error_from_payload(payload: dict[str, Any]) -> str:
        error = str(payload.get("error"))
        description = payload.get("error_description")
        if description:
            return f"{error}: {str(description)[:MAX_ERROR_TEXT]}"
        return error

    def _failure(
        self,
        message: str,
        provider_status: int | None = None,
        cause: Exception | None = None,
    ) -> ExchangeError:
        secret = self.config.secret.get_secret_value()
        if secret:
            message = message.replace(secret, "[REDACTED]")
        logger.warning(
            "oauth_token_exchange_failed",
            provider=self.name,
            provider_status=provider_status,
            error=message,
            category="auth",
        )
        return ExchangeError(message, provider_status=provider_status, cause=cause)


class GitHubProvider(StandardOAuthProvider):
    """GitHub and GitHub Enterprise.

    GitHub answers failed exchanges with ``200 OK`` and an error payload, and
    falls back to form-encoded bodies when it ignores the Accept header.
    """

    def decode_token_payload(self, response: httpx.Response) -> dict[str, Any] | None:
        content_type = response.headers.get("content-type", "")
        if "application/x-www-form-urlencoded" in content_type:
            return dict(urllib.parse.parse_qsl(response.text))
        return super().decode_token_payload(response)


PROVIDERS: dict[str, type[StandardOAuthProvider]] = {
    "github": GitHubProvider,
}


def create_provider(
    config: OAuthSettings, http_client: httpx.AsyncClient | None = None
) -> OAuthProvider:
    """Create the provider selected by ``config.provider``.

    Unknown names get the standard RFC 6749 implementation.
    """
    provider_cls = PROVIDERS.get(config.provider.lower(), StandardOAuthProvider)
    return provider_cls(config, http_client)
