"""Request, descriptor and token models for the OAuth relay flow."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, SecretStr, field_validator

from decap_oauth.config.oauth import OAuthSettings
from decap_oauth.core.errors import MissingParameterError, ProviderMismatchError


class TokenStatus(str, Enum):
    """Outcome reported to the opener window."""

    SUCCESS = "success"
    FAILURE = "failure"


class ProviderClient(BaseModel):
    """Provider-bound OAuth client descriptor, built per request."""

    model_config = ConfigDict(frozen=True)

    authorize_url: str
    token_url: str
    client_id: str
    client_secret: SecretStr
    redirect_uri: str


class OAuthTokenResponse(BaseModel):
    """Successful token endpoint payload."""

    model_config = ConfigDict(extra="ignore")

    access_token: SecretStr
    token_type: str | None = None
    scope: str | None = None

    @field_validator("access_token")
    @classmethod
    def _require_token(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("access_token is empty")
        return value


class TokenResult(BaseModel):
    """Result of a code-for-token exchange. Never persisted or logged."""

    model_config = ConfigDict(frozen=True)

    access_token: SecretStr
    status: TokenStatus = TokenStatus.SUCCESS


class RelayRequest(BaseModel):
    """Query and header values shared by both legs of the flow."""

    model_config = ConfigDict(frozen=True)

    provider: str | None = None
    host_header: str | None = None

    def effective_provider(self, config: OAuthSettings) -> str:
        """Resolve the provider for this request.

        An absent provider falls back to the configured one only when the
        operator set it explicitly.

        Raises:
            MissingParameterError: No provider in the request or configuration
            ProviderMismatchError: Strict checking is on and the names differ
        """
        provider = self.provider
        if provider is None:
            if not config.provider_configured:
                raise MissingParameterError("No provider specified", "provider")
            provider = config.provider

        if config.strict_provider_check and provider != config.provider:
            raise ProviderMismatchError(provider, config.provider)

        return provider

    def host(self) -> str:
        """Return the Host header.

        The value is client controlled; it only selects where the provider
        sends the browser back to, never which credentials are used.

        Raises:
            MissingParameterError: The header is absent or empty
        """
        if not self.host_header:
            raise MissingParameterError("No host header", "host")
        return self.host_header


class AuthorizeRequest(RelayRequest):
    """Incoming ``GET /auth`` request."""

    scope: str | None = None

    def effective_scope(self, config: OAuthSettings) -> str:
        return self.scope if self.scope is not None else config.scopes


class CallbackRequest(RelayRequest):
    """Incoming ``GET /callback`` request."""

    code: str | None = None
    state: str | None = None
    error: str | None = None

    def require_code(self) -> str:
        if not self.code:
            raise MissingParameterError("Code is required", "code")
        return self.code
