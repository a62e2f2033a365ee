"""OAuth provider and relay settings.

Values are read from ``OAUTH_*`` environment variables (and ``.env``):

```shell
OAUTH_CLIENT_ID=(insert_the_client_id)
OAUTH_SECRET=(insert_the_secret)
OAUTH_ORIGINS=www.example.com,oauth.mysite.com
```

When using a provider other than GitHub, such as GitLab, also set
``OAUTH_PROVIDER``; hostname, paths and scopes then default to that provider's
values unless ``OAUTH_HOSTNAME``, ``OAUTH_TOKEN_PATH``,
``OAUTH_AUTHORIZE_PATH`` or ``OAUTH_SCOPES`` are given. For GitHub Enterprise
set ``OAUTH_HOSTNAME``.
"""

from typing import Annotated, Any

import httpx
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_PROVIDER = "github"

PROVIDER_DEFAULTS: dict[str, dict[str, str]] = {
    "github": {
        "hostname": "https://github.com",
        "authorize_path": "/login/oauth/authorize",
        "token_path": "/login/oauth/access_token",
        "scopes": "repo",
    },
    "gitlab": {
        "hostname": "https://gitlab.com",
        "authorize_path": "/oauth/authorize",
        "token_path": "/oauth/token",
        "scopes": "api",
    },
}


def join_url(hostname: str, path: str) -> str:
    """Join a provider hostname and an endpoint path into an absolute URL.

    Raises:
        ValueError: If the result is not an absolute http(s) URL
    """
    url = f"{hostname}{path}"
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValueError(f"{url!r} is not a valid URL: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError(f"{url!r} is not an absolute http(s) URL")
    return url


class OAuthSettings(BaseSettings):
    """OAuth client credentials, provider endpoints and relay policy."""

    model_config = SettingsConfigDict(
        env_prefix="OAUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    client_id: str = Field(
        ...,
        min_length=1,
        description="OAuth application client ID",
    )
    secret: SecretStr = Field(
        ...,
        description="OAuth application client secret, never sent to the browser",
    )
    provider: str = Field(
        default=DEFAULT_PROVIDER,
        description="Provider name expected in the `provider` query parameter",
    )
    hostname: str = Field(
        default=PROVIDER_DEFAULTS[DEFAULT_PROVIDER]["hostname"],
        description="Provider base URL, e.g. https://github.com",
    )
    authorize_path: str = Field(
        default=PROVIDER_DEFAULTS[DEFAULT_PROVIDER]["authorize_path"],
        description="Path of the provider's authorization endpoint",
    )
    token_path: str = Field(
        default=PROVIDER_DEFAULTS[DEFAULT_PROVIDER]["token_path"],
        description="Path of the provider's token endpoint",
    )
    scopes: str = Field(
        default=PROVIDER_DEFAULTS[DEFAULT_PROVIDER]["scopes"],
        description="Scope requested when the client does not send one",
    )
    origins: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description=(
            "Origins allowed to receive the token, comma separated. "
            "Empty means any origin (not recommended)."
        ),
    )
    strict_provider_check: bool = Field(
        default=True,
        description="Reject requests whose provider differs from the configured one",
    )
    exchange_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for the code-for-token exchange",
    )
    state_secret: SecretStr | None = Field(
        default=None,
        description=(
            "Key used to sign the OAuth state parameter. When unset the state "
            "is random and not verified on callback."
        ),
    )
    state_ttl_seconds: int = Field(
        default=600,
        ge=1,
        description="Lifetime of a signed state token",
    )

    @model_validator(mode="before")
    @classmethod
    def _apply_provider_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        provider = str(data.get("provider") or DEFAULT_PROVIDER).lower()
        defaults = PROVIDER_DEFAULTS.get(provider, PROVIDER_DEFAULTS[DEFAULT_PROVIDER])
        for key, value in defaults.items():
            if not data.get(key):
                data[key] = value
        return data

    @field_validator("origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list | tuple):
            return [str(item).strip() for item in value if str(item).strip()]
        return value

    @field_validator("client_id")
    @classmethod
    def _strip_client_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("secret")
    @classmethod
    def _require_secret(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("must not be empty")
        return value

    @model_validator(mode="after")
    def _validate_endpoints(self) -> "OAuthSettings":
        join_url(self.hostname, self.authorize_path)
        join_url(self.hostname, self.token_path)
        return self

    @property
    def provider_configured(self) -> bool:
        """Whether the operator set the provider explicitly."""
        return "provider" in self.model_fields_set

    @property
    def authorize_url(self) -> str:
        return join_url(self.hostname, self.authorize_path)

    @property
    def token_url(self) -> str:
        return join_url(self.hostname, self.token_path)


__all__ = ["OAuthSettings", "PROVIDER_DEFAULTS", "join_url"]
