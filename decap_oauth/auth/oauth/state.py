"""OAuth ``state`` parameter handling.

Without a configured key the state is a random value that is discarded
immediately; the relay keeps no session store, so nothing verifies it on
callback. With ``OAUTH_STATE_SECRET`` set the state becomes a short-lived
HS256 JWT binding the provider and redirect URI, verified on callback.
"""

import secrets
from datetime import UTC, datetime, timedelta

import jwt
from pydantic import SecretStr

from decap_oauth.config.oauth import OAuthSettings
from decap_oauth.core.errors import InvalidStateError


STATE_ALGORITHM = "HS256"


class StateManager:
    """Issues and verifies state tokens for one configuration."""

    def __init__(self, secret: SecretStr | None = None, ttl_seconds: int = 600):
        self._secret = secret
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_settings(cls, config: OAuthSettings) -> "StateManager":
        return cls(config.state_secret, config.state_ttl_seconds)

    @property
    def enabled(self) -> bool:
        """Whether states are signed and verified."""
        return self._secret is not None

    def issue(self, provider: str, redirect_uri: str) -> str:
        """Create the state for an authorize redirect."""
        nonce = secrets.token_urlsafe(32)
        if self._secret is None:
            return nonce

        now = datetime.now(UTC)
        claims = {
            "prv": provider,
            "rdr": redirect_uri,
            "nonce": nonce,
            "iat": now,
            "exp": now + timedelta(seconds=self.ttl_seconds),
        }
        return jwt.encode(
            claims, self._secret.get_secret_value(), algorithm=STATE_ALGORITHM
        )

    def verify(self, state: str | None, provider: str, redirect_uri: str) -> None:
        """Check a returned state against the callback's provider and redirect URI.

        Does nothing when signing is disabled.

        Raises:
            InvalidStateError: Missing, forged, expired or mismatched state
        """
        if self._secret is None:
            return
        if not state:
            raise InvalidStateError("missing")

        try:
            claims = jwt.decode(
                state,
                self._secret.get_secret_value(),
                algorithms=[STATE_ALGORITHM],
                options={"require": ["exp", "prv", "rdr"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidStateError("expired", cause=e)
        except jwt.InvalidTokenError as e:
            raise InvalidStateError("malformed or bad signature", cause=e)

        if claims["prv"] != provider:
            raise InvalidStateError("provider mismatch")
        if claims["rdr"] != redirect_uri:
            raise InvalidStateError("redirect_uri mismatch")
