"""Tests for the code-for-token exchange against mocked provider endpoints."""

from urllib.parse import parse_qs

import httpx
import pytest
from pytest_httpx import HTTPXMock

from decap_oauth.auth.oauth.models import ProviderClient, TokenStatus
from decap_oauth.auth.oauth.protocol import OAuthProvider
from decap_oauth.auth.oauth.providers import (
    GitHubProvider,
    StandardOAuthProvider,
    create_provider,
)
from decap_oauth.config.oauth import OAuthSettings
from decap_oauth.core.errors import ExchangeError


CLIENT_ID = "test-client-id"
CLIENT_SECRET = "test-client-secret"
TOKEN_URL = "https://github.com/login/oauth/access_token"
REDIRECT_URI = "https://example.com/callback?provider=github"
GITLAB_TOKEN_URL = "https://gitlab.com/oauth/token"


@pytest.fixture
def github(oauth_settings: OAuthSettings) -> GitHubProvider:
    return GitHubProvider(oauth_settings)


@pytest.fixture
def github_client(github: GitHubProvider) -> ProviderClient:
    return github.build_client(REDIRECT_URI)


class TestExchangeCode:
    @pytest.mark.asyncio
    async def test_success(
        self,
        github: GitHubProvider,
        github_client: ProviderClient,
        httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_response(
            url=TOKEN_URL,
            method="POST",
            json={"access_token": "gho_abc", "token_type": "bearer", "scope": "repo"},
        )

        result = await github.exchange_code(github_client, "the-code")

        assert result.access_token.get_secret_value() == "gho_abc"
        assert result.status is TokenStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_sends_form_encoded_request(
        self,
        github: GitHubProvider,
        github_client: ProviderClient,
        httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_response(url=TOKEN_URL, json={"access_token": "gho_abc"})

        await github.exchange_code(github_client, "the-code")

        request = httpx_mock.get_request()
        assert request is not None
        assert request.method == "POST"
        assert request.headers["accept"] == "application/json"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert parse_qs(request.content.decode()) == {
            "grant_type": ["authorization_code"],
            "code": ["the-code"],
            "redirect_uri": [REDIRECT_URI],
            "client_id": [CLIENT_ID],
            "client_secret": [CLIENT_SECRET],
        }

    @pytest.mark.asyncio
    async def test_error_status(
        self,
        github: GitHubProvider,
        github_client: ProviderClient,
        httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_response(
            url=TOKEN_URL, status_code=401, text="Bad credentials"
        )

        with pytest.raises(ExchangeError) as exc_info:
            await github.exchange_code(github_client, "the-code")

        error = exc_info.value
        assert error.status_code == 500
        assert error.provider_status == 401
        assert "Bad credentials" in str(error)
        assert CLIENT_SECRET not in str(error)

    @pytest.mark.asyncio
    async def test_provider_echoing_secret_is_redacted(
        self,
        github: GitHubProvider,
        github_client: ProviderClient,
        httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_response(
            url=TOKEN_URL,
            status_code=400,
            json={
                "error": "invalid_client",
                "error_description": f"unknown secret {CLIENT_SECRET}",
            },
        )

        with pytest.raises(ExchangeError) as exc_info:
            await github.exchange_code(github_client, "the-code")

        message = str(exc_info.value)
        assert "invalid_client" in message
        assert CLIENT_SECRET not in message
        assert "[REDACTED]" in message

    @pytest.mark.asyncio
    async def test_error_payload_with_ok_status(
        self,
        github: GitHubProvider,
        github_client: ProviderClient,
        httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_response(
            url=TOKEN_URL,
            json={
                "error": "bad_verification_code",
                "error_description": "The code passed is incorrect or expired.",
            },
        )

        with pytest.raises(ExchangeError, match="bad_verification_code") as exc_info:
            await github.exchange_code(github_client, "used-code")

        assert exc_info.value.provider_status == 200

    @pytest.mark.asyncio
    async def test_github_form_encoded_response(
        self,
        github: GitHubProvider,
        github_client: ProviderClient,
        httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_response(
            url=TOKEN_URL,
            content=b"access_token=gho_form&scope=repo&token_type=bearer",
            headers={"content-type": "application/x-www-form-urlencoded"},
        )

        result = await github.exchange_code(github_client, "the-code")

        assert result.access_token.get_secret_value() == "gho_form"

    @pytest.mark.asyncio
    async def test_standard_provider_rejects_non_json(
        self, httpx_mock: HTTPXMock
    ) -> None:
        provider = StandardOAuthProvider(
            OAuthSettings(client_id=CLIENT_ID, secret=CLIENT_SECRET, provider="gitlab")
        )
        httpx_mock.add_response(
            url=GITLAB_TOKEN_URL,
            content=b"access_token=abc",
            headers={"content-type": "application/x-www-form-urlencoded"},
        )

        with pytest.raises(ExchangeError, match="Failed to parse server response"):
            await provider.exchange_code(provider.build_client(REDIRECT_URI), "c")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{"token_type": "bearer"}, {"access_token": ""}, {"access_token": None}],
    )
    async def test_missing_access_token(
        self,
        payload: dict[str, object],
        github: GitHubProvider,
        github_client: ProviderClient,
        httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_response(url=TOKEN_URL, json=payload)

        with pytest.raises(ExchangeError, match="missing access_token"):
            await github.exchange_code(github_client, "the-code")

    @pytest.mark.asyncio
    async def test_timeout(
        self,
        github: GitHubProvider,
        github_client: ProviderClient,
        httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("read timed out"), url=TOKEN_URL)

        with pytest.raises(ExchangeError, match="timed out after 10.0s") as exc_info:
            await github.exchange_code(github_client, "the-code")

        assert exc_info.value.provider_status is None
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)

    @pytest.mark.asyncio
    async def test_connection_error(
        self,
        github: GitHubProvider,
        github_client: ProviderClient,
        httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_exception(httpx.ConnectError("connection refused"))

        with pytest.raises(ExchangeError, match="request failed: connection refused"):
            await github.exchange_code(github_client, "the-code")

    @pytest.mark.asyncio
    async def test_uses_shared_http_client(
        self, oauth_settings: OAuthSettings, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(url=TOKEN_URL, json={"access_token": "gho_shared"})

        async with httpx.AsyncClient() as http_client:
            provider = GitHubProvider(oauth_settings, http_client)
            result = await provider.exchange_code(
                provider.build_client(REDIRECT_URI), "the-code"
            )
            assert not http_client.is_closed

        assert result.access_token.get_secret_value() == "gho_shared"


class TestCreateProvider:
    def test_github(self, oauth_settings: OAuthSettings) -> None:
        provider = create_provider(oauth_settings)

        assert isinstance(provider, GitHubProvider)
        assert isinstance(provider, OAuthProvider)
        assert provider.name == "github"
        assert provider.token_url == TOKEN_URL

    def test_other_providers_use_standard_exchange(self) -> None:
        provider = create_provider(
            OAuthSettings(client_id="id", secret="s", provider="gitlab")
        )

        assert type(provider) is StandardOAuthProvider
        assert provider.token_url == GITLAB_TOKEN_URL
