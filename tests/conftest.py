"""Shared test fixtures for the decap-oauth tests.

Fixtures build real settings, providers and applications; only the
provider's token endpoint is mocked, through pytest-httpx.
"""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from decap_oauth.api.app import create_app
from decap_oauth.config.oauth import OAuthSettings
from decap_oauth.config.settings import Settings


CLIENT_ID = "test-client-id"
CLIENT_SECRET = "test-client-secret"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer env vars, .env files and TOML files out of the tests."""
    for key in list(os.environ):
        if key.upper().startswith(("OAUTH_", "SERVER__", "LOGGING__", "CONFIG_FILE")):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def oauth_settings() -> OAuthSettings:
    """OAuth settings with GitHub defaults and one allowed origin."""
    return OAuthSettings(
        client_id=CLIENT_ID,
        secret=CLIENT_SECRET,
        origins=["example.com"],
    )


@pytest.fixture
def test_settings(oauth_settings: OAuthSettings) -> Settings:
    return Settings(oauth=oauth_settings)


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Client sending ``Host: example.com`` and not following redirects."""
    with TestClient(
        app, base_url="https://example.com", follow_redirects=False
    ) as test_client:
        yield test_client


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Factory for clients of apps with custom OAuth settings.

    Use the returned client as a context manager so the lifespan runs.
    """

    def _make_client(**oauth_overrides: Any) -> TestClient:
        oauth = OAuthSettings(
            client_id=CLIENT_ID,
            secret=CLIENT_SECRET,
            origins=["example.com"],
            **oauth_overrides,
        )
        return TestClient(
            create_app(Settings(oauth=oauth)),
            base_url="https://example.com",
            follow_redirects=False,
        )

    return _make_client
