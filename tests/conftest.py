"""Shared test fixtures for snooauth.

Provides isolated config environments, output state management, a CLI
runner, and helpers for building token-endpoint responses served through
:class:`httpx.MockTransport`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from snooauth.client.http import HttpClient
from snooauth.models import AppSecrets
from snooauth.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Token endpoint helpers
# ---------------------------------------------------------------------------


def token_body(
    access_token: str = "token-1",
    expires_in: int = 3600,
    scope: str = "identity",
    refresh_token: str | None = None,
) -> dict[str, Any]:
    """A successful token-endpoint JSON body."""
    body: dict[str, Any] = {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": expires_in,
        "scope": scope,
    }
    if refresh_token is not None:
        body["refresh_token"] = refresh_token
    return body


class TokenEndpoint:
    """Scripted token endpoint recording every request it receives.

    Responses are served in order; the last one repeats once the script
    runs out. Each item is either a JSON-able dict (served with status 200)
    or a ready :class:`httpx.Response`.
    """

    def __init__(self, *responses: Any) -> None:
        self._responses = list(responses) or [token_body()]
        self.requests: list[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def forms(self) -> list[dict[str, str]]:
        """Decoded form bodies of the recorded requests."""
        from urllib.parse import parse_qsl

        return [dict(parse_qsl(request.content.decode())) for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self._responses)) - 1
        item = self._responses[index]
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture(name="token_body")
def token_body_fixture() -> Callable[..., dict[str, Any]]:
    """The :func:`token_body` helper, for test modules."""
    return token_body


@pytest.fixture
def token_endpoint() -> Callable[..., TokenEndpoint]:
    """Factory for scripted :class:`TokenEndpoint` instances."""
    return TokenEndpoint


@pytest.fixture
def app_secrets() -> AppSecrets:
    return AppSecrets(client_id="abc123", client_secret="xyz890")


@pytest.fixture
def make_http_client() -> Callable[[TokenEndpoint], HttpClient]:
    """Factory building an HttpClient served by a TokenEndpoint."""

    def _make(endpoint: TokenEndpoint) -> HttpClient:
        return HttpClient("test-app:1.0.0 (by /u/tester)", transport=endpoint.transport())

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME at tmp_path, forces the XDG layout and clears
    every SNOOAUTH_* override.

    Returns:
        The snooauth config directory.
    """
    monkeypatch.setattr("snooauth.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for var in ["SNOOAUTH_CLIENT_ID", "SNOOAUTH_USERNAME", "SNOOAUTH_BASE_URL"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path / "config" / "snooauth"


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
