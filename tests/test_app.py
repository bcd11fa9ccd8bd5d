"""End-to-end tests for the snooauth CLI."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from snooauth import __version__
from snooauth.app import app
from snooauth.config import load_config
from snooauth.session import SessionBuilder


@pytest.fixture
def configured(isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A complete script-app configuration with the password in the environment."""
    isolated_config.mkdir(parents=True, exist_ok=True)
    (isolated_config / "config.json").write_text(
        json.dumps(
            {
                "client_id": "abc123",
                "client_secret_source": "env:REDDIT_CLIENT_SECRET",
                "username": "example_bot",
                "password_source": "env:REDDIT_PASSWORD",
                "scopes": ["identity", "read"],
            }
        )
    )
    monkeypatch.setenv("REDDIT_CLIENT_SECRET", "xyz890")
    monkeypatch.setenv("REDDIT_PASSWORD", "hunter2")
    return isolated_config


@pytest.fixture
def serve(monkeypatch: pytest.MonkeyPatch, token_endpoint):
    """Route the CLI's sessions through a scripted token endpoint."""

    def _serve(*responses):
        endpoint = token_endpoint(*responses)
        monkeypatch.setattr(
            "snooauth.commands.auth._new_builder",
            lambda: SessionBuilder().transport(endpoint.transport()),
        )
        return endpoint

    return _serve


class TestGlobalOptions:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"snooauth {__version__}" in result.output


class TestAuthorizeUrl:
    def test_prints_url(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app,
            [
                "authorize-url",
                "--client-id", "abc123",
                "--redirect-uri", "https://example.com/authorized",
                "--state", "random_state",
            ],
        )

        assert result.exit_code == 0
        assert result.output.strip() == (
            "https://www.reddit.com/api/v1/authorize?client_id=abc123&duration=temporary"
            "&redirect_uri=https%3A%2F%2Fexample.com%2Fauthorized&response_type=code"
            "&scope=identity&state=random_state"
        )

    def test_uses_configured_client_and_scopes(self, cli_runner, configured: Path) -> None:
        result = cli_runner.invoke(
            app,
            [
                "authorize-url",
                "--redirect-uri", "https://example.com/cb",
                "--state", "s",
                "--duration", "permanent",
                "--compact",
            ],
        )

        assert result.exit_code == 0
        assert "/api/v1/authorize.compact?client_id=abc123&duration=permanent&" in result.output
        assert "&scope=identity+read&" in result.output

    def test_missing_state(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["authorize-url", "--client-id", "abc123", "--redirect-uri", "https://e.com"]
        )
        assert result.exit_code == 2
        assert "missing state" in result.output

    def test_unknown_scope(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app,
            [
                "authorize-url",
                "--client-id", "abc123",
                "--redirect-uri", "https://e.com",
                "--state", "s",
                "--scope", "teleport",
            ],
        )
        assert result.exit_code == 2
        assert "unknown scope teleport" in result.output


class TestToken:
    def test_password_grant(self, cli_runner, configured: Path, serve, token_body) -> None:
        endpoint = serve(token_body(access_token="fresh", scope="identity read"))

        result = cli_runner.invoke(app, ["--json", "token"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "access_token": "fresh",
            "token_type": "bearer",
            "expires_in": 3600,
            "scope": "identity read",
        }
        assert endpoint.forms()[0] == {
            "grant_type": "password",
            "username": "example_bot",
            "password": "hunter2",
            "scope": "identity read",
        }
        assert endpoint.requests[0].headers["User-Agent"] == (
            "snooauth:0.1.0 (by /u/example_bot)"
        )

    def test_scope_option_overrides_config(
        self, cli_runner, configured: Path, serve, token_body
    ) -> None:
        endpoint = serve(token_body(scope="vote"))

        result = cli_runner.invoke(app, ["--json", "token", "--scope", "vote"])

        assert result.exit_code == 0, result.output
        assert endpoint.forms()[0]["scope"] == "vote"

    def test_refresh_token(self, cli_runner, configured: Path, serve, token_body) -> None:
        endpoint = serve(token_body(refresh_token="ref-2"))

        result = cli_runner.invoke(app, ["--json", "token", "--refresh-token", "ref-1"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["refresh_token"] == "ref-2"
        assert endpoint.forms()[0] == {"grant_type": "refresh_token", "refresh_token": "ref-1"}

    def test_bad_credentials(self, cli_runner, configured: Path, serve) -> None:
        serve({"error": "invalid_grant"})

        result = cli_runner.invoke(app, ["token"])

        assert result.exit_code == 3
        assert "bad credentials" in result.output

    def test_server_error(self, cli_runner, configured: Path, serve) -> None:
        serve(httpx.Response(500))

        result = cli_runner.invoke(app, ["token"])

        assert result.exit_code == 5
        assert "unsuccessful response: 500" in result.output

    def test_missing_client_id(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["token"])

        assert result.exit_code == 1
        assert "No client ID configured" in result.output

    def test_missing_password_source(
        self, cli_runner, configured: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("REDDIT_PASSWORD")

        result = cli_runner.invoke(app, ["token"])

        assert result.exit_code == 1
        assert "REDDIT_PASSWORD" in result.output


class TestConfigCommands:
    def test_set_and_show(self, cli_runner, isolated_config: Path) -> None:
        assert cli_runner.invoke(app, ["config", "set", "client_id", "abc123"]).exit_code == 0
        assert cli_runner.invoke(app, ["config", "set", "scopes", "identity read"]).exit_code == 0

        config = load_config()
        assert config.client_id == "abc123"
        assert config.scopes == ["identity", "read"]

        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert result.exit_code == 0
        assert json.loads(result.output)["client_id"] == "abc123"

    def test_set_unknown_key(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "colour", "blue"])
        assert result.exit_code == 2
        assert "Unknown config key" in result.output

    def test_set_invalid_value(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "timeout", "soon"])
        assert result.exit_code == 2
        assert "Validation error" in result.output

    def test_set_does_not_persist_env_overrides(
        self, cli_runner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SNOOAUTH_CLIENT_ID", "from-env")
        cli_runner.invoke(app, ["config", "set", "username", "example_bot"])

        assert load_config(apply_env=False).client_id is None

    def test_set_secret_instead_of_source_warns(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "password_source", "hunter2"])
        assert result.exit_code == 0
        assert "Warning" in result.output
        assert "password_source should be" in result.output
        assert "hunter2" not in result.output

    def test_set_source_descriptor_does_not_warn(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "password_source", "env:REDDIT_PASSWORD"])
        assert result.exit_code == 0
        assert "Warning" not in result.output
        assert load_config().password_source == "env:REDDIT_PASSWORD"
