"""Auth commands -- build authorization URLs and fetch bearer tokens.

Typical workflow::

    snooauth config set client_id abc123
    snooauth config set username example_bot
    snooauth config set password_source env:REDDIT_PASSWORD
    snooauth token --scope identity --scope read

    snooauth authorize-url --redirect-uri https://example.com/cb --state xyz
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from snooauth.auth.authorization import (
    AuthorizationDuration,
    AuthorizationResponseType,
    AuthorizationUrlBuilder,
)
from snooauth.auth.strategies import AuthStrategy, PasswordStrategy, RefreshTokenStrategy
from snooauth.commands import CLI_ERRORS, fail
from snooauth.exceptions import ConfigError, InvalidRequestError
from snooauth.models import AppSecrets, ClientConfig, Credential, ScopeSet, coerce_scope_set
from snooauth.output import error, format_response, print_data, suggest
from snooauth.session import Session, SessionBuilder


def _parse_scopes(values: Optional[list[str]], fallback: list[str]) -> ScopeSet:
    try:
        return coerce_scope_set(values or fallback)
    except ValueError as exc:
        raise InvalidRequestError(str(exc)) from None


def authorize_url_command(
    redirect_uri: Optional[str] = typer.Option(
        None, "--redirect-uri", help="Redirect URI registered for the app."
    ),
    state: Optional[str] = typer.Option(
        None, "--state", help="Unique value echoed back on redirect."
    ),
    client_id: Optional[str] = typer.Option(
        None, "--client-id", help="Client ID (defaults to the configured one)."
    ),
    scope: Optional[list[str]] = typer.Option(
        None, "--scope", "-s", help="Requested scope; repeat for several."
    ),
    duration: AuthorizationDuration = typer.Option(
        AuthorizationDuration.TEMPORARY, "--duration", help="Authorization duration."
    ),
    response_type: AuthorizationResponseType = typer.Option(
        AuthorizationResponseType.CODE, "--response-type", help="Code or implicit grant."
    ),
    compact: bool = typer.Option(False, "--compact", help="Use the small-screen page."),
) -> None:
    """Print the URL a user visits to authorize the app.

    Example::

        snooauth authorize-url --client-id abc123 \\
            --redirect-uri https://example.com/authorized --state random_state
    """
    from snooauth.config import load_config

    try:
        config = load_config()
        builder = AuthorizationUrlBuilder(config.base_url)
        client_id = client_id or config.client_id
        if client_id is not None:
            builder.client_id(client_id)
        if redirect_uri is not None:
            builder.redirect_uri(redirect_uri)
        if state is not None:
            builder.state(state)
        url = (
            builder.scope(_parse_scopes(scope, config.scopes))
            .duration(duration)
            .response_type(response_type)
            .compact(compact)
            .build()
        )
    except CLI_ERRORS as exc:
        raise fail(exc) from None

    print_data(url)


def _new_builder() -> SessionBuilder:
    return SessionBuilder()


def _build_session(config: ClientConfig, strategy: AuthStrategy) -> Session:
    from snooauth.config import resolve_credential

    secret = None
    if config.client_secret_source:
        secret = resolve_credential(config.client_secret_source, "Client secret: ")
    return (
        _new_builder()
        .app_secrets(AppSecrets(client_id=config.client_id, client_secret=secret))
        .auth_flow(strategy)
        .user_agent(config.app_id, config.app_version, config.username)
        .base_url(config.base_url)
        .timeout(config.timeout)
        .build()
    )


async def _fetch_credential(session: Session) -> Credential:
    async with session:
        return await session.bearer_token()


def token_command(
    scope: Optional[list[str]] = typer.Option(
        None, "--scope", "-s", help="Requested scope; repeat for several."
    ),
    refresh_token: Optional[str] = typer.Option(
        None, "--refresh-token", help="Renew with this refresh token instead of a password."
    ),
) -> None:
    """Fetch a bearer token with the configured script-app credentials.

    The password is read from the configured ``password_source``. With
    ``--refresh-token`` no password is needed.

    Example::

        snooauth token
        snooauth --json token --scope identity --scope read
    """
    from snooauth.config import load_config, resolve_credential

    try:
        config = load_config()
        if not config.client_id:
            raise ConfigError("No client ID configured")
        if not config.username:
            raise ConfigError("No username configured")

        strategy: AuthStrategy
        if refresh_token:
            strategy = RefreshTokenStrategy(refresh_token=refresh_token)
        else:
            password = resolve_credential(
                config.password_source, f"Password for /u/{config.username}: "
            )
            strategy = PasswordStrategy(
                username=config.username,
                password=password,
                scope=_parse_scopes(scope, config.scopes),
            )

        session = _build_session(config, strategy)
        credential = asyncio.run(_fetch_credential(session))
    except ConfigError as exc:
        error(str(exc))
        suggest("Run 'snooauth config show' to inspect the client settings.")
        raise typer.Exit(code=exc.exit_code) from None
    except CLI_ERRORS as exc:
        raise fail(exc) from None

    result = {
        "access_token": credential.access_token,
        "token_type": "bearer",
        "expires_in": credential.ttl_seconds,
        "scope": str(credential.scope),
    }
    if credential.refresh_token is not None:
        result["refresh_token"] = credential.refresh_token
    format_response(result)
