"""Client assembly.

:class:`SessionBuilder` collects the settings a client needs, validates them
and produces a :class:`Session`, which owns the HTTP transport and the
:class:`~snooauth.auth.authenticator.Authenticator` for its lifetime.

Example::

    session = (
        SessionBuilder()
        .app_secrets(AppSecrets(client_id="abc123", client_secret="xyz890"))
        .auth_flow(PasswordStrategy(username="example_bot", password="hunter2"))
        .user_agent("example-bot", "1.0.0", "example_bot")
        .build()
    )
    async with session:
        credential = await session.bearer_token()
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from snooauth.auth.acquisition import Acquisition
from snooauth.auth.authenticator import Authenticator
from snooauth.auth.authorization import AuthorizationUrlBuilder
from snooauth.auth.strategies import AuthStrategy
from snooauth.client.http import DEFAULT_BASE_URL, HttpClient, format_user_agent
from snooauth.exceptions import (
    MissingAppSecretsError,
    MissingAuthFlowError,
    MissingUserAgentError,
)
from snooauth.models import AppSecrets, Credential

logger = logging.getLogger(__name__)


class Session:
    """A ready-to-use client: transport plus credential cache.

    Build one with :class:`SessionBuilder`; the constructor is not meant to
    be called directly.
    """

    def __init__(self, authenticator: Authenticator, http_client: HttpClient) -> None:
        self._authenticator = authenticator
        self._http_client = http_client

    @property
    def authenticator(self) -> Authenticator:
        return self._authenticator

    @property
    def user_agent(self) -> str:
        return self._http_client.user_agent

    def bearer_token(self, renew: bool = False) -> Acquisition:
        """Return a handle to a usable credential.

        See :meth:`~snooauth.auth.authenticator.Authenticator.obtain`.
        """
        return self._authenticator.obtain(renew)

    def authorization_url_builder(self) -> AuthorizationUrlBuilder:
        """Return an authorization URL builder pre-filled with this session's client ID."""
        builder = AuthorizationUrlBuilder(str(self._http_client.base_url))
        return builder.client_id(self._authenticator.app_secrets.client_id)

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def __aenter__(self) -> Session:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()


class SessionBuilder:
    """Collects client settings and builds a :class:`Session`.

    Required: app secrets, a user agent, and at least one of an auth flow or
    a previously obtained credential.
    """

    def __init__(self) -> None:
        self._app_secrets: Optional[AppSecrets] = None
        self._auth_flow: Optional[AuthStrategy] = None
        self._credential: Optional[Credential] = None
        self._user_agent: Optional[str] = None
        self._base_url = DEFAULT_BASE_URL
        self._timeout = 30.0
        self._transport: Optional[httpx.AsyncBaseTransport] = None

    def app_secrets(self, app_secrets: AppSecrets) -> SessionBuilder:
        self._app_secrets = app_secrets
        return self

    def auth_flow(self, auth_flow: AuthStrategy) -> SessionBuilder:
        self._auth_flow = auth_flow
        return self

    def credential(self, credential: Credential) -> SessionBuilder:
        """Bootstrap the session with a credential obtained earlier."""
        self._credential = credential
        return self

    def user_agent(self, app_id: str, app_version: str, username: str) -> SessionBuilder:
        self._user_agent = format_user_agent(app_id, app_version, username)
        return self

    def base_url(self, base_url: str) -> SessionBuilder:
        self._base_url = base_url
        return self

    def timeout(self, timeout: float) -> SessionBuilder:
        self._timeout = timeout
        return self

    def transport(self, transport: httpx.AsyncBaseTransport) -> SessionBuilder:
        """Use a custom transport (tests pass an :class:`httpx.MockTransport`)."""
        self._transport = transport
        return self

    def build(self) -> Session:
        """Validate the settings and build the session.

        When an auth flow is given without a credential, the first token
        exchange starts immediately if an event loop is running, otherwise
        on the first await.

        Raises:
            MissingAppSecretsError: If no app secrets were given.
            MissingUserAgentError: If no user agent was given.
            MissingAuthFlowError: If neither an auth flow nor a credential
                was given.
            TransportInitError: If the HTTP transport cannot be created.
        """
        if self._app_secrets is None:
            raise MissingAppSecretsError()
        if self._user_agent is None:
            raise MissingUserAgentError()
        if self._auth_flow is None and self._credential is None:
            raise MissingAuthFlowError()

        http_client = HttpClient(
            self._user_agent,
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        authenticator = Authenticator(
            self._app_secrets,
            http_client,
            strategy=self._auth_flow,
            credential=self._credential,
        )
        logger.debug("Built session for client %s", self._app_secrets.client_id)
        return Session(authenticator, http_client)
