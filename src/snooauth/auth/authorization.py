"""User authorization URLs.

The code grant (:class:`~snooauth.auth.strategies.CodeStrategy`) needs a
user to visit an authorization page and confirm access. Reddit then
redirects the user to the app's redirect URI with a ``code`` (or, for the
implicit grant, an ``access_token``) appended as query parameters.
:class:`AuthorizationUrlBuilder` builds the URL of that page.

Example::

    url = (
        AuthorizationUrlBuilder()
        .client_id("abc123")
        .redirect_uri("https://example.com/authorized")
        .state("random_state")
        .build()
    )
    # https://www.reddit.com/api/v1/authorize?client_id=abc123&duration=temporary
    #     &redirect_uri=https%3A%2F%2Fexample.com%2Fauthorized&response_type=code
    #     &scope=identity&state=random_state
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import Optional
from urllib.parse import urlencode

from snooauth.client.http import AUTHORIZE_COMPACT_PATH, AUTHORIZE_PATH, DEFAULT_BASE_URL
from snooauth.exceptions import MissingClientIdError, MissingRedirectUriError, MissingStateError
from snooauth.models import Scope, ScopeSet


class AuthorizationResponseType(str, enum.Enum):
    """What Reddit appends to the redirect URI after the user confirms.

    ``CODE`` yields a one-time code to exchange for a credential and works
    for every app type. ``TOKEN`` yields a credential directly and is only
    available to installed apps.
    """

    CODE = "code"
    TOKEN = "token"


class AuthorizationDuration(str, enum.Enum):
    """How long an authorization lasts.

    ``TEMPORARY`` credentials expire after an hour and carry no refresh
    token. ``PERMANENT`` credentials carry a refresh token so they can be
    renewed without asking the user again.
    """

    TEMPORARY = "temporary"
    PERMANENT = "permanent"


class AuthorizationUrlBuilder:
    """Fluent builder for authorization URLs.

    ``client_id``, ``redirect_uri`` and ``state`` are required. Defaults:
    ``duration=temporary``, ``response_type=code``, ``scope=identity`` and
    the regular (non-compact) page.

    Args:
        base_url: Scheme and host of the authorization page.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL) -> None:
        self._base_url = base_url.rstrip("/")
        self._client_id: Optional[str] = None
        self._compact = False
        self._duration = AuthorizationDuration.TEMPORARY
        self._redirect_uri: Optional[str] = None
        self._response_type = AuthorizationResponseType.CODE
        self._scope = ScopeSet.default()
        self._state: Optional[str] = None

    def client_id(self, client_id: str) -> AuthorizationUrlBuilder:
        """**Required.** Set the app's client ID."""
        self._client_id = client_id
        return self

    def compact(self, compact: bool) -> AuthorizationUrlBuilder:
        """Use the page variant for small screens."""
        self._compact = compact
        return self

    def duration(self, duration: AuthorizationDuration) -> AuthorizationUrlBuilder:
        """Set the authorization duration. Ignored for the ``token`` response type."""
        self._duration = AuthorizationDuration(duration)
        return self

    def redirect_uri(self, redirect_uri: str) -> AuthorizationUrlBuilder:
        """**Required.** Set the redirect URI; it must match the one registered for the app."""
        self._redirect_uri = redirect_uri
        return self

    def response_type(self, response_type: AuthorizationResponseType) -> AuthorizationUrlBuilder:
        self._response_type = AuthorizationResponseType(response_type)
        return self

    def scope(self, scopes: Iterable[Scope]) -> AuthorizationUrlBuilder:
        """Set the requested scopes. An empty iterable restores the default."""
        scope_set = ScopeSet(scopes)
        self._scope = ScopeSet.default() if scope_set.is_empty() else scope_set
        return self

    def state(self, state: str) -> AuthorizationUrlBuilder:
        """**Required.** Set the state echoed back on redirect.

        The state should be unique per request; verify it when the user is
        redirected back.
        """
        self._state = state
        return self

    def build(self) -> str:
        """Build the URL.

        Raises:
            MissingClientIdError: If no client ID was set.
            MissingRedirectUriError: If no redirect URI was set.
            MissingStateError: If no state was set.
        """
        if self._client_id is None:
            raise MissingClientIdError()
        if self._redirect_uri is None:
            raise MissingRedirectUriError()
        if self._state is None:
            raise MissingStateError()

        params: list[tuple[str, str]] = [("client_id", self._client_id)]
        if self._response_type is AuthorizationResponseType.CODE:
            params.append(("duration", self._duration.value))
        params.extend(
            [
                ("redirect_uri", self._redirect_uri),
                ("response_type", self._response_type.value),
                ("scope", str(self._scope)),
                ("state", self._state),
            ]
        )

        path = AUTHORIZE_COMPACT_PATH if self._compact else AUTHORIZE_PATH
        return f"{self._base_url}{path}?{urlencode(params)}"
