"""Authentication strategies -- the ways a credential can be obtained.

Three grant types are supported (application-only grants are not):

- :class:`CodeStrategy` -- exchange a one-time authorization code retrieved
  through the URL built by
  :class:`~snooauth.auth.authorization.AuthorizationUrlBuilder`.
- :class:`PasswordStrategy` -- exchange a user's username and password
  (script apps only).
- :class:`RefreshTokenStrategy` -- exchange the refresh token of a permanent
  credential.

Each strategy knows whether it may be used again after its first exchange.
Codes are consumed by the server and refresh-token strategies are derived on
the fly from the cached credential, so only passwords are kept for later
re-authentication.

See Also:
    :class:`~snooauth.auth.authenticator.Authenticator` for the renewal
    policy that consults :meth:`AuthStrategy.is_single_use`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from snooauth.models import ScopeSet, coerce_scope_set


FormFields = list[tuple[str, str]]


class AuthStrategy(BaseModel, ABC):
    """Base class for a token-endpoint grant.

    Subclasses set :attr:`grant_type` and implement :meth:`to_form` and
    :meth:`is_single_use`.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    grant_type: ClassVar[str]

    @abstractmethod
    def to_form(self) -> FormFields:
        """Return the ``application/x-www-form-urlencoded`` fields for this grant.

        The first field is always ``grant_type``.
        """
        ...

    @abstractmethod
    def is_single_use(self) -> bool:
        """Return ``True`` if the strategy must be discarded after one exchange."""
        ...


class _ScopedStrategy(AuthStrategy, ABC):
    scope: ScopeSet = Field(default_factory=lambda: ScopeSet.default().frozen())

    @field_validator("scope", mode="before")
    @classmethod
    def _parse_scope(cls, value: Any) -> ScopeSet:
        return coerce_scope_set(value).frozen()


class CodeStrategy(_ScopedStrategy):
    """Exchange an authorization code for a credential.

    Attributes:
        code: The ``code`` query parameter appended to the redirect URI.
        redirect_uri: The redirect URI registered for the application.
        scope: Scopes to request.
    """

    grant_type: ClassVar[str] = "authorization_code"

    code: str
    redirect_uri: str

    def to_form(self) -> FormFields:
        return [
            ("grant_type", self.grant_type),
            ("code", self.code),
            ("redirect_uri", self.redirect_uri),
            ("scope", str(self.scope)),
        ]

    def is_single_use(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"CodeStrategy(redirect_uri={self.redirect_uri!r}, scope={str(self.scope)!r})"


class PasswordStrategy(_ScopedStrategy):
    """Authenticate on behalf of a user with a username and password.

    Attributes:
        username: The Reddit username.
        password: The user's password.
        scope: Scopes to request.
    """

    grant_type: ClassVar[str] = "password"

    username: str
    password: str

    def to_form(self) -> FormFields:
        return [
            ("grant_type", self.grant_type),
            ("username", self.username),
            ("password", self.password),
            ("scope", str(self.scope)),
        ]

    def is_single_use(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"PasswordStrategy(username={self.username!r}, scope={str(self.scope)!r})"


class RefreshTokenStrategy(AuthStrategy):
    """Renew a credential using its refresh token."""

    grant_type: ClassVar[str] = "refresh_token"

    refresh_token: str

    def to_form(self) -> FormFields:
        return [
            ("grant_type", self.grant_type),
            ("refresh_token", self.refresh_token),
        ]

    def is_single_use(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "RefreshTokenStrategy()"

