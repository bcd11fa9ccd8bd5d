"""Canonical Pydantic models shared across all snooauth modules.

The models fall into three groups:

**Permission types** -- :class:`Scope` and :class:`ScopeSet`, the named
grants requested during authorization and attached to every credential.

**Credential types** -- :class:`AppSecrets` (signs token requests),
:class:`Credential` (the bearer token handed to consumers) and
:class:`TokenResponse` (the wire shape returned by the token endpoint).

**Configuration models** -- :class:`ClientConfig`, serialised as JSON in the
user's config directory and consumed by the CLI.

Credentials and app secrets are frozen; once built they can be shared across
tasks and threads without synchronisation.
"""

from __future__ import annotations

import enum
import time
from collections.abc import Iterable, Iterator
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


# --- Scopes ---


class Scope(str, enum.Enum):
    """An OAuth scope granting access to part of a user account.

    ``ALL`` (serialised as ``*``) requests full access and is equivalent to
    every other scope combined. Scopes only add access, they never remove it.
    """

    ALL = "*"
    ACCOUNT = "account"
    CREDDITS = "creddits"
    EDIT = "edit"
    FLAIR = "flair"
    HISTORY = "history"
    IDENTITY = "identity"
    LIVE_MANAGE = "livemanage"
    MOD_CONFIG = "modconfig"
    MOD_CONTRIBUTORS = "modcontributors"
    MOD_FLAIR = "modflair"
    MOD_LOG = "modlog"
    MOD_MAIL = "modmail"
    MOD_OTHERS = "modothers"
    MOD_POSTS = "modposts"
    MOD_SELF = "modself"
    MOD_TRAFFIC = "modtraffic"
    MOD_WIKI = "modwiki"
    MY_SUBREDDITS = "mysubreddits"
    PRIVATE_MESSAGES = "privatemessages"
    READ = "read"
    REPORT = "report"
    SAVE = "save"
    STRUCTURED_STYLES = "structuredstyles"
    SUBMIT = "submit"
    SUBSCRIBE = "subscribe"
    VOTE = "vote"
    WIKI_EDIT = "wikiedit"
    WIKI_READ = "wikiread"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> Scope:
        """Return the scope named *text*.

        Raises:
            ValueError: If *text* is not a known scope name.
        """
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"unknown scope {text}") from None


_SCOPE_ORDER = {scope: index for index, scope in enumerate(Scope)}


class ScopeSet:
    """A set of :class:`Scope` values.

    Inserting :attr:`Scope.ALL` clears the set first, so a set holding
    ``ALL`` never holds anything else; inserting any other scope into such a
    set is a no-op. ``str()`` gives the canonical wire
    form: members sorted, joined by single spaces.

    Models store a :meth:`frozen` snapshot: its mutators raise ``TypeError``
    and it is hashable, so credentials and strategies can be shared freely.

    Example::

        scopes = ScopeSet([Scope.IDENTITY, Scope.HISTORY, Scope.ACCOUNT])
        assert str(scopes) == "account history identity"
        assert ScopeSet.parse("account history identity") == scopes
    """

    __slots__ = ("_scopes", "_frozen")

    def __init__(self, scopes: Iterable[Scope] = ()) -> None:
        self._scopes: set[Scope] = set()
        self._frozen = False
        for scope in scopes:
            self.insert(scope)

    @classmethod
    def default(cls) -> ScopeSet:
        """Return the default set, containing only :attr:`Scope.IDENTITY`."""
        return cls([Scope.IDENTITY])

    @classmethod
    def parse(cls, text: str) -> ScopeSet:
        """Parse a space-separated scope string.

        Raises:
            ValueError: If any token is not a known scope name.
        """
        return cls(Scope.parse(token) for token in text.split())

    def insert(self, scope: Scope) -> bool:
        """Add *scope*, returning ``True`` if it was not already present."""
        self._check_mutable()
        if scope in self._scopes:
            return False
        if scope is Scope.ALL:
            self._scopes.clear()
        elif Scope.ALL in self._scopes:
            # ALL already covers every other scope
            return False
        self._scopes.add(scope)
        return True

    def remove(self, scope: Scope) -> bool:
        """Remove *scope*, returning ``True`` if it was present."""
        self._check_mutable()
        if scope in self._scopes:
            self._scopes.remove(scope)
            return True
        return False

    def take(self, scope: Scope) -> Optional[Scope]:
        """Remove *scope* and return it, or ``None`` if it was absent."""
        return scope if self.remove(scope) else None

    def clear(self) -> None:
        self._check_mutable()
        self._scopes.clear()

    def is_empty(self) -> bool:
        return not self._scopes

    def copy(self) -> ScopeSet:
        """Return a mutable copy."""
        return ScopeSet(self._scopes)

    def frozen(self) -> ScopeSet:
        """Return an immutable, hashable copy."""
        snapshot = ScopeSet(self._scopes)
        snapshot._frozen = True
        return snapshot

    def is_frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise TypeError("frozen ScopeSet cannot be modified")

    def __contains__(self, scope: object) -> bool:
        return scope in self._scopes

    def __iter__(self) -> Iterator[Scope]:
        return iter(sorted(self._scopes, key=_SCOPE_ORDER.__getitem__))

    def __len__(self) -> int:
        return len(self._scopes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScopeSet):
            return NotImplemented
        return self._scopes == other._scopes

    def __hash__(self) -> int:
        if not self._frozen:
            raise TypeError("unhashable type: mutable ScopeSet (use frozen())")
        return hash(frozenset(self._scopes))

    def __str__(self) -> str:
        return " ".join(scope.value for scope in self)

    def __repr__(self) -> str:
        return f"ScopeSet({str(self)!r})"


def coerce_scope_set(value: Any) -> ScopeSet:
    """Turn a wire string, an iterable of scopes/names, or a ScopeSet into a ScopeSet.

    A ScopeSet argument is copied, never returned as is. Model validators
    store the :meth:`ScopeSet.frozen` form of the result.
    """
    if isinstance(value, ScopeSet):
        return value.copy()
    if isinstance(value, str):
        return ScopeSet.parse(value)
    if isinstance(value, Iterable):
        return ScopeSet(
            item if isinstance(item, Scope) else Scope.parse(str(item)) for item in value
        )
    raise ValueError(f"cannot interpret {value!r} as a scope set")


# --- Credentials ---


class AppSecrets(BaseModel):
    """Application secrets issued by Reddit, used to sign token requests.

    ``client_secret`` is ``None`` for installed apps, which authenticate with
    an empty password.
    """

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: Optional[str] = None

    def __repr__(self) -> str:
        return f"AppSecrets(client_id={self.client_id!r})"


class TokenResponse(BaseModel):
    """Body of a successful token endpoint response."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    scope: ScopeSet
    refresh_token: Optional[str] = None

    @field_validator("scope", mode="before")
    @classmethod
    def _parse_scope(cls, value: Any) -> ScopeSet:
        return coerce_scope_set(value).frozen()


class Credential(BaseModel):
    """A bearer token used to authorize API requests.

    ``issued_at`` is a :func:`time.monotonic` reading taken when the object is
    built. It is never read from the token endpoint response.

    Attributes:
        access_token: The opaque bearer token.
        issued_at: Monotonic timestamp of creation.
        ttl_seconds: Validity duration in seconds.
        refresh_token: Present for permanent authorizations; used to renew
            the credential without user interaction.
        scope: Scopes granted to this credential.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    access_token: str
    # looked up at call time so tests can patch time.monotonic
    issued_at: float = Field(default_factory=lambda: time.monotonic())
    ttl_seconds: int
    refresh_token: Optional[str] = None
    scope: ScopeSet = Field(default_factory=lambda: ScopeSet().frozen())

    @field_validator("scope", mode="before")
    @classmethod
    def _parse_scope(cls, value: Any) -> ScopeSet:
        return coerce_scope_set(value).frozen()

    @field_serializer("scope")
    def _serialize_scope(self, scope: ScopeSet) -> str:
        return str(scope)

    @classmethod
    def from_token_response(cls, body: bytes | str) -> Credential:
        """Build a credential from a raw token endpoint body.

        Raises:
            ValueError: If the body is not valid JSON, lacks required
                fields, or names an unknown scope (pydantic's
                ``ValidationError`` is a ``ValueError``).
        """
        token = TokenResponse.model_validate_json(body)
        return cls(
            access_token=token.access_token,
            ttl_seconds=token.expires_in,
            refresh_token=token.refresh_token,
            scope=token.scope,
        )

    def is_expired(self) -> bool:
        return time.monotonic() - self.issued_at >= self.ttl_seconds

    def is_renewable(self) -> bool:
        return self.refresh_token is not None

    def matches_scope(self, scope: Scope) -> bool:
        """Return ``True`` if this credential grants *scope*."""
        return scope is Scope.ALL or scope in self.scope or Scope.ALL in self.scope

    def __repr__(self) -> str:
        return (
            f"Credential(ttl_seconds={self.ttl_seconds}, "
            f"renewable={self.is_renewable()}, scope={str(self.scope)!r})"
        )


# --- Configuration ---


class ClientConfig(BaseModel):
    """Persistent client settings read from ``config.json``.

    Secrets are not stored directly; ``client_secret_source`` and
    ``password_source`` hold credential source descriptors resolved by
    :func:`snooauth.config.resolve_credential` (``env:VAR``,
    ``file:/path`` or ``prompt``).

    Example::

        ClientConfig(
            client_id="abc123",
            client_secret_source="env:REDDIT_CLIENT_SECRET",
            username="example_bot",
            password_source="file:~/.reddit-password",
        )
    """

    client_id: Optional[str] = None
    client_secret_source: Optional[str] = None
    username: Optional[str] = None
    password_source: str = "prompt"
    app_id: str = "snooauth"
    app_version: str = "0.1.0"
    base_url: str = "https://www.reddit.com"
    timeout: float = Field(default=30.0, description="Token request timeout in seconds")
    scopes: list[str] = Field(default_factory=lambda: [Scope.IDENTITY.value])
