"""Credential-renewal coordinator.

The :class:`Authenticator` is the single entry point consumers use to get a
usable bearer credential. It owns the application secrets, the stored
authentication strategy and the current
:class:`~snooauth.auth.acquisition.Acquisition`, and decides on every call
whether the cached handle can be reused or a new token exchange must start.

Renewal policy, evaluated in order under one lock:

1. The cached credential is expired and has a refresh token: start a
   ``refresh_token`` exchange. The stored strategy is left untouched.
2. A strategy is stored and either the cached credential is expired (without
   a refresh token) or the caller forces renewal: take the strategy, start an
   exchange with it, and put it back only if it is reusable (passwords).
3. Anything else: hand out the cached handle unchanged.

A cached *failure* matches neither rule 1 nor rule 2 on its own; callers
recover from it by forcing renewal. When no strategy is left (a code or
refresh-token grant was consumed) forcing has no effect.

The lock only covers the decision and the swap of the handle, never the
network exchange itself.

See Also:
    :class:`~snooauth.session.SessionBuilder` which constructs the
    authenticator from user-supplied settings.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from snooauth.auth.acquisition import Acquisition
from snooauth.auth.strategies import AuthStrategy, RefreshTokenStrategy
from snooauth.client.exchange import TokenExchange
from snooauth.client.http import HttpClient
from snooauth.exceptions import MissingAuthFlowError
from snooauth.models import AppSecrets, Credential

logger = logging.getLogger(__name__)


@dataclass
class _RenewalState:
    """The mutable pair guarded by :attr:`Authenticator._lock`."""

    strategy: Optional[AuthStrategy]
    handle: Acquisition


def _retain(strategy: Optional[AuthStrategy]) -> Optional[AuthStrategy]:
    """Return *strategy* if it may be reused after an exchange, else ``None``."""
    if strategy is not None and not strategy.is_single_use():
        return strategy
    return None


class Authenticator:
    """Caches a bearer credential and renews it according to the renewal policy.

    Args:
        app_secrets: Secrets used to sign every token request.
        http_client: Transport shared with the rest of the session.
        strategy: How to obtain the first credential (and, for passwords,
            every later one).
        credential: A credential obtained earlier. When given, no exchange
            happens at construction and a non-reusable *strategy* is dropped.

    Raises:
        MissingAuthFlowError: If neither *strategy* nor *credential* is given.

    Example::

        authenticator = Authenticator(
            AppSecrets(client_id="abc123", client_secret="xyz890"),
            http_client,
            strategy=PasswordStrategy(username="bot", password="hunter2"),
        )
        credential = await authenticator.obtain()
    """

    def __init__(
        self,
        app_secrets: AppSecrets,
        http_client: HttpClient,
        strategy: Optional[AuthStrategy] = None,
        credential: Optional[Credential] = None,
    ) -> None:
        self._app_secrets = app_secrets
        self._http_client = http_client
        self._lock = threading.Lock()

        if credential is not None:
            handle = Acquisition.resolved(credential)
        elif strategy is not None:
            handle = self._acquire(strategy)
        else:
            raise MissingAuthFlowError()

        self._state = _RenewalState(strategy=_retain(strategy), handle=handle)

    @property
    def app_secrets(self) -> AppSecrets:
        return self._app_secrets

    def has_strategy(self) -> bool:
        """Return ``True`` if a strategy is stored for future re-authentication."""
        with self._lock:
            return self._state.strategy is not None

    def obtain(self, force_renew: bool = False) -> Acquisition:
        """Return a handle to a usable credential, renewing it if needed.

        Calling this never blocks on I/O; await the returned handle to get
        the :class:`~snooauth.models.Credential`.

        Args:
            force_renew: Re-authenticate with the stored strategy even if
                the cached credential is still valid or the last attempt
                failed.

        Returns:
            The current :class:`~snooauth.auth.acquisition.Acquisition`,
            possibly a new one.
        """
        with self._lock:
            return self._renew(self._state, force_renew)

    def _renew(self, state: _RenewalState, force_renew: bool) -> Acquisition:
        credential = state.handle.peek()
        expired = credential is not None and credential.is_expired()

        if expired and credential.is_renewable():
            logger.debug("Credential expired, refreshing with refresh token")
            refresh = RefreshTokenStrategy(refresh_token=credential.refresh_token)
            state.handle = self._acquire(refresh)
        elif state.strategy is not None and (expired or force_renew):
            strategy, state.strategy = state.strategy, None
            logger.debug(
                "Re-authenticating (grant_type=%s, expired=%s, forced=%s)",
                strategy.grant_type,
                expired,
                force_renew,
            )
            state.handle = self._acquire(strategy)
            state.strategy = _retain(strategy)
        elif force_renew:
            logger.debug("Renewal requested but no strategy is stored; reusing cached handle")

        return state.handle

    def _acquire(self, strategy: AuthStrategy) -> Acquisition:
        exchange = TokenExchange(self._http_client, strategy, self._app_secrets)
        handle = Acquisition.pending(exchange)
        handle.start()
        return handle
