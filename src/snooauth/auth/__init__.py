"""Authentication for snooauth.

This package turns application secrets plus an authentication strategy into a
cached, automatically renewed bearer credential.

The main entry points are:

- :class:`Authenticator` -- the renewal coordinator consumers call to get a
  usable credential.
- :class:`Acquisition` -- an awaitable handle to a credential that may still
  be in flight, shared by every caller.
- :class:`CodeStrategy`, :class:`PasswordStrategy`,
  :class:`RefreshTokenStrategy` -- the supported grants.
- :class:`AuthorizationUrlBuilder` -- builds the page a user visits to
  authorize the app for the code grant.

Typical usage::

    from snooauth.auth import Authenticator, PasswordStrategy

    authenticator = Authenticator(secrets, http_client, strategy=PasswordStrategy(...))
    credential = await authenticator.obtain()
"""

from snooauth.auth.acquisition import Acquisition
from snooauth.auth.authenticator import Authenticator
from snooauth.auth.authorization import (
    AuthorizationDuration,
    AuthorizationResponseType,
    AuthorizationUrlBuilder,
)
from snooauth.auth.strategies import (
    AuthStrategy,
    CodeStrategy,
    PasswordStrategy,
    RefreshTokenStrategy,
)

__all__ = [
    "Acquisition",
    "AuthStrategy",
    "Authenticator",
    "AuthorizationDuration",
    "AuthorizationResponseType",
    "AuthorizationUrlBuilder",
    "CodeStrategy",
    "PasswordStrategy",
    "RefreshTokenStrategy",
]
