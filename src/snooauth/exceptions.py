"""Exception hierarchy for snooauth.

Every exception carries an ``exit_code`` attribute mapped to a constant from
:mod:`snooauth.exit_codes`. The CLI entry point in :mod:`snooauth.app`
catches these and exits with the appropriate code.

There are three independent families:

* :class:`SnooError` -- raised while obtaining a credential. These are the
  terminal values of an :class:`~snooauth.auth.acquisition.Acquisition` and
  are delivered identically to every awaiter.
* :class:`BuilderError` -- raised while assembling a
  :class:`~snooauth.session.Session`. No partially-built session exists
  after one of these.
* :class:`AuthorizationUrlError` -- raised by
  :class:`~snooauth.auth.authorization.AuthorizationUrlBuilder` when a
  required query parameter is missing.

Subclass hierarchy::

    SnooError (exit 1)
    +-- BadCredentialsError         (exit 3)
    +-- InvalidRequestError         (exit 2)
    +-- InvalidResponseError        (exit 5)
    +-- UnsuccessfulResponseError   (exit 5)
    |   +-- UnauthorizedError       (exit 3)
    |   +-- ForbiddenError          (exit 3)
    +-- NetworkError                (exit 6)
    BuilderError (exit 2)
    +-- MissingAuthFlowError
    +-- MissingAppSecretsError
    +-- MissingUserAgentError
    +-- TransportInitError
    AuthorizationUrlError (exit 2)
    +-- MissingClientIdError
    +-- MissingRedirectUriError
    +-- MissingStateError
    ConfigError (exit 1)
"""

from __future__ import annotations

import enum

from snooauth.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_BAD_RESPONSE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class ErrorKind(str, enum.Enum):
    """Category of a credential-acquisition failure."""

    BAD_CREDENTIALS = "bad credentials"
    INVALID_REQUEST = "bad request"
    INVALID_RESPONSE = "bad response"
    UNSUCCESSFUL_RESPONSE = "unsuccessful response"
    FORBIDDEN = "forbidden"
    UNAUTHORIZED = "unauthorized"
    NETWORK_ERROR = "network error"
    UNEXPECTED = "unexpected error"


class SnooError(Exception):
    """Base exception for failures while obtaining a credential.

    Args:
        message: Human-readable error description. Defaults to the
            class-level :attr:`kind` value.
        exit_code: Optional override for the class-level exit code.
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED
    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str | None = None, exit_code: int | None = None):
        super().__init__(message or self.kind.value)
        if exit_code is not None:
            self.exit_code = exit_code


class BadCredentialsError(SnooError):
    """Raised when the token endpoint rejects the grant (``invalid_grant``)."""

    kind = ErrorKind.BAD_CREDENTIALS
    exit_code = EXIT_AUTH_FAILURE


class InvalidRequestError(SnooError):
    """Raised when the token request could not be built or serialised."""

    kind = ErrorKind.INVALID_REQUEST
    exit_code = EXIT_INVALID_USAGE


class InvalidResponseError(SnooError):
    """Raised when a response body is not a valid credential (bad JSON, unknown scope)."""

    kind = ErrorKind.INVALID_RESPONSE
    exit_code = EXIT_BAD_RESPONSE


class UnsuccessfulResponseError(SnooError):
    """Raised when the token endpoint answers with a non-2xx status.

    Args:
        status_code: The HTTP status code returned by the server.
    """

    kind = ErrorKind.UNSUCCESSFUL_RESPONSE
    exit_code = EXIT_BAD_RESPONSE

    def __init__(self, status_code: int, message: str | None = None):
        super().__init__(message or f"unsuccessful response: {status_code}")
        self.status_code = status_code


class UnauthorizedError(UnsuccessfulResponseError):
    """HTTP 401 from the token endpoint (usually a wrong client id or secret)."""

    kind = ErrorKind.UNAUTHORIZED
    exit_code = EXIT_AUTH_FAILURE

    def __init__(self, message: str | None = None):
        super().__init__(401, message or "unauthorized")


class ForbiddenError(UnsuccessfulResponseError):
    """HTTP 403 from the token endpoint."""

    kind = ErrorKind.FORBIDDEN
    exit_code = EXIT_AUTH_FAILURE

    def __init__(self, message: str | None = None):
        super().__init__(403, message or "forbidden")


class NetworkError(SnooError):
    """Raised on transport failures (timeout, DNS resolution, connection refused)."""

    kind = ErrorKind.NETWORK_ERROR
    exit_code = EXIT_CONNECTION_ERROR


def error_for_status(status_code: int) -> UnsuccessfulResponseError:
    """Return the exception matching a non-2xx token endpoint status."""
    if status_code == 401:
        return UnauthorizedError()
    if status_code == 403:
        return ForbiddenError()
    return UnsuccessfulResponseError(status_code)


# --- Construction errors ---


class BuilderError(Exception):
    """Base exception for errors raised while assembling a client."""

    exit_code: int = EXIT_INVALID_USAGE


class MissingAuthFlowError(BuilderError):
    """Neither an auth strategy nor a pre-supplied credential was given."""

    def __init__(self, message: str = "missing authentication flow"):
        super().__init__(message)


class MissingAppSecretsError(BuilderError):
    """No application secrets were given."""

    def __init__(self, message: str = "missing app secrets"):
        super().__init__(message)


class MissingUserAgentError(BuilderError):
    """No user agent was given."""

    def __init__(self, message: str = "missing user agent"):
        super().__init__(message)


class TransportInitError(BuilderError):
    """The HTTP transport could not be created."""

    exit_code = EXIT_GENERIC_FAILURE


# --- Authorization URL errors ---


class AuthorizationUrlError(Exception):
    """Base exception for an incomplete authorization URL."""

    exit_code: int = EXIT_INVALID_USAGE


class MissingClientIdError(AuthorizationUrlError):
    def __init__(self) -> None:
        super().__init__("missing client ID")


class MissingRedirectUriError(AuthorizationUrlError):
    def __init__(self) -> None:
        super().__init__("missing redirect URI")


class MissingStateError(AuthorizationUrlError):
    def __init__(self) -> None:
        super().__init__("missing state")


class ConfigError(Exception):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code: int = EXIT_GENERIC_FAILURE
