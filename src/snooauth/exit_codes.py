"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding exception class in :mod:`snooauth.exceptions`. Shell wrappers
can inspect the exit code of ``snooauth token`` to tell a rejected password
apart from a network outage without parsing stderr.

Example::

    $ snooauth token
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the token endpoint rejected the credentials
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an incomplete client setup."""

EXIT_AUTH_FAILURE = 3
"""Authentication or authorisation failed."""

EXIT_BAD_RESPONSE = 5
"""The token endpoint answered with an error status or an unreadable body."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
