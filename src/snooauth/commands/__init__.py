"""Built-in CLI sub-commands for snooauth.

* :mod:`~snooauth.commands.auth` -- ``authorize-url`` and ``token``,
  registered directly on the root app.
* :mod:`~snooauth.commands.config` -- the ``config`` group for viewing and
  editing the client settings.
"""

from __future__ import annotations

import typer

from snooauth.exceptions import AuthorizationUrlError, BuilderError, ConfigError, SnooError
from snooauth.output import error

CLI_ERRORS = (SnooError, BuilderError, AuthorizationUrlError, ConfigError)
"""Library errors that end a command with their own exit code instead of a crash."""


def fail(exc: Exception) -> typer.Exit:
    """Report *exc* on stderr and return the :class:`typer.Exit` to raise."""
    error(str(exc))
    return typer.Exit(code=getattr(exc, "exit_code", 1))
