"""Typer application and CLI entry point for snooauth.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It registers the built-in commands and invokes the Typer
app. Library errors end the process with their ``exit_code``; anything else
is reported as a generic failure.

See Also:
    :mod:`snooauth.config`: Client settings and credential sources.
    :mod:`snooauth.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any

import typer

from snooauth import __version__
from snooauth.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="snooauth",
    help="Obtain Reddit OAuth2 credentials from the command line.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

from snooauth.commands.auth import authorize_url_command, token_command  # noqa: E402
from snooauth.commands.config import config_app  # noqa: E402

app.command("authorize-url")(authorize_url_command)
app.command("token")(token_command)
app.add_typer(config_app, name="config", help="Client configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"snooauth {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~snooauth.output.OutputManager` and
    configures logging: ``DEBUG`` with ``--verbose``, ``WARNING`` otherwise.
    """
    from snooauth.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``snooauth`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from snooauth.commands import CLI_ERRORS
        from snooauth.output import error

        if isinstance(exc, CLI_ERRORS):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
