"""Config commands -- view and modify the client settings.

Provides the ``snooauth config`` group. Settings live in ``config.json`` in
the snooauth config directory; secrets are referenced by source descriptor
(``env:VAR``, ``file:/path`` or ``prompt``), never stored.
"""

from __future__ import annotations

import typer

from snooauth.commands import fail
from snooauth.exceptions import ConfigError
from snooauth.output import error, format_response, info, success, warning

config_app = typer.Typer(no_args_is_help=True)

_SOURCE_KEYS = ("client_secret_source", "password_source")


def _is_source_descriptor(value: str) -> bool:
    return value == "prompt" or value.startswith(("env:", "file:"))


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration (environment overrides applied).

    Example::

        snooauth config show
        snooauth --json config show
    """
    from snooauth.config import config_path, load_config

    try:
        config = load_config()
    except ConfigError as exc:
        raise fail(exc) from None
    info(f"Config file: {config_path()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key, e.g. 'client_id'."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    ``scopes`` takes a space-separated list. Other values are validated
    against :class:`~snooauth.models.ClientConfig` before saving.

    Example::

        snooauth config set client_id abc123
        snooauth config set scopes "identity read"
        snooauth config set timeout 10
    """
    from snooauth.config import load_config, save_config
    from snooauth.models import ClientConfig

    try:
        config = load_config(apply_env=False)
    except ConfigError as exc:
        raise fail(exc) from None

    data = config.model_dump(mode="json")
    if key not in data:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    data[key] = value.split() if key == "scopes" else value
    try:
        new_config = ClientConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_config(new_config)
    if key in _SOURCE_KEYS and not _is_source_descriptor(value):
        # possibly a secret pasted in place of its source; never echo it
        warning(
            f"{key} should be env:VAR, file:/path or prompt; "
            "the saved value will be rejected when the secret is resolved"
        )
        success(f"Set {key}")
        return
    success(f"Set {key} = {value}")
