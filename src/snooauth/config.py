"""Configuration management with XDG paths, atomic writes, and env overrides.

This module handles the persistent settings of the ``snooauth`` CLI:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.snooauth/`` on macOS and Windows. See :func:`get_config_dir`.
* **Client config** -- a single :class:`~snooauth.models.ClientConfig` JSON
  file. Managed via :func:`load_config` and :func:`save_config`.
* **Precedence resolution** -- environment variables
  (``SNOOAUTH_CLIENT_ID``, ``SNOOAUTH_USERNAME``, ``SNOOAUTH_BASE_URL``)
  override the file; CLI flags override both.
* **Credential resolution** -- :func:`resolve_credential` reads secrets from
  env vars, files, or interactive prompts so they never have to be stored in
  the config file itself.

Credentials obtained from the token endpoint are never written to disk.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from snooauth.exceptions import ConfigError
from snooauth.models import ClientConfig

_APP_NAME = "snooauth"
_CONFIG_FILENAME = "config.json"

_ENV_OVERRIDES = {
    "SNOOAUTH_CLIENT_ID": "client_id",
    "SNOOAUTH_USERNAME": "username",
    "SNOOAUTH_BASE_URL": "base_url",
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform uses the XDG Base Directory layout (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/snooauth/`` (default ``~/.config/snooauth/``).
    On macOS/Windows: ``~/.snooauth/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_path() -> Path:
    """Path to the client config file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. The file is
    created with ``0o600`` permissions since it names secret sources.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        os.chmod(tmp_path, 0o600)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Client config ---


def load_config(path: Optional[Path] = None, apply_env: bool = True) -> ClientConfig:
    """Load the client configuration and apply environment overrides.

    Args:
        path: Explicit config file. Defaults to :func:`config_path`.
        apply_env: Apply ``SNOOAUTH_*`` overrides. Disabled when the
            result is going to be written back to disk.

    Returns:
        The effective :class:`~snooauth.models.ClientConfig`. A default
        instance (plus env overrides) is returned when the file is absent.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = path or config_path()
    data: dict[str, object] = {}
    if path.is_file():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError) as exc:
            raise ConfigError(f"Invalid config at {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid config at {path}: expected a JSON object")

    if apply_env:
        for env_var, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value:
                data[field_name] = value

    try:
        return ClientConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: ClientConfig, path: Optional[Path] = None) -> Path:
    """Persist the client configuration atomically.

    Args:
        config: The configuration to save.
        path: Explicit destination. Defaults to :func:`config_path`.

    Returns:
        The path written to.
    """
    path = path or config_path()
    data = config.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


# --- Credential source resolution ---


def resolve_credential(source: str, prompt: str = "Enter credential: ") -> str:
    """Resolve a secret from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)

    Args:
        source: The source descriptor string.
        prompt: Text shown for the ``prompt`` source.

    Returns:
        The resolved secret.

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass(prompt)

    raise ConfigError(f"Unknown credential source format: {source}")
