"""Tests for snooauth.config -- XDG paths, atomic writes, env overrides, credential sources."""

from __future__ import annotations

import json
import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from snooauth.config import (
    _atomic_write,
    config_path,
    get_config_dir,
    load_config,
    resolve_credential,
    save_config,
)
from snooauth.exceptions import ConfigError
from snooauth.models import ClientConfig


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestConfigDir:
    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("snooauth.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "snooauth"
        assert result.is_dir()

    def test_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("snooauth.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "snooauth"

    def test_non_xdg_platform(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("snooauth.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".snooauth"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_with_private_permissions(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "config.json"
        _atomic_write(target, "{}")

        assert target.read_text() == "{}"
        assert stat.S_IMODE(os.stat(target).st_mode) == 0o600

    def test_no_temp_file_left_on_failure(self, tmp_path: Path) -> None:
        target = tmp_path / "config.json"
        with patch("snooauth.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                _atomic_write(target, "{}")

        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Client config
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        assert load_config() == ClientConfig()

    def test_reads_file(self, isolated_config: Path) -> None:
        isolated_config.mkdir(parents=True, exist_ok=True)
        (isolated_config / "config.json").write_text(
            json.dumps({"client_id": "abc123", "username": "example_bot", "timeout": 5})
        )

        config = load_config()
        assert config.client_id == "abc123"
        assert config.username == "example_bot"
        assert config.timeout == 5.0

    def test_env_overrides_file(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        isolated_config.mkdir(parents=True, exist_ok=True)
        (isolated_config / "config.json").write_text(json.dumps({"client_id": "from-file"}))
        monkeypatch.setenv("SNOOAUTH_CLIENT_ID", "from-env")
        monkeypatch.setenv("SNOOAUTH_BASE_URL", "https://oauth.example.com")

        config = load_config()
        assert config.client_id == "from-env"
        assert config.base_url == "https://oauth.example.com"
        assert load_config(apply_env=False).client_id == "from-file"

    def test_invalid_json(self, isolated_config: Path) -> None:
        isolated_config.mkdir(parents=True, exist_ok=True)
        (isolated_config / "config.json").write_text("{not json")

        with pytest.raises(ConfigError, match="Invalid config"):
            load_config()

    def test_not_an_object(self, isolated_config: Path) -> None:
        isolated_config.mkdir(parents=True, exist_ok=True)
        (isolated_config / "config.json").write_text("[1, 2]")

        with pytest.raises(ConfigError):
            load_config()

    def test_invalid_field(self, isolated_config: Path) -> None:
        isolated_config.mkdir(parents=True, exist_ok=True)
        (isolated_config / "config.json").write_text(json.dumps({"timeout": "soon"}))

        with pytest.raises(ConfigError):
            load_config()


class TestSaveConfig:
    def test_round_trip(self, isolated_config: Path) -> None:
        config = ClientConfig(client_id="abc123", scopes=["identity", "read"])
        path = save_config(config)

        assert path == config_path()
        assert load_config() == config


# ---------------------------------------------------------------------------
# Credential sources
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDDIT_PASSWORD", "hunter2")
        assert resolve_credential("env:REDDIT_PASSWORD") == "hunter2"

    def test_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("REDDIT_PASSWORD", raising=False)
        with pytest.raises(ConfigError, match="REDDIT_PASSWORD"):
            resolve_credential("env:REDDIT_PASSWORD")

    def test_file(self, tmp_path: Path) -> None:
        secret = tmp_path / "secret"
        secret.write_text("  xyz890\n")
        assert resolve_credential(f"file:{secret}") == "xyz890"

    def test_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'absent'}")

    def test_prompt(self) -> None:
        with patch("snooauth.config.sys.stdin") as stdin, patch(
            "snooauth.config.getpass.getpass", return_value="typed"
        ) as getpass:
            stdin.isatty.return_value = True
            assert resolve_credential("prompt", "Password: ") == "typed"
        getpass.assert_called_once_with("Password: ")

    def test_prompt_without_tty(self) -> None:
        with patch("snooauth.config.sys.stdin") as stdin:
            stdin.isatty.return_value = False
            with pytest.raises(ConfigError, match="not a TTY"):
                resolve_credential("prompt")

    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("vault:secret/reddit")
