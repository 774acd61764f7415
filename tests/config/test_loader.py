"""Tests for the configuration loader module."""

# pylint: disable=protected-access,missing-function-docstring,line-too-long
# Reason: Tests exercise internals and rely on pytest fixtures.

from pathlib import Path
from typing import Any

import pytest
from box import Box

from smtpkit.config import (
    CONFIG_FILENAME,
    clear_config,
    get_config,
    load_config,
    load_from_file,
    require_config,
)
from smtpkit.config.exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigFormatError,
    ConfigNotLoadedError,
    SmtpkitError,
)


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestDefaults:
    """Packaged defaults."""

    def test_defaults_without_user_files(self) -> None:
        config = load_config()
        assert isinstance(config, Box)
        assert config.mail.smtp.host == "localhost"
        assert config.mail.smtp.port == 25
        assert config.mail.smtp.use_tls is False
        assert config.mail.smtp.timeout is None
        assert config.logging.preset == "dev"

    def test_load_default_config_helper(self, cfg_loader: Any) -> None:
        data = cfg_loader._load_default_config()
        assert isinstance(data, dict)
        assert data["mail"]["subject"] == ""


class TestCascade:
    """Layering of user files over the defaults."""

    def test_cwd_file_overrides_defaults(self, isolated_environment: Path) -> None:
        _write(isolated_environment / CONFIG_FILENAME, "mail:\n  smtp:\n    host: mail.example.com\n")

        config = load_config()

        assert config.mail.smtp.host == "mail.example.com"
        assert config.mail.smtp.port == 25

    def test_cwd_wins_over_home(self, isolated_environment: Path, home_dir: Path) -> None:
        _write(home_dir / CONFIG_FILENAME, "mail:\n  smtp:\n    host: home.example.com\n    port: 2525\n")
        _write(isolated_environment / CONFIG_FILENAME, "mail:\n  smtp:\n    host: cwd.example.com\n")

        config = load_config()

        assert config.mail.smtp.host == "cwd.example.com"
        assert config.mail.smtp.port == 2525

    def test_home_wins_over_xdg(self, home_dir: Path) -> None:
        _write(home_dir / ".config" / "smtpkit" / CONFIG_FILENAME, "mail:\n  subject: xdg\n  smtp:\n    use_tls: true\n")
        _write(home_dir / CONFIG_FILENAME, "mail:\n  subject: home\n")

        config = load_config()

        assert config.mail.subject == "home"
        assert config.mail.smtp.use_tls is True

    def test_empty_user_file_is_accepted(self, isolated_environment: Path) -> None:
        _write(isolated_environment / CONFIG_FILENAME, "")
        assert load_config().mail.smtp.host == "localhost"

    def test_invalid_user_file_raises(self, isolated_environment: Path) -> None:
        _write(isolated_environment / CONFIG_FILENAME, "mail: [unclosed\n")
        with pytest.raises(ConfigFormatError):
            load_config()

    def test_custom_filename(self, isolated_environment: Path) -> None:
        _write(isolated_environment / "custom.yml", "mail:\n  smtp:\n    port: 465\n")
        assert load_config(filename="custom.yml").mail.smtp.port == 465


class TestLoadFromFile:
    """Explicit single-file loading."""

    def test_merges_over_defaults(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "site.yml", "mail:\n  smtp:\n    port: 587\n")

        config = load_from_file(path)

        assert config.mail.smtp.port == 587
        assert config.mail.smtp.host == "localhost"

    def test_becomes_cached_config(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "site.yml", "mail:\n  subject: cached\n")
        load_from_file(str(path))
        assert get_config().mail.subject == "cached"

    def test_missing_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.yml"
        with pytest.raises(ConfigFileNotFoundError) as exc_info:
            load_from_file(missing)
        assert exc_info.value.path == str(missing)
        assert isinstance(exc_info.value, FileNotFoundError)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "broken.yml", "key: [unclosed\n")
        with pytest.raises(ConfigFormatError, match="Invalid YAML"):
            load_from_file(path)

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "list.yml", "- a\n- b\n")
        with pytest.raises(ConfigFormatError, match="must be a mapping"):
            load_from_file(path)


class TestCache:
    """Cache helpers."""

    def test_get_config_loads_lazily(self) -> None:
        config = get_config()
        assert config is get_config()

    def test_require_config_before_load(self) -> None:
        with pytest.raises(ConfigNotLoadedError):
            require_config()

    def test_require_config_after_load(self) -> None:
        config = load_config()
        assert require_config() is config

    def test_clear_config(self) -> None:
        load_config()
        clear_config()
        with pytest.raises(ConfigNotLoadedError):
            require_config()


def test_exception_hierarchy() -> None:
    assert issubclass(ConfigError, SmtpkitError)
    assert issubclass(ConfigFormatError, ValueError)
    assert issubclass(ConfigNotLoadedError, ConfigError)
