from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from credhelper.errors import ConfigurationError
from credhelper.settings import CONFIG_DIR_ENV, get_settings


def test_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path))
    settings = get_settings()
    assert settings.mfa_path == tmp_path / "mfa" / "secrets.json"
    assert settings.password_path == tmp_path / "pass" / "passwords.json"
    assert settings.pin_path == tmp_path / "mpin" / "pins.json"


def test_explicit_root_wins(tmp_path: Path) -> None:
    assert get_settings(tmp_path / "other").config_root == tmp_path / "other"


def test_defaults_to_home_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_DIR_ENV, raising=False)
    with patch("credhelper.settings.Path.home", return_value=tmp_path):
        assert get_settings().config_root == tmp_path / ".config"


def test_missing_home_is_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_DIR_ENV, raising=False)
    with patch("credhelper.settings.Path.home", side_effect=RuntimeError("no home")):
        with pytest.raises(ConfigurationError):
            get_settings()
