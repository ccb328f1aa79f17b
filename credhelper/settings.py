"""Configuration directory resolution for the credential stores.

Environment:
- CREDHELPER_CONFIG_DIR: optional override of the root configuration
  directory. Defaults to `~/.config`.

Each credential class keeps its own file below the root, in the locations
earlier releases of the tool used, so existing data is picked up:

- MFA secrets: `<root>/mfa/secrets.json`
- Passwords:   `<root>/pass/passwords.json`
- PINs:        `<root>/mpin/pins.json`
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

from .errors import ConfigurationError


CONFIG_DIR_ENV = "CREDHELPER_CONFIG_DIR"

MFA_FILE = Path("mfa") / "secrets.json"
PASSWORD_FILE = Path("pass") / "passwords.json"
PIN_FILE = Path("mpin") / "pins.json"


def _default_config_root() -> Path:
    """Return `~/.config`, honoring CREDHELPER_CONFIG_DIR when set.

    Raises:
        ConfigurationError: if the home directory cannot be determined.
    """

    override = os.environ.get(CONFIG_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    try:
        home = Path.home()
    except (KeyError, RuntimeError) as exc:
        raise ConfigurationError(f"failed to get home directory: {exc}") from exc
    return home / ".config"


class Settings(BaseModel):
    """Resolved locations of the three credential files."""

    config_root: Path = Field(..., description="Root configuration directory")

    @property
    def mfa_path(self) -> Path:
        return self.config_root / MFA_FILE

    @property
    def password_path(self) -> Path:
        return self.config_root / PASSWORD_FILE

    @property
    def pin_path(self) -> Path:
        return self.config_root / PIN_FILE


def get_settings(config_root: str | os.PathLike[str] | None = None) -> Settings:
    """Build settings from an explicit root or from the environment.

    Environment is read at call time so tests can set it per test.
    """

    root = Path(config_root).expanduser() if config_root else _default_config_root()
    return Settings(config_root=root)
