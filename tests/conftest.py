from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from credhelper.settings import CONFIG_DIR_ENV, Settings, get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every store at a per-test directory, never the real ~/.config."""
    config_root = tmp_path / "config"
    monkeypatch.setenv(CONFIG_DIR_ENV, str(config_root))
    return config_root


@pytest.fixture
def settings(_isolated_config_dir: Path) -> Settings:
    return get_settings(_isolated_config_dir)
