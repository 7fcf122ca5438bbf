"""
Shared pytest fixtures for dburl tests.

Every test starts with default capability flags, an empty settings cache
and no global resolver, so module-level state never leaks between tests.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Ensure dburl package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dburl.capabilities import Capabilities
from dburl.resolver import set_resolver
from dburl.settings import clear_settings_cache


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch: pytest.MonkeyPatch):
    for name in ("DBURL_FF_DOTENV", "DBURL_FF_CONFIG", "DBURL_TIER", "DBURL_PROJECT_ROOT", "DBURL_CONFIG_FILE",
                 "DBURL_DOTENV_OVERRIDE", "DBURL_LOG_LEVEL", "DBURL_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    Capabilities.reset_all()
    clear_settings_cache()
    set_resolver(None)
    yield
    Capabilities.reset_all()
    clear_settings_cache()
    set_resolver(None)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A temporary project root (holds a ``pyproject.toml`` marker)."""
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'sample'\n")
    return tmp_path


@pytest.fixture(autouse=True)
def _restore_environ():
    """Undo variables written by .env loaders during a test."""
    saved = dict(os.environ)
    yield
    os.environ.clear()
    os.environ.update(saved)
