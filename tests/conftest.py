"""
Root test configuration and fixtures for yamlconfig.

Provides:
- write_config: writes a YAML document to a temporary file
- isolation of YAMLCONFIG_* environment variables and the cached settings
- restoration of root logger handlers changed by configure_logging()

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from yamlconfig.settings import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear YAMLCONFIG_* variables and the settings cache around each test."""
    for name in list(os.environ):
        if name.upper().startswith("YAMLCONFIG_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def preserve_root_logging() -> Iterator[None]:
    """Restore root logger handlers and level after tests that reconfigure logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Return a function writing YAML text to a file under tmp_path."""

    def _write(content: str, name: str = "config.test.yml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
