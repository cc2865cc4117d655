from __future__ import annotations

import sys
from pathlib import Path

# Add src directory to path immediately on import - MUST be before any other imports
_src_dir = Path(__file__).resolve().parents[1] / "src"
_src_str = str(_src_dir)
if _src_str not in sys.path:
    sys.path.insert(0, _src_str)

from datetime import datetime, timezone

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Ensure src directory is on sys.path so tests can import modules."""
    if _src_str not in sys.path:
        sys.path.insert(0, _src_str)


@pytest.fixture
def fixed_now() -> datetime:
    """Reference instant for remediation checks."""
    return datetime(2024, 7, 1, tzinfo=timezone.utc)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Clear ICOFR_* variables and reset the config singleton around a test."""
    from icofr.config.loader import ConfigLoader

    for name in ("ICOFR_LOG_LEVEL", "ICOFR_ROLE", "ICOFR_RULES_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    ConfigLoader._instance = None
    ConfigLoader._config = None
    yield monkeypatch
    ConfigLoader._instance = None
    ConfigLoader._config = None
