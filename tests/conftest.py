"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ENV_VARIABLES = (
    "AVROREAD_OUTPUT_FORMAT",
    "AVROREAD_MAX_BLOCK_BYTES",
    "AVROREAD_MAX_COLLECTION_ITEMS",
    "AVROREAD_LOGICAL_TYPES",
    "AVROREAD_LOG_LEVEL",
)


def pytest_sessionstart() -> None:
    """Add src and repository root to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture(autouse=True)
def _isolate_avroread_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test with default avroread configuration."""
    for name in _ENV_VARIABLES:
        monkeypatch.delenv(name, raising=False)
