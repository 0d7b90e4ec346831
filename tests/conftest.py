"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest
import structlog

_ENVIRONMENT_VARIABLES = (
    "AIRTABLE_BASE",
    "AIRTABLE_API_KEY",
    "AIRTABLE_TABLE",
    "AIRTABLE_VIEW",
    "AIRTABLE_API_URL",
    "STENCIL_PAGE_SIZE",
    "STENCIL_HTTP_TIMEOUT",
    "STENCIL_REQUIRES_DEFAULT",
    "STENCIL_DEMO_FALLBACK",
    "STENCIL_FIELD_MAP",
    "STENCIL_LOG_LEVEL",
)


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear Stencil variables so host settings never leak into tests."""
    for name in _ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    yield
    structlog.reset_defaults()
