# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Pytest entry point that wires shared fixtures and markers."""

from __future__ import annotations

import logging
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

pytest_plugins = ("tests.fixtures.engines",)

FMTBRIDGE_ENV_VARS = (
    "FMTBRIDGE_ENGINE",
    "FMTBRIDGE_PRETTIER",
    "FMTBRIDGE_LOG_FORMAT",
    "FMTBRIDGE_LOG_LEVEL",
)


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with the custom markers used by the test suite."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line(
        "markers",
        "integration: Integration tests (slower, multiple components)",
    )
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "engine: Engine-related tests")
    config.addinivalue_line("markers", "cli: CLI-related tests")


@pytest.fixture(autouse=True)
def reset_fmtbridge_logging() -> Generator[None, None, None]:
    yield
    root = logging.getLogger("fmtbridge")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture(autouse=True)
def clean_fmtbridge_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in FMTBRIDGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
