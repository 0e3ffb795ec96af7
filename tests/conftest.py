"""Pytest configuration for test isolation.

The package reads a few environment variables (keyword table path, top
category count, log level) and the CLI loads ``.env`` from the working
directory. Each test runs from its own temporary directory with those
variables cleared, and the package logger is reset afterwards so a handler
bound to one test's captured stream never leaks into the next.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from personal_finance.logging_setup import reset_logging


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("PF_KEYWORDS_FILE", "PF_TOP_CATEGORIES", "PF_ACCEPTED_EXTENSIONS"):
        # setenv first so monkeypatch also undoes values a loaded .env adds.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("PERSONAL_FINANCE_LOG_LEVEL", "WARNING")
    monkeypatch.chdir(tmp_path)
    yield
    reset_logging()
