from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point HOME at an empty directory and drop any TOZULIP_* variables."""

    for name in list(os.environ):
        if name.upper().startswith("TOZULIP_"):
            monkeypatch.delenv(name)

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture(autouse=True)
def detach_log_handlers():
    yield
    from logger import logger

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
