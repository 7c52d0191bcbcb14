"""Pytest configuration and fixtures."""

from __future__ import annotations

import os

from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run each test with built-in settings only.

    Moves into an empty directory, drops ALPINEKIT_* variables and points
    the user config at a missing file so no local configuration leaks in.
    """
    from alpinekit.config import clear_settings
    from alpinekit.log import _LoggerHolder
    from alpinekit.state import reset_toast_api

    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("ALPINEKIT_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))

    clear_settings()
    reset_toast_api()
    _LoggerHolder.instance = None
    yield
    clear_settings()
    reset_toast_api()
    _LoggerHolder.instance = None


@pytest.fixture
def countries() -> list[dict[str, str]]:
    return [
        {"Value": "us", "Text": "United States"},
        {"Value": "uk", "Text": "United Kingdom"},
        {"Value": "ca", "Text": "Canada"},
    ]


@pytest.fixture
def debug_log(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture alpinekit records down to DEBUG."""
    from alpinekit import log

    log.enable_debug()
    caplog.set_level("DEBUG", logger="alpinekit")
    return caplog
