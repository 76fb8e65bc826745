"""Shared fixtures for gitshim tests.

Provides a recording sink, a ``/bin/sh``-backed configuration for tests
against real child processes, and environment isolation so a developer's own
gitshim configuration never leaks into a test run.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from gitshim.core.config import ShimConfig
from gitshim.core.interfaces import RecordingSink


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in (
        "GITSHIM_CONFIG_FILE",
        "GITSHIM_EXECUTABLE",
        "GITSHIM_TIMEOUT_MS",
        "GITSHIM_CASE_SENSITIVE",
        "GITSHIM_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def sh_config() -> ShimConfig:
    """Runs ``/bin/sh`` instead of git, with no rules."""
    return ShimConfig(
        executable="/bin/sh",
        known_problematic_rules=(),
        timeout_exempt_rules=(),
    )
