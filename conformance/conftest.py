"""Shared fixtures for gitshim conformance tests.

Provides a recording sink and an invoker that runs ``/bin/sh`` in place of
git with empty rule tables.
"""
from __future__ import annotations

import pytest

from gitshim.core.config import ShimConfig
from gitshim.core.interfaces import RecordingSink
from gitshim.supervisor import SupervisedInvoker, always_supervise


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def sh_invoker(sink: RecordingSink) -> SupervisedInvoker:
    config = ShimConfig(
        executable="/bin/sh",
        known_problematic_rules=(),
        timeout_exempt_rules=(),
    )
    return SupervisedInvoker(config, sink=sink, should_supervise=always_supervise)
