"""Supervised execution conformance tests.

Verifies exit-code based reclassification of stderr, forced termination
on timeout, and preservation of argument boundaries, against real
``/bin/sh`` child processes.
"""
from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path

import pytest

from gitshim.core.types import ErrorCategory, OutputKind
from gitshim.supervisor import SupervisedInvoker
from tests.fakes import wait_until_gone

pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="uses /bin/sh child processes",
)

# ===================================================================
# Reclassification
# ===================================================================

class TestReclassification:
    """stderr is output on success and a reported error on failure."""

    @pytest.mark.asyncio
    async def test_MUST_emit_stderr_as_output_on_exit_zero(
        self, sh_invoker: SupervisedInvoker,
    ) -> None:
        result = await sh_invoker.invoke(["-c", "echo 'remote: counting objects' >&2"])
        assert result.exit_code == 0
        assert result.output == ["remote: counting objects"]
        assert result.errors == []

    @pytest.mark.asyncio
    async def test_MUST_report_one_error_on_nonzero_exit(
        self, sh_invoker: SupervisedInvoker,
    ) -> None:
        result = await sh_invoker.invoke(["-c", "echo 'fatal: no upstream' >&2; exit 1"])
        errors = [r for r in result.records if r.kind is OutputKind.ERROR]
        assert len(errors) == 1
        assert errors[0].text == "fatal: no upstream"
        assert errors[0].category is ErrorCategory.OPERATION_FAILURE


# ===================================================================
# Timeout
# ===================================================================

class TestForcedTermination:
    """A child that outlives the timeout is killed, with two warnings."""

    @pytest.mark.asyncio
    async def test_MUST_kill_and_warn_on_timeout(
        self, sh_invoker: SupervisedInvoker,
    ) -> None:
        started = time.monotonic()
        result = await sh_invoker.invoke(["-c", "exec sleep 10"], 100)
        elapsed = time.monotonic() - started

        assert result.timed_out is True
        assert len(result.warnings) == 2
        assert result.errors == []
        assert elapsed < 1.0

    @pytest.mark.asyncio
    async def test_MUST_kill_processes_the_child_started(
        self, sh_invoker: SupervisedInvoker, tmp_path: Path,
    ) -> None:
        pidfile = tmp_path / "sleeper.pid"
        started = time.monotonic()
        result = await sh_invoker.invoke(
            ["-c", 'sleep 10 & echo $! > "$1"; wait; echo done', "argv0", str(pidfile)],
            100,
        )
        elapsed = time.monotonic() - started

        assert result.timed_out is True
        assert elapsed < 1.0
        assert await wait_until_gone(int(pidfile.read_text()))

    @pytest.mark.asyncio
    async def test_MUST_kill_child_when_cancelled(
        self, sh_invoker: SupervisedInvoker, tmp_path: Path,
    ) -> None:
        pidfile = tmp_path / "child.pid"
        with pytest.raises(TimeoutError):
            await asyncio.wait_for(
                sh_invoker.invoke(
                    ["-c", 'echo $$ > "$1"; exec sleep 30', "argv0", str(pidfile)],
                    0,
                ),
                0.5,
            )
        assert await wait_until_gone(int(pidfile.read_text()))

    @pytest.mark.asyncio
    async def test_MUST_NOT_time_out_fast_commands(
        self, sh_invoker: SupervisedInvoker,
    ) -> None:
        result = await sh_invoker.invoke(["-c", "true"], 5000)
        assert result.timed_out is False
        assert result.warnings == []


# ===================================================================
# Argument boundaries
# ===================================================================

class TestArgumentBoundaries:
    """Multi-word tokens arrive as one argument; numeric tokens unchanged."""

    @pytest.mark.asyncio
    async def test_MUST_keep_multi_word_token_whole(
        self, sh_invoker: SupervisedInvoker,
    ) -> None:
        result = await sh_invoker.invoke(
            ["-c", 'printf "%s\\n" "$#" "$1"', "argv0", "fix bug"],
        )
        assert result.output == ["1\nfix bug"]

    @pytest.mark.asyncio
    async def test_MUST_pass_numeric_token_unquoted(
        self, sh_invoker: SupervisedInvoker,
    ) -> None:
        result = await sh_invoker.invoke(["-c", 'printf "%s" "$1"', "argv0", "42"])
        assert result.output == ["42"]
