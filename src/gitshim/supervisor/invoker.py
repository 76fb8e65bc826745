"""Supervised invocation of the external executable.

:class:`SupervisedInvoker` runs one git command per call:

1. Bypass supervision entirely when ``should_supervise()`` is false.
2. Block invocations matching a known-problematic rule (warning, no launch).
3. Disable the bounded wait for timeout-exempt invocations.
4. Launch the child with piped output in the caller's directory.
5. Wait up to the timeout; on expiry warn and kill the child.
6. Re-emit stdout as output; stderr as output when the exit code is 0,
   otherwise as a reported error.

A timeout is a policy action reported through warnings, not an
exception.  Only a launch failure is raised.
"""
from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path

from gitshim.core.config import ShimConfig
from gitshim.core.errors import EmptyInvocation, InvalidTimeout
from gitshim.core.interfaces import (
    ConsoleSink,
    MessageFormatter,
    OutputSink,
    ProcessHandle,
    ProcessLauncher,
)
from gitshim.core.types import (
    CommandRule,
    ErrorCategory,
    InvocationRequest,
    InvocationResult,
    InvocationStatus,
    OutputKind,
    OutputRecord,
    Token,
    as_argument_vector,
)
from gitshim.messages import MessageCatalog
from gitshim.rules.matcher import RuleMatcher
from gitshim.supervisor.escaping import format_command_line
from gitshim.supervisor.host import running_in_interactive_host
from gitshim.supervisor.launcher import AsyncioProcessLauncher

logger = logging.getLogger(__name__)

# How long to wait for a killed child to be reaped before moving on.
KILL_REAP_TIMEOUT_S = 1.0


class _Transcript:
    """Forwards records to the sink and keeps them for the result."""

    def __init__(self, sink: OutputSink) -> None:
        self._sink = sink
        self.records: list[OutputRecord] = []

    def output(self, text: str) -> None:
        self.records.append(OutputRecord(kind=OutputKind.OUTPUT, text=text))
        self._sink.output(text)

    def warning(self, text: str) -> None:
        self.records.append(OutputRecord(kind=OutputKind.WARNING, text=text))
        self._sink.warning(text)

    def error(self, text: str, category: ErrorCategory) -> None:
        self.records.append(
            OutputRecord(kind=OutputKind.ERROR, text=text, category=category)
        )
        self._sink.error(text, category)


class SupervisedInvoker:
    """Run git under a bounded wait and re-emit its output.

    Parameters
    ----------
    config:
        Executable, default timeout and rule tables.  Defaults to
        :class:`ShimConfig` defaults.
    launcher:
        Process-launch collaborator.  Defaults to
        :class:`AsyncioProcessLauncher`.
    formatter:
        Message-formatting collaborator.  Defaults to :class:`MessageCatalog`.
    should_supervise:
        Host-detection predicate.  Defaults to
        :func:`running_in_interactive_host`.
    sink:
        Where output, warnings and errors are emitted as they occur.
        Defaults to :class:`~gitshim.core.interfaces.ConsoleSink`.

    Usage::

        invoker = SupervisedInvoker(should_supervise=always_supervise)
        result = await invoker.invoke(["status", "--short"])
        result.raise_for_status()
    """

    def __init__(
        self,
        config: ShimConfig | None = None,
        *,
        launcher: ProcessLauncher | None = None,
        formatter: MessageFormatter | None = None,
        should_supervise: Callable[[], bool] | None = None,
        sink: OutputSink | None = None,
    ) -> None:
        self._config = config or ShimConfig()
        self._launcher = launcher or AsyncioProcessLauncher(
            encoding=self._config.encoding,
        )
        self._formatter = formatter or MessageCatalog()
        self._should_supervise = should_supervise or running_in_interactive_host
        self._sink = sink or ConsoleSink()
        self._blocklist = RuleMatcher(
            self._config.known_problematic_rules,
            case_sensitive=self._config.case_sensitive,
        )
        self._timeout_exempt = RuleMatcher(
            self._config.timeout_exempt_rules,
            case_sensitive=self._config.case_sensitive,
        )

    @property
    def config(self) -> ShimConfig:
        return self._config

    async def invoke(
        self,
        args: InvocationRequest,
        timeout_ms: int | None = None,
        *,
        cwd: str | os.PathLike[str] | None = None,
    ) -> InvocationResult:
        """Run ``git *args`` under supervision.

        Parameters
        ----------
        args:
            Argument vector; token 0 is the sub-command.  A bare string is a
            one-element vector.
        timeout_ms:
            Bounded wait in milliseconds; ``0`` waits without limit.
            Defaults to ``config.default_timeout_ms``.
        cwd:
            Working directory for the child.  Defaults to the caller's
            current directory.

        Raises
        ------
        EmptyInvocation
            If *args* is empty.
        InvalidTimeout
            If *timeout_ms* is negative or not an integer.
        LaunchFailure
            If the child process cannot be started.
        """
        vector = as_argument_vector(args)
        if not vector:
            raise EmptyInvocation()
        timeout_ms = self._resolve_timeout(timeout_ms)
        workdir = Path(cwd) if cwd is not None else Path.cwd()
        command_line = format_command_line(self._config.executable, vector)

        if not self._should_supervise():
            return await self._passthrough(vector, workdir, command_line)

        transcript = _Transcript(self._sink)

        blocked = self._blocklist.find_match(vector)
        if blocked is not None:
            self._report_blocked(blocked, transcript)
            logger.info("Blocked %s (rule %r)", command_line, blocked.describe())
            return InvocationResult(
                status=InvocationStatus.BLOCKED,
                command_line=command_line,
                matched_rule=blocked,
                records=transcript.records,
            )

        timeout_disabled = self._timeout_exempt.matches(vector) or timeout_ms == 0

        handle = await self._launcher.launch(
            self._config.executable,
            [str(token) for token in vector],
            workdir,
        )
        try:
            timed_out = await self._wait(
                handle, vector, command_line, timeout_ms, timeout_disabled, transcript,
            )
            await self._drain(handle, transcript)
        except BaseException:
            # Cancelled or interrupted: the child must not outlive the call.
            handle.kill()
            raise
        finally:
            handle.close()

        return InvocationResult(
            status=InvocationStatus.COMPLETED,
            command_line=command_line,
            exit_code=handle.returncode,
            timed_out=timed_out,
            timeout_disabled=timeout_disabled,
            records=transcript.records,
        )

    def invoke_sync(
        self,
        args: InvocationRequest,
        timeout_ms: int | None = None,
        *,
        cwd: str | os.PathLike[str] | None = None,
    ) -> InvocationResult:
        """Blocking wrapper around :meth:`invoke` for synchronous callers."""
        return asyncio.run(self.invoke(args, timeout_ms, cwd=cwd))

    # -- Steps --------------------------------------------------------------

    def _resolve_timeout(self, timeout_ms: int | None) -> int:
        if timeout_ms is None:
            return self._config.default_timeout_ms
        if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int):
            raise InvalidTimeout(
                f"timeout_ms must be an integer, got {timeout_ms!r}",
                details={"timeout_ms": repr(timeout_ms)},
            )
        if timeout_ms < 0:
            raise InvalidTimeout(
                f"timeout_ms must be >= 0, got {timeout_ms}",
                details={"timeout_ms": timeout_ms},
            )
        return timeout_ms

    async def _passthrough(
        self,
        vector: list[Token],
        workdir: Path,
        command_line: str,
    ) -> InvocationResult:
        logger.debug("Not in an interactive host; running %s unsupervised", command_line)
        handle = await self._launcher.launch(
            self._config.executable,
            [str(token) for token in vector],
            workdir,
            capture=False,
        )
        try:
            await handle.wait(None)
        except BaseException:
            handle.kill()
            raise
        finally:
            handle.close()
        return InvocationResult(
            status=InvocationStatus.PASSTHROUGH,
            command_line=command_line,
            exit_code=handle.returncode,
        )

    def _report_blocked(self, rule: CommandRule, transcript: _Transcript) -> None:
        if rule.parameter:
            transcript.warning(
                self._formatter.format(
                    "blockedCommandParameter", rule.command, rule.parameter,
                )
            )
        else:
            transcript.warning(self._formatter.format("blockedCommand", rule.command))
        if rule.message_id:
            transcript.warning(self._formatter.format(rule.message_id))

    async def _wait(
        self,
        handle: ProcessHandle,
        vector: list[Token],
        command_line: str,
        timeout_ms: int,
        timeout_disabled: bool,
        transcript: _Transcript,
    ) -> bool:
        """Wait per policy; return ``True`` if the child had to be killed."""
        if timeout_disabled:
            transcript.warning(self._formatter.format("timeoutDisabled", vector[0]))
            await handle.wait(None)
            return False

        if await handle.wait(timeout_ms / 1000):
            logger.debug("pid %s exited with %s", handle.pid, handle.returncode)
            return False

        transcript.warning(
            self._formatter.format("timeoutExceeded", command_line, timeout_ms)
        )
        transcript.warning(
            self._formatter.format(
                "stoppingProcess", handle.pid, self._config.executable,
            )
        )
        logger.info("Killing pid %s after %d ms: %s", handle.pid, timeout_ms, command_line)
        handle.kill()
        if not await handle.wait(KILL_REAP_TIMEOUT_S):
            logger.warning("pid %s did not exit after kill", handle.pid)
        return True

    async def _drain(self, handle: ProcessHandle, transcript: _Transcript) -> None:
        stdout = (await handle.read_stdout()).strip()
        if stdout:
            transcript.output(stdout)

        stderr = (await handle.read_stderr()).strip()
        if not stderr:
            return
        if handle.returncode == 0:
            # git writes progress and hints to stderr on success.
            transcript.output(stderr)
        else:
            transcript.error(stderr, ErrorCategory.OPERATION_FAILURE)
