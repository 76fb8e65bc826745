"""Asyncio-based process launcher.

:class:`AsyncioProcessLauncher` starts the child with ``exec`` semantics
(no shell, no console window), standard input closed, and both output
streams piped.  On POSIX a captured child leads its own session so that
:meth:`AsyncioProcessHandle.kill` reaches every process it started.
Each pipe is pumped into an in-memory buffer from the moment the child
starts, so a child that writes more than the pipe can hold never stalls
while the invoker waits on it.  The invoker only reads the buffers after
the wait has resolved.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import signal
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from gitshim.core.errors import LaunchFailure

logger = logging.getLogger(__name__)

# Upper bound on collecting buffered output from both pipes once the child
# has exited or been killed.  A process that left the child's session can
# keep a pipe open.
DRAIN_TIMEOUT_S = 0.5

_CHUNK_SIZE = 64 * 1024


def _platform_flags(own_group: bool) -> dict[str, Any]:
    """Keyword arguments for process creation on the current platform.

    Windows: no console window.  POSIX with *own_group*: a new session, so
    the child and everything it forks share a process group that can be
    killed at once.
    """
    if sys.platform == "win32":
        return {"creationflags": subprocess.CREATE_NO_WINDOW}
    return {"start_new_session": own_group}


async def _pump(stream: asyncio.StreamReader, buffer: bytearray) -> None:
    while chunk := await stream.read(_CHUNK_SIZE):
        buffer.extend(chunk)


class AsyncioProcessHandle:
    """:class:`~gitshim.core.interfaces.ProcessHandle` over an asyncio process."""

    def __init__(
        self,
        proc: asyncio.subprocess.Process,
        *,
        encoding: str = "utf-8",
        drain_timeout: float = DRAIN_TIMEOUT_S,
        own_group: bool = False,
    ) -> None:
        self._proc = proc
        self._encoding = encoding
        self._drain_timeout = drain_timeout
        self._own_group = own_group
        self._stdout = bytearray()
        self._stderr = bytearray()
        self._pumps = [
            task
            for task in (
                self._start_pump(proc.stdout, self._stdout),
                self._start_pump(proc.stderr, self._stderr),
            )
            if task is not None
        ]
        self._drained = False
        self._closed = False

    @staticmethod
    def _start_pump(
        stream: asyncio.StreamReader | None,
        buffer: bytearray,
    ) -> asyncio.Task[None] | None:
        if stream is None:
            return None
        return asyncio.get_running_loop().create_task(_pump(stream, buffer))

    @property
    def pid(self) -> int | None:
        return self._proc.pid

    @property
    def returncode(self) -> int | None:
        return self._proc.returncode

    async def wait(self, timeout: float | None = None) -> bool:
        try:
            await asyncio.wait_for(self._proc.wait(), timeout=timeout)
        except TimeoutError:
            return False
        return True

    def kill(self) -> None:
        """SIGKILL the child and, when it leads its own session, its process group."""
        if self._own_group:
            with contextlib.suppress(ProcessLookupError, PermissionError):
                os.killpg(self._proc.pid, signal.SIGKILL)
        with contextlib.suppress(ProcessLookupError):
            self._proc.kill()

    async def read_stdout(self) -> str:
        await self._drain()
        return self._stdout.decode(self._encoding, errors="replace")

    async def read_stderr(self) -> str:
        await self._drain()
        return self._stderr.decode(self._encoding, errors="replace")

    def close(self) -> None:
        """Stop the pipe readers and release the process transport."""
        if self._closed:
            return
        self._closed = True
        for task in self._pumps:
            task.cancel()
        # asyncio.subprocess.Process exposes no public close.
        transport = getattr(self._proc, "_transport", None)
        if transport is not None:
            transport.close()

    async def _drain(self) -> None:
        """Wait for both pipes to reach EOF under one shared deadline."""
        if self._drained:
            return
        self._drained = True
        pending = [task for task in self._pumps if not task.done()]
        if not pending:
            return
        _, still_open = await asyncio.wait(pending, timeout=self._drain_timeout)
        if still_open:
            logger.debug(
                "Output pipe of pid %s still open after %.1fs; using buffered data",
                self.pid,
                self._drain_timeout,
            )
            for task in still_open:
                task.cancel()


class AsyncioProcessLauncher:
    """Launch child processes with :func:`asyncio.create_subprocess_exec`.

    Usage::

        launcher = AsyncioProcessLauncher()
        handle = await launcher.launch("git", ["status"], Path.cwd())
        exited = await handle.wait(5.0)
    """

    def __init__(
        self,
        *,
        encoding: str = "utf-8",
        drain_timeout: float = DRAIN_TIMEOUT_S,
    ) -> None:
        self._encoding = encoding
        self._drain_timeout = drain_timeout

    async def launch(
        self,
        executable: str,
        args: Sequence[str],
        cwd: Path,
        *,
        capture: bool = True,
    ) -> AsyncioProcessHandle:
        """Start *executable*; see :class:`~gitshim.core.interfaces.ProcessLauncher`.

        Raises
        ------
        LaunchFailure
            If the executable is missing, not executable, or *cwd* is
            unusable.
        """
        pipe = asyncio.subprocess.PIPE if capture else None
        # A passthrough child stays in the caller's session to keep the terminal.
        own_group = capture and sys.platform != "win32"
        try:
            proc = await asyncio.create_subprocess_exec(
                executable,
                *args,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL if capture else None,
                stdout=pipe,
                stderr=pipe,
                **_platform_flags(own_group),
            )
        except OSError as exc:
            raise LaunchFailure(
                f"Failed to start {executable!r}: {exc}",
                details={
                    "executable": executable,
                    "cwd": str(cwd),
                    "original_error": str(exc),
                },
            ) from exc

        logger.debug("Started %s (pid %s) in %s", executable, proc.pid, cwd)
        return AsyncioProcessHandle(
            proc,
            encoding=self._encoding,
            drain_timeout=self._drain_timeout,
            own_group=own_group,
        )
