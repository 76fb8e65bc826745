"""gitshim collaborator interfaces and simple implementations.

This module defines the *structural* interfaces (``typing.Protocol``) for
the collaborators consumed by the supervised invoker, plus lightweight
implementations of the output sink suitable for terminals and tests.

Every Protocol class is decorated with ``@runtime_checkable`` so that
``isinstance`` checks work at run-time in addition to static analysis.
"""
from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, TextIO, runtime_checkable

from gitshim.core.types import ErrorCategory, OutputKind, OutputRecord

# ===================================================================
# Protocol (interface) definitions
# ===================================================================

@runtime_checkable
class ProcessHandle(Protocol):
    """A launched child process owned by exactly one invocation."""

    @property
    def pid(self) -> int | None:
        """OS process id, if known."""
        ...

    @property
    def returncode(self) -> int | None:
        """Exit code once the process has exited, else ``None``."""
        ...

    async def wait(self, timeout: float | None = None) -> bool:
        """Wait for exit, at most *timeout* seconds (``None`` = forever).

        Returns ``True`` if the process exited within the bound.
        """
        ...

    def kill(self) -> None:
        """Forcibly terminate the process and anything it started.

        A no-op once they have exited.
        """
        ...

    def close(self) -> None:
        """Release pipes and background readers.  Safe to call more than once."""
        ...

    async def read_stdout(self) -> str:
        """Return everything the process wrote to standard output."""
        ...

    async def read_stderr(self) -> str:
        """Return everything the process wrote to standard error."""
        ...


@runtime_checkable
class ProcessLauncher(Protocol):
    """Starts child processes for the invoker."""

    async def launch(
        self,
        executable: str,
        args: Sequence[str],
        cwd: Path,
        *,
        capture: bool = True,
    ) -> ProcessHandle:
        """Start *executable* with *args* in *cwd*.

        With ``capture=False`` the child inherits the caller's standard
        streams.  Raises :class:`~gitshim.core.errors.LaunchFailure` if the
        process cannot be started.
        """
        ...


@runtime_checkable
class MessageFormatter(Protocol):
    """Produces human-readable text for a message id."""

    def format(self, message_id: str, *args: object) -> str:
        """Return the message for *message_id* with positional *args* filled in."""
        ...


@runtime_checkable
class OutputSink(Protocol):
    """Channel through which the invoker re-emits what the child produced."""

    def output(self, text: str) -> None:
        ...

    def warning(self, text: str) -> None:
        ...

    def error(self, text: str, category: ErrorCategory) -> None:
        ...


# ===================================================================
# Implementations
# ===================================================================

class RecordingSink:
    """Keeps every emitted record in memory, in emission order."""

    def __init__(self) -> None:
        self.records: list[OutputRecord] = []

    def output(self, text: str) -> None:
        self.records.append(OutputRecord(kind=OutputKind.OUTPUT, text=text))

    def warning(self, text: str) -> None:
        self.records.append(OutputRecord(kind=OutputKind.WARNING, text=text))

    def error(self, text: str, category: ErrorCategory) -> None:
        self.records.append(
            OutputRecord(kind=OutputKind.ERROR, text=text, category=category)
        )

    def clear(self) -> None:
        self.records.clear()


class ConsoleSink:
    """Writes output to *stdout*; warnings and errors to *stderr*.

    Streams are looked up at write time when not given, so redirected
    ``sys.stdout``/``sys.stderr`` are honoured.
    """

    def __init__(
        self,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._stdout = stdout
        self._stderr = stderr

    def output(self, text: str) -> None:
        print(text, file=self._stdout or sys.stdout)

    def warning(self, text: str) -> None:
        print(f"WARNING: {text}", file=self._stderr or sys.stderr)

    def error(self, text: str, category: ErrorCategory) -> None:
        print(f"ERROR ({category}): {text}", file=self._stderr or sys.stderr)
