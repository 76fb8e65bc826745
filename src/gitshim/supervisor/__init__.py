"""Supervised execution of the external executable.

This subpackage provides:

* **SupervisedInvoker** -- rule checks, launch, bounded wait with forced
  termination, and exit-code based reclassification of stderr.
* **AsyncioProcessLauncher** -- the default process-launch collaborator,
  pumping both output pipes while the child runs.
* **escape_argument** / **format_command_line** -- whitespace quoting of
  argument tokens for the rendered command line.
* **running_in_interactive_host** -- the default host-detection predicate.
"""
from __future__ import annotations

from gitshim.supervisor.escaping import (
    escape_argument,
    escape_arguments,
    format_command_line,
)
from gitshim.supervisor.host import (
    always_supervise,
    never_supervise,
    running_in_interactive_host,
)
from gitshim.supervisor.invoker import KILL_REAP_TIMEOUT_S, SupervisedInvoker
from gitshim.supervisor.launcher import (
    DRAIN_TIMEOUT_S,
    AsyncioProcessHandle,
    AsyncioProcessLauncher,
)

__all__ = [
    # Invoker
    "SupervisedInvoker",
    "KILL_REAP_TIMEOUT_S",
    # Launcher
    "AsyncioProcessLauncher",
    "AsyncioProcessHandle",
    "DRAIN_TIMEOUT_S",
    # Escaping
    "escape_argument",
    "escape_arguments",
    "format_command_line",
    # Host detection
    "running_in_interactive_host",
    "always_supervise",
    "never_supervise",
]
