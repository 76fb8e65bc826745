"""gitshim -- supervised git for hosts without a terminal.

Runs git as a child process with a bounded wait, blocks invocations that
would wait on an editor or prompt, and re-emits git's output so that
informational stderr text is not mistaken for a failure.

Packages
--------
* Core types, errors, config, interfaces (:mod:`gitshim.core`)
* Command rule matching (:mod:`gitshim.rules`)
* Supervised execution (:mod:`gitshim.supervisor`)
"""
from __future__ import annotations

__version__ = "1.0.0"

from gitshim.core.config import DEFAULT_TIMEOUT_MS, ShimConfig, load_config
from gitshim.core.errors import (
    ConfigFileError,
    ConfigurationError,
    EmptyInvocation,
    ExecutionError,
    GitShimError,
    InvalidRule,
    InvalidTimeout,
    InvocationError,
    LaunchFailure,
    OperationFailure,
)
from gitshim.core.interfaces import (
    ConsoleSink,
    MessageFormatter,
    OutputSink,
    ProcessHandle,
    ProcessLauncher,
    RecordingSink,
)
from gitshim.core.types import (
    CommandRule,
    ErrorCategory,
    InvocationResult,
    InvocationStatus,
    OutputKind,
    OutputRecord,
)
from gitshim.messages import MessageCatalog
from gitshim.rules import (
    DEFAULT_KNOWN_PROBLEMATIC_RULES,
    DEFAULT_TIMEOUT_EXEMPT_RULES,
    RuleMatcher,
    find_match,
    matches,
)
from gitshim.supervisor import (
    AsyncioProcessLauncher,
    SupervisedInvoker,
    always_supervise,
    escape_argument,
    format_command_line,
    running_in_interactive_host,
)

__all__ = [
    "__version__",
    # Config
    "DEFAULT_TIMEOUT_MS",
    "ShimConfig",
    "load_config",
    # Errors
    "GitShimError",
    "ConfigurationError",
    "InvocationError",
    "ExecutionError",
    "ConfigFileError",
    "InvalidRule",
    "InvalidTimeout",
    "EmptyInvocation",
    "LaunchFailure",
    "OperationFailure",
    # Interfaces
    "ProcessHandle",
    "ProcessLauncher",
    "MessageFormatter",
    "OutputSink",
    "ConsoleSink",
    "RecordingSink",
    "MessageCatalog",
    # Types
    "CommandRule",
    "ErrorCategory",
    "InvocationResult",
    "InvocationStatus",
    "OutputKind",
    "OutputRecord",
    # Rules
    "DEFAULT_KNOWN_PROBLEMATIC_RULES",
    "DEFAULT_TIMEOUT_EXEMPT_RULES",
    "RuleMatcher",
    "find_match",
    "matches",
    # Supervisor
    "SupervisedInvoker",
    "AsyncioProcessLauncher",
    "always_supervise",
    "escape_argument",
    "format_command_line",
    "running_in_interactive_host",
]
