"""gitshim error-code hierarchy.

Every failure the shim can surface is a concrete exception class carrying
a stable ``GS-E`` code.

Hierarchy
---------
::

    GitShimError
    +-- ConfigurationError    (GS-E1xx)
    +-- InvocationError       (GS-E2xx)
    +-- ExecutionError        (GS-E3xx)

Blocked invocations and timeouts are *not* errors: they are reported as
warnings on the :class:`~gitshim.core.types.InvocationResult`.

Usage
-----
Raise concrete subclasses directly::

    raise LaunchFailure("git executable not found")

Catch by category::

    try:
        ...
    except ExecutionError:
        # handles LaunchFailure and OperationFailure
        ...
"""
from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class GitShimError(Exception):
    """Base exception for all gitshim errors.

    Attributes
    ----------
    code : str
        Error code, e.g. ``"GS-E300"``.
    exit_status : int
        Exit status the command-line entry point uses for this error.
    message : str
        Human-readable description.
    details : dict[str, Any]
        Machine-readable context specific to the error instance.
    resolution : str
        Suggested action for the caller.
    """

    code: str = "GS-E000"
    exit_status: int = 1
    message: str = "Unknown gitshim error"
    resolution: str = ""

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        resolution: str | None = None,
    ) -> None:
        self.details: dict[str, Any] = details or {}
        if message is not None:
            self.message = message
        if resolution is not None:
            self.resolution = resolution
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the error to a plain mapping."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            payload["detail"] = self.details
        if self.resolution:
            payload["resolution"] = self.resolution
        return {"error": payload}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


# ===================================================================
# Category base classes
# ===================================================================

class ConfigurationError(GitShimError):
    """GS-E1xx -- Rule table and settings errors."""

    code = "GS-E1XX"
    exit_status = 2


class InvocationError(GitShimError):
    """GS-E2xx -- The caller's argument vector cannot be processed."""

    code = "GS-E2XX"
    exit_status = 2


class ExecutionError(GitShimError):
    """GS-E3xx -- Child process errors."""

    code = "GS-E3XX"
    exit_status = 1


# ===================================================================
# GS-E1xx  Configuration Errors
# ===================================================================

class InvalidRule(ConfigurationError):
    """GS-E101 -- A command rule failed validation."""

    code = "GS-E101"
    message = "Command rule is invalid"
    resolution = (
        "Each rule needs a non-empty 'command'; only 'parameter', "
        "'exists' and 'messageId' are accepted besides it."
    )


class ConfigFileError(ConfigurationError):
    """GS-E102 -- The configuration file could not be read or parsed."""

    code = "GS-E102"
    message = "Configuration file could not be loaded"
    resolution = "Check that the file exists and is valid TOML."


class InvalidTimeout(ConfigurationError):
    """GS-E103 -- A timeout value is negative or not an integer."""

    code = "GS-E103"
    message = "Timeout must be a non-negative number of milliseconds"
    resolution = "Pass 0 to disable the timeout, or a positive value."


# ===================================================================
# GS-E2xx  Invocation Errors
# ===================================================================

class EmptyInvocation(InvocationError):
    """GS-E200 -- No sub-command was given."""

    code = "GS-E200"
    message = "No git sub-command was given"
    resolution = "Pass at least one argument, e.g. 'status'."


# ===================================================================
# GS-E3xx  Execution Errors
# ===================================================================

class LaunchFailure(ExecutionError):
    """GS-E300 -- The child process could not be started."""

    code = "GS-E300"
    exit_status = 127
    message = "The external executable could not be started"
    resolution = (
        "Make sure the executable is installed and on PATH, or set "
        "'executable' in the configuration."
    )


class OperationFailure(ExecutionError):
    """GS-E301 -- The child exited non-zero and reported diagnostics."""

    code = "GS-E301"
    message = "The command failed"
    resolution = "Read the diagnostic text in the detail field."
