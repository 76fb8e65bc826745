"""gitshim shared domain types.

This module defines the value types, enums, and Pydantic models shared by
the rule matcher and the supervised invoker.  Public symbols are
re-exported from ``gitshim``.

Key design decisions:
* ``CommandRule`` is a frozen Pydantic model with an explicit tri-state
  ``exists`` field; unknown keys are rejected so a misspelt field in a
  configuration file fails loudly instead of silently widening a rule.
* ``InvocationRequest`` accepts a bare string, which is treated as a
  one-element vector.
* Enums use *string* values so they serialise cleanly to JSON.
"""
from __future__ import annotations

import enum
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from gitshim.core.errors import OperationFailure

# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

Token = str | int
"""A single argument; integers are pre-parsed numeric arguments."""

InvocationRequest = str | Sequence[Token]
"""Argument vector: token 0 is the sub-command, the rest its arguments."""


def as_argument_vector(args: InvocationRequest) -> list[Token]:
    """Normalise *args* to a list; a bare string becomes a one-element vector."""
    if isinstance(args, str):
        return [args]
    return list(args)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class OutputKind(enum.StrEnum):
    """Channel an emitted record belongs to."""

    OUTPUT = "output"
    WARNING = "warning"
    ERROR = "error"


class ErrorCategory(enum.StrEnum):
    """Category attached to reported errors."""

    OPERATION_FAILURE = "operation_failure"


class InvocationStatus(enum.StrEnum):
    """How an invocation was handled.

    * **completed** -- the child ran under supervision
    * **blocked** -- a known-problematic rule suppressed the launch
    * **passthrough** -- supervision was bypassed for this host
    """

    COMPLETED = "completed"
    BLOCKED = "blocked"
    PASSTHROUGH = "passthrough"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class CommandRule(BaseModel):
    """Declarative matcher over a command word and an optional parameter.

    ``exists`` only matters when ``parameter`` is non-empty: ``True``
    requires the parameter among the remaining arguments, ``False``
    requires it to be absent.  A rule with a parameter and ``exists``
    unset never matches.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    command: str = Field(min_length=1, description="Required first token.")
    parameter: str = Field(
        default="",
        description="Parameter to test for; empty matches on command alone.",
    )
    exists: bool | None = Field(
        default=None,
        description="Whether the parameter must be present (True) or absent (False).",
    )
    message_id: str | None = Field(
        default=None,
        alias="messageId",
        description="Key of an explanatory message for the caller.",
    )

    def describe(self) -> str:
        """Return ``command`` or ``command parameter`` for messages and logs."""
        if self.parameter:
            return f"{self.command} {self.parameter}"
        return self.command


RuleSet = tuple[CommandRule, ...]
"""Ordered rules; the first rule whose predicate holds wins."""


class OutputRecord(BaseModel):
    """One emitted chunk of output, warning text, or reported error."""

    model_config = ConfigDict(frozen=True)

    kind: OutputKind
    text: str
    category: ErrorCategory | None = None


class InvocationResult(BaseModel):
    """Everything an invocation emitted, plus how it ended."""

    status: InvocationStatus
    command_line: str
    exit_code: int | None = None
    timed_out: bool = False
    timeout_disabled: bool = False
    matched_rule: CommandRule | None = None
    records: list[OutputRecord] = Field(default_factory=list)

    @property
    def output(self) -> list[str]:
        return [r.text for r in self.records if r.kind is OutputKind.OUTPUT]

    @property
    def warnings(self) -> list[str]:
        return [r.text for r in self.records if r.kind is OutputKind.WARNING]

    @property
    def errors(self) -> list[str]:
        return [r.text for r in self.records if r.kind is OutputKind.ERROR]

    @property
    def succeeded(self) -> bool:
        """``True`` unless the child exited non-zero or an error was reported."""
        return not self.errors and self.exit_code in (None, 0)

    def raise_for_status(self) -> None:
        """Raise :class:`OperationFailure` if an error was reported."""
        if self.errors:
            raise OperationFailure(
                "\n".join(self.errors),
                details={
                    "command_line": self.command_line,
                    "exit_code": self.exit_code,
                },
            )
