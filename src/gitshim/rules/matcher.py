"""Command rule matching.

A rule matches an argument vector when its ``command`` equals the first
token and its parameter predicate holds over the remaining tokens.  Rules
are tried in list order and the first match wins, so a rule requiring a
parameter must be listed before the rule requiring its absence.

Matching is exact string equality (never substring or prefix); integer
tokens are compared by their string form.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from gitshim.core.types import (
    CommandRule,
    InvocationRequest,
    RuleSet,
    Token,
    as_argument_vector,
)

logger = logging.getLogger(__name__)


def _normalise(token: Token, case_sensitive: bool) -> str:
    text = str(token)
    return text if case_sensitive else text.casefold()


def _rule_selects(
    rule: CommandRule,
    command: str,
    remaining: frozenset[str],
    case_sensitive: bool,
) -> bool:
    if _normalise(rule.command, case_sensitive) != command:
        return False
    if not rule.parameter:
        return True
    present = _normalise(rule.parameter, case_sensitive) in remaining
    if rule.exists is True:
        return present
    if rule.exists is False:
        return not present
    return False


def find_match(
    rules: Iterable[CommandRule],
    args: InvocationRequest,
    *,
    case_sensitive: bool = True,
) -> CommandRule | None:
    """Return the first rule in *rules* that matches *args*, or ``None``.

    Parameters
    ----------
    rules:
        Ordered rules; list order is the tie-break.
    args:
        Argument vector.  A bare string is a one-element vector; an empty
        vector never matches.
    case_sensitive:
        When ``False``, both sides are compared case-folded.
    """
    vector = as_argument_vector(args)
    if not vector:
        return None

    command = _normalise(vector[0], case_sensitive)
    remaining = frozenset(_normalise(token, case_sensitive) for token in vector[1:])
    for rule in rules:
        if _rule_selects(rule, command, remaining, case_sensitive):
            logger.debug("Rule %r matched %r", rule.describe(), vector)
            return rule
    return None


def matches(
    rules: Iterable[CommandRule],
    args: InvocationRequest,
    *,
    case_sensitive: bool = True,
) -> bool:
    """Return ``True`` if any rule in *rules* matches *args*."""
    return find_match(rules, args, case_sensitive=case_sensitive) is not None


class RuleMatcher:
    """An ordered, read-only rule set bound to a comparison mode.

    Usage::

        matcher = RuleMatcher(DEFAULT_KNOWN_PROBLEMATIC_RULES)
        rule = matcher.find_match(["commit"])
    """

    def __init__(
        self,
        rules: Sequence[CommandRule] = (),
        *,
        case_sensitive: bool = True,
    ) -> None:
        self._rules: RuleSet = tuple(rules)
        self._case_sensitive = case_sensitive

    def find_match(self, args: InvocationRequest) -> CommandRule | None:
        return find_match(self._rules, args, case_sensitive=self._case_sensitive)

    def matches(self, args: InvocationRequest) -> bool:
        return self.find_match(args) is not None

    def ordering_problems(self) -> list[str]:
        """Describe rules that list order shadows.

        Within one command, ``exists=True`` rules must precede
        ``exists=False`` rules, which match whenever their parameter is
        missing.  A command-only rule shadows every later rule for its
        command.
        """
        problems: list[str] = []
        absent_seen: set[str] = set()
        command_only_seen: set[str] = set()
        for index, rule in enumerate(self._rules):
            command = _normalise(rule.command, self._case_sensitive)
            if command in command_only_seen:
                problems.append(
                    f"rule #{index} ({rule.describe()}) follows a command-only "
                    f"rule for '{rule.command}' and is never reached"
                )
                continue
            if not rule.parameter:
                command_only_seen.add(command)
            elif rule.exists is False:
                absent_seen.add(command)
            elif rule.exists is True and command in absent_seen:
                problems.append(
                    f"rule #{index} ({rule.describe()}, exists=true) is listed after "
                    f"an exists=false rule for '{rule.command}' and may be shadowed"
                )
        return problems

    # -- Introspection ------------------------------------------------------

    @property
    def rules(self) -> RuleSet:
        return self._rules

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    def __len__(self) -> int:
        return len(self._rules)
