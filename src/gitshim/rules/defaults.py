"""Default rule sets.

The known-problematic set blocks invocations that open an editor, a
pager or an interactive prompt, none of which can be answered once the
child's streams are redirected into pipes.  The timeout-exempt set covers
network-bound commands whose duration depends on the remote.
"""
from __future__ import annotations

from gitshim.core.types import CommandRule, RuleSet


def _rule(
    command: str,
    parameter: str = "",
    exists: bool | None = None,
    message_id: str | None = None,
) -> CommandRule:
    return CommandRule(
        command=command,
        parameter=parameter,
        exists=exists,
        message_id=message_id,
    )


# -- Known problematic --------------------------------------------------------

DEFAULT_KNOWN_PROBLEMATIC_RULES: RuleSet = (
    _rule("add", "-i", True, "interactiveNotSupported"),
    _rule("add", "--interactive", True, "interactiveNotSupported"),
    _rule("add", "-p", True, "interactiveNotSupported"),
    _rule("add", "--patch", True, "interactiveNotSupported"),
    _rule("commit", "--interactive", True, "interactiveNotSupported"),
    _rule("commit", "-p", True, "interactiveNotSupported"),
    _rule("commit", "--patch", True, "interactiveNotSupported"),
    _rule("rebase", "-i", True, "interactiveNotSupported"),
    _rule("rebase", "--interactive", True, "interactiveNotSupported"),
    _rule("checkout", "-p", True, "interactiveNotSupported"),
    _rule("stash", "-p", True, "interactiveNotSupported"),
    _rule("help", message_id="helpOpensPager"),
    _rule("mergetool", message_id="mergeToolNotSupported"),
)

# -- Timeout exempt -------------------------------------------------------------

DEFAULT_TIMEOUT_EXEMPT_RULES: RuleSet = (
    _rule("clone"),
    _rule("fetch"),
    _rule("pull"),
    _rule("push"),
    _rule("gc"),
    _rule("submodule", "update", True),
)
