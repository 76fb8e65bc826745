"""Command rule matching.

This subpackage provides:

* **find_match** / **matches** -- first-match-wins evaluation of an
  ordered rule set against an argument vector.
* **RuleMatcher** -- a rule set bound to a comparison mode, with an
  ordering check for configuration diagnostics.
* **DEFAULT_KNOWN_PROBLEMATIC_RULES** / **DEFAULT_TIMEOUT_EXEMPT_RULES**
  -- the shipped rule sets.
"""
from __future__ import annotations

from gitshim.rules.defaults import (
    DEFAULT_KNOWN_PROBLEMATIC_RULES,
    DEFAULT_TIMEOUT_EXEMPT_RULES,
)
from gitshim.rules.matcher import RuleMatcher, find_match, matches

__all__ = [
    "DEFAULT_KNOWN_PROBLEMATIC_RULES",
    "DEFAULT_TIMEOUT_EXEMPT_RULES",
    "RuleMatcher",
    "find_match",
    "matches",
]
