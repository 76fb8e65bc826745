"""gitshim configuration.

Defines the validated configuration model consumed by the supervised
invoker, and the loader that builds it from a TOML file plus environment
overrides.

Resolution order for the file: explicit path, ``GITSHIM_CONFIG_FILE``,
then ``$XDG_CONFIG_HOME/gitshim/config.toml`` if it exists.  Environment
variables ``GITSHIM_EXECUTABLE``, ``GITSHIM_TIMEOUT_MS`` and
``GITSHIM_CASE_SENSITIVE`` override file values.
"""
from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gitshim.core.errors import ConfigFileError, InvalidRule, InvalidTimeout
from gitshim.core.types import CommandRule, RuleSet
from gitshim.rules.defaults import (
    DEFAULT_KNOWN_PROBLEMATIC_RULES,
    DEFAULT_TIMEOUT_EXEMPT_RULES,
)
from gitshim.rules.matcher import RuleMatcher

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000

_RULE_TABLES = ("known_problematic_rules", "timeout_exempt_rules")
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class ShimConfig(BaseModel):
    """Configuration for a :class:`~gitshim.supervisor.SupervisedInvoker`.

    Both rule tables default to the shipped rule sets; passing an empty
    tuple disables that table.  The model is frozen so the tables stay
    read-only for the lifetime of the invoker.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    executable: str = Field(
        default="git",
        min_length=1,
        description="Name or path of the supervised executable.",
    )
    default_timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        ge=0,
        description="Bounded wait in milliseconds; 0 waits without limit.",
    )
    case_sensitive: bool = Field(
        default=True,
        description="Compare command words and parameters case-sensitively.",
    )
    encoding: str = Field(
        default="utf-8",
        description="Encoding used to decode the child's output streams.",
    )
    known_problematic_rules: RuleSet = Field(
        default=DEFAULT_KNOWN_PROBLEMATIC_RULES,
        description="Invocations that are blocked outright.",
    )
    timeout_exempt_rules: RuleSet = Field(
        default=DEFAULT_TIMEOUT_EXEMPT_RULES,
        description="Invocations that run without a bounded wait.",
    )


def _default_config_path() -> Path | None:
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    candidate = Path(xdg_config_home) / "gitshim" / "config.toml"
    return candidate if candidate.is_file() else None


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except OSError as exc:
        raise ConfigFileError(
            f"Cannot read configuration file {path}: {exc}",
            details={"path": str(path)},
        ) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileError(
            f"Invalid TOML in {path}: {exc}",
            details={"path": str(path)},
        ) from exc


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigFileError(
        f"{name} must be a boolean, got {value!r}",
        details={"variable": name},
    )


def _apply_env_overrides(data: dict[str, Any]) -> None:
    if executable := os.environ.get("GITSHIM_EXECUTABLE"):
        data["executable"] = executable
    if timeout := os.environ.get("GITSHIM_TIMEOUT_MS"):
        try:
            data["default_timeout_ms"] = int(timeout)
        except ValueError as exc:
            raise InvalidTimeout(
                f"GITSHIM_TIMEOUT_MS must be an integer, got {timeout!r}",
                details={"variable": "GITSHIM_TIMEOUT_MS"},
            ) from exc
    if case_sensitive := os.environ.get("GITSHIM_CASE_SENSITIVE"):
        data["case_sensitive"] = _parse_bool("GITSHIM_CASE_SENSITIVE", case_sensitive)


def parse_rules(entries: Any, *, table: str = "rules") -> RuleSet:
    """Validate a list of rule mappings into an ordered :data:`RuleSet`.

    Raises
    ------
    InvalidRule
        If *entries* is not a list or any entry fails validation.
    """
    if not isinstance(entries, list):
        raise InvalidRule(
            f"'{table}' must be a list of rule tables",
            details={"table": table},
        )
    rules: list[CommandRule] = []
    for index, entry in enumerate(entries):
        if isinstance(entry, CommandRule):
            rules.append(entry)
            continue
        try:
            rules.append(CommandRule.model_validate(entry))
        except ValidationError as exc:
            raise InvalidRule(
                f"Invalid rule #{index} in '{table}': {exc.errors()[0]['msg']}",
                details={"table": table, "index": index, "rule": entry},
            ) from exc
    return tuple(rules)


def build_config(data: dict[str, Any]) -> ShimConfig:
    """Build a :class:`ShimConfig` from a raw mapping (e.g. parsed TOML)."""
    values = dict(data)
    for table in _RULE_TABLES:
        if table in values:
            values[table] = parse_rules(values[table], table=table)
    timeout = values.get("default_timeout_ms")
    if isinstance(timeout, int) and not isinstance(timeout, bool) and timeout < 0:
        raise InvalidTimeout(
            f"default_timeout_ms must be >= 0, got {timeout}",
            details={"default_timeout_ms": timeout},
        )
    try:
        config = ShimConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigFileError(
            f"Invalid configuration: {exc}",
            details={"errors": [e["msg"] for e in exc.errors()]},
        ) from exc

    for table in _RULE_TABLES:
        matcher = RuleMatcher(
            getattr(config, table), case_sensitive=config.case_sensitive,
        )
        for problem in matcher.ordering_problems():
            logger.warning("%s: %s", table, problem)
    return config


def load_config(path: str | os.PathLike[str] | None = None) -> ShimConfig:
    """Load configuration from TOML and the environment.

    With no file to read, the defaults (plus environment overrides) are
    returned.
    """
    toml_path: Path | None
    if path is not None:
        toml_path = Path(path)
    elif env_path := os.environ.get("GITSHIM_CONFIG_FILE"):
        toml_path = Path(env_path)
    else:
        toml_path = _default_config_path()

    data: dict[str, Any] = {}
    if toml_path is not None:
        logger.debug("Loading configuration from %s", toml_path)
        data = _read_toml(toml_path)

    _apply_env_overrides(data)
    return build_config(data)
