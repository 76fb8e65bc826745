"""Command-line entry point.

``gitshim [OPTIONS] GIT_ARGS...`` runs one git command under supervision
and exits with git's exit code (124 when the child was killed on timeout,
0 when the invocation was blocked).  gitshim's own help and version
flags are ``--shim-help`` and ``--shim-version`` so that ``--help`` and
``--version`` reach git.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from gitshim import __version__
from gitshim.core.config import load_config
from gitshim.core.errors import GitShimError
from gitshim.core.types import InvocationStatus
from gitshim.supervisor.host import always_supervise, running_in_interactive_host
from gitshim.supervisor.invoker import SupervisedInvoker

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_STATUS = 124

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        "help_option_names": ["--shim-help"],
    },
)
@click.option(
    "--timeout",
    "-t",
    "timeout_ms",
    type=click.IntRange(min=0),
    default=None,
    help="Bounded wait in milliseconds (0 disables). Defaults to the configured value.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="TOML configuration file.",
)
@click.option(
    "--detect-host/--always-supervise",
    default=False,
    show_default=True,
    help="Only supervise inside an interactive interpreter or notebook kernel.",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=lambda: os.environ.get("GITSHIM_LOG_LEVEL", "WARNING").upper(),
    help="Logging verbosity (env: GITSHIM_LOG_LEVEL).",
)
@click.version_option(__version__, "--shim-version", prog_name="gitshim")
@click.argument("git_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def main(
    ctx: click.Context,
    timeout_ms: int | None,
    config_file: Path | None,
    detect_host: bool,
    log_level: str,
    git_args: tuple[str, ...],
) -> None:
    """Run git with a bounded wait, re-emitting its output."""
    _configure_logging(log_level)
    try:
        config = load_config(config_file)
        invoker = SupervisedInvoker(
            config,
            should_supervise=running_in_interactive_host if detect_host else always_supervise,
        )
        result = invoker.invoke_sync(list(git_args), timeout_ms)
    except GitShimError as exc:
        logger.debug("gitshim failed: %r", exc)
        click.echo(f"gitshim: {exc.message}", err=True)
        if exc.resolution:
            click.echo(f"gitshim: {exc.resolution}", err=True)
        ctx.exit(exc.exit_status)
        return

    if result.status is InvocationStatus.BLOCKED:
        ctx.exit(0)
    if result.timed_out:
        ctx.exit(TIMEOUT_EXIT_STATUS)
    exit_code = result.exit_code if result.exit_code is not None else 1
    ctx.exit(exit_code if exit_code >= 0 else 1)
