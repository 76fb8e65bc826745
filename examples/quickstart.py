#!/usr/bin/env python3
"""gitshim quickstart.

Demonstrates the core workflow:

1. Build a configuration with a custom blocklist rule.
2. Run an ordinary command under supervision.
3. Run a command that the blocklist suppresses.
4. Inspect the recorded output, warnings and errors.

Run from inside a git checkout:
    python examples/quickstart.py
"""
from __future__ import annotations

import asyncio

from gitshim import (
    DEFAULT_KNOWN_PROBLEMATIC_RULES,
    CommandRule,
    RecordingSink,
    ShimConfig,
    SupervisedInvoker,
    always_supervise,
)


async def main() -> None:
    config = ShimConfig(
        default_timeout_ms=3000,
        known_problematic_rules=(
            *DEFAULT_KNOWN_PROBLEMATIC_RULES,
            CommandRule(command="commit", parameter="-m", exists=False),
        ),
    )
    sink = RecordingSink()
    # A script is not an interactive host, so opt in to supervision.
    invoker = SupervisedInvoker(config, sink=sink, should_supervise=always_supervise)

    print("== git status --short")
    result = await invoker.invoke(["status", "--short"])
    print(f"status={result.status} exit_code={result.exit_code}")
    for line in result.output:
        print(line)
    for line in result.errors:
        print(f"error: {line}")

    print("\n== git commit (no -m)")
    result = await invoker.invoke("commit")
    print(f"status={result.status}")
    for line in result.warnings:
        print(f"warning: {line}")

    print(f"\n{len(sink.records)} records emitted in total")


if __name__ == "__main__":
    asyncio.run(main())
