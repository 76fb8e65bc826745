"""Host detection strategies.

The invoker asks a ``should_supervise()`` predicate whether the current
process is the interactive host it is meant to augment.  Outside such a
host (notably when running a script file) git is run unmodified.
"""
from __future__ import annotations

import sys

# Modules whose presence means we are inside an IPython shell or a
# Jupyter kernel, where git output has no terminal to go to.
_INTERACTIVE_HOST_MODULES: tuple[str, ...] = ("ipykernel", "IPython")


def running_in_interactive_host() -> bool:
    """Return ``True`` inside an interactive interpreter or notebook kernel.

    * IPython / Jupyter -- always supervised.
    * ``python`` REPL (``sys.ps1`` set) -- supervised.
    * A script file run as ``__main__`` -- never supervised, even with
      ``python -i``.
    """
    if any(name in sys.modules for name in _INTERACTIVE_HOST_MODULES):
        return True
    main = sys.modules.get("__main__")
    if main is not None and getattr(main, "__file__", None):
        return False
    return hasattr(sys, "ps1") or bool(sys.flags.interactive)


def always_supervise() -> bool:
    return True


def never_supervise() -> bool:
    return False
