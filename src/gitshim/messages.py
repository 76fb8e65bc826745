"""Default message catalog.

Messages are ``str.format`` templates with positional fields, keyed by
message id.  Rule-specific ids (``CommandRule.message_id``) live in the
same table as the invoker's own notices.
"""
from __future__ import annotations

from collections.abc import Mapping

DEFAULT_MESSAGES: dict[str, str] = {
    # Invoker notices
    "blockedCommand": "'git {0}' is not supported here and was not run.",
    "blockedCommandParameter": (
        "'git {0}' with '{1}' is not supported here and was not run."
    ),
    "timeoutDisabled": "The timeout is disabled for 'git {0}'.",
    "timeoutExceeded": "'{0}' did not finish within {1} ms.",
    "stoppingProcess": "Stopping process {0} ({1}).",
    # Rule explanations
    "interactiveNotSupported": (
        "Interactive mode needs a terminal. Run it from a console window."
    ),
    "helpOpensPager": (
        "Help opens a pager or browser. Use 'git <command> -h' for a summary."
    ),
    "mergeToolNotSupported": (
        "The merge tool waits for input. Resolve conflicts in your editor, "
        "then 'git add' the files."
    ),
}


class MessageCatalog:
    """Look up and format messages by id.

    Unknown ids fall back to the id itself followed by the arguments, so a
    misconfigured ``messageId`` still produces readable output.
    """

    def __init__(self, messages: Mapping[str, str] | None = None) -> None:
        self._messages: dict[str, str] = dict(DEFAULT_MESSAGES)
        if messages:
            self._messages.update(messages)

    def format(self, message_id: str, *args: object) -> str:
        template = self._messages.get(message_id)
        if template is None:
            return " ".join([message_id, *(str(a) for a in args)])
        return template.format(*args)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._messages
