"""Action parsing: one optional positional token from a closed set."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

EXIT_USAGE = 33


class Action(Enum):
    ALL = "all"
    BINUTILS = "binutils"
    DEPS = "deps"
    KERNEL = "kernel"
    LLVM = "llvm"
    COMPRESS = "compress"
    RELEASE = "release"


ACTION_NAMES = tuple(a.value for a in Action)


class UnknownActionError(Exception):
    """Unrecognised or repeated action token. Exit status EXIT_USAGE."""

    def __init__(self, token: str, reason: str = "unknown action") -> None:
        super().__init__(f"{reason}: {token!r} (expected one of: {', '.join(ACTION_NAMES)})")
        self.token = token


def parse_action(argv: Sequence[str]) -> Action:
    """Single requested action (default ALL). Raises UnknownActionError before anything runs."""
    action: Action | None = None
    for token in argv:
        try:
            parsed = Action(token)
        except ValueError:
            raise UnknownActionError(token) from None
        if action is not None:
            raise UnknownActionError(token, reason="only one action may be given")
        action = parsed
    return action or Action.ALL
