"""Typed external command descriptions and a single subprocess runner."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

# Shell convention for "command not found".
EXIT_NOT_FOUND = 127


@dataclass(frozen=True)
class Command:
    """One external program invocation. ok_codes decides success."""

    argv: tuple[str, ...]
    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    capture: bool = False
    ok_codes: frozenset[int] = field(default_factory=lambda: frozenset({0}))

    @classmethod
    def of(cls, *argv: str | Path, **kwargs: Any) -> Command:
        return cls(argv=tuple(str(a) for a in argv), **kwargs)

    def __str__(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True)
class CommandResult:
    command: Command
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode in self.command.ok_codes

    @property
    def status(self) -> int:
        """0 when ok, else the tool's own non-zero code (1 if it exited 0 but was not accepted)."""
        if self.ok:
            return 0
        return self.returncode or 1


def run_command(command: Command) -> CommandResult:
    """Run command without a shell. A missing executable yields returncode 127."""
    log.debug("$ %s", command)
    try:
        r = subprocess.run(
            list(command.argv),
            cwd=str(command.cwd) if command.cwd else None,
            env=dict(command.env) if command.env is not None else None,
            capture_output=command.capture,
            text=True,
        )
    except FileNotFoundError as e:
        log.error("Executable not found: %s", command.argv[0])
        return CommandResult(command, EXIT_NOT_FOUND, "", str(e))
    return CommandResult(command, r.returncode, r.stdout or "", r.stderr or "")
