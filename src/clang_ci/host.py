"""Host platform detection: package-manager family and machine architecture."""

from __future__ import annotations

import platform
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

X86_64 = "x86_64"


class Family(Enum):
    """Package-manager family. FEDORA is selected by the presence of dnf."""

    FEDORA = "fedora"
    DEBIAN = "debian"


@dataclass(frozen=True)
class Platform:
    family: Family
    arch: str

    @property
    def is_fedora(self) -> bool:
        return self.family is Family.FEDORA

    @property
    def is_x86_64(self) -> bool:
        return self.arch == X86_64


def detect_platform(
    which: Callable[[str], str | None] = shutil.which,
    machine: Callable[[], str] = platform.machine,
) -> Platform:
    """Probe for dnf (present -> FEDORA, else DEBIAN); arch is the raw `uname -m` value."""
    family = Family.FEDORA if which("dnf") else Family.DEBIAN
    return Platform(family=family, arch=machine())
