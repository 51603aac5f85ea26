"""Artifact naming inputs: revision, compiler version, distro; and the name itself.

compiler_version is the only place tool output is scraped for a value.
"""

from __future__ import annotations

import re
from pathlib import Path

from clang_ci.commands import Command, run_command
from clang_ci.config import Config
from clang_ci.helpers import parse_os_release
from clang_ci.host import Family

OS_RELEASE_PATHS = (Path("/etc/os-release"), Path("/usr/lib/os-release"))
DEFAULT_DISTRO = "linux"

_CLANG_VERSION = re.compile(r"clang version (\S+)")


class NamingError(Exception):
    """A naming input could not be determined (git or clang failed)."""


def short_revision(config: Config) -> str:
    """Short HEAD hash of the llvm-project tree."""
    r = run_command(
        Command.of(
            "git",
            "-C",
            config.llvm_dir,
            "rev-parse",
            "--short",
            "HEAD",
            env=config.command_env(),
            capture=True,
        )
    )
    revision = r.stdout.strip()
    if not r.ok or not revision:
        msg = f"Could not read revision of {config.llvm_dir}: {r.stderr.strip()}"
        raise NamingError(msg)
    return revision


def parse_clang_version(output: str) -> str | None:
    """Version from the first line of `clang --version` (vendor prefix tolerated)."""
    first = output.strip().splitlines()[0] if output.strip() else ""
    m = _CLANG_VERSION.search(first)
    return m.group(1) if m else None


def compiler_version(config: Config) -> str:
    """Self-reported version of install/bin/clang."""
    r = run_command(
        Command.of(config.clang_binary, "--version", env=config.command_env(), capture=True)
    )
    version = parse_clang_version(r.stdout) if r.ok else None
    if not version:
        msg = f"Could not read version from {config.clang_binary} --version"
        raise NamingError(msg)
    return version


def distro_from_os_release(fields: dict[str, str], family: Family) -> str:
    """Codename (VERSION_CODENAME, UBUNTU_CODENAME), else ID. FEDORA appends VERSION_ID."""
    codename = fields.get("VERSION_CODENAME") or fields.get("UBUNTU_CODENAME")
    if codename:
        return codename
    ident = fields.get("ID", "")
    if not ident:
        return DEFAULT_DISTRO
    if family is Family.FEDORA:
        return ident + fields.get("VERSION_ID", "")
    return ident


def detect_distro(family: Family, paths: tuple[Path, ...] = OS_RELEASE_PATHS) -> str:
    """Distro identifier from the first readable os-release file, else "linux"."""
    for p in paths:
        if p.is_file():
            return distro_from_os_release(parse_os_release(p.read_text()), family)
    return DEFAULT_DISTRO


def archive_name(vendor: str, version: str, distro: str, arch: str, revision: str) -> str:
    """<vendor>-clang_<version>-<distro>-<arch>-<revision>.tar.xz"""
    return f"{vendor}-clang_{version}-{distro}-{arch}-{revision}.tar.xz"


def archive_glob(vendor: str) -> str:
    return f"{vendor}-clang_*.tar.xz"


def release_tag(version: str, revision: str) -> str:
    return f"{version}-{revision}"


def release_title(vendor: str, version: str, revision: str) -> str:
    return f"{vendor} Clang {version} ({revision})"
