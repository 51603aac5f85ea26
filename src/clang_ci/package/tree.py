"""In-place install tree preparation: prune, strip, rpath patch."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Mapping
from pathlib import Path

from clang_ci.commands import Command, run_command
from clang_ci.helpers import files_at_depth

log = logging.getLogger(__name__)

PRUNE_LIB_PATTERNS = ("*.a", "*.la")
# find -mindepth 2 -maxdepth 3: install/bin/clang, install/lib/x/y.so ...
RPATH_MIN_DEPTH = 2
RPATH_MAX_DEPTH = 3


def prune(install: Path) -> list[Path]:
    """Remove include/ and static archives / libtool files in lib/. Returns removed paths."""
    removed: list[Path] = []
    include = install / "include"
    if include.exists():
        shutil.rmtree(include)
        removed.append(include)
    lib = install / "lib"
    for pattern in PRUNE_LIB_PATTERNS:
        for p in sorted(lib.glob(pattern)):
            if p.is_file() or p.is_symlink():
                p.unlink()
                removed.append(p)
    return removed


def describe(path: Path, env: Mapping[str, str] | None = None) -> str:
    """`file -b` description of path ("" if file itself fails)."""
    r = run_command(Command.of("file", "-b", "--", path, env=env, capture=True))
    return r.stdout.strip() if r.ok else ""


def has_symbols(description: str) -> bool:
    return "not stripped" in description


def is_dynamic_executable(description: str) -> bool:
    """ELF with a program interpreter."""
    return description.startswith("ELF") and "interpreter" in description


def strip_symbols(
    install: Path, env: Mapping[str, str] | None = None
) -> tuple[list[Path], list[Path]]:
    """strip -s every unstripped file. Failures are tolerated. Returns (stripped, failed)."""
    stripped: list[Path] = []
    failed: list[Path] = []
    for p in files_at_depth(install):
        if not has_symbols(describe(p, env)):
            continue
        r = run_command(Command.of("strip", "-s", p, env=env, capture=True))
        if r.ok:
            stripped.append(p)
        else:
            log.warning("strip failed for %s (ignored): %s", p, r.stderr.strip())
            failed.append(p)
    return stripped, failed


def patch_rpaths(
    install: Path, env: Mapping[str, str] | None = None
) -> tuple[int, list[Path]]:
    """Point dynamic executables at install/lib. Returns (status, patched)."""
    lib = install / "lib"
    patched: list[Path] = []
    for p in files_at_depth(install, RPATH_MIN_DEPTH, RPATH_MAX_DEPTH):
        if not is_dynamic_executable(describe(p, env)):
            continue
        print(f"  {p}")
        r = run_command(Command.of("patchelf", "--set-rpath", lib, p, env=env))
        if not r.ok:
            return r.status, patched
        patched.append(p)
    return 0, patched
