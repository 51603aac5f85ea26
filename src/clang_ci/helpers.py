"""Shared helpers for clang_ci (os-release parsing, path walking, version, host).

Used by config, package, release and build modules.
"""

from __future__ import annotations

import os
from pathlib import Path

# --- Text ---


def parse_os_release(text: str) -> dict[str, str]:
    """Parse os-release KEY=value lines. Quotes are stripped; comments and junk lines skipped."""
    out: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        out[key.strip()] = value.strip().strip("\"'")
    return out


# --- Path ---


def files_at_depth(root: Path, min_depth: int = 1, max_depth: int | None = None) -> list[Path]:
    """Sorted regular files below root with depth (root/x = 1) in [min_depth, max_depth]."""
    out: list[Path] = []
    for p in root.rglob("*"):
        if p.is_symlink() or not p.is_file():
            continue
        depth = len(p.relative_to(root).parts)
        if depth < min_depth:
            continue
        if max_depth is not None and depth > max_depth:
            continue
        out.append(p)
    return sorted(out)


def matching_files(directory: Path, pattern: str) -> list[Path]:
    """Regular files directly inside directory matching glob pattern, sorted by name."""
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.glob(pattern) if p.is_file())


# --- Version ---


def major_version(version: str) -> str:
    """Major component of a dotted version (18.1.8 -> 18)."""
    return version.split(".", 1)[0]


# --- Host ---


def visible_cpu_count() -> int:
    """CPUs this process may run on (like nproc), falling back to os.cpu_count()."""
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0))
    return os.cpu_count() or 1
