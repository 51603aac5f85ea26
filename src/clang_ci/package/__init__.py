"""Artifact packaging: prune/strip/rpath the install tree, then tar.xz or RPM."""

from .compress import run as run_compress
from .naming import archive_name, compiler_version, detect_distro, release_tag, short_revision

__all__ = [
    "archive_name",
    "compiler_version",
    "detect_distro",
    "release_tag",
    "run_compress",
    "short_revision",
]
