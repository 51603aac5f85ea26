"""Debian-family packaging: one xz tarball of the whole install tree."""

from __future__ import annotations

import sys
from pathlib import Path

from clang_ci.commands import Command, run_command
from clang_ci.config import Config


def archive_command(config: Config, output: Path) -> Command:
    return Command.of(
        "tar", "-cJf", output, "-C", config.install_dir, ".", env=config.command_env()
    )


def create_archive(config: Config, file_name: str) -> tuple[int, Path]:
    """Write dist/<file_name>. Returns (status, path)."""
    config.dist_dir.mkdir(parents=True, exist_ok=True)
    output = config.dist_dir / file_name
    print(f"🗜️  Compressing {config.install_dir} -> {output.name}...")
    r = run_command(archive_command(config, output))
    if not r.ok:
        print(f"❌ tar failed (exit {r.returncode})", file=sys.stderr)
        return r.status, output
    print(f"✅ Created {output}")
    return 0, output
