"""Sync the stable kernel tree and build it with the freshly built toolchain.

The tree under src/<branch> is a disposable mirror: an existing checkout is
shallow-fetched and hard-reset to the fetched tip, never merged.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml

from clang_ci.commands import Command, run_command
from clang_ci.config import Config
from clang_ci.host import Platform

log = logging.getLogger(__name__)

HANDOFF_FILE = "kernel-build.yaml"
KERNEL_MATRIX: dict[str, list[str]] = {"defconfig": ["X86"]}


def sync_commands(config: Config) -> list[Command]:
    """Fetch+reset when the tree exists, else shallow single-branch clone."""
    branch = config.settings.kernel_branch
    linux = config.kernel_source_dir
    env = config.command_env()
    if linux.is_dir():
        return [
            Command.of("git", "-C", linux, "fetch", "--depth=1", "origin", branch, env=env),
            Command.of("git", "-C", linux, "reset", "--hard", "FETCH_HEAD", env=env),
        ]
    return [
        Command.of(
            "git",
            "clone",
            "--branch",
            branch,
            "--depth=1",
            "--single-branch",
            config.settings.kernel_url,
            linux,
            env=env,
        )
    ]


def sync_source(config: Config) -> int:
    """Bring the kernel mirror to the tip of the tracked branch. Returns 0 or git's status."""
    linux = config.kernel_source_dir
    if linux.is_dir():
        print(f"🔄 Updating {linux.name} (shallow fetch + hard reset)...")
    else:
        print(f"📥 Cloning {config.settings.kernel_branch} into {linux}...")
        linux.parent.mkdir(parents=True, exist_ok=True)
    for cmd in sync_commands(config):
        r = run_command(cmd)
        if not r.ok:
            print(f"❌ git failed: {cmd}", file=sys.stderr)
            return r.status
    return 0


def handoff_data(config: Config) -> dict[str, Any]:
    """Builder settings handed to the kernel driver process."""
    return {
        "build_folder": str(config.build_dir / "linux"),
        "source_folder": str(config.kernel_source_dir),
        "matrix": KERNEL_MATRIX,
        "toolchain_prefix": str(config.install_dir),
    }


def write_handoff(config: Config) -> Path:
    path = config.build_dir / HANDOFF_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        yaml.safe_dump(handoff_data(config), f, sort_keys=True)
    return path


def build_command(config: Config, handoff: Path) -> Command:
    """Run the driver in a child interpreter with tc_build importable."""
    pythonpath = str(config.tc_build_dir)
    existing = config.base_env.get("PYTHONPATH")
    if existing:
        pythonpath = f"{pythonpath}{os.pathsep}{existing}"
    return Command.of(
        sys.executable,
        "-m",
        "clang_ci.build.kernel_driver",
        handoff,
        cwd=config.root,
        env=config.command_env({"PYTHONPATH": pythonpath}),
    )


def run(config: Config, host: Platform) -> int:
    """Sync then build the x86 defconfig kernel. Returns 0 or the first failing exit status."""
    rc = sync_source(config)
    if rc != 0:
        return rc
    handoff = write_handoff(config)
    log.debug("Kernel handoff written to %s", handoff)
    print(f"🔨 Building kernel ({host.arch}) with {config.install_dir}...")
    r = run_command(build_command(config, handoff))
    if not r.ok:
        print(f"❌ Kernel build failed (exit {r.returncode})", file=sys.stderr)
        return r.status
    print("✅ Kernel built")
    return 0
