"""Install host build dependencies (only inside an automated build)."""

from __future__ import annotations

import logging
import sys

from clang_ci.commands import Command, run_command
from clang_ci.config import Config
from clang_ci.host import Platform

log = logging.getLogger(__name__)


def install_commands(config: Config, host: Platform) -> list[Command]:
    """Package-manager commands for host's family. apt refreshes its index first."""
    env = config.command_env()
    if host.is_fedora:
        return [Command.of("dnf", "install", "-y", *config.settings.dnf_packages, env=env)]
    return [
        Command.of("apt", "update", "-y", env=env),
        Command.of(
            "apt",
            "install",
            "-y",
            "--no-install-recommends",
            *config.settings.apt_packages,
            env=env,
        ),
    ]


def run(config: Config, host: Platform) -> int:
    """No-op outside GITHUB_ACTIONS. Otherwise install packages; first failure is returned."""
    if not config.automated:
        log.info("Not an automated build; skipping dependency installation")
        return 0
    print(f"📦 Installing build dependencies ({host.family.value})...")
    for cmd in install_commands(config, host):
        r = run_command(cmd)
        if not r.ok:
            print(f"❌ {cmd.argv[0]} {cmd.argv[1]} failed (exit {r.returncode})", file=sys.stderr)
            return r.status
    print("✅ Dependencies installed")
    return 0
