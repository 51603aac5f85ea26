"""Invoke the external LLVM and binutils builders with host-conditioned targets.

Both builders get two baseline targets; the native x86 target is added only when
the host itself is x86_64. LLVM and binutils spell the same architectures differently.
"""

from __future__ import annotations

import sys

from clang_ci.commands import Command, run_command
from clang_ci.config import Config
from clang_ci.helpers import visible_cpu_count
from clang_ci.host import Platform

LLVM_BASE_TARGETS = ("AArch64", "ARM")
LLVM_NATIVE_X86 = "X86"
BINUTILS_BASE_TARGETS = ("aarch64", "arm")
BINUTILS_NATIVE_X86 = "x86_64"

RELEASE_CFLAGS = "-g0 -O3"


def llvm_targets(host: Platform) -> list[str]:
    targets = list(LLVM_BASE_TARGETS)
    if host.is_x86_64:
        targets.append(LLVM_NATIVE_X86)
    return targets


def binutils_targets(host: Platform) -> list[str]:
    targets = list(BINUTILS_BASE_TARGETS)
    if host.is_x86_64:
        targets.append(BINUTILS_NATIVE_X86)
    return targets


def parallel_jobs(cpu_count: int | None = None) -> int:
    """Compile/link job hint: visible CPUs + 1."""
    return (cpu_count if cpu_count is not None else visible_cpu_count()) + 1


def llvm_defines(jobs: int) -> list[str]:
    return [
        f"LLVM_PARALLEL_COMPILE_JOBS={jobs}",
        f"LLVM_PARALLEL_LINK_JOBS={jobs}",
        f"CMAKE_C_FLAGS={RELEASE_CFLAGS}",
        f"CMAKE_CXX_FLAGS={RELEASE_CFLAGS}",
        "LLVM_USE_LINKER=lld",
        "LLVM_ENABLE_LLD=ON",
    ]


def llvm_command(config: Config, host: Platform, jobs: int | None = None) -> Command:
    """build-llvm.py invocation. ccache is disabled in automated builds only."""
    if jobs is None:
        jobs = parallel_jobs()
    argv: list[str] = [
        str(config.root / "build-llvm.py"),
        "--install-folder",
        str(config.install_dir),
        "--vendor-string",
        config.require_vendor(),
        "--targets",
        *llvm_targets(host),
        "--defines",
        *llvm_defines(jobs),
        "--projects",
        *config.settings.llvm_projects,
        "--quiet-cmake",
        "--llvm-folder",
        str(config.llvm_dir),
        "--lto",
        config.settings.llvm_lto,
    ]
    if config.automated:
        argv.append("--no-ccache")
    return Command(argv=tuple(argv), cwd=config.root, env=config.command_env())


def binutils_command(config: Config, host: Platform) -> Command:
    return Command.of(
        config.root / "build-binutils.py",
        "--install-folder",
        config.install_dir,
        "--show-build-commands",
        "--targets",
        *binutils_targets(host),
        cwd=config.root,
        env=config.command_env(),
    )


def _run_builder(name: str, cmd: Command) -> int:
    print(f"🔨 Building {name}...")
    r = run_command(cmd)
    if not r.ok:
        print(f"❌ {name} build failed (exit {r.returncode})", file=sys.stderr)
        return r.status
    print(f"✅ {name} built")
    return 0


def run_llvm(config: Config, host: Platform) -> int:
    """Build LLVM/Clang into install/. Returns the builder's exit status."""
    return _run_builder("LLVM", llvm_command(config, host))


def run_binutils(config: Config, host: Platform) -> int:
    """Build binutils into install/. Returns the builder's exit status."""
    return _run_builder("binutils", binutils_command(config, host))
