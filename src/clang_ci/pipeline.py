"""Action dispatch and the composite `all` pipeline.

Steps run strictly in order; the first non-zero status stops everything after it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from clang_ci import deps
from clang_ci.actions import Action
from clang_ci.build import run_binutils, run_kernel, run_llvm
from clang_ci.config import Config
from clang_ci.host import Platform
from clang_ci.package import run_compress
from clang_ci.release import run_release

log = logging.getLogger(__name__)

Step = Callable[[Config, Platform], int]


def run_steps(steps: list[tuple[str, Step]], config: Config, host: Platform) -> int:
    """Run steps in order, stopping at the first failure. Returns 0 or that failure's status."""
    for name, step in steps:
        log.info("Step %s", name)
        rc = step(config, host)
        if rc != 0:
            log.error("Step %s failed with status %d", name, rc)
            return rc
    return 0


def run_all(config: Config, host: Platform) -> int:
    """deps -> llvm -> binutils -> kernel (kernel only on x86_64 hosts)."""
    steps: list[tuple[str, Step]] = [
        ("deps", deps.run),
        ("llvm", run_llvm),
        ("binutils", run_binutils),
    ]
    if host.is_x86_64:
        steps.append(("kernel", run_kernel))
    else:
        log.info("Skipping kernel build on %s", host.arch)
    return run_steps(steps, config, host)


HANDLERS: dict[Action, Step] = {
    Action.ALL: run_all,
    Action.BINUTILS: run_binutils,
    Action.DEPS: deps.run,
    Action.KERNEL: run_kernel,
    Action.LLVM: run_llvm,
    Action.COMPRESS: run_compress,
    Action.RELEASE: run_release,
}

_unhandled = set(Action) - set(HANDLERS)
if _unhandled:
    msg = f"No handler for action(s): {sorted(a.value for a in _unhandled)}"
    raise RuntimeError(msg)


def dispatch(action: Action, config: Config, host: Platform) -> int:
    return HANDLERS[action](config, host)
