"""External builder invocations: LLVM, binutils and the kernel."""

from .kernel import run as run_kernel
from .kernel import sync_source as sync_kernel_source
from .toolchain import (
    binutils_targets,
    llvm_targets,
    parallel_jobs,
    run_binutils,
    run_llvm,
)

__all__ = [
    "binutils_targets",
    "llvm_targets",
    "parallel_jobs",
    "run_binutils",
    "run_kernel",
    "run_llvm",
    "sync_kernel_source",
]
