"""Child-process entry point: configure tc_build's LLVMKernelBuilder from a YAML handoff and build.

Usage: python -m clang_ci.build.kernel_driver <handoff.yaml>
(tc_build must be on PYTHONPATH.)
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import yaml

REQUIRED_KEYS = ("build_folder", "source_folder", "matrix", "toolchain_prefix")


def load_handoff(path: Path) -> dict[str, Any]:
    """Load handoff YAML. Raises ValueError if a required key is missing."""
    with path.open() as f:
        data = yaml.safe_load(f) or {}
    missing = [k for k in REQUIRED_KEYS if k not in data]
    if missing:
        msg = f"{path} missing keys: {', '.join(missing)}"
        raise ValueError(msg)
    return data


def configure_builder(builder: Any, handoff: dict[str, Any]) -> Any:
    """Apply folders, matrix and toolchain prefix to an LLVMKernelBuilder-like object."""
    builder.folders.build = Path(handoff["build_folder"])
    builder.folders.source = Path(handoff["source_folder"])
    builder.matrix = {k: list(v) for k, v in handoff["matrix"].items()}
    builder.toolchain_prefix = Path(handoff["toolchain_prefix"])
    return builder


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if len(argv) != 1:
        print("Usage: python -m clang_ci.build.kernel_driver <handoff.yaml>", file=sys.stderr)
        return 2
    try:
        handoff = load_handoff(Path(argv[0]))
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    from kernel import LLVMKernelBuilder  # tc_build, supplied via PYTHONPATH

    builder = configure_builder(LLVMKernelBuilder(), handoff)
    builder.build()
    return 0


if __name__ == "__main__":
    sys.exit(main())
