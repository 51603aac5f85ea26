"""Main CLI entry point: `clang-ci [all|binutils|deps|kernel|llvm|compress|release]`."""

from __future__ import annotations

import logging
import os
import sys

from clang_ci.actions import ACTION_NAMES, EXIT_USAGE, UnknownActionError, parse_action
from clang_ci.config import Config, ConfigError
from clang_ci.host import detect_platform
from clang_ci.pipeline import dispatch


def run(argv: list[str]) -> int:
    """Validate the action, build config and platform once, dispatch. Returns the exit status."""
    try:
        action = parse_action(argv)
    except UnknownActionError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(f"Usage: clang-ci [{'|'.join(ACTION_NAMES)}]", file=sys.stderr)
        return EXIT_USAGE

    try:
        config = Config.from_env(os.environ)
        logging.basicConfig(
            level=config.log_level,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
        host = detect_platform()
        logging.getLogger(__name__).info(
            "action=%s family=%s arch=%s root=%s",
            action.value,
            host.family.value,
            host.arch,
            config.root,
        )
        return dispatch(action, config, host)
    except ConfigError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


def main() -> None:
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
