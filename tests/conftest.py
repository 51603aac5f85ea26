"""Pytest fixtures for clang_ci tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from clang_ci.config import Config
from clang_ci.host import Family, Platform


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Config rooted at tmp_path; keyword args are extra environment entries."""

    def _make(**env: str) -> Config:
        environ = {"PATH": "/usr/bin", "LLVM_VENDOR_STRING": "acme"}
        environ.update(env)
        return Config.from_env(environ, root=tmp_path)

    return _make


@pytest.fixture
def debian_x86() -> Platform:
    return Platform(family=Family.DEBIAN, arch="x86_64")


@pytest.fixture
def debian_arm() -> Platform:
    return Platform(family=Family.DEBIAN, arch="aarch64")


@pytest.fixture
def fedora_x86() -> Platform:
    return Platform(family=Family.FEDORA, arch="x86_64")
