"""Pipeline configuration: environment inputs, fixed layout, optional clang-ci.yaml settings.

Built once at start-up by Config.from_env and passed to every step; steps never
read os.environ themselves.

Settings YAML format (all keys optional):
- kernel: { branch, url }
- llvm: { projects: [..], lto }
- deps: { dnf: [..], apt: [..] }
- upload: { url }
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

SETTINGS_FILE = "clang-ci.yaml"

DNF_PACKAGES: tuple[str, ...] = (
    "bc",
    "bison",
    "ccache",
    "clang",
    "cmake",
    "compiler-rt",
    "cpio",
    "curl",
    "flex",
    "gcc-c++",
    "git",
    "gh",
    "libbsd-devel",
    "libcap-devel",
    "libedit-devel",
    "libffi-devel",
    "libtool",
    "lld",
    "llvm-devel",
    "make",
    "ncurses-compat-libs",
    "ninja-build",
    "openssl-devel",
    "patchelf",
    "perl-Digest-SHA",
    "python3-pyelftools",
    "python3-setuptools",
    "rpm-build",
    "rpmdevtools",
    "uboot-tools",
    "wget",
    "xz",
    "zlib-devel",
)

APT_PACKAGES: tuple[str, ...] = (
    "bc",
    "bison",
    "ca-certificates",
    "clang",
    "cmake",
    "curl",
    "file",
    "flex",
    "g++",
    "gcc",
    "gh",
    "git",
    "libbsd-dev",
    "libcap-dev",
    "libedit-dev",
    "libelf-dev",
    "libffi-dev",
    "libssl-dev",
    "libstdc++-12-dev",
    "lld",
    "make",
    "ninja-build",
    "patchelf",
    "python3",
    "texinfo",
    "wget",
    "xz-utils",
    "zlib1g-dev",
)

DEFAULT_SETTINGS: dict[str, Any] = {
    "kernel_branch": "linux-rolling-stable",
    "kernel_url": "https://git.kernel.org/pub/scm/linux/kernel/git/stable/linux.git",
    "llvm_projects": ("clang", "compiler-rt", "lld", "polly", "openmp"),
    "llvm_lto": "thin",
    "dnf_packages": DNF_PACKAGES,
    "apt_packages": APT_PACKAGES,
    "upload_url": "https://temp.wulan17.dev/api/v1/upload",
}

# settings key -> (section, key) in clang-ci.yaml
_YAML_KEYS: dict[str, tuple[str, str]] = {
    "kernel_branch": ("kernel", "branch"),
    "kernel_url": ("kernel", "url"),
    "llvm_projects": ("llvm", "projects"),
    "llvm_lto": ("llvm", "lto"),
    "dnf_packages": ("deps", "dnf"),
    "apt_packages": ("deps", "apt"),
    "upload_url": ("upload", "url"),
}


class ConfigError(Exception):
    """Invalid or missing configuration; the CLI maps this to exit status 1."""


@dataclass(frozen=True)
class Settings:
    kernel_branch: str = DEFAULT_SETTINGS["kernel_branch"]
    kernel_url: str = DEFAULT_SETTINGS["kernel_url"]
    llvm_projects: tuple[str, ...] = DEFAULT_SETTINGS["llvm_projects"]
    llvm_lto: str = DEFAULT_SETTINGS["llvm_lto"]
    dnf_packages: tuple[str, ...] = DNF_PACKAGES
    apt_packages: tuple[str, ...] = APT_PACKAGES
    upload_url: str = DEFAULT_SETTINGS["upload_url"]


def load_settings(path: Path) -> Settings:
    """Load clang-ci.yaml overrides. Missing file -> defaults. Malformed file -> ConfigError."""
    if not path.is_file():
        return Settings()

    import yaml

    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in {path}: {e}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)

    overrides: dict[str, Any] = {}
    for name, (section, key) in _YAML_KEYS.items():
        sec = data.get(section)
        if not isinstance(sec, dict) or key not in sec:
            continue
        value = sec[key]
        if isinstance(DEFAULT_SETTINGS[name], tuple):
            if isinstance(value, str):
                value = value.split()
            if not isinstance(value, list):
                msg = f"{path}: {section}.{key} must be a list"
                raise ConfigError(msg)
            value = tuple(str(v) for v in value)
        else:
            value = str(value)
        overrides[name] = value
    return Settings(**overrides)


@dataclass(frozen=True)
class Config:
    """Immutable run configuration. Paths are absolute and fixed relative to root."""

    root: Path
    automated: bool = False
    vendor: str = ""
    repository: str = ""
    ref_name: str = ""
    log_level: str = "INFO"
    base_env: Mapping[str, str] = field(default_factory=dict)
    settings: Settings = field(default_factory=Settings)

    @classmethod
    def from_env(cls, environ: Mapping[str, str], root: Path | None = None) -> Config:
        """Read every environment input once. root defaults to CLANG_CI_ROOT or cwd."""
        if root is None:
            root = Path(environ.get("CLANG_CI_ROOT") or Path.cwd())
        root = root.resolve()
        level = (environ.get("CLANG_CI_LOG_LEVEL") or "INFO").upper()
        if not isinstance(logging.getLevelName(level), int):
            msg = f"Unknown log level: {level}"
            raise ConfigError(msg)
        return cls(
            root=root,
            automated=bool(environ.get("GITHUB_ACTIONS")),
            vendor=environ.get("LLVM_VENDOR_STRING", ""),
            repository=environ.get("GITHUB_REPOSITORY", ""),
            ref_name=environ.get("GITHUB_REF_NAME", ""),
            log_level=level,
            base_env=dict(environ),
            settings=load_settings(root / SETTINGS_FILE),
        )

    # --- Layout ---

    @property
    def install_dir(self) -> Path:
        return self.root / "install"

    @property
    def src_dir(self) -> Path:
        return self.root / "src"

    @property
    def dist_dir(self) -> Path:
        return self.root / "dist"

    @property
    def build_dir(self) -> Path:
        return self.root / "build"

    @property
    def rpmbuild_dir(self) -> Path:
        return self.root / "rpmbuild"

    @property
    def llvm_dir(self) -> Path:
        return self.root / "llvm-project"

    @property
    def tc_build_dir(self) -> Path:
        return self.root / "tc_build"

    @property
    def toolchain_bin_dir(self) -> Path:
        return self.root / ".clang" / "bin"

    @property
    def kernel_source_dir(self) -> Path:
        return self.src_dir / self.settings.kernel_branch

    @property
    def clang_binary(self) -> Path:
        return self.install_dir / "bin" / "clang"

    # --- Environment ---

    def command_env(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        """Environment for spawned commands: base env with .clang/bin prepended to PATH."""
        env = dict(self.base_env)
        path = env.get("PATH", "")
        env["PATH"] = f"{self.toolchain_bin_dir}:{path}" if path else str(self.toolchain_bin_dir)
        if extra:
            env.update(extra)
        return env

    def require_vendor(self) -> str:
        """Vendor string or ConfigError when LLVM_VENDOR_STRING is unset."""
        if not self.vendor:
            msg = "LLVM_VENDOR_STRING environment variable is required"
            raise ConfigError(msg)
        return self.vendor
