"""Fedora-family packaging: self-contained RPM built with rpmbuild.

Layout under <root>/rpmbuild: BUILD RPMS SOURCES SPECS SRPMS. The install tree is
tarred into SOURCES, a spec is rendered into SPECS, and the single binary RPM
produced under RPMS/<arch> is moved to dist/.
"""

from __future__ import annotations

import shutil
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from clang_ci.commands import Command, run_command
from clang_ci.config import Config
from clang_ci.helpers import major_version

RPMBUILD_SUBDIRS = ("BUILD", "RPMS", "SOURCES", "SPECS", "SRPMS")
SPEC_NAME = "clang.spec"
PROVIDES = ("clang", "llvm", "lld", "polly", "openmp", "compiler-rt", "binutils")
INSTALL_PREFIX = "/usr"
OPT_VIEWER = "%{buildroot}/usr/share/opt-viewer"
# Shipped as data, not executables.
NON_EXECUTABLE_FILES = ("style.css", "optpmap.py")


@dataclass(frozen=True)
class RpmSpec:
    vendor: str
    version: str
    revision: str
    arch: str
    distro: str
    source: str
    date: str

    def render(self) -> str:
        major = major_version(self.version)
        provides = " ".join(PROVIDES)
        chmods = "\n".join(f"chmod -x {OPT_VIEWER}/{name}" for name in NON_EXECUTABLE_FILES)
        return f"""\
# No build-id / debuginfo generation for prebuilt, already stripped binaries
%define _missing_build_ids_terminate_build 0
%define debug_package %{{nil}}
%global __brp_ldconfig /usr/bin/true
%global __brp_strip /usr/bin/true
%global __brp_mangled_shebangs /usr/bin/true

Name:           clang-{self.vendor}
Version:        {major}
Release:        {self.revision}%{{?dist}}
Summary:        Custom LLVM/Clang build
License:        Apache-2.0
Source0:        {self.source}
BuildArch:      {self.arch}
AutoReqProv:    no
Provides:       {provides}

%description
Custom LLVM/Clang {self.version} build by {self.vendor} ({self.distro})

%prep
%setup -c

%install
mkdir -p %{{buildroot}}{INSTALL_PREFIX}
cp -r * %{{buildroot}}{INSTALL_PREFIX}/

find {OPT_VIEWER}/ -name "*.py" -exec sed -i '1s|#!.*python|#!/usr/bin/python3|' {{}} +

{chmods}

%files
{INSTALL_PREFIX}/*

%changelog
* {self.date} {self.vendor} - {major}-{self.revision}
- Automated build
"""


def changelog_date(now: float | None = None) -> str:
    """RPM changelog date, e.g. "Sun Oct 18 2026"."""
    return time.strftime("%a %b %d %Y", time.localtime(now))


def prepare_tree(rpmbuild: Path) -> None:
    for sub in RPMBUILD_SUBDIRS:
        (rpmbuild / sub).mkdir(parents=True, exist_ok=True)


def source_tarball_name(version: str) -> str:
    return f"clang-{version}.tar.gz"


def build_command(config: Config, spec_path: Path) -> Command:
    return Command.of(
        "rpmbuild",
        "-bb",
        spec_path,
        "--define",
        f"_topdir {config.rpmbuild_dir}",
        env=config.command_env(),
    )


def collect_rpms(config: Config, arch: str) -> list[Path]:
    """Move RPMS/<arch>/*.rpm into dist/. Returns the new paths."""
    config.dist_dir.mkdir(parents=True, exist_ok=True)
    moved: list[Path] = []
    for rpm in sorted((config.rpmbuild_dir / "RPMS" / arch).glob("*.rpm")):
        dest = config.dist_dir / rpm.name
        shutil.move(str(rpm), str(dest))
        moved.append(dest)
    return moved


def build_rpm(config: Config, spec: RpmSpec) -> tuple[int, list[Path]]:
    """Tar install tree, write spec, run rpmbuild, move result to dist/. Returns (status, rpms)."""
    rpmbuild = config.rpmbuild_dir
    prepare_tree(rpmbuild)

    tarball = rpmbuild / "SOURCES" / spec.source
    print(f"📦 Creating RPM source {tarball.name}...")
    r = run_command(
        Command.of("tar", "-czf", tarball, "-C", config.install_dir, ".", env=config.command_env())
    )
    if not r.ok:
        print(f"❌ tar failed (exit {r.returncode})", file=sys.stderr)
        return r.status, []

    spec_path = rpmbuild / "SPECS" / SPEC_NAME
    spec_path.write_text(spec.render())

    print("🔨 Running rpmbuild...")
    r = run_command(build_command(config, spec_path))
    if not r.ok:
        print(f"❌ rpmbuild failed (exit {r.returncode})", file=sys.stderr)
        return r.status, []

    rpms = collect_rpms(config, spec.arch)
    if not rpms:
        missing = rpmbuild / "RPMS" / spec.arch
        print(f"❌ rpmbuild produced no RPM under {missing}", file=sys.stderr)
        return 1, []
    for p in rpms:
        print(f"✅ Built {p}")
    return 0, rpms
