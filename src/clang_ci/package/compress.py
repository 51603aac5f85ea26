"""`compress` step: turn install/ into exactly one distributable artifact."""

from __future__ import annotations

import logging
import sys

from clang_ci.config import Config
from clang_ci.host import Platform
from clang_ci.package import archive, naming, rpm, tree
from clang_ci.package.upload import upload_all

log = logging.getLogger(__name__)


def run(config: Config, host: Platform) -> int:
    """Prune, strip, (rpath), name, package, mirror-upload. Returns 0 or first failing status."""
    install = config.install_dir
    if not install.is_dir():
        print(f"❌ Install tree not found: {install}", file=sys.stderr)
        return 1
    vendor = config.require_vendor()
    env = config.command_env()

    removed = tree.prune(install)
    log.info("Pruned %d path(s) from %s", len(removed), install)

    stripped, failed = tree.strip_symbols(install, env)
    print(f"✂️  Stripped {len(stripped)} file(s) ({len(failed)} skipped)")

    if not host.is_fedora:
        print("🔗 Setting rpaths...")
        rc, _patched = tree.patch_rpaths(install, env)
        if rc != 0:
            print("❌ patchelf failed", file=sys.stderr)
            return rc

    try:
        revision = naming.short_revision(config)
        version = naming.compiler_version(config)
    except naming.NamingError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    distro = naming.detect_distro(host.family)
    log.info("Artifact inputs: version=%s revision=%s distro=%s", version, revision, distro)

    if host.is_fedora:
        spec = rpm.RpmSpec(
            vendor=vendor,
            version=version,
            revision=revision,
            arch=host.arch,
            distro=distro,
            source=rpm.source_tarball_name(version),
            date=rpm.changelog_date(),
        )
        rc, artifacts = rpm.build_rpm(config, spec)
    else:
        name = naming.archive_name(vendor, version, distro, host.arch, revision)
        rc, output = archive.create_archive(config, name)
        artifacts = [output]
    if rc != 0:
        return rc

    upload_all(artifacts, config.settings.upload_url)
    return 0
