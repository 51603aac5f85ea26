"""Publish the artifact in dist/ as a GitHub release asset via the gh CLI.

Tag: <clang-version>-<short-revision>. Upsert: if the tag's release exists the asset
is uploaded with --clobber; otherwise the release is created with the asset attached.
Re-running for the same build converges on one release with one current asset.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from clang_ci.commands import Command, run_command
from clang_ci.config import Config, ConfigError
from clang_ci.helpers import matching_files
from clang_ci.host import Platform
from clang_ci.package import naming

log = logging.getLogger(__name__)

RPM_GLOB = "*.rpm"


def artifact_pattern(config: Config, host: Platform) -> str:
    return RPM_GLOB if host.is_fedora else naming.archive_glob(config.require_vendor())


def find_artifact(config: Config, host: Platform) -> Path | None:
    """Newest matching file in dist/ (ties broken by name). Warns when more than one matches."""
    candidates = matching_files(config.dist_dir, artifact_pattern(config, host))
    if not candidates:
        return None
    candidates.sort(key=lambda p: (-p.stat().st_mtime, p.name))
    if len(candidates) > 1:
        log.warning(
            "%d candidate artifacts in %s; using newest %s",
            len(candidates),
            config.dist_dir,
            candidates[0].name,
        )
    return candidates[0]


def _gh(config: Config, *args: str | Path, capture: bool = False) -> Command:
    return Command.of("gh", *args, env=config.command_env(), capture=capture)


def view_command(config: Config, tag: str) -> Command:
    return _gh(config, "release", "view", tag, "--repo", config.repository, capture=True)


def upload_command(config: Config, tag: str, asset: Path) -> Command:
    return _gh(config, "release", "upload", tag, asset, "--repo", config.repository, "--clobber")


def create_command(config: Config, tag: str, asset: Path, title: str) -> Command:
    return _gh(
        config,
        "release",
        "create",
        tag,
        asset,
        "--title",
        title,
        "--notes",
        title,
        "--target",
        config.ref_name,
        "--repo",
        config.repository,
    )


def release_exists(config: Config, tag: str) -> bool:
    return run_command(view_command(config, tag)).ok


def publish_release(config: Config, asset: Path, version: str, revision: str) -> int:
    """Create-or-update the release for (version, revision). Returns 0 or gh's exit status."""
    tag = naming.release_tag(version, revision)
    title = naming.release_title(config.require_vendor(), version, revision)
    if release_exists(config, tag):
        print(f"Release {tag} exists, uploading asset...")
        cmd = upload_command(config, tag, asset)
    else:
        print(f"Release {tag} does not exist, creating release and uploading asset...")
        cmd = create_command(config, tag, asset, title)
    r = run_command(cmd)
    if not r.ok:
        print(f"❌ gh release failed (exit {r.returncode})", file=sys.stderr)
        return r.status
    print("✅ Released successfully.")
    return 0


def run(config: Config, host: Platform) -> int:
    """`release` step. Missing artifact is fatal before any network call."""
    asset = find_artifact(config, host)
    if asset is None:
        print("No file found to upload.", file=sys.stderr)
        return 1
    if not config.repository:
        msg = "GITHUB_REPOSITORY environment variable is required"
        raise ConfigError(msg)
    if not config.ref_name:
        msg = "GITHUB_REF_NAME environment variable is required"
        raise ConfigError(msg)
    try:
        version = naming.compiler_version(config)
        revision = naming.short_revision(config)
    except naming.NamingError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    return publish_release(config, asset, version, revision)
