"""Release: idempotent GitHub release upsert for the packaged artifact."""

from .publish import find_artifact, publish_release
from .publish import run as run_release

__all__ = ["find_artifact", "publish_release", "run_release"]
