"""Best-effort mirror upload of finished artifacts to the temporary file host."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

log = logging.getLogger(__name__)

UPLOAD_TIMEOUT = httpx.Timeout(30.0, write=None)


def upload(client: httpx.Client, path: Path, url: str) -> bool:
    """POST path as multipart field "file". Response ignored; transport errors logged."""
    try:
        with path.open("rb") as f:
            resp = client.post(url, files={"file": (path.name, f)})
    except (httpx.HTTPError, OSError) as e:
        log.warning("Mirror upload of %s failed (ignored): %s", path.name, e)
        return False
    log.info("Mirror upload of %s -> HTTP %s", path.name, resp.status_code)
    print(f"📤 Uploaded {path.name} to {url}")
    return True


def upload_all(paths: list[Path], url: str) -> int:
    """Upload each path; returns how many uploads went through."""
    with httpx.Client(timeout=UPLOAD_TIMEOUT) as client:
        return sum(1 for p in paths if upload(client, p, url))
