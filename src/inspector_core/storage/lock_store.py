from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

LOCK_SUFFIX = ".lock"


class LockfileStore:
    """Write-once store of fetched lockfiles, one file per repository."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or key in {".", ".."}:
            raise ValueError(f"invalid lockfile key: {key!r}")
        return self.directory / f"{key}{LOCK_SUFFIX}"

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def write(self, key: str, content: bytes) -> Path:
        path = self.path_for(key)
        # "xb" refuses to replace a lockfile stored by an earlier run
        with path.open("xb") as handle:
            handle.write(content)
        logger.info("lock_store set key=%s bytes=%d", key, len(content))
        return path

