"""
Module: export.locking

Purpose:
    Cross-process guard that keeps two exports of the same document from
    running at once. Uses portalocker for Mac, Windows, and Linux
    compatibility; the lock is non-blocking so a second export is
    rejected rather than queued.

Key Functions:
    - document_lock: Context manager holding a per-document lock file
    - lock_path_for: Lock file location for a document id

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - export.controller: DocumentExporter
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import portalocker

from .errors import ExportInProgress

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def lock_path_for(lock_dir: Path, document_id: str) -> Path:
    """Lock file path for ``document_id`` inside ``lock_dir``."""
    safe = _UNSAFE_CHARS.sub("_", document_id).strip("._") or "document"
    return lock_dir / f"{safe}.export.lock"


@contextmanager
def document_lock(lock_dir: Path, document_id: str) -> Generator[Path, None, None]:
    """
    Hold an exclusive, non-blocking lock for one document's export.

    Args:
        lock_dir: Directory holding lock files (created if missing)
        document_id: Document being exported

    Yields:
        Path of the held lock file

    Raises:
        ExportInProgress: If another process holds the lock

    Example:
        >>> with document_lock(Path("/tmp/locks"), "cv-42"):
        ...     run_export()
    """
    path = lock_path_for(lock_dir, document_id)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "a", encoding="utf-8") as f:
        try:
            portalocker.lock(f, portalocker.LOCK_EX | portalocker.LOCK_NB)
        except portalocker.exceptions.LockException as e:
            raise ExportInProgress(
                f"Document {document_id!r} is already being exported"
            ) from e
        logger.debug(f"Acquired export lock {path.name}")
        try:
            yield path
        finally:
            portalocker.unlock(f)
            logger.debug(f"Released export lock {path.name}")
