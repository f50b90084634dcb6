"""Scoped staging of uploaded files on local disk."""

from __future__ import annotations

import logging
import secrets
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


def staged_name(filename: str, fieldname: str = "file") -> str:
    """Unique on-disk name keeping the original extension."""
    suffix = Path(filename).suffix
    return f"{fieldname}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"


@contextmanager
def staged_upload(upload_dir: str | Path, filename: str, data: bytes) -> Iterator[Path]:
    """Write ``data`` under ``upload_dir`` and remove it when the block exits.

    Removal happens exactly once on every exit path, including exceptions.
    """
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / staged_name(filename)
    path.write_bytes(data)
    logger.debug("Staged upload %s as %s", filename, path)
    try:
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Staged upload %s was already removed", path)
