"""Storage of uploaded files on local disk."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from nomina.core.exceptions import ReadError

logger = logging.getLogger(__name__)


def ensure_upload_dir(directory: str | Path) -> Path:
    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_upload(directory: str | Path, filename: str, data: bytes) -> Path:
    """Write an upload as ``<epoch-ms>-<name>`` and return its path.

    Raises:
        ReadError: If the file cannot be written to the upload directory.
    """
    name = Path(filename or "upload.txt").name
    try:
        path = ensure_upload_dir(directory) / f"{int(time.time() * 1000)}-{name}"
        path.write_bytes(data)
    except OSError as exc:
        logger.error("Error storing upload %r: %s", name, exc)
        raise ReadError("could not store the uploaded file on the server") from exc
    logger.debug("Stored upload at %s (%d bytes)", path, len(data))
    return path


def read_upload(path: str | Path) -> str:
    """Read a stored upload as UTF-8 text.

    Raises:
        ReadError: If the file cannot be read.
    """
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.error("Error reading upload %s: %s", path, exc)
        raise ReadError("could not read the uploaded file on the server") from exc
