from __future__ import annotations

from pathlib import Path
from typing import Optional

from starlette.datastructures import UploadFile

from logger import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


class StorageError(Exception):
    """A directory or file could not be written."""

    status_code = 500


class FileTooLarge(StorageError):
    status_code = 413

    def __init__(self, filename: str, limit: int):
        super().__init__(f"File {filename} exceeds the limit of {limit} bytes")


def _discard(path: Path) -> None:
    try:
        if path.is_file():
            path.unlink()
    except OSError as exc:
        logger.warning("Could not remove partial file %s: %s", path, exc)


def ensure_directory(path: Path) -> Path:
    """Create ``path`` and any missing parents.

    An existing directory is not an error, so concurrent callers may race
    on the same path.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Cannot create directory %s: %s", path, exc)
        raise StorageError(f"Cannot create directory {path}: {exc.strerror or exc}") from exc
    return path


async def save_upload(
    upload: UploadFile,
    dest: Path,
    *,
    max_size: Optional[int] = None,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    """Copy ``upload`` to ``dest`` chunk by chunk and return the byte count.

    An existing file at ``dest`` is replaced. On any failure the partially
    written file is removed.
    """
    written = 0
    try:
        with open(dest, "wb") as fh:
            while True:
                chunk = await upload.read(chunk_size)
                if not chunk:
                    break
                written += len(chunk)
                if max_size is not None and written > max_size:
                    raise FileTooLarge(dest.name, max_size)
                fh.write(chunk)
    except FileTooLarge:
        _discard(dest)
        raise
    except OSError as exc:
        _discard(dest)
        logger.error("Failed to write %s: %s", dest, exc)
        raise StorageError(f"Cannot write {dest.name}: {exc.strerror or exc}") from exc
    logger.debug("Stored %s (%d bytes)", dest, written)
    return written
