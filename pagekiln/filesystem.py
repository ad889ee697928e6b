"""Filesystem helpers shared by the cache and the build engine.

Functions:
    ensure_directory: Create a directory tree or raise DirectoryCreationFailure.
    atomic_write_text: Stage text in a temp file and rename it into place.
    write_bytes: Write a payload to a file, returning the byte count.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from .errors import DirectoryCreationFailure, WriteFailure

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating parents as needed.

    Args:
        path: Directory to create.

    Returns:
        The same path.

    Raises:
        DirectoryCreationFailure: If the directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationFailure(
            path, f"Failed to create directory: {exc}", exc
        ) from exc
    return path


def atomic_write_text(target: Path, content: str, encoding: str = "utf-8") -> None:
    """Write text atomically by staging a temp file and renaming.

    The temp file lives in the target's directory so the final ``os.replace``
    never crosses filesystems. Readers observe either the previous complete
    file or the new one.

    Args:
        target: Destination file.
        content: Text to write.
        encoding: Text encoding.

    Raises:
        WriteFailure: If the temp file cannot be written or renamed.
    """
    try:
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
    except OSError as exc:
        raise WriteFailure(target, f"Failed to create temp file: {exc}", exc) from exc
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, target)
    except OSError as exc:
        raise WriteFailure(target, f"Failed to write file: {exc}", exc) from exc
    finally:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.debug("Could not remove temp file %s (%s)", tmp_path, exc)


def write_bytes(target: Path, payload: bytes) -> int:
    """Write bytes to a file.

    Args:
        target: Destination file.
        payload: Bytes to write.

    Returns:
        Number of bytes written.

    Raises:
        WriteFailure: If the file cannot be written.
    """
    try:
        with open(target, "wb") as f:
            return f.write(payload)
    except OSError as exc:
        raise WriteFailure(target, f"Failed to write file: {exc}", exc) from exc
