"""Content fingerprint cache for incremental builds.

For every output path the cache stores the fingerprint of the content last
written there. Entry files are named by the fingerprint of the path itself,
so names stay fixed-length and filesystem-safe however deep the path is:

    cache/hashes/<hash(path)>.hash   ->   <hash(content)>

Key class:
- ContentCache: Reads and atomically writes cache entries.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import CacheReadFailure
from .filesystem import atomic_write_text, ensure_directory
from .hashing import DEFAULT_ALGORITHM, Hasher, get_hasher

logger = logging.getLogger(__name__)


class ContentCache:
    """Persists one content fingerprint per output path.

    Attributes:
        directory: Directory holding the entry files.
        suffix: File suffix of entry files.
    """

    def __init__(
        self,
        directory: Path,
        algorithm: str | Hasher = DEFAULT_ALGORITHM,
        suffix: str = ".hash",
    ):
        """Initialize the cache.

        Args:
            directory: Directory for entry files; created on first write.
            algorithm: Algorithm name or a text -> hex digest callable.
            suffix: File suffix for entry files.
        """
        self.directory = Path(directory)
        self.suffix = suffix
        self._hash = algorithm if callable(algorithm) else get_hasher(algorithm)

    def fingerprint(self, content: str) -> str:
        """Return the fingerprint of some content."""
        return self._hash(content)

    def entry_path(self, path: Path | str) -> Path:
        """Return the entry file used for an output path."""
        return self.directory / f"{self._hash(str(path))}{self.suffix}"

    def get(self, path: Path | str) -> str | None:
        """Return the stored fingerprint for an output path.

        Args:
            path: Output path the entry belongs to.

        Returns:
            The stored fingerprint, or None if no entry exists.

        Raises:
            CacheReadFailure: If the entry exists but cannot be read.
        """
        entry = self.entry_path(path)
        if not entry.is_file():
            logger.debug("Cache miss for %s", path)
            return None
        try:
            return entry.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheReadFailure(
                entry, f"Failed to read cache entry: {exc}", exc
            ) from exc

    def set(self, path: Path | str, content: str) -> str:
        """Store the fingerprint of content for an output path.

        Args:
            path: Output path the entry belongs to.
            content: Content that was written to the path.

        Returns:
            The stored fingerprint.

        Raises:
            DirectoryCreationFailure: If the cache directory cannot be created.
            WriteFailure: If the entry cannot be written or renamed into place.
        """
        value = self.fingerprint(content)
        ensure_directory(self.directory)
        atomic_write_text(self.entry_path(path), value)
        return value

    def is_fresh(self, path: Path | str, content: str) -> bool:
        """Check whether content matches the stored fingerprint for a path."""
        return self.get(path) == self.fingerprint(content)

    def entries(self) -> list[Path]:
        """Return every entry file currently in the cache directory."""
        if not self.directory.is_dir():
            return []
        return sorted(
            p for p in self.directory.glob(f"*{self.suffix}") if p.is_file()
        )

    def clear(self) -> int:
        """Remove every entry file.

        Builds never call this; it exists for explicit cache resets.

        Returns:
            Number of entries removed.
        """
        removed = 0
        for entry in self.entries():
            entry.unlink()
            removed += 1
        logger.info("Removed %d cache entries from %s", removed, self.directory)
        return removed
