"""Error types for pagekiln.

Every failure the build engine can raise derives from BuildError, so callers
can catch one type around ``compile``/``build_many`` and still tell the
failure kinds apart.

Key classes:
- BuildError: Base error carrying the offending path.
- InvalidCapability: The page component is missing or not invokable.
- DirectoryCreationFailure: An output or cache directory could not be created.
- CacheReadFailure: An existing cache entry could not be read.
- WriteFailure: An output file or cache entry could not be written.
"""

from __future__ import annotations

from pathlib import Path


class BuildError(Exception):
    """Error during a build with file context.

    Attributes:
        path: Path the failure relates to, if any.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        path: Path | str | None,
        message: str,
        original_error: Exception | None = None,
    ):
        self.path = Path(path) if path is not None else None
        self.message = message
        self.original_error = original_error
        super().__init__(f"{path}: {message}" if path is not None else message)


class InvalidCapability(BuildError, ValueError):
    """Raised when a page component cannot be resolved or called."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(None, message, original_error)


class DirectoryCreationFailure(BuildError):
    """Raised when an output or cache directory cannot be created."""


class CacheReadFailure(BuildError):
    """Raised when a cache entry exists but cannot be read."""


class WriteFailure(BuildError):
    """Raised when an output file or cache entry cannot be written."""
