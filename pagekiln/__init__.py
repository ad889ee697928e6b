"""pagekiln incremental static page builder.

This package compiles page components, callables mapping a data record to an
HTML string, into files on disk. Output whose content fingerprint matches the
one cached from the previous build is skipped, so re-running a build only
touches pages whose rendered HTML actually changed.

The main entry points are BuildEngine.compile and BuildEngine.build_many; the
CLI module wraps them for use from the shell.

Architecture:
- paths: Placeholder substitution in output path patterns
- cache: Per-path content fingerprints with atomic entry writes
- hooks: before/after render and write extension points
- engine: The resolve, render, hash, write cycle
"""

from .cache import ContentCache
from .config import BuildConfig, load_config
from .engine import BuildEngine, BuildResult, BuildStatus
from .errors import (
    BuildError,
    CacheReadFailure,
    DirectoryCreationFailure,
    InvalidCapability,
    WriteFailure,
)
from .hooks import HookPipeline
from .paths import PathResolver, resolve

__all__ = [
    "BuildConfig",
    "BuildEngine",
    "BuildError",
    "BuildResult",
    "BuildStatus",
    "CacheReadFailure",
    "ContentCache",
    "DirectoryCreationFailure",
    "HookPipeline",
    "InvalidCapability",
    "PathResolver",
    "WriteFailure",
    "__version__",
    "load_config",
    "resolve",
]
__version__ = "0.1.0"
