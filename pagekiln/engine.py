"""Incremental build engine for pagekiln.

This module compiles page components to files on disk. For every record it
renders the page, resolves the output path, and writes the file only when
the content fingerprint differs from the one cached for that path.

Key classes:
- BuildEngine: Runs the resolve/render/hash/write cycle for one page.
- BuildResult: Outcome of a compile or of a whole dataset build.
- BuildStatus: Written, skipped or failed.

Each compile moves through Resolving, Rendering, Hashing, then either Skip
or Writing, and ends Cataloged (entry updated) or Failed (error raised).
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .cache import ContentCache
from .config import BuildConfig
from .errors import InvalidCapability
from .filesystem import ensure_directory, write_bytes
from .hooks import HookPipeline
from .paths import DelimiterSpec, PathResolver
from .protocols import PageCapability

logger = logging.getLogger(__name__)


class BuildStatus(enum.Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class BuildResult:
    """Result of a compile or build operation.

    Attributes:
        status: Whether output was written, skipped as unchanged, or failed.
        bytes_written: Bytes written; 0 for skipped and failed results.
        path: Output path of a single compile.
        records: Number of records the result covers. A failed aggregate
            counts the records compiled, including the one that failed.
        error: The exception behind a failed result.
    """

    status: BuildStatus
    bytes_written: int = 0
    path: Path | None = None
    records: int = 1
    error: BaseException | None = None

    @classmethod
    def written(cls, path: Path, bytes_written: int) -> BuildResult:
        return cls(BuildStatus.WRITTEN, bytes_written, path)

    @classmethod
    def skipped(cls, path: Path) -> BuildResult:
        return cls(BuildStatus.SKIPPED, 0, path)

    @classmethod
    def failed(
        cls, error: BaseException, path: Path | None = None, records: int = 1
    ) -> BuildResult:
        return cls(BuildStatus.FAILED, 0, path, records, error)

    @property
    def ok(self) -> bool:
        return self.status is not BuildStatus.FAILED

    def raise_for_failure(self) -> None:
        """Re-raise the captured error of a failed result."""
        if self.error is not None:
            raise self.error


class BuildEngine:
    """Compiles one page component to static files.

    The engine owns no global state: the page, configuration, hooks, cache
    and path resolver are all passed in, with the last two derived from the
    configuration when omitted.

    Attributes:
        page: Callable rendering a record to HTML.
        config: Build configuration.
        hooks: Hook pipeline run around rendering and writing.
        cache: Fingerprint cache deciding skip-versus-write.
        resolver: Resolver turning path patterns into output paths.
    """

    def __init__(
        self,
        page: PageCapability,
        config: BuildConfig | None = None,
        hooks: HookPipeline | None = None,
        cache: ContentCache | None = None,
        resolver: PathResolver | None = None,
    ):
        """Initialize the engine.

        Args:
            page: Callable rendering a record to HTML.
            config: Build configuration; defaults to the current directory.
            hooks: Optional hook pipeline.
            cache: Optional fingerprint cache.
            resolver: Optional path resolver.

        Raises:
            InvalidCapability: If page is not callable.
        """
        if not callable(page):
            raise InvalidCapability(
                f"Page component {page!r} must be callable with a data record."
            )
        self.page = page
        self.config = config or BuildConfig()
        self.hooks = hooks or HookPipeline()
        self.cache = cache or ContentCache(
            self.config.hashes_root,
            algorithm=self.config.algorithm,
            suffix=self.config.suffix,
        )
        self.resolver = resolver or PathResolver(
            self.config.build_root, self.config.delimiters
        )

    def compile(
        self, pattern: str, data: Any, delimiters: DelimiterSpec = None
    ) -> BuildResult:
        """Compile one record to a file.

        Args:
            pattern: Output path pattern relative to the build root, e.g.
                ``/posts/{{slug}}.html``.
            data: Record passed to the hooks, the page and the resolver.
            delimiters: Optional placeholder delimiters, e.g. ``"[[ ]]"``.

        Returns:
            A written result with the byte count, or a skipped result when
            the content is unchanged since the last build.

        Raises:
            InvalidCapability: If the page does not return a string.
            DirectoryCreationFailure: If a directory cannot be created.
            CacheReadFailure: If the cache entry cannot be read.
            WriteFailure: If the output or cache entry cannot be written.
        """
        data = self.hooks.run_before_render(data)
        html = self.page(data)
        if not isinstance(html, str):
            raise InvalidCapability(
                f"Page component {self.page!r} returned "
                f"{type(html).__name__}, expected str."
            )
        html = self.hooks.run_after_render(data, html)

        path = self.resolver.resolve(pattern, data, delimiters)
        path = self.hooks.run_before_write(data, path)
        ensure_directory(path.parent)

        stored = self.cache.get(path)
        if stored == self.cache.fingerprint(html) and path.is_file():
            logger.debug("Unchanged, skipping %s", path)
            return BuildResult.skipped(path)

        bytes_written = write_bytes(path, html.encode("utf-8"))
        self.cache.set(path, html)
        logger.info("Wrote %s (%d bytes)", path, bytes_written)
        self.hooks.run_after_write(path, bytes_written)
        return BuildResult.written(path, bytes_written)

    def build_each(
        self, pattern: str, dataset: Iterable[Any], delimiters: DelimiterSpec = None
    ) -> Iterator[BuildResult]:
        """Compile records in order, yielding one result per record.

        Iteration stops after the first failure, which is yielded as a
        failed result. Files written before it stay on disk.

        Args:
            pattern: Output path pattern.
            dataset: Records to compile.
            delimiters: Optional placeholder delimiters.

        Yields:
            BuildResult for each compiled record.
        """
        for index, data in enumerate(dataset):
            try:
                result = self.compile(pattern, data, delimiters)
            except Exception as exc:
                logger.debug(
                    "Build failed at record %d: %s", index, exc, exc_info=True
                )
                yield BuildResult.failed(exc)
                return
            yield result

    def build_many(
        self, pattern: str, dataset: Iterable[Any], delimiters: DelimiterSpec = None
    ) -> BuildResult:
        """Compile every record and aggregate the results.

        Args:
            pattern: Output path pattern.
            dataset: Records to compile, in order.
            delimiters: Optional placeholder delimiters.

        Returns:
            A result summing the bytes written across records, or the failed
            result of the first record that raised. No partial byte count is
            reported on failure.
        """
        total = 0
        records = 0
        status = BuildStatus.SKIPPED
        for result in self.build_each(pattern, dataset, delimiters):
            if not result.ok:
                return BuildResult.failed(result.error, records=records + 1)
            records += 1
            total += result.bytes_written
            if result.status is BuildStatus.WRITTEN:
                status = BuildStatus.WRITTEN
        return BuildResult(status, total, records=records)
