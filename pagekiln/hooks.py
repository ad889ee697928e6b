"""Hook pipeline for the render/write cycle.

The engine calls four extension points per compile, always in this order:
before_render, after_render, before_write, after_write. Every point holds a
list of plain callables that run synchronously, in registration order, on
the caller's stack. A hook that raises aborts the compile.

Key class:
- HookPipeline: Holds the registered callables and runs each point.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .protocols import AfterRender, AfterWrite, BeforeRender, BeforeWrite

BeforeRenderHook = Callable[[Any], Any]
AfterRenderHook = Callable[[Any, str], "str | None"]
BeforeWriteHook = Callable[[Any, Path], "Path | str | None"]
AfterWriteHook = Callable[[Path, int], None]


@dataclass
class HookPipeline:
    """Ordered extension points around rendering and writing.

    Each hook may return a replacement value; returning None keeps the
    current one, so hooks that mutate a record in place need not return it.

    Attributes:
        before_render: Called with the record before the page runs.
        after_render: Called with the record and HTML after the page runs.
        before_write: Called with the record and resolved output path.
        after_write: Called with the written path and byte count.
    """

    before_render: list[BeforeRenderHook] = field(default_factory=list)
    after_render: list[AfterRenderHook] = field(default_factory=list)
    before_write: list[BeforeWriteHook] = field(default_factory=list)
    after_write: list[AfterWriteHook] = field(default_factory=list)

    def add_before_render(self, hook: BeforeRenderHook) -> BeforeRenderHook:
        """Register a before-render hook. Usable as a decorator."""
        self.before_render.append(hook)
        return hook

    def add_after_render(self, hook: AfterRenderHook) -> AfterRenderHook:
        """Register an after-render hook. Usable as a decorator."""
        self.after_render.append(hook)
        return hook

    def add_before_write(self, hook: BeforeWriteHook) -> BeforeWriteHook:
        """Register a before-write hook. Usable as a decorator."""
        self.before_write.append(hook)
        return hook

    def add_after_write(self, hook: AfterWriteHook) -> AfterWriteHook:
        """Register an after-write hook. Usable as a decorator."""
        self.after_write.append(hook)
        return hook

    def register(self, obj: Any) -> int:
        """Register every hook method an object implements.

        Args:
            obj: Object with any of before_render, after_render,
                before_write or after_write methods.

        Returns:
            Number of hooks registered.
        """
        count = 0
        if isinstance(obj, BeforeRender):
            self.add_before_render(obj.before_render)
            count += 1
        if isinstance(obj, AfterRender):
            self.add_after_render(obj.after_render)
            count += 1
        if isinstance(obj, BeforeWrite):
            self.add_before_write(obj.before_write)
            count += 1
        if isinstance(obj, AfterWrite):
            self.add_after_write(obj.after_write)
            count += 1
        return count

    def run_before_render(self, data: Any) -> Any:
        for hook in self.before_render:
            result = hook(data)
            if result is not None:
                data = result
        return data

    def run_after_render(self, data: Any, html: str) -> str:
        for hook in self.after_render:
            result = hook(data, html)
            if result is not None:
                html = result
        return html

    def run_before_write(self, data: Any, path: Path) -> Path:
        for hook in self.before_write:
            result = hook(data, path)
            if result is not None:
                path = Path(result)
        return path

    def run_after_write(self, path: Path, bytes_written: int) -> None:
        for hook in self.after_write:
            hook(path, bytes_written)
