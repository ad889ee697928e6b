"""Protocol definitions for pagekiln.

These protocols describe the collaborators the build engine talks to:
the page capability that produces HTML, and the four hook interfaces that
observe or adjust the render/write cycle.

They enable:
- Loose coupling between the engine and page components
- Easy testing through plain functions or small stub objects
- Hook objects that implement only the extension points they need
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PageCapability(Protocol):
    """A component that renders a data record to HTML.

    Implementations must be pure functions of their input for unchanged
    output to be skipped reliably.
    """

    @abstractmethod
    def __call__(self, data: Any) -> str:
        """Render the record.

        Args:
            data: Mapping or object with the page's data.

        Returns:
            Rendered HTML string.
        """
        ...


@runtime_checkable
class BeforeRender(Protocol):
    """Hook run before the page is invoked."""

    @abstractmethod
    def before_render(self, data: Any) -> Any | None:
        """Adjust the record in place, or return a replacement record."""
        ...


@runtime_checkable
class AfterRender(Protocol):
    """Hook run after the page has produced HTML."""

    @abstractmethod
    def after_render(self, data: Any, html: str) -> str | None:
        """Return replacement HTML, or None to keep it."""
        ...


@runtime_checkable
class BeforeWrite(Protocol):
    """Hook run once the output path is known, before anything is written."""

    @abstractmethod
    def before_write(self, data: Any, path: Path) -> Path | str | None:
        """Return a replacement output path, or None to keep it."""
        ...


@runtime_checkable
class AfterWrite(Protocol):
    """Hook run after a file was written. Return values are ignored."""

    @abstractmethod
    def after_write(self, path: Path, bytes_written: int) -> None:
        """Observe a completed write."""
        ...
