"""Placeholder-based output path resolution.

Output paths are patterns such as ``/posts/{{ slug }}.html``. Each placeholder
token is looked up in the record being built and replaced with the string
form of its value.

Key pieces:
- resolve: Substitute placeholder tokens in a pattern string.
- parse_delimiters: Normalize a delimiter spec to an (open, close) pair.
- PathResolver: Joins substituted patterns onto a build root.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, Tuple, Union

DEFAULT_DELIMITERS = ("{{", "}}")

DelimiterSpec = Union[str, Tuple[str, str], None]

_MISSING = object()


def parse_delimiters(spec: DelimiterSpec) -> tuple[str, str]:
    """Normalize a delimiter spec to an (open, close) pair.

    Args:
        spec: None, a whitespace-separated pair like ``"[[ ]]"``, or a tuple.

    Returns:
        The (open, close) pair, or the default pair when fewer than two
        tokens are given.

    Examples:
        >>> parse_delimiters("[[ ]]")
        ('[[', ']]')

        >>> parse_delimiters("<<")
        ('{{', '}}')
    """
    if spec is None:
        return DEFAULT_DELIMITERS
    parts = spec.split() if isinstance(spec, str) else [p for p in spec if p]
    if len(parts) < 2:
        return DEFAULT_DELIMITERS
    return parts[0], parts[1]


@lru_cache(maxsize=32)
def _placeholder_re(open_: str, close: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(open_)}\s*(.*?)\s*{re.escape(close)}")


def lookup(data: Any, key: str) -> Any:
    """Look a key up in a record.

    Mappings use item lookup only. Other objects try item lookup first
    (row types such as ``sqlite3.Row``), then attribute lookup.

    Returns:
        The value, or an internal sentinel when the key is absent.
    """
    if isinstance(data, Mapping):
        return data.get(key, _MISSING)
    if data is None or not key:
        return _MISSING
    if hasattr(data, "__getitem__") and not isinstance(data, (str, bytes)):
        try:
            return data[key]
        except (KeyError, IndexError, TypeError):
            pass
    return getattr(data, key, _MISSING)


def _to_text(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    return str(value)


def resolve(
    pattern: str,
    data: Any,
    delimiters: DelimiterSpec = DEFAULT_DELIMITERS,
) -> str:
    """Substitute placeholder tokens in a pattern.

    Tokens naming keys absent from ``data`` become empty strings. Substituted
    values are not scanned again, and a dangling delimiter is left as-is.

    Args:
        pattern: Pattern containing tokens such as ``{{slug}}``.
        data: Mapping or object supplying the values.
        delimiters: Delimiter pair or pair string.

    Returns:
        The pattern with every token replaced.

    Examples:
        >>> resolve("/posts/{{slug}}.html", {"slug": "hello"})
        '/posts/hello.html'

        >>> resolve("/posts/{{missing}}.html", {"slug": "hello"})
        '/posts/.html'
    """
    open_, close = parse_delimiters(delimiters)
    regex = _placeholder_re(open_, close)
    return regex.sub(lambda m: _to_text(lookup(data, m.group(1).strip())), pattern)


class PathResolver:
    """Resolves output path patterns to absolute paths under a build root.

    Attributes:
        build_root: Directory that every resolved path is joined onto.
        delimiters: Default delimiter pair for this resolver.
    """

    def __init__(
        self,
        build_root: Path,
        delimiters: DelimiterSpec = None,
    ):
        self.build_root = Path(build_root)
        self.delimiters = parse_delimiters(delimiters)

    def resolve(
        self,
        pattern: str,
        data: Any,
        delimiters: DelimiterSpec = None,
    ) -> Path:
        """Resolve a pattern for a record.

        Args:
            pattern: Output path pattern, relative to the build root.
            data: Record supplying placeholder values.
            delimiters: Optional per-call delimiter override.

        Returns:
            Absolute output path.
        """
        pair = parse_delimiters(delimiters) if delimiters else self.delimiters
        relative = resolve(pattern, data, pair)
        return self.build_root / relative.lstrip("/")
