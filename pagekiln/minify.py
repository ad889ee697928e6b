"""HTML minification for rendered pages.

Minification is not part of the build engine; register ``minify_hook`` as
an after-render hook to apply it to every compiled page.

Functions:
    minify_html: Collapse whitespace and strip comments from HTML.
    minify_hook: minify_html with the after-render hook signature.
"""

from __future__ import annotations

import re
from typing import Any

_BETWEEN_TAGS_RE = re.compile(r">\s+<")
_WHITESPACE_RE = re.compile(r"\s+")
# IE conditional comments are kept
_COMMENT_RE = re.compile(r"<!--(?!\[if).*?-->")


def minify_html(html: str) -> str:
    """Minify an HTML string.

    Whitespace inside ``<pre>`` and ``<textarea>`` is collapsed as well, so
    pages relying on it should not be minified.

    Args:
        html: HTML to minify.

    Returns:
        Minified HTML.

    Examples:
        >>> minify_html("<p>\\n  Hi  there\\n</p>  <!-- note -->")
        '<p> Hi there </p>'
    """
    html = _BETWEEN_TAGS_RE.sub("><", html)
    html = _WHITESPACE_RE.sub(" ", html)
    html = _COMMENT_RE.sub("", html)
    return html.strip()


def minify_hook(data: Any, html: str) -> str:
    """After-render hook applying minify_html."""
    return minify_html(html)
