"""Content fingerprints for pagekiln.

Fingerprints are hex digests used for cheap equality checks, not security.
The default algorithm is xxh3 (64-bit); any algorithm guaranteed by hashlib
can be selected instead.

Functions:
    get_hasher: Return a text -> hex digest function for an algorithm name.
    available_algorithms: List the accepted algorithm names.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable

import xxhash

Hasher = Callable[[str], str]

DEFAULT_ALGORITHM = "xxh3"

_XXHASH_FUNCTIONS = {
    "xxh3": xxhash.xxh3_64_hexdigest,
    "xxh3_64": xxhash.xxh3_64_hexdigest,
    "xxh3_128": xxhash.xxh3_128_hexdigest,
    "xxh64": xxhash.xxh64_hexdigest,
    "xxh32": xxhash.xxh32_hexdigest,
}

# shake_* digests need an explicit length
_HASHLIB_ALGORITHMS = sorted(
    name for name in hashlib.algorithms_guaranteed if not name.startswith("shake")
)


def available_algorithms() -> list[str]:
    """Return every algorithm name accepted by get_hasher."""
    return sorted(_XXHASH_FUNCTIONS) + _HASHLIB_ALGORITHMS


def get_hasher(name: str = DEFAULT_ALGORITHM) -> Hasher:
    """Return a function hashing UTF-8 text to a hex digest.

    Args:
        name: Algorithm name, e.g. "xxh3", "xxh64" or "sha256".

    Returns:
        Callable taking a string and returning its hex digest.

    Raises:
        ValueError: If the algorithm is unknown.

    Examples:
        >>> len(get_hasher("xxh3")("hello"))
        16
    """
    key = name.lower()
    if key in _XXHASH_FUNCTIONS:
        digest = _XXHASH_FUNCTIONS[key]
        return lambda text: digest(text.encode("utf-8"))
    if key in _HASHLIB_ALGORITHMS:
        return lambda text: hashlib.new(key, text.encode("utf-8")).hexdigest()
    raise ValueError(
        f"Unknown hash algorithm: {name} "
        f"(expected one of {', '.join(available_algorithms())})"
    )
