"""Entry point for the pagekiln CLI.

This module serves as the main entry point when running the pagekiln package
directly with ``python -m pagekiln``.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
