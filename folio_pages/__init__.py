"""Build static websites from a tree of Markdown files.

This package exposes the CLI entry points used by ``folio build``,
``folio serve``, and ``folio clean``.

Exports
-------
- ``app``: Cyclopts application with the subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from folio_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
