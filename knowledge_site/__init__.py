"""Static documentation site assembler for Markdown notebooks.

The package turns a folder of Markdown/MDX notes plus a ``site.yaml`` into a
static site with a navbar, an ordered sidebar, a footer, and an announcement
bar, all served under a configurable base URL.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from knowledge_site import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

import logging

from .cli import app, main

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["app", "main"]
