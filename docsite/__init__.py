"""Static documentation-site generator.

``docsite`` loads Markdown documents with YAML front-matter, resolves a
declarative sidebar into a navigation tree, validates cross-references under a
configurable broken-link policy, and renders themed static HTML.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from docsite import main
>>> main()  # doctest: +SKIP
>>> from docsite import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
