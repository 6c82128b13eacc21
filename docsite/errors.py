"""Build errors raised by the docsite pipeline.

Every stage raises a subclass of :class:`BuildError` when it detects a fatal
inconsistency. The CLI is the only place these are caught; it reports the
message and exits with a non-zero status.

Examples
--------
>>> from docsite.errors import UnresolvedReferenceError
>>> err = UnresolvedReferenceError(["missing-doc"])
>>> err.missing
('missing-doc',)
>>> str(err)
"Navigation references unknown documents: 'missing-doc'"
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .links import LinkViolation


class BuildError(RuntimeError):
    """Base class for errors that abort a site build."""


class ParseError(BuildError):
    """Raised when a source document cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse '{path}': {reason}")


class DuplicateSlugError(BuildError):
    """Raised when two source documents resolve to the same slug."""

    def __init__(self, slug: str, first: Path, second: Path) -> None:
        self.slug = slug
        self.paths = (first, second)
        super().__init__(
            f"Duplicate document slug '{slug}' declared by '{first}' and '{second}'"
        )


class NavigationSpecError(BuildError):
    """Raised when a navigation entry has an unrecognised shape."""


class UnresolvedReferenceError(BuildError):
    """Raised when navigation entries point at documents that were not loaded."""

    def __init__(self, missing: cabc.Iterable[str]) -> None:
        self.missing = tuple(missing)
        listed = ", ".join(repr(target) for target in self.missing)
        super().__init__(f"Navigation references unknown documents: {listed}")


class BrokenLinkError(BuildError):
    """Raised on the first broken link when the policy is ``throw``."""

    def __init__(self, violation: LinkViolation) -> None:
        self.violation = violation
        super().__init__(
            f"Broken link in '{violation.source}': '{violation.target}' "
            "does not resolve to a known document"
        )


__all__ = [
    "BrokenLinkError",
    "BuildError",
    "DuplicateSlugError",
    "NavigationSpecError",
    "ParseError",
    "UnresolvedReferenceError",
]
