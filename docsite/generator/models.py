"""Shared dataclasses used by the page rendering pipeline."""

from __future__ import annotations

import dataclasses as dc
from pathlib import PurePosixPath  # noqa: TC003 - used for runtime type metadata


@dc.dataclass(slots=True, frozen=True)
class TocEntry:
    """Table-of-contents entry generated from a heading.

    Attributes
    ----------
    label : str
        Heading text.
    anchor : str
        ``id`` attribute of the heading element.
    level : int
        Heading level (``2`` for ``##``).
    """

    label: str
    anchor: str
    level: int


@dc.dataclass(slots=True, frozen=True)
class RenderedMarkdown:
    """HTML produced from a Markdown body plus its table of contents."""

    html: str
    toc: tuple[TocEntry, ...] = ()


@dc.dataclass(slots=True, frozen=True)
class RenderedPage:
    """A static output file.

    Attributes
    ----------
    path : PurePosixPath
        Location relative to the output directory.
    content : str
        Complete file contents.
    slug : str | None
        Slug of the document rendered into the page; ``None`` for auxiliary
        pages such as the site index.
    """

    path: PurePosixPath
    content: str
    slug: str | None = None


__all__ = ["RenderedMarkdown", "RenderedPage", "TocEntry"]
