"""Discover Markdown sources and load them into immutable documents.

:class:`ContentLoader` walks a docs directory, parses every ``.md``/``.mdx``
file (front-matter, title, headings and outgoing links) and returns a
:class:`DocumentSet` keyed by slug. Every load rescans the whole tree; nothing
is cached between calls, so iterating a loader twice reflects the files on
disk at the time of each iteration.

Example
-------
>>> from pathlib import Path
>>> from docsite.loader import ContentLoader
>>> documents = ContentLoader(Path("docs")).load()  # doctest: +SKIP
>>> documents["intro"].title  # doctest: +SKIP
'Welcome'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import posixpath
import typing as typ
from pathlib import Path, PurePosixPath

from ._constants import DOCUMENT_EXTENSIONS
from .errors import DuplicateSlugError, ParseError
from .markdown_parser import (
    FrontMatterError,
    extract_headings,
    extract_links,
    extract_title,
    split_front_matter,
)

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True, frozen=True)
class Document:
    """A parsed source document.

    Attributes
    ----------
    slug : str
        Unique identifier used for routing and cross-references.
    title : str
        Display title.
    body : str
        Markdown content without the front-matter block.
    headings : tuple[str, ...]
        Section headings (levels two to six) in document order.
    links : tuple[str, ...]
        Unique outgoing link targets in first-seen order.
    source_path : PurePosixPath
        Path of the source file relative to the docs root.
    description : str | None
        Optional summary from front-matter.
    position : int | None
        Optional ordering hint (``sidebar_position``) for generated navigation.
    """

    slug: str
    title: str
    body: str
    headings: tuple[str, ...] = ()
    links: tuple[str, ...] = ()
    source_path: PurePosixPath = PurePosixPath()
    description: str | None = None
    position: int | None = None

    @property
    def source_stem(self) -> str:
        """Return the source path without its extension, as a POSIX string."""
        return self.source_path.with_suffix("").as_posix()

    @property
    def directory(self) -> str:
        """Return the source directory relative to the docs root ('' at top)."""
        parent = self.source_path.parent.as_posix()
        return "" if parent == "." else parent


class DocumentSet(cabc.Mapping[str, Document]):
    """Read-only, slug-keyed collection of documents in load order."""

    __slots__ = ("_documents",)

    def __init__(self, documents: cabc.Iterable[Document] = ()) -> None:
        indexed: dict[str, Document] = {}
        for document in documents:
            existing = indexed.get(document.slug)
            if existing is not None:
                raise DuplicateSlugError(
                    document.slug,
                    Path(existing.source_path),
                    Path(document.source_path),
                )
            indexed[document.slug] = document
        self._documents = indexed

    def __getitem__(self, slug: str) -> Document:
        return self._documents[slug]

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __repr__(self) -> str:
        return f"DocumentSet({list(self._documents)!r})"

    @property
    def documents(self) -> tuple[Document, ...]:
        """Return the documents in load order."""
        return tuple(self._documents.values())

    def by_source(self) -> dict[str, str]:
        """Return a mapping of extension-less source paths to slugs."""
        return {document.source_stem: document.slug for document in self.documents}


class ContentLoader:
    """Load every Markdown document found under a root directory."""

    def __init__(
        self,
        root: Path,
        *,
        extensions: cabc.Iterable[str] = DOCUMENT_EXTENSIONS,
    ) -> None:
        """Initialize the loader.

        Parameters
        ----------
        root : Path
            Docs directory to scan recursively.
        extensions : Iterable[str], optional
            File suffixes treated as documents; defaults to ``.md`` and
            ``.mdx``.
        """
        self.root = root
        self.extensions = frozenset(ext.lower() for ext in extensions)

    def __iter__(self) -> cabc.Iterator[Document]:
        """Yield freshly loaded documents; each iteration rescans the tree."""
        return iter(self.load().documents)

    def load(self) -> DocumentSet:
        """Scan the root directory and return the loaded documents.

        Returns
        -------
        DocumentSet
            Documents in sorted source-path order.

        Raises
        ------
        FileNotFoundError
            If the root directory does not exist.
        ParseError
            If a document's front-matter is malformed.
        DuplicateSlugError
            If two documents resolve to the same slug. The whole tree is
            checked before anything is returned, so no documents are produced.
        OSError
            If a source file cannot be read.
        """
        if not self.root.is_dir():
            msg = f"Docs directory '{self.root}' not found."
            raise FileNotFoundError(msg)
        documents = DocumentSet(self.scan())
        logger.debug("loaded %d documents from %s", len(documents), self.root)
        return documents

    def scan(self) -> cabc.Iterator[Document]:
        """Lazily parse each source file under the root, in sorted order."""
        for path in self._discover():
            yield self.parse(path)

    def parse(self, path: Path) -> Document:
        """Parse a single source file into a :class:`Document`."""
        relative = PurePosixPath(path.relative_to(self.root).as_posix())
        text = path.read_text(encoding="utf-8")
        try:
            meta, body = split_front_matter(text)
        except FrontMatterError as exc:
            raise ParseError(path, str(exc)) from exc

        slug = _resolve_slug(meta, relative, path)
        title = _string_field(meta, "title", path) or extract_title(body)
        document = Document(
            slug=slug,
            title=title or posixpath.basename(slug) or slug,
            body=body,
            headings=extract_headings(body),
            links=extract_links(body),
            source_path=relative,
            description=_string_field(meta, "description", path),
            position=_position_field(meta, path),
        )
        logger.debug("parsed %s as %r", relative, slug)
        return document

    def _discover(self) -> list[Path]:
        """Return source files, skipping hidden and ``_``-prefixed partials."""
        return sorted(
            path
            for path in self.root.rglob("*")
            if path.is_file()
            and path.suffix.lower() in self.extensions
            and not any(
                part.startswith((".", "_"))
                for part in path.relative_to(self.root).parts
            )
        )


def _string_field(meta: typ.Mapping[str, typ.Any], key: str, path: Path) -> str | None:
    """Return a stripped string front-matter field, rejecting other types."""
    value = meta.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseError(path, f"front-matter '{key}' must be a string")
    return value.strip() or None


def _position_field(meta: typ.Mapping[str, typ.Any], path: Path) -> int | None:
    value = meta.get("sidebar_position")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseError(path, "front-matter 'sidebar_position' must be an integer")
    return value


def _resolve_slug(
    meta: typ.Mapping[str, typ.Any], relative: PurePosixPath, path: Path
) -> str:
    """Derive the slug from ``slug``/``id`` front-matter or the source path."""
    explicit = _string_field(meta, "slug", path)
    if explicit is not None:
        if not explicit.strip("/"):
            raise ParseError(
                path,
                "front-matter 'slug' must name a page; "
                "'/' is reserved for the generated landing page",
            )
        return _contained(explicit.strip("/"), "slug", path)
    doc_id = _string_field(meta, "id", path)
    stem = relative.with_suffix("").as_posix()
    if doc_id is not None:
        stem = posixpath.join(posixpath.dirname(stem), doc_id.strip("/"))
        return _contained(stem, "id", path)
    return stem


def _contained(slug: str, field: str, path: Path) -> str:
    """Normalise ``slug``, rejecting values that climb out of the docs tree."""
    normalised = posixpath.normpath(slug)
    if normalised in {".", ".."} or normalised.startswith("../"):
        raise ParseError(
            path, f"front-matter {field!r} must stay inside the docs tree"
        )
    return normalised


__all__ = ["ContentLoader", "Document", "DocumentSet"]
