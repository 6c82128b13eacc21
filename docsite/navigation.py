"""Resolve a declarative sidebar specification into a navigation tree.

The sidebar file is a YAML list whose entries name documents, external links,
nested categories, or autogenerated sections. :func:`parse_navigation_spec`
turns that loose structure into tagged items (:class:`DocumentRef`,
:class:`LinkRef`, :class:`GroupRef`, :class:`AutogeneratedRef`) and
:class:`NavigationBuilder` resolves them against the loaded documents into a
tree of :class:`NavigationNode` objects. Child order always follows the order
of declaration.

Example
-------
>>> from docsite.navigation import parse_navigation_spec
>>> parse_navigation_spec([{"label": "Intro", "target": "intro"}])
(DocumentRef(doc_id='intro', label='Intro'),)
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import logging
import sys
import typing as typ

from ruamel.yaml import YAML

from .errors import NavigationSpecError, UnresolvedReferenceError
from .links import is_external_url

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import SiteConfig
    from .loader import Document, DocumentSet

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True, frozen=True)
class DocumentRef:
    """Sidebar entry pointing at a loaded document."""

    doc_id: str
    label: str | None = None


@dc.dataclass(slots=True, frozen=True)
class LinkRef:
    """Sidebar entry pointing at an external URL."""

    label: str
    href: str


@dc.dataclass(slots=True, frozen=True)
class GroupRef:
    """Labelled category with nested entries and an optional index document."""

    label: str
    items: tuple[NavItem, ...] = ()
    doc_id: str | None = None


@dc.dataclass(slots=True, frozen=True)
class AutogeneratedRef:
    """Placeholder expanded to every document under ``directory``."""

    directory: str = "."


NavItem = DocumentRef | LinkRef | GroupRef | AutogeneratedRef


class NodeKind(enum.StrEnum):
    """Kind of a resolved navigation node."""

    DOC = "doc"
    LINK = "link"
    CATEGORY = "category"


@dc.dataclass(slots=True, frozen=True)
class NavigationNode:
    """Resolved navigation entry.

    Attributes
    ----------
    label : str
        Text shown in menus.
    kind : NodeKind
        Whether the node is a document, an external link, or a category.
    target : str | None
        Document slug for ``doc`` nodes (and categories with an index
        document), URL for ``link`` nodes, ``None`` for plain categories.
    children : tuple[NavigationNode, ...]
        Child nodes in declaration order.
    """

    label: str
    kind: NodeKind
    target: str | None = None
    children: tuple[NavigationNode, ...] = ()

    @property
    def is_document(self) -> bool:
        """Return True when the node links to a document page."""
        return self.kind is not NodeKind.LINK and self.target is not None

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-serialisable representation of the subtree."""
        payload: dict[str, typ.Any] = {"label": self.label, "kind": self.kind.value}
        if self.target is not None:
            payload["target"] = self.target
        if self.children:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload


def parse_navigation_spec(raw: object) -> tuple[NavItem, ...]:
    """Convert a parsed sidebar structure into tagged navigation items.

    Parameters
    ----------
    raw : object
        List of entries as loaded from YAML. Strings name documents; mappings
        use ``target``/``label``, ``items`` (category) or an explicit ``type``
        of ``doc``, ``link``, ``category`` or ``autogenerated``.

    Raises
    ------
    NavigationSpecError
        If ``raw`` is not a list or an entry has an unrecognised shape.
    """
    if not isinstance(raw, list):
        msg = "Navigation specification must be a list of entries."
        raise NavigationSpecError(msg)
    return tuple(_parse_item(entry, f"[{index}]") for index, entry in enumerate(raw))


def _parse_item(entry: object, location: str) -> NavItem:  # noqa: PLR0911
    match entry:
        case str() as doc_id if doc_id.strip("/"):
            return DocumentRef(doc_id=doc_id.strip("/"))
        case {"type": "doc", "id": str() as doc_id, **rest}:
            return DocumentRef(doc_id=doc_id.strip("/"), label=_label(rest))
        case {"type": "link", "label": str() as label, "href": str() as href}:
            return LinkRef(label=label, href=href)
        case {"type": "autogenerated", **rest}:
            return AutogeneratedRef(directory=str(rest.get("dir") or "."))
        case {"type": "category", "label": str() as label, **rest}:
            return _parse_group(label, rest, location)
        case {"label": str() as label, "items": list() as items, **rest}:
            return _parse_group(label, {"items": items, **rest}, location)
        case {"label": str() as label, "target": str() as target}:
            if is_external_url(target):
                return LinkRef(label=label, href=target)
            return DocumentRef(doc_id=target.strip("/"), label=label)
        case _:
            msg = f"Unrecognised navigation entry at {location}: {entry!r}"
            raise NavigationSpecError(msg)


def _parse_group(
    label: str, payload: typ.Mapping[str, typ.Any], location: str
) -> GroupRef:
    items = payload.get("items") or []
    if not isinstance(items, list):
        msg = f"Category '{label}' at {location} must list its 'items'."
        raise NavigationSpecError(msg)
    doc_id: str | None = None
    match payload.get("link") or payload.get("target"):
        case None:
            pass
        case str() as target:
            doc_id = target.strip("/")
        case {"type": "doc", "id": str() as target}:
            doc_id = target.strip("/")
        case other:
            msg = f"Category '{label}' at {location} has an invalid link: {other!r}"
            raise NavigationSpecError(msg)
    children = tuple(
        _parse_item(child, f"{location}.items[{index}]")
        for index, child in enumerate(items)
    )
    return GroupRef(label=label, items=children, doc_id=doc_id)


def _label(payload: typ.Mapping[str, typ.Any]) -> str | None:
    value = payload.get("label")
    return value.strip() or None if isinstance(value, str) else None


def load_navigation_spec(path: Path) -> tuple[NavItem, ...]:
    """Read a YAML sidebar file and parse it into navigation items.

    The file holds either a list of entries or a mapping of named sidebars;
    with a mapping the ``docs`` sidebar is used when present, otherwise the
    first one declared.
    """
    if not path.exists():
        msg = f"Sidebar file '{path}' not found."
        raise FileNotFoundError(msg)
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle)
    match loaded:
        case list():
            raw = loaded
        case dict() if loaded:
            raw = loaded.get("docs", next(iter(loaded.values())))
        case _:
            msg = f"Sidebar file '{path}' must contain a list or named sidebars."
            raise NavigationSpecError(msg)
    return parse_navigation_spec(raw)


class NavigationBuilder:
    """Build the navigation tree for a site from its sidebar specification."""

    def __init__(self, config: SiteConfig) -> None:
        self.config = config

    def load_spec(self) -> tuple[NavItem, ...]:
        """Return the configured sidebar spec, or an autogenerated one."""
        if self.config.docs.sidebar_path is None:
            return (AutogeneratedRef(),)
        return load_navigation_spec(self.config.docs.sidebar_path)

    def build(
        self, spec: cabc.Sequence[NavItem], documents: DocumentSet
    ) -> tuple[NavigationNode, ...]:
        """Resolve ``spec`` against ``documents``.

        Parameters
        ----------
        spec : Sequence[NavItem]
            Parsed navigation items in declaration order.
        documents : DocumentSet
            Documents produced by the content loader.

        Returns
        -------
        tuple[NavigationNode, ...]
            Root nodes; every level preserves declaration order.

        Raises
        ------
        UnresolvedReferenceError
            Listing every document reference (including category index
            documents) that is absent from ``documents``.
        """
        missing: list[str] = []
        tree = self._build_items(spec, documents, missing)
        if missing:
            raise UnresolvedReferenceError(dict.fromkeys(missing))
        logger.debug("built navigation with %d root entries", len(tree))
        return tree

    def check_navbar(self, documents: DocumentSet) -> None:
        """Ensure navbar items that name documents resolve to loaded ones."""
        if self.config.navbar is None:
            return
        missing = [
            item.doc_id
            for item in self.config.navbar.items
            if item.doc_id is not None and item.doc_id not in documents
        ]
        if missing:
            raise UnresolvedReferenceError(dict.fromkeys(missing))

    def _build_items(
        self,
        items: cabc.Sequence[NavItem],
        documents: DocumentSet,
        missing: list[str],
    ) -> tuple[NavigationNode, ...]:
        nodes: list[NavigationNode] = []
        for item in items:
            match item:
                case DocumentRef(doc_id=doc_id, label=label):
                    document = documents.get(doc_id)
                    if document is None:
                        missing.append(doc_id)
                    nodes.append(
                        NavigationNode(
                            label=label or (document.title if document else doc_id),
                            kind=NodeKind.DOC,
                            target=doc_id,
                        )
                    )
                case LinkRef(label=label, href=href):
                    nodes.append(
                        NavigationNode(label=label, kind=NodeKind.LINK, target=href)
                    )
                case GroupRef(label=label, items=children, doc_id=doc_id):
                    if doc_id is not None and doc_id not in documents:
                        missing.append(doc_id)
                    nodes.append(
                        NavigationNode(
                            label=label,
                            kind=NodeKind.CATEGORY,
                            target=doc_id,
                            children=self._build_items(children, documents, missing),
                        )
                    )
                case AutogeneratedRef(directory=directory):
                    nodes.extend(_autogenerate(directory, documents))
        return tuple(nodes)


def _autogenerate(directory: str, documents: DocumentSet) -> list[NavigationNode]:
    """Expand a directory into document nodes and per-subdirectory categories.

    Entries are ordered by ``sidebar_position`` (unpositioned last), then name.
    """
    prefix = directory.strip("/").removeprefix(".").strip("/")
    entries: list[tuple[tuple[int, str], NavigationNode]] = []
    subdirectories: dict[str, list[Document]] = {}
    for document in documents.documents:
        parent = document.directory
        if parent == prefix:
            key = (_position_key(document.position), document.source_path.name)
            node = NavigationNode(
                label=document.title, kind=NodeKind.DOC, target=document.slug
            )
            entries.append((key, node))
        elif not prefix or parent.startswith(f"{prefix}/"):
            remainder = parent[len(prefix) + 1 :] if prefix else parent
            subdirectories.setdefault(remainder.split("/", 1)[0], []).append(document)

    for name, members in subdirectories.items():
        child_dir = f"{prefix}/{name}" if prefix else name
        positions = [doc.position for doc in members if doc.position is not None]
        key = (min(positions) if positions else sys.maxsize, name)
        node = NavigationNode(
            label=name.replace("-", " ").replace("_", " ").title(),
            kind=NodeKind.CATEGORY,
            children=tuple(_autogenerate(child_dir, documents)),
        )
        entries.append((key, node))

    entries.sort(key=lambda entry: entry[0])
    return [node for _key, node in entries]


def _position_key(position: int | None) -> int:
    return sys.maxsize if position is None else position


def iter_nodes(tree: cabc.Iterable[NavigationNode]) -> cabc.Iterator[NavigationNode]:
    """Yield every node of ``tree`` depth-first in pre-order."""
    for node in tree:
        yield node
        yield from iter_nodes(node.children)


def ordered_slugs(tree: cabc.Iterable[NavigationNode]) -> tuple[str, ...]:
    """Return document slugs in navigation order, without repeats."""
    return tuple(
        dict.fromkeys(
            node.target
            for node in iter_nodes(tree)
            if node.is_document and node.target is not None
        )
    )


__all__ = [
    "AutogeneratedRef",
    "DocumentRef",
    "GroupRef",
    "LinkRef",
    "NavItem",
    "NavigationBuilder",
    "NavigationNode",
    "NodeKind",
    "iter_nodes",
    "load_navigation_spec",
    "ordered_slugs",
    "parse_navigation_spec",
]
