"""Tests for parsing sidebar specs and building the navigation tree."""

from __future__ import annotations

import typing as typ
from pathlib import Path, PurePosixPath

import pytest

from docsite.errors import NavigationSpecError, UnresolvedReferenceError
from docsite.loader import Document, DocumentSet
from docsite.navigation import (
    AutogeneratedRef,
    DocumentRef,
    GroupRef,
    LinkRef,
    NavigationBuilder,
    NavigationNode,
    NodeKind,
    load_navigation_spec,
    ordered_slugs,
    parse_navigation_spec,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docsite.config import SiteConfig


def _doc(
    source: str, title: str, *, slug: str | None = None, position: int | None = None
) -> Document:
    path = PurePosixPath(source)
    return Document(
        slug=slug or path.with_suffix("").as_posix(),
        title=title,
        body="",
        source_path=path,
        position=position,
    )


@pytest.fixture
def documents() -> DocumentSet:
    """Return a small documentation tree with one nested folder."""
    return DocumentSet(
        [
            _doc("guides/setup.md", "Setup", position=1),
            _doc("guides/usage.md", "Usage"),
            _doc("intro.md", "Welcome", position=1),
            _doc("faq.md", "FAQ", position=3),
        ]
    )


@pytest.fixture
def builder(make_config: cabc.Callable[..., SiteConfig]) -> NavigationBuilder:
    """Return a navigation builder for a default configuration."""
    return NavigationBuilder(make_config())


def test_parse_navigation_spec_recognises_every_shape() -> None:
    """Strings, targets, typed entries and categories map to tagged items."""
    spec = parse_navigation_spec(
        [
            "intro",
            {"label": "Setup", "target": "guides/setup"},
            {"label": "Home page", "target": "https://example.com"},
            {"type": "doc", "id": "faq", "label": "Questions"},
            {"type": "link", "label": "Blog", "href": "https://blog.example.com"},
            {
                "type": "category",
                "label": "Guides",
                "link": {"type": "doc", "id": "guides/setup"},
                "items": ["guides/usage"],
            },
            {"label": "Reference", "items": [{"type": "autogenerated", "dir": "api"}]},
        ]
    )

    assert spec == (
        DocumentRef(doc_id="intro"),
        DocumentRef(doc_id="guides/setup", label="Setup"),
        LinkRef(label="Home page", href="https://example.com"),
        DocumentRef(doc_id="faq", label="Questions"),
        LinkRef(label="Blog", href="https://blog.example.com"),
        GroupRef(
            label="Guides",
            items=(DocumentRef(doc_id="guides/usage"),),
            doc_id="guides/setup",
        ),
        GroupRef(label="Reference", items=(AutogeneratedRef(directory="api"),)),
    )


@pytest.mark.parametrize(
    "raw",
    [
        {"label": "Not a list"},
        [42],
        [{"label": "No target"}],
        [{"label": "Bad items", "type": "category", "items": "intro"}],
    ],
)
def test_parse_navigation_spec_rejects_unknown_shapes(raw: object) -> None:
    """Malformed entries raise NavigationSpecError."""
    with pytest.raises(NavigationSpecError):
        parse_navigation_spec(raw)


def test_build_preserves_declaration_order(
    builder: NavigationBuilder, documents: DocumentSet
) -> None:
    """Root and child order follows the spec, not the document order."""
    spec = parse_navigation_spec(
        [
            {"label": "Intro", "target": "intro"},
            {"label": "Guides", "items": ["guides/usage", "guides/setup"]},
            "faq",
        ]
    )

    tree = builder.build(spec, documents)

    assert [node.label for node in tree] == ["Intro", "Guides", "FAQ"]
    assert [child.target for child in tree[1].children] == [
        "guides/usage",
        "guides/setup",
    ]
    assert tree[1].kind is NodeKind.CATEGORY
    assert ordered_slugs(tree) == ("intro", "guides/usage", "guides/setup", "faq")


def test_build_reports_unresolved_reference(
    builder: NavigationBuilder, documents: DocumentSet
) -> None:
    """A spec entry naming an unknown document raises with its identifier."""
    spec = parse_navigation_spec([{"label": "Missing", "target": "missing-doc"}])

    with pytest.raises(UnresolvedReferenceError, match="missing-doc") as excinfo:
        builder.build(spec, documents)

    assert excinfo.value.missing == ("missing-doc",)


def test_build_lists_every_missing_reference_once(
    builder: NavigationBuilder, documents: DocumentSet
) -> None:
    """Missing documents are collected across the whole tree without repeats."""
    spec = parse_navigation_spec(
        [
            "gone",
            {"label": "Group", "link": "absent", "items": ["gone", "intro"]},
        ]
    )

    with pytest.raises(UnresolvedReferenceError) as excinfo:
        builder.build(spec, documents)

    assert excinfo.value.missing == ("gone", "absent")


def test_external_links_are_kept_without_resolution(
    builder: NavigationBuilder, documents: DocumentSet
) -> None:
    """Link entries become link nodes and never count as documents."""
    tree = builder.build(
        (LinkRef(label="GitHub", href="https://github.com/example"),), documents
    )

    assert tree == (
        NavigationNode(
            label="GitHub", kind=NodeKind.LINK, target="https://github.com/example"
        ),
    )
    assert ordered_slugs(tree) == ()


def test_autogenerated_navigation_orders_by_position_then_name(
    builder: NavigationBuilder, documents: DocumentSet
) -> None:
    """Generated entries sort by sidebar_position, then file or folder name."""
    tree = builder.build((AutogeneratedRef(),), documents)

    assert [(node.label, node.kind) for node in tree] == [
        ("Guides", NodeKind.CATEGORY),
        ("Welcome", NodeKind.DOC),
        ("FAQ", NodeKind.DOC),
    ]
    assert [child.target for child in tree[0].children] == [
        "guides/setup",
        "guides/usage",
    ]


def test_load_spec_defaults_to_autogenerated(builder: NavigationBuilder) -> None:
    """Without a sidebar file the whole docs tree is generated."""
    assert builder.load_spec() == (AutogeneratedRef(),)


def test_load_navigation_spec_reads_named_sidebars(tmp_path: Path) -> None:
    """A mapping of sidebars selects the ``docs`` entry."""
    path = tmp_path / "sidebars.yaml"
    path.write_text(
        "api:\n  - reference\ndocs:\n  - label: Intro\n    target: intro\n",
        encoding="utf-8",
    )

    assert load_navigation_spec(path) == (DocumentRef(doc_id="intro", label="Intro"),)


def test_check_navbar_rejects_unknown_documents(
    make_config: cabc.Callable[..., SiteConfig], documents: DocumentSet
) -> None:
    """Navbar items naming documents must resolve like sidebar entries."""
    config = make_config(
        navbar={
            "items": [
                {"label": "Intro", "doc_id": "intro"},
                {"label": "Tutorial", "doc_id": "tutorial"},
            ]
        }
    )

    with pytest.raises(UnresolvedReferenceError, match="tutorial"):
        NavigationBuilder(config).check_navbar(documents)


def test_to_dict_serialises_subtree() -> None:
    """Nodes serialise their kind, target and children."""
    node = NavigationNode(
        label="Guides",
        kind=NodeKind.CATEGORY,
        children=(
            NavigationNode(label="Setup", kind=NodeKind.DOC, target="guides/setup"),
        ),
    )

    assert node.to_dict() == {
        "label": "Guides",
        "kind": "category",
        "children": [{"label": "Setup", "kind": "doc", "target": "guides/setup"}],
    }
