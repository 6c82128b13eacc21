"""Tests for resolving and validating links between documents."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import PurePosixPath

import pytest

from docsite.errors import BrokenLinkError
from docsite.links import (
    LinkKind,
    LinkResolver,
    LinkValidator,
    LinkViolation,
    Severity,
    is_external_url,
)
from docsite.loader import Document, DocumentSet

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docsite.config import SiteConfig


def _doc(source: str, *links: str, slug: str | None = None) -> Document:
    path = PurePosixPath(source)
    return Document(
        slug=slug or path.with_suffix("").as_posix(),
        title=path.stem.title(),
        body="",
        links=links,
        source_path=path,
    )


@pytest.fixture
def documents() -> DocumentSet:
    """Return documents whose links cover every link kind."""
    return DocumentSet(
        [
            _doc(
                "guides/setup.md",
                "install",
                "../intro.md#welcome",
                "/guides/install/",
                "/",
                "#local",
                "img/diagram.png",
            ),
            _doc("guides/install.md", slug="guides/install"),
            _doc("intro.md", "https://example.com", "mailto:docs@example.com"),
        ]
    )


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ("https://example.com/docs", True),
        ("http://example.com", True),
        ("//cdn.example.com/lib.js", True),
        ("mailto:docs@example.com", True),
        ("tel:+441234567890", True),
        ("/docs/intro", False),
        ("intro.md", False),
        ("#section", False),
    ],
)
def test_is_external_url(target: str, expected: bool) -> None:
    """Only absolute web, mail and phone URLs count as external."""
    assert is_external_url(target) is expected


@pytest.mark.parametrize(
    ("target", "kind"),
    [
        ("https://example.com", LinkKind.EXTERNAL),
        ("ftp://files.example.com/x", LinkKind.EXTERNAL),
        ("#anchor", LinkKind.ANCHOR),
        ("../setup.md#install", LinkKind.MARKDOWN),
        ("page.mdx", LinkKind.MARKDOWN),
        ("img/logo.svg", LinkKind.ASSET),
        ("/guides/setup/", LinkKind.ROUTE),
        ("setup", LinkKind.ROUTE),
    ],
)
def test_classify(target: str, kind: LinkKind) -> None:
    """Targets are classified by scheme and suffix."""
    assert LinkResolver.classify(target) is kind


def test_resolver_handles_markdown_and_route_links(documents: DocumentSet) -> None:
    """Relative links resolve against the linking document."""
    resolver = LinkResolver(documents)
    setup = documents["guides/setup"]

    assert resolver.resolve("../intro.md#welcome", setup) == "intro"
    assert resolver.resolve("install.md", setup) == "guides/install"
    assert resolver.resolve("install", setup) == "guides/install"
    assert resolver.resolve("/guides/install/", setup) == "guides/install"
    assert resolver.resolve("/", setup) == ""
    assert resolver.resolve("missing.md", setup) is None
    assert resolver.resolve("../../outside", setup) is None


def test_resolver_strips_route_base_path(documents: DocumentSet) -> None:
    """Absolute routes may include the docs route base path."""
    resolver = LinkResolver(documents, route_base_path="/docs/")
    intro = documents["intro"]

    assert resolver.resolve("/docs/guides/install", intro) == "guides/install"
    assert resolver.resolve("/docs/", intro) == ""


def test_resolver_prefers_real_index_documents(
    make_config: cabc.Callable[..., SiteConfig],
) -> None:
    """Documents whose slug ends in ``index`` resolve before the site root."""
    intro = _doc("intro.md", "/guide/index", "index")
    documents = DocumentSet([_doc("guide/index.md"), _doc("index.md"), intro])
    resolver = LinkResolver(documents)

    assert resolver.resolve("/guide/index", intro) == "guide/index"
    assert resolver.resolve("index", intro) == "index"
    assert resolver.resolve("/", intro) == ""
    assert LinkValidator(make_config()).validate(documents).ok


def test_valid_and_external_links_report_nothing(
    make_config: cabc.Callable[..., SiteConfig], documents: DocumentSet
) -> None:
    """External, anchor and asset links are never reported."""
    report = LinkValidator(make_config()).validate(documents)

    assert report.ok
    assert report.violations == ()


def test_throw_policy_raises_on_first_violation(
    make_config: cabc.Callable[..., SiteConfig],
) -> None:
    """Under ``throw`` the first broken link aborts validation."""
    documents = DocumentSet([_doc("intro.md", "/missing/", "/also-missing/")])

    with pytest.raises(BrokenLinkError) as excinfo:
        LinkValidator(make_config(on_broken_links="throw")).validate(documents)

    assert excinfo.value.violation == LinkViolation(
        source="intro", target="/missing/", severity=Severity.FAIL
    )


def test_warn_policy_collects_every_violation(
    make_config: cabc.Callable[..., SiteConfig],
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Under ``warn`` violations are logged and returned in order."""
    documents = DocumentSet([_doc("intro.md", "/missing/", "ghost")])

    with caplog.at_level(logging.WARNING, logger="docsite.links"):
        report = LinkValidator(make_config(on_broken_links="warn")).validate(documents)

    assert not report.ok
    assert [violation.target for violation in report.violations] == [
        "/missing/",
        "ghost",
    ]
    assert {violation.severity for violation in report.violations} == {Severity.WARN}
    assert "broken link in 'intro'" in caplog.text


def test_ignore_policy_suppresses_reporting(
    make_config: cabc.Callable[..., SiteConfig],
) -> None:
    """Under ``ignore`` broken links pass silently."""
    documents = DocumentSet([_doc("intro.md", "/missing/")])

    report = LinkValidator(make_config(on_broken_links="ignore")).validate(documents)

    assert report.ok


def test_markdown_links_follow_their_own_policy(
    make_config: cabc.Callable[..., SiteConfig],
) -> None:
    """Links to source files use ``on_broken_markdown_links``."""
    documents = DocumentSet([_doc("intro.md", "missing.md", "/missing/")])
    validator = LinkValidator(
        make_config(on_broken_links="ignore", on_broken_markdown_links="warn")
    )

    report = validator.validate(documents)

    assert [violation.target for violation in report.violations] == ["missing.md"]
