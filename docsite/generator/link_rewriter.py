"""Markdown extension rewriting links between documents to page routes."""

from __future__ import annotations

import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from docsite.links import SITE_ROOT, LinkKind, LinkResolver

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from xml.etree.ElementTree import Element

    from markdown import Markdown

    from docsite.loader import Document
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any
    Document = typ.Any


class DocumentLinkExtension(Extension):
    """Rewrite links to other documents into their rendered page routes.

    Insert this extension into a ``markdown.Markdown`` instance so that links
    such as ``./setup.md#install`` or ``/guides/setup`` written in
    ``source`` point at ``/guides/setup/#install`` in the generated site.
    Targets that do not resolve are left untouched; reporting them is the
    link validator's job.
    """

    def __init__(
        self,
        resolver: LinkResolver,
        source: Document,
        route_for: cabc.Callable[[str], str],
        root_route: str,
    ) -> None:
        super().__init__()
        self.resolver = resolver
        self.source = source
        self.route_for = route_for
        self.root_route = root_route

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the document-link treeprocessor on the Markdown instance."""
        processor = DocumentLinkTreeprocessor(md, self)
        md.treeprocessors.register(processor, "docsite_document_links", 15)


class DocumentLinkTreeprocessor(Treeprocessor):
    """Rewrite ``<a href>`` targets that resolve to loaded documents."""

    def __init__(self, md: Markdown, extension: DocumentLinkExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, root: Element) -> Element:
        """Rewrite resolvable anchors in the parsed markdown tree."""
        for element in root.iter("a"):
            rewritten = self._rewrite(element.get("href"))
            if rewritten:
                element.set("href", rewritten)
        return root

    def _rewrite(self, target: str | None) -> str | None:
        """Return the page route for ``target`` or None to leave it as is."""
        if not target:
            return None
        kind = self.extension.resolver.classify(target)
        if kind not in {LinkKind.MARKDOWN, LinkKind.ROUTE}:
            return None
        slug = self.extension.resolver.resolve(target, self.extension.source)
        if slug is None:
            return None
        url = (
            self.extension.root_route
            if slug == SITE_ROOT
            else self.extension.route_for(slug)
        )
        fragment = urlsplit(target).fragment
        return f"{url}#{fragment}" if fragment else url


__all__ = ["DocumentLinkExtension", "DocumentLinkTreeprocessor"]
