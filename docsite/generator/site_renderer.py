"""Render loaded documents and the navigation tree into static pages.

:class:`SiteRenderer` is the last stage of the build. It consumes the
:class:`~docsite.loader.DocumentSet`, the navigation tree produced by
:class:`~docsite.navigation.NavigationBuilder`, and the
:class:`~docsite.config.SiteConfig`, and returns every output file as a
:class:`~docsite.generator.models.RenderedPage`. Rendering is a pure function
of those inputs: no timestamps or environment data reach the output, so two
renders of the same inputs are byte-identical. :func:`write_site` persists the
pages under an output directory.

Example
-------
>>> from docsite.generator import SiteRenderer, write_site
>>> renderer = SiteRenderer(config)  # doctest: +SKIP
>>> pages = renderer.render(documents, navigation)  # doctest: +SKIP
>>> write_site(pages, config.output_dir)  # doctest: +SKIP
[PosixPath('build/intro/index.html'), ...]
"""

from __future__ import annotations

import json
import logging
import typing as typ
from pathlib import Path, PurePosixPath

from jinja2 import Environment, FileSystemLoader

from docsite._constants import (
    NAVIGATION_INDEX,
    NOT_FOUND_PAGE,
    PAGE_ID_META,
    SITE_INDEX_PAGE,
)
from docsite.generator.link_rewriter import DocumentLinkExtension
from docsite.generator.models import RenderedPage
from docsite.generator.renderer import HtmlContentRenderer
from docsite.links import LinkResolver, is_external_url
from docsite.markdown_parser import strip_title_heading
from docsite.navigation import NavigationNode, NodeKind, ordered_slugs

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docsite.config import SiteConfig
    from docsite.loader import Document, DocumentSet

logger = logging.getLogger(__name__)


class SiteRenderer:
    """Merge documents, navigation and theme configuration into pages."""

    def __init__(
        self, config: SiteConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the renderer and its Jinja environment.

        Parameters
        ----------
        config : SiteConfig
            Site metadata, theme, navbar and footer settings.
        templates_dir : Path, optional
            Directory containing the Jinja templates; defaults to the package
            templates.
        """
        self.config = config
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.doc_template = self.env.get_template("doc_page.jinja")
        self.index_template = self.env.get_template("index_page.jinja")
        self.not_found_template = self.env.get_template("not_found.jinja")
        self.renderer = HtmlContentRenderer(
            config.theme.pygments_style, config.theme.pygments_dark_style
        )

    def render(
        self, documents: DocumentSet, navigation: cabc.Sequence[NavigationNode]
    ) -> tuple[RenderedPage, ...]:
        """Render one page per document plus the auxiliary pages.

        Parameters
        ----------
        documents : DocumentSet
            Loaded documents.
        navigation : Sequence[NavigationNode]
            Root navigation nodes, already validated against ``documents``.

        Returns
        -------
        tuple[RenderedPage, ...]
            Document pages in navigation order followed by documents absent
            from the navigation (by slug), then ``index.html``, ``404.html``
            and ``navigation.json``.
        """
        sequence = tuple(
            slug for slug in ordered_slugs(navigation) if slug in documents
        )
        remaining = sorted(set(documents) - set(sequence))
        resolver = LinkResolver(
            documents, route_base_path=self.config.docs.route_base_path
        )
        shared = {
            "site": self._site_context(),
            "navbar": self._navbar_context(),
            "footer": self._footer_context(),
            "nav_tree_items": self._nav_context(navigation),
            "pygments_css": self.renderer.stylesheet,
            "page_id_meta": PAGE_ID_META,
        }

        pages = [
            self._render_document(
                documents[slug], sequence, documents, resolver, shared
            )
            for slug in (*sequence, *remaining)
        ]
        pages.append(self._render_index(documents, sequence, shared))
        pages.append(
            RenderedPage(
                path=PurePosixPath(NOT_FOUND_PAGE),
                content=_finish(self.not_found_template.render(**shared)),
            )
        )
        pages.append(self._render_navigation_index(navigation))
        logger.debug("rendered %d pages", len(pages))
        return tuple(pages)

    def _render_document(
        self,
        document: Document,
        sequence: tuple[str, ...],
        documents: DocumentSet,
        resolver: LinkResolver,
        shared: dict[str, typ.Any],
    ) -> RenderedPage:
        """Render the page for a single document."""
        extension = DocumentLinkExtension(
            resolver, document, self.config.route_for, self.config.base_url
        )
        rendered = self.renderer.markdown(
            strip_title_heading(document.body), link_extension=extension
        )
        previous_doc, next_doc = _neighbours(document.slug, sequence, documents)
        context = {
            **shared,
            "document": document,
            "slug": document.slug,
            "html_title": f"{document.title} | {self.config.title}",
            "content_html": rendered.html,
            "toc": rendered.toc,
            "canonical_url": self._canonical(self.config.route_for(document.slug)),
            "edit_url": self._edit_url(document),
            "previous": self._neighbour_context(previous_doc),
            "next": self._neighbour_context(next_doc),
        }
        return RenderedPage(
            path=self.config.output_path_for(document.slug),
            content=_finish(self.doc_template.render(**context)),
            slug=document.slug,
        )

    def _render_index(
        self,
        documents: DocumentSet,
        sequence: tuple[str, ...],
        shared: dict[str, typ.Any],
    ) -> RenderedPage:
        """Render the landing page that lists the navigation tree."""
        first = documents[sequence[0]] if sequence else None
        context = {
            **shared,
            "html_title": self.config.title,
            "first_page": self._neighbour_context(first),
            "canonical_url": self._canonical(self.config.base_url),
        }
        return RenderedPage(
            path=PurePosixPath(SITE_INDEX_PAGE),
            content=_finish(self.index_template.render(**context)),
        )

    def _render_navigation_index(
        self, navigation: cabc.Sequence[NavigationNode]
    ) -> RenderedPage:
        """Serialise the navigation tree and page routes as JSON."""
        payload = {
            "title": self.config.title,
            "base_url": self.config.base_url,
            "items": [node.to_dict() for node in navigation],
            "routes": {
                slug: self.config.route_for(slug) for slug in ordered_slugs(navigation)
            },
        }
        return RenderedPage(
            path=PurePosixPath(NAVIGATION_INDEX),
            content=json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)
            + "\n",
        )

    def _site_context(self) -> dict[str, typ.Any]:
        config = self.config
        return {
            "title": config.title,
            "tagline": config.tagline,
            "lang": config.locales.default_locale,
            "locales": config.locales.locales,
            "base_url": config.base_url,
            "palette": config.theme.palette,
            "favicon": self._asset_href(config.favicon),
            "custom_css": self._asset_href(config.theme.custom_css),
        }

    def _navbar_context(self) -> dict[str, typ.Any]:
        """Build navbar entries split by position."""
        navbar = self.config.navbar
        if navbar is None:
            return {
                "title": self.config.title,
                "logo": None,
                "left": [],
                "right": [],
            }
        items: dict[str, list[dict[str, typ.Any]]] = {"left": [], "right": []}
        for item in navbar.items:
            if item.doc_id is not None:
                entry = {
                    "label": item.label,
                    "href": self.config.route_for(item.doc_id),
                    "slug": item.doc_id,
                    "external": False,
                }
            elif item.to is not None:
                entry = self._link_entry(item.label, to=item.to)
            else:
                entry = self._link_entry(item.label, href=item.href)
            items[item.position].append(entry)
        logo = None
        if navbar.logo is not None:
            logo = {"src": self._asset_href(navbar.logo.src), "alt": navbar.logo.alt}
        return {"title": navbar.title, "logo": logo, **items}

    def _footer_context(self) -> dict[str, typ.Any]:
        """Build footer link groups with resolved hrefs."""
        footer = self.config.footer
        groups = [
            {
                "title": group.title,
                "items": [
                    self._link_entry(link.label, to=link.to, href=link.href)
                    for link in group.items
                ],
            }
            for group in footer.link_groups
        ]
        return {"style": footer.style, "groups": groups, "copyright": footer.copyright}

    def _nav_context(
        self, nodes: cabc.Sequence[NavigationNode]
    ) -> list[dict[str, typ.Any]]:
        """Convert navigation nodes into template-friendly dictionaries."""
        entries: list[dict[str, typ.Any]] = []
        for node in nodes:
            href: str | None = None
            if node.kind is NodeKind.LINK:
                href = node.target
            elif node.target is not None:
                href = self.config.route_for(node.target)
            entries.append(
                {
                    "label": node.label,
                    "kind": node.kind.value,
                    "href": href,
                    "slug": node.target if node.is_document else None,
                    "external": node.kind is NodeKind.LINK,
                    "children": self._nav_context(node.children),
                }
            )
        return entries

    def _link_entry(
        self, label: str, *, to: str | None = None, href: str | None = None
    ) -> dict[str, typ.Any]:
        if to is not None:
            return {
                "label": label,
                "href": self.config.site_path(to),
                "slug": None,
                "external": False,
            }
        return {
            "label": label,
            "href": href,
            "slug": None,
            "external": bool(href and is_external_url(href)),
        }

    def _neighbour_context(self, document: Document | None) -> dict[str, str] | None:
        if document is None:
            return None
        return {"title": document.title, "href": self.config.route_for(document.slug)}

    def _asset_href(self, path: str | None) -> str | None:
        """Return ``path`` prefixed with the base URL unless it is a URL."""
        if not path:
            return None
        if is_external_url(path):
            return path
        return self.config.site_path(path)

    def _canonical(self, route: str) -> str | None:
        return f"{self.config.url}{route}" if self.config.url else None

    def _edit_url(self, document: Document) -> str | None:
        """Return the "edit this page" URL for ``document``, if configured."""
        base = self.config.docs.edit_url
        if not base:
            return None
        docs_dir = self.config.docs.path.name
        return f"{base}/{docs_dir}/{document.source_path.as_posix()}"


def _neighbours(
    slug: str, sequence: tuple[str, ...], documents: DocumentSet
) -> tuple[Document | None, Document | None]:
    """Return the documents before and after ``slug`` in navigation order."""
    if slug not in sequence:
        return None, None
    index = sequence.index(slug)
    previous_doc = documents[sequence[index - 1]] if index > 0 else None
    next_doc = documents[sequence[index + 1]] if index + 1 < len(sequence) else None
    return previous_doc, next_doc


def _finish(html: str) -> str:
    """Ensure rendered HTML ends with exactly one newline."""
    return html.rstrip("\n") + "\n"


def write_site(pages: cabc.Iterable[RenderedPage], output_dir: Path) -> list[Path]:
    """Write ``pages`` under ``output_dir`` and return the written paths.

    Parameters
    ----------
    pages : Iterable[RenderedPage]
        Pages produced by :meth:`SiteRenderer.render`.
    output_dir : Path
        Destination directory; created when missing. Existing files with the
        same paths are overwritten.

    Returns
    -------
    list[Path]
        Written file paths in page order.
    """
    written: list[Path] = []
    for page in pages:
        target = output_dir.joinpath(*page.path.parts)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(page.content, encoding="utf-8")
        written.append(target)
    return written


__all__ = ["SiteRenderer", "write_site"]
