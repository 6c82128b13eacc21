"""Utilities for rendering docsite documents into static pages."""

from .link_rewriter import DocumentLinkExtension
from .models import RenderedMarkdown, RenderedPage, TocEntry
from .renderer import HtmlContentRenderer
from .site_renderer import SiteRenderer, write_site

__all__ = [
    "DocumentLinkExtension",
    "HtmlContentRenderer",
    "RenderedMarkdown",
    "RenderedPage",
    "SiteRenderer",
    "TocEntry",
    "write_site",
]
