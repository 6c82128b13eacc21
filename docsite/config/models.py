"""Typed dataclasses describing docsite configuration structures."""

from __future__ import annotations

import dataclasses as dc
import enum
from pathlib import Path, PurePosixPath


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


class BrokenLinkPolicy(enum.StrEnum):
    """How the build reacts to cross-references that do not resolve."""

    THROW = "throw"
    WARN = "warn"
    IGNORE = "ignore"


@dc.dataclass(slots=True, frozen=True)
class LocaleConfig:
    """Locales the site is published in."""

    default_locale: str = "en"
    locales: tuple[str, ...] = ("en",)


@dc.dataclass(slots=True, frozen=True)
class ThemeConfig:
    """Visual theming applied to generated pages."""

    palette: str = "light"
    pygments_style: str = "default"
    pygments_dark_style: str | None = "dracula"
    custom_css: str | None = None


@dc.dataclass(slots=True, frozen=True)
class LogoConfig:
    """Navbar logo image."""

    src: str
    alt: str = ""


@dc.dataclass(slots=True, frozen=True)
class NavbarItemConfig:
    """Navbar entry pointing at a document, a site path, or an external URL."""

    label: str
    position: str = "left"
    doc_id: str | None = None
    to: str | None = None
    href: str | None = None


@dc.dataclass(slots=True, frozen=True)
class NavbarConfig:
    """Top navigation bar."""

    title: str
    logo: LogoConfig | None = None
    items: tuple[NavbarItemConfig, ...] = ()


@dc.dataclass(slots=True, frozen=True)
class FooterLinkConfig:
    """Footer hyperlink metadata."""

    label: str
    to: str | None = None
    href: str | None = None


@dc.dataclass(slots=True, frozen=True)
class FooterLinkGroupConfig:
    """Titled column of footer links."""

    title: str
    items: tuple[FooterLinkConfig, ...] = ()


@dc.dataclass(slots=True, frozen=True)
class FooterConfig:
    """Footer link groups and copyright line."""

    style: str = "dark"
    link_groups: tuple[FooterLinkGroupConfig, ...] = ()
    copyright: str = ""


@dc.dataclass(slots=True, frozen=True)
class DocsConfig:
    """Where documents live and where they are served from."""

    path: Path = Path("docs")
    sidebar_path: Path | None = None
    route_base_path: str = "/"
    edit_url: str | None = None


@dc.dataclass(slots=True, frozen=True)
class SiteConfig:
    """Fully resolved site configuration shared by every build stage.

    Attributes
    ----------
    title : str
        Site title shown in the navbar fallback and page titles.
    url : str
        Public origin of the deployed site.
    base_url : str
        URL prefix the site is served under; always starts and ends with ``/``.
    on_broken_links : BrokenLinkPolicy
        Policy for internal links that do not resolve to a document.
    on_broken_markdown_links : BrokenLinkPolicy
        Policy for links to ``.md``/``.mdx`` files that do not resolve.
    """

    title: str
    tagline: str = ""
    url: str = ""
    base_url: str = "/"
    on_broken_links: BrokenLinkPolicy = BrokenLinkPolicy.THROW
    on_broken_markdown_links: BrokenLinkPolicy = BrokenLinkPolicy.WARN
    locales: LocaleConfig = dc.field(default_factory=LocaleConfig)
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    navbar: NavbarConfig | None = None
    footer: FooterConfig = dc.field(default_factory=FooterConfig)
    docs: DocsConfig = dc.field(default_factory=DocsConfig)
    output_dir: Path = Path("build")
    organization_name: str | None = None
    project_name: str | None = None
    favicon: str | None = None

    @property
    def route_prefix(self) -> str:
        """Return the docs route base path without surrounding slashes."""
        return self.docs.route_base_path.strip("/")

    def route_for(self, slug: str) -> str:
        """Return the public URL path of the page rendered for ``slug``."""
        prefix = f"{self.route_prefix}/" if self.route_prefix else ""
        return f"{self.base_url}{prefix}{slug}/"

    def output_path_for(self, slug: str) -> PurePosixPath:
        """Return the output-relative file path of the page for ``slug``."""
        return PurePosixPath(self.route_prefix or ".", slug, "index.html")

    def site_path(self, path: str) -> str:
        """Prefix a site-absolute path such as ``/blog`` with the base URL."""
        return f"{self.base_url}{path.lstrip('/')}"


__all__ = [
    "BrokenLinkPolicy",
    "DocsConfig",
    "FooterConfig",
    "FooterLinkConfig",
    "FooterLinkGroupConfig",
    "LocaleConfig",
    "LogoConfig",
    "NavbarConfig",
    "NavbarItemConfig",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
]
