"""Load and validate site configuration YAML for docsite builds.

This subpackage parses the project's ``docsite.yaml`` file, applies defaults,
resolves relative paths against the file's directory, and produces frozen
dataclasses (:class:`SiteConfig`, :class:`NavbarConfig`, etc.) that every
build stage receives explicitly. The primary entry point is
:func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from docsite.config import load_site_config
>>> site = load_site_config(Path("docsite.yaml"))  # doctest: +SKIP
>>> site.route_for("intro")  # doctest: +SKIP
'/intro/'
"""

from .loader import build_site_config, load_site_config
from .models import (
    BrokenLinkPolicy,
    DocsConfig,
    FooterConfig,
    FooterLinkConfig,
    FooterLinkGroupConfig,
    LocaleConfig,
    LogoConfig,
    NavbarConfig,
    NavbarItemConfig,
    SiteConfig,
    SiteConfigError,
    ThemeConfig,
)

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
    "build_site_config",
    "load_site_config",
]
