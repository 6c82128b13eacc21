"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_docs_config,
    _build_footer_config,
    _build_locale_config,
    _build_navbar_config,
    _build_theme_config,
    _normalize_base_url,
    _optional_str,
    _parse_policy,
    _resolve_path,
)
from .models import BrokenLinkPolicy, SiteConfig, SiteConfigError

logger = logging.getLogger(__name__)


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the documentation site.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``docsite.yaml``). Relative paths inside the file (docs directory,
        sidebar file, output directory) are resolved against its directory.

    Returns
    -------
    SiteConfig
        Frozen site configuration passed to every build stage.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If required fields are missing or invalid (for example, no ``title``
        or an unknown broken-link policy).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docsite.config import load_site_config
    >>> config = load_site_config(Path("docsite.yaml"))  # doctest: +SKIP
    >>> config.on_broken_links  # doctest: +SKIP
    <BrokenLinkPolicy.THROW: 'throw'>
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    return build_site_config(raw, root=path.parent)


def build_site_config(raw: typ.Mapping[str, typ.Any], *, root: Path) -> SiteConfig:
    """Build a SiteConfig from an already parsed mapping.

    Parameters
    ----------
    raw : Mapping[str, Any]
        Parsed configuration mapping.
    root : Path
        Directory against which relative paths are resolved.
    """
    title = _optional_str(raw.get("title"))
    if not title:
        msg = "Site configuration requires a 'title'."
        raise SiteConfigError(msg)

    config = SiteConfig(
        title=title,
        tagline=_optional_str(raw.get("tagline")) or "",
        url=(_optional_str(raw.get("url")) or "").rstrip("/"),
        base_url=_normalize_base_url(raw.get("base_url")),
        on_broken_links=_parse_policy(
            raw.get("on_broken_links"),
            key="on_broken_links",
            default=BrokenLinkPolicy.THROW,
        ),
        on_broken_markdown_links=_parse_policy(
            raw.get("on_broken_markdown_links"),
            key="on_broken_markdown_links",
            default=BrokenLinkPolicy.WARN,
        ),
        locales=_build_locale_config(raw.get("i18n")),
        theme=_build_theme_config(raw.get("theme") or {}),
        navbar=_build_navbar_config(raw.get("navbar"), fallback_title=title),
        footer=_build_footer_config(raw.get("footer")),
        docs=_build_docs_config(raw.get("docs"), root=root),
        output_dir=_resolve_path(raw.get("output_dir"), root, "build"),
        organization_name=_optional_str(raw.get("organization_name")),
        project_name=_optional_str(raw.get("project_name")),
        favicon=_optional_str(raw.get("favicon")),
    )
    logger.debug(
        "loaded site config %r (docs=%s, base_url=%s)",
        config.title,
        config.docs.path,
        config.base_url,
    )
    return config


__all__ = ["build_site_config", "load_site_config"]
