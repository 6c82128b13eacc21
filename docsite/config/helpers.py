"""Utility helpers shared by the docsite configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

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
    SiteConfigError,
    ThemeConfig,
)

NAVBAR_POSITIONS = frozenset({"left", "right"})


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalize_base_url(value: object | None) -> str:
    """Return ``value`` as a path that starts and ends with a slash."""
    text = _optional_str(value) or "/"
    return "/" + text.strip("/") + "/" if text.strip("/") else "/"


def _resolve_path(value: object | None, root: Path, default: str) -> Path:
    """Resolve a configured path relative to the configuration directory."""
    path = Path(_optional_str(value) or default)
    return path if path.is_absolute() else root / path


def _parse_policy(
    value: object | None, *, key: str, default: BrokenLinkPolicy
) -> BrokenLinkPolicy:
    """Parse a broken-link policy name into the enum."""
    if value is None:
        return default
    try:
        return BrokenLinkPolicy(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(policy.value for policy in BrokenLinkPolicy)
        msg = f"'{key}' must be one of {allowed}; got {value!r}."
        raise SiteConfigError(msg) from exc


def _build_locale_config(payload: object | None) -> LocaleConfig:
    """Build the locale configuration from the ``i18n`` mapping."""
    match payload:
        case None:
            return LocaleConfig()
        case dict() as data:
            default_locale = _optional_str(data.get("default_locale")) or "en"
            raw_locales = data.get("locales") or [default_locale]
        case _:
            msg = "'i18n' must be a mapping."
            raise SiteConfigError(msg)
    if not isinstance(raw_locales, list):
        msg = "'i18n.locales' must be a list."
        raise SiteConfigError(msg)
    locales = tuple(
        str(locale).strip() for locale in raw_locales if str(locale).strip()
    )
    if default_locale not in locales:
        msg = f"Default locale '{default_locale}' is not listed in 'i18n.locales'."
        raise SiteConfigError(msg)
    return LocaleConfig(default_locale=default_locale, locales=locales)


def _build_theme_config(payload: typ.Mapping[str, typ.Any]) -> ThemeConfig:
    """Build a ThemeConfig instance from the provided mapping payload."""
    base = ThemeConfig()
    return ThemeConfig(
        palette=_optional_str(payload.get("palette")) or base.palette,
        pygments_style=_optional_str(payload.get("pygments_style"))
        or base.pygments_style,
        pygments_dark_style=_optional_str(
            payload.get("pygments_dark_style", base.pygments_dark_style)
        ),
        custom_css=_optional_str(payload.get("custom_css")),
    )


def _build_navbar_config(
    payload: object | None, *, fallback_title: str
) -> NavbarConfig | None:
    """Build the navbar configuration, returning None when it is absent."""
    match payload:
        case None:
            return None
        case dict() as data:
            title = _optional_str(data.get("title")) or fallback_title
        case _:
            msg = "'navbar' must be a mapping."
            raise SiteConfigError(msg)
    logo = None
    match data.get("logo"):
        case {"src": src, **rest} if _optional_str(src):
            logo = LogoConfig(src=str(src), alt=_optional_str(rest.get("alt")) or "")
        case None:
            pass
        case _:
            msg = "'navbar.logo' requires a 'src'."
            raise SiteConfigError(msg)
    items = tuple(_build_navbar_item(entry) for entry in data.get("items") or [])
    return NavbarConfig(title=title, logo=logo, items=items)


def _build_navbar_item(entry: object) -> NavbarItemConfig:
    """Build a single navbar item; exactly one target key must be present."""
    match entry:
        case {"label": label, **rest} if _optional_str(label):
            pass
        case _:
            msg = "Navbar items require a 'label'."
            raise SiteConfigError(msg)
    position = _optional_str(rest.get("position")) or "left"
    if position not in NAVBAR_POSITIONS:
        msg = f"Navbar item '{label}' has invalid position {position!r}."
        raise SiteConfigError(msg)
    doc_id = _optional_str(rest.get("doc_id"))
    to = _optional_str(rest.get("to"))
    href = _optional_str(rest.get("href"))
    if sum(target is not None for target in (doc_id, to, href)) != 1:
        msg = f"Navbar item '{label}' needs exactly one of 'doc_id', 'to' or 'href'."
        raise SiteConfigError(msg)
    return NavbarItemConfig(
        label=str(label).strip(), position=position, doc_id=doc_id, to=to, href=href
    )


def _build_footer_config(payload: object | None) -> FooterConfig:
    """Build the footer link groups and copyright line."""
    match payload:
        case None:
            return FooterConfig()
        case dict() as data:
            pass
        case _:
            msg = "'footer' must be a mapping."
            raise SiteConfigError(msg)
    groups: list[FooterLinkGroupConfig] = []
    for group in data.get("links") or []:
        match group:
            case {"title": title, **rest} if _optional_str(title):
                items = tuple(
                    _build_footer_link(item, group_title=str(title))
                    for item in rest.get("items") or []
                )
            case _:
                msg = "Footer link groups require a 'title'."
                raise SiteConfigError(msg)
        groups.append(FooterLinkGroupConfig(title=str(title).strip(), items=items))
    return FooterConfig(
        style=_optional_str(data.get("style")) or "dark",
        link_groups=tuple(groups),
        copyright=_optional_str(data.get("copyright")) or "",
    )


def _build_footer_link(entry: object, *, group_title: str) -> FooterLinkConfig:
    """Build a footer link that points at either a site path or a URL."""
    match entry:
        case {"label": label, **rest} if _optional_str(label):
            pass
        case _:
            msg = f"Footer links in '{group_title}' require a 'label'."
            raise SiteConfigError(msg)
    to = _optional_str(rest.get("to"))
    href = _optional_str(rest.get("href"))
    if (to is None) == (href is None):
        msg = f"Footer link '{label}' needs exactly one of 'to' or 'href'."
        raise SiteConfigError(msg)
    return FooterLinkConfig(label=str(label).strip(), to=to, href=href)


def _build_docs_config(payload: object | None, *, root: Path) -> DocsConfig:
    """Build the docs settings, resolving paths against ``root``."""
    match payload:
        case None:
            data: typ.Mapping[str, typ.Any] = {}
        case dict():
            data = payload
        case _:
            msg = "'docs' must be a mapping."
            raise SiteConfigError(msg)
    sidebar_raw = _optional_str(data.get("sidebar_path"))
    return DocsConfig(
        path=_resolve_path(data.get("path"), root, "docs"),
        sidebar_path=_resolve_path(sidebar_raw, root, sidebar_raw)
        if sidebar_raw
        else None,
        route_base_path=_optional_str(data.get("route_base_path")) or "/",
        edit_url=(_optional_str(data.get("edit_url")) or "").rstrip("/") or None,
    )


__all__ = [
    "NAVBAR_POSITIONS",
    "_build_docs_config",
    "_build_footer_config",
    "_build_locale_config",
    "_build_navbar_config",
    "_build_theme_config",
    "_normalize_base_url",
    "_optional_str",
    "_parse_policy",
    "_resolve_path",
]
