"""Validate cross-references between documents.

:class:`LinkResolver` maps a link target written inside a document to the slug
of the document it points at, following the same rules the renderer uses when
rewriting links. :class:`LinkValidator` walks every document's outgoing links
and applies the configured :class:`~docsite.config.BrokenLinkPolicy`:

* ``throw`` raises :class:`~docsite.errors.BrokenLinkError` on the first
  violation;
* ``warn`` logs and collects every violation;
* ``ignore`` suppresses reporting.

Links to ``.md``/``.mdx`` files follow ``on_broken_markdown_links``; every
other internal link follows ``on_broken_links``.

Example
-------
>>> from docsite.links import is_external_url
>>> is_external_url("https://example.com/docs")
True
>>> is_external_url("../setup.md")
False
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import posixpath
import re
import typing as typ
from urllib.parse import urlsplit

from ._constants import DOCUMENT_EXTENSIONS
from .config import BrokenLinkPolicy
from .errors import BrokenLinkError

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .loader import Document, DocumentSet

logger = logging.getLogger(__name__)

EXTERNAL_URL_PATTERN = re.compile(
    r"^(?:(?:https?:)?//[^/\s?#]+\S*|(?:mailto|tel):\S+)$", re.IGNORECASE
)
SITE_ROOT = ""


def is_external_url(target: str) -> bool:
    """Return True when ``target`` matches the recognised external-URL pattern."""
    return bool(EXTERNAL_URL_PATTERN.match(target.strip()))


class LinkKind(enum.Enum):
    """Classification of a link target."""

    EXTERNAL = "external"
    ANCHOR = "anchor"
    ASSET = "asset"
    MARKDOWN = "markdown"
    ROUTE = "route"


class Severity(enum.StrEnum):
    """Severity attached to a reported violation."""

    WARN = "warn"
    FAIL = "fail"


@dc.dataclass(slots=True, frozen=True)
class LinkViolation:
    """A link target that does not resolve to a known document."""

    source: str
    target: str
    severity: Severity


@dc.dataclass(slots=True, frozen=True)
class LinkReport:
    """Violations collected by a validation run, in document/link order."""

    violations: tuple[LinkViolation, ...] = ()

    @property
    def ok(self) -> bool:
        """Return True when no violation was reported."""
        return not self.violations


class LinkResolver:
    """Resolve in-document link targets to document slugs."""

    def __init__(self, documents: DocumentSet, *, route_base_path: str = "/") -> None:
        self._slugs = frozenset(documents)
        self._by_source = documents.by_source()
        self._route_prefix = route_base_path.strip("/")

    @staticmethod
    def classify(target: str) -> LinkKind:
        """Return the :class:`LinkKind` of ``target``."""
        stripped = target.strip()
        if is_external_url(stripped) or urlsplit(stripped).scheme:
            return LinkKind.EXTERNAL
        path = urlsplit(stripped).path
        if not path:
            return LinkKind.ANCHOR
        suffix = posixpath.splitext(path.rstrip("/"))[1].lower()
        if suffix in DOCUMENT_EXTENSIONS:
            return LinkKind.MARKDOWN
        if suffix and not path.endswith("/"):
            return LinkKind.ASSET
        return LinkKind.ROUTE

    def resolve(self, target: str, source: Document) -> str | None:
        """Return the slug ``target`` points at, ``""`` for the site root.

        Returns ``None`` when the target is internal but does not resolve.
        External, anchor-only and asset targets are not resolvable and also
        return ``None``; callers check :meth:`classify` first.
        """
        kind = self.classify(target)
        path = urlsplit(target.strip()).path
        if kind is LinkKind.MARKDOWN:
            return self._resolve_markdown(path, source)
        if kind is LinkKind.ROUTE:
            return self._resolve_route(path, source)
        return None

    def _resolve_markdown(self, path: str, source: Document) -> str | None:
        """Resolve a link to a source file, relative to the linking file."""
        stem = posixpath.splitext(path)[0]
        if stem.startswith("/"):
            joined = stem.lstrip("/")
        else:
            joined = posixpath.normpath(posixpath.join(source.directory, stem))
        return self._by_source.get(joined)

    def _resolve_route(self, path: str, source: Document) -> str | None:
        """Resolve a site route, absolute or relative to the linking page."""
        if path.startswith("/"):
            candidate = path.strip("/")
            prefix = self._route_prefix
            if prefix and (candidate == prefix or candidate.startswith(f"{prefix}/")):
                candidate = candidate[len(prefix) :].strip("/")
        else:
            candidate = posixpath.normpath(posixpath.join(f"{source.slug}/..", path))
        candidate = candidate.strip("/")
        if candidate in self._slugs:
            return candidate
        if candidate == ".." or candidate.startswith("../"):
            return None
        stripped = candidate.removesuffix("/index")
        if stripped in self._slugs:
            return stripped
        if stripped in {".", "", "index"}:
            return SITE_ROOT
        return None


class LinkValidator:
    """Check every outgoing link of every document against the loaded set."""

    def __init__(self, config: SiteConfig) -> None:
        """Initialize the validator.

        Parameters
        ----------
        config : SiteConfig
            Supplies the broken-link policies and the docs route base path.
        """
        self.config = config

    @staticmethod
    def is_external(target: str) -> bool:
        """Return True when ``target`` is a recognised external URL."""
        return is_external_url(target)

    def policy_for(self, kind: LinkKind) -> BrokenLinkPolicy:
        """Return the policy governing links of ``kind``."""
        if kind is LinkKind.MARKDOWN:
            return self.config.on_broken_markdown_links
        return self.config.on_broken_links

    def validate(self, documents: DocumentSet) -> LinkReport:
        """Validate the links of ``documents`` under the configured policies.

        Parameters
        ----------
        documents : DocumentSet
            Documents produced by the content loader.

        Returns
        -------
        LinkReport
            Violations reported under the ``warn`` policy. Violations under
            ``ignore`` are omitted.

        Raises
        ------
        BrokenLinkError
            On the first violation governed by the ``throw`` policy.
        """
        resolver = LinkResolver(
            documents, route_base_path=self.config.docs.route_base_path
        )
        violations: list[LinkViolation] = []
        for document in documents.documents:
            for target in document.links:
                kind = resolver.classify(target)
                if kind not in {LinkKind.MARKDOWN, LinkKind.ROUTE}:
                    continue
                if resolver.resolve(target, document) is not None:
                    continue
                policy = self.policy_for(kind)
                match policy:
                    case BrokenLinkPolicy.THROW:
                        raise BrokenLinkError(
                            LinkViolation(document.slug, target, Severity.FAIL)
                        )
                    case BrokenLinkPolicy.WARN:
                        logger.warning(
                            "broken link in %r: %r does not resolve to a document",
                            document.slug,
                            target,
                        )
                        violations.append(
                            LinkViolation(document.slug, target, Severity.WARN)
                        )
                    case BrokenLinkPolicy.IGNORE:
                        pass
        return LinkReport(violations=tuple(violations))


__all__ = [
    "EXTERNAL_URL_PATTERN",
    "LinkKind",
    "LinkReport",
    "LinkResolver",
    "LinkValidator",
    "LinkViolation",
    "Severity",
    "is_external_url",
]
