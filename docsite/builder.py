"""Run the docsite build pipeline end to end.

:class:`SiteBuilder` executes the stages in order, each one completing before
the next starts: load documents, build navigation, validate links, render and
write pages. Structural errors (parse failures, duplicate slugs, unresolved
navigation entries) always abort the build; broken links abort it only under
the ``throw`` policy and are otherwise returned in the build report.

Example
-------
>>> from pathlib import Path
>>> from docsite.builder import SiteBuilder
>>> from docsite.config import load_site_config
>>> config = load_site_config(Path("docsite.yaml"))  # doctest: +SKIP
>>> result = SiteBuilder(config).run()  # doctest: +SKIP
>>> result.report.ok  # doctest: +SKIP
True
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from .generator import RenderedPage, SiteRenderer, write_site
from .links import LinkReport, LinkValidator
from .loader import ContentLoader, DocumentSet
from .navigation import NavigationBuilder, NavigationNode

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import SiteConfig

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True, frozen=True)
class SitePlan:
    """Validated inputs of the render stage."""

    documents: DocumentSet
    navigation: tuple[NavigationNode, ...]
    report: LinkReport


@dc.dataclass(slots=True, frozen=True)
class BuildResult:
    """Outcome of a completed build."""

    written: tuple[Path, ...]
    pages: tuple[RenderedPage, ...]
    report: LinkReport


class SiteBuilder:
    """Orchestrate loading, navigation, validation and rendering."""

    def __init__(
        self, config: SiteConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        config : SiteConfig
            Site configuration shared with every stage.
        templates_dir : Path, optional
            Override for the renderer's Jinja template directory.
        """
        self.config = config
        self.templates_dir = templates_dir

    def check(self) -> SitePlan:
        """Load, resolve navigation and validate links without rendering.

        Raises
        ------
        ParseError, DuplicateSlugError
            From the content loader.
        NavigationSpecError, UnresolvedReferenceError
            From the navigation builder.
        BrokenLinkError
            From the link validator under the ``throw`` policy.
        """
        documents = ContentLoader(self.config.docs.path).load()
        logger.info("loaded %d documents", len(documents))

        navigation_builder = NavigationBuilder(self.config)
        navigation = navigation_builder.build(navigation_builder.load_spec(), documents)
        navigation_builder.check_navbar(documents)

        report = LinkValidator(self.config).validate(documents)
        if report.violations:
            logger.info("%d broken links reported", len(report.violations))
        return SitePlan(documents=documents, navigation=navigation, report=report)

    def run(self, output_dir: Path | None = None) -> BuildResult:
        """Build the site and write it to ``output_dir``.

        Parameters
        ----------
        output_dir : Path, optional
            Destination directory; defaults to ``config.output_dir``.

        Returns
        -------
        BuildResult
            Written paths, rendered pages and the link report.
        """
        plan = self.check()
        renderer = SiteRenderer(self.config, templates_dir=self.templates_dir)
        pages = renderer.render(plan.documents, plan.navigation)
        destination = output_dir or self.config.output_dir
        written = write_site(pages, destination)
        logger.info("wrote %d files to %s", len(written), destination)
        return BuildResult(written=tuple(written), pages=pages, report=plan.report)


__all__ = ["BuildResult", "SiteBuilder", "SitePlan"]
