"""Cyclopts CLI entrypoint for building docsite documentation sites.

The ``docsite`` console script defined here loads ``docsite.yaml``, runs the
build pipeline, and writes static HTML to the configured output directory.
``docsite check`` runs the same validation without writing anything, and
``docsite serve`` builds the site and previews it with a local HTTP server.
Every option can also be supplied through ``DOCSITE_*`` environment variables.

Examples
--------
Build the site described by the default configuration:

>>> from docsite.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory:

>>> from docsite.cli import app
>>> app(["build", "--output-dir", "dist"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_CONFIG_FILENAME
from .builder import SiteBuilder
from .config import SiteConfigError, load_site_config
from .errors import BuildError
from .server import make_server

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .links import LinkReport

DEFAULT_CONFIG = Path(DEFAULT_CONFIG_FILENAME)
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

app = App(
    name="docsite",
    config=cyclopts.config.Env("DOCSITE_", command=False),  # type: ignore[unknown-argument]
)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    """Send pipeline logs to stderr at INFO, or DEBUG when ``verbose``."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _fail(exc: Exception) -> typ.NoReturn:
    """Report ``exc`` on stderr and exit with status 1."""
    print(f"error: {exc}", file=sys.stderr)
    raise SystemExit(1) from exc


def _load(config: Path) -> SiteConfig:
    try:
        return load_site_config(config)
    except (FileNotFoundError, SiteConfigError, TypeError) as exc:
        _fail(exc)


def _print_report(report: LinkReport) -> None:
    """Print collected link warnings and a one-line summary."""
    for violation in report.violations:
        print(
            f"{violation.severity}: broken link in {violation.source}: "
            f"{violation.target}",
            file=sys.stderr,
        )
    if report.violations:
        print(f"{len(report.violations)} broken link(s) reported", file=sys.stderr)


@app.command(help="Build the static documentation site.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="DOCSITE_CONFIG")
    ] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="DOCSITE_OUTPUT_DIR"),
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Log every pipeline step")] = False,
) -> None:
    """Build the documentation site described by ``config``.

    Parameters
    ----------
    config : Path, optional
        Path to the ``docsite.yaml`` configuration file (overridable via
        ``DOCSITE_CONFIG``).
    output_dir : Path or None, optional
        Override for the configured output directory.
    verbose : bool, optional
        Enable debug logging.

    Returns
    -------
    None
        Writes the rendered site and prints the generated paths.

    Raises
    ------
    SystemExit
        With status 1 when the configuration is invalid or the build fails,
        including broken links under the ``throw`` policy.
    """
    _configure_logging(verbose=verbose)
    site_config = _load(config)
    try:
        result = SiteBuilder(site_config).run(output_dir)
    except (BuildError, FileNotFoundError) as exc:
        _fail(exc)
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    _print_report(result.report)


@app.command(help="Validate documents, navigation and links without writing.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="DOCSITE_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: typ.Annotated[bool, Parameter(help="Log every pipeline step")] = False,
) -> None:
    """Run the load, navigation and link-validation stages only."""
    _configure_logging(verbose=verbose)
    site_config = _load(config)
    try:
        plan = SiteBuilder(site_config).check()
    except (BuildError, FileNotFoundError) as exc:
        _fail(exc)
    _print_report(plan.report)
    print(f"ok: {len(plan.documents)} documents checked")


@app.command(help="Build the site and serve it locally.")
def serve(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="DOCSITE_CONFIG")
    ] = DEFAULT_CONFIG,
    host: typ.Annotated[str, Parameter(help="Interface to bind")] = "127.0.0.1",
    port: typ.Annotated[int, Parameter(help="Port to listen on")] = 3000,
    verbose: typ.Annotated[bool, Parameter(help="Log every pipeline step")] = False,
) -> None:
    """Build into the configured output directory, then serve it until Ctrl-C."""
    _configure_logging(verbose=verbose)
    site_config = _load(config)
    try:
        result = SiteBuilder(site_config).run()
    except (BuildError, FileNotFoundError) as exc:
        _fail(exc)
    _print_report(result.report)
    server = make_server(
        site_config.output_dir, base_url=site_config.base_url, host=host, port=port
    )
    bound_host, bound_port = server.server_address[:2]
    print(
        f"serving {_format_path(site_config.output_dir)} at "
        f"http://{bound_host}:{bound_port}{site_config.base_url}"
    )
    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:  # pragma: no cover - interactive stop
            print("stopped")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``docsite`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
