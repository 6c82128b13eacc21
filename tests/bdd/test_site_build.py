"""Behaviour tests for building a site from documents and a sidebar.

These pytest-bdd scenarios run the whole pipeline through
:class:`~docsite.builder.SiteBuilder`. The feature file ``site_build.feature``
covers a successful build, a sidebar naming an unknown document, and a broken
link under the ``throw`` and ``warn`` policies.

Usage
-----
Run ``pytest tests/bdd/test_site_build.py -v`` after installing the test
extra (``pip install -e .[test]``). Each scenario writes its documents and
configuration into ``tmp_path``; no network access is needed.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from docsite.builder import BuildResult, SiteBuilder
from docsite.config import build_site_config
from docsite.errors import BrokenLinkError, BuildError, UnresolvedReferenceError

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "site_build.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, typ.Any]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {"sidebar": [], "policy": "throw"}


@given(
    parsers.re(
        r'a document "(?P<slug>[^"]+)" titled "(?P<title>[^"]+)"'
        r'(?: linking to "(?P<link>[^"]+)")?$'
    )
)
def given_document(
    tmp_path: Path, slug: str, title: str, link: str | None
) -> None:
    """Write a Markdown document whose first heading is ``title``."""
    path = tmp_path / "docs" / f"{slug}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    body = f"# {title}\n"
    if link:
        body += f"\nSee [elsewhere]({link}).\n"
    path.write_text(body, encoding="utf-8")


@given(parsers.parse('a sidebar entry labelled "{label}" targeting "{target}"'))
def given_sidebar_entry(
    scenario_state: dict[str, typ.Any], label: str, target: str
) -> None:
    """Append a ``{label, target}`` entry to the sidebar file."""
    scenario_state["sidebar"].append((label, target))


@given(parsers.parse('the broken link policy is "{policy}"'))
def given_policy(scenario_state: dict[str, typ.Any], policy: str) -> None:
    """Set ``on_broken_links`` for the scenario."""
    scenario_state["policy"] = policy


@when("I build the site")
def when_build(tmp_path: Path, scenario_state: dict[str, typ.Any]) -> None:
    """Write the sidebar and run the build, capturing the result or error."""
    sidebar = tmp_path / "sidebar.yaml"
    sidebar.write_text(
        "".join(
            f'- label: "{label}"\n  target: "{target}"\n'
            for label, target in scenario_state["sidebar"]
        ),
        encoding="utf-8",
    )
    config = build_site_config(
        {
            "title": "Scenario Docs",
            "on_broken_links": scenario_state["policy"],
            "docs": {"path": "docs", "sidebar_path": "sidebar.yaml"},
            "output_dir": "build",
        },
        root=tmp_path,
    )
    try:
        scenario_state["result"] = SiteBuilder(config).run()
        scenario_state["error"] = None
    except BuildError as exc:
        scenario_state["result"] = None
        scenario_state["error"] = exc


@then("the build succeeds")
def then_build_succeeds(scenario_state: dict[str, typ.Any]) -> None:
    """Verify no build error was raised."""
    assert scenario_state["error"] is None
    assert scenario_state["result"] is not None


@then(parsers.parse('the output contains {count:d} page titled "{title}"'))
def then_pages_titled(
    scenario_state: dict[str, typ.Any], count: int, title: str
) -> None:
    """Verify the number of document pages and their hero titles."""
    result = typ.cast("BuildResult", scenario_state["result"])
    document_pages = [page for page in result.pages if page.slug is not None]
    assert len(document_pages) == count
    for page in document_pages:
        soup = BeautifulSoup(page.content, "html.parser")
        assert soup.select_one("h1.doc-hero__title").get_text(strip=True) == title


@then(parsers.parse("{count:d} link violations are reported"))
def then_violation_count(scenario_state: dict[str, typ.Any], count: int) -> None:
    """Verify the number of violations collected in the build report."""
    result = typ.cast("BuildResult", scenario_state["result"])
    assert len(result.report.violations) == count


@then(parsers.parse('the build fails with an unresolved reference to "{target}"'))
def then_unresolved(scenario_state: dict[str, typ.Any], target: str) -> None:
    """Verify the build aborted on an unknown navigation target."""
    error = scenario_state["error"]
    assert isinstance(error, UnresolvedReferenceError)
    assert error.missing == (target,)
    assert target in str(error)


@then(parsers.parse('the build fails with a broken link to "{target}"'))
def then_broken_link(scenario_state: dict[str, typ.Any], target: str) -> None:
    """Verify the build aborted on a broken link under ``throw``."""
    error = scenario_state["error"]
    assert isinstance(error, BrokenLinkError)
    assert error.violation.target == target
