"""Shared fixtures for building throwaway documentation sites on disk."""

from __future__ import annotations

import typing as typ

import pytest

from docsite.config import build_site_config

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from docsite.config import SiteConfig


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Return an empty docs directory inside the test's temporary folder."""
    path = tmp_path / "docs"
    path.mkdir()
    return path


@pytest.fixture
def write_doc(docs_dir: Path) -> cabc.Callable[[str, str], Path]:
    """Return a helper that writes a Markdown source relative to ``docs_dir``."""

    def _write(relative: str, text: str) -> Path:
        path = docs_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_config(tmp_path: Path) -> cabc.Callable[..., SiteConfig]:
    """Return a factory building a SiteConfig rooted at ``tmp_path``.

    Keyword arguments are merged into a minimal raw configuration that points
    ``docs.path`` at ``docs`` and writes output to ``build``.
    """

    def _make(**overrides: object) -> SiteConfig:
        raw: dict[str, object] = {
            "title": "Docs",
            "docs": {"path": "docs"},
            "output_dir": "build",
        }
        raw.update(overrides)
        return build_site_config(raw, root=tmp_path)

    return _make
