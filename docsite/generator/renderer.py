"""Utilities for rendering markdown and syntax-highlighted code snippets."""

from __future__ import annotations

import re
import typing as typ
from html import escape, unescape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from .models import RenderedMarkdown, TocEntry

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

CODE_BLOCK_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?[^\n]*\n.*?^\1[ \t]*$", re.DOTALL | re.MULTILINE
)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?((?:,|[ \t]+)[^\r\n]+)$", re.MULTILINE
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')


class HtmlContentRenderer:
    """Render markdown and code snippets with consistent styling."""

    def __init__(
        self, pygments_style: str = "default", dark_style: str | None = None
    ) -> None:
        """Initialize a renderer with light and optional dark Pygments styles.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"default"``.
        dark_style : str, optional
            Pygments style applied when the reader prefers a dark colour
            scheme; ``None`` disables the dark stylesheet.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")
        self._dark_formatter = (
            HtmlFormatter(style=dark_style, cssclass="codehilite")
            if dark_style
            else None
        )

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        css = self._formatter.get_style_defs(".codehilite")
        if self._dark_formatter is None:
            return css
        dark = self._dark_formatter.get_style_defs(".codehilite")
        return f"{css}\n@media (prefers-color-scheme: dark) {{\n{dark}\n}}"

    def markdown(
        self, text: str, *, link_extension: Extension | None = None
    ) -> RenderedMarkdown:
        """Render markdown into HTML using the configured extensions.

        Parameters
        ----------
        text : str
            Markdown source.
        link_extension : Extension, optional
            Markdown extension used when rewriting links; pass ``None`` to
            leave links untouched.

        Returns
        -------
        RenderedMarkdown
            HTML body and the table of contents for ``##``/``###`` headings.
        """
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return RenderedMarkdown(html="")
        extensions: list[Extension | str] = [
            "fenced_code",
            "codehilite",
            "tables",
            "sane_lists",
            "toc",
        ]
        if link_extension:
            extensions.append(link_extension)
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                },
                "toc": {"toc_depth": "2-3"},
            },
        )
        html = md.convert(normalized)
        toc = tuple(_flatten_toc(getattr(md, "toc_tokens", [])))
        return RenderedMarkdown(
            html=self._annotate_codehilite(html, normalized), toc=toc
        )

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach language metadata to each highlighted block in converted markdown."""
        languages = [
            match.group(2) or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        """Outdent fences and drop extra fence labels such as ``title=...``."""
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


def _flatten_toc(tokens: list[dict[str, typ.Any]]) -> list[TocEntry]:
    """Flatten Python-Markdown's nested ``toc_tokens`` in document order."""
    entries: list[TocEntry] = []
    for token in tokens:
        entries.append(
            TocEntry(
                label=unescape(str(token.get("name", ""))),
                anchor=str(token.get("id", "")),
                level=int(token.get("level", 2)),
            )
        )
        entries.extend(_flatten_toc(token.get("children") or []))
    return entries


__all__ = ["CODE_BLOCK_PATTERN", "HtmlContentRenderer"]
