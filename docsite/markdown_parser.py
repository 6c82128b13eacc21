r"""Parse Markdown source documents into front-matter, headings and links.

This module splits the optional YAML front-matter block from a document body
and extracts the pieces the build pipeline needs before rendering: the title
heading, the ordered section headings, and the outgoing link targets. Fenced
code blocks and inline code spans are ignored when scanning for headings and
links.

Example
-------
>>> from docsite.markdown_parser import split_front_matter, extract_links
>>> meta, body = split_front_matter("---\ntitle: Intro\n---\nSee [setup](setup.md).")
>>> meta["title"]
'Intro'
>>> extract_links(body)
('setup.md',)
"""

from __future__ import annotations

import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ._constants import FRONT_MATTER_DELIMITER

FENCED_BLOCK_PATTERN = re.compile(
    r"^[ ]{0,3}(`{3,}|~{3,})[^\n]*\n.*?^[ ]{0,3}\1[ \t]*$", re.MULTILINE | re.DOTALL
)
INLINE_CODE_PATTERN = re.compile(r"(`+)(?!`).+?(?<!`)\1")
TITLE_PATTERN = re.compile(r"^#[ \t]+(.+?)[ \t]*#*[ \t]*$", re.MULTILINE)
HEADING_PATTERN = re.compile(r"^#{2,6}[ \t]+(.+?)[ \t]*#*[ \t]*$", re.MULTILINE)
INLINE_LINK_PATTERN = re.compile(
    r"(?<!!)\[(?:[^\[\]]|\[[^\[\]]*\](?:\([^)]*\))?)*\]"
    r"\(\s*(?:<([^>\n]+)>|([^)\s]+))(?:\s+(?:\"[^\"]*\"|'[^']*'))?\s*\)"
)
REFERENCE_LINK_PATTERN = re.compile(
    r"^[ ]{0,3}\[[^\]]+\]:[ \t]*<?([^\s>]+)>?", re.MULTILINE
)


class FrontMatterError(ValueError):
    """Raised when a front-matter block is malformed."""


def split_front_matter(text: str) -> tuple[dict[str, typ.Any], str]:
    """Split ``text`` into its front-matter mapping and Markdown body.

    Parameters
    ----------
    text : str
        Full document source. Front-matter is only recognised when the very
        first line is ``---``; the block ends at the next ``---`` line.

    Returns
    -------
    tuple[dict[str, Any], str]
        The parsed front-matter (empty when absent) and the remaining body.

    Raises
    ------
    FrontMatterError
        If the block is not terminated, is not valid YAML, or is not a mapping.
    """
    source = text.removeprefix("\ufeff")
    lines = source.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}, source

    for index, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_DELIMITER:
            block = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            break
    else:
        msg = "front-matter block is not terminated by '---'"
        raise FrontMatterError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(block)
    except YAMLError as exc:
        msg = f"invalid front-matter YAML ({exc})"
        raise FrontMatterError(msg) from exc
    if loaded is None:
        return {}, body
    if not isinstance(loaded, dict):
        msg = "front-matter must be a mapping"
        raise FrontMatterError(msg)
    return dict(loaded), body


def _strip_code(body: str) -> str:
    """Blank out fenced blocks and inline code so they are not scanned."""
    without_fences = FENCED_BLOCK_PATTERN.sub("", body)
    return INLINE_CODE_PATTERN.sub("", without_fences)


def _clean_heading(text: str) -> str:
    """Return a cleaned heading, removing escapes and emphasis markers."""
    return text.replace("\\", "").replace("**", "").strip()


def extract_title(body: str) -> str | None:
    """Return the text of the first level-one heading, if any."""
    match = TITLE_PATTERN.search(_strip_code(body))
    if match is None:
        return None
    return _clean_heading(match.group(1)) or None


def strip_title_heading(body: str) -> str:
    """Drop a level-one heading when it is the first non-blank line of ``body``."""
    stripped = body.lstrip()
    match = TITLE_PATTERN.match(stripped)
    if match is None:
        return body
    return stripped[match.end() :].lstrip("\n")


def extract_headings(body: str) -> tuple[str, ...]:
    """Return the level-two to level-six headings in document order."""
    return tuple(
        heading
        for heading in (
            _clean_heading(match.group(1))
            for match in HEADING_PATTERN.finditer(_strip_code(body))
        )
        if heading
    )


def extract_links(body: str) -> tuple[str, ...]:
    """Return unique outgoing link targets in first-seen order.

    Inline links and reference definitions are collected; images are skipped
    unless they are wrapped in a link, in which case the link target counts.
    """
    scanned = _strip_code(body)
    matches = sorted(
        [
            *INLINE_LINK_PATTERN.finditer(scanned),
            *REFERENCE_LINK_PATTERN.finditer(scanned),
        ],
        key=lambda match: match.start(),
    )
    # Inline links capture an angle-bracketed or a bare target in separate groups.
    return tuple(
        dict.fromkeys(
            next(group for group in match.groups() if group) for match in matches
        )
    )


__all__ = [
    "FrontMatterError",
    "extract_headings",
    "extract_links",
    "extract_title",
    "split_front_matter",
    "strip_title_heading",
]
