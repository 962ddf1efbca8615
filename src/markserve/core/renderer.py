"""Markdown rendering.

Converts markdown sources to HTML fragments with mistune. Headings get
generated anchor ids and absolute links open in a new tab.
"""

import logging
import re
from collections.abc import Iterator
from typing import Any
from urllib.parse import urlsplit

import mistune
from mistune.core import BlockState
from mistune.util import safe_entity

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Markdown Server"

MARKDOWN_PLUGINS = ["table", "strikethrough", "footnotes", "def_list", "url"]

_INLINE_LINK_RE = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_NON_WORD_RE = re.compile(r"[\W_]+")


def slugify(text: str) -> str:
    """Derive an anchor id from heading source text.

    Args:
        text: Raw heading text, possibly with inline markdown

    Returns:
        Lowercase word runs joined by "-", e.g. "Getting Started" -> "getting-started"
    """
    text = _INLINE_LINK_RE.sub(r"\1", text)
    slug = _NON_WORD_RE.sub("-", text.lower()).strip("-")
    return slug or "section"


def is_external_link(url: str) -> bool:
    """Check whether a link points outside the site.

    Anchors, root-relative, dot-relative and bare relative links are local.
    Anything with a scheme or a protocol-relative host is external.
    """
    if url.startswith("//"):
        return True
    parts = urlsplit(url)
    return bool(parts.scheme or parts.netloc)


def extract_title(markdown_text: str) -> str:
    """Extract page title from the first level-1 heading.

    Args:
        markdown_text: Raw markdown source

    Returns:
        Text after "# " on the first matching line, or DEFAULT_TITLE
    """
    for line in markdown_text.split("\n"):
        line = line.strip()
        if line.startswith("# "):
            return line[2:]
    return DEFAULT_TITLE


class _PageHTMLRenderer(mistune.HTMLRenderer):
    """HTML renderer that opens external links in a new tab."""

    def link(self, text: str, url: str, title: str | None = None) -> str:
        s = '<a href="' + self.safe_url(url) + '"'
        if title:
            s += ' title="' + safe_entity(title) + '"'
        if is_external_link(url):
            s += ' target="_blank" rel="noopener noreferrer"'
        return s + ">" + text + "</a>"


def _iter_headings(tokens: list[dict[str, Any]]) -> Iterator[dict[str, Any]]:
    for token in tokens:
        if token["type"] == "heading":
            yield token
        children = token.get("children")
        if isinstance(children, list):
            yield from _iter_headings(children)


def _heading_anchor_hook(md: mistune.Markdown, state: BlockState) -> None:
    used: set[str] = set()
    for token in _iter_headings(state.tokens):
        base = slugify(token.get("text", ""))
        anchor = base
        counter = 0
        while anchor in used:
            counter += 1
            anchor = f"{base}-{counter}"
        used.add(anchor)
        token["attrs"]["id"] = anchor


class MarkdownRenderer:
    """Renders markdown sources to HTML fragments.

    Raw HTML in the source is escaped, and links with harmful schemes such as
    ``javascript:`` are neutralised by mistune. Rendering holds no state
    between calls, so one instance serves all requests.
    """

    def __init__(self) -> None:
        self._markdown = mistune.create_markdown(
            renderer=_PageHTMLRenderer(escape=True),
            plugins=MARKDOWN_PLUGINS,
        )
        self._markdown.before_render_hooks.append(_heading_anchor_hook)

    def render(self, source: bytes | str) -> str:
        """Render markdown to an HTML fragment.

        Args:
            source: Markdown source; bytes are decoded as UTF-8 with replacement

        Returns:
            HTML fragment string
        """
        if isinstance(source, bytes):
            source = source.decode("utf-8", errors="replace")
        logger.debug(f"Rendering {len(source)} characters of markdown")
        html = self._markdown(source)
        return str(html)
