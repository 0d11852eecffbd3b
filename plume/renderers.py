"""Markdown collaborator for Plume.

This module wraps mistune behind the three operations the rest of Plume needs:

- parse: Turn markdown text into a document (the mistune token tree).
- word_count: Count whitespace-delimited words in text nodes only.
- render_html: Render a document's token tree to HTML.

The text is parsed once; counting and rendering both walk the same tokens.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

MARKDOWN_PLUGINS = ["strikethrough", "table", "url"]

_TAG_RE = re.compile(r"<[^>]+>")
_SLUG_DROP_RE = re.compile(r"[^\w\s-]")
_SLUG_JOIN_RE = re.compile(r"[\s_-]+")


def _slugify(text: str) -> str:
    """Turn rendered heading text into an anchor name.

    Examples:
        >>> _slugify("Hello, <em>World</em>!")
        'hello-world'
    """
    plain = _SLUG_DROP_RE.sub("", _TAG_RE.sub("", text).lower())
    return _SLUG_JOIN_RE.sub("-", plain).strip("-")


def _highlight(code: str, language: str) -> str | None:
    try:
        lexer = get_lexer_by_name(language, stripall=True)
    except ClassNotFound:
        return None
    return highlight(code, lexer, HtmlFormatter(cssclass="highlight"))


class _PostRenderer(mistune.HTMLRenderer):
    """Renders post bodies: every heading gets a unique anchor id, fenced
    code with a known language goes through Pygments."""

    def __init__(self):
        super().__init__(escape=False)
        self._seen_ids: dict[str, int] = {}

    def _anchor(self, text: str) -> str:
        slug = _slugify(text)
        count = self._seen_ids.get(slug)
        self._seen_ids[slug] = 0 if count is None else count + 1
        return slug if count is None else f"{slug}-{count + 1}"

    def heading(self, text: str, level: int, **attrs) -> str:
        return f'<h{level} id="{self._anchor(text)}">{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        language = info.split()[0] if info and info.strip() else ""
        if not language:
            return f"<pre><code>{mistune.escape(code)}</code></pre>\n"
        highlighted = _highlight(code, language)
        if highlighted is not None:
            return highlighted
        lang_attr = mistune.escape(language)
        return f'<pre><code class="language-{lang_attr}">{mistune.escape(code)}</code></pre>\n'


@dataclass
class MarkdownDocument:
    """A parsed markdown document.

    Attributes:
        source: The markdown text the document was parsed from.
        tokens: mistune token tree (list of nested dicts).
        state: mistune block state from the parse (reference links and
            the like), handed back to the renderer.
    """

    source: str
    tokens: list[dict[str, Any]] = field(default_factory=list)
    state: Any = field(default=None, repr=False, compare=False)


def parse(text: str) -> MarkdownDocument:
    """Parse markdown text into a document tree.

    Args:
        text: Markdown source.

    Returns:
        MarkdownDocument holding the source and its token tree.
    """
    markdown = mistune.create_markdown(renderer="ast", plugins=MARKDOWN_PLUGINS)
    tokens, state = markdown.parse(text)
    return MarkdownDocument(source=text, tokens=list(tokens), state=state)


def _count_text_words(tokens: Iterable[dict[str, Any]]) -> int:
    total = 0
    for token in tokens:
        if token.get("type") == "text":
            total += len(str(token.get("raw", "")).split())
        total += _count_text_words(token.get("children") or [])
    return total


def word_count(document: MarkdownDocument) -> int:
    """Count the words in a document's text nodes.

    Markup (heading markers, emphasis, link targets, code) is not counted;
    only whitespace-delimited tokens inside text nodes are.

    Args:
        document: Parsed markdown document.

    Returns:
        Number of words.
    """
    return _count_text_words(document.tokens)


def render_html(document: MarkdownDocument) -> str:
    """Render a document's token tree to HTML.

    Args:
        document: Parsed markdown document.

    Returns:
        Rendered HTML string.
    """
    renderer = _PostRenderer()
    # Plugins register their render functions on the renderer they are built with.
    mistune.create_markdown(renderer=renderer, plugins=MARKDOWN_PLUGINS)
    state = document.state if document.state is not None else mistune.BlockState()
    return renderer(document.tokens, state)
