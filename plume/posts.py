"""Post metadata derivation for Plume.

A post is identified by the title on its first line, which must be a level-1
markdown heading. Everything else about the post (output path, read time,
publish date, rendered HTML) is derived from that title and the markdown body.

Key classes:
- Post: Dataclass holding a post's metadata and, transiently, its content.
- PostError: Raised when a markdown source cannot become a post.

Key functions:
- extract_title: Read the title from the first line of a markdown source.
- derive_post: Build a Post from markdown text.
- load_post: Read a markdown file and derive a Post from it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path

from . import renderers
from .utils import format_publish_date, path_for_title

TITLE_RE = re.compile(r"^# (?P<title>\S.*?)\s*$")


class PostError(Exception):
    """Raised when a markdown source cannot be turned into a post.

    Attributes:
        source_path: Path to the markdown file.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path, message: str):
        self.source_path = source_path
        self.message = message
        super().__init__(f"{source_path}: {message}")


@dataclass
class Post:
    """A single blog post.

    Attributes:
        title: Post title, unique across the blog.
        path: Output filename derived from the title.
        publish_date: Human-readable publish date (``Month DD, YYYY``).
        read_time: Estimated reading time label (``<n> min``).
        content: Markdown source. Never persisted.
        rendered_html: Rendered markdown body. Never persisted.
    """

    title: str
    path: str
    publish_date: str
    read_time: str = ""
    content: str = ""
    rendered_html: str = ""

    def stripped(self) -> Post:
        """Return a copy without the transient content fields."""
        return replace(self, content="", rendered_html="")


def extract_title(text: str, source_path: Path) -> str:
    """Extract the post title from the first line of a markdown source.

    The ``#`` must be followed by exactly one space and then the title;
    trailing whitespace is dropped from the title.

    Args:
        text: Markdown source.
        source_path: Path of the source, for error reporting.

    Returns:
        The heading text of the first line.

    Raises:
        PostError: If the first line is not a ``# Title`` heading.
    """
    lines = text.splitlines()
    first_line = lines[0] if lines else ""
    match = TITLE_RE.match(first_line)
    if not match:
        raise PostError(
            source_path,
            f"first line must be a level-1 heading like '# Title', got {first_line!r}",
        )
    return match.group("title")


def read_time_label(words: int, words_per_minute: int = 100) -> str:
    """Format an estimated reading time, rounding down to whole minutes.

    Examples:
        >>> read_time_label(250)
        '2 min'
    """
    return f"{words // words_per_minute} min"


def derive_post(
    text: str,
    source_path: Path,
    now: datetime | None = None,
    words_per_minute: int = 100,
) -> Post:
    """Derive a Post from markdown text.

    Args:
        text: Markdown source whose first line is ``# Title``.
        source_path: Path of the source, for error reporting.
        now: Moment used as the publish date. Defaults to the current UTC time.
        words_per_minute: Reading speed for the read time estimate.

    Returns:
        Post with content and rendered_html populated.

    Raises:
        PostError: If the title line is malformed.
    """
    text = text.lstrip("\ufeff")
    title = extract_title(text, source_path)
    document = renderers.parse(text)
    moment = now or datetime.now(timezone.utc)
    return Post(
        title=title,
        path=path_for_title(title),
        publish_date=format_publish_date(moment),
        read_time=read_time_label(renderers.word_count(document), words_per_minute),
        content=text,
        rendered_html=renderers.render_html(document),
    )


def load_post(
    source_path: Path,
    now: datetime | None = None,
    words_per_minute: int = 100,
) -> Post:
    """Read a markdown file and derive a Post from it.

    Args:
        source_path: Path to the markdown file.
        now: Moment used as the publish date.
        words_per_minute: Reading speed for the read time estimate.

    Returns:
        Derived Post.
    """
    text = source_path.read_text(encoding="utf-8")
    return derive_post(text, source_path, now=now, words_per_minute=words_per_minute)
