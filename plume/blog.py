"""Blog orchestration for Plume.

This module ties posts, the archive, the feed and the templates together to
run the two commands:

- publish: derive a post from a markdown file, write its page, update the feed
  and archive.
- remove: drop a post from the feed and archive.

Both commands are followed by ``Blog.build`` (home page and feed) and
``Blog.save`` (archive). The archive and feed are loaded once into a
``BlogState`` and passed to ``Blog`` explicitly.

Key functions:
- prepare_paths: Verify templates and create missing state files.
- load_state: Load the archive and feed for one invocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .archive import Archive
from .config import BlogConfig
from .feeds import FeedStore
from .posts import Post, load_post
from .templates import TemplateEngine
from .utils import atomic_write


class BlogError(Exception):
    """Raised when the blog's required files are not in place.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


@dataclass
class BlogState:
    """The state one invocation reads, mutates and writes back.

    Attributes:
        archive: Title to post metadata mapping.
        feed: RSS channel.
    """

    archive: Archive
    feed: FeedStore


def prepare_paths(config: BlogConfig) -> None:
    """Make sure the blog's files are in place before any command runs.

    Creates the output directory and empty archive/feed files when missing.

    Args:
        config: Blog configuration.

    Raises:
        BlogError: If either template file is missing.
    """
    missing = [path for path in config.templates if not path.is_file()]
    if missing:
        names = " and ".join(str(path) for path in missing)
        raise BlogError(f"Template files not found: {names}")

    config.output_dir.mkdir(parents=True, exist_ok=True)
    for state_file in (config.archive_path, config.feed_path):
        if not state_file.exists():
            state_file.parent.mkdir(parents=True, exist_ok=True)
            state_file.touch()


def load_state(config: BlogConfig) -> BlogState:
    """Load the archive and feed named by the configuration.

    Raises:
        ArchiveError: If the archive document is corrupt.
    """
    archive = Archive.load(config.archive_path)
    feed = FeedStore.load(config.feed_path, config.blog_url, config.blog_title)
    return BlogState(archive=archive, feed=feed)


class Blog:
    """Runs blog commands against a loaded state.

    Attributes:
        config: Blog configuration.
        state: Archive and feed for this invocation.
        engine: Template engine used for the post and home pages.
    """

    def __init__(
        self,
        config: BlogConfig,
        state: BlogState,
        engine: TemplateEngine | None = None,
    ):
        self.config = config
        self.state = state
        self.engine = engine or TemplateEngine(config)

    @property
    def archive(self) -> Archive:
        return self.state.archive

    @property
    def feed(self) -> FeedStore:
        return self.state.feed

    def publish(self, source_path: Path, now: datetime | None = None) -> Post:
        """Publish or republish a post from a markdown file.

        Republishing a title replaces its page, feed item and archive entry,
        including the publish date.

        Args:
            source_path: Markdown file whose first line is ``# Title``.
            now: Publish moment. Defaults to the current UTC time.

        Returns:
            The published post, with content still attached.

        Raises:
            PostError: If the title line is malformed.
            RenderError: If the post template fails to render.
        """
        post = load_post(
            source_path, now=now, words_per_minute=self.config.words_per_minute
        )
        html = self.engine.render_post(post)
        self.output_path(post).write_text(html, encoding="utf-8")
        self.feed.upsert(post.title, post.path, now=now)
        self.archive.put(post)
        return post

    def remove(self, title: str, purge: bool = False) -> bool:
        """Remove a post from the feed and archive.

        The post's HTML page stays on disk unless ``purge`` is set.

        Args:
            title: Title of the post to remove.
            purge: Also delete the post's generated HTML page.

        Returns:
            True if the archive held a post with that title.
        """
        self.feed.remove(title)
        removed = self.archive.remove(title)
        if removed is not None and purge:
            self.output_path(removed).unlink(missing_ok=True)
        return removed is not None

    def build(self) -> Path:
        """Render the home page from the archive and write the feed.

        Returns:
            Path of the written home page.
        """
        html = self.engine.render_home(self.archive.posts)
        index_path = self.config.index_path
        atomic_write(index_path, html)
        self.feed.save()
        return index_path

    def save(self) -> None:
        """Write the archive back to disk."""
        self.archive.save()

    def output_path(self, post: Post) -> Path:
        return self.config.output_dir / post.path
