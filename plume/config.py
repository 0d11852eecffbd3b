"""Configuration loading for Plume.

Configuration is read from an optional ``blog.yaml`` at the project root and
merged over ``DEFAULT_CONFIG``. The result is a ``BlogConfig`` instance that is
passed to every component at construction time, so no component reads paths or
URLs from module-level globals.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "blog.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "output_dir": "web",
    "feed_path": "web/rss.xml",
    "archive_path": "static/posts.json",
    "home_template": "static/index.template",
    "post_template": "static/post.template",
    "blog_url": "https://example.com/",
    "blog_title": "Some thoughts",
    "words_per_minute": 100,
}


class ConfigError(Exception):
    """Raised when blog.yaml holds a value that cannot be used.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class BlogConfig:
    """Resolved configuration for one invocation.

    Attributes:
        root: Project root directory.
        output_dir: Directory receiving the rendered HTML files.
        feed_path: Location of the RSS feed document.
        archive_path: Location of the JSON archive.
        home_template: Template used for the site index.
        post_template: Template used for each post page.
        blog_url: Base URL that post paths are appended to in feed links.
        blog_title: Channel title written into the feed.
        words_per_minute: Reading speed used for the read time label.
    """

    root: Path
    output_dir: Path
    feed_path: Path
    archive_path: Path
    home_template: Path
    post_template: Path
    blog_url: str
    blog_title: str
    words_per_minute: int = 100

    @property
    def index_path(self) -> Path:
        """Return the path of the generated home page."""
        return self.output_dir / "index.html"

    @property
    def templates(self) -> tuple[Path, Path]:
        """Return the (home, post) template paths."""
        return self.home_template, self.post_template

    @classmethod
    def from_mapping(cls, root: Path, values: dict[str, Any]) -> BlogConfig:
        """Build a config from a merged mapping of raw values.

        Args:
            root: Project root that relative paths resolve against.
            values: Mapping containing every key of DEFAULT_CONFIG.

        Returns:
            BlogConfig with absolute paths.

        Raises:
            ConfigError: If words_per_minute is not a positive integer.
        """
        wpm = values["words_per_minute"]
        if isinstance(wpm, bool) or not isinstance(wpm, int) or wpm <= 0:
            raise ConfigError(
                f"words_per_minute must be a positive integer, got {wpm!r}"
            )

        def resolve(key: str) -> Path:
            return _resolve_path(root, values[key])

        return cls(
            root=root,
            output_dir=resolve("output_dir"),
            feed_path=resolve("feed_path"),
            archive_path=resolve("archive_path"),
            home_template=resolve("home_template"),
            post_template=resolve("post_template"),
            blog_url=str(values["blog_url"]),
            blog_title=str(values["blog_title"]),
            words_per_minute=wpm,
        )


def _resolve_path(root: Path, value: Any) -> Path:
    path = Path(str(value)).expanduser()
    return path if path.is_absolute() else root / path


def load_config(project_root: Path) -> BlogConfig:
    """Load blog configuration from blog.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        BlogConfig with defaults applied for missing keys.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(
                    {key: value for key, value in loaded.items() if key in config}
                )
    return BlogConfig.from_mapping(project_root, config)
