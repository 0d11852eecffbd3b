"""Archive persistence for Plume.

The archive is a JSON object mapping each post title to the metadata the home
page needs::

    {"Hello World": {"path": "Hello_World.html", "publish_date": "March 05, 2024"}}

It is loaded wholesale at the start of an invocation and written back
wholesale at the end. Anything not in memory at save time is dropped, so every
command must mutate a freshly loaded archive.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .posts import Post
from .utils import atomic_write


class ArchiveError(Exception):
    """Raised when the archive document exists but cannot be read.

    Attributes:
        source_path: Path to the archive file.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path, message: str):
        self.source_path = source_path
        self.message = message
        super().__init__(f"{source_path}: {message}")


@dataclass
class ArchiveEntry:
    """Persisted metadata for one post.

    Attributes:
        path: Output filename of the post.
        publish_date: Human-readable publish date.
        read_time: Read time label; optional in stored documents.
    """

    path: str
    publish_date: str
    read_time: str = ""

    @classmethod
    def from_dict(
        cls, title: str, payload: Any, source_path: Path
    ) -> ArchiveEntry:
        """Validate and build an entry from its JSON form.

        Raises:
            ArchiveError: If the payload is not an object with string
                ``path`` and ``publish_date`` fields.
        """
        if not isinstance(payload, dict):
            raise ArchiveError(source_path, f"entry {title!r} is not an object")
        for key in ("path", "publish_date"):
            if not isinstance(payload.get(key), str):
                raise ArchiveError(
                    source_path, f"entry {title!r} is missing string field {key!r}"
                )
        read_time = payload.get("read_time", "")
        return cls(
            path=payload["path"],
            publish_date=payload["publish_date"],
            read_time=read_time if isinstance(read_time, str) else "",
        )

    @classmethod
    def from_post(cls, post: Post) -> ArchiveEntry:
        return cls(path=post.path, publish_date=post.publish_date, read_time=post.read_time)

    def to_dict(self) -> dict[str, str]:
        data = {"path": self.path, "publish_date": self.publish_date}
        if self.read_time:
            data["read_time"] = self.read_time
        return data

    def to_post(self, title: str) -> Post:
        """Build a Post stub carrying only display metadata."""
        return Post(
            title=title,
            path=self.path,
            publish_date=self.publish_date,
            read_time=self.read_time,
        )


class Archive:
    """In-memory title to Post mapping backed by a JSON file.

    Attributes:
        source_path: Location of the archive document.
    """

    def __init__(self, source_path: Path, posts: dict[str, Post] | None = None):
        self.source_path = source_path
        self._posts: dict[str, Post] = dict(posts or {})

    @classmethod
    def load(cls, source_path: Path) -> Archive:
        """Load the archive document.

        A missing or blank file yields an empty archive.

        Args:
            source_path: Path to the JSON archive.

        Returns:
            Archive whose posts carry only title, path, publish date and read time.

        Raises:
            ArchiveError: If the document is non-empty but malformed.
        """
        if not source_path.exists():
            return cls(source_path)
        raw = source_path.read_text(encoding="utf-8")
        if not raw.strip():
            return cls(source_path)
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ArchiveError(
                source_path, f"invalid JSON on line {exc.lineno}: {exc.msg}"
            ) from exc
        if not isinstance(payload, dict):
            raise ArchiveError(source_path, "archive must be a JSON object")

        posts = {
            title: ArchiveEntry.from_dict(title, entry, source_path).to_post(title)
            for title, entry in payload.items()
        }
        return cls(source_path, posts)

    def save(self) -> None:
        """Write every post in memory to the archive document, replacing it."""
        payload = {
            title: ArchiveEntry.from_post(post).to_dict()
            for title, post in self._posts.items()
        }
        atomic_write(
            self.source_path,
            json.dumps(payload, indent=2, ensure_ascii=False) + "\n",
        )

    def put(self, post: Post) -> None:
        """Insert or overwrite a post, keyed by title, without its content."""
        self._posts[post.title] = post.stripped()

    def remove(self, title: str) -> Post | None:
        """Remove a post by title.

        Returns:
            The removed post, or None if no post has that title.
        """
        return self._posts.pop(title, None)

    def get(self, title: str) -> Post | None:
        return self._posts.get(title)

    @property
    def posts(self) -> dict[str, Post]:
        """Return a copy of the title to Post mapping."""
        return dict(self._posts)

    def __contains__(self, title: object) -> bool:
        return title in self._posts

    def __iter__(self) -> Iterator[str]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)
