"""Utility functions for Plume.

This module contains small helpers shared by the post, archive and feed modules.

Key functions:
    path_for_title: Derive a post's output filename from its title.
    format_publish_date: Format a moment as a human-readable publish date.
    parse_publish_date: Parse a publish date back into a datetime for sorting.
    atomic_write: Replace a file's contents without exposing a partial write.
"""

from __future__ import annotations

import os
import stat
import tempfile
from datetime import datetime
from pathlib import Path

PUBLISH_DATE_FORMAT = "%B %d, %Y"


def path_for_title(title: str) -> str:
    """Convert a post title to its output filename.

    Args:
        title: Post title.

    Returns:
        The title with spaces replaced by underscores, suffixed ``.html``.

    Examples:
        >>> path_for_title("Hello World")
        'Hello_World.html'
    """
    return title.replace(" ", "_") + ".html"


def format_publish_date(moment: datetime) -> str:
    """Format a datetime as ``Month DD, YYYY``.

    Examples:
        >>> format_publish_date(datetime(2024, 3, 5))
        'March 05, 2024'
    """
    return moment.strftime(PUBLISH_DATE_FORMAT)


def parse_publish_date(value: str) -> datetime | None:
    """Parse a publish date written by format_publish_date.

    Args:
        value: Date string such as ``March 05, 2024``.

    Returns:
        datetime if the value matches the publish date format, None otherwise.
    """
    try:
        return datetime.strptime(value, PUBLISH_DATE_FORMAT)
    except ValueError:
        return None


def _default_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def atomic_write(path: Path, text: str) -> None:
    """Write text to path by writing a temporary sibling and renaming it.

    The temporary file lives in the target directory so the final rename
    stays on one filesystem. Readers see either the old or the new contents.
    The result keeps the mode of the file it replaces, or gets the mode a
    plain write would create.

    Args:
        path: Destination file.
        text: Full file contents.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        mode = stat.S_IMODE(path.stat().st_mode)
    else:
        mode = _default_mode()
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        # mkstemp creates owner-only files
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
