"""RSS feed synchronization for Plume.

The feed is kept as an RSS 2.0 document on disk. Each invocation loads it,
applies the command's change (upsert or remove of the item for one title),
and writes the whole channel back.

Classes:
    FeedItem: One entry of the channel.
    FeedStore: The channel plus its items, with title-keyed upsert/remove.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path

import click

from .utils import atomic_write


@dataclass
class FeedItem:
    """A single RSS item.

    Attributes:
        title: Post title, the key used for upsert and remove.
        link: Absolute URL of the post.
        pub_date: RFC 2822 publish timestamp.
    """

    title: str
    link: str
    pub_date: str

    @classmethod
    def from_element(cls, element: ET.Element) -> FeedItem:
        return cls(
            title=element.findtext("title", default=""),
            link=element.findtext("link", default=""),
            pub_date=element.findtext("pubDate", default=""),
        )

    def to_element(self) -> ET.Element:
        element = ET.Element("item")
        ET.SubElement(element, "title").text = self.title
        ET.SubElement(element, "link").text = self.link
        ET.SubElement(element, "pubDate").text = self.pub_date
        return element


def join_url(base_url: str, path: str) -> str:
    """Append a post path to the blog URL.

    Examples:
        >>> join_url("https://example.com/", "Hello.html")
        'https://example.com/Hello.html'
    """
    if not base_url:
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


@dataclass
class FeedStore:
    """RSS channel with at most one item per title.

    Attributes:
        source_path: Location of the feed document.
        link: Blog URL, used as the channel link and as the base of item links.
        title: Channel title.
        items: Items in publication order, oldest first.
    """

    source_path: Path
    link: str
    title: str
    items: list[FeedItem] = field(default_factory=list)

    @classmethod
    def load(cls, source_path: Path, link: str, title: str) -> FeedStore:
        """Load the feed document, falling back to an empty channel.

        A missing, blank or unparsable document is not an error: the store
        starts over with no items. Channel link and title always come from
        the arguments.

        Args:
            source_path: Path to the RSS document.
            link: Blog URL.
            title: Channel title.

        Returns:
            FeedStore holding the items found on disk.
        """
        store = cls(source_path=source_path, link=link, title=title)
        if not source_path.exists():
            return store
        raw = source_path.read_bytes()
        if not raw.strip():
            return store
        try:
            root = ET.fromstring(raw)
        except (ET.ParseError, UnicodeDecodeError) as exc:
            click.echo(
                f"Feed at {source_path} could not be parsed ({exc}); starting a new feed.",
                err=True,
            )
            return store
        channel = root.find("channel")
        if root.tag != "rss" or channel is None:
            click.echo(
                f"Feed at {source_path} is not an RSS document; starting a new feed.",
                err=True,
            )
            return store
        store.items = [FeedItem.from_element(node) for node in channel.findall("item")]
        return store

    def exists(self, title: str) -> bool:
        """Check whether an item with this exact title is present."""
        for item in self.items:
            if item.title == title:
                return True
        return False

    def upsert(self, title: str, path: str, now: datetime | None = None) -> FeedItem:
        """Insert or replace the item for a title.

        Any existing item with the same title is removed first and the new
        item is appended, so the feed never holds two items for one title.

        Args:
            title: Post title.
            path: Post output path, appended to the blog URL.
            now: Publish timestamp. Defaults to the current UTC time.

        Returns:
            The appended item.
        """
        moment = now or datetime.now(timezone.utc)
        item = FeedItem(
            title=title,
            link=join_url(self.link, path),
            pub_date=format_datetime(moment),
        )
        if self.exists(title):
            self.remove(title)
        self.items.append(item)
        return item

    def remove(self, title: str) -> int:
        """Remove every item with this title.

        Returns:
            Number of items removed.
        """
        kept = [item for item in self.items if item.title != title]
        removed = len(self.items) - len(kept)
        self.items = kept
        return removed

    def to_xml(self) -> str:
        """Serialize the channel as an RSS 2.0 document."""
        rss = ET.Element("rss", version="2.0")
        channel = ET.SubElement(rss, "channel")
        ET.SubElement(channel, "title").text = self.title
        ET.SubElement(channel, "link").text = self.link
        ET.SubElement(channel, "description").text = self.title
        for item in self.items:
            channel.append(item.to_element())
        ET.indent(rss)
        body = ET.tostring(rss, encoding="unicode")
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'

    def save(self) -> None:
        """Write the whole channel to the feed document, replacing it."""
        atomic_write(self.source_path, self.to_xml())

    def __len__(self) -> int:
        return len(self.items)
