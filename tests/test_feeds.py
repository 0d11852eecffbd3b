import xml.etree.ElementTree as ET
from datetime import datetime, timezone

from plume.feeds import FeedItem, FeedStore, join_url

BLOG_URL = "https://example.com/"
FIRST = datetime(2024, 3, 5, 9, 0, tzinfo=timezone.utc)
LATER = datetime(2024, 3, 6, 18, 15, tzinfo=timezone.utc)


def new_store(tmp_path) -> FeedStore:
    return FeedStore.load(tmp_path / "rss.xml", BLOG_URL, "Some thoughts")


def test_load_missing_and_blank_feed_start_empty(tmp_path, capsys):
    store = new_store(tmp_path)
    assert store.items == []

    (tmp_path / "rss.xml").write_text("", encoding="utf-8")
    store = new_store(tmp_path)
    assert store.items == []
    assert capsys.readouterr().err == ""


def test_load_malformed_feed_falls_back(tmp_path, capsys):
    (tmp_path / "rss.xml").write_text("<rss><channel><item>", encoding="utf-8")
    store = new_store(tmp_path)
    assert store.items == []
    assert store.title == "Some thoughts"
    assert "starting a new feed" in capsys.readouterr().err


def test_load_non_rss_document_falls_back(tmp_path, capsys):
    (tmp_path / "rss.xml").write_text("<feed><entry/></feed>", encoding="utf-8")
    assert new_store(tmp_path).items == []
    assert "not an RSS document" in capsys.readouterr().err


def test_load_undecodable_feed_falls_back(tmp_path, capsys):
    (tmp_path / "rss.xml").write_bytes(b"<rss>\xff\xfe garbage")
    assert new_store(tmp_path).items == []
    assert "starting a new feed" in capsys.readouterr().err


def test_upsert_builds_link_and_timestamp(tmp_path):
    store = new_store(tmp_path)
    item = store.upsert("Hello World", "Hello_World.html", now=FIRST)
    assert item == FeedItem(
        title="Hello World",
        link="https://example.com/Hello_World.html",
        pub_date="Tue, 05 Mar 2024 09:00:00 +0000",
    )
    assert store.exists("Hello World")
    assert not store.exists("hello world")


def test_upsert_same_title_twice_keeps_one_latest_item(tmp_path):
    store = new_store(tmp_path)
    store.upsert("Other", "Other.html", now=FIRST)
    store.upsert("Hello World", "Hello_World.html", now=FIRST)
    store.upsert("Hello World", "Hello_World_v2.html", now=LATER)

    matching = [item for item in store.items if item.title == "Hello World"]
    assert len(matching) == 1
    assert matching[0].link.endswith("Hello_World_v2.html")
    assert matching[0].pub_date == "Wed, 06 Mar 2024 18:15:00 +0000"
    # replaced item moves to the end
    assert [item.title for item in store.items] == ["Other", "Hello World"]


def test_remove_drops_every_duplicate(tmp_path):
    store = new_store(tmp_path)
    store.items = [
        FeedItem("Dup", "a", "x"),
        FeedItem("Keep 1", "b", "x"),
        FeedItem("Dup", "c", "x"),
        FeedItem("Keep 2", "d", "x"),
        FeedItem("Dup", "e", "x"),
    ]
    assert store.remove("Dup") == 3
    assert len(store) == 2
    assert all(item.title != "Dup" for item in store.items)
    assert store.remove("Dup") == 0


def test_save_and_reload(tmp_path):
    store = new_store(tmp_path)
    store.upsert("Hello World", "Hello_World.html", now=FIRST)
    store.upsert("Tom & Jerry <3", "Tom_&_Jerry_<3.html", now=LATER)
    store.save()

    root = ET.parse(tmp_path / "rss.xml").getroot()
    assert root.tag == "rss" and root.get("version") == "2.0"
    channel = root.find("channel")
    assert channel.findtext("title") == "Some thoughts"
    assert channel.findtext("link") == BLOG_URL
    assert len(channel.findall("item")) == 2

    reloaded = new_store(tmp_path)
    assert reloaded.items == store.items


def test_reload_uses_configured_channel_metadata(tmp_path):
    store = FeedStore.load(tmp_path / "rss.xml", "https://old.example/", "Old")
    store.upsert("Post", "Post.html", now=FIRST)
    store.save()

    reloaded = FeedStore.load(tmp_path / "rss.xml", BLOG_URL, "New title")
    assert reloaded.title == "New title"
    assert reloaded.link == BLOG_URL
    # existing items keep their stored links
    assert reloaded.items[0].link == "https://old.example/Post.html"


def test_join_url():
    assert join_url("https://example.com/", "A.html") == "https://example.com/A.html"
    assert join_url("https://example.com", "/A.html") == "https://example.com/A.html"
    assert join_url("", "A.html") == "A.html"
