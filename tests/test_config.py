from pathlib import Path

import pytest

from plume.config import DEFAULT_CONFIG, BlogConfig, ConfigError, load_config


def test_defaults_without_config_file(tmp_path):
    config = load_config(tmp_path)
    assert config.root == tmp_path
    assert config.output_dir == tmp_path / "web"
    assert config.feed_path == tmp_path / "web" / "rss.xml"
    assert config.archive_path == tmp_path / "static" / "posts.json"
    assert config.home_template == tmp_path / "static" / "index.template"
    assert config.post_template == tmp_path / "static" / "post.template"
    assert config.index_path == tmp_path / "web" / "index.html"
    assert config.blog_url == DEFAULT_CONFIG["blog_url"]
    assert config.words_per_minute == 100


def test_yaml_overrides_and_unknown_keys(tmp_path):
    (tmp_path / "blog.yaml").write_text(
        "output_dir: public\n"
        "blog_url: https://blog.example.org/\n"
        "blog_title: Notes\n"
        "words_per_minute: 200\n"
        "unknown_key: ignored\n",
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    assert config.output_dir == tmp_path / "public"
    assert config.blog_url == "https://blog.example.org/"
    assert config.blog_title == "Notes"
    assert config.words_per_minute == 200
    assert not hasattr(config, "unknown_key")


def test_absolute_paths_are_kept(tmp_path):
    elsewhere = tmp_path / "elsewhere"
    (tmp_path / "blog.yaml").write_text(
        f"archive_path: {elsewhere / 'posts.json'}\n", encoding="utf-8"
    )
    assert load_config(tmp_path).archive_path == elsewhere / "posts.json"


def test_non_mapping_yaml_uses_defaults(tmp_path):
    (tmp_path / "blog.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    assert load_config(tmp_path).output_dir == tmp_path / "web"

    (tmp_path / "blog.yaml").write_text("", encoding="utf-8")
    assert load_config(tmp_path).output_dir == tmp_path / "web"


@pytest.mark.parametrize("value", [0, -5, "fast", True])
def test_words_per_minute_must_be_positive_int(tmp_path, value):
    values = dict(DEFAULT_CONFIG, words_per_minute=value)
    with pytest.raises(ConfigError):
        BlogConfig.from_mapping(Path(tmp_path), values)
