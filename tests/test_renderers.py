from plume import renderers


def test_parse_keeps_source_and_tokens():
    document = renderers.parse("# Title\n\nSome text.")
    assert document.source == "# Title\n\nSome text."
    assert [token["type"] for token in document.tokens if token["type"] != "blank_line"] == [
        "heading",
        "paragraph",
    ]


def test_word_count_counts_only_text_nodes():
    document = renderers.parse(
        "# Two Words\n\n"
        "One *two* **three** `code span` [four five](https://example.com)\n\n"
        "    indented code is not prose\n"
    )
    assert renderers.word_count(document) == 7


def test_word_count_spans_lists_and_quotes():
    document = renderers.parse("- alpha beta\n- gamma\n\n> delta epsilon\n")
    assert renderers.word_count(document) == 5


def test_word_count_empty_document():
    assert renderers.word_count(renderers.parse("")) == 0


def test_render_html_heading_ids_are_unique():
    html = renderers.render_html(renderers.parse("# Intro\n\n## Intro\n\n## Intro"))
    assert '<h1 id="intro">Intro</h1>' in html
    assert '<h2 id="intro-1">Intro</h2>' in html
    assert '<h2 id="intro-2">Intro</h2>' in html


def test_render_html_highlights_known_languages():
    html = renderers.render_html(
        renderers.parse("# Code\n\n```python\nprint('hi')\n```\n")
    )
    assert 'class="highlight"' in html


def test_render_html_escapes_unknown_language_code():
    html = renderers.render_html(
        renderers.parse("# Code\n\n```nosuchlang\na < b && c\n```\n")
    )
    assert '<pre><code class="language-nosuchlang">a &lt; b &amp;&amp; c' in html


def test_render_html_supports_tables_and_strikethrough():
    html = renderers.render_html(
        renderers.parse("# T\n\n~~gone~~\n\n| a | b |\n|---|---|\n| 1 | 2 |\n")
    )
    assert "<del>gone</del>" in html
    assert "<table>" in html


def test_slugify_drops_markup_and_punctuation():
    assert renderers._slugify("Hello, World!") == "hello-world"
    assert renderers._slugify("  Spaces   and--dashes ") == "spaces-and-dashes"
    assert renderers._slugify("<em>Styled</em> heading") == "styled-heading"


def test_render_html_follows_the_parsed_tokens():
    document = renderers.parse("# Kept\n\nDropped paragraph.\n")
    document.tokens = [token for token in document.tokens if token["type"] != "paragraph"]
    html = renderers.render_html(document)
    assert '<h1 id="kept">Kept</h1>' in html
    assert "Dropped" not in html


def test_render_html_resolves_reference_links():
    html = renderers.render_html(
        renderers.parse("# Links\n\nSee [the docs][docs].\n\n[docs]: https://example.com/docs\n")
    )
    assert '<a href="https://example.com/docs">the docs</a>' in html


def test_render_html_links_bare_urls():
    html = renderers.render_html(renderers.parse("# U\n\nVisit https://example.com now\n"))
    assert '<a href="https://example.com">https://example.com</a>' in html
