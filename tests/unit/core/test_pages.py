"""Unit tests for core/pages.py"""

from datetime import date, datetime

import pytest
from markdown_it import MarkdownIt
from pydantic import ValidationError

from blogpub.config import Settings
from blogpub.core.models import PageKind
from blogpub.core.pages import body_stats, build_page


def test_body_stats_counts_text_and_finds_summary():
    """Markup is stripped from the word count; the summary is the first paragraph."""
    tokens = MarkdownIt("commonmark").parse("# Title\n\nHello **big** world.\n\nSecond para.\n")
    words, summary = body_stats(tokens)
    assert words == 6
    assert summary == "Hello big world."


def test_body_stats_counts_code():
    tokens = MarkdownIt("commonmark").parse("```js\nconst store = createStore()\n```\n")
    words, summary = body_stats(tokens)
    assert words == 4
    assert summary == ""


def test_about_page_is_static(parse, settings):
    """A root-level page with a title and no date is a static page."""
    page = build_page(parse("about.md", '---\ntitle: "About Me"\n---\n\nHi there.\n'), settings)
    assert page.kind == PageKind.page
    assert page.is_static
    assert page.date is None
    assert page.output_path == "/about/"
    assert page.summary == "Hi there."


def test_post_date_from_frontmatter(parse, settings):
    page = build_page(parse("posts/redux.md", "---\ntitle: Redux\ndate: 2020-05-01\n---\nBody\n"), settings)
    assert page.kind == PageKind.post
    assert page.date == datetime(2020, 5, 1)
    assert page.file_date is None
    assert page.output_path == "/posts/redux/"


def test_post_date_from_filename(parse, settings):
    """Without a front matter date the filename prefix supplies it."""
    page = build_page(parse("posts/2020-05-01-redux.md", "---\ntitle: Redux\n---\nBody\n"), settings)
    assert page.date == datetime(2020, 5, 1)
    assert page.file_date == date(2020, 5, 1)
    assert page.output_path == "/posts/redux/"


def test_dated_page_outside_posts_is_a_post(parse, settings):
    page = build_page(parse("notes/n.md", "---\ntitle: N\ndate: 2022-01-01\n---\n"), settings)
    assert page.kind == PageKind.post


def test_undated_file_in_posts_section_is_a_post(parse, settings):
    page = build_page(parse("posts/wip.md", "---\ntitle: WIP\n---\n"), settings)
    assert page.kind == PageKind.post
    assert page.date is None


def test_posts_dir_is_configurable(parse):
    page = build_page(parse("blog/wip.md", "---\ntitle: WIP\n---\n"), Settings(posts_dir="blog"))
    assert page.kind == PageKind.post


def test_slug_override(parse, settings):
    page = build_page(parse("posts/x.md", "---\ntitle: X\nslug: Custom Slug\n---\n"), settings)
    assert page.output_path == "/posts/custom-slug/"


def test_non_string_slug_rejected(parse, settings):
    with pytest.raises(ValidationError):
        build_page(parse("posts/x.md", "---\ntitle: X\nslug: 42\n---\n"), settings)


def test_frontmatter_and_draft_kept(parse, settings):
    page = build_page(
        parse("posts/di.md", "---\ntitle: DI\ndraft: true\ntags: [java, spring]\nseries: toys\n---\n"),
        settings,
    )
    assert page.draft is True
    assert page.tags == ["java", "spring"]
    assert page.frontmatter["series"] == "toys"
    assert page.path == "posts/di.md"


def test_invalid_frontmatter_raises(parse, settings):
    with pytest.raises(ValidationError):
        build_page(parse("posts/x.md", "---\ndate: yesterday\n---\n"), settings)
