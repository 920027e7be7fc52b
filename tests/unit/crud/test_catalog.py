"""Unit tests for crud/pages.py"""

from datetime import datetime

from sqlmodel import select

from blogpub.crud.models import PageRecord, PageVersion
from blogpub.crud.pages import commit_page, get_all_pages, get_by_path, remove_missing


def test_commit_page_created(session, make_page):
    page = make_page(tags=["me"])
    record, status = commit_page(session, page)
    assert status == "created"
    assert record.path == "about.md"
    assert record.kind == "page"
    assert record.tags == ["me"]
    assert record.frontmatter == "title: About Me\ntags:\n- me\n"
    assert record.hash == page.hash
    assert get_by_path(session, "about.md") is record


def test_commit_page_unchanged(session, make_page):
    commit_page(session, make_page())
    _, status = commit_page(session, make_page())
    assert status == "unchanged"
    assert session.exec(select(PageVersion)).all() == []


def test_commit_page_updated_snapshots_previous_state(session, make_page):
    commit_page(session, make_page(body="Hi\n"))
    stamp = datetime(2026, 1, 1, 12)
    record, status = commit_page(session, make_page(body="Hello\n"), committed_at=stamp)

    assert status == "updated"
    assert record.body == "Hello\n"
    assert record.committed_at == stamp
    versions = session.exec(select(PageVersion)).all()
    assert len(versions) == 1
    assert versions[0].body == "Hi\n"
    assert versions[0].version_num == 1


def test_commit_page_respects_max_versions(session, make_page):
    for i in range(5):
        commit_page(session, make_page(body=f"rev {i}\n"), max_versions=2)
    nums = [v.version_num for v in session.exec(select(PageVersion).order_by(PageVersion.version_num)).all()]
    assert nums == [3, 4]


def test_get_all_pages_keeps_drafts(session, make_page):
    commit_page(session, make_page())
    commit_page(session, make_page("posts/di.md", "DI", draft=True))
    assert [r.path for r in get_all_pages(session)] == ["about.md", "posts/di.md"]
    assert get_by_path(session, "posts/di.md").draft is True


def test_remove_missing(session, make_page):
    """Records for deleted files are removed together with their history."""
    commit_page(session, make_page())
    commit_page(session, make_page("posts/old.md", "Old", body="v1\n"))
    commit_page(session, make_page("posts/old.md", "Old", body="v2\n"))

    removed = remove_missing(session, {"about.md"})
    assert removed == ["posts/old.md"]
    assert [r.path for r in session.exec(select(PageRecord)).all()] == ["about.md"]
    assert session.exec(select(PageVersion)).all() == []


def test_remove_missing_noop(session, make_page):
    commit_page(session, make_page())
    assert remove_missing(session, {"about.md"}) == []
