"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from blogpub.core.models import Page, PageKind
from blogpub.core.parse import sha256
from blogpub.crud import models  # noqa: F401


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


def _page(path: str = "about.md", title: str = "About Me", body: str = "Hi\n", **fm) -> Page:
    frontmatter = {"title": title, **fm}
    return Page(
        path=path,
        output_path="/" + path.rsplit(".", 1)[0] + "/",
        kind=PageKind.post if path.startswith("posts/") else PageKind.page,
        title=title,
        draft=bool(fm.get("draft", False)),
        tags=list(fm.get("tags", [])),
        frontmatter=frontmatter,
        body=body,
        hash=sha256(repr(frontmatter) + body),
    )


@pytest.fixture(name="make_page")
def make_page_fixture():
    """Build a validated Page without touching the file system."""
    return _page
