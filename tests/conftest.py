"""Root test configuration: session-level cleanup of runtime artifacts and a sample blog tree"""

import shutil
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["blogpub.db", "test.db"]
_CLEANUP_DIRS = ["dist"]


ABOUT_MD = """\
---
title: "About Me"
---

Hi, I write about **frontend state** and small language tools.
"""

REDUX_MD = """\
---
title: Rebuilding Redux from Scratch
date: 2020-05-01
tags: [javascript, redux]
---

# Why

A store is a reducer plus a list of listeners.
"""

PARSERS_MD = """\
---
title: Parser Combinators in 100 Lines
date: 2021-02-10T09:30:00
tags:
  - parsing
---

Functions that return functions.
"""

DI_DRAFT_MD = """\
---
title: A Toy Dependency Injection Container
draft: true
tags: [java]
---

Work in progress.
"""


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Write {relative path: text} under root and return root."""
    for rel, text in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    return root


@pytest.fixture(name="make_tree")
def make_tree_fixture():
    """Expose write_tree to tests."""
    return write_tree


@pytest.fixture(name="blog")
def blog_fixture(tmp_path):
    """A valid content tree: one static page, two dated posts, one draft."""
    return write_tree(tmp_path / "content", {
        "about.md": ABOUT_MD,
        "posts/2020-05-01-redux.md": REDUX_MD,
        "posts/parser-combinators.md": PARSERS_MD,
        "posts/di-container.md": DI_DRAFT_MD,
    })


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files and output directories created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)
