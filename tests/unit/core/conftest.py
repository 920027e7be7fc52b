"""Shared fixtures for core unit tests"""

import pytest

from blogpub.config import Settings
from blogpub.core.parse import parse_file


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings()


@pytest.fixture(name="parse")
def parse_fixture(tmp_path):
    """Write text to tmp_path/content/<rel> and parse it against that content root."""
    root = tmp_path / "content"

    def _parse(rel: str, text: str):
        f = root / rel
        f.parent.mkdir(parents=True, exist_ok=True)
        f.write_text(text, encoding="utf-8")
        return parse_file(f, root)

    return _parse
