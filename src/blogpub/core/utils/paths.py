"""Slug, filename date and output path derivation for content files"""

import re
from datetime import date
from pathlib import Path


DATE_PREFIX_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})-(.+)$')
INDEX_STEMS = {'index', '_index'}


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def split_date_prefix(stem: str) -> tuple[date | None, str]:
    """Split a 'YYYY-MM-DD-name' stem into (date, name); (None, stem) when absent or not a real date."""
    m = DATE_PREFIX_RE.match(stem)
    if not m:
        return None, stem
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3))), m.group(4)
    except ValueError:
        return None, stem


def page_slug(rel_path: Path, override: str | None = None) -> str:
    """Front matter slug if given, else the dateless file stem, slugified."""
    if override:
        return slugify(override) or 'page'
    _, name = split_date_prefix(rel_path.stem)
    return slugify(name) or 'page'


def output_path(rel_path: Path, override: str | None = None) -> str:
    """Map a content-relative file path to the URL path it is published under.

      about.md                       -> /about/
      posts/2020-05-01-redux.md      -> /posts/redux/
      posts/parsers/index.md         -> /posts/parsers/
      index.md                       -> /
    """
    parts = [slugify(p) for p in rel_path.parent.parts]
    if override or rel_path.stem not in INDEX_STEMS:
        parts.append(page_slug(rel_path, override))
    return '/' + ''.join(f'{p}/' for p in parts)


def section_of(rel_path: Path) -> str:
    """Return the top-level directory of a content path, or '.' for root-level files."""
    parts = rel_path.parts
    return parts[0] if len(parts) > 1 else '.'
