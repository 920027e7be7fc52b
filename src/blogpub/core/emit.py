"""Front matter serialization: canonical key order, page rendering, round-trip and diff helpers"""

import difflib
from typing import Any

import yaml

from blogpub.core.parse import load_frontmatter, split_frontmatter


CANONICAL_ORDER = ('title', 'date', 'draft', 'tags')


def canonical(fm: dict[str, Any]) -> dict[str, Any]:
    """Reorder keys: title, date, draft, tags first, then the rest in their original order."""
    head = {k: fm[k] for k in CANONICAL_ORDER if k in fm}
    return {**head, **{k: v for k, v in fm.items() if k not in head}}


def dump_frontmatter(fm: dict[str, Any]) -> str:
    """Serialize a front matter mapping to YAML (no fences). Empty mapping gives an empty string."""
    if not fm:
        return ''
    return yaml.safe_dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False)


def roundtrip_ok(fm: dict[str, Any]) -> bool:
    """True when dumping then re-parsing the mapping yields the same structure.

    Values that compare unequal to themselves (NaN) pass when the re-parsed
    mapping dumps to the same text.
    """
    try:
        text = dump_frontmatter(fm)
        again = load_frontmatter(text)
        return again == fm or dump_frontmatter(again) == text
    except (ValueError, yaml.YAMLError):
        return False


def render_page(fm: dict[str, Any], body: str) -> str:
    """Return body with a YAML front matter block prepended."""
    text = f"---\n{dump_frontmatter(fm)}---\n"
    return f"{text}\n{body}" if body else text


def normalize_text(raw: str) -> str:
    """Canonical form of a content file. Files without a front matter block are returned unchanged.

    Raises FrontMatterError when the block cannot be parsed. YAML comments
    inside the block are not preserved.
    """
    fm, body, has_block = split_frontmatter(raw)
    if not has_block:
        return raw
    return render_page(canonical(fm), body)


def unified_diff(old: str, new: str, from_label: str = 'a', to_label: str = 'b', context: int = 3) -> list[str]:
    """Return unified diff lines comparing old to new. Empty list if identical.

    Lines already include newlines; join with '' for display.
    """
    return list(difflib.unified_diff(
        old.splitlines(keepends=True), new.splitlines(keepends=True),
        fromfile=from_label, tofile=to_label, n=context,
    ))
