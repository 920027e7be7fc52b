"""File discovery, front matter extraction, and markdown-it tokenization"""

import hashlib
import logging
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from blogpub.core.models import ParsedPage


logger = logging.getLogger(__name__)

FENCE = '---'
MD_EXTENSIONS = {'.md', '.mdx'}


class FrontMatterError(ValueError):
    """The front matter block could not be split off or parsed as a YAML mapping."""


def sha256(content: str) -> str:
    """Return hex-encoded SHA-256 hash of content (64 chars, matches String(64) column)."""
    return hashlib.sha256(content.encode('utf-8')).hexdigest()


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset)


def load_frontmatter(block: str) -> dict[str, Any]:
    """Parse a front matter block (without fences) into a dict."""
    try:
        fm = yaml.safe_load(block) if block.strip() else {}
    except (yaml.YAMLError, ValueError) as e:  # impossible timestamps raise ValueError
        raise FrontMatterError(f"Invalid YAML front matter: {e}") from e
    if fm is None:
        return {}
    if not isinstance(fm, dict):
        raise FrontMatterError(f"Invalid YAML front matter: expected a mapping, got {type(fm).__name__}")
    return fm


def split_frontmatter(text: str) -> tuple[dict[str, Any], str, bool]:
    """Return (frontmatter, body, has_block) with the leading '---' block removed.

    A file that does not open with a fence has empty front matter and keeps
    its full text as the body. An opening fence with no closing fence raises.
    """
    text = text.lstrip('\ufeff')
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FENCE:
        return {}, text, False

    for i in range(1, len(lines)):
        if lines[i].strip() == FENCE:
            fm = load_frontmatter(''.join(lines[1:i]))
            body = ''.join(lines[i + 1:]).lstrip('\n')
            return fm, body, True
    raise FrontMatterError("Unterminated front matter: no closing '---' line")


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file. Hidden entries are skipped."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(
        p for p in path.rglob('*')
        if p.is_file() and p.suffix in MD_EXTENSIONS
        and not any(part.startswith('.') for part in p.relative_to(path).parts)
    )


def content_base(path: Path, content_dir: str | Path) -> Path:
    """Return the directory that page paths are measured from when checking path.

    Anything inside content_dir is measured from content_dir, so a single
    file or subdirectory keeps the identity it has in the full tree. A
    directory elsewhere is its own content root. A file outside
    content_dir raises ValueError.
    """
    target = path.resolve()
    content = Path(content_dir).resolve()
    if target == content or content in target.parents:
        return content
    if target.is_dir():
        return target
    raise ValueError(f"{path} is not inside the content directory {content_dir}")


def relative_to_root(path: Path, root: Path) -> Path:
    """Path of a content file relative to the content root directory."""
    return path.resolve().relative_to(root.resolve())


def parse_file(path: Path, root: Path, parser_config: str = 'commonmark') -> ParsedPage:
    """Parse a single markdown file into a ParsedPage with token stream. Raises FrontMatterError.

    root is the content root directory; the page identity is the path relative to it.
    """
    raw = path.read_text(encoding='utf-8')
    frontmatter, body, has_block = split_frontmatter(raw)
    tokens = _make_parser(parser_config).parse(body)
    logger.debug("parsed %s (%d front matter keys, %d tokens)", path, len(frontmatter), len(tokens))
    return ParsedPage(
        path=path,
        rel_path=relative_to_root(path, root),
        raw=raw,
        body=body,
        frontmatter=frontmatter,
        has_block=has_block,
        hash=sha256(raw),
        tokens=tokens,
    )
