"""Turn a ParsedPage into a validated Page: front matter schema, output path, kind, body stats"""

from datetime import datetime, time

from blogpub.config import Settings
from blogpub.core.models import FrontMatter, Page, PageKind, ParsedPage
from blogpub.core.utils.paths import output_path, section_of, split_date_prefix


def _inline_text(token) -> str:
    """Plain text of an inline token, markup stripped."""
    return ''.join(
        c.content for c in (token.children or [])
        if c.type in ('text', 'code_inline')
    )


def body_stats(tokens: list) -> tuple[int, str]:
    """Return (word count, first paragraph text) from a markdown-it token stream."""
    words = 0
    summary = ''
    for i, tok in enumerate(tokens):
        if tok.type == 'inline':
            text = _inline_text(tok)
            words += len(text.split())
            if not summary and i > 0 and tokens[i - 1].type == 'paragraph_open':
                summary = ' '.join(text.split())
        elif tok.type in ('fence', 'code_block'):
            words += len(tok.content.split())
    return words, summary


def page_kind(parsed: ParsedPage, dated: bool, posts_dir: str) -> PageKind:
    """Dated pages and anything under the posts section are posts; the rest are static pages."""
    if dated or section_of(parsed.rel_path) == posts_dir:
        return PageKind.post
    return PageKind.page


def build_page(parsed: ParsedPage, settings: Settings) -> Page:
    """Validate front matter and derive page attributes. Raises pydantic ValidationError."""
    fm = FrontMatter.model_validate(parsed.frontmatter)
    file_date, _ = split_date_prefix(parsed.rel_path.stem)
    date = fm.date or (datetime.combine(file_date, time()) if file_date else None)
    words, summary = body_stats(parsed.tokens)

    return Page(
        path=parsed.rel_path.as_posix(),
        output_path=output_path(parsed.rel_path, fm.slug),
        kind=page_kind(parsed, date is not None, settings.posts_dir),
        title=fm.title,
        date=date,
        file_date=file_date,
        draft=fm.draft,
        tags=fm.tags,
        frontmatter=parsed.frontmatter,
        body=parsed.body,
        hash=parsed.hash,
        words=words,
        summary=summary,
    )
