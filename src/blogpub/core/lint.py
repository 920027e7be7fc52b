"""Content integrity rules: per-file front matter checks and tree-wide output path uniqueness"""

import logging
from collections import defaultdict
from pathlib import Path

from pydantic import ValidationError

from blogpub.config import Settings
from blogpub.core.emit import roundtrip_ok
from blogpub.core.models import Issue, LintReport, Page, PageKind, ParsedPage, Severity
from blogpub.core.pages import build_page
from blogpub.core.parse import (
    FrontMatterError, content_base, discover_files, parse_file, relative_to_root,
)


logger = logging.getLogger(__name__)

RULES = {
    'frontmatter-parse':   Severity.error,
    'frontmatter-missing': Severity.error,
    'title-required':      Severity.error,
    'invalid-field':       Severity.error,
    'date-required':       Severity.error,
    'date-mismatch':       Severity.warning,
    'unknown-field':       Severity.warning,
    'duplicate-output':    Severity.error,
    'roundtrip':           Severity.error,
}


def _issue(path: str, rule: str, message: str) -> Issue:
    return Issue(path=path, rule=rule, severity=RULES[rule], message=message)


def _validation_issues(path: str, exc: ValidationError) -> list[Issue]:
    """One issue per failing field; title problems map to title-required."""
    issues = []
    for err in exc.errors():
        field = str(err['loc'][0]) if err['loc'] else ''
        if field == 'title':
            msg = 'missing title' if err['type'] == 'missing' else f"title: {err['msg']}"
            issues.append(_issue(path, 'title-required', msg))
        else:
            issues.append(_issue(path, 'invalid-field', f"{field}: {err['msg']}"))
    return issues


def check_page(page: Page) -> list[Issue]:
    """Date rules for a validated page. Drafts and static pages may omit a date."""
    issues = []
    if page.kind == PageKind.post and not page.draft and page.date is None:
        issues.append(_issue(
            page.path, 'date-required',
            "post has no date (set 'date' or use a YYYY-MM-DD- filename prefix)",
        ))
    if page.frontmatter.get('date') is not None and page.file_date and page.date.date() != page.file_date:
        issues.append(_issue(
            page.path, 'date-mismatch',
            f"front matter date {page.date.date()} differs from filename date {page.file_date}",
        ))
    return issues


def check_file(parsed: ParsedPage, settings: Settings) -> tuple[Page | None, list[Issue]]:
    """Run all per-file rules. Returns (page or None if validation failed, issues)."""
    path = parsed.rel_path.as_posix()
    if not parsed.has_block:
        return None, [_issue(path, 'frontmatter-missing', "file does not open with a '---' front matter block")]

    issues = []
    if not roundtrip_ok(parsed.frontmatter):
        issues.append(_issue(path, 'roundtrip', 'front matter does not survive a dump and re-parse unchanged'))
    if settings.strict_fields:
        for key in parsed.frontmatter:
            if key not in settings.known_fields:
                issues.append(_issue(path, 'unknown-field', f"unrecognized front matter key '{key}'"))

    try:
        page = build_page(parsed, settings)
    except ValidationError as e:
        return None, issues + _validation_issues(path, e)
    return page, issues + check_page(page)


def duplicate_outputs(pages: list[Page]) -> list[Issue]:
    """Flag every page whose output path is shared with another page, drafts included."""
    by_output: dict[str, list[Page]] = defaultdict(list)
    for p in pages:
        by_output[p.output_path].append(p)

    issues = []
    for out, group in by_output.items():
        if len(group) < 2:
            continue
        for p in group:
            others = ', '.join(o.path for o in group if o is not p)
            issues.append(_issue(p.path, 'duplicate-output', f"output path {out} also produced by {others}"))
    return issues


def lint_tree(root: Path, settings: Settings) -> LintReport:
    """Parse, validate and cross-check every content file under root.

    root may be the whole content tree, a subdirectory, or one file; page
    paths are always measured from the content root (see content_base).
    Raises ValueError for a file outside content_dir.
    """
    base = content_base(root, settings.content_dir)
    files = discover_files(root)
    report = LintReport(files=len(files), complete=root.resolve() == base)

    for f in files:
        try:
            parsed = parse_file(f, base, settings.parser_config)
        except FrontMatterError as e:
            report.issues.append(_issue(relative_to_root(f, base).as_posix(), 'frontmatter-parse', str(e)))
            continue
        except UnicodeDecodeError as e:
            report.issues.append(_issue(relative_to_root(f, base).as_posix(), 'frontmatter-parse', f"not valid UTF-8: {e}"))
            continue

        page, issues = check_file(parsed, settings)
        report.issues.extend(issues)
        if page is not None:
            report.pages.append(page)

    report.issues.extend(duplicate_outputs(report.pages))
    report.issues.sort(key=lambda i: (i.path, i.rule))
    logger.info(
        "linted %d file(s) under %s: %d valid, %d error(s), %d warning(s)",
        report.files, root, len(report.pages), len(report.errors), len(report.warnings),
    )
    return report
