"""Pipeline step functions: publish gating, manifest export, front matter formatting, catalog sync"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from sqlmodel import Session

from blogpub.core.emit import normalize_text
from blogpub.core.models import LintReport, Page
from blogpub.core.parse import FrontMatterError, discover_files
from blogpub.crud.pages import commit_page, remove_missing


logger = logging.getLogger(__name__)

MANIFEST_FILE = "pages.json"


def _sort_date(page: Page) -> datetime:
    """Page date as an aware UTC datetime; naive dates are taken as UTC."""
    if page.date is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if page.date.tzinfo is None:
        return page.date.replace(tzinfo=timezone.utc)
    return page.date.astimezone(timezone.utc)


def published(pages: list[Page]) -> list[Page]:
    """Drop drafts. Posts come first, newest first; static pages follow by path."""
    live = [p for p in pages if not p.draft]
    posts = sorted(
        (p for p in live if not p.is_static),
        key=lambda p: (_sort_date(p), p.path),
        reverse=True,
    )
    static = sorted((p for p in live if p.is_static), key=lambda p: p.path)
    return posts + static


def manifest_entry(page: Page) -> dict:
    """Minimal JSON description of a published page."""
    return {
        "path": page.path,
        "output_path": page.output_path,
        "kind": page.kind.value,
        "title": page.title,
        "date": page.date.isoformat() if page.date else None,
        "tags": page.tags,
        "words": page.words,
        "summary": page.summary,
        "hash": page.hash,
    }


def run_manifest(report: LintReport, output_dir: Path) -> tuple[Path, int]:
    """Write pages.json for the published set. Returns (manifest_path, page_count).

    Refuses to run when the report has errors.
    """
    if report.errors:
        raise RuntimeError(f"Content has {len(report.errors)} error(s); run 'blogpub check' for details")
    pages = published(report.pages)
    output_dir.mkdir(parents=True, exist_ok=True)
    out = output_dir / MANIFEST_FILE
    out.write_text(
        json.dumps(
            {"generated_at": datetime.now().isoformat(), "pages": [manifest_entry(p) for p in pages]},
            indent=2, ensure_ascii=False,
        ),
        encoding='utf-8',
    )
    logger.info("wrote %d page(s) to %s", len(pages), out)
    return out, len(pages)


def run_fmt(path: Path, check: bool = False) -> tuple[list[Path], list[tuple[Path, str]]]:
    """Rewrite front matter in canonical form.

    Returns (changed, failed): files whose canonical form differs (written
    unless check is set) and (file, reason) pairs that could not be parsed.
    """
    changed, failed = [], []
    for f in discover_files(path):
        try:
            raw = f.read_text(encoding='utf-8')
            normalized = normalize_text(raw)
        except (FrontMatterError, UnicodeDecodeError) as e:
            failed.append((f, str(e)))
            continue
        if normalized == raw:
            continue
        changed.append(f)
        if not check:
            f.write_text(normalized, encoding='utf-8')
            logger.debug("reformatted %s", f)
    return changed, failed


def run_sync(
    engine,
    report: LintReport,
    max_versions: int,
    prune: bool = True,
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Record every linted page in the catalog and drop records for vanished files.

    Returns (counts, changes) where changes is a list of (status, path) for
    created/updated/removed pages. Refuses to run when the report has errors.
    """
    if report.errors:
        raise RuntimeError(f"Content has {len(report.errors)} error(s); run 'blogpub check' for details")

    committed_at = datetime.now()
    counts = {"created": 0, "updated": 0, "unchanged": 0, "removed": 0}
    changes = []
    with Session(engine) as session:
        for page in report.pages:
            try:
                _, status = commit_page(session, page, max_versions, committed_at)
            except Exception as e:
                raise RuntimeError(f"Failed to sync {page.path}: {e}") from e
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, page.path))
        if prune:
            for path in remove_missing(session, {p.path for p in report.pages}):
                counts["removed"] += 1
                changes.append(("removed", path))
        session.commit()
    return counts, changes
