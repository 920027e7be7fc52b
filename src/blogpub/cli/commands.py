"""CLI command implementations"""

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from blogpub.config import Settings, load_config
from blogpub.core.lint import lint_tree
from blogpub.core.models import LintReport
from blogpub.core.pipeline import published, run_fmt, run_manifest, run_sync
from blogpub.crud.database import init_db, make_engine, reset_db
from blogpub.crud.pages import get_by_path
from blogpub.crud.versioning import diff_versions, list_versions


class ReportFormat(str, Enum):
    text = "text"
    json = "json"


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _root(path: Optional[str], settings: Settings) -> Path:
    """Resolve the content root from the argument or the configured content_dir."""
    root = Path(path or settings.content_dir)
    if not root.exists():
        _fail(f"Content path not found: {root}")
    return root


def _lint(root: Path, settings: Settings) -> LintReport:
    try:
        return lint_tree(root, settings)
    except OSError as e:
        _fail(f"Could not read {root}", e)
    except ValueError as e:
        _fail(str(e))


def _echo_issues(report: LintReport) -> None:
    for issue in report.issues:
        typer.echo(str(issue), err=True)


def check_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Content file or directory (default: content_dir)")] = None,
    strict: Annotated[bool, typer.Option("--strict", help="Treat warnings as failures")] = False,
    strict_fields: Annotated[Optional[bool], typer.Option("--strict-fields/--no-strict-fields", help="Warn on unrecognized front matter keys")] = None,
    fmt: Annotated[ReportFormat, typer.Option("--format", help="Report format")] = ReportFormat.text,
    ):
    """Validate front matter, dates, and output path uniqueness for every content file."""
    settings = _settings(overrides={"strict_fields": strict_fields})
    report = _lint(_root(path, settings), settings)

    if fmt == ReportFormat.json:
        typer.echo(json.dumps({
            "ok": report.ok(strict),
            "pages": len(report.pages),
            "issues": [i.model_dump(mode="json") for i in report.issues],
        }, indent=2))
    else:
        for issue in report.issues:
            typer.echo(str(issue))
        typer.echo(
            f"Checked {report.files} file(s) - "
            f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
        )
    if not report.ok(strict):
        raise typer.Exit(1)


def list_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Content file or directory (default: content_dir)")] = None,
    drafts: Annotated[bool, typer.Option("--drafts", help="Include draft pages")] = False,
    ):
    """List the published set: posts newest first, then static pages."""
    settings = _settings()
    report = _lint(_root(path, settings), settings)
    if report.errors:
        typer.echo(f"Warning: {len(report.errors)} file(s) have errors; run 'blogpub check'", err=True)

    pages = published(report.pages)
    if drafts:
        pages += sorted((p for p in report.pages if p.draft), key=lambda p: p.path)
    if not pages:
        typer.echo("No published pages found.")
        raise typer.Exit(1)

    for p in pages:
        when = p.date.date().isoformat() if p.date else "-" * 10
        flag = " (draft)" if p.draft else ""
        typer.echo(f"{when}  {p.kind.value:<4}  {p.output_path}  {p.title}{flag}")


def manifest_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Content file or directory (default: content_dir)")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Write pages.json describing the published (non-draft) pages."""
    settings = _settings(overrides={"output_dir": out})
    report = _lint(_root(path, settings), settings)
    try:
        manifest, count = run_manifest(report, Path(settings.output_dir))
    except RuntimeError as e:
        _echo_issues(report)
        _fail(str(e))
    typer.echo(f"Wrote {count} page(s) to {manifest}")


def fmt_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Content file or directory (default: content_dir)")] = None,
    check: Annotated[bool, typer.Option("--check", help="Report files that would change without writing")] = False,
    ):
    """Rewrite front matter with canonical key order and YAML layout."""
    settings = _settings()
    root = _root(path, settings)
    try:
        changed, failed = run_fmt(root, check=check)
    except OSError as e:
        _fail(f"Could not format {root}", e)

    for f, reason in failed:
        typer.echo(f"  skipped: {f} ({reason})", err=True)
    verb = "would reformat" if check else "reformatted"
    for f in changed:
        typer.echo(f"  {verb}: {f}")
    typer.echo(f"{len(changed)} file(s) {verb}, {len(failed)} skipped")
    if check and changed:
        raise typer.Exit(1)


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the catalog schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Catalog initialized at: {settings.db_url}")


def sync_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Content root (default: content_dir)")] = None,
    versions: Annotated[Optional[int], typer.Option("--max-versions", help="Max stored versions per page")] = None,
    ):
    """Record page states in the catalog: created, updated, unchanged, removed."""
    settings = _settings(overrides={"max_versions": versions})
    root = _root(path, settings)
    report = _lint(root, settings)
    engine = make_engine(settings.db_url)
    init_db(engine)

    try:
        counts, changes = run_sync(engine, report, settings.max_versions, prune=report.complete)
    except RuntimeError as e:
        _echo_issues(report)
        _fail(str(e))

    for status, page_path in changes:
        typer.echo(f"  {status}: {page_path}")
    typer.echo(
        f"Sync complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged, "
        f"{counts['removed']} removed"
    )


def history_cmd(
    page: Annotated[str, typer.Argument(help="Page path relative to the content root")],
    ):
    """List stored versions of a page."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        record = get_by_path(session, page)
        if record is None:
            _fail(f"Page not in catalog: {page}")
        versions = list_versions(session, record.id)
        current = f"current  {record.updated_at:%Y-%m-%d %H:%M}  {record.hash[:12]}  {record.title}"

    for v in versions:
        typer.echo(f"v{v.version_num:<6} {v.created_at:%Y-%m-%d %H:%M}  {v.hash[:12]}  {v.title}")
    typer.echo(current)


def diff_cmd(
    page: Annotated[str, typer.Argument(help="Page path relative to the content root")],
    from_num: Annotated[int, typer.Argument(help="Older version number")],
    to_num: Annotated[Optional[int], typer.Argument(help="Newer version number (default: current)")] = None,
    ):
    """Show a unified diff between two versions of a page."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        record = get_by_path(session, page)
        if record is None:
            _fail(f"Page not in catalog: {page}")
        try:
            lines = diff_versions(session, record, from_num, to_num)
        except ValueError as e:
            _fail(str(e))

    if not lines:
        typer.echo("No differences.")
        return
    typer.echo("".join(lines), nl=False)
