"""Page catalog persistence: upsert by path, removal of vanished files, lookups"""

import logging
from datetime import datetime

from sqlmodel import Session, select

from blogpub.core.emit import canonical, dump_frontmatter
from blogpub.core.models import Page
from blogpub.crud.models import PageRecord
from blogpub.crud.versioning import delete_versions, save_version


logger = logging.getLogger(__name__)


def get_by_path(session: Session, path: str) -> PageRecord | None:
    """Return the PageRecord with the given content path, or None if not found."""
    return session.exec(select(PageRecord).where(PageRecord.path == path)).one_or_none()


def get_all_pages(session: Session) -> list[PageRecord]:
    """Return all catalogued pages ordered by path."""
    return list(session.exec(select(PageRecord).order_by(PageRecord.path)).all())


def _columns(page: Page) -> dict:
    """PageRecord column values for a validated page."""
    return {
        "path": page.path,
        "output_path": page.output_path,
        "kind": page.kind.value,
        "title": page.title,
        "date": page.date,
        "draft": page.draft,
        "tags": list(page.tags),
        "frontmatter": dump_frontmatter(canonical(page.frontmatter)),
        "body": page.body,
        "hash": page.hash,
    }


def commit_page(
    session: Session,
    page: Page,
    max_versions: int = 10,
    committed_at: datetime | None = None,
    ) -> tuple[PageRecord, str]:
    """Upsert a validated Page by path.

    Returns (record, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; caller controls the transaction.
    The previous state is snapshotted before an update.
    """
    record = get_by_path(session, page.path)

    if record:
        if record.hash == page.hash:
            return record, 'unchanged'
        save_version(session, record, max_versions)
        for name, value in _columns(page).items():
            setattr(record, name, value)
        record.updated_at = datetime.now()
        record.committed_at = committed_at
        session.add(record)
        session.flush()
        return record, 'updated'

    record = PageRecord(**_columns(page), committed_at=committed_at)
    session.add(record)
    session.flush()
    return record, 'created'


def remove_missing(session: Session, present: set[str]) -> list[str]:
    """Delete records (and their history) whose path is not in present. Returns removed paths."""
    removed = []
    for record in get_all_pages(session):
        if record.path in present:
            continue
        delete_versions(session, record.id)
        session.delete(record)
        removed.append(record.path)
        logger.debug("removed %s from catalog", record.path)
    session.flush()
    return removed
