"""Page version persistence: save, prune, list, and diff operations"""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from blogpub.core.emit import render_page, unified_diff
from blogpub.core.parse import load_frontmatter
from blogpub.crud.models import PageRecord, PageVersion


def _text(frontmatter: str, body: str) -> str:
    """Full file text for a stored state, as the author would see it."""
    return render_page(load_frontmatter(frontmatter), body)


def get_version(session: Session, page_id: UUID, version_num: int) -> PageVersion:
    """Return one stored version. Raises ValueError if it does not exist."""
    v = session.exec(
        select(PageVersion)
        .where(PageVersion.page_id == page_id)
        .where(PageVersion.version_num == version_num)
    ).one_or_none()
    if v is None:
        raise ValueError(f"Version {version_num} not found for page {page_id}")
    return v


def diff_versions(
    session: Session,
    page: PageRecord,
    from_num: int,
    to_num: int | None = None,
    context: int = 3,
    ) -> list[str]:
    """Unified diff lines between two stored versions, or a version and the current state when to_num is None."""
    v_from = get_version(session, page.id, from_num)
    if to_num is None:
        new, to_label = _text(page.frontmatter, page.body), "current"
    else:
        v_to = get_version(session, page.id, to_num)
        new, to_label = _text(v_to.frontmatter, v_to.body), f"v{to_num}"
    return unified_diff(_text(v_from.frontmatter, v_from.body), new, f"v{from_num}", to_label, context)


def list_versions(session: Session, page_id: UUID) -> list[PageVersion]:
    """Return all versions for a page ordered by version_num ascending."""
    return list(
        session.exec(
            select(PageVersion)
            .where(PageVersion.page_id == page_id)
            .order_by(PageVersion.version_num.asc())
        ).all()
    )


def prune_versions(session: Session, page_id: UUID, max_versions: int) -> int:
    """Delete oldest versions beyond max_versions. Returns count deleted. No-op if max_versions=0."""
    if max_versions == 0:
        return 0

    versions = list_versions(session, page_id)
    excess = len(versions) - max_versions
    if excess <= 0:
        return 0

    for v in versions[:excess]:
        session.delete(v)
    session.flush()
    return excess


def delete_versions(session: Session, page_id: UUID) -> None:
    """Remove the whole history of a page."""
    for v in list_versions(session, page_id):
        session.delete(v)
    session.flush()


def save_version(session: Session, page: PageRecord, max_versions: int = 10) -> PageVersion:
    """Snapshot current PageRecord state as a new immutable version.

    Computes next version_num as MAX(version_num)+1 for this page.
    Prunes old versions after saving if max_versions > 0.
    """
    result = session.exec(
        select(func.max(PageVersion.version_num))
        .where(PageVersion.page_id == page.id)
    ).one()

    version = PageVersion(
        page_id=page.id,
        version_num=(result or 0) + 1,
        title=page.title,
        frontmatter=page.frontmatter,
        body=page.body,
        hash=page.hash,
    )
    session.add(version)
    session.flush()

    if max_versions > 0:
        prune_versions(session, page.id, max_versions)

    return version
