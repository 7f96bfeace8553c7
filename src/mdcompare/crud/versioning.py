"""Document version persistence: upload, list, compare, rollback and promotion"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from mdcompare.core.compare import compare
from mdcompare.core.errors import ComparisonFailedError, InvalidInputError
from mdcompare.core.limits import check_diff_size
from mdcompare.core.models import Algorithm, ComparisonReport, Granularity, UploadComparison
from mdcompare.core.stats import summarize_upload
from mdcompare.core.utils.hashing import content_hash
from mdcompare.crud.models import Document, DocumentVersion, VersionStatus
from mdcompare.logging_config import get_logger


log = get_logger(__name__)


def _parse_ref(ref: str | int | UUID) -> UUID | int:
    """A version ref is a UUID, a version number, or 'v<number>'."""
    if isinstance(ref, (UUID, int)):
        return ref
    text = str(ref).strip()
    number = text[1:] if text[:1] in ("v", "V") else text
    if number.isdigit():
        return int(number)
    try:
        return UUID(text)
    except ValueError as e:
        raise ValueError(f"Invalid version reference {ref!r}") from e


def get_version(session: Session, document_id: UUID, ref: str | int | UUID) -> DocumentVersion:
    """Return one version of a document by id or number. Raises ValueError if missing."""
    key = _parse_ref(ref)
    query = select(DocumentVersion).where(DocumentVersion.document_id == document_id)
    if isinstance(key, UUID):
        query = query.where(DocumentVersion.id == key)
    else:
        query = query.where(DocumentVersion.version_number == key)
    version = session.exec(query).one_or_none()
    if version is None:
        raise ValueError(f"Version {ref} not found for document {document_id}")
    return version


def list_versions(session: Session, document_id: UUID) -> list[DocumentVersion]:
    """Return all versions for a document ordered by version_number ascending."""
    return list(
        session.exec(
            select(DocumentVersion)
            .where(DocumentVersion.document_id == document_id)
            .order_by(DocumentVersion.version_number.asc())
        ).all()
    )


def latest_version(session: Session, document_id: UUID) -> DocumentVersion | None:
    return session.exec(
        select(DocumentVersion)
        .where(DocumentVersion.document_id == document_id)
        .order_by(DocumentVersion.version_number.desc())
    ).first()


def production_version(session: Session, doc: Document) -> DocumentVersion | None:
    if doc.production_version_id is None:
        return None
    return session.get(DocumentVersion, doc.production_version_id)


def _append_version(session: Session, doc: Document, markdown: str | None, change_summary: str) -> DocumentVersion:
    """Add version MAX(version_number)+1 and make it the document's current version."""
    result = session.exec(
        select(func.max(DocumentVersion.version_number))
        .where(DocumentVersion.document_id == doc.id)
    ).one()

    version = DocumentVersion(
        document_id=doc.id,
        version_number=(result or 0) + 1,
        content_markdown=markdown,
        hash=content_hash(markdown),
        change_summary=change_summary,
    )
    session.add(version)
    session.flush()

    doc.current_version_id = version.id
    doc.updated_at = datetime.now()
    session.add(doc)
    session.flush()
    return version


def upload_version(
    session: Session,
    doc: Document,
    markdown: str | None,
    change_summary: str | None = None,
    preview_limit: int = 10,
    preview_chars: int = 100,
    algorithm: Algorithm = Algorithm.myers,
    max_tokens: int = 0,
    ) -> tuple[DocumentVersion, UploadComparison | None]:
    """Store markdown as the next version and compare it against the previous one.

    Returns (version, comparison). comparison is None for a first version, or
    when the comparison could not be computed; that never fails the upload.
    Content identical to the previous version (same hash) is reported as no
    changes without diffing.
    Flushes but does not commit; caller controls the transaction.
    """
    previous = latest_version(session, doc.id)
    number = (previous.version_number if previous else 0) + 1
    version = _append_version(session, doc, markdown, change_summary or f"Version {number} uploaded")
    log.info("version.uploaded", document_id=str(doc.id), version_number=version.version_number)

    if previous is None:
        return version, None
    if previous.hash == version.hash:
        return version, UploadComparison(previous_version=previous.version_number, new_version=version.version_number)
    try:
        check_diff_size(previous.content_markdown, markdown, Granularity.words, max_tokens)
        comparison = summarize_upload(
            previous.content_markdown,
            markdown,
            previous_version=previous.version_number,
            new_version=version.version_number,
            preview_limit=preview_limit,
            max_chars=preview_chars,
            algorithm=algorithm,
        )
    except (InvalidInputError, ComparisonFailedError, MemoryError, RecursionError) as e:
        log.warning(
            "version.upload_comparison_failed",
            document_id=str(doc.id),
            version_number=version.version_number,
            error=str(e) or type(e).__name__,
        )
        return version, None
    return version, comparison


def compare_versions(
    session: Session,
    document_id: UUID,
    from_ref: str | int | UUID,
    to_ref: str | int | UUID,
    granularity: Granularity = Granularity.lines,
    algorithm: Algorithm = Algorithm.myers,
    max_tokens: int = 0,
    ) -> ComparisonReport:
    """Compare two stored versions of one document, reported older -> newer.

    Raises ValueError if either version is missing (InvalidInputError for
    oversized or malformed input).
    """
    v_from = get_version(session, document_id, from_ref)
    v_to = get_version(session, document_id, to_ref)
    check_diff_size(v_from.content_markdown, v_to.content_markdown, granularity, max_tokens)
    report = compare(v_from.to_snapshot(), v_to.to_snapshot(), granularity, algorithm)
    log.debug(
        "comparison.computed",
        document_id=str(document_id),
        from_version=report.from_snapshot.version_number,
        to_version=report.to_snapshot.version_number,
        granularity=report.granularity.value,
        runs=len(report.runs),
        total_changes=report.stats.total_changes,
    )
    return report


def compare_with_production(
    session: Session,
    doc: Document,
    ref: str | int | UUID,
    granularity: Granularity = Granularity.lines,
    algorithm: Algorithm = Algorithm.myers,
    max_tokens: int = 0,
    ) -> ComparisonReport:
    """Compare the production version against another version of the same document.

    Raises ValueError if there is no production version or ref is the production version.
    """
    prod = production_version(session, doc)
    if prod is None:
        raise ValueError(f"Document {doc.slug} has no production version")
    target = get_version(session, doc.id, ref)
    if target.id == prod.id:
        raise ValueError(f"v{target.version_number} is already the production version")
    return compare_versions(session, doc.id, prod.id, target.id, granularity, algorithm, max_tokens)


def rollback_to_version(session: Session, doc: Document, ref: str | int | UUID) -> DocumentVersion:
    """Copy a prior version's content forward as a new current version.

    History is never rewritten: the rollback is itself a new version.
    Raises ValueError if ref is not a version of this document.
    """
    target = get_version(session, doc.id, ref)
    version = _append_version(
        session, doc, target.content_markdown,
        f"Rollback to v{target.version_number}: {target.change_summary}",
    )
    log.info(
        "version.rolled_back",
        document_id=str(doc.id),
        target_version=target.version_number,
        version_number=version.version_number,
    )
    return version


def promote_version(session: Session, doc: Document, ref: str | int | UUID) -> DocumentVersion:
    """Mark a version as production; the previous production version is archived."""
    target = get_version(session, doc.id, ref)
    if target.status == VersionStatus.production:
        return target

    prod = production_version(session, doc)
    if prod is not None:
        prod.status = VersionStatus.archived
        session.add(prod)

    target.status = VersionStatus.production
    doc.production_version_id = target.id
    doc.updated_at = datetime.now()
    session.add(target)
    session.add(doc)
    session.flush()
    log.info("version.promoted", document_id=str(doc.id), version_number=target.version_number)
    return target
