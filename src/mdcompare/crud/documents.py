"""Document persistence: create, lookup by id or slug, list"""

import re
from datetime import datetime
from uuid import UUID

from sqlmodel import Session, select

from mdcompare.core.utils.hashing import content_hash
from mdcompare.crud.models import Document, DocumentVersion
from mdcompare.logging_config import get_logger


log = get_logger(__name__)

INITIAL_SUMMARY = "Initial version"


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated URL-safe slug; 'document' if nothing survives."""
    text = re.sub(r'[^\w\s-]', '', text.lower())
    text = re.sub(r'[\s_-]+', '-', text).strip('-')
    return text or "document"


def _unique_slug(session: Session, base: str) -> str:
    """Append -2, -3, ... until the slug is free."""
    slug, n = base, 1
    while session.exec(select(Document.id).where(Document.slug == slug)).first() is not None:
        n += 1
        slug = f"{base}-{n}"
    return slug


def get_document(session: Session, ref: str | UUID) -> Document | None:
    """Return the Document with the given UUID or slug, or None if not found."""
    try:
        doc_id = ref if isinstance(ref, UUID) else UUID(str(ref))
    except ValueError:
        return session.exec(select(Document).where(Document.slug == ref)).first()
    return session.get(Document, doc_id)


def require_document(session: Session, ref: str | UUID) -> Document:
    """get_document, raising ValueError when it is missing."""
    doc = get_document(session, ref)
    if doc is None:
        raise ValueError(f"Document {ref} not found")
    return doc


def list_documents(session: Session) -> list[Document]:
    """Return all documents ordered by creation time."""
    return list(session.exec(select(Document).order_by(Document.created_at.asc())).all())


def create_document(
    session: Session,
    title: str,
    markdown: str | None,
    change_summary: str | None = None,
    slug: str | None = None,
    ) -> tuple[Document, DocumentVersion]:
    """Create a Document with its first version (number 1) as the current version.

    Flushes but does not commit; caller controls the transaction.
    """
    now = datetime.now()
    doc = Document(
        title=title,
        slug=_unique_slug(session, slugify(slug or title)),
        created_at=now,
        updated_at=now,
    )
    session.add(doc)
    session.flush()

    version = DocumentVersion(
        document_id=doc.id,
        version_number=1,
        content_markdown=markdown,
        hash=content_hash(markdown),
        change_summary=change_summary or INITIAL_SUMMARY,
        created_at=now,
    )
    session.add(version)
    session.flush()

    doc.current_version_id = version.id
    session.add(doc)
    session.flush()
    log.info("document.created", document_id=str(doc.id), slug=doc.slug)
    return doc, version
