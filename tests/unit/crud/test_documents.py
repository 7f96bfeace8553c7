"""Unit tests for crud/documents.py"""

import pytest

from mdcompare.core.utils.hashing import content_hash
from mdcompare.crud.documents import (
    INITIAL_SUMMARY, create_document, get_document, list_documents, require_document, slugify,
)
from mdcompare.crud.models import Document, DocumentVersion, VersionStatus


# --- slugify ---

@pytest.mark.parametrize("text,expected", [
    ("Test Doc", "test-doc"),
    ("Hello, World_again", "hello-world-again"),
    ("  Release -- Notes  ", "release-notes"),
    ("!!!", "document"),
])
def test_slugify(text, expected):
    """slugify lowercases, strips punctuation and hyphenates."""
    assert slugify(text) == expected


# --- create_document ---

def test_create_document_first_version(session):
    """create_document stores version 1 as the current draft version."""
    doc, version = create_document(session, "Guide", "# Guide\n")
    assert version.version_number == 1
    assert version.change_summary == INITIAL_SUMMARY
    assert version.status == VersionStatus.draft
    assert version.hash == content_hash("# Guide\n")
    assert doc.current_version_id == version.id
    assert session.get(DocumentVersion, version.id) is not None


def test_create_document_custom_summary_and_slug(session):
    """An explicit summary and slug are used as given (slug still normalized)."""
    doc, version = create_document(session, "Guide", "x", change_summary="Imported", slug="My Guide")
    assert doc.slug == "my-guide"
    assert version.change_summary == "Imported"


def test_create_document_unique_slug(session, doc):
    """A clashing slug gets a numeric suffix."""
    other, _ = create_document(session, "Test Doc", "other")
    assert doc.slug == "test-doc"
    assert other.slug == "test-doc-2"


def test_create_document_without_content(session):
    """A document may start with no stored content."""
    _, version = create_document(session, "Empty", None)
    assert version.content_markdown is None
    assert version.hash == content_hash("")


# --- lookup ---

def test_get_document_by_slug(session, doc):
    """get_document resolves a slug."""
    assert get_document(session, "test-doc") == doc


@pytest.mark.parametrize("as_str", [True, False])
def test_get_document_by_id(session, doc, as_str):
    """get_document resolves a UUID or its string form."""
    ref = str(doc.id) if as_str else doc.id
    assert get_document(session, ref) == doc


def test_get_document_missing(session):
    """get_document returns None for unknown refs."""
    assert get_document(session, "nope") is None


def test_require_document_raises(session):
    """require_document raises ValueError for unknown refs."""
    with pytest.raises(ValueError, match="not found"):
        require_document(session, "nope")


def test_list_documents(session, doc):
    """list_documents returns every stored Document."""
    create_document(session, "Second", "b")
    docs = list_documents(session)
    assert len(docs) == 2
    assert all(isinstance(d, Document) for d in docs)
