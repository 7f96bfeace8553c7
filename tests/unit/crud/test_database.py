"""Unit tests for crud/database.py"""

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from mdcompare.crud.database import init_db, make_engine


SQLITE_MEM = "sqlite://"


def test_make_engine_returns_engine():
    """make_engine returns an SQLAlchemy Engine instance."""
    assert isinstance(make_engine(SQLITE_MEM), Engine)


def test_init_db_creates_tables():
    """init_db creates the documents and document_versions tables in the database."""
    engine = make_engine(SQLITE_MEM)
    init_db(engine)
    tables = set(inspect(engine).get_table_names())
    assert {"documents", "document_versions"} <= tables
