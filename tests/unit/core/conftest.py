"""Shared fixtures for core unit tests"""

from datetime import datetime, timedelta

import pytest

from mdcompare.core.models import TextSnapshot


BASE_TIME = datetime(2025, 3, 1, 9, 30)


@pytest.fixture(name="snapshot")
def snapshot_factory():
    """Build a TextSnapshot; `minutes` offsets created_at from a fixed base time."""
    def _make(version_number: int, content, minutes: int = None, summary: str = None) -> TextSnapshot:
        offset = version_number if minutes is None else minutes
        return TextSnapshot(
            id=f"ver-{version_number}",
            version_number=version_number,
            content=content,
            created_at=BASE_TIME + timedelta(minutes=offset),
            change_summary=summary,
        )
    return _make
