"""Unit tests for core/limits.py"""

import pytest

from mdcompare.core.errors import InvalidInputError
from mdcompare.core.limits import check_diff_size
from mdcompare.core.models import Granularity


def test_check_diff_size_within_limit():
    """Inputs whose token product fits the limit pass silently."""
    check_diff_size("a\nb", "a\nb\nc", Granularity.lines, max_tokens=6)


def test_check_diff_size_over_limit():
    """Inputs over the limit are rejected before any diffing."""
    with pytest.raises(InvalidInputError, match="too large"):
        check_diff_size("a\nb", "a\nb\nc", Granularity.lines, max_tokens=5)


def test_check_diff_size_disabled():
    """max_tokens=0 disables the check."""
    check_diff_size("x " * 1000, "y " * 1000, Granularity.words, max_tokens=0)


def test_check_diff_size_missing_content():
    """Missing content counts as zero tokens."""
    check_diff_size(None, "a b c", Granularity.words, max_tokens=1)
