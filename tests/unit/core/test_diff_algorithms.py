"""Unit tests for core/utils/diff.py"""

import tracemalloc

import pytest

from mdcompare.core.utils.diff import difflib_opcodes, myers_opcodes, unified_diff


ALGORITHMS = [myers_opcodes, difflib_opcodes]

PAIRS = [
    ([], []),
    ([], ["x", "y"]),
    (["x"], []),
    (list("abc"), list("abc")),
    (list("ABCABBA"), list("CBABAC")),
    (["# T", "", "one", "two", ""], ["# T", "", "one", "2", "three", ""]),
]


def _sides(opcodes, a, b):
    """Rebuild both inputs from opcode slices."""
    old, new = [], []
    for tag, i1, i2, j1, j2 in opcodes:
        old.extend(a[i1:i2])
        new.extend(b[j1:j2])
        if tag == "equal":
            assert a[i1:i2] == b[j1:j2]
    return old, new


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("a,b", PAIRS)
def test_opcodes_cover_both_sequences(algorithm, a, b):
    """Opcodes consume each input exactly once, in order."""
    assert _sides(algorithm(a, b), a, b) == (a, b)


def test_myers_identical_is_single_equal():
    """Identical inputs collapse into one equal opcode."""
    assert myers_opcodes(list("abc"), list("abc")) == [("equal", 0, 3, 0, 3)]


@pytest.mark.parametrize("a,b,expected", [
    ([], [], []),
    ([], ["x", "y"], [("insert", 0, 0, 0, 2)]),
    (["x"], [], [("delete", 0, 1, 0, 0)]),
])
def test_myers_edge_cases(a, b, expected):
    """Empty inputs produce pure insert/delete scripts or nothing."""
    assert myers_opcodes(a, b) == expected


def test_myers_is_minimal():
    """ABCABBA -> CBABAC needs exactly 5 edits (LCS length 4)."""
    ops = myers_opcodes(list("ABCABBA"), list("CBABAC"))
    edits = sum((i2 - i1) + (j2 - j1) for tag, i1, i2, j1, j2 in ops if tag != "equal")
    kept = sum(i2 - i1 for tag, i1, i2, j1, j2 in ops if tag == "equal")
    assert edits == 5
    assert kept == 4


def test_myers_trims_common_prefix_and_suffix():
    """A single changed middle token is reported between two equal spans."""
    ops = myers_opcodes(["a", "b", "c", "d"], ["a", "x", "c", "d"])
    assert ops[0] == ("equal", 0, 1, 0, 1)
    assert ops[-1] == ("equal", 2, 4, 2, 4)


def test_unified_diff_identical():
    """unified_diff returns an empty list when both texts are identical."""
    assert unified_diff("same\n", "same\n") == []


def test_unified_diff_labels():
    """unified_diff uses the given labels in its header lines."""
    lines = unified_diff("a\nb\n", "a\nc\n", "v1", "v2")
    assert lines[0].startswith("--- v1")
    assert lines[1].startswith("+++ v2")
    assert "-b\n" in lines
    assert "+c\n" in lines


def _peak_bytes(fn, *args):
    tracemalloc.start()
    try:
        result = fn(*args)
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()
    return result, peak


def test_myers_full_rewrite_is_delete_then_insert():
    """Two documents with no line in common are one delete and one insert, in bounded memory."""
    old = [f"old line {i}" for i in range(2000)]
    new = [f"new line {i}" for i in range(2000)]
    ops, peak = _peak_bytes(myers_opcodes, old, new)
    assert ops == [("delete", 0, 2000, 0, 0), ("insert", 2000, 2000, 0, 2000)]
    assert peak < 2_000_000


def test_myers_rewrite_sharing_blank_lines_stays_minimal_and_small():
    """Rewritten paragraphs keep their blank separators; memory does not grow with the edit distance squared."""
    old, new = [], []
    for i in range(300):
        old += [f"old paragraph {i}", ""]
        new += [f"new paragraph {i}", ""]
    ops, peak = _peak_bytes(myers_opcodes, old, new)
    assert _sides(ops, old, new) == (old, new)
    kept = sum(i2 - i1 for tag, i1, i2, j1, j2 in ops if tag == "equal")
    assert kept == 300
    assert peak < 2_000_000
