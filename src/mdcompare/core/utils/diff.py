"""Edit-script algorithms over token sequences, plus unified patch output

Both algorithms return difflib-style opcodes: (tag, i1, i2, j1, j2) with tag in
'equal', 'delete', 'insert' or 'replace', covering a[i1:i2] and b[j1:j2].
"""

import difflib
from itertools import groupby
from typing import Sequence

Opcode = tuple[str, int, int, int, int]


def _split_point(a: Sequence[str], b: Sequence[str]) -> tuple[int, int]:
    """Return a point on a shortest edit path from (0, 0) to (len(a), len(b)).

    Runs the Myers O(ND) forward search keeping only the current frontier.
    Each frontier entry carries the first point its path reached at or past
    x + y == half, so the winning path hands back its own midpoint.
    """
    n, m = len(a), len(b)
    half = (n + m) // 2
    v = {1: 0}
    mid: dict[int, tuple[int, int] | None] = {1: None}
    for d in range(n + m + 1):
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[k - 1] < v[k + 1]):
                x, cross = v[k + 1], mid[k + 1]        # step down: insertion
            else:
                x, cross = v[k - 1] + 1, mid[k - 1]    # step right: deletion
            y = x - k
            if cross is None and x + y >= half:
                cross = (x, y)
            while x < n and y < m and a[x] == b[y]:
                x, y = x + 1, y + 1
                if cross is None and x + y >= half:
                    cross = (x, y)
            v[k], mid[k] = x, cross
            if x >= n and y >= m:
                return cross
    raise AssertionError("edit search did not reach the end of both sequences")


def _edit_tags(a: Sequence[str], b: Sequence[str], tags: list[str]) -> None:
    """Append per-token tags for a minimal edit script of a -> b.

    Splits at a midpoint of a shortest path and recurses on both halves, so
    memory stays linear in len(a) + len(b).
    """
    n, m = len(a), len(b)
    prefix = 0
    while prefix < n and prefix < m and a[prefix] == b[prefix]:
        prefix += 1
    suffix = 0
    while suffix < n - prefix and suffix < m - prefix and a[n - 1 - suffix] == b[m - 1 - suffix]:
        suffix += 1

    tags.extend(["equal"] * prefix)
    mid_a, mid_b = a[prefix:n - suffix], b[prefix:m - suffix]
    if not mid_a or not mid_b or set(mid_a).isdisjoint(mid_b):
        tags.extend(["delete"] * len(mid_a))
        tags.extend(["insert"] * len(mid_b))
    else:
        x, y = _split_point(mid_a, mid_b)
        _edit_tags(mid_a[:x], mid_b[:y], tags)
        _edit_tags(mid_a[x:], mid_b[y:], tags)
    tags.extend(["equal"] * suffix)


def _tags_to_opcodes(tags: list[str]) -> list[Opcode]:
    opcodes = []
    i = j = 0
    for tag, group in groupby(tags):
        size = sum(1 for _ in group)
        if tag == "equal":
            opcodes.append(("equal", i, i + size, j, j + size))
            i, j = i + size, j + size
        elif tag == "delete":
            opcodes.append(("delete", i, i + size, j, j))
            i += size
        else:
            opcodes.append(("insert", i, i, j, j + size))
            j += size
    return opcodes


def myers_opcodes(a: Sequence[str], b: Sequence[str]) -> list[Opcode]:
    """Minimal edit script between a and b (Myers 1986, linear-space divide and conquer)."""
    tags: list[str] = []
    _edit_tags(list(a), list(b), tags)
    return _tags_to_opcodes(tags)


def difflib_opcodes(a: Sequence[str], b: Sequence[str]) -> list[Opcode]:
    """SequenceMatcher opcodes; autojunk is off so repeated tokens (blank lines, spaces) still match."""
    return difflib.SequenceMatcher(None, a, b, autojunk=False).get_opcodes()


def unified_diff(
    old: str,
    new: str,
    from_label: str = "version_a",
    to_label: str = "version_b",
    context: int = 3,
    ) -> list[str]:
    """Return unified diff lines comparing old to new. Empty list if identical.

    Lines keep their newlines; join with '' for display.
    """
    return list(difflib.unified_diff(
        old.splitlines(keepends=True),
        new.splitlines(keepends=True),
        fromfile=from_label,
        tofile=to_label,
        n=context,
    ))
