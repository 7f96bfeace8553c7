"""Turn an edit script over tokens into ordered ChangeRuns, and rebuild text from runs"""

from typing import Literal, Sequence

from mdcompare.core.models import (
    Added, Algorithm, ChangeRun, Granularity, Removed, Unchanged,
    parse_algorithm, parse_granularity,
)
from mdcompare.core.utils.diff import difflib_opcodes, myers_opcodes
from mdcompare.core.utils.tokens import join_tokens, unit_count


_ALGORITHMS = {
    Algorithm.myers: myers_opcodes,
    Algorithm.difflib: difflib_opcodes,
}


def diff(
    old_tokens: Sequence[str],
    new_tokens: Sequence[str],
    granularity: Granularity = Granularity.lines,
    algorithm: Algorithm = Algorithm.myers,
    ) -> list[ChangeRun]:
    """Compute ordered change runs between two token sequences.

    Contiguous tokens of the same kind are merged into one run. Each maximal
    changed block yields at most one Removed run followed by one Added run.
    """
    granularity = parse_granularity(granularity)
    opcodes = _ALGORITHMS[parse_algorithm(algorithm)](old_tokens, new_tokens)

    runs: list[ChangeRun] = []
    removed: list[str] = []
    added: list[str] = []

    def _flush() -> None:
        if removed:
            runs.append(Removed(value=join_tokens(removed, granularity), count=unit_count(removed, granularity)))
            removed.clear()
        if added:
            runs.append(Added(value=join_tokens(added, granularity), count=unit_count(added, granularity)))
            added.clear()

    for tag, i1, i2, j1, j2 in opcodes:
        if tag == "equal":
            _flush()
            same = list(old_tokens[i1:i2])
            runs.append(Unchanged(value=join_tokens(same, granularity), count=unit_count(same, granularity)))
        else:
            removed.extend(old_tokens[i1:i2])
            added.extend(new_tokens[j1:j2])
    _flush()
    return runs


def reconstruct(
    runs: Sequence[ChangeRun],
    granularity: Granularity,
    side: Literal["old", "new"] = "new",
    ) -> str:
    """Rebuild one side of the comparison: 'new' skips Removed runs, 'old' skips Added runs."""
    skip = Removed if side == "new" else Added
    values = [r.value for r in runs if not isinstance(r, skip)]
    return join_tokens(values, parse_granularity(granularity))
