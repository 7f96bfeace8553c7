"""Version comparator: order two snapshots chronologically and build a ComparisonReport"""

from datetime import datetime

from mdcompare.core.errors import ComparisonFailedError
from mdcompare.core.models import (
    Algorithm, ComparisonReport, Granularity, TextSnapshot,
    parse_algorithm, parse_granularity,
)
from mdcompare.core.runs import diff
from mdcompare.core.stats import aggregate
from mdcompare.core.utils.tokens import tokenize


def _instant(ts: datetime) -> datetime:
    """Timezone-aware copy of ts; naive timestamps are read as local time."""
    return ts if ts.tzinfo is not None else ts.astimezone()


def order_snapshots(a: TextSnapshot, b: TextSnapshot) -> tuple[TextSnapshot, TextSnapshot]:
    """Return (older, newer) by created_at; equal timestamps fall back to version_number.

    Naive and aware timestamps may be mixed. If both keys tie, the caller's
    order is kept.
    """
    if (_instant(b.created_at), b.version_number) < (_instant(a.created_at), a.version_number):
        return b, a
    return a, b


def compare(
    from_snapshot: TextSnapshot,
    to_snapshot: TextSnapshot,
    granularity: Granularity = Granularity.lines,
    algorithm: Algorithm = Algorithm.myers,
    ) -> ComparisonReport:
    """Diff two snapshots of the same document, always reading older -> newer.

    The caller is trusted to have checked that both snapshots belong to one
    document. Missing content is compared as "". Raises InvalidInputError for a
    bad granularity/algorithm and ComparisonFailedError if the computation
    itself breaks down.
    """
    granularity = parse_granularity(granularity)
    algorithm = parse_algorithm(algorithm)
    older, newer = order_snapshots(from_snapshot, to_snapshot)

    old_tokens = tokenize(older.content or "", granularity)
    new_tokens = tokenize(newer.content or "", granularity)
    try:
        runs = diff(old_tokens, new_tokens, granularity, algorithm)
    except (MemoryError, RecursionError) as e:
        raise ComparisonFailedError(
            f"Comparison of v{older.version_number} and v{newer.version_number} failed: {type(e).__name__}"
        ) from e

    return ComparisonReport(
        from_snapshot=older,
        to_snapshot=newer,
        granularity=granularity,
        runs=runs,
        stats=aggregate(runs),
    )


def compare_texts(
    old: str | None,
    new: str | None,
    granularity: Granularity = Granularity.lines,
    algorithm: Algorithm = Algorithm.myers,
    old_label: str = "old",
    new_label: str = "new",
    ) -> ComparisonReport:
    """Compare two loose strings as versions 1 -> 2, keeping argument order."""
    now = datetime.now()
    old_snap = TextSnapshot(id=old_label, version_number=1, content=old, created_at=now)
    new_snap = TextSnapshot(id=new_label, version_number=2, content=new, created_at=now)
    return compare(old_snap, new_snap, granularity, algorithm)
