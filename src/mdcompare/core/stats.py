"""Change statistics, bounded previews and upload summaries derived from change runs"""

from typing import Sequence

from mdcompare.core.models import (
    Added, Algorithm, ChangeRun, ChangeType, ComparisonStats, Granularity,
    PreviewItem, Removed, UploadComparison,
)
from mdcompare.core.runs import diff
from mdcompare.core.utils.tokens import tokenize


MAJOR_WORD_CHANGES = 50
MODERATE_WORD_CHANGES = 10
TRUNCATION_MARKER = "..."


def aggregate(runs: Sequence[ChangeRun]) -> ComparisonStats:
    """Sum added/removed units; total_changes counts Added/Removed runs, not units."""
    additions = deletions = total = 0
    for run in runs:
        if isinstance(run, Added):
            additions += run.count
            total += 1
        elif isinstance(run, Removed):
            deletions += run.count
            total += 1
    return ComparisonStats(additions=additions, deletions=deletions, total_changes=total)


def preview(runs: Sequence[ChangeRun], limit: int = 5, max_chars: int = 100) -> list[PreviewItem]:
    """First `limit` Added/Removed runs, each cut to max_chars with '...' appended when cut.

    Display-only; never feed the result back into a computation.
    """
    items = []
    for run in runs:
        if len(items) >= limit:
            break
        if not isinstance(run, (Added, Removed)):
            continue
        truncated = len(run.value) > max_chars
        value = run.value[:max_chars] + TRUNCATION_MARKER if truncated else run.value
        items.append(PreviewItem(kind=run.kind, value=value, truncated=truncated))
    return items


def classify_change(total_word_changes: int) -> ChangeType:
    if total_word_changes > MAJOR_WORD_CHANGES:
        return ChangeType.major
    if total_word_changes > MODERATE_WORD_CHANGES:
        return ChangeType.moderate
    return ChangeType.minor


def summarize_upload(
    old: str | None,
    new: str | None,
    previous_version: int,
    new_version: int,
    preview_limit: int = 10,
    max_chars: int = 100,
    algorithm: Algorithm = Algorithm.myers,
    ) -> UploadComparison:
    """Line and word change counts for a new upload against its predecessor.

    Missing content on either side compares as "". The preview is taken from
    the line-mode runs.
    """
    old, new = old or "", new or ""
    line_runs = diff(tokenize(old, Granularity.lines), tokenize(new, Granularity.lines), Granularity.lines, algorithm)
    word_runs = diff(tokenize(old, Granularity.words), tokenize(new, Granularity.words), Granularity.words, algorithm)
    lines, words = aggregate(line_runs), aggregate(word_runs)
    total_words = words.additions + words.deletions
    return UploadComparison(
        previous_version=previous_version,
        new_version=new_version,
        lines_added=lines.additions,
        lines_removed=lines.deletions,
        total_line_changes=lines.additions + lines.deletions,
        words_added=words.additions,
        words_removed=words.deletions,
        total_word_changes=total_words,
        change_type=classify_change(total_words),
        preview=preview(line_runs, limit=preview_limit, max_chars=max_chars),
    )
