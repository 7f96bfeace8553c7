"""Render projection: map change runs to display rows (lines) or inline spans (words)"""

from typing import Sequence

from mdcompare.core.models import (
    ChangeKind, ChangeRun, Granularity, RenderRow, RenderSpan, parse_granularity,
)


def project_rows(runs: Sequence[ChangeRun]) -> list[RenderRow]:
    """One row per line; Unchanged and Added lines are numbered against the new document."""
    rows = []
    line_number = 0
    for run in runs:
        for line in run.value.split("\n"):
            if run.kind == ChangeKind.removed:
                rows.append(RenderRow(kind=run.kind, text=line))
            else:
                line_number += 1
                rows.append(RenderRow(kind=run.kind, text=line, line_number=line_number))
    return rows


def project_spans(runs: Sequence[ChangeRun]) -> list[RenderSpan]:
    return [RenderSpan(kind=run.kind, text=run.value) for run in runs]


def project(runs: Sequence[ChangeRun], granularity: Granularity) -> list[RenderRow] | list[RenderSpan]:
    if parse_granularity(granularity) == Granularity.lines:
        return project_rows(runs)
    return project_spans(runs)
