"""Data models for snapshots, change runs, comparison reports and render output"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mdcompare.core.errors import InvalidInputError


class Granularity(str, Enum):
    """Unit of comparison"""
    lines = "lines"
    words = "words"


class Algorithm(str, Enum):
    """Edit-script algorithm used by the diff step"""
    myers = "myers"
    difflib = "difflib"


class ChangeKind(str, Enum):
    added = "added"
    removed = "removed"
    unchanged = "unchanged"


class ChangeType(str, Enum):
    """Coarse size label for an uploaded revision, keyed on total word changes."""
    major = "major"
    moderate = "moderate"
    minor = "minor"


def parse_granularity(value: Any) -> Granularity:
    """Coerce 'lines'/'words' (or a Granularity) to the enum; InvalidInputError otherwise."""
    try:
        return Granularity(value)
    except ValueError as e:
        raise InvalidInputError(f"Unknown granularity {value!r}; expected 'lines' or 'words'") from e


def parse_algorithm(value: Any) -> Algorithm:
    try:
        return Algorithm(value)
    except ValueError as e:
        raise InvalidInputError(f"Unknown diff algorithm {value!r}; expected 'myers' or 'difflib'") from e


class TextSnapshot(BaseModel):
    """One immutable, timestamped textual version of a document."""
    model_config = ConfigDict(frozen=True)

    id: str
    version_number: int = Field(..., ge=1)
    content: Optional[str] = None   # None means no stored content; compared as ""
    created_at: datetime
    change_summary: Optional[str] = None

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid snapshot: {e}") from e

    def header(self) -> dict[str, Any]:
        """Version metadata without content, as sent to display collaborators."""
        return {
            "id": self.id,
            "version_number": self.version_number,
            "change_summary": self.change_summary,
            "created_at": self.created_at.isoformat(),
        }


class _Run(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    count: int = Field(..., ge=0)   # lines or words contained in value


class Added(_Run):
    kind: Literal[ChangeKind.added] = ChangeKind.added


class Removed(_Run):
    kind: Literal[ChangeKind.removed] = ChangeKind.removed


class Unchanged(_Run):
    kind: Literal[ChangeKind.unchanged] = ChangeKind.unchanged


ChangeRun = Annotated[Union[Added, Removed, Unchanged], Field(discriminator="kind")]


def run_payload(run: ChangeRun) -> dict[str, Any]:
    """Serialize a run as {value, added?: true, removed?: true, count}."""
    payload: dict[str, Any] = {"value": run.value}
    if isinstance(run, Added):
        payload["added"] = True
    elif isinstance(run, Removed):
        payload["removed"] = True
    payload["count"] = run.count
    return payload


class ComparisonStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    additions: int = Field(default=0, ge=0)       # units
    deletions: int = Field(default=0, ge=0)       # units
    total_changes: int = Field(default=0, ge=0)   # Added/Removed runs, not units

    def to_payload(self) -> dict[str, int]:
        return {"additions": self.additions, "deletions": self.deletions, "totalChanges": self.total_changes}


class ComparisonReport(BaseModel):
    """Result of comparing two snapshots, always ordered older -> newer."""
    model_config = ConfigDict(frozen=True)

    from_snapshot: TextSnapshot
    to_snapshot: TextSnapshot
    granularity: Granularity
    runs: list[ChangeRun]
    stats: ComparisonStats

    @property
    def has_changes(self) -> bool:
        return self.stats.total_changes > 0

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict consumed by renderers."""
        return {
            "fromVersion": self.from_snapshot.header(),
            "toVersion": self.to_snapshot.header(),
            "changes": [run_payload(r) for r in self.runs],
            "stats": self.stats.to_payload(),
            "diffType": self.granularity.value,
        }


class PreviewItem(BaseModel):
    """A truncated Added/Removed run for compact preview panels."""
    kind: ChangeKind
    value: str
    truncated: bool = False


class UploadComparison(BaseModel):
    """Line and word change counts between a freshly uploaded version and its predecessor."""
    previous_version: int
    new_version: int
    lines_added: int = 0
    lines_removed: int = 0
    total_line_changes: int = 0
    words_added: int = 0
    words_removed: int = 0
    total_word_changes: int = 0
    change_type: ChangeType = ChangeType.minor
    preview: list[PreviewItem] = []

    @property
    def has_changes(self) -> bool:
        return self.total_line_changes > 0 or self.total_word_changes > 0


class RenderRow(BaseModel):
    """One display line; line_number follows the new document and is None for removed lines."""
    kind: ChangeKind
    text: str
    line_number: Optional[int] = None


class RenderSpan(BaseModel):
    """One inline span of word-mode output."""
    kind: ChangeKind
    text: str
