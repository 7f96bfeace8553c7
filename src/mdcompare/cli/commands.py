"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session, SQLModel

from mdcompare.config import Settings, load_config
from mdcompare.core.compare import compare_texts
from mdcompare.core.errors import ComparisonFailedError
from mdcompare.core.limits import check_diff_size
from mdcompare.core.models import ChangeKind, ComparisonReport, Granularity, UploadComparison
from mdcompare.core.render import project_rows, project_spans
from mdcompare.core.stats import preview
from mdcompare.core.utils.diff import unified_diff
from mdcompare.crud.database import init_db, make_engine
from mdcompare.crud.documents import create_document, list_documents, require_document
from mdcompare.crud.versioning import (
    compare_versions,
    compare_with_production,
    list_versions,
    promote_version,
    rollback_to_version,
    upload_version,
)
from mdcompare.logging_config import configure_logging


_COLORS = {ChangeKind.added: typer.colors.GREEN, ChangeKind.removed: typer.colors.RED}
_MARKERS = {ChangeKind.added: "+", ChangeKind.removed: "-", ChangeKind.unchanged: " "}

GranularityOpt = Annotated[Optional[Granularity], typer.Option("--type", "-t", help="Compare by lines or words")]
JsonOpt = Annotated[bool, typer.Option("--json", help="Print the comparison payload as JSON")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level, settings.json_logs)
    return settings


def _engine(settings: Settings):
    engine = make_engine(settings.db_url)
    init_db(engine)
    return engine


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {path}", e)


# --- rendering ---

def _echo_lines(report: ComparisonReport) -> None:
    for row in project_rows(report.runs):
        number = "" if row.line_number is None else str(row.line_number)
        typer.secho(f"{number:>5} {_MARKERS[row.kind]} {row.text}", fg=_COLORS.get(row.kind))


def _echo_words(report: ComparisonReport) -> None:
    parts = []
    for span in project_spans(report.runs):
        if span.kind == ChangeKind.added:
            parts.append(typer.style(f"{{+{span.text}+}}", fg=_COLORS[span.kind]))
        elif span.kind == ChangeKind.removed:
            parts.append(typer.style(f"[-{span.text}-]", fg=_COLORS[span.kind]))
        else:
            parts.append(span.text)
    typer.echo("".join(parts))


def _echo_preview(report: ComparisonReport, limit: int, max_chars: int) -> None:
    items = preview(report.runs, limit, max_chars)
    for item in items:
        typer.secho(f"  {_MARKERS[item.kind]} {item.value}", fg=_COLORS.get(item.kind))
    if report.stats.total_changes > len(items):
        typer.echo(f"And {report.stats.total_changes - len(items)} more changes...")


def _echo_report(
    report: ComparisonReport,
    as_json: bool = False,
    unified: bool = False,
    preview_of: tuple[int, int] | None = None,
    ) -> None:
    """Print a comparison as JSON, a unified patch, a (limit, max_chars) preview, or a line table / inline word diff."""
    if as_json:
        typer.echo(json.dumps(report.to_payload(), indent=2, ensure_ascii=False))
        return

    old, new = report.from_snapshot, report.to_snapshot
    unit = report.granularity.value
    typer.echo(f"v{old.version_number} -> v{new.version_number} ({unit})")
    if not report.has_changes:
        typer.echo(f"No changes between v{old.version_number} and v{new.version_number}.")
        return
    typer.echo(
        f"+{report.stats.additions} {unit}  "
        f"-{report.stats.deletions} {unit}  "
        f"{report.stats.total_changes} changes"
    )

    if preview_of is not None:
        _echo_preview(report, *preview_of)
    elif unified:
        typer.echo("".join(unified_diff(
            old.content or "", new.content or "", f"v{old.version_number}", f"v{new.version_number}",
        )), nl=False)
    elif report.granularity == Granularity.lines:
        _echo_lines(report)
    else:
        _echo_words(report)


def _echo_upload(comparison: UploadComparison | None) -> None:
    if comparison is None:
        return
    prev, new = comparison.previous_version, comparison.new_version
    if not comparison.has_changes:
        typer.echo(f"No changes detected between version {prev} and version {new}.")
        return
    typer.echo(
        f"Compared with v{prev}: "
        f"lines +{comparison.lines_added}/-{comparison.lines_removed}, "
        f"words +{comparison.words_added}/-{comparison.words_removed} "
        f"({comparison.change_type.value} update)"
    )
    for item in comparison.preview:
        typer.secho(f"  {_MARKERS[item.kind]} {item.value}", fg=_COLORS.get(item.kind))


# --- commands ---

def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        SQLModel.metadata.drop_all(engine)
        typer.echo("Existing data cleared.")
    init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def add_cmd(
    title: Annotated[str, typer.Argument(help="Document title")],
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Markdown file for version 1")],
    summary: Annotated[Optional[str], typer.Option("--summary", "-m", help="Change summary")] = None,
    slug: Annotated[Optional[str], typer.Option("--slug", help="Explicit slug (default: from title)")] = None,
    ):
    """Create a document from a markdown file."""
    settings = _settings()
    markdown = _read(path)
    with Session(_engine(settings)) as session:
        doc, version = create_document(session, title, markdown, change_summary=summary, slug=slug)
        session.commit()
        typer.echo(f"Created {doc.slug} (v{version.version_number}, id {doc.id})")


def list_cmd():
    """List documents in the database."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        docs = list_documents(session)
        if not docs:
            typer.echo("No documents found in database.")
            raise typer.Exit(1)
        for doc in docs:
            count = len(list_versions(session, doc.id))
            typer.echo(f"{doc.slug}\t{doc.title}\t{count} version(s)")


def upload_cmd(
    document: Annotated[str, typer.Argument(help="Document slug or id")],
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Markdown file for the new version")],
    summary: Annotated[Optional[str], typer.Option("--summary", "-m", help="Change summary")] = None,
    ):
    """Upload a new version and compare it against the previous one."""
    settings = _settings()
    markdown = _read(path)
    with Session(_engine(settings)) as session:
        try:
            doc = require_document(session, document)
            version, comparison = upload_version(
                session, doc, markdown, summary,
                preview_limit=settings.upload_preview_limit,
                preview_chars=settings.preview_chars,
                algorithm=settings.algorithm,
                max_tokens=settings.max_diff_tokens,
            )
        except ValueError as e:
            _fail(str(e))
        session.commit()
        typer.echo(f"Uploaded v{version.version_number} of {doc.slug}: {version.change_summary}")
        _echo_upload(comparison)


def versions_cmd(
    document: Annotated[str, typer.Argument(help="Document slug or id")],
    ):
    """List the versions of a document, oldest first."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        try:
            doc = require_document(session, document)
        except ValueError as e:
            _fail(str(e))
        for v in list_versions(session, doc.id):
            current = "*" if v.id == doc.current_version_id else " "
            typer.echo(
                f"{current} v{v.version_number}\t{v.status.value}\t"
                f"{v.created_at.isoformat(timespec='seconds')}\t{v.change_summary or ''}"
            )


def compare_cmd(
    document: Annotated[str, typer.Argument(help="Document slug or id")],
    from_ref: Annotated[str, typer.Argument(help="Version number (e.g. 2 or v2) or id")],
    to_ref: Annotated[str, typer.Argument(help="Version number (e.g. 3 or v3) or id")],
    granularity: GranularityOpt = None,
    as_json: JsonOpt = False,
    unified: Annotated[bool, typer.Option("--unified", help="Print a unified patch instead of a table")] = False,
    ):
    """Compare two versions of a document (always reported older -> newer)."""
    settings = _settings(overrides={"granularity": granularity})
    with Session(_engine(settings)) as session:
        try:
            doc = require_document(session, document)
            report = compare_versions(
                session, doc.id, from_ref, to_ref,
                settings.granularity, settings.algorithm, settings.max_diff_tokens,
            )
        except ComparisonFailedError as e:
            _fail("Comparison failed", e)
        except ValueError as e:
            _fail(str(e))
    _echo_report(report, as_json=as_json, unified=unified)


def compare_production_cmd(
    document: Annotated[str, typer.Argument(help="Document slug or id")],
    ref: Annotated[str, typer.Argument(help="Version to compare against production")],
    granularity: GranularityOpt = None,
    as_json: JsonOpt = False,
    full: Annotated[bool, typer.Option("--full", help="Show every change instead of a preview")] = False,
    ):
    """Compare a version against the document's production version."""
    settings = _settings(overrides={"granularity": granularity})
    with Session(_engine(settings)) as session:
        try:
            doc = require_document(session, document)
            report = compare_with_production(
                session, doc, ref, settings.granularity, settings.algorithm, settings.max_diff_tokens,
            )
        except ComparisonFailedError as e:
            _fail("Comparison failed", e)
        except ValueError as e:
            _fail(str(e))
    limits = None if full else (settings.preview_limit, settings.preview_chars)
    _echo_report(report, as_json=as_json, preview_of=limits)


def rollback_cmd(
    document: Annotated[str, typer.Argument(help="Document slug or id")],
    ref: Annotated[str, typer.Argument(help="Version to roll back to")],
    ):
    """Create a new version with the content of an earlier one."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        try:
            doc = require_document(session, document)
            version = rollback_to_version(session, doc, ref)
        except ValueError as e:
            _fail(str(e))
        session.commit()
        typer.echo(f"Created v{version.version_number} of {doc.slug}: {version.change_summary}")


def promote_cmd(
    document: Annotated[str, typer.Argument(help="Document slug or id")],
    ref: Annotated[str, typer.Argument(help="Version to promote")],
    ):
    """Promote a version to production."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        try:
            doc = require_document(session, document)
            version = promote_version(session, doc, ref)
        except ValueError as e:
            _fail(str(e))
        session.commit()
        typer.echo(f"v{version.version_number} of {doc.slug} promoted to production")


def diff_cmd(
    old_path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Older markdown file")],
    new_path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Newer markdown file")],
    granularity: GranularityOpt = None,
    as_json: JsonOpt = False,
    ):
    """Compare two markdown files without touching the database."""
    settings = _settings(overrides={"granularity": granularity})
    old, new = _read(old_path), _read(new_path)
    try:
        check_diff_size(old, new, settings.granularity, settings.max_diff_tokens)
        report = compare_texts(
            old, new, settings.granularity, settings.algorithm,
            old_label=str(old_path), new_label=str(new_path),
        )
    except ComparisonFailedError as e:
        _fail("Comparison failed", e)
    except ValueError as e:
        _fail(str(e))
    _echo_report(report, as_json=as_json)
