"""
Command line interface for the documentation registry.

    docs-registry generate          regenerate managed headers, then the index
    docs-registry generate-index    rebuild INDEX.md only
    docs-registry audit             run every drift check
    docs-registry audit-<check>     run one check (schema, checksum, index, orphans)
    docs-registry discover          list valid documents
    docs-registry validate PATH     validate one doc.json
    docs-registry schema            print the doc.json JSON Schema

Exit codes: 0 clean, 1 drift or invalid input, 2 unusable configuration.
Logs go to stderr; stdout carries only command output.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, NoReturn, Optional, Tuple

import typer
from pydantic import ValidationError

from docs_registry.app.config import RegistrySettings, get_settings
from docs_registry.app.coordinator.registry_audit import (
    audit_all,
    audit_checksum,
    audit_index,
    audit_orphans,
    audit_schema,
)
from docs_registry.app.core.discovery import discover_documents
from docs_registry.app.core.generator import generate_docs, generate_index
from docs_registry.app.core.index_file import relative_body_path
from docs_registry.app.core.validation import DocumentValidationError, validate_single
from docs_registry.app.schemas.audit import AuditResult
from docs_registry.app.schemas.document import document_json_schema
from docs_registry.app.schemas.generation import IndexResult

app = typer.Typer(
    add_completion=False,
    help="Validate, generate and audit a governance document corpus.",
)

_DOCS_DIR_HELP = "Corpus root. Defaults to DOCS_REGISTRY_DOCS_DIR or ./docs."


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _bootstrap(docs_dir: Optional[Path]) -> Tuple[Path, RegistrySettings]:
    try:
        settings = get_settings()
    except ValidationError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2)

    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    return (docs_dir if docs_dir is not None else settings.docs_dir), settings


def _emit_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _fail_invalid_corpus(exc: DocumentValidationError) -> NoReturn:
    typer.echo(f"Corpus is invalid: {exc}", err=True)
    for error in exc.errors:
        typer.echo(f"  - {error}", err=True)
    raise typer.Exit(code=1)


def _report_audit(result: AuditResult, as_json: bool) -> None:
    if as_json:
        _emit_json(result.model_dump(mode="json"))
    else:
        for violation in result.violations:
            typer.echo(
                f"[{violation.kind.value}] {violation.document_id}: "
                f"{violation.message} ({violation.path})"
            )
        status = "PASSED" if result.passed else "FAILED"
        typer.echo(
            f"Audit {status}: {len(result.violations)} violation(s); "
            f"checks: {', '.join(result.checks_executed)}"
        )

    if not result.passed:
        raise typer.Exit(code=1)


def _run_audit(
    operation: Callable[..., AuditResult],
    docs_dir: Optional[Path],
    as_json: bool,
) -> None:
    root, settings = _bootstrap(docs_dir)
    _report_audit(operation(root, settings=settings), as_json)


def _write_index(root: Path, settings: RegistrySettings) -> IndexResult:
    try:
        return generate_index(root, settings=settings)
    except DocumentValidationError as exc:
        _fail_invalid_corpus(exc)
    except OSError as exc:
        typer.echo(f"Cannot write index: {exc}", err=True)
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


@app.command("generate")
def generate_command(
    docs_dir: Optional[Path] = typer.Option(None, "--docs-dir", help=_DOCS_DIR_HELP),
) -> None:
    """Regenerate managed headers and checksums, then rebuild the index."""
    root, settings = _bootstrap(docs_dir)

    try:
        result = generate_docs(root, settings=settings)
    except DocumentValidationError as exc:
        _fail_invalid_corpus(exc)

    for document_id in result.updated:
        typer.echo(f"updated {document_id}")
    for error in result.errors:
        typer.echo(f"error {error.document_id}: {error.error}", err=True)

    typer.echo(
        f"Processed {result.processed} document(s): "
        f"{len(result.updated)} updated, {len(result.errors)} failed."
    )

    index = _write_index(root, settings)
    typer.echo(
        f"Index {'updated' if index.changed else 'unchanged'}: {index.index_path}"
    )

    if not result.ok:
        raise typer.Exit(code=1)


@app.command("generate-index")
def generate_index_command(
    docs_dir: Optional[Path] = typer.Option(None, "--docs-dir", help=_DOCS_DIR_HELP),
) -> None:
    """Rebuild the master index from the current records."""
    root, settings = _bootstrap(docs_dir)

    index = _write_index(root, settings)
    typer.echo(
        f"Index {'updated' if index.changed else 'unchanged'}: "
        f"{index.processed} row(s) in {index.index_path}"
    )


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------


@app.command("audit")
def audit_command(
    docs_dir: Optional[Path] = typer.Option(None, "--docs-dir", help=_DOCS_DIR_HELP),
    as_json: bool = typer.Option(False, "--json", help="Emit the result as JSON."),
) -> None:
    """Run schema, checksum, index and orphan checks."""
    _run_audit(audit_all, docs_dir, as_json)


@app.command("audit-schema")
def audit_schema_command(
    docs_dir: Optional[Path] = typer.Option(None, "--docs-dir", help=_DOCS_DIR_HELP),
    as_json: bool = typer.Option(False, "--json", help="Emit the result as JSON."),
) -> None:
    """Report records that fail schema validation."""
    _run_audit(audit_schema, docs_dir, as_json)


@app.command("audit-checksum")
def audit_checksum_command(
    docs_dir: Optional[Path] = typer.Option(None, "--docs-dir", help=_DOCS_DIR_HELP),
    as_json: bool = typer.Option(False, "--json", help="Emit the result as JSON."),
) -> None:
    """Verify stored checksums against current bodies."""
    _run_audit(audit_checksum, docs_dir, as_json)


@app.command("audit-index")
def audit_index_command(
    docs_dir: Optional[Path] = typer.Option(None, "--docs-dir", help=_DOCS_DIR_HELP),
    as_json: bool = typer.Option(False, "--json", help="Emit the result as JSON."),
) -> None:
    """Detect phantom and missing index entries."""
    _run_audit(audit_index, docs_dir, as_json)


@app.command("audit-orphans")
def audit_orphans_command(
    docs_dir: Optional[Path] = typer.Option(None, "--docs-dir", help=_DOCS_DIR_HELP),
    as_json: bool = typer.Option(False, "--json", help="Emit the result as JSON."),
) -> None:
    """Detect documents on disk that the index omits."""
    _run_audit(audit_orphans, docs_dir, as_json)


# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------


@app.command("discover")
def discover_command(
    docs_dir: Optional[Path] = typer.Option(None, "--docs-dir", help=_DOCS_DIR_HELP),
    as_json: bool = typer.Option(False, "--json", help="Emit the listing as JSON."),
) -> None:
    """List every valid document in identifier order."""
    root, _ = _bootstrap(docs_dir)

    try:
        documents = discover_documents(root)
    except DocumentValidationError as exc:
        _fail_invalid_corpus(exc)

    resolved = Path(root).resolve()

    if as_json:
        _emit_json(
            {
                "count": len(documents),
                "documents": [
                    {
                        **document.record.summary(),
                        "path": relative_body_path(document, resolved),
                    }
                    for document in documents
                ],
            }
        )
        return

    for document in documents:
        record = document.record
        typer.echo(
            f"{document.document_id}\t{record.document_type.value}\t"
            f"{record.status.value}\t{record.title}"
        )
    typer.echo(f"{len(documents)} document(s)")


@app.command("validate")
def validate_command(
    path: Path = typer.Argument(..., help="Path of the doc.json to validate."),
    as_json: bool = typer.Option(False, "--json", help="Emit the report as JSON."),
) -> None:
    """Validate a single doc.json file."""
    _bootstrap(None)

    try:
        report = validate_single(path)
    except OSError as exc:
        typer.echo(f"Cannot read {path}: {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        _emit_json(report.model_dump(mode="json"))
    elif report.valid:
        typer.echo(f"VALID {report.document['document_id']} ({report.path})")
    else:
        typer.echo(f"INVALID {report.path}")
        for error in report.errors:
            typer.echo(f"  - {error}")

    if not report.valid:
        raise typer.Exit(code=1)


@app.command("schema")
def schema_command() -> None:
    """Print the JSON Schema of doc.json."""
    _emit_json(document_json_schema())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
