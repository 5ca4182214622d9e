"""
Corpus discovery.

Walks the corpus root for ``doc.json`` records, validates each one, pairs
it with its sibling ``doc.md`` body and returns the documents sorted by
identifier. The sort uses plain code-point string comparison, so the order
is identical on every machine and locale.

A single scan serves both failure contracts (see ``ValidationMode``):
generation needs all-or-nothing, auditing needs a complete report.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from docs_registry.app.core.validation import (
    RECORD_LOCATION,
    DocumentValidationError,
    ValidationMode,
    declared_document_id,
    validate_record,
)
from docs_registry.app.schemas.discovery import (
    DiscoveredDocument,
    DiscoveryResult,
    RejectedRecord,
)
from docs_registry.app.schemas.validation import FieldError
from docs_registry.app.utils.text_io import read_json_object

logger = logging.getLogger(__name__)

RECORD_FILENAME = "doc.json"
BODY_FILENAME = "doc.md"


def body_path_for(record_path: Path) -> Path:
    """The body of a document lives beside its record."""
    return record_path.parent / BODY_FILENAME


def scan_documents(
    docs_dir: Path,
    mode: ValidationMode = ValidationMode.STRICT,
) -> DiscoveryResult:
    """
    Sweep the corpus once.

    STRICT: the first unreadable, unparseable, invalid or duplicate record
    raises :class:`DocumentValidationError`.
    LENIENT: each such record is returned in ``DiscoveryResult.rejected``
    and excluded from ``documents``.
    """
    root = Path(docs_dir).resolve()

    if not root.is_dir():
        logger.warning("discovery: corpus root %s does not exist", root)
        return DiscoveryResult(docs_dir=root)

    documents: List[DiscoveredDocument] = []
    rejected: List[RejectedRecord] = []
    seen: Dict[str, Path] = {}

    def reject(record_path: Path, document_id: str, errors: List[FieldError]) -> None:
        if mode is ValidationMode.STRICT:
            raise DocumentValidationError(
                errors, path=record_path, document_id=document_id
            )
        logger.warning(
            "discovery: rejected %s (%s): %s",
            document_id,
            record_path,
            "; ".join(str(e) for e in errors),
        )
        rejected.append(
            RejectedRecord(
                document_id=document_id,
                record_path=record_path,
                errors=errors,
            )
        )

    # Sorted so that "first invalid record" is well defined.
    for record_path in sorted(root.rglob(RECORD_FILENAME)):
        if not record_path.is_file():
            continue

        fallback_id = record_path.parent.name

        # ------------------------------------------------------------------
        # Load
        # ------------------------------------------------------------------
        try:
            raw = read_json_object(record_path)
        except OSError as exc:
            reject(
                record_path,
                fallback_id,
                [FieldError(field=RECORD_LOCATION, message=f"unreadable: {exc}")],
            )
            continue
        except ValueError as exc:
            reject(
                record_path,
                fallback_id,
                [FieldError(field=RECORD_LOCATION, message=f"invalid JSON: {exc}")],
            )
            continue

        # ------------------------------------------------------------------
        # Validate
        # ------------------------------------------------------------------
        outcome = validate_record(raw, mode, path=record_path)
        if not outcome.valid:
            reject(
                record_path,
                declared_document_id(raw) or fallback_id,
                outcome.errors,
            )
            continue

        record = outcome.record
        document_id = record.document_id

        # ------------------------------------------------------------------
        # Identifier uniqueness
        # ------------------------------------------------------------------
        if document_id in seen:
            reject(
                record_path,
                document_id,
                [
                    FieldError(
                        field="document_id",
                        message=(
                            f"duplicate identifier, already declared by "
                            f"{seen[document_id]}"
                        ),
                    )
                ],
            )
            continue
        seen[document_id] = record_path

        documents.append(
            DiscoveredDocument(
                document_id=document_id,
                record_path=record_path,
                body_path=body_path_for(record_path),
                record=record,
            )
        )

    documents.sort(key=lambda d: d.document_id)

    logger.debug(
        "discovery: %d document(s), %d rejected under %s",
        len(documents),
        len(rejected),
        root,
    )

    return DiscoveryResult(docs_dir=root, documents=documents, rejected=rejected)


def discover_documents(docs_dir: Path) -> List[DiscoveredDocument]:
    """
    Discover and validate all documents under ``docs_dir``.

    Fails fast on the first invalid record.
    """
    return scan_documents(docs_dir, ValidationMode.STRICT).documents
