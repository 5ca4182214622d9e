"""
Managed-region and index generation.

``generate_docs`` keeps each document's body, checksum and record in sync:

    read body -> hash -> render header -> splice region -> hash again
              -> write body -> store checksum + updated_at -> write record

It runs over a STRICT sweep (producing output from a partially invalid
corpus is unsafe) and is partial-failure tolerant per document: an I/O,
template or region failure is captured for that document and the run
continues.

``generate_index`` rewrites the master index wholesale from a STRICT sweep.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from docs_registry.app.config import RegistrySettings
from docs_registry.app.core.discovery import discover_documents, scan_documents
from docs_registry.app.core.header import HeaderRenderer, HeaderRenderError
from docs_registry.app.core.index_file import render_index
from docs_registry.app.core.managed_region import (
    ManagedRegionError,
    splice_managed_region,
)
from docs_registry.app.core.validation import ValidationMode
from docs_registry.app.schemas.discovery import DiscoveredDocument
from docs_registry.app.schemas.generation import (
    GenerateResult,
    GenerationError,
    IndexResult,
)
from docs_registry.app.utils.hashing import HashAlgorithm, compute_checksum
from docs_registry.app.utils.text_io import (
    read_json_object,
    read_text_exact,
    write_json_object,
    write_text_exact,
)

logger = logging.getLogger(__name__)

# Failures isolated to a single document. Anything else is a bug and propagates.
_DOCUMENT_FAILURES = (
    OSError,
    UnicodeDecodeError,
    json.JSONDecodeError,
    HeaderRenderError,
    ManagedRegionError,
)


def _resolve(
    docs_dir: Optional[Path], settings: Optional[RegistrySettings]
) -> Tuple[Path, RegistrySettings]:
    settings = settings if settings is not None else RegistrySettings()
    return Path(docs_dir) if docs_dir is not None else settings.docs_dir, settings


# ---------------------------------------------------------------------------
# Per-document generation
# ---------------------------------------------------------------------------


def _generate_document(
    document: DiscoveredDocument,
    renderer: HeaderRenderer,
    algorithm: HashAlgorithm,
    stamp: str,
) -> bool:
    """Synchronize one document. Returns True if anything was rewritten."""
    body = read_text_exact(document.body_path)
    before = compute_checksum(body, algorithm)

    header = renderer.render(document.record)
    new_body = splice_managed_region(body, header)
    after = compute_checksum(new_body, algorithm)

    stored = document.record.checksum_sha256
    if new_body == body and stored == after:
        return False

    # Rewrite only the keys this engine owns; everything else in the
    # record, including unknown keys and key order, is preserved. The record
    # is loaded before the body is touched so an unreadable record leaves
    # both files as they were.
    raw = read_json_object(document.record_path)

    # A failed record write after this point leaves the new body beside the
    # old checksum; the next audit reports it as a checksum mismatch.
    if new_body != body:
        write_text_exact(document.body_path, new_body)

    raw["checksum_sha256"] = after
    raw["updated_at"] = stamp
    write_json_object(document.record_path, raw)

    logger.info(
        "generate: %s updated (region %s, checksum %s -> %s)",
        document.document_id,
        "rewritten" if before != after else "unchanged",
        (stored or "null")[:12],
        after[:12],
    )
    return True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate_docs(
    docs_dir: Optional[Path] = None,
    *,
    settings: Optional[RegistrySettings] = None,
    today: Optional[date] = None,
) -> GenerateResult:
    """
    Regenerate managed headers and checksums for every document.

    Raises:
        DocumentValidationError: a record in the corpus is invalid. Nothing
            is written in that case.
    """
    docs_dir, settings = _resolve(docs_dir, settings)

    documents = discover_documents(docs_dir)
    renderer = HeaderRenderer(settings.templates_dir)
    stamp = (today or datetime.now(timezone.utc).date()).isoformat()

    updated: List[str] = []
    errors: List[GenerationError] = []

    for document in documents:
        try:
            changed = _generate_document(
                document,
                renderer,
                settings.checksum_algorithm,
                stamp,
            )
        except _DOCUMENT_FAILURES as exc:
            logger.error(
                "generate: %s failed: %s: %s",
                document.document_id,
                type(exc).__name__,
                exc,
            )
            errors.append(
                GenerationError(document_id=document.document_id, error=str(exc))
            )
            continue

        if changed:
            updated.append(document.document_id)

    logger.info(
        "generate: processed=%d updated=%d errors=%d",
        len(documents),
        len(updated),
        len(errors),
    )

    return GenerateResult(
        processed=len(documents),
        updated=updated,
        errors=errors,
    )


def generate_index(
    docs_dir: Optional[Path] = None,
    *,
    settings: Optional[RegistrySettings] = None,
) -> IndexResult:
    """
    Rebuild the master index from a fresh sweep.

    Idempotent: with no corpus change the written bytes are identical.

    Raises:
        DocumentValidationError: a record in the corpus is invalid.
        OSError: the index cannot be written.
    """
    docs_dir, settings = _resolve(docs_dir, settings)

    sweep = scan_documents(docs_dir, ValidationMode.STRICT)
    content = render_index(sweep.documents, sweep.docs_dir)

    index_path = sweep.docs_dir / settings.index_filename
    previous = read_text_exact(index_path) if index_path.is_file() else None

    write_text_exact(index_path, content)

    changed = previous != content
    logger.info(
        "generate-index: %d row(s) written to %s (%s)",
        len(sweep.documents),
        index_path,
        "changed" if changed else "unchanged",
    )

    return IndexResult(
        index_path=index_path,
        processed=len(sweep.documents),
        changed=changed,
    )
