"""
Consistency between the master index and the corpus.

- phantom-document   the index lists an identifier no document declares
- missing-document   a document exists on disk but the index omits it

The orphan check is the second half on its own. Orphans reuse the
missing-document kind; there is no separate orphan violation.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import List

from docs_registry.app.core.index_file import parse_index
from docs_registry.app.schemas.audit import Violation, ViolationKind
from docs_registry.app.schemas.discovery import DiscoveryResult
from docs_registry.app.utils.text_io import read_text_exact

logger = logging.getLogger(__name__)


def load_index_identifiers(index_path: Path) -> List[str]:
    """
    Identifiers listed by the index, in file order.

    A missing index lists nothing, so every document becomes missing.
    """
    if not index_path.is_file():
        logger.warning("index: %s does not exist, treating as empty", index_path)
        return []
    return parse_index(read_text_exact(index_path))


def _missing(sweep: DiscoveryResult, listed: List[str], index_path: Path) -> List[Violation]:
    listed_ids = set(listed)
    return [
        Violation(
            kind=ViolationKind.MISSING_DOCUMENT,
            document_id=document.document_id,
            message=f"document exists on disk but is not listed in {index_path.name}",
            path=str(document.record_path),
        )
        for document in sweep.documents
        if document.document_id not in listed_ids
    ]


def run_orphan_checks(sweep: DiscoveryResult, index_path: Path) -> List[Violation]:
    return _missing(sweep, load_index_identifiers(index_path), index_path)


def run_index_checks(sweep: DiscoveryResult, index_path: Path) -> List[Violation]:
    listed = load_index_identifiers(index_path)

    # Rejected records still exist on disk; an index row naming one is not
    # a phantom, the record is reported by the schema check instead.
    on_disk = {document.document_id for document in sweep.documents}
    on_disk.update(rejected.document_id for rejected in sweep.rejected)

    violations: List[Violation] = []
    counts = Counter(listed)
    reported = set()

    for document_id in listed:
        if document_id in reported:
            continue
        reported.add(document_id)

        if document_id not in on_disk:
            violations.append(
                Violation(
                    kind=ViolationKind.PHANTOM_DOCUMENT,
                    document_id=document_id,
                    message=f"{index_path.name} lists a document that does not exist",
                    path=str(index_path),
                )
            )
        elif counts[document_id] > 1:
            violations.append(
                Violation(
                    kind=ViolationKind.PHANTOM_DOCUMENT,
                    document_id=document_id,
                    message=(
                        f"{index_path.name} lists this document "
                        f"{counts[document_id]} times"
                    ),
                    path=str(index_path),
                )
            )

    violations.extend(_missing(sweep, listed, index_path))
    return violations
