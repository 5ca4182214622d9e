"""
Checksum binding between records and bodies.

Verifies that the checksum stored in each ``doc.json`` equals the checksum
recomputed from the current ``doc.md``. A mismatch means the body was
edited without regenerating, or the record was edited by hand.

Verification is deterministic: the algorithm is inferred from the stored
digest's length, so a corpus hashed with sha512 audits correctly under a
sha256 default.
"""

from __future__ import annotations

import logging
from typing import List

from docs_registry.app.schemas.audit import Violation, ViolationKind
from docs_registry.app.schemas.discovery import DiscoveredDocument, DiscoveryResult
from docs_registry.app.utils.hashing import (
    HashAlgorithm,
    algorithm_for_digest,
    compute_checksum,
    normalize_content,
)
from docs_registry.app.utils.text_io import read_text_exact

logger = logging.getLogger(__name__)


def _check_document(
    document: DiscoveredDocument,
    default_algorithm: HashAlgorithm,
) -> List[Violation]:
    def mismatch(message: str) -> List[Violation]:
        return [
            Violation(
                kind=ViolationKind.CHECKSUM_MISMATCH,
                document_id=document.document_id,
                message=message,
                path=str(document.body_path),
            )
        ]

    # --------------------------------------------------------------
    # Body (authoritative source)
    # --------------------------------------------------------------
    try:
        body = read_text_exact(document.body_path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(
            "checksum: cannot read body of %s: %s", document.document_id, exc
        )
        return mismatch(f"doc.md could not be read, checksum unverifiable: {exc}")

    stored = document.record.checksum_sha256

    # --------------------------------------------------------------
    # Unset checksum
    # --------------------------------------------------------------
    if stored is None:
        if normalize_content(body):
            return mismatch(
                "checksum_sha256 is null but doc.md has content; "
                "run generation to record it"
            )
        return []

    # --------------------------------------------------------------
    # Compare
    # --------------------------------------------------------------
    algorithm = algorithm_for_digest(stored) or default_algorithm
    computed = compute_checksum(body, algorithm)

    if computed != stored:
        return mismatch(
            f"stored {algorithm} {stored[:12]}... does not match "
            f"computed {computed[:12]}..."
        )
    return []


def run_checksum_checks(
    sweep: DiscoveryResult,
    default_algorithm: HashAlgorithm = "sha256",
) -> List[Violation]:
    violations: List[Violation] = []
    for document in sweep.documents:
        violations.extend(_check_document(document, default_algorithm))
    return violations
