"""
Structural integrity of document records.

Converts the records rejected by a lenient sweep into violations. Each
rejected record yields exactly one violation, however many of its fields
failed; rejected records never reach the other checks.
"""

from __future__ import annotations

from typing import List

from docs_registry.app.schemas.audit import Violation, ViolationKind
from docs_registry.app.schemas.discovery import DiscoveryResult


def run_schema_checks(sweep: DiscoveryResult) -> List[Violation]:
    return [
        Violation(
            kind=ViolationKind.INVALID_SCHEMA,
            document_id=rejected.document_id,
            message=f"doc.json failed schema validation: {rejected.summary()}",
            path=str(rejected.record_path),
        )
        for rejected in sweep.rejected
    ]
