"""
Registry audit orchestrator.

Coordinates the drift checks over a single LENIENT sweep of the corpus.

The orchestrator is deliberately dumb. It MUST NOT:
- interpret violations
- stop early when a check reports drift
- mutate the corpus

Its sole responsibilities are running the requested checks in a fixed
order, aggregating their violations, and constructing the AuditResult.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from docs_registry.app.checks.checksum_integrity import run_checksum_checks
from docs_registry.app.checks.index_integrity import (
    run_index_checks,
    run_orphan_checks,
)
from docs_registry.app.checks.schema_integrity import run_schema_checks
from docs_registry.app.config import RegistrySettings
from docs_registry.app.core.discovery import scan_documents
from docs_registry.app.core.validation import ValidationMode
from docs_registry.app.schemas.audit import AuditResult, Violation
from docs_registry.app.schemas.discovery import DiscoveryResult

logger = logging.getLogger(__name__)


# Deterministic registry check contract
RegistryCheck = Callable[[DiscoveryResult], List[Violation]]

SCHEMA = "schema"
CHECKSUM = "checksum"
INDEX = "index"
ORPHANS = "orphans"

ALL_CHECKS = (SCHEMA, CHECKSUM, INDEX, ORPHANS)


class RegistryAudit:
    """
    Registry drift audit.

    Fully deterministic. Read-only.

    The schema check always runs first: records it rejects are excluded
    from every other check, and reporting them is the only way they are
    not silently skipped.
    """

    def __init__(
        self,
        docs_dir: Optional[Path] = None,
        settings: Optional[RegistrySettings] = None,
    ) -> None:
        self._settings = settings if settings is not None else RegistrySettings()
        self._docs_dir = (
            Path(docs_dir) if docs_dir is not None else self._settings.docs_dir
        )

        self._checks: Dict[str, RegistryCheck] = {
            SCHEMA: self._schema_integrity,
            CHECKSUM: self._checksum_integrity,
            INDEX: self._index_integrity,
            ORPHANS: self._orphan_detection,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, checks: Sequence[str] = ALL_CHECKS) -> AuditResult:
        unknown = [name for name in checks if name not in self._checks]
        if unknown:
            raise ValueError(f"Unknown audit check(s): {unknown}")

        # Fixed execution order, schema first, each check at most once.
        requested = {SCHEMA, *checks}
        plan = [name for name in ALL_CHECKS if name in requested]

        sweep = scan_documents(self._docs_dir, ValidationMode.LENIENT)

        violations: List[Violation] = []
        checks_executed: List[str] = []
        seen = set()

        # --------------------------------------------------------------
        # Run every requested check; no early exit
        # --------------------------------------------------------------
        for name in plan:
            checks_executed.append(name)

            for violation in self._checks[name](sweep):
                # Index and orphan checks overlap on missing documents.
                if violation.dedup_key in seen:
                    continue
                seen.add(violation.dedup_key)
                violations.append(violation)

        for violation in violations:
            logger.warning(
                "audit: [%s] %s: %s",
                violation.kind.value,
                violation.document_id,
                violation.message,
            )

        logger.info(
            "audit: checks=%s documents=%d rejected=%d violations=%d",
            ",".join(checks_executed),
            len(sweep.documents),
            len(sweep.rejected),
            len(violations),
        )

        return AuditResult(
            passed=not violations,
            violations=violations,
            checks_executed=checks_executed,
        )

    # ------------------------------------------------------------------
    # Check adapters
    # ------------------------------------------------------------------

    def _index_path(self, sweep: DiscoveryResult) -> Path:
        return sweep.docs_dir / self._settings.index_filename

    def _schema_integrity(self, sweep: DiscoveryResult) -> List[Violation]:
        return run_schema_checks(sweep)

    def _checksum_integrity(self, sweep: DiscoveryResult) -> List[Violation]:
        return run_checksum_checks(sweep, self._settings.checksum_algorithm)

    def _index_integrity(self, sweep: DiscoveryResult) -> List[Violation]:
        return run_index_checks(sweep, self._index_path(sweep))

    def _orphan_detection(self, sweep: DiscoveryResult) -> List[Violation]:
        return run_orphan_checks(sweep, self._index_path(sweep))


# ---------------------------------------------------------------------------
# Operation surface
# ---------------------------------------------------------------------------


def audit_all(
    docs_dir: Optional[Path] = None,
    *,
    settings: Optional[RegistrySettings] = None,
) -> AuditResult:
    """Run schema, checksum, index and orphan checks."""
    return RegistryAudit(docs_dir, settings).run(ALL_CHECKS)


def audit_schema(
    docs_dir: Optional[Path] = None,
    *,
    settings: Optional[RegistrySettings] = None,
) -> AuditResult:
    return RegistryAudit(docs_dir, settings).run((SCHEMA,))


def audit_checksum(
    docs_dir: Optional[Path] = None,
    *,
    settings: Optional[RegistrySettings] = None,
) -> AuditResult:
    """Verify stored checksums against current bodies."""
    return RegistryAudit(docs_dir, settings).run((CHECKSUM,))


def audit_index(
    docs_dir: Optional[Path] = None,
    *,
    settings: Optional[RegistrySettings] = None,
) -> AuditResult:
    """Detect phantom and missing documents in the master index."""
    return RegistryAudit(docs_dir, settings).run((INDEX,))


def audit_orphans(
    docs_dir: Optional[Path] = None,
    *,
    settings: Optional[RegistrySettings] = None,
) -> AuditResult:
    """Detect documents on disk that the master index omits."""
    return RegistryAudit(docs_dir, settings).run((ORPHANS,))
