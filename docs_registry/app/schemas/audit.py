"""
Audit report schema.

Violations are descriptive: each one names the drifted document and where
it lives, and says what diverged. The violation taxonomy is a FROZEN
CONTRACT consumed by CI scripts and the MCP connector.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ViolationKind(str, Enum):
    """
    Classes of drift detected by the audit engine.

    Orphans (documents on disk but absent from the index) are reported as
    MISSING_DOCUMENT, from the index's point of view.
    """

    INVALID_SCHEMA = "invalid-schema"
    CHECKSUM_MISMATCH = "checksum-mismatch"
    PHANTOM_DOCUMENT = "phantom-document"
    MISSING_DOCUMENT = "missing-document"


class Violation(BaseModel):
    """A single detected drift."""

    kind: ViolationKind = Field(..., description="Class of drift")
    document_id: str = Field(..., description="Identifier of the affected document")
    message: str = Field(..., description="Human-readable explanation")
    path: str = Field(
        ...,
        description="Path of the affected record, body, or index file",
    )

    @property
    def dedup_key(self) -> tuple:
        return (self.kind, self.document_id, self.path)

    model_config = ConfigDict(frozen=True, extra="forbid")


class AuditResult(BaseModel):
    """Outcome of one or more audit checks over a single sweep."""

    passed: bool = Field(..., description="True iff no violations were found")
    violations: List[Violation] = Field(default_factory=list)
    checks_executed: List[str] = Field(
        default_factory=list,
        description="Names of the checks that ran, in execution order",
    )

    @model_validator(mode="after")
    def passed_matches_violations(self):
        if self.passed == bool(self.violations):
            raise ValueError(
                "passed must be true exactly when there are no violations"
            )
        return self

    model_config = ConfigDict(frozen=True, extra="forbid")
