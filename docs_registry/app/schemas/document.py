"""
Document record schema.

Defines the structural contract of ``doc.json``, the authoritative metadata
record of a governance document. Each document directory contains:

- ``doc.json``  validated by :class:`DocumentRecord`
- ``doc.md``    human-authored body with one machine-managed header region

This schema is the single source of truth for document metadata. Enum values
and patterns are FROZEN CONTRACTS: existing corpora depend on them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# ASCII digit classes are spelled out: the validator's regex engine treats
# \d as any Unicode digit.
DOCUMENT_ID_PATTERN = r"^(LAW|PRD|SRS|ADR|TSD|SOP|RFC)-[A-Z0-9]+-[0-9]{3}$"
CLAUSE_ID_PATTERN = r"^LAW-[0-9]{3}\.[A-Z][0-9]{2}\.[0-9]{2}$"
VERSION_PATTERN = r"^[0-9]+\.[0-9]+\.[0-9]+$"
DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"
CHECKSUM_PATTERN = r"^(?:[a-f0-9]{64}|[a-f0-9]{128})$"

# Characters that mark a reference as prose/markdown instead of a locator.
_MARKUP_CHARACTERS = frozenset("()`*_")


# ---------------------------------------------------------------------------
# Enumerations (FROZEN CONTRACTS)
# ---------------------------------------------------------------------------


class DocumentType(str, Enum):
    """
    Document types in authority hierarchy order.

    LAW > PRD > SRS > ADR > TSD > SOP. RFC is a pre-decision proposal.
    """

    LAW = "LAW"
    PRD = "PRD"
    SRS = "SRS"
    ADR = "ADR"
    TSD = "TSD"
    SOP = "SOP"
    RFC = "RFC"


class DocumentStatus(str, Enum):
    """Document lifecycle status."""

    DRAFT = "DRAFT"
    REVIEW = "REVIEW"
    APPROVED = "APPROVED"
    IMPLEMENTED = "IMPLEMENTED"
    SUPERSEDED = "SUPERSEDED"
    DEPRECATED = "DEPRECATED"


class AuthorityLevel(str, Enum):
    """Where a document derives its power from."""

    ABSOLUTE = "ABSOLUTE"  # constitutional (LAW)
    DERIVED = "DERIVED"


class EvidenceScope(str, Enum):
    """Where the implementation of a clause lives."""

    KERNEL = "kernel"
    PLATFORM = "platform"
    PORTAL = "portal"
    REPO = "repo"
    LAW = "law"
    PACKAGE = "package"


class EnforcementPhase(str, Enum):
    """When a clause is enforced."""

    CI = "CI"
    RUNTIME = "Runtime"
    HUMAN_GOVERNANCE = "Human Governance"
    BUILD = "Build"


class VerificationType(str, Enum):
    """How a clause is verified."""

    TEST = "test"
    LINT = "lint"
    MIGRATION = "migration"
    RUNTIME_GUARD = "runtime_guard"
    POLICY_ONLY = "policy_only"
    DDL = "ddl"
    ARCHITECTURAL = "architectural"
    POLICY = "policy"
    SCHEMA = "schema"


class ClauseStatus(str, Enum):
    IMPLEMENTED = "IMPLEMENTED"
    PARTIAL = "PARTIAL"
    OPEN = "OPEN"


class ApprovalAction(str, Enum):
    CREATED = "CREATED"
    PATCHED = "PATCHED"
    APPROVED = "APPROVED"
    DEPRECATED = "DEPRECATED"
    SUPERSEDED = "SUPERSEDED"


# ---------------------------------------------------------------------------
# Nested records
# ---------------------------------------------------------------------------


class ApprovalRecord(BaseModel):
    """A single lifecycle event in a document's approval history."""

    action: ApprovalAction
    by: str = Field(..., min_length=1, description="Actor who performed the action")
    date: str = Field(..., pattern=DATE_PATTERN)
    note: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)


class ImplementedClause(BaseModel):
    """
    Links a LAW clause to the evidence that implements it.

    ``verification_ref`` must be a machine-parseable locator such as
    ``packages/kernel/src/values.ts:L10-L50`` or
    ``package.json:scripts.audit:law``.
    """

    clause_id: str = Field(
        ...,
        pattern=CLAUSE_ID_PATTERN,
        description="Clause identifier, e.g. 'LAW-001.A01.03'",
    )
    title: str = Field(..., min_length=1)
    status: ClauseStatus
    verification_type: VerificationType
    verification_ref: str = Field(..., min_length=1)
    enforced_in: EnforcementPhase
    evidence_scope: EvidenceScope

    @field_validator("verification_ref")
    @classmethod
    def verification_ref_is_machine_parseable(cls, v: str) -> str:
        if any(ch.isspace() for ch in v) or any(
            ch in _MARKUP_CHARACTERS for ch in v
        ):
            raise ValueError(
                "verification_ref must be machine-parseable "
                "(no spaces/markdown). Use path[:Lx-Ly] format."
            )
        return v

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Document record (PUBLIC, FROZEN CONTRACT)
# ---------------------------------------------------------------------------


class DocumentRecord(BaseModel):
    """
    Validated contents of a ``doc.json`` file.

    Unknown keys are ignored here and left untouched on disk.
    """

    # ------------------------------------------------------------------
    # Identity (immutable)
    # ------------------------------------------------------------------

    document_id: str = Field(
        ...,
        pattern=DOCUMENT_ID_PATTERN,
        description="Unique identifier, <TYPE>-<SCOPE>-<NNN>",
    )
    document_type: DocumentType
    classification: str = Field(
        ...,
        min_length=1,
        description="e.g. CONSTITUTION, STANDARD, PROPOSAL",
    )

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    title: str = Field(..., min_length=1)
    abstract: Optional[str] = None

    # ------------------------------------------------------------------
    # Governance
    # ------------------------------------------------------------------

    status: DocumentStatus
    authority: AuthorityLevel
    scope: str = Field(..., min_length=1, description="e.g. KERNEL, PLATFORM")

    # ------------------------------------------------------------------
    # Lineage
    # ------------------------------------------------------------------

    derived_from: List[str] = Field(default_factory=list)
    supersedes: List[str] = Field(default_factory=list)

    # ------------------------------------------------------------------
    # Versioning and ownership
    # ------------------------------------------------------------------

    version: str = Field(..., pattern=VERSION_PATTERN)
    owners: List[str] = Field(default_factory=list)

    # ------------------------------------------------------------------
    # Integrity
    # ------------------------------------------------------------------

    checksum_sha256: Optional[str] = Field(
        None,
        pattern=CHECKSUM_PATTERN,
        description=(
            "Checksum of the normalized body. 64 hex chars (sha256) or "
            "128 hex chars (sha512). null until first generation."
        ),
    )

    # ------------------------------------------------------------------
    # Clause implementation (LAW documents)
    # ------------------------------------------------------------------

    clause_id_prefix: Optional[str] = None
    clause_id_regex: Optional[str] = None
    implemented: List[ImplementedClause] = Field(default_factory=list)

    # ------------------------------------------------------------------
    # History and timestamps
    # ------------------------------------------------------------------

    approvals: List[ApprovalRecord] = Field(default_factory=list)
    created_at: str = Field(..., pattern=DATE_PATTERN)
    updated_at: str = Field(..., pattern=DATE_PATTERN)

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("derived_from", "supersedes", "owners")
    @classmethod
    def entries_not_blank(cls, v: List[str]) -> List[str]:
        if any(not entry for entry in v):
            raise ValueError("entries must be non-empty strings")
        return v

    @field_validator("document_type")
    @classmethod
    def type_matches_identifier(
        cls, v: DocumentType, info: ValidationInfo
    ) -> DocumentType:
        document_id = info.data.get("document_id")
        if document_id and not document_id.startswith(f"{v.value}-"):
            raise ValueError(
                f"document_type '{v.value}' does not match the prefix of "
                f"document_id '{document_id}'"
            )
        return v

    def summary(self) -> Dict[str, Any]:
        """Compact, JSON-safe projection used by discovery and validation output."""
        return {
            "document_id": self.document_id,
            "document_type": self.document_type.value,
            "title": self.title,
            "status": self.status.value,
            "version": self.version,
        }

    model_config = ConfigDict(frozen=True)


def document_json_schema() -> Dict[str, Any]:
    """JSON Schema of ``doc.json``, derived from :class:`DocumentRecord`."""
    return DocumentRecord.model_json_schema()
