"""
docs-registry: metadata, checksum and index integrity for a governance
document corpus.

Each document is a directory holding ``doc.json`` (the authoritative record)
and ``doc.md`` (the human-authored body). The registry validates records,
regenerates each body's managed header and checksum, rebuilds the master
index, and audits the corpus for drift.
"""

from docs_registry.app.config import RegistrySettings, get_settings
from docs_registry.app.coordinator.registry_audit import (
    RegistryAudit,
    audit_all,
    audit_checksum,
    audit_index,
    audit_orphans,
    audit_schema,
)
from docs_registry.app.core.discovery import discover_documents, scan_documents
from docs_registry.app.core.generator import generate_docs, generate_index
from docs_registry.app.core.header import HeaderRenderError
from docs_registry.app.core.managed_region import ManagedRegionError
from docs_registry.app.core.validation import (
    DocumentValidationError,
    ValidationMode,
    validate_record,
    validate_single,
)
from docs_registry.app.schemas.audit import AuditResult, Violation, ViolationKind
from docs_registry.app.schemas.discovery import (
    DiscoveredDocument,
    DiscoveryResult,
    RejectedRecord,
)
from docs_registry.app.schemas.document import (
    ApprovalAction,
    ApprovalRecord,
    AuthorityLevel,
    ClauseStatus,
    DocumentRecord,
    DocumentStatus,
    DocumentType,
    EnforcementPhase,
    EvidenceScope,
    ImplementedClause,
    VerificationType,
    document_json_schema,
)
from docs_registry.app.schemas.generation import (
    GenerateResult,
    GenerationError,
    IndexResult,
)
from docs_registry.app.schemas.validation import (
    FieldError,
    ValidationOutcome,
    ValidationReport,
)
from docs_registry.app.utils.hashing import compute_checksum, normalize_content

__version__ = "0.1.0"

__all__ = [
    "ApprovalAction",
    "ApprovalRecord",
    "AuditResult",
    "AuthorityLevel",
    "ClauseStatus",
    "DiscoveredDocument",
    "DiscoveryResult",
    "DocumentRecord",
    "DocumentStatus",
    "DocumentType",
    "DocumentValidationError",
    "EnforcementPhase",
    "EvidenceScope",
    "FieldError",
    "GenerateResult",
    "GenerationError",
    "HeaderRenderError",
    "ImplementedClause",
    "IndexResult",
    "ManagedRegionError",
    "RegistryAudit",
    "RegistrySettings",
    "RejectedRecord",
    "ValidationMode",
    "ValidationOutcome",
    "ValidationReport",
    "VerificationType",
    "Violation",
    "ViolationKind",
    "audit_all",
    "audit_checksum",
    "audit_index",
    "audit_orphans",
    "audit_schema",
    "compute_checksum",
    "discover_documents",
    "document_json_schema",
    "generate_docs",
    "generate_index",
    "get_settings",
    "normalize_content",
    "scan_documents",
    "validate_record",
    "validate_single",
]
