"""
Validation result contracts.

Field errors are the common currency between the schema validator, lenient
discovery, the audit engine and the ``validate_single`` operation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from docs_registry.app.schemas.document import DocumentRecord


class FieldError(BaseModel):
    """A single failed rule of the record contract."""

    field: str = Field(
        ...,
        description="Dotted location of the failing field, e.g. 'implemented.0.clause_id'",
    )
    message: str = Field(..., description="Human-readable reason")

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"

    model_config = ConfigDict(frozen=True, extra="forbid")


class ValidationOutcome(BaseModel):
    """
    Result of lenient record validation.

    Exactly one of ``record`` / ``errors`` carries information.
    """

    record: Optional[DocumentRecord] = None
    errors: List[FieldError] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.record is not None

    @model_validator(mode="after")
    def enforce_exclusive_outcome(self):
        if self.record is not None and self.errors:
            raise ValueError("A validated record must not carry field errors")
        if self.record is None and not self.errors:
            raise ValueError("A rejected record must carry at least one field error")
        return self

    model_config = ConfigDict(frozen=True)


class ValidationReport(BaseModel):
    """Result of validating a single ``doc.json`` file on disk."""

    valid: bool
    path: Path
    document: Optional[Dict[str, Any]] = Field(
        None,
        description="Summary fields of the record, present only when valid",
    )
    errors: List[FieldError] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")
