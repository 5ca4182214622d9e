from __future__ import annotations

from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class GenerationError(BaseModel):
    """A per-document failure captured during generation."""

    document_id: str
    error: str

    model_config = ConfigDict(frozen=True, extra="forbid")


class GenerateResult(BaseModel):
    """
    Outcome of a managed-region generation run.

    Generation is partial-failure tolerant: ``errors`` lists the documents
    that could not be processed while every other document was still handled.
    """

    processed: int = Field(..., ge=0, description="Number of documents visited")
    updated: List[str] = Field(
        default_factory=list,
        description="Identifiers whose body or record was rewritten",
    )
    errors: List[GenerationError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    model_config = ConfigDict(frozen=True, extra="forbid")


class IndexResult(BaseModel):
    """Outcome of a master index regeneration."""

    index_path: Path
    processed: int = Field(..., ge=0, description="Number of rows written")
    changed: bool = Field(
        ...,
        description="Whether the written content differs from the previous file",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")
