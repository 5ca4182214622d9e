from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from docs_registry.app.schemas.document import DocumentRecord
from docs_registry.app.schemas.validation import FieldError


class DiscoveredDocument(BaseModel):
    """A validated record paired with the files it was read from."""

    document_id: str
    record_path: Path = Field(..., description="Absolute path of doc.json")
    body_path: Path = Field(..., description="Absolute path of the sibling doc.md")
    record: DocumentRecord

    model_config = ConfigDict(frozen=True)


class RejectedRecord(BaseModel):
    """
    A record that failed to load or validate during a lenient sweep.

    ``document_id`` is the raw identifier when the record declared a string
    one, otherwise the name of the record's directory.
    """

    document_id: str
    record_path: Path
    errors: List[FieldError]

    def summary(self) -> str:
        return "; ".join(str(error) for error in self.errors)

    model_config = ConfigDict(frozen=True)


class DiscoveryResult(BaseModel):
    """One full sweep of the corpus."""

    docs_dir: Path
    documents: List[DiscoveredDocument] = Field(default_factory=list)
    rejected: List[RejectedRecord] = Field(default_factory=list)

    def find(self, document_id: str) -> Optional[DiscoveredDocument]:
        for document in self.documents:
            if document.document_id == document_id:
                return document
        return None

    model_config = ConfigDict(frozen=True)
