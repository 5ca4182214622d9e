"""
Schema validation of document records.

Two usage modes share one implementation:

- STRICT   raise :class:`DocumentValidationError` for the first invalid
           record. Used where generated output depends on a fully valid
           input set (generation, index rebuild, discovery).
- LENIENT  return every field error without raising. Used by the audit
           path, which must produce a complete report.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from docs_registry.app.schemas.document import DocumentRecord
from docs_registry.app.schemas.validation import (
    FieldError,
    ValidationOutcome,
    ValidationReport,
)
from docs_registry.app.utils.text_io import read_json_object

logger = logging.getLogger(__name__)

RECORD_LOCATION = "(record)"


class ValidationMode(str, Enum):
    STRICT = "strict"
    LENIENT = "lenient"


class DocumentValidationError(RuntimeError):
    """Raised when a record fails the schema contract in strict mode."""

    def __init__(
        self,
        errors: List[FieldError],
        *,
        path: Optional[Path] = None,
        document_id: Optional[str] = None,
    ) -> None:
        self.errors = list(errors)
        self.path = path
        self.document_id = document_id

        subject = document_id or (str(path) if path is not None else "document")
        where = f" ({path})" if path is not None and document_id else ""
        details = "; ".join(str(error) for error in self.errors)
        super().__init__(f"Invalid document {subject}{where}: {details}")


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------


def field_errors_from(exc: ValidationError) -> List[FieldError]:
    """Translate a pydantic ValidationError into field-level errors."""
    errors: List[FieldError] = []
    for issue in exc.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "invalid value")
        # Custom validators surface as "Value error, <reason>".
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append(
            FieldError(field=location or RECORD_LOCATION, message=message)
        )
    return errors


def declared_document_id(raw: Any) -> Optional[str]:
    """Identifier a raw record claims, if it declares a non-empty string one."""
    if isinstance(raw, dict):
        value = raw.get("document_id")
        if isinstance(value, str) and value:
            return value
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_record(
    raw: Any,
    mode: ValidationMode = ValidationMode.STRICT,
    *,
    path: Optional[Path] = None,
) -> ValidationOutcome:
    """
    Validate a parsed ``doc.json`` payload.

    In STRICT mode an invalid record raises; the returned outcome therefore
    always carries a record. In LENIENT mode the outcome carries either the
    record or the complete list of field errors.
    """
    try:
        record = DocumentRecord.model_validate(raw)
    except ValidationError as exc:
        errors = field_errors_from(exc)
        if mode is ValidationMode.STRICT:
            raise DocumentValidationError(
                errors,
                path=path,
                document_id=declared_document_id(raw),
            ) from exc
        return ValidationOutcome(errors=errors)

    return ValidationOutcome(record=record)


def validate_single(path: Path) -> ValidationReport:
    """
    Validate one ``doc.json`` file and report the outcome.

    Unparseable JSON is reported as a field error on the whole record.
    Unreadable files raise ``OSError``.
    """
    path = Path(path)

    try:
        raw = read_json_object(path)
    except ValueError as exc:
        logger.info("validate: %s is not a JSON object: %s", path, exc)
        return ValidationReport(
            valid=False,
            path=path,
            errors=[FieldError(field=RECORD_LOCATION, message=f"invalid JSON: {exc}")],
        )

    outcome = validate_record(raw, ValidationMode.LENIENT, path=path)

    if not outcome.valid:
        logger.info(
            "validate: %s failed with %d field error(s)",
            path,
            len(outcome.errors),
        )
        return ValidationReport(valid=False, path=path, errors=outcome.errors)

    return ValidationReport(
        valid=True,
        path=path,
        document=outcome.record.summary(),
    )
