import pytest

from docs_registry.app.core.discovery import (
    body_path_for,
    discover_documents,
    scan_documents,
)
from docs_registry.app.core.validation import DocumentValidationError, ValidationMode

from docs_registry.tests.fixtures.corpus_factory import (
    write_document,
    write_raw_record,
)


# ------------------------------------------------------------------
# Ordering
# ------------------------------------------------------------------

def test_documents_are_returned_in_identifier_order(tmp_path):
    write_document(tmp_path, "LAW-CORE-001", subdir="constitution")
    write_document(tmp_path, "ADR-CORE-002", subdir="decisions")
    write_document(tmp_path, "SRS-CORE-003", subdir="requirements")

    documents = discover_documents(tmp_path)

    assert [d.document_id for d in documents] == [
        "ADR-CORE-002",
        "LAW-CORE-001",
        "SRS-CORE-003",
    ]


def test_order_is_code_point_order_not_directory_order(tmp_path):
    write_document(tmp_path, "ADR-Z9-001", subdir="a")
    write_document(tmp_path, "ADR-A1-001", subdir="z")
    write_document(tmp_path, "ADR-9-001", subdir="m")

    documents = discover_documents(tmp_path)

    # Digits sort before uppercase letters.
    assert [d.document_id for d in documents] == [
        "ADR-9-001",
        "ADR-A1-001",
        "ADR-Z9-001",
    ]


def test_records_are_found_at_any_depth(tmp_path):
    write_document(tmp_path, "ADR-CORE-001", subdir="deep/er/still")
    write_document(tmp_path, "PRD-CORE-001", subdir="p")

    documents = discover_documents(tmp_path)

    assert {d.document_id for d in documents} == {"ADR-CORE-001", "PRD-CORE-001"}


def test_document_pairs_record_with_sibling_body(tmp_path):
    record_path, body_path = write_document(tmp_path, "ADR-CORE-001")

    (document,) = discover_documents(tmp_path)

    assert document.record_path == record_path.resolve()
    assert document.body_path == body_path.resolve()
    assert body_path_for(document.record_path) == document.body_path


# ------------------------------------------------------------------
# Empty and missing roots
# ------------------------------------------------------------------

def test_missing_root_is_an_empty_corpus(tmp_path):
    sweep = scan_documents(tmp_path / "nope")

    assert sweep.documents == []
    assert sweep.rejected == []


def test_root_without_records_is_an_empty_corpus(tmp_path):
    (tmp_path / "notes").mkdir()
    (tmp_path / "notes" / "doc.md").write_text("orphan body\n", encoding="utf-8")

    assert discover_documents(tmp_path) == []


# ------------------------------------------------------------------
# Strict mode
# ------------------------------------------------------------------

def test_strict_mode_fails_on_first_invalid_record(tmp_path):
    write_document(tmp_path, "ADR-CORE-001")
    write_document(tmp_path, "ADR-CORE-002", version="1.0")

    with pytest.raises(DocumentValidationError) as exc:
        discover_documents(tmp_path)

    assert exc.value.document_id == "ADR-CORE-002"
    assert [e.field for e in exc.value.errors] == ["version"]


def test_strict_mode_fails_on_invalid_json(tmp_path):
    write_raw_record(tmp_path / "adr" / "broken" / "doc.json", "{")

    with pytest.raises(DocumentValidationError) as exc:
        discover_documents(tmp_path)

    assert exc.value.document_id == "broken"


def test_strict_mode_rejects_duplicate_identifiers(tmp_path):
    write_document(tmp_path, "ADR-CORE-001", subdir="one")
    write_document(tmp_path, "ADR-CORE-001", subdir="two")

    with pytest.raises(DocumentValidationError) as exc:
        discover_documents(tmp_path)

    assert "duplicate" in str(exc.value)


# ------------------------------------------------------------------
# Lenient mode
# ------------------------------------------------------------------

def test_lenient_mode_separates_valid_from_rejected(tmp_path):
    write_document(tmp_path, "ADR-CORE-001")
    write_document(tmp_path, "BAD-001", subdir="bad", document_type="ADR")
    write_raw_record(tmp_path / "adr" / "garbled" / "doc.json", "[]")

    sweep = scan_documents(tmp_path, ValidationMode.LENIENT)

    assert [d.document_id for d in sweep.documents] == ["ADR-CORE-001"]
    assert sorted(r.document_id for r in sweep.rejected) == ["BAD-001", "garbled"]


def test_lenient_mode_keeps_first_of_duplicate_identifiers(tmp_path):
    first, _ = write_document(tmp_path, "ADR-CORE-001", subdir="a")
    second, _ = write_document(tmp_path, "ADR-CORE-001", subdir="b")

    sweep = scan_documents(tmp_path, ValidationMode.LENIENT)

    assert [d.record_path for d in sweep.documents] == [first.resolve()]
    assert [r.record_path for r in sweep.rejected] == [second.resolve()]


def test_find_returns_document_by_identifier(tmp_path):
    write_document(tmp_path, "ADR-CORE-001")

    sweep = scan_documents(tmp_path)

    assert sweep.find("ADR-CORE-001").record.title == "Title of ADR-CORE-001"
    assert sweep.find("ADR-CORE-999") is None
