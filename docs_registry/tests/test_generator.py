import json
from datetime import date

import pytest

from docs_registry.app.config import RegistrySettings
from docs_registry.app.core.generator import generate_docs, generate_index
from docs_registry.app.core.managed_region import (
    BEGIN_MARKER,
    END_MARKER,
    read_managed_region,
)
from docs_registry.app.core.validation import DocumentValidationError
from docs_registry.app.utils.hashing import compute_checksum

from docs_registry.tests.fixtures.corpus_factory import (
    read_bytes_text,
    read_record,
    write_document,
    write_raw_record,
)

TODAY = date(2026, 3, 14)


# ------------------------------------------------------------------
# Managed header generation
# ------------------------------------------------------------------

def test_generate_inserts_header_and_records_checksum(tmp_path):
    record_path, body_path = write_document(tmp_path, "ADR-CORE-001", body="Body text.\n")

    result = generate_docs(tmp_path, today=TODAY)

    assert result.processed == 1
    assert result.updated == ["ADR-CORE-001"]
    assert result.ok

    body = read_bytes_text(body_path)
    assert body.startswith(BEGIN_MARKER + "\n")
    assert body.endswith(END_MARKER + "\n\nBody text.\n")

    header = read_managed_region(body)
    assert "# ADR-CORE-001: Title of ADR-CORE-001" in header
    assert "| Status | APPROVED |" in header

    record = read_record(record_path)
    assert record["checksum_sha256"] == compute_checksum(body)
    assert record["updated_at"] == "2026-03-14"


def test_header_excludes_checksum_and_update_date(tmp_path):
    _, body_path = write_document(tmp_path, "ADR-CORE-001")

    generate_docs(tmp_path, today=TODAY)

    header = read_managed_region(read_bytes_text(body_path))
    assert "2026-03-14" not in header
    assert "checksum" not in header.lower()


def test_law_header_lists_clauses(tmp_path):
    _, body_path = write_document(
        tmp_path,
        "LAW-CORE-001",
        implemented=[
            {
                "clause_id": "LAW-001.A01.03",
                "title": "Values are immutable",
                "status": "IMPLEMENTED",
                "verification_type": "test",
                "verification_ref": "packages/kernel/src/values.ts:L10-L50",
                "enforced_in": "CI",
                "evidence_scope": "kernel",
            }
        ],
        abstract="The constitution.",
    )

    generate_docs(tmp_path, today=TODAY)

    header = read_managed_region(read_bytes_text(body_path))
    assert "> The constitution." in header
    assert "| LAW-001.A01.03 | Values are immutable | IMPLEMENTED |" in header


def test_second_run_is_a_no_op(tmp_path):
    record_path, body_path = write_document(tmp_path, "ADR-CORE-001")
    generate_docs(tmp_path, today=TODAY)
    body_before = read_bytes_text(body_path)
    record_before = read_bytes_text(record_path)

    result = generate_docs(tmp_path, today=date(2030, 1, 1))

    assert result.updated == []
    assert read_bytes_text(body_path) == body_before
    assert read_bytes_text(record_path) == record_before


def test_record_edit_rewrites_header(tmp_path):
    record_path, body_path = write_document(tmp_path, "ADR-CORE-001")
    generate_docs(tmp_path, today=TODAY)

    record = read_record(record_path)
    record["title"] = "Renamed"
    record_path.write_text(json.dumps(record, indent=2) + "\n", encoding="utf-8")

    result = generate_docs(tmp_path, today=TODAY)

    body = read_bytes_text(body_path)
    assert result.updated == ["ADR-CORE-001"]
    assert "# ADR-CORE-001: Renamed" in body
    assert read_record(record_path)["checksum_sha256"] == compute_checksum(body)


def test_human_content_is_preserved_byte_for_byte(tmp_path):
    human = "Intro  \r\n\r\n## Section\r\nText\t\r\n"
    _, body_path = write_document(tmp_path, "ADR-CORE-001", body=human)

    generate_docs(tmp_path, today=TODAY)

    body = read_bytes_text(body_path)
    assert body.endswith(END_MARKER + "\r\n\r\n" + human)
    assert "\n" not in body.replace("\r\n", "")


def test_record_keeps_unknown_keys_and_key_order(tmp_path):
    record_path, _ = write_document(
        tmp_path, "ADR-CORE-001", x_custom={"keep": [1, 2]}
    )
    keys_before = list(read_record(record_path))

    generate_docs(tmp_path, today=TODAY)

    record = read_record(record_path)
    assert list(record) == keys_before
    assert record["x_custom"] == {"keep": [1, 2]}


def test_sha512_setting_writes_long_digest(tmp_path):
    record_path, body_path = write_document(tmp_path, "ADR-CORE-001")

    generate_docs(
        tmp_path,
        settings=RegistrySettings(checksum_algorithm="sha512"),
        today=TODAY,
    )

    stored = read_record(record_path)["checksum_sha256"]
    assert len(stored) == 128
    assert stored == compute_checksum(read_bytes_text(body_path), "sha512")


def test_custom_template_directory_overrides_header(tmp_path):
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "header.md.jinja").write_text(
        "custom {{ document_id }} v{{ version }}", encoding="utf-8"
    )
    docs = tmp_path / "docs"
    _, body_path = write_document(docs, "ADR-CORE-001")

    generate_docs(docs, settings=RegistrySettings(templates_dir=templates), today=TODAY)

    assert read_managed_region(read_bytes_text(body_path)) == "custom ADR-CORE-001 v1.0.0"


# ------------------------------------------------------------------
# Failure handling
# ------------------------------------------------------------------

def test_invalid_record_aborts_before_any_write(tmp_path):
    record_path, body_path = write_document(tmp_path, "ADR-CORE-001", body="Body\n")
    write_document(tmp_path, "ADR-CORE-002", version="1.0")
    record_before = read_bytes_text(record_path)

    with pytest.raises(DocumentValidationError):
        generate_docs(tmp_path, today=TODAY)

    assert read_bytes_text(body_path) == "Body\n"
    assert read_bytes_text(record_path) == record_before


def test_malformed_region_fails_only_that_document(tmp_path):
    write_document(tmp_path, "ADR-CORE-001", body=BEGIN_MARKER + "\nno end\n")
    _, good_body = write_document(tmp_path, "ADR-CORE-002")

    result = generate_docs(tmp_path, today=TODAY)

    assert result.processed == 2
    assert result.updated == ["ADR-CORE-002"]
    assert [e.document_id for e in result.errors] == ["ADR-CORE-001"]
    assert not result.ok
    assert BEGIN_MARKER in read_bytes_text(good_body)


def test_missing_body_fails_only_that_document(tmp_path):
    _, body_path = write_document(tmp_path, "ADR-CORE-001")
    body_path.unlink()
    write_document(tmp_path, "ADR-CORE-002")

    result = generate_docs(tmp_path, today=TODAY)

    assert [e.document_id for e in result.errors] == ["ADR-CORE-001"]
    assert result.updated == ["ADR-CORE-002"]


def test_unreadable_record_leaves_body_untouched(tmp_path, monkeypatch):
    record_path, body_path = write_document(tmp_path, "ADR-CORE-001", body="Body\n")
    record_before = read_bytes_text(record_path)

    def _locked(path):
        raise OSError(f"record locked: {path}")

    monkeypatch.setattr("docs_registry.app.core.generator.read_json_object", _locked)

    result = generate_docs(tmp_path, today=TODAY)

    assert [e.document_id for e in result.errors] == ["ADR-CORE-001"]
    assert "record locked" in result.errors[0].error
    assert read_bytes_text(body_path) == "Body\n"
    assert read_bytes_text(record_path) == record_before


def test_broken_template_is_reported_per_document(tmp_path):
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "header.md.jinja").write_text("{{ no_such_field }}", encoding="utf-8")
    docs = tmp_path / "docs"
    _, body_path = write_document(docs, "ADR-CORE-001", body="Body\n")
    write_document(docs, "ADR-CORE-002")

    result = generate_docs(docs, settings=RegistrySettings(templates_dir=templates), today=TODAY)

    assert result.updated == []
    assert [e.document_id for e in result.errors] == ["ADR-CORE-001", "ADR-CORE-002"]
    assert read_bytes_text(body_path) == "Body\n"


def test_missing_corpus_generates_nothing(tmp_path):
    result = generate_docs(tmp_path / "missing", today=TODAY)

    assert result.processed == 0
    assert result.ok


# ------------------------------------------------------------------
# Index generation
# ------------------------------------------------------------------

def test_index_lists_documents_in_identifier_order(tmp_path):
    write_document(tmp_path, "LAW-CORE-001", subdir="law")
    write_document(tmp_path, "ADR-CORE-002", subdir="adr")
    write_document(tmp_path, "SRS-CORE-003", subdir="srs")

    result = generate_index(tmp_path)

    rows = [
        line
        for line in read_bytes_text(result.index_path).splitlines()
        if line.startswith("| ") and "-CORE-" in line
    ]
    assert result.processed == 3
    assert [row.split(" | ")[0] for row in rows] == [
        "| ADR-CORE-002",
        "| LAW-CORE-001",
        "| SRS-CORE-003",
    ]


def test_index_generation_is_byte_identical_when_repeated(tmp_path):
    write_document(tmp_path, "ADR-CORE-001")
    write_document(tmp_path, "PRD-CORE-001")

    first = generate_index(tmp_path)
    first_bytes = first.index_path.read_bytes()
    second = generate_index(tmp_path)

    assert first.changed
    assert not second.changed
    assert second.index_path.read_bytes() == first_bytes


def test_index_uses_configured_filename(tmp_path):
    write_document(tmp_path, "ADR-CORE-001")

    result = generate_index(tmp_path, settings=RegistrySettings(index_filename="README.md"))

    assert result.index_path == tmp_path.resolve() / "README.md"
    assert result.index_path.is_file()


def test_index_generation_refuses_invalid_corpus(tmp_path):
    write_raw_record(tmp_path / "adr" / "broken" / "doc.json", "{")

    with pytest.raises(DocumentValidationError):
        generate_index(tmp_path)

    assert not (tmp_path / "INDEX.md").exists()
