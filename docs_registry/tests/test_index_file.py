from docs_registry.app.core.discovery import discover_documents
from docs_registry.app.core.index_file import (
    INDEX_NOTICE,
    INDEX_TITLE,
    parse_index,
    render_index,
)

from docs_registry.tests.fixtures.corpus_factory import write_document


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------

def test_render_index_layout(tmp_path):
    write_document(tmp_path, "SRS-CORE-003", subdir="requirements", title="Requirements")
    write_document(tmp_path, "ADR-CORE-002", subdir="decisions", title="Decision", status="DRAFT")

    documents = discover_documents(tmp_path)
    text = render_index(documents, tmp_path.resolve())

    assert text == (
        f"{INDEX_TITLE}\n"
        "\n"
        f"{INDEX_NOTICE}\n"
        "\n"
        "| ID | Title | Type | Status | Path |\n"
        "| --- | --- | --- | --- | --- |\n"
        "| ADR-CORE-002 | Decision | ADR | DRAFT | decisions/ADR-CORE-002/doc.md |\n"
        "| SRS-CORE-003 | Requirements | SRS | APPROVED | requirements/SRS-CORE-003/doc.md |\n"
    )


def test_render_index_resorts_input(tmp_path):
    write_document(tmp_path, "ADR-CORE-001")
    write_document(tmp_path, "ADR-CORE-002")
    documents = discover_documents(tmp_path)

    forward = render_index(documents, tmp_path.resolve())
    backward = render_index(list(reversed(documents)), tmp_path.resolve())

    assert forward == backward


def test_render_index_escapes_table_syntax(tmp_path):
    write_document(tmp_path, "ADR-CORE-001", title="Pipes | and\nnewlines")

    text = render_index(discover_documents(tmp_path), tmp_path.resolve())

    assert "| Pipes \\| and newlines |" in text


def test_empty_corpus_renders_header_only(tmp_path):
    text = render_index([], tmp_path)

    assert text.endswith("| --- | --- | --- | --- | --- |\n")
    assert parse_index(text) == []


# ------------------------------------------------------------------
# Parsing
# ------------------------------------------------------------------

def test_parse_rendered_index(tmp_path):
    write_document(tmp_path, "LAW-CORE-001", title="A | tricky title")
    write_document(tmp_path, "ADR-CORE-002")

    text = render_index(discover_documents(tmp_path), tmp_path.resolve())

    assert parse_index(text) == ["ADR-CORE-002", "LAW-CORE-001"]


def test_parse_hand_written_index_variants():
    text = (
        "# Docs\n"
        "\n"
        "Some prose | with a pipe is not a table row.\n"
        "\n"
        "| Document | Notes |\n"
        "|:---|---:|\n"
        "| `ADR-CORE-001` | backticks |\n"
        "| [PRD-CORE-001](prd/PRD-CORE-001/doc.md) | link |\n"
        "|SRS-CORE-001|no padding|\n"
        "| | empty cell |\n"
        "\n"
        "| Second | table |\n"
        "| --- | --- |\n"
        "| TSD-CORE-001 | x |\n"
    )

    assert parse_index(text) == [
        "ADR-CORE-001",
        "PRD-CORE-001",
        "SRS-CORE-001",
        "TSD-CORE-001",
    ]


def test_parse_keeps_duplicates_in_file_order():
    text = (
        "| ID |\n"
        "| --- |\n"
        "| ADR-CORE-002 |\n"
        "| ADR-CORE-001 |\n"
        "| ADR-CORE-002 |\n"
    )

    assert parse_index(text) == ["ADR-CORE-002", "ADR-CORE-001", "ADR-CORE-002"]


def test_parse_handles_crlf():
    text = "| ID |\r\n| --- |\r\n| ADR-CORE-001 |\r\n"

    assert parse_index(text) == ["ADR-CORE-001"]
