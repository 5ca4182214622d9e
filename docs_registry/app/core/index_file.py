"""
Master index rendering and parsing.

The index is a markdown table, one row per document, sorted by identifier.
It is never edited incrementally: every regeneration writes the whole file
from a fresh sweep, so identical sweeps produce byte-identical output.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Sequence

from docs_registry.app.schemas.discovery import DiscoveredDocument

INDEX_TITLE = "# Document Index"
INDEX_NOTICE = (
    "<!-- Generated by docs-registry from doc.json records. "
    "Do not edit by hand. -->"
)
INDEX_COLUMNS = ("ID", "Title", "Type", "Status", "Path")

_CELL_SPLIT = re.compile(r"(?<!\\)\|")
_SEPARATOR_CELL = re.compile(r"^:?-{3,}:?$")
_LINK_TEXT = re.compile(r"^\[([^\]]*)\]\([^)]*\)$")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _cell(value: str) -> str:
    flattened = " ".join(value.split())
    return flattened.replace("|", "\\|")


def _row(cells: Sequence[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def relative_body_path(document: DiscoveredDocument, docs_dir: Path) -> str:
    """Body path relative to the corpus root, always with forward slashes."""
    return document.body_path.relative_to(docs_dir).as_posix()


def render_index(documents: Sequence[DiscoveredDocument], docs_dir: Path) -> str:
    """
    Render the complete index file.

    ``documents`` is re-sorted by identifier so callers cannot perturb
    the output order.
    """
    lines = [
        INDEX_TITLE,
        "",
        INDEX_NOTICE,
        "",
        _row(INDEX_COLUMNS),
        _row(["---"] * len(INDEX_COLUMNS)),
    ]

    for document in sorted(documents, key=lambda d: d.document_id):
        record = document.record
        lines.append(
            _row(
                [
                    _cell(document.document_id),
                    _cell(record.title),
                    record.document_type.value,
                    record.status.value,
                    _cell(relative_body_path(document, docs_dir)),
                ]
            )
        )

    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _split_cells(line: str) -> List[str]:
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    return [cell.strip() for cell in _CELL_SPLIT.split(stripped)]


def _is_separator(cells: List[str]) -> bool:
    return bool(cells) and all(_SEPARATOR_CELL.match(cell) for cell in cells)


def _identifier_from_cell(cell: str) -> str:
    value = cell.strip().strip("`").strip()
    match = _LINK_TEXT.match(value)
    if match:
        value = match.group(1).strip().strip("`").strip()
    return value.replace("\\|", "|")


def parse_index(text: str) -> List[str]:
    """
    Return the identifiers listed in an index, in file order.

    Only table body rows count: header rows (the row directly above a
    ``| --- |`` separator) and separator rows are skipped. Duplicated
    identifiers are returned as many times as they are listed.
    """
    lines = text.splitlines()
    rows = [
        (i, _split_cells(line))
        for i, line in enumerate(lines)
        if line.strip().startswith("|")
    ]

    separators = {i for i, cells in rows if _is_separator(cells)}
    headers = {i - 1 for i in separators}

    identifiers: List[str] = []
    for i, cells in rows:
        if i in separators or i in headers:
            continue
        identifier = _identifier_from_cell(cells[0]) if cells else ""
        if identifier:
            identifiers.append(identifier)
    return identifiers
