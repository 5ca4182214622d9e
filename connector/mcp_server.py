"""
MCP connector for docs-registry.

Exposes eight tools to MCP clients via async stdio JSON-RPC:
    docs_generate         regenerate managed headers, then INDEX.md
    docs_generate_index   rebuild INDEX.md from a fresh sweep
    docs_audit_all        schema, checksum, index and orphan checks
    docs_audit_checksum   stored checksums against current bodies
    docs_audit_index      phantom and missing index entries
    docs_audit_orphans    documents on disk that INDEX.md omits
    docs_discover         list every valid document
    docs_validate         validate a single doc.json

Transport: FastMCP stdio (async).
Registry operations are synchronous filesystem work; each handler runs
its operation in a worker thread so the event loop keeps serving frames.

Every tool returns a JSON-serializable dict. A failing operation returns
``{"success": false, "error": ...}`` instead of raising, so the client
always receives a structured answer.

Tool annotation note:
    docs_generate and docs_generate_index write to the corpus but are
    idempotent (same corpus, same bytes), so they are annotated as
    non-destructive. Audits, discovery and validation are read-only.
"""

import functools
import logging
import sys
import time
from typing import Any, Callable, Dict, Optional

# ---------------------------------------------------------------------------
# 1. Startup timing: begin
# ---------------------------------------------------------------------------
_start = time.perf_counter()

# ---------------------------------------------------------------------------
# 2. Logging: stderr only, bound before any import that might emit output.
#    stdout is reserved exclusively for FastMCP JSON-RPC framing.
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    stream=sys.stderr,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("connector")

# ---------------------------------------------------------------------------
# 3. Local imports, after logging is configured
# ---------------------------------------------------------------------------
from anyio import to_thread
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from connector.config import (
    DOCS_DIR,
    SETTINGS,
    resolve_docs_dir,
    resolve_record_path,
    validate_docs_root,
)
from docs_registry.app.coordinator.registry_audit import (
    audit_all,
    audit_checksum,
    audit_index,
    audit_orphans,
)
from docs_registry.app.core.discovery import discover_documents
from docs_registry.app.core.generator import generate_docs, generate_index
from docs_registry.app.core.validation import DocumentValidationError, validate_single
from docs_registry.app.schemas.audit import AuditResult

logging.getLogger().setLevel(SETTINGS.log_level)

# ---------------------------------------------------------------------------
# 4. FastMCP initialisation
# ---------------------------------------------------------------------------
mcp = FastMCP("docs-registry-connector")

# Failures reported to the client as {"success": false}. Anything else is a
# bug and propagates to FastMCP.
_OPERATION_FAILURES = (DocumentValidationError, OSError, ValueError)


async def _run(operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    return await to_thread.run_sync(functools.partial(operation, *args, **kwargs))


def _failure(tool: str, exc: Exception) -> Dict[str, Any]:
    logger.error("%s: %s: %s", tool, type(exc).__name__, exc)
    payload: Dict[str, Any] = {"success": False, "error": str(exc)}
    if isinstance(exc, DocumentValidationError):
        payload["errors"] = [error.model_dump() for error in exc.errors]
    return payload


def _audit_payload(result: AuditResult) -> Dict[str, Any]:
    return result.model_dump(mode="json")


# ---------------------------------------------------------------------------
# 5. Tool handlers
# ---------------------------------------------------------------------------


@mcp.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
    )
)
async def docs_generate(docs_dir: Optional[str] = None) -> dict:
    """
    Generate managed header blocks for all documents and update INDEX.md.

    Rewrites only the managed region of each doc.md and the checksum and
    updated_at fields of each doc.json. Refuses to run if any doc.json is
    invalid; use docs_audit_all to list the invalid records.

    Args:
        docs_dir: Root directory containing the documents. Defaults to the
            configured corpus root.
    """
    root = resolve_docs_dir(docs_dir, DOCS_DIR)
    logger.info("tool: docs_generate docs_dir=%s", root)

    try:
        result = await _run(generate_docs, root, settings=SETTINGS)
        index = await _run(generate_index, root, settings=SETTINGS)
    except _OPERATION_FAILURES as exc:
        return _failure("docs_generate", exc)

    return {
        "success": result.ok,
        "processed": result.processed,
        "updated": result.updated,
        "errors": [error.model_dump() for error in result.errors],
        "index": index.model_dump(mode="json"),
    }


@mcp.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
    )
)
async def docs_generate_index(docs_dir: Optional[str] = None) -> dict:
    """
    Generate INDEX.md from a filesystem scan.

    Args:
        docs_dir: Root directory containing the documents. Defaults to the
            configured corpus root.
    """
    root = resolve_docs_dir(docs_dir, DOCS_DIR)
    logger.info("tool: docs_generate_index docs_dir=%s", root)

    try:
        index = await _run(generate_index, root, settings=SETTINGS)
    except _OPERATION_FAILURES as exc:
        return _failure("docs_generate_index", exc)

    return {
        "success": True,
        "message": f"{index.index_path.name} generated successfully",
        **index.model_dump(mode="json"),
    }


@mcp.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
    )
)
async def docs_audit_all(docs_dir: Optional[str] = None) -> dict:
    """
    Run the full audit: schema validation, checksum verification, index
    consistency and orphan detection.

    Returns passed, the list of violations, and the checks that ran.

    Args:
        docs_dir: Root directory containing the documents. Defaults to the
            configured corpus root.
    """
    root = resolve_docs_dir(docs_dir, DOCS_DIR)
    logger.info("tool: docs_audit_all docs_dir=%s", root)

    try:
        result = await _run(audit_all, root, settings=SETTINGS)
    except _OPERATION_FAILURES as exc:
        return _failure("docs_audit_all", exc)
    return _audit_payload(result)


@mcp.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
    )
)
async def docs_audit_checksum(docs_dir: Optional[str] = None) -> dict:
    """
    Audit checksum integrity for all documents.

    Args:
        docs_dir: Root directory containing the documents. Defaults to the
            configured corpus root.
    """
    root = resolve_docs_dir(docs_dir, DOCS_DIR)
    logger.info("tool: docs_audit_checksum docs_dir=%s", root)

    try:
        result = await _run(audit_checksum, root, settings=SETTINGS)
    except _OPERATION_FAILURES as exc:
        return _failure("docs_audit_checksum", exc)
    return _audit_payload(result)


@mcp.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
    )
)
async def docs_audit_index(docs_dir: Optional[str] = None) -> dict:
    """
    Audit INDEX.md for phantom and missing documents.

    Args:
        docs_dir: Root directory containing the documents. Defaults to the
            configured corpus root.
    """
    root = resolve_docs_dir(docs_dir, DOCS_DIR)
    logger.info("tool: docs_audit_index docs_dir=%s", root)

    try:
        result = await _run(audit_index, root, settings=SETTINGS)
    except _OPERATION_FAILURES as exc:
        return _failure("docs_audit_index", exc)
    return _audit_payload(result)


@mcp.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
    )
)
async def docs_audit_orphans(docs_dir: Optional[str] = None) -> dict:
    """
    Detect orphaned documents: present on disk but not listed in INDEX.md.

    Args:
        docs_dir: Root directory containing the documents. Defaults to the
            configured corpus root.
    """
    root = resolve_docs_dir(docs_dir, DOCS_DIR)
    logger.info("tool: docs_audit_orphans docs_dir=%s", root)

    try:
        result = await _run(audit_orphans, root, settings=SETTINGS)
    except _OPERATION_FAILURES as exc:
        return _failure("docs_audit_orphans", exc)
    return _audit_payload(result)


@mcp.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
    )
)
async def docs_discover(docs_dir: Optional[str] = None) -> dict:
    """
    Discover and validate all documents in the corpus.

    Returns the document count and, per document, its identifier, file
    paths, title, type and status, sorted by identifier.

    Args:
        docs_dir: Root directory containing the documents. Defaults to the
            configured corpus root.
    """
    root = resolve_docs_dir(docs_dir, DOCS_DIR)
    logger.info("tool: docs_discover docs_dir=%s", root)

    try:
        documents = await _run(discover_documents, root)
    except _OPERATION_FAILURES as exc:
        return _failure("docs_discover", exc)

    return {
        "count": len(documents),
        "documents": [
            {
                "document_id": document.document_id,
                "record_path": str(document.record_path),
                "body_path": str(document.body_path),
                "title": document.record.title,
                "type": document.record.document_type.value,
                "status": document.record.status.value,
            }
            for document in documents
        ],
    }


@mcp.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
    )
)
async def docs_validate(doc_json_path: str) -> dict:
    """
    Validate a single doc.json file against the record schema.

    Returns valid, the record summary when valid, and every field error
    when not.

    Args:
        doc_json_path: Path to the doc.json file to validate.
    """
    logger.info("tool: docs_validate doc_json_path=%s", doc_json_path)

    try:
        candidate = resolve_record_path(doc_json_path)
        report = await _run(validate_single, candidate)
    except _OPERATION_FAILURES as exc:
        return _failure("docs_validate", exc)

    return report.model_dump(mode="json")


# ---------------------------------------------------------------------------
# 6. Startup timing: end
# ---------------------------------------------------------------------------
_elapsed = time.perf_counter() - _start
logger.info("startup complete in %.6fs", _elapsed)


# ---------------------------------------------------------------------------
# 7. Tool schema stability check.
#    Hashes public function attributes only, no FastMCP internals.
#    Run on startup to detect unintended tool definition drift.
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    import hashlib as _hashlib
    import json as _json

    validate_docs_root()

    _manifest = [
        {
            "name": fn.__name__,
            "doc": (fn.__doc__ or "").strip(),
        }
        for fn in (
            docs_generate,
            docs_generate_index,
            docs_audit_all,
            docs_audit_checksum,
            docs_audit_index,
            docs_audit_orphans,
            docs_discover,
            docs_validate,
        )
    ]
    _tool_hash = _hashlib.sha256(
        _json.dumps(_manifest, sort_keys=True).encode()
    ).hexdigest()
    logger.info("TOOL_DEF_HASH=%s", _tool_hash)

    mcp.run()
