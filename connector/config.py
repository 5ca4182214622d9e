"""
Connector configuration.

Loads registry settings from the environment (prefix ``DOCS_REGISTRY_``,
see :class:`docs_registry.app.config.RegistrySettings`) at import time.
An invalid configuration is intentionally fatal: the connector must not
start with a template directory or log level it cannot use.

Environment variables (all optional with defaults):
    DOCS_REGISTRY_DOCS_DIR            Corpus root used when a tool call
                                      names no directory. Default: docs
    DOCS_REGISTRY_INDEX_FILENAME      Master index file name. Default: INDEX.md
    DOCS_REGISTRY_CHECKSUM_ALGORITHM  sha256 or sha512. Default: sha256
    DOCS_REGISTRY_TEMPLATES_DIR       Custom header template directory.
    DOCS_REGISTRY_LOG_LEVEL           Default: INFO
"""

import logging
from pathlib import Path
from typing import Optional

from docs_registry.app.config import RegistrySettings, get_settings

# ---------------------------------------------------------------------------
# Settings, validated once
# ---------------------------------------------------------------------------

SETTINGS: RegistrySettings = get_settings()

# ---------------------------------------------------------------------------
# Default corpus root, resolved to an absolute path immediately so that log
# lines and tool results name a stable location.
# ---------------------------------------------------------------------------

DOCS_DIR: Path = SETTINGS.docs_dir.expanduser().resolve()


def resolve_docs_dir(docs_dir: Optional[str], default: Path) -> Path:
    """
    Resolve the corpus root for one tool call.

    An empty or missing argument selects ``default``. Relative paths are
    resolved against the connector's working directory.
    """
    if docs_dir is None or not docs_dir.strip():
        return default
    return Path(docs_dir.strip()).expanduser().resolve()


def resolve_record_path(doc_json_path: str) -> Path:
    """
    Resolve and check the path of a single ``doc.json``.

    Raises ValueError for an empty argument, a missing file, or a path
    that is not a file.
    """
    if not doc_json_path or not doc_json_path.strip():
        raise ValueError("doc_json_path is required")

    candidate = Path(doc_json_path.strip()).expanduser().resolve()
    if not candidate.exists():
        raise ValueError(f"File not found: {candidate}")
    if not candidate.is_file():
        raise ValueError(f"Path is not a file: {candidate}")
    return candidate


# ---------------------------------------------------------------------------
# Startup validation
# ---------------------------------------------------------------------------

def validate_docs_root() -> None:
    """
    Check the default corpus root at connector startup.

    A missing root is not fatal: generation and audits of an absent corpus
    are well defined (an empty sweep), and tool calls may name another
    directory. It is logged so a misconfigured deployment is visible.
    """
    if not DOCS_DIR.exists():
        logging.warning("config: DOCS_DIR does not exist yet: %s", DOCS_DIR)
        return
    if not DOCS_DIR.is_dir():
        raise RuntimeError(f"DOCS_DIR is not a directory: {DOCS_DIR}")
    logging.info("config: DOCS_DIR validated: %s", DOCS_DIR)
