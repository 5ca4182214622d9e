"""
Byte-faithful text file helpers.

Bodies are read and written with newline translation disabled so that a
CRLF body stays CRLF and content outside the managed region round-trips
byte for byte. Generated files (records, index) are always written with
``\\n`` line endings regardless of platform.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict


def read_text_exact(path: Path) -> str:
    """Read UTF-8 text without translating line endings."""
    with open(path, "r", encoding="utf-8", newline="") as fh:
        return fh.read()


def write_text_exact(path: Path, text: str) -> None:
    """Write UTF-8 text without translating line endings."""
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)


def read_json_object(path: Path) -> Dict[str, Any]:
    """
    Load a JSON document that must be an object.

    Raises:
        OSError: the file cannot be read.
        ValueError: the content is not valid JSON or not an object
            (``json.JSONDecodeError`` is a ``ValueError``).
    """
    data = json.loads(read_text_exact(path))
    if not isinstance(data, dict):
        raise ValueError(
            f"expected a JSON object, got {type(data).__name__}"
        )
    return data


def write_json_object(path: Path, data: Dict[str, Any]) -> None:
    """Persist a JSON object with stable formatting and a trailing newline."""
    write_text_exact(
        path,
        json.dumps(data, indent=2, ensure_ascii=False) + "\n",
    )
