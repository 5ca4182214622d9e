"""
Deterministic content hashing for document bodies.

Bodies are normalized before hashing so that the digest is identical on
every platform and in every editor:

1. ``\\r\\n`` and lone ``\\r`` become ``\\n``
2. trailing spaces and tabs are removed from every line
3. trailing whitespace at end-of-file is removed

The digest is computed over the UTF-8 bytes of the normalized text and
rendered as lowercase hex.
"""

from __future__ import annotations

import hashlib
import re
from typing import Literal, Optional


HashAlgorithm = Literal["sha256", "sha512"]

DEFAULT_ALGORITHM: HashAlgorithm = "sha256"

_DIGEST_LENGTHS = {
    64: "sha256",
    128: "sha512",
}

_LINE_TERMINATOR = re.compile(r"\r\n?")
_TRAILING_BLANKS = re.compile(r"[ \t]+$")


def normalize_content(content: str) -> str:
    """
    Normalize body text for checksum computation.

    Idempotent: ``normalize_content(normalize_content(x)) == normalize_content(x)``.
    """
    unified = _LINE_TERMINATOR.sub("\n", content)
    lines = [_TRAILING_BLANKS.sub("", line) for line in unified.split("\n")]
    return "\n".join(lines).rstrip()


def compute_checksum(
    content: str,
    algorithm: HashAlgorithm = DEFAULT_ALGORITHM,
) -> str:
    """
    Compute the checksum of normalized content.

    Returns:
        Lowercase hex digest (64 chars for sha256, 128 for sha512).
    """
    if algorithm not in ("sha256", "sha512"):
        raise ValueError(f"Unsupported checksum algorithm: {algorithm!r}")

    normalized = normalize_content(content)
    return hashlib.new(algorithm, normalized.encode("utf-8")).hexdigest()


def algorithm_for_digest(digest: Optional[str]) -> Optional[HashAlgorithm]:
    """Infer the hash algorithm from a stored hex digest's length."""
    if digest is None:
        return None
    return _DIGEST_LENGTHS.get(len(digest))
