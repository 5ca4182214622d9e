"""
Managed region splicing.

A body file is an ordinary text blob with at most one machine-owned region
bounded by two sentinel lines. Rewriting the region is a line-range splice:
every byte outside the markers, including the marker-terminating line
endings, is preserved exactly.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

BEGIN_MARKER = "<!-- docs-registry:managed:begin -->"
END_MARKER = "<!-- docs-registry:managed:end -->"

_CONTENT_TERMINATOR = re.compile(r"\r\n?")


class ManagedRegionError(RuntimeError):
    """Raised when a body's managed region markers are malformed."""


def _line_ending(line: str) -> str:
    if line.endswith("\r\n"):
        return "\r\n"
    if line.endswith("\n"):
        return "\n"
    return ""


def _is_marker(line: str, marker: str) -> bool:
    # Markers count only at column 0; indented copies (quoted or fenced) are text.
    return line.rstrip() == marker


def _locate(lines: List[str]) -> Optional[Tuple[int, int]]:
    """Return (begin, end) line indices of the region, or None if absent."""
    begins = [i for i, line in enumerate(lines) if _is_marker(line, BEGIN_MARKER)]
    ends = [i for i, line in enumerate(lines) if _is_marker(line, END_MARKER)]

    if not begins and not ends:
        return None

    if len(begins) != 1 or len(ends) != 1:
        raise ManagedRegionError(
            f"expected exactly one managed region, found {len(begins)} begin "
            f"and {len(ends)} end marker(s)"
        )

    begin, end = begins[0], ends[0]
    if end < begin:
        raise ManagedRegionError(
            f"managed region end marker (line {end + 1}) precedes its "
            f"begin marker (line {begin + 1})"
        )
    return begin, end


def _region_lines(content: str, eol: str) -> List[str]:
    inner = _CONTENT_TERMINATOR.sub("\n", content).rstrip("\n")
    block = [BEGIN_MARKER + eol]
    if inner:
        block.extend(line + eol for line in inner.split("\n"))
    return block


def splice_managed_region(body: str, content: str) -> str:
    """
    Replace the managed region of ``body`` with ``content``.

    If the body has no region yet, one is inserted at the top followed by a
    blank line. The region adopts the body's line-ending convention.

    Raises:
        ManagedRegionError: a lone, duplicated, or reversed marker.
    """
    lines = body.splitlines(keepends=True)
    location = _locate(lines)

    if location is None:
        eol = _line_ending(lines[0]) if lines else "\n"
        eol = eol or "\n"
        block = _region_lines(content, eol) + [END_MARKER + eol]
        if not body:
            return "".join(block)
        return "".join(block) + eol + body

    begin, end = location
    eol = _line_ending(lines[begin]) or "\n"
    # The end marker line (and whatever terminates it) is kept verbatim.
    return "".join(lines[:begin] + _region_lines(content, eol) + lines[end:])


def read_managed_region(body: str) -> Optional[str]:
    """Return the text between the markers (``\\n``-joined), or None if absent."""
    lines = body.splitlines(keepends=True)
    location = _locate(lines)
    if location is None:
        return None
    begin, end = location
    return "".join(lines[begin + 1:end]).replace("\r\n", "\n").rstrip("\n")
