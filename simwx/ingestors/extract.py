"""Cursor-based value extraction from the data server's XML responses.

This is not an XML parser. The response layout is fixed and narrow, so we
only look for a literal opening tag and take everything up to the next
``<``. There is no notion of nesting, attributes or entity escaping.
"""

from __future__ import annotations

from typing import Optional


def extract(buffer: str, open_tag: str, cursor: int = 0) -> tuple[str, int]:
    """Return the text following ``open_tag`` and the updated cursor.

    The search starts at ``cursor``. If the tag is missing the text is empty
    and the cursor is returned unchanged. Otherwise the cursor points at the
    ``<`` that ends the value, so the next call continues from there.

    When the tag is found but no ``<`` follows (truncated buffer) the text is
    empty and the cursor is reset to the start of the buffer.
    """

    found = buffer.find(open_tag, cursor)
    if found < 0:
        return "", cursor

    start = found + len(open_tag)
    end = buffer.find("<", start)
    if end < 0:
        return "", 0
    return buffer[start:end], end


def extract_field(
    buffer: str, open_tag: str, cursor: int = 0
) -> tuple[Optional[str], int]:
    """Like :func:`extract` but reports an absent or empty value as ``None``."""

    text, cursor = extract(buffer, open_tag, cursor)
    return (text or None), cursor


__all__ = ["extract", "extract_field"]
