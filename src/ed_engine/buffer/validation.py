"""Bounds checks shared by buffer primitives."""

from __future__ import annotations

from .document import BufferDocument
from .protocol import BufferValidationError


def ensure_line(document: BufferDocument, line: int, *, allow_zero: bool = False) -> int:
    lowest = 0 if allow_zero else 1
    if line < lowest or line > document.line_count:
        raise BufferValidationError("Line out of range", line=line)
    return line


def ensure_range(document: BufferDocument, start: int, end: int) -> tuple[int, int]:
    ensure_line(document, start)
    ensure_line(document, end)
    if end < start:
        raise BufferValidationError("Range end precedes start", line=end)
    return start, end
