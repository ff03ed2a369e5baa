"""Text buffer protocol and the in-memory implementation."""

from .buffer import Buffer, Transaction
from .document import BufferDocument
from .protocol import BufferValidationError, SearchPattern, TextBuffer
from .state import BufferState
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_line, ensure_range

__all__ = [
    "Buffer",
    "BufferDocument",
    "BufferState",
    "BufferValidationError",
    "SearchPattern",
    "TextBuffer",
    "Transaction",
    "UndoEntry",
    "UndoTimeline",
    "ensure_line",
    "ensure_range",
]
