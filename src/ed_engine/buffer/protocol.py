"""Contract between the interpreter core and the text buffer it edits."""

from __future__ import annotations

from typing import ContextManager, Optional, Pattern, Protocol, Sequence, Union

SearchPattern = Union[str, Pattern[str]]


class TextBuffer(Protocol):
    """Line-addressable buffer the interpreter reads and mutates.

    Line numbers are 1-based. ``insert_lines`` takes the line after which the
    new lines go, so ``0`` inserts at the top.
    """

    def line_count(self) -> int: ...

    def current_line(self) -> int: ...

    def set_current_line(self, line: int) -> None: ...

    def read_range(self, start: int, end: int) -> Sequence[str]: ...

    def insert_lines(self, after_line: int, lines: Sequence[str]) -> None: ...

    def delete_range(self, start: int, end: int) -> None: ...

    def search_forward(
        self, pattern: SearchPattern, from_line: int
    ) -> Optional[int]: ...

    def search_backward(
        self, pattern: SearchPattern, from_line: int
    ) -> Optional[int]: ...

    def is_modified(self) -> bool: ...

    def file_path(self) -> Optional[str]: ...

    def save(self, path: Optional[str] = None) -> int: ...

    def undo(self) -> bool: ...

    def transaction(self, label: str) -> ContextManager[object]: ...


class BufferValidationError(RuntimeError):
    """Raised when a caller hands the buffer an out-of-range line number."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line
