"""In-memory buffer façade combining document, state, and undo."""

from __future__ import annotations

import re
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import ContextManager, Iterable, Iterator, Optional, Pattern, Sequence

from ed_engine.runtime import telemetry

from .document import BufferDocument
from .protocol import BufferValidationError, SearchPattern
from .state import BufferState
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_line, ensure_range


class Buffer:
    """Concrete ``TextBuffer`` holding its lines in memory."""

    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        undo: Optional[UndoTimeline] = None,
        encoding: str = "utf-8",
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.history = undo or UndoTimeline()
        self.encoding = encoding
        self._open: Optional[Transaction] = None
        self._clamp_current()

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "default", path: Optional[str] = None
    ) -> "Buffer":
        return cls(
            name=name,
            document=BufferDocument.from_text(text),
            state=BufferState(path=path),
        )

    @classmethod
    def from_lines(
        cls, lines: Iterable[str], *, name: str = "default", path: Optional[str] = None
    ) -> "Buffer":
        return cls(
            name=name,
            document=BufferDocument.from_lines(lines),
            state=BufferState(path=path),
        )

    @classmethod
    def from_file(cls, path: str, *, encoding: str = "utf-8") -> "Buffer":
        """Load ``path``; a missing file yields an empty buffer bound to it."""

        target = Path(path)
        text = target.read_text(encoding=encoding) if target.exists() else ""
        buffer = cls(
            name=target.name,
            document=BufferDocument.from_text(text),
            state=BufferState(path=str(target)),
            encoding=encoding,
        )
        buffer.set_current_line(buffer.last_line())
        return buffer

    # -- queries -----------------------------------------------------------

    def line_count(self) -> int:
        return self.document.line_count

    def last_line(self) -> int:
        """Highest addressable line; an empty buffer still has line 1."""

        return max(self.document.line_count, 1)

    def current_line(self) -> int:
        return self.state.current_line

    def lines(self) -> Sequence[str]:
        return self.document.snapshot()

    def text(self) -> str:
        return self.document.to_text()

    def read_range(self, start: int, end: int) -> Sequence[str]:
        if self.document.line_count == 0:
            return ()
        start, end = ensure_range(self.document, start, end)
        return self.document.snapshot()[start - 1 : end]

    def search_forward(self, pattern: SearchPattern, from_line: int) -> Optional[int]:
        regex = _compile(pattern)
        for number in range(from_line + 1, self.document.line_count + 1):
            if regex.search(self.document.get_line(number)):
                return number
        return None

    def search_backward(self, pattern: SearchPattern, from_line: int) -> Optional[int]:
        regex = _compile(pattern)
        for number in range(min(from_line, self.document.line_count + 1) - 1, 0, -1):
            if regex.search(self.document.get_line(number)):
                return number
        return None

    def is_modified(self) -> bool:
        return self.state.modified

    def file_path(self) -> Optional[str]:
        return self.state.path

    # -- mutation ------------------------------------------------------------

    def set_current_line(self, line: int) -> None:
        if line < 1 or line > self.last_line():
            raise BufferValidationError("Current line out of range", line=line)
        self.state.set_current(line)

    def insert_lines(self, after_line: int, lines: Sequence[str]) -> None:
        ensure_line(self.document, after_line, allow_zero=True)
        if not lines:
            return
        with self._edit("insert_lines"):
            self._apply(
                self.document.update_lines(after_line, after_line, list(lines))
            )

    def delete_range(self, start: int, end: int) -> None:
        start, end = ensure_range(self.document, start, end)
        with self._edit("delete_range"):
            self._apply(self.document.update_lines(start - 1, end, ()))
            self._clamp_current()

    def save(self, path: Optional[str] = None) -> int:
        """Write the buffer to ``path`` (or its own path); return characters written."""

        target = path or self.state.path
        if not target:
            raise BufferValidationError("Buffer has no file path")
        text = self.document.to_text()
        data = text.encode(self.encoding)
        with telemetry.span(
            "buffer::save", component=True, metadata={"buffer": self.name}
        ):
            Path(target).write_bytes(data)
        self.state.mark_saved(target)
        return len(text)

    def undo(self) -> bool:
        entry = self.history.undo()
        if entry is None:
            return False
        self._restore(entry.before_lines, entry.current_before)
        return True

    def transaction(self, label: str) -> ContextManager["Transaction"]:
        return Transaction(self, label)

    # -- internals -----------------------------------------------------------

    @contextmanager
    def _edit(self, label: str) -> Iterator[None]:
        if self._open is not None:
            yield
            return
        with Transaction(self, label):
            yield

    def _apply(self, document: BufferDocument) -> None:
        self.document = document
        self.state.mark_modified()

    def _restore(self, lines: Sequence[str], current: int) -> None:
        self._apply(self.document.replace(lines))
        self.state.set_current(current)
        self._clamp_current()

    def _clamp_current(self) -> None:
        current = self.state.current_line
        self.state.set_current(max(1, min(current, self.last_line())))


class Transaction(AbstractContextManager["Transaction"]):
    """Groups buffer edits into one undo entry; rolls back on error.

    Nested transactions fold into the outermost one. A transaction may stay
    open across several submitted lines (text entry), so it reports its
    outcome as an event instead of holding a profiling span.
    """

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._nested = False
        self._before: Optional[BufferDocument] = None
        self._current_before = 1
        self._modified_before = False

    def __enter__(self) -> "Transaction":
        if self.buffer._open is not None:
            self._nested = True
            return self
        self.buffer._open = self
        self._before = self.buffer.document
        self._current_before = self.buffer.state.current_line
        self._modified_before = self.buffer.state.modified
        return self

    @property
    def changed(self) -> bool:
        return (
            self._before is not None
            and self._before.version != self.buffer.document.version
        )

    def rollback(self) -> None:
        assert self._before is not None
        self.buffer.document = self._before
        self.buffer.state.set_current(self._current_before)
        self.buffer.state.modified = self._modified_before

    def commit(self) -> None:
        assert self._before is not None
        if not self.changed:
            return
        self.buffer.history.push(
            UndoEntry(
                label=self.label,
                before_lines=self._before.snapshot(),
                current_before=self._current_before,
            )
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._nested:
            return False
        self.buffer._open = None
        outcome = "commit" if exc_type is None else "rollback"
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        telemetry.record_event(
            f"buffer.{outcome}",
            level="debug",
            data={"buffer": self.buffer.name, "label": self.label},
        )
        return False


def _compile(pattern: SearchPattern) -> Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern
