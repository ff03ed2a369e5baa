"""Line storage for interpreter buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence


@dataclass(slots=True)
class BufferDocument:
    """Immutable-ish list of lines without terminators.

    Every edit returns a new document with a bumped ``version`` so
    transactions can tell whether anything changed. An empty document has
    zero lines.
    """

    _lines: List[str] = field(default_factory=list)
    version: int = 0

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(_lines=text.splitlines())

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BufferDocument":
        return cls(_lines=[str(line) for line in lines])

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    def replace(self, lines: Iterable[str]) -> "BufferDocument":
        return BufferDocument(_lines=list(lines), version=self.version + 1)

    def update_lines(
        self, start: int, end: int, new_lines: Iterable[str]
    ) -> "BufferDocument":
        """Return a document with ``[start:end]`` (0-based slice) replaced."""

        lines = list(self._lines)
        lines[start:end] = list(new_lines)
        return BufferDocument(_lines=lines, version=self.version + 1)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, number: int) -> str:
        """Return the line at 1-based ``number``."""

        return self._lines[number - 1]

    def to_text(self) -> str:
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"
