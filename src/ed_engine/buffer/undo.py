"""Undo history for buffer transactions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence


@dataclass(slots=True)
class UndoEntry:
    label: str
    before_lines: Sequence[str]
    current_before: int


class UndoTimeline:
    """Linear undo stack; the oldest entries fall off past ``limit``."""

    def __init__(self, *, limit: int = 256) -> None:
        self._entries: List[UndoEntry] = []
        self._limit = limit

    def push(self, entry: UndoEntry) -> None:
        self._entries.append(entry)
        if len(self._entries) > self._limit:
            del self._entries[0]

    def can_undo(self) -> bool:
        return bool(self._entries)

    def undo(self) -> Optional[UndoEntry]:
        if not self._entries:
            return None
        return self._entries.pop()

    def __len__(self) -> int:
        return len(self._entries)
