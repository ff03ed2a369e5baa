"""Cursor and file bookkeeping tied to a buffer document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class BufferState:
    """Mutable current-line, modified flag and associated path."""

    current_line: int = 1
    modified: bool = False
    path: Optional[str] = None

    def set_current(self, line: int) -> None:
        self.current_line = line

    def mark_modified(self) -> None:
        self.modified = True

    def mark_saved(self, path: Optional[str] = None) -> None:
        self.modified = False
        if path is not None:
            self.path = path
