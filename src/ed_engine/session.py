"""Session state shared by the dispatcher, handlers, and modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from ed_engine.runtime.config import InterpreterConfig


class SessionMode(str, Enum):
    """Top-level interpreter states."""

    AWAITING_COMMAND = "command"
    AWAITING_TEXT = "text"


class QuitState(str, Enum):
    CLEAN = "clean"
    PENDING_QUIT = "pending_quit"


@dataclass(frozen=True, slots=True)
class Substitution:
    """Last successful ``s`` command, reused by a bare ``s``."""

    pattern: str
    replacement: str
    replace_all: bool = False


@dataclass(slots=True)
class SessionState:
    """Everything that outlives a single command line.

    Marks hold line numbers captured when ``k`` ran and are never shifted by
    later inserts or deletes.
    """

    mode: SessionMode = SessionMode.AWAITING_COMMAND
    last_error: str = ""
    verbose_errors: bool = False
    prompt_visible: bool = False
    last_search: Optional[str] = None
    last_substitution: Optional[Substitution] = None
    marks: Dict[str, int] = field(default_factory=dict)
    quit_state: QuitState = QuitState.CLEAN
    insert_after: int = 0
    ended: bool = False

    @classmethod
    def from_config(cls, config: InterpreterConfig) -> "SessionState":
        return cls(
            verbose_errors=config.verbose_errors,
            prompt_visible=config.prompt_visible,
        )

    def set_mark(self, name: str, line: int) -> None:
        self.marks[name] = line

    def mark(self, name: str) -> Optional[int]:
        return self.marks.get(name)

    def record_error(self, message: str) -> None:
        self.last_error = message

    def error_marker(self, message: str) -> tuple[str, ...]:
        if self.verbose_errors:
            return ("?", message)
        return ("?",)


__all__ = ["QuitState", "SessionMode", "SessionState", "Substitution"]
