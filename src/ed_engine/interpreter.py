"""Entry point a host uses to drive one interpreter session."""

from __future__ import annotations

from typing import Iterable, List, Optional

from ed_engine.buffer import Buffer, TextBuffer
from ed_engine.commands.registry import CommandRegistry
from ed_engine.modes import CommandMode, InsertMode, ModeBus, ModeContext
from ed_engine.modes.mode_manager import InterpreterOutput, ModeManager
from ed_engine.runtime.config import InterpreterConfig
from ed_engine.session import SessionMode, SessionState


class Interpreter:
    """One session bound to one buffer.

    ``submit_line`` accepts a raw input line and returns what to show. While
    the session awaits text (after ``a``, ``i`` or ``c``) lines are stored
    verbatim until a lone ``.`` arrives.
    """

    def __init__(
        self,
        buffer: Optional[TextBuffer] = None,
        *,
        config: Optional[InterpreterConfig] = None,
        registry: Optional[CommandRegistry] = None,
        bus: Optional[ModeBus] = None,
    ) -> None:
        self.config = config or InterpreterConfig()
        self.buffer: TextBuffer = buffer or Buffer(encoding=self.config.encoding)
        self.session = SessionState.from_config(self.config)
        self.bus = bus or ModeBus()
        self.context = ModeContext(
            buffer=self.buffer,
            session=self.session,
            bus=self.bus,
            config=self.config,
            extras={},
        )
        self.manager = ModeManager(self.context, registry=registry)
        self.manager.register_mode(CommandMode)
        self.manager.register_mode(InsertMode)

    @classmethod
    def open(
        cls, path: str, *, config: Optional[InterpreterConfig] = None
    ) -> "Interpreter":
        settings = config or InterpreterConfig()
        return cls(Buffer.from_file(path, encoding=settings.encoding), config=settings)

    def submit_line(self, raw: str) -> InterpreterOutput:
        return self.manager.submit_line(raw)

    def run_script(self, lines: Iterable[str]) -> List[InterpreterOutput]:
        results: List[InterpreterOutput] = []
        for line in lines:
            results.append(self.submit_line(line))
            if self.session.ended:
                break
        return results

    @property
    def mode(self) -> SessionMode:
        return self.session.mode

    @property
    def ended(self) -> bool:
        return self.session.ended

    @property
    def prompt(self) -> str:
        if self.session.prompt_visible and self.session.mode is SessionMode.AWAITING_COMMAND:
            return self.config.prompt
        return ""


__all__ = ["Interpreter", "InterpreterOutput"]
