"""Types shared by the interpreter modes and the command handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ed_engine.buffer.protocol import TextBuffer
from ed_engine.runtime.config import InterpreterConfig
from ed_engine.session import SessionState

Subscriber = Callable[[object], None]


@dataclass(slots=True)
class ModeResult:
    """Outcome of one line: lines to show and an optional mode switch."""

    status: str = "ok"
    output: Tuple[str, ...] = ()
    switch_to: Optional[str] = None
    message: Optional[str] = None
    ended: bool = False


@dataclass(slots=True)
class ModeContext:
    """Buffer, session and services handed to every mode and handler.

    ``extras`` carries late-bound services such as the command registry and
    the address resolver, looked up through the ``require_*`` helpers.
    """

    buffer: TextBuffer
    session: SessionState
    bus: "ModeBus"
    config: InterpreterConfig = field(default_factory=InterpreterConfig)
    extras: Dict[str, object] = field(default_factory=dict)


class ModeBus:
    """Synchronous publish/subscribe channel from the interpreter to hosts."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Subscriber]] = {}

    def subscribe(self, event: str, callback: Subscriber) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Subscriber) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, ())):
            callback(payload)


class Mode:
    """A top-level interpreter state that consumes whole input lines."""

    name: str = "mode"

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    @property
    def buffer(self) -> TextBuffer:
        return self.context.buffer

    @property
    def session(self) -> SessionState:
        return self.context.session

    def on_enter(self, previous: Optional[str]) -> None:
        """Called after the manager makes this mode active."""

    def on_exit(self, next_mode: Optional[str]) -> None:
        """Called before the manager leaves this mode."""

    def handle_line(self, line: str) -> ModeResult:
        raise NotImplementedError(f"{type(self).__name__} does not accept lines")
