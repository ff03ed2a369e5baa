"""Mode manager routing submitted lines to command or text mode."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Optional, Tuple, Type

from ed_engine.commands.defaults import load_default_commands
from ed_engine.commands.registry import CommandRegistry
from ed_engine.errors import EdError
from ed_engine.runtime import telemetry
from ed_engine.session import SessionMode

from .base_mode import Mode, ModeContext, ModeResult

OutputKind = Literal["text", "error", "ended", "none"]


@dataclass(frozen=True, slots=True)
class InterpreterOutput:
    """What the host should show after one submitted line."""

    kind: OutputKind
    lines: Tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def is_error(self) -> bool:
        return self.kind == "error"

    @property
    def ended(self) -> bool:
        return self.kind == "ended"


class ModeManager:
    """Routes each line to the mode matching ``session.mode``.

    The manager is the one place where ``EdError`` is caught: the failure
    is recorded on the session, published on the bus and turned into the
    ``?`` marker.
    """

    def __init__(
        self,
        context: ModeContext,
        *,
        registry: CommandRegistry | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.context = context
        self._modes: Dict[SessionMode, Mode] = {}
        self.logger = telemetry.get_logger("ed_engine.modes")
        self.registry = registry or CommandRegistry(logger_name="ed_engine.commands")
        if load_defaults and registry is None:
            load_default_commands(self.registry)
        self.context.extras.setdefault("command_registry", self.registry)
        self.context.extras.setdefault("mode_manager", self)

    @property
    def active_mode(self) -> Optional[Mode]:
        return self._modes.get(self.context.session.mode)

    def register_mode(self, mode_cls: Type[Mode]) -> Mode:
        mode = mode_cls(self.context)
        key = SessionMode(mode.name)
        if key in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[key] = mode
        if key is self.context.session.mode:
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        target = SessionMode(name)
        if target not in self._modes:
            raise KeyError(f"Mode '{name}' is not registered")
        session = self.context.session
        if target is session.mode:
            return
        previous = self.active_mode
        if previous is not None:
            previous.on_exit(name)
        session.mode = target
        self._modes[target].on_enter(previous.name if previous else None)
        telemetry.record_event("mode.switch", level="debug", data={"mode": name})

    def submit_line(self, raw: str) -> InterpreterOutput:
        """Process one input line; a trailing newline is ignored."""

        session = self.context.session
        if session.ended:
            return InterpreterOutput(kind="ended")
        mode = self.active_mode
        if mode is None:
            raise RuntimeError(f"No mode registered for '{session.mode.value}'")

        line = _strip_newline(raw)
        try:
            with telemetry.span(
                name=f"mode::{mode.name}",
                component=True,
                metadata={"mode": mode.name},
            ):
                result = mode.handle_line(line)
        except EdError as exc:
            result = self._error(exc)
        return self._after_mode_result(result)

    def _error(self, exc: EdError) -> ModeResult:
        session = self.context.session
        session.record_error(exc.message)
        self.context.bus.emit("command.error", exc)
        telemetry.log_kv(
            self.logger,
            "debug",
            "command failed",
            kind=type(exc).__name__,
            error=exc.message,
        )
        return ModeResult(
            status="error",
            output=session.error_marker(exc.message),
            message=exc.message,
        )

    def _after_mode_result(self, result: ModeResult) -> InterpreterOutput:
        if result.switch_to:
            self.switch_mode(result.switch_to)
        if result.ended:
            self.context.session.ended = True
            self.context.bus.emit("session.end", None)
            telemetry.record_event(
                "session.end", level="debug", data={"status": result.status}
            )
            return InterpreterOutput(kind="ended", lines=result.output)
        if result.status == "error":
            return InterpreterOutput(kind="error", lines=result.output)
        if result.output:
            return InterpreterOutput(kind="text", lines=result.output)
        return InterpreterOutput(kind="none")


def _strip_newline(raw: str) -> str:
    if raw.endswith("\n"):
        raw = raw[:-1]
    if raw.endswith("\r"):
        raw = raw[:-1]
    return raw
