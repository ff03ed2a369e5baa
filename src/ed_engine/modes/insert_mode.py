"""Text-entry mode entered by ``a``, ``i`` and ``c``."""

from __future__ import annotations

from contextlib import ExitStack

from ed_engine.runtime import telemetry

from .base_mode import Mode, ModeContext, ModeResult
from .command_mode import OPEN_TRANSACTION

TERMINATOR = "."


class InsertMode(Mode):
    """Appends each submitted line after the session's insertion point.

    A line consisting of exactly ``.`` returns to command mode and leaves
    the current line on the last line entered.
    """

    name = "text"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("ed_engine.modes.text")
        self._entered = 0

    def on_enter(self, previous: str | None) -> None:
        del previous
        self._entered = 0
        self.context.bus.emit("insert.begin", self.session.insert_after)

    def on_exit(self, next_mode: str | None) -> None:
        del next_mode
        pending = self.context.extras.pop(OPEN_TRANSACTION, None)
        if isinstance(pending, ExitStack):
            pending.close()
        telemetry.log_kv(self.logger, "debug", "text entry closed", lines=self._entered)
        self.context.bus.emit("insert.end", self._entered)

    def handle_line(self, line: str) -> ModeResult:
        if line == TERMINATOR:
            last = min(self.session.insert_after, self.buffer.line_count())
            self.buffer.set_current_line(max(1, last))
            return ModeResult(status="insert_end", switch_to="command")

        self.buffer.insert_lines(self.session.insert_after, [line])
        self.session.insert_after += 1
        self._entered += 1
        self.buffer.set_current_line(self.session.insert_after)
        return ModeResult(status="insert_line")
