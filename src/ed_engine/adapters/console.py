"""Line-oriented console host that feeds stdin into an interpreter."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, TextIO

from ed_engine.buffer import Buffer
from ed_engine.interpreter import Interpreter, InterpreterOutput
from ed_engine.modes.insert_mode import TERMINATOR
from ed_engine.runtime import telemetry
from ed_engine.runtime.config import InterpreterConfig
from ed_engine.session import SessionMode


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class ConsoleHooks:
    """Callbacks the host uses to read input and show output."""

    read_line: Callable[[], str]
    write: Callable[[str], None]
    handle_event: Callable[[str, object | None], None] = _noop


class ConsoleHost:
    """Drives an ``Interpreter`` until the session ends.

    End of input behaves like ``q``: a modified buffer gets one warning and
    the next end of input quits. Pending text entry is closed first.
    """

    def __init__(self, interpreter: Interpreter, hooks: ConsoleHooks) -> None:
        self.interpreter = interpreter
        self.hooks = hooks
        self.logger = telemetry.get_logger("ed_engine.adapters.console")
        self._subscribe_events()

    @classmethod
    def from_streams(
        cls, interpreter: Interpreter, stdin: TextIO, stdout: TextIO
    ) -> "ConsoleHost":
        def write(text: str) -> None:
            stdout.write(text)
            stdout.flush()

        return cls(interpreter, ConsoleHooks(read_line=stdin.readline, write=write))

    def run(self) -> int:
        while not self.interpreter.ended:
            prompt = self.interpreter.prompt
            if prompt:
                self.hooks.write(prompt)
            raw = self.hooks.read_line()
            if raw == "":
                raw = self._end_of_input()
            self._show(self.interpreter.submit_line(raw))
        return 0

    def _end_of_input(self) -> str:
        # close pending text entry first so "q" is read as a command
        if self.interpreter.mode is SessionMode.AWAITING_TEXT:
            return TERMINATOR
        return "q"

    def _show(self, output: InterpreterOutput) -> None:
        if output.lines:
            self.hooks.write(output.text + "\n")

    def _subscribe_events(self) -> None:
        bus = self.interpreter.bus
        for event in (
            "command.submit",
            "command.error",
            "insert.begin",
            "insert.end",
            "session.end",
        ):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        telemetry.log_kv(self.logger, "debug", "event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Line-oriented ed-style editor.")
    parser.add_argument("file", nargs="?", help="File to edit")
    parser.add_argument(
        "-p",
        "--prompt",
        default=None,
        help="Prompt string; also turns the prompt on",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print full error messages instead of '?'",
    )
    return parser.parse_args(argv)


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    args = _parse_args(argv)
    config = InterpreterConfig.from_env()
    if args.prompt is not None:
        config.prompt = args.prompt
        config.prompt_visible = True
    if args.verbose:
        config.verbose_errors = True

    out = stdout or sys.stdout
    if args.file:
        buffer = Buffer.from_file(args.file, encoding=config.encoding)
        out.write(f"{len(buffer.text())}\n")
        interpreter = Interpreter(buffer, config=config)
    else:
        interpreter = Interpreter(config=config)
    host = ConsoleHost.from_streams(interpreter, stdin or sys.stdin, out)
    return host.run()


if __name__ == "__main__":  # pragma: no cover - manual entry point
    sys.exit(main())
