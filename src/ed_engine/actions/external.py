"""Commands that reach outside the buffer: shell, file read, file write."""

from __future__ import annotations

import subprocess
from pathlib import Path

from ed_engine.buffer.protocol import BufferValidationError
from ed_engine.commands.models import Invocation
from ed_engine.errors import ArgumentError, CommandIOError
from ed_engine.modes.base_mode import ModeContext, ModeResult
from ed_engine.runtime import telemetry

SHELL_MARKER = "!"


def run_shell(context: ModeContext, invocation: Invocation) -> ModeResult:
    """Run ``args`` through the host shell and echo what it printed."""

    command = invocation.args.strip()
    if not command:
        raise ArgumentError("no command given")
    config = context.config
    with telemetry.span("shell::run", component="shell", metadata={"command": command}):
        try:
            completed = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=config.shell_timeout,
                executable=config.shell,
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandIOError("shell command timed out") from exc
        except OSError as exc:
            raise CommandIOError("cannot run shell command") from exc
    captured = completed.stdout.splitlines() + completed.stderr.splitlines()
    return ModeResult(status="shell", output=tuple(captured) + (SHELL_MARKER,))


def read_file(context: ModeContext, invocation: Invocation) -> ModeResult:
    if len(invocation.args) < 2 or not invocation.args.strip():
        raise ArgumentError("invalid filename")
    path = invocation.args.strip()
    try:
        text = Path(path).read_text(encoding=context.config.encoding)
    except (OSError, UnicodeError, LookupError) as exc:
        raise CommandIOError("cannot open file") from exc

    buffer = context.buffer
    after = min(invocation.start, buffer.line_count())
    lines = text.splitlines()
    buffer.insert_lines(after, lines)
    if lines:
        buffer.set_current_line(after + len(lines))
    return ModeResult(status="read", output=(str(len(text)),))


def write_file(context: ModeContext, invocation: Invocation) -> ModeResult:
    path = invocation.args.strip() or None
    try:
        size = context.buffer.save(path)
    except BufferValidationError as exc:
        raise CommandIOError("no current filename") from exc
    except (OSError, UnicodeError, LookupError) as exc:
        raise CommandIOError("cannot write file") from exc
    return ModeResult(status="write", output=(str(size),))


__all__ = ["SHELL_MARKER", "read_file", "run_shell", "write_file"]
