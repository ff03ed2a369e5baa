"""Read-only commands: printing, line numbers, comments."""

from __future__ import annotations

from ed_engine.commands.models import Invocation
from ed_engine.modes.base_mode import ModeContext, ModeResult

_ESCAPES = {
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "$": "\\$",
}


def escape_line(line: str) -> str:
    """Render ``line`` unambiguously, ending it with ``$``."""

    parts = []
    for char in line:
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif ord(char) < 32 or ord(char) == 127:
            parts.append(f"\\{ord(char):03o}")
        else:
            parts.append(char)
    parts.append("$")
    return "".join(parts)


def _read(context: ModeContext, invocation: Invocation) -> tuple[str, ...]:
    buffer = context.buffer
    lines = tuple(buffer.read_range(invocation.start, invocation.stop))
    buffer.set_current_line(invocation.stop)
    return lines


def print_lines(context: ModeContext, invocation: Invocation) -> ModeResult:
    return ModeResult(status="print", output=_read(context, invocation))


def number_lines(context: ModeContext, invocation: Invocation) -> ModeResult:
    lines = _read(context, invocation)
    output = tuple(
        f"{number}\t{line}" for number, line in enumerate(lines, start=invocation.start)
    )
    return ModeResult(status="print", output=output)


def list_lines(context: ModeContext, invocation: Invocation) -> ModeResult:
    lines = _read(context, invocation)
    return ModeResult(status="print", output=tuple(escape_line(line) for line in lines))


def line_number(context: ModeContext, invocation: Invocation) -> ModeResult:
    del context
    return ModeResult(status="line_number", output=(str(invocation.start),))


def comment(context: ModeContext, invocation: Invocation) -> ModeResult:
    del context, invocation
    return ModeResult(status="noop")


__all__ = [
    "comment",
    "escape_line",
    "line_number",
    "list_lines",
    "number_lines",
    "print_lines",
]
